"""Composite scoring and grade aggregation."""

from interview_evaluator.assessment.subscores import RelevanceBucket, relevance_bucket
from interview_evaluator.models.evaluation import (
    CompositeScore,
    GradeBand,
    SubScores,
    clamp_score,
    grade_of,
)

# (relevance weight, confidence weight, clarity weight, cap) per bucket.
# A wrong answer cannot be rescued by confident delivery.
COMPOSITE_WEIGHTS: dict[RelevanceBucket, tuple[float, float, float, float]] = {
    RelevanceBucket.OFF_TOPIC: (2.0, 0.1, 0.1, 2.0),
    RelevanceBucket.PARTIAL: (2.0, 0.2, 0.2, 5.0),
    RelevanceBucket.ON_TOPIC: (0.4, 0.3, 0.3, 10.0),
}


def relevance_cap(relevance: float) -> float:
    """Highest composite reachable for a given relevance."""
    return COMPOSITE_WEIGHTS[relevance_bucket(relevance)][3]


def composite_value(sub_scores: SubScores) -> float:
    """Weighted 0-10 combination of relevance, confidence and clarity.

    Args:
        sub_scores: Scores to combine. Fluency does not contribute.

    Returns:
        Composite value capped by the relevance bucket.
    """
    w_rel, w_conf, w_clar, cap = COMPOSITE_WEIGHTS[relevance_bucket(sub_scores.relevance)]
    value = (
        sub_scores.relevance * w_rel
        + sub_scores.confidence * w_conf
        + sub_scores.clarity * w_clar
    )
    return clamp_score(min(value, cap))


def composite_score(sub_scores: SubScores) -> CompositeScore:
    """Composite value with its grade."""
    return CompositeScore.from_value(composite_value(sub_scores))


# Representative value per band, used to average grades
GRADE_NUMERIC: dict[GradeBand, float] = {
    GradeBand.A_PLUS: 9.5,
    GradeBand.A: 8.5,
    GradeBand.B_PLUS: 7.5,
    GradeBand.B: 6.5,
    GradeBand.C: 5.5,
    GradeBand.D: 4.5,
    GradeBand.F: 2.0,
}
UNKNOWN_GRADE_NUMERIC = 5.0


def grade_to_numeric(grade: GradeBand | str) -> float:
    """Numeric value of a grade; unknown grades count as the C threshold."""
    try:
        return GRADE_NUMERIC[GradeBand(grade)]
    except ValueError:
        return UNKNOWN_GRADE_NUMERIC


def overall_grade(grades: list[GradeBand | str]) -> GradeBand:
    """Interview-level grade from per-answer grades.

    Args:
        grades: Grades of the answered questions.

    Returns:
        C when there are no grades, F when every answer failed, otherwise
        the band of the mean numeric value.
    """
    if not grades:
        return GradeBand.C
    if all(g == GradeBand.F for g in grades):
        return GradeBand.F
    average = sum(grade_to_numeric(g) for g in grades) / len(grades)
    return grade_of(average)
