"""Evaluation data models."""

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field

SCORE_MIN = 0.0
SCORE_MAX = 10.0


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 10], mapping NaN to 0."""
    if value != value:  # NaN
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, value))


def truncate_score(value: float) -> float:
    """Clamp and cut to one decimal without rounding up, so 0.96 stays below 1."""
    return math.floor(clamp_score(value) * 10 + 1e-9) / 10


class GradeBand(StrEnum):
    """Letter grade bands, best first."""

    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


# Inclusive lower bound per band, highest first
GRADE_THRESHOLDS: list[tuple[float, GradeBand]] = [
    (9.0, GradeBand.A_PLUS),
    (8.0, GradeBand.A),
    (7.0, GradeBand.B_PLUS),
    (6.0, GradeBand.B),
    (5.0, GradeBand.C),
    (4.0, GradeBand.D),
]


def grade_of(score: float) -> GradeBand:
    """Map a 0-10 score onto its grade band."""
    for threshold, band in GRADE_THRESHOLDS:
        if score >= threshold:
            return band
    return GradeBand.F


class RawResponse(BaseModel):
    """A submitted answer, already transcribed if it came from media."""

    model_config = ConfigDict(frozen=True)

    text: str
    media_duration_seconds: float | None = Field(default=None, ge=0)


class ReferenceAnswer(BaseModel):
    """Expected answer for a catalog question."""

    model_config = ConfigDict(frozen=True)

    text: str
    question_id: str | None = None
    question: str | None = None


class ModalityMetrics(BaseModel):
    """Non-verbal and speech signals supplied by the media-analysis service."""

    model_config = ConfigDict(frozen=True)

    non_verbal_presence: float | None = Field(default=None, ge=0, le=10)
    eye_contact_score: float | None = Field(default=None, ge=0, le=10)
    posture_score: float | None = Field(default=None, ge=0, le=10)
    speech_clarity_score: float | None = Field(default=None, ge=0, le=10)
    speech_pace_wpm: float | None = Field(default=None, ge=0)
    is_empty_or_invalid: bool = False
    analysis_failed: bool = False


class SubScores(BaseModel):
    """Heuristic sub-scores (0-10 each)."""

    model_config = ConfigDict(frozen=True)

    confidence: float = Field(default=0.0, ge=0, le=10)
    clarity: float = Field(default=0.0, ge=0, le=10)
    relevance: float = Field(default=0.0, ge=0, le=10)
    fluency: float = Field(default=0.0, ge=0, le=10)


class CompositeScore(BaseModel):
    """Composite 0-10 score and the grade derived from it."""

    model_config = ConfigDict(frozen=True)

    value: float = Field(ge=0, le=10)
    grade: GradeBand

    @classmethod
    def from_value(cls, value: float) -> "CompositeScore":
        """Build a composite, clamping and rounding the value before grading."""
        rounded = round(clamp_score(value), 1)
        return cls(value=rounded, grade=grade_of(rounded))

    @classmethod
    def zero(cls) -> "CompositeScore":
        return cls.from_value(0.0)


class LexicalFeatures(BaseModel):
    """Surface features extracted from answer text."""

    model_config = ConfigDict(frozen=True)

    word_count: int = 0
    sentence_count: int = 0
    filler_count: int = 0
    filler_ratio: float = 0.0
    confidence_keyword_count: int = 0
    uncertainty_keyword_count: int = 0
    polarity: float = 0.0
    avg_word_length: float = 0.0
    avg_words_per_sentence: float = 0.0
    readability: float = 0.0
    keywords: list[str] = Field(default_factory=list)


class FeedbackReport(BaseModel):
    """Strengths, improvement suggestions, and a one-paragraph summary."""

    model_config = ConfigDict(frozen=True)

    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    summary: str = ""


class EvaluationResult(BaseModel):
    """Outcome of evaluating one answer. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    sub_scores: SubScores = Field(default_factory=SubScores)
    composite: CompositeScore = Field(default_factory=CompositeScore.zero)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    summary: str = ""
    notes: list[str] = Field(default_factory=list)
    features: LexicalFeatures | None = None
    media_score: float | None = None
    modality_contribution: ModalityMetrics | None = None
    matched_key_phrases: list[str] = Field(default_factory=list)
    missing_key_phrases: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def feedback(self) -> list[str]:
        """Strengths followed by improvements."""
        return [*self.strengths, *self.improvements]
