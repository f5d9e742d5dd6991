"""Rule-based feedback generation from evaluation scores."""

import structlog

from interview_evaluator.assessment.fusion import EMPTY_MEDIA_MESSAGE
from interview_evaluator.assessment.lexical import pace_label
from interview_evaluator.models.evaluation import (
    CompositeScore,
    FeedbackReport,
    GradeBand,
    LexicalFeatures,
    ModalityMetrics,
    SubScores,
)

logger = structlog.get_logger()

STRENGTH_THRESHOLD = 7.0
MODALITY_IMPROVEMENT_THRESHOLD = 7.0
MODALITY_STRENGTH_THRESHOLD = 8.0
DETAILED_RESPONSE_WORDS = 50
BRIEF_RESPONSE_WORDS = 30
LONG_SENTENCE_WORDS = 25
TOP_GRADES = (GradeBand.A_PLUS, GradeBand.A, GradeBand.B_PLUS)

DEFAULT_POSITIVE = "Well-rounded answer. Keep practicing to maintain this level."

OFF_TOPIC_MESSAGE = (
    "Your answer doesn't address the question. Review the core concept and try again."
)
PARTIAL_MESSAGE = "Your answer needs more alignment with the expected concept."
EXPAND_MESSAGE = "Good start; expand your response with more relevant details."
FILLER_MESSAGE = 'Reduce filler words like "um" and "uh"; pause briefly instead.'
COVERAGE_MESSAGE = "Consider covering: {}."
MAX_PHRASES_SHOWN = 3

# (lower bound, summary) on the composite value, highest first
SUMMARIES: list[tuple[float, str]] = [
    (8.5, "Outstanding answer: on point, well structured and delivered with confidence."),
    (7.5, "Strong answer with effective communication and only minor areas to polish."),
    (6.5, "Good answer with solid fundamentals; focused practice will sharpen it further."),
    (5.5, "Satisfactory answer with several areas to develop in content and delivery."),
]
LOW_SUMMARY = (
    "This answer shows potential but needs significant work on content and structure."
)


class FeedbackGenerator:
    """Turns scores into strengths, improvements and a summary.

    Rules are threshold-triggered and additive. Missing inputs drop the rules
    that need them.

    Args:
        filler_ratio_threshold: Filler share of words above which to warn.
        ideal_pace_wpm: Inclusive (min, max) speaking pace in words per minute.
    """

    def __init__(
        self,
        filler_ratio_threshold: float = 0.05,
        ideal_pace_wpm: tuple[float, float] = (120.0, 150.0),
    ):
        self.filler_ratio_threshold = filler_ratio_threshold
        self.ideal_pace_wpm = ideal_pace_wpm

    def generate(
        self,
        sub_scores: SubScores,
        composite: CompositeScore,
        features: LexicalFeatures | None = None,
        metrics: ModalityMetrics | None = None,
        media_invalid: bool = False,
        missing_key_phrases: list[str] | None = None,
    ) -> FeedbackReport:
        """Build the feedback report.

        Args:
            sub_scores: Final (fused) sub-scores.
            composite: Final composite score.
            features: Lexical features of the answer, if extracted.
            metrics: Usable media metrics; None for text-only answers.
            media_invalid: The recording was empty or invalid.
            missing_key_phrases: Reference phrases the answer did not mention.

        Returns:
            FeedbackReport. Falls back to a generic report on unexpected errors.
        """
        try:
            strengths = self._text_strengths(sub_scores, composite, features)
            improvements = self._text_improvements(composite, features)
            if missing_key_phrases:
                shown = ", ".join(missing_key_phrases[:MAX_PHRASES_SHOWN])
                improvements.append(COVERAGE_MESSAGE.format(shown))

            if media_invalid:
                improvements = [EMPTY_MEDIA_MESSAGE]
            elif metrics is not None:
                strengths.extend(self._modality_strengths(metrics))
                improvements.extend(self._modality_improvements(metrics))

            if not strengths and not improvements:
                strengths = [DEFAULT_POSITIVE]

            return FeedbackReport(
                strengths=strengths,
                improvements=improvements,
                summary=self.summarize(composite),
            )
        except Exception:
            logger.exception("feedback_generation_failed")
            return FeedbackReport(
                improvements=["Continue practicing structured answers."],
                summary=self.summarize(composite),
            )

    @staticmethod
    def summarize(composite: CompositeScore) -> str:
        for threshold, summary in SUMMARIES:
            if composite.value >= threshold:
                return summary
        return LOW_SUMMARY

    def _text_strengths(
        self,
        sub_scores: SubScores,
        composite: CompositeScore,
        features: LexicalFeatures | None,
    ) -> list[str]:
        strengths = []
        if sub_scores.confidence >= STRENGTH_THRESHOLD:
            strengths.append("Confident delivery")
        if sub_scores.clarity >= STRENGTH_THRESHOLD:
            strengths.append("Clear communication")
        if sub_scores.relevance >= STRENGTH_THRESHOLD:
            strengths.append("Strong answer content")
        if composite.grade in TOP_GRADES:
            strengths.append("Excellent answer quality")
        if features is not None:
            if features.polarity > 0:
                strengths.append("Positive attitude")
            if features.word_count > DETAILED_RESPONSE_WORDS:
                strengths.append("Detailed response")
        return strengths

    def _text_improvements(
        self,
        composite: CompositeScore,
        features: LexicalFeatures | None,
    ) -> list[str]:
        improvements = []
        if composite.value < 2:
            improvements.append(OFF_TOPIC_MESSAGE)
        elif composite.value < 4:
            improvements.append(PARTIAL_MESSAGE)
        elif composite.value < 6:
            improvements.append(EXPAND_MESSAGE)

        if features is None:
            return improvements

        if features.filler_ratio > self.filler_ratio_threshold:
            improvements.append(FILLER_MESSAGE)
        if features.uncertainty_keyword_count > features.confidence_keyword_count:
            improvements.append(
                'Replace hedging phrases like "I think" or "maybe" with direct statements.'
            )
        if features.word_count < BRIEF_RESPONSE_WORDS:
            improvements.append("Provide more detailed examples to support your answer.")
        if features.avg_words_per_sentence > LONG_SENTENCE_WORDS:
            improvements.append("Break long sentences into shorter, focused points.")
        return improvements

    def _modality_strengths(self, metrics: ModalityMetrics) -> list[str]:
        strengths = []
        if (metrics.eye_contact_score or 0) >= MODALITY_STRENGTH_THRESHOLD:
            strengths.append("Excellent eye contact")
        if (metrics.posture_score or 0) >= MODALITY_STRENGTH_THRESHOLD:
            strengths.append("Professional posture")
        if (metrics.non_verbal_presence or 0) >= MODALITY_STRENGTH_THRESHOLD:
            strengths.append("Strong screen presence")
        if metrics.speech_pace_wpm and self._pace_in_range(metrics.speech_pace_wpm):
            strengths.append("Optimal speaking pace")
        return strengths

    def _modality_improvements(self, metrics: ModalityMetrics) -> list[str]:
        improvements = []
        eye_contact = metrics.eye_contact_score
        if eye_contact is not None and eye_contact < MODALITY_IMPROVEMENT_THRESHOLD:
            improvements.append("Maintain better eye contact by looking directly at the camera.")
        posture = metrics.posture_score
        if posture is not None and posture < MODALITY_IMPROVEMENT_THRESHOLD:
            improvements.append(
                "Improve posture by sitting up straight and keeping shoulders back."
            )
        pace = metrics.speech_pace_wpm
        if pace and not self._pace_in_range(pace):
            low, high = self.ideal_pace_wpm
            improvements.append(
                f"Aim for a speaking pace of {low:.0f}-{high:.0f} words per minute "
                f"(yours was about {pace:.0f}, {pace_label(pace)})."
            )
        return improvements

    def _pace_in_range(self, wpm: float) -> bool:
        low, high = self.ideal_pace_wpm
        return low <= wpm <= high
