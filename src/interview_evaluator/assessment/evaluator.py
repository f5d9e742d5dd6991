"""Response evaluation coordinator: gate, score, fuse, and explain one answer."""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from interview_evaluator.analysis.feedback import FeedbackGenerator
from interview_evaluator.assessment.fusion import ModalityFusion
from interview_evaluator.assessment.grading import composite_score, relevance_cap
from interview_evaluator.assessment.jitter import NoJitter, RandomJitter, ScoreJitter
from interview_evaluator.assessment.lexical import (
    estimate_words_per_minute,
    extract_features,
    extract_key_phrases,
    match_key_phrases,
)
from interview_evaluator.assessment.similarity import SimilarityStrategy, pairwise_similarity
from interview_evaluator.assessment.subscores import (
    clarity_score,
    confidence_score,
    fluency_score,
    relevance_score,
)
from interview_evaluator.assessment.validity import passes_gate
from interview_evaluator.config import Settings
from interview_evaluator.models.evaluation import (
    CompositeScore,
    EvaluationResult,
    ModalityMetrics,
    RawResponse,
    ReferenceAnswer,
    SubScores,
    clamp_score,
    truncate_score,
)

logger = structlog.get_logger()

MISSING_INPUT_MESSAGE = "Unable to evaluate: invalid question or empty response."
DEGENERATE_INPUT_MESSAGE = "Answer is nonsensical or too short to evaluate."
EVALUATION_ERROR_MESSAGE = "Unable to evaluate this answer. Please try again."

MISSING_INPUT_SUMMARY = "No evaluation was possible for this question."
DEGENERATE_INPUT_SUMMARY = "The answer could not be scored. Give a complete, meaningful response."

MetricsInput = ModalityMetrics | Mapping[str, Any] | None


class ResponseEvaluator:
    """Evaluates a candidate answer against a reference answer.

    Holds no per-evaluation state: one instance can serve concurrent
    evaluations. The only shared mutable collaborator is the jitter source;
    RandomJitter serializes its draws. All collaborators are injectable.

    Args:
        similarity: Strategy for text/reference similarity in [0, 1].
        jitter: Cosmetic noise source; NoJitter keeps results reproducible.
        fusion: Modality fusion policy.
        feedback: Feedback rule set.
    """

    def __init__(
        self,
        similarity: SimilarityStrategy = pairwise_similarity,
        jitter: ScoreJitter | None = None,
        fusion: ModalityFusion | None = None,
        feedback: FeedbackGenerator | None = None,
    ):
        self.similarity = similarity
        self.jitter = jitter or NoJitter()
        self.fusion = fusion or ModalityFusion()
        self.feedback = feedback or FeedbackGenerator()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResponseEvaluator":
        """Build an evaluator configured from application settings."""
        jitter: ScoreJitter = NoJitter()
        if settings.jitter_enabled:
            jitter = RandomJitter(
                subscore_amplitude=settings.subscore_jitter,
                composite_amplitude=settings.composite_jitter,
                seed=settings.jitter_seed,
            )
        return cls(
            jitter=jitter,
            feedback=FeedbackGenerator(
                filler_ratio_threshold=settings.filler_ratio_threshold,
                ideal_pace_wpm=settings.ideal_pace_wpm,
            ),
        )

    def evaluate_response(
        self,
        response: RawResponse,
        reference: ReferenceAnswer | None,
        metrics: MetricsInput = None,
    ) -> EvaluationResult:
        """Evaluate a RawResponse; see evaluate()."""
        return self.evaluate(
            response.text,
            reference,
            metrics,
            media_duration_seconds=response.media_duration_seconds,
        )

    def evaluate(
        self,
        text: str | None,
        reference: ReferenceAnswer | str | None = None,
        metrics: MetricsInput = None,
        media_duration_seconds: float | None = None,
    ) -> EvaluationResult:
        """Score one answer.

        Args:
            text: Typed or transcribed answer.
            reference: Expected answer for the question.
            metrics: Media-analysis metrics (model or mapping), if any.
            media_duration_seconds: Recording length, used to estimate pace.

        Returns:
            A new EvaluationResult. Never raises.
        """
        try:
            return self._evaluate(text, reference, metrics, media_duration_seconds)
        except Exception:
            logger.exception("evaluation_failed")
            return self._rejected(
                EVALUATION_ERROR_MESSAGE, MISSING_INPUT_SUMMARY, notes=["evaluation_error"]
            )

    def _evaluate(
        self,
        text: str | None,
        reference: ReferenceAnswer | str | None,
        metrics: MetricsInput,
        media_duration_seconds: float | None,
    ) -> EvaluationResult:
        if text is None:
            logger.info("evaluation_rejected", reason="missing_text")
            return self._rejected(MISSING_INPUT_MESSAGE, MISSING_INPUT_SUMMARY)

        if not passes_gate(text):
            logger.info("evaluation_rejected", reason="degenerate_text", length=len(text))
            return self._rejected(DEGENERATE_INPUT_MESSAGE, DEGENERATE_INPUT_SUMMARY)

        reference_text = reference.text if isinstance(reference, ReferenceAnswer) else reference
        if not reference_text or not reference_text.strip():
            logger.info("evaluation_rejected", reason="missing_reference")
            return self._rejected(MISSING_INPUT_MESSAGE, MISSING_INPUT_SUMMARY)

        features = extract_features(text)
        sub_scores = SubScores(
            confidence=self._jittered(confidence_score(text, features.polarity)),
            clarity=self._jittered(clarity_score(text)),
            relevance=truncate_score(relevance_score(text, reference_text, self.similarity)),
            fluency=round(fluency_score(text, features.filler_count), 1),
        )
        text_composite = composite_score(sub_scores)

        modality = self._coerce_metrics(metrics)
        if (
            modality is not None
            and modality.speech_pace_wpm is None
            and not modality.analysis_failed
            and not modality.is_empty_or_invalid
        ):
            wpm = estimate_words_per_minute(features.word_count, media_duration_seconds)
            if wpm is not None:
                modality = modality.model_copy(update={"speech_pace_wpm": wpm})

        outcome = self.fusion.fuse(sub_scores, text_composite, modality)

        composite = outcome.composite
        offset = self.jitter.composite()
        if offset:
            capped = min(composite.value + offset, relevance_cap(outcome.sub_scores.relevance))
            composite = CompositeScore.from_value(capped)

        matched, missing = match_key_phrases(text, extract_key_phrases(reference_text))

        report = self.feedback.generate(
            outcome.sub_scores,
            composite,
            features=features,
            metrics=outcome.metrics,
            media_invalid=outcome.media_invalid,
            missing_key_phrases=missing,
        )

        result = EvaluationResult(
            sub_scores=outcome.sub_scores,
            composite=composite,
            strengths=report.strengths,
            improvements=report.improvements,
            summary=report.summary,
            notes=outcome.notes,
            features=features,
            media_score=outcome.media_score,
            modality_contribution=outcome.metrics,
            matched_key_phrases=matched,
            missing_key_phrases=missing,
        )

        logger.info(
            "response_evaluated",
            confidence=result.sub_scores.confidence,
            clarity=result.sub_scores.clarity,
            relevance=result.sub_scores.relevance,
            composite=result.composite.value,
            grade=str(result.composite.grade),
            has_media=outcome.metrics is not None,
        )
        return result

    def _jittered(self, score: float) -> float:
        return round(clamp_score(score + self.jitter.subscore()), 1)

    @staticmethod
    def _coerce_metrics(metrics: MetricsInput) -> ModalityMetrics | None:
        """Accept a model or a raw mapping; unreadable metrics count as a failed analysis."""
        if metrics is None or isinstance(metrics, ModalityMetrics):
            return metrics
        try:
            return ModalityMetrics.model_validate(dict(metrics))
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning("modality_metrics_invalid", error=str(e))
            return ModalityMetrics(analysis_failed=True)

    @staticmethod
    def _rejected(
        message: str, summary: str, notes: list[str] | None = None
    ) -> EvaluationResult:
        return EvaluationResult(
            composite=CompositeScore.zero(),
            improvements=[message],
            summary=summary,
            notes=notes or [],
        )
