"""Blending of text scores with non-verbal and speech metrics."""

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field

from interview_evaluator.assessment.grading import composite_value, relevance_cap
from interview_evaluator.models.evaluation import (
    CompositeScore,
    ModalityMetrics,
    SubScores,
    clamp_score,
)

logger = structlog.get_logger()

EMPTY_MEDIA_MESSAGE = "Please provide a valid recording with speech content."
MEDIA_UNAVAILABLE_NOTE = "Media analysis unavailable; scored on text only."

# Weight kept by the text-side value in each blend
VIDEO_CLARITY_WEIGHT = 0.6
SPEECH_CLARITY_WEIGHT = 0.7
VIDEO_CONFIDENCE_WEIGHT = 0.6
TEXT_OVERALL_WEIGHT = 0.7

# Presence dominates the visual score
VISUAL_WEIGHTS = {
    "non_verbal_presence": 0.5,
    "posture_score": 0.25,
    "eye_contact_score": 0.25,
}


class FusionOutcome(BaseModel):
    """Scores after modality signals have been folded in."""

    model_config = ConfigDict(frozen=True)

    sub_scores: SubScores
    composite: CompositeScore
    media_score: float | None = None
    metrics: ModalityMetrics | None = None
    media_invalid: bool = False
    notes: list[str] = Field(default_factory=list)


class ModalityFusion:
    """Folds externally computed media metrics into text-derived scores.

    Missing or failed analysis leaves the text scores untouched. An empty or
    invalid recording is a data-quality failure and zeroes delivery scores.
    """

    def fuse(
        self,
        sub_scores: SubScores,
        text_composite: CompositeScore,
        metrics: ModalityMetrics | None = None,
    ) -> FusionOutcome:
        """Blend metrics into sub-scores and the composite.

        Args:
            sub_scores: Text-only sub-scores.
            text_composite: Composite computed from those sub-scores.
            metrics: Media metrics, or None for a text-only answer.

        Returns:
            FusionOutcome; identical scores when metrics are absent.
        """
        if metrics is None:
            return FusionOutcome(sub_scores=sub_scores, composite=text_composite)

        if metrics.analysis_failed:
            logger.warning("modality_analysis_unavailable")
            return FusionOutcome(
                sub_scores=sub_scores,
                composite=text_composite,
                notes=[MEDIA_UNAVAILABLE_NOTE],
            )

        if metrics.is_empty_or_invalid:
            logger.info("modality_media_empty")
            zeroed = sub_scores.model_copy(
                update={"confidence": 0.0, "clarity": 0.0, "fluency": 0.0}
            )
            return FusionOutcome(
                sub_scores=zeroed,
                composite=CompositeScore.from_value(composite_value(zeroed)),
                metrics=metrics,
                media_invalid=True,
            )

        fused = self._fuse_sub_scores(sub_scores, metrics)
        fused_value = composite_value(fused)
        media_score = self.media_score(metrics)

        if media_score is None:
            value = fused_value
        else:
            blended = self._blend(fused_value, media_score, TEXT_OVERALL_WEIGHT)
            value = min(blended, relevance_cap(fused.relevance))

        logger.debug(
            "modality_fused",
            text_composite=text_composite.value,
            fused_composite=round(fused_value, 1),
            media_score=media_score,
        )
        return FusionOutcome(
            sub_scores=fused,
            composite=CompositeScore.from_value(value),
            media_score=media_score,
            metrics=metrics,
        )

    def _fuse_sub_scores(self, sub_scores: SubScores, metrics: ModalityMetrics) -> SubScores:
        clarity = sub_scores.clarity
        confidence = sub_scores.confidence
        presence = metrics.non_verbal_presence

        if presence is not None:
            clarity = self._blend(clarity, presence, VIDEO_CLARITY_WEIGHT)
            confidence = self._blend(confidence, presence, VIDEO_CONFIDENCE_WEIGHT)
        if metrics.speech_clarity_score is not None:
            clarity = self._blend(clarity, metrics.speech_clarity_score, SPEECH_CLARITY_WEIGHT)

        return sub_scores.model_copy(
            update={"clarity": clamp_score(clarity), "confidence": clamp_score(confidence)}
        )

    @staticmethod
    def media_score(metrics: ModalityMetrics) -> float | None:
        """Media-only 0-10 score: mean of the visual and speech scores present."""
        parts: list[float] = []

        visual = [
            (getattr(metrics, field), weight)
            for field, weight in VISUAL_WEIGHTS.items()
            if getattr(metrics, field) is not None
        ]
        if visual:
            values, weights = zip(*visual)
            parts.append(float(np.average(values, weights=weights)))

        if metrics.speech_clarity_score is not None:
            parts.append(metrics.speech_clarity_score)

        if not parts:
            return None
        return round(float(np.mean(parts)), 1)

    @staticmethod
    def _blend(text_value: float, media_value: float, text_weight: float) -> float:
        """Weighted average of a text-side and a media-side score."""
        return round(text_value * text_weight + media_value * (1 - text_weight), 1)
