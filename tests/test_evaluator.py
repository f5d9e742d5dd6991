"""Tests for the response evaluator."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from interview_evaluator.analysis.feedback import OFF_TOPIC_MESSAGE
from interview_evaluator.assessment.evaluator import (
    DEGENERATE_INPUT_MESSAGE,
    MISSING_INPUT_MESSAGE,
    ResponseEvaluator,
)
from interview_evaluator.assessment.fusion import EMPTY_MEDIA_MESSAGE, MEDIA_UNAVAILABLE_NOTE
from interview_evaluator.assessment.jitter import NoJitter, RandomJitter
from interview_evaluator.config import Settings
from interview_evaluator.models.evaluation import (
    GradeBand,
    ModalityMetrics,
    RawResponse,
    ReferenceAnswer,
)


@pytest.fixture
def evaluator():
    return ResponseEvaluator()


class TestRejectedInput:
    def test_empty_text(self, evaluator, sql_reference):
        result = evaluator.evaluate("", sql_reference)
        assert result.composite.value == 0.0
        assert result.composite.grade == GradeBand.F
        assert any("nonsensical or too short" in item for item in result.feedback)

    def test_gibberish(self, evaluator, sql_reference):
        result = evaluator.evaluate("xqz fjp wrlm", sql_reference)
        assert result.composite.value == 0.0
        assert result.composite.grade == GradeBand.F
        assert result.improvements == [DEGENERATE_INPUT_MESSAGE]

    def test_missing_text(self, evaluator, sql_reference):
        result = evaluator.evaluate(None, sql_reference)
        assert result.composite.grade == GradeBand.F
        assert result.improvements == [MISSING_INPUT_MESSAGE]

    @pytest.mark.parametrize("reference", [None, "", "   ", ReferenceAnswer(text="")])
    def test_missing_reference(self, evaluator, reference):
        result = evaluator.evaluate("I would normalize the schema first", reference)
        assert result.composite.value == 0.0
        assert result.improvements == [MISSING_INPUT_MESSAGE]

    def test_internal_error_is_contained(self):
        def broken(text, reference):
            raise RuntimeError("vectorizer exploded")

        result = ResponseEvaluator(similarity=broken).evaluate(
            "I would normalize the schema first", "Normalize the schema"
        )
        assert result.composite.value == 0.0
        assert result.notes == ["evaluation_error"]


class TestScoring:
    def test_answer_matching_reference(self, evaluator, strong_answer):
        result = evaluator.evaluate(strong_answer, strong_answer)
        assert result.sub_scores.relevance == pytest.approx(10.0, abs=0.1)
        assert result.sub_scores.confidence == 10.0
        assert result.composite.grade == GradeBand.A_PLUS
        assert "Excellent answer quality" in result.strengths

    def test_off_topic_answer(self, evaluator, strong_answer, sql_reference):
        result = evaluator.evaluate(strong_answer, sql_reference)
        assert result.sub_scores.relevance == 0.0
        assert result.composite.value <= 2.0
        assert OFF_TOPIC_MESSAGE in result.improvements

    def test_short_answer_confidence(self, evaluator, sql_reference):
        result = evaluator.evaluate("word word word word", sql_reference)
        assert result.sub_scores.confidence == 2.0

    def test_features_attached(self, evaluator, strong_answer):
        result = evaluator.evaluate(strong_answer, strong_answer)
        assert result.features is not None
        assert result.features.word_count == 208

    def test_injected_similarity(self, sql_reference):
        similarity = MagicMock(return_value=0.5)
        result = ResponseEvaluator(similarity=similarity).evaluate(
            "Relational databases keep data in tables", sql_reference
        )
        similarity.assert_called_once()
        assert result.sub_scores.relevance == 5.0

    def test_idempotent_without_jitter(self, evaluator, strong_answer, sql_reference):
        metrics = ModalityMetrics(non_verbal_presence=7.0, speech_clarity_score=6.0)
        first = evaluator.evaluate(strong_answer, sql_reference, metrics)
        second = evaluator.evaluate(strong_answer, sql_reference, metrics)
        assert first == second

    @pytest.mark.parametrize(
        "text",
        ["word word word word", "um uh like you know I mean it works", "Because! " * 60],
    )
    def test_scores_in_range(self, evaluator, sql_reference, text):
        result = evaluator.evaluate(text, sql_reference)
        for value in result.sub_scores.model_dump().values():
            assert 0.0 <= value <= 10.0
        assert 0.0 <= result.composite.value <= 10.0


class TestModality:
    def test_invalid_media(self, evaluator, strong_answer):
        result = evaluator.evaluate(
            strong_answer, strong_answer, ModalityMetrics(is_empty_or_invalid=True)
        )
        assert result.sub_scores.confidence == 0.0
        assert result.sub_scores.clarity == 0.0
        assert result.sub_scores.fluency == 0.0
        assert result.improvements == [EMPTY_MEDIA_MESSAGE]

    def test_metrics_mapping_is_accepted(self, evaluator, strong_answer):
        result = evaluator.evaluate(
            strong_answer,
            strong_answer,
            {"non_verbal_presence": 8.0, "speech_clarity_score": 9.0},
        )
        assert isinstance(result.modality_contribution, ModalityMetrics)
        assert result.media_score is not None

    def test_unreadable_metrics_degrade_to_text_only(self, evaluator, strong_answer):
        text_only = evaluator.evaluate(strong_answer, strong_answer)
        result = evaluator.evaluate(strong_answer, strong_answer, {"posture_score": 42})
        assert result.notes == [MEDIA_UNAVAILABLE_NOTE]
        assert result.sub_scores == text_only.sub_scores
        assert result.composite == text_only.composite

    def test_pace_estimated_from_duration(self, evaluator, strong_answer):
        result = evaluator.evaluate_response(
            RawResponse(text=strong_answer, media_duration_seconds=60),
            ReferenceAnswer(text=strong_answer),
            ModalityMetrics(non_verbal_presence=9.0),
        )
        assert result.modality_contribution.speech_pace_wpm == 208.0
        assert any("fast" in item for item in result.improvements)


class TestJitter:
    def test_seeded_runs_repeat(self, strong_answer, sql_reference):
        first = ResponseEvaluator(jitter=RandomJitter(seed=11)).evaluate(
            strong_answer, sql_reference
        )
        second = ResponseEvaluator(jitter=RandomJitter(seed=11)).evaluate(
            strong_answer, sql_reference
        )
        assert first == second

    def test_jitter_respects_relevance_cap(self, strong_answer, sql_reference):
        evaluator = ResponseEvaluator(jitter=RandomJitter(seed=5))
        for _ in range(20):
            result = evaluator.evaluate(strong_answer, sql_reference)
            assert result.composite.value <= 2.0

    def test_from_settings(self):
        assert isinstance(ResponseEvaluator.from_settings(Settings()).jitter, NoJitter)
        evaluator = ResponseEvaluator.from_settings(
            Settings(jitter_enabled=True, jitter_seed=3, ideal_pace_min_wpm=100)
        )
        assert isinstance(evaluator.jitter, RandomJitter)
        assert evaluator.feedback.ideal_pace_wpm == (100, 150)


class TestRelevanceBoundary:
    def test_near_one_stays_off_topic(self, sql_reference):
        result = ResponseEvaluator(similarity=lambda a, b: 0.096).evaluate(
            "I am a confident engineer because I ship reliable systems every week.",
            sql_reference,
        )
        assert result.sub_scores.relevance == 0.9
        assert result.composite.value <= 2.0
        assert result.composite.grade == GradeBand.F

    def test_near_three_stays_partial(self, sql_reference):
        result = ResponseEvaluator(similarity=lambda a, b: 0.2996).evaluate(
            "I am a confident engineer because I ship reliable systems every week.",
            sql_reference,
        )
        assert result.sub_scores.relevance == 2.9
        assert result.composite.value <= 5.0


class TestTechnicalAnswers:
    def test_acronym_answer_is_scored(self, evaluator):
        result = evaluator.evaluate("HTML CSS and JS", "HTML CSS and JS build web pages")
        assert result.improvements != [DEGENERATE_INPUT_MESSAGE]
        assert result.sub_scores.relevance > 0
        assert result.composite.value > 0


class TestAuxiliaryFailures:
    def test_readability_failure_does_not_zero_result(self, evaluator, strong_answer):
        with patch(
            "interview_evaluator.assessment.lexical.textstat.flesch_reading_ease",
            side_effect=LookupError("cmudict"),
        ):
            result = evaluator.evaluate(strong_answer, strong_answer)
        assert result.notes == []
        assert result.features.readability == 0.0
        assert result.composite.grade == GradeBand.A_PLUS


class TestKeyPhraseCoverage:
    def test_missing_phrases_reported(self, evaluator, sql_reference):
        result = evaluator.evaluate(
            "Relational databases keep records in tables with many rows.", sql_reference
        )
        assert "relational" in result.matched_key_phrases
        assert "schemas" in result.missing_key_phrases
        assert any(item.startswith("Consider covering:") for item in result.improvements)

    def test_full_coverage(self, evaluator, sql_reference):
        result = evaluator.evaluate(sql_reference, sql_reference)
        assert result.missing_key_phrases == []
        assert result.matched_key_phrases
        assert not any(item.startswith("Consider covering:") for item in result.improvements)

    def test_rejected_answer_has_no_phrases(self, evaluator, sql_reference):
        result = evaluator.evaluate("", sql_reference)
        assert result.matched_key_phrases == []
        assert result.missing_key_phrases == []


class TestConcurrentJitter:
    def test_shared_evaluator_across_threads(self, strong_answer, sql_reference):
        evaluator = ResponseEvaluator(jitter=RandomJitter(seed=9))
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(
                pool.map(lambda _: evaluator.evaluate(strong_answer, sql_reference), range(16))
            )
        for result in results:
            assert result.notes == []
            assert result.composite.value <= 2.0
