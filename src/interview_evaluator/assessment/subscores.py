"""Heuristic 0-10 sub-scorers for confidence, clarity, fluency and relevance."""

import re
from enum import StrEnum

from interview_evaluator.assessment.lexical import (
    compute_polarity,
    count_fillers,
    count_keywords,
    split_sentences,
)
from interview_evaluator.assessment.similarity import SimilarityStrategy, pairwise_similarity
from interview_evaluator.assessment.validity import is_nonsensical
from interview_evaluator.models.evaluation import clamp_score

STRUCTURE_CONNECTIVES = (
    "because", "therefore", "for example", "for instance",
    "in conclusion", "as a result", "consequently",
)
STRUCTURE_BONUS = 1.5
SHORT_ANSWER_WORDS = 5
SHORT_ANSWER_CAP = 2.0

_ALPHA_TOKEN_RE = re.compile(r"[^\W\d_]+")
_PUNCTUATION = set(".,!?;")


def confidence_score(text: str, polarity: float | None = None) -> float:
    """Score tone and assertiveness.

    Args:
        text: Answer text.
        polarity: Precomputed polarity; computed from text when omitted.

    Returns:
        Score 0-10. Answers under 5 words score at most 2 whatever their tone.
    """
    word_count = len(text.split())
    if word_count < SHORT_ANSWER_WORDS:
        return float(min(word_count, SHORT_ANSWER_CAP))

    if polarity is None:
        polarity = compute_polarity(text)
    length_score = min(word_count / 20, 10)
    sentiment_score = max(polarity + 5, 0)
    structure_score = (
        STRUCTURE_BONUS if count_keywords(text, STRUCTURE_CONNECTIVES) > 0 else 0.0
    )
    return clamp_score(length_score + sentiment_score / 2 + structure_score)


def clarity_score(text: str) -> float:
    """Score structural readability.

    Safe to call on unchecked text: mostly non-alphabetic tokens score 1.
    """
    if len(text) < 5:
        return 1.0

    long_tokens = [t for t in text.split() if len(t) > 1]
    non_alpha = sum(1 for t in long_tokens if not any(ch.isalpha() for ch in t))
    if long_tokens and non_alpha > len(long_tokens) / 2:
        return 1.0

    alpha_tokens = _ALPHA_TOKEN_RE.findall(text)
    avg_word_length = (
        sum(len(t) for t in alpha_tokens) / len(alpha_tokens) if alpha_tokens else 0.0
    )
    punctuation_bonus = 1.0 if sum(1 for ch in text if ch in _PUNCTUATION) > 2 else 0.0
    return clamp_score(avg_word_length / 4 + punctuation_bonus + 5)


def fluency_score(text: str, filler_count: int | None = None) -> float:
    """Score flow: sentence length near 10-20 words, few fillers."""
    words = text.split()
    if not words:
        return 0.0
    if filler_count is None:
        filler_count = count_fillers(text)
    sentences = split_sentences(text)
    avg_words_per_sentence = len(words) / max(1, len(sentences))

    score = 7.0
    score += min(2.0, (avg_words_per_sentence - 10) / 5)
    score -= (filler_count / max(1, len(words))) * 10
    return clamp_score(score)


class RelevanceBucket(StrEnum):
    """Relevance bands that select the composite weighting."""

    OFF_TOPIC = "off_topic"
    PARTIAL = "partial"
    ON_TOPIC = "on_topic"


def relevance_bucket(relevance: float) -> RelevanceBucket:
    if relevance < 1:
        return RelevanceBucket.OFF_TOPIC
    elif relevance < 3:
        return RelevanceBucket.PARTIAL
    else:
        return RelevanceBucket.ON_TOPIC


def relevance_score(
    text: str,
    reference: str,
    similarity: SimilarityStrategy = pairwise_similarity,
) -> float:
    """Score semantic closeness to the reference answer on 0-10.

    Args:
        text: Candidate answer.
        reference: Expected answer.
        similarity: Strategy returning similarity in [0, 1].

    Returns:
        10 x similarity, or 0 for nonsensical answers.
    """
    if is_nonsensical(text):
        return 0.0
    return clamp_score(similarity(text, reference) * 10)
