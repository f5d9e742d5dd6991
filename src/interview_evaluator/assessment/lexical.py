"""Lexical feature extraction for heuristic scoring."""

import functools
import re
from collections import Counter

import spacy
import structlog
import textstat
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS
from textblob import TextBlob

from interview_evaluator.models.evaluation import LexicalFeatures

logger = structlog.get_logger()

_WORD_RE = re.compile(r"[^\W\d_]+(?:'[^\W\d_]+)?")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_CLAUSE_SPLIT_RE = re.compile(r"[.,;:!?]")


@functools.lru_cache(maxsize=1)
def _get_nlp():
    """Load the spaCy English pipeline once; None if the model is not installed."""
    try:
        return spacy.load("en_core_web_sm")
    except OSError:
        logger.info("spacy_model_unavailable", model="en_core_web_sm")
        return None


# Disfluencies that are fillers wherever they appear
HESITATION_FILLERS = frozenset({"um", "uh", "er", "ah", "hmm"})
# Fillers in interview speech unless used as content words
ADVERB_FILLERS = frozenset({"actually", "basically", "literally"})
# Context dependent: "I like Python" vs "it was, like, fine"
AMBIGUOUS_FILLERS = frozenset({"like", "well"})
PHRASE_FILLERS = ("you know", "i mean", "sort of", "kind of")

CONFIDENCE_KEYWORDS = (
    "confident", "sure", "certain", "definitely", "absolutely",
    "experienced", "skilled", "capable", "proficient", "expert",
)

UNCERTAINTY_KEYWORDS = (
    "maybe", "perhaps", "might", "possibly", "probably",
    "i think", "i guess", "not sure", "unsure", "uncertain",
)

# Interview-specific polarity adjustments on top of the general lexicon
INTERVIEW_LEXICON: dict[str, int] = {
    "confident": 3,
    "excited": 3,
    "passionate": 3,
    "enthusiastic": 3,
    "experienced": 2,
    "skilled": 2,
    "motivated": 2,
    "dedicated": 2,
    "professional": 2,
    "capable": 2,
    "nervous": -2,
    "unsure": -2,
    "confused": -2,
    "worried": -2,
    "anxious": -2,
    "uncertain": -1,
    "hesitant": -1,
}

# TextBlob polarity is in [-1, 1]; stretch it so a neutral answer sits at 0 on [-5, 5]
POLARITY_SCALE = 5.0


def tokenize_words(text: str) -> list[str]:
    """Lowercased alphabetic words (apostrophes kept inside words)."""
    return _WORD_RE.findall(text.lower())


def count_keywords(text: str, keywords: tuple[str, ...] | frozenset[str]) -> int:
    """Count whole-word (or whole-phrase) keyword occurrences."""
    lowered = text.lower()
    return sum(
        len(re.findall(rf"\b{re.escape(keyword)}\b", lowered)) for keyword in keywords
    )


def is_filler_token(token, doc) -> bool:
    """Context-aware filler check for "like" and "well" using spaCy."""
    word = token.text.lower()
    if word == "like":
        # "I like dogs" → verb
        if token.pos_ == "VERB":
            return False
        # "would like"
        if any(t.text.lower() == "would" for t in token.head.children):
            return False
        # "like a dog" → preposition
        if token.pos_ in ("ADP", "SCONJ") and token.dep_ in ("prep", "mark"):
            return False
        return True
    if word == "well":
        # "very well"
        if token.dep_ == "advmod" and token.head.pos_ == "ADJ":
            return False
        if token.i == 0 or doc[token.i - 1].is_sent_start:
            return True
        return token.dep_ == "intj"
    return False


def count_fillers(text: str) -> int:
    """Count filler words and phrases.

    "like" and "well" are disambiguated with spaCy when the model is
    installed, otherwise every occurrence counts.
    """
    words = tokenize_words(text)
    count = sum(1 for w in words if w in HESITATION_FILLERS or w in ADVERB_FILLERS)
    count += count_keywords(text, PHRASE_FILLERS)

    if not any(w in AMBIGUOUS_FILLERS for w in words):
        return count

    nlp = _get_nlp()
    if nlp is None:
        return count + sum(1 for w in words if w in AMBIGUOUS_FILLERS)
    doc = nlp(text)
    return count + sum(1 for token in doc if is_filler_token(token, doc))


def compute_polarity(text: str) -> float:
    """Signed lexicon-based sentiment, roughly [-5, 5] for ordinary text.

    TextBlob's pattern lexicon gives the base polarity; interview vocabulary
    ("confident", "nervous", ...) shifts it further.
    """
    if not text.strip():
        return 0.0
    base = TextBlob(text).sentiment.polarity * POLARITY_SCALE
    lowered = text.lower()
    adjustment = sum(
        weight * len(re.findall(rf"\b{word}\b", lowered))
        for word, weight in INTERVIEW_LEXICON.items()
    )
    return base + adjustment


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def extract_keywords(text: str, limit: int = 5) -> list[str]:
    """Most frequent content words (longer than 3 letters, no stop words)."""
    words = [
        w for w in tokenize_words(text)
        if len(w) > 3 and w not in ENGLISH_STOP_WORDS
    ]
    return [word for word, _count in Counter(words).most_common(limit)]


def compute_readability(text: str) -> float:
    """Flesch reading ease clamped to [0, 100]; 0 for text without words.

    textstat needs pronunciation data for syllable counts; without it the
    score is 0 rather than an error.
    """
    if not tokenize_words(text):
        return 0.0
    try:
        score = textstat.flesch_reading_ease(text)
    except LookupError as e:
        logger.warning("readability_unavailable", error=str(e))
        return 0.0
    return max(0.0, min(100.0, score))


def _auxiliary(name: str, func, text: str, default):
    """Run a feature extractor no scorer depends on; failures fall back to default."""
    try:
        return func(text)
    except Exception as e:
        logger.warning("auxiliary_feature_failed", feature=name, error=str(e))
        return default


def extract_key_phrases(reference: str) -> list[str]:
    """Key phrases of a reference answer, in order of appearance.

    Within each clause, two- and three-word phrases start at a content word
    longer than 3 letters; single content words need more than 4 letters.
    """
    phrases: list[str] = []
    for clause in _CLAUSE_SPLIT_RE.split(reference):
        words = tokenize_words(clause)
        for i, word in enumerate(words[:-1]):
            if len(word) <= 3 or word in ENGLISH_STOP_WORDS:
                continue
            if len(words[i + 1]) > 3:
                phrases.append(f"{word} {words[i + 1]}")
            if i + 2 < len(words) and len(words[i + 2]) > 3:
                phrases.append(f"{word} {words[i + 1]} {words[i + 2]}")
        phrases.extend(w for w in words if len(w) > 4 and w not in ENGLISH_STOP_WORDS)
    return list(dict.fromkeys(phrases))


def match_key_phrases(text: str, phrases: list[str]) -> tuple[list[str], list[str]]:
    """Split phrases into (matched, missing) by whole-word presence in text."""
    normalized = f" {' '.join(tokenize_words(text))} "
    matched = [p for p in phrases if f" {p} " in normalized]
    missing = [p for p in phrases if f" {p} " not in normalized]
    return matched, missing


def extract_features(text: str) -> LexicalFeatures:
    """Derive all lexical features used by the scorers and feedback rules.

    Args:
        text: Candidate answer text.

    Returns:
        LexicalFeatures; all zeros for empty text.
    """
    tokens = text.split()
    if not tokens:
        return LexicalFeatures()

    word_count = len(tokens)
    sentences = split_sentences(text)
    alpha_words = tokenize_words(text)
    filler_count = count_fillers(text)

    return LexicalFeatures(
        word_count=word_count,
        sentence_count=len(sentences),
        filler_count=filler_count,
        filler_ratio=filler_count / max(1, word_count),
        confidence_keyword_count=count_keywords(text, CONFIDENCE_KEYWORDS),
        uncertainty_keyword_count=count_keywords(text, UNCERTAINTY_KEYWORDS),
        polarity=round(compute_polarity(text), 3),
        avg_word_length=(
            sum(len(w) for w in alpha_words) / len(alpha_words) if alpha_words else 0.0
        ),
        avg_words_per_sentence=word_count / max(1, len(sentences)),
        readability=round(_auxiliary("readability", compute_readability, text, 0.0), 1),
        keywords=_auxiliary("keywords", extract_keywords, text, []),
    )


def estimate_words_per_minute(word_count: int, duration_seconds: float | None) -> float | None:
    """Speaking rate from a word count and media duration; None without a duration."""
    if not duration_seconds or duration_seconds <= 0:
        return None
    return round(word_count / duration_seconds * 60, 1)


def pace_label(words_per_minute: float) -> str:
    """Categorize speaking rate."""
    if words_per_minute < 100:
        return "slow"
    if words_per_minute > 160:
        return "fast"
    return "moderate"
