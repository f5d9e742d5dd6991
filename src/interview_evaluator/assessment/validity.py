"""Pre-scoring checks that reject empty or gibberish answers."""

import re

MIN_TEXT_LENGTH = 3
MIN_TOKENS = 3
MAX_MIXED_CASE_TERM = 4

_VOWELS = set("aeiouy")
_CONSONANT_RUN = re.compile(r"[b-df-hj-np-tv-xz]{6,}")


def _has_letter(token: str) -> bool:
    return any(ch.isalpha() for ch in token)


def _is_pronounceable(word: str) -> bool:
    """Heuristic for a recognizable word.

    Acronyms ("HTML", "SQL") and short mixed-case terms ("iOS", "Js") are
    accepted as written. Lowercase words need a vowel and no long consonant run.
    """
    if not word.isascii():
        return True
    if word.isupper():
        return True
    if len(word) <= MAX_MIXED_CASE_TERM and not word.islower():
        return True
    word = word.lower()
    if not any(ch in _VOWELS for ch in word):
        return False
    return _CONSONANT_RUN.search(word) is None


def is_valid(text: str | None) -> bool:
    """Return False for empty, near-empty, or symbol-only text."""
    if text is None:
        return False
    stripped = text.strip()
    if len(stripped) < MIN_TEXT_LENGTH:
        return False
    return any(ch.isalnum() for ch in stripped)


def is_nonsensical(text: str | None) -> bool:
    """Return True when the text has too few tokens or no recognizable words.

    Args:
        text: Candidate answer.

    Returns:
        True if fewer than 3 tokens, if most tokens carry no letters, or if
        most letter-bearing tokens are unpronounceable.
    """
    if not text:
        return True
    tokens = text.split()
    if len(tokens) < MIN_TOKENS:
        return True

    lacking_letters = sum(1 for t in tokens if not _has_letter(t))
    if lacking_letters == len(tokens) or lacking_letters > len(tokens) / 2:
        return True

    words = ["".join(ch for ch in t if ch.isalpha()) for t in tokens if _has_letter(t)]
    unrecognizable = sum(1 for w in words if not _is_pronounceable(w))
    return unrecognizable > len(words) / 2


def passes_gate(text: str | None) -> bool:
    """Combined gate used by the engine before any scorer runs."""
    return is_valid(text) and not is_nonsensical(text)
