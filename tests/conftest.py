"""Shared fixtures."""

import pytest

# Five short sentences about engineering work, repeated to pass 200 words
_PARAGRAPH = (
    "I am a confident and experienced software engineer. In my last role, I led a "
    "team of five developers, designed the service architecture, and shipped every "
    "release on schedule. Because I value clear communication, I write concise design "
    "documents, review code carefully, and mentor junior engineers so the whole team "
    "keeps improving."
)


@pytest.fixture
def strong_answer() -> str:
    return " ".join([_PARAGRAPH] * 4)


@pytest.fixture
def sql_reference() -> str:
    return (
        "SQL databases are relational, use structured schemas, and store data in "
        "tables with rows and columns."
    )
