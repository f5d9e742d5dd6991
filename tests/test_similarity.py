"""Tests for pairwise TF-IDF similarity."""

import pytest

from interview_evaluator.assessment.similarity import pairwise_similarity


class TestPairwiseSimilarity:
    def test_identical_texts(self):
        text = "Closures capture variables from the enclosing function scope"
        assert pairwise_similarity(text, text) == pytest.approx(1.0)

    def test_disjoint_texts(self):
        assert pairwise_similarity(
            "apples oranges bananas", "database schema transactions"
        ) == 0.0

    def test_only_stop_words(self):
        assert pairwise_similarity("the and of", "it is the") == 0.0

    def test_one_side_without_terms(self):
        assert pairwise_similarity("the and of", "database schema") == 0.0

    def test_partial_overlap(self):
        score = pairwise_similarity(
            "SQL databases use tables and schemas",
            "SQL databases are relational and store data in tables",
        )
        assert 0.0 < score < 1.0

    def test_symmetric(self):
        a = "let is block scoped"
        b = "var is function scoped while let is block scoped"
        assert pairwise_similarity(a, b) == pytest.approx(pairwise_similarity(b, a))
