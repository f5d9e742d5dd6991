"""Tests for score jitter sources."""

from interview_evaluator.assessment.jitter import NoJitter, RandomJitter


class TestNoJitter:
    def test_always_zero(self):
        jitter = NoJitter()
        assert jitter.subscore() == 0.0
        assert jitter.composite() == 0.0


class TestRandomJitter:
    def test_bounded(self):
        jitter = RandomJitter(subscore_amplitude=0.5, composite_amplitude=0.3, seed=3)
        for _ in range(200):
            assert -0.5 <= jitter.subscore() <= 0.5
            assert -0.3 <= jitter.composite() <= 0.3

    def test_seeded_sequences_repeat(self):
        a = RandomJitter(seed=42)
        b = RandomJitter(seed=42)
        assert [a.subscore() for _ in range(5)] == [b.subscore() for _ in range(5)]

    def test_zero_amplitude(self):
        jitter = RandomJitter(subscore_amplitude=0.0, composite_amplitude=0.0, seed=1)
        assert jitter.subscore() == 0.0
        assert jitter.composite() == 0.0
