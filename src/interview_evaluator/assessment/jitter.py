"""Optional cosmetic noise applied to scores.

Jitter keeps repeated submissions of the same answer from showing identical
numbers. It is not a scoring signal and is off unless configured.
"""

import threading
from typing import Protocol

import numpy as np


class ScoreJitter(Protocol):
    """Source of bounded noise for sub-score and composite stages."""

    def subscore(self) -> float: ...

    def composite(self) -> float: ...


class NoJitter:
    """Deterministic scoring."""

    def subscore(self) -> float:
        return 0.0

    def composite(self) -> float:
        return 0.0


class RandomJitter:
    """Uniform noise from a seedable numpy generator.

    numpy Generators are not thread-safe, so draws are serialized with a lock.

    Args:
        subscore_amplitude: Maximum absolute offset for confidence/clarity.
        composite_amplitude: Maximum absolute offset for the final composite.
        seed: Generator seed; None draws fresh entropy.
    """

    def __init__(
        self,
        subscore_amplitude: float = 0.5,
        composite_amplitude: float = 0.3,
        seed: int | None = None,
    ):
        self.subscore_amplitude = subscore_amplitude
        self.composite_amplitude = composite_amplitude
        self._rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

    def subscore(self) -> float:
        return self._draw(self.subscore_amplitude)

    def composite(self) -> float:
        return self._draw(self.composite_amplitude)

    def _draw(self, amplitude: float) -> float:
        with self._lock:
            return float(self._rng.uniform(-amplitude, amplitude))
