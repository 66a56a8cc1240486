"""Seedable random source injected through every combat call.

Every draw the engine makes goes through one CombatRNG, so an encounter
replayed with the same seed produces identical rolls, decisions and effects.
"""

from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class CombatRNG:
    """Thin wrapper over ``numpy.random.Generator`` with combat-shaped helpers.

    Usage:
        rng = CombatRNG(seed=123)
        rng.randint(1, 20)       # inclusive die roll
        rng.percent_check(25)    # True 25% of the time
        rng.choice([a, b, c])
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._generator = np.random.default_rng(seed)

    def randint(self, low: int, high: int) -> int:
        """Inclusive integer in [low, high]."""
        if low > high:
            raise ValueError(f"Empty range: {low}-{high}")
        return int(self._generator.integers(low, high + 1))

    def roll_percent(self) -> int:
        """Integer in [0, 99]."""
        return int(self._generator.integers(0, 100))

    def percent_check(self, chance: int) -> bool:
        """Return True when a 0-99 draw lands under ``chance``.

        A draw is always consumed, so sequences stay aligned regardless of
        the chance value.
        """
        return self.roll_percent() < chance

    def uniform(self, low: float, high: float) -> float:
        """Float in [low, high)."""
        return float(self._generator.uniform(low, high))

    def choice(self, items: Sequence[T]) -> T:
        """Uniformly pick one element of a non-empty sequence."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        return items[int(self._generator.integers(0, len(items)))]

    def __repr__(self) -> str:
        return f"CombatRNG(seed={self.seed})"
