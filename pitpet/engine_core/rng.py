"""
Deterministic Random Source - the only entropy in the engine.

A 32-bit linear congruential generator. The whole generator state is a
single unsigned seed, so it can be stored in MatchState by value and
rebuilt for every transition without losing reproducibility.
"""

from __future__ import annotations

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 2 ** 32


def to_uint32(value: int | float) -> int:
    """Truncate toward zero and wrap into the unsigned 32-bit range."""
    return int(value) & UINT32_MASK


class DeterministicRandom:
    """
    Seeded pseudo-random source.

    Usage:
        rng = DeterministicRandom(42)
        roll = rng.next() * 100
        card = deck[rng.next_int(len(deck))]
        state.rng_seed = rng.seed
    """

    def __init__(self, seed: int | float = 0):
        self._seed = to_uint32(seed)

    @property
    def seed(self) -> int:
        """Current generator state."""
        return self._seed

    def set_seed(self, seed: int | float) -> None:
        """Overwrite the state. Callers reject non-finite values first."""
        self._seed = to_uint32(seed)

    def next(self) -> float:
        """Advance one step and return a float in [0, 1)."""
        self._seed = (LCG_MULTIPLIER * self._seed + LCG_INCREMENT) & UINT32_MASK
        return self._seed / UINT32_RANGE

    def next_int(self, max_value: int) -> int:
        """Uniform integer in [0, max_value)."""
        if max_value < 1:
            raise ValueError(f"next_int needs max_value >= 1, got {max_value}")
        return int(self.next() * max_value)
