"""Weighted table sampling shared by the reels."""

from __future__ import annotations
from typing import Protocol, Sequence, TypeVar

from .rng import DeterministicRandom

T = TypeVar("T")


class WeightedOption(Protocol[T]):
    """Anything with a label and a non-negative weight."""
    label: T
    weight: float


def weighted_pick(options: Sequence[WeightedOption[T]], rng: DeterministicRandom) -> T:
    """
    Pick one label with probability weight/total.

    Makes exactly one draw. Subtracts weights in table order until the
    running roll drops to zero; float drift falls back to the last entry.
    """
    if not options:
        raise ValueError("Cannot pick from an empty table")

    total = sum(option.weight for option in options)
    roll = rng.next() * total
    for option in options:
        roll -= option.weight
        if roll <= 0:
            return option.label
    return options[-1].label
