"""
Shared test doubles and builders.
"""

from ..engine_core.rng import DeterministicRandom
from ..engine_core.state import SlotGrid, SpinOutcome
from ..engine_core.types import Action, Element, Modifier


class ScriptedRandom(DeterministicRandom):
    """
    Replays a fixed list of floats instead of the LCG.

    Lets a test force hit/crit/status rolls, reel symbols and cards.
    Running out of values fails the test.
    """

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)
        self.calls = 0

    def next(self) -> float:
        if not self.values:
            raise AssertionError("ScriptedRandom ran out of values")
        self.calls += 1
        return self.values.pop(0)


def card(value: int, deck_size: int = 11) -> float:
    """The draw that picks `value` from the default 1..11 deck."""
    return (value - 1) / deck_size + 0.01


def make_grid(*rows, **flags) -> SlotGrid:
    """Build a grid from three (action, element, modifier) rows."""
    assert len(rows) == 3
    return SlotGrid(
        actions=[row[0] for row in rows],
        elements=[row[1] for row in rows],
        modifiers=[row[2] for row in rows],
        **flags,
    )


def uniform_spin(action=Action.STRIKE, element=Element.VOID, modifier=Modifier.X1) -> SpinOutcome:
    """A spin whose three rows are the same combo."""
    row = (action, element, modifier)
    return SpinOutcome(grid=make_grid(row, row, row))
