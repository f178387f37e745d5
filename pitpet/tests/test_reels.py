"""
Tests for the reel engine.

Tests:
- Draw counts and order
- Locked cells surviving spins and respins
- Lock/respin exclusivity and the lock toggle
- Modifier boost at high bets
"""

import pytest

from ..engine_core.reels import ReelEngine, ReelError
from ..engine_core.types import Action, Column, Element, Modifier
from .helpers import ScriptedRandom

# 0.999 lands on the last entry of every stock table
LAST = 0.999


@pytest.fixture
def reels(config):
    return ReelEngine(config.reels)


@pytest.fixture
def first_grid(reels):
    """Strike | Flame | x1 on every row."""
    return reels.spin(ScriptedRandom([0.0] * 9), bet=10).grid


class TestSpin:
    """Tests for full spins."""

    def test_nine_draws(self, reels):
        """A spin makes exactly nine draws."""
        rng = ScriptedRandom([0.0] * 9)
        reels.spin(rng, bet=10)
        assert rng.calls == 9

    def test_first_entries(self, first_grid):
        """Zero rolls pick the first entry of each table."""
        assert first_grid.actions == [Action.STRIKE] * 3
        assert first_grid.elements == [Element.FLAME] * 3
        assert first_grid.modifiers == [Modifier.X1] * 3

    def test_column_draw_order(self, reels):
        """Actions are drawn first, then elements, then modifiers."""
        rng = ScriptedRandom([LAST] * 3 + [0.0] * 6)
        grid = reels.spin(rng, bet=10).grid
        assert grid.actions == [Action.WILD] * 3
        assert grid.elements == [Element.FLAME] * 3

    def test_last_entries(self, reels):
        """Top rolls reach Wild, Wild and Card-Ticket."""
        grid = reels.spin(ScriptedRandom([LAST] * 9), bet=10).grid
        assert grid.actions == [Action.WILD] * 3
        assert grid.elements == [Element.WILD] * 3
        assert grid.modifiers == [Modifier.CARD_TICKET] * 3

    def test_locked_cell_survives_spin(self, reels, first_grid):
        """A locked cell keeps its value; all nine draws still happen."""
        locked = reels.lock(first_grid, 1, 0)
        rng = ScriptedRandom([LAST] * 9)
        grid = reels.spin(rng, bet=10, previous=locked).grid

        assert rng.calls == 9
        assert grid.actions == [Action.WILD, Action.STRIKE, Action.WILD]
        assert grid.locked_cell == (1, 0)


class TestRespin:
    """Tests for single-column respins."""

    def test_three_draws_one_column(self, reels, first_grid):
        """A respin redraws one column only."""
        rng = ScriptedRandom([LAST] * 3)
        grid = reels.respin(Column.ELEMENT, rng, 10, first_grid).grid

        assert rng.calls == 3
        assert grid.elements == [Element.WILD] * 3
        assert grid.actions == first_grid.actions
        assert grid.modifiers == first_grid.modifiers
        assert grid.respin_used

    def test_input_grid_untouched(self, reels, first_grid):
        """Respin returns a new grid."""
        reels.respin(Column.ACTION, ScriptedRandom([LAST] * 3), 10, first_grid)
        assert first_grid.actions == [Action.STRIKE] * 3
        assert not first_grid.respin_used

    def test_second_respin_refused(self, reels, first_grid):
        """Respin is single use."""
        once = reels.respin(Column.ACTION, ScriptedRandom([0.0] * 3), 10, first_grid).grid
        with pytest.raises(ReelError):
            reels.respin(Column.ACTION, ScriptedRandom([0.0] * 3), 10, once)

    def test_respin_after_lock_refused(self, reels, first_grid):
        """Locking spends the respin privilege."""
        locked = reels.lock(first_grid, 0, 0)
        with pytest.raises(ReelError):
            reels.respin(Column.MODIFIER, ScriptedRandom([0.0] * 3), 10, locked)

    def test_unenforced_respin_keeps_lock(self, reels, first_grid):
        """Without enforcement a locked cell is still preserved."""
        locked = reels.lock(first_grid, 2, 2)
        grid = reels.respin(Column.MODIFIER, ScriptedRandom([LAST] * 3), 10, locked, enforce=False).grid
        assert grid.modifiers == [Modifier.CARD_TICKET, Modifier.CARD_TICKET, Modifier.X1]


class TestLock:
    """Tests for the lock toggle."""

    def test_lock_sets_flags(self, reels, first_grid):
        """Locking records the cell and spends the lock."""
        grid = reels.lock(first_grid, 0, 2)
        assert grid.locked_cell == (0, 2)
        assert grid.lock_used
        assert first_grid.locked_cell is None

    def test_toggle_releases(self, reels, first_grid):
        """Locking the same cell again releases it and returns the privilege."""
        grid = reels.lock(reels.lock(first_grid, 0, 2), 0, 2)
        assert grid.locked_cell is None
        assert not grid.lock_used
        assert ReelEngine.can_respin(grid)

    def test_second_cell_refused(self, reels, first_grid):
        """Only one cell can be locked."""
        grid = reels.lock(first_grid, 0, 0)
        with pytest.raises(ReelError):
            reels.lock(grid, 1, 1)

    def test_lock_after_respin_refused(self, reels, first_grid):
        """Respinning spends the lock privilege."""
        grid = reels.respin(Column.ACTION, ScriptedRandom([0.0] * 3), 10, first_grid).grid
        assert not ReelEngine.can_lock(grid)
        with pytest.raises(ReelError):
            reels.lock(grid, 0, 0)

    def test_out_of_range(self, reels, first_grid):
        """Cells outside 0..2 are refused."""
        with pytest.raises(ReelError):
            reels.lock(first_grid, 3, 0)
        with pytest.raises(ReelError):
            reels.lock(first_grid, 0, -1)


class TestModifierBoost:
    """Tests for the high-bet modifier table."""

    def test_low_bet_unchanged(self, reels, config):
        """Below the threshold the stock weights are used."""
        table = reels.modifier_table(20)
        assert [o.weight for o in table] == [o.weight for o in config.reels.modifiers]

    def test_high_bet_doubles_boosted(self, reels):
        """At 50 and above the boosted subset doubles."""
        weights = {o.label: o.weight for o in reels.modifier_table(50)}
        assert weights[Modifier.X2] == 20
        assert weights[Modifier.CRIT_PLUS] == 24
        assert weights[Modifier.PIERCE] == 16
        assert weights[Modifier.LEECH] == 4
        assert weights[Modifier.X1] == 30
        assert weights[Modifier.CARD_TICKET] == 10
