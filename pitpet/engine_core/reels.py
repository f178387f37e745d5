"""
Reel Engine - Produces and mutates the 3x3 slot grid.

The grid has three weighted columns (action, element, modifier).
Operations:
- spin: redraw all nine cells, keeping a locked cell's value
- lock: pin one cell (single use, toggling the same cell releases it)
- respin: redraw one column (single use)

Lock and respin are mutually exclusive privileges: once one has been
taken on a grid the other is refused. Every operation returns a new
grid; the input grid is never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .rng import DeterministicRandom
from .state import SlotGrid, SpinOutcome
from .types import Action, Column, Element, Modifier, GRID_SIZE
from .weighted import weighted_pick

if TYPE_CHECKING:
    from ..config import ReelOption, ReelTables


class ReelError(ValueError):
    """A lock/respin was attempted that the grid does not allow."""


@dataclass
class ReelEngine:
    """
    Draws grids from the configured reel tables.

    Stateless apart from the tables; the RNG is passed into every call.
    """
    tables: ReelTables

    def modifier_table(self, bet: int) -> list[ReelOption]:
        """Modifier weights for a bet, with the boosted subset doubled at high bets."""
        if bet < self.tables.boost_min_bet:
            return list(self.tables.modifiers)
        boosted = set(self.tables.boosted_modifiers)
        return [
            option.model_copy(update={"weight": option.weight * 2})
            if option.label in boosted else option
            for option in self.tables.modifiers
        ]

    def _column_table(self, column: Column, bet: int) -> list[ReelOption]:
        if column is Column.ACTION:
            return list(self.tables.actions)
        if column is Column.ELEMENT:
            return list(self.tables.elements)
        return self.modifier_table(bet)

    def _draw_column(self, column: Column, bet: int, rng: DeterministicRandom) -> list:
        table = self._column_table(column, bet)
        return [weighted_pick(table, rng) for _ in range(GRID_SIZE)]

    def spin(
        self,
        rng: DeterministicRandom,
        bet: int,
        previous: SlotGrid | None = None,
    ) -> SpinOutcome:
        """
        Full spin: three action draws, three element draws, three modifier draws.

        All nine draws are always made. A locked cell on `previous`
        discards its draw and keeps its old value.
        """
        actions: list[Action] = self._draw_column(Column.ACTION, bet, rng)
        elements: list[Element] = self._draw_column(Column.ELEMENT, bet, rng)
        modifiers: list[Modifier] = self._draw_column(Column.MODIFIER, bet, rng)

        if previous is None:
            grid = SlotGrid(actions=actions, elements=elements, modifiers=modifiers)
            return SpinOutcome(grid=grid)

        grid = previous.copy()
        drawn = (actions, elements, modifiers)
        for column in Column:
            self._write_column(grid, column, drawn[column.index])
        return SpinOutcome(grid=grid)

    def respin(
        self,
        column: Column,
        rng: DeterministicRandom,
        bet: int,
        current: SlotGrid,
        enforce: bool = True,
    ) -> SpinOutcome:
        """
        Redraw one column (three draws) and mark the respin as used.

        With enforce=False the privilege checks are skipped; the opponent
        uses this to score hypothetical respins on a fresh grid.
        """
        if enforce and not self.can_respin(current):
            raise ReelError("Respin unavailable: lock or respin already used")

        grid = current.copy()
        grid.respin_used = True
        self._write_column(grid, column, self._draw_column(column, bet, rng))
        return SpinOutcome(grid=grid)

    def lock(self, current: SlotGrid, row: int, column: int) -> SlotGrid:
        """
        Lock a cell, or release it when it is already the locked cell.

        Releasing gives the lock privilege back.
        """
        if not (0 <= row < GRID_SIZE and 0 <= column < GRID_SIZE):
            raise ReelError(f"Cell ({row}, {column}) is outside the grid")

        grid = current.copy()
        if grid.is_locked(row, column):
            grid.locked_cell = None
            grid.lock_used = False
            return grid

        if not self.can_lock(current):
            raise ReelError("Lock unavailable: lock or respin already used")

        grid.locked_cell = (row, column)
        grid.lock_used = True
        return grid

    @staticmethod
    def can_lock(grid: SlotGrid) -> bool:
        return not grid.lock_used and not grid.respin_used

    @staticmethod
    def can_respin(grid: SlotGrid) -> bool:
        return not grid.lock_used and not grid.respin_used

    @staticmethod
    def _write_column(grid: SlotGrid, column: Column, values: list) -> None:
        target = (grid.actions, grid.elements, grid.modifiers)[column.index]
        for row in range(GRID_SIZE):
            if grid.is_locked(row, column.index):
                continue
            target[row] = values[row]
