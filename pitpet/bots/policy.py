"""
Opponent Policy - Interface for the non-player side's decisions.

An OpponentPolicy produces the opponent's grid for a round and picks
its row. It draws from the shared RNG, so the number and order of its
draws is part of the reproducible sequence for a seed.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .evaluator import ComboEvaluator
from ..engine_core.types import Column

if TYPE_CHECKING:
    from ..engine_core.reels import ReelEngine
    from ..engine_core.rng import DeterministicRandom
    from ..engine_core.state import CombatantState, SpinOutcome


@dataclass
class SpinDecision:
    """
    The opponent's grid and row for one round.

    Contains:
    - The final grid (after an optional respin)
    - The chosen row
    - Which column was respun, if any (for logs/debugging)
    - The row values the choice was made from
    """
    outcome: SpinOutcome
    row: int
    respun_column: Column | None = None
    row_values: list[float] = field(default_factory=list)


class OpponentPolicy(ABC):
    """
    Abstract base class for opponent policies.

    Implementations must make the same draws for the same inputs.
    """

    @abstractmethod
    def play_spin(
        self,
        reels: ReelEngine,
        rng: DeterministicRandom,
        bet: int,
        attacker: CombatantState,
        defender: CombatantState,
    ) -> SpinDecision:
        """
        Spin, optionally improve, and choose a row.

        Args:
            reels: Reel engine to draw grids with
            rng: The match RNG
            bet: Current bet (drives the modifier boost)
            attacker: The opponent's combatant
            defender: The player's combatant

        Returns:
            SpinDecision with the final grid and row
        """
        pass

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class GreedyRespinPolicy(OpponentPolicy):
    """
    One spin, then one respin trial per column, keep the best.

    Each trial respins a single column on top of the original grid;
    trials never combine. A trial replaces the current best only if its
    best row is strictly better. All three trials are always drawn.
    """

    def __init__(self, evaluator: ComboEvaluator):
        self.evaluator = evaluator

    def play_spin(self, reels, rng, bet, attacker, defender) -> SpinDecision:
        initial = reels.spin(rng, bet)
        best_outcome = initial
        best_value = self.evaluator.best_value(initial, attacker, defender)
        best_column: Column | None = None

        for column in Column:
            trial = reels.respin(column, rng, bet, initial.grid, enforce=False)
            trial_value = self.evaluator.best_value(trial, attacker, defender)
            if trial_value > best_value:
                best_value = trial_value
                best_outcome = trial
                best_column = column

        values = self.evaluator.row_values(best_outcome, attacker, defender)
        return SpinDecision(
            outcome=best_outcome,
            row=self.evaluator.best_row(best_outcome, attacker, defender),
            respun_column=best_column,
            row_values=values,
        )


class FirstRowPolicy(OpponentPolicy):
    """
    Spin once and always take row 0.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def play_spin(self, reels, rng, bet, attacker, defender) -> SpinDecision:
        return SpinDecision(outcome=reels.spin(rng, bet), row=0)
