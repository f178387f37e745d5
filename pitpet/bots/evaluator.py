"""
Combo Evaluator - Scores combo rows by expected value.

The value of a row is roughly the damage it would deal:
    (ATK / max(1, effective DEF)) * power * element * scalar * bet boost
plus a flat bonus for actions whose value is not damage.

Wild rows are scored with the advantage multiplier because their
element is picked optimally when they resolve.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.combat import modifier_scalar, effective_defense
from ..engine_core.types import Action

if TYPE_CHECKING:
    from ..engine_core.elements import ElementalModel
    from ..engine_core.state import CombatantState, ComboRow, SpinOutcome


def _default_action_power() -> dict[Action, float]:
    return {
        Action.STRIKE: 1.0,
        Action.WILD: 1.0,
        Action.DOUBLE: 0.7 * 2,
    }


@dataclass
class EvaluationWeights:
    """
    Tunables for row scoring.

    Actions missing from action_power score zero base damage.
    """
    action_power: dict[Action, float] = field(default_factory=_default_action_power)
    steal_turn_bonus: float = 0.6  # fraction of attacker ATK


class ComboEvaluator:
    """
    Evaluates combo rows for one attacker against one defender.

    Used by the opponent policy:
    1. Score every row of a grid
    2. Take the best row value as the grid's value
    3. Compare grids (original vs. each respin trial)
    """

    def __init__(self, elements: ElementalModel, weights: EvaluationWeights | None = None):
        self.elements = elements
        self.weights = weights or EvaluationWeights()

    def row_value(self, combo: ComboRow, attacker: CombatantState, defender: CombatantState) -> float:
        power = self.weights.action_power.get(combo.action, 0.0)
        defense = effective_defense(defender, combo.modifier)
        base = (attacker.stats.atk / max(1.0, defense)) * power

        if combo.action is Action.WILD:
            element = self.elements.config.advantage
        else:
            element = self.elements.multiplier(combo.element, defender.last_element)

        bonus = 0.0
        if combo.action is Action.STEAL_TURN:
            bonus = attacker.stats.atk * self.weights.steal_turn_bonus

        boost = attacker.bet_boost or 1.0
        return base * element * modifier_scalar(combo.modifier) * boost + bonus

    def row_values(
        self,
        outcome: SpinOutcome,
        attacker: CombatantState,
        defender: CombatantState,
    ) -> list[float]:
        return [self.row_value(combo, attacker, defender) for combo in outcome.combos]

    def best_value(self, outcome: SpinOutcome, attacker: CombatantState, defender: CombatantState) -> float:
        return max(self.row_values(outcome, attacker, defender))

    def best_row(self, outcome: SpinOutcome, attacker: CombatantState, defender: CombatantState) -> int:
        """Index of the strictly greatest row; the first one wins ties."""
        best_index = 0
        best = float("-inf")
        for index, value in enumerate(self.row_values(outcome, attacker, defender)):
            if value > best:
                best = value
                best_index = index
        return best_index
