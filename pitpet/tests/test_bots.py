"""
Tests for the opponent: row scoring and the respin policy.

Tests:
- Row values for damage and non-damage actions
- Tie-breaking
- Draw counts (the opponent shares the match RNG)
- Trials are scored independently and never combined
"""

import pytest

from ..bots import ComboEvaluator, FirstRowPolicy, GreedyRespinPolicy
from ..engine_core.reels import ReelEngine
from ..engine_core.state import ComboRow, SpinOutcome
from ..engine_core.types import Action, Column, Element, Modifier
from .helpers import ScriptedRandom, make_grid, uniform_spin

BASE = 40 / 34


@pytest.fixture
def evaluator(elements):
    return ComboEvaluator(elements)


@pytest.fixture
def reels(config):
    return ReelEngine(config.reels)


def row(action, element=Element.VOID, modifier=Modifier.X1):
    return ComboRow(action=action, element=element, modifier=modifier)


class TestComboEvaluator:
    """Tests for ComboEvaluator.row_value and best_row."""

    def test_strike(self, evaluator, player, ai):
        """Strike is worth ATK over DEF."""
        assert evaluator.row_value(row(Action.STRIKE), player, ai) == pytest.approx(BASE)

    def test_double(self, evaluator, player, ai):
        """Double counts two 70% hits."""
        assert evaluator.row_value(row(Action.DOUBLE), player, ai) == pytest.approx(BASE * 1.4)

    def test_pierce(self, evaluator, player, ai):
        value = evaluator.row_value(row(Action.STRIKE, modifier=Modifier.PIERCE), player, ai)
        assert value == pytest.approx(40 / (34 * 0.6))

    def test_scalar_and_boost(self, evaluator, player, ai):
        """Modifier scalar and bet boost multiply the value."""
        player.bet_boost = 1.25
        value = evaluator.row_value(row(Action.STRIKE, modifier=Modifier.X2), player, ai)
        assert value == pytest.approx(BASE * 2 * 1.25)

    def test_element_against_last_element(self, evaluator, player, ai):
        ai.last_element = Element.BLOOM
        value = evaluator.row_value(row(Action.STRIKE, element=Element.FLAME), player, ai)
        assert value == pytest.approx(BASE * 1.25)

    def test_wild_assumes_advantage(self, evaluator, player, ai):
        """Wild rows are scored at the advantage multiplier."""
        value = evaluator.row_value(row(Action.WILD, element=Element.VOID), player, ai)
        assert value == pytest.approx(BASE * 1.25)

    def test_steal_turn_bonus(self, evaluator, player, ai):
        """StealTurn has no damage but a flat ATK bonus."""
        assert evaluator.row_value(row(Action.STEAL_TURN), player, ai) == pytest.approx(40 * 0.6)

    @pytest.mark.parametrize("action", [Action.GUARD, Action.HEAL, Action.HEX, Action.CHARGE])
    def test_support_actions_zero(self, evaluator, player, ai, action):
        assert evaluator.row_value(row(action), player, ai) == 0

    def test_best_row_ties_go_first(self, evaluator, player, ai):
        """Equal rows resolve to the lowest index."""
        assert evaluator.best_row(uniform_spin(Action.STRIKE), player, ai) == 0

    def test_best_row_strictly_greatest(self, evaluator, player, ai):
        grid = make_grid(
            (Action.GUARD, Element.VOID, Modifier.X1),
            (Action.STRIKE, Element.VOID, Modifier.X1),
            (Action.STRIKE, Element.VOID, Modifier.X2),
        )
        assert evaluator.best_row(SpinOutcome(grid=grid), player, ai) == 2


class TestGreedyRespinPolicy:
    """Tests for GreedyRespinPolicy."""

    def test_always_eighteen_draws(self, evaluator, reels, player, ai):
        """One spin plus three three-draw trials."""
        rng = ScriptedRandom([0.0] * 18)
        decision = GreedyRespinPolicy(evaluator).play_spin(reels, rng, 10, ai, player)

        assert rng.calls == 18
        assert decision.respun_column is None
        assert not decision.outcome.grid.respin_used
        assert decision.row == 0

    def test_keeps_strictly_better_trial(self, evaluator, reels, player, ai):
        """A modifier trial that rolls x2 replaces the original grid."""
        values = [0.0] * 9 + [0.0] * 3 + [0.0] * 3 + [0.5, 0.0, 0.0]
        decision = GreedyRespinPolicy(evaluator).play_spin(reels, ScriptedRandom(values), 10, ai, player)

        assert decision.respun_column is Column.MODIFIER
        assert decision.outcome.grid.modifiers == [Modifier.X2, Modifier.X1, Modifier.X1]
        assert decision.outcome.grid.respin_used
        assert decision.row == 0

    def test_trials_do_not_combine(self, evaluator, reels, player, ai):
        """Each trial starts from the original grid; only the best survives."""
        values = [0.0] * 9 + [0.0, 0.0, 0.97] + [0.0] * 3 + [0.5, 0.0, 0.0]
        decision = GreedyRespinPolicy(evaluator).play_spin(reels, ScriptedRandom(values), 10, ai, player)

        grid = decision.outcome.grid
        assert decision.respun_column is Column.MODIFIER
        assert grid.actions == [Action.STRIKE] * 3
        assert grid.modifiers[0] is Modifier.X2

    def test_name(self, evaluator):
        assert GreedyRespinPolicy(evaluator).get_name() == "GreedyRespinPolicy"


class TestFirstRowPolicy:
    """Tests for FirstRowPolicy."""

    def test_single_spin_row_zero(self, reels, player, ai):
        rng = ScriptedRandom([0.5] * 9)
        decision = FirstRowPolicy().play_spin(reels, rng, 10, ai, player)
        assert rng.calls == 9
        assert decision.row == 0
