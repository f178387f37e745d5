"""
Pytest fixtures for Pitpet tests.
"""

import pytest

from ..config import DuelConfig, create_default_config
from ..engine_core.action import Command
from ..engine_core.elements import ElementalModel
from ..engine_core.reducer import Reducer, create_match
from ..engine_core.state import CombatantState, MatchState
from ..engine_core.types import Action, Element, Modifier, Phase
from .helpers import uniform_spin


@pytest.fixture
def config() -> DuelConfig:
    """Stock duel configuration."""
    return create_default_config()


@pytest.fixture
def reducer(config: DuelConfig) -> Reducer:
    return Reducer(config=config)


@pytest.fixture
def fresh_state(config: DuelConfig) -> MatchState:
    """A new match seeded with 42."""
    return create_match(config, seed=42)


@pytest.fixture
def elements(config: DuelConfig) -> ElementalModel:
    return ElementalModel(config.elements)


@pytest.fixture
def player(config: DuelConfig) -> CombatantState:
    """Flaro at full HP."""
    return CombatantState.create(config.player)


@pytest.fixture
def ai(config: DuelConfig) -> CombatantState:
    """Aqualin at full HP."""
    return CombatantState.create(config.ai)


@pytest.fixture
def spun_state(reducer: Reducer, fresh_state: MatchState) -> MatchState:
    """
    A state in the Spun phase with fixed, harmless grids.

    Both sides hold three Guard | Void | x1 rows, so resolving a round
    deals no damage and draws nothing. Tests overwrite the grids they
    care about.
    """
    result = reducer.apply(fresh_state, Command.spin())
    assert result.success
    state = result.new_state
    assert state.phase is Phase.SPUN
    state.player_spin = uniform_spin(Action.GUARD, Element.VOID, Modifier.X1)
    state.ai_spin = uniform_spin(Action.GUARD, Element.VOID, Modifier.X1)
    state.ai_row = 0
    return state
