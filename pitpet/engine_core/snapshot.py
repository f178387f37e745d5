"""
Match Snapshot - the read-only view observers receive.

Derived from MatchState after every transition. All models are frozen
pydantic models, so a snapshot can be handed to any number of
subscribers and serialized without copying. Identical states serialize
to identical JSON.
"""

from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

from .action_generator import can_spin, respin_flags
from .state import CombatantState, MatchState, PetJackState, SpinOutcome
from .types import Action, Column, Element, Modifier, MatchOutcome, Phase, PetJackOutcome, PetJackStage

if TYPE_CHECKING:
    from ..config import DuelConfig

LOG_WINDOW = 120

_FROZEN = ConfigDict(frozen=True)


class ComboView(BaseModel):
    action: Action
    element: Element
    modifier: Modifier

    model_config = _FROZEN


class GridView(BaseModel):
    """One side's grid and its three combos."""
    actions: tuple[Action, ...]
    elements: tuple[Element, ...]
    modifiers: tuple[Modifier, ...]
    locked_cell: Optional[tuple[int, int]] = None
    lock_used: bool = False
    respin_used: bool = False
    combos: tuple[ComboView, ...] = ()

    model_config = _FROZEN


class DotView(BaseModel):
    ticks_left: int
    damage: float

    model_config = _FROZEN


class CombatantView(BaseModel):
    name: str
    level: int
    hp: float
    max_hp: int
    atk: int
    defense: int
    spd: int
    luk: int
    wis: int
    shield: float = 0.0
    dot: Optional[DotView] = None
    charge_bonus: bool = False
    crit_mod: float = 0.0
    status_mod: float = 0.0
    initiative_boost: bool = False
    skip_next: bool = False
    bet_boost: float = 1.0
    last_element: Optional[Element] = None

    model_config = _FROZEN


class PetJackView(BaseModel):
    player_hand: tuple[int, ...]
    dealer_hand: tuple[int, ...]
    player_total: int
    dealer_total: int
    stage: PetJackStage
    outcome: Optional[PetJackOutcome] = None

    model_config = _FROZEN


class LogLine(BaseModel):
    text: str
    round: int

    model_config = _FROZEN


class RespinFlags(BaseModel):
    action: bool = False
    element: bool = False
    modifier: bool = False

    model_config = _FROZEN


class MatchSnapshot(BaseModel):
    """Everything a UI needs to draw the match, plus the two gating flags."""
    phase: Phase
    coins: int
    bet: int
    round: int
    total_wagered: int
    seed: int = Field(description="Current RNG state")
    winner: Optional[MatchOutcome] = None
    player: CombatantView
    ai: CombatantView
    player_grid: Optional[GridView] = None
    ai_grid: Optional[GridView] = None
    player_row: Optional[int] = None
    ai_row: Optional[int] = None
    logs: tuple[LogLine, ...] = ()
    petjack: Optional[PetJackView] = None
    can_spin: bool = False
    can_respins: RespinFlags = Field(default_factory=RespinFlags)

    model_config = _FROZEN


def _combatant_view(combatant: CombatantState) -> CombatantView:
    stats = combatant.stats
    dot = None
    if combatant.dot is not None:
        dot = DotView(ticks_left=combatant.dot.ticks_left, damage=combatant.dot.damage)
    return CombatantView(
        name=combatant.name,
        level=stats.level,
        hp=combatant.hp,
        max_hp=stats.hp,
        atk=stats.atk,
        defense=stats.defense,
        spd=stats.spd,
        luk=stats.luk,
        wis=stats.wis,
        shield=combatant.shield,
        dot=dot,
        charge_bonus=combatant.charge_bonus,
        crit_mod=combatant.crit_mod,
        status_mod=combatant.status_mod,
        initiative_boost=combatant.initiative_boost,
        skip_next=combatant.skip_next,
        bet_boost=combatant.bet_boost,
        last_element=combatant.last_element,
    )


def _grid_view(outcome: Optional[SpinOutcome]) -> Optional[GridView]:
    if outcome is None:
        return None
    grid = outcome.grid
    return GridView(
        actions=tuple(grid.actions),
        elements=tuple(grid.elements),
        modifiers=tuple(grid.modifiers),
        locked_cell=grid.locked_cell,
        lock_used=grid.lock_used,
        respin_used=grid.respin_used,
        combos=tuple(
            ComboView(action=combo.action, element=combo.element, modifier=combo.modifier)
            for combo in outcome.combos
        ),
    )


def _petjack_view(hand: Optional[PetJackState]) -> Optional[PetJackView]:
    if hand is None:
        return None
    return PetJackView(
        player_hand=tuple(hand.player_hand),
        dealer_hand=tuple(hand.dealer_hand),
        player_total=sum(hand.player_hand),
        dealer_total=sum(hand.dealer_hand),
        stage=hand.stage,
        outcome=hand.outcome,
    )


def build_snapshot(state: MatchState, config: "DuelConfig") -> MatchSnapshot:
    """Project a state into its immutable snapshot."""
    flags = respin_flags(state, config)
    return MatchSnapshot(
        phase=state.phase,
        coins=state.coins,
        bet=state.bet,
        round=state.round,
        total_wagered=state.total_wagered,
        seed=state.rng_seed,
        winner=state.winner,
        player=_combatant_view(state.player),
        ai=_combatant_view(state.ai),
        player_grid=_grid_view(state.player_spin),
        ai_grid=_grid_view(state.ai_spin),
        player_row=state.player_row,
        ai_row=state.ai_row,
        logs=tuple(LogLine(text=entry.text, round=entry.round) for entry in state.logs[-LOG_WINDOW:]),
        petjack=_petjack_view(state.petjack),
        can_spin=can_spin(state),
        can_respins=RespinFlags(
            action=flags[Column.ACTION],
            element=flags[Column.ELEMENT],
            modifier=flags[Column.MODIFIER],
        ),
    )
