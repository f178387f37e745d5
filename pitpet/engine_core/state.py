"""
Match State - the single source of truth for one duel.

Design principles:
- Owned by the reducer: every transition clones, mutates the clone, returns it
- Serializable: plain dataclasses, enums and ints (the RNG is just a seed)
- Observable: a frozen snapshot is derived after every transition
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from .rng import to_uint32
from .types import (
    Action,
    Element,
    Modifier,
    Phase,
    Side,
    MatchOutcome,
    PetJackStage,
    PetJackOutcome,
    GRID_SIZE,
)

if TYPE_CHECKING:
    from ..config import CombatantProfile, DuelConfig, StatBlock


@dataclass(frozen=True)
class ComboRow:
    """One (action, element, modifier) triple read off a grid row."""
    action: Action
    element: Element
    modifier: Modifier

    def describe(self) -> str:
        return f"{self.action.value} | {self.element.value} | {self.modifier.value}"


@dataclass
class SlotGrid:
    """
    The 3x3 symbol matrix for one side's turn.

    Columns are parallel lists indexed by row. At most one cell may be
    locked, and lock/respin are each usable once per grid.
    """
    actions: list[Action]
    elements: list[Element]
    modifiers: list[Modifier]
    locked_cell: tuple[int, int] | None = None  # (row, column)
    lock_used: bool = False
    respin_used: bool = False

    def is_locked(self, row: int, column: int) -> bool:
        return self.locked_cell == (row, column)

    def combo(self, row: int) -> ComboRow:
        return ComboRow(
            action=self.actions[row],
            element=self.elements[row],
            modifier=self.modifiers[row],
        )

    def copy(self) -> SlotGrid:
        return SlotGrid(
            actions=list(self.actions),
            elements=list(self.elements),
            modifiers=list(self.modifiers),
            locked_cell=self.locked_cell,
            lock_used=self.lock_used,
            respin_used=self.respin_used,
        )


def build_combos(grid: SlotGrid) -> list[ComboRow]:
    """Project the grid rows into combos. Recomputed on demand, never cached."""
    return [grid.combo(row) for row in range(GRID_SIZE)]


@dataclass
class SpinOutcome:
    """A grid for one side. Combos are derived from the grid on access."""
    grid: SlotGrid

    @property
    def combos(self) -> list[ComboRow]:
        return build_combos(self.grid)


@dataclass
class DotEffect:
    """Damage over time: ticks once per round end."""
    ticks_left: int
    damage: float


@dataclass
class CombatantState:
    """
    Mutable per-match state for one pitpet.

    `stats` is the fixed block from the config; everything else moves.
    crit_mod / status_mod / initiative_boost are reset at every spin.
    """
    name: str
    stats: StatBlock
    hp: float
    shield: float = 0.0
    dot: DotEffect | None = None
    charge_bonus: bool = False
    crit_mod: float = 0.0
    status_mod: float = 0.0
    initiative_boost: bool = False
    skip_next: bool = False
    bet_boost: float = 1.0
    last_element: Element | None = None

    @classmethod
    def create(cls, profile: CombatantProfile) -> CombatantState:
        """Fresh combatant at full HP."""
        return cls(name=profile.name, stats=profile.stats, hp=float(profile.stats.hp))

    @property
    def is_defeated(self) -> bool:
        return self.hp <= 0

    def reset_round_modifiers(self) -> None:
        """Clear the transient buffs that only last one round."""
        self.crit_mod = 0.0
        self.status_mod = 0.0
        self.initiative_boost = False


@dataclass
class PetJackState:
    """One hand of the card sub-game."""
    player_hand: list[int] = field(default_factory=list)
    dealer_hand: list[int] = field(default_factory=list)
    stage: PetJackStage = PetJackStage.PLAYER_TURN
    outcome: PetJackOutcome | None = None


@dataclass(frozen=True)
class LogEntry:
    """One battle-log line, tagged with the round it happened in."""
    text: str
    round: int


@dataclass
class MatchState:
    """
    Complete match state at a point in time.

    This is the canonical state that the reducer operates on.
    All state changes go through Reducer.apply().
    """
    phase: Phase
    coins: int
    bet: int
    round: int
    player: CombatantState
    ai: CombatantState

    player_spin: SpinOutcome | None = None
    ai_spin: SpinOutcome | None = None
    player_row: int | None = None
    ai_row: int | None = None

    total_wagered: int = 0
    logs: list[LogEntry] = field(default_factory=list)
    petjack: PetJackState | None = None
    winner: MatchOutcome | None = None

    # RNG state carried by value
    rng_seed: int = 0

    # Accepted commands, for replay
    command_history: list[Any] = field(default_factory=list)

    @classmethod
    def create(cls, config: DuelConfig, seed: int = 0) -> MatchState:
        """Initial state: Idle, full HP, starting coins, lowest bet tier."""
        return cls(
            phase=Phase.IDLE,
            coins=config.starting_coins,
            bet=config.bet_tiers[0],
            round=1,
            player=CombatantState.create(config.player),
            ai=CombatantState.create(config.ai),
            rng_seed=to_uint32(seed),
        )

    def combatant(self, side: Side) -> CombatantState:
        return self.player if side is Side.PLAYER else self.ai

    def spin_for(self, side: Side) -> SpinOutcome | None:
        return self.player_spin if side is Side.PLAYER else self.ai_spin

    def log(self, text: str) -> None:
        """Append a battle-log line for the current round."""
        self.logs.append(LogEntry(text=text, round=self.round))

    def clone(self) -> MatchState:
        """Deep copy the state."""
        return deepcopy(self)
