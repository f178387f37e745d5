"""
Engine Core - Deterministic duel state management and round resolution.

The engine is the runtime that:
1. Creates a MatchState from a DuelConfig and a seed
2. Validates and applies commands via the reducer
3. Spins reels, resolves combos and the PetJack sub-game
4. Derives an immutable snapshot after every transition

Every draw comes from one seeded generator carried in the state, so a
seed plus a command list reproduces a match exactly.
"""

from .types import (
    Action,
    Element,
    Modifier,
    Column,
    Phase,
    Side,
    MatchOutcome,
    PetJackStage,
    PetJackOutcome,
    PetJackBuff,
)
from .rng import DeterministicRandom
from .weighted import weighted_pick
from .state import MatchState, CombatantState, SlotGrid, SpinOutcome, ComboRow, PetJackState, LogEntry
from .reels import ReelEngine, ReelError
from .elements import ElementalModel
from .combat import CombatResolver, ActionResolution
from .action import Command, CommandType, CommandPayload, CommandResult, ErrorCode
from .action_generator import can_spin, can_respin, legal_commands
from .reducer import Reducer, apply_command, create_match, replay
from .snapshot import MatchSnapshot, build_snapshot

__all__ = [
    "Action",
    "Element",
    "Modifier",
    "Column",
    "Phase",
    "Side",
    "MatchOutcome",
    "PetJackStage",
    "PetJackOutcome",
    "PetJackBuff",
    "DeterministicRandom",
    "weighted_pick",
    "MatchState",
    "CombatantState",
    "SlotGrid",
    "SpinOutcome",
    "ComboRow",
    "PetJackState",
    "LogEntry",
    "ReelEngine",
    "ReelError",
    "ElementalModel",
    "CombatResolver",
    "ActionResolution",
    "Command",
    "CommandType",
    "CommandPayload",
    "CommandResult",
    "ErrorCode",
    "can_spin",
    "can_respin",
    "legal_commands",
    "Reducer",
    "apply_command",
    "create_match",
    "replay",
    "MatchSnapshot",
    "build_snapshot",
]
