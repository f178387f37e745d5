"""
Command System - Commands, payloads, and results.

Commands represent everything the UI layer can ask of a match:
1. Round flow (spin, lock, respin, choose row)
2. The PetJack interaction (hit, stand, buff)
3. Economy and housekeeping (bet, seed, restart, reset)

All state changes flow through commands.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CommandType(Enum):
    """Types of commands a match accepts."""
    SPIN = "spin"
    SET_BET = "set_bet"
    LOCK_CELL = "lock_cell"
    RESPIN = "respin"
    CHOOSE_ROW = "choose_row"

    PETJACK_HIT = "petjack_hit"
    PETJACK_STAND = "petjack_stand"
    PETJACK_BUFF = "petjack_buff"

    SET_SEED = "set_seed"
    RESTART_MATCH = "restart_match"
    RESET_CONFIG = "reset_config"


class ErrorCode(str, Enum):
    """Machine-readable rejection reasons."""
    WRONG_PHASE = "WRONG_PHASE"
    INSUFFICIENT_COINS = "INSUFFICIENT_COINS"
    LOCK_UNAVAILABLE = "LOCK_UNAVAILABLE"
    RESPIN_UNAVAILABLE = "RESPIN_UNAVAILABLE"
    INVALID_ROW = "INVALID_ROW"
    INVALID_CELL = "INVALID_CELL"
    INVALID_COLUMN = "INVALID_COLUMN"
    INVALID_SEED = "INVALID_SEED"
    INVALID_BET = "INVALID_BET"
    INVALID_BUFF = "INVALID_BUFF"
    PETJACK_UNAVAILABLE = "PETJACK_UNAVAILABLE"
    HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class CommandPayload:
    """
    Parameters for a command.

    Values arrive from the UI unchecked (a row may be 7, a seed may be
    NaN, a column may be a typo); validation happens in the reducer.
    """
    row: Any = None
    column: Any = None
    bet: Any = None
    buff: Any = None
    seed: Any = None


@dataclass
class Command:
    """
    A complete command to be applied to a match.

    Commands are:
    - Recorded for replay when accepted
    - Validated before application
    - Applied atomically by the reducer
    """
    command_type: CommandType
    payload: CommandPayload = field(default_factory=CommandPayload)

    @classmethod
    def spin(cls) -> Command:
        return cls(CommandType.SPIN)

    @classmethod
    def set_bet(cls, bet: Any) -> Command:
        """Factory for bet tier change."""
        return cls(CommandType.SET_BET, CommandPayload(bet=bet))

    @classmethod
    def lock_cell(cls, row: Any, column: Any) -> Command:
        """Factory for locking (or releasing) a cell of the player's grid."""
        return cls(CommandType.LOCK_CELL, CommandPayload(row=row, column=column))

    @classmethod
    def respin(cls, column: Any) -> Command:
        """Factory for a single-column respin; column is action, element or modifier."""
        return cls(CommandType.RESPIN, CommandPayload(column=column))

    @classmethod
    def choose_row(cls, row: Any) -> Command:
        return cls(CommandType.CHOOSE_ROW, CommandPayload(row=row))

    @classmethod
    def petjack_hit(cls) -> Command:
        return cls(CommandType.PETJACK_HIT)

    @classmethod
    def petjack_stand(cls) -> Command:
        return cls(CommandType.PETJACK_STAND)

    @classmethod
    def petjack_buff(cls, buff: Any) -> Command:
        """Factory for the buff choice after a PetJack win."""
        return cls(CommandType.PETJACK_BUFF, CommandPayload(buff=buff))

    @classmethod
    def set_seed(cls, seed: Any) -> Command:
        return cls(CommandType.SET_SEED, CommandPayload(seed=seed))

    @classmethod
    def restart_match(cls) -> Command:
        return cls(CommandType.RESTART_MATCH)

    @classmethod
    def reset_config(cls) -> Command:
        return cls(CommandType.RESET_CONFIG)


@dataclass
class CommandResult:
    """
    Result of applying a command.

    Contains:
    - Whether the command was accepted
    - The new state (always present; a rejection still appends a log line)
    - Error and error code (if rejected)
    - Events: the battle-log lines the transition appended
    """
    success: bool
    new_state: Any | None = None  # MatchState
    error: str | None = None
    error_code: ErrorCode | None = None
    events: list[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: ErrorCode | None = None,
        state: Any | None = None,
        events: list[str] | None = None,
    ) -> CommandResult:
        """Create a failure result."""
        return cls(
            success=False,
            new_state=state,
            error=error,
            error_code=error_code,
            events=events or [],
        )

    @classmethod
    def success_with_state(cls, state: Any, events: list[str] | None = None) -> CommandResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, events=events or [])
