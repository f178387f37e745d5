"""
Command Generator - Gating flags and the legal commands for a state.

Used by:
1. The snapshot (canSpin / canRespins flags)
2. Bots and the CLI autoplayer to enumerate moves
3. Tests (every generated command must be accepted)

Generates fully specified Command objects, not just command types.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .action import Command
from .reels import ReelEngine
from .state import MatchState
from .types import Column, Phase, PetJackBuff, PetJackStage, GRID_SIZE

if TYPE_CHECKING:
    from ..config import DuelConfig


def can_spin(state: MatchState) -> bool:
    return state.phase is Phase.IDLE and state.coins >= state.bet


def can_respin(state: MatchState, config: DuelConfig) -> bool:
    """Spun, the player's grid has neither privilege used, and the cost is affordable."""
    if state.phase is not Phase.SPUN or state.player_spin is None:
        return False
    if not ReelEngine.can_respin(state.player_spin.grid):
        return False
    return state.coins >= config.respin_cost(state.bet)


def respin_flags(state: MatchState, config: DuelConfig) -> dict[Column, bool]:
    allowed = can_respin(state, config)
    return {column: allowed for column in Column}


def legal_commands(state: MatchState, config: DuelConfig) -> list[Command]:
    """
    All round-flow commands the reducer would accept right now.

    Housekeeping commands (bet, seed, restart, reset) are always legal
    and are not listed.
    """
    commands: list[Command] = []

    if can_spin(state):
        commands.append(Command.spin())

    if state.phase is Phase.SPUN and state.player_spin is not None:
        grid = state.player_spin.grid
        for row in range(GRID_SIZE):
            for column in range(GRID_SIZE):
                if ReelEngine.can_lock(grid) or grid.is_locked(row, column):
                    commands.append(Command.lock_cell(row, column))
        if can_respin(state, config):
            commands.extend(Command.respin(column.value) for column in Column)
        commands.extend(Command.choose_row(row) for row in range(GRID_SIZE))

    if state.phase is Phase.PETJACK and state.petjack is not None:
        hand = state.petjack
        if hand.stage is PetJackStage.PLAYER_TURN:
            if len(hand.player_hand) < config.petjack.max_hand_size:
                commands.append(Command.petjack_hit())
            commands.append(Command.petjack_stand())
        elif hand.stage is PetJackStage.BUFF:
            commands.extend(Command.petjack_buff(buff.value) for buff in PetJackBuff)

    return commands
