"""
Reducer - Applies commands to match state.

The reducer is the single point of state mutation and the match's
round state machine:

    Idle -> Spun -> (PetJack ->) ResolveTurn -> EndRound -> Idle | Finished

Design principles:
- Pure function: (state, command) -> CommandResult(new_state, events)
- The input state is never mutated; handlers work on a clone
- Validates before applying; a rejection is a log line, never an exception
- The RNG is rebuilt from state.rng_seed and its new seed written back
"""

from __future__ import annotations
import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable

from .action import Command, CommandResult, CommandType, ErrorCode
from .action_generator import can_spin
from .combat import CombatResolver
from .elements import ElementalModel
from . import petjack
from .reels import ReelEngine
from .rng import DeterministicRandom, to_uint32
from .state import CombatantState, LogEntry, MatchState, SpinOutcome
from .types import (
    Column,
    MatchOutcome,
    Modifier,
    Phase,
    PetJackBuff,
    PetJackOutcome,
    PetJackStage,
    Side,
    GRID_SIZE,
)

if TYPE_CHECKING:
    from ..bots.policy import OpponentPolicy
    from ..config import DuelConfig

logger = logging.getLogger(__name__)

RESTART_MARKER = "--- Match restarted ---"


@dataclass
class Rejection:
    """Why a command cannot be applied to a state."""
    message: str
    code: ErrorCode


@dataclass
class Reducer:
    """
    Reducer applies commands to match state.

    Stateless - all state is in MatchState.
    Config provides the rules; the policy plays the opponent.
    """
    config: DuelConfig
    policy: OpponentPolicy | None = None
    reels: ReelEngine = field(init=False)
    elements: ElementalModel = field(init=False)
    combat: CombatResolver = field(init=False)

    def __post_init__(self):
        self.reels = ReelEngine(self.config.reels)
        self.elements = ElementalModel(self.config.elements)
        self.combat = CombatResolver(self.elements)
        if self.policy is None:
            from ..bots.evaluator import ComboEvaluator
            from ..bots.policy import GreedyRespinPolicy
            self.policy = GreedyRespinPolicy(ComboEvaluator(self.elements))

    def apply(self, state: MatchState, command: Command) -> CommandResult:
        """
        Apply a command to the match state.

        Always returns a new state: on rejection it is the old state
        plus one log line explaining why.
        """
        rejection = self._validate_command(state, command)
        if rejection:
            logger.info("Rejected %s: %s", command.command_type.value, rejection.message)
            return self._reject(state, rejection)

        handler = self._get_handler(command.command_type)
        new_state = state.clone()
        first_new_log = len(new_state.logs)
        rng = DeterministicRandom(new_state.rng_seed)

        try:
            handler(new_state, command, rng)
        except Exception:
            logger.exception("Handler for %s failed", command.command_type.value)
            return self._reject(
                state,
                Rejection(f"{command.command_type.value} failed: internal error.", ErrorCode.HANDLER_ERROR),
            )

        new_state.rng_seed = rng.seed
        new_state.command_history.append(command)
        events = [entry.text for entry in new_state.logs[first_new_log:]]
        logger.debug(
            "Applied %s: phase=%s round=%d coins=%d",
            command.command_type.value, new_state.phase.value, new_state.round, new_state.coins,
        )
        return CommandResult.success_with_state(new_state, events=events)

    @staticmethod
    def _reject(state: MatchState, rejection: Rejection) -> CommandResult:
        new_state = state.clone()
        new_state.log(rejection.message)
        return CommandResult.failure(
            rejection.message,
            error_code=rejection.code,
            state=new_state,
            events=[rejection.message],
        )

    def _get_handler(self, command_type: CommandType) -> Callable[[MatchState, Command, DeterministicRandom], None]:
        """Get the handler function for a command type."""
        handlers = {
            CommandType.SPIN: self._handle_spin,
            CommandType.SET_BET: self._handle_set_bet,
            CommandType.LOCK_CELL: self._handle_lock_cell,
            CommandType.RESPIN: self._handle_respin,
            CommandType.CHOOSE_ROW: self._handle_choose_row,
            CommandType.PETJACK_HIT: self._handle_petjack_hit,
            CommandType.PETJACK_STAND: self._handle_petjack_stand,
            CommandType.PETJACK_BUFF: self._handle_petjack_buff,
            CommandType.SET_SEED: self._handle_set_seed,
            CommandType.RESTART_MATCH: self._handle_restart_match,
            CommandType.RESET_CONFIG: self._handle_reset_config,
        }
        return handlers[command_type]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_command(self, state: MatchState, command: Command) -> Rejection | None:
        """
        Check that a command is legal in the current state.

        Returns a Rejection if invalid, None if valid.
        """
        kind = command.command_type
        payload = command.payload

        if kind is CommandType.SPIN:
            if not can_spin(state):
                code = ErrorCode.WRONG_PHASE if state.phase is not Phase.IDLE else ErrorCode.INSUFFICIENT_COINS
                return Rejection("Spin unavailable: check phase or coins.", code)

        elif kind is CommandType.SET_BET:
            if parse_int(payload.bet) not in self.config.bet_tiers:
                return Rejection(f"Bet {payload.bet!r} is not an available tier.", ErrorCode.INVALID_BET)

        elif kind is CommandType.LOCK_CELL:
            if state.phase is not Phase.SPUN or state.player_spin is None:
                return Rejection("Lock unavailable: reels have not been spun.", ErrorCode.WRONG_PHASE)
            row, column = parse_int(payload.row), parse_int(payload.column)
            if not in_grid(row) or not in_grid(column):
                return Rejection(f"Invalid cell ({payload.row!r}, {payload.column!r}).", ErrorCode.INVALID_CELL)
            grid = state.player_spin.grid
            if not grid.is_locked(row, column) and not ReelEngine.can_lock(grid):
                return Rejection("Lock unavailable (lock or respin already used).", ErrorCode.LOCK_UNAVAILABLE)

        elif kind is CommandType.RESPIN:
            if state.phase is not Phase.SPUN or state.player_spin is None:
                return Rejection("Respin unavailable: reels have not been spun.", ErrorCode.WRONG_PHASE)
            if parse_column(payload.column) is None:
                return Rejection(f"Unknown reel column {payload.column!r}.", ErrorCode.INVALID_COLUMN)
            if not ReelEngine.can_respin(state.player_spin.grid):
                return Rejection("Respins unavailable (lock used or already respun).", ErrorCode.RESPIN_UNAVAILABLE)
            if state.coins < self.config.respin_cost(state.bet):
                return Rejection("Not enough coins to respin.", ErrorCode.INSUFFICIENT_COINS)

        elif kind is CommandType.CHOOSE_ROW:
            if state.phase is not Phase.SPUN or state.player_spin is None:
                return Rejection("Row choice unavailable: reels have not been spun.", ErrorCode.WRONG_PHASE)
            if not in_grid(parse_int(payload.row)):
                return Rejection(f"Invalid row {payload.row!r}.", ErrorCode.INVALID_ROW)

        elif kind is CommandType.PETJACK_HIT:
            hand = self._active_hand(state)
            if hand is None or not petjack.can_hit(self.config.petjack, hand):
                return Rejection("PetJack hit unavailable.", ErrorCode.PETJACK_UNAVAILABLE)

        elif kind is CommandType.PETJACK_STAND:
            hand = self._active_hand(state)
            if hand is None or hand.stage not in (PetJackStage.PLAYER_TURN, PetJackStage.DEALER_TURN):
                return Rejection("PetJack stand unavailable.", ErrorCode.PETJACK_UNAVAILABLE)

        elif kind is CommandType.PETJACK_BUFF:
            hand = self._active_hand(state)
            if hand is None or hand.outcome is not PetJackOutcome.PLAYER:
                return Rejection("No PetJack buff to claim.", ErrorCode.PETJACK_UNAVAILABLE)
            if parse_buff(payload.buff) is None:
                return Rejection(f"Unknown PetJack buff {payload.buff!r}.", ErrorCode.INVALID_BUFF)

        elif kind is CommandType.SET_SEED:
            if not is_finite_number(payload.seed):
                return Rejection(f"Invalid seed {payload.seed!r}.", ErrorCode.INVALID_SEED)

        return None

    @staticmethod
    def _active_hand(state: MatchState):
        if state.phase is not Phase.PETJACK:
            return None
        return state.petjack

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _handle_spin(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        """Charge the bet, spin the player's grid, let the opponent spin and choose."""
        bet = state.bet
        state.coins -= bet
        state.total_wagered += bet
        boost = self.config.boost_for(bet)
        for combatant in (state.player, state.ai):
            combatant.bet_boost = boost
            combatant.reset_round_modifiers()

        state.player_spin = self.reels.spin(rng, bet)
        decision = self.policy.play_spin(self.reels, rng, bet, state.ai, state.player)
        state.ai_spin = decision.outcome
        state.ai_row = decision.row
        state.player_row = None
        if decision.respun_column is not None:
            logger.debug("Opponent respun %s", decision.respun_column.value)

        state.phase = Phase.SPUN
        state.log(f"Round {state.round}: reels spun.")

    def _handle_set_bet(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        state.bet = parse_int(command.payload.bet)
        state.log(f"Bet set to {state.bet}.")

    def _handle_lock_cell(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        row = parse_int(command.payload.row)
        column = parse_int(command.payload.column)
        grid = state.player_spin.grid
        releasing = grid.is_locked(row, column)
        state.player_spin = SpinOutcome(grid=self.reels.lock(grid, row, column))
        if releasing:
            state.log(f"Released cell ({row + 1}, {column + 1}).")
        else:
            state.log(f"Locked cell ({row + 1}, {column + 1}).")

    def _handle_respin(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        column = parse_column(command.payload.column)
        cost = self.config.respin_cost(state.bet)
        state.coins -= cost
        state.player_spin = self.reels.respin(column, rng, state.bet, state.player_spin.grid)
        state.log(f"Respins reel {column.value.upper()} for {cost} coins.")

    def _handle_choose_row(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        row = parse_int(command.payload.row)
        state.player_row = row
        combo = state.player_spin.combos[row]
        state.log(f"Player selects {combo.describe()}.")

        if combo.modifier is Modifier.CARD_TICKET:
            state.petjack = petjack.deal(self.config.petjack, rng)
            state.phase = Phase.PETJACK
            hand = state.petjack
            state.log(
                f"PetJack! You hold {hand_text(hand.player_hand)}, "
                f"dealer shows {hand.dealer_hand[0]}."
            )
            return

        self._resolve_round(state, rng)

    def _handle_petjack_hit(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        hand = state.petjack
        card = petjack.player_hit(self.config.petjack, hand, rng)
        state.log(f"PetJack hit: drew {card} ({hand_text(hand.player_hand)}).")
        if hand.stage is PetJackStage.DEALER_TURN:
            self._finish_petjack(state, rng)

    def _handle_petjack_stand(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        hand = state.petjack
        petjack.player_stand(hand)
        state.log(f"PetJack stand on {petjack.hand_value(hand.player_hand)}.")
        self._finish_petjack(state, rng)

    def _finish_petjack(self, state: MatchState, rng: DeterministicRandom) -> None:
        """Dealer plays; a loss or push resolves the round, a win waits for a buff."""
        rules = self.config.petjack
        hand = state.petjack
        outcome = petjack.play_dealer(rules, hand, rng)
        state.log(f"Dealer finishes with {hand_text(hand.dealer_hand)}.")

        if outcome is PetJackOutcome.DEALER:
            state.player.crit_mod -= rules.loss_crit_penalty
            state.log(f"PetJack loss: -{rules.loss_crit_penalty:g}% crit this round.")
        elif outcome is PetJackOutcome.PUSH:
            state.log("PetJack push: no effect.")
        else:
            state.log("PetJack win! Choose a buff.")
            return

        self._resolve_round(state, rng)

    def _handle_petjack_buff(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        buff = parse_buff(command.payload.buff)
        state.log(apply_buff(state.player, buff, self.config))
        self._resolve_round(state, rng)

    def _handle_set_seed(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        rng.set_seed(command.payload.seed)
        state.log(f"Seed set to {rng.seed}.")

    def _handle_restart_match(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        self._restart(state)

    def _handle_reset_config(self, state: MatchState, command: Command, rng: DeterministicRandom) -> None:
        self._restart(state)
        state.coins = self.config.starting_coins
        state.total_wagered = 0
        state.bet = self.config.bet_tiers[0]
        state.log("Config reset to defaults.")

    def _restart(self, state: MatchState) -> None:
        """Fresh combatants and round state; coins, bet and total wagered stay."""
        state.player = CombatantState.create(self.config.player)
        state.ai = CombatantState.create(self.config.ai)
        state.round = 1
        state.player_spin = None
        state.ai_spin = None
        state.player_row = None
        state.ai_row = None
        state.petjack = None
        state.winner = None
        state.logs.append(LogEntry(text=RESTART_MARKER, round=0))
        state.phase = Phase.IDLE

    # ------------------------------------------------------------------
    # Round resolution
    # ------------------------------------------------------------------

    def _resolve_round(self, state: MatchState, rng: DeterministicRandom) -> None:
        """Opponent PetJack, both actions in order, DoT ticks, then the end check."""
        state.petjack = None
        state.phase = Phase.RESOLVE_TURN
        player_combo = state.player_spin.combos[state.player_row]
        ai_combo = state.ai_spin.combos[state.ai_row or 0]
        state.log(f"AI selects {ai_combo.describe()}.")

        if ai_combo.modifier is Modifier.CARD_TICKET:
            self._auto_petjack(state, rng)

        combos = {Side.PLAYER: player_combo, Side.AI: ai_combo}
        for side in self.turn_order(state):
            attacker = state.combatant(side)
            defender = state.combatant(side.opponent)
            if attacker.is_defeated or defender.is_defeated:
                continue
            if attacker.skip_next:
                state.log(f"{attacker.name} skips their action.")
                attacker.skip_next = False
                continue
            combo = combos[side]
            state.log(f"{attacker.name} executes {combo.describe()}.")
            self.combat.resolve(attacker, defender, combo, rng, state.log)
            if defender.is_defeated:
                state.log(f"{defender.name} is defeated!")
                break

        self.combat.tick_end_of_round(state.player, state.ai, state.log)
        state.phase = Phase.END_ROUND
        self._check_match_end(state)

    def _auto_petjack(self, state: MatchState, rng: DeterministicRandom) -> None:
        """Non-interactive PetJack for the opponent: initiative on a win, crit penalty on a loss."""
        rules = self.config.petjack
        hand = petjack.auto_play(rules, rng)
        if hand.outcome is PetJackOutcome.PLAYER:
            state.ai.initiative_boost = True
            state.log("AI wins PetJack: gains Initiative buff.")
        elif hand.outcome is PetJackOutcome.DEALER:
            state.ai.crit_mod -= rules.loss_crit_penalty
            state.log(f"AI loses PetJack: -{rules.loss_crit_penalty:g}% crit.")
        else:
            state.log("AI PetJack push: no effect.")

    @staticmethod
    def turn_order(state: MatchState) -> tuple[Side, Side]:
        """Uncontested initiative first, then higher SPD; ties go to the player."""
        player, ai = state.player, state.ai
        if player.initiative_boost and not ai.initiative_boost:
            return (Side.PLAYER, Side.AI)
        if ai.initiative_boost and not player.initiative_boost:
            return (Side.AI, Side.PLAYER)
        if ai.stats.spd > player.stats.spd:
            return (Side.AI, Side.PLAYER)
        return (Side.PLAYER, Side.AI)

    def _check_match_end(self, state: MatchState) -> None:
        player_down = state.player.is_defeated
        ai_down = state.ai.is_defeated

        if player_down and ai_down:
            state.log("Both pitpets fall! Match draws.")
            self._finish_match(state, MatchOutcome.DRAW)
            return
        if ai_down:
            state.log("Player wins the duel!")
            self._finish_match(state, MatchOutcome.PLAYER)
            return
        if player_down:
            state.log(f"{state.ai.name} wins the duel.")
            self._finish_match(state, MatchOutcome.AI)
            return

        if state.round >= self.config.max_rounds:
            winner = MatchOutcome.PLAYER if state.player.hp >= state.ai.hp else MatchOutcome.AI
            label = "Player" if winner is MatchOutcome.PLAYER else "AI"
            state.log(f"Max rounds reached. Winner: {label}.")
            self._finish_match(state, winner)
            return

        state.round += 1
        state.player.skip_next = False
        state.ai.skip_next = False
        state.player_spin = None
        state.ai_spin = None
        state.petjack = None
        state.phase = Phase.IDLE

    def _finish_match(self, state: MatchState, winner: MatchOutcome) -> None:
        """Pay out and enter the terminal phase."""
        payout = 0
        if winner is MatchOutcome.PLAYER:
            payout = state.bet * 2
        elif winner is MatchOutcome.AI:
            payout = math.floor(state.total_wagered * 0.1)
        state.coins += payout
        if payout:
            state.log(f"Payout: {payout} coins.")
        state.winner = winner
        state.phase = Phase.FINISHED


def apply_buff(combatant: CombatantState, buff: PetJackBuff, config: DuelConfig) -> str:
    """Apply a PetJack win buff for this round; returns the log line."""
    if buff is PetJackBuff.INITIATIVE:
        combatant.initiative_boost = True
        return "PetJack buff: Initiative secured."
    if buff is PetJackBuff.CRIT:
        combatant.crit_mod += config.petjack.crit_buff
        return f"PetJack buff: +{config.petjack.crit_buff:g}% Crit this round."
    combatant.status_mod += config.petjack.status_buff
    return f"PetJack buff: +{config.petjack.status_buff:g} Status chance this round."


def hand_text(cards: list[int]) -> str:
    return f"{'-'.join(str(card) for card in cards)} = {petjack.hand_value(cards)}"


def parse_int(value: Any) -> int | None:
    """Integral value of a UI argument, or None. Bools and fractional floats are refused."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    return int(value)


def in_grid(index: int | None) -> bool:
    return index is not None and 0 <= index < GRID_SIZE


def is_finite_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    # Ints of any size are finite and may not fit a float.
    if isinstance(value, numbers.Integral):
        return True
    return math.isfinite(value)


def parse_column(value: Any) -> Column | None:
    if isinstance(value, Column):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key == "mod":
            return Column.MODIFIER
        for column in Column:
            if column.value == key:
                return column
    return None


def parse_buff(value: Any) -> PetJackBuff | None:
    if isinstance(value, PetJackBuff):
        return value
    if isinstance(value, str):
        for buff in PetJackBuff:
            if buff.value == value.strip().lower():
                return buff
    return None


def create_match(config: DuelConfig | None = None, seed: int = 0) -> MatchState:
    """Initial state for a match under `config` (defaults when omitted)."""
    if config is None:
        from ..config import create_default_config
        config = create_default_config()
    return MatchState.create(config, seed=to_uint32(seed))


def apply_command(config: DuelConfig, state: MatchState, command: Command) -> CommandResult:
    """
    Convenience function to apply a command.

    Creates a Reducer and applies the command.
    """
    return Reducer(config=config).apply(state, command)


def replay(reducer: Reducer, state: MatchState, commands: Iterable[Command]) -> MatchState:
    """Apply commands in order, rejected ones included, and return the final state."""
    for command in commands:
        state = reducer.apply(state, command).new_state
    return state
