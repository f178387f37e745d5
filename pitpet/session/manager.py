"""
Session Manager - Creates and manages duel sessions.

A DuelSession is the stateful command surface around the pure reducer:
- Holds the current MatchState and the config it is played under
- Routes every command through Reducer.apply()
- Publishes exactly one snapshot to every subscriber per command,
  accepted or rejected

Sessions are EPHEMERAL:
- In-memory only, no persistence
- The battle log lives in the state and is capped in the snapshot
"""

from __future__ import annotations
import logging
import time
import uuid
from typing import Any, Callable

from ..config import DuelConfig, config_from_env
from ..engine_core.action import Command, CommandResult
from ..engine_core.reducer import Reducer, create_match
from ..engine_core.rng import to_uint32
from ..engine_core.snapshot import MatchSnapshot, build_snapshot
from ..engine_core.state import MatchState
from ..engine_core.types import Phase

logger = logging.getLogger(__name__)

Subscriber = Callable[[MatchSnapshot], None]


def clock_seed() -> int:
    """Seed derived from the wall clock, for sessions started without one."""
    return to_uint32(time.time_ns())


class DuelSession:
    """
    One match against the opponent, driven by commands.

    Usage:
        session = DuelSession(seed=42)
        unsubscribe = session.subscribe(render)
        session.spin()
        session.choose_row(0)
    """

    def __init__(
        self,
        config: DuelConfig | None = None,
        seed: int | None = None,
        session_id: str | None = None,
        policy: Any = None,
        default_config: DuelConfig | None = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.created_at = time.time()
        # resetConfig swaps back to this
        self.default_config = default_config or config_from_env()
        self.config = config or self.default_config
        self._policy = policy
        self.reducer = Reducer(config=self.config, policy=policy)
        self.state: MatchState = create_match(self.config, seed=clock_seed() if seed is None else seed)
        self._subscribers: list[Subscriber] = []
        self.last_result: CommandResult | None = None

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    def snapshot(self) -> MatchSnapshot:
        return build_snapshot(self.state, self.config)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a snapshot callback.

        The callback is invoked immediately with the current snapshot and
        again after every command. Returns a function that unsubscribes.
        """
        self._subscribers.append(callback)
        callback(self.snapshot())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _publish(self) -> MatchSnapshot:
        snapshot = self.snapshot()
        logger.debug(
            "Session %s publishing phase=%s round=%d to %d subscriber(s)",
            self.session_id, snapshot.phase.value, snapshot.round, len(self._subscribers),
        )
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception("Subscriber failed in session %s", self.session_id)
        return snapshot

    # ------------------------------------------------------------------
    # Command surface
    # ------------------------------------------------------------------

    def dispatch(self, command: Command) -> CommandResult:
        """Apply a command, store the new state and publish once."""
        result = self.reducer.apply(self.state, command)
        self.state = result.new_state
        self.last_result = result
        self._publish()
        return result

    def spin(self) -> CommandResult:
        return self.dispatch(Command.spin())

    def set_bet(self, tier: Any) -> CommandResult:
        return self.dispatch(Command.set_bet(tier))

    def lock_cell(self, row: Any, column: Any) -> CommandResult:
        return self.dispatch(Command.lock_cell(row, column))

    def respin(self, column: Any) -> CommandResult:
        return self.dispatch(Command.respin(column))

    def choose_row(self, row: Any) -> CommandResult:
        return self.dispatch(Command.choose_row(row))

    def petjack_hit(self) -> CommandResult:
        return self.dispatch(Command.petjack_hit())

    def petjack_stand(self) -> CommandResult:
        return self.dispatch(Command.petjack_stand())

    def apply_petjack_buff(self, buff: Any) -> CommandResult:
        return self.dispatch(Command.petjack_buff(buff))

    def set_seed(self, seed: Any) -> CommandResult:
        return self.dispatch(Command.set_seed(seed))

    def restart_match(self) -> CommandResult:
        return self.dispatch(Command.restart_match())

    def reset_config(self) -> CommandResult:
        """Go back to the session's default config, then reset coins and the match."""
        if self.config is not self.default_config:
            logger.info("Session %s returning to the default config", self.session_id)
            self.config = self.default_config
            self.reducer = Reducer(config=self.config, policy=self._policy)
        return self.dispatch(Command.reset_config())

    @property
    def is_finished(self) -> bool:
        return self.state.phase is Phase.FINISHED


class SessionManager:
    """
    Manages duel sessions.

    Responsibilities:
    - Create sessions under the configured rules
    - Track live sessions
    - Clean up stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: DuelConfig | None = None):
        self.config = config or config_from_env()
        self._sessions: dict[str, DuelSession] = {}

    def create_session(self, seed: int | None = None) -> DuelSession:
        """Create a new session; a missing seed comes from the clock."""
        session = DuelSession(config=self.config, seed=seed)
        self._sessions[session.session_id] = session
        logger.info("Created session %s (seed %d)", session.session_id, session.state.rng_seed)
        return session

    def get_session(self, session_id: str) -> DuelSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info("Ended session %s", session_id)
        return True

    def list_sessions(self) -> list[str]:
        """List IDs of live sessions."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Drop finished sessions older than max_age.

        Returns how many were removed.
        """
        now = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if session.is_finished and now - session.created_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id)
        return len(stale)
