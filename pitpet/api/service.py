"""
API Service - Business logic layer between the HTTP app and the sessions.

The service:
1. Creates, lists and ends sessions
2. Turns API calls into engine commands
3. Formats command results for the UI

This layer is framework-agnostic; FastAPI only lives in app.py.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import CommandResponse, SessionResponse
from ..engine_core.action import Command, CommandType
from ..engine_core.snapshot import MatchSnapshot
from ..session import SessionManager

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        created = service.create_session(seed=42)
        response = service.run_command(created.session_id, Command.spin())
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_session(self, seed: int | None = None) -> SessionResponse:
        session = self.session_manager.create_session(seed=seed)
        return SessionResponse(session_id=session.session_id, snapshot=session.snapshot())

    def get_snapshot(self, session_id: str) -> MatchSnapshot | None:
        session = self.session_manager.get_session(session_id)
        if session is None:
            return None
        return session.snapshot()

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id)

    def run_command(self, session_id: str, command: Command) -> CommandResponse | None:
        """
        Apply a command to a session.

        Returns None when the session does not exist. A rejected command
        is still a response: accepted=false plus the republished snapshot.
        """
        session = self.session_manager.get_session(session_id)
        if session is None:
            return None

        if command.command_type is CommandType.RESET_CONFIG:
            result = session.reset_config()
        else:
            result = session.dispatch(command)

        if not result.success:
            logger.info("Session %s rejected %s: %s", session_id, command.command_type.value, result.error)

        return CommandResponse(
            accepted=result.success,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
            events=result.events,
            snapshot=session.snapshot(),
        )
