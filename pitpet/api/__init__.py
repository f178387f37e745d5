"""
API Module - Local UI interface.

Exposes duel sessions over HTTP and WebSocket. A UI:
1. Creates a session (optionally seeded)
2. Sends commands (spin, lock, respin, row, PetJack...)
3. Renders the snapshot every response carries

All state is session-scoped and in-memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    BetRequest,
    LockRequest,
    RespinRequest,
    RowRequest,
    BuffRequest,
    SeedRequest,
    # Responses
    CommandResponse,
    SessionResponse,
    SessionListResponse,
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "BetRequest",
    "LockRequest",
    "RespinRequest",
    "RowRequest",
    "BuffRequest",
    "SeedRequest",
    # Responses
    "CommandResponse",
    "SessionResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "ErrorResponse",
    "HealthResponse",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
