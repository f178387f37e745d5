"""
Pydantic Schemas for API - request/response models for OpenAPI.

These models define the contract between a local UI and the engine.
Snapshots are embedded as the engine's own MatchSnapshot model.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or was ended
- VALIDATION_ERROR: Request body could not be used
- INTERNAL_ERROR: Unexpected server failure

Rejected game commands are not HTTP errors: they return 200 with
accepted=false and the engine's own error_code.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from ..engine_core.snapshot import MatchSnapshot


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured API error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new duel."""
    seed: Optional[int] = Field(None, description="RNG seed; derived from the clock when omitted")


class BetRequest(BaseModel):
    bet: int = Field(..., description="One of the configured bet tiers")


class LockRequest(BaseModel):
    """Lock (or release) a cell of the player's grid."""
    row: int = Field(..., description="Row index 0-2")
    column: int = Field(..., description="Column index 0-2 (action, element, modifier)")


class RespinRequest(BaseModel):
    column: str = Field(..., description="action, element or modifier")


class RowRequest(BaseModel):
    row: int = Field(..., description="Row index 0-2")


class BuffRequest(BaseModel):
    buff: str = Field(..., description="initiative, crit or status")


class SeedRequest(BaseModel):
    seed: Union[int, float] = Field(..., description="Any finite number; wrapped to 32 bits")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """A session and its current snapshot."""
    session_id: str
    snapshot: MatchSnapshot


class CommandResponse(BaseModel):
    """Outcome of one game command."""
    accepted: bool
    error: Optional[str] = None
    error_code: Optional[str] = Field(None, description="Engine rejection code when not accepted")
    events: list[str] = Field(default_factory=list, description="Battle-log lines the command appended")
    snapshot: MatchSnapshot


class SessionListResponse(BaseModel):
    """Response listing live sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
