"""
FastAPI Application - local HTTP/WebSocket adapter for a duel UI.

Endpoints:
    GET    /health                                  Health check
    POST   /api/v1/sessions                         Start a duel
    GET    /api/v1/sessions                         List sessions
    GET    /api/v1/sessions/{id}                    Current snapshot
    DELETE /api/v1/sessions/{id}                    End a session
    POST   /api/v1/sessions/{id}/spin               Spin the reels
    POST   /api/v1/sessions/{id}/bet                Change bet tier
    POST   /api/v1/sessions/{id}/lock               Lock/release a cell
    POST   /api/v1/sessions/{id}/respin             Respin one column
    POST   /api/v1/sessions/{id}/row                Choose a row
    POST   /api/v1/sessions/{id}/petjack/hit        PetJack hit
    POST   /api/v1/sessions/{id}/petjack/stand      PetJack stand
    POST   /api/v1/sessions/{id}/petjack/buff       Claim PetJack buff
    POST   /api/v1/sessions/{id}/seed               Reseed the RNG
    POST   /api/v1/sessions/{id}/restart            Restart the match
    POST   /api/v1/sessions/{id}/reset              Reset config and coins
    WS     /api/v1/sessions/{id}/ws                 Snapshot stream

Every command endpoint answers 200 with a CommandResponse, accepted or
not; only an unknown session is an HTTP error (404).
"""

from typing import Optional, Union
import json
import logging
import os

# Environment configuration
PITPET_ENV = os.getenv("PITPET_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, WebSocket, WebSocketDisconnect
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .. import __version__
    from ..engine_core.action import Command
    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        BetRequest,
        LockRequest,
        RespinRequest,
        RowRequest,
        BuffRequest,
        SeedRequest,
        # Response models
        CommandResponse,
        SessionResponse,
        SessionListResponse,
        EndSessionResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Pitpet Duel API",
        description="""
Seeded reel duel engine - one player against the opponent policy.

Every command returns the full snapshot. A command the match cannot take
(wrong phase, no coins, used lock...) is answered with `accepted=false`,
the engine's `error_code`, and a snapshot whose log explains why.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Request body could not be used |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # WebSocket connections
    ws_connections: dict[str, list[WebSocket]] = {}

    # =========================================================================
    # Helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message, error_code=error_code).model_dump(mode="json"),
        )

    def session_not_found(session_id: str) -> JSONResponse:
        return make_error_response(
            ErrorCode.SESSION_NOT_FOUND,
            f"Session {session_id} not found",
            status_code=404,
        )

    async def broadcast_to_session(session_id: str, message: dict):
        """Send a message to every WebSocket watching a session."""
        if session_id in ws_connections:
            dead_connections = []
            for ws in ws_connections[session_id]:
                try:
                    await ws.send_json(message)
                except (WebSocketDisconnect, RuntimeError):
                    dead_connections.append(ws)
            for ws in dead_connections:
                ws_connections[session_id].remove(ws)

    async def run_command(session_id: str, command: Command) -> Union[CommandResponse, JSONResponse]:
        response = api_service.run_command(session_id, command)
        if response is None:
            return session_not_found(session_id)
        await broadcast_to_session(session_id, {
            "type": "snapshot",
            "payload": response.snapshot.model_dump(mode="json"),
        })
        return response

    command_responses = {404: {"model": ErrorResponse, "description": "Session not found"}}

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Start a new duel",
    )
    async def create_session(request: Optional[CreateSessionRequest] = None) -> SessionResponse:
        """Start a duel. Omit the seed for a clock-derived one."""
        return api_service.create_session(seed=request.seed if request else None)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List live sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses=command_responses,
        tags=["Sessions"],
        summary="Get the current snapshot",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        snapshot = api_service.get_snapshot(session_id)
        if snapshot is None:
            return session_not_found(session_id)
        return SessionResponse(session_id=session_id, snapshot=snapshot)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a session and release it."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Command Endpoints
    # =========================================================================

    @app.post("/api/v1/sessions/{session_id}/spin", response_model=CommandResponse,
              responses=command_responses, tags=["Round"], summary="Spin the reels")
    async def spin(session_id: str):
        return await run_command(session_id, Command.spin())

    @app.post("/api/v1/sessions/{session_id}/bet", response_model=CommandResponse,
              responses=command_responses, tags=["Economy"], summary="Change the bet tier")
    async def set_bet(session_id: str, request: BetRequest):
        return await run_command(session_id, Command.set_bet(request.bet))

    @app.post("/api/v1/sessions/{session_id}/lock", response_model=CommandResponse,
              responses=command_responses, tags=["Round"], summary="Lock or release a cell")
    async def lock_cell(session_id: str, request: LockRequest):
        return await run_command(session_id, Command.lock_cell(request.row, request.column))

    @app.post("/api/v1/sessions/{session_id}/respin", response_model=CommandResponse,
              responses=command_responses, tags=["Round"], summary="Respin one column")
    async def respin(session_id: str, request: RespinRequest):
        return await run_command(session_id, Command.respin(request.column))

    @app.post("/api/v1/sessions/{session_id}/row", response_model=CommandResponse,
              responses=command_responses, tags=["Round"], summary="Choose a row")
    async def choose_row(session_id: str, request: RowRequest):
        return await run_command(session_id, Command.choose_row(request.row))

    @app.post("/api/v1/sessions/{session_id}/petjack/hit", response_model=CommandResponse,
              responses=command_responses, tags=["PetJack"], summary="Take one more card")
    async def petjack_hit(session_id: str):
        return await run_command(session_id, Command.petjack_hit())

    @app.post("/api/v1/sessions/{session_id}/petjack/stand", response_model=CommandResponse,
              responses=command_responses, tags=["PetJack"], summary="Stand and let the dealer play")
    async def petjack_stand(session_id: str):
        return await run_command(session_id, Command.petjack_stand())

    @app.post("/api/v1/sessions/{session_id}/petjack/buff", response_model=CommandResponse,
              responses=command_responses, tags=["PetJack"], summary="Claim the PetJack win buff")
    async def petjack_buff(session_id: str, request: BuffRequest):
        return await run_command(session_id, Command.petjack_buff(request.buff))

    @app.post("/api/v1/sessions/{session_id}/seed", response_model=CommandResponse,
              responses=command_responses, tags=["Match"], summary="Reseed the RNG")
    async def set_seed(session_id: str, request: SeedRequest):
        return await run_command(session_id, Command.set_seed(request.seed))

    @app.post("/api/v1/sessions/{session_id}/restart", response_model=CommandResponse,
              responses=command_responses, tags=["Match"], summary="Restart the match")
    async def restart_match(session_id: str):
        return await run_command(session_id, Command.restart_match())

    @app.post("/api/v1/sessions/{session_id}/reset", response_model=CommandResponse,
              responses=command_responses, tags=["Match"], summary="Reset config, coins and match")
    async def reset_config(session_id: str):
        return await run_command(session_id, Command.reset_config())

    # =========================================================================
    # WebSocket
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        Snapshot stream for one session.

        Messages from server:
        - snapshot: sent on connect and after every command
        - error: unknown session or bad client message

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        snapshot = api_service.get_snapshot(session_id)
        if snapshot is None:
            await websocket.send_json({
                "type": "error",
                "payload": {"message": f"Session {session_id} not found"},
            })
            await websocket.close(code=4404)
            return

        ws_connections.setdefault(session_id, []).append(websocket)
        try:
            await websocket.send_json({"type": "snapshot", "payload": snapshot.model_dump(mode="json")})
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect:
            logger.debug("WebSocket for session %s disconnected", session_id)
        finally:
            if websocket in ws_connections.get(session_id, []):
                ws_connections[session_id].remove(websocket)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", service="pitpet-duel", version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Pitpet Duel API",
            "version": __version__,
            "environment": PITPET_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
