"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/sessions                              Create game session
    GET    /api/v1/sessions                              List active sessions
    GET    /api/v1/sessions/{id}                         Get session status
    DELETE /api/v1/sessions/{id}                         End session
    GET    /api/v1/sessions/{id}/state                   Get full game state
    GET    /api/v1/sessions/{id}/units/{unit_id}/options Move/attack/skill locations
    POST   /api/v1/sessions/{id}/moves                   Submit a human move

Bot Execution Flow:
    1. POST /sessions creates the game; bots that play first move immediately
    2. POST /moves applies the human move
    3. Bots then play until the human is up again or the game ends
    4. Response includes bot_moves and the combat strikes of the human move

All responses are JSON with explicit Pydantic schemas.

Run with: uvicorn gridtactics.api.app:create_app --factory
"""

from typing import Annotated, Optional, Union
import os

# Environment configuration
GRIDTACTICS_ENV = os.getenv("GRIDTACTICS_ENV", "development")
GRIDTACTICS_DEFAULT_SEED = os.getenv("GRIDTACTICS_DEFAULT_SEED", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

API_VERSION = "1.0.0"


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Query
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        SubmitMoveRequest,
        # Response models
        SessionResponse,
        GameStateResponse,
        UnitOptionsResponse,
        MoveResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )
    from ..scenario import ScenarioError

    app = FastAPI(
        title="Grid Tactics API",
        description="""
Turn-based grid tactics engine with computer-controlled opponents.

## Game Flow

1. `POST /api/v1/sessions` picks a built-in scenario or uploads one
2. `GET /units/{unit_id}/options` lists where a unit may act
3. `POST /moves` applies a move; bots answer in the same response

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `UNIT_NOT_FOUND` | Unit does not exist in the session |
| `INVALID_SCENARIO` | Scenario data failed validation |
| `NOT_YOUR_TURN` | Bots are to play |
| `MOVE_REJECTED` | Engine refused the move |
| `VALIDATION_ERROR` | Malformed request |
        """,
        version=API_VERSION,
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

    # Service instance
    default_seed = int(GRIDTACTICS_DEFAULT_SEED) if GRIDTACTICS_DEFAULT_SEED else None
    api_service = service or APIService(default_seed=default_seed)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_to_response(error: ErrorResponse) -> JSONResponse:
        """Send a service-level error with the matching HTTP status."""
        not_found = {ErrorCode.SESSION_NOT_FOUND, ErrorCode.UNIT_NOT_FOUND}
        return JSONResponse(
            status_code=404 if error.error_code in not_found else 400,
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid scenario or parameters"},
        },
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Use `scenario_name` for a built-in scenario (`skirmish`, `duel`),
        or send full scenario data in `scenario`.
        """
        try:
            return api_service.create_session(body)
        except ScenarioError as e:
            return make_error_response(
                ErrorCode.INVALID_SCENARIO,
                "Scenario is invalid",
                details={"errors": e.errors},
            )
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        response = api_service.get_session(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> Union[EndSessionResponse, JSONResponse]:
        """End a game session and release resources."""
        if not api_service.end_session(session_id, reason):
            return make_error_response(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} not found",
                status_code=404,
            )
        return EndSessionResponse(success=True, session_id=session_id)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Get the board, rosters and turn information for display."""
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.get(
        "/api/v1/sessions/{session_id}/units/{unit_id}/options",
        response_model=UnitOptionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get a unit's move, attack and skill locations",
    )
    async def get_unit_options(session_id: str, unit_id: str) -> Union[UnitOptionsResponse, JSONResponse]:
        """
        Get where a unit may act.

        `legal_moves` is empty unless the unit can act now.
        `attack_locations` and `skill_locations` cover every tile reachable
        after a relocation, for highlighting.
        """
        response = api_service.get_unit_options(session_id, unit_id)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/moves",
        response_model=MoveResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Move rejected"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Submit a move for the human player",
    )
    async def submit_move(session_id: str, body: SubmitMoveRequest) -> Union[MoveResponse, JSONResponse]:
        """
        Apply a move, then run the bots.

        **Request Body:**
        ```json
        {"move_type": "attack", "start": [1, 2], "end": [1, 3]}
        ```
        """
        response = api_service.submit_move(session_id, body)
        if isinstance(response, ErrorResponse):
            return error_to_response(response)
        return response

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
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="gridtactics",
            version=API_VERSION,
            environment=GRIDTACTICS_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Grid Tactics API",
            "version": API_VERSION,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
