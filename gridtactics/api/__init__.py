"""
API Module - HTTP interface for game clients.

Exposes the engine via REST API.
The client:
1. Creates a game session from a scenario
2. Reads the board state and unit options
3. Submits moves; bot replies come back in the same response

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    SubmitMoveRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    UnitOptionsResponse,
    MoveResponse,
    ErrorResponse,
    # Shared
    TileInfo,
    UnitInfo,
    PlayerInfo,
    MoveInfo,
    StrikeInfo,
    ErrorCode,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SubmitMoveRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "UnitOptionsResponse",
    "MoveResponse",
    "ErrorResponse",
    # Shared
    "TileInfo",
    "UnitInfo",
    "PlayerInfo",
    "MoveInfo",
    "StrikeInfo",
    "ErrorCode",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
