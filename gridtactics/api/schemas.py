"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Coordinates travel as two-element [col, row] lists.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or was ended
- UNIT_NOT_FOUND: No unit with that id in the session
- INVALID_SCENARIO: Scenario data failed validation
- NOT_YOUR_TURN: A move was submitted while bots are to play
- MOVE_REJECTED: The engine refused the move (see details.engine_code)
- VALIDATION_ERROR: Malformed request
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    YOUR_TURN = "your_turn"
    BOT_TURN = "bot_turn"
    STOPPED = "stopped"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNIT_NOT_FOUND = "UNIT_NOT_FOUND"
    INVALID_SCENARIO = "INVALID_SCENARIO"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    MOVE_REJECTED = "MOVE_REJECTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """Tile information for display."""
    col: int
    row: int
    tile_type: str
    move_cost: int


class UnitInfo(BaseModel):
    """Unit information for display."""
    unit_id: str
    name: str
    unit_class: str
    unit_type: str
    player_id: str
    level: int
    experience: int
    hp: int
    max_hp: int
    position: Optional[list[int]] = Field(None, description="None once defeated")
    has_moved: bool = False
    is_alive: bool = True
    weapon: Optional[str] = None
    skills: list[str] = Field(default_factory=list)


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    is_human: bool
    is_current_turn: bool = False
    living_units: int = 0
    units: list[UnitInfo] = Field(default_factory=list)


class MoveInfo(BaseModel):
    """A move as sent to or returned by the engine."""
    move_type: str = Field(..., description="move, attack, skill, item or wait")
    start: list[int] = Field(..., min_length=2, max_length=2)
    end: list[int] = Field(..., min_length=2, max_length=2)
    skill: Optional[str] = Field(None, description="Skill name for skill moves")


class StrikeInfo(BaseModel):
    """One resolved strike."""
    attacker_id: str
    defender_id: str
    hit: bool
    critical: bool = False
    damage: int = 0
    defeated: bool = False
    experience: int = 0
    counter: bool = False
    skill: Optional[str] = None


# =============================================================================
# Requests
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    scenario_name: Optional[str] = Field("skirmish", description="Built-in scenario name")
    scenario: Optional[dict[str, Any]] = Field(
        None, description="Full scenario data; overrides scenario_name"
    )
    human_player_id: Optional[str] = Field(
        None, description="Player controlled by the client; defaults to the first player"
    )
    bot_policy: str = Field("tactician", description="random, first_legal or tactician")
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")


class SubmitMoveRequest(MoveInfo):
    """Request to apply a move for the human player."""


# =============================================================================
# Responses
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Session summary."""
    session_id: str
    status: SessionStatus
    scenario_name: str
    human_player_id: Optional[str] = None
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_id: Optional[str] = None
    turn: int = 1
    created_at: float
    bot_moves: list[str] = Field(default_factory=list, description="Bot moves made before the human's turn")


class GameStateResponse(BaseModel):
    """Complete game state for rendering the board."""
    session_id: str
    status: SessionStatus
    columns: int
    rows: int
    tiles: list[TileInfo] = Field(default_factory=list)
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_id: Optional[str] = None
    turn: int = 1
    phase: str
    winner_id: Optional[str] = None
    move_log: list[str] = Field(default_factory=list)


class UnitOptionsResponse(BaseModel):
    """Where a unit may move, attack and use skills this turn."""
    session_id: str
    unit: UnitInfo
    move_locations: list[list[int]] = Field(default_factory=list)
    attack_locations: list[list[int]] = Field(default_factory=list)
    skill_locations: dict[str, list[list[int]]] = Field(default_factory=dict)
    legal_moves: list[MoveInfo] = Field(default_factory=list)


class MoveResponse(BaseModel):
    """Result of a human move and the bot moves that followed."""
    session_id: str
    success: bool
    status: SessionStatus
    changes: list[str] = Field(default_factory=list)
    strikes: list[StrikeInfo] = Field(default_factory=list)
    bot_moves: list[str] = Field(default_factory=list)
    current_player_id: Optional[str] = None
    turn: int = 1
    winner_id: Optional[str] = None


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
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
    environment: str
