"""
Action System - moves, error codes and results.

Moves represent one unit's choice for this turn:
1. MOVE - relocate (does not end the unit's turn)
2. ATTACK / SKILL - resolve an exchange and end the unit's turn
3. WAIT - end the unit's turn
4. ITEM - declared but not supported; always fails

All state changes flow through GameModel.apply_move().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .board import Coord

if TYPE_CHECKING:
    from .skills import Skill


class MoveType(Enum):
    """Kinds of moves a unit can make."""
    MOVE = "move"
    ATTACK = "attack"
    SKILL = "skill"
    ITEM = "item"
    WAIT = "wait"


class ErrorCode(Enum):
    """Why a move was rejected."""
    INVALID_MOVE = "invalid_move"
    UNSUPPORTED_MOVE_TYPE = "unsupported_move_type"
    ILLEGAL_SKILL_TARGET = "illegal_skill_target"
    NOT_CURRENT_PLAYER = "not_current_player"
    UNIT_ALREADY_MOVED = "unit_already_moved"
    SKILL_NOT_AVAILABLE = "skill_not_available"
    INSUFFICIENT_HP = "insufficient_hp"
    GAME_NOT_STARTED = "game_not_started"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameMove:
    """
    A complete move to be applied to the game.

    `start` is the acting unit's tile; `end` is the destination for MOVE,
    the target tile for ATTACK/SKILL and the unit's own tile for WAIT.
    """
    move_type: MoveType
    start: Coord
    end: Coord
    skill: Skill | None = None

    def __post_init__(self):
        object.__setattr__(self, "start", Coord(*self.start))
        object.__setattr__(self, "end", Coord(*self.end))

    @classmethod
    def move(cls, start, end) -> GameMove:
        """Factory for a relocation."""
        return cls(move_type=MoveType.MOVE, start=start, end=end)

    @classmethod
    def attack(cls, start, target) -> GameMove:
        """Factory for a weapon attack on the unit at target."""
        return cls(move_type=MoveType.ATTACK, start=start, end=target)

    @classmethod
    def use_skill(cls, start, target, skill: Skill) -> GameMove:
        """Factory for an active skill aimed at target."""
        return cls(move_type=MoveType.SKILL, start=start, end=target, skill=skill)

    @classmethod
    def wait(cls, start) -> GameMove:
        """Factory for ending a unit's turn in place."""
        return cls(move_type=MoveType.WAIT, start=start, end=start)

    @classmethod
    def item(cls, start, target) -> GameMove:
        return cls(move_type=MoveType.ITEM, start=start, end=target)

    def describe(self) -> str:
        if self.move_type == MoveType.SKILL and self.skill:
            return f"{self.skill.name} {self.start} -> {self.end}"
        return f"{self.move_type.value} {self.start} -> {self.end}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "move_type": self.move_type.value,
            "start": list(self.start),
            "end": list(self.end),
            "skill": self.skill.name if self.skill else None,
        }


@dataclass(frozen=True)
class StrikeRecord:
    """One resolved strike within an exchange."""
    attacker_id: str
    defender_id: str
    hit: bool
    critical: bool = False
    damage: int = 0
    defeated: bool = False
    experience: int = 0
    counter: bool = False
    skill: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attacker_id": self.attacker_id,
            "defender_id": self.defender_id,
            "hit": self.hit,
            "critical": self.critical,
            "damage": self.damage,
            "defeated": self.defeated,
            "experience": self.experience,
            "counter": self.counter,
            "skill": self.skill,
        }


@dataclass
class MoveResult:
    """
    Result of applying a move.

    Contains:
    - Whether the move succeeded
    - Error message and code (if failed)
    - Human-readable changes and strike details (for the UI)
    """
    success: bool
    error: str | None = None
    error_code: ErrorCode | None = None

    changes: list[str] = field(default_factory=list)
    strikes: list[StrikeRecord] = field(default_factory=list)

    turn_advanced: bool = False
    game_over: bool = False

    @classmethod
    def failure(cls, error: str, error_code: ErrorCode = ErrorCode.INVALID_MOVE) -> MoveResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(
        cls,
        changes: list[str] | None = None,
        strikes: list[StrikeRecord] | None = None,
    ) -> MoveResult:
        """Create a success result."""
        return cls(success=True, changes=changes or [], strikes=strikes or [])
