"""
Engine Core - Deterministic tactics rules.

The engine is the runtime that:
1. Holds the board (tiles, occupancy) and the rosters
2. Answers movement, attack and skill range queries
3. Generates legal moves
4. Applies moves via the reducer
5. Resolves combat exchanges from an injected random source
"""

from .board import Coord, Tile, TileGraph, TileType
from .units import Unit, UnitType, Stats, Weapon, MOVEMENT_RULES
from .skills import (
    Skill,
    SkillKind,
    FieldSkill,
    SingleTargetSkill,
    SingleDamageSkill,
    SingleSupportSkill,
    DamageKind,
    TargetRule,
    SupportEffect,
)
from .damage import DamageCalculator, RandomSource, dice_roll
from .pathing import PathPlanner, WeightedGraph
from .state import GameState, GamePhase, Player, Board, BoardSetupError
from .action import GameMove, MoveType, MoveResult, ErrorCode, StrikeRecord
from .action_generator import ActionGenerator, legal_moves, is_legal
from .combat import CombatResolver
from .reducer import Reducer
from .model import GameModel

__all__ = [
    "Coord",
    "Tile",
    "TileGraph",
    "TileType",
    "Unit",
    "UnitType",
    "Stats",
    "Weapon",
    "MOVEMENT_RULES",
    "Skill",
    "SkillKind",
    "FieldSkill",
    "SingleTargetSkill",
    "SingleDamageSkill",
    "SingleSupportSkill",
    "DamageKind",
    "TargetRule",
    "SupportEffect",
    "DamageCalculator",
    "RandomSource",
    "dice_roll",
    "PathPlanner",
    "WeightedGraph",
    "GameState",
    "GamePhase",
    "Player",
    "Board",
    "BoardSetupError",
    "GameMove",
    "MoveType",
    "MoveResult",
    "ErrorCode",
    "StrikeRecord",
    "ActionGenerator",
    "legal_moves",
    "is_legal",
    "CombatResolver",
    "Reducer",
    "GameModel",
]
