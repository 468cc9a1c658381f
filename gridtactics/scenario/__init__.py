"""
Scenario Module - loading boards and rosters, saving and restoring games.

Scenarios are validated pydantic records. Loading collects every problem
into a single ScenarioError before any GameModel is built.
"""

from .schema import (
    TileRecord,
    SkillRecord,
    WeaponRecord,
    UnitTemplate,
    PlayerRecord,
    UnitPlacement,
    ScenarioSpec,
    MapTileRecord,
    MapRecord,
)
from .validation import ScenarioError, ValidationResult, validate_scenario
from .loader import load_scenario, load_scenario_file, build_game, build_unit
from .map_import import scenario_from_map
from .snapshot import GameSnapshot, UnitSnapshot, PlayerSnapshot, take_snapshot, restore_game

__all__ = [
    "TileRecord",
    "SkillRecord",
    "WeaponRecord",
    "UnitTemplate",
    "PlayerRecord",
    "UnitPlacement",
    "ScenarioSpec",
    "MapTileRecord",
    "MapRecord",
    "ScenarioError",
    "ValidationResult",
    "validate_scenario",
    "load_scenario",
    "load_scenario_file",
    "build_game",
    "build_unit",
    "scenario_from_map",
    "GameSnapshot",
    "UnitSnapshot",
    "PlayerSnapshot",
    "take_snapshot",
    "restore_game",
]
