"""
Scenario Schema - Pydantic records describing a board and its rosters.

A scenario is pure data: tiles, players, weapon/skill definitions, unit
class templates and unit placements. The loader turns it into a GameModel.

Weapons, skills and templates are referenced by name; names not defined
in the scenario are looked up in the built-in catalog.
"""

from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core.board import TileType
from ..engine_core.skills import DamageKind, SkillKind, SupportEffect, TargetRule
from ..engine_core.units import UnitType


# =============================================================================
# Board
# =============================================================================

class TileRecord(BaseModel):
    """One tile of the board."""
    col: int = Field(ge=0)
    row: int = Field(ge=0)
    tile_type: TileType = TileType.NORMAL
    move_cost: int = Field(default=1, ge=1)


# =============================================================================
# Equipment and skills
# =============================================================================

class SkillRecord(BaseModel):
    """
    A skill definition.

    Only the fields of the skill's kind are used:
    - field: stat, amount
    - single_damage: power, hit_bonus, crit_bonus, damage_kind
    - single_support: effect, power, stat
    """
    name: str = Field(min_length=1)
    kind: SkillKind
    cost: int = Field(default=0, ge=0)
    range: int = Field(default=1, ge=0)
    target_rule: Optional[TargetRule] = None
    can_target_self: bool = False

    power: int = 0
    hit_bonus: int = 0
    crit_bonus: int = 0
    damage_kind: DamageKind = DamageKind.MAGICAL

    effect: SupportEffect = SupportEffect.HEAL
    stat: Optional[str] = None
    amount: int = 0


class WeaponRecord(BaseModel):
    """A weapon definition; `skills` names skills granted while equipped."""
    name: str = Field(min_length=1)
    range: int = Field(default=1, ge=1)
    might: int = 0
    hit: int = 0
    crit: int = 0
    damage_kind: DamageKind = DamageKind.PHYSICAL
    modifiers: dict[str, int] = Field(default_factory=dict)
    skills: list[str] = Field(default_factory=list)


class UnitTemplate(BaseModel):
    """Unit class: movement type, base stats, default weapon and skills."""
    unit_class: str = Field(min_length=1)
    unit_type: UnitType = UnitType.INFANTRY
    stats: dict[str, int] = Field(default_factory=dict)
    weapon: Optional[str] = None
    skills: list[str] = Field(default_factory=list)
    level_up_gains: dict[str, int] = Field(default_factory=dict)


# =============================================================================
# Rosters
# =============================================================================

class PlayerRecord(BaseModel):
    player_id: str = Field(min_length=1)
    name: str = ""


class UnitPlacement(BaseModel):
    """
    A unit on the starting board.

    `player` is the index of the owner in ScenarioSpec.players. Fields left
    unset fall back to the template.
    """
    unit_id: str = Field(min_length=1)
    template: str
    col: int = Field(ge=0)
    row: int = Field(ge=0)
    player: int = Field(ge=0)
    name: Optional[str] = None
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    hp: Optional[int] = Field(default=None, ge=0)
    weapon: Optional[str] = None
    skills: Optional[list[str]] = None
    stats: dict[str, int] = Field(default_factory=dict, description="Overrides of template stats")


# =============================================================================
# Scenario
# =============================================================================

class ScenarioSpec(BaseModel):
    """A complete starting position."""
    name: str = "Untitled"
    columns: int = Field(ge=1)
    rows: int = Field(ge=1)
    tiles: list[TileRecord]
    players: list[PlayerRecord] = Field(min_length=2)
    units: list[UnitPlacement] = Field(default_factory=list)

    weapons: list[WeaponRecord] = Field(default_factory=list)
    skills: list[SkillRecord] = Field(default_factory=list)
    templates: dict[str, UnitTemplate] = Field(default_factory=dict)

    use_catalog: bool = Field(default=True, description="Resolve unknown names from the built-in catalog")


# =============================================================================
# Imported map data
# =============================================================================

class MapTileRecord(BaseModel):
    """
    A tile as exported by the level editor.

    Layer fields hold tile asset names; `player` is 1-based (0 = no unit)
    and `unit` names the unit class placed there.
    """
    column: int = Field(ge=0)
    row: int = Field(ge=0)
    floor: str = ""
    obstacle: str = ""
    wall: str = ""
    player: int = Field(default=0, ge=0)
    unit: str = ""


class MapRecord(BaseModel):
    columns: int = Field(ge=1)
    rows: int = Field(ge=1)
    tile_data: list[MapTileRecord]
