"""
Scenario Validation - Consistency checks for scenario records.

Validates that:
1. Tiles lie on the board and are unique
2. References resolve (templates, weapons, skills, player indices)
3. Units stand on existing, distinct tiles
4. Stat names are known

Every problem is collected; nothing stops at the first error.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.board import TileType
from ..engine_core.skills import SkillKind, SupportEffect
from ..engine_core.units import STAT_NAMES
from .schema import ScenarioSpec, SkillRecord, UnitTemplate, WeaponRecord


class ScenarioError(Exception):
    """Raised when scenario data is malformed. Lists every problem found."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        details = "\n".join(f"- {e}" for e in errors)
        super().__init__(f"Scenario is invalid ({len(errors)} error(s)):\n{details}")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class Definitions:
    """Weapons, skills and templates visible to a scenario, by name."""
    weapons: dict[str, WeaponRecord]
    skills: dict[str, SkillRecord]
    templates: dict[str, UnitTemplate]


def collect_definitions(spec: ScenarioSpec) -> Definitions:
    """Scenario definitions layered over the catalog (if enabled)."""
    from .. import catalog

    weapons = dict(catalog.WEAPONS) if spec.use_catalog else {}
    skills = dict(catalog.SKILLS) if spec.use_catalog else {}
    templates = dict(catalog.UNIT_CLASSES) if spec.use_catalog else {}
    weapons.update({w.name: w for w in spec.weapons})
    skills.update({s.name: s for s in spec.skills})
    templates.update(spec.templates)
    return Definitions(weapons=weapons, skills=skills, templates=templates)


def validate_scenario(spec: ScenarioSpec) -> ValidationResult:
    """
    Validate a complete scenario.

    Returns ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []
    definitions = collect_definitions(spec)

    # Board
    tile_types: dict[tuple[int, int], TileType] = {}
    if not spec.tiles:
        errors.append("Scenario has no tiles")
    for tile in spec.tiles:
        coord = (tile.col, tile.row)
        if tile.col >= spec.columns or tile.row >= spec.rows:
            errors.append(f"Tile {coord} is outside the {spec.columns}x{spec.rows} board")
        elif coord in tile_types:
            errors.append(f"Duplicate tile at {coord}")
        else:
            tile_types[coord] = tile.tile_type
    missing = spec.columns * spec.rows - len(tile_types)
    if missing > 0:
        warnings.append(f"{missing} board cell(s) have no tile")

    # Players
    player_ids = [p.player_id for p in spec.players]
    if len(set(player_ids)) != len(player_ids):
        errors.append("Player ids must be unique")

    # Definitions
    for skill in definitions.skills.values():
        errors.extend(_validate_skill(skill))
    for weapon in definitions.weapons.values():
        errors.extend(_validate_weapon(weapon, definitions))
    for name, template in definitions.templates.items():
        errors.extend(_validate_template(name, template, definitions))

    # Units
    seen_ids: set[str] = set()
    occupied: dict[tuple[int, int], str] = {}
    owners: set[int] = set()
    for unit in spec.units:
        label = f"Unit '{unit.unit_id}'"
        if unit.unit_id in seen_ids:
            errors.append(f"Duplicate unit id '{unit.unit_id}'")
        seen_ids.add(unit.unit_id)

        if unit.player >= len(spec.players):
            errors.append(f"{label} belongs to player index {unit.player}, but there are {len(spec.players)} players")
        else:
            owners.add(unit.player)

        template = definitions.templates.get(unit.template)
        if template is None:
            errors.append(f"{label} uses unknown template '{unit.template}'")

        coord = (unit.col, unit.row)
        if coord not in tile_types:
            errors.append(f"{label} is placed at {coord}, which has no tile")
        elif coord in occupied:
            errors.append(f"{label} and '{occupied[coord]}' share tile {coord}")
        else:
            occupied[coord] = unit.unit_id
            if template is not None and tile_types[coord] == TileType.BOUNDARY:
                warnings.append(f"{label} starts on a boundary tile {coord}")

        if unit.weapon is not None and unit.weapon not in definitions.weapons:
            errors.append(f"{label} uses unknown weapon '{unit.weapon}'")
        for skill_name in unit.skills or []:
            if skill_name not in definitions.skills:
                errors.append(f"{label} uses unknown skill '{skill_name}'")
        errors.extend(f"{label}: {e}" for e in _validate_stat_names(unit.stats))

        if template is not None:
            stats = {**template.stats, **unit.stats}
            if stats.get("max_hp", 1) < 1:
                errors.append(f"{label} has max_hp below 1")
            if stats.get("movement", 0) < 0:
                errors.append(f"{label} has negative movement")

    for index, player in enumerate(spec.players):
        if index not in owners:
            warnings.append(f"Player '{player.player_id}' has no units")

    return ValidationResult(valid=len(errors) == 0, errors=errors, warnings=warnings)


def _validate_stat_names(values: dict[str, int]) -> list[str]:
    return [f"unknown stat '{name}'" for name in values if name not in STAT_NAMES]


def _validate_skill(skill: SkillRecord) -> list[str]:
    """Validate a single skill definition."""
    errors = []
    label = f"Skill '{skill.name}'"
    if skill.kind == SkillKind.FIELD:
        if skill.stat not in STAT_NAMES:
            errors.append(f"{label} raises unknown stat '{skill.stat}'")
        return errors

    if skill.range < 1 and not skill.can_target_self:
        errors.append(f"{label} has range 0 and cannot target its user")
    if skill.kind == SkillKind.SINGLE_SUPPORT and skill.effect == SupportEffect.BUFF:
        if skill.stat not in STAT_NAMES:
            errors.append(f"{label} buffs unknown stat '{skill.stat}'")
    return errors


def _validate_weapon(weapon: WeaponRecord, definitions: Definitions) -> list[str]:
    label = f"Weapon '{weapon.name}'"
    errors = [f"{label}: {e}" for e in _validate_stat_names(weapon.modifiers)]
    for skill_name in weapon.skills:
        if skill_name not in definitions.skills:
            errors.append(f"{label} grants unknown skill '{skill_name}'")
    return errors


def _validate_template(name: str, template: UnitTemplate, definitions: Definitions) -> list[str]:
    label = f"Template '{name}'"
    errors = [f"{label}: {e}" for e in _validate_stat_names(template.stats)]
    errors.extend(f"{label} level-up gains: {e}" for e in _validate_stat_names(template.level_up_gains))
    if template.stats.get("max_hp", 1) < 1:
        errors.append(f"{label} has max_hp below 1")
    if template.stats.get("movement", 0) < 0:
        errors.append(f"{label} has negative movement")
    if template.weapon is not None and template.weapon not in definitions.weapons:
        errors.append(f"{label} uses unknown weapon '{template.weapon}'")
    for skill_name in template.skills:
        if skill_name not in definitions.skills:
            errors.append(f"{label} uses unknown skill '{skill_name}'")
    return errors
