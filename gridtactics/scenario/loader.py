"""
Scenario Loader - builds a GameModel from scenario records.

load_scenario() validates raw data (dict, JSON text or ScenarioSpec) and
raises ScenarioError listing every problem. build_game() turns a valid
scenario into a ready-to-play GameModel. No turn is taken before loading
has fully succeeded.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any
import json
import logging

from pydantic import ValidationError

from ..config import RulesConfig
from ..engine_core.board import Tile
from ..engine_core.damage import RandomSource
from ..engine_core.model import GameModel
from ..engine_core.skills import (
    FieldSkill,
    SingleDamageSkill,
    SingleSupportSkill,
    Skill,
    SkillKind,
    TargetRule,
)
from ..engine_core.state import Player
from ..engine_core.units import Stats, Unit, Weapon
from .schema import MapRecord, ScenarioSpec, SkillRecord, UnitPlacement, WeaponRecord
from .validation import Definitions, ScenarioError, collect_definitions, validate_scenario

logger = logging.getLogger(__name__)


def load_scenario(data: ScenarioSpec | dict[str, Any] | str) -> ScenarioSpec:
    """
    Parse and validate scenario data.

    Raises ScenarioError with every field and consistency problem.
    """
    if isinstance(data, ScenarioSpec):
        spec = data
    else:
        try:
            if isinstance(data, str):
                spec = ScenarioSpec.model_validate_json(data)
            else:
                spec = ScenarioSpec.model_validate(data)
        except ValidationError as e:
            raise ScenarioError([_format_pydantic_error(err) for err in e.errors()]) from e

    result = validate_scenario(spec)
    for warning in result.warnings:
        logger.warning("%s: %s", spec.name, warning)
    if not result.valid:
        raise ScenarioError(result.errors)
    return spec


def load_scenario_file(path: str | Path) -> ScenarioSpec:
    """Read a scenario JSON file (plain scenario or exported map data)."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ScenarioError([f"{path}: invalid JSON ({e.msg} at line {e.lineno})"]) from e
    if isinstance(raw, dict) and "tile_data" in raw:
        from .map_import import scenario_from_map
        try:
            record = MapRecord.model_validate(raw)
        except ValidationError as e:
            raise ScenarioError([_format_pydantic_error(err) for err in e.errors()]) from e
        return load_scenario(scenario_from_map(record, name=Path(path).stem))
    return load_scenario(raw)


def _format_pydantic_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "scenario"
    return f"{location}: {error.get('msg', 'invalid value')}"


# =============================================================================
# Record -> engine object conversion
# =============================================================================

_DEFAULT_TARGETS = {
    SkillKind.SINGLE_DAMAGE: TargetRule.ENEMY,
    SkillKind.SINGLE_SUPPORT: TargetRule.ALLY,
}


def build_skill(record: SkillRecord) -> Skill:
    if record.kind == SkillKind.FIELD:
        return FieldSkill(
            name=record.name,
            cost=record.cost,
            range=record.range,
            stat=record.stat,
            amount=record.amount,
        )
    target_rule = record.target_rule or _DEFAULT_TARGETS[record.kind]
    if record.kind == SkillKind.SINGLE_DAMAGE:
        return SingleDamageSkill(
            name=record.name,
            cost=record.cost,
            range=record.range,
            target_rule=target_rule,
            can_target_self=record.can_target_self,
            power=record.power,
            hit_bonus=record.hit_bonus,
            crit_bonus=record.crit_bonus,
            damage_kind=record.damage_kind,
        )
    return SingleSupportSkill(
        name=record.name,
        cost=record.cost,
        range=record.range,
        target_rule=target_rule,
        can_target_self=record.can_target_self,
        effect=record.effect,
        power=record.power,
        stat=record.stat,
    )


def build_weapon(record: WeaponRecord, definitions: Definitions) -> Weapon:
    return Weapon(
        name=record.name,
        range=record.range,
        might=record.might,
        hit=record.hit,
        crit=record.crit,
        damage_kind=record.damage_kind,
        modifiers=tuple(sorted(record.modifiers.items())),
        skills=tuple(build_skill(definitions.skills[name]) for name in record.skills),
    )


def build_unit(placement: UnitPlacement, player_id: str, definitions: Definitions) -> Unit:
    """Merge a placement over its template into a Unit (not yet on the board)."""
    template = definitions.templates[placement.template]
    weapon_name = placement.weapon if placement.weapon is not None else template.weapon
    skill_names = placement.skills if placement.skills is not None else template.skills

    stats = Stats(**{**template.stats, **placement.stats})
    weapon = build_weapon(definitions.weapons[weapon_name], definitions) if weapon_name else None
    unit = Unit(
        unit_id=placement.unit_id,
        name=placement.name or f"{template.unit_class} ({placement.unit_id})",
        unit_type=template.unit_type,
        unit_class=template.unit_class,
        player_id=player_id,
        stats=stats,
        weapon=weapon,
        own_skills=[build_skill(definitions.skills[name]) for name in skill_names],
        level=placement.level,
        experience=placement.experience,
        hp=placement.hp,
        level_up_gains=dict(template.level_up_gains),
    )
    if unit.hp > unit.max_hp:
        unit.hp = unit.max_hp
    return unit


def build_game(
    scenario: ScenarioSpec | dict[str, Any] | str,
    config: RulesConfig | None = None,
    random_source: RandomSource | None = None,
    start: bool = True,
) -> GameModel:
    """
    Build a GameModel from scenario data.

    With start=True (default) the game is started and ready for moves.
    """
    spec = load_scenario(scenario)
    definitions = collect_definitions(spec)

    players = [Player(player_id=p.player_id, name=p.name or p.player_id) for p in spec.players]
    model = GameModel(
        columns=spec.columns,
        rows=spec.rows,
        players=players,
        config=config,
        random_source=random_source,
    )
    for record in spec.tiles:
        model.add_tile(Tile(position=(record.col, record.row), tile_type=record.tile_type, move_cost=record.move_cost))
    model.link_neighbors()

    for placement in spec.units:
        player = players[placement.player]
        model.add_unit(build_unit(placement, player.player_id, definitions), (placement.col, placement.row))

    logger.info(
        "Loaded scenario '%s': %dx%d, %d players, %d units",
        spec.name, spec.columns, spec.rows, len(players), len(spec.units),
    )
    if start:
        model.start_game()
    return model
