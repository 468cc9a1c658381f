"""
Snapshots - full game state as plain structured data.

take_snapshot() exports everything needed to resume a game exactly:
board, rosters (including defeated units), unit stats, level, experience,
HP, position, has_moved, turn, current player and phase. Units reference
their weapon and skills by name, with the definitions stored once in the
snapshot. restore_game() rebuilds an equivalent GameModel.

Random source state is not part of a snapshot; pass a fresh seeded source.
"""

from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field

from ..config import RulesConfig
from ..engine_core.board import Tile
from ..engine_core.damage import RandomSource
from ..engine_core.model import GameModel
from ..engine_core.skills import FieldSkill, SingleDamageSkill, SingleSupportSkill, Skill
from ..engine_core.state import GamePhase, Player
from ..engine_core.units import Stats, Unit, UnitType, Weapon
from .loader import build_skill, build_weapon
from .schema import SkillRecord, TileRecord, WeaponRecord
from .validation import Definitions


class UnitSnapshot(BaseModel):
    unit_id: str
    name: str
    unit_type: UnitType
    unit_class: str
    level: int
    experience: int
    hp: int
    stats: dict[str, int]
    weapon: Optional[str] = None
    skills: list[str] = Field(default_factory=list, description="Own skills; weapon skills come with the weapon")
    level_up_gains: dict[str, int] = Field(default_factory=dict)
    has_moved: bool = False
    position: Optional[tuple[int, int]] = None


class PlayerSnapshot(BaseModel):
    player_id: str
    name: str
    units: list[UnitSnapshot] = Field(default_factory=list)


class GameSnapshot(BaseModel):
    """Everything needed to resume a game."""
    columns: int
    rows: int
    tiles: list[TileRecord]
    players: list[PlayerSnapshot]
    weapons: list[WeaponRecord] = Field(default_factory=list)
    skills: list[SkillRecord] = Field(default_factory=list)
    turn: int = 1
    current_player_id: str
    relocated_units: list[str] = Field(default_factory=list)
    phase: GamePhase = GamePhase.PLAYING


# =============================================================================
# Export
# =============================================================================

def skill_to_record(skill: Skill) -> SkillRecord:
    record = SkillRecord(name=skill.name, kind=skill.kind, cost=skill.cost, range=skill.range)
    if isinstance(skill, FieldSkill):
        return record.model_copy(update={"stat": skill.stat, "amount": skill.amount})
    update = {"target_rule": skill.target_rule, "can_target_self": skill.can_target_self}
    if isinstance(skill, SingleDamageSkill):
        update.update(
            power=skill.power,
            hit_bonus=skill.hit_bonus,
            crit_bonus=skill.crit_bonus,
            damage_kind=skill.damage_kind,
        )
    elif isinstance(skill, SingleSupportSkill):
        update.update(effect=skill.effect, power=skill.power, stat=skill.stat)
    return record.model_copy(update=update)


def weapon_to_record(weapon: Weapon) -> WeaponRecord:
    return WeaponRecord(
        name=weapon.name,
        range=weapon.range,
        might=weapon.might,
        hit=weapon.hit,
        crit=weapon.crit,
        damage_kind=weapon.damage_kind,
        modifiers=dict(weapon.modifiers),
        skills=[s.name for s in weapon.skills],
    )


def unit_to_snapshot(unit: Unit) -> UnitSnapshot:
    return UnitSnapshot(
        unit_id=unit.unit_id,
        name=unit.name,
        unit_type=unit.unit_type,
        unit_class=unit.unit_class,
        level=unit.level,
        experience=unit.experience,
        hp=unit.hp,
        stats=unit.stats.to_dict(),
        weapon=unit.weapon.name if unit.weapon else None,
        skills=[s.name for s in unit.own_skills],
        level_up_gains=dict(unit.level_up_gains),
        has_moved=unit.has_moved,
        position=tuple(unit.position) if unit.position is not None else None,
    )


def _store(definitions: dict, record, kind: str):
    """Add a definition once; a different one under the same name is an error."""
    existing = definitions.setdefault(record.name, record)
    if existing != record:
        raise ValueError(f"Units use two different {kind} definitions named '{record.name}'")


def take_snapshot(model: GameModel) -> GameSnapshot:
    """
    Export the complete state of a game.

    Raises ValueError if two different weapons or skills share a name,
    since units refer to them by name.
    """
    weapons: dict[str, WeaponRecord] = {}
    skills: dict[str, SkillRecord] = {}
    for unit in model.state.all_units():
        if unit.weapon:
            _store(weapons, weapon_to_record(unit.weapon), "weapon")
        for skill in unit.skills:
            _store(skills, skill_to_record(skill), "skill")

    return GameSnapshot(
        columns=model.columns,
        rows=model.rows,
        tiles=[
            TileRecord(col=t.position.col, row=t.position.row, tile_type=t.tile_type, move_cost=t.move_cost)
            for t in model.tiles.tiles()
        ],
        players=[
            PlayerSnapshot(
                player_id=p.player_id,
                name=p.name,
                units=[unit_to_snapshot(u) for u in p.units],
            )
            for p in model.players
        ],
        weapons=list(weapons.values()),
        skills=list(skills.values()),
        turn=model.turn,
        current_player_id=model.current_player.player_id,
        relocated_units=sorted(model.state.relocated),
        phase=model.phase,
    )


# =============================================================================
# Restore
# =============================================================================

def restore_game(
    snapshot: GameSnapshot | dict,
    config: RulesConfig | None = None,
    random_source: RandomSource | None = None,
) -> GameModel:
    """
    Rebuild a GameModel from a snapshot.

    Passive skills are already reflected in the stored stats, so they are
    not applied again.
    """
    if not isinstance(snapshot, GameSnapshot):
        snapshot = GameSnapshot.model_validate(snapshot)

    definitions = Definitions(
        weapons={w.name: w for w in snapshot.weapons},
        skills={s.name: s for s in snapshot.skills},
        templates={},
    )
    players = [Player(player_id=p.player_id, name=p.name) for p in snapshot.players]
    model = GameModel(snapshot.columns, snapshot.rows, players, config=config, random_source=random_source)
    for record in snapshot.tiles:
        model.add_tile(Tile(position=(record.col, record.row), tile_type=record.tile_type, move_cost=record.move_cost))
    model.link_neighbors()

    for player, player_snapshot in zip(players, snapshot.players):
        for data in player_snapshot.units:
            unit = Unit(
                unit_id=data.unit_id,
                name=data.name,
                unit_type=data.unit_type,
                unit_class=data.unit_class,
                player_id=player.player_id,
                stats=Stats(**data.stats),
                weapon=build_weapon(definitions.weapons[data.weapon], definitions) if data.weapon else None,
                own_skills=[build_skill(definitions.skills[name]) for name in data.skills],
                level=data.level,
                experience=data.experience,
                hp=data.hp,
                has_moved=data.has_moved,
                level_up_gains=dict(data.level_up_gains),
            )
            if unit.is_alive and data.position is not None:
                model.add_unit(unit, data.position)
            else:
                unit.hp = min(unit.hp, 0)
                model.add_unit(unit, None)

    state = model.state
    state.turn = snapshot.turn
    state.phase = snapshot.phase
    state.relocated = set(snapshot.relocated_units)
    current = next(
        (i for i, p in enumerate(players) if p.player_id == snapshot.current_player_id),
        None,
    )
    if current is None:
        raise ValueError(f"Snapshot current player '{snapshot.current_player_id}' is not a player")
    state.current_index = current
    return model
