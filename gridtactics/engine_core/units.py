"""
Units - stat holders with per-type movement rules.

Movement permission and cost are looked up by UnitType in MOVEMENT_RULES,
so every unit variant's capability is a row in one table.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable
import logging

from .board import Coord, Tile, TileType
from .skills import DamageKind, Skill

if TYPE_CHECKING:
    from ..config import RulesConfig

logger = logging.getLogger(__name__)

STAT_NAMES = (
    "max_hp",
    "strength",
    "magic",
    "defense",
    "resistance",
    "speed",
    "skill",
    "luck",
    "movement",
)


class UnitType(Enum):
    """Movement variant of a unit."""
    INFANTRY = "infantry"
    CAVALRY = "cavalry"
    ARMORED = "armored"
    FLIER = "flier"


def _passable_except_boundary(tile: Tile) -> bool:
    return tile.tile_type != TileType.BOUNDARY


def _open_ground_only(tile: Tile) -> bool:
    return tile.tile_type not in {TileType.OBSTACLE, TileType.BOUNDARY}


def _tile_cost(tile: Tile) -> int:
    return tile.move_cost


MOVEMENT_RULES: dict[UnitType, tuple[Callable[[Tile], bool], Callable[[Tile], int]]] = {
    UnitType.INFANTRY: (_passable_except_boundary, _tile_cost),
    UnitType.CAVALRY: (_open_ground_only, _tile_cost),
    UnitType.ARMORED: (_open_ground_only, _tile_cost),
    UnitType.FLIER: (_passable_except_boundary, lambda tile: 1),
}


@dataclass
class Stats:
    """Base stats of a unit, before weapon modifiers."""
    max_hp: int = 20
    strength: int = 5
    magic: int = 0
    defense: int = 3
    resistance: int = 0
    speed: int = 5
    skill: int = 5
    luck: int = 0
    movement: int = 5

    def __post_init__(self):
        if self.max_hp < 1:
            raise ValueError("max_hp must be positive")
        if self.movement < 0:
            raise ValueError("movement must not be negative")

    def get(self, name: str) -> int:
        if name not in STAT_NAMES:
            raise KeyError(f"Unknown stat: {name}")
        return getattr(self, name)

    def boost(self, name: str, amount: int, cap: int | None = None):
        """Raise (or lower) a stat, keeping it within [0, cap]."""
        value = self.get(name) + amount
        if cap is not None:
            value = min(value, cap)
        setattr(self, name, max(value, 1 if name == "max_hp" else 0))

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in STAT_NAMES}


@dataclass(frozen=True)
class Weapon:
    """Equipped weapon: range, strike values and stat modifiers."""
    name: str
    range: int = 1
    might: int = 0
    hit: int = 0
    crit: int = 0
    damage_kind: DamageKind = DamageKind.PHYSICAL
    modifiers: tuple[tuple[str, int], ...] = ()
    skills: tuple[Skill, ...] = ()  # Granted while equipped

    def __post_init__(self):
        if self.range < 1:
            raise ValueError(f"Weapon '{self.name}' must have range >= 1")
        for stat, _ in self.modifiers:
            if stat not in STAT_NAMES:
                raise ValueError(f"Weapon '{self.name}' modifies unknown stat '{stat}'")

    def modifier(self, stat: str) -> int:
        return sum(amount for name, amount in self.modifiers if name == stat)


@dataclass(eq=False)
class Unit:
    """
    A unit on (or defeated off) the board.

    Mutated in place during play: hp, position, has_moved, level, experience.
    Board occupancy is owned by GameModel; `position` mirrors it and becomes
    None when the unit is defeated.
    """
    unit_id: str
    name: str
    unit_type: UnitType
    unit_class: str
    player_id: str
    stats: Stats = field(default_factory=Stats)
    weapon: Weapon | None = None
    own_skills: list[Skill] = field(default_factory=list)
    level: int = 1
    experience: int = 0
    hp: int | None = None
    has_moved: bool = False
    position: Coord | None = None
    level_up_gains: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if self.hp is None:
            self.hp = self.stats.max_hp
        if self.position is not None:
            self.position = Coord(*self.position)
        for stat in self.level_up_gains:
            if stat not in STAT_NAMES:
                raise ValueError(f"Unit '{self.unit_id}' has level-up gain for unknown stat '{stat}'")

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def max_hp(self) -> int:
        return self.effective_stat("max_hp")

    @property
    def movement(self) -> int:
        return self.effective_stat("movement")

    @property
    def skills(self) -> list[Skill]:
        """Own skills followed by skills granted by the weapon."""
        granted = list(self.weapon.skills) if self.weapon else []
        return self.own_skills + [s for s in granted if s not in self.own_skills]

    def effective_stat(self, name: str) -> int:
        """Base stat plus weapon modifier, never below zero."""
        value = self.stats.get(name)
        if self.weapon:
            value += self.weapon.modifier(name)
        return max(value, 0)

    # ------------------------------------------------------------------
    # Movement capability
    # ------------------------------------------------------------------

    def can_move(self, tile: Tile) -> bool:
        permitted, _ = MOVEMENT_RULES[self.unit_type]
        return permitted(tile)

    def move_cost(self, tile: Tile) -> int:
        _, cost = MOVEMENT_RULES[self.unit_type]
        return cost(tile)

    # ------------------------------------------------------------------
    # HP
    # ------------------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Lose HP, clamped at zero. Returns HP actually lost."""
        lost = min(max(amount, 0), self.hp)
        self.hp -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Regain HP up to max. Returns HP actually restored."""
        if not self.is_alive:
            return 0
        restored = max(min(amount, self.max_hp - self.hp), 0)
        self.hp += restored
        return restored

    def boost_stat(self, name: str, amount: int, cap: int | None = None):
        """Change a base stat; max HP changes carry over to current HP."""
        before = self.stats.get(name)
        self.stats.boost(name, amount, cap)
        if name == "max_hp" and self.is_alive:
            delta = self.stats.max_hp - before
            self.hp = min(max(self.hp + delta, 1), self.max_hp)

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def gain_experience(self, amount: int, config: RulesConfig) -> int:
        """
        Add experience and apply any level ups.

        Returns the number of levels gained.
        """
        if self.level >= config.max_level:
            self.experience = 0
            return 0

        self.experience += max(amount, 0)
        levels = 0
        while self.experience >= config.exp_per_level and self.level < config.max_level:
            self.experience -= config.exp_per_level
            self._level_up(config)
            levels += 1

        if self.level >= config.max_level:
            self.experience = 0
        return levels

    def _level_up(self, config: RulesConfig):
        self.level += 1
        for stat, gain in self.level_up_gains.items():
            self.boost_stat(stat, gain, cap=config.stat_caps.get(stat))
        logger.info("%s reached level %d", self.name, self.level)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    @property
    def unit_information(self) -> str:
        lines = [
            f"Name: {self.name}",
            f"Class: {self.unit_class}",
            f"Level: {self.level} ({self.experience} exp)",
            f"HP: {self.hp}/{self.max_hp}",
        ]
        lines.extend(
            f"{stat.replace('_', ' ').title()}: {self.effective_stat(stat)}"
            for stat in STAT_NAMES
            if stat != "max_hp"
        )
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "name": self.name,
            "class": self.unit_class,
            "player_id": self.player_id,
            "level": self.level,
            "hp": f"{self.hp}/{self.max_hp}",
            "position": tuple(self.position) if self.position else None,
            "is_alive": self.is_alive,
        }

    def __repr__(self):
        return f"Unit({self.unit_id} {self.name} {self.hp}/{self.max_hp} @ {self.position})"
