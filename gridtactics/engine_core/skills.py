"""
Skill System - passive and active skill variants.

Skills are a closed set of tagged variants:
- FieldSkill: passive, applied once when the game starts
- SingleDamageSkill: active, hits one enemy with its own formulas
- SingleSupportSkill: active, applies a deterministic effect to one ally

Applicability is a TargetRule looked up in a dispatch table, not an override.
Skills are frozen so they can key the skill -> locations mappings.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable

if TYPE_CHECKING:
    from .units import Unit


class SkillKind(Enum):
    """Variant tag of a skill."""
    FIELD = "field"
    SINGLE_DAMAGE = "single_damage"
    SINGLE_SUPPORT = "single_support"


class DamageKind(Enum):
    """Which offensive/defensive stat pair a strike uses."""
    PHYSICAL = "physical"  # strength vs defense
    MAGICAL = "magical"  # magic vs resistance


class TargetRule(Enum):
    """Applicability predicate of a single-target skill."""
    ENEMY = "enemy"
    ALLY = "ally"
    WOUNDED_ALLY = "wounded_ally"
    ANY = "any"


class SupportEffect(Enum):
    """Deterministic effects of support skills."""
    HEAL = "heal"
    BUFF = "buff"


def _is_enemy(user: Unit, target: Unit) -> bool:
    return target.is_alive and target.player_id != user.player_id


def _is_ally(user: Unit, target: Unit) -> bool:
    return target.is_alive and target.player_id == user.player_id


def _is_wounded_ally(user: Unit, target: Unit) -> bool:
    return _is_ally(user, target) and target.hp < target.max_hp


TARGET_RULES: dict[TargetRule, Callable[[Unit, Unit], bool]] = {
    TargetRule.ENEMY: _is_enemy,
    TargetRule.ALLY: _is_ally,
    TargetRule.WOUNDED_ALLY: _is_wounded_ally,
    TargetRule.ANY: lambda user, target: target.is_alive,
}


@dataclass(frozen=True)
class Skill:
    """Common fields of every skill variant."""
    name: str
    cost: int = 0  # Paid in HP
    range: int = 0

    def __post_init__(self):
        if not self.name:
            raise ValueError("Skill name is required")
        if self.cost < 0:
            raise ValueError(f"Skill '{self.name}' has negative cost")
        if self.range < 0:
            raise ValueError(f"Skill '{self.name}' has negative range")

    @property
    def kind(self) -> SkillKind:
        raise NotImplementedError

    @property
    def is_active(self) -> bool:
        return self.kind != SkillKind.FIELD


@dataclass(frozen=True)
class FieldSkill(Skill):
    """Passive stat bonus applied once at game start."""
    stat: str = "max_hp"
    amount: int = 0

    @property
    def kind(self) -> SkillKind:
        return SkillKind.FIELD

    def apply_field_skill(self, unit: Unit):
        unit.boost_stat(self.stat, self.amount)


@dataclass(frozen=True)
class SingleTargetSkill(Skill):
    """Active skill aimed at one tile within range."""
    target_rule: TargetRule = TargetRule.ANY
    can_target_self: bool = False

    def __post_init__(self):
        super().__post_init__()
        if self.range < 1 and not self.can_target_self:
            raise ValueError(f"Skill '{self.name}' has no range and cannot target self")

    def is_usable_on_target(self, user: Unit, target: Unit) -> bool:
        """Evaluate the skill's applicability predicate."""
        return TARGET_RULES[self.target_rule](user, target)


@dataclass(frozen=True)
class SingleDamageSkill(SingleTargetSkill):
    """Offensive skill resolved with its own hit/crit/damage values."""
    target_rule: TargetRule = TargetRule.ENEMY
    power: int = 0
    hit_bonus: int = 0
    crit_bonus: int = 0
    damage_kind: DamageKind = DamageKind.MAGICAL

    @property
    def kind(self) -> SkillKind:
        return SkillKind.SINGLE_DAMAGE


@dataclass(frozen=True)
class SingleSupportSkill(SingleTargetSkill):
    """Non-random helpful skill; never triggers a counter."""
    target_rule: TargetRule = TargetRule.ALLY
    effect: SupportEffect = SupportEffect.HEAL
    power: int = 0
    stat: str | None = None  # Stat raised by BUFF

    def __post_init__(self):
        super().__post_init__()
        if self.effect == SupportEffect.BUFF and not self.stat:
            raise ValueError(f"Buff skill '{self.name}' needs a stat")

    @property
    def kind(self) -> SkillKind:
        return SkillKind.SINGLE_SUPPORT

    def apply_support_skill(self, user: Unit, target: Unit) -> int:
        """Apply the effect and return the amount actually granted."""
        return SUPPORT_EFFECTS[self.effect](self, user, target)


def _heal(skill: SingleSupportSkill, user: Unit, target: Unit) -> int:
    return target.heal(skill.power + user.effective_stat("magic") // 2)


def _buff(skill: SingleSupportSkill, user: Unit, target: Unit) -> int:
    target.boost_stat(skill.stat, skill.power)
    return skill.power


SUPPORT_EFFECTS: dict[SupportEffect, Callable[[SingleSupportSkill, Unit, Unit], int]] = {
    SupportEffect.HEAL: _heal,
    SupportEffect.BUFF: _buff,
}


def field_skills(skills: Iterable[Skill]) -> list[FieldSkill]:
    return [s for s in skills if isinstance(s, FieldSkill)]


def single_target_skills(skills: Iterable[Skill]) -> list[SingleTargetSkill]:
    """Active single-target skills in list order."""
    return [s for s in skills if isinstance(s, SingleTargetSkill)]
