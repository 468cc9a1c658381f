"""
Damage Calculator - hit, crit and damage formulas.

All formulas are pure functions of the two units (plus a skill for skill
strikes). The only randomness is dice_roll(), which draws once from an
injected RandomSource so games replay exactly from a seed.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import random

from .skills import DamageKind, SingleDamageSkill

if TYPE_CHECKING:
    from ..config import RulesConfig
    from .units import Unit

_OFFENCE = {
    DamageKind.PHYSICAL: ("strength", "defense"),
    DamageKind.MAGICAL: ("magic", "resistance"),
}


class RandomSource:
    """
    Seedable source of percentile rolls.

    Wraps random.Random; subclass and override roll_percent() to script rolls.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def roll_percent(self) -> int:
        """Uniform integer in [0, 99]."""
        return self._rng.randrange(100)


def clamp_percent(value: int) -> int:
    return max(0, min(100, value))


def dice_roll(chance: int, source: RandomSource) -> bool:
    """One draw; succeeds with probability chance/100."""
    return source.roll_percent() < chance


@dataclass
class DamageCalculator:
    """
    Strike formulas, monotone in the attacker's offensive stats and
    antitone in the defender's defensive stats.
    """
    config: RulesConfig

    # ------------------------------------------------------------------
    # Weapon strikes
    # ------------------------------------------------------------------

    def hit_chance(self, attacker: Unit, defender: Unit, terrain_avoid: int = 0) -> int:
        weapon_hit = attacker.weapon.hit if attacker.weapon else 0
        return self._hit(attacker, defender, weapon_hit, terrain_avoid)

    def crit_chance(self, attacker: Unit, defender: Unit) -> int:
        weapon_crit = attacker.weapon.crit if attacker.weapon else 0
        return self._crit(attacker, defender, weapon_crit)

    def damage(self, attacker: Unit, defender: Unit) -> int:
        if attacker.weapon is None:
            return self._damage(attacker, defender, DamageKind.PHYSICAL, 0)
        return self._damage(attacker, defender, attacker.weapon.damage_kind, attacker.weapon.might)

    def crit_damage(self, attacker: Unit, defender: Unit) -> int:
        return self.damage(attacker, defender) * self.config.crit_multiplier

    # ------------------------------------------------------------------
    # Skill strikes
    # ------------------------------------------------------------------

    def skill_hit_chance(
        self, attacker: Unit, defender: Unit, skill: SingleDamageSkill, terrain_avoid: int = 0
    ) -> int:
        return self._hit(attacker, defender, skill.hit_bonus, terrain_avoid)

    def skill_crit_chance(self, attacker: Unit, defender: Unit, skill: SingleDamageSkill) -> int:
        return self._crit(attacker, defender, skill.crit_bonus)

    def skill_damage(self, attacker: Unit, defender: Unit, skill: SingleDamageSkill) -> int:
        return self._damage(attacker, defender, skill.damage_kind, skill.power)

    def skill_crit_damage(self, attacker: Unit, defender: Unit, skill: SingleDamageSkill) -> int:
        return self.skill_damage(attacker, defender, skill) * self.config.crit_multiplier

    # ------------------------------------------------------------------
    # Experience
    # ------------------------------------------------------------------

    def experience_for(self, attacker: Unit, defender: Unit, defeated: bool) -> int:
        """Experience the attacker earns for landing a strike."""
        gain = self.config.exp_base + self.config.exp_level_factor * (defender.level - attacker.level)
        gain = max(1, min(100, gain))
        if defeated:
            gain += self.config.exp_kill_bonus
        return gain

    # ------------------------------------------------------------------
    # Shared formulas
    # ------------------------------------------------------------------

    def _hit(self, attacker: Unit, defender: Unit, bonus: int, terrain_avoid: int) -> int:
        accuracy = (
            self.config.base_hit
            + 2 * attacker.effective_stat("skill")
            + attacker.effective_stat("luck") // 2
            + bonus
        )
        avoid = 2 * defender.effective_stat("speed") + defender.effective_stat("luck") + terrain_avoid
        return clamp_percent(accuracy - avoid)

    def _crit(self, attacker: Unit, defender: Unit, bonus: int) -> int:
        return clamp_percent(
            attacker.effective_stat("skill") // 2 + bonus - defender.effective_stat("luck")
        )

    def _damage(self, attacker: Unit, defender: Unit, kind: DamageKind, power: int) -> int:
        offence, mitigation = _OFFENCE[kind]
        return max(
            0,
            attacker.effective_stat(offence) + power - defender.effective_stat(mitigation),
        )
