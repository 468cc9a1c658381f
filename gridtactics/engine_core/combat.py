"""
Combat Resolver - two-phase exchanges between units.

An exchange is the attacker's strike followed by at most one counter
strike from a surviving defender that has the attacker in range. Every
random check is one dice_roll() on the shared RandomSource, in a fixed
order: attacker hit, attacker crit, defender hit, defender crit.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging

from .action import StrikeRecord
from .board import TileType
from .damage import DamageCalculator, RandomSource, dice_roll
from .skills import SingleDamageSkill, SingleSupportSkill
from .state import Board

if TYPE_CHECKING:
    from ..config import RulesConfig
    from .units import Unit

logger = logging.getLogger(__name__)


@dataclass
class CombatResolver:
    board: Board
    calculator: DamageCalculator
    random_source: RandomSource
    config: RulesConfig

    def terrain_avoid(self, defender: Unit) -> int:
        tile = self.board.tile_at(defender.position)
        if tile is not None and tile.tile_type == TileType.FORTIFY:
            return self.config.fortify_avoid_bonus
        return 0

    def strike(
        self,
        attacker: Unit,
        defender: Unit,
        skill: SingleDamageSkill | None = None,
        counter: bool = False,
    ) -> StrikeRecord:
        """
        Resolve one strike: roll hit, then crit, then apply damage.

        A defeated defender is taken off the board immediately.
        """
        calc = self.calculator
        avoid = self.terrain_avoid(defender)
        if skill is None:
            hit_chance = calc.hit_chance(attacker, defender, avoid)
        else:
            hit_chance = calc.skill_hit_chance(attacker, defender, skill, avoid)

        if not dice_roll(hit_chance, self.random_source):
            logger.debug("%s missed %s (%d%%)", attacker.name, defender.name, hit_chance)
            return StrikeRecord(
                attacker_id=attacker.unit_id,
                defender_id=defender.unit_id,
                hit=False,
                counter=counter,
                skill=skill.name if skill else None,
            )

        if skill is None:
            critical = dice_roll(calc.crit_chance(attacker, defender), self.random_source)
            damage = calc.crit_damage(attacker, defender) if critical else calc.damage(attacker, defender)
        else:
            critical = dice_roll(calc.skill_crit_chance(attacker, defender, skill), self.random_source)
            if critical:
                damage = calc.skill_crit_damage(attacker, defender, skill)
            else:
                damage = calc.skill_damage(attacker, defender, skill)

        lost = defender.take_damage(damage)
        defeated = not defender.is_alive
        logger.debug(
            "%s hit %s for %d%s", attacker.name, defender.name, lost, " (critical)" if critical else ""
        )
        if defeated:
            self.kill_unit(defender)

        experience = calc.experience_for(attacker, defender, defeated)
        attacker.gain_experience(experience, self.config)

        return StrikeRecord(
            attacker_id=attacker.unit_id,
            defender_id=defender.unit_id,
            hit=True,
            critical=critical,
            damage=lost,
            defeated=defeated,
            experience=experience,
            counter=counter,
            skill=skill.name if skill else None,
        )

    def kill_unit(self, unit: Unit):
        self.board.remove(unit)
        logger.info("%s (%s) was defeated", unit.name, unit.player_id)

    def can_counter(self, attacker: Unit, defender: Unit, reach: int) -> bool:
        """Defender survives, is armed and has the attacker within reach of its own tile."""
        if not defender.is_alive or not attacker.is_alive or defender.weapon is None:
            return False
        area = self.board.tiles.range_disk(defender.position, reach)
        return attacker.position in area

    def exchange(self, attacker: Unit, defender: Unit) -> list[StrikeRecord]:
        """Weapon attack plus the defender's counter."""
        strikes = [self.strike(attacker, defender)]
        if self.can_counter(attacker, defender, defender.weapon.range if defender.weapon else 0):
            strikes.append(self.strike(defender, attacker, counter=True))
        return strikes

    def skill_exchange(self, user: Unit, target: Unit, skill: SingleDamageSkill) -> list[StrikeRecord]:
        """Damage skill plus a weapon counter from a target that has the user within the skill's range."""
        strikes = [self.strike(user, target, skill=skill)]
        if self.can_counter(user, target, skill.range):
            strikes.append(self.strike(target, user, counter=True))
        return strikes

    def support(self, user: Unit, target: Unit, skill: SingleSupportSkill) -> int:
        """Apply a support skill; never random and never countered."""
        amount = skill.apply_support_skill(user, target)
        logger.debug("%s used %s on %s (%d)", user.name, skill.name, target.name, amount)
        return amount
