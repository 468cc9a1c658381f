"""
Armory - built-in weapons and skills.

Definitions are scenario records, so a scenario can reference them by
name or shadow them with its own record of the same name.
"""

from ..engine_core.skills import DamageKind, SkillKind, SupportEffect, TargetRule
from ..scenario.schema import SkillRecord, WeaponRecord


SKILLS: dict[str, SkillRecord] = {
    record.name: record
    for record in [
        # Passive
        SkillRecord(name="Toughness", kind=SkillKind.FIELD, range=0, stat="max_hp", amount=5),
        SkillRecord(name="Swiftness", kind=SkillKind.FIELD, range=0, stat="speed", amount=2),
        SkillRecord(name="Steady Aim", kind=SkillKind.FIELD, range=0, stat="skill", amount=3),

        # Offensive
        SkillRecord(
            name="Fire",
            kind=SkillKind.SINGLE_DAMAGE,
            cost=2,
            range=2,
            power=6,
            hit_bonus=10,
            damage_kind=DamageKind.MAGICAL,
        ),
        SkillRecord(
            name="Power Strike",
            kind=SkillKind.SINGLE_DAMAGE,
            cost=3,
            range=1,
            power=5,
            crit_bonus=10,
            damage_kind=DamageKind.PHYSICAL,
        ),
        SkillRecord(
            name="Piercing Shot",
            kind=SkillKind.SINGLE_DAMAGE,
            cost=2,
            range=3,
            power=2,
            hit_bonus=20,
            damage_kind=DamageKind.PHYSICAL,
        ),

        # Support
        SkillRecord(
            name="Heal",
            kind=SkillKind.SINGLE_SUPPORT,
            cost=1,
            range=1,
            effect=SupportEffect.HEAL,
            power=8,
            target_rule=TargetRule.WOUNDED_ALLY,
            can_target_self=True,
        ),
        SkillRecord(
            name="Rally",
            kind=SkillKind.SINGLE_SUPPORT,
            cost=2,
            range=1,
            effect=SupportEffect.BUFF,
            power=2,
            stat="strength",
            target_rule=TargetRule.ALLY,
        ),
    ]
}


WEAPONS: dict[str, WeaponRecord] = {
    record.name: record
    for record in [
        WeaponRecord(name="Iron Sword", range=1, might=5, hit=20),
        WeaponRecord(name="Steel Axe", range=1, might=8, hit=0, crit=5, modifiers={"speed": -1}),
        WeaponRecord(name="Iron Lance", range=1, might=7, hit=10),
        WeaponRecord(name="Short Bow", range=2, might=4, hit=15, skills=["Piercing Shot"]),
        WeaponRecord(name="Fire Tome", range=2, might=3, hit=10, damage_kind=DamageKind.MAGICAL, skills=["Fire"]),
        WeaponRecord(name="Oak Staff", range=1, might=1, damage_kind=DamageKind.MAGICAL, skills=["Heal"]),
        WeaponRecord(name="Killing Edge", range=1, might=6, hit=15, crit=30),
    ]
}
