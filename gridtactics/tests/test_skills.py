"""
Tests for skill variants and unit progression.
"""

import pytest

from ..config import RulesConfig
from ..engine_core.skills import (
    FieldSkill,
    SingleDamageSkill,
    SingleSupportSkill,
    SkillKind,
    SupportEffect,
    TargetRule,
    field_skills,
    single_target_skills,
)
from ..engine_core.units import Stats, Weapon
from .conftest import build_model, make_unit

HEAL = SingleSupportSkill(name="Heal", range=1, cost=1, power=8, target_rule=TargetRule.WOUNDED_ALLY)
RALLY = SingleSupportSkill(name="Rally", range=1, effect=SupportEffect.BUFF, stat="strength", power=2)
FIRE = SingleDamageSkill(name="Fire", range=2, cost=2, power=4)
TOUGHNESS = FieldSkill(name="Toughness", stat="max_hp", amount=5)


class TestSkillDefinitions:
    """Construction rules and variant tags."""

    def test_kinds(self):
        assert TOUGHNESS.kind == SkillKind.FIELD
        assert FIRE.kind == SkillKind.SINGLE_DAMAGE
        assert HEAL.kind == SkillKind.SINGLE_SUPPORT
        assert not TOUGHNESS.is_active
        assert FIRE.is_active

    def test_default_target_rules(self):
        assert FIRE.target_rule == TargetRule.ENEMY
        assert SingleSupportSkill(name="Aid", range=1).target_rule == TargetRule.ALLY

    def test_negative_cost_rejected(self):
        with pytest.raises(ValueError):
            SingleDamageSkill(name="Bad", range=1, cost=-1)

    def test_zero_range_needs_self_target(self):
        with pytest.raises(ValueError):
            SingleSupportSkill(name="Nowhere", range=0)
        assert SingleSupportSkill(name="Focus", range=0, can_target_self=True).range == 0

    def test_buff_needs_stat(self):
        with pytest.raises(ValueError):
            SingleSupportSkill(name="Cheer", range=1, effect=SupportEffect.BUFF)

    def test_skills_are_hashable(self):
        locations = {FIRE: {(0, 0)}, HEAL: set()}

        assert locations[SingleDamageSkill(name="Fire", range=2, cost=2, power=4)] == {(0, 0)}

    def test_filters_keep_order(self):
        skills = [HEAL, TOUGHNESS, FIRE]

        assert field_skills(skills) == [TOUGHNESS]
        assert single_target_skills(skills) == [HEAL, FIRE]


class TestTargetRules:
    """Applicability predicates."""

    def test_enemy_rule(self):
        user, ally, enemy = make_unit("u", "p1"), make_unit("a", "p1"), make_unit("e", "p2")

        assert FIRE.is_usable_on_target(user, enemy)
        assert not FIRE.is_usable_on_target(user, ally)

    def test_wounded_ally_rule(self):
        user, ally = make_unit("u", "p1"), make_unit("a", "p1")

        assert not HEAL.is_usable_on_target(user, ally)
        ally.take_damage(3)
        assert HEAL.is_usable_on_target(user, ally)

    def test_dead_targets_never_qualify(self):
        user, enemy = make_unit("u", "p1"), make_unit("e", "p2", hp=0)

        assert not FIRE.is_usable_on_target(user, enemy)


class TestSkillEffects:
    """Support and field effects on units."""

    def test_heal_scales_with_magic_and_caps(self):
        healer = make_unit("healer", "p1", magic=4)
        patient = make_unit("patient", "p1")
        patient.take_damage(15)

        assert HEAL.apply_support_skill(healer, patient) == 10
        assert patient.hp == 15
        assert HEAL.apply_support_skill(healer, patient) == 5
        assert patient.hp == 20

    def test_buff_raises_stat(self):
        user, ally = make_unit("u", "p1"), make_unit("a", "p1")

        assert RALLY.apply_support_skill(user, ally) == 2
        assert ally.effective_stat("strength") == 7

    def test_field_skill_applied_at_start(self):
        hardy = make_unit("hardy", "p1", skills=[TOUGHNESS])
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(hardy, (0, 0)), (enemy, (2, 0))], start=False)

        model.start_game()

        assert hardy.max_hp == 25
        assert hardy.hp == 25

    def test_weapon_grants_skills(self):
        staff = Weapon(name="Staff", skills=(HEAL,))
        cleric = make_unit("cleric", "p1", weapon=staff, skills=[FIRE])

        assert cleric.skills == [FIRE, HEAL]


class TestUnits:
    """HP, stats and levelling."""

    def test_hp_defaults_to_max(self):
        assert make_unit("u", "p1").hp == 20
        assert make_unit("u", "p1", hp=4).hp == 4

    def test_damage_clamps_at_zero(self):
        unit = make_unit("u", "p1")

        assert unit.take_damage(50) == 20
        assert unit.hp == 0
        assert not unit.is_alive

    def test_dead_units_cannot_heal(self):
        unit = make_unit("u", "p1", hp=0)

        assert unit.heal(5) == 0

    def test_invalid_stats_rejected(self):
        with pytest.raises(ValueError):
            Stats(max_hp=0)
        with pytest.raises(ValueError):
            Stats(movement=-1)

    def test_unknown_stat(self):
        with pytest.raises(KeyError):
            Stats().get("charisma")

    def test_level_up_applies_gains_with_caps(self):
        config = RulesConfig()
        unit = make_unit("u", "p1", strength=39)
        unit.level_up_gains = {"strength": 2, "max_hp": 3}

        assert unit.gain_experience(130, config) == 1

        assert unit.level == 2
        assert unit.experience == 30
        assert unit.effective_stat("strength") == 40
        assert unit.max_hp == 23
        assert unit.hp == 23

    def test_no_experience_at_max_level(self):
        config = RulesConfig(max_level=2)
        unit = make_unit("u", "p1")

        assert unit.gain_experience(250, config) == 1
        assert unit.level == 2
        assert unit.experience == 0
        assert unit.gain_experience(50, config) == 0
        assert unit.experience == 0

    def test_weapon_modifiers_never_below_zero(self):
        cursed = Weapon(name="Cursed", modifiers=(("luck", -10),))
        unit = make_unit("u", "p1", weapon=cursed, luck=3)

        assert unit.effective_stat("luck") == 0
