"""
Tests for attack/skill location queries and legal move generation.
"""

from ..catalog import create_duel_scenario
from ..engine_core.action import GameMove, MoveType
from ..engine_core.action_generator import is_legal, legal_moves
from ..engine_core.skills import SingleDamageSkill, SingleSupportSkill, TargetRule
from ..scenario import build_game
from .conftest import BOW, ScriptedRandom, build_model, make_unit

FIRE = SingleDamageSkill(name="Fire", range=2, cost=2, power=4)
MEND = SingleSupportSkill(name="Mend", range=1, power=5, target_rule=TargetRule.WOUNDED_ALLY)
FOCUS = SingleSupportSkill(name="Focus", range=0, can_target_self=True, target_rule=TargetRule.ANY)


class TestAttackLocations:
    """Weapon range composed with movement."""

    def test_corner_unit(self):
        unit = make_unit("scout", "p1", movement=1)
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 5, [(unit, (0, 0)), (enemy, (4, 4))])

        assert model.query_attack_locations(unit) == {(1, 0), (0, 1), (2, 0), (1, 1), (0, 2)}

    def test_ally_tile_is_not_a_standing_tile(self):
        """An ally can be walked through, but attacks need a free tile to stand on."""
        unit = make_unit("scout", "p1", movement=1)
        ally = make_unit("ally", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 5, [(unit, (0, 0)), (ally, (0, 1)), (enemy, (4, 4))])

        assert model.generator.attack_locations(unit) == {(1, 0), (2, 0), (1, 1), (0, 2)}
        assert model.query_attack_locations(unit) == {(1, 0), (2, 0), (1, 1)}

    def test_enemy_tiles_kept(self):
        unit = make_unit("scout", "p1", movement=1)
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 5, [(unit, (0, 0)), (enemy, (2, 0))])

        assert (2, 0) in model.query_attack_locations(unit)

    def test_bow_reaches_further(self):
        archer = make_unit("archer", "p1", weapon=BOW, movement=0)
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 1, [(archer, (0, 0)), (enemy, (4, 0))])

        assert model.query_attack_locations(archer) == {(1, 0), (2, 0)}

    def test_unarmed_has_no_attacks(self):
        unit = make_unit("pacifist", "p1", weapon=None)
        enemy = make_unit("enemy", "p2")
        model = build_model(2, 1, [(unit, (0, 0)), (enemy, (1, 0))])

        assert model.query_attack_locations(unit) == set()
        assert model.generator.attack_targets(unit) == set()

    def test_targets_only_from_current_tile(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(4, 1, [(unit, (0, 0)), (enemy, (3, 0))])

        assert (3, 0) in model.query_attack_locations(unit)
        assert model.generator.attack_targets(unit) == set()


class TestSkillLocations:
    """Skill range composed with movement and the skill's predicate."""

    def test_damage_skill_skips_allies(self):
        caster = make_unit("caster", "p1", skills=[FIRE], movement=0)
        ally = make_unit("ally", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(5, 1, [(caster, (0, 0)), (ally, (1, 0)), (enemy, (2, 0))])

        locations = model.query_skill_locations(caster)[FIRE]

        assert (1, 0) not in locations
        assert (2, 0) in locations
        assert (0, 0) not in locations

    def test_support_needs_wounded_ally(self):
        healer = make_unit("healer", "p1", skills=[MEND], movement=0)
        ally = make_unit("ally", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(4, 1, [(healer, (0, 0)), (ally, (1, 0)), (enemy, (3, 0))])

        assert (1, 0) not in model.query_skill_locations(healer)[MEND]

        ally.take_damage(4)
        assert (1, 0) in model.query_skill_locations(healer)[MEND]
        assert model.generator.skill_targets(healer, MEND) == {(1, 0)}

    def test_self_target(self):
        monk = make_unit("monk", "p1", skills=[FOCUS], movement=0)
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(monk, (0, 0)), (enemy, (2, 0))])

        assert model.query_skill_locations(monk)[FOCUS] == {(0, 0)}
        assert model.generator.skill_targets(monk, FOCUS) == {(0, 0)}

    def test_one_entry_per_active_skill(self):
        caster = make_unit("caster", "p1", skills=[FIRE, MEND])
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(caster, (0, 0)), (enemy, (2, 0))])

        assert set(model.query_skill_locations(caster)) == {FIRE, MEND}


class TestLegalMoves:
    """Enumeration order and filters."""

    def test_adjacent_attack_then_wait(self, adjacent_model):
        attacker = adjacent_model.get_unit("attacker")

        moves = adjacent_model.legal_moves(attacker)

        assert moves == [GameMove.attack((0, 0), (1, 0)), GameMove.wait((0, 0))]

    def test_moves_then_wait(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(4, 1, [(unit, (0, 0)), (enemy, (3, 0))])

        moves = model.legal_moves(unit)

        assert moves == [
            GameMove.move((0, 0), (1, 0)),
            GameMove.move((0, 0), (2, 0)),
            GameMove.wait((0, 0)),
        ]

    def test_no_second_relocation(self):
        unit = make_unit("walker", "p1")
        enemy = make_unit("enemy", "p2")
        model = build_model(4, 1, [(unit, (0, 0)), (enemy, (3, 0))])

        assert model.apply_move(GameMove.move((0, 0), (2, 0))).success

        moves = model.legal_moves(unit)
        assert [m.move_type for m in moves] == [MoveType.ATTACK, MoveType.WAIT]

    def test_skill_filtered_by_hp(self):
        caster = make_unit("caster", "p1", skills=[FIRE], hp=2, movement=0)
        enemy = make_unit("enemy", "p2")
        model = build_model(3, 1, [(caster, (0, 0)), (enemy, (2, 0))])

        assert all(m.move_type != MoveType.SKILL for m in model.legal_moves(caster))

        caster.hp = 3
        assert GameMove.use_skill((0, 0), (2, 0), FIRE) in model.legal_moves(caster)

    def test_enemy_units_have_no_moves(self, adjacent_model):
        defender = adjacent_model.get_unit("defender")

        assert adjacent_model.legal_moves(defender) == []

    def test_every_generated_move_is_legal(self, duel_model):
        moves = legal_moves(duel_model)

        assert moves
        assert all(is_legal(duel_model, m) for m in moves)
        assert not is_legal(duel_model, GameMove.wait((2, 2)))

    def test_generated_moves_apply(self, duel_model):
        """Each generated move succeeds on a fresh game."""
        for move in legal_moves(duel_model):
            fresh = build_game(create_duel_scenario(), random_source=ScriptedRandom())
            assert fresh.apply_move(move).success, move.describe()
