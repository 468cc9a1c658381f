"""
Tests for saving and restoring games.
"""

import pytest

from ..catalog import create_skirmish_scenario
from ..engine_core.action import GameMove
from ..engine_core.state import GamePhase
from ..engine_core.units import Weapon
from ..scenario import GameSnapshot, build_game, restore_game, take_snapshot
from .conftest import ScriptedRandom, build_model, make_unit


class TestSnapshot:
    """take_snapshot / restore_game."""

    def test_round_trip_mid_turn(self, duel_model):
        duel_model.apply_move(GameMove.move((0, 2), (3, 2)))
        snapshot = take_snapshot(duel_model)

        restored = restore_game(snapshot, random_source=ScriptedRandom())

        assert take_snapshot(restored) == snapshot
        assert restored.state.relocated == {"p1_fighter"}
        assert restored.legal_moves() == duel_model.legal_moves()

    def test_round_trip_through_json(self, duel_model):
        duel_model.apply_move(GameMove.move((0, 2), (3, 2)))
        duel_model.apply_move(GameMove.attack((3, 2), (4, 2)))
        snapshot = take_snapshot(duel_model)

        data = GameSnapshot.model_validate_json(snapshot.model_dump_json())
        restored = restore_game(data)

        assert restored.turn == 1
        assert restored.current_player.player_id == "p2"
        assert restored.get_unit("p1_fighter").hp == 12
        assert restored.get_unit("p1_fighter").experience == 10
        assert restored.get_unit_at((3, 2)).unit_id == "p1_fighter"

    def test_restored_game_plays_on(self, duel_model):
        duel_model.apply_move(GameMove.move((0, 2), (3, 2)))
        duel_model.apply_move(GameMove.attack((3, 2), (4, 2)))

        restored = restore_game(take_snapshot(duel_model), random_source=ScriptedRandom())
        result = restored.apply_move(GameMove.attack((4, 2), (3, 2)))

        assert result.game_over
        assert restored.winner.player_id == "p2"

    def test_defeated_units_kept_off_board(self, duel_model):
        duel_model.apply_move(GameMove.move((0, 2), (3, 2)))
        duel_model.apply_move(GameMove.attack((3, 2), (4, 2)))
        duel_model.apply_move(GameMove.attack((4, 2), (3, 2)))

        restored = restore_game(take_snapshot(duel_model))
        fallen = restored.get_unit("p1_fighter")

        assert fallen.position is None
        assert not fallen.is_alive
        assert restored.phase == GamePhase.GAME_OVER
        assert restored.get_unit_at((3, 2)) is None

    def test_field_skills_not_applied_twice(self):
        model = build_game(create_skirmish_scenario())

        restored = restore_game(take_snapshot(model))

        assert restored.get_unit("red_knight").max_hp == 31
        assert restored.get_unit("red_knight").hp == 31

    def test_weapon_skills_come_with_weapon(self):
        model = build_game(create_skirmish_scenario())
        snapshot = take_snapshot(model)

        archer = next(u for p in snapshot.players for u in p.units if u.unit_id == "blue_archer")
        assert archer.skills == ["Steady Aim"]

        restored = restore_game(snapshot)
        assert [s.name for s in restored.get_unit("blue_archer").skills] == ["Steady Aim", "Piercing Shot"]

    def test_unknown_current_player(self, duel_model):
        data = take_snapshot(duel_model).model_dump()
        data["current_player_id"] = "ghost"

        with pytest.raises(ValueError):
            restore_game(data)

    def test_conflicting_weapon_names_rejected(self):
        """Units reference weapons by name, so one name must mean one weapon."""
        light = Weapon(name="Blade", might=3)
        heavy = Weapon(name="Blade", might=9)
        model = build_model(3, 1, [
            (make_unit("a", "p1", weapon=light), (0, 0)),
            (make_unit("b", "p2", weapon=heavy), (2, 0)),
        ])

        with pytest.raises(ValueError, match="Blade"):
            take_snapshot(model)

    def test_shared_weapon_stored_once(self):
        model = build_model(3, 1, [(make_unit("a", "p1"), (0, 0)), (make_unit("b", "p2"), (2, 0))])

        snapshot = take_snapshot(model)

        assert [w.name for w in snapshot.weapons] == ["Sword"]
        assert restore_game(snapshot).get_unit("b").weapon.might == 5
