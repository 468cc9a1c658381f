"""
Tests for scenario loading, validation and map import.
"""

import json

import pytest

from ..catalog import SCENARIOS, create_skirmish_scenario, tiles_from_layout
from ..engine_core.board import TileType
from ..engine_core.state import GamePhase
from ..scenario import (
    MapRecord,
    ScenarioError,
    build_game,
    load_scenario,
    load_scenario_file,
    scenario_from_map,
    validate_scenario,
)


def scenario_data(**overrides):
    data = {
        "name": "Strip",
        "columns": 3,
        "rows": 1,
        "tiles": [{"col": c, "row": 0} for c in range(3)],
        "players": [{"player_id": "p1"}, {"player_id": "p2"}],
        "units": [
            {"unit_id": "a", "template": "Fighter", "col": 0, "row": 0, "player": 0},
            {"unit_id": "b", "template": "Fighter", "col": 2, "row": 0, "player": 1},
        ],
    }
    data.update(overrides)
    return data


class TestLoadScenario:
    """Parsing and building."""

    def test_dict_builds_a_started_game(self):
        model = build_game(scenario_data())

        assert model.phase == GamePhase.PLAYING
        assert model.current_player.player_id == "p1"
        assert model.get_unit("a").position == (0, 0)
        assert model.get_unit("a").weapon.name == "Steel Axe"

    def test_json_text(self):
        spec = load_scenario(json.dumps(scenario_data()))

        assert spec.name == "Strip"
        assert len(spec.units) == 2

    def test_build_without_start(self):
        model = build_game(scenario_data(), start=False)

        assert model.phase == GamePhase.SETUP

    def test_player_name_defaults_to_id(self):
        model = build_game(scenario_data())

        assert model.get_player("p2").name == "p2"

    def test_placement_overrides_template(self):
        units = scenario_data()["units"]
        units[0].update(
            name="Hero", weapon="Iron Sword", skills=[], stats={"strength": 12}, hp=99, level=3,
        )

        model = build_game(scenario_data(units=units))
        hero = model.get_unit("a")

        assert hero.name == "Hero"
        assert hero.weapon.name == "Iron Sword"
        assert hero.skills == []
        assert hero.effective_stat("strength") == 12
        assert hero.effective_stat("defense") == 4
        assert hero.hp == hero.max_hp == 24
        assert hero.level == 3

    def test_scenario_definitions_shadow_catalog(self):
        weapons = [{"name": "Steel Axe", "range": 2, "might": 1}]

        model = build_game(scenario_data(weapons=weapons))

        assert model.get_unit("a").weapon.range == 2

    def test_custom_template_and_skill(self):
        data = scenario_data(
            use_catalog=False,
            weapons=[{"name": "Stick", "might": 1}],
            skills=[{"name": "Zap", "kind": "single_damage", "range": 2, "power": 3, "cost": 1}],
            templates={
                "Imp": {"unit_class": "Imp", "unit_type": "flier", "weapon": "Stick", "skills": ["Zap"]},
            },
        )
        for unit in data["units"]:
            unit["template"] = "Imp"

        model = build_game(data)
        imp = model.get_unit("a")

        assert imp.unit_class == "Imp"
        assert [s.name for s in imp.skills] == ["Zap"]
        assert imp.skills[0].damage_kind.value == "magical"

    def test_built_in_scenarios_load(self):
        for name, factory in SCENARIOS.items():
            model = build_game(factory())
            assert model.phase == GamePhase.PLAYING, name

    def test_skirmish_passive_skills_applied(self):
        model = build_game(create_skirmish_scenario())

        assert model.get_unit("red_knight").max_hp == 31
        assert model.get_unit("red_swordsman").effective_stat("speed") == 10


class TestValidation:
    """Every problem is reported at once."""

    def test_collects_every_error(self):
        units = [
            {"unit_id": "a", "template": "Fighter", "col": 0, "row": 0, "player": 0},
            {"unit_id": "a", "template": "Wizard", "col": 1, "row": 0, "player": 5},
            {"unit_id": "c", "template": "Fighter", "col": 0, "row": 0, "player": 1, "weapon": "Spoon"},
        ]
        tiles = [{"col": 0, "row": 0}, {"col": 1, "row": 0}, {"col": 7, "row": 0}]

        with pytest.raises(ScenarioError) as excinfo:
            load_scenario(scenario_data(units=units, tiles=tiles))

        errors = excinfo.value.errors
        assert "Tile (7, 0) is outside the 3x1 board" in errors
        assert "Duplicate unit id 'a'" in errors
        assert "Unit 'a' uses unknown template 'Wizard'" in errors
        assert "Unit 'a' belongs to player index 5, but there are 2 players" in errors
        assert "Unit 'c' and 'a' share tile (0, 0)" in errors
        assert "Unit 'c' uses unknown weapon 'Spoon'" in errors
        assert len(errors) == 6

    def test_unit_without_tile(self):
        tiles = [{"col": 0, "row": 0}, {"col": 1, "row": 0}]

        with pytest.raises(ScenarioError) as excinfo:
            load_scenario(scenario_data(tiles=tiles))

        assert excinfo.value.errors == ["Unit 'b' is placed at (2, 0), which has no tile"]

    def test_field_errors_are_listed(self):
        data = scenario_data(columns=0)
        del data["tiles"]

        with pytest.raises(ScenarioError) as excinfo:
            load_scenario(data)

        locations = [e.split(":")[0] for e in excinfo.value.errors]
        assert "columns" in locations
        assert "tiles" in locations

    def test_catalog_can_be_disabled(self):
        with pytest.raises(ScenarioError) as excinfo:
            load_scenario(scenario_data(use_catalog=False))

        assert "Unit 'a' uses unknown template 'Fighter'" in excinfo.value.errors

    def test_unknown_stats(self):
        units = scenario_data()["units"]
        units[0]["stats"] = {"charisma": 3}

        with pytest.raises(ScenarioError) as excinfo:
            load_scenario(scenario_data(units=units))

        assert excinfo.value.errors == ["Unit 'a': unknown stat 'charisma'"]

    def test_bad_skill_definition(self):
        skills = [{"name": "Stare", "kind": "single_damage", "range": 0}]

        with pytest.raises(ScenarioError) as excinfo:
            load_scenario(scenario_data(skills=skills))

        assert "Skill 'Stare' has range 0 and cannot target its user" in excinfo.value.errors

    def test_warnings_do_not_fail(self):
        data = scenario_data(
            columns=4,
            players=[{"player_id": "p1"}, {"player_id": "p2"}, {"player_id": "p3"}],
        )

        result = validate_scenario(load_scenario(data))

        assert result.valid
        assert "1 board cell(s) have no tile" in result.warnings
        assert "Player 'p3' has no units" in result.warnings

    def test_error_message_lists_problems(self):
        error = ScenarioError(["first", "second"])

        assert "2 error(s)" in str(error)
        assert "- second" in str(error)


class TestLayouts:
    """Text layouts of the built-in maps."""

    def test_symbols(self):
        tiles = tiles_from_layout([".#", "~+", "x "])
        by_coord = {(t.col, t.row): t for t in tiles}

        assert by_coord[(0, 0)].tile_type == TileType.NORMAL
        assert by_coord[(1, 0)].tile_type == TileType.OBSTACLE
        assert by_coord[(1, 0)].move_cost == 2
        assert by_coord[(0, 1)].tile_type == TileType.DAMAGE
        assert by_coord[(1, 1)].tile_type == TileType.FORTIFY
        assert by_coord[(0, 2)].tile_type == TileType.BOUNDARY
        assert (1, 2) not in by_coord

    def test_unknown_symbol(self):
        with pytest.raises(ValueError):
            tiles_from_layout([".?"])


class TestMapImport:
    """Level-editor exports."""

    MAP = {
        "columns": 3,
        "rows": 2,
        "tile_data": [
            {"column": 0, "row": 0, "floor": "grass", "player": 1, "unit": "Fighter"},
            {"column": 1, "row": 0, "floor": "grass", "obstacle": "tree"},
            {"column": 2, "row": 0, "floor": "grass", "player": 2, "unit": "Archer"},
            {"column": 0, "row": 1, "floor": "lava"},
            {"column": 1, "row": 1, "wall": "stone"},
            {"column": 2, "row": 1},
        ],
    }

    def test_scenario_from_map(self):
        spec = scenario_from_map(MapRecord.model_validate(self.MAP), name="Editor")
        tiles = {(t.col, t.row): t for t in spec.tiles}

        assert spec.name == "Editor"
        assert [p.player_id for p in spec.players] == ["player1", "player2"]
        assert [(u.unit_id, u.player) for u in spec.units] == [("fighter_0_0", 0), ("archer_2_0", 1)]
        assert tiles[(1, 0)].tile_type == TileType.OBSTACLE
        assert tiles[(1, 0)].move_cost == 2
        assert tiles[(0, 1)].tile_type == TileType.DAMAGE
        assert tiles[(1, 1)].tile_type == TileType.BOUNDARY
        assert (2, 1) not in tiles

    def test_single_side_map_gets_second_player(self):
        data = {
            "columns": 1,
            "rows": 1,
            "tile_data": [{"column": 0, "row": 0, "floor": "grass", "player": 1, "unit": "Knight"}],
        }

        spec = scenario_from_map(MapRecord.model_validate(data))

        assert len(spec.players) == 2
        assert spec.players[1].player_id == "player2_empty"

    def test_load_map_file(self, tmp_path):
        path = tmp_path / "valley.json"
        path.write_text(json.dumps(self.MAP), encoding="utf-8")

        spec = load_scenario_file(path)
        model = build_game(spec)

        assert spec.name == "valley"
        assert model.get_unit("archer_2_0").player_id == "player2"


class TestScenarioFiles:
    """Reading scenario JSON from disk."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "strip.json"
        path.write_text(json.dumps(scenario_data()), encoding="utf-8")

        assert load_scenario_file(path).name == "Strip"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ScenarioError) as excinfo:
            load_scenario_file(path)

        assert "invalid JSON" in excinfo.value.errors[0]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scenario_file(tmp_path / "nowhere.json")
