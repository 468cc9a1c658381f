"""
Pytest fixtures for gridtactics tests.
"""

from itertools import cycle

import pytest

from ..catalog import create_duel_scenario
from ..engine_core.board import Tile, TileType
from ..engine_core.damage import RandomSource
from ..engine_core.model import GameModel
from ..engine_core.state import Player
from ..engine_core.units import Stats, Unit, UnitType, Weapon
from ..scenario import build_game

SWORD = Weapon(name="Sword", range=1, might=5, hit=10)
BOW = Weapon(name="Bow", range=2, might=4, hit=10)


class ScriptedRandom(RandomSource):
    """
    Returns scripted rolls in a loop.

    (0, 99) hits every strike that has a hit chance above zero and never
    crits unless the crit chance is 100.
    """

    def __init__(self, rolls=(0, 99)):
        super().__init__(seed=0)
        self._rolls = cycle(rolls)
        self.calls = 0

    def roll_percent(self) -> int:
        self.calls += 1
        return next(self._rolls)


def make_unit(
    unit_id: str,
    player_id: str,
    unit_type: UnitType = UnitType.INFANTRY,
    weapon: Weapon | None = SWORD,
    skills=(),
    hp: int | None = None,
    **stats,
) -> Unit:
    """Unit with default Stats unless overridden (20 HP, 5 movement)."""
    return Unit(
        unit_id=unit_id,
        name=unit_id.capitalize(),
        unit_type=unit_type,
        unit_class="Soldier",
        player_id=player_id,
        stats=Stats(**stats),
        weapon=weapon,
        own_skills=list(skills),
        hp=hp,
    )


def build_model(
    columns: int,
    rows: int,
    placements=(),
    costs=None,
    tile_types=None,
    missing=(),
    players=("p1", "p2"),
    config=None,
    random_source=None,
    start: bool = True,
) -> GameModel:
    """
    Filled rectangular board.

    costs is row-major (costs[row][col]); tile_types maps (col, row) to a
    TileType; missing lists cells left without a tile.
    """
    model = GameModel(
        columns,
        rows,
        [Player(player_id=p, name=p.upper()) for p in players],
        config=config,
        random_source=random_source or ScriptedRandom(),
    )
    tile_types = tile_types or {}
    for row in range(rows):
        for col in range(columns):
            if (col, row) in missing:
                continue
            model.add_tile(Tile(
                position=(col, row),
                tile_type=tile_types.get((col, row), TileType.NORMAL),
                move_cost=costs[row][col] if costs else 1,
            ))
    model.link_neighbors()
    for unit, coord in placements:
        model.add_unit(unit, coord)
    if start:
        model.start_game()
    return model


@pytest.fixture
def scripted_hits() -> ScriptedRandom:
    """Every strike hits, none crits."""
    return ScriptedRandom((0, 99))


@pytest.fixture
def duel_model(scripted_hits) -> GameModel:
    """Built-in duel: two fighters on an open 5x5 field, p1 to move."""
    return build_game(create_duel_scenario(), random_source=scripted_hits)


@pytest.fixture
def adjacent_model() -> GameModel:
    """Two default units side by side on a 3x1 strip, p1 to move."""
    attacker = make_unit("attacker", "p1")
    defender = make_unit("defender", "p2")
    return build_model(3, 1, [(attacker, (0, 0)), (defender, (1, 0))])


@pytest.fixture
def cost_grid():
    """Weighted 3x3 terrain, row-major."""
    return [
        [1, 1, 2],
        [1, 3, 1],
        [2, 1, 1],
    ]
