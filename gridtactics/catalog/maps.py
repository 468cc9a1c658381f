"""
Built-in maps.

Layouts are drawn as text, one string per row:
    .  normal       #  obstacle (forest, cost 2)
    ~  damage       +  fortify
    x  boundary     (space) no tile
"""

from ..engine_core.board import TileType
from ..scenario.schema import PlayerRecord, ScenarioSpec, TileRecord, UnitPlacement

LAYOUT_SYMBOLS: dict[str, tuple[TileType, int]] = {
    ".": (TileType.NORMAL, 1),
    "#": (TileType.OBSTACLE, 2),
    "~": (TileType.DAMAGE, 1),
    "+": (TileType.FORTIFY, 1),
    "x": (TileType.BOUNDARY, 1),
}


def tiles_from_layout(layout: list[str]) -> list[TileRecord]:
    """Convert a text layout to tile records. Unknown symbols raise ValueError."""
    tiles = []
    for row, line in enumerate(layout):
        for col, symbol in enumerate(line):
            if symbol == " ":
                continue
            if symbol not in LAYOUT_SYMBOLS:
                raise ValueError(f"Unknown layout symbol {symbol!r} at ({col}, {row})")
            tile_type, cost = LAYOUT_SYMBOLS[symbol]
            tiles.append(TileRecord(col=col, row=row, tile_type=tile_type, move_cost=cost))
    return tiles


SKIRMISH_LAYOUT = [
    "..#.....",
    ".##..+..",
    "....x...",
    "..~.x.#.",
    ".#.x.~..",
    "...x....",
    "..+..##.",
    ".....#..",
]


def create_skirmish_scenario() -> ScenarioSpec:
    """Two players, four units each, on an 8x8 map with mixed terrain."""
    blue = [
        ("blue_fighter", "Fighter", 0, 6),
        ("blue_archer", "Archer", 1, 7),
        ("blue_cleric", "Cleric", 0, 7),
        ("blue_cavalier", "Cavalier", 2, 7),
    ]
    red = [
        ("red_knight", "Knight", 7, 1),
        ("red_mage", "Mage", 6, 0),
        ("red_swordsman", "Swordsman", 7, 0),
        ("red_pegasus", "Pegasus Knight", 5, 0),
    ]
    units = [
        UnitPlacement(unit_id=uid, template=template, col=col, row=row, player=0)
        for uid, template, col, row in blue
    ] + [
        UnitPlacement(unit_id=uid, template=template, col=col, row=row, player=1)
        for uid, template, col, row in red
    ]
    return ScenarioSpec(
        name="Skirmish",
        columns=8,
        rows=8,
        tiles=tiles_from_layout(SKIRMISH_LAYOUT),
        players=[
            PlayerRecord(player_id="blue", name="Blue Army"),
            PlayerRecord(player_id="red", name="Red Army"),
        ],
        units=units,
    )


def create_duel_scenario() -> ScenarioSpec:
    """One fighter each on an open 5x5 field."""
    return ScenarioSpec(
        name="Duel",
        columns=5,
        rows=5,
        tiles=tiles_from_layout(["....."] * 5),
        players=[
            PlayerRecord(player_id="p1", name="Player 1"),
            PlayerRecord(player_id="p2", name="Player 2"),
        ],
        units=[
            UnitPlacement(unit_id="p1_fighter", template="Fighter", col=0, row=2, player=0),
            UnitPlacement(unit_id="p2_fighter", template="Fighter", col=4, row=2, player=1),
        ],
    )


SCENARIOS = {
    "skirmish": create_skirmish_scenario,
    "duel": create_duel_scenario,
}
