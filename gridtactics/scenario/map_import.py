"""
Map Import - converts level-editor map exports to scenarios.

The editor writes three tile layers (floor, obstacle, wall) per cell and
marks unit spawns with a 1-based player number and a unit class name.
Cells with neither floor nor wall are left empty.
"""

from __future__ import annotations

from ..engine_core.board import TileType
from .schema import MapRecord, MapTileRecord, PlayerRecord, ScenarioSpec, TileRecord, UnitPlacement

OBSTACLE_MOVE_COST = 2


def tile_type_for(record: MapTileRecord) -> tuple[TileType, int]:
    """Layer names -> (tile type, move cost). Walls win over obstacles."""
    if record.wall:
        return TileType.BOUNDARY, 1
    if record.obstacle:
        return TileType.OBSTACLE, OBSTACLE_MOVE_COST
    floor = record.floor.lower()
    if "damage" in floor or "lava" in floor:
        return TileType.DAMAGE, 1
    if "fort" in floor:
        return TileType.FORTIFY, 1
    return TileType.NORMAL, 1


def scenario_from_map(record: MapRecord, name: str = "Imported map") -> ScenarioSpec:
    """
    Build a scenario from map data.

    One player is created per player number found; unit ids are
    '<class>_<col>_<row>' in lowercase.
    """
    tiles = []
    units = []
    player_numbers = sorted({t.player for t in record.tile_data if t.player > 0 and t.unit})
    index_of = {number: index for index, number in enumerate(player_numbers)}

    for cell in record.tile_data:
        if not cell.floor and not cell.wall:
            continue
        tile_type, cost = tile_type_for(cell)
        tiles.append(TileRecord(col=cell.column, row=cell.row, tile_type=tile_type, move_cost=cost))
        if cell.player > 0 and cell.unit:
            unit_id = f"{cell.unit}_{cell.column}_{cell.row}".lower().replace(" ", "_")
            units.append(UnitPlacement(
                unit_id=unit_id,
                template=cell.unit,
                col=cell.column,
                row=cell.row,
                player=index_of[cell.player],
            ))

    players = [
        PlayerRecord(player_id=f"player{number}", name=f"Player {number}")
        for number in player_numbers
    ]
    # Scenarios need two players even if the map only spawns one side
    while len(players) < 2:
        number = len(players) + 1
        players.append(PlayerRecord(player_id=f"player{number}_empty", name=f"Player {number}"))

    return ScenarioSpec(
        name=name,
        columns=record.columns,
        rows=record.rows,
        tiles=tiles,
        players=players,
        units=units,
    )
