"""
Board - tiles and their 4-directional adjacency.

Tiles are inserted once from scenario data; neighbours are linked in a
single pass after every tile exists. Lookups outside the grid return None.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, NamedTuple

DEFAULT_MOVE_COST = 1


class Coord(NamedTuple):
    """Board position as (column, row)."""
    col: int
    row: int

    def __str__(self) -> str:
        return f"({self.col}, {self.row})"


class TileType(Enum):
    """Kinds of board tiles."""
    NORMAL = "normal"
    OBSTACLE = "obstacle"  # Passable for some unit types only
    DAMAGE = "damage"  # Hurts units at the start of their turn
    FORTIFY = "fortify"  # Heals at turn start and raises avoid
    BOUNDARY = "boundary"  # Impassable


@dataclass(eq=False)
class Tile:
    """
    A single board tile.

    Identity-compared: two tiles are the same only if they are the same object.
    """
    position: Coord
    tile_type: TileType = TileType.NORMAL
    move_cost: int = DEFAULT_MOVE_COST
    neighbors: list[Tile] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.position = Coord(*self.position)
        if self.move_cost < 1:
            raise ValueError(f"Tile {self.position} has non-positive move cost {self.move_cost}")


class TileGraph:
    """
    Grid of tiles with orthogonal adjacency.

    Cells may be left unfilled; they behave like the board edge.
    """

    def __init__(self, columns: int, rows: int):
        if columns < 1 or rows < 1:
            raise ValueError(f"Board must be at least 1x1, got {columns}x{rows}")
        self.columns = columns
        self.rows = rows
        self._tiles: dict[Coord, Tile] = {}
        self._linked = False

    def in_bounds(self, coord: tuple[int, int]) -> bool:
        """Check if a coordinate lies inside the grid."""
        col, row = coord
        return 0 <= col < self.columns and 0 <= row < self.rows

    def add_tile(self, tile: Tile):
        """Insert a tile. Must happen before link_neighbors()."""
        if self._linked:
            raise ValueError("Cannot add tiles after neighbours were linked")
        if not self.in_bounds(tile.position):
            raise ValueError(f"Tile {tile.position} is outside a {self.columns}x{self.rows} board")
        if tile.position in self._tiles:
            raise ValueError(f"Duplicate tile at {tile.position}")
        self._tiles[tile.position] = tile

    def link_neighbors(self):
        """Link every tile to the orthogonally adjacent tiles that exist."""
        for coord, tile in self._tiles.items():
            tile.neighbors = []
            for candidate in self._adjacent(coord):
                neighbor = self._tiles.get(candidate)
                if neighbor is not None:
                    tile.neighbors.append(neighbor)
        self._linked = True

    @property
    def is_linked(self) -> bool:
        return self._linked

    def get_tile(self, coord: tuple[int, int]) -> Tile | None:
        """Get the tile at a coordinate, or None if off the board or unfilled."""
        if not self.in_bounds(coord):
            return None
        return self._tiles.get(Coord(*coord))

    def neighbor_coords(self, coord: tuple[int, int]) -> list[Coord]:
        """Positions of the tiles linked to the tile at coord."""
        tile = self.get_tile(coord)
        if tile is None:
            return []
        return [n.position for n in tile.neighbors]

    def range_disk(self, point: tuple[int, int], radius: int) -> set[Coord]:
        """
        All tile positions within graph distance `radius` of `point`.

        Grown from {point} by `radius` rounds of adding every neighbour of
        the current set. Empty if point has no tile.
        """
        origin = Coord(*point)
        if self.get_tile(origin) is None:
            return set()

        locations = {origin}
        for _ in range(max(radius, 0)):
            expanded = set()
            for loc in locations:
                expanded.update(self.neighbor_coords(loc))
            locations |= expanded
        return locations

    def range_disk_union(self, points, radius: int) -> set[Coord]:
        """Union of range disks around several points."""
        result: set[Coord] = set()
        for point in points:
            result |= self.range_disk(point, radius)
        return result

    def tiles(self) -> Iterator[Tile]:
        """Iterate tiles in column-major order."""
        for coord in sorted(self._tiles):
            yield self._tiles[coord]

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, coord) -> bool:
        return self.get_tile(coord) is not None

    @staticmethod
    def _adjacent(coord: Coord) -> list[Coord]:
        col, row = coord
        return [
            Coord(col - 1, row),
            Coord(col + 1, row),
            Coord(col, row - 1),
            Coord(col, row + 1),
        ]

    def __repr__(self):
        return f"TileGraph({len(self._tiles)}/{self.columns * self.rows} tiles)"
