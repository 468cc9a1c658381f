"""
Game State - players, board occupancy and turn bookkeeping.

Units are mutated in place during play; GameState owns the only
Coord -> Unit occupancy map and the turn pointer. Only the Reducer
(and GameModel.start_game) write to it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from .board import Coord, Tile, TileGraph

if TYPE_CHECKING:
    from .units import Unit


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class BoardSetupError(Exception):
    """Raised when tiles or units are placed inconsistently during setup."""


@dataclass
class Player:
    """A controller and its ordered roster. Defeated units stay listed."""
    player_id: str
    name: str
    units: list[Unit] = field(default_factory=list)

    @property
    def living_units(self) -> list[Unit]:
        return [u for u in self.units if u.is_alive]

    @property
    def has_alive_unit(self) -> bool:
        return any(u.is_alive for u in self.units)

    @property
    def all_moved(self) -> bool:
        return all(u.has_moved for u in self.living_units)

    def start_turn(self):
        """Make every living unit available again."""
        for unit in self.living_units:
            unit.has_moved = False

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "units": [u.unit_id for u in self.units],
            "living": len(self.living_units),
        }


class Board:
    """Tile graph plus the occupancy map of living units."""

    def __init__(self, tiles: TileGraph):
        self.tiles = tiles
        self._occupancy: dict[Coord, Unit] = {}

    def unit_at(self, coord) -> Unit | None:
        if coord is None:
            return None
        return self._occupancy.get(Coord(*coord))

    def tile_at(self, coord) -> Tile | None:
        return self.tiles.get_tile(coord)

    def place(self, unit: Unit, coord):
        coord = Coord(*coord)
        if self.tiles.get_tile(coord) is None:
            raise BoardSetupError(f"No tile at {coord} for unit '{unit.unit_id}'")
        if coord in self._occupancy:
            raise BoardSetupError(
                f"Tile {coord} already holds '{self._occupancy[coord].unit_id}'"
            )
        self._occupancy[coord] = unit
        unit.position = coord

    def relocate(self, unit: Unit, coord):
        """Move a placed unit to a free tile."""
        coord = Coord(*coord)
        if unit.position == coord:
            return
        del self._occupancy[unit.position]
        self._occupancy[coord] = unit
        unit.position = coord

    def remove(self, unit: Unit):
        """Take a defeated unit off the board."""
        if unit.position is not None and self._occupancy.get(unit.position) is unit:
            del self._occupancy[unit.position]
        unit.position = None

    def __len__(self) -> int:
        return len(self._occupancy)


@dataclass
class GameState:
    """
    Mutable state of one game.

    `current_index` points into `players`; `turn` counts full rounds and
    starts at 1. A unit may relocate once per turn.
    """
    board: Board
    players: list[Player]
    phase: GamePhase = GamePhase.SETUP
    turn: int = 1
    current_index: int = 0
    relocated: set[str] = field(default_factory=set)  # Unit ids that used their MOVE this turn

    @property
    def current_player(self) -> Player:
        return self.players[self.current_index]

    @property
    def num_players(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def all_units(self) -> Iterator[Unit]:
        for player in self.players:
            yield from player.units

    def get_unit(self, unit_id: str) -> Unit | None:
        for unit in self.all_units():
            if unit.unit_id == unit_id:
                return unit
        return None

    @property
    def players_alive(self) -> list[Player]:
        return [p for p in self.players if p.has_alive_unit]

    @property
    def game_has_ended(self) -> bool:
        """At most one player still has living units."""
        return len(self.players_alive) <= 1

    @property
    def winner(self) -> Player | None:
        if not self.game_has_ended:
            return None
        alive = self.players_alive
        return alive[0] if alive else None
