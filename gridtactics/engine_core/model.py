"""
Game Model - the engine's single entry point.

A GameModel is an explicitly constructed value: board, players, rules
config and random source are all owned by the instance, so any number of
games can run side by side.

Lifecycle:
1. Setup: add_tile() for every tile, link_neighbors(), add_unit()
2. start_game(): apply field skills and start the first player's turn
3. Play: query_*() for options, apply_move() to act
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Iterable
import logging

from ..config import RulesConfig, get_default_config
from .action import GameMove, MoveResult
from .action_generator import ActionGenerator
from .board import Coord, Tile, TileGraph
from .combat import CombatResolver
from .damage import DamageCalculator, RandomSource
from .pathing import PathPlanner
from .reducer import Reducer
from .skills import SingleTargetSkill, field_skills
from .state import Board, BoardSetupError, GamePhase, GameState, Player

if TYPE_CHECKING:
    from .units import Unit

logger = logging.getLogger(__name__)


class GameModel:
    """
    Board, rosters and the turn state machine of one game.

    Queries are pure reads. apply_move() and start_game() are the only
    mutating operations once setup is complete.
    """

    def __init__(
        self,
        columns: int,
        rows: int,
        players: Iterable[Player],
        config: RulesConfig | None = None,
        random_source: RandomSource | None = None,
    ):
        self.config = config or get_default_config()
        self.random_source = random_source or RandomSource()

        players = list(players)
        if len(players) < 2:
            raise BoardSetupError("A game needs at least two players")
        if len({p.player_id for p in players}) != len(players):
            raise BoardSetupError("Player ids must be unique")

        self.state = GameState(board=Board(TileGraph(columns, rows)), players=players)
        self.planner = PathPlanner(
            self.state.board.tiles,
            self.state.board.unit_at,
            self.config.reachability_mode,
        )
        self.generator = ActionGenerator(self.state, self.planner)
        self.calculator = DamageCalculator(self.config)
        self.combat = CombatResolver(self.state.board, self.calculator, self.random_source, self.config)
        self.reducer = Reducer(self.state, self.generator, self.combat, self.config)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def _require_setup(self, action: str):
        if self.state.phase != GamePhase.SETUP:
            raise BoardSetupError(f"Cannot {action} after the game has started")

    def add_tile(self, tile: Tile):
        self._require_setup("add tiles")
        try:
            self.state.board.tiles.add_tile(tile)
        except ValueError as e:
            raise BoardSetupError(str(e)) from e

    def link_neighbors(self):
        self._require_setup("link tiles")
        self.state.board.tiles.link_neighbors()

    def add_unit(self, unit: Unit, coord):
        """Place a unit and append it to its owner's roster if needed."""
        self._require_setup("add units")
        if not self.state.board.tiles.is_linked:
            raise BoardSetupError("Link neighbours before placing units")
        player = self.state.get_player(unit.player_id)
        if player is None:
            raise BoardSetupError(f"Unit '{unit.unit_id}' belongs to unknown player '{unit.player_id}'")
        existing = self.state.get_unit(unit.unit_id)
        if existing is not None and existing is not unit:
            raise BoardSetupError(f"Duplicate unit id '{unit.unit_id}'")
        if unit.is_alive:
            self.state.board.place(unit, coord)
        else:
            unit.position = None
        if unit not in player.units:
            player.units.append(unit)

    def start_game(self):
        """Apply passive skills and hand control to the first player."""
        self._require_setup("start the game")
        if not self.state.board.tiles.is_linked:
            raise BoardSetupError("Link neighbours before starting the game")
        for unit in self.state.all_units():
            for skill in field_skills(unit.skills):
                skill.apply_field_skill(unit)

        self.state.phase = GamePhase.PLAYING
        self.state.current_index = 0
        if not self.state.current_player.has_alive_unit:
            self.reducer.switch_player()
        else:
            self.reducer.start_turn(self.state.current_player)
        if self.state.game_has_ended:
            self.state.phase = GamePhase.GAME_OVER
        logger.info("Game started: %s to move", self.current_player.name)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_unit_at(self, coord) -> Unit | None:
        """Living unit on a tile, or None (also for off-board coordinates)."""
        return self.state.board.unit_at(coord)

    def get_tile_at(self, coord) -> Tile | None:
        return self.state.board.tile_at(coord)

    def get_unit(self, unit_id: str) -> Unit | None:
        return self.state.get_unit(unit_id)

    def get_player(self, player_id: str) -> Player | None:
        return self.state.get_player(player_id)

    @property
    def columns(self) -> int:
        return self.state.board.tiles.columns

    @property
    def rows(self) -> int:
        return self.state.board.tiles.rows

    @property
    def tiles(self) -> TileGraph:
        return self.state.board.tiles

    @property
    def players(self) -> list[Player]:
        return self.state.players

    @property
    def current_player(self) -> Player:
        return self.state.current_player

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def game_has_ended(self) -> bool:
        return self.state.game_has_ended

    @property
    def winner(self) -> Player | None:
        return self.state.winner

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_move_locations(self, unit: Unit) -> set[Coord]:
        return self.generator.move_locations(unit)

    def query_attack_locations(self, unit: Unit) -> set[Coord]:
        return self.generator.possible_attack_locations(unit)

    def query_skill_locations(self, unit: Unit) -> dict[SingleTargetSkill, set[Coord]]:
        return self.generator.possible_skill_locations(unit)

    def legal_moves(self, unit: Unit | None = None) -> list[GameMove]:
        """Legal moves of one unit, or of every unit of the current player."""
        if unit is None:
            return self.generator.legal_moves()
        return self.generator.generate(unit)

    def shortest_path(self, unit: Unit, start, end) -> list[Coord] | None:
        return self.planner.shortest_path(unit, start, end)

    def shortest_path_to_engage(self, unit: Unit, start, target, range_: int) -> list[Coord] | None:
        return self.planner.shortest_path_to_engage(unit, start, target, range_)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def apply_move(self, move: GameMove) -> MoveResult:
        return self.reducer.apply(move)

    def __repr__(self):
        return (
            f"GameModel({self.columns}x{self.rows}, turn {self.turn}, "
            f"{self.current_player.name} to move, {self.phase.value})"
        )
