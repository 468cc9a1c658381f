"""
Request handling behind the HTTP routes.

APIService turns request schemas into engine moves and engine state back
into response schemas. It knows nothing about HTTP. Missing sessions
and rejected moves come back as ErrorResponse values; a bad scenario
raises from create_session.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateSessionRequest,
    SubmitMoveRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    UnitOptionsResponse,
    MoveResponse,
    ErrorResponse,
    # Shared
    TileInfo,
    UnitInfo,
    PlayerInfo,
    MoveInfo,
    StrikeInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from ..catalog import SCENARIOS
from ..engine_core.action import GameMove, MoveType
from ..engine_core.board import Coord
from ..engine_core.units import Unit
from ..scenario import load_scenario
from ..session import SessionManager, Session, SessionState, GameLoop, LoopState

logger = logging.getLogger(__name__)


def _coords(coords) -> list[list[int]]:
    return [list(c) for c in sorted(coords)]


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session (bots that play before the human move immediately)
        session_response = service.create_session(request)

        # Ask where a unit can go, then move it
        options = service.get_unit_options(session_id, unit_id)
        move_response = service.submit_move(session_id, request)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    default_seed: int | None = None

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Raises ValueError for unknown scenarios, players or policies and
        ScenarioError for invalid scenario data.
        """
        if request.scenario is not None:
            spec = load_scenario(request.scenario)
        elif request.scenario_name in SCENARIOS:
            spec = SCENARIOS[request.scenario_name]()
        else:
            raise ValueError(
                f"Unknown scenario '{request.scenario_name}'. Known: {', '.join(sorted(SCENARIOS))}"
            )

        human = request.human_player_id or spec.players[0].player_id
        seed = request.random_seed if request.random_seed is not None else self.default_seed
        session = self.session_manager.create_session(
            spec,
            human_player_id=human,
            bot_policy=request.bot_policy,
            seed=seed,
        )

        game_loop = GameLoop(session)
        self._game_loops[session.session_id] = game_loop
        result = game_loop.run_bot_turns()
        logger.debug("Session %s opened with %d bot move(s)", session.session_id, len(result.bot_moves))

        response = self._session_to_response(session)
        response.bot_moves = result.bot_moves
        return response

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        """
        Get session status.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        """
        Get current game state.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        model = session.model
        winner = model.winner
        return GameStateResponse(
            session_id=session_id,
            status=self._status(session),
            columns=model.columns,
            rows=model.rows,
            tiles=[
                TileInfo(
                    col=tile.position.col,
                    row=tile.position.row,
                    tile_type=tile.tile_type.value,
                    move_cost=tile.move_cost,
                )
                for tile in model.tiles.tiles()
            ],
            players=self._players(session),
            current_player_id=model.current_player.player_id,
            turn=model.turn,
            phase=model.phase.value,
            winner_id=winner.player_id if winner else None,
            move_log=list(session.move_log),
        )

    def get_unit_options(self, session_id: str, unit_id: str) -> UnitOptionsResponse | ErrorResponse:
        """
        Get where a unit may move, attack and use skills.

        The sets are the ones the engine checks moves against.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        model = session.model
        unit = model.get_unit(unit_id)
        if unit is None:
            return ErrorResponse(
                error=f"Unit {unit_id} not found",
                error_code=ErrorCode.UNIT_NOT_FOUND,
            )

        if not unit.is_alive:
            return UnitOptionsResponse(session_id=session_id, unit=self._unit_info(unit))

        return UnitOptionsResponse(
            session_id=session_id,
            unit=self._unit_info(unit),
            move_locations=_coords(model.query_move_locations(unit)),
            attack_locations=_coords(model.query_attack_locations(unit)),
            skill_locations={
                skill.name: _coords(coords)
                for skill, coords in model.query_skill_locations(unit).items()
            },
            legal_moves=[MoveInfo(**m.to_dict()) for m in model.legal_moves(unit)],
        )

    def submit_move(self, session_id: str, request: SubmitMoveRequest) -> MoveResponse | ErrorResponse:
        """
        Apply a human move, then let the bots play.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        game_loop = self._game_loops.get(session_id)
        if game_loop is None:
            game_loop = self._game_loops[session_id] = GameLoop(session)

        if not session.is_human_turn():
            return ErrorResponse(
                error="It is not the human player's turn",
                error_code=ErrorCode.NOT_YOUR_TURN,
                details={"current_player_id": session.model.current_player.player_id},
            )

        try:
            move = self._to_game_move(session, request)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)

        result = game_loop.submit_move(move)
        if result.move_result is not None and not result.move_result.success:
            return ErrorResponse(
                error=result.move_result.error,
                error_code=ErrorCode.MOVE_REJECTED,
                details={"engine_code": result.move_result.error_code.value},
            )

        model = session.model
        strikes = result.move_result.strikes if result.move_result else []
        return MoveResponse(
            session_id=session_id,
            success=result.success,
            status=self._status(session, result.loop_state),
            changes=result.changes,
            strikes=[StrikeInfo(**s.to_dict()) for s in strikes],
            bot_moves=result.bot_moves,
            current_player_id=model.current_player.player_id,
            turn=model.turn,
            winner_id=result.winner,
        )

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """
        End a game session.
        """
        self._game_loops.pop(session_id, None)
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """
        List active session IDs.
        """
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Helper methods
    # =========================================================================

    @staticmethod
    def _not_found(session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    @staticmethod
    def _to_game_move(session: Session, request: SubmitMoveRequest) -> GameMove:
        """Build an engine move; skill names resolve against the acting unit."""
        try:
            move_type = MoveType(request.move_type)
        except ValueError:
            raise ValueError(f"Unknown move type '{request.move_type}'")

        start = Coord(*request.start)
        end = Coord(*request.end)
        skill = None
        if move_type == MoveType.SKILL:
            unit = session.model.get_unit_at(start)
            if unit is not None:
                skill = next((s for s in unit.skills if s.name == request.skill), None)
        return GameMove(move_type=move_type, start=start, end=end, skill=skill)

    def _session_to_response(self, session: Session) -> SessionResponse:
        """Convert Session to SessionResponse."""
        model = session.model
        return SessionResponse(
            session_id=session.session_id,
            status=self._status(session),
            scenario_name=session.scenario_name,
            human_player_id=session.human_player_id,
            players=self._players(session, include_units=False),
            current_player_id=model.current_player.player_id,
            turn=model.turn,
            created_at=session.created_at,
        )

    def _players(self, session: Session, include_units: bool = True) -> list[PlayerInfo]:
        model = session.model
        return [
            PlayerInfo(
                player_id=player.player_id,
                name=player.name,
                is_human=player.player_id == session.human_player_id,
                is_current_turn=player.player_id == model.current_player.player_id,
                living_units=len(player.living_units),
                units=[self._unit_info(u) for u in player.units] if include_units else [],
            )
            for player in model.players
        ]

    @staticmethod
    def _unit_info(unit: Unit) -> UnitInfo:
        return UnitInfo(
            unit_id=unit.unit_id,
            name=unit.name,
            unit_class=unit.unit_class,
            unit_type=unit.unit_type.value,
            player_id=unit.player_id,
            level=unit.level,
            experience=unit.experience,
            hp=unit.hp,
            max_hp=unit.max_hp,
            position=list(unit.position) if unit.position else None,
            has_moved=unit.has_moved,
            is_alive=unit.is_alive,
            weapon=unit.weapon.name if unit.weapon else None,
            skills=[s.name for s in unit.skills],
        )

    def _status(self, session: Session, loop_state: LoopState | None = None) -> SessionStatus:
        """Convert session and loop state to API status."""
        if session.state in {SessionState.GAME_OVER, SessionState.ABANDONED} or session.model.game_has_ended:
            return SessionStatus.GAME_OVER
        if loop_state == LoopState.STOPPED:
            return SessionStatus.STOPPED
        if session.is_human_turn():
            return SessionStatus.YOUR_TURN
        return SessionStatus.BOT_TURN
