"""
Game Loop - drives a session between human moves.

The loop:
1. Human submits a move (validated by the engine)
2. Bots play every player that is not human-controlled
3. Loop stops when the human is up again or the game is over

A safety limit bounds the number of bot moves per run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.state import GamePhase

if TYPE_CHECKING:
    from ..engine_core.action import GameMove, MoveResult
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_HUMAN = "waiting_human"
    RUNNING_BOTS = "running_bots"
    STOPPED = "stopped"  # Safety limit hit or a bot could not move
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of processing a human move and/or bot moves.
    """
    success: bool
    loop_state: LoopState

    # Human-readable changes (human move first, then bots)
    changes: list[str] = field(default_factory=list)
    bot_moves: list[str] = field(default_factory=list)
    move_result: MoveResult | None = None

    errors: list[str] = field(default_factory=list)
    winner: str | None = None


class GameLoop:
    """
    The session game loop driver.

    Usage:
        loop = GameLoop(session)
        result = loop.run_bot_turns()        # bots move first if they start
        result = loop.submit_move(move)      # human move, then bots
    """

    def __init__(self, session: Session, move_limit: int | None = None):
        self.session = session
        self.move_limit = move_limit or session.model.config.bot_turn_limit
        self.state = LoopState.WAITING_HUMAN

    def submit_move(self, move: GameMove) -> TurnResult:
        """Apply a human move; on success let the bots play."""
        from .manager import SessionState

        model = self.session.model
        if not self.session.is_human_turn():
            return TurnResult(
                success=False,
                loop_state=self._current_loop_state(),
                errors=["It is not the human player's turn"],
            )

        player = model.current_player
        result = model.apply_move(move)
        if not result.success:
            return TurnResult(
                success=False,
                loop_state=self.state,
                move_result=result,
                errors=[result.error],
            )

        self.session.move_log.append(f"{player.name}: {move.describe()}")
        bots = self.run_bot_turns()
        bots.changes = result.changes + bots.changes
        bots.move_result = result
        if model.phase == GamePhase.GAME_OVER:
            self.session.state = SessionState.GAME_OVER
        return bots

    def run_bot_turns(self, turn_limit: int | None = None) -> TurnResult:
        """
        Apply bot moves until a human-controlled player is current or the game ends.

        Also stops at the move limit, and once the turn counter passes turn_limit.
        """
        from .manager import SessionState

        model = self.session.model
        changes: list[str] = []
        bot_moves: list[str] = []
        self.state = LoopState.RUNNING_BOTS
        self.session.state = SessionState.BOT_TURN

        applied = 0
        while model.phase == GamePhase.PLAYING and applied < self.move_limit:
            if turn_limit is not None and model.turn > turn_limit:
                break
            player = model.current_player
            bot = self.session.bots.get(player.player_id)
            if bot is None:
                break

            legal = model.legal_moves()
            if not legal:
                self.state = LoopState.STOPPED
                logger.error("No legal moves for bot player %s", player.player_id)
                break

            decision = bot.select_move(model, legal)
            result = model.apply_move(decision.move)
            if not result.success:
                self.state = LoopState.STOPPED
                logger.error("Bot %s chose a rejected move: %s", bot.get_name(), result.error)
                return TurnResult(
                    success=False,
                    loop_state=self.state,
                    changes=changes,
                    bot_moves=bot_moves,
                    move_result=result,
                    errors=[result.error],
                )

            applied += 1
            entry = f"{player.name}: {decision.move.describe()}"
            bot_moves.append(entry)
            self.session.move_log.append(entry)
            changes.extend(result.changes)

        if model.phase == GamePhase.GAME_OVER:
            self.state = LoopState.GAME_OVER
            self.session.state = SessionState.GAME_OVER
        elif self.state == LoopState.STOPPED:
            self.session.state = SessionState.ACTIVE
        elif self.session.is_human_turn():
            self.state = LoopState.WAITING_HUMAN
            self.session.state = SessionState.ACTIVE
        else:
            self.state = LoopState.STOPPED
            self.session.state = SessionState.ACTIVE
            logger.warning("Bot limit reached after %d move(s), turn %d", applied, model.turn)

        return TurnResult(
            success=self.state != LoopState.STOPPED or applied > 0,
            loop_state=self.state,
            changes=changes,
            bot_moves=bot_moves,
            winner=self._winner_id(),
        )

    def _current_loop_state(self) -> LoopState:
        if self.session.model.phase == GamePhase.GAME_OVER:
            return LoopState.GAME_OVER
        return self.state

    def _winner_id(self) -> str | None:
        winner = self.session.model.winner
        return winner.player_id if winner else None
