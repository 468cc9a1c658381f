"""
Session module - In-memory games against bots.

Provides:
- SessionManager: Creates and tracks sessions
- Session: One game with its bots and move log
- GameLoop: Applies human moves and runs bot turns
"""

from .manager import SessionManager, Session, SessionState, create_bot
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "create_bot",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
