"""
In-memory game sessions.

A session is one started GameModel plus a bot for every seat the client
does not play. Sessions live only in this process; take_snapshot() and
restore_game() are the way to carry a game across restarts.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from ..bots import POLICIES, BotPolicy, RandomPolicy
from ..config import RulesConfig
from ..engine_core.damage import RandomSource
from ..engine_core.model import GameModel
from ..engine_core.state import GamePhase
from ..scenario import ScenarioSpec, build_game, load_scenario

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Where a session is in its lifecycle."""
    ACTIVE = "active"  # Waiting for the human player's move
    BOT_TURN = "bot_turn"  # Processing bot moves
    GAME_OVER = "game_over"  # A player won
    ABANDONED = "abandoned"  # Client quit


@dataclass
class Session:
    """One running game and the bots seated in it."""
    session_id: str
    model: GameModel
    created_at: float
    scenario_name: str = ""
    seed: int | None = None

    state: SessionState = SessionState.ACTIVE
    bots: dict[str, BotPolicy] = field(default_factory=dict)
    human_player_id: str | None = None

    move_log: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """False once the game is over or the client left."""
        return self.state in {SessionState.ACTIVE, SessionState.BOT_TURN}

    def is_human_turn(self) -> bool:
        """Check if it's the human player's turn."""
        if self.model.phase != GamePhase.PLAYING:
            return False
        return self.model.current_player.player_id == self.human_player_id


def create_bot(policy: str, seed: int | None = None) -> BotPolicy:
    """Instantiate a bot policy by name."""
    if policy not in POLICIES:
        raise ValueError(f"Unknown bot policy '{policy}'. Known: {', '.join(sorted(POLICIES))}")
    if policy == "random":
        return RandomPolicy(seed)
    return POLICIES[policy]()


class SessionManager:
    """
    Sessions keyed by id.

    `config` is shared by every game the manager creates.
    """

    def __init__(self, config: RulesConfig | None = None):
        self.config = config
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        scenario: ScenarioSpec | dict[str, Any],
        human_player_id: str | None = None,
        bot_policy: str = "tactician",
        seed: int | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            scenario: Scenario records (raises ScenarioError if invalid)
            human_player_id: Player controlled by the client; None for bots only
            bot_policy: Policy name for every other player
            seed: Seed for combat rolls (and random bots)

        Returns:
            New Session with the game started
        """
        spec = load_scenario(scenario)
        model = build_game(spec, config=self.config, random_source=RandomSource(seed))
        player_ids = [p.player_id for p in model.players]
        if human_player_id is not None and human_player_id not in player_ids:
            raise ValueError(f"Unknown player '{human_player_id}'. Players: {', '.join(player_ids)}")

        bots = {
            player_id: create_bot(bot_policy, None if seed is None else seed + index)
            for index, player_id in enumerate(player_ids)
            if player_id != human_player_id
        }

        session = Session(
            session_id=str(uuid.uuid4()),
            model=model,
            created_at=time.time(),
            scenario_name=spec.name,
            seed=seed,
            bots=bots,
            human_player_id=human_player_id,
        )
        if model.phase == GamePhase.GAME_OVER:
            session.state = SessionState.GAME_OVER

        self._sessions[session.session_id] = session
        logger.info("Created session %s (%s)", session.session_id, session.scenario_name)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if no such session exists.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.state = SessionState.GAME_OVER if reason == "completed" else SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600):
        """
        Drop finished sessions created more than `max_age_seconds` ago.

        Sessions still being played are kept regardless of age.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
