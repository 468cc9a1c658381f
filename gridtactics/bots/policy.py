"""
Bot policies for computer-controlled players.

The game loop hands a policy the model and the current player's legal
moves; the policy answers with one of those moves wrapped in a BotDecision.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

if TYPE_CHECKING:
    from ..engine_core.action import GameMove
    from ..engine_core.model import GameModel


@dataclass
class BotDecision:
    """The chosen move plus what the bot knew when choosing it."""
    move: GameMove
    explanation: str = ""
    confidence: float = 1.0

    # Filled in by scoring policies
    evaluated_moves: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Chooses one move for the player whose turn it is.

    Policies never mutate the model; the game loop applies the move.
    """

    @abstractmethod
    def select_move(self, model: GameModel, legal_moves: list[GameMove]) -> BotDecision:
        """
        Select a move from the legal moves.

        Args:
            model: Current game
            legal_moves: Legal moves of the current player

        Returns:
            BotDecision with the selected move
        """
        pass

    def get_name(self) -> str:
        """Name shown in logs and session listings."""
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """Uniform pick over the legal moves, reproducible from a seed."""

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(self, model: GameModel, legal_moves: list[GameMove]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        move = self.rng.choice(legal_moves)
        return BotDecision(
            move=move,
            explanation="Random pick",
            confidence=1.0 / len(legal_moves),
            evaluated_moves=len(legal_moves),
        )


class FirstLegalPolicy(BotPolicy):
    """Takes the first legal move in generation order."""

    def select_move(self, model: GameModel, legal_moves: list[GameMove]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=legal_moves[0],
            explanation="Selected first legal move",
            evaluated_moves=1,
        )
