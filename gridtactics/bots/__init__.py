"""
Bots module - Computer-controlled players.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy / FirstLegalPolicy: Baselines
- MoveEvaluator: Expected-value move scoring
- TacticianPolicy: Greedy attack-or-advance bot
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .evaluator import MoveEvaluator, EvaluationWeights
from .tactician import TacticianPolicy

POLICIES = {
    "random": RandomPolicy,
    "first_legal": FirstLegalPolicy,
    "tactician": TacticianPolicy,
}

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "MoveEvaluator",
    "EvaluationWeights",
    "TacticianPolicy",
    "POLICIES",
]
