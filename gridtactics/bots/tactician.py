"""
Tactician - a greedy tactics bot.

Per decision, in priority order:
1. The attack or skill with the best positive evaluation
2. A relocation that brings a unit into range of an enemy (cheapest path)
3. A relocation that closes on the nearest enemy
4. Wait with the first unit that still has to act
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
import logging

from ..engine_core.action import GameMove, MoveType
from .evaluator import EvaluationWeights, MoveEvaluator
from .policy import BotDecision, BotPolicy

if TYPE_CHECKING:
    from ..engine_core.model import GameModel
    from ..engine_core.units import Unit

logger = logging.getLogger(__name__)


@dataclass
class TacticianPolicy(BotPolicy):
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)

    def __post_init__(self):
        self.evaluator = MoveEvaluator(self.weights)

    def select_move(self, model: GameModel, legal_moves: list[GameMove]) -> BotDecision:
        if not legal_moves:
            raise ValueError("No legal moves available")

        decision = self._best_action(model, legal_moves)
        if decision is None:
            decision = self._best_relocation(model, legal_moves)
        if decision is None:
            wait = next(m for m in legal_moves if m.move_type == MoveType.WAIT)
            decision = BotDecision(move=wait, explanation="Nothing worth doing; waiting")
        decision.evaluated_moves = len(legal_moves)
        logger.debug("%s chose %s: %s", self.get_name(), decision.move.describe(), decision.explanation)
        return decision

    def _best_action(self, model: GameModel, legal_moves: list[GameMove]) -> BotDecision | None:
        candidates = [m for m in legal_moves if m.move_type in {MoveType.ATTACK, MoveType.SKILL}]
        scores = {m: self.evaluator.evaluate(model, m) for m in candidates}
        if not scores:
            return None
        best = max(candidates, key=lambda m: scores[m])
        if scores[best] <= 0:
            return None
        target = model.get_unit_at(best.end)
        return BotDecision(
            move=best,
            explanation=f"{best.describe()} on {target.name}",
            best_score=scores[best],
            evaluation_details={m.describe(): round(s, 2) for m, s in scores.items()},
        )

    def _best_relocation(self, model: GameModel, legal_moves: list[GameMove]) -> BotDecision | None:
        relocations: dict[tuple, list[GameMove]] = {}
        for move in legal_moves:
            if move.move_type == MoveType.MOVE:
                relocations.setdefault(move.start, []).append(move)

        for start, options in relocations.items():
            unit = model.get_unit_at(start)
            enemies = self._enemies(model, unit)
            if not enemies:
                continue

            engage = self._engage_move(model, unit, enemies, options)
            if engage is not None:
                return engage

            approach = self._approach_move(model, unit, enemies, options)
            if approach is not None:
                return approach
        return None

    def _engage_move(self, model: GameModel, unit: Unit, enemies: list[Unit], options: list[GameMove]) -> BotDecision | None:
        reach = unit.weapon.range if unit.weapon else 1
        best = None
        for enemy in enemies:
            path = model.shortest_path_to_engage(unit, unit.position, enemy.position, reach)
            if not path or len(path) < 2:
                continue
            cost = sum(unit.move_cost(model.get_tile_at(c)) for c in path[1:])
            if best is None or cost < best[0]:
                best = (cost, path, enemy)
        if best is None:
            return None

        cost, path, enemy = best
        move = GameMove.move(unit.position, path[-1])
        if move not in options:
            return None
        return BotDecision(
            move=move,
            explanation=f"{unit.name} engages {enemy.name}",
            best_score=-cost,
            evaluation_details={"path": [list(c) for c in path]},
        )

    def _approach_move(self, model: GameModel, unit: Unit, enemies: list[Unit], options: list[GameMove]) -> BotDecision | None:
        nearest = None
        for enemy in enemies:
            distances = self.evaluator.travel_costs(model, unit, enemy.position)
            distance = distances.get(unit.position)
            if distance is not None and (nearest is None or distance < nearest[0]):
                nearest = (distance, enemy, distances)
        if nearest is None:
            return None

        _, enemy, distances = nearest
        scored = [(self.evaluator.approach_score(distances, unit.position, m.end), m) for m in options]
        score, move = max(scored, key=lambda pair: pair[0])
        if score <= 0:
            return None
        return BotDecision(
            move=move,
            explanation=f"{unit.name} advances toward {enemy.name}",
            best_score=score,
        )

    @staticmethod
    def _enemies(model: GameModel, unit: Unit) -> list[Unit]:
        return [
            other
            for player in model.players
            if player.player_id != unit.player_id
            for other in player.living_units
        ]
