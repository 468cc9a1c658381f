"""
Move Evaluator - Scores candidate moves for bot decision-making.

The evaluator assigns a numeric score to a move based on:
- Expected damage dealt (hit chance x damage, kills weighted up)
- Expected damage taken from the counter
- Healing and buffs granted to allies
- Progress toward the nearest enemy for relocations

Scores are computed from the DamageCalculator formulas; nothing is rolled.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..engine_core.action import MoveType
from ..engine_core.pathing import WeightedGraph
from ..engine_core.skills import SingleDamageSkill, SingleSupportSkill, SupportEffect

if TYPE_CHECKING:
    from ..engine_core.action import GameMove
    from ..engine_core.board import Coord
    from ..engine_core.model import GameModel
    from ..engine_core.units import Unit


@dataclass
class EvaluationWeights:
    """
    Weights for the move evaluator.

    Higher values = more importance.
    """
    damage_dealt: float = 1.0
    kill_bonus: float = 30.0
    damage_taken: float = -0.6  # Multiplies expected counter damage
    healing: float = 0.8
    buff: float = 2.0
    skill_cost: float = -0.5  # Per HP spent
    approach: float = 1.0  # Per point of path cost closed on the nearest enemy


class MoveEvaluator:
    """
    Evaluates single moves with expected-value arithmetic.

    Used by TacticianPolicy:
    1. Score every attack and skill move
    2. Otherwise score relocations by how far they close on an enemy
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, model: GameModel, move: GameMove) -> float:
        unit = model.get_unit_at(move.start)
        if unit is None:
            return 0.0
        if move.move_type == MoveType.ATTACK:
            return self._evaluate_attack(model, unit, model.get_unit_at(move.end))
        if move.move_type == MoveType.SKILL:
            return self._evaluate_skill(model, unit, move)
        return 0.0

    def _evaluate_attack(self, model: GameModel, attacker: Unit, defender: Unit | None) -> float:
        if defender is None:
            return 0.0
        calc = model.calculator
        avoid = model.combat.terrain_avoid(defender)
        hit = calc.hit_chance(attacker, defender, avoid) / 100
        damage = calc.damage(attacker, defender)
        score = self._strike_value(hit, damage, defender)

        reach = defender.weapon.range if defender.weapon else 0
        if damage < defender.hp and model.combat.can_counter(attacker, defender, reach):
            score += self._counter_penalty(model, defender, attacker)
        return score

    def _evaluate_skill(self, model: GameModel, unit: Unit, move: GameMove) -> float:
        skill = move.skill
        target = model.get_unit_at(move.end)
        if target is None:
            return 0.0
        score = self.weights.skill_cost * skill.cost

        if isinstance(skill, SingleDamageSkill):
            calc = model.calculator
            avoid = model.combat.terrain_avoid(target)
            hit = calc.skill_hit_chance(unit, target, skill, avoid) / 100
            damage = calc.skill_damage(unit, target, skill)
            score += self._strike_value(hit, damage, target)
            if damage < target.hp and model.combat.can_counter(unit, target, skill.range):
                score += self._counter_penalty(model, target, unit)
        elif isinstance(skill, SingleSupportSkill):
            if skill.effect == SupportEffect.HEAL:
                amount = min(skill.power + unit.effective_stat("magic") // 2, target.max_hp - target.hp)
                score += self.weights.healing * amount
            else:
                score += self.weights.buff * skill.power
        return score

    def _strike_value(self, hit: float, damage: int, defender: Unit) -> float:
        value = hit * min(damage, defender.hp) * self.weights.damage_dealt
        if damage >= defender.hp:
            value += hit * self.weights.kill_bonus
        return value

    def _counter_penalty(self, model: GameModel, defender: Unit, attacker: Unit) -> float:
        calc = model.calculator
        hit = calc.hit_chance(defender, attacker, model.combat.terrain_avoid(attacker)) / 100
        return hit * calc.damage(defender, attacker) * self.weights.damage_taken

    # ------------------------------------------------------------------
    # Relocation
    # ------------------------------------------------------------------

    def travel_costs(self, model: GameModel, unit: Unit, target: Coord) -> dict[Coord, int]:
        """
        Whole-board path cost from every tile the unit could stand on to target.

        Ignores the movement budget and occupancy; used to rank approach moves.
        """
        costs = {tile.position: unit.move_cost(tile) for tile in model.tiles.tiles() if unit.can_move(tile)}
        costs[target] = 1
        distances = WeightedGraph(costs, model.tiles).shortest_distances_from(target)
        return {coord: result.cost for coord, result in distances.items()}

    def approach_score(self, distances: dict[Coord, int], start: Coord, destination: Coord) -> float:
        """How much a relocation closes the distance to target (negative if it moves away)."""
        before = distances.get(start)
        after = distances.get(destination)
        if before is None or after is None:
            return 0.0
        return (before - after) * self.weights.approach
