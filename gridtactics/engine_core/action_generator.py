"""
Action Generator - target sets and legal moves for a unit.

The action generator is used by:
1. The UI to highlight move/attack/skill tiles
2. Bots to enumerate possible moves
3. The Reducer (is this move in the legal set?)

The same set computations serve all three, so what the UI offers and what
the engine accepts cannot diverge.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .action import GameMove
from .board import Coord
from .skills import SingleDamageSkill, SingleSupportSkill, SingleTargetSkill, single_target_skills
from .state import GamePhase, GameState
from .pathing import PathPlanner

if TYPE_CHECKING:
    from .model import GameModel
    from .units import Unit


@dataclass
class ActionGenerator:
    """
    Composes movement reachability with weapon and skill range.

    Reads the board through GameState and the planner; holds no copy.
    """
    state: GameState
    planner: PathPlanner

    # ------------------------------------------------------------------
    # Occupancy helpers
    # ------------------------------------------------------------------

    def _is_enemy_of(self, unit: Unit, coord: Coord) -> bool:
        other = self.state.board.unit_at(coord)
        return other is not None and other.player_id != unit.player_id

    def _is_ally_of(self, unit: Unit, coord: Coord) -> bool:
        other = self.state.board.unit_at(coord)
        return other is not None and other.player_id == unit.player_id

    def _is_free(self, coord: Coord) -> bool:
        return self.state.board.unit_at(coord) is None

    def _within_range_of_any(self, location: Coord, sources: set[Coord], radius: int) -> bool:
        return not self.state.board.tiles.range_disk(location, radius).isdisjoint(sources)

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------

    def move_locations(self, unit: Unit) -> set[Coord]:
        """Tiles the unit may end a MOVE on."""
        return self.planner.possible_moves(unit)

    # ------------------------------------------------------------------
    # Attacks
    # ------------------------------------------------------------------

    def attack_locations(self, unit: Unit) -> set[Coord]:
        """
        Every tile the unit could threaten from anywhere it can reach,
        keeping tiles that are free or hold an enemy.
        """
        if unit.weapon is None or unit.position is None:
            return set()
        tiles = self.state.board.tiles
        threatened = tiles.range_disk_union(self.planner.reachable(unit), unit.weapon.range)
        return {
            loc for loc in threatened
            if self._is_free(loc) or self._is_enemy_of(unit, loc)
        }

    def possible_attack_locations(self, unit: Unit) -> set[Coord]:
        """Attack locations with at least one possible move tile in range."""
        if unit.weapon is None:
            return set()
        standing = self.planner.possible_moves(unit)
        return {
            loc for loc in self.attack_locations(unit)
            if self._within_range_of_any(loc, standing, unit.weapon.range)
        }

    def attack_targets(self, unit: Unit) -> set[Coord]:
        """Enemy-held tiles the unit can strike from where it stands now."""
        if unit.weapon is None or unit.position is None:
            return set()
        in_range = self.state.board.tiles.range_disk(unit.position, unit.weapon.range)
        return {
            loc for loc in in_range & self.possible_attack_locations(unit)
            if self._is_enemy_of(unit, loc)
        }

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------

    def skill_is_usable_on_target(self, unit: Unit, skill: SingleTargetSkill, target: Unit) -> bool:
        """Applicability predicate plus the self-targeting permission."""
        if target is unit and not skill.can_target_self:
            return False
        return skill.is_usable_on_target(unit, target)

    def _skill_keeps(self, unit: Unit, skill: SingleTargetSkill, loc: Coord) -> bool:
        if loc == unit.position:
            return skill.can_target_self
        if self._is_free(loc):
            return True
        if isinstance(skill, SingleDamageSkill):
            return self._is_enemy_of(unit, loc)
        if isinstance(skill, SingleSupportSkill):
            return self._is_ally_of(unit, loc)
        return True

    def skill_locations(self, unit: Unit) -> dict[SingleTargetSkill, set[Coord]]:
        """Per active skill: tiles it could reach from anywhere the unit can reach."""
        if unit.position is None:
            return {}
        tiles = self.state.board.tiles
        reachable = self.planner.reachable(unit)
        result = {}
        for skill in single_target_skills(unit.skills):
            area = tiles.range_disk_union(reachable, skill.range)
            result[skill] = {loc for loc in area if self._skill_keeps(unit, skill, loc)}
        return result

    def possible_skill_locations(self, unit: Unit) -> dict[SingleTargetSkill, set[Coord]]:
        """
        Skill locations whose occupant (if any) passes the skill's predicate
        and that some possible move tile has in range.
        """
        standing = self.planner.possible_moves(unit)
        result = {}
        for skill, locations in self.skill_locations(unit).items():
            kept = set()
            for loc in locations:
                target = self.state.board.unit_at(loc)
                if target is not None and not self.skill_is_usable_on_target(unit, skill, target):
                    continue
                if self._within_range_of_any(loc, standing, skill.range):
                    kept.add(loc)
            result[skill] = kept
        return result

    def skill_targets(self, unit: Unit, skill: SingleTargetSkill) -> set[Coord]:
        """Occupied tiles the skill can be used on from where the unit stands now."""
        if unit.position is None:
            return set()
        in_range = self.state.board.tiles.range_disk(unit.position, skill.range)
        possible = self.possible_skill_locations(unit).get(skill, set())
        return {loc for loc in in_range & possible if self.state.board.unit_at(loc) is not None}

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def generate(self, unit: Unit) -> list[GameMove]:
        """
        All legal moves for one unit, in a stable order:
        relocations, attacks, skills, then wait.
        """
        if self.state.phase != GamePhase.PLAYING:
            return []
        if not unit.is_alive or unit.has_moved:
            return []
        if unit.player_id != self.state.current_player.player_id:
            return []

        start = unit.position
        moves = []
        if unit.unit_id not in self.state.relocated:
            moves.extend(
                GameMove.move(start, loc)
                for loc in sorted(self.move_locations(unit))
                if loc != start
            )
        moves.extend(GameMove.attack(start, loc) for loc in sorted(self.attack_targets(unit)))
        for skill in single_target_skills(unit.skills):
            if unit.hp <= skill.cost:
                continue
            moves.extend(
                GameMove.use_skill(start, loc, skill)
                for loc in sorted(self.skill_targets(unit, skill))
            )
        moves.append(GameMove.wait(start))
        return moves

    def legal_moves(self) -> list[GameMove]:
        """Legal moves of every unit the current player can still act with."""
        if self.state.phase != GamePhase.PLAYING:
            return []
        moves = []
        for unit in self.state.current_player.living_units:
            moves.extend(self.generate(unit))
        return moves


def legal_moves(model: GameModel) -> list[GameMove]:
    """Convenience function: every legal move of the current player."""
    return model.generator.legal_moves()


def is_legal(model: GameModel, move: GameMove) -> bool:
    """Check if a specific move is among the acting unit's legal moves."""
    unit = model.get_unit_at(move.start)
    if unit is None:
        return False
    return move in model.generator.generate(unit)
