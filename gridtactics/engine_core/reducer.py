"""
Reducer - Applies moves to the game state.

The reducer is the single point of state mutation during play.
All changes go through apply().

Design principles:
- Validates before applying; a rejected move changes nothing
- Legality reuses the ActionGenerator's query sets
- Returns MoveResult with success/failure
- Owns the turn state machine (advance, wrap, terrain at turn start)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging

from .action import ErrorCode, GameMove, MoveResult, MoveType
from .action_generator import ActionGenerator
from .board import TileType
from .combat import CombatResolver
from .skills import SingleDamageSkill, SingleSupportSkill, SingleTargetSkill
from .state import GamePhase, GameState, Player

if TYPE_CHECKING:
    from ..config import RulesConfig
    from .units import Unit

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies moves to the game state.

    Holds references only; all state is in GameState.
    """
    state: GameState
    generator: ActionGenerator
    combat: CombatResolver
    config: RulesConfig

    def apply(self, move: GameMove) -> MoveResult:
        """
        Apply a move to the game state.

        Returns MoveResult describing the outcome or the rejection.
        """
        rejection = self._validate_move(move)
        if rejection:
            return rejection

        unit = self.state.board.unit_at(move.start)
        handler = self._get_handler(move.move_type)
        result = handler(unit, move)
        if not result.success:
            return result

        if self.state.game_has_ended:
            self.state.phase = GamePhase.GAME_OVER
            result.game_over = True
            winner = self.state.winner
            result.changes.append(f"Game over: {winner.name if winner else 'no one'} wins")
            logger.info("Game over after turn %d", self.state.turn)
        elif self.state.current_player.all_moved:
            result.changes.extend(self.switch_player())
            result.turn_advanced = True
        return result

    def _validate_move(self, move: GameMove) -> MoveResult | None:
        """
        Checks shared by every move kind.

        Returns a failure result if invalid, None if the handler may run.
        """
        if self.state.phase == GamePhase.SETUP:
            return MoveResult.failure("Game has not started", ErrorCode.GAME_NOT_STARTED)
        if self.state.phase == GamePhase.GAME_OVER:
            return MoveResult.failure("Game is over - no moves allowed", ErrorCode.GAME_OVER)

        if move.move_type == MoveType.ITEM:
            return MoveResult.failure("Item moves are not supported", ErrorCode.UNSUPPORTED_MOVE_TYPE)

        unit = self.state.board.unit_at(move.start)
        if unit is None or not unit.is_alive:
            return MoveResult.failure(f"No unit at {move.start}")
        if unit.player_id != self.state.current_player.player_id:
            return MoveResult.failure(
                f"{unit.name} belongs to {unit.player_id}, not the current player",
                ErrorCode.NOT_CURRENT_PLAYER,
            )
        if unit.has_moved:
            return MoveResult.failure(f"{unit.name} has already acted", ErrorCode.UNIT_ALREADY_MOVED)
        return None

    def _get_handler(self, move_type: MoveType):
        """Get the handler function for a move type."""
        handlers = {
            MoveType.MOVE: self._handle_move,
            MoveType.ATTACK: self._handle_attack,
            MoveType.SKILL: self._handle_skill,
            MoveType.WAIT: self._handle_wait,
        }
        return handlers[move_type]

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _handle_move(self, unit: Unit, move: GameMove) -> MoveResult:
        """Relocate the unit. Its turn is not over."""
        if unit.unit_id in self.state.relocated:
            return MoveResult.failure(f"{unit.name} has already relocated this turn")
        if move.end == unit.position:
            return MoveResult.failure(f"{unit.name} is already at {move.end}")
        if move.end not in self.generator.move_locations(unit):
            return MoveResult.failure(f"{unit.name} cannot move to {move.end}")
        self.state.board.relocate(unit, move.end)
        self.state.relocated.add(unit.unit_id)
        return MoveResult.ok(changes=[f"{unit.name} moved to {move.end}"])

    def _handle_attack(self, unit: Unit, move: GameMove) -> MoveResult:
        if move.end not in self.generator.attack_targets(unit):
            return MoveResult.failure(f"{unit.name} cannot attack {move.end}")

        defender = self.state.board.unit_at(move.end)
        strikes = self.combat.exchange(unit, defender)
        unit.has_moved = True
        return MoveResult.ok(
            changes=[f"{unit.name} attacked {defender.name}"] + self._describe(strikes),
            strikes=strikes,
        )

    def _handle_skill(self, unit: Unit, move: GameMove) -> MoveResult:
        """
        Use an active skill.

        Order of checks: availability, target presence, target predicate,
        range, HP. The cost is paid only once every check has passed.
        """
        skill = move.skill
        if not isinstance(skill, SingleTargetSkill) or skill not in unit.skills:
            name = skill.name if skill else "None"
            return MoveResult.failure(
                f"{unit.name} has no active skill '{name}'", ErrorCode.SKILL_NOT_AVAILABLE
            )

        target = self.state.board.unit_at(move.end)
        if target is None:
            return MoveResult.failure(f"No target at {move.end}")
        if not self.generator.skill_is_usable_on_target(unit, skill, target):
            return MoveResult.failure(
                f"{skill.name} cannot target {target.name}", ErrorCode.ILLEGAL_SKILL_TARGET
            )
        if move.end not in self.generator.skill_targets(unit, skill):
            return MoveResult.failure(f"{move.end} is out of range of {skill.name}")
        if unit.hp <= skill.cost:
            return MoveResult.failure(
                f"{unit.name} needs more than {skill.cost} HP to use {skill.name}",
                ErrorCode.INSUFFICIENT_HP,
            )

        unit.take_damage(skill.cost)
        changes = [f"{unit.name} used {skill.name} on {target.name} (cost {skill.cost} HP)"]
        strikes = []
        if isinstance(skill, SingleDamageSkill):
            strikes = self.combat.skill_exchange(unit, target, skill)
            changes.extend(self._describe(strikes))
        elif isinstance(skill, SingleSupportSkill):
            amount = self.combat.support(unit, target, skill)
            changes.append(f"{target.name} received {skill.effect.value} {amount}")
        unit.has_moved = True
        return MoveResult.ok(changes=changes, strikes=strikes)

    def _handle_wait(self, unit: Unit, move: GameMove) -> MoveResult:
        unit.has_moved = True
        return MoveResult.ok(changes=[f"{unit.name} waits"])

    def _describe(self, strikes) -> list[str]:
        lines = []
        for strike in strikes:
            attacker = self.state.get_unit(strike.attacker_id)
            defender = self.state.get_unit(strike.defender_id)
            verb = "countered" if strike.counter else "struck"
            if not strike.hit:
                lines.append(f"{attacker.name} missed {defender.name}")
                continue
            crit = " critically" if strike.critical else ""
            lines.append(f"{attacker.name} {verb} {defender.name}{crit} for {strike.damage}")
            if strike.defeated:
                lines.append(f"{defender.name} was defeated")
        return lines

    # ------------------------------------------------------------------
    # Turn state machine
    # ------------------------------------------------------------------

    def switch_player(self) -> list[str]:
        """
        Hand control to the next player with living units, round-robin.

        Passing index 0 increments the turn counter.
        """
        count = self.state.num_players
        index = self.state.current_index
        for _ in range(count):
            index = (index + 1) % count
            if index == 0:
                self.state.turn += 1
            if self.state.players[index].has_alive_unit:
                break

        self.state.current_index = index
        player = self.state.current_player
        logger.info("Turn %d: %s to move", self.state.turn, player.name)
        return [f"Turn {self.state.turn}: {player.name} to move"] + self.start_turn(player)

    def start_turn(self, player: Player) -> list[str]:
        """Reset the player's units and apply terrain effects under them."""
        player.start_turn()
        self.state.relocated.clear()
        changes = []
        for unit in player.living_units:
            tile = self.state.board.tile_at(unit.position)
            if tile is None:
                continue
            if tile.tile_type == TileType.DAMAGE:
                lost = unit.take_damage(min(self.config.damage_tile_amount, unit.hp - 1))
                if lost:
                    changes.append(f"{unit.name} lost {lost} HP to the terrain")
            elif tile.tile_type == TileType.FORTIFY:
                restored = unit.heal(self.config.fortify_heal_amount)
                if restored:
                    changes.append(f"{unit.name} recovered {restored} HP")
        return changes
