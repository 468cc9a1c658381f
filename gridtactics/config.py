"""
Rules configuration for the tactics engine.

Every tunable constant of the combat and turn rules lives here so a
GameModel can be built with different rule sets side by side.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class ReachabilityMode(Enum):
    """How the movement search resolves tile costs."""
    DIJKSTRA = "dijkstra"
    LEGACY_FIFO = "legacy_fifo"  # Same-speed queue, kept for replay parity only


@dataclass
class RulesConfig:
    """
    Configuration of the combat, progression and terrain rules.

    Passed explicitly to GameModel; nothing reads it from globals.
    """

    # ===== Movement =====
    reachability_mode: ReachabilityMode = ReachabilityMode.DIJKSTRA
    """Search used for reachable sets. LEGACY_FIFO under-reports on weighted terrain."""

    # ===== Combat =====
    base_hit: int = 70
    """Hit chance before attacker/defender modifiers"""

    crit_multiplier: int = 3
    """Critical hits deal this multiple of normal damage"""

    # ===== Experience =====
    exp_base: int = 10
    """Experience for hitting a same-level unit"""

    exp_level_factor: int = 3
    """Extra experience per level the defender is above the attacker"""

    exp_kill_bonus: int = 20
    """Bonus experience when the hit defeats the defender"""

    exp_per_level: int = 100
    """Experience needed for one level"""

    max_level: int = 20
    """Units stop gaining experience at this level"""

    # ===== Terrain =====
    damage_tile_amount: int = 5
    """HP lost at turn start on a Damage tile (never lethal)"""

    fortify_heal_amount: int = 5
    """HP restored at turn start on a Fortify tile"""

    fortify_avoid_bonus: int = 20
    """Hit chance removed when the defender stands on a Fortify tile"""

    # ===== Turn limits =====
    bot_turn_limit: int = 200
    """Safety limit on moves a GameLoop applies in one bot run"""

    stat_caps: dict[str, int] = field(default_factory=lambda: {
        "max_hp": 80,
        "strength": 40,
        "magic": 40,
        "defense": 40,
        "resistance": 40,
        "speed": 40,
        "skill": 40,
        "luck": 40,
        "movement": 12,
    })
    """Upper bound for each stat after level ups"""


# ===== Preset Configurations =====

def get_default_config() -> RulesConfig:
    """Standard rules."""
    return RulesConfig()


def get_legacy_config() -> RulesConfig:
    """
    Rules matching the legacy client's movement search.

    Only for replaying games recorded against that behaviour.
    """
    return RulesConfig(reachability_mode=ReachabilityMode.LEGACY_FIFO)


def get_fast_config() -> RulesConfig:
    """Configuration for quick simulations: faster levelling, short bot runs."""
    return RulesConfig(
        exp_per_level=50,
        bot_turn_limit=60,
    )
