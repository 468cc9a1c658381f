"""
Catalog - built-in content.

Provides:
- SKILLS / WEAPONS: armory records by name
- UNIT_CLASSES: unit templates by class name
- Sample scenarios (skirmish, duel)
"""

from .armory import SKILLS, WEAPONS
from .classes import UNIT_CLASSES
from .maps import SCENARIOS, create_duel_scenario, create_skirmish_scenario, tiles_from_layout

__all__ = [
    "SKILLS",
    "WEAPONS",
    "UNIT_CLASSES",
    "SCENARIOS",
    "create_duel_scenario",
    "create_skirmish_scenario",
    "tiles_from_layout",
]
