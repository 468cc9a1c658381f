"""Built-in unit classes."""

from ..engine_core.units import UnitType
from ..scenario.schema import UnitTemplate


UNIT_CLASSES: dict[str, UnitTemplate] = {
    "Fighter": UnitTemplate(
        unit_class="Fighter",
        unit_type=UnitType.INFANTRY,
        stats={"max_hp": 24, "strength": 8, "defense": 4, "speed": 5, "skill": 5, "luck": 2, "movement": 5},
        weapon="Steel Axe",
        skills=["Power Strike"],
        level_up_gains={"max_hp": 2, "strength": 1, "defense": 1},
    ),
    "Swordsman": UnitTemplate(
        unit_class="Swordsman",
        unit_type=UnitType.INFANTRY,
        stats={"max_hp": 20, "strength": 6, "defense": 3, "speed": 8, "skill": 8, "luck": 4, "movement": 5},
        weapon="Iron Sword",
        skills=["Swiftness"],
        level_up_gains={"max_hp": 1, "speed": 1, "skill": 1},
    ),
    "Archer": UnitTemplate(
        unit_class="Archer",
        unit_type=UnitType.INFANTRY,
        stats={"max_hp": 18, "strength": 6, "defense": 2, "speed": 6, "skill": 8, "luck": 3, "movement": 5},
        weapon="Short Bow",
        skills=["Steady Aim"],
        level_up_gains={"max_hp": 1, "strength": 1, "skill": 1},
    ),
    "Knight": UnitTemplate(
        unit_class="Knight",
        unit_type=UnitType.ARMORED,
        stats={"max_hp": 26, "strength": 7, "defense": 9, "resistance": 1, "speed": 2, "skill": 4, "movement": 4},
        weapon="Iron Lance",
        skills=["Toughness"],
        level_up_gains={"max_hp": 2, "defense": 2},
    ),
    "Cavalier": UnitTemplate(
        unit_class="Cavalier",
        unit_type=UnitType.CAVALRY,
        stats={"max_hp": 22, "strength": 7, "defense": 5, "resistance": 1, "speed": 6, "skill": 6, "luck": 3, "movement": 7},
        weapon="Iron Lance",
        level_up_gains={"max_hp": 2, "strength": 1, "speed": 1},
    ),
    "Pegasus Knight": UnitTemplate(
        unit_class="Pegasus Knight",
        unit_type=UnitType.FLIER,
        stats={"max_hp": 18, "strength": 5, "defense": 3, "resistance": 5, "speed": 9, "skill": 6, "luck": 5, "movement": 7},
        weapon="Iron Lance",
        level_up_gains={"max_hp": 1, "speed": 1, "resistance": 1},
    ),
    "Mage": UnitTemplate(
        unit_class="Mage",
        unit_type=UnitType.INFANTRY,
        stats={"max_hp": 17, "strength": 1, "magic": 8, "defense": 2, "resistance": 6, "speed": 5, "skill": 6, "luck": 3, "movement": 5},
        weapon="Fire Tome",
        level_up_gains={"max_hp": 1, "magic": 2, "resistance": 1},
    ),
    "Cleric": UnitTemplate(
        unit_class="Cleric",
        unit_type=UnitType.INFANTRY,
        stats={"max_hp": 16, "strength": 0, "magic": 6, "defense": 1, "resistance": 7, "speed": 5, "skill": 4, "luck": 6, "movement": 5},
        weapon="Oak Staff",
        skills=["Rally"],
        level_up_gains={"max_hp": 1, "magic": 1, "resistance": 2},
    ),
}
