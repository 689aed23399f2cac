"""
Skill bonus resolution.

A character's trained skills become per-category multipliers and flat
bonuses. Each skill declares how its per-level amount composes:

    percent    base * (1 + amount * level / 100)
    compound   base * (1 + amount) ** level
    flat       base + amount * level

Multipliers of different skills in one category multiply together. Skill
bonuses are never stacking penalized. A missing character resolves to the
neutral BonusSet (every multiplier 1.0, every flat bonus 0).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Sequence

from shipfit_app.models import Character


class SkillCategory(Enum):
    ENGINEERING = "engineering"
    SHIELD = "shield"
    ARMOR = "armor"
    CAPACITOR = "capacitor"
    NAVIGATION = "navigation"
    TARGETING = "targeting"
    GUNNERY = "gunnery"
    DRONES = "drones"


class BonusRule(Enum):
    PERCENT = "percent"
    COMPOUND = "compound"
    FLAT = "flat"


# Bonus keys
CPU = "cpu"
POWER = "power"
CAPACITOR_CAPACITY = "capacitor_capacity"
CAPACITOR_RECHARGE = "capacitor_recharge"
SHIELD_CAPACITY = "shield_capacity"
SHIELD_RECHARGE = "shield_recharge"
SHIELD_BOOST = "shield_boost"
ARMOR_HP = "armor_hp"
HULL_HP = "hull_hp"
REPAIR_AMOUNT = "repair_amount"
VELOCITY = "velocity"
AGILITY = "agility"
SPEED_FACTOR = "speed_factor"
WARP_CAPACITOR = "warp_capacitor"
TARGET_RANGE = "target_range"
SCAN_RESOLUTION = "scan_resolution"
LOCKED_TARGETS = "locked_targets"
DAMAGE = "damage"
RATE_OF_FIRE = "rate_of_fire"
DRONE_DAMAGE = "drone_damage"
ACTIVE_DRONES = "active_drones"


@dataclass(frozen=True, slots=True)
class SkillDefinition:
    skill_id: int
    name: str
    category: SkillCategory
    bonus: str
    amount: float  # per level; percent for PERCENT, fraction for COMPOUND
    rule: BonusRule = BonusRule.PERCENT


SKILL_DEFINITIONS: Sequence[SkillDefinition] = (
    SkillDefinition(3426, "CPU Management", SkillCategory.ENGINEERING, CPU, 5.0),
    SkillDefinition(3413, "Power Grid Management", SkillCategory.ENGINEERING, POWER, 5.0),
    SkillDefinition(3418, "Capacitor Management", SkillCategory.CAPACITOR, CAPACITOR_CAPACITY, 5.0),
    SkillDefinition(3417, "Capacitor Systems Operation", SkillCategory.CAPACITOR, CAPACITOR_RECHARGE, -5.0),
    SkillDefinition(3419, "Shield Management", SkillCategory.SHIELD, SHIELD_CAPACITY, 5.0),
    SkillDefinition(3416, "Shield Operation", SkillCategory.SHIELD, SHIELD_RECHARGE, -5.0),
    SkillDefinition(3425, "Shield Upgrades", SkillCategory.SHIELD, SHIELD_BOOST, 5.0),
    SkillDefinition(3394, "Hull Upgrades", SkillCategory.ARMOR, ARMOR_HP, 5.0),
    SkillDefinition(3392, "Mechanics", SkillCategory.ARMOR, HULL_HP, 5.0),
    SkillDefinition(3393, "Repair Systems", SkillCategory.ARMOR, REPAIR_AMOUNT, 5.0),
    SkillDefinition(3449, "Navigation", SkillCategory.NAVIGATION, VELOCITY, 5.0),
    SkillDefinition(3453, "Evasive Maneuvering", SkillCategory.NAVIGATION, AGILITY, -5.0),
    SkillDefinition(3327, "Spaceship Command", SkillCategory.NAVIGATION, AGILITY, -0.02, BonusRule.COMPOUND),
    SkillDefinition(3452, "Acceleration Control", SkillCategory.NAVIGATION, SPEED_FACTOR, 5.0),
    SkillDefinition(3455, "Warp Drive Operation", SkillCategory.NAVIGATION, WARP_CAPACITOR, -10.0),
    SkillDefinition(3428, "Long Range Targeting", SkillCategory.TARGETING, TARGET_RANGE, 5.0),
    SkillDefinition(3431, "Signature Analysis", SkillCategory.TARGETING, SCAN_RESOLUTION, 5.0),
    SkillDefinition(3429, "Target Management", SkillCategory.TARGETING, LOCKED_TARGETS, 1.0, BonusRule.FLAT),
    SkillDefinition(3300, "Gunnery", SkillCategory.GUNNERY, RATE_OF_FIRE, -2.0),
    SkillDefinition(3310, "Rapid Firing", SkillCategory.GUNNERY, RATE_OF_FIRE, -4.0),
    SkillDefinition(3315, "Surgical Strike", SkillCategory.GUNNERY, DAMAGE, 3.0),
    SkillDefinition(3436, "Drones", SkillCategory.DRONES, ACTIVE_DRONES, 1.0, BonusRule.FLAT),
    SkillDefinition(3442, "Drone Interfacing", SkillCategory.DRONES, DRONE_DAMAGE, 20.0),
)


@dataclass(frozen=True, slots=True)
class BonusSet:
    category: SkillCategory
    multipliers: Mapping[str, float] = field(default_factory=dict)
    flat: Mapping[str, float] = field(default_factory=dict)

    def multiplier(self, bonus: str) -> float:
        return self.multipliers.get(bonus, 1.0)

    def flat_bonus(self, bonus: str) -> float:
        return self.flat.get(bonus, 0.0)


def apply_rule(base: float, rule: BonusRule, amount: float, level: int) -> float:
    if rule is BonusRule.PERCENT:
        return base * (1.0 + amount * level / 100.0)
    if rule is BonusRule.COMPOUND:
        return base * (1.0 + amount) ** level
    return base + amount * level


def resolve_skill_bonuses(
    character: Character | None,
    category: SkillCategory,
    definitions: Sequence[SkillDefinition] = SKILL_DEFINITIONS,
) -> BonusSet:
    """Multipliers and flat bonuses granted by `character`'s skills in one category."""
    if character is None:
        return BonusSet(category)

    multipliers: Dict[str, float] = {}
    flat: Dict[str, float] = {}
    for definition in definitions:
        if definition.category is not category:
            continue
        level = character.skill_level(definition.skill_id)
        if level <= 0:
            continue
        if definition.rule is BonusRule.FLAT:
            flat[definition.bonus] = apply_rule(flat.get(definition.bonus, 0.0), BonusRule.FLAT, definition.amount, level)
        else:
            multipliers[definition.bonus] = apply_rule(
                multipliers.get(definition.bonus, 1.0), definition.rule, definition.amount, level
            )
    return BonusSet(category, multipliers, flat)


def resolve_all(character: Character | None) -> Dict[SkillCategory, BonusSet]:
    return {category: resolve_skill_bonuses(character, category) for category in SkillCategory}
