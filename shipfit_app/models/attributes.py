"""
Attribute names read from the static attribute store.

Names follow the dogma attribute naming of the remote catalog so that data
exported from it can be loaded without translation.
"""

from __future__ import annotations

from typing import Dict, Tuple

# --- Ship fitting budgets and slot layout ---
CPU_OUTPUT = "cpuOutput"
POWER_OUTPUT = "powerOutput"
HIGH_SLOTS = "hiSlots"
MEDIUM_SLOTS = "medSlots"
LOW_SLOTS = "lowSlots"
RIG_SLOTS = "rigSlots"
SUBSYSTEM_SLOTS = "maxSubSystems"
CARGO_CAPACITY = "capacity"
DRONE_CAPACITY = "droneCapacity"
DRONE_BANDWIDTH = "droneBandwidth"
MAX_ACTIVE_DRONES = "maxActiveDrones"
SIZE_CLASS = "rigSize"

# --- Module and item draws ---
CPU = "cpu"
POWER = "power"
CALIBRATION = "upgradeCost"
VOLUME = "volume"
DRONE_BANDWIDTH_USED = "droneBandwidthUsed"
MASS_ADDITION = "massAddition"

# --- Capacitor ---
CAPACITOR_CAPACITY = "capacitorCapacity"
RECHARGE_RATE = "rechargeRate"  # ms
CAPACITOR_NEED = "capacitorNeed"
DURATION = "duration"  # ms
CAPACITOR_BONUS = "capacitorBonus"  # flat capacity added by batteries
CAPACITOR_CAPACITY_MULTIPLIER = "capacitorCapacityMultiplier"
RECHARGE_RATE_MULTIPLIER = "rechargeRateMultiplier"

# --- Shield, armor, hull ---
SHIELD_CAPACITY = "shieldCapacity"
SHIELD_RECHARGE_RATE = "shieldRechargeRate"  # ms
ARMOR_HP = "armorHP"
HULL_HP = "hp"
SHIELD_CAPACITY_BONUS = "capacityBonus"  # flat HP from extenders
ARMOR_HP_BONUS_ADD = "armorHPBonusAdd"  # flat HP from plates
SHIELD_BOOST_AMOUNT = "shieldBonus"
ARMOR_REPAIR_AMOUNT = "armorDamageAmount"
HULL_REPAIR_AMOUNT = "structureDamageAmount"

DAMAGE_TYPES: Tuple[str, ...] = ("em", "thermal", "kinetic", "explosive")

# Resonance per layer and damage type. On ships this is the base resonance,
# on modules it is a multiplier applied to the ship's resonance.
RESONANCES: Dict[str, Dict[str, str]] = {
    "shield": {
        "em": "shieldEmDamageResonance",
        "thermal": "shieldThermalDamageResonance",
        "kinetic": "shieldKineticDamageResonance",
        "explosive": "shieldExplosiveDamageResonance",
    },
    "armor": {
        "em": "armorEmDamageResonance",
        "thermal": "armorThermalDamageResonance",
        "kinetic": "armorKineticDamageResonance",
        "explosive": "armorExplosiveDamageResonance",
    },
    "hull": {
        "em": "emDamageResonance",
        "thermal": "thermalDamageResonance",
        "kinetic": "kineticDamageResonance",
        "explosive": "explosiveDamageResonance",
    },
}

# --- Weapons, charges and drones ---
DAMAGE: Dict[str, str] = {
    "em": "emDamage",
    "thermal": "thermalDamage",
    "kinetic": "kineticDamage",
    "explosive": "explosiveDamage",
}
DAMAGE_MULTIPLIER = "damageMultiplier"
RATE_OF_FIRE = "speed"  # ms per cycle
OPTIMAL_RANGE = "maxRange"
FALLOFF = "falloff"
TRACKING_SPEED = "trackingSpeed"
CHARGE_CAPACITY = "capacity"  # on weapons: charge hold in m3
DAMAGE_BONUS_MULTIPLIER = "damageMultiplierBonus"  # damage upgrades
RATE_OF_FIRE_MULTIPLIER = "rateOfFireBonus"  # rate-of-fire upgrades

# Charge-side modifiers applied on top of the weapon
AMMO_DAMAGE_MULTIPLIER = "ammoDamageMultiplier"
AMMO_RANGE_MULTIPLIER = "weaponRangeMultiplier"
AMMO_FALLOFF_MULTIPLIER = "fallofMultiplier"
AMMO_TRACKING_MULTIPLIER = "trackingSpeedMultiplier"
AMMO_RATE_OF_FIRE_MULTIPLIER = "speedMultiplier"
AMMO_CAPACITOR_MULTIPLIER = "capacitorNeedMultiplier"

# --- Navigation ---
MAX_VELOCITY = "maxVelocity"
AGILITY = "agility"
MASS = "mass"
WARP_SPEED = "warpSpeedMultiplier"  # AU/s
WARP_CAPACITOR_NEED = "warpCapacitorNeed"
VELOCITY_MULTIPLIER = "velocityMultiplier"
AGILITY_MULTIPLIER = "agilityMultiplier"
SPEED_FACTOR = "speedFactor"  # % velocity bonus of propulsion modules
SPEED_BOOST_FACTOR = "speedBoostFactor"  # propulsion thrust

# --- Targeting ---
MAX_TARGET_RANGE = "maxTargetRange"
SCAN_RESOLUTION = "scanResolution"
MAX_LOCKED_TARGETS = "maxLockedTargets"
SIGNATURE_RADIUS = "signatureRadius"
MAX_TARGET_RANGE_BONUS = "maxTargetRangeBonus"  # %
SCAN_RESOLUTION_BONUS = "scanResolutionBonus"  # %
SIGNATURE_RADIUS_BONUS = "signatureRadiusBonus"  # %
MAX_LOCKED_TARGETS_BONUS = "maxLockedTargetsBonus"
