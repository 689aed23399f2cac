"""Sample static data: one frigate hull, a handful of modules, charges and drones."""

from __future__ import annotations

from typing import Dict, List, Tuple

from shipfit_app.models import EntityType, SlotCategory, TypeCategory
from shipfit_app.models.attributes import RESONANCES
from shipfit_app.services.attribute_store import InMemoryAttributeStore

RIFTER = 587
AUTOCANNON = 2873
EMP_S = 12612
BARRAGE_S = 12625
GYROSTABILIZER = 519
SHIELD_EXTENDER = 380
SHIELD_HARDENER = 2281
DAMAGE_CONTROL = 2046
AFTERBURNER = 439
OVERDRIVE = 1236
SENSOR_BOOSTER = 1952
ARMOR_REPAIRER = 3530
SHIELD_BOOSTER = 400
CLOAK = 11370
LARGE_EXTENDER = 3841
DEFENSE_RIG = 31788
HOBGOBLIN = 2456
WARRIOR = 2488
TRITANIUM = 34

# Capacitor reference hull: 2000 GJ, 600 s recharge
CAP_HULL = 90001
CAP_HEAVY_DRAIN = 90002  # 100 GJ every second
CAP_LIGHT_DRAIN = 90003  # 10 GJ every second


def _resonances(layer: str, value: float) -> Dict[str, float]:
    return {name: value for name in RESONANCES[layer].values()}


def sample_types() -> List[Tuple[EntityType, Dict[str, float]]]:
    rifter_attrs = {
        "cpuOutput": 180.0,
        "powerOutput": 60.0,
        "hiSlots": 4,
        "medSlots": 3,
        "lowSlots": 3,
        "rigSlots": 3,
        "maxSubSystems": 0,
        "capacity": 140.0,
        "droneCapacity": 10.0,
        "droneBandwidth": 10.0,
        "rigSize": 1,
        "capacitorCapacity": 250.0,
        "rechargeRate": 125000.0,
        "shieldCapacity": 450.0,
        "shieldRechargeRate": 625000.0,
        "armorHP": 450.0,
        "hp": 350.0,
        "shieldEmDamageResonance": 1.0,
        "shieldThermalDamageResonance": 0.8,
        "shieldKineticDamageResonance": 0.6,
        "shieldExplosiveDamageResonance": 0.5,
        "armorEmDamageResonance": 0.4,
        "armorThermalDamageResonance": 0.65,
        "armorKineticDamageResonance": 0.75,
        "armorExplosiveDamageResonance": 0.9,
        **_resonances("hull", 0.67),
        "maxVelocity": 365.0,
        "agility": 3.19,
        "mass": 1067000.0,
        "warpSpeedMultiplier": 5.0,
        "warpCapacitorNeed": 0.0000028,
        "maxTargetRange": 22500.0,
        "scanResolution": 660.0,
        "maxLockedTargets": 4,
        "signatureRadius": 35.0,
    }
    damage_control = {"cpu": 15.0, "power": 1.0}
    damage_control.update(_resonances("shield", 0.875))
    damage_control.update(_resonances("armor", 0.85))
    damage_control.update(_resonances("hull", 0.6))

    hardener = {"cpu": 44.0, "power": 1.0}
    hardener.update(_resonances("shield", 0.7))

    return [
        (EntityType(RIFTER, "Rifter", TypeCategory.SHIP, "Frigate"), rifter_attrs),
        (
            EntityType(AUTOCANNON, "125mm Gatling AutoCannon II", TypeCategory.MODULE, "Projectile Weapon", SlotCategory.HIGH),
            {"cpu": 9.0, "power": 6.0, "speed": 2000.0, "damageMultiplier": 2.0, "capacity": 0.4,
             "maxRange": 1200.0, "falloff": 4000.0, "trackingSpeed": 0.4, "rigSize": 1},
        ),
        (
            EntityType(EMP_S, "EMP S", TypeCategory.CHARGE, "Projectile Ammo"),
            {"emDamage": 9.0, "kineticDamage": 2.0, "explosiveDamage": 1.0, "volume": 0.0025},
        ),
        (
            EntityType(BARRAGE_S, "Barrage S", TypeCategory.CHARGE, "Advanced Autocannon Ammo"),
            {"kineticDamage": 5.0, "explosiveDamage": 3.0, "volume": 0.0025,
             "fallofMultiplier": 1.4, "trackingSpeedMultiplier": 0.75},
        ),
        (
            EntityType(GYROSTABILIZER, "Gyrostabilizer II", TypeCategory.MODULE, "Gyrostabilizer", SlotCategory.LOW),
            {"cpu": 15.0, "power": 1.0, "damageMultiplierBonus": 1.1, "rateOfFireBonus": 0.9},
        ),
        (
            EntityType(SHIELD_EXTENDER, "Small Shield Extender II", TypeCategory.MODULE, "Shield Extender", SlotCategory.MEDIUM),
            {"cpu": 26.0, "power": 11.0, "capacityBonus": 262.0, "rigSize": 1},
        ),
        (
            EntityType(SHIELD_HARDENER, "Multispectrum Shield Hardener II", TypeCategory.MODULE, "Shield Hardener",
                       SlotCategory.MEDIUM),
            hardener,
        ),
        (
            EntityType(DAMAGE_CONTROL, "Damage Control II", TypeCategory.MODULE, "Damage Control", SlotCategory.LOW),
            damage_control,
        ),
        (
            EntityType(AFTERBURNER, "1MN Afterburner II", TypeCategory.MODULE, "Propulsion Module", SlotCategory.MEDIUM),
            {"cpu": 20.0, "power": 10.0, "speedFactor": 135.0, "speedBoostFactor": 1500000.0,
             "massAddition": 500000.0, "capacitorNeed": 9.0, "duration": 10000.0},
        ),
        (
            EntityType(OVERDRIVE, "Overdrive Injector System II", TypeCategory.MODULE, "Overdrive Injector System",
                       SlotCategory.LOW),
            {"cpu": 10.0, "power": 1.0, "velocityMultiplier": 1.125},
        ),
        (
            EntityType(SENSOR_BOOSTER, "Sensor Booster II", TypeCategory.MODULE, "Sensor Booster", SlotCategory.MEDIUM),
            {"cpu": 25.0, "power": 1.0, "maxTargetRangeBonus": 30.0, "scanResolutionBonus": 30.0,
             "capacitorNeed": 5.0, "duration": 5000.0},
        ),
        (
            EntityType(ARMOR_REPAIRER, "Small Armor Repairer II", TypeCategory.MODULE, "Armor Repair Unit", SlotCategory.LOW),
            {"cpu": 12.0, "power": 6.0, "armorDamageAmount": 60.0, "duration": 9000.0, "capacitorNeed": 40.0},
        ),
        (
            EntityType(SHIELD_BOOSTER, "Small Shield Booster II", TypeCategory.MODULE, "Shield Booster", SlotCategory.MEDIUM),
            {"cpu": 20.0, "power": 2.0, "shieldBonus": 38.0, "duration": 3000.0, "capacitorNeed": 40.0},
        ),
        (
            EntityType(CLOAK, "Prototype Cloaking Device I", TypeCategory.MODULE, "Cloaking Device", SlotCategory.HIGH),
            {"cpu": 10.0, "power": 1.0},
        ),
        (
            EntityType(LARGE_EXTENDER, "Large Shield Extender II", TypeCategory.MODULE, "Shield Extender",
                       SlotCategory.MEDIUM),
            {"cpu": 40.0, "power": 165.0, "capacityBonus": 2600.0, "rigSize": 3},
        ),
        (
            EntityType(DEFENSE_RIG, "Small Core Defense Field Extender I", TypeCategory.MODULE, "Rig Shield",
                       SlotCategory.RIG),
            {"upgradeCost": 100.0, "signatureRadiusBonus": 10.0, "rigSize": 1},
        ),
        (
            EntityType(HOBGOBLIN, "Hobgoblin II", TypeCategory.DRONE, "Combat Drone"),
            {"volume": 5.0, "droneBandwidthUsed": 5.0, "thermalDamage": 12.0, "speed": 4000.0, "damageMultiplier": 1.9},
        ),
        (
            EntityType(WARRIOR, "Warrior II", TypeCategory.DRONE, "Combat Drone"),
            {"volume": 5.0, "droneBandwidthUsed": 5.0, "explosiveDamage": 10.0, "speed": 4000.0, "damageMultiplier": 1.2},
        ),
        (EntityType(TRITANIUM, "Tritanium", TypeCategory.COMMODITY, "Mineral"), {"volume": 0.01}),
        (
            EntityType(CAP_HULL, "Capacitor Test Hull", TypeCategory.SHIP, "Test Hull"),
            {"capacitorCapacity": 2000.0, "rechargeRate": 600000.0, "hiSlots": 2},
        ),
        (
            EntityType(CAP_HEAVY_DRAIN, "Heavy Drain Module", TypeCategory.MODULE, "Test Module", SlotCategory.HIGH),
            {"capacitorNeed": 100.0, "duration": 1000.0},
        ),
        (
            EntityType(CAP_LIGHT_DRAIN, "Light Drain Module", TypeCategory.MODULE, "Test Module", SlotCategory.HIGH),
            {"capacitorNeed": 10.0, "duration": 1000.0},
        ),
    ]


def build_store() -> InMemoryAttributeStore:
    return InMemoryAttributeStore(sample_types())
