"""
Effects of loaded charges on the modules carrying them.

Each charge contributes multipliers (damage, optimal range, falloff, tracking,
rate of fire, capacitor need) that are applied on top of the weapon's own
attributes, plus the raw damage profile it delivers. DPS uses the same
`WeaponAmmunitionEffect` records, so both views stay consistent.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

from shipfit_app.config.limits import EPS
from shipfit_app.models import Character, Fitting, ModuleEntry, TypeCategory
from shipfit_app.models import attributes as attr
from shipfit_app.services.fitting_context import FittingCalculator

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DamageProfile:
    em: float = 0.0
    thermal: float = 0.0
    kinetic: float = 0.0
    explosive: float = 0.0

    @property
    def total(self) -> float:
        return self.em + self.thermal + self.kinetic + self.explosive

    def scaled(self, factor: float) -> "DamageProfile":
        return DamageProfile(self.em * factor, self.thermal * factor, self.kinetic * factor, self.explosive * factor)

    def __add__(self, other: "DamageProfile") -> "DamageProfile":
        return DamageProfile(
            self.em + other.em,
            self.thermal + other.thermal,
            self.kinetic + other.kinetic,
            self.explosive + other.explosive,
        )


@dataclass(frozen=True, slots=True)
class WeaponAmmunitionEffect:
    module_type_id: int
    charge_type_id: int | None
    quantity: int
    damage_profile: DamageProfile
    damage_multiplier: float = 1.0
    optimal_range_multiplier: float = 1.0
    falloff_multiplier: float = 1.0
    tracking_multiplier: float = 1.0
    rate_of_fire_multiplier: float = 1.0
    capacitor_multiplier: float = 1.0
    optimal_range: float = 0.0  # m, ammo adjusted
    falloff: float = 0.0  # m, ammo adjusted
    tracking_speed: float = 0.0  # rad/s, ammo adjusted
    charges_per_reload: int = 0


@dataclass(frozen=True, slots=True)
class AmmunitionResult:
    effects: Tuple[WeaponAmmunitionEffect, ...] = ()

    def for_module(self, module_type_id: int) -> List[WeaponAmmunitionEffect]:
        return [e for e in self.effects if e.module_type_id == module_type_id]


async def read_damage_profile(calc: FittingCalculator, type_id: int) -> DamageProfile:
    read = calc.reader
    return DamageProfile(
        em=await read.attr(type_id, attr.DAMAGE["em"]),
        thermal=await read.attr(type_id, attr.DAMAGE["thermal"]),
        kinetic=await read.attr(type_id, attr.DAMAGE["kinetic"]),
        explosive=await read.attr(type_id, attr.DAMAGE["explosive"]),
    )


class AmmunitionCalculator(FittingCalculator):
    component = "ammunition"

    async def effect_for(self, entry: ModuleEntry) -> WeaponAmmunitionEffect:
        """Charge effect for one module entry; neutral multipliers when nothing is loaded."""
        read = self._reader
        weapon_id = entry.type_id
        base_optimal = await read.attr(weapon_id, attr.OPTIMAL_RANGE)
        base_falloff = await read.attr(weapon_id, attr.FALLOFF)
        base_tracking = await read.attr(weapon_id, attr.TRACKING_SPEED)

        if entry.charge_type_id is None:
            return WeaponAmmunitionEffect(
                module_type_id=weapon_id,
                charge_type_id=None,
                quantity=entry.quantity,
                damage_profile=await read_damage_profile(self, weapon_id),
                optimal_range=base_optimal,
                falloff=base_falloff,
                tracking_speed=base_tracking,
            )

        charge_id = entry.charge_type_id
        await read.expect(charge_id, TypeCategory.CHARGE, "Charge")
        optimal_mult = await read.attr(charge_id, attr.AMMO_RANGE_MULTIPLIER, 1.0)
        falloff_mult = await read.attr(charge_id, attr.AMMO_FALLOFF_MULTIPLIER, 1.0)
        tracking_mult = await read.attr(charge_id, attr.AMMO_TRACKING_MULTIPLIER, 1.0)

        # Charges carrying their own damage replace the launcher/turret profile
        profile = await read_damage_profile(self, charge_id)
        if profile.total <= 0.0:
            profile = await read_damage_profile(self, weapon_id)

        charge_volume = await read.attr(charge_id, attr.VOLUME)
        hold = await read.attr(weapon_id, attr.CHARGE_CAPACITY)
        per_reload = int(math.floor(hold / charge_volume + EPS)) if charge_volume > EPS else 0

        return WeaponAmmunitionEffect(
            module_type_id=weapon_id,
            charge_type_id=charge_id,
            quantity=entry.quantity,
            damage_profile=profile,
            damage_multiplier=await read.attr(charge_id, attr.AMMO_DAMAGE_MULTIPLIER, 1.0),
            optimal_range_multiplier=optimal_mult,
            falloff_multiplier=falloff_mult,
            tracking_multiplier=tracking_mult,
            rate_of_fire_multiplier=await read.attr(charge_id, attr.AMMO_RATE_OF_FIRE_MULTIPLIER, 1.0),
            capacitor_multiplier=await read.attr(charge_id, attr.AMMO_CAPACITOR_MULTIPLIER, 1.0),
            optimal_range=base_optimal * optimal_mult,
            falloff=base_falloff * falloff_mult,
            tracking_speed=base_tracking * tracking_mult,
            charges_per_reload=per_reload,
        )

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> AmmunitionResult:
        await self._ship(fitting)
        effects: List[WeaponAmmunitionEffect] = []
        for entry, _entity in await self._online_modules(fitting):
            if entry.charge_type_id is None:
                continue
            effects.append(await self.effect_for(entry))
        _LOG.debug("Ammunition effects for fitting %s: %d loaded modules", fitting.id, len(effects))
        return AmmunitionResult(tuple(effects))
