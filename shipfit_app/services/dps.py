"""
Damage output of a fitting.

Per weapon entry:

    volley = base damage * weapon damage multiplier * ammo damage multiplier
             * skill damage multiplier * penalized damage upgrades
    cycle  = rate of fire * ammo RoF multiplier * skill RoF multiplier
             * penalized RoF upgrades
    dps    = volley / cycle * quantity

Drones in the bay contribute their own damage per cycle, scaled by drone
skills. Only as many drones as the pilot and hull can control count, the
hardest hitting ones first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from shipfit_app.config.limits import CHARACTER_BASE_ACTIVE_DRONES, DEFAULT_MAX_ACTIVE_DRONES, EPS
from shipfit_app.models import Character, Fitting, TypeCategory
from shipfit_app.models import attributes as attr
from shipfit_app.services import skill_bonuses as sb
from shipfit_app.services.ammunition import AmmunitionCalculator, DamageProfile, read_damage_profile
from shipfit_app.services.fitting_context import FittingCalculator
from shipfit_app.services.stacking_penalty import PenaltyGroup, stacked_multiplier

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WeaponDps:
    type_id: int
    charge_type_id: int | None
    quantity: int
    dps: float
    volley: float
    cycle_time_s: float
    optimal_range: float
    falloff: float
    tracking_speed: float


@dataclass(frozen=True, slots=True)
class DroneDps:
    type_id: int
    quantity: int
    dps: float


@dataclass(frozen=True, slots=True)
class DpsResult:
    total_dps: float
    weapon_dps: float
    drone_dps: float
    volley: float
    damage_profile: DamageProfile  # dps per damage type
    weapons: Tuple[WeaponDps, ...] = ()
    drones: Tuple[DroneDps, ...] = ()


class DpsCalculator(FittingCalculator):
    component = "dps"

    def __init__(self, attributes, ammunition: AmmunitionCalculator | None = None) -> None:
        super().__init__(attributes)
        self._ammunition = ammunition or AmmunitionCalculator(self._reader)

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> DpsResult:
        await self._ship(fitting)
        read = self._reader
        gunnery = sb.resolve_skill_bonuses(character, sb.SkillCategory.GUNNERY)
        drone_skills = sb.resolve_skill_bonuses(character, sb.SkillCategory.DRONES)

        modules = await self._online_modules(fitting)
        damage_upgrades = stacked_multiplier(
            await self._multiplier_modifiers(modules, attr.DAMAGE_BONUS_MULTIPLIER, PenaltyGroup.DAMAGE_AMPLIFIER)
        )
        rof_upgrades = stacked_multiplier(
            await self._multiplier_modifiers(modules, attr.RATE_OF_FIRE_MULTIPLIER, PenaltyGroup.WEAPON_UPGRADE)
        )

        weapons: List[WeaponDps] = []
        profile = DamageProfile()
        volley_total = 0.0
        for entry, _entity in modules:
            rate_of_fire = await read.attr(entry.type_id, attr.RATE_OF_FIRE)
            if rate_of_fire <= 0.0:
                continue
            ammo = await self._ammunition.effect_for(entry)
            if ammo.damage_profile.total <= 0.0:
                continue

            weapon_multiplier = await read.attr(entry.type_id, attr.DAMAGE_MULTIPLIER, 1.0)
            damage_factor = weapon_multiplier * ammo.damage_multiplier * gunnery.multiplier(sb.DAMAGE) * damage_upgrades
            cycle_s = (
                rate_of_fire / 1000.0
                * ammo.rate_of_fire_multiplier
                * gunnery.multiplier(sb.RATE_OF_FIRE)
                * rof_upgrades
            )
            if cycle_s <= EPS:
                continue

            volley = ammo.damage_profile.total * damage_factor * entry.quantity
            dps = volley / cycle_s
            profile = profile + ammo.damage_profile.scaled(damage_factor * entry.quantity / cycle_s)
            volley_total += volley
            weapons.append(
                WeaponDps(
                    type_id=entry.type_id,
                    charge_type_id=entry.charge_type_id,
                    quantity=entry.quantity,
                    dps=dps,
                    volley=volley,
                    cycle_time_s=cycle_s,
                    optimal_range=ammo.optimal_range,
                    falloff=ammo.falloff,
                    tracking_speed=ammo.tracking_speed,
                )
            )

        # (type id, quantity, damage profile per drone per second)
        candidates: List[Tuple[int, int, DamageProfile]] = []
        for entry, _entity in await self._resolve(fitting.drones, TypeCategory.DRONE):
            if not entry.online:
                continue
            cycle_s = await read.attr(entry.type_id, attr.RATE_OF_FIRE) / 1000.0
            if cycle_s <= EPS:
                continue
            damage = await read_damage_profile(self, entry.type_id)
            factor = (
                await read.attr(entry.type_id, attr.DAMAGE_MULTIPLIER, 1.0)
                * drone_skills.multiplier(sb.DRONE_DAMAGE)
                / cycle_s
            )
            candidates.append((entry.type_id, entry.quantity, damage.scaled(factor)))

        slots = await self._active_drone_limit(fitting, drone_skills)
        drones: List[DroneDps] = []
        for type_id, quantity, per_drone in sorted(candidates, key=lambda c: c[2].total, reverse=True):
            active = min(quantity, slots)
            if active <= 0:
                break
            slots -= active
            profile = profile + per_drone.scaled(active)
            drones.append(DroneDps(type_id, active, per_drone.total * active))

        weapon_dps = sum((w.dps for w in weapons), 0.0)
        drone_dps = sum((d.dps for d in drones), 0.0)
        result = DpsResult(
            total_dps=weapon_dps + drone_dps,
            weapon_dps=weapon_dps,
            drone_dps=drone_dps,
            volley=volley_total,
            damage_profile=profile,
            weapons=tuple(weapons),
            drones=tuple(drones),
        )
        _LOG.debug("DPS for fitting %s: %.2f (volley %.1f)", fitting.id, result.total_dps, volley_total)
        return result

    async def _active_drone_limit(self, fitting: Fitting, drone_skills: sb.BonusSet) -> int:
        """Drones that can fight at once: the smaller of the hull and pilot limits."""
        hull_limit = await self._reader.attr(fitting.ship_type_id, attr.MAX_ACTIVE_DRONES, DEFAULT_MAX_ACTIVE_DRONES)
        pilot_limit = CHARACTER_BASE_ACTIVE_DRONES + drone_skills.flat_bonus(sb.ACTIVE_DRONES)
        return int(min(hull_limit, pilot_limit))
