"""
Sub-warp and warp mobility.

    align time (s) = -ln(0.25) * agility * mass / 1e6

Propulsion modules add `speedFactor` % scaled by thrust over total mass; only
the strongest online propulsion module counts since they cannot run together.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from shipfit_app.config.limits import ALIGN_TIME_CONSTANT, AU_IN_METERS, EPS, MAX_SUBWARP_VELOCITY
from shipfit_app.models import Character, Fitting
from shipfit_app.models import attributes as attr
from shipfit_app.services import skill_bonuses as sb
from shipfit_app.services.fitting_context import FittingCalculator
from shipfit_app.services.stacking_penalty import PenaltyGroup, stacked_multiplier

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NavigationResult:
    mass: float  # kg
    max_velocity: float  # m/s without propulsion module
    max_velocity_with_propulsion: float
    agility: float
    align_time_s: float
    warp_speed_au: float  # AU/s
    warp_speed_ms: float  # m/s
    warp_capacitor_need: float


def align_time(agility: float, mass: float) -> float:
    return -math.log(0.25) * agility * mass / ALIGN_TIME_CONSTANT


class NavigationCalculator(FittingCalculator):
    component = "navigation"

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> NavigationResult:
        ship = await self._ship(fitting)
        read = self._reader
        skills = sb.resolve_skill_bonuses(character, sb.SkillCategory.NAVIGATION)

        # Plates and propulsion modules add mass whether or not they are online
        fitted = await self._resolve(fitting.fitted_modules())
        mass = await read.attr(ship.type_id, attr.MASS) + await self._sum_attribute(fitted, attr.MASS_ADDITION)

        modules = await self._online_modules(fitting)
        velocity_mods = await self._multiplier_modifiers(modules, attr.VELOCITY_MULTIPLIER, PenaltyGroup.NAVIGATION_UPGRADE)
        agility_mods = await self._multiplier_modifiers(modules, attr.AGILITY_MULTIPLIER, PenaltyGroup.NAVIGATION_UPGRADE)

        velocity = min(
            MAX_SUBWARP_VELOCITY,
            await read.attr(ship.type_id, attr.MAX_VELOCITY) * stacked_multiplier(velocity_mods) * skills.multiplier(sb.VELOCITY),
        )

        propulsion_boost = 0.0
        for entry, _entity in modules:
            speed_factor = await read.attr(entry.type_id, attr.SPEED_FACTOR)
            thrust = await read.attr(entry.type_id, attr.SPEED_BOOST_FACTOR)
            if speed_factor <= 0.0 or thrust <= 0.0 or mass <= EPS:
                continue
            boost = speed_factor / 100.0 * skills.multiplier(sb.SPEED_FACTOR) * thrust / mass
            propulsion_boost = max(propulsion_boost, boost)
        velocity_with_prop = min(MAX_SUBWARP_VELOCITY, velocity * (1.0 + propulsion_boost))

        agility = await read.attr(ship.type_id, attr.AGILITY) * stacked_multiplier(agility_mods) * skills.multiplier(sb.AGILITY)
        warp_au = await read.attr(ship.type_id, attr.WARP_SPEED)

        result = NavigationResult(
            mass=mass,
            max_velocity=velocity,
            max_velocity_with_propulsion=velocity_with_prop,
            agility=agility,
            align_time_s=align_time(agility, mass),
            warp_speed_au=warp_au,
            warp_speed_ms=warp_au * AU_IN_METERS,
            warp_capacitor_need=await read.attr(ship.type_id, attr.WARP_CAPACITOR_NEED) * skills.multiplier(sb.WARP_CAPACITOR),
        )
        _LOG.debug("Navigation for fitting %s: %.1f m/s, align %.2f s", fitting.id, velocity, result.align_time_s)
        return result
