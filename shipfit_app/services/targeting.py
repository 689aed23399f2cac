"""
Sensor statistics: lock range, scan resolution, lock count, signature radius
and the lock-time profile against reference hull sizes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from shipfit_app.config.limits import (
    CHARACTER_BASE_LOCKED_TARGETS,
    LOCK_TIME_CONSTANT,
    MIN_LOCK_TIME_S,
    REFERENCE_SIGNATURES_M,
)
from shipfit_app.models import Character, Fitting
from shipfit_app.models import attributes as attr
from shipfit_app.services import skill_bonuses as sb
from shipfit_app.services.fitting_context import FittingCalculator
from shipfit_app.services.stacking_penalty import PenaltyGroup, stacked_multiplier

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TargetingResult:
    max_target_range: float  # m
    scan_resolution: float  # mm
    max_locked_targets: int
    signature_radius: float  # m
    lock_times_s: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))


def lock_time(scan_resolution: float, signature_radius: float) -> float:
    """Seconds to lock a target of `signature_radius` metres."""
    if scan_resolution <= 0.0 or signature_radius <= 0.0:
        return math.inf
    return max(MIN_LOCK_TIME_S, LOCK_TIME_CONSTANT / (scan_resolution * math.asinh(signature_radius) ** 2))


class TargetingCalculator(FittingCalculator):
    component = "targeting"

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> TargetingResult:
        ship = await self._ship(fitting)
        read = self._reader
        skills = sb.resolve_skill_bonuses(character, sb.SkillCategory.TARGETING)
        modules = await self._online_modules(fitting)

        range_mods = await self._percent_modifiers(modules, attr.MAX_TARGET_RANGE_BONUS, PenaltyGroup.SENSOR_BOOSTER)
        scan_mods = await self._percent_modifiers(modules, attr.SCAN_RESOLUTION_BONUS, PenaltyGroup.SENSOR_BOOSTER)
        signature_mods = await self._percent_modifiers(modules, attr.SIGNATURE_RADIUS_BONUS, PenaltyGroup.ELECTRONIC_UPGRADE)

        max_range = (
            await read.attr(ship.type_id, attr.MAX_TARGET_RANGE)
            * stacked_multiplier(range_mods)
            * skills.multiplier(sb.TARGET_RANGE)
        )
        scan_res = (
            await read.attr(ship.type_id, attr.SCAN_RESOLUTION)
            * stacked_multiplier(scan_mods)
            * skills.multiplier(sb.SCAN_RESOLUTION)
        )
        signature = await read.attr(ship.type_id, attr.SIGNATURE_RADIUS) * stacked_multiplier(signature_mods)

        ship_locks = await read.attr(ship.type_id, attr.MAX_LOCKED_TARGETS) + await self._sum_attribute(
            modules, attr.MAX_LOCKED_TARGETS_BONUS
        )
        # The pilot's own limit caps whatever the hull and modules allow
        pilot_locks = CHARACTER_BASE_LOCKED_TARGETS + skills.flat_bonus(sb.LOCKED_TARGETS)
        max_locks = int(min(ship_locks, pilot_locks))

        result = TargetingResult(
            max_target_range=max_range,
            scan_resolution=scan_res,
            max_locked_targets=max_locks,
            signature_radius=signature,
            lock_times_s=MappingProxyType(
                {hull: lock_time(scan_res, sig) for hull, sig in REFERENCE_SIGNATURES_M.items()}
            ),
        )
        _LOG.debug("Targeting for fitting %s: %.0f m, %.0f mm, %d locks", fitting.id, max_range, scan_res, max_locks)
        return result
