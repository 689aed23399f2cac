"""
Fitting resource budgets: CPU, power grid, calibration, cargo hold, drone bay
and drone bandwidth.

Utilization is always a ratio (1.0 = 100 %) and is computed in exactly one
place, `ResourceBudget.__post_init__`; validation compares against 1.0.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict

from shipfit_app.config.limits import CALIBRATION_PER_RIG_SLOT, EPS
from shipfit_app.models import Character, Fitting, TypeCategory
from shipfit_app.models import attributes as attr
from shipfit_app.services import skill_bonuses as sb
from shipfit_app.services.fitting_context import FittingCalculator

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResourceBudget:
    total: float
    used: float
    utilization: float = field(init=False)

    def __post_init__(self) -> None:
        if abs(self.total) < EPS:
            # Any draw against an empty budget is an unbounded overage
            ratio = math.inf if self.used > EPS else 0.0
        else:
            ratio = self.used / self.total
        object.__setattr__(self, "utilization", ratio)

    @property
    def remaining(self) -> float:
        return self.total - self.used

    @property
    def overage(self) -> float:
        return max(0.0, self.used - self.total)

    @property
    def exceeded(self) -> bool:
        return self.utilization > 1.0 + EPS


@dataclass(frozen=True, slots=True)
class ResourceUsageResult:
    cpu: ResourceBudget
    power: ResourceBudget
    calibration: ResourceBudget
    cargo: ResourceBudget
    drone_bay: ResourceBudget
    drone_bandwidth: ResourceBudget

    def budgets(self) -> Dict[str, ResourceBudget]:
        return {
            "cpu": self.cpu,
            "power": self.power,
            "calibration": self.calibration,
            "cargo": self.cargo,
            "drone_bay": self.drone_bay,
            "drone_bandwidth": self.drone_bandwidth,
        }


class ResourceUsageCalculator(FittingCalculator):
    """Totals come from the ship (skill adjusted); usage is summed per module entry."""

    component = "resources"

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> ResourceUsageResult:
        ship = await self._ship(fitting)
        read = self._reader
        engineering = sb.resolve_skill_bonuses(character, sb.SkillCategory.ENGINEERING)

        cpu_total = await read.attr(ship.type_id, attr.CPU_OUTPUT) * engineering.multiplier(sb.CPU)
        power_total = await read.attr(ship.type_id, attr.POWER_OUTPUT) * engineering.multiplier(sb.POWER)
        calibration_total = await read.attr(ship.type_id, attr.RIG_SLOTS) * CALIBRATION_PER_RIG_SLOT
        cargo_total = await read.attr(ship.type_id, attr.CARGO_CAPACITY)
        drone_bay_total = await read.attr(ship.type_id, attr.DRONE_CAPACITY)
        bandwidth_total = await read.attr(ship.type_id, attr.DRONE_BANDWIDTH)

        # Every fitted entry draws its resources, online or not
        modules = await self._resolve(fitting.fitted_modules())
        cpu_used = await self._sum_attribute(modules, attr.CPU)
        power_used = await self._sum_attribute(modules, attr.POWER)
        calibration_used = await self._sum_attribute(modules, attr.CALIBRATION)

        cargo_used = 0.0
        for item in fitting.cargo:
            await read.entity(item.type_id)
            cargo_used += await read.attr(item.type_id, attr.VOLUME) * item.quantity

        drones = await self._resolve(fitting.drones, TypeCategory.DRONE)
        drone_volume = await self._sum_attribute(drones, attr.VOLUME)
        drone_bandwidth = await self._sum_attribute(drones, attr.DRONE_BANDWIDTH_USED)

        result = ResourceUsageResult(
            cpu=ResourceBudget(cpu_total, cpu_used),
            power=ResourceBudget(power_total, power_used),
            calibration=ResourceBudget(calibration_total, calibration_used),
            cargo=ResourceBudget(cargo_total, cargo_used),
            drone_bay=ResourceBudget(drone_bay_total, drone_volume),
            drone_bandwidth=ResourceBudget(bandwidth_total, drone_bandwidth),
        )
        _LOG.debug(
            "Resources for fitting %s: cpu %.1f/%.1f, power %.1f/%.1f",
            fitting.id, cpu_used, cpu_total, power_used, power_total,
        )
        return result
