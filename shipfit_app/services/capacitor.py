"""
Capacitor stability.

    tau  = recharge time (s) / 5
    peak = capacity / tau
    drain = sum(capacitor need / cycle time) over online active modules

Time to empty:
    drain <= 0       stable (infinite)
    drain >= peak    capacity / drain              (linear)
    otherwise        tau * ln(C / (C - drain*tau)) (capacitor curve)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Tuple

from shipfit_app.config.limits import CAPACITOR_TAU_DIVISOR, EPS
from shipfit_app.models import Character, Fitting
from shipfit_app.models import attributes as attr
from shipfit_app.services import skill_bonuses as sb
from shipfit_app.services.fitting_context import FittingCalculator
from shipfit_app.services.stacking_penalty import PenaltyGroup, stacked_multiplier

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModuleDrain:
    type_id: int
    quantity: int
    drain_per_s: float


@dataclass(frozen=True, slots=True)
class CapacitorResult:
    capacity: float
    recharge_time_s: float
    tau: float
    peak_recharge_rate: float  # GJ/s
    drain_rate: float  # GJ/s
    delta: float  # peak recharge minus drain
    stable: bool
    time_to_empty_s: float  # math.inf when stable
    drains: Tuple[ModuleDrain, ...] = ()


def time_to_empty(capacity: float, recharge_time_s: float, drain: float) -> float:
    """Seconds until the capacitor runs dry; math.inf when nothing drains it."""
    if drain <= 0.0:
        return math.inf
    tau = recharge_time_s / CAPACITOR_TAU_DIVISOR
    if tau <= EPS or capacity <= EPS:
        return capacity / drain if capacity > 0 else 0.0
    peak = capacity / tau
    if drain >= peak:
        return capacity / drain
    return tau * math.log(capacity / (capacity - drain * tau))


class CapacitorCalculator(FittingCalculator):
    component = "capacitor"

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> CapacitorResult:
        ship = await self._ship(fitting)
        read = self._reader
        skills = sb.resolve_skill_bonuses(character, sb.SkillCategory.CAPACITOR)
        modules = await self._online_modules(fitting)

        capacity_mods = await self._multiplier_modifiers(
            modules, attr.CAPACITOR_CAPACITY_MULTIPLIER, PenaltyGroup.CAPACITOR_BOOSTER
        )
        recharge_mods = await self._multiplier_modifiers(
            modules, attr.RECHARGE_RATE_MULTIPLIER, PenaltyGroup.CAPACITOR_BOOSTER
        )
        capacity = (
            (await read.attr(ship.type_id, attr.CAPACITOR_CAPACITY) + await self._sum_attribute(modules, attr.CAPACITOR_BONUS))
            * stacked_multiplier(capacity_mods)
            * skills.multiplier(sb.CAPACITOR_CAPACITY)
        )
        recharge_s = (
            await read.attr(ship.type_id, attr.RECHARGE_RATE) / 1000.0
            * stacked_multiplier(recharge_mods)
            * skills.multiplier(sb.CAPACITOR_RECHARGE)
        )

        drains: List[ModuleDrain] = []
        for entry, _entity in modules:
            need = await read.attr(entry.type_id, attr.CAPACITOR_NEED)
            if need <= 0.0:
                continue
            cycle_ms = await self._cycle_time_ms(entry.type_id)
            if cycle_ms <= 0.0:
                continue
            if entry.charge_type_id is not None:
                need *= await read.attr(entry.charge_type_id, attr.AMMO_CAPACITOR_MULTIPLIER, 1.0)
            drains.append(ModuleDrain(entry.type_id, entry.quantity, need / (cycle_ms / 1000.0) * entry.quantity))

        drain = sum((d.drain_per_s for d in drains), 0.0)
        tau = recharge_s / CAPACITOR_TAU_DIVISOR
        peak = capacity / tau if tau > EPS else 0.0
        result = CapacitorResult(
            capacity=capacity,
            recharge_time_s=recharge_s,
            tau=tau,
            peak_recharge_rate=peak,
            drain_rate=drain,
            delta=peak - drain,
            stable=drain <= 0.0,
            time_to_empty_s=time_to_empty(capacity, recharge_s, drain),
            drains=tuple(drains),
        )
        _LOG.debug(
            "Capacitor for fitting %s: drain %.2f GJ/s, peak %.2f GJ/s, empty after %.1f s",
            fitting.id, drain, peak, result.time_to_empty_s,
        )
        return result
