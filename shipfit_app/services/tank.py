"""
Defensive statistics: hit points, resistances, passive and active repair.

Resistance per layer and damage type:

    resist % = (1 - base resonance * penalized module resonance product) * 100

Module resonance multipliers (0.7 = -30 % damage taken) are stacked per
layer, so shield hardeners never penalize armor hardeners.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from shipfit_app.config.limits import EPS, SHIELD_PEAK_REGEN_FACTOR
from shipfit_app.models import Character, Fitting
from shipfit_app.models import attributes as attr
from shipfit_app.services import skill_bonuses as sb
from shipfit_app.services.fitting_context import FittingCalculator, ResolvedModule
from shipfit_app.services.stacking_penalty import PenaltyGroup, stacked_multiplier

_LOG = logging.getLogger(__name__)

_LAYER_GROUPS = {
    "shield": PenaltyGroup.SHIELD_RESISTANCE,
    "armor": PenaltyGroup.ARMOR_RESISTANCE,
    "hull": PenaltyGroup.HULL_RESISTANCE,
}


@dataclass(frozen=True, slots=True)
class ResistProfile:
    """Resistances in percent (0-100)."""

    em: float = 0.0
    thermal: float = 0.0
    kinetic: float = 0.0
    explosive: float = 0.0

    @property
    def average(self) -> float:
        return (self.em + self.thermal + self.kinetic + self.explosive) / 4.0


@dataclass(frozen=True, slots=True)
class EffectiveHp:
    shield: float
    armor: float
    hull: float

    @property
    def total(self) -> float:
        return self.shield + self.armor + self.hull


@dataclass(frozen=True, slots=True)
class TankResult:
    shield_capacity: float
    shield_recharge_time_s: float
    shield_passive_regen: float  # HP/s averaged over a full recharge
    shield_peak_regen: float  # HP/s at the peak of the recharge curve
    armor_hp: float
    hull_hp: float
    shield_resists: ResistProfile
    armor_resists: ResistProfile
    hull_resists: ResistProfile
    shield_boost_rate: float  # HP/s from active boosters
    armor_repair_rate: float
    hull_repair_rate: float
    effective_hp: EffectiveHp


def resist_percent(base_resonance: float, modifier_product: float) -> float:
    """Resistance in percent, clamped to 0-100."""
    value = (1.0 - base_resonance * modifier_product) * 100.0
    return min(100.0, max(0.0, value))


def _ehp(hp: float, resists: ResistProfile) -> float:
    # Uniform damage profile: the layer takes the mean of its four resonances
    mean_resonance = 1.0 - resists.average / 100.0
    if mean_resonance < EPS:
        return float("inf") if hp > 0 else 0.0
    return hp / mean_resonance


class TankCalculator(FittingCalculator):
    component = "tank"

    async def _resists(self, ship_id: int, modules: List[ResolvedModule], layer: str) -> ResistProfile:
        values: Dict[str, float] = {}
        for damage_type, name in attr.RESONANCES[layer].items():
            base = await self._reader.attr(ship_id, name, 1.0)
            modifiers = await self._multiplier_modifiers(modules, name, _LAYER_GROUPS[layer])
            values[damage_type] = resist_percent(base, stacked_multiplier(modifiers))
        return ResistProfile(**values)

    async def _repair_rate(self, modules: List[ResolvedModule], name: str, multiplier: float) -> float:
        rate = 0.0
        for entry, _entity in modules:
            amount = await self._reader.attr(entry.type_id, name)
            if amount <= 0.0:
                continue
            cycle_ms = await self._cycle_time_ms(entry.type_id)
            if cycle_ms <= 0.0:
                continue
            rate += amount * multiplier / (cycle_ms / 1000.0) * entry.quantity
        return rate

    async def calculate(self, fitting: Fitting, character: Character | None = None) -> TankResult:
        ship = await self._ship(fitting)
        read = self._reader
        shield_skills = sb.resolve_skill_bonuses(character, sb.SkillCategory.SHIELD)
        armor_skills = sb.resolve_skill_bonuses(character, sb.SkillCategory.ARMOR)
        modules = await self._online_modules(fitting)

        shield_capacity = (
            await read.attr(ship.type_id, attr.SHIELD_CAPACITY)
            + await self._sum_attribute(modules, attr.SHIELD_CAPACITY_BONUS)
        ) * shield_skills.multiplier(sb.SHIELD_CAPACITY)
        recharge_ms = await read.attr(ship.type_id, attr.SHIELD_RECHARGE_RATE) * shield_skills.multiplier(sb.SHIELD_RECHARGE)
        recharge_s = recharge_ms / 1000.0
        passive = shield_capacity / recharge_s if recharge_s > EPS else 0.0

        armor_hp = (
            await read.attr(ship.type_id, attr.ARMOR_HP)
            + await self._sum_attribute(modules, attr.ARMOR_HP_BONUS_ADD)
        ) * armor_skills.multiplier(sb.ARMOR_HP)
        hull_hp = await read.attr(ship.type_id, attr.HULL_HP) * armor_skills.multiplier(sb.HULL_HP)

        shield_resists = await self._resists(ship.type_id, modules, "shield")
        armor_resists = await self._resists(ship.type_id, modules, "armor")
        hull_resists = await self._resists(ship.type_id, modules, "hull")

        repair_mult = armor_skills.multiplier(sb.REPAIR_AMOUNT)
        result = TankResult(
            shield_capacity=shield_capacity,
            shield_recharge_time_s=recharge_s,
            shield_passive_regen=passive,
            shield_peak_regen=SHIELD_PEAK_REGEN_FACTOR * passive,
            armor_hp=armor_hp,
            hull_hp=hull_hp,
            shield_resists=shield_resists,
            armor_resists=armor_resists,
            hull_resists=hull_resists,
            shield_boost_rate=await self._repair_rate(
                modules, attr.SHIELD_BOOST_AMOUNT, shield_skills.multiplier(sb.SHIELD_BOOST)
            ),
            armor_repair_rate=await self._repair_rate(modules, attr.ARMOR_REPAIR_AMOUNT, repair_mult),
            hull_repair_rate=await self._repair_rate(modules, attr.HULL_REPAIR_AMOUNT, repair_mult),
            effective_hp=EffectiveHp(
                shield=_ehp(shield_capacity, shield_resists),
                armor=_ehp(armor_hp, armor_resists),
                hull=_ehp(hull_hp, hull_resists),
            ),
        )
        _LOG.debug("Tank for fitting %s: EHP %.0f", fitting.id, result.effective_hp.total)
        return result
