"""
Shared plumbing for the per-fitting calculators.

Lookups are strict: any module, charge or drone type the attribute store
cannot resolve raises NotFoundError and aborts the calculation.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from shipfit_app.models import EntityType, Fitting, ModuleEntry, TypeCategory
from shipfit_app.models import attributes as attr
from shipfit_app.services.attribute_store import AttributeAccessor, AttributeReader
from shipfit_app.services.stacking_penalty import (
    EXEMPT_GROUPS,
    PenaltyGroup,
    StackingModifier,
    bonus_from_multiplier,
    bonus_from_percent,
    classify_module,
)

ResolvedModule = Tuple[ModuleEntry, EntityType]


def as_reader(attributes: AttributeAccessor | AttributeReader) -> AttributeReader:
    if isinstance(attributes, AttributeReader):
        return attributes
    return AttributeReader(attributes)


def modifier_group(entity: EntityType, default: PenaltyGroup) -> PenaltyGroup:
    """Stack in `default` unless the module belongs to an exempt family."""
    classified = classify_module(entity.group) or classify_module(entity.name)
    if classified in EXEMPT_GROUPS:
        return classified
    return default


class FittingCalculator:
    """Base class: holds the attribute reader and resolves fitting contents."""

    component = "fitting"

    def __init__(self, attributes: AttributeAccessor | AttributeReader) -> None:
        self._reader = as_reader(attributes)

    @property
    def reader(self) -> AttributeReader:
        return self._reader

    async def _ship(self, fitting: Fitting) -> EntityType:
        return await self._reader.expect(fitting.ship_type_id, TypeCategory.SHIP, "Ship")

    async def _resolve(self, entries: Iterable[ModuleEntry], category: TypeCategory = TypeCategory.MODULE) -> List[ResolvedModule]:
        resolved: List[ResolvedModule] = []
        for entry in entries:
            entity = await self._reader.expect(entry.type_id, category, category.value.capitalize())
            resolved.append((entry, entity))
        return resolved

    async def _online_modules(self, fitting: Fitting) -> List[ResolvedModule]:
        return await self._resolve(fitting.online_modules())

    async def _cycle_time_ms(self, type_id: int) -> float:
        """Activation duration, falling back to the rate of fire for weapons."""
        duration = await self._reader.attr(type_id, attr.DURATION)
        if duration > 0:
            return duration
        return await self._reader.attr(type_id, attr.RATE_OF_FIRE)

    async def _multiplier_modifiers(
        self,
        modules: Iterable[ResolvedModule],
        name: str,
        group: PenaltyGroup,
    ) -> List[StackingModifier]:
        """Modifiers from a multiplier-style attribute (1.10 = +10 %), one per module unit."""
        modifiers: List[StackingModifier] = []
        for entry, entity in modules:
            value = await self._reader.attr(entry.type_id, name, 1.0)
            if value == 1.0:
                continue
            mod = StackingModifier(bonus_from_multiplier(value), modifier_group(entity, group), entry.type_id)
            modifiers.extend([mod] * entry.quantity)
        return modifiers

    async def _percent_modifiers(
        self,
        modules: Iterable[ResolvedModule],
        name: str,
        group: PenaltyGroup,
    ) -> List[StackingModifier]:
        """Modifiers from a percent-style attribute (30 = +30 %), one per module unit."""
        modifiers: List[StackingModifier] = []
        for entry, entity in modules:
            value = await self._reader.attr(entry.type_id, name)
            if value == 0.0:
                continue
            mod = StackingModifier(bonus_from_percent(value), modifier_group(entity, group), entry.type_id)
            modifiers.extend([mod] * entry.quantity)
        return modifiers

    async def _sum_attribute(self, modules: Iterable[ResolvedModule], name: str) -> float:
        total = 0.0
        for entry, _entity in modules:
            total += await self._reader.attr(entry.type_id, name) * entry.quantity
        return total
