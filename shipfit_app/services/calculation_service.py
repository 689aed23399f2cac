"""
Fitting calculation orchestrator.

`calculate_fitting` fans out to every sub-calculator concurrently, joins the
results into one CalculationResult and caches it per fitting + character +
module fingerprint. Any failing branch fails the whole call and nothing is
cached; the remaining branches are cancelled.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, List

from shipfit_app.config.limits import CACHE_TTL_S
from shipfit_app.config.settings import Settings
from shipfit_app.models import Character, Fitting, TypeCategory
from shipfit_app.repositories import StaticDataRepository, init_database
from shipfit_app.services.ammunition import AmmunitionCalculator, AmmunitionResult
from shipfit_app.services.attribute_store import AttributeAccessor
from shipfit_app.services.capacitor import CapacitorCalculator, CapacitorResult
from shipfit_app.services.dps import DpsCalculator, DpsResult
from shipfit_app.services.errors import ComputationFailure, NotFoundError
from shipfit_app.services.fitting_context import as_reader
from shipfit_app.services.navigation import NavigationCalculator, NavigationResult
from shipfit_app.services.resource_usage import ResourceUsageCalculator, ResourceUsageResult
from shipfit_app.services.result_cache import ResultCache, fitting_cache_key
from shipfit_app.services.tank import TankCalculator, TankResult
from shipfit_app.services.targeting import TargetingCalculator, TargetingResult
from shipfit_app.services.validation import FittingNameLookup, FittingValidator, ValidationResult

_LOG = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class CalculationResult:
    fitting_id: object
    character_id: int | None
    dps: DpsResult
    tank: TankResult
    capacitor: CapacitorResult
    navigation: NavigationResult
    targeting: TargetingResult
    ammunition: AmmunitionResult
    resources: ResourceUsageResult
    validation: ValidationResult
    calculated_at: datetime
    elapsed_s: float


async def _gather_all(coros: List[Awaitable]) -> list:
    """Await every branch; on the first failure cancel the rest and re-raise."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let cancelled branches unwind before the error reaches the caller
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class FittingCalculationService:
    """Entry point for fitting statistics; owns the aggregate result cache."""

    def __init__(
        self,
        attributes: AttributeAccessor,
        existing_fittings: FittingNameLookup | None = None,
        cache_ttl_s: float = CACHE_TTL_S,
        clock=time.monotonic,
    ) -> None:
        reader = as_reader(attributes)
        self._reader = reader
        self._ammunition = AmmunitionCalculator(reader)
        self._dps = DpsCalculator(reader, self._ammunition)
        self._tank = TankCalculator(reader)
        self._capacitor = CapacitorCalculator(reader)
        self._navigation = NavigationCalculator(reader)
        self._targeting = TargetingCalculator(reader)
        self._resources = ResourceUsageCalculator(reader)
        self._validator = FittingValidator(reader, existing_fittings)
        self._cache: ResultCache[CalculationResult] = ResultCache(cache_ttl_s, clock)
        self._computations = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        attributes: AttributeAccessor | None = None,
        existing_fittings: FittingNameLookup | None = None,
        clock=time.monotonic,
    ) -> "FittingCalculationService":
        """Service using the configured cache lifetime; reads the SQLite store at `settings.db_path` by default."""
        if attributes is None:
            session_factory = init_database(settings.db_path)
            attributes = StaticDataRepository(session_factory())
        _LOG.info("Fitting calculation service ready (cache TTL %.0f s)", settings.cache_ttl_s)
        return cls(attributes, existing_fittings, cache_ttl_s=settings.cache_ttl_s, clock=clock)

    @property
    def computation_count(self) -> int:
        """Number of aggregate computations actually run (cache misses)."""
        return self._computations

    @property
    def cache(self) -> ResultCache[CalculationResult]:
        return self._cache

    async def calculate_fitting(self, fitting: Fitting, character: Character | None = None) -> CalculationResult:
        key = fitting_cache_key(fitting, character)
        return await self._cache.get_or_compute(key, lambda: self._compute(fitting, character))

    async def _compute(self, fitting: Fitting, character: Character | None) -> CalculationResult:
        self._computations += 1
        started = time.perf_counter()

        # Unknown ship types surface as NotFoundError before any fan-out
        await self._reader.expect(fitting.ship_type_id, TypeCategory.SHIP, "Ship")

        branches = {
            "dps": self._dps.calculate(fitting, character),
            "tank": self._tank.calculate(fitting, character),
            "capacitor": self._capacitor.calculate(fitting, character),
            "navigation": self._navigation.calculate(fitting, character),
            "targeting": self._targeting.calculate(fitting, character),
            "ammunition": self._ammunition.calculate(fitting, character),
            "resources": self._resources.calculate(fitting, character),
            "validation": self._validator.validate(fitting, character),
        }
        results = await _gather_all(
            [self._branch(component, fitting, coro) for component, coro in branches.items()]
        )

        named = dict(zip(branches, results))
        result = CalculationResult(
            fitting_id=fitting.id,
            character_id=character.id if character is not None else None,
            calculated_at=_utc_now(),
            elapsed_s=time.perf_counter() - started,
            **named,
        )
        _LOG.debug("Calculated fitting %s in %.3f s", fitting.id, result.elapsed_s)
        return result

    async def _branch(self, component: str, fitting: Fitting, coro: Awaitable):
        """Run one sub-calculation, turning unexpected errors into ComputationFailure."""
        try:
            return await coro
        except NotFoundError:
            raise
        except Exception as exc:
            _LOG.exception("%s calculation failed for fitting %s", component, fitting.id)
            raise ComputationFailure(f"{component} calculation failed for fitting {fitting.id}: {exc}", component) from exc

    # Individually invocable calculators; uncached, same arithmetic as the aggregate

    async def calculate_dps(self, fitting: Fitting, character: Character | None = None) -> DpsResult:
        return await self._dps.calculate(fitting, character)

    async def calculate_tank(self, fitting: Fitting, character: Character | None = None) -> TankResult:
        return await self._tank.calculate(fitting, character)

    async def calculate_capacitor(self, fitting: Fitting, character: Character | None = None) -> CapacitorResult:
        return await self._capacitor.calculate(fitting, character)

    async def calculate_navigation(self, fitting: Fitting, character: Character | None = None) -> NavigationResult:
        return await self._navigation.calculate(fitting, character)

    async def calculate_targeting(self, fitting: Fitting, character: Character | None = None) -> TargetingResult:
        return await self._targeting.calculate(fitting, character)

    async def calculate_ammunition_effects(
        self, fitting: Fitting, character: Character | None = None
    ) -> AmmunitionResult:
        return await self._ammunition.calculate(fitting, character)

    async def calculate_resource_usage(
        self, fitting: Fitting, character: Character | None = None
    ) -> ResourceUsageResult:
        return await self._resources.calculate(fitting, character)

    async def validate_fitting_constraints(
        self, fitting: Fitting, character: Character | None = None
    ) -> ValidationResult:
        return await self._validator.validate(fitting, character)
