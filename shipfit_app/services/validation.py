"""
Validation and limit checks for fittings.

Detects missing or miscategorized types, misplaced modules, resource and slot
overloads, oversized modules and conflicting exclusive modules. Overages are
reported as data, never raised: a fitting with a CPU overload still yields a
normal ValidationResult whose verdict is False.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, Tuple

from shipfit_app.config.limits import EPS, EXCLUSIVE_MODULE_GROUPS, MAX_FITTING_NAME_LENGTH
from shipfit_app.models import FITTED_SLOTS, Character, EntityType, Fitting, ModuleEntry, SlotCategory, TypeCategory
from shipfit_app.models import attributes as attr
from shipfit_app.services.errors import NotFoundError
from shipfit_app.services.fitting_context import FittingCalculator
from shipfit_app.services.resource_usage import ResourceBudget, ResourceUsageCalculator, ResourceUsageResult

_LOG = logging.getLogger(__name__)

# character id -> (fitting id, fitting name) of the fittings that character already owns
FittingNameLookup = Callable[[object], Iterable[Tuple[object, str]]]

_SLOT_ATTRIBUTES = {
    SlotCategory.HIGH: attr.HIGH_SLOTS,
    SlotCategory.MEDIUM: attr.MEDIUM_SLOTS,
    SlotCategory.LOW: attr.LOW_SLOTS,
    SlotCategory.RIG: attr.RIG_SLOTS,
    SlotCategory.SUBSYSTEM: attr.SUBSYSTEM_SLOTS,
}


class ValidationSeverity(Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    code: str
    severity: ValidationSeverity
    message: str
    value: float | None = None
    limit: float | None = None


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    constraint: str
    required: float
    available: float
    overage: float  # signed: required - available


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    issues: Tuple[ValidationIssue, ...] = ()
    violations: Tuple[ConstraintViolation, ...] = ()
    resources: ResourceUsageResult | None = None

    @property
    def errors(self) -> List[str]:
        return [i.message for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[str]:
        return [i.message for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == ValidationSeverity.WARNING for i in self.issues)


def _error(code: str, message: str, value: float | None = None, limit: float | None = None) -> ValidationIssue:
    return ValidationIssue(code, ValidationSeverity.ERROR, message, value, limit)


def _warning(code: str, message: str, value: float | None = None, limit: float | None = None) -> ValidationIssue:
    return ValidationIssue(code, ValidationSeverity.WARNING, message, value, limit)


# resource key -> (constraint name, issue code, severity, message format)
_RESOURCE_CHECKS = (
    ("cpu", "CPU", "CPU_OVERLOAD", ValidationSeverity.ERROR, "CPU overload: {used:.1f}/{total:.1f} tf"),
    ("power", "PowerGrid", "POWER_OVERLOAD", ValidationSeverity.ERROR, "PowerGrid overload: {used:.1f}/{total:.1f} MW"),
    ("calibration", "Calibration", "CALIBRATION_OVERLOAD", ValidationSeverity.ERROR,
     "Calibration overload: {used:.0f}/{total:.0f}"),
    ("cargo", "Cargo", "CARGO_OVERFLOW", ValidationSeverity.WARNING, "Cargo hold over capacity: {used:.2f}/{total:.2f} m3"),
    ("drone_bay", "DroneBay", "DRONE_BAY_OVERFLOW", ValidationSeverity.WARNING,
     "Drone bay over capacity: {used:.1f}/{total:.1f} m3"),
    ("drone_bandwidth", "DroneBandwidth", "DRONE_BANDWIDTH_OVERLOAD", ValidationSeverity.ERROR,
     "Drone bandwidth overload: {used:.0f}/{total:.0f} Mbit/s"),
)


class FittingValidator(FittingCalculator):
    """Runs every fitting check and collects the findings into one ValidationResult."""

    component = "validation"

    def __init__(self, attributes, existing_fittings: FittingNameLookup | None = None) -> None:
        super().__init__(attributes)
        self._existing_fittings = existing_fittings
        self._resources = ResourceUsageCalculator(self._reader)

    async def validate(self, fitting: Fitting, character: Character | None = None) -> ValidationResult:
        issues: List[ValidationIssue] = []
        violations: List[ConstraintViolation] = []

        # 1. Basic properties
        issues.extend(self._check_properties(fitting, character))

        # 2. Ship type
        ship = await self._check_ship(fitting, issues)

        # 3. Modules, charges, drones and cargo; unresolvable entries are dropped from later steps
        resolved = await self._check_entries(fitting, issues)

        resources: ResourceUsageResult | None = None
        if ship is not None:
            # 4. Resource budgets over the resolvable entries
            resources = await self._resources.calculate(resolved, character)
            self._check_resources(resources, issues, violations)

            # 5. Slot counts
            await self._check_slots(ship, fitting, issues, violations)

            # 6. Size class and exclusive module groups
            await self._check_compatibility(ship, resolved, issues)

        valid = not any(i.severity == ValidationSeverity.ERROR for i in issues)
        _LOG.info(
            "Validated fitting %s: valid=%s, %d errors, %d warnings",
            fitting.id, valid,
            sum(1 for i in issues if i.severity == ValidationSeverity.ERROR),
            sum(1 for i in issues if i.severity == ValidationSeverity.WARNING),
        )
        return ValidationResult(valid=valid, issues=tuple(issues), violations=tuple(violations), resources=resources)

    def _check_properties(self, fitting: Fitting, character: Character | None) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        name = (fitting.name or "").strip()
        if not name:
            issues.append(_error("NAME_MISSING", "Fitting name is required."))
        elif len(fitting.name) > MAX_FITTING_NAME_LENGTH:
            issues.append(
                _error(
                    "NAME_TOO_LONG",
                    f"Fitting name is {len(fitting.name)} characters; maximum is {MAX_FITTING_NAME_LENGTH}.",
                    float(len(fitting.name)),
                    float(MAX_FITTING_NAME_LENGTH),
                )
            )
        if fitting.id is None or (isinstance(fitting.id, str) and not fitting.id.strip()):
            issues.append(_error("ID_MISSING", "Fitting identity is required."))

        owner = character.id if character is not None and character.id is not None else fitting.character_id
        if name and owner is not None and self._existing_fittings is not None:
            for other_id, other_name in self._existing_fittings(owner):
                if other_id != fitting.id and (other_name or "").strip().lower() == name.lower():
                    issues.append(_error("NAME_DUPLICATE", f"A fitting named '{name}' already exists for this character."))
                    break
        return issues

    async def _check_ship(self, fitting: Fitting, issues: List[ValidationIssue]) -> EntityType | None:
        try:
            ship = await self._reader.entity(fitting.ship_type_id)
        except NotFoundError:
            issues.append(_error("SHIP_NOT_FOUND", f"Ship type {fitting.ship_type_id} not found."))
            return None
        if ship.category is not TypeCategory.SHIP:
            issues.append(_error("SHIP_CATEGORY", f"Type {ship.type_id} ({ship.name}) is not a ship."))
            return None
        return ship

    async def _lookup(self, type_id: int, issues: List[ValidationIssue], code: str, what: str) -> EntityType | None:
        try:
            return await self._reader.entity(type_id)
        except NotFoundError:
            issues.append(_error(code, f"{what} type {type_id} not found."))
            return None

    async def _check_module(self, entry: ModuleEntry, issues: List[ValidationIssue]) -> bool:
        """Record problems with one entry; True when it can still count towards resources."""
        expected = TypeCategory.DRONE if entry.slot is SlotCategory.DRONE else TypeCategory.MODULE
        entity = await self._lookup(entry.type_id, issues, "MODULE_NOT_FOUND", expected.value.capitalize())
        if entity is None:
            return False
        if entity.category is not expected:
            issues.append(
                _error("MODULE_CATEGORY", f"{entity.name} is a {entity.category.value}, not a {expected.value}.")
            )
            return False
        if expected is TypeCategory.MODULE and entity.slot is not entry.slot:
            fits = entity.slot.value if entity.slot else "no"
            issues.append(
                _error("SLOT_MISMATCH", f"{entity.name} fits {fits} slots, not {entry.slot.value} slots.")
            )
        if entry.quantity <= 0:
            issues.append(_error("QUANTITY_INVALID", f"{entity.name} has non-positive quantity {entry.quantity}."))
            return False
        if entry.charge_type_id is not None:
            charge = await self._lookup(entry.charge_type_id, issues, "CHARGE_NOT_FOUND", "Charge")
            if charge is not None and charge.category is not TypeCategory.CHARGE:
                issues.append(_error("CHARGE_CATEGORY", f"{charge.name} loaded in {entity.name} is not a charge."))
        return True

    async def _check_entries(self, fitting: Fitting, issues: List[ValidationIssue]) -> Fitting:
        kept: Dict[SlotCategory, List[ModuleEntry]] = {}
        for slot in SlotCategory:
            kept[slot] = [e for e in fitting.modules_in(slot) if await self._check_module(e, issues)]
        cargo = [
            item for item in fitting.cargo
            if await self._lookup(item.type_id, issues, "ITEM_NOT_FOUND", "Cargo item") is not None
        ]
        return replace(
            fitting,
            high_slots=kept[SlotCategory.HIGH],
            medium_slots=kept[SlotCategory.MEDIUM],
            low_slots=kept[SlotCategory.LOW],
            rig_slots=kept[SlotCategory.RIG],
            subsystem_slots=kept[SlotCategory.SUBSYSTEM],
            drones=kept[SlotCategory.DRONE],
            cargo=cargo,
        )

    def _check_resources(
        self,
        resources: ResourceUsageResult,
        issues: List[ValidationIssue],
        violations: List[ConstraintViolation],
    ) -> None:
        budgets = resources.budgets()
        for key, constraint, code, severity, template in _RESOURCE_CHECKS:
            budget: ResourceBudget = budgets[key]
            if not budget.exceeded:
                continue
            message = template.format(used=budget.used, total=budget.total)
            issues.append(ValidationIssue(code, severity, message, budget.used, budget.total))
            violations.append(ConstraintViolation(constraint, budget.used, budget.total, budget.used - budget.total))

    async def _check_slots(
        self,
        ship: EntityType,
        fitting: Fitting,
        issues: List[ValidationIssue],
        violations: List[ConstraintViolation],
    ) -> None:
        # Counts every placed entry, including ones that failed their lookup
        for slot in FITTED_SLOTS:
            used = fitting.slot_usage(slot)
            available = await self._reader.attr(ship.type_id, _SLOT_ATTRIBUTES[slot])
            if used > available + EPS:
                issues.append(
                    _error(
                        "SLOTS_EXCEEDED",
                        f"Too many {slot.value} slot modules: {used}/{available:.0f}",
                        float(used),
                        available,
                    )
                )
                violations.append(ConstraintViolation(f"{slot.value.capitalize()}Slots", float(used), available, used - available))

    async def _check_compatibility(self, ship: EntityType, fitting: Fitting, issues: List[ValidationIssue]) -> None:
        ship_size = await self._reader.attr(ship.type_id, attr.SIZE_CLASS)
        group_counts: Dict[str, int] = {}
        for entry in fitting.fitted_modules():
            entity = await self._reader.entity(entry.type_id)
            module_size = await self._reader.attr(entry.type_id, attr.SIZE_CLASS)
            if ship_size > 0 and module_size > ship_size + EPS:
                issues.append(
                    _error(
                        "SIZE_INCOMPATIBLE",
                        f"{entity.name} (size {module_size:.0f}) is too large for {ship.name} (size {ship_size:.0f}).",
                        module_size,
                        ship_size,
                    )
                )
            group_counts[entity.group] = group_counts.get(entity.group, 0) + entry.quantity

        for group, limit in EXCLUSIVE_MODULE_GROUPS.items():
            count = group_counts.get(group, 0)
            if count > limit:
                issues.append(
                    _error(
                        "EXCLUSIVE_CONFLICT",
                        f"Only {limit} {group} module(s) may be fitted; found {count}.",
                        float(count),
                        float(limit),
                    )
                )
