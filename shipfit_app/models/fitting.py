from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List


class SlotCategory(Enum):
    """Structural attachment groups of a vehicle."""

    HIGH = "high"  # primary weapons
    MEDIUM = "medium"  # support
    LOW = "low"  # defensive
    RIG = "rig"
    SUBSYSTEM = "subsystem"
    DRONE = "drone"  # carried units


# Slots that hold fitted modules, in fitting order (drones live in their own bay)
FITTED_SLOTS = (
    SlotCategory.HIGH,
    SlotCategory.MEDIUM,
    SlotCategory.LOW,
    SlotCategory.RIG,
    SlotCategory.SUBSYSTEM,
)


def _positive_int(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{what} must be a positive integer, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class ModuleEntry:
    """One fitted module (or stack of drones) in a fitting."""

    type_id: int
    slot: SlotCategory
    quantity: int = 1
    charge_type_id: int | None = None
    online: bool = True

    def __post_init__(self) -> None:
        _positive_int(self.type_id, "Module type id")
        _positive_int(self.quantity, "Module quantity")
        if not isinstance(self.slot, SlotCategory):
            # Accept the serialized slot name ("high", "rig", ...) and reject anything else
            object.__setattr__(self, "slot", SlotCategory(self.slot))
        if self.charge_type_id is not None:
            _positive_int(self.charge_type_id, "Charge type id")


@dataclass(frozen=True, slots=True)
class CargoItem:
    type_id: int
    quantity: int = 1

    def __post_init__(self) -> None:
        _positive_int(self.type_id, "Cargo type id")
        _positive_int(self.quantity, "Cargo quantity")


@dataclass(slots=True)
class Fitting:
    """
    A loadout of modules attached to exactly one vehicle (ship) type.

    Each slot collection only accepts entries of its own slot category; the
    check runs on construction so malformed entries never reach a calculator.
    """

    id: int | str | None = None
    name: str = ""
    ship_type_id: int = 0
    character_id: int | None = None
    high_slots: List[ModuleEntry] = field(default_factory=list)
    medium_slots: List[ModuleEntry] = field(default_factory=list)
    low_slots: List[ModuleEntry] = field(default_factory=list)
    rig_slots: List[ModuleEntry] = field(default_factory=list)
    subsystem_slots: List[ModuleEntry] = field(default_factory=list)
    drones: List[ModuleEntry] = field(default_factory=list)
    cargo: List[CargoItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        _positive_int(self.ship_type_id, "Ship type id")
        for slot in SlotCategory:
            for entry in self.modules_in(slot):
                if not isinstance(entry, ModuleEntry):
                    raise ValueError(f"{slot.value} slots hold ModuleEntry records, got {entry!r}")
                if entry.slot is not slot:
                    raise ValueError(
                        f"Module {entry.type_id} declared for {entry.slot.value} slot "
                        f"placed in {slot.value} slots"
                    )
        for item in self.cargo:
            if not isinstance(item, CargoItem):
                raise ValueError(f"Cargo holds CargoItem records, got {item!r}")

    def modules_in(self, slot: SlotCategory) -> List[ModuleEntry]:
        return {
            SlotCategory.HIGH: self.high_slots,
            SlotCategory.MEDIUM: self.medium_slots,
            SlotCategory.LOW: self.low_slots,
            SlotCategory.RIG: self.rig_slots,
            SlotCategory.SUBSYSTEM: self.subsystem_slots,
            SlotCategory.DRONE: self.drones,
        }[slot]

    def fitted_modules(self) -> Iterator[ModuleEntry]:
        """All module entries in slots, drones and cargo excluded."""
        for slot in FITTED_SLOTS:
            yield from self.modules_in(slot)

    def online_modules(self) -> Iterator[ModuleEntry]:
        return (entry for entry in self.fitted_modules() if entry.online)

    def slot_usage(self, slot: SlotCategory) -> int:
        return sum(entry.quantity for entry in self.modules_in(slot))
