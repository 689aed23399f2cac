from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shipfit_app.models.fitting import SlotCategory


class TypeCategory(Enum):
    SHIP = "ship"
    MODULE = "module"
    CHARGE = "charge"
    DRONE = "drone"
    SKILL = "skill"
    COMMODITY = "commodity"


@dataclass(frozen=True, slots=True)
class EntityType:
    """Static description of a ship, module, charge or item type."""

    type_id: int
    name: str
    category: TypeCategory
    group: str = ""
    slot: SlotCategory | None = None  # fitting slot for modules, None otherwise
