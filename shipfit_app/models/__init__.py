"""
Domain models for the fitting engine.

These are pure Python/domain classes, separate from ORM mappings.
"""

from shipfit_app.models.fitting import (
    FITTED_SLOTS,
    CargoItem,
    Fitting,
    ModuleEntry,
    SlotCategory,
)
from shipfit_app.models.character import Character, SkillRecord
from shipfit_app.models.entity_type import EntityType, TypeCategory

__all__ = [
    "FITTED_SLOTS",
    "CargoItem",
    "Fitting",
    "ModuleEntry",
    "SlotCategory",
    "Character",
    "SkillRecord",
    "EntityType",
    "TypeCategory",
]
