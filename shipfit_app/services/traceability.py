"""
Calculation traceability: inputs snapshot, outputs, timestamp.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from shipfit_app.models import Fitting, SlotCategory


@dataclass(slots=True)
class CalculationSnapshot:
    """Traceability snapshot for one fitting calculation."""
    timestamp: datetime
    fitting_name: str
    ship_type_id: int
    inputs: Dict[str, Any] = field(default_factory=dict)
    outputs: Dict[str, Any] = field(default_factory=dict)
    validation_summary: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "fitting_name": self.fitting_name,
            "ship_type_id": self.ship_type_id,
            "inputs": self.inputs,
            "outputs": self.outputs,
            "validation_summary": self.validation_summary,
        }


def create_snapshot(fitting: Fitting, result: object) -> CalculationSnapshot:
    """Build a traceability snapshot from a fitting and its CalculationResult."""
    res = result
    inputs = {
        slot.value: [
            {"type_id": e.type_id, "quantity": e.quantity, "charge_type_id": e.charge_type_id, "online": e.online}
            for e in fitting.modules_in(slot)
        ]
        for slot in SlotCategory
    }
    inputs["cargo"] = [{"type_id": c.type_id, "quantity": c.quantity} for c in fitting.cargo]
    inputs["character_id"] = getattr(res, "character_id", None)

    dps = getattr(res, "dps", None)
    tank = getattr(res, "tank", None)
    capacitor = getattr(res, "capacitor", None)
    navigation = getattr(res, "navigation", None)
    targeting = getattr(res, "targeting", None)
    outputs = {
        "total_dps": getattr(dps, "total_dps", None),
        "volley": getattr(dps, "volley", None),
        "effective_hp": getattr(getattr(tank, "effective_hp", None), "total", None),
        "capacitor_stable": getattr(capacitor, "stable", None),
        "capacitor_time_to_empty_s": getattr(capacitor, "time_to_empty_s", None),
        "max_velocity": getattr(navigation, "max_velocity", None),
        "align_time_s": getattr(navigation, "align_time_s", None),
        "max_target_range": getattr(targeting, "max_target_range", None),
        "scan_resolution": getattr(targeting, "scan_resolution", None),
    }
    resources = getattr(res, "resources", None)
    if resources is not None:
        outputs["utilization"] = {name: b.utilization for name, b in resources.budgets().items()}

    validation_summary = ""
    validation = getattr(res, "validation", None)
    if validation is not None:
        if validation.valid:
            validation_summary = f"VALID ({len(validation.warnings)} warnings)"
        else:
            validation_summary = "INVALID: " + "; ".join(validation.errors)

    return CalculationSnapshot(
        timestamp=getattr(res, "calculated_at"),
        fitting_name=fitting.name,
        ship_type_id=fitting.ship_type_id,
        inputs=inputs,
        outputs=outputs,
        validation_summary=validation_summary,
    )
