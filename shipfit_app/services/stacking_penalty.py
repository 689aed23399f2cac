"""
Diminishing-returns combination of module bonuses ("stacking penalty").

Bonuses are fractional (0.10 = +10 %, -0.30 = -30 %). Within a penalty group
they are sorted by descending magnitude and the bonus at rank n is scaled by

    exp(-(n^2) / 7.1289)

before the scaled bonuses are combined multiplicatively:

    multiplier = prod(1 + bonus_n * factor(n))

Groups listed in EXEMPT_GROUPS are never penalized. Skill bonuses never pass
through here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Sequence

import numpy as np

from shipfit_app.config.limits import EPS, STACKING_PENALTY_DIVISOR

_LOG = logging.getLogger(__name__)


class PenaltyGroup(Enum):
    ARMOR_RESISTANCE = "armor_resistance"
    SHIELD_RESISTANCE = "shield_resistance"
    HULL_RESISTANCE = "hull_resistance"
    DAMAGE_AMPLIFIER = "damage_amplifier"
    TRACKING_ENHANCER = "tracking_enhancer"
    SENSOR_BOOSTER = "sensor_booster"
    NAVIGATION_UPGRADE = "navigation_upgrade"
    CAPACITOR_BOOSTER = "capacitor_booster"
    SHIELD_BOOSTER = "shield_booster"
    ARMOR_REPAIRER = "armor_repairer"
    WEAPON_UPGRADE = "weapon_upgrade"
    PROPULSION_UPGRADE = "propulsion_upgrade"
    ELECTRONIC_UPGRADE = "electronic_upgrade"
    ENGINEERING_UPGRADE = "engineering_upgrade"
    # exempt
    SMART_BOMB = "smart_bomb"
    CAPACITOR_INJECTOR = "capacitor_injector"
    WEAPON_SYSTEM = "weapon_system"
    ELECTRONIC_WARFARE = "electronic_warfare"
    MINING_LASER = "mining_laser"
    TRACTOR_BEAM = "tractor_beam"
    AFTERBURNER = "afterburner"
    MICROWARPDRIVE = "microwarpdrive"
    MICROJUMP_DRIVE = "microjump_drive"


EXEMPT_GROUPS = frozenset(
    {
        PenaltyGroup.SMART_BOMB,
        PenaltyGroup.CAPACITOR_INJECTOR,
        PenaltyGroup.WEAPON_SYSTEM,
        PenaltyGroup.ELECTRONIC_WARFARE,
        PenaltyGroup.MINING_LASER,
        PenaltyGroup.TRACTOR_BEAM,
        PenaltyGroup.AFTERBURNER,
        PenaltyGroup.MICROWARPDRIVE,
        PenaltyGroup.MICROJUMP_DRIVE,
    }
)

# Keyword -> group, checked in order against the lower-cased module group/name.
# Exempt families come before the generic weapon keywords ("laser" would
# otherwise swallow mining lasers).
_CLASSIFICATION: Sequence[tuple[tuple[str, ...], PenaltyGroup]] = (
    (("damage amplifier", "ballistic control", "magnetic field stabilizer", "heat sink", "gyrostabilizer"),
     PenaltyGroup.DAMAGE_AMPLIFIER),
    (("armor hardener", "coating", "energized plating"), PenaltyGroup.ARMOR_RESISTANCE),
    (("shield hardener", "shield resistance", "shield amplifier"), PenaltyGroup.SHIELD_RESISTANCE),
    (("damage control",), PenaltyGroup.HULL_RESISTANCE),
    (("overdrive", "nanofiber", "inertial stabilizer"), PenaltyGroup.NAVIGATION_UPGRADE),
    (("afterburner",), PenaltyGroup.AFTERBURNER),
    (("microwarpdrive", "mwd"), PenaltyGroup.MICROWARPDRIVE),
    (("micro jump drive", "microjump"), PenaltyGroup.MICROJUMP_DRIVE),
    (("sensor booster", "targeting computer"), PenaltyGroup.SENSOR_BOOSTER),
    (("tracking enhancer", "tracking computer"), PenaltyGroup.TRACKING_ENHANCER),
    (("shield booster", "shield extender"), PenaltyGroup.SHIELD_BOOSTER),
    (("armor repair", "armor plate"), PenaltyGroup.ARMOR_REPAIRER),
    (("capacitor flux coil", "capacitor control circuit", "capacitor power relay"),
     PenaltyGroup.CAPACITOR_BOOSTER),
    (("cap booster", "capacitor booster"), PenaltyGroup.CAPACITOR_INJECTOR),
    (("smart bomb", "smartbomb"), PenaltyGroup.SMART_BOMB),
    (("mining laser", "strip miner"), PenaltyGroup.MINING_LASER),
    (("tractor beam",), PenaltyGroup.TRACTOR_BEAM),
    (("ecm", "sensor dampener", "target painter", "tracking disruptor", "weapon disruptor"),
     PenaltyGroup.ELECTRONIC_WARFARE),
    (("laser", "projectile", "hybrid", "missile", "torpedo", "rocket", "autocannon", "artillery",
      "blaster", "railgun"),
     PenaltyGroup.WEAPON_SYSTEM),
)


@dataclass(frozen=True, slots=True)
class StackingModifier:
    """A fractional bonus tagged with the penalty group it stacks in."""

    bonus: float
    group: PenaltyGroup | None = None
    source_type_id: int | None = None


@dataclass(frozen=True, slots=True)
class GroupPenaltySummary:
    group: PenaltyGroup | None
    count: int
    raw_multiplier: float  # all bonuses at full strength
    penalized_multiplier: float
    exempt: bool

    @property
    def efficiency(self) -> float:
        """Share of the raw bonus that survives the penalty (1.0 when nothing is lost)."""
        raw_gain = self.raw_multiplier - 1.0
        if abs(raw_gain) < EPS:
            return 1.0
        return (self.penalized_multiplier - 1.0) / raw_gain


def penalty_factor(rank: int) -> float:
    """Effectiveness of the bonus at zero-based `rank` after sorting."""
    return float(np.exp(-(rank ** 2) / STACKING_PENALTY_DIVISOR))


def bonus_from_multiplier(multiplier: float) -> float:
    """1.10 -> 0.10, 0.70 -> -0.30."""
    return multiplier - 1.0


def bonus_from_percent(percent: float) -> float:
    """30 (%) -> 0.30."""
    return percent / 100.0


def _select(modifiers: Iterable[float | StackingModifier], group: PenaltyGroup | None) -> np.ndarray:
    values: List[float] = []
    for m in modifiers:
        if isinstance(m, StackingModifier):
            if group is not None and m.group is not None and m.group is not group:
                continue
            values.append(m.bonus)
        else:
            values.append(float(m))
    return np.asarray(values, dtype=float)


def apply_stacking_penalty(
    modifiers: Iterable[float | StackingModifier],
    group: PenaltyGroup | None = None,
) -> float:
    """
    Combine bonuses of one penalty group into a single multiplier.

    Plain floats always take part. Tagged modifiers take part when `group` is
    None (no categorical separation) or when their group matches `group`.
    An empty selection yields 1.0.
    """
    bonuses = _select(modifiers, group)
    if bonuses.size == 0:
        return 1.0

    if group in EXEMPT_GROUPS:
        return float(np.prod(1.0 + bonuses))

    # Stable sort keeps input order among equal magnitudes
    ordered = bonuses[np.argsort(-np.abs(bonuses), kind="stable")]
    ranks = np.arange(ordered.size, dtype=float)
    factors = np.exp(-(ranks ** 2) / STACKING_PENALTY_DIVISOR)
    result = float(np.prod(1.0 + ordered * factors))

    _LOG.debug("Stacking %d bonuses in %s -> %.6f", ordered.size, group, result)
    return result


def group_modifiers(modifiers: Iterable[StackingModifier]) -> Dict[PenaltyGroup | None, List[StackingModifier]]:
    grouped: Dict[PenaltyGroup | None, List[StackingModifier]] = {}
    for m in modifiers:
        grouped.setdefault(m.group, []).append(m)
    return grouped


def combine_grouped(modifiers: Iterable[StackingModifier]) -> Dict[PenaltyGroup | None, float]:
    """Penalize each group separately; returns group -> multiplier."""
    return {
        group: apply_stacking_penalty(members, group)
        for group, members in group_modifiers(modifiers).items()
    }


def stacked_multiplier(modifiers: Iterable[StackingModifier]) -> float:
    """Product of the per-group multipliers of all modifiers."""
    result = 1.0
    for multiplier in combine_grouped(modifiers).values():
        result *= multiplier
    return result


def summarize_groups(modifiers: Iterable[StackingModifier]) -> List[GroupPenaltySummary]:
    """Per-group view of how much bonus the stacking penalty removes."""
    summaries: List[GroupPenaltySummary] = []
    for group, members in group_modifiers(modifiers).items():
        raw = float(np.prod([1.0 + m.bonus for m in members]))
        summaries.append(
            GroupPenaltySummary(
                group=group,
                count=len(members),
                raw_multiplier=raw,
                penalized_multiplier=apply_stacking_penalty(members, group),
                exempt=group in EXEMPT_GROUPS,
            )
        )
    summaries.sort(key=lambda s: s.efficiency)
    return summaries


def classify_module(name: str) -> PenaltyGroup | None:
    """Penalty group for a module group or type name; None if unrecognized."""
    lowered = (name or "").lower()
    if not lowered:
        return None
    for keywords, group in _CLASSIFICATION:
        if any(k in lowered for k in keywords):
            return group
    return None
