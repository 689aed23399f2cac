"""
Numeric constants for fitting calculations and validation.

Values mirror the server-side dogma arithmetic the engine reproduces. Attribute
values themselves (ship outputs, module draws) always come from the attribute
store; only formula constants and policy limits live here.
"""

from __future__ import annotations

# Stacking penalty: factor(rank) = exp(-(rank^2) / STACKING_PENALTY_DIVISOR)
# rank 0 -> 1.0, rank 1 -> ~0.869, rank 2 -> ~0.571, rank 3 -> ~0.283
STACKING_PENALTY_DIVISOR = 7.1289  # 2.67^2

# Calibration budget granted per rig slot
CALIBRATION_PER_RIG_SLOT = 400.0

# Aggregate result cache lifetime (s)
CACHE_TTL_S = 300.0
# Least recently used aggregates are dropped beyond this many entries
CACHE_MAX_ENTRIES = 1024

# Fitting name length limit (characters)
MAX_FITTING_NAME_LENGTH = 100

# Align time: -ln(0.25) * agility * mass / ALIGN_TIME_CONSTANT
ALIGN_TIME_CONSTANT = 1_000_000.0

# Warp speed attribute is in AU/s; converted to m/s with this factor
AU_IN_METERS = 149_597_870_700.0

# Sub-warp velocity ceiling (m/s)
MAX_SUBWARP_VELOCITY = 7500.0

# Capacitor time constant: tau = recharge_time / CAPACITOR_TAU_DIVISOR
CAPACITOR_TAU_DIVISOR = 5.0

# Shield passive regen peaks at 25% shield: peak = factor * capacity / recharge
SHIELD_PEAK_REGEN_FACTOR = 2.5

# Lock time (s) = LOCK_TIME_CONSTANT / (scan_res * asinh(signature)^2)
LOCK_TIME_CONSTANT = 40000.0
MIN_LOCK_TIME_S = 1.0

# Reference signature radii (m) used for the lock-time profile
REFERENCE_SIGNATURES_M = {
    "frigate": 35.0,
    "destroyer": 55.0,
    "cruiser": 125.0,
    "battlecruiser": 260.0,
    "battleship": 400.0,
    "capital": 2500.0,
    "supercapital": 12000.0,
}

# Locked targets an untrained pilot can hold; Target Management adds to this
CHARACTER_BASE_LOCKED_TARGETS = 2

# Drones an untrained pilot can control; the Drones skill adds one per level
CHARACTER_BASE_ACTIVE_DRONES = 2
# Hull drone control limit when the hull does not carry maxActiveDrones
DEFAULT_MAX_ACTIVE_DRONES = 5

# Module groups that may be fitted at most N times per fitting
EXCLUSIVE_MODULE_GROUPS = {
    "Cloaking Device": 1,
    "Damage Control": 1,
    "Warp Disrupt Field Generator": 1,
}

# Highest trainable skill level
MAX_SKILL_LEVEL = 5

# Floating-point tolerance
EPS = 1e-9
