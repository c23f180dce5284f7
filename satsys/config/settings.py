"""
Project settings (constants + small helpers).
Units: kilometres (km), seconds (s), km/s for state vectors, m/s for maneuver delta-v.
"""
from __future__ import annotations

import math
import os
from typing import Optional, Tuple

# Paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
OUTPUT_DIR = os.path.join(BASE_DIR, "outputs")

# Run
RUN_ID_PREFIX = "run"
VALIDATE_ON_IMPORT = False

# Earth
MU_EARTH = 3.986004418e5       # km^3/s^2
EARTH_RADIUS = 6371.0          # km (spherical, used for a = R + altitude)
OMEGA_EARTH = 7.292115e-5      # rad/s (Earth rotation rate)

# Kepler solver
KEPLER_TOLERANCE = 1e-6
KEPLER_MAX_ITER = 10

# Collision estimator
COLLISION_SAMPLE_STEP = 60.0   # s between separation samples
COLLISION_HORIZON = 3600.0     # s (default look-ahead)

HORIZON_MIN = COLLISION_SAMPLE_STEP
HORIZON_MAX = 7 * 86400.0

# (upper bound on min distance in km, risk label, probability); checked in order
RISK_BUCKETS: Tuple[Tuple[float, str, float], ...] = (
    (1.0, "high", 1e-3),
    (5.0, "medium", 1e-4),
)
LOW_RISK_LABEL = "low"
LOW_RISK_PROBABILITY = 1e-5

# Threat level (advisories): miss km / probability floor per level
THREAT_HIGH_MISS_KM = 1.0
THREAT_HIGH_MIN_PROB = 1e-5
THREAT_MEDIUM_MISS_KM = 5.0
THREAT_MEDIUM_MIN_PROB = 1e-6

# Orbit-class defaults.
# "eccentricity" is the value used when the caller gives none (or the class ignores it),
# "honours" lists the descriptor fields the class takes from the caller; the rest are 0.
ORBIT_CLASS_DEFAULTS = {
    "LEO": {
        "eccentricity": 0.01,
        "honours": ("eccentricity", "argument_of_periapsis_deg"),
    },
    "Polar": {
        "eccentricity": 0.0,
        "honours": ("raan_deg", "mean_anomaly_deg"),
    },
    "GEO": {
        "eccentricity": 0.0,
        "honours": (),
    },
    "MEO": {
        "eccentricity": 0.0,
        "honours": (),
    },
}
ORBIT_CLASSES = tuple(ORBIT_CLASS_DEFAULTS)

# Orbit sanity band (km) for is_stable_orbit
STABLE_ALT_MIN = 160.0
STABLE_ALT_MAX = 2000.0

# Simulation
SIM_TIME_STEP = 60.0           # simulated seconds per tick
SIM_TICK_PERIOD = 1.0          # wall-clock seconds between ticks

# Suggested actions (operator advisories)
HIGH_RISK_WINDOW_H = 24.0
MEDIUM_RISK_WINDOW_H = 72.0

SUGGESTED_ACTIONS = {
    "high": {
        "type": "evasive_maneuver",
        "priority": "critical",
        "fuel_cost": 2.5,
        "time_to_execute_min": 15,
        "success_probability": 0.85,
        "delta_v_m_s": 5.0,
        "burn_duration_s": 300.0,
    },
    "medium": {
        "type": "orbit_adjustment",
        "priority": "high",
        "fuel_cost": 1.2,
        "time_to_execute_min": 30,
        "success_probability": 0.92,
        "delta_v_m_s": 2.5,
        "burn_duration_s": 180.0,
    },
    "low": {
        "type": "attitude_change",
        "priority": "medium",
        "fuel_cost": 0.1,
        "time_to_execute_min": 5,
        "success_probability": 0.98,
        "delta_v_m_s": 0.5,
        "burn_duration_s": 60.0,
    },
}

# Automatic maneuvers: (delta-v m/s, burn s) per risk level
AUTO_MANEUVER_TABLE = {
    "high": (2.0, 60.0),
    "medium": (1.0, 30.0),
}
AUTO_MANEUVER_MIN_LEAD_H = 1.0
AUTO_MANEUVER_FUEL_PER_MS = 0.1   # kg per m/s
AUTO_MANEUVER_SUCCESS = 0.9
AUTO_MANEUVER_EXEC_MIN = 5

# Threat assessment
THREAT_SEVERITY = {"high": 9, "medium": 6, "low": 3}
PRIORITY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}
RISK_ORDER = {"high": 3, "medium": 2, "low": 1}

# Pair screening
MAX_SHORTLIST = 10


def clamp_horizon(val: Optional[float]) -> float:
    out = float(COLLISION_HORIZON if val is None else val)
    if not math.isfinite(out):
        raise ValueError(f"horizon must be finite, got {out}")
    return max(float(HORIZON_MIN), min(float(HORIZON_MAX), out))


def validate_settings() -> None:
    if MU_EARTH <= 0:
        raise ValueError("MU_EARTH must be > 0")
    if EARTH_RADIUS <= 0:
        raise ValueError("EARTH_RADIUS must be > 0")
    if KEPLER_TOLERANCE <= 0:
        raise ValueError("KEPLER_TOLERANCE must be > 0")
    if KEPLER_MAX_ITER <= 0:
        raise ValueError("KEPLER_MAX_ITER must be > 0")
    if COLLISION_SAMPLE_STEP <= 0:
        raise ValueError("COLLISION_SAMPLE_STEP must be > 0")
    if COLLISION_HORIZON <= 0:
        raise ValueError("COLLISION_HORIZON must be > 0")
    if HORIZON_MIN <= 0:
        raise ValueError("HORIZON_MIN must be > 0")
    if HORIZON_MAX < HORIZON_MIN:
        raise ValueError("HORIZON_MAX must be >= HORIZON_MIN")

    bounds = [b for b, _, _ in RISK_BUCKETS]
    if bounds != sorted(bounds):
        raise ValueError("RISK_BUCKETS must be sorted by distance bound")
    if any(p <= 0 for _, _, p in RISK_BUCKETS) or LOW_RISK_PROBABILITY <= 0:
        raise ValueError("risk probabilities must be > 0")

    for cls, policy in ORBIT_CLASS_DEFAULTS.items():
        e = float(policy.get("eccentricity", 0.0))
        if not 0.0 <= e < 1.0:
            raise ValueError(f"ORBIT_CLASS_DEFAULTS[{cls!r}] eccentricity must be in [0, 1)")

    if STABLE_ALT_MAX <= STABLE_ALT_MIN:
        raise ValueError("STABLE_ALT_MAX must be > STABLE_ALT_MIN")
    if SIM_TIME_STEP <= 0:
        raise ValueError("SIM_TIME_STEP must be > 0")
    if SIM_TICK_PERIOD < 0:
        raise ValueError("SIM_TICK_PERIOD must be >= 0")


if VALIDATE_ON_IMPORT:
    validate_settings()
