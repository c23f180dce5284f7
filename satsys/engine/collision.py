# satsys/engine/collision.py
"""
Sampled closest-approach estimator for two propagators.

Both propagators are advanced in lock-step and are left advanced by the horizon
after the call. Sampling is discrete (COLLISION_SAMPLE_STEP) with no interpolation,
so the minimum carries a +/- one-step time error.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from satsys.config import settings
from satsys.config.settings import LOW_RISK_LABEL, LOW_RISK_PROBABILITY, clamp_horizon
from satsys.physics.geometry import distance

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollisionEstimate:
    risk: str
    min_distance_km: float
    time_offset_s: float
    probability: float

    @property
    def is_actionable(self) -> bool:
        return self.risk != LOW_RISK_LABEL

    def as_dict(self) -> Dict[str, object]:
        return {
            "risk": self.risk,
            "minDistanceKm": self.min_distance_km,
            "timeOffsetSeconds": self.time_offset_s,
            "probability": self.probability,
        }


def classify_risk(min_distance_km: float) -> Tuple[str, float]:
    buckets = getattr(settings, "RISK_BUCKETS", ())
    for bound, label, prob in buckets:
        if min_distance_km < bound:
            return label, prob
    return LOW_RISK_LABEL, LOW_RISK_PROBABILITY


def separation_history(a, b, horizon_s: float, step_s: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Advance a and b together by step_s until the horizon is covered.
    Returns (offsets in s, separations in km), one entry per step.
    """
    if step_s is None:
        step_s = float(getattr(settings, "COLLISION_SAMPLE_STEP", 60.0))
    if step_s <= 0:
        raise ValueError("step_s must be > 0")

    n = int(math.ceil(float(horizon_s) / step_s))
    times = np.empty(n, dtype=float)
    dists = np.empty(n, dtype=float)
    for k in range(n):
        a.advance(step_s)
        b.advance(step_s)
        times[k] = (k + 1) * step_s
        dists[k] = distance(a.position, b.position)
    return times, dists


def estimate_collision_risk(a, b, horizon_s: Optional[float] = None) -> CollisionEstimate:
    """
    Minimum sampled separation between a and b over the horizon and its risk bucket.
    MUTATES both propagators.
    """
    horizon = clamp_horizon(horizon_s)
    times, dists = separation_history(a, b, horizon)

    # argmin keeps the first of equal minima
    idx = int(np.argmin(dists))
    min_d = float(dists[idx])
    risk, prob = classify_risk(min_d)

    est = CollisionEstimate(
        risk=risk,
        min_distance_km=min_d,
        time_offset_s=float(times[idx]),
        probability=float(prob),
    )
    if est.is_actionable:
        log.info(
            "close approach %s/%s: %.3f km at +%.0fs (%s)",
            getattr(a, "satellite_id", "?"), getattr(b, "satellite_id", "?"),
            min_d, est.time_offset_s, risk,
        )
    return est
