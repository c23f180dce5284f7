# satsys/engine/advisories.py
"""
Operator advisories derived from conjunctions: threat levels, suggested actions,
automatic collision-avoidance maneuvers and per-satellite threat assessments.

Every function takes an optional `now` (aware UTC) so results are reproducible.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from satsys.config import settings
from satsys.engine.collision import CollisionEstimate
from satsys.models.conjunction import ConjunctionEvent, SuggestedAction, Threat, ThreatAssessment
from satsys.models.satellite import ManeuverDescriptor

log = logging.getLogger(__name__)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def hours_to_tca(conjunction: ConjunctionEvent, now: Optional[datetime] = None) -> float:
    return (conjunction.tca - _now(now)).total_seconds() / 3600.0


def calculate_threat_level(miss_distance_km: float, probability: float) -> str:
    if miss_distance_km < settings.THREAT_HIGH_MISS_KM and probability > settings.THREAT_HIGH_MIN_PROB:
        return "high"
    if miss_distance_km < settings.THREAT_MEDIUM_MISS_KM and probability > settings.THREAT_MEDIUM_MIN_PROB:
        return "medium"
    return "low"


def conjunction_from_estimate(
    satellite_id: str,
    object_name: str,
    estimate: CollisionEstimate,
    now: Optional[datetime] = None,
    relative_velocity_km_s: float = 0.0,
) -> ConjunctionEvent:
    """
    Place a sampled estimate on the wall clock (tca = now + time offset).
    The risk label comes from calculate_threat_level on miss distance and probability.
    """
    t0 = _now(now)
    return ConjunctionEvent(
        id=f"{satellite_id}:{object_name}:{int(t0.timestamp())}",
        satellite_id=satellite_id,
        object_name=object_name,
        tca=t0 + timedelta(seconds=estimate.time_offset_s),
        miss_distance_km=estimate.min_distance_km,
        relative_velocity_km_s=float(relative_velocity_km_s),
        probability=estimate.probability,
        risk=calculate_threat_level(estimate.min_distance_km, estimate.probability),
    )


def conjunctions_from_pair(record: Mapping[str, Any], now: Optional[datetime] = None) -> List[ConjunctionEvent]:
    """
    Both sides of a screened pair record: one event for satellite_id (object = other_name)
    and its mirror for other_id (object = name).
    """
    est = CollisionEstimate(
        risk=record["risk"],
        min_distance_km=record["minDistanceKm"],
        time_offset_s=record["timeOffsetSeconds"],
        probability=record["probability"],
    )
    rv = record.get("relative_velocity_km_s", 0.0)
    return [
        conjunction_from_estimate(record["satellite_id"], record["other_name"], est, now, relative_velocity_km_s=rv),
        conjunction_from_estimate(record["other_id"], record["name"], est, now, relative_velocity_km_s=rv),
    ]


def generate_suggested_action(conjunction: ConjunctionEvent, now: Optional[datetime] = None) -> SuggestedAction:
    hours = hours_to_tca(conjunction, now)

    if conjunction.risk == "high" and hours < settings.HIGH_RISK_WINDOW_H:
        bucket = "high"
        description = f"Execute emergency evasive maneuver - {hours:.1f}h until closest approach"
    elif conjunction.risk == "medium" and hours < settings.MEDIUM_RISK_WINDOW_H:
        bucket = "medium"
        description = f"Plan orbit adjustment maneuver - {hours:.1f}h until closest approach"
    else:
        bucket = "low"
        description = f"Monitor situation - {hours:.1f}h until closest approach"

    tpl = settings.SUGGESTED_ACTIONS[bucket]
    return SuggestedAction(
        id=f"action-{conjunction.id}",
        type=tpl["type"],
        description=description,
        priority=tpl["priority"],
        estimated_fuel_cost=float(tpl["fuel_cost"]),
        time_to_execute_min=int(tpl["time_to_execute_min"]),
        success_probability=float(tpl["success_probability"]),
        maneuver=ManeuverDescriptor(
            delta_v_m_s=float(tpl["delta_v_m_s"]),
            burn_duration_s=float(tpl["burn_duration_s"]),
        ),
    )


def generate_automatic_maneuver(conjunction: ConjunctionEvent, now: Optional[datetime] = None) -> Optional[SuggestedAction]:
    """
    Collision-avoidance burn for medium/high risk conjunctions.
    None for low risk or when TCA is closer than AUTO_MANEUVER_MIN_LEAD_H.
    """
    if hours_to_tca(conjunction, now) < settings.AUTO_MANEUVER_MIN_LEAD_H:
        return None

    entry = settings.AUTO_MANEUVER_TABLE.get(conjunction.risk)
    if entry is None:
        return None
    dv, burn = entry
    kind = "evasive_maneuver" if conjunction.risk == "high" else "orbit_adjustment"

    return SuggestedAction(
        id=f"auto-{conjunction.id}",
        type=kind,
        description=f"Automatic {kind.replace('_', ' ', 1)} to avoid collision with {conjunction.object_name}",
        priority="critical" if conjunction.risk == "high" else "high",
        estimated_fuel_cost=dv * settings.AUTO_MANEUVER_FUEL_PER_MS,
        time_to_execute_min=settings.AUTO_MANEUVER_EXEC_MIN,
        success_probability=settings.AUTO_MANEUVER_SUCCESS,
        maneuver=ManeuverDescriptor(delta_v_m_s=dv, burn_duration_s=burn),
    )


def plan_automatic_maneuvers(conjunctions: Iterable[ConjunctionEvent], now: Optional[datetime] = None) -> List[SuggestedAction]:
    """Highest risk first, then earliest TCA; conjunctions without a maneuver are skipped."""
    order = settings.RISK_ORDER
    ranked = sorted(conjunctions, key=lambda c: (-order.get(c.risk, 0), c.tca))
    out = []
    for c in ranked:
        action = generate_automatic_maneuver(c, now)
        if action is not None:
            out.append(action)
    return out


def assess_threats(
    satellite_ids: Iterable[str],
    conjunctions: Iterable[ConjunctionEvent],
    now: Optional[datetime] = None,
) -> Dict[str, ThreatAssessment]:
    """
    One ThreatAssessment per satellite that has at least one conjunction.
    """
    t0 = _now(now)
    conjunctions = list(conjunctions)
    out: Dict[str, ThreatAssessment] = {}

    for sid in satellite_ids:
        mine = [c for c in conjunctions if c.satellite_id == sid]
        if not mine:
            continue

        threats = [
            Threat(
                type="collision",
                severity=settings.THREAT_SEVERITY.get(c.risk, 3),
                description=f"{c.object_name} - Miss distance: {c.miss_distance_km:.3f}km",
                time_to_impact_min=(c.tca - t0).total_seconds() / 60.0,
            )
            for c in mine
        ]

        risks = {c.risk for c in mine}
        if "high" in risks:
            level = "critical"
        elif "medium" in risks:
            level = "high"
        else:
            level = "medium"

        actions = [generate_suggested_action(c, t0) for c in mine]
        actions.sort(key=lambda a: settings.PRIORITY_ORDER.get(a.priority, 0), reverse=True)

        out[sid] = ThreatAssessment(
            satellite_id=sid,
            threat_level=level,
            assessed_at=t0,
            threats=threats,
            recommended_actions=actions,
        )
        log.debug("threat assessment %s: %s (%d threats)", sid, level, len(threats))

    return out
