from datetime import datetime, timedelta, timezone

import pytest

from satsys.engine.advisories import (
    assess_threats,
    calculate_threat_level,
    conjunction_from_estimate,
    conjunctions_from_pair,
    generate_automatic_maneuver,
    generate_suggested_action,
    plan_automatic_maneuvers,
)
from satsys.engine.collision import CollisionEstimate
from satsys.models.conjunction import ConjunctionEvent
from satsys.simulation.registry import SatelliteRegistry

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _conj(risk, hours, sat="S1", name="DEB-1", miss=0.5):
    return ConjunctionEvent(
        id=f"{sat}-{name}-{risk}-{hours}",
        satellite_id=sat,
        object_name=name,
        tca=NOW + timedelta(hours=hours),
        miss_distance_km=miss,
        relative_velocity_km_s=10.0,
        probability=1e-3,
        risk=risk,
    )


@pytest.mark.parametrize("miss, p, level", [
    (0.5, 1e-4, "high"),
    (0.5, 1e-5, "medium"),
    (3.0, 1e-4, "medium"),
    (3.0, 1e-6, "low"),
    (10.0, 0.5, "low"),
])
def test_threat_level(miss, p, level):
    assert calculate_threat_level(miss, p) == level


def test_high_risk_soon_gets_evasive_maneuver():
    action = generate_suggested_action(_conj("high", 10.0), NOW)
    assert action.type == "evasive_maneuver"
    assert action.priority == "critical"
    assert action.maneuver.delta_v_m_s == 5.0
    assert action.maneuver.burn_duration_s == 300.0
    assert action.description == "Execute emergency evasive maneuver - 10.0h until closest approach"


def test_medium_risk_within_three_days_gets_orbit_adjustment():
    action = generate_suggested_action(_conj("medium", 48.0), NOW)
    assert action.type == "orbit_adjustment"
    assert action.priority == "high"
    assert action.maneuver.delta_v_m_s == 2.5


def test_distant_high_risk_falls_back_to_monitoring():
    action = generate_suggested_action(_conj("high", 30.0), NOW)
    assert action.type == "attitude_change"
    assert action.priority == "medium"
    assert action.description.startswith("Monitor situation - 30.0h")


def test_automatic_maneuver_rules():
    high = generate_automatic_maneuver(_conj("high", 5.0), NOW)
    assert high.type == "evasive_maneuver"
    assert high.priority == "critical"
    assert high.maneuver.delta_v_m_s == 2.0 and high.maneuver.burn_duration_s == 60.0
    assert high.estimated_fuel_cost == pytest.approx(0.2)
    assert "DEB-1" in high.description

    medium = generate_automatic_maneuver(_conj("medium", 5.0), NOW)
    assert medium.type == "orbit_adjustment"
    assert medium.priority == "high"
    assert medium.maneuver.delta_v_m_s == 1.0

    assert generate_automatic_maneuver(_conj("low", 5.0), NOW) is None
    assert generate_automatic_maneuver(_conj("high", 0.5), NOW) is None


def test_plan_orders_by_risk_then_tca():
    conjs = [
        _conj("medium", 2.0, name="M-early"),
        _conj("high", 6.0, name="H-late"),
        _conj("high", 3.0, name="H-early"),
        _conj("low", 2.0, name="L"),
        _conj("high", 0.2, name="H-too-close"),
    ]
    plan = plan_automatic_maneuvers(conjs, NOW)
    assert [a.description.rsplit(" ", 1)[-1] for a in plan] == ["H-early", "H-late", "M-early"]


def test_assess_threats():
    conjs = [
        _conj("medium", 20.0, sat="S1", name="A"),
        _conj("high", 10.0, sat="S1", name="B"),
        _conj("low", 10.0, sat="S2", name="C"),
    ]
    out = assess_threats(["S1", "S2", "S3"], conjs, NOW)

    assert set(out) == {"S1", "S2"}
    s1 = out["S1"]
    assert s1.threat_level == "critical"
    assert sorted(t.severity for t in s1.threats) == [6, 9]
    assert [a.priority for a in s1.recommended_actions] == ["critical", "high"]
    assert s1.threats[0].time_to_impact_min == pytest.approx(20 * 60.0)

    assert out["S2"].threat_level == "medium"
    assert out["S2"].as_dict()["lastAssessment"] == NOW.isoformat()


def test_conjunction_from_estimate():
    est = CollisionEstimate("high", 0.7, 1800.0, 1e-3)
    c = conjunction_from_estimate("S1", "Other", est, NOW, relative_velocity_km_s=0.01)
    assert c.tca == NOW + timedelta(minutes=30)
    assert c.risk == "high"
    assert c.miss_distance_km == 0.7
    assert c.as_dict()["riskLevel"] == "high"


def test_conjunction_risk_follows_threat_level():
    # a table label that disagrees with miss/probability is re-derived
    est = CollisionEstimate("low", 0.5, 600.0, 1e-3)
    assert conjunction_from_estimate("S1", "Other", est, NOW).risk == "high"
    est = CollisionEstimate("high", 3.0, 600.0, 1e-4)
    assert conjunction_from_estimate("S1", "Other", est, NOW).risk == "medium"


def test_pair_record_yields_both_sides():
    rec = {
        "satellite_id": "A", "name": "Alpha", "other_id": "B", "other_name": "Bravo",
        "risk": "high", "minDistanceKm": 0.4, "timeOffsetSeconds": 7200.0, "probability": 1e-3,
        "relative_velocity_km_s": 0.02,
    }
    first, mirror = conjunctions_from_pair(rec, NOW)
    assert (first.satellite_id, first.object_name) == ("A", "Bravo")
    assert (mirror.satellite_id, mirror.object_name) == ("B", "Alpha")
    assert first.tca == mirror.tca == NOW + timedelta(hours=2)
    assert first.id != mirror.id


def test_both_satellites_of_a_risky_pair_are_assessed(polar_pair):
    reg = SatelliteRegistry()
    for d in polar_pair:
        reg.add(d)
    pairs = reg.predict_collisions(horizon_s=3600.0)
    conjs = [c for rec in pairs for c in conjunctions_from_pair(rec, NOW)]

    out = assess_threats(reg.ids(), conjs, NOW)

    assert set(out) == {"POL-A", "POL-B"}
    assert all(a.threat_level == "critical" for a in out.values())
    assert out["POL-B"].threats[0].description.startswith("Polar A")
