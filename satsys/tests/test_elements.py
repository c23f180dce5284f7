import math

import pytest

from satsys.models.satellite import SatelliteDescriptor
from satsys.physics.elements import (
    OrbitalElements,
    circular_velocity_for_altitude,
    elements_from_descriptor,
    is_stable_orbit,
    orbital_period_for_altitude,
)


def test_iss_like_elements(leo_descriptor):
    el = elements_from_descriptor(leo_descriptor)
    assert el.semi_major_axis == pytest.approx(6771.0)
    assert el.eccentricity == pytest.approx(0.01)
    assert el.inclination == pytest.approx(math.radians(51.6))
    assert el.orbital_period == pytest.approx(5553.0, rel=0.01)
    assert el.mean_motion == pytest.approx(2 * math.pi / el.orbital_period)


def test_leo_defaults_eccentricity_and_ignores_node():
    d = SatelliteDescriptor(
        id="x", name="x", orbit_class="LEO", altitude_km=500.0,
        raan_deg=45.0, mean_anomaly_deg=90.0, argument_of_periapsis_deg=30.0,
    )
    el = elements_from_descriptor(d)
    assert el.eccentricity == pytest.approx(0.01)
    assert el.raan == 0.0
    assert el.mean_anomaly == 0.0
    assert el.argument_of_periapsis == pytest.approx(math.radians(30.0))


def test_leo_explicit_zero_eccentricity_is_kept():
    d = SatelliteDescriptor(id="x", name="x", orbit_class="LEO", altitude_km=500.0, eccentricity=0.0)
    assert elements_from_descriptor(d).eccentricity == 0.0


def test_polar_uses_node_and_mean_anomaly():
    d = SatelliteDescriptor(
        id="p", name="p", orbit_class="Polar", altitude_km=700.0, inclination_deg=98.0,
        raan_deg=90.0, mean_anomaly_deg=180.0, eccentricity=0.3, argument_of_periapsis_deg=10.0,
    )
    el = elements_from_descriptor(d)
    assert el.raan == pytest.approx(math.pi / 2)
    assert el.mean_anomaly == pytest.approx(math.pi)
    assert el.eccentricity == 0.0
    assert el.argument_of_periapsis == 0.0


@pytest.mark.parametrize("orbit_class, altitude", [("GEO", 35786.0), ("MEO", 20200.0)])
def test_high_orbits_are_circular(orbit_class, altitude):
    d = SatelliteDescriptor(
        id="h", name="h", orbit_class=orbit_class, altitude_km=altitude, eccentricity=0.2, raan_deg=10.0,
    )
    el = elements_from_descriptor(d)
    assert el.eccentricity == 0.0
    assert el.raan == 0.0


def test_geo_period_is_one_sidereal_day():
    assert orbital_period_for_altitude(35786.0 + 6378.137 - 6371.0) == pytest.approx(86164.0, rel=1e-3)


@pytest.mark.parametrize("altitude", [0.0, -100.0])
def test_non_positive_altitude_rejected(altitude):
    d = SatelliteDescriptor(id="x", name="x", orbit_class="GEO", altitude_km=altitude)
    with pytest.raises(ValueError):
        elements_from_descriptor(d)


def test_eccentricity_out_of_range_rejected():
    d = SatelliteDescriptor(id="x", name="x", orbit_class="LEO", altitude_km=500.0, eccentricity=1.0)
    with pytest.raises(ValueError):
        elements_from_descriptor(d)


def test_elements_invariants_checked_directly():
    with pytest.raises(ValueError):
        OrbitalElements(7000.0, 0.1, 0.0, 0.0, 0.0, 0.0, mean_motion=0.0, orbital_period=1.0)
    with pytest.raises(ValueError):
        OrbitalElements(6000.0, 0.1, 0.0, 0.0, 0.0, 0.0, mean_motion=1e-3, orbital_period=1.0)


def test_unknown_orbit_class_rejected():
    with pytest.raises(ValueError):
        SatelliteDescriptor(id="x", name="x", orbit_class="HEO", altitude_km=500.0)


def test_circular_velocity_and_stability_band():
    assert circular_velocity_for_altitude(400.0) == pytest.approx(7.6726, rel=1e-3)
    assert is_stable_orbit(400.0)
    assert is_stable_orbit(160.0) and is_stable_orbit(2000.0)
    assert not is_stable_orbit(120.0)
    assert not is_stable_orbit(35786.0)
    assert not is_stable_orbit(400.0, eccentricity=1.0)


@pytest.mark.parametrize("field_name", ["altitude_km", "inclination_deg", "argument_of_periapsis_deg", "eccentricity"])
def test_nan_fields_rejected(field_name):
    kwargs = dict(id="x", name="x", orbit_class="LEO", altitude_km=500.0)
    kwargs[field_name] = float("nan")
    d = SatelliteDescriptor(**kwargs)
    with pytest.raises(ValueError):
        elements_from_descriptor(d)


def test_nan_polar_angles_rejected():
    d = SatelliteDescriptor(
        id="p", name="p", orbit_class="Polar", altitude_km=700.0, raan_deg=float("nan"),
    )
    with pytest.raises(ValueError):
        elements_from_descriptor(d)


def test_nan_semi_major_axis_rejected_directly():
    with pytest.raises(ValueError):
        OrbitalElements(float("nan"), 0.0, 0.0, 0.0, 0.0, 0.0, mean_motion=1e-3, orbital_period=1.0)
    with pytest.raises(ValueError):
        OrbitalElements(7000.0, 0.0, 0.0, 0.0, 0.0, 0.0, mean_motion=float("nan"), orbital_period=1.0)
