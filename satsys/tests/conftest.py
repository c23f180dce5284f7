import math
from datetime import datetime, timezone

import pytest

from satsys.models.satellite import SatelliteDescriptor, TleDescriptor

ISS_LINE1 = "1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991"
ISS_LINE2 = "2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482"

# 2019-12-09T16:38:29Z, the element set epoch of the ISS TLE above
ISS_EPOCH = datetime(2019, 12, 9, 16, 38, 29, tzinfo=timezone.utc)


@pytest.fixture
def iss_tle():
    return TleDescriptor(id="25544", name="ISS (ZARYA)", line1=ISS_LINE1, line2=ISS_LINE2)


@pytest.fixture
def iss_epoch():
    return ISS_EPOCH


@pytest.fixture
def leo_descriptor():
    return SatelliteDescriptor(
        id="LEO-1",
        name="Leo One",
        orbit_class="LEO",
        altitude_km=400.0,
        inclination_deg=51.6,
        eccentricity=0.01,
        argument_of_periapsis_deg=0.0,
    )


@pytest.fixture
def polar_pair():
    """Two circular polar satellites on the same orbit, 0.7 km apart along track."""
    offset_deg = math.degrees(0.7 / 6771.0)
    a = SatelliteDescriptor(
        id="POL-A", name="Polar A", orbit_class="Polar",
        altitude_km=400.0, inclination_deg=97.0, raan_deg=30.0, mean_anomaly_deg=10.0,
    )
    b = SatelliteDescriptor(
        id="POL-B", name="Polar B", orbit_class="Polar",
        altitude_km=400.0, inclination_deg=97.0, raan_deg=30.0, mean_anomaly_deg=10.0 + offset_deg,
    )
    return a, b


@pytest.fixture
def far_polar():
    return SatelliteDescriptor(
        id="POL-FAR", name="Polar Far", orbit_class="Polar",
        altitude_km=800.0, inclination_deg=98.6, raan_deg=120.0, mean_anomaly_deg=200.0,
    )
