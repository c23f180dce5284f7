# satsys/physics/elements.py
from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from typing import Dict

from satsys.config import settings
from satsys.config.settings import EARTH_RADIUS, MU_EARTH, STABLE_ALT_MIN, STABLE_ALT_MAX
from satsys.models.satellite import SatelliteDescriptor
from satsys.physics.kepler import mean_motion, orbital_period


@dataclass(frozen=True)
class OrbitalElements:
    semi_major_axis: float        # km
    eccentricity: float
    inclination: float            # rad
    raan: float                   # rad
    argument_of_periapsis: float  # rad
    mean_anomaly: float           # rad, at epoch
    mean_motion: float            # rad/s
    orbital_period: float         # s

    def __post_init__(self):
        if not 0.0 <= self.eccentricity < 1.0:
            raise ValueError(f"eccentricity must be in [0, 1), got {self.eccentricity}")
        # positive form so NaN fails
        if not self.semi_major_axis > EARTH_RADIUS:
            raise ValueError(
                f"semi-major axis must exceed Earth radius ({EARTH_RADIUS} km), got {self.semi_major_axis}"
            )
        if not self.mean_motion > 0.0:
            raise ValueError("mean motion must be > 0")
        angles = (self.inclination, self.raan, self.argument_of_periapsis, self.mean_anomaly)
        if not all(math.isfinite(x) for x in angles):
            raise ValueError(f"orbital angles must be finite, got {angles}")

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def _honoured(descriptor: SatelliteDescriptor, policy, field_name: str) -> float:
    if field_name not in policy.get("honours", ()):
        return 0.0
    val = getattr(descriptor, field_name)
    return 0.0 if val is None else float(val)


def elements_from_descriptor(descriptor: SatelliteDescriptor) -> OrbitalElements:
    """
    Derive Keplerian elements from an element descriptor.

    a = altitude + Earth radius, n from Kepler's third law. Which optional fields
    are taken from the caller depends on the orbit class (see ORBIT_CLASS_DEFAULTS);
    everything else defaults to 0 and eccentricity to the class default.
    """
    table = getattr(settings, "ORBIT_CLASS_DEFAULTS", {})
    policy = table.get(descriptor.orbit_class)
    if policy is None:
        raise ValueError(f"No default policy for orbit class {descriptor.orbit_class!r}")

    a = float(descriptor.altitude_km) + EARTH_RADIUS
    if not a > EARTH_RADIUS:
        raise ValueError(f"altitude must be > 0 km, got {descriptor.altitude_km}")

    if "eccentricity" in policy.get("honours", ()) and descriptor.eccentricity is not None:
        e = float(descriptor.eccentricity)
    else:
        e = float(policy.get("eccentricity", 0.0))

    return OrbitalElements(
        semi_major_axis=a,
        eccentricity=e,
        inclination=math.radians(float(descriptor.inclination_deg or 0.0)),
        raan=math.radians(_honoured(descriptor, policy, "raan_deg")),
        argument_of_periapsis=math.radians(_honoured(descriptor, policy, "argument_of_periapsis_deg")),
        mean_anomaly=math.radians(_honoured(descriptor, policy, "mean_anomaly_deg")),
        mean_motion=mean_motion(a),
        orbital_period=orbital_period(a),
    )


def orbital_period_for_altitude(altitude_km: float) -> float:
    return orbital_period(float(altitude_km) + EARTH_RADIUS)


def circular_velocity_for_altitude(altitude_km: float) -> float:
    return math.sqrt(MU_EARTH / (float(altitude_km) + EARTH_RADIUS))


def is_stable_orbit(altitude_km: float, eccentricity: float = 0.0) -> bool:
    return STABLE_ALT_MIN <= altitude_km <= STABLE_ALT_MAX and 0.0 <= eccentricity < 1.0
