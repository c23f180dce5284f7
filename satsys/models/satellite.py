# satsys/models/satellite.py
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from satsys.config.settings import ORBIT_CLASSES


# camelCase keys accepted on the dict boundary -> dataclass field
_ELEMENT_KEYS = {
    "orbitType": "orbit_class",
    "orbitClass": "orbit_class",
    "altitude": "altitude_km",
    "inclination": "inclination_deg",
    "velocity": "velocity_km_s",
    "argumentOfPeriapsis": "argument_of_periapsis_deg",
    "rightAscension": "raan_deg",
    "raan": "raan_deg",
    "meanAnomaly": "mean_anomaly_deg",
    "noradId": "norad_id",
}


def _normalise_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in data.items():
        out[_ELEMENT_KEYS.get(k, k)] = v
    return out


@dataclass(frozen=True)
class SatelliteDescriptor:
    """
    Element-based satellite description (angles in degrees, altitude in km).
    """
    id: str
    name: str
    orbit_class: str
    altitude_km: float
    inclination_deg: float = 0.0
    velocity_km_s: float = 0.0
    eccentricity: Optional[float] = None
    argument_of_periapsis_deg: Optional[float] = None
    raan_deg: Optional[float] = None
    mean_anomaly_deg: Optional[float] = None
    norad_id: Optional[str] = None

    def __post_init__(self):
        if self.orbit_class not in ORBIT_CLASSES:
            raise ValueError(
                f"Unknown orbit class {self.orbit_class!r} (expected one of {', '.join(ORBIT_CLASSES)})"
            )

    def merged(self, **changes) -> "SatelliteDescriptor":
        """Return a copy with the given fields replaced (camelCase keys accepted)."""
        known = {f.name for f in fields(self)}
        clean = {k: v for k, v in _normalise_keys(changes).items() if k in known}
        return replace(self, **clean)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SatelliteDescriptor":
        d = _normalise_keys(data)
        if "id" not in d:
            raise ValueError("satellite descriptor needs an 'id'")
        if "altitude_km" not in d:
            raise ValueError("satellite descriptor needs an 'altitude'")
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in d.items() if k in known}
        kwargs.setdefault("name", str(d["id"]))
        kwargs.setdefault("orbit_class", "LEO")
        return cls(**kwargs)


@dataclass(frozen=True)
class TleDescriptor:
    id: str
    name: str
    line1: str
    line2: str

    def __post_init__(self):
        if not self.line1.startswith("1 "):
            raise ValueError("TLE line 1 must start with '1 '")
        if not self.line2.startswith("2 "):
            raise ValueError("TLE line 2 must start with '2 '")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TleDescriptor":
        tle = data.get("tle") or {}
        line1 = data.get("tleLine1") or data.get("line1") or tle.get("line1")
        line2 = data.get("tleLine2") or data.get("line2") or tle.get("line2")
        if not line1 or not line2:
            raise ValueError("TLE descriptor needs both lines")
        sid = str(data.get("id") or data.get("noradId") or line1[2:7].strip())
        return cls(id=sid, name=str(data.get("name", sid)), line1=line1.rstrip(), line2=line2.rstrip())


@dataclass(frozen=True)
class ManeuverDescriptor:
    """
    Velocity change request. Both delta_v_m_s and burn_duration_s must be non-zero
    for the maneuver to be accepted by a propagator.
    """
    delta_v_m_s: Optional[float] = None
    burn_duration_s: Optional[float] = None
    replacement_elements: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_executable(self) -> bool:
        return bool(self.delta_v_m_s) and bool(self.burn_duration_s)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ManeuverDescriptor":
        params = data.get("parameters", data)
        dv = params.get("delta_v_m_s", params.get("deltaV", params.get("deltaVMetersPerSec")))
        burn = params.get("burn_duration_s", params.get("burnDuration", params.get("burnDurationSec")))
        repl = (
            params.get("replacement_elements")
            or params.get("newOrbit")
            or params.get("replacementElements")
            or {}
        )
        return cls(
            delta_v_m_s=None if dv is None else float(dv),
            burn_duration_s=None if burn is None else float(burn),
            replacement_elements=dict(repl),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "deltaV": self.delta_v_m_s,
            "burnDuration": self.burn_duration_s,
            "newOrbit": dict(self.replacement_elements) or None,
        }


Descriptor = Union[SatelliteDescriptor, TleDescriptor]


def descriptor_from_dict(data: Mapping[str, Any]) -> Descriptor:
    """
    Build a TLE descriptor when TLE lines are present, otherwise an element descriptor.
    """
    tle = data.get("tle") or {}
    if (data.get("tleLine1") and data.get("tleLine2")) or (tle.get("line1") and tle.get("line2")):
        return TleDescriptor.from_dict(data)
    return SatelliteDescriptor.from_dict(data)
