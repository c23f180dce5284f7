# satsys/physics/geometry.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Tuple

import numpy as np
from skyfield.api import load, wgs84
from skyfield.positionlib import Geocentric
from skyfield.sgp4lib import TEME
from skyfield.units import Distance, Velocity

from satsys.config.settings import OMEGA_EARTH

ts = load.timescale()


def distance(p, q) -> float:
    """Euclidean distance between two 3D positions (km)."""
    return float(np.linalg.norm(np.asarray(p, dtype=float) - np.asarray(q, dtype=float)))


def relative_speed(v1, v2) -> float:
    return float(np.linalg.norm(np.asarray(v1, dtype=float) - np.asarray(v2, dtype=float)))


def ground_track(position, elapsed_s: float) -> Tuple[float, float]:
    """
    Sub-satellite latitude/longitude in degrees for an inertial position,
    with longitude drifted by Earth rotation over elapsed_s seconds.
    Longitude is not wrapped.
    """
    x, y, z = (float(c) for c in position)
    r = math.sqrt(x * x + y * y + z * z)
    if r == 0.0:
        raise ValueError("ground track undefined for zero position")
    lat = math.asin(z / r)
    lon = math.atan2(y, x) - float(elapsed_s) * OMEGA_EARTH
    return math.degrees(lat), math.degrees(lon)


def _sf_time(t_utc: datetime):
    if t_utc.tzinfo is None:
        t_utc = t_utc.replace(tzinfo=timezone.utc)
    return ts.from_datetime(t_utc)


def gmst(t_utc: datetime) -> float:
    """Greenwich Mean Sidereal Time in radians, wrapped to [0, 2*pi)."""
    return math.radians(_sf_time(t_utc).gmst * 15.0) % (2.0 * math.pi)


def eci_to_geodetic(position, t_utc: datetime, velocity=None) -> Tuple[float, float, float]:
    """
    TEME position in km at t_utc -> (latitude deg, longitude deg, height km) on WGS-84.

    Raises ValueError for a zero or non-finite position.
    """
    pos = np.asarray(position, dtype=float)
    if pos.shape != (3,) or not np.all(np.isfinite(pos)):
        raise ValueError("position must be a finite 3D vector")
    if not np.any(pos):
        raise ValueError("geodetic conversion undefined at the Earth's centre")
    vel = np.zeros(3) if velocity is None else np.asarray(velocity, dtype=float)

    t = _sf_time(t_utc)
    geoc = Geocentric.from_time_and_frame_vectors(t, TEME, Distance(km=pos), Velocity(km_per_s=vel))
    sp = wgs84.geographic_position_of(geoc)
    height = sp.elevation.km
    if not math.isfinite(height):
        raise ValueError("geodetic height is not finite")
    return sp.latitude.degrees, sp.longitude.degrees, float(height)
