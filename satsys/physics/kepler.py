# satsys/physics/kepler.py
"""
Two-body Kepler routines used by the element-based propagator.
All angles in radians, distances in km, time in seconds.
"""
from __future__ import annotations

import logging
import math
from typing import Tuple

import numpy as np

from satsys.config.settings import MU_EARTH, KEPLER_TOLERANCE, KEPLER_MAX_ITER

log = logging.getLogger(__name__)


def kepler_residual(E: float, e: float, M: float) -> float:
    return E - e * math.sin(E) - M


def solve_kepler(M: float, e: float, tol: float = KEPLER_TOLERANCE, max_iter: int = KEPLER_MAX_ITER) -> float:
    """
    Newton-Raphson solve of M = E - e*sin(E) for the eccentric anomaly E.

    Starts from E0 = M and stops once |f(E)| < tol or after max_iter updates.
    The iteration cap is hard: for e close to 1 the returned E may not satisfy
    the tolerance and is used as-is.
    """
    E = float(M)
    for _ in range(int(max_iter)):
        f = kepler_residual(E, e, M)
        if abs(f) < tol:
            return E
        E = E - f / (1.0 - e * math.cos(E))

    if abs(kepler_residual(E, e, M)) >= tol:
        log.debug("Kepler solve hit iteration cap (M=%.6f, e=%.4f)", M, e)
    return E


def true_anomaly(E: float, e: float) -> float:
    return 2.0 * math.atan2(
        math.sqrt(1.0 + e) * math.sin(E / 2.0),
        math.sqrt(1.0 - e) * math.cos(E / 2.0),
    )


def orbital_radius(a: float, e: float, E: float) -> float:
    return a * (1.0 - e * math.cos(E))


def perifocal_to_eci(x_orb: float, y_orb: float, raan: float, inc: float, argp: float) -> np.ndarray:
    """
    3-1-3 rotation (RAAN, inclination, argument of periapsis) of an in-plane
    position into the Earth-centred inertial frame.
    """
    cO, sO = math.cos(raan), math.sin(raan)
    cw, sw = math.cos(argp), math.sin(argp)
    ci, si = math.cos(inc), math.sin(inc)

    x = x_orb * (cO * cw - sO * sw * ci) - y_orb * (cO * sw + sO * cw * ci)
    y = x_orb * (sO * cw + cO * sw * ci) - y_orb * (sO * sw - cO * cw * ci)
    z = x_orb * sw * si + y_orb * cw * si
    return np.array([x, y, z], dtype=float)


def position_from_mean_anomaly(
    a: float, e: float, inc: float, raan: float, argp: float, M: float
) -> Tuple[np.ndarray, float]:
    """Return (ECI position km, radius km) for mean anomaly M."""
    E = solve_kepler(M, e)
    nu = true_anomaly(E, e)
    r = orbital_radius(a, e, E)
    pos = perifocal_to_eci(r * math.cos(nu), r * math.sin(nu), raan, inc, argp)
    return pos, r


def orbital_period(a: float) -> float:
    return 2.0 * math.pi * math.sqrt(a ** 3 / MU_EARTH)


def mean_motion(a: float) -> float:
    return 2.0 * math.pi / orbital_period(a)


def vis_viva_speed(r: float, a: float) -> float:
    return math.sqrt(MU_EARTH * (2.0 / r - 1.0 / a))


def approximate_velocity(position, a: float) -> np.ndarray:
    """
    Vis-viva speed along the direction perpendicular to the radius in the x-y plane.

    This is an approximation: the direction ignores inclination and flight-path angle,
    so the vector is not the true orbital velocity.
    """
    position = np.asarray(position, dtype=float)
    r = float(np.linalg.norm(position))
    if r == 0.0:
        return np.zeros(3)
    speed = vis_viva_speed(r, a)
    angle = math.atan2(position[1], position[0]) + math.pi / 2.0
    return np.array([speed * math.cos(angle), speed * math.sin(angle), 0.0], dtype=float)
