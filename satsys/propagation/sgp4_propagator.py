from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from typing import Optional

import numpy as np
from sgp4.api import Satrec, jday

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sgp4State:
    r_km: np.ndarray    # position in km (TEME)
    v_km_s: np.ndarray  # velocity in km/s (TEME)


def as_utc(t: datetime) -> datetime:
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


def satrec_from_tle(line1: str, line2: str) -> Satrec:
    return Satrec.twoline2rv(line1, line2)


def tle_epoch(sat: Satrec) -> datetime:
    """Epoch of the element set as an aware UTC datetime."""
    jd = float(sat.jdsatepoch) + float(sat.jdsatepochF)
    # JD 2440587.5 == 1970-01-01T00:00:00Z
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(days=jd - 2440587.5)


def propagate_teme_km(sat: Satrec, t_utc: datetime) -> Optional[Sgp4State]:
    """
    Propagate using SGP4 to time t_utc (naive datetimes are treated as UTC).
    Returns None when SGP4 reports an error or a non-finite state.
    """
    t_utc = as_utc(t_utc)

    jd, fr = jday(
        t_utc.year, t_utc.month, t_utc.day,
        t_utc.hour, t_utc.minute,
        t_utc.second + t_utc.microsecond * 1e-6,
    )

    e, r_km, v_kms = sat.sgp4(jd, fr)
    if e != 0:
        log.debug("SGP4 error code=%s at %s", e, t_utc.isoformat())
        return None

    r = np.array(r_km, dtype=float)
    v = np.array(v_kms, dtype=float)
    if not (np.all(np.isfinite(r)) and np.all(np.isfinite(v))):
        log.debug("SGP4 returned a non-finite state at %s", t_utc.isoformat())
        return None
    return Sgp4State(r_km=r, v_km_s=v)


def propagate_at_offset(sat: Satrec, epoch: datetime, t_offset_s: float) -> Optional[Sgp4State]:
    """Propagate to epoch + t_offset_s seconds."""
    return propagate_teme_km(sat, as_utc(epoch) + timedelta(seconds=float(t_offset_s)))
