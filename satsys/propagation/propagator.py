# satsys/propagation/propagator.py
"""
OrbitalPropagator: one satellite's kinematic state advanced in simulated time.

Element descriptors are propagated with a two-body Kepler solve; TLE descriptors
are delegated to SGP4 at (epoch + elapsed time). Instances hold no shared state
and are not thread-safe.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import numpy as np

from satsys.config import settings
from satsys.engine.collision import CollisionEstimate, estimate_collision_risk
from satsys.models.satellite import (
    Descriptor,
    ManeuverDescriptor,
    SatelliteDescriptor,
    TleDescriptor,
    descriptor_from_dict,
)
from satsys.physics.elements import OrbitalElements, elements_from_descriptor
from satsys.physics.geometry import eci_to_geodetic, ground_track
from satsys.physics.kepler import approximate_velocity, position_from_mean_anomaly
from satsys.physics.state import State
from satsys.propagation.sgp4_propagator import (
    as_utc,
    propagate_at_offset,
    satrec_from_tle,
)

log = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


class OrbitalPropagator:
    def __init__(self, descriptor: Union[Descriptor, Mapping[str, Any]], epoch: Optional[datetime] = None):
        if isinstance(descriptor, Mapping):
            descriptor = descriptor_from_dict(descriptor)
        self.descriptor: Descriptor = descriptor
        # TLE path only: wall-clock reference for elapsed_time = 0
        self.epoch: Optional[datetime] = as_utc(epoch) if epoch is not None else None
        self.elapsed_time = 0.0
        self.state = State()
        self.elements: Optional[OrbitalElements] = None
        self.satrec = None
        self.altitude_km: Optional[float] = getattr(descriptor, "altitude_km", None)
        self._initialise()

    # ------------------------------------------------------------------
    # properties
    # ------------------------------------------------------------------
    @property
    def satellite_id(self) -> str:
        return self.descriptor.id

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def is_tle(self) -> bool:
        return isinstance(self.descriptor, TleDescriptor)

    @property
    def position(self) -> np.ndarray:
        return self.state.r.copy()

    @property
    def velocity(self) -> np.ndarray:
        return self.state.v.copy()

    # ------------------------------------------------------------------
    # initialisation / propagation
    # ------------------------------------------------------------------
    def _initialise(self) -> None:
        if self.is_tle:
            self.elements = None
            self.satrec = satrec_from_tle(self.descriptor.line1, self.descriptor.line2)
            if self.epoch is None:
                self.epoch = datetime.now(timezone.utc)
        else:
            self.satrec = None
            self.elements = elements_from_descriptor(self.descriptor)
        self._update_position()

    def _update_position(self) -> None:
        if self.is_tle:
            self._update_from_sgp4()
            return

        el = self.elements
        M = (el.mean_anomaly + el.mean_motion * self.elapsed_time) % TWO_PI
        pos, _ = position_from_mean_anomaly(
            el.semi_major_axis,
            el.eccentricity,
            el.inclination,
            el.raan,
            el.argument_of_periapsis,
            M,
        )
        self.state.r = pos

    def _update_from_sgp4(self) -> None:
        st = propagate_at_offset(self.satrec, self.epoch, self.elapsed_time)
        if st is None:
            log.debug("%s: no valid SGP4 state at t=%.1fs, keeping previous position", self.satellite_id, self.elapsed_time)
            return
        t = self.current_time()
        try:
            _, _, height = eci_to_geodetic(st.r_km, t, st.v_km_s)
        except ValueError as e:
            log.debug("%s: geodetic conversion failed (%s), keeping previous position", self.satellite_id, e)
            return
        self.state.r = st.r_km
        self.state.v = st.v_km_s
        self.altitude_km = float(height)

    def current_time(self) -> Optional[datetime]:
        """Wall-clock time of the current state (TLE path), else None."""
        if self.epoch is None:
            return None
        return self.epoch + timedelta(seconds=self.elapsed_time)

    def advance(self, dt: float) -> None:
        self.elapsed_time += float(dt)
        self._update_position()

    def recompute_velocity(self) -> np.ndarray:
        """
        Element path: vis-viva speed with the direction taken perpendicular to the
        radius in the x-y plane (approximate, see physics.kepler.approximate_velocity).
        TLE path: the SGP4 velocity is already current and is returned unchanged.
        """
        if self.elements is not None:
            self.state.v = approximate_velocity(self.state.r, self.elements.semi_major_axis)
        return self.state.v.copy()

    # ------------------------------------------------------------------
    # caller operations
    # ------------------------------------------------------------------
    def current_state(self) -> Dict[str, Any]:
        out = self.state.as_dict()
        out.update({
            "elapsed_time_s": float(self.elapsed_time),
            "elements": self.elements.as_dict() if self.elements is not None else None,
        })
        return out

    def ground_track(self) -> Tuple[float, float]:
        return ground_track(self.state.r, self.elapsed_time)

    def _replacement_descriptor(self, repl: Mapping[str, Any]) -> Descriptor:
        if isinstance(self.descriptor, SatelliteDescriptor):
            return self.descriptor.merged(**repl)
        data = {"id": self.descriptor.id, "name": self.descriptor.name}
        data.update(repl)
        return descriptor_from_dict(data)

    def execute_maneuver(self, maneuver: Union[ManeuverDescriptor, Mapping[str, Any], None]) -> bool:
        """
        Scale the velocity vector so its magnitude grows by delta-v (m/s -> km/s).

        Returns False, with no state change, unless both delta-v and burn duration
        are given and non-zero. Replacement elements, if present, are merged into
        the descriptor and the elements re-derived at the current elapsed time.
        """
        if maneuver is None:
            return False
        if isinstance(maneuver, Mapping):
            maneuver = ManeuverDescriptor.from_dict(maneuver)
        if not maneuver.is_executable:
            log.debug("%s: maneuver rejected (delta-v and burn duration required)", self.satellite_id)
            return False

        new_descriptor = None
        if maneuver.replacement_elements:
            try:
                new_descriptor = self._replacement_descriptor(maneuver.replacement_elements)
                if isinstance(new_descriptor, SatelliteDescriptor):
                    elements_from_descriptor(new_descriptor)
            except (TypeError, ValueError) as e:
                log.warning("%s: maneuver rejected, invalid replacement elements (%s)", self.satellite_id, e)
                return False

        old_mag = self.state.speed
        if old_mag == 0.0:
            self.recompute_velocity()
            old_mag = self.state.speed
        if old_mag == 0.0:
            log.warning("%s: maneuver rejected, velocity is undefined", self.satellite_id)
            return False

        dv = float(maneuver.delta_v_m_s)
        burn = float(maneuver.burn_duration_s)
        # scalar nudge: the burn duration cancels, no integration over the burn
        new_mag = old_mag + (dv * burn / burn) / 1000.0
        self.state.v = self.state.v * (new_mag / old_mag)

        if isinstance(self.descriptor, SatelliteDescriptor):
            self.descriptor = self.descriptor.merged(velocity_km_s=new_mag)

        if new_descriptor is not None:
            if isinstance(new_descriptor, SatelliteDescriptor):
                new_descriptor = new_descriptor.merged(velocity_km_s=new_mag)
            self.descriptor = new_descriptor
            self._initialise()

        log.info("%s: maneuver executed, |v| %.4f -> %.4f km/s", self.satellite_id, old_mag, new_mag)
        return True

    def reset(self) -> None:
        self.elapsed_time = 0.0
        self.state = State()
        self._initialise()

    def clone(self) -> "OrbitalPropagator":
        twin = OrbitalPropagator(self.descriptor, epoch=self.epoch)
        twin.elapsed_time = self.elapsed_time
        twin.state = self.state.copy()
        twin.altitude_km = self.altitude_km
        return twin

    def estimate_collision_risk(self, other: "OrbitalPropagator", horizon_s: Optional[float] = None) -> CollisionEstimate:
        """Sample separation against other; advances BOTH propagators by the horizon."""
        if horizon_s is None:
            horizon_s = getattr(settings, "COLLISION_HORIZON", 3600.0)
        return estimate_collision_risk(self, other, horizon_s=horizon_s)

    def __repr__(self):
        kind = "tle" if self.is_tle else self.descriptor.orbit_class
        return f"OrbitalPropagator({self.satellite_id!r}, {kind}, t={self.elapsed_time:.1f}s)"
