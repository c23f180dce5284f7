# satsys/simulation/registry.py
from __future__ import annotations

import logging
from datetime import datetime
from itertools import combinations
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from satsys.config import settings
from satsys.engine.risk_filter import shortlist
from satsys.models.conjunction import SuggestedAction
from satsys.models.satellite import Descriptor, ManeuverDescriptor, descriptor_from_dict
from satsys.physics.geometry import relative_speed
from satsys.propagation.propagator import OrbitalPropagator

log = logging.getLogger(__name__)

Hook = Callable[[OrbitalPropagator], None]


def _velocity_of(prop: OrbitalPropagator):
    # element-path velocity is derived on a copy; the live velocity stays as is
    return prop.clone().recompute_velocity()


class SatelliteRegistry:
    """
    Caller-owned arena of propagators indexed by satellite id.

    on_add hooks run after a propagator is created, on_remove hooks after it has
    been dropped from the registry. Not thread-safe: one tick dispatcher at a time.
    """

    def __init__(self, on_add: Optional[List[Hook]] = None, on_remove: Optional[List[Hook]] = None):
        self._items: Dict[str, OrbitalPropagator] = {}
        self.on_add: List[Hook] = list(on_add or [])
        self.on_remove: List[Hook] = list(on_remove or [])

    def __contains__(self, sat_id) -> bool:
        return sat_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[OrbitalPropagator]:
        return iter(list(self._items.values()))

    def ids(self) -> List[str]:
        return list(self._items)

    def get(self, sat_id: str) -> Optional[OrbitalPropagator]:
        return self._items.get(sat_id)

    def add(self, descriptor: Union[Descriptor, Mapping[str, Any]], epoch: Optional[datetime] = None) -> OrbitalPropagator:
        if isinstance(descriptor, Mapping):
            descriptor = descriptor_from_dict(descriptor)
        if descriptor.id in self._items:
            raise ValueError(f"satellite {descriptor.id!r} already registered")

        prop = OrbitalPropagator(descriptor, epoch=epoch)
        self._items[descriptor.id] = prop
        log.info("Registered %s (%s)", descriptor.id, "TLE" if prop.is_tle else descriptor.orbit_class)
        for hook in self.on_add:
            hook(prop)
        return prop

    def remove(self, sat_id: str) -> OrbitalPropagator:
        if sat_id not in self._items:
            raise KeyError(sat_id)
        prop = self._items.pop(sat_id)
        log.info("Removed %s", sat_id)
        for hook in self.on_remove:
            hook(prop)
        return prop

    def tick(self, dt: Optional[float] = None) -> None:
        step = float(getattr(settings, "SIM_TIME_STEP", 60.0) if dt is None else dt)
        for prop in self._items.values():
            prop.advance(step)

    def reset(self) -> None:
        for prop in self._items.values():
            prop.reset()

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {sid: prop.current_state() for sid, prop in self._items.items()}

    def execute_action(self, sat_id: str, action: Union[SuggestedAction, ManeuverDescriptor, Mapping[str, Any]]) -> bool:
        prop = self._items.get(sat_id)
        if prop is None:
            log.warning("execute_action: unknown satellite %s", sat_id)
            return False

        maneuver = action.maneuver if isinstance(action, SuggestedAction) else action
        ok = prop.execute_maneuver(maneuver)
        if ok:
            label = action.description if isinstance(action, SuggestedAction) else "maneuver"
            log.info("Action executed for %s: %s", prop.name, label)
        return ok

    def predict_collisions(self, horizon_s: Optional[float] = None, include_low: bool = False,
                           max_candidates: Optional[int] = None, dry_run: bool = False) -> List[Dict[str, Any]]:
        """
        Pairwise collision estimates, shortlisted and sorted by miss distance.

        Each estimate advances the live propagators of its pair by the horizon, so a
        satellite in k pairs ends up k horizons ahead. dry_run=True screens clones
        instead and leaves every live state untouched.
        """
        if horizon_s is None:
            horizon_s = getattr(settings, "COLLISION_HORIZON", 3600.0)
        if max_candidates is None:
            max_candidates = getattr(settings, "MAX_SHORTLIST", 10)

        records = []
        for a, b in combinations(self._items.values(), 2):
            ca, cb = (a.clone(), b.clone()) if dry_run else (a, b)
            est = ca.estimate_collision_risk(cb, horizon_s=horizon_s)
            rec = est.as_dict()
            rec.update({
                "satellite_id": a.satellite_id,
                "name": a.name,
                "other_id": b.satellite_id,
                "other_name": b.name,
                "relative_velocity_km_s": relative_speed(_velocity_of(ca), _velocity_of(cb)),
            })
            records.append(rec)

        return shortlist(records, max_candidates=max_candidates, include_low=include_low)
