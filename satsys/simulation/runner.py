from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from satsys.config import settings
from satsys.simulation.registry import SatelliteRegistry

log = logging.getLogger(__name__)

TickCallback = Callable[[int, SatelliteRegistry], None]


def run_ticks(
    registry: SatelliteRegistry,
    ticks: int,
    time_step: Optional[float] = None,
    stop: Optional[threading.Event] = None,
    on_tick: Optional[TickCallback] = None,
) -> int:
    """
    Advance every registered propagator `ticks` times. Returns the number of
    ticks actually run (fewer if `stop` was set).
    """
    dt = float(getattr(settings, "SIM_TIME_STEP", 60.0) if time_step is None else time_step)
    done = 0
    for i in range(int(ticks)):
        if stop is not None and stop.is_set():
            break
        registry.tick(dt)
        done += 1
        if on_tick is not None:
            on_tick(i, registry)
    return done


class SimulationHandle:
    """
    Background tick loop over a registry. The worker thread is the only mutator
    of the registry while running; read snapshots from on_tick or after stop().
    """

    def __init__(
        self,
        registry: SatelliteRegistry,
        time_step: Optional[float] = None,
        period: Optional[float] = None,
        on_tick: Optional[TickCallback] = None,
    ):
        self.registry = registry
        self.time_step = float(getattr(settings, "SIM_TIME_STEP", 60.0) if time_step is None else time_step)
        self.period = float(getattr(settings, "SIM_TICK_PERIOD", 1.0) if period is None else period)
        self.on_tick = on_tick
        self.ticks = 0
        self.error: Optional[BaseException] = None
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._loop, name="satsys-sim", daemon=True)

    @property
    def stop_token(self) -> threading.Event:
        return self._stop

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> "SimulationHandle":
        log.info("Simulation started (step=%.1fs, period=%.2fs)", self.time_step, self.period)
        self._thread.start()
        return self

    def _loop(self) -> None:
        try:
            while not self._stop.is_set():
                self.registry.tick(self.time_step)
                if self.on_tick is not None:
                    self.on_tick(self.ticks, self.registry)
                self.ticks += 1
                # wait() doubles as the sleep and returns early on stop
                if self._stop.wait(self.period):
                    break
        except Exception as e:
            self.error = e
            log.exception("Simulation loop failed: %s", e)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread.is_alive() and threading.current_thread() is not self._thread:
            self._thread.join(timeout)
        log.info("Simulation stopped after %d ticks", self.ticks)


def start_simulation(
    registry: SatelliteRegistry,
    time_step: Optional[float] = None,
    period: Optional[float] = None,
    on_tick: Optional[TickCallback] = None,
) -> SimulationHandle:
    return SimulationHandle(registry, time_step=time_step, period=period, on_tick=on_tick).start()
