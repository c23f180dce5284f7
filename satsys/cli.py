# satsys/cli.py
import math

from satsys.config import settings
from satsys.config.settings import ORBIT_CLASSES, clamp_horizon
from satsys.models.satellite import SatelliteDescriptor, TleDescriptor

DEFAULT_ALTITUDE_KM = 400.0
DEFAULT_INCLINATION_DEG = 51.6


def _ask(prompt, default=""):
    try:
        user = input(prompt)
    except EOFError:
        return default
    return user.strip() or default


def get_float(prompt, default=None):
    """
    Safe float input with optional default. Non-interactive (EOF) returns default.
    """
    while True:
        try:
            user = input(prompt)
        except EOFError:
            return float(default) if default is not None else None
        if user.strip() == "" and default is not None:
            return float(default)
        try:
            return float(user)
        except (ValueError, TypeError):
            print("❌ Please enter a valid number.")


def get_int(prompt, default=None, min_val=None, max_val=None):
    """
    Safe integer input with limits. Non-interactive (EOF) returns default.
    """
    while True:
        try:
            user = input(prompt)
        except EOFError:
            return int(default) if default is not None else None
        if user.strip() == "" and default is not None:
            return int(default)
        try:
            val = int(user)
            if min_val is not None and val < min_val:
                raise ValueError
            if max_val is not None and val > max_val:
                raise ValueError
            return val
        except (ValueError, TypeError):
            print("❌ Invalid integer input.")


def choose_orbit_class(default="LEO"):
    print("  Orbit class: " + ", ".join(f"{i + 1}) {c}" for i, c in enumerate(ORBIT_CLASSES)))
    idx = get_int(
        f"  Select [default {default}]: ",
        default=ORBIT_CLASSES.index(default) + 1,
        min_val=1,
        max_val=len(ORBIT_CLASSES),
    )
    return ORBIT_CLASSES[idx - 1]


def create_satellite(index, mean_anomaly_default=0.0):
    sat_id = f"SAT-{index}"
    print(f"\n🛰️ Satellite {index}")

    name = _ask(f"  Name [default {sat_id}]: ", default=sat_id)

    line1 = _ask("  TLE line 1 (press Enter to give elements instead): ")
    if line1:
        line2 = _ask("  TLE line 2: ")
        desc = TleDescriptor(id=sat_id, name=name, line1=line1, line2=line2)
        print(f"✔ {name} will be propagated from its TLE")
        return desc

    orbit_class = choose_orbit_class()
    altitude = get_float(f"  Altitude (km) [default {DEFAULT_ALTITUDE_KM}]: ", default=DEFAULT_ALTITUDE_KM)
    inclination = get_float(
        f"  Inclination (deg) [default {DEFAULT_INCLINATION_DEG}]: ", default=DEFAULT_INCLINATION_DEG
    )

    kwargs = {}
    honours = settings.ORBIT_CLASS_DEFAULTS[orbit_class]["honours"]
    if "eccentricity" in honours:
        kwargs["eccentricity"] = get_float("  Eccentricity [default 0.01]: ", default=0.01)
    if "argument_of_periapsis_deg" in honours:
        kwargs["argument_of_periapsis_deg"] = get_float("  Argument of periapsis (deg) [default 0]: ", default=0.0)
    if "raan_deg" in honours:
        kwargs["raan_deg"] = get_float("  RAAN (deg) [default 0]: ", default=0.0)
    if "mean_anomaly_deg" in honours:
        kwargs["mean_anomaly_deg"] = get_float(
            f"  Mean anomaly (deg) [default {mean_anomaly_default}]: ", default=mean_anomaly_default
        )

    desc = SatelliteDescriptor(
        id=sat_id,
        name=name,
        orbit_class=orbit_class,
        altitude_km=altitude,
        inclination_deg=inclination,
        **kwargs,
    )
    print(f"✔ {name}: {orbit_class}, altitude {altitude:.1f} km, inclination {inclination:.1f} deg")
    return desc


def ask_horizon(default=None):
    """
    Ask for the collision look-ahead in seconds; Enter keeps the default.
    """
    if default is None:
        default = getattr(settings, "COLLISION_HORIZON", 3600.0)
    val = get_float(f"\nCollision horizon in seconds [default {int(default)}]: ", default=default)
    if not math.isfinite(val):
        print("❌ Horizon must be finite, keeping the default.")
        return float(default)
    return float(val)


def run_cli():
    print("======================================")
    print("   SATELLITE ORBIT & COLLISION (CLI)  ")
    print("======================================")

    n = get_int("Number of satellites (2-10) [default 2]: ", default=2, min_val=2, max_val=10)
    descriptors = [create_satellite(i + 1) for i in range(n)]

    horizon = clamp_horizon(ask_horizon())
    setattr(settings, "COLLISION_HORIZON", float(horizon))

    ticks = get_int("Simulation ticks before screening [default 10]: ", default=10, min_val=0)

    print("\n✅ CLI input complete.")
    print(f"→ Satellites: {', '.join(d.name for d in descriptors)}")
    print(f"→ Collision horizon set to: {int(horizon)} seconds")

    return descriptors, float(horizon), ticks
