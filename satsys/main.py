# satsys/main.py
import json
import logging
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from satsys.cli import run_cli
from satsys.config import settings
from satsys.engine.advisories import assess_threats, conjunctions_from_pair, plan_automatic_maneuvers
from satsys.engine.collision import separation_history
from satsys.simulation.registry import SatelliteRegistry
from satsys.simulation.runner import run_ticks
from satsys.visualization.plots import plot_risk_ranking, plot_separation_history

log = logging.getLogger("main")


def save_json(obj: Any, name_prefix: str) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    out_dir = Path(getattr(settings, "OUTPUT_DIR", "outputs"))
    out_dir.mkdir(parents=True, exist_ok=True)
    filename = out_dir / f"{name_prefix}_{ts}.json"
    with open(filename, "w") as f:
        json.dump(obj, f, indent=2, default=lambda o: repr(o))
    return str(filename)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-7s  %(message)s",
        datefmt="%H:%M:%S"
    )
    try:
        settings.validate_settings()

        descriptors, horizon, ticks = run_cli()
        now = datetime.now(timezone.utc)

        registry = SatelliteRegistry()
        for d in descriptors:
            registry.add(d, epoch=now)

        # 1) Advance the constellation
        done = run_ticks(registry, ticks)
        log.info("Advanced %d satellites by %d ticks", len(registry), done)

        # 2) Pairwise screening (advances the live propagators; keep the start for plots)
        start = {p.satellite_id: p.clone() for p in registry}
        pairs = registry.predict_collisions(horizon_s=horizon, include_low=True)
        for rec in pairs:
            log.info(
                "%s vs %s: min %.3f km at +%.0fs -> %s",
                rec["satellite_id"], rec["other_id"], rec["minDistanceKm"], rec["timeOffsetSeconds"], rec["risk"],
            )

        # 3) Advisories for actionable pairs
        conjunctions = [
            c
            for rec in pairs
            for c in conjunctions_from_pair(rec, now)
            if c.risk != settings.LOW_RISK_LABEL
        ]
        assessments = assess_threats(registry.ids(), conjunctions, now)
        auto = plan_automatic_maneuvers(conjunctions, now)
        if not conjunctions:
            log.info("No medium/high risk pairs within %ds.", int(horizon))

        report = {
            "meta": {
                "run_id": f"{settings.RUN_ID_PREFIX}_{now.strftime('%Y%m%dT%H%M%SZ')}",
                "horizon_s": horizon,
                "ticks": done,
                "timestamp_utc": now.isoformat(),
            },
            "satellites": registry.snapshot(),
            "pairs": pairs,
            "conjunctions": [c.as_dict() for c in conjunctions],
            "assessments": {sid: a.as_dict() for sid, a in assessments.items()},
            "automatic_maneuvers": [a.as_dict() for a in auto],
        }
        out_file = save_json(report, "collision_report")
        log.info("Saved report: %s", out_file)

        # 4) Plots
        try:
            if pairs:
                plot_risk_ranking(pairs)
                worst = pairs[0]
                a = start[worst["satellite_id"]]
                b = start[worst["other_id"]]
                times, dists = separation_history(a, b, horizon)
                plot_separation_history(times, dists, label=f"{worst['satellite_id']}_{worst['other_id']}")
            log.info("Plots generated.")
        except Exception as e:
            log.warning("Plotting failed: %s", e)

    except Exception:
        log.error("Fatal exception during run:")
        traceback.print_exc()


if __name__ == "__main__":
    main()
