import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from satsys.config import settings


def _out_path(filename, path=None):
    if path is not None:
        return path
    out_dir = getattr(settings, "OUTPUT_DIR", "outputs")
    os.makedirs(out_dir, exist_ok=True)
    return os.path.join(out_dir, filename)


def plot_separation_history(times, distances, label="pair", path=None):
    """
    Plot sampled separation (km) vs time offset (s) for one satellite pair.
    """
    save_path = _out_path(f"separation_{label}.png", path)

    plt.figure(figsize=(10, 6))
    plt.plot(times, distances, marker=".", label=label)

    for bound, risk, _ in getattr(settings, "RISK_BUCKETS", ()):
        plt.axhline(bound, linestyle="--", linewidth=0.8, color="red" if risk == "high" else "orange")

    plt.xlabel("Time offset (s)")
    plt.ylabel("Separation (km)")
    plt.title("Separation Over Time")
    plt.legend()

    plt.tight_layout()
    plt.savefig(save_path)
    plt.close()

    print(f"[OK] Saved: {save_path}")
    return save_path


def plot_risk_ranking(pair_results, path=None):
    """
    Bar chart of minimum separation per satellite pair (smallest first).
    """
    save_path = _out_path("risk_ranking.png", path)

    rows = sorted(pair_results, key=lambda r: r["minDistanceKm"])
    labels = [f"{r['satellite_id']}/{r['other_id']}" for r in rows]
    dists = [r["minDistanceKm"] for r in rows]
    colors = {"high": "red", "medium": "orange", "low": "green"}

    plt.figure(figsize=(8, 5))
    plt.bar(labels, dists, color=[colors.get(r["risk"], "gray") for r in rows])
    plt.xticks(rotation=45, ha="right")
    plt.ylabel("Min Separation (km)")
    plt.title("Pair Risk Ranking")

    plt.tight_layout()
    plt.savefig(save_path)
    plt.close()

    print(f"[OK] Saved: {save_path}")
    return save_path
