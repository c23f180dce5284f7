import builtins
import json

import pytest

from satsys import cli, main as main_mod
from satsys.config import settings
from satsys.models.satellite import SatelliteDescriptor, TleDescriptor


def _eof(prompt=""):
    raise EOFError


def _answers(*values):
    it = iter(values)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError
    return fake_input


def test_non_interactive_cli_uses_defaults(monkeypatch):
    monkeypatch.setattr(settings, "COLLISION_HORIZON", 3600.0)
    monkeypatch.setattr(builtins, "input", _eof)

    descriptors, horizon, ticks = cli.run_cli()

    assert [d.id for d in descriptors] == ["SAT-1", "SAT-2"]
    assert all(isinstance(d, SatelliteDescriptor) and d.orbit_class == "LEO" for d in descriptors)
    assert horizon == 3600.0
    assert ticks == 10


def test_cli_accepts_tle_and_elements(monkeypatch, iss_tle):
    monkeypatch.setattr(settings, "COLLISION_HORIZON", 3600.0)
    monkeypatch.setattr(builtins, "input", _answers(
        "2",                      # satellites
        "ISS", iss_tle.line1, iss_tle.line2,
        "Polar-1", "", "2", "700", "98", "30", "45",  # name, no TLE, Polar, alt, inc, raan, M
        "1800",                   # horizon
        "3",                      # ticks
    ))

    descriptors, horizon, ticks = cli.run_cli()

    assert isinstance(descriptors[0], TleDescriptor)
    polar = descriptors[1]
    assert polar.orbit_class == "Polar"
    assert polar.altitude_km == 700.0
    assert polar.raan_deg == 30.0 and polar.mean_anomaly_deg == 45.0
    assert horizon == 1800.0
    assert ticks == 3
    assert settings.COLLISION_HORIZON == 1800.0


def test_get_float_reprompts_on_bad_input(monkeypatch):
    monkeypatch.setattr(builtins, "input", _answers("abc", "2.5"))
    assert cli.get_float("x: ", default=1.0) == 2.5


def test_main_writes_report(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "OUTPUT_DIR", str(tmp_path))
    monkeypatch.setattr(settings, "COLLISION_HORIZON", 3600.0)
    monkeypatch.setattr(builtins, "input", _eof)

    main_mod.main()

    reports = list(tmp_path.glob("collision_report_*.json"))
    assert len(reports) == 1
    report = json.loads(reports[0].read_text())
    assert set(report["satellites"]) == {"SAT-1", "SAT-2"}
    # identical default satellites share an orbit
    assert report["pairs"][0]["risk"] == "high"
    assert report["assessments"]["SAT-1"]["threatLevel"] == "critical"
    assert report["assessments"]["SAT-2"]["threatLevel"] == "critical"
    assert len(report["conjunctions"]) == 2
    assert (tmp_path / "risk_ranking.png").exists()


def test_non_finite_horizon_keeps_default(monkeypatch):
    monkeypatch.setattr(builtins, "input", _answers("nan"))
    assert cli.ask_horizon(default=1800.0) == 1800.0
