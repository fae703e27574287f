"""End-to-end tests for recording a run and analyzing it."""

import json
from dataclasses import replace

import numpy as np
import pytest

pytest.importorskip("matplotlib")

from gps_relativity import analyze_run, record_run
from gps_relativity.core.config import PHYSICS_CFG
from gps_relativity.data.satellites import SATELLITE_IDS


@pytest.fixture
def recorded_run(tmp_path):
    cfg = replace(PHYSICS_CFG, default_time_scale=10_000.0, log_every_steps=1, random_seed=0)
    run_dir = record_run.run_simulation(
        cfg, duration=6 * 3_600.0, frame_dt=0.1, root_dir=tmp_path, run_id="e2e"
    )
    return tmp_path, run_dir


class TestRecordRun:
    """Test cases for the headless recorder."""

    def test_writes_run_files(self, recorded_run):
        root, run_dir = recorded_run
        assert run_dir == root / "e2e"
        for name in ("timeseries.csv", "events.csv", "meta.json"):
            assert (run_dir / name).is_file()
        meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
        assert meta["time_scale"] == 10_000.0

    @pytest.mark.parametrize(
        "args",
        [
            ["--days", "0"],
            ["--days", "nan"],
            ["--frame-dt", "0"],
            ["--frame-dt", "-0.1"],
            ["--frame-dt", "nan"],
            ["--time-scale", "0", "--days", "0.01"],
        ],
    )
    def test_rejects_bad_arguments(self, tmp_path, args):
        assert record_run.main([*args, "--root", str(tmp_path)]) == 1
        assert list(tmp_path.iterdir()) == []

    def test_rejected_run_keeps_last_run_marker(self, recorded_run):
        root, run_dir = recorded_run
        assert record_run.main(["--time-scale", "0", "--root", str(root)]) == 1
        assert record_run.main(["--frame-dt", "0", "--root", str(root)]) == 1
        assert (root / "last_run.txt").read_text(encoding="utf-8") == run_dir.name
        assert sorted(path.name for path in root.iterdir()) == ["e2e", "last_run.txt"]

    def test_non_positive_frame_time_is_rejected(self, tmp_path):
        cfg = replace(PHYSICS_CFG, default_time_scale=10_000.0)
        for frame_dt in (0.0, -0.1):
            with pytest.raises(ValueError):
                record_run.run_simulation(cfg, duration=60.0, frame_dt=frame_dt, root_dir=tmp_path)
        assert not (tmp_path / "last_run.txt").exists()

    def test_cli(self, tmp_path, capsys):
        code = record_run.main(
            ["--days", "0.05", "--frame-dt", "0.1", "--root", str(tmp_path), "--run-id", "cli"]
        )
        assert code == 0
        assert (tmp_path / "cli" / "timeseries.csv").is_file()
        assert "Simulation saved to" in capsys.readouterr().out


class TestAnalyzeRun:
    """Test cases for the run analysis."""

    def test_fitted_rates_match_analytic_rates(self, recorded_run):
        _, run_dir = recorded_run
        ts = analyze_run.load_timeseries(run_dir / "timeseries.csv")
        per_sat = analyze_run.split_by_satellite(ts)
        meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
        assert sorted(per_sat) == list(range(len(SATELLITE_IDS)))
        for index, series in per_sat.items():
            expected = meta["satellites"][index]["drift_us_per_day"]
            assert analyze_run.fit_drift_rate(series) == pytest.approx(expected, rel=1e-3)

    def test_main_uses_last_run(self, recorded_run, capsys):
        root, run_dir = recorded_run
        analyze_run.main(["--root", str(root)])
        for name in ("drift.png", "phase.png", "drift_rates.png"):
            assert (run_dir / "figs" / name).is_file()
        out = capsys.readouterr().out
        assert "Run: e2e" in out
        assert "CHRONOS-01" in out

    def test_missing_run_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            analyze_run.main(["--root", str(tmp_path)])

    def test_fit_needs_two_samples(self):
        assert analyze_run.fit_drift_rate({"t": np.array([1.0]), "drift_us": np.array([0.0])}) is None
