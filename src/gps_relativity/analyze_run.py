"""Analyze a recorded run and plot the clock drift of every satellite."""
from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
SECONDS_PER_DAY = 86_400.0


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "t": float(row["t"]),
                "type": row["type"],
                "target": row["target"],
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def split_by_satellite(ts: Dict[str, np.ndarray]) -> Dict[int, Dict[str, np.ndarray]]:
    indices = ts.get("sat_index", np.array([])).astype(int)
    return {
        int(index): {key: values[indices == index] for key, values in ts.items()}
        for index in np.unique(indices)
    }


def fit_drift_rate(series: Dict[str, np.ndarray]) -> float | None:
    """Least-squares drift slope in microseconds per simulated day."""

    t = series["t"]
    if t.size < 2 or float(np.ptp(t)) <= 0.0:
        return None
    slope, _ = np.polyfit(t, series["drift_us"], 1)
    return float(slope) * SECONDS_PER_DAY


def satellite_names(meta: dict, count: int) -> List[str]:
    names = [entry.get("id", f"sat {i}") for i, entry in enumerate(meta.get("satellites", []))]
    names.extend(f"sat {i}" for i in range(len(names), count))
    return names


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def plot_drift(fig_dir: Path, per_sat: Dict[int, Dict[str, np.ndarray]], names: List[str]) -> None:
    fig, ax = plt.subplots(figsize=(8, 4.5))
    for index, series in sorted(per_sat.items()):
        ax.plot(series["t"] / 3600.0, series["drift_us"], lw=1.5, label=names[index])
    ax.axhline(0.0, color="#888888", lw=0.8)
    ax.set_xlabel("t [h]")
    ax.set_ylabel("drift [µs]")
    ax.set_title("Satellite clock drift against the reference clock")
    ax.grid(True, alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "drift.png", dpi=150)
    plt.close(fig)


def plot_drift_rates(fig_dir: Path, rates: Dict[str, float]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    labels = list(rates)
    values = [rates[label] for label in labels]
    colors = ["#94d82d" if value >= 0 else "#ff8c5a" for value in values]
    ax.bar(labels, values, color=colors)
    ax.axhline(0.0, color="#888888", lw=0.8)
    ax.set_ylabel("µs / day")
    ax.set_title("Drift rate per satellite")
    ax.grid(True, axis="y", alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "drift_rates.png", dpi=150)
    plt.close(fig)


def plot_phase(fig_dir: Path, per_sat: Dict[int, Dict[str, np.ndarray]], names: List[str]) -> None:
    fig, ax = plt.subplots(figsize=(8, 4))
    for index, series in sorted(per_sat.items()):
        ax.plot(series["t"] / 3600.0, series["phase"], lw=1.0, label=names[index])
    ax.set_xlabel("t [h]")
    ax.set_ylabel("phase [rad]")
    ax.set_ylim(0.0, 2.0 * np.pi)
    ax.set_title("Orbital phase")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right", fontsize="small")
    fig.tight_layout()
    fig.savefig(fig_dir / "phase.png", dpi=150)
    plt.close(fig)


def print_summary(run_dir: Path, meta: dict, rates: Dict[str, float], events: List[dict]) -> None:
    reference = meta.get("reference_radius")
    print(f"Run: {run_dir.name}")
    if reference is None:
        print(" Reference clock: distant observer")
    else:
        print(f" Reference clock: r = {float(reference) / 1000:,.0f} km")
    expected = {entry["id"]: entry.get("drift_us_per_day") for entry in meta.get("satellites", [])}
    for name, rate in rates.items():
        line = f" {name:<11} fitted {rate:+9.3f} µs/day"
        if expected.get(name) is not None:
            line += f"  (analytic {expected[name]:+9.3f})"
        print(line)
    print(f" Events: {len(events)}")


def resolve_run_dir(parser: argparse.ArgumentParser, run_dir: str | None, base_runs_dir: Path) -> Path:
    if run_dir:
        run_path = Path(run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_path = base_runs_dir / last_run_file.read_text(encoding="utf-8").strip()
    if not run_path.is_dir():
        parser.error(f"Run directory not found: {run_path}")
    return run_path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded run and create figures.")
    parser.add_argument("run_dir", nargs="?", help="path to a specific run directory")
    parser.add_argument("--root", default="data/runs")
    args = parser.parse_args(argv)

    run_path = resolve_run_dir(parser, args.run_dir, Path(args.root))
    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME
    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("Run directory is missing meta/timeseries/events files.")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)
    ts = load_timeseries(ts_path)
    events = load_events(ev_path)
    if not ts or ts["t"].size == 0:
        parser.error("timeseries.csv is empty; nothing to analyze.")

    per_sat = split_by_satellite(ts)
    names = satellite_names(meta, max(per_sat) + 1)
    rates = {}
    for index, series in sorted(per_sat.items()):
        rate = fit_drift_rate(series)
        if rate is not None:
            rates[names[index]] = rate

    fig_dir = ensure_fig_dir(run_path)
    plot_drift(fig_dir, per_sat, names)
    plot_phase(fig_dir, per_sat, names)
    if rates:
        plot_drift_rates(fig_dir, rates)

    print_summary(run_path, meta, rates, events)


if __name__ == "__main__":
    main()
