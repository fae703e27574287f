"""Run recording for the relativity simulator.

A run lives in ``<root>/<run_id>/`` and holds ``timeseries.csv`` (one row per
satellite per sample), ``events.csv`` (user inputs), and ``meta.json`` (the
constants and derived rates the run was started with). ``<root>/last_run.txt``
names the newest run so the analyzer can find it without arguments.
"""
from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence


def allocate_run_dir(root_dir: Path, run_id: Optional[str] = None) -> Path:
    """Create and return a fresh run directory under *root_dir*.

    Without *run_id* the directory is named after the current time. A taken
    name gets a numeric suffix instead of being reused.
    """

    root_dir.mkdir(parents=True, exist_ok=True)
    base = run_id or f"{datetime.now():%Y%m%d_%H%M%S}_run"
    candidate = base
    suffix = 1
    while (root_dir / candidate).exists():
        candidate = f"{base}_{suffix}" if run_id else f"{base}_{suffix:02d}"
        suffix += 1
    run_dir = root_dir / candidate
    run_dir.mkdir(parents=True, exist_ok=False)
    return run_dir


def _cell(value: object) -> object:
    if isinstance(value, float):
        return f"{value:.15g}"
    return value


class _CsvStream:
    """CSV file that collects rows in memory and writes them in batches."""

    def __init__(self, path: Path, header: Sequence[str], flush_threshold: int) -> None:
        self.path = path
        self._fh = path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh, lineterminator="\n")
        self._writer.writerow(header)
        self._rows: list[list[object]] = []
        self._threshold = max(1, flush_threshold)

    def append(self, row: Iterable[object]) -> None:
        self._rows.append([_cell(value) for value in row])
        if len(self._rows) >= self._threshold:
            self.flush()

    def flush(self) -> None:
        if self._rows:
            self._writer.writerows(self._rows)
            self._fh.flush()
            self._rows.clear()

    def close(self) -> None:
        self.flush()
        self._fh.close()


class RunLogger:
    """Buffered recorder of per-satellite clock samples and input events."""

    TIMESERIES_HEADER = ["t", "sat_index", "phase", "earth_elapsed", "sat_elapsed", "drift_us"]
    EVENTS_HEADER = ["t", "type", "target", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 50,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.run_dir = allocate_run_dir(self.root_dir, run_id)
        self.run_id = self.run_dir.name
        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._timeseries = _CsvStream(
            self.timeseries_path, self.TIMESERIES_HEADER, timeseries_flush_threshold
        )
        self._events = _CsvStream(self.events_path, self.EVENTS_HEADER, events_flush_threshold)
        self.closed = False
        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[float]) -> None:
        """Append one ``t, sat_index, phase, earth_elapsed, sat_elapsed, drift_us`` row."""

        self._timeseries.append(values)

    def log_event(
        self, t: float, event_type: str, target: str, details: dict | None = None
    ) -> None:
        encoded = json.dumps(details, sort_keys=True) if details else ""
        self._events.append((float(t), event_type, target, encoded))

    def close(self) -> None:
        if self.closed:
            return
        self._timeseries.close()
        self._events.close()
        self.closed = True

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["RunLogger", "allocate_run_dir"]
