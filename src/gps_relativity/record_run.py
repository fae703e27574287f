"""Record a headless simulation run for later analysis."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from gps_relativity.core.config import PHYSICS_CFG, PhysicsCfg
from gps_relativity.core.errors import ConfigurationError
from gps_relativity.core.logging_utils import RunLogger
from gps_relativity.core.model import SimulationContext
from gps_relativity.core.timekeeping import SimClock
from gps_relativity.data.bodies import SECONDS_PER_DAY

logger = logging.getLogger(__name__)


def run_simulation(
    cfg: PhysicsCfg,
    *,
    duration: float,
    frame_dt: float,
    root_dir: str | Path = "data/runs",
    run_id: str | None = None,
) -> Path:
    """Drive a context with constant real frame time until *duration* simulated seconds.

    The frame time is subject to the same clamp as the live viewer, so the
    simulated step is ``min(frame_dt, max_frame_dt) * default_time_scale``.
    """

    if not duration > 0.0:
        raise ValueError("duration must be positive")
    if not frame_dt > 0.0:
        raise ValueError("frame_dt must be positive")
    clock = SimClock(cfg)
    if not clock.time_scale > 0.0:
        raise ValueError("time scale must be positive for a recorded run")
    with RunLogger(root_dir, run_id) as run_logger:
        context = SimulationContext(cfg, clock=clock, run_logger=run_logger)
        while context.elapsed < duration:
            context.step(frame_dt)
        context.close()
        logger.info(
            "Recorded %.0f simulated seconds in %d frames to %s",
            context.elapsed,
            context.clock.frame_count,
            run_logger.run_dir,
        )
        return run_logger.run_dir


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Record a headless relativity run.")
    parser.add_argument("--days", type=float, default=1.0, help="simulated days to record")
    parser.add_argument("--time-scale", type=float, default=10_000.0)
    parser.add_argument("--frame-dt", type=float, default=1.0 / 60.0, help="real seconds per frame")
    parser.add_argument("--ground-reference", action="store_true")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--log-every", type=int, default=PHYSICS_CFG.log_every_steps)
    parser.add_argument("--root", default="data/runs")
    parser.add_argument("--run-id", default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(name)s | %(message)s")

    cfg = replace(
        PHYSICS_CFG,
        default_time_scale=args.time_scale,
        random_seed=args.seed,
        log_every_steps=args.log_every,
    )
    if args.ground_reference:
        cfg = replace(cfg, reference_radius=cfg.earth_radius)

    try:
        run_dir = run_simulation(
            cfg,
            duration=args.days * SECONDS_PER_DAY,
            frame_dt=args.frame_dt,
            root_dir=args.root,
            run_id=args.run_id,
        )
    except (ConfigurationError, ValueError) as err:
        logger.error("Run aborted: %s", err)
        return 1
    print(f"Simulation saved to {run_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
