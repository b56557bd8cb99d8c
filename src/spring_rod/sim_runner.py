"""Simulation stepping and sampling.

`SimulationRunner` is the entrypoint for advancing a built rod frame by frame
and recording results in a consistent format. Drivers are plain callables
`driver(rod, time)` invoked before every frame. They set grip targets and
inject forces, the way an interactive frame loop would.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from .config import SimulationConfig
from .errors import PointIndexError
from .results import RodKinematicsSample, SimulationResult, SimulationSample
from .rod import Rod

logger = logging.getLogger(__name__)

Driver = Callable[[Rod, float], None]


@dataclass(slots=True)
class SimulationRunner:
    """Execute a configured simulation and collect sampled outputs."""

    config: SimulationConfig

    def run(self, rod: Rod, drivers: Iterable[Driver] = ()) -> SimulationResult:
        """Advance `rod` for `config.step_count` frames and record samples.

        A sample is taken before the first frame and then every
        `config.sample_every_n_steps` frames. A driver that addresses a point
        outside the rod is reported and skipped for that frame, and the run
        continues.

        Returns:
            `SimulationResult` containing recorded samples.
        """
        if self.config.sample_every_n_steps < 1:
            raise ValueError("sample_every_n_steps must be >= 1")

        drivers = list(drivers)
        result = SimulationResult()
        result.add_sample(_sample(rod))

        steps = self.config.step_count
        logger.info(
            "running %d frame(s) of dt=%g with %d substep(s)",
            steps,
            self.config.dt,
            self.config.substeps,
        )
        for step in range(1, steps + 1):
            t = rod.time
            for driver in drivers:
                try:
                    driver(rod, t)
                except PointIndexError as exc:
                    result.rejected_driver_calls += 1
                    logger.warning("driver call rejected at t=%.4f: %s", t, exc)

            rod.advance(self.config.dt, self.config.substeps)

            if step % self.config.sample_every_n_steps == 0:
                result.add_sample(_sample(rod))

        logger.info("run finished at t=%.4f with %d sample(s)", rod.time, len(result.samples))
        return result


def _sample(rod: Rod) -> SimulationSample:
    vx, vy, vz = rod.velocities()[rod.tip_index]
    return SimulationSample(
        time=rod.time,
        rod=RodKinematicsSample(
            point_positions=rod.positions(),
            tip_velocity=(float(vx), float(vy), float(vz)),
        ),
    )
