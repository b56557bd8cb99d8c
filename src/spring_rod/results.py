"""Result containers for recorded simulation data.

These dataclasses are plain Python structures intended for logging, testing,
and post-processing. They intentionally avoid holding references to numpy
state owned by the integrator.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class RodKinematicsSample:
    """Snapshot of rod point positions and tip velocity at a single time sample."""

    point_positions: list[tuple[float, float, float]]
    tip_velocity: tuple[float, float, float]


@dataclass(slots=True)
class SimulationSample:
    """Recorded simulation state at one time instant."""

    time: float
    rod: RodKinematicsSample


@dataclass(slots=True)
class SimulationResult:
    """Accumulated samples produced by a simulation runner."""

    samples: list[SimulationSample] = field(default_factory=list)
    rejected_driver_calls: int = 0

    def add_sample(self, sample: SimulationSample) -> None:
        """Append one sample to the result sequence."""
        self.samples.append(sample)

    @property
    def times(self) -> list[float]:
        return [s.time for s in self.samples]

    @property
    def final(self) -> SimulationSample:
        """Return the last recorded sample."""
        if not self.samples:
            raise ValueError("no samples recorded")
        return self.samples[-1]
