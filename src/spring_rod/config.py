"""Configuration dataclasses for rod simulation scenarios.

This module defines the primary inputs used by the topology builder, the
integrator and the simulation runner. The dataclasses are intentionally
lightweight so they can be created in user scripts and tests without touching
any numpy state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


GripScheme = Literal["fixed", "single", "double"]


@dataclass(slots=True, frozen=True)
class ZoneSpec:
    """One stiffness/damping zone of a rod.

    A zone covers the fractional interval from the previous zone's `end` (or
    0 for the first zone) up to, but not including, its own `end`.
    """

    end: float
    stiffness: float
    damping: float


# Butt, mid and tip sections: stiff near the handle, soft near the tip.
DEFAULT_ZONES: tuple[ZoneSpec, ...] = (
    ZoneSpec(end=1.0 / 3.0, stiffness=800.0, damping=8.0),
    ZoneSpec(end=2.0 / 3.0, stiffness=500.0, damping=5.0),
    ZoneSpec(end=1.0, stiffness=200.0, damping=2.0),
)


@dataclass(slots=True)
class SimulationConfig:
    """Top-level settings for a simulation run.

    Attributes:
        dt: Frame time step in seconds, split into `substeps` integration steps.
        substeps: Number of equal sub-steps per frame.
        t_end: End time for a runner invocation in seconds.
        gravity: World gravity vector `(gx, gy, gz)` in m/s^2.
        max_velocity: Hard ceiling on the speed of any integrated point.
        min_spring_length: Springs shorter than this are skipped for a sub-step.
        sample_every_n_steps: Record state every N frames.
    """

    dt: float = 0.016
    substeps: int = 8
    t_end: float = 5.0
    gravity: tuple[float, float, float] = (0.0, -9.81, 0.0)
    max_velocity: float = 20.0
    min_spring_length: float = 1e-4
    sample_every_n_steps: int = 10

    @property
    def substep_dt(self) -> float:
        """Return the length of one integration sub-step in seconds."""
        return self.dt / self.substeps

    @property
    def step_count(self) -> int:
        """Return the number of frames needed to reach `t_end`."""
        return int(round(self.t_end / self.dt))


@dataclass(slots=True)
class RodConfig:
    """Geometric and physical parameters for a segmented rod.

    The rod is a straight chain of `segment_count + 1` point masses laid out
    along +Y from `base_position`. `zones` assigns spring coefficients along
    the rod, and `grip_scheme` decides which points are boundary-controlled.
    """

    base_position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    length: float = 3.0
    segment_count: int = 15
    point_mass: float = 0.1
    zones: tuple[ZoneSpec, ...] = field(default=DEFAULT_ZONES)
    grip_scheme: GripScheme = "double"
    second_grip_fraction: float = 2.0 / 3.0

    @property
    def segment_length(self) -> float:
        """Return the rest length of each segment in meters."""
        return self.length / self.segment_count
