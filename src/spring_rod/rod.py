"""Public rod handle.

`build` assembles a `Rod` from configuration: topology, stores, integrator and
boundary controller. The handle is what frame loops, renderers and loggers
talk to. It exposes positions and diagnostics for reading, and only
`apply_force` and `set_driven` for writing between steps.
"""

from __future__ import annotations

import logging

import numpy as np

from .boundary import BoundaryController
from .config import RodConfig, SimulationConfig
from .integrator import Diagnostics, MassSpringSystem, check_step
from .points import Boundary, PointStore
from .springs import SpringStore
from .topology import build_rod_points, build_rod_springs, grip_indices_for

logger = logging.getLogger(__name__)


class Rod:
    """A built rod: mass-spring system plus its boundary controller."""

    def __init__(
        self,
        system: MassSpringSystem,
        sim: SimulationConfig | None = None,
        grip_indices: tuple[int, ...] = (),
    ) -> None:
        self.system = system
        self.sim = sim if sim is not None else SimulationConfig()
        self.boundary = BoundaryController(system.points)
        self.grip_indices = tuple(grip_indices)
        self._rest_positions = system.points.positions.copy()

    @property
    def point_count(self) -> int:
        return len(self.system)

    @property
    def tip_index(self) -> int:
        return self.point_count - 1

    @property
    def time(self) -> float:
        return self.system.time

    def rest_position(self, index: int) -> tuple[float, float, float]:
        """Return the construction position of point `index`."""
        i = self.system.points.check_index(index)
        x, y, z = self._rest_positions[i]
        return (float(x), float(y), float(z))

    def advance(self, dt: float | None = None, substeps: int | None = None) -> None:
        """Advance one frame. Defaults come from the simulation config.

        Pending grip targets are released only once the step has completed. A
        rejected call leaves them in place for the next attempt.
        """
        dt = self.sim.dt if dt is None else dt
        substeps = check_step(dt, self.sim.substeps if substeps is None else substeps)
        driven = self.boundary.begin_step()
        self.system.advance(dt, substeps, driven=driven)
        self.boundary.end_step()

    def positions(self) -> list[tuple[float, float, float]]:
        """Snapshot of every point position in construction order."""
        return [(float(x), float(y), float(z)) for x, y, z in self.system.points.positions]

    def velocities(self) -> np.ndarray:
        """Copy of every point velocity, one row per point."""
        return self.system.points.velocities.copy()

    def apply_force(self, index: int, force) -> None:
        """Accumulate an external force on point `index` for the next step."""
        self.system.apply_force(index, force)

    def apply_force_to_tip(self, force) -> None:
        self.system.apply_force(self.tip_index, force)

    def set_driven(self, index: int, position) -> None:
        """Pin point `index` to `position` for the next step."""
        self.boundary.set_driven(index, position)

    def boundary_of(self, index: int) -> Boundary:
        return self.boundary.boundary_of(index)

    def diagnostics(self) -> Diagnostics:
        """Per-point state from the last sub-step of the latest step."""
        return self.system.diagnostics()


def build(rod_cfg: RodConfig | None = None, sim_cfg: SimulationConfig | None = None) -> Rod:
    """Build a rod from configuration.

    Args:
        rod_cfg: Rod geometry, mass, zone profile and grip scheme.
        sim_cfg: Integration settings used for gravity, the velocity clamp and
            the default `advance` arguments.

    Returns:
        A `Rod` with its points at rest along +Y from the base.

    Raises:
        ConstructionError: The configuration cannot produce a valid rod.
    """
    rod_cfg = rod_cfg if rod_cfg is not None else RodConfig()
    sim_cfg = sim_cfg if sim_cfg is not None else SimulationConfig()

    points = PointStore.from_points(build_rod_points(rod_cfg))
    springs = SpringStore.from_springs(build_rod_springs(rod_cfg), len(points))
    system = MassSpringSystem(
        points,
        springs,
        gravity=sim_cfg.gravity,
        max_velocity=sim_cfg.max_velocity,
        min_spring_length=sim_cfg.min_spring_length,
    )
    logger.info(
        "rod built: length=%.3f m, %d segments, grip scheme %r",
        rod_cfg.length,
        rod_cfg.segment_count,
        rod_cfg.grip_scheme,
    )
    return Rod(system, sim_cfg, grip_indices=grip_indices_for(rod_cfg))
