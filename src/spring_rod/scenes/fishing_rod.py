"""Scene composition for a hand-held fishing rod.

This module owns assembly of the canonical scenario:
- build a rod with two driven grips (butt cap and fore grip),
- sway the grips with a scripted casting motion,
- push the tip with a slowly varying wind force,
- return handles consumed by the simulation runner.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ..config import RodConfig, SimulationConfig
from ..results import SimulationResult
from ..rod import Rod, build
from ..sim_runner import SimulationRunner


@dataclass(slots=True)
class WindDriver:
    """Apply a periodic wind force to the rod tip every frame.

    The force is `scale * (2 sin(2t), 0, 1.5 cos(3t))` newtons.
    """

    scale: float = 1.0

    def force_at(self, time: float) -> tuple[float, float, float]:
        return (
            self.scale * 2.0 * math.sin(time * 2.0),
            0.0,
            self.scale * 1.5 * math.cos(time * 3.0),
        )

    def __call__(self, rod: Rod, time: float) -> None:
        rod.apply_force_to_tip(self.force_at(time))


@dataclass(slots=True)
class GripScript:
    """Rotate every grip rigidly about the first grip in the x-y plane.

    The rotation angle is `amplitude * sin(2 pi frequency t)` radians, applied
    to each grip's construction position, so both hands move together like a
    wrist flick during a cast.
    """

    amplitude: float = 0.35
    frequency: float = 0.5

    def angle_at(self, time: float) -> float:
        return self.amplitude * math.sin(2.0 * math.pi * self.frequency * time)

    def target(self, rod: Rod, index: int, time: float) -> tuple[float, float, float]:
        """Return the scripted position of grip `index` at `time`."""
        px, py, pz = rod.rest_position(rod.grip_indices[0])
        x, y, z = rod.rest_position(index)
        a = self.angle_at(time)
        dx, dy = x - px, y - py
        c, s = math.cos(a), math.sin(a)
        return (px + c * dx - s * dy, py + s * dx + c * dy, z)

    def __call__(self, rod: Rod, time: float) -> None:
        for index in rod.grip_indices:
            rod.set_driven(index, self.target(rod, index, time))


@dataclass(slots=True)
class FishingRodScene:
    """Configuration object for the fishing-rod scene builder."""

    sim: SimulationConfig = field(default_factory=SimulationConfig)
    rod: RodConfig = field(default_factory=RodConfig)
    grips: GripScript | None = field(default_factory=GripScript)
    wind: WindDriver | None = field(default_factory=WindDriver)

    def build(self) -> Rod:
        """Build and return the rod for this scenario."""
        return build(self.rod, self.sim)

    def drivers(self) -> list:
        """Return the per-frame drivers in the order they run."""
        out = []
        if self.grips is not None:
            out.append(self.grips)
        if self.wind is not None:
            out.append(self.wind)
        return out


def run_fishing_rod(scene: FishingRodScene | None = None) -> SimulationResult:
    """Build the scene, run it headless and return the recorded samples."""
    scene = scene if scene is not None else FishingRodScene()
    rod = scene.build()
    return SimulationRunner(config=scene.sim).run(rod, scene.drivers())
