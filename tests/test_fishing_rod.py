import math

import numpy as np
import pytest

from spring_rod import build
from spring_rod.config import RodConfig, SimulationConfig
from spring_rod.scenes.fishing_rod import FishingRodScene, GripScript, WindDriver, run_fishing_rod
from spring_rod.sim_runner import SimulationRunner


def test_fishing_rod_architecture_wiring():
    sim = SimulationConfig()
    rod_cfg = RodConfig()
    scene = FishingRodScene(sim=sim, rod=rod_cfg)
    runner = SimulationRunner(config=sim)

    assert scene.rod.grip_scheme in {"fixed", "single", "double"}
    assert rod_cfg.segment_length > 0.0
    assert runner.config.dt > 0.0
    assert sim.substep_dt == pytest.approx(0.002)
    assert [type(d) for d in scene.drivers()] == [GripScript, WindDriver]


def test_runner_samples_initial_state_and_every_n_frames():
    sim = SimulationConfig(dt=0.016, t_end=0.16, sample_every_n_steps=5)
    rod = build(RodConfig(grip_scheme="fixed"), sim)

    result = SimulationRunner(config=sim).run(rod)

    assert sim.step_count == 10
    assert len(result.samples) == 3
    assert result.times == pytest.approx([0.0, 0.08, 0.16])
    assert len(result.final.rod.point_positions) == 16
    assert result.final.rod.point_positions == rod.positions()
    assert result.final.rod.tip_velocity == tuple(rod.velocities()[rod.tip_index])


def test_runner_calls_drivers_before_each_frame():
    sim = SimulationConfig(t_end=0.048, sample_every_n_steps=1)
    rod = build(RodConfig(grip_scheme="fixed"), sim)
    seen = []

    def driver(r, t):
        seen.append(t)
        r.apply_force_to_tip((0.0, 0.0, 1.0))

    SimulationRunner(config=sim).run(rod, [driver])

    assert seen == pytest.approx([0.0, 0.016, 0.032])
    assert rod.positions()[-1][2] > 0.0


def test_runner_survives_out_of_range_driver(caplog):
    sim = SimulationConfig(t_end=0.16)
    rod = build(RodConfig(grip_scheme="fixed"), sim)

    def bad_driver(r, t):
        r.apply_force(r.point_count + 3, (1.0, 0.0, 0.0))

    result = SimulationRunner(config=sim).run(rod, [bad_driver])

    assert result.rejected_driver_calls == sim.step_count
    assert rod.time == pytest.approx(0.16)
    assert any("rejected" in r.getMessage() for r in caplog.records)


def test_runner_rejects_bad_sampling_interval():
    sim = SimulationConfig(sample_every_n_steps=0)
    with pytest.raises(ValueError):
        SimulationRunner(config=sim).run(build(sim_cfg=sim))


def test_wind_force_profile():
    wind = WindDriver(scale=2.0)
    assert wind.force_at(0.0) == pytest.approx((0.0, 0.0, 3.0))
    t = math.pi / 4.0
    assert wind.force_at(t) == pytest.approx((4.0, 0.0, 3.0 * math.cos(3.0 * t)))


def test_grip_script_rotates_grips_about_base():
    rod = build(RodConfig(segment_count=15, length=3.0))
    script = GripScript(amplitude=math.pi / 2.0, frequency=0.25)

    # sin(2 pi * 0.25 * 1) = 1, so the rod handle is turned a quarter turn
    x, y, z = script.target(rod, 10, 1.0)
    assert (x, y, z) == pytest.approx((-2.0, 0.0, 0.0), abs=1e-12)
    assert script.target(rod, 0, 1.0) == pytest.approx((0.0, 0.0, 0.0))
    assert script.target(rod, 10, 0.0) == pytest.approx((0.0, 2.0, 0.0))


def test_scene_run_tracks_scripted_grips():
    scene = FishingRodScene(sim=SimulationConfig(t_end=1.0, sample_every_n_steps=20))
    rod = scene.build()
    SimulationRunner(config=scene.sim).run(rod, scene.drivers())

    last_frame_time = rod.time - scene.sim.dt
    for index in rod.grip_indices:
        assert rod.positions()[index] == pytest.approx(
            scene.grips.target(rod, index, last_frame_time), abs=1e-9
        )
    assert np.all(np.isfinite(rod.system.points.positions))


def test_run_fishing_rod_without_drivers():
    scene = FishingRodScene(
        sim=SimulationConfig(t_end=0.5, sample_every_n_steps=5),
        rod=RodConfig(grip_scheme="fixed"),
        grips=None,
        wind=None,
    )
    result = run_fishing_rod(scene)

    assert len(result.samples) == 1 + scene.sim.step_count // 5
    tip = result.final.rod.point_positions[-1]
    assert tip[0] == pytest.approx(0.0) and tip[2] == pytest.approx(0.0)
    assert all(math.isfinite(c) for c in result.final.rod.tip_velocity)
