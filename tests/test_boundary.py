import numpy as np
import pytest

from spring_rod import build
from spring_rod.config import RodConfig, SimulationConfig
from spring_rod.errors import PointIndexError
from spring_rod.points import Boundary


def _rod(scheme="double", **sim_kwargs):
    return build(RodConfig(segment_count=15, grip_scheme=scheme), SimulationConfig(**sim_kwargs))


def test_set_driven_overwrites_position_and_zeroes_velocity():
    rod = _rod()
    rod.advance(0.016, 8)
    rod.system.points.velocities[4] = (1.0, 2.0, 3.0)

    rod.set_driven(4, (0.5, 0.8, -0.2))

    assert rod.positions()[4] == (0.5, 0.8, -0.2)
    np.testing.assert_array_equal(rod.system.points.velocities[4], 0.0)
    assert rod.boundary_of(4) == Boundary.DRIVEN


def test_fixed_and_driven_points_are_not_integrated():
    rod = _rod()
    rod.set_driven(0, (0.1, 0.0, 0.0))
    rod.set_driven(10, (0.3, 2.0, 0.1))
    rod.set_driven(13, (0.0, 2.4, 0.2))
    before_pos = rod.system.points.positions[[0, 10, 13]].copy()
    before_vel = rod.system.points.velocities[[0, 10, 13]].copy()

    rod.advance(0.016, 8)

    np.testing.assert_array_equal(rod.system.points.positions[[0, 10, 13]], before_pos)
    np.testing.assert_array_equal(rod.system.points.velocities[[0, 10, 13]], before_vel)
    # Free neighbours did move
    assert not np.allclose(rod.system.points.positions[12], (0.0, 2.4, 0.0))


def test_fixed_base_stays_put_over_many_steps():
    rod = _rod(scheme="fixed")
    for _ in range(200):
        rod.apply_force_to_tip((1.0, 0.0, 0.5))
        rod.advance()

    assert rod.positions()[0] == (0.0, 0.0, 0.0)
    np.testing.assert_array_equal(rod.system.points.velocities[0], 0.0)


def test_built_grips_stay_driven_without_new_targets():
    rod = _rod()
    for _ in range(50):
        rod.advance()

    assert rod.positions()[0] == (0.0, 0.0, 0.0)
    assert rod.positions()[10] == pytest.approx((0.0, 2.0, 0.0))
    assert rod.boundary_of(10) == Boundary.DRIVEN


def test_transient_target_is_released_after_one_step():
    rod = _rod(scheme="fixed")
    rod.set_driven(5, (0.3, 1.0, 0.0))
    assert rod.boundary.driven_indices() == [5]

    rod.advance(0.016, 8)
    assert rod.positions()[5] == (0.3, 1.0, 0.0)
    assert rod.boundary_of(5) == Boundary.FREE
    assert rod.boundary.driven_indices() == []

    rod.advance(0.016, 8)
    assert rod.positions()[5] != (0.3, 1.0, 0.0)
    assert np.linalg.norm(rod.system.points.velocities[5]) > 0.0


def test_release_drops_pending_target():
    rod = _rod(scheme="fixed")
    rod.set_driven(3, (0.2, 0.6, 0.0))
    rod.boundary.release(3)

    assert rod.boundary_of(3) == Boundary.FREE
    rod.advance(0.016, 8)
    assert rod.positions()[3] != (0.2, 0.6, 0.0)


def test_latest_target_wins_within_a_frame():
    rod = _rod()
    rod.set_driven(10, (1.0, 1.0, 1.0))
    rod.set_driven(10, (0.5, 2.0, 0.0))
    rod.advance(0.016, 8)

    assert rod.positions()[10] == (0.5, 2.0, 0.0)


@pytest.mark.parametrize("index", [16, 100, -1, 2.5])
def test_set_driven_rejects_out_of_range_index(index):
    rod = _rod()
    before = rod.system.points.positions.copy()

    with pytest.raises(PointIndexError):
        rod.set_driven(index, (0.0, 0.0, 0.0))

    np.testing.assert_array_equal(rod.system.points.positions, before)
    assert rod.boundary.driven_indices() == []


@pytest.mark.parametrize("index", [16, -1, -16])
def test_apply_force_rejects_out_of_range_index(index):
    rod = _rod()
    with pytest.raises(PointIndexError):
        rod.apply_force(index, (1.0, 0.0, 0.0))

    assert np.all(rod.system.points.external_forces == 0.0)


def test_index_error_is_an_index_error():
    rod = _rod()
    with pytest.raises(IndexError):
        rod.apply_force(rod.point_count, (0.0, 1.0, 0.0))


@pytest.mark.parametrize("vector", [(1.0, 2.0), (1.0, 2.0, 3.0, 4.0), (float("nan"), 0.0, 0.0)])
def test_malformed_vectors_are_rejected(vector):
    rod = _rod()
    with pytest.raises(ValueError):
        rod.apply_force(3, vector)
    with pytest.raises(ValueError):
        rod.set_driven(3, vector)

    assert np.all(rod.system.points.external_forces == 0.0)
    assert rod.boundary.driven_indices() == []


@pytest.mark.parametrize("dt, substeps", [(0.0, 8), (-0.016, 8), (0.016, 0), (0.016, 1.5)])
def test_rejected_step_keeps_pending_targets(dt, substeps):
    rod = _rod(scheme="fixed")
    rod.set_driven(5, (0.3, 1.0, 0.0))
    before = rod.system.points.positions.copy()

    with pytest.raises(ValueError):
        rod.advance(dt, substeps)

    assert rod.boundary.driven_indices() == [5]
    assert rod.boundary_of(5) == Boundary.DRIVEN
    np.testing.assert_array_equal(rod.system.points.positions, before)
    assert rod.time == 0.0

    # The next valid step still treats the point as driven
    rod.advance(0.016, 8)
    assert rod.positions()[5] == (0.3, 1.0, 0.0)
    assert rod.boundary_of(5) == Boundary.FREE
