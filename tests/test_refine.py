from __future__ import annotations

import numpy as np
import pytest

from drainage.config import FieldConfig
from drainage.field import DrainageField
from drainage.geometry import segment_distances
from drainage.points import PointGenerator
from drainage.refine import connect_point_to_segment, fine_points


def _segment(a: tuple[float, float, float], b: tuple[float, float, float]) -> np.ndarray:
    return np.array([a, b], dtype=np.float64)


def test_interior_projection_meets_segment_at_45_degrees() -> None:
    seg = _segment((0.0, 0.0, 1.0), (4.0, 0.0, 0.0))

    edge = connect_point_to_segment(np.array([1.0, 1.0]), 1.0, seg)

    assert np.array_equal(edge[1], np.array([2.0, 0.0, 0.5]))
    assert np.array_equal(edge[0], np.array([1.0, 1.0, 0.5]))
    direction = edge[1, :2] - edge[0, :2]
    assert abs(direction[0]) == pytest.approx(abs(direction[1]))


def test_connection_is_capped_at_far_endpoint() -> None:
    seg = _segment((0.0, 0.0, 1.0), (4.0, 0.0, 0.0))

    edge = connect_point_to_segment(np.array([3.5, 2.0]), 2.0, seg)

    assert np.array_equal(edge[1], seg[1])
    assert edge[0, 2] == 0.0


def test_projection_outside_segment_snaps_to_endpoint() -> None:
    seg = _segment((0.0, 0.0, 1.0), (4.0, 0.0, 0.0))

    after = connect_point_to_segment(np.array([5.0, 1.0]), float(np.hypot(1.0, 1.0)), seg)
    before = connect_point_to_segment(np.array([-1.0, 1.0]), float(np.hypot(1.0, 1.0)), seg)

    assert np.array_equal(after[1], seg[1])
    assert np.array_equal(before[1], seg[0])
    assert before[0, 2] == 1.0


def test_degenerate_target_segment() -> None:
    seg = _segment((2.0, 2.0, 0.25), (2.0, 2.0, 0.25))

    edge = connect_point_to_segment(np.array([1.0, 1.0]), float(np.hypot(1.0, 1.0)), seg)

    assert np.array_equal(edge[1], seg[0])
    assert np.array_equal(edge[0], np.array([1.0, 1.0, 0.25]))


def test_fine_points_reuse_coarse_points_exactly() -> None:
    field = DrainageField(FieldConfig(seed=21, eps=0.6))
    snap = field.snapshot(1.3, 2.8)

    reused = snap.fine_reused
    mask = reused[..., 0] >= 0
    assert int(mask.sum()) >= 4

    for k, l in zip(*np.nonzero(mask)):
        i, j = reused[k, l]
        assert np.array_equal(snap.fine_points.xy[k, l], snap.points.xy[i, j])
        edge = snap.fine_segments.ends[k, l]
        assert np.array_equal(edge[0], edge[1])
        assert np.array_equal(edge[0, :2], snap.points.xy[i, j])
        assert edge[0, 2] == snap.elevations[i, j]
        assert edge[0, 2] == field.sampler.elevation(*snap.points.xy[i, j])


def test_fine_edges_land_on_coarse_chains() -> None:
    field = DrainageField(FieldConfig(seed=4, eps=0.9))
    snap = field.snapshot(-2.6, 0.45)
    links = snap.chains.links.reshape(-1, 2, 3)
    mask = snap.fine_reused[..., 0] < 0

    for k, l in zip(*np.nonzero(mask)):
        edge = snap.fine_segments.ends[k, l]
        assert np.array_equal(edge[0, :2], snap.fine_points.xy[k, l])
        assert edge[0, 2] == edge[1, 2]
        assert float(segment_distances(edge[1], links).min()) < 1e-9


def test_fine_window_is_centered_on_query_subcell() -> None:
    field = DrainageField(FieldConfig(seed=2, eps=0.5))
    snap = field.snapshot(3.8, -0.2)

    assert snap.points.cell == (3, -1)
    assert snap.fine_points.cell == (7, -1)
    assert snap.fine_points.resolution == 2
    assert snap.fine_segments.size == 5


def test_fine_points_need_enough_coarse_points() -> None:
    generator = PointGenerator(0, 0.5)
    coarse = generator.neighboring_points(0, 0, 3, 1)

    with pytest.raises(ValueError):
        fine_points(generator, coarse, (0, 0), 9)
