from __future__ import annotations

import numpy as np
import pytest

from drainage.geometry import is_degenerate, nearest_segment, point_line_projection, segment_distances


def _batch() -> np.ndarray:
    return np.array(
        [
            [[0.0, 0.0, 0.0], [2.0, 0.0, 1.0]],
            [[0.0, 1.0, 0.0], [0.0, 3.0, 0.0]],
            [[5.0, 5.0, 0.3], [5.0, 5.0, 0.3]],
        ]
    )


def test_projection_parameter_is_unclamped() -> None:
    a = np.array([0.0, 0.0, 9.0])
    b = np.array([2.0, 0.0, 0.0])

    assert point_line_projection(np.array([1.0, 4.0]), a, b) == 0.5
    assert point_line_projection(np.array([-2.0, 0.0]), a, b) == -1.0
    assert point_line_projection(np.array([1.0, 1.0]), a, a) == 0.0


def test_distances_clamp_to_segment_ends() -> None:
    distances = segment_distances(np.array([3.0, 0.0]), _batch())

    assert distances[0] == pytest.approx(1.0)
    assert distances[1] == pytest.approx(np.hypot(3.0, 1.0))
    assert distances[2] == pytest.approx(np.hypot(2.0, 5.0))


def test_nearest_segment_prefers_first_on_ties() -> None:
    batch = _batch()
    distance, seg = nearest_segment(np.array([-0.5, 0.5]), batch)

    assert distance == pytest.approx(np.hypot(0.5, 0.5))
    assert np.array_equal(seg, batch[0])
    seg[0, 0] = 99.0
    assert batch[0, 0, 0] == 0.0

    with pytest.raises(ValueError):
        nearest_segment(np.array([0.0, 0.0]), np.empty((0, 2, 3)))


def test_degenerate_segment() -> None:
    assert is_degenerate(_batch()[2])
    assert not is_degenerate(_batch()[0])
