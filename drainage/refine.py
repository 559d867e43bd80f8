"""Second resolution level: fine points anchored onto the coarse chains."""

from __future__ import annotations

import numpy as np

from drainage.geometry import nearest_segment, point_line_projection
from drainage.mathutil import clamp, lerp
from drainage.points import PointGenerator
from drainage.windows import ChainWindow, PointWindow, SegmentWindow, cell_of

FINE_RESOLUTION = 2


def fine_points(
    generator: PointGenerator,
    coarse: PointWindow,
    fine_cell: tuple[int, int],
    size: int,
) -> tuple[PointWindow, np.ndarray]:
    """Generate the fine point window and splice in the coarse points it overlaps.

    Returns the window and an (N, N, 2) integer array holding, for each fine slot,
    the coarse (row, column) it was copied from, or -1.
    """

    up_res = 2 * ((size + 1) // 4) + 1
    if coarse.size < up_res:
        raise ValueError(
            f"not enough points in the vicinity to replace the fine points: need {up_res}, have {coarse.size}"
        )

    window = generator.neighboring_points(fine_cell[0], fine_cell[1], size, FINE_RESOLUTION)
    reused = np.full((size, size, 2), -1, dtype=np.int64)

    offset = (coarse.size - up_res) // 2
    for i in range(offset, coarse.size - offset):
        for j in range(offset, coarse.size - offset):
            px, py = coarse.xy[i, j]
            cx, cy = cell_of(px, py, FINE_RESOLUTION)
            if window.contains_cell(cx, cy):
                k, l = window.index_of_cell(cx, cy)
                window.xy[k, l] = coarse.xy[i, j]
                reused[k, l] = (i, j)
    return window, reused


def connect_point_to_segment(point: np.ndarray, distance: float, seg: np.ndarray) -> np.ndarray:
    """Edge from `point` onto `seg`, meeting it at roughly 45 degrees.

    When the projection lands strictly inside the segment the target slides toward
    `b` by the perpendicular distance, capped at `b`. The new edge's start takes the
    target's elevation.
    """

    a, b = seg[0], seg[1]
    u = clamp(point_line_projection(point, a, b), 0.0, 1.0)
    if 0.0 < u < 1.0:
        length = float(np.hypot(*(b[:2] - a[:2])))
        u = min(u + distance / length, 1.0)

    target = np.array([lerp(a[0], b[0], u), lerp(a[1], b[1], u), lerp(a[2], b[2], u)], dtype=np.float64)
    start = np.array([point[0], point[1], target[2]], dtype=np.float64)
    return np.stack((start, target))


def fine_segments(
    chains: ChainWindow,
    fine: PointWindow,
    reused: np.ndarray,
    coarse_elevations: np.ndarray,
    *,
    neighborhood: int = 1,
) -> SegmentWindow:
    """One edge per fine point: degenerate at reused coarse points, tributary elsewhere."""

    size = fine.size
    ends = np.empty((size, size, 2, 3), dtype=np.float64)
    for i in range(size):
        for j in range(size):
            point = fine.xy[i, j]
            ci, cj = reused[i, j]
            if ci >= 0:
                anchored = np.array([point[0], point[1], coarse_elevations[ci, cj]], dtype=np.float64)
                ends[i, j] = np.stack((anchored, anchored))
                continue
            candidates = chains.near(point[0], point[1], neighborhood)
            distance, nearest = nearest_segment(point, candidates)
            ends[i, j] = connect_point_to_segment(point, distance, nearest)
    return SegmentWindow(cell=fine.cell, resolution=fine.resolution, ends=ends)
