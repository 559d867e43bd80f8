"""Spline smoothing of drainage edges into contiguous chains."""

from __future__ import annotations

import numpy as np

from drainage.geometry import is_degenerate
from drainage.spline import catmull_rom_subdivide, subdivide
from drainage.windows import ChainWindow, SegmentWindow


def segments_ending_at(segments: SegmentWindow, point: np.ndarray) -> tuple[int, np.ndarray | None]:
    """Count non-degenerate edges ending exactly at `point` in the 3x3 block of its cell."""

    rows, cols = segments.block(*segments.index_of(point[0], point[1]), 1)
    block = segments.ends[rows, cols].reshape(-1, 2, 3)
    live = ~np.all(block[:, 0] == block[:, 1], axis=-1)
    matches = np.flatnonzero(live & np.all(block[:, 1] == point, axis=-1))
    if matches.size == 0:
        return 0, None
    return int(matches.size), block[matches[-1]]


def segments_starting_at(segments: SegmentWindow, point: np.ndarray) -> tuple[int, np.ndarray | None]:
    """Count non-degenerate edges starting exactly at `point`; only its own cell can hold one."""

    i, j = segments.index_of(point[0], point[1])
    seg = segments.ends[i, j]
    if not is_degenerate(seg) and np.array_equal(seg[0], point):
        return 1, seg
    return 0, None


def smoothed_midpoints(segments: SegmentWindow, seg: np.ndarray, count: int) -> np.ndarray:
    """Interior points of one edge, smoothed when its neighbors allow it."""

    a, b = seg[0], seg[1]
    if is_degenerate(seg):
        return np.repeat(a[None, :], count, axis=0)

    ending, predecessor = segments_ending_at(segments, a)
    starting, successor = segments_starting_at(segments, b)

    if ending == 1 and starting == 1:
        return catmull_rom_subdivide(predecessor[0], a, b, successor[1], count)
    if starting == 1:
        # Phantom predecessor keeps the tangent at a network boundary.
        return catmull_rom_subdivide(2.0 * a - b, a, b, successor[1], count)
    if ending == 1:
        return catmull_rom_subdivide(predecessor[0], a, b, 2.0 * b - a, count)
    return subdivide(a, b, count)


def build_chain(seg: np.ndarray, midpoints: np.ndarray) -> np.ndarray:
    """Link `a`, the midpoints and `b` into a (D, 2, 3) chain sharing exact endpoints."""

    nodes = np.concatenate((seg[0][None, :], midpoints, seg[1][None, :]))
    return np.stack((nodes[:-1], nodes[1:]), axis=1)


def subdivide_segments(segments: SegmentWindow, subdivisions: int) -> ChainWindow:
    """Smooth every interior edge of an N x N window into an (N-2) x (N-2) chain window."""

    if subdivisions < 2:
        raise ValueError("segments should be subdivided in more than 1 part")
    n = segments.size
    if n < 3:
        raise ValueError("segment window must be at least 3x3")

    links = np.empty((n - 2, n - 2, subdivisions, 2, 3), dtype=np.float64)
    for i in range(1, n - 1):
        for j in range(1, n - 1):
            seg = segments.ends[i, j]
            midpoints = smoothed_midpoints(segments, seg, subdivisions - 1)
            links[i - 1, j - 1] = build_chain(seg, midpoints)
    return ChainWindow(cell=segments.cell, resolution=segments.resolution, links=links)
