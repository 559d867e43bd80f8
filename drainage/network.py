"""Steepest-descent edge construction over a point window."""

from __future__ import annotations

import numpy as np

from drainage.windows import PointWindow, SegmentWindow

# Row-major scan order of the 3x3 neighborhood; argmin keeps the first minimum.
_NEIGHBOR_OFFSETS = tuple((di, dj) for di in (-1, 0, 1) for dj in (-1, 0, 1))


def lowest_neighbor_offsets(elevations: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Row and column offsets of the lowest 3x3 neighbor of every interior cell."""

    if elevations.ndim != 2 or elevations.shape[0] != elevations.shape[1]:
        raise ValueError("elevations must be a square 2D array")
    n = elevations.shape[0]
    if n < 3:
        raise ValueError("elevations must be at least 3x3")

    stack = np.stack(
        [elevations[1 + di : n - 1 + di, 1 + dj : n - 1 + dj] for di, dj in _NEIGHBOR_OFFSETS]
    )
    choice = np.argmin(stack, axis=0)
    offsets = np.array(_NEIGHBOR_OFFSETS, dtype=np.int64)
    return offsets[choice, 0], offsets[choice, 1]


def steepest_descent(points: PointWindow, elevations: np.ndarray) -> SegmentWindow:
    """Connect each interior point to its locally lowest neighbor.

    An N x N point window yields an (N-2) x (N-2) segment window around the same
    focal cell. A point that is its own lowest neighbor produces a degenerate
    edge (a sink).
    """

    n = points.size
    if elevations.shape != (n, n):
        raise ValueError(f"elevations shape {elevations.shape} does not match a {n}x{n} point window")

    di, dj = lowest_neighbor_offsets(elevations)
    rows, cols = np.indices((n - 2, n - 2))
    src_i = rows + 1
    src_j = cols + 1
    dst_i = src_i + di
    dst_j = src_j + dj

    ends = np.empty((n - 2, n - 2, 2, 3), dtype=np.float64)
    ends[:, :, 0, :2] = points.xy[src_i, src_j]
    ends[:, :, 0, 2] = elevations[src_i, src_j]
    ends[:, :, 1, :2] = points.xy[dst_i, dst_j]
    ends[:, :, 1, 2] = elevations[dst_i, dst_j]
    return SegmentWindow(cell=points.cell, resolution=points.resolution, ends=ends)


def degenerate_mask(segments: SegmentWindow) -> np.ndarray:
    """Boolean (N, N) mask of sink edges."""

    return np.all(segments.ends[:, :, 0] == segments.ends[:, :, 1], axis=-1)
