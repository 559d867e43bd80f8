"""Point and segment primitives on numpy vectors.

Points are float64 arrays of shape ``(2,)`` or ``(3,)`` (x, y, elevation).
Segments are arrays of shape ``(2, 3)``: row 0 is the start ``a``, row 1 the
end ``b``. Batches of segments are ``(K, 2, 3)``.
"""

from __future__ import annotations

import numpy as np


def is_degenerate(seg: np.ndarray) -> bool:
    return bool(np.array_equal(seg[0], seg[1]))


def point_line_projection(point: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
    """Unclamped parameter of the projection of `point` on the line (a, b)."""

    ab = b[:2] - a[:2]
    denom = float(np.dot(ab, ab))
    if denom == 0.0:
        return 0.0
    return float(np.dot(point[:2] - a[:2], ab)) / denom


def segment_distances(point: np.ndarray, segments: np.ndarray) -> np.ndarray:
    """Planar distances from `point` to every segment of a ``(K, 2, 3)`` batch."""

    a = segments[:, 0, :2]
    ab = segments[:, 1, :2] - a
    ap = point[:2][None, :] - a
    denom = np.einsum("ij,ij->i", ab, ab)
    numer = np.einsum("ij,ij->i", ap, ab)
    u = np.divide(numer, denom, out=np.zeros_like(numer), where=denom > 0.0)
    u = np.clip(u, 0.0, 1.0)
    closest = a + u[:, None] * ab
    delta = point[:2][None, :] - closest
    return np.hypot(delta[:, 0], delta[:, 1])


def nearest_segment(point: np.ndarray, segments: np.ndarray) -> tuple[float, np.ndarray]:
    """Distance to, and copy of, the first nearest segment of a batch."""

    if segments.shape[0] == 0:
        raise ValueError("cannot search an empty segment batch")
    distances = segment_distances(point, segments)
    index = int(np.argmin(distances))
    return float(distances[index]), segments[index].copy()
