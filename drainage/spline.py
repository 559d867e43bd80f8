"""Segment subdivision: linear and uniform Catmull-Rom."""

from __future__ import annotations

import numpy as np


def _parameters(count: int) -> np.ndarray:
    if count < 1:
        raise ValueError("count must be >= 1")
    return np.arange(1, count + 1, dtype=np.float64) / float(count + 1)


def subdivide(a: np.ndarray, b: np.ndarray, count: int) -> np.ndarray:
    """Return `count` evenly spaced interior points of segment (a, b)."""

    t = _parameters(count)[:, None]
    return t * b[None, :] + (a[None, :] - a[None, :] * t)


def catmull_rom_subdivide(
    p0: np.ndarray,
    p1: np.ndarray,
    p2: np.ndarray,
    p3: np.ndarray,
    count: int,
) -> np.ndarray:
    """Return `count` evenly parameterized interior points of the p1-p2 span."""

    t = _parameters(count)[:, None]
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        2.0 * p1[None, :]
        + (p2 - p0)[None, :] * t
        + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3)[None, :] * t2
        + (3.0 * p1 - p0 - 3.0 * p2 + p3)[None, :] * t3
    )
