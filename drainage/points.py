"""Deterministic per-cell point placement with a bounded cache."""

from __future__ import annotations

import numpy as np

from drainage.rng import MinStdRand, cell_hash
from drainage.windows import PointWindow


class PointCache:
    """Square cache of generated points addressed by cell coordinates modulo its size.

    Each slot remembers the cell it was filled for; a slot taken over by another
    cell is simply overwritten.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("cache size must be >= 1")
        self.size = size
        self._keys = np.zeros((size, size, 2), dtype=np.int64)
        self._filled = np.zeros((size, size), dtype=bool)
        self._points = np.zeros((size, size, 2), dtype=np.float64)

    def _slot(self, x: int, y: int) -> tuple[int, int]:
        return y % self.size, x % self.size

    def get(self, x: int, y: int) -> np.ndarray | None:
        i, j = self._slot(x, y)
        if not self._filled[i, j]:
            return None
        if self._keys[i, j, 0] != x or self._keys[i, j, 1] != y:
            return None
        return self._points[i, j].copy()

    def put(self, x: int, y: int, point: np.ndarray) -> None:
        i, j = self._slot(x, y)
        self._keys[i, j] = (x, y)
        self._points[i, j] = point
        self._filled[i, j] = True


class PointGenerator:
    """Places one canonical point per integer cell."""

    def __init__(self, seed: int, eps: float, *, cache_size: int = 32) -> None:
        self.seed = int(seed)
        self.eps = float(eps)
        self.cache = PointCache(cache_size)

    def seed_noise(self, i: int, j: int) -> int:
        return MinStdRand(cell_hash(self.seed, i, j)).next()

    def generate_point(self, x: int, y: int) -> np.ndarray:
        generator = MinStdRand(self.seed_noise(x, y))
        px = generator.uniform()
        py = generator.uniform()
        return np.array(
            [x + 0.5 + self.eps * (px - 0.5), y + 0.5 + self.eps * (py - 0.5)],
            dtype=np.float64,
        )

    def generate_point_cached(self, x: int, y: int) -> np.ndarray:
        point = self.cache.get(x, y)
        if point is None:
            point = self.generate_point(x, y)
            self.cache.put(x, y, point)
        return point

    def neighboring_points(self, cx: int, cy: int, size: int, resolution: int = 1) -> PointWindow:
        """Points of the `size` x `size` cells around (cx, cy), scaled down by `resolution`."""

        half = size // 2
        xy = np.empty((size, size, 2), dtype=np.float64)
        for i in range(size):
            y = cy + i - half
            for j in range(size):
                x = cx + j - half
                xy[i, j] = self.generate_point_cached(x, y) / resolution
        return PointWindow(cell=(cx, cy), resolution=resolution, xy=xy)
