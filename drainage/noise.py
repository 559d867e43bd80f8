"""Base elevation noise used by the drainage pipeline."""

from __future__ import annotations

from typing import Protocol

import numpy as np

from drainage.rng import RngStream

_GRADIENTS = np.array(
    [(1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0), (1.0, 1.0), (-1.0, 1.0), (1.0, -1.0), (-1.0, -1.0)],
    dtype=np.float64,
)


class ScalarNoiseSource(Protocol):
    """Deterministic scalar field sampled at continuous coordinates."""

    def sample(self, x: float, y: float) -> float:
        """Return a value in [-1, 1]."""


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


class PerlinNoise:
    """2D gradient noise over a seeded 256-entry permutation lattice."""

    def __init__(self, rng: RngStream) -> None:
        perm = rng.generator().permutation(256).astype(np.int64)
        self._perm = np.concatenate((perm, perm))

    def sample(self, x: float, y: float) -> float:
        return float(self.sample_array(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)))

    def sample_array(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Vectorized sampling, clipped to [-1, 1]."""

        x0 = np.floor(x)
        y0 = np.floor(y)
        xf = x - x0
        yf = y - y0
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255

        perm = self._perm
        aa = perm[perm[xi] + yi]
        ab = perm[perm[xi] + yi + 1]
        ba = perm[perm[xi + 1] + yi]
        bb = perm[perm[xi + 1] + yi + 1]

        u = _fade(xf)
        v = _fade(yf)

        x1 = _lerp(_grad(aa, xf, yf), _grad(ba, xf - 1.0, yf), u)
        x2 = _lerp(_grad(ab, xf, yf - 1.0), _grad(bb, xf - 1.0, yf - 1.0), u)
        return np.clip(_lerp(x1, x2, v), -1.0, 1.0)


def _grad(hashed: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    g = _GRADIENTS[hashed & 7]
    return g[..., 0] * x + g[..., 1] * y


def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)
