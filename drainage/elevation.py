"""Normalized elevation lookup through the base noise source."""

from __future__ import annotations

import numpy as np

from drainage.config import DomainConfig, validate_domain
from drainage.mathutil import remap, remap_array
from drainage.noise import ScalarNoiseSource


class ElevationSampler:
    """Remaps field coordinates into the noise rectangle and normalizes to [0, 1].

    Noise sources that also provide ``sample_array(x, y)`` are sampled a whole
    window at a time; the values equal those of repeated scalar calls.
    """

    def __init__(self, noise: ScalarNoiseSource, domain: DomainConfig) -> None:
        validate_domain(domain)
        self.noise = noise
        self.domain = domain

    def remap_point(self, x: float, y: float) -> tuple[float, float]:
        d = self.domain
        u = remap(x, d.noise_top_left[0], d.noise_bottom_right[0], d.perlin_top_left[0], d.perlin_bottom_right[0])
        v = remap(y, d.noise_top_left[1], d.noise_bottom_right[1], d.perlin_top_left[1], d.perlin_bottom_right[1])
        return u, v

    def elevation(self, x: float, y: float) -> float:
        u, v = self.remap_point(x, y)
        return (self.noise.sample(u, v) + 1.0) / 2.0

    def elevations(self, xy: np.ndarray) -> np.ndarray:
        """Elevations for an array of points with trailing axis (x, y)."""

        sample_array = getattr(self.noise, "sample_array", None)
        if sample_array is None:
            flat = xy.reshape(-1, 2)
            values = np.fromiter(
                (self.elevation(float(px), float(py)) for px, py in flat),
                dtype=np.float64,
                count=flat.shape[0],
            )
            return values.reshape(xy.shape[:-1])

        d = self.domain
        u = remap_array(
            xy[..., 0], d.noise_top_left[0], d.noise_bottom_right[0], d.perlin_top_left[0], d.perlin_bottom_right[0]
        )
        v = remap_array(
            xy[..., 1], d.noise_top_left[1], d.noise_bottom_right[1], d.perlin_top_left[1], d.perlin_bottom_right[1]
        )
        return (np.asarray(sample_array(u, v), dtype=np.float64) + 1.0) / 2.0
