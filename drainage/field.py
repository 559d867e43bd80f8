"""Drainage field evaluator: the two-level network pipeline around a query point."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from drainage.config import FieldConfig
from drainage.elevation import ElevationSampler
from drainage.layers import coarse_layers, fine_layers
from drainage.network import steepest_descent
from drainage.noise import PerlinNoise, ScalarNoiseSource
from drainage.points import PointGenerator
from drainage.refine import fine_points, fine_segments
from drainage.rng import RngStream
from drainage.subdivide import subdivide_segments
from drainage.windows import ChainWindow, PointWindow, SegmentWindow, cell_of, quadrant_of
from drainage.worley import worley_value

SnapshotKey = tuple[tuple[int, int], tuple[int, int]]


@dataclass(frozen=True, eq=False)
class NetworkSnapshot:
    """Every window built around one query cell."""

    points: PointWindow
    elevations: np.ndarray
    segments: SegmentWindow
    chains: ChainWindow
    fine_points: PointWindow
    fine_reused: np.ndarray
    fine_segments: SegmentWindow


def snapshot_key(x: float, y: float) -> SnapshotKey:
    """Coarse and fine cells of (x, y); queries sharing a key share a snapshot."""

    cx, cy = cell_of(x, y, 1)
    qx, qy = quadrant_of(x, y)
    return (cx, cy), (2 * cx + qx, 2 * cy + qy)


class DrainageField:
    """Continuous scalar field driven by a multi-resolution drainage network.

    Evaluation is deterministic for a fixed configuration. The point cache is
    private mutable state of the instance; use one instance per thread.

    `evaluate` and `evaluate_worley` accept a snapshot built earlier for the
    same `snapshot_key`, which lets raster loops build each network once.
    """

    def __init__(self, config: FieldConfig | None = None, *, noise: ScalarNoiseSource | None = None) -> None:
        self.config = config or FieldConfig()
        self.config.validate()

        self.points = PointGenerator(self.config.seed, self.config.eps, cache_size=self.config.windows.cache_size)
        if noise is None:
            noise = PerlinNoise(RngStream(self.config.seed).fork("elevation"))
        self.sampler = ElevationSampler(noise, self.config.domain)

    @property
    def builds_network(self) -> bool:
        """False when `evaluate` only draws grid lines."""

        layers = self.config.layers
        return layers.display_points or layers.display_segments

    def snapshot(self, x: float, y: float) -> NetworkSnapshot:
        """Build the coarse and fine networks around the cell of (x, y)."""

        windows = self.config.windows
        (cx, cy), fine_cell = snapshot_key(x, y)

        points = self.points.neighboring_points(cx, cy, windows.coarse_points, 1)
        elevations = self.sampler.elevations(points.xy)
        segments = steepest_descent(points, elevations)
        chains = subdivide_segments(segments, windows.subdivisions)

        fine, reused = fine_points(self.points, points, fine_cell, windows.fine_points)
        tributaries = fine_segments(
            chains,
            fine,
            reused,
            elevations,
            neighborhood=windows.refine_neighborhood,
        )
        return NetworkSnapshot(
            points=points,
            elevations=elevations,
            segments=segments,
            chains=chains,
            fine_points=fine,
            fine_reused=reused,
            fine_segments=tributaries,
        )

    def evaluate(self, x: float, y: float, *, snapshot: NetworkSnapshot | None = None) -> float:
        """Maximum over the enabled point, edge and grid layers of both levels."""

        layers = self.config.layers
        windows = self.config.windows
        if not self.builds_network:
            if not layers.display_grid:
                return 0.0
            return max(coarse_layers(x, y, layers), fine_layers(x, y, layers))

        snap = snapshot if snapshot is not None else self.snapshot(x, y)
        coarse = coarse_layers(
            x,
            y,
            layers,
            points=snap.points,
            chains=snap.chains,
            segment_neighborhood=windows.segment_neighborhood,
        )
        fine = fine_layers(
            x,
            y,
            layers,
            points=snap.fine_points,
            segments=snap.fine_segments,
            segment_neighborhood=windows.fine_segment_neighborhood,
        )
        return max(coarse, fine)

    def evaluate_worley(self, x: float, y: float, *, snapshot: NetworkSnapshot | None = None) -> float:
        """Distance to the nearest network segment plus its interpolated elevation."""

        snap = snapshot if snapshot is not None else self.snapshot(x, y)
        return worley_value(x, y, snap.chains, snap.fine_segments, self.config.windows.worley_neighborhood)
