"""Toggleable display layers composed by pointwise maximum."""

from __future__ import annotations

import math

import numpy as np

from drainage.config import LayerConfig
from drainage.geometry import segment_distances
from drainage.mathutil import wyvill_galin
from drainage.windows import ChainWindow, PointWindow, SegmentWindow


def point_layer(x: float, y: float, points: np.ndarray, radius: float, exponent: float) -> float:
    """Falloff of the nearest of `points` (any shape with trailing (x, y[, z]))."""

    flat = points.reshape(-1, points.shape[-1])[:, :2]
    distances = np.hypot(flat[:, 0] - x, flat[:, 1] - y)
    return wyvill_galin(float(distances.min()), radius, exponent)


def central_points(points: PointWindow) -> np.ndarray:
    """Points of the 3x3 cells around the focal cell."""

    c = points.center
    return points.xy[c - 1 : c + 2, c - 1 : c + 2]


def edge_layer(
    x: float,
    y: float,
    window: SegmentWindow | ChainWindow,
    neighborhood: int,
    radius: float,
    exponent: float,
) -> float:
    """Falloff of the nearest edge (or chain link) around the cell of (x, y)."""

    candidates = window.near(x, y, neighborhood)
    distances = segment_distances(np.array([x, y], dtype=np.float64), candidates)
    return wyvill_galin(float(distances.min()), radius, exponent)


def grid_distance(x: float, y: float, offset: float = 0.0) -> float:
    """Distance to the nearest line of the unit grid shifted by `offset`."""

    dx = abs((x - offset) - math.floor(x - offset + 0.5))
    dy = abs((y - offset) - math.floor(y - offset + 0.5))
    return min(dx, dy)


def grid_layer(x: float, y: float, offset: float, radius: float, exponent: float) -> float:
    return wyvill_galin(grid_distance(x, y, offset), radius, exponent)


def coarse_layers(
    x: float,
    y: float,
    config: LayerConfig,
    *,
    points: PointWindow | None = None,
    chains: ChainWindow | None = None,
    segment_neighborhood: int = 1,
) -> float:
    """Layers of the coarse level: control points, chain nodes, chain links and the unit grid."""

    k = config.falloff_exponent
    value = 0.0
    if config.display_points:
        value = max(value, point_layer(x, y, central_points(points), config.point_radius, k))
        value = max(value, point_layer(x, y, chains.nodes(), config.chain_node_radius, k))
    if config.display_segments:
        value = max(value, edge_layer(x, y, chains, segment_neighborhood, config.segment_radius, k))
    if config.display_grid:
        value = max(value, grid_layer(x, y, 0.0, config.grid_radius, k))
    return value


def fine_layers(
    x: float,
    y: float,
    config: LayerConfig,
    *,
    points: PointWindow | None = None,
    segments: SegmentWindow | None = None,
    segment_neighborhood: int = 2,
) -> float:
    """Layers of the fine level: fine points, tributary edges and the offset grid."""

    k = config.falloff_exponent
    value = 0.0
    if config.display_points:
        value = max(value, point_layer(x, y, central_points(points), config.fine_point_radius, k))
    if config.display_segments:
        value = max(value, edge_layer(x, y, segments, segment_neighborhood, config.fine_segment_radius, k))
    if config.display_grid:
        value = max(value, grid_layer(x, y, config.fine_grid_offset, config.fine_grid_radius, k))
    return value
