"""Distance-plus-elevation metric over both network levels."""

from __future__ import annotations

import numpy as np

from drainage.geometry import nearest_segment, point_line_projection
from drainage.mathutil import lerp_clamp
from drainage.windows import ChainWindow, SegmentWindow


def nearest_network_segment(
    x: float,
    y: float,
    chains: ChainWindow,
    fine: SegmentWindow,
    neighborhood: int = 2,
) -> tuple[float, np.ndarray]:
    """Nearest coarse chain link or fine edge; the fine edge must be strictly closer to win."""

    point = np.array([x, y], dtype=np.float64)
    distance, nearest = nearest_segment(point, chains.near(x, y, neighborhood))
    fine_distance, fine_nearest = nearest_segment(point, fine.near(x, y, neighborhood))
    if fine_distance < distance:
        return fine_distance, fine_nearest
    return distance, nearest


def worley_value(
    x: float,
    y: float,
    chains: ChainWindow,
    fine: SegmentWindow,
    neighborhood: int = 2,
) -> float:
    """Distance to the nearest network segment plus the elevation interpolated along it."""

    distance, seg = nearest_network_segment(x, y, chains, fine, neighborhood)
    u = point_line_projection(np.array([x, y], dtype=np.float64), seg[0], seg[1])
    elevation = lerp_clamp(float(seg[0, 2]), float(seg[1, 2]), u)
    return distance + elevation
