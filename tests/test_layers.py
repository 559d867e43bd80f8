from __future__ import annotations

import numpy as np
import pytest

from drainage.config import FieldConfig, LayerConfig
from drainage.field import DrainageField
from drainage.layers import central_points, edge_layer, grid_distance, grid_layer, point_layer
from drainage.mathutil import wyvill_galin

_QUERIES = ((0.5, 0.5), (0.27, -1.93), (-3.61, 4.02), (2.0, 2.5), (6.3, -6.8))


def _field(eps: float = 0.0, **layers: object) -> DrainageField:
    return DrainageField(FieldConfig(seed=13, eps=eps, layers=LayerConfig(**layers)))


def test_all_layers_disabled_yield_zero() -> None:
    field = _field(0.7, display_points=False, display_segments=False, display_grid=False)

    for x, y in _QUERIES:
        assert field.evaluate(x, y) == 0.0


def test_grid_only_peaks_on_integer_and_half_lines() -> None:
    field = _field(0.0, display_points=False, display_segments=False)

    assert field.evaluate(0.0, 0.3) == 1.0
    assert field.evaluate(3.0, 0.1234) == 1.0
    assert field.evaluate(0.37, -2.0) == 1.0
    assert field.evaluate(0.5, 0.3) == 1.0
    assert field.evaluate(0.25, 0.3) == 0.0
    assert field.evaluate(3.001, 0.1234) < 1.0


def test_grid_only_is_periodic() -> None:
    field = _field(0.0, display_points=False, display_segments=False)

    for x, y in ((0.003, 0.21), (0.499, 0.77), (0.2, 0.002), (0.51, 0.38)):
        base = field.evaluate(x, y)
        for shift in (1.0, -2.0, 5.0):
            assert field.evaluate(x + shift, y) == pytest.approx(base, abs=1e-9)
            assert field.evaluate(x, y + shift) == pytest.approx(base, abs=1e-9)


def test_grid_distance_with_offset() -> None:
    assert grid_distance(1.0, 0.3) == 0.0
    assert grid_distance(0.25, 0.4) == pytest.approx(0.25)
    assert grid_distance(0.5, 0.3, 0.5) == 0.0
    assert grid_distance(0.1, 0.3, 0.5) == pytest.approx(0.2)


def test_evaluate_dominates_every_enabled_layer() -> None:
    field = _field(0.8)
    cfg = field.config.layers
    k = cfg.falloff_exponent

    for x, y in _QUERIES:
        value = field.evaluate(x, y)
        snap = field.snapshot(x, y)
        contributions = [
            point_layer(x, y, central_points(snap.points), cfg.point_radius, k),
            point_layer(x, y, snap.chains.nodes(), cfg.chain_node_radius, k),
            edge_layer(x, y, snap.chains, 1, cfg.segment_radius, k),
            grid_layer(x, y, 0.0, cfg.grid_radius, k),
            point_layer(x, y, central_points(snap.fine_points), cfg.fine_point_radius, k),
            edge_layer(x, y, snap.fine_segments, 2, cfg.fine_segment_radius, k),
            grid_layer(x, y, 0.5, cfg.fine_grid_radius, k),
        ]
        assert value >= max(contributions)
        assert value == max(contributions)


def test_point_layer_peaks_on_control_point() -> None:
    field = _field(0.9, display_segments=False, display_grid=False)
    snap = field.snapshot(1.2, -0.4)
    px, py = snap.points.xy[snap.points.center, snap.points.center]

    assert field.evaluate(float(px), float(py)) == 1.0
    assert 0.0 <= field.evaluate(float(px) + 0.05, float(py)) < 1.0


def test_hard_edged_segment_layer() -> None:
    field = _field(0.9, display_points=False, display_grid=False, falloff_exponent=0.0)
    snap = field.snapshot(-1.5, 1.5)
    link = snap.chains.links[2, 2, 0]
    mid = 0.5 * (link[0, :2] + link[1, :2])

    assert field.evaluate(float(mid[0]), float(mid[1])) == 1.0


def test_wyvill_galin_falloff() -> None:
    assert wyvill_galin(0.0, 1.0, 2.0) == 1.0
    assert wyvill_galin(0.5, 1.0, 2.0) == pytest.approx(0.5625)
    assert wyvill_galin(1.0, 1.0, 2.0) == 0.0
    assert wyvill_galin(0.99, 1.0, 0.0) == 1.0
    assert wyvill_galin(np.inf, 1.0, 0.0) == 0.0
