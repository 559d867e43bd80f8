"""Structural summary of one network snapshot."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from drainage.field import NetworkSnapshot
from drainage.network import degenerate_mask


@dataclass(frozen=True)
class NetworkMetrics:
    """Edge and sink counts for the coarse and fine levels of a snapshot."""

    edge_count: int
    sink_count: int
    mean_edge_length: float
    fine_edge_count: int
    reused_fine_points: int
    degenerate_fine_edges: int
    mean_fine_edge_length: float


def _edge_lengths(ends: np.ndarray) -> np.ndarray:
    delta = ends[..., 1, :2] - ends[..., 0, :2]
    return np.hypot(delta[..., 0], delta[..., 1])


def network_metrics(snapshot: NetworkSnapshot) -> NetworkMetrics:
    sinks = degenerate_mask(snapshot.segments)
    fine_sinks = degenerate_mask(snapshot.fine_segments)

    lengths = _edge_lengths(snapshot.segments.ends)[~sinks]
    fine_lengths = _edge_lengths(snapshot.fine_segments.ends)[~fine_sinks]

    return NetworkMetrics(
        edge_count=int(sinks.size),
        sink_count=int(sinks.sum()),
        mean_edge_length=float(lengths.mean()) if lengths.size else 0.0,
        fine_edge_count=int(fine_sinks.size),
        reused_fine_points=int(np.count_nonzero(snapshot.fine_reused[..., 0] >= 0)),
        degenerate_fine_edges=int(fine_sinks.sum()),
        mean_fine_edge_length=float(fine_lengths.mean()) if fine_lengths.size else 0.0,
    )
