"""CLI entry point for rendering a drainage field raster."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import datetime, timezone
import logging
import platform
import sys
import time

import numpy as np
import structlog

from drainage.config import DEFAULT_EPS, DEFAULT_SEED, ConfigError, DomainConfig, FieldConfig, LayerConfig
from drainage.field import DrainageField, NetworkSnapshot, SnapshotKey, snapshot_key
from drainage.io import resolve_output_dir, write_field_products, write_json
from drainage.metrics import network_metrics

DEFAULT_WIDTH = 256
DEFAULT_HEIGHT = 256

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic drainage network noise renderer")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Integer seed of the point lattice and noise")
    parser.add_argument("--eps", type=float, default=DEFAULT_EPS, help="Point jitter in [0, 1]; 0 is a regular grid")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--w", type=int, default=DEFAULT_WIDTH, help="Output width in pixels")
    parser.add_argument("--h", type=int, default=DEFAULT_HEIGHT, help="Output height in pixels")
    parser.add_argument(
        "--view",
        type=float,
        nargs=4,
        metavar=("X0", "Y0", "X1", "Y1"),
        default=None,
        help="Rendered rectangle (top-left, bottom-right); defaults to the noise domain",
    )
    parser.add_argument(
        "--mode",
        choices=("layers", "worley"),
        default="layers",
        help="layers: point/edge/grid overlay, worley: distance plus elevation",
    )
    parser.add_argument("--points", action=argparse.BooleanOptionalAction, default=True, help="Draw the point layer")
    parser.add_argument("--segments", action=argparse.BooleanOptionalAction, default=True, help="Draw the edge layer")
    parser.add_argument("--grid", action=argparse.BooleanOptionalAction, default=True, help="Draw the grid layer")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write deterministic_meta.json and meta.json",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=logging.DEBUG if verbose else logging.INFO)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def rasterize(
    field: DrainageField,
    width: int,
    height: int,
    top_left: tuple[float, float],
    bottom_right: tuple[float, float],
    *,
    mode: str = "layers",
) -> np.ndarray:
    """Sample the field at pixel centers, row by row.

    Pixels in the same fine cell share one network snapshot. Snapshots of the
    current fine row are kept and dropped when the scan leaves that row.
    """

    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")

    xs = top_left[0] + (np.arange(width, dtype=np.float64) + 0.5) * ((bottom_right[0] - top_left[0]) / width)
    ys = top_left[1] + (np.arange(height, dtype=np.float64) + 0.5) * ((bottom_right[1] - top_left[1]) / height)
    worley = mode == "worley"
    sample = field.evaluate_worley if worley else field.evaluate
    needs_network = worley or field.builds_network

    values = np.empty((height, width), dtype=np.float64)
    snapshots: dict[SnapshotKey, NetworkSnapshot] = {}
    fine_row = None
    for row, y in enumerate(ys):
        for col, x in enumerate(xs):
            if not needs_network:
                values[row, col] = sample(float(x), float(y))
                continue
            key = snapshot_key(float(x), float(y))
            if key[1][1] != fine_row:
                fine_row = key[1][1]
                snapshots.clear()
            snap = snapshots.get(key)
            if snap is None:
                snap = snapshots[key] = field.snapshot(float(x), float(y))
            values[row, col] = sample(float(x), float(y), snapshot=snap)
    return values


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    domain = DomainConfig()
    config = FieldConfig(
        seed=args.seed,
        eps=args.eps,
        domain=domain,
        layers=LayerConfig(
            display_points=args.points,
            display_segments=args.segments,
            display_grid=args.grid,
        ),
    )
    try:
        field = DrainageField(config)
    except ConfigError as exc:
        parser.error(str(exc))
    windows = config.windows
    logger.debug(
        "Field configured",
        seed=config.seed,
        eps=config.eps,
        coarse_points=windows.coarse_points,
        fine_points=windows.fine_points,
        subdivisions=windows.subdivisions,
    )

    if args.view is None:
        top_left, bottom_right = domain.noise_top_left, domain.noise_bottom_right
    else:
        top_left, bottom_right = (args.view[0], args.view[1]), (args.view[2], args.view[3])
        if not (top_left[0] < bottom_right[0] and top_left[1] < bottom_right[1]):
            parser.error("--view must satisfy X0 < X1 and Y0 < Y1")

    logger.info("Rendering field", mode=args.mode, width=args.w, height=args.h, seed=args.seed)
    render_start = time.perf_counter()
    values = rasterize(field, args.w, args.h, top_left, bottom_right, mode=args.mode)
    render_seconds = time.perf_counter() - render_start
    logger.info("Field rendered", seconds=round(render_seconds, 3))

    center = ((top_left[0] + bottom_right[0]) / 2.0, (top_left[1] + bottom_right[1]) / 2.0)
    metrics = network_metrics(field.snapshot(*center))

    out_dir = resolve_output_dir(args.out, args.seed, args.w, args.h, overwrite=args.overwrite)
    spacing = ((bottom_right[0] - top_left[0]) / args.w, (bottom_right[1] - top_left[1]) / args.h)
    files = write_field_products(out_dir, values, mode=args.mode, spacing=spacing)

    if args.json:
        deterministic_meta = {
            "seed": args.seed,
            "eps": args.eps,
            "mode": args.mode,
            "width": args.w,
            "height": args.h,
            "view": {"top_left": list(top_left), "bottom_right": list(bottom_right)},
            "config": config.to_dict(),
            "network": asdict(metrics),
            "files": files,
            "field": {
                "min": float(values.min()),
                "max": float(values.max()),
                "mean": float(values.mean()),
            },
        }
        meta = {
            **deterministic_meta,
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "render_seconds": render_seconds,
            "python_version": platform.python_version(),
            "numpy_version": np.__version__,
        }
        write_json(out_dir / "deterministic_meta.json", deterministic_meta)
        write_json(out_dir / "meta.json", meta)

    print(f"Rendered field: {out_dir}")
    print(
        "Network at view center: "
        f"edges={metrics.edge_count}, sinks={metrics.sink_count}, "
        f"fine edges={metrics.fine_edge_count}, reused fine points={metrics.reused_fine_points}"
    )
    print(f"Field range: [{values.min():.4f}, {values.max():.4f}]")
    print(f"Render time: {render_seconds:.3f} s ({args.w}x{args.h})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
