"""Output serialization for rendered field rasters."""

from __future__ import annotations

import json
from pathlib import Path
import shutil
from typing import Any

import numpy as np
from PIL import Image

from drainage.derive import hillshade, stretch_u16, unit_preview_u8, worley_preview_u8


def resolve_output_dir(
    out_root: str | Path,
    seed: int,
    width: int,
    height: int,
    *,
    overwrite: bool,
) -> Path:
    """Create and return ``<out_root>/seed-<seed>/<width>x<height>`` for one render."""

    target = Path(out_root) / f"seed-{seed}" / f"{width}x{height}"
    if target.exists() and any(target.iterdir()):
        if not overwrite:
            raise FileExistsError(
                f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
            )
        clean_output_dir(target)
    target.mkdir(parents=True, exist_ok=True)
    return target


def clean_output_dir(target: Path) -> None:
    """Delete all children of target directory."""

    for child in target.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)


def write_field_products(
    out_dir: Path,
    values: np.ndarray,
    *,
    mode: str,
    spacing: tuple[float, float],
) -> list[str]:
    """Write the raw raster and its previews; return the file names in write order.

    Layer renders are already in [0, 1] and keep their absolute scale in the
    8-bit preview. Worley renders are stretched and also get a hillshade.
    """

    written = ["field.npy", "field_16.png", "field_8.png"]
    write_field_npy(out_dir / "field.npy", values)
    write_png(out_dir / "field_16.png", stretch_u16(values))
    if mode == "worley":
        write_png(out_dir / "field_8.png", worley_preview_u8(values))
        write_png(out_dir / "hillshade.png", hillshade(values, spacing=spacing))
        written.append("hillshade.png")
    else:
        write_png(out_dir / "field_8.png", unit_preview_u8(values))
    return written


def write_field_npy(path: str | Path, values: np.ndarray) -> None:
    """Store the sampled float64 values unchanged."""

    np.save(Path(path), np.ascontiguousarray(values, dtype=np.float64), allow_pickle=False)


def write_png(path: str | Path, raster: np.ndarray) -> None:
    if raster.dtype not in (np.uint8, np.uint16):
        raise ValueError(f"PNG rasters must be uint8 or uint16, got {raster.dtype}")
    Image.fromarray(raster).save(Path(path))


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    Path(path).write_text(text + "\n", encoding="utf-8")
