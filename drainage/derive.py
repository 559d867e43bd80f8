"""Derived raster products from sampled fields."""

from __future__ import annotations

import numpy as np


def hillshade(
    field: np.ndarray,
    *,
    spacing: tuple[float, float],
    azimuth_deg: float = 315.0,
    altitude_deg: float = 45.0,
    relief: float = 1.0,
) -> np.ndarray:
    """Shade a Worley height raster as 8-bit grayscale.

    `spacing` is the (x, y) distance in field units between neighbouring pixel
    centers, so views with non-square pixels shade correctly. Worley values are
    in the same units as the plane, and `relief` scales them before shading.
    """

    if field.ndim != 2:
        raise ValueError("field must be a 2D array")
    dx, dy = spacing
    if dx <= 0 or dy <= 0:
        raise ValueError("spacing must be positive on both axes")

    dz_dy, dz_dx = np.gradient(field.astype(np.float64) * float(relief), dy, dx)

    slope = np.pi / 2.0 - np.arctan(np.hypot(dz_dx, dz_dy))
    aspect = np.arctan2(-dz_dx, dz_dy)

    azimuth = np.deg2rad(azimuth_deg)
    altitude = np.deg2rad(altitude_deg)

    shaded = (
        np.sin(altitude) * np.sin(slope)
        + np.cos(altitude) * np.cos(slope) * np.cos(azimuth - aspect)
    )
    return np.round(np.clip(shaded, 0.0, 1.0) * 255.0).astype(np.uint8)


def stretch_u16(values: np.ndarray) -> np.ndarray:
    """Stretch the full value range of a raster over 16-bit grayscale."""

    lo = float(values.min())
    scale = max(float(values.max()) - lo, 1e-9)
    return np.round(np.clip((values - lo) / scale, 0.0, 1.0) * 65535.0).astype(np.uint16)


def unit_preview_u8(values: np.ndarray) -> np.ndarray:
    """Encode layer values, already in [0, 1], to 8-bit grayscale without rescaling."""

    return np.round(np.clip(values, 0.0, 1.0) * 255.0).astype(np.uint8)


def worley_preview_u8(values: np.ndarray, *, percentiles: tuple[float, float] = (1.0, 99.0)) -> np.ndarray:
    """Map Worley values to 8-bit grayscale between two percentiles; network lines come out dark."""

    lo, hi = np.percentile(values, percentiles)
    scale = max(hi - lo, 1e-9)
    return np.round(np.clip((values - lo) / scale, 0.0, 1.0) * 255.0).astype(np.uint8)
