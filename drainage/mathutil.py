"""Scalar interpolation and falloff helpers."""

from __future__ import annotations

import numpy as np


def remap(x: float, in_start: float, in_end: float, out_start: float, out_end: float) -> float:
    """Linearly map `x` from one interval to another, clamping outside the input interval."""

    if in_start == in_end:
        raise ValueError("remap input interval must not be empty")
    if x < in_start:
        return out_start
    if x > in_end:
        return out_end
    return out_start + (out_end - out_start) * (x - in_start) / (in_end - in_start)


def remap_array(x: np.ndarray, in_start: float, in_end: float, out_start: float, out_end: float) -> np.ndarray:
    """Elementwise `remap`; produces the same floats as the scalar form."""

    if in_start == in_end:
        raise ValueError("remap input interval must not be empty")
    x = np.asarray(x, dtype=np.float64)
    mapped = out_start + (out_end - out_start) * (x - in_start) / (in_end - in_start)
    mapped = np.where(x < in_start, out_start, mapped)
    return np.where(x > in_end, out_end, mapped)


def clamp(v: float, lo: float, hi: float) -> float:
    if lo > hi:
        raise ValueError("clamp bounds are inverted")
    if v < lo:
        return lo
    if v > hi:
        return hi
    return v


def lerp(a: float, b: float, x: float) -> float:
    # Exact at both ends: lerp(a, b, 0) == a and lerp(a, b, 1) == b.
    return x * b + (a - a * x)


def lerp_clamp(a: float, b: float, x: float) -> float:
    if x < 0.0:
        return a
    if x > 1.0:
        return b
    return lerp(a, b, x)


def wyvill_galin(distance: float, radius: float, exponent: float) -> float:
    """Compact falloff `(1 - (d/R)^2)^k` inside the radius, 0 outside."""

    if distance >= radius:
        return 0.0
    ratio = distance / radius
    return (1.0 - ratio * ratio) ** exponent
