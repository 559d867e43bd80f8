"""Fixed-size grid windows addressed by offset from a focal cell.

A window stores its focal cell and its resolution, and the focal cell is always
the array center. Array indices are derived from continuous coordinates, so no
caller has to carry integer cell coordinates alongside a window.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import math

import numpy as np


class WindowRangeError(IndexError):
    """Raised when a lookup falls outside a window's fixed extent."""


def cell_of(x: float, y: float, resolution: int = 1) -> tuple[int, int]:
    """Integer cell containing (x, y) on a grid of `resolution` cells per unit."""

    return math.floor(x * resolution), math.floor(y * resolution)


def quadrant_of(x: float, y: float) -> tuple[int, int]:
    """Which half-cell quadrant of its unit cell (x, y) lies in, as (qx, qy) in {0, 1}."""

    cx, cy = cell_of(x, y, 1)
    fx, fy = cell_of(x, y, 2)
    return fx - 2 * cx, fy - 2 * cy


@dataclass(frozen=True, eq=False)
class _Window(ABC):
    """Focal cell and resolution shared by every window type."""

    cell: tuple[int, int]
    resolution: int

    @property
    @abstractmethod
    def size(self) -> int:
        """Cells per side of the square array."""

    @property
    def center(self) -> int:
        return self.size // 2

    def index_of_cell(self, cx: int, cy: int) -> tuple[int, int]:
        """Array (row, column) of absolute cell (cx, cy)."""

        i = self.center + cy - self.cell[1]
        j = self.center + cx - self.cell[0]
        if not (0 <= i < self.size and 0 <= j < self.size):
            raise WindowRangeError(
                f"cell ({cx}, {cy}) is outside the {self.size}x{self.size} window around {self.cell}"
            )
        return i, j

    def index_of(self, x: float, y: float) -> tuple[int, int]:
        return self.index_of_cell(*cell_of(x, y, self.resolution))

    def contains_cell(self, cx: int, cy: int) -> bool:
        i = self.center + cy - self.cell[1]
        j = self.center + cx - self.cell[0]
        return 0 <= i < self.size and 0 <= j < self.size

    def block(self, i: int, j: int, radius: int) -> tuple[slice, slice]:
        """Slices of the square block of `radius` around (i, j), range-checked."""

        if i - radius < 0 or j - radius < 0 or i + radius >= self.size or j + radius >= self.size:
            raise WindowRangeError(
                f"neighborhood {radius} around ({i}, {j}) exceeds the {self.size}x{self.size} window"
            )
        return slice(i - radius, i + radius + 1), slice(j - radius, j + radius + 1)


@dataclass(frozen=True, eq=False)
class PointWindow(_Window):
    """Sample points, ``xy`` of shape (N, N, 2)."""

    xy: np.ndarray

    @property
    def size(self) -> int:
        return int(self.xy.shape[0])


@dataclass(frozen=True, eq=False)
class SegmentWindow(_Window):
    """One directed edge per cell, ``ends`` of shape (N, N, 2, 3)."""

    ends: np.ndarray

    @property
    def size(self) -> int:
        return int(self.ends.shape[0])

    def near(self, x: float, y: float, radius: int) -> np.ndarray:
        """Edges in the block around the cell of (x, y), flattened to (K, 2, 3)."""

        rows, cols = self.block(*self.index_of(x, y), radius)
        return self.ends[rows, cols].reshape(-1, 2, 3)


@dataclass(frozen=True, eq=False)
class ChainWindow(_Window):
    """Smoothed chains, ``links`` of shape (N, N, D, 2, 3)."""

    links: np.ndarray

    @property
    def size(self) -> int:
        return int(self.links.shape[0])

    @property
    def subdivisions(self) -> int:
        return int(self.links.shape[2])

    def near(self, x: float, y: float, radius: int) -> np.ndarray:
        """Chain links in the block around the cell of (x, y), flattened to (K, 2, 3)."""

        rows, cols = self.block(*self.index_of(x, y), radius)
        return self.links[rows, cols].reshape(-1, 2, 3)

    def nodes(self) -> np.ndarray:
        """Every link endpoint, shape (M, 3)."""

        return self.links.reshape(-1, 3)
