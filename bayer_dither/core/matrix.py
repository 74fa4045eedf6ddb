"""Bayer threshold matrices and coordinate tiling.

Raw tables hold every integer 0..N²-1 exactly once. Thresholds are the raw
values scaled onto the pixel range as floor(raw * (max + 1) / N²), so an 8-bit
2x2 table becomes [[0, 128], [192, 64]].
"""

from __future__ import annotations

import numpy as np

from bayer_dither.core.errors import InvalidMatrixSize


def _frozen(rows: list[list[int]]) -> np.ndarray:
    table = np.array(rows, dtype=np.int64)
    table.setflags(write=False)
    return table


BAYER_2 = _frozen([
    [0, 2],
    [3, 1],
])

BAYER_4 = _frozen([
    [0, 8, 2, 10],
    [12, 4, 14, 6],
    [3, 11, 1, 9],
    [15, 7, 13, 5],
])

BAYER_8 = _frozen([
    [0, 32, 8, 40, 2, 34, 10, 42],
    [48, 16, 56, 24, 50, 18, 58, 26],
    [12, 44, 4, 36, 14, 46, 6, 38],
    [60, 28, 52, 20, 62, 30, 54, 22],
    [3, 35, 11, 43, 1, 33, 9, 41],
    [51, 19, 59, 27, 49, 17, 57, 25],
    [15, 47, 7, 39, 13, 45, 5, 37],
    [63, 31, 55, 23, 61, 29, 53, 21],
])

BAYER_MATRICES: dict[int, np.ndarray] = {
    2: BAYER_2,
    4: BAYER_4,
    8: BAYER_8,
}

MATRIX_SIZES: tuple[int, ...] = tuple(BAYER_MATRICES)


def bayer_matrix(size: int) -> np.ndarray:
    """Return the raw (read-only) Bayer table for size 2, 4 or 8."""
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise InvalidMatrixSize(size)
    if int(size) not in BAYER_MATRICES:
        raise InvalidMatrixSize(size)
    return BAYER_MATRICES[int(size)]


def normalize_matrix(raw: np.ndarray, max_value: int = 255) -> np.ndarray:
    """Scale a raw table onto [0, max_value]."""
    cells = raw.shape[0] * raw.shape[1]
    table = (raw * (max_value + 1)) // cells
    table.setflags(write=False)
    return table


class ThresholdSampler:
    """Threshold lookup for arbitrary image coordinates.

    The matrix repeats unconditionally across the plane, so any
    non-negative (x, y) maps to ``table[y % N][x % N]``.
    """

    def __init__(self, size: int, max_value: int = 255) -> None:
        self.table = normalize_matrix(bayer_matrix(size), max_value)
        self.size = int(size)
        self.max_value = max_value

    def threshold_at(self, x: int, y: int) -> int:
        if x < 0 or y < 0:
            raise ValueError(f"Coordinates must be non-negative, got ({x}, {y})")
        return int(self.table[y % self.size, x % self.size])

    def threshold_map(self, width: int, height: int) -> np.ndarray:
        """Tile the table over a (height, width) plane."""
        reps_y = -(-height // self.size)
        reps_x = -(-width // self.size)
        return np.tile(self.table, (reps_y, reps_x))[:height, :width]
