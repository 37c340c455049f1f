"""Pure-Python reference executor.

Slow, but free of any vectorisation or compilation tricks: each output
sample is accumulated with plain Python arithmetic exactly as the weighted
sum is written on paper.  The test-suite uses it as the reference the faster
executors are compared against.
"""

from __future__ import annotations

import numpy as np


def convolve_rows(
    plane: np.ndarray,
    weights: np.ndarray,
    row_table: np.ndarray,
    col_table: np.ndarray,
    bias: float,
    normalization: float,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    """Accumulate the 2-D convolution of rows ``[y0, y1)`` sample by sample."""

    width = plane.shape[1]
    channels = plane.shape[2]
    side = weights.shape[0]
    data = plane.tolist()
    taps = weights.tolist()
    rows = row_table.tolist()
    cols = col_table.tolist()

    for y in range(y0, y1):
        for x in range(width):
            for c in range(channels):
                acc = bias
                for ky in range(side):
                    sy = rows[ky][y]
                    if sy < 0:
                        continue
                    source_row = data[sy]
                    for kx in range(side):
                        sx = cols[kx][x]
                        if sx < 0:
                            continue
                        acc += taps[ky][kx] * source_row[sx][c]
                out[y, x, c] = acc * normalization


def correlate_horizontal(
    plane: np.ndarray,
    weights: np.ndarray,
    col_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    width = plane.shape[1]
    channels = plane.shape[2]
    data = plane.tolist()
    taps = weights.tolist()
    cols = col_table.tolist()

    for y in range(y0, y1):
        source_row = data[y]
        for x in range(width):
            for c in range(channels):
                acc = 0.0
                for k, weight in enumerate(taps):
                    sx = cols[k][x]
                    if sx >= 0:
                        acc += weight * source_row[sx][c]
                out[y, x, c] = acc


def correlate_vertical(
    plane: np.ndarray,
    weights: np.ndarray,
    row_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    width = plane.shape[1]
    channels = plane.shape[2]
    data = plane.tolist()
    taps = weights.tolist()
    rows = row_table.tolist()

    for y in range(y0, y1):
        for x in range(width):
            for c in range(channels):
                acc = 0.0
                for k, weight in enumerate(taps):
                    sy = rows[k][y]
                    if sy >= 0:
                        acc += weight * data[sy][x][c]
                out[y, x, c] = acc
