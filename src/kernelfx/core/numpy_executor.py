"""NumPy vectorised executor for the convolution engine.

Instead of visiting pixels one by one, each kernel tap gathers a whole band
of shifted neighbours through the border lookup tables and accumulates it in
one array operation.  The plane is padded with a single trailing zero row and
column so that :data:`~kernelfx.core.border.DROPPED` (``-1``) entries in the
tables index the padding and contribute nothing.
"""

from __future__ import annotations

import numpy as np


def _zero_padded(plane: np.ndarray, rows: bool, cols: bool) -> np.ndarray:
    """Return *plane* with one zero row and/or column appended."""

    return np.pad(plane, ((0, int(rows)), (0, int(cols)), (0, 0)))


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
    """Write the 2-D convolution of rows ``[y0, y1)`` into *out*."""

    height, width, channels = plane.shape
    if y1 <= y0:
        return

    padded = _zero_padded(plane, rows=True, cols=True)
    acc = np.full((y1 - y0, width, channels), bias, dtype=np.float64)
    side = weights.shape[0]
    for ky in range(side):
        band = padded[row_table[ky, y0:y1]]
        for kx in range(side):
            weight = weights[ky, kx]
            if weight == 0.0:
                continue
            acc += weight * band[:, col_table[kx]]
    out[y0:y1] = acc * normalization


def correlate_horizontal(
    plane: np.ndarray,
    weights: np.ndarray,
    col_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    """1-D pass along each row for rows ``[y0, y1)``."""

    if y1 <= y0:
        return

    padded = _zero_padded(plane[y0:y1], rows=False, cols=True)
    acc = np.zeros((y1 - y0,) + plane.shape[1:], dtype=np.float64)
    for k in range(weights.shape[0]):
        weight = weights[k]
        if weight == 0.0:
            continue
        acc += weight * padded[:, col_table[k]]
    out[y0:y1] = acc


def correlate_vertical(
    plane: np.ndarray,
    weights: np.ndarray,
    row_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    """1-D pass along each column, producing rows ``[y0, y1)``."""

    if y1 <= y0:
        return

    padded = _zero_padded(plane, rows=True, cols=False)
    acc = np.zeros((y1 - y0,) + plane.shape[1:], dtype=np.float64)
    for k in range(weights.shape[0]):
        weight = weights[k]
        if weight == 0.0:
            continue
        acc += weight * padded[row_table[k, y0:y1]]
    out[y0:y1] = acc
