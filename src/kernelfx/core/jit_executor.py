"""JIT-accelerated convolution executor using Numba.

This is the default execution path.  The loops mirror the textbook
definition directly and rely on Numba to compile them to native code; the
kernels release the GIL so row bands can run on several threads at once.
"""

from __future__ import annotations

import numpy as np
from numba import jit


@jit(nopython=True, cache=True, nogil=True)
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
    """JIT-compiled 2-D convolution of rows ``[y0, y1)``."""
    width = plane.shape[1]
    channels = plane.shape[2]
    side = weights.shape[0]

    for y in range(y0, y1):
        for x in range(width):
            for c in range(channels):
                acc = bias
                for ky in range(side):
                    sy = row_table[ky, y]
                    if sy < 0:
                        continue
                    for kx in range(side):
                        sx = col_table[kx, x]
                        if sx < 0:
                            continue
                        acc += weights[ky, kx] * plane[sy, sx, c]
                out[y, x, c] = acc * normalization


@jit(nopython=True, cache=True, nogil=True)
def correlate_horizontal(
    plane: np.ndarray,
    weights: np.ndarray,
    col_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    """JIT-compiled 1-D pass along rows."""
    width = plane.shape[1]
    channels = plane.shape[2]
    taps = weights.shape[0]

    for y in range(y0, y1):
        for x in range(width):
            for c in range(channels):
                acc = 0.0
                for k in range(taps):
                    sx = col_table[k, x]
                    if sx >= 0:
                        acc += weights[k] * plane[y, sx, c]
                out[y, x, c] = acc


@jit(nopython=True, cache=True, nogil=True)
def correlate_vertical(
    plane: np.ndarray,
    weights: np.ndarray,
    row_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    """JIT-compiled 1-D pass along columns."""
    width = plane.shape[1]
    channels = plane.shape[2]
    taps = weights.shape[0]

    for y in range(y0, y1):
        for x in range(width):
            for c in range(channels):
                acc = 0.0
                for k in range(taps):
                    sy = row_table[k, y]
                    if sy >= 0:
                        acc += weights[k] * plane[sy, x, c]
                out[y, x, c] = acc
