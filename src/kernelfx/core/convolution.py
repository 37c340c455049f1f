"""Generic kernel convolution engine.

Every spatial filter funnels through :func:`convolve`: the kernel supplies
the weights, the border policy supplies per-axis lookup tables and the
selected executor runs the inner loops.  Channels are kept on their own axis
throughout, so a kernel never mixes samples from different channels.

Output rows can be split into bands that run on a thread pool.  Bands write
disjoint row ranges of a preallocated array and are joined before the call
returns, so each output sample is written exactly once.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from types import ModuleType
from typing import Callable, Optional

import numpy as np

from ..config import BACKENDS, Settings, load_settings
from ..errors import InvalidParameterError, ShapeMismatchError
from . import fallback_executor, jit_executor, numpy_executor
from .border import BorderPolicy, get_border_policy
from .buffer import PixelBuffer, clamp_samples
from .kernel import Kernel

_LOGGER = logging.getLogger(__name__)

# Upper bound on the stacked neighbourhood windows a median chunk may allocate.
MEDIAN_CHUNK_BYTES = 32 * 1024 * 1024

_EXECUTORS: dict[str, ModuleType] = {
    "jit": jit_executor,
    "numpy": numpy_executor,
    "python": fallback_executor,
}


def _resolve_executor(backend: Optional[str], settings: Settings) -> tuple[str, ModuleType]:
    name = settings.resolved_backend() if backend is None else str(backend).lower()
    if name == "auto":
        name = "jit"
    executor = _EXECUTORS.get(name)
    if executor is None:
        raise InvalidParameterError(
            f"unknown backend {backend!r}; expected one of {', '.join(BACKENDS)}"
        )
    return name, executor


def row_bands(height: int, settings: Settings) -> list[tuple[int, int]]:
    """Split ``[0, height)`` into contiguous bands, one per worker.

    Images too small to give every worker ``band_min_rows`` rows are processed
    as a single band.
    """

    workers = min(settings.workers, max(1, height // settings.band_min_rows))
    if workers <= 1:
        return [(0, height)]
    edges = np.linspace(0, height, workers + 1).round().astype(int)
    return [(int(start), int(stop)) for start, stop in zip(edges[:-1], edges[1:]) if stop > start]


def _run_banded(task: Callable[[int, int], None], bands: list[tuple[int, int]]) -> None:
    if len(bands) == 1:
        y0, y1 = bands[0]
        task(y0, y1)
        return
    with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="kernelfx-band") as pool:
        # Consuming the iterator re-raises the first worker exception here.
        list(pool.map(lambda band: task(*band), bands))


def _working_plane(image: PixelBuffer) -> np.ndarray:
    """Return a private, C-contiguous ``float64`` copy of *image*."""

    return np.array(image.as_array(), dtype=np.float64, order="C")


def _checked_matrix(kernel: Kernel) -> np.ndarray:
    radius = int(kernel.radius)
    if radius < 0:
        raise InvalidParameterError(f"kernel radius must be >= 0, got {radius}")
    side = 2 * radius + 1
    weights = np.array(kernel.weights, dtype=np.float64).reshape(-1)
    if weights.size != side * side:
        raise ShapeMismatchError(
            f"radius {radius} kernel needs {side * side} weights, got {weights.size}"
        )
    return weights.reshape(side, side)


def convolve_raw(
    image: PixelBuffer,
    kernel: Kernel,
    border: BorderPolicy | str | None = None,
    *,
    separable: Optional[bool] = None,
    backend: Optional[str] = None,
) -> np.ndarray:
    """Return the unclamped ``(H, W, C)`` convolution of *image* with *kernel*.

    ``separable=None`` uses the kernel's 1-D factors when it has them,
    ``False`` forces the direct 2-D path and ``True`` requires factors.
    """

    factors = getattr(kernel, "factors", None)
    if separable is True and factors is None:
        raise InvalidParameterError("kernel has no separable factors")
    matrix = _checked_matrix(kernel)

    if factors is not None and separable is not False:
        column, row = factors
        return separable_raw(
            image,
            column,
            row,
            border,
            normalization=kernel.normalization,
            bias=kernel.bias,
            backend=backend,
        )

    settings = load_settings()
    name, executor = _resolve_executor(backend, settings)
    policy = get_border_policy(border)
    radius = (matrix.shape[0] - 1) // 2
    plane = _working_plane(image)
    row_table = policy.offset_table(radius, image.height)
    col_table = policy.offset_table(radius, image.width)
    out = np.empty_like(plane)
    bands = row_bands(image.height, settings)
    bias = float(kernel.bias)
    normalization = float(kernel.normalization)

    _LOGGER.debug(
        "convolve %dx%dx%d with radius %d kernel (%s border, %s backend, %d band(s))",
        image.width,
        image.height,
        image.channels,
        radius,
        policy.name,
        name,
        len(bands),
    )

    def task(y0: int, y1: int) -> None:
        executor.convolve_rows(plane, matrix, row_table, col_table, bias, normalization, y0, y1, out)

    _run_banded(task, bands)
    return out


def convolve(
    image: PixelBuffer,
    kernel: Kernel,
    border: BorderPolicy | str | None = None,
    *,
    separable: Optional[bool] = None,
    backend: Optional[str] = None,
) -> PixelBuffer:
    """Convolve *image* with *kernel* and clamp the result to ``[0, 255]``."""

    raw = convolve_raw(image, kernel, border, separable=separable, backend=backend)
    return image.with_samples(clamp_samples(raw))


def separable_raw(
    image: PixelBuffer,
    column: np.ndarray,
    row: np.ndarray,
    border: BorderPolicy | str | None = None,
    *,
    normalization: float = 1.0,
    bias: float = 0.0,
    backend: Optional[str] = None,
) -> np.ndarray:
    """Two-pass equivalent of convolving with ``outer(column, row)``, unclamped."""

    column = np.array(column, dtype=np.float64).reshape(-1)
    row = np.array(row, dtype=np.float64).reshape(-1)
    if column.size != row.size or column.size % 2 == 0:
        raise ShapeMismatchError(
            f"separable factors must share an odd length, got {column.size} and {row.size}"
        )

    settings = load_settings()
    name, executor = _resolve_executor(backend, settings)
    policy = get_border_policy(border)
    radius = (row.size - 1) // 2
    plane = _working_plane(image)
    row_table = policy.offset_table(radius, image.height)
    col_table = policy.offset_table(radius, image.width)
    bands = row_bands(image.height, settings)

    _LOGGER.debug(
        "separable convolve %dx%dx%d with %d taps (%s border, %s backend, %d band(s))",
        image.width,
        image.height,
        image.channels,
        row.size,
        policy.name,
        name,
        len(bands),
    )

    horizontal = np.empty_like(plane)
    _run_banded(
        lambda y0, y1: executor.correlate_horizontal(plane, row, col_table, y0, y1, horizontal),
        bands,
    )
    vertical = np.empty_like(plane)
    _run_banded(
        lambda y0, y1: executor.correlate_vertical(horizontal, column, row_table, y0, y1, vertical),
        bands,
    )
    return (vertical + float(bias)) * float(normalization)


def convolve_separable(
    image: PixelBuffer,
    column: np.ndarray,
    row: np.ndarray,
    border: BorderPolicy | str | None = None,
    *,
    normalization: float = 1.0,
    bias: float = 0.0,
    backend: Optional[str] = None,
) -> PixelBuffer:
    """Clamped result of :func:`separable_raw`."""

    raw = separable_raw(
        image,
        column,
        row,
        border,
        normalization=normalization,
        bias=bias,
        backend=backend,
    )
    return image.with_samples(clamp_samples(raw))


def median(
    image: PixelBuffer,
    radius: int,
    border: BorderPolicy | str | None = None,
) -> PixelBuffer:
    """Per-channel median over a ``(2 * radius + 1)`` square neighbourhood.

    Neighbours dropped by the border policy are left out of the median rather
    than counted as zeros.
    """

    if isinstance(radius, bool) or int(radius) != radius or radius < 0:
        raise InvalidParameterError(f"median radius must be a non-negative integer, got {radius!r}")
    radius = int(radius)
    policy = get_border_policy(border)
    plane = _working_plane(image)
    row_table = policy.offset_table(radius, image.height)
    col_table = policy.offset_table(radius, image.width)

    # Trailing NaN row/column absorbs the -1 entries of dropped neighbours.
    padded = np.pad(plane, ((0, 1), (0, 1), (0, 0)), constant_values=np.nan)
    side = 2 * radius + 1
    out = np.empty_like(plane)
    chunk = median_chunk_rows(side, image.width, image.channels)
    bands = row_bands(image.height, load_settings())

    _LOGGER.debug(
        "median %dx%dx%d radius %d (%d band(s), %d rows per chunk)",
        image.width,
        image.height,
        image.channels,
        radius,
        len(bands),
        chunk,
    )

    def task(y0: int, y1: int) -> None:
        for start in range(y0, y1, chunk):
            _median_rows(padded, row_table, col_table, start, min(start + chunk, y1), out)

    _run_banded(task, bands)
    return image.with_samples(clamp_samples(out))


def median_chunk_rows(side: int, width: int, channels: int) -> int:
    """Rows per median chunk so the stacked windows stay under the byte budget."""

    per_row = side * side * width * channels * np.dtype(np.float64).itemsize
    return max(1, MEDIAN_CHUNK_BYTES // per_row)


def _median_rows(
    padded: np.ndarray,
    row_table: np.ndarray,
    col_table: np.ndarray,
    y0: int,
    y1: int,
    out: np.ndarray,
) -> None:
    side = row_table.shape[0]
    width = col_table.shape[1]
    windows = np.empty((side * side, y1 - y0, width, padded.shape[2]), dtype=np.float64)
    for ky in range(side):
        rows = padded[row_table[ky, y0:y1]]
        for kx in range(side):
            windows[ky * side + kx] = rows[:, col_table[kx]]
    out[y0:y1] = np.nanmedian(windows, axis=0)
