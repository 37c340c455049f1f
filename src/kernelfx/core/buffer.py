"""Immutable pixel buffer shared by every filter.

Samples are stored as a flat, row-major array ordered per pixel and then per
channel, i.e. the sample for ``(x, y, c)`` lives at
``(y * width + x) * channels + c``.  The array is copied on construction and
marked read-only so no filter can alter a buffer another caller still holds.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from ..errors import OutOfBoundsError, ShapeMismatchError

SAMPLE_MIN = 0.0
SAMPLE_MAX = 255.0

SampleData = Union[np.ndarray, Sequence[float]]


class PixelBuffer:
    """Rectangular grid of samples with 1 (gray) to 4 (RGBA) channels."""

    __slots__ = ("_width", "_height", "_channels", "_samples")

    def __init__(self, width: int, height: int, channels: int, samples: SampleData) -> None:
        width = int(width)
        height = int(height)
        channels = int(channels)
        if width < 1 or height < 1:
            raise ShapeMismatchError(
                f"image dimensions must be positive, got {width}x{height}"
            )
        if channels not in (1, 2, 3, 4):
            raise ShapeMismatchError(f"channel count must be 1-4, got {channels}")

        array = np.array(samples, copy=True)
        if not (np.issubdtype(array.dtype, np.integer) or np.issubdtype(array.dtype, np.floating)):
            raise ShapeMismatchError(f"samples must be real numbers, got dtype {array.dtype}")
        if np.issubdtype(array.dtype, np.floating) and not np.isfinite(array).all():
            raise ShapeMismatchError("samples must be finite")
        array = array.reshape(-1)
        expected = width * height * channels
        if array.size != expected:
            raise ShapeMismatchError(
                f"expected {expected} samples for {width}x{height}x{channels}, got {array.size}"
            )
        array.flags.writeable = False

        self._width = width
        self._height = height
        self._channels = channels
        self._samples = array

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------
    @classmethod
    def zeros(cls, width: int, height: int, channels: int) -> "PixelBuffer":
        """Return a zero-filled ``float64`` buffer of the given shape."""

        if int(width) < 1 or int(height) < 1 or int(channels) < 1:
            raise ShapeMismatchError(
                f"cannot allocate a {width}x{height}x{channels} buffer"
            )
        return cls(width, height, channels, np.zeros(int(width) * int(height) * int(channels)))

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an ``(H, W)`` or ``(H, W, C)`` array."""

        data = np.asarray(array)
        if data.ndim == 2:
            data = data[:, :, None]
        if data.ndim != 3:
            raise ShapeMismatchError(f"expected a 2-D or 3-D array, got shape {data.shape}")
        height, width, channels = data.shape
        return cls(width, height, channels, data.reshape(-1))

    def with_samples(self, array: np.ndarray) -> "PixelBuffer":
        """Return a new buffer with this buffer's shape and *array*'s samples."""

        return PixelBuffer(self._width, self._height, self._channels, array)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def shape(self) -> tuple[int, int, int]:
        """``(width, height, channels)``."""

        return (self._width, self._height, self._channels)

    @property
    def samples(self) -> np.ndarray:
        """Flat read-only sample array."""

        return self._samples

    @property
    def has_alpha(self) -> bool:
        """True for gray+alpha and RGBA buffers."""

        return self._channels in (2, 4)

    def sample(self, x: int, y: int, channel: int) -> float:
        """Return the sample at ``(x, y, channel)``."""

        if not 0 <= x < self._width:
            raise OutOfBoundsError(f"x={x} outside [0, {self._width})")
        if not 0 <= y < self._height:
            raise OutOfBoundsError(f"y={y} outside [0, {self._height})")
        if not 0 <= channel < self._channels:
            raise OutOfBoundsError(f"channel={channel} outside [0, {self._channels})")
        return self._samples[(y * self._width + x) * self._channels + channel].item()

    def as_array(self) -> np.ndarray:
        """Return a read-only ``(H, W, C)`` view over the samples."""

        return self._samples.reshape(self._height, self._width, self._channels)

    def to_uint8(self) -> "PixelBuffer":
        """Return a copy with samples rounded and clipped to 8-bit integers."""

        if self._samples.dtype == np.uint8:
            return self
        rounded = np.rint(np.clip(self._samples, SAMPLE_MIN, SAMPLE_MAX))
        return self.with_samples(rounded.astype(np.uint8))

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._samples, other._samples))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"PixelBuffer(width={self._width}, height={self._height}, "
            f"channels={self._channels}, dtype={self._samples.dtype})"
        )


def clamp_samples(values: np.ndarray) -> np.ndarray:
    """Return *values* as ``float64`` clipped to the 8-bit sample range."""

    return np.clip(np.asarray(values, dtype=np.float64), SAMPLE_MIN, SAMPLE_MAX)
