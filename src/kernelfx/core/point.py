"""Per-sample point transforms and the engine that applies them.

A point transform maps one sample to one sample with no regard for its
neighbours.  For 8-bit input the engine evaluates the transform once for each
of the 256 possible values and indexes the resulting lookup table, which is
far cheaper than calling the function per sample on large images.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Union

import numpy as np

from .buffer import PixelBuffer, clamp_samples

_LOGGER = logging.getLogger(__name__)


class PointTransform(ABC):
    """Stateless ``sample -> sample`` function with its parameters."""

    @abstractmethod
    def __call__(self, sample: float) -> float:
        """Transform a single sample."""

    def apply(self, samples: np.ndarray) -> np.ndarray:
        """Transform an array of samples; subclasses vectorise this."""

        return np.vectorize(self.__call__, otypes=[np.float64])(samples)


class Brightness(PointTransform):
    """Add a constant offset to every sample."""

    def __init__(self, delta: float) -> None:
        self.delta = float(delta)

    def __call__(self, sample: float) -> float:
        return sample + self.delta

    def apply(self, samples: np.ndarray) -> np.ndarray:
        return np.asarray(samples, dtype=np.float64) + self.delta

    def __repr__(self) -> str:
        return f"Brightness(delta={self.delta:g})"


class Contrast(PointTransform):
    """Scale samples about *midpoint*: ``(s - midpoint) * factor + midpoint``."""

    def __init__(self, factor: float, midpoint: float = 128.0) -> None:
        self.factor = float(factor)
        self.midpoint = float(midpoint)

    def __call__(self, sample: float) -> float:
        return (sample - self.midpoint) * self.factor + self.midpoint

    def apply(self, samples: np.ndarray) -> np.ndarray:
        return (np.asarray(samples, dtype=np.float64) - self.midpoint) * self.factor + self.midpoint

    def __repr__(self) -> str:
        return f"Contrast(factor={self.factor:g}, midpoint={self.midpoint:g})"


class _CallableTransform(PointTransform):
    """Adapter turning an arbitrary callable into a :class:`PointTransform`."""

    def __init__(self, func: Callable[[float], float]) -> None:
        self._func = func

    def __call__(self, sample: float) -> float:
        return float(self._func(sample))

    def __repr__(self) -> str:
        return f"PointTransform({self._func!r})"


TransformLike = Union[PointTransform, Callable[[float], float]]


def as_point_transform(func: TransformLike) -> PointTransform:
    """Return *func* as a :class:`PointTransform`, wrapping plain callables."""

    if isinstance(func, PointTransform):
        return func
    if not callable(func):
        raise TypeError(f"point transform must be callable, got {type(func).__name__}")
    return _CallableTransform(func)


def build_lut(func: TransformLike) -> np.ndarray:
    """Pre-compute *func* for every possible 8-bit sample value."""

    transform = as_point_transform(func)
    return clamp_samples([transform(float(value)) for value in range(256)])


def transform(image: PixelBuffer, func: TransformLike) -> PixelBuffer:
    """Apply *func* to every sample of *image* and clamp to ``[0, 255]``."""

    point = as_point_transform(func)
    samples = image.samples
    if samples.dtype == np.uint8:
        _LOGGER.debug("point transform %r via lookup table", point)
        result = build_lut(point)[samples]
    else:
        _LOGGER.debug("point transform %r on %s samples", point, samples.dtype)
        result = clamp_samples(point.apply(samples))
    return image.with_samples(result)
