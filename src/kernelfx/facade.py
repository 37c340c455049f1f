"""Named filter entry points.

Each function validates its parameters, builds the kernel or point transform
it needs, runs it through the matching engine and returns a new
:class:`~kernelfx.core.buffer.PixelBuffer` with the input's shape.  Invalid
parameters raise :class:`~kernelfx.errors.InvalidParameterError`; they are
never clamped into range.

Spatial filters accept ``preserve_alpha``.  When set on a 2- or 4-channel
image the last channel is copied through unchanged instead of being
filtered like the colour channels.
"""

from __future__ import annotations

import logging
import math
from numbers import Integral, Real
from typing import Optional

import numpy as np

from .core import convolution, kernels, point
from .core.border import BorderPolicy
from .core.buffer import PixelBuffer, clamp_samples
from .errors import InvalidParameterError, ShapeMismatchError

_LOGGER = logging.getLogger(__name__)

BRIGHTNESS_LIMIT = 255
CONTRAST_MIDPOINT = 128.0


def _require_real(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}")
    numeric = float(value)
    if not math.isfinite(numeric):
        raise InvalidParameterError(f"{name} must be finite, got {value!r}")
    return numeric


def _require_positive(name: str, value: object) -> float:
    numeric = _require_real(name, value)
    if numeric <= 0.0:
        raise InvalidParameterError(f"{name} must be > 0, got {value!r}")
    return numeric


def _require_radius(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 1:
        raise InvalidParameterError(f"radius must be an integer >= 1, got {value!r}")
    return int(value)


def _finish(image: PixelBuffer, samples: np.ndarray, preserve_alpha: bool) -> PixelBuffer:
    """Clamp *samples* into a buffer shaped like *image*, restoring alpha if asked."""

    result = clamp_samples(samples).reshape(image.height, image.width, image.channels)
    if preserve_alpha and image.has_alpha:
        result[..., -1] = image.as_array()[..., -1]
    return image.with_samples(result)


def adjust_brightness(image: PixelBuffer, delta: int) -> PixelBuffer:
    """Add *delta* (an integer in ``[-255, 255]``) to every sample."""

    if isinstance(delta, bool) or not isinstance(delta, Integral):
        raise InvalidParameterError(f"brightness delta must be an integer, got {delta!r}")
    if not -BRIGHTNESS_LIMIT <= delta <= BRIGHTNESS_LIMIT:
        raise InvalidParameterError(
            f"brightness delta must lie in [-{BRIGHTNESS_LIMIT}, {BRIGHTNESS_LIMIT}], got {delta}"
        )
    _LOGGER.debug("adjust_brightness delta=%d", delta)
    return point.transform(image, point.Brightness(int(delta)))


def adjust_contrast(
    image: PixelBuffer,
    factor: float,
    *,
    midpoint: float = CONTRAST_MIDPOINT,
) -> PixelBuffer:
    """Scale every sample's distance from *midpoint* by *factor* (> 0)."""

    factor = _require_positive("contrast factor", factor)
    midpoint = _require_real("contrast midpoint", midpoint)
    _LOGGER.debug("adjust_contrast factor=%g midpoint=%g", factor, midpoint)
    return point.transform(image, point.Contrast(factor, midpoint))


def edge_detect(
    image: PixelBuffer,
    *,
    border: BorderPolicy | str | None = None,
    preserve_alpha: bool = False,
) -> PixelBuffer:
    """Sobel gradient magnitude ``sqrt(gx^2 + gy^2)`` per channel."""

    _LOGGER.debug("edge_detect border=%s", border)
    gx = convolution.convolve_raw(image, kernels.sobel_x(), border)
    gy = convolution.convolve_raw(image, kernels.sobel_y(), border)
    return _finish(image, np.hypot(gx, gy), preserve_alpha)


def sharpen(
    image: PixelBuffer,
    strength: float = 1.0,
    *,
    border: BorderPolicy | str | None = None,
    preserve_alpha: bool = False,
) -> PixelBuffer:
    """Boost local contrast with ``identity - strength * laplacian``."""

    strength = _require_positive("sharpen strength", strength)
    _LOGGER.debug("sharpen strength=%g", strength)
    raw = convolution.convolve_raw(image, kernels.sharpen(strength), border)
    return _finish(image, raw, preserve_alpha)


def gaussian_blur(
    image: PixelBuffer,
    sigma: float,
    *,
    radius: Optional[int] = None,
    border: BorderPolicy | str | None = None,
    preserve_alpha: bool = False,
) -> PixelBuffer:
    """Blur with a normalised Gaussian of standard deviation *sigma*.

    The window radius defaults to ``2 * sigma`` rounded half up; sigmas too
    small to produce a non-empty window are rejected.  The blur runs as two
    1-D passes.
    """

    sigma = _require_positive("sigma", sigma)
    if radius is not None:
        radius = _require_radius(radius)
    kernel = kernels.gaussian(sigma, radius)
    _LOGGER.debug("gaussian_blur sigma=%g radius=%d", sigma, kernel.radius)
    raw = convolution.convolve_raw(image, kernel, border, separable=True)
    return _finish(image, raw, preserve_alpha)


def box_blur(
    image: PixelBuffer,
    radius: int,
    *,
    border: BorderPolicy | str | None = None,
    preserve_alpha: bool = False,
) -> PixelBuffer:
    """Mean over a ``(2 * radius + 1)`` square window."""

    radius = _require_radius(radius)
    _LOGGER.debug("box_blur radius=%d", radius)
    raw = convolution.convolve_raw(image, kernels.box(radius), border)
    return _finish(image, raw, preserve_alpha)


def median_filter(
    image: PixelBuffer,
    radius: int = 1,
    *,
    border: BorderPolicy | str | None = None,
    preserve_alpha: bool = False,
) -> PixelBuffer:
    """Replace each sample with the median of its neighbourhood."""

    radius = _require_radius(radius)
    _LOGGER.debug("median_filter radius=%d", radius)
    filtered = convolution.median(image, radius, border)
    return _finish(image, filtered.as_array(), preserve_alpha)


def blend(first: PixelBuffer, second: PixelBuffer, alpha: float) -> PixelBuffer:
    """Linear mix ``(1 - alpha) * first + alpha * second``."""

    if first.shape != second.shape:
        raise ShapeMismatchError(f"cannot blend {first.shape} with {second.shape}")
    alpha = _require_real("blend alpha", alpha)
    if not 0.0 <= alpha <= 1.0:
        raise InvalidParameterError(f"blend alpha must lie in [0, 1], got {alpha:g}")
    _LOGGER.debug("blend alpha=%g", alpha)
    mixed = (1.0 - alpha) * first.samples.astype(np.float64) + alpha * second.samples.astype(np.float64)
    return first.with_samples(clamp_samples(mixed))
