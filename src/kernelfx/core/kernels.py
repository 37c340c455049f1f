"""Constructors for the named kernels used by the filter facade.

Every function is pure and returns a fresh :class:`~kernelfx.core.kernel.Kernel`.
Weights are indexed ``[dy + r, dx + r]`` and applied without flipping, so the
Sobel kernels below respond positively to intensity that increases towards
the right (``sobel_x``) or downwards (``sobel_y``).
"""

from __future__ import annotations

import math

import numpy as np

from ..errors import InvalidParameterError
from .kernel import Kernel

_SOBEL_X = np.array(
    [
        [-1.0, 0.0, 1.0],
        [-2.0, 0.0, 2.0],
        [-1.0, 0.0, 1.0],
    ]
)

_LAPLACIAN_4 = np.array(
    [
        [0.0, 1.0, 0.0],
        [1.0, -4.0, 1.0],
        [0.0, 1.0, 0.0],
    ]
)

_LAPLACIAN_8 = np.array(
    [
        [1.0, 1.0, 1.0],
        [1.0, -8.0, 1.0],
        [1.0, 1.0, 1.0],
    ]
)

_TENT = np.array([1.0, 2.0, 1.0])


def _require_positive(name: str, value: float) -> float:
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}")
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(numeric) or numeric <= 0.0:
        raise InvalidParameterError(f"{name} must be a positive finite number, got {value!r}")
    return numeric


def _require_radius(value: int, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < minimum:
        raise InvalidParameterError(f"radius must be an integer >= {minimum}, got {value!r}")
    return int(value)


def identity(radius: int = 0) -> Kernel:
    """Return the kernel that reproduces its input."""

    radius = _require_radius(radius, minimum=0)
    side = 2 * radius + 1
    weights = np.zeros((side, side))
    weights[radius, radius] = 1.0
    return Kernel(radius, weights)


def sobel_x() -> Kernel:
    """Horizontal gradient (responds to vertical edges)."""

    return Kernel.from_matrix(_SOBEL_X)


def sobel_y() -> Kernel:
    """Vertical gradient (responds to horizontal edges)."""

    return Kernel.from_matrix(_SOBEL_X.T)


def laplacian(diagonal: bool = False) -> Kernel:
    """Second-derivative kernel; ``diagonal`` selects the 8-neighbour form."""

    return Kernel.from_matrix(_LAPLACIAN_8 if diagonal else _LAPLACIAN_4)


def sharpen(strength: float) -> Kernel:
    """Return ``identity - strength * laplacian``.

    The weights sum to exactly 1 for any strength, so flat regions keep their
    level while local contrast at edges increases with *strength*.
    """

    strength = _require_positive("strength", strength)
    weights = -strength * _LAPLACIAN_4
    weights[1, 1] += 1.0
    return Kernel.from_matrix(weights)


def gaussian_radius(sigma: float) -> int:
    """Default window radius for *sigma*: ``2 * sigma`` rounded half up."""

    sigma = _require_positive("sigma", sigma)
    return int(math.floor(2.0 * sigma + 0.5))


def gaussian_1d(sigma: float, radius: int | None = None) -> np.ndarray:
    """Return the unnormalised 1-D Gaussian ``exp(-d^2 / (2 sigma^2))``."""

    sigma = _require_positive("sigma", sigma)
    if radius is None:
        radius = gaussian_radius(sigma)
        if radius == 0:
            raise InvalidParameterError(f"sigma={sigma:g} yields a zero-radius Gaussian window")
    radius = _require_radius(radius)
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    return np.exp(-(offsets * offsets) / (2.0 * sigma * sigma))


def gaussian(sigma: float, radius: int | None = None) -> Kernel:
    """Return a Gaussian blur kernel whose effective weights sum to 1.

    The 2-D weights are the outer product of :func:`gaussian_1d` with itself,
    which equals ``exp(-(dx^2 + dy^2) / (2 sigma^2))`` sample for sample, so
    the factors attached for the separable path describe the same kernel.
    """

    profile = gaussian_1d(sigma, radius)
    weights = np.outer(profile, profile)
    return Kernel(
        (profile.size - 1) // 2,
        weights,
        normalization=1.0 / float(weights.sum()),
        factors=(profile, profile),
    )


def box(radius: int) -> Kernel:
    """Uniform mean over a ``(2 * radius + 1)`` square."""

    radius = _require_radius(radius)
    side = 2 * radius + 1
    ones = np.ones(side)
    return Kernel(radius, np.ones((side, side)), normalization=1.0 / (side * side), factors=(ones, ones))


def bilinear() -> Kernel:
    """3x3 tent filter ``[1, 2, 1]^T [1, 2, 1] / 16``."""

    return Kernel(1, np.outer(_TENT, _TENT), normalization=1.0 / 16.0, factors=(_TENT, _TENT))
