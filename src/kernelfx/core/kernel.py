"""Square convolution kernel value object."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from ..errors import InvalidParameterError, ShapeMismatchError

Weights = Union[np.ndarray, Sequence[float]]


@dataclass(frozen=True, eq=False)
class Kernel:
    """Weights of a ``(2 * radius + 1)`` square window plus output scaling.

    The engine computes ``(bias + sum(weight * sample)) * normalization`` for
    every output sample.  ``factors`` optionally holds the ``(column, row)``
    1-D vectors whose outer product equals ``weights``; when present the
    engine may run two 1-D passes instead of one 2-D pass.
    """

    radius: int
    weights: np.ndarray
    normalization: float = 1.0
    bias: float = 0.0
    factors: Optional[tuple[np.ndarray, np.ndarray]] = field(default=None)

    def __post_init__(self) -> None:
        radius = self.radius
        if isinstance(radius, bool) or int(radius) != radius or radius < 0:
            raise InvalidParameterError(f"kernel radius must be a non-negative integer, got {radius!r}")
        radius = int(radius)
        side = 2 * radius + 1

        weights = np.array(self.weights, dtype=np.float64).reshape(-1)
        if weights.size != side * side:
            raise ShapeMismatchError(
                f"radius {radius} kernel needs {side * side} weights, got {weights.size}"
            )
        weights.flags.writeable = False

        if not math.isfinite(self.normalization) or not math.isfinite(self.bias):
            raise InvalidParameterError("kernel normalization and bias must be finite")

        factors = self.factors
        if factors is not None:
            column = np.array(factors[0], dtype=np.float64).reshape(-1)
            row = np.array(factors[1], dtype=np.float64).reshape(-1)
            if column.size != side or row.size != side:
                raise ShapeMismatchError(
                    f"separable factors must each hold {side} weights, "
                    f"got {column.size} and {row.size}"
                )
            if not np.allclose(np.outer(column, row), weights.reshape(side, side), rtol=1e-9, atol=1e-12):
                raise ShapeMismatchError("outer product of the separable factors does not match the weights")
            column.flags.writeable = False
            row.flags.writeable = False
            factors = (column, row)

        # Frozen dataclass: write the normalised values through object.__setattr__.
        object.__setattr__(self, "radius", radius)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "normalization", float(self.normalization))
        object.__setattr__(self, "bias", float(self.bias))
        object.__setattr__(self, "factors", factors)

    @classmethod
    def from_matrix(
        cls,
        matrix: Weights,
        normalization: float = 1.0,
        bias: float = 0.0,
    ) -> "Kernel":
        """Build a kernel from a square, odd-sided 2-D matrix."""

        data = np.asarray(matrix, dtype=np.float64)
        if data.ndim != 2 or data.shape[0] != data.shape[1] or data.shape[0] % 2 == 0:
            raise ShapeMismatchError(f"kernel matrix must be square with odd side, got {data.shape}")
        return cls((data.shape[0] - 1) // 2, data.reshape(-1), normalization, bias)

    @property
    def side(self) -> int:
        return 2 * self.radius + 1

    @property
    def matrix(self) -> np.ndarray:
        """Weights as a ``(side, side)`` array indexed ``[dy + r, dx + r]``."""

        return self.weights.reshape(self.side, self.side)

    @property
    def effective_weights(self) -> np.ndarray:
        """Weights multiplied by the normalisation factor."""

        return self.matrix * self.normalization

    @property
    def is_separable(self) -> bool:
        return self.factors is not None

    def __repr__(self) -> str:
        return (
            f"Kernel(radius={self.radius}, normalization={self.normalization:g}, "
            f"bias={self.bias:g}, separable={self.is_separable})"
        )
