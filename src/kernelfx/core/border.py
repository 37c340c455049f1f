"""Border handling strategies for neighbourhood filters.

A policy answers one question: which in-bounds sample stands in for a
neighbour that falls outside the image?  Every policy shipped here treats the
two axes independently, so the engine asks for a per-axis lookup table once
per call instead of resolving each coordinate pair inside its inner loop.
Dropped samples are reported as ``-1`` in the tables (``None`` for scalar
lookups) and contribute nothing to the weighted sum.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..errors import InvalidParameterError

DROPPED = -1


class BorderPolicy(ABC):
    """Substitutable coordinate remapping strategy."""

    name: str = "abstract"

    @abstractmethod
    def resolve_axis(self, indices: np.ndarray, size: int) -> np.ndarray:
        """Map *indices* along an axis of length *size* into ``[0, size)``.

        Returns an ``int64`` array of the same shape; entries that have no
        stand-in sample are set to :data:`DROPPED`.
        """

    def __call__(self, x: int, y: int, width: int, height: int) -> Optional[tuple[int, int]]:
        """Resolve a single ``(x, y)`` neighbour, or ``None`` when dropped."""

        rx = int(self.resolve_axis(np.array([x], dtype=np.int64), width)[0])
        ry = int(self.resolve_axis(np.array([y], dtype=np.int64), height)[0])
        if rx == DROPPED or ry == DROPPED:
            return None
        return rx, ry

    def offset_table(self, radius: int, size: int) -> np.ndarray:
        """Return a ``(2 * radius + 1, size)`` table of resolved neighbour indices.

        Row ``k`` holds, for every position ``p`` on the axis, the index used
        for the neighbour at offset ``k - radius``.
        """

        offsets = np.arange(-radius, radius + 1, dtype=np.int64)[:, None]
        positions = np.arange(size, dtype=np.int64)[None, :]
        return np.ascontiguousarray(self.resolve_axis(offsets + positions, size), dtype=np.int64)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ClampToEdge(BorderPolicy):
    """Repeat the outermost row/column beyond the image edge."""

    name = "clamp"

    def resolve_axis(self, indices: np.ndarray, size: int) -> np.ndarray:
        return np.clip(np.asarray(indices, dtype=np.int64), 0, size - 1)


class Wrap(BorderPolicy):
    """Treat the image as a torus."""

    name = "wrap"

    def resolve_axis(self, indices: np.ndarray, size: int) -> np.ndarray:
        return np.mod(np.asarray(indices, dtype=np.int64), size)


class Reflect(BorderPolicy):
    """Mirror about the edge, repeating the edge sample (``abc|cba``)."""

    name = "reflect"

    def resolve_axis(self, indices: np.ndarray, size: int) -> np.ndarray:
        # The symmetric extension is periodic with period 2 * size.
        period = 2 * size
        folded = np.mod(np.asarray(indices, dtype=np.int64), period)
        return np.where(folded < size, folded, period - 1 - folded)


class ZeroPad(BorderPolicy):
    """Drop neighbours outside the image so they contribute zero."""

    name = "zero"

    def resolve_axis(self, indices: np.ndarray, size: int) -> np.ndarray:
        data = np.asarray(indices, dtype=np.int64)
        return np.where((data >= 0) & (data < size), data, DROPPED)


CLAMP = ClampToEdge()
WRAP = Wrap()
REFLECT = Reflect()
ZERO = ZeroPad()

_POLICIES = {policy.name: policy for policy in (CLAMP, WRAP, REFLECT, ZERO)}


def get_border_policy(policy: str | BorderPolicy | None) -> BorderPolicy:
    """Return the policy named by *policy* (``None`` means clamp-to-edge)."""

    if policy is None:
        return CLAMP
    if isinstance(policy, BorderPolicy):
        return policy
    try:
        return _POLICIES[str(policy).lower()]
    except KeyError:
        raise InvalidParameterError(
            f"unknown border policy {policy!r}; expected one of {', '.join(sorted(_POLICIES))}"
        ) from None
