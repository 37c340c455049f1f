"""Exception hierarchy shared by every kernelfx module.

All failures raised by the filter core derive from :class:`FilterError` and
carry a ``kind`` string so callers that prefer value-style inspection can
branch on it without importing each subclass.  The subclasses also inherit
from the closest built-in exception so generic ``except ValueError`` handlers
keep working.
"""

from __future__ import annotations


class FilterError(Exception):
    """Base class for errors raised by the filter core."""

    kind: str = "FilterError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


class ShapeMismatchError(FilterError, ValueError):
    """Buffer or kernel dimensions are inconsistent with their data."""

    kind = "ShapeMismatch"


class OutOfBoundsError(FilterError, IndexError):
    """A direct sample access addressed a pixel or channel outside the buffer."""

    kind = "OutOfBounds"


class InvalidParameterError(FilterError, ValueError):
    """A filter parameter lies outside its valid domain."""

    kind = "InvalidParameter"


__all__ = [
    "FilterError",
    "InvalidParameterError",
    "OutOfBoundsError",
    "ShapeMismatchError",
]
