"""Logging helpers for kernelfx."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger(level: int | str | None = None) -> logging.Logger:
    """Return the package-level logger configured for kernelfx.

    The handler is attached only once, and only when the host application has
    not already configured one, so embedding applications keep control over
    formatting.  *level* overrides the configured level when given.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("kernelfx")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(logging.WARNING)
    if level is not None:
        _LOGGER.setLevel(level)
    return _LOGGER

logger = get_logger()
