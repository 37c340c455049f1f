"""Runtime configuration sourced from environment variables.

Settings are read once and cached; call :func:`load_settings` with
``reload=True`` after changing the environment (tests do this through
``monkeypatch``).  Malformed values never abort a filter call: they are
reported through the package logger and the default is used instead.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .utils.logging import get_logger

_LOGGER = logging.getLogger(__name__)

BACKENDS = ("auto", "jit", "numpy", "python")

ENV_BACKEND = "KERNELFX_BACKEND"
ENV_WORKERS = "KERNELFX_WORKERS"
ENV_BAND_MIN_ROWS = "KERNELFX_BAND_MIN_ROWS"
ENV_LOG_LEVEL = "KERNELFX_LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    """Execution preferences for the convolution engine."""

    backend: str = "auto"
    """Executor used for the inner loops (``auto`` resolves to ``jit``)."""

    workers: int = 1
    """Number of threads that share the rows of one convolution."""

    band_min_rows: int = 64
    """Minimum rows per worker before an image is split into bands."""

    log_level: str = "WARNING"

    def resolved_backend(self) -> str:
        """Return the concrete backend name, expanding ``auto``."""

        return "jit" if self.backend == "auto" else self.backend


_SETTINGS: Optional[Settings] = None


def _parse_positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        _LOGGER.warning("Ignoring %s=%r: not an integer; using %d", key, raw, default)
        return default
    if value < 1:
        _LOGGER.warning("Ignoring %s=%r: must be >= 1; using %d", key, raw, default)
        return default
    return value


def settings_from_env(env: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *env* (defaults to :data:`os.environ`)."""

    env = os.environ if env is None else env
    defaults = Settings()

    backend = env.get(ENV_BACKEND, "").strip().lower() or defaults.backend
    if backend not in BACKENDS:
        _LOGGER.warning(
            "Ignoring %s=%r: expected one of %s; using %r",
            ENV_BACKEND,
            backend,
            ", ".join(BACKENDS),
            defaults.backend,
        )
        backend = defaults.backend

    log_level = env.get(ENV_LOG_LEVEL, "").strip().upper() or defaults.log_level
    if not isinstance(logging.getLevelName(log_level), int):
        _LOGGER.warning("Ignoring %s=%r: unknown level", ENV_LOG_LEVEL, log_level)
        log_level = defaults.log_level

    return Settings(
        backend=backend,
        workers=_parse_positive_int(env, ENV_WORKERS, defaults.workers),
        band_min_rows=_parse_positive_int(env, ENV_BAND_MIN_ROWS, defaults.band_min_rows),
        log_level=log_level,
    )


def load_settings(*, reload: bool = False) -> Settings:
    """Return the cached settings, reading the environment on first use."""

    global _SETTINGS
    if _SETTINGS is None or reload:
        _SETTINGS = settings_from_env()
        get_logger(_SETTINGS.log_level)
    return _SETTINGS
