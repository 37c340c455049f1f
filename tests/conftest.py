import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from kernelfx.config import (  # noqa: E402
    ENV_BACKEND,
    ENV_BAND_MIN_ROWS,
    ENV_LOG_LEVEL,
    ENV_WORKERS,
    load_settings,
)
from kernelfx.core.buffer import PixelBuffer  # noqa: E402

_ENV_KEYS = (ENV_BACKEND, ENV_WORKERS, ENV_BAND_MIN_ROWS, ENV_LOG_LEVEL)


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch):
    """Start every test from the default configuration."""

    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    load_settings(reload=True)
    yield


@pytest.fixture
def configure(monkeypatch):
    """Return a helper that applies environment overrides and reloads settings."""

    def _apply(**env: str):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return load_settings(reload=True)

    return _apply


def make_image(width: int, height: int, channels: int, seed: int = 0) -> PixelBuffer:
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, size=(height, width, channels), dtype=np.uint8)
    return PixelBuffer.from_array(data)


def make_uniform(width: int, height: int, values) -> PixelBuffer:
    values = np.atleast_1d(np.asarray(values, dtype=np.uint8))
    data = np.broadcast_to(values, (height, width, values.size))
    return PixelBuffer.from_array(data)


@pytest.fixture
def rgb_image() -> PixelBuffer:
    return make_image(13, 9, 3, seed=7)


@pytest.fixture(params=["jit", "numpy", "python"])
def backend(request) -> str:
    return request.param
