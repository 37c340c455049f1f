"""Classical image filters built on a single kernel-convolution engine.

The package is organised around a clean separation of concerns:
- core: pixel buffer, kernels, border policies and the execution engines
- facade: named filters (brightness, contrast, edges, sharpen, blurs)
- interop: in-memory conversion to and from Pillow images
"""

from __future__ import annotations

from .core.border import CLAMP, REFLECT, WRAP, ZERO
from .core.buffer import PixelBuffer
from .core.kernel import Kernel
from .errors import FilterError, InvalidParameterError, OutOfBoundsError, ShapeMismatchError
from .facade import (
    adjust_brightness,
    adjust_contrast,
    blend,
    box_blur,
    edge_detect,
    gaussian_blur,
    median_filter,
    sharpen,
)
from .utils.logging import logger

__version__ = "0.1.0"

__all__ = [
    "CLAMP",
    "FilterError",
    "InvalidParameterError",
    "Kernel",
    "OutOfBoundsError",
    "PixelBuffer",
    "REFLECT",
    "ShapeMismatchError",
    "WRAP",
    "ZERO",
    "adjust_brightness",
    "adjust_contrast",
    "blend",
    "box_blur",
    "edge_detect",
    "gaussian_blur",
    "median_filter",
    "sharpen",
]
