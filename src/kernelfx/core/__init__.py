"""Convolution and point-transform engines with their data types."""

from __future__ import annotations

from .border import CLAMP, REFLECT, WRAP, ZERO, BorderPolicy, get_border_policy
from .buffer import PixelBuffer
from .convolution import convolve, convolve_raw, convolve_separable, median
from .kernel import Kernel
from .point import Brightness, Contrast, PointTransform, transform

__all__ = [
    "BorderPolicy",
    "Brightness",
    "CLAMP",
    "Contrast",
    "Kernel",
    "PixelBuffer",
    "PointTransform",
    "REFLECT",
    "WRAP",
    "ZERO",
    "convolve",
    "convolve_raw",
    "convolve_separable",
    "get_border_policy",
    "median",
    "transform",
]
