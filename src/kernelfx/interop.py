"""In-memory adapters between :class:`PIL.Image.Image` and :class:`PixelBuffer`.

Only pixel data crosses this boundary; opening and saving files stays with the
caller.  Images in modes other than ``L``, ``LA``, ``RGB`` and ``RGBA`` are
converted first, to ``RGBA`` when they carry transparency and ``RGB``
otherwise.
"""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from .core.buffer import PixelBuffer
from .errors import ShapeMismatchError

_LOGGER = logging.getLogger(__name__)

_MODES_BY_CHANNELS = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}


def from_pil(image: Image.Image) -> PixelBuffer:
    """Return the pixels of *image* as an 8-bit :class:`PixelBuffer`."""

    if image.mode not in _MODES_BY_CHANNELS.values():
        target = "RGBA" if "A" in image.getbands() or "transparency" in image.info else "RGB"
        _LOGGER.debug("Converting %s image to %s", image.mode, target)
        image = image.convert(target)
    return PixelBuffer.from_array(np.asarray(image, dtype=np.uint8))


def to_pil(buffer: PixelBuffer) -> Image.Image:
    """Return a new :class:`PIL.Image.Image` holding *buffer*'s pixels."""

    mode = _MODES_BY_CHANNELS.get(buffer.channels)
    if mode is None:
        raise ShapeMismatchError(f"no Pillow mode for {buffer.channels} channels")
    data = buffer.to_uint8().as_array()
    if buffer.channels == 1:
        data = data[:, :, 0]
    result = Image.fromarray(np.ascontiguousarray(data))
    if result.mode != mode:
        result = result.convert(mode)
    return result
