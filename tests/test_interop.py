"""Tests for the Pillow adapters."""

import numpy as np
import pytest
from PIL import Image

import kernelfx
from conftest import make_image
from kernelfx.errors import ShapeMismatchError
from kernelfx.interop import from_pil, to_pil


@pytest.mark.parametrize("mode,channels", [("L", 1), ("LA", 2), ("RGB", 3), ("RGBA", 4)])
def test_round_trip_preserves_pixels(mode, channels):
    buffer = make_image(6, 4, channels, seed=channels)
    image = to_pil(buffer)
    assert image.mode == mode
    assert image.size == (6, 4)
    assert from_pil(image) == buffer


def test_from_pil_layout_matches_getpixel():
    image = Image.new("RGB", (3, 2))
    image.putpixel((2, 1), (9, 8, 7))
    buffer = from_pil(image)
    assert [buffer.sample(2, 1, c) for c in range(3)] == [9, 8, 7]


def test_palette_images_are_converted():
    image = Image.new("P", (4, 4), color=3)
    assert from_pil(image).channels == 3


def test_filtered_output_is_quantised_for_pillow():
    buffer = make_image(8, 8, 3, seed=1)
    blurred = kernelfx.gaussian_blur(buffer, 1.0)
    image = to_pil(blurred)
    np.testing.assert_array_equal(np.asarray(image), blurred.to_uint8().as_array())


def test_to_pil_rejects_unknown_channel_count():
    class _FiveChannel:
        channels = 5

    with pytest.raises(ShapeMismatchError):
        to_pil(_FiveChannel())  # type: ignore[arg-type]
