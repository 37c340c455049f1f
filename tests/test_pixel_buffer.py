"""Tests for the immutable pixel buffer."""

import numpy as np
import pytest

from kernelfx.core.buffer import PixelBuffer
from kernelfx.errors import FilterError, OutOfBoundsError, ShapeMismatchError


def test_sample_uses_row_major_per_pixel_layout():
    # 2x2 RGB: pixel (x, y) has samples [10*y + x, 100 + ..., 200 + ...]
    samples = []
    for y in range(2):
        for x in range(2):
            base = 10 * y + x
            samples.extend([base, 100 + base, 200 + base])
    image = PixelBuffer(2, 2, 3, samples)

    assert image.sample(1, 0, 0) == 1
    assert image.sample(0, 1, 1) == 110
    assert image.sample(1, 1, 2) == 211
    assert image.as_array()[1, 0, 2] == 210


def test_sample_count_must_match_shape():
    with pytest.raises(ShapeMismatchError) as excinfo:
        PixelBuffer(3, 2, 3, [0] * 17)
    assert excinfo.value.kind == "ShapeMismatch"
    assert isinstance(excinfo.value, FilterError)


@pytest.mark.parametrize("width,height,channels", [(0, 2, 1), (2, 0, 1), (2, 2, 0), (2, 2, 5)])
def test_degenerate_shapes_are_rejected(width, height, channels):
    with pytest.raises(ShapeMismatchError):
        PixelBuffer(width, height, channels, [])


@pytest.mark.parametrize("coords", [(3, 0, 0), (0, 2, 0), (0, 0, 1), (-1, 0, 0)])
def test_sample_out_of_bounds(coords):
    image = PixelBuffer(3, 2, 1, range(6))
    with pytest.raises(OutOfBoundsError) as excinfo:
        image.sample(*coords)
    assert excinfo.value.kind == "OutOfBounds"


def test_buffer_copies_and_freezes_input():
    source = np.arange(6, dtype=np.uint8)
    image = PixelBuffer(3, 2, 1, source)
    source[0] = 99

    assert image.sample(0, 0, 0) == 0
    with pytest.raises(ValueError):
        image.samples[0] = 5
    with pytest.raises(ValueError):
        image.as_array()[0, 0, 0] = 5


def test_zeros_builder():
    image = PixelBuffer.zeros(4, 3, 2)
    assert image.shape == (4, 3, 2)
    assert image.samples.dtype == np.float64
    assert not image.samples.any()


def test_from_array_accepts_grayscale_planes():
    image = PixelBuffer.from_array(np.array([[1, 2, 3], [4, 5, 6]], dtype=np.uint8))
    assert image.shape == (3, 2, 1)
    assert image.sample(2, 1, 0) == 6


def test_equality_compares_values_not_dtype():
    as_int = PixelBuffer(2, 1, 1, np.array([3, 4], dtype=np.uint8))
    as_float = PixelBuffer(2, 1, 1, np.array([3.0, 4.0]))
    assert as_int == as_float
    assert as_int != PixelBuffer(1, 2, 1, [3, 4])


def test_to_uint8_rounds_and_clips():
    image = PixelBuffer(4, 1, 1, [-3.0, 12.4, 12.6, 300.0]).to_uint8()
    assert image.samples.dtype == np.uint8
    assert image.samples.tolist() == [0, 12, 13, 255]


@pytest.mark.parametrize(
    "samples",
    [
        np.array([1 + 2j, 3, 4, 5]),
        [1.0, float("nan"), 3.0, 4.0],
        [1.0, 2.0, float("inf"), 4.0],
        [True, False, True, False],
    ],
)
def test_non_real_or_non_finite_samples_are_rejected(samples):
    with pytest.raises(ShapeMismatchError):
        PixelBuffer(2, 2, 1, samples)
