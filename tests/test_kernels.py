"""Tests for the kernel value object and the kernel library."""

import numpy as np
import pytest

from kernelfx.core import kernels
from kernelfx.core.kernel import Kernel
from kernelfx.errors import InvalidParameterError, ShapeMismatchError


def test_kernel_rejects_wrong_weight_count():
    with pytest.raises(ShapeMismatchError):
        Kernel(1, [1.0] * 8)


def test_kernel_rejects_negative_radius():
    with pytest.raises(InvalidParameterError):
        Kernel(-1, [1.0])


def test_from_matrix_requires_odd_square():
    with pytest.raises(ShapeMismatchError):
        Kernel.from_matrix(np.ones((2, 2)))
    with pytest.raises(ShapeMismatchError):
        Kernel.from_matrix(np.ones((3, 5)))


def test_identity_kernel():
    kernel = kernels.identity()
    assert kernel.radius == 0
    assert kernel.weights.tolist() == [1.0]


@pytest.mark.parametrize("sigma", [0.25, 0.5, 1.0, 2.0, 3.7, 10.0])
def test_gaussian_effective_weights_sum_to_one(sigma):
    kernel = kernels.gaussian(sigma)
    assert abs(kernel.effective_weights.sum() - 1.0) < 1e-6


def test_gaussian_default_radius_is_twice_sigma():
    assert kernels.gaussian(2.0).radius == 4
    assert kernels.gaussian(0.75).radius == 2
    assert kernels.gaussian(1.0, radius=6).side == 13


def test_gaussian_matches_closed_form_and_factors():
    sigma = 1.5
    kernel = kernels.gaussian(sigma)
    r = kernel.radius
    dy, dx = np.mgrid[-r : r + 1, -r : r + 1]
    expected = np.exp(-(dx**2 + dy**2) / (2 * sigma**2))
    np.testing.assert_allclose(kernel.matrix, expected, rtol=1e-12)

    column, row = kernel.factors
    np.testing.assert_allclose(np.outer(column, row), kernel.matrix, rtol=1e-12)


@pytest.mark.parametrize("sigma", [0.0, -1.0, 0.2, float("nan"), float("inf")])
def test_gaussian_rejects_bad_sigma(sigma):
    with pytest.raises(InvalidParameterError):
        kernels.gaussian(sigma)


@pytest.mark.parametrize("strength", [0.1, 1.0, 5.0])
def test_sharpen_kernel_sums_to_one(strength):
    kernel = kernels.sharpen(strength)
    assert kernel.normalization == 1.0
    assert kernel.weights.sum() == pytest.approx(1.0)
    assert kernel.matrix[1, 1] == pytest.approx(1.0 + 4.0 * strength)


@pytest.mark.parametrize("strength", [0.0, -2.0])
def test_sharpen_rejects_non_positive_strength(strength):
    with pytest.raises(InvalidParameterError):
        kernels.sharpen(strength)


def test_sobel_kernels_are_transposes_and_sum_to_zero():
    gx = kernels.sobel_x().matrix
    gy = kernels.sobel_y().matrix
    np.testing.assert_array_equal(gx, gy.T)
    assert gx.sum() == 0.0
    assert gx[1, 2] == 2.0


def test_laplacian_variants():
    assert kernels.laplacian().matrix[1, 1] == -4.0
    assert kernels.laplacian(diagonal=True).matrix[1, 1] == -8.0


def test_box_and_bilinear_are_normalised():
    for kernel in (kernels.box(2), kernels.bilinear()):
        assert kernel.effective_weights.sum() == pytest.approx(1.0)
        assert kernel.is_separable
    with pytest.raises(InvalidParameterError):
        kernels.box(0)


def test_factors_must_reproduce_weights():
    weights = np.zeros((3, 3))
    weights[1, 1] = 1.0
    with pytest.raises(ShapeMismatchError):
        Kernel(1, weights, factors=(np.ones(3), np.ones(3)))

    tent = np.array([1.0, 2.0, 1.0])
    kernel = Kernel(1, np.outer(tent, tent), factors=(tent, tent))
    assert kernel.is_separable
