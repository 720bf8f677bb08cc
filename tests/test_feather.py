import numpy as np
import pytest

from iconmatte.pipeline.stages import box_feather, gaussian_feather, gaussian_kernel, median_smooth


@pytest.mark.parametrize("radius, size", [(1, 3), (1.5, 5), (2, 5), (3.2, 9)])
def test_gaussian_kernel_shape(radius, size):
    kernel = gaussian_kernel(radius)
    assert kernel.shape == (size,)
    assert kernel.sum() == pytest.approx(1.0)
    assert kernel[size // 2] == kernel.max()
    assert np.allclose(kernel, kernel[::-1])


def test_zero_radius_is_identity():
    alpha = np.random.default_rng(1).random((6, 9))
    result = gaussian_feather(alpha, 0)

    assert np.array_equal(result, alpha)
    assert result is not alpha


def test_gaussian_keeps_flat_interior_and_darkens_border():
    alpha = np.ones((20, 20))
    result = gaussian_feather(alpha, 2)

    assert np.allclose(result[2:-2, 2:-2], 1.0)
    assert result[0, 0] < result[0, 10] < 1.0
    assert result[10, 0] < 1.0


def test_gaussian_renormalized_borders():
    result = gaussian_feather(np.ones((20, 20)), 2, renormalize=True)
    assert np.allclose(result, 1.0)


def test_gaussian_softens_step():
    alpha = np.zeros((11, 11))
    alpha[:, 6:] = 1.0
    result = gaussian_feather(alpha, 2)

    row = result[5]
    assert 0.0 < row[5] < row[6] < 1.0
    assert np.all(np.diff(row[4:9]) > 0)


def test_box_feather_interior_average():
    alpha = np.zeros((5, 5), dtype=np.uint8)
    alpha[2, 2] = 255

    result = box_feather(alpha)

    assert result[2, 2] == 51
    assert result[1, 2] == 51
    assert result[2, 1] == 51
    assert result[1, 1] == 0
    assert result.dtype == np.uint8


def test_box_feather_leaves_border_alone():
    alpha = np.zeros((4, 4), dtype=np.uint8)
    alpha[0, :] = 255
    result = box_feather(alpha)

    assert result[0].tolist() == [255, 255, 255, 255]
    assert result[1, 1] == 51


def test_box_feather_identity_on_flat_alpha():
    alpha = np.full((6, 6), 200, dtype=np.uint8)
    assert np.array_equal(box_feather(alpha), alpha)


def test_median_removes_speckle():
    rgb = np.full((5, 5, 3), 255, dtype=np.uint8)
    rgb[2, 2] = (0, 0, 0)
    rgb[0, 0] = (0, 0, 0)

    result = median_smooth(rgb)

    assert result[2, 2].tolist() == [255, 255, 255]
    assert result[0, 0].tolist() == [0, 0, 0]  # border untouched
    assert rgb[2, 2].tolist() == [0, 0, 0]
