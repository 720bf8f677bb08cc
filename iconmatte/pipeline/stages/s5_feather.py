"""
Stage 5: Feathering (alpha smoothing) and colour denoising
"""

import math

import numpy as np
from scipy import ndimage


def gaussian_kernel(radius: float) -> np.ndarray:
    """
    Normalized 1-D Gaussian kernel of size 2 * ceil(radius) + 1

    sigma is radius / 3, so the kernel spans about three standard deviations.
    """
    if radius <= 0:
        raise ValueError(f"Radius must be positive, got {radius}")

    sigma = radius / 3.0
    half = math.ceil(radius)
    offsets = np.arange(-half, half + 1, dtype=np.float64)
    kernel = np.exp(-(offsets**2) / (2.0 * sigma * sigma))
    return kernel / kernel.sum()


def gaussian_feather(
    alpha: np.ndarray, radius: float, renormalize: bool = False
) -> np.ndarray:
    """
    Separable Gaussian blur, horizontal pass then vertical pass

    Taps falling outside the image contribute nothing. Unless
    ``renormalize`` is set the clipped kernel is not rescaled, so values fade
    towards 0 within ``radius`` of the border.

    Args:
        alpha: (H, W) alpha values (any scale)
        radius: Feather radius in pixels; <= 0 returns an unchanged copy
        renormalize: Divide clipped windows by their in-image weight

    Returns:
        (H, W) float64 smoothed values
    """
    alpha = np.asarray(alpha, dtype=np.float64)
    if radius <= 0:
        return alpha.copy()

    kernel = gaussian_kernel(radius)
    blurred = ndimage.correlate1d(alpha, kernel, axis=1, mode="constant", cval=0.0)
    blurred = ndimage.correlate1d(blurred, kernel, axis=0, mode="constant", cval=0.0)

    if renormalize:
        coverage = np.ones_like(alpha)
        coverage = ndimage.correlate1d(coverage, kernel, axis=1, mode="constant", cval=0.0)
        coverage = ndimage.correlate1d(coverage, kernel, axis=0, mode="constant", cval=0.0)
        blurred = blurred / coverage

    return blurred


def box_feather(alpha: np.ndarray) -> np.ndarray:
    """
    Cheap 5-tap average (centre + N, S, E, W) on interior pixels

    Reads only the unsmoothed input; first/last rows and columns are copied
    through unchanged.

    Args:
        alpha: (H, W) uint8 alpha

    Returns:
        (H, W) uint8 alpha
    """
    alpha = np.asarray(alpha)
    result = alpha.copy()
    h, w = alpha.shape
    if h < 3 or w < 3:
        return result

    src = alpha.astype(np.float64)
    total = (
        src[1:-1, 1:-1]
        + src[:-2, 1:-1]
        + src[2:, 1:-1]
        + src[1:-1, :-2]
        + src[1:-1, 2:]
    )
    result[1:-1, 1:-1] = np.floor(total / 5.0 + 0.5).astype(alpha.dtype)
    return result


def median_smooth(rgb: np.ndarray, passes: int = 1) -> np.ndarray:
    """
    3x3 median filter of each colour channel, interior pixels only

    Args:
        rgb: (H, W, 3) uint8 colours
        passes: Number of times the filter is applied

    Returns:
        (H, W, 3) uint8 denoised colours
    """
    result = np.array(rgb, dtype=np.uint8, copy=True)
    h, w = result.shape[:2]
    if h < 3 or w < 3:
        return result

    for _ in range(max(0, passes)):
        filtered = ndimage.median_filter(result, size=(3, 3, 1), mode="nearest")
        result[1:-1, 1:-1] = filtered[1:-1, 1:-1]

    return result
