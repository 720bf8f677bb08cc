"""
Stage 2: Region Growing (flood fill of background-like pixels from seeds)
"""

from typing import Tuple

import cv2
import numpy as np

from ..buffer import PixelBuffer
from .s1_sampling import Color, color_distance_map, corner_points

# Largest possible Euclidean distance between two RGB colours
MAX_COLOR_DISTANCE = float(np.sqrt(3 * 255.0**2))


def _fill_from_seed(candidates: np.ndarray, seed: Tuple[int, int]) -> np.ndarray:
    """
    Connected component of ``candidates`` containing ``seed`` (4-connected)

    Args:
        candidates: (H, W) boolean mask of pixels allowed in the region
        seed: (x, y) start position

    Returns:
        (H, W) boolean mask of the filled region (empty if the seed is not a
        candidate)
    """
    x, y = seed
    if not candidates[y, x]:
        return np.zeros(candidates.shape, dtype=bool)

    # 255 = fillable, 0 = blocked; filled pixels are rewritten to 128
    surface = candidates.astype(np.uint8) * 255
    flood_mask = np.zeros((surface.shape[0] + 2, surface.shape[1] + 2), dtype=np.uint8)
    cv2.floodFill(surface, flood_mask, (int(x), int(y)), 128, flags=4)

    return surface == 128


def _validate(buffer: PixelBuffer, tolerance: float):
    if buffer.width < 1 or buffer.height < 1:
        raise ValueError(f"Cannot flood fill empty buffer {buffer.width}x{buffer.height}")
    if tolerance < 0:
        raise ValueError(f"Tolerance must be non-negative, got {tolerance}")


def grow_region(
    buffer: PixelBuffer,
    seed: Tuple[int, int],
    target: Color,
    tolerance: float,
) -> np.ndarray:
    """
    Flood fill from ``seed`` over pixels similar to ``target``

    A pixel joins the region when it is 4-connected to the seed through
    region pixels and its own colour is within ``tolerance`` (Euclidean RGB)
    of ``target``.

    Args:
        buffer: Source image
        seed: (x, y) start position
        target: Background colour
        tolerance: Maximum colour distance (0 = exact match only)

    Returns:
        (H, W) boolean mask, True = background region
    """
    _validate(buffer, tolerance)

    x, y = seed
    if not (0 <= x < buffer.width and 0 <= y < buffer.height):
        raise ValueError(f"Seed {seed} outside {buffer.width}x{buffer.height} buffer")

    candidates = color_distance_map(buffer.rgb, target) <= tolerance
    return _fill_from_seed(candidates, seed)


def grow_from_corners(
    buffer: PixelBuffer, target: Color, tolerance: float
) -> np.ndarray:
    """
    Union of the regions grown from each of the four corners

    Returns:
        (H, W) boolean mask, True = background reachable from a corner
    """
    _validate(buffer, tolerance)

    candidates = color_distance_map(buffer.rgb, target) <= tolerance
    region = np.zeros(candidates.shape, dtype=bool)

    for seed in corner_points(buffer.width, buffer.height):
        x, y = seed
        if region[y, x]:
            # Already reached from an earlier corner
            continue
        region |= _fill_from_seed(candidates, seed)

    return region
