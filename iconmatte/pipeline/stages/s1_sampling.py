"""
Stage 1: Background Color Sampling from boundary pixels
"""

import colorsys
from collections import Counter
from typing import Iterable, Sequence, Tuple

import numpy as np

from ..buffer import PixelBuffer

Color = Tuple[int, int, int]

DEFAULT_BACKGROUND: Color = (255, 255, 255)


def rgb_to_hsv_scalar(r: int, g: int, b: int) -> Tuple[float, float, float]:
    """Convert RGB (0-255) to HSV (H: 0-360, S: 0-100, V: 0-100)"""
    h, s, v = colorsys.rgb_to_hsv(r / 255.0, g / 255.0, b / 255.0)
    return h * 360.0, s * 100.0, v * 100.0


def color_to_hex(color: Color) -> str:
    return "#{:02X}{:02X}{:02X}".format(*color)


def corner_points(width: int, height: int) -> list[Tuple[int, int]]:
    """Corner coordinates (x, y): top-left, top-right, bottom-left, bottom-right"""
    return [(0, 0), (width - 1, 0), (0, height - 1), (width - 1, height - 1)]


def sample_points(width: int, height: int) -> list[Tuple[int, int]]:
    """
    The 8 boundary positions used for background sampling

    Four corners first, then the midpoints of the top, bottom, left and
    right edges.
    """
    mid_x = width // 2
    mid_y = height // 2
    return corner_points(width, height) + [
        (mid_x, 0),
        (mid_x, height - 1),
        (0, mid_y),
        (width - 1, mid_y),
    ]


def _colors_at(buffer: PixelBuffer, points: Iterable[Tuple[int, int]]) -> list[Color]:
    return [tuple(int(c) for c in buffer.pixels[y, x, :3]) for x, y in points]


def dominant_color(samples: Sequence[Color]) -> Color:
    """
    Most frequent exact colour among the samples

    Ties go to the colour seen first. An empty sequence yields white.
    """
    if not samples:
        return DEFAULT_BACKGROUND

    # Counter keeps insertion order and most_common() is stable
    color, _ = Counter(samples).most_common(1)[0]
    return color


def average_color(samples: Sequence[Color]) -> Color:
    """Channel-wise mean of the samples, rounded half-up"""
    if not samples:
        return DEFAULT_BACKGROUND

    mean = np.mean(np.asarray(samples, dtype=np.float64), axis=0)
    return tuple(int(v) for v in np.floor(mean + 0.5))


def sample_corner_colors(buffer: PixelBuffer) -> list[Color]:
    """Colours of the four corners in corner_points() order"""
    if buffer.width < 1 or buffer.height < 1:
        return []
    return _colors_at(buffer, corner_points(buffer.width, buffer.height))


def sample_background_color(buffer: PixelBuffer) -> Color:
    """
    Estimate the background colour from the 8 boundary samples

    Args:
        buffer: Source image

    Returns:
        The most common sampled RGB colour, or white for an empty buffer
    """
    if buffer.width < 1 or buffer.height < 1:
        return DEFAULT_BACKGROUND

    samples = _colors_at(buffer, sample_points(buffer.width, buffer.height))
    return dominant_color(samples)


def color_distance_map(rgb: np.ndarray, color: Color) -> np.ndarray:
    """
    Euclidean RGB distance of every pixel to ``color``

    Args:
        rgb: (H, W, 3) colour array
        color: Reference colour

    Returns:
        (H, W) float64 distances in [0, 441.67]
    """
    diff = rgb.astype(np.float64) - np.asarray(color, dtype=np.float64)
    return np.sqrt(np.sum(diff**2, axis=2))
