"""
Stage 3: Edge Detection (Sobel gradient magnitude)
"""

import cv2
import numpy as np

from ..buffer import PixelBuffer

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luminance(rgb: np.ndarray) -> np.ndarray:
    """(H, W, 3) colours -> (H, W) float64 luminance"""
    rgb = rgb.astype(np.float64)
    r, g, b = LUMA_WEIGHTS
    return r * rgb[:, :, 0] + g * rgb[:, :, 1] + b * rgb[:, :, 2]


def edge_channel(buffer: PixelBuffer, channel: str = "luminance") -> np.ndarray:
    """
    Single channel the gradient is computed on

    Args:
        buffer: Source image
        channel: "luminance" or "red"
    """
    if channel == "luminance":
        return luminance(buffer.rgb)
    if channel == "red":
        return buffer.rgb[:, :, 0].astype(np.float64)
    raise ValueError(f"Unknown edge channel: {channel!r}")


def sobel_magnitude(channel: np.ndarray) -> np.ndarray:
    """
    Gradient magnitude sqrt(gx^2 + gy^2) with 3x3 Sobel kernels

    Only interior pixels are evaluated; the outer rows and columns stay at 0.

    Args:
        channel: (H, W) intensity values

    Returns:
        (H, W) float64 edge map
    """
    channel = np.ascontiguousarray(channel, dtype=np.float64)
    h, w = channel.shape
    magnitude = np.zeros((h, w), dtype=np.float64)

    if h < 3 or w < 3:
        return magnitude

    gx = cv2.Sobel(channel, cv2.CV_64F, 1, 0, ksize=3)
    gy = cv2.Sobel(channel, cv2.CV_64F, 0, 1, ksize=3)

    magnitude[1:-1, 1:-1] = np.sqrt(gx[1:-1, 1:-1] ** 2 + gy[1:-1, 1:-1] ** 2)
    return magnitude


def detect_edges(buffer: PixelBuffer, channel: str = "luminance") -> np.ndarray:
    """EdgeMap of a buffer, see sobel_magnitude()"""
    return sobel_magnitude(edge_channel(buffer, channel))


def edge_mask(magnitude: np.ndarray, threshold: float) -> np.ndarray:
    """Binary edge signal: True where magnitude > threshold"""
    return magnitude > threshold


def normalized_edges(magnitude: np.ndarray) -> np.ndarray:
    """Edge map scaled to [0, 1] by its maximum (all zeros for a flat image)"""
    peak = float(magnitude.max()) if magnitude.size else 0.0
    if peak <= 0.0:
        return np.zeros_like(magnitude, dtype=np.float64)
    return magnitude / peak
