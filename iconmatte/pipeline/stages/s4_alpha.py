"""
Stage 4: Alpha Shaping (segmentation signals -> byte alpha channel)
"""

from enum import Enum

import numpy as np


class MaskPolicy(str, Enum):
    """How a probability mask from the segmentation service becomes alpha"""

    LINEAR = "linear"
    REFINED = "refined"
    TRIMAP = "trimap"


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def _to_bytes(values: np.ndarray) -> np.ndarray:
    """Clamp to [0, 255] and round to nearest (ties to even), like a byte clamp"""
    return np.rint(np.clip(values, 0.0, 255.0)).astype(np.uint8)


def binary_region_alpha(
    background: np.ndarray,
    edges: np.ndarray,
    distance: np.ndarray,
    tolerance: float,
    source_alpha: np.ndarray,
) -> np.ndarray:
    """
    Alpha for flood-filled background regions

    Background pixels that are not edges become transparent. Remaining
    pixels closer than ``tolerance`` to the background colour fade linearly
    with their distance; the rest keep their source alpha.

    Args:
        background: (H, W) bool, True = flood-filled background
        edges: (H, W) bool, True = protected edge pixel
        distance: (H, W) colour distance to the background colour
        tolerance: Fade range in colour-distance units
        source_alpha: (H, W) original alpha

    Returns:
        (H, W) uint8 alpha
    """
    alpha = source_alpha.astype(np.float64)

    if tolerance > 0:
        near = distance < tolerance
        alpha[near] = np.clip(distance[near] / tolerance * 255.0, 0.0, 255.0)

    alpha[background & ~edges] = 0.0
    return _to_bytes(alpha)


def _check_mask(mask: np.ndarray) -> np.ndarray:
    mask = np.asarray(mask, dtype=np.float64)
    if not np.all(np.isfinite(mask)):
        raise ValueError("Mask contains non-finite values")
    return np.clip(mask, 0.0, 1.0)


def probability_alpha(mask: np.ndarray) -> np.ndarray:
    """Linear policy: alpha = round(m * 255)"""
    mask = _check_mask(mask)
    return _to_bytes(_round_half_up(mask * 255.0))


def refined_probability_alpha(
    mask: np.ndarray,
    low: float = 0.05,
    high: float = 0.95,
    gamma: float = 0.8,
) -> np.ndarray:
    """
    Gamma-refined policy

    Values at or below ``low`` become 0, at or above ``high`` become 255,
    and the uncertain band in between maps to round(m ** gamma * 255).
    """
    mask = _check_mask(mask)
    alpha = _round_half_up(np.power(mask, gamma) * 255.0)
    alpha[mask <= low] = 0.0
    alpha[mask >= high] = 255.0
    return _to_bytes(alpha)


def trimap_alpha(
    mask: np.ndarray,
    low: float = 0.1,
    high: float = 0.9,
    pivot: float = 0.5,
    boost: float = 1.2,
    attenuation: float = 0.8,
) -> np.ndarray:
    """
    Trimap-style policy

    Inside the uncertain band (low, high) foreground-leaning pixels
    (m > pivot) are boosted and background-leaning ones attenuated.
    """
    mask = _check_mask(mask)
    alpha = _round_half_up(mask * 255.0)

    uncertain = (mask > low) & (mask < high)
    leaning_fg = uncertain & (mask > pivot)
    leaning_bg = uncertain & ~(mask > pivot)

    alpha[leaning_fg] = np.minimum(255.0, alpha[leaning_fg] * boost)
    alpha[leaning_bg] = np.maximum(0.0, alpha[leaning_bg] * attenuation)
    return _to_bytes(alpha)


def shape_mask(mask: np.ndarray, policy: MaskPolicy) -> np.ndarray:
    """Apply the named probability-mask policy"""
    policy = MaskPolicy(policy)
    if policy is MaskPolicy.REFINED:
        return refined_probability_alpha(mask)
    if policy is MaskPolicy.TRIMAP:
        return trimap_alpha(mask)
    return probability_alpha(mask)


def edge_weighted_alpha(
    color_diff: np.ndarray,
    edge_strength: np.ndarray,
    threshold: float,
    edge_cutoff: float = 0.3,
    edge_weight: float = 128.0,
) -> np.ndarray:
    """
    Colour distance alpha rescued by strong edges

    alpha = min(255, diff + strength * edge_weight) where
    diff > threshold or strength > edge_cutoff, else 0.

    Args:
        color_diff: (H, W) distance to the background colour
        edge_strength: (H, W) normalized edge map in [0, 1]
        threshold: Colour distance above which a pixel is foreground
    """
    keep = (color_diff > threshold) | (edge_strength > edge_cutoff)
    alpha = np.where(keep, np.minimum(255.0, color_diff + edge_strength * edge_weight), 0.0)
    return _to_bytes(alpha)
