"""
Pipeline Stages
"""

from .s1_sampling import (
    average_color,
    color_distance_map,
    dominant_color,
    sample_background_color,
    sample_corner_colors,
    sample_points,
)
from .s2_region import grow_from_corners, grow_region
from .s3_edges import detect_edges, edge_mask, normalized_edges, sobel_magnitude
from .s4_alpha import (
    MaskPolicy,
    binary_region_alpha,
    edge_weighted_alpha,
    probability_alpha,
    refined_probability_alpha,
    shape_mask,
    trimap_alpha,
)
from .s5_feather import box_feather, gaussian_feather, gaussian_kernel, median_smooth

__all__ = [
    "average_color",
    "color_distance_map",
    "dominant_color",
    "sample_background_color",
    "sample_corner_colors",
    "sample_points",
    "grow_from_corners",
    "grow_region",
    "detect_edges",
    "edge_mask",
    "normalized_edges",
    "sobel_magnitude",
    "MaskPolicy",
    "binary_region_alpha",
    "edge_weighted_alpha",
    "probability_alpha",
    "refined_probability_alpha",
    "shape_mask",
    "trimap_alpha",
    "box_feather",
    "gaussian_feather",
    "gaussian_kernel",
    "median_smooth",
]
