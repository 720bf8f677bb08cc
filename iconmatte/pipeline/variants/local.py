"""
Local variants: pure pixel algorithms, no model involved
"""

from typing import Optional

import numpy as np

from ..buffer import PixelBuffer
from ..config import GimpOptions, IconOptions, InkscapeOptions
from ..logger import PipelineLogger
from ..stages import (
    average_color,
    binary_region_alpha,
    box_feather,
    color_distance_map,
    detect_edges,
    dominant_color,
    edge_mask,
    edge_weighted_alpha,
    gaussian_feather,
    grow_from_corners,
    median_smooth,
    normalized_edges,
    probability_alpha,
    sample_background_color,
    sample_corner_colors,
)
from ..stages.s1_sampling import color_to_hex, rgb_to_hsv_scalar
from .base import AlgorithmVariant


class IconVariant(AlgorithmVariant):
    """
    Flood fill from the corners for icons on solid backgrounds

    Steps:
    1. Sample background colour from 8 boundary points
    2. Flood fill background from each corner
    3. Sobel edges protect fine strokes inside the filled region
    4. Binary alpha with an anti-aliasing ramp near the background colour
    5. Optional 5-tap box smoothing of the alpha channel
    """

    algorithm_id = "icon"

    def __init__(
        self,
        options: Optional[IconOptions] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        super().__init__(logger)
        self.options = options or IconOptions()

    def process(self, buffer: PixelBuffer) -> PixelBuffer:
        opts = self.options
        self.logger.log_info("Icon: flood filling background...")

        background_color = sample_background_color(buffer)
        h, s, v = rgb_to_hsv_scalar(*background_color)
        self.logger.log_info(
            f"  Background: RGB{background_color} = {color_to_hex(background_color)} "
            f"(H={h:.1f}° S={s:.1f}% V={v:.1f}%)"
        )

        background = grow_from_corners(buffer, background_color, opts.tolerance)
        edges = edge_mask(detect_edges(buffer, opts.edge_channel), opts.edge_threshold)
        distance = color_distance_map(buffer.rgb, background_color)

        alpha = binary_region_alpha(
            background, edges, distance, opts.tolerance, buffer.alpha
        )
        if opts.smoothing:
            alpha = box_feather(alpha)

        coverage = float(background.mean())
        self.logger.log_info(
            f"  Filled {coverage:.1%} of pixels, {int(edges.sum()):,} edge pixels protected"
        )
        self._record(
            method="flood_fill + sobel",
            background_rgb=list(background_color),
            tolerance=opts.tolerance,
            edge_threshold=opts.edge_threshold,
            background_coverage=coverage,
            edge_pixels=int(edges.sum()),
            smoothing=opts.smoothing,
        )

        return buffer.with_alpha(alpha)


class GimpVariant(AlgorithmVariant):
    """
    Global colour selection of the corner colour with feathered edges

    Unlike IconVariant the selection is not connected: every pixel within
    ``color_tolerance`` of the background colour is removed.
    """

    algorithm_id = "gimp"

    def __init__(
        self,
        options: Optional[GimpOptions] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        super().__init__(logger)
        self.options = options or GimpOptions()

    def process(self, buffer: PixelBuffer) -> PixelBuffer:
        opts = self.options
        self.logger.log_info("GIMP-style: selecting by color...")

        corners = sample_corner_colors(buffer)
        if opts.majority_corner:
            background_color = dominant_color(corners)
        else:
            background_color = corners[0]
        distance = color_distance_map(buffer.rgb, background_color)
        selected = distance <= opts.color_tolerance

        # 1 = keep, 0 = background
        coverage = np.where(selected, 0.0, 1.0)
        feathered = opts.anti_alias and opts.feather_radius > 0
        if feathered:
            coverage = gaussian_feather(
                coverage, opts.feather_radius, renormalize=opts.renormalize_borders
            )

        alpha = probability_alpha(coverage)

        self.logger.log_info(
            f"  Background {color_to_hex(background_color)}: "
            f"selected {float(selected.mean()):.1%} of pixels"
        )
        self._record(
            method="color_select + gaussian_feather",
            background_rgb=list(background_color),
            color_tolerance=opts.color_tolerance,
            feather_radius=opts.feather_radius if feathered else 0,
            selected_ratio=float(selected.mean()),
        )

        return buffer.with_alpha(alpha)


class InkscapeVariant(AlgorithmVariant):
    """
    Edge-weighted colour distance on a median-denoised image

    Pixels far from the averaged corner colour are kept with alpha equal to
    their distance; strong edges keep pixels a distance test alone would
    drop. The output carries the denoised colours.
    """

    algorithm_id = "inkscape"

    def __init__(
        self,
        options: Optional[InkscapeOptions] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        super().__init__(logger)
        self.options = options or InkscapeOptions()

    def process(self, buffer: PixelBuffer) -> PixelBuffer:
        opts = self.options
        self.logger.log_info("Inkscape-style: edge-weighted distance...")

        if opts.smoothing and opts.simplification > 0:
            buffer = buffer.with_rgb(median_smooth(buffer.rgb, opts.simplification))

        magnitude = detect_edges(buffer, "luminance")
        strength = normalized_edges(magnitude)

        background_color = average_color(sample_corner_colors(buffer))
        color_diff = color_distance_map(buffer.rgb, background_color)

        alpha = edge_weighted_alpha(
            color_diff,
            strength,
            opts.threshold,
            edge_cutoff=opts.edge_cutoff,
            edge_weight=opts.edge_weight,
        )

        self.logger.log_info(
            f"  Background {color_to_hex(background_color)}, "
            f"max edge magnitude {float(magnitude.max()):.1f}"
        )
        self._record(
            method="median + sobel + color_distance",
            background_rgb=list(background_color),
            threshold=opts.threshold,
            median_passes=opts.simplification if opts.smoothing else 0,
            max_edge_magnitude=float(magnitude.max()),
            opaque_ratio=float((alpha > 0).mean()),
        )

        return buffer.with_alpha(alpha)
