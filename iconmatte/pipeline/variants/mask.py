"""
Mask variants: alpha from the external segmentation service
"""

from typing import Optional

import numpy as np

from ..buffer import PixelBuffer, encode_jpeg, resize_buffer, scaled_dimensions
from ..config import MaskOptions
from ..errors import InvalidSegmentationResult
from ..logger import PipelineLogger
from ..segmentation import SegmentationResult, SegmentationService
from ..stages import MaskPolicy, shape_mask
from .base import AlgorithmVariant


def extract_mask(result: Optional[SegmentationResult], width: int, height: int) -> np.ndarray:
    """
    First mask of a segmentation result, checked against the pixel grid

    Returns:
        (height, width) float64 probabilities

    Raises:
        InvalidSegmentationResult: If the mask is missing, empty, non-numeric,
            non-finite or sized for a different grid
    """
    masks = getattr(result, "masks", None)
    if not masks:
        raise InvalidSegmentationResult("Segmentation service returned no mask")

    try:
        mask = np.asarray(masks[0], dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidSegmentationResult(f"Mask is not numeric: {e}") from e

    if mask.size == 0:
        raise InvalidSegmentationResult("Segmentation mask is empty")

    if mask.size != width * height:
        raise InvalidSegmentationResult(
            f"Mask has {mask.size} values, expected {width * height} ({width}x{height})"
        )

    if not np.all(np.isfinite(mask)):
        raise InvalidSegmentationResult("Segmentation mask contains non-finite values")

    return mask.reshape(height, width)


class MaskVariant(AlgorithmVariant):
    """
    Segmentation-service backed variant

    Steps:
    1. Optionally downsample to ``max_dimension`` (output stays downsampled)
    2. JPEG-encode and send to the service with the configured model
    3. Shape the returned probability mask with the configured policy
    """

    def __init__(
        self,
        algorithm_id: str,
        service: SegmentationService,
        options: Optional[MaskOptions] = None,
        logger: Optional[PipelineLogger] = None,
    ):
        super().__init__(logger)
        self.algorithm_id = algorithm_id
        self.service = service
        self.options = options or MaskOptions()

    def process(self, buffer: PixelBuffer) -> PixelBuffer:
        opts = self.options
        self.logger.log_info(f"{self.algorithm_id}: segmenting with {opts.model}...")

        working = buffer
        if opts.max_dimension is not None:
            width, height = scaled_dimensions(
                buffer.width, buffer.height, opts.max_dimension, opts.truncate_resize
            )
            if (width, height) != buffer.size:
                working = resize_buffer(buffer, width, height)
                self.logger.log_info(
                    f"  Resized {buffer.width}x{buffer.height} → {width}x{height}"
                )

        encoded = encode_jpeg(working, opts.jpeg_quality)
        result = self.service.segment(encoded, opts.model)
        mask = extract_mask(result, working.width, working.height)

        alpha = shape_mask(mask, opts.policy)

        self._record(
            method="segmentation",
            model=opts.model,
            policy=MaskPolicy(opts.policy).value,
            size=[working.width, working.height],
            mean_probability=float(mask.mean()),
            opaque_ratio=float((alpha == 255).mean()),
        )

        return working.with_alpha(alpha)
