"""
Algorithm variants
"""

from typing import Dict, Optional

from ..config import PipelineConfig
from ..logger import PipelineLogger
from ..segmentation import RembgSegmentationService, SegmentationService
from .base import AlgorithmResult, AlgorithmVariant
from .local import GimpVariant, IconVariant, InkscapeVariant
from .mask import MaskVariant, extract_mask


def build_variants(
    config: PipelineConfig,
    service: Optional[SegmentationService] = None,
    logger: Optional[PipelineLogger] = None,
) -> Dict[str, AlgorithmVariant]:
    """
    Instantiate every known variant from the configuration

    Returns:
        Mapping algorithm id -> variant
    """
    logger = logger or PipelineLogger()
    service = service or RembgSegmentationService(config.segmentation)

    variants: Dict[str, AlgorithmVariant] = {
        "icon": IconVariant(config.icon, logger),
        "gimp": GimpVariant(config.gimp, logger),
        "inkscape": InkscapeVariant(config.inkscape, logger),
    }
    for algorithm_id, options in config.masks.items():
        variants[algorithm_id] = MaskVariant(algorithm_id, service, options, logger)

    return variants


__all__ = [
    "AlgorithmResult",
    "AlgorithmVariant",
    "GimpVariant",
    "IconVariant",
    "InkscapeVariant",
    "MaskVariant",
    "build_variants",
    "extract_mask",
]
