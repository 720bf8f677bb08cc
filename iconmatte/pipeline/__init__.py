"""
Multi-Algorithm Background Removal Pipeline
"""

from .buffer import PixelBuffer, decode_image, encode_png
from .catalog import ALGORITHM_CATALOG, DEFAULT_ALGORITHMS, AlgorithmInfo
from .config import PipelineConfig, SegmentationServiceConfig
from .logger import PipelineLogger
from .orchestrator import Orchestrator, RunReport, RunStatus
from .segmentation import RembgSegmentationService, SegmentationResult, SegmentationService
from .variants import AlgorithmResult, AlgorithmVariant

__all__ = [
    "ALGORITHM_CATALOG",
    "DEFAULT_ALGORITHMS",
    "AlgorithmInfo",
    "AlgorithmResult",
    "AlgorithmVariant",
    "Orchestrator",
    "PipelineConfig",
    "PipelineLogger",
    "PixelBuffer",
    "RembgSegmentationService",
    "RunReport",
    "RunStatus",
    "SegmentationResult",
    "SegmentationService",
    "SegmentationServiceConfig",
    "decode_image",
    "encode_png",
]
