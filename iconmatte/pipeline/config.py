"""
PipelineConfig: Configuration for the multi-algorithm background removal run
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .catalog import DEFAULT_ALGORITHMS
from .stages.s4_alpha import MaskPolicy

# Model id -> rembg session name
DEFAULT_MODEL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "briaai/RMBG-1.4": "bria-rmbg",
        "Xenova/u2net": "u2net",
    }
)


@dataclass(frozen=True)
class SegmentationServiceConfig:
    """Settings handed to the segmentation service when it is constructed"""

    model_aliases: Mapping[str, str] = field(default_factory=lambda: DEFAULT_MODEL_ALIASES)
    cache_sessions: bool = False  # Reuse loaded model sessions across calls
    timeout_seconds: Optional[float] = 120.0  # None = wait indefinitely


@dataclass
class IconOptions:
    """Flood fill variant (solid colour backgrounds)"""

    tolerance: float = 35.0  # Colour distance for fill + anti-alias ramp
    edge_threshold: float = 50.0  # Sobel magnitude that marks a protected edge
    edge_channel: str = "red"
    smoothing: bool = True


@dataclass
class GimpOptions:
    """Corner colour selection + Gaussian feathering variant"""

    color_tolerance: float = 25.0
    feather_radius: float = 2.0
    anti_alias: bool = True  # False skips feathering entirely
    renormalize_borders: bool = False
    majority_corner: bool = False  # most common corner instead of top-left


@dataclass
class InkscapeOptions:
    """Edge-weighted colour distance variant"""

    threshold: float = 128.0  # Colour distance above which a pixel is kept
    simplification: int = 1  # Median filter passes before edge detection
    smoothing: bool = True  # False skips the median filter
    edge_cutoff: float = 0.3
    edge_weight: float = 128.0


@dataclass
class MaskOptions:
    """Segmentation-service variant"""

    model: str = "briaai/RMBG-1.4"
    policy: MaskPolicy = MaskPolicy.LINEAR
    max_dimension: Optional[int] = None  # Downsample before segmentation
    truncate_resize: bool = False
    jpeg_quality: float = 0.9


def default_mask_options() -> dict[str, MaskOptions]:
    return {
        "ai": MaskOptions(
            model="briaai/RMBG-1.4", max_dimension=1024, jpeg_quality=0.8
        ),
        "rembg": MaskOptions(model="Xenova/u2net", jpeg_quality=0.9),
        "modnet": MaskOptions(
            model="briaai/RMBG-1.4",
            policy=MaskPolicy.TRIMAP,
            max_dimension=512,
            truncate_resize=True,
            jpeg_quality=0.85,
        ),
        "inspyrenet": MaskOptions(
            model="briaai/RMBG-1.4", policy=MaskPolicy.REFINED, jpeg_quality=0.9
        ),
    }


@dataclass
class PipelineConfig:
    """Configuration for a background removal run"""

    # Algorithms, in execution order
    algorithms: tuple[str, ...] = DEFAULT_ALGORITHMS

    # Local variants
    icon: IconOptions = field(default_factory=IconOptions)
    gimp: GimpOptions = field(default_factory=GimpOptions)
    inkscape: InkscapeOptions = field(default_factory=InkscapeOptions)

    # Segmentation-service variants, keyed by algorithm id
    masks: dict[str, MaskOptions] = field(default_factory=default_mask_options)
    segmentation: SegmentationServiceConfig = field(
        default_factory=SegmentationServiceConfig
    )

    # Output
    output_dir: Optional[Path] = None
