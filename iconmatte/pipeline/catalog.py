"""
Algorithm catalog: static id -> display metadata
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class AlgorithmInfo:
    algorithm_id: str
    display_name: str
    description: str


_ENTRIES = (
    AlgorithmInfo("icon", "Icon Algorithm", "Best for solid color backgrounds"),
    AlgorithmInfo("ai", "AI Algorithm", "General purpose AI model"),
    AlgorithmInfo("rembg", "Rembg", "U²-Net based removal"),
    AlgorithmInfo("modnet", "MODNet", "Portrait matting focused"),
    AlgorithmInfo("gimp", "GIMP-style", "Color selection with feathering"),
    AlgorithmInfo("inkscape", "Inkscape-style", "Vector-like edge detection"),
    AlgorithmInfo("inspyrenet", "InSPyReNet", "Salient object detection"),
)

ALGORITHM_CATALOG: Mapping[str, AlgorithmInfo] = MappingProxyType(
    {entry.algorithm_id: entry for entry in _ENTRIES}
)

DEFAULT_ALGORITHMS: tuple[str, ...] = tuple(ALGORITHM_CATALOG)


def output_filename(algorithm_id: str, extension: str = "png") -> str:
    """File name used when a result is saved or downloaded"""
    return f"transparent-icon-{algorithm_id}.{extension}"
