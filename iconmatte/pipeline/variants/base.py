"""
AlgorithmVariant: shared contract of every background removal algorithm
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Any, Optional

from PIL import Image

from ..buffer import PixelBuffer, encode_png
from ..catalog import ALGORITHM_CATALOG, AlgorithmInfo, output_filename
from ..logger import PipelineLogger


@dataclass
class AlgorithmResult:
    """Output of one successfully completed algorithm"""

    algorithm_id: str
    buffer: PixelBuffer
    artifact: bytes  # PNG

    @property
    def filename(self) -> str:
        return output_filename(self.algorithm_id)

    @property
    def info(self) -> Optional[AlgorithmInfo]:
        return ALGORITHM_CATALOG.get(self.algorithm_id)

    def to_image(self) -> Image.Image:
        """Decoded PIL handle of the artifact (for display)"""
        image = Image.open(BytesIO(self.artifact))
        image.load()
        return image

    def save(self, directory: Path) -> Path:
        """Write the artifact into ``directory`` under its standard file name"""
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.filename
        path.write_bytes(self.artifact)
        return path


class AlgorithmVariant(ABC):
    """
    One background removal algorithm

    Subclasses implement process(); run() wraps it with the working copy and
    the PNG encoding so every variant produces the same kind of result.
    """

    algorithm_id: str = "base"

    def __init__(self, logger: Optional[PipelineLogger] = None):
        self.logger = logger or PipelineLogger()

    @abstractmethod
    def process(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Compute the alpha channel for ``buffer``

        Args:
            buffer: Working copy owned by this invocation

        Returns:
            Freshly allocated RGBA buffer
        """
        pass

    def run(self, buffer: PixelBuffer) -> AlgorithmResult:
        """Process an independent copy of ``buffer`` and encode the output"""
        output = self.process(buffer.copy())
        artifact = encode_png(output)
        return AlgorithmResult(self.algorithm_id, output, artifact)

    def _record(self, **data: Any):
        """Attach stage data to the current image log, if one is open"""
        if self.logger.current_image is not None:
            self.logger.log_stage(self.algorithm_id, **data)
