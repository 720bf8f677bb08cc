"""
Segmentation service boundary for the ML-backed variants
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict, List, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from .config import SegmentationServiceConfig
from .errors import SegmentationServiceError, SegmentationTimeout


@dataclass
class SegmentationResult:
    """Per-pixel foreground probabilities (floats in [0, 1], row-major)"""

    masks: List[np.ndarray] = field(default_factory=list)
    model: str = ""


class SegmentationService(ABC):
    """Anything that turns an encoded image into probability masks"""

    @abstractmethod
    def segment(self, encoded: bytes, model: str) -> SegmentationResult:
        """
        Segment an encoded image

        Args:
            encoded: JPEG/PNG bytes
            model: Model identifier, e.g. "briaai/RMBG-1.4"

        Returns:
            SegmentationResult for the same pixel grid as the input
        """
        pass


class RembgSegmentationService(SegmentationService):
    """
    Segmentation through rembg's ONNX sessions

    Model identifiers are mapped to rembg session names through
    ``config.model_aliases``; unknown identifiers are passed through as-is.
    """

    def __init__(self, config: Optional[SegmentationServiceConfig] = None):
        self.config = config or SegmentationServiceConfig()
        self._sessions: Dict[str, Any] = {}

    def session_name(self, model: str) -> str:
        return self.config.model_aliases.get(model, model)

    def _load_session(self, model: str):
        from rembg import new_session

        name = self.session_name(model)
        if name in self._sessions:
            return self._sessions[name]

        session = new_session(name)
        if self.config.cache_sessions:
            self._sessions[name] = session
        return session

    def _predict(self, encoded: bytes, model: str) -> SegmentationResult:
        from rembg import remove

        try:
            with Image.open(BytesIO(encoded)) as img:
                image = img.convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise SegmentationServiceError(f"Service could not read image: {e}") from e

        mask = remove(image, session=self._load_session(model), only_mask=True)
        probabilities = np.asarray(mask.convert("L"), dtype=np.float32) / 255.0

        return SegmentationResult(masks=[probabilities], model=model)

    def segment(self, encoded: bytes, model: str) -> SegmentationResult:
        """
        Run the model, bounded by ``config.timeout_seconds``

        A timed-out prediction cannot be interrupted: its worker thread keeps
        running (and using CPU) until the model returns, and interpreter exit
        waits for it.
        """
        timeout = self.config.timeout_seconds
        if timeout is None:
            return self._predict(encoded, model)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="segmentation")
        future = executor.submit(self._predict, encoded, model)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout as e:
            raise SegmentationTimeout(
                f"Model {model!r} did not answer within {timeout:.1f}s"
            ) from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
