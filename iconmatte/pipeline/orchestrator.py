"""
Orchestrator: runs every requested algorithm over one decoded image
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .buffer import ImageSource, PixelBuffer, decode_image
from .config import PipelineConfig
from .errors import DecodeError, UnknownAlgorithmError
from .logger import PipelineLogger
from .segmentation import SegmentationService
from .variants import AlgorithmResult, AlgorithmVariant, build_variants


class RunStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


@dataclass
class RunReport:
    """Outcome of one multi-algorithm run"""

    requested: tuple[str, ...]
    results: List[AlgorithmResult] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)  # id -> error

    @property
    def succeeded(self) -> list[str]:
        return [result.algorithm_id for result in self.results]

    @property
    def status(self) -> RunStatus:
        if not self.results:
            return RunStatus.FAILURE
        if len(self.results) < len(self.requested):
            return RunStatus.PARTIAL
        return RunStatus.SUCCESS

    def summary(self) -> str:
        text = f"Processed {len(self.results)}/{len(self.requested)} algorithms"
        if self.status is RunStatus.FAILURE:
            return f"{text}: all algorithms failed"
        if self.status is RunStatus.PARTIAL:
            return f"{text} (failed: {', '.join(self.failures)})"
        return text

    def save_all(self, directory: Path) -> list[Path]:
        return [result.save(directory) for result in self.results]


class Orchestrator:
    """
    Sequential multi-algorithm background removal

    Each requested variant runs in request order on its own copy of the
    input. A failing variant is logged and skipped; the run always
    continues with the next one.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        logger: Optional[PipelineLogger] = None,
        service: Optional[SegmentationService] = None,
        variants: Optional[Dict[str, AlgorithmVariant]] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logger or PipelineLogger()
        if variants is None:
            variants = build_variants(self.config, service, self.logger)
        self.variants = variants

    def resolve(self, algorithm_ids: Optional[Iterable[str]] = None) -> tuple[str, ...]:
        """
        Validate requested ids (default: config.algorithms)

        Raises:
            UnknownAlgorithmError: If an id has no registered variant
        """
        requested = tuple(
            self.config.algorithms if algorithm_ids is None else algorithm_ids
        )
        for algorithm_id in requested:
            if algorithm_id not in self.variants:
                raise UnknownAlgorithmError(algorithm_id)
        return requested

    def run(
        self, buffer: PixelBuffer, algorithm_ids: Optional[Iterable[str]] = None
    ) -> RunReport:
        """
        Run the requested algorithms over an already decoded image

        Args:
            buffer: Decoded source image (never modified)
            algorithm_ids: Ids in execution order (default: config.algorithms)

        Returns:
            RunReport with results for the algorithms that completed
        """
        report = RunReport(requested=self.resolve(algorithm_ids))

        for algorithm_id in report.requested:
            variant = self.variants[algorithm_id]
            self.logger.log_info(f"Processing with {algorithm_id} algorithm...")

            try:
                result = variant.run(buffer)
            except Exception as e:
                self.logger.log_error(
                    f"✗ {algorithm_id} failed: {e}", exc_info=self.logger.debug_mode
                )
                report.failures[algorithm_id] = f"{type(e).__name__}: {e}"
                if self.logger.current_image is not None:
                    self.logger.log_stage(
                        algorithm_id, success=False, error=report.failures[algorithm_id]
                    )
                continue

            report.results.append(result)
            self.logger.log_info(f"✓ {algorithm_id}: {result.filename}")

        self.logger.summarize_image(
            status=report.status.value,
            requested=list(report.requested),
            succeeded=report.succeeded,
            failed=list(report.failures),
        )

        if report.status is RunStatus.FAILURE:
            self.logger.log_warning(report.summary())
        else:
            self.logger.log_info(report.summary())

        return report

    def process(
        self, source: ImageSource, algorithm_ids: Optional[Iterable[str]] = None
    ) -> RunReport:
        """
        Decode ``source`` and run the requested algorithms

        Raises:
            DecodeError: If the source cannot be decoded (no algorithm runs)
            UnknownAlgorithmError: If an id has no registered variant
        """
        label = source if isinstance(source, (str, Path)) else type(source).__name__
        self.logger.start_image(label)

        try:
            buffer = decode_image(source)
        except DecodeError as e:
            self.logger.log_error(f"Could not decode image: {e}")
            self.logger.save_image_log()
            raise

        self.logger.log_info(f"  Image size: {buffer.width}x{buffer.height}")

        try:
            return self.run(buffer, algorithm_ids)
        finally:
            self.logger.save_image_log()
