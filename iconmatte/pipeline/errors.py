"""
Exception hierarchy for the matting pipeline
"""


class MattingError(Exception):
    """Base exception for background removal errors"""

    pass


class DecodeError(MattingError):
    """Raised when the source image cannot be decoded (fatal to the whole run)"""

    pass


class RenderSurfaceError(MattingError):
    """Raised when a working buffer cannot be allocated or resized"""

    pass


class InvalidSegmentationResult(MattingError):
    """Raised when the segmentation service returns no mask or a malformed one"""

    pass


class SegmentationServiceError(MattingError):
    """Raised when the segmentation service call itself fails"""

    pass


class SegmentationTimeout(SegmentationServiceError):
    """Raised when the segmentation service does not answer in time"""

    pass


class EncodeError(MattingError):
    """Raised when the output image cannot be serialized"""

    pass


class UnknownAlgorithmError(MattingError):
    """Raised when a requested algorithm id is not in the catalog"""

    def __init__(self, algorithm_id: str):
        super().__init__(f"Unknown algorithm: {algorithm_id!r}")
        self.algorithm_id = algorithm_id
