import threading

import numpy as np
import pytest

from iconmatte.pipeline import SegmentationServiceConfig
from iconmatte.pipeline.errors import SegmentationTimeout
from iconmatte.pipeline.segmentation import RembgSegmentationService, SegmentationResult


class SlowService(RembgSegmentationService):
    def __init__(self, config, release):
        super().__init__(config)
        self.release = release

    def _predict(self, encoded, model):
        self.release.wait(5)
        return SegmentationResult(masks=[np.ones((1, 1))], model=model)


def test_model_aliases():
    service = RembgSegmentationService()

    assert service.session_name("briaai/RMBG-1.4") == "bria-rmbg"
    assert service.session_name("Xenova/u2net") == "u2net"
    assert service.session_name("isnet-general-use") == "isnet-general-use"


def test_config_is_immutable():
    config = SegmentationServiceConfig()
    with pytest.raises(AttributeError):
        config.cache_sessions = True


def test_timeout_raises():
    release = threading.Event()
    service = SlowService(SegmentationServiceConfig(timeout_seconds=0.05), release)
    try:
        with pytest.raises(SegmentationTimeout):
            service.segment(b"", "u2net")
    finally:
        release.set()


def test_answer_within_timeout():
    release = threading.Event()
    release.set()
    service = SlowService(SegmentationServiceConfig(timeout_seconds=5), release)

    result = service.segment(b"", "u2net")

    assert result.model == "u2net"
    assert len(result.masks) == 1


def test_no_timeout_calls_directly():
    release = threading.Event()
    release.set()
    service = SlowService(SegmentationServiceConfig(timeout_seconds=None), release)

    assert service.segment(b"", "u2net").masks[0].shape == (1, 1)
