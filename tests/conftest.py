from io import BytesIO
import struct
import zlib

import numpy as np
import pytest
from PIL import Image

from iconmatte.pipeline import PipelineLogger, PixelBuffer
from iconmatte.pipeline.segmentation import SegmentationResult, SegmentationService


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return (
        struct.pack(">I", len(data))
        + kind
        + data
        + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)
    )


def oversized_png(width=20000, height=20000) -> bytes:
    """PNG header declaring more pixels than Pillow agrees to decode"""
    header = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", header) + _png_chunk(b"IEND", b"")


WHITE = (255, 255, 255)
BLUE = (0, 0, 255)


def solid_buffer(width, height, color=WHITE, alpha=255):
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = color
    pixels[:, :, 3] = alpha
    return PixelBuffer(width, height, pixels)


def square_buffer(size=20, start=6, stop=14, background=WHITE, foreground=BLUE):
    """Solid background with a filled square [start, stop) in both axes"""
    buffer = solid_buffer(size, size, background)
    buffer.pixels[start:stop, start:stop, :3] = foreground
    return buffer


def random_buffer(width, height, seed=0):
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    return PixelBuffer(width, height, pixels)


def horizontal_ramp(width, height):
    return np.tile(np.linspace(0.0, 1.0, width), (height, 1))


class FakeSegmentationService(SegmentationService):
    """Decodes the request and answers with a synthetic mask"""

    def __init__(self, mask_fn=horizontal_ramp, fail_models=()):
        self.mask_fn = mask_fn
        self.fail_models = set(fail_models)
        self.calls = []

    def segment(self, encoded, model):
        with Image.open(BytesIO(encoded)) as img:
            size = img.size
            image_format = img.format
        self.calls.append({"model": model, "size": size, "format": image_format})

        if model in self.fail_models:
            return SegmentationResult(masks=[], model=model)
        return SegmentationResult(masks=[self.mask_fn(*size)], model=model)


@pytest.fixture
def logger(tmp_path):
    return PipelineLogger(log_file=tmp_path / "logs" / "debug.log")


@pytest.fixture
def fake_service():
    return FakeSegmentationService()


@pytest.fixture
def icon_buffer():
    return square_buffer()
