"""
PixelBuffer: RGBA working image shared by every algorithm, plus decode/encode
"""

import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, EncodeError, RenderSurfaceError

ImageSource = Union["PixelBuffer", Image.Image, bytes, bytearray, str, Path]


@dataclass(eq=False)
class PixelBuffer:
    """
    RGBA image of ``width`` x ``height`` pixels

    ``pixels`` is a uint8 array of shape (height, width, 4), row-major with
    channel order R, G, B, A. A flat array of ``width * height * 4`` bytes is
    accepted and reshaped.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid dimensions: {self.width}x{self.height}")

        if isinstance(self.pixels, (bytes, bytearray)):
            pixels = np.frombuffer(bytes(self.pixels), dtype=np.uint8).copy()
        else:
            pixels = np.asarray(self.pixels)
        if pixels.dtype != np.uint8:
            raise ValueError(f"Pixels must be uint8, got {pixels.dtype}")

        expected = self.width * self.height * 4
        if pixels.size != expected:
            raise ValueError(
                f"Pixel data has {pixels.size} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )

        self.pixels = pixels.reshape(self.height, self.width, 4)

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Build a buffer from a PIL image (converted to RGBA)"""
        rgba = image.convert("RGBA")
        return cls(rgba.width, rgba.height, np.array(rgba, dtype=np.uint8))

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def rgb(self) -> np.ndarray:
        """Read-only view of the colour channels (H, W, 3)"""
        view = self.pixels[:, :, :3]
        view.flags.writeable = False
        return view

    @property
    def alpha(self) -> np.ndarray:
        """Read-only view of the alpha channel (H, W)"""
        view = self.pixels[:, :, 3]
        view.flags.writeable = False
        return view

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def copy(self) -> "PixelBuffer":
        """Independent working copy"""
        try:
            pixels = self.pixels.copy()
        except MemoryError as e:
            raise RenderSurfaceError(
                f"Cannot allocate {self.width}x{self.height} surface: {e}"
            ) from e
        return PixelBuffer(self.width, self.height, pixels)

    def with_rgb(self, rgb: np.ndarray) -> "PixelBuffer":
        """New buffer with replaced colour channels and this buffer's alpha"""
        result = self.copy()
        result.pixels[:, :, :3] = rgb
        return result

    def with_alpha(self, alpha: np.ndarray) -> "PixelBuffer":
        """
        New buffer with this buffer's colours and the given alpha channel

        Args:
            alpha: (H, W) array, values clipped to [0, 255]
        """
        alpha = np.asarray(alpha)
        if alpha.shape != (self.height, self.width):
            raise ValueError(
                f"Alpha shape {alpha.shape} does not match {self.height}x{self.width}"
            )

        result = self.copy()
        result.pixels[:, :, 3] = np.clip(alpha, 0, 255).astype(np.uint8)
        return result

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def to_bytes(self) -> bytes:
        return self.pixels.tobytes()


def decode_image(source: ImageSource) -> PixelBuffer:
    """
    Decode an image into a fresh RGBA PixelBuffer

    Args:
        source: Encoded bytes, a file path, a PIL image or an existing buffer

    Returns:
        Decoded buffer

    Raises:
        DecodeError: If the source is empty, unreadable or has no pixels
    """
    if isinstance(source, PixelBuffer):
        buffer = source.copy()
    else:
        try:
            if isinstance(source, Image.Image):
                buffer = PixelBuffer.from_image(source)
            else:
                if isinstance(source, (bytes, bytearray)):
                    if not source:
                        raise DecodeError("Image data is empty")
                    handle = BytesIO(bytes(source))
                else:
                    handle = Path(source)
                    if not handle.is_file():
                        raise DecodeError(f"Image file not found: {handle}")

                with Image.open(handle) as img:
                    buffer = PixelBuffer.from_image(img)

        except UnidentifiedImageError as e:
            raise DecodeError(f"Cannot identify image format: {e}") from e
        except (OSError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Error reading image: {e}") from e

    if buffer.width < 1 or buffer.height < 1:
        raise DecodeError(f"Image has no pixels: {buffer.width}x{buffer.height}")

    return buffer


def encode_png(buffer: PixelBuffer) -> bytes:
    """Losslessly encode a buffer (alpha included) as PNG"""
    out = BytesIO()
    try:
        buffer.to_image().save(out, "PNG", optimize=True)
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode PNG: {e}") from e
    return out.getvalue()


def encode_jpeg(buffer: PixelBuffer, quality: float) -> bytes:
    """
    Encode the colour channels as JPEG for the segmentation service

    Args:
        buffer: Source buffer (alpha is dropped)
        quality: Encoder quality in [0, 1]
    """
    out = BytesIO()
    try:
        image = Image.fromarray(np.ascontiguousarray(buffer.pixels[:, :, :3]))
        image.save(out, "JPEG", quality=max(1, min(100, round(quality * 100))))
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode JPEG: {e}") from e
    return out.getvalue()


def scaled_dimensions(
    width: int, height: int, max_dimension: int, truncate: bool = False
) -> tuple[int, int]:
    """
    Dimensions that fit within ``max_dimension`` keeping the aspect ratio

    Images that already fit are returned unchanged. By default the long side
    becomes exactly ``max_dimension`` and the short side is rounded half-up;
    with ``truncate`` both sides are scaled by the same ratio and truncated.
    """
    if width <= max_dimension and height <= max_dimension:
        return width, height

    if truncate:
        ratio = min(max_dimension / width, max_dimension / height)
        return max(1, int(width * ratio)), max(1, int(height * ratio))

    if width > height:
        return max_dimension, max(1, math.floor(height * max_dimension / width + 0.5))
    return max(1, math.floor(width * max_dimension / height + 0.5)), max_dimension


def resize_buffer(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """Resample a buffer to ``width`` x ``height``"""
    if (width, height) == buffer.size:
        return buffer.copy()

    try:
        pixels = cv2.resize(buffer.pixels, (width, height), interpolation=cv2.INTER_AREA)
    except (cv2.error, MemoryError) as e:
        raise RenderSurfaceError(
            f"Cannot resize {buffer.width}x{buffer.height} to {width}x{height}: {e}"
        ) from e

    return PixelBuffer(width, height, pixels)
