"""Pytest configuration and fixtures."""

import io

import numpy as np
import pytest
from PIL import Image

from traceify.types import PixelBuffer


def solid_buffer(width: int, height: int, rgba) -> PixelBuffer:
    """Buffer with every pixel set to one RGBA value."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :] = rgba
    return PixelBuffer(pixels)


def framed_buffer(size: int, border_rgba, inner_rgba, border: int = 2) -> PixelBuffer:
    """Square buffer with a solid frame around a solid interior."""
    buffer = solid_buffer(size, size, border_rgba)
    buffer.pixels[border:-border, border:-border] = inner_rgba
    return buffer


def encode(buffer: PixelBuffer, fmt: str = "PNG") -> bytes:
    """Encode a buffer with PIL."""
    img = Image.fromarray(buffer.pixels)
    if fmt == "JPEG":
        img = img.convert("RGB")
    out = io.BytesIO()
    img.save(out, format=fmt)
    return out.getvalue()


@pytest.fixture
def square_png():
    """PNG of a black square on a white background."""
    return encode(framed_buffer(32, (255, 255, 255, 255), (0, 0, 0, 255), border=8))


@pytest.fixture
def dark_square_png():
    """PNG of a white square on a black background."""
    return encode(framed_buffer(32, (0, 0, 0, 255), (255, 255, 255, 255), border=8))
