"""Encoding pixel buffers as displayable PNG images."""
import io
import logging

from PIL import Image

from traceify.types import PixelBuffer, SurfaceError, MaskEncodeError

logger = logging.getLogger(__name__)


def encode_png(image: PixelBuffer) -> bytes:
    """
    Encode a buffer as PNG.

    Args:
        image: Buffer to encode

    Returns:
        PNG file contents

    Raises:
        SurfaceError: If no image surface can be built from the buffer
        MaskEncodeError: If PNG encoding fails
    """
    if image.width == 0 or image.height == 0:
        raise SurfaceError(
            f"Cannot create a {image.width}x{image.height} surface"
        )

    try:
        surface = Image.fromarray(image.pixels)
    except (TypeError, ValueError) as e:
        raise SurfaceError(f"Cannot create image surface: {e}") from e

    out = io.BytesIO()
    try:
        surface.save(out, format='PNG')
    except (IOError, OSError, ValueError) as e:
        raise MaskEncodeError(f"Mask could not be encoded: {e}") from e

    data = out.getvalue()
    logger.debug(f"Encoded {image.width}x{image.height} PNG ({len(data)} bytes)")
    return data


def save_png(image: PixelBuffer, output_path: str) -> None:
    """
    Save a buffer to a PNG file.

    Args:
        image: Buffer to save
        output_path: Output file path
    """
    with open(output_path, 'wb') as f:
        f.write(encode_png(image))
