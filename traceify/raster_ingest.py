"""Raster image decoding into RGBA pixel buffers."""
import io
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image
from PIL import ImageOps
from PIL import UnidentifiedImageError

from traceify.types import PixelBuffer, DecodeError

logger = logging.getLogger(__name__)

# MPO is the multi-picture JPEG written by many cameras
SUPPORTED_FORMATS = ("PNG", "JPEG", "MPO", "WEBP")


def decode_image(source: Union[bytes, str, Path]) -> PixelBuffer:
    """
    Decode an image file into an RGBA buffer.

    Applies EXIF orientation and converts every mode to RGBA.

    Args:
        source: Encoded file contents, or a path to the file

    Returns:
        Decoded PixelBuffer

    Raises:
        FileNotFoundError: If a path is given and doesn't exist
        DecodeError: If the data is corrupt or not PNG, JPEG or WebP
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        if not path.is_file():
            raise DecodeError(f"Path is not a file: {path}")
        payload = path.read_bytes()
        label = str(path)
    else:
        payload = bytes(source)
        label = f"<{len(payload)} bytes>"

    if not payload:
        raise DecodeError(f"Empty image data: {label}")

    try:
        with Image.open(io.BytesIO(payload)) as img:
            if img.format not in SUPPORTED_FORMATS:
                raise DecodeError(
                    f"Unsupported image format {img.format} for {label}; "
                    "expected PNG, JPEG or WebP"
                )

            # Apply EXIF orientation transformation to handle rotation
            img = ImageOps.exif_transpose(img)

            if img.mode != 'RGBA':
                img = img.convert('RGBA')

            pixels = np.array(img, dtype=np.uint8)

    except DecodeError:
        raise
    except (UnidentifiedImageError, IOError, OSError) as e:
        raise DecodeError(f"Failed to decode image {label}: {e}") from e
    except Exception as e:
        raise DecodeError(f"Unexpected error decoding image {label}: {e}") from e

    buffer = PixelBuffer(pixels)
    logger.debug(f"Decoded {label}: {buffer.width}x{buffer.height}")
    return buffer
