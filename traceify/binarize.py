"""Black/white mask generation."""
import logging

import numpy as np

from traceify.luminance import luminance_array
from traceify.polarity import estimate_background_is_dark, resolve_invert
from traceify.types import PixelBuffer, PolarityFlags, validate_threshold

logger = logging.getLogger(__name__)

BLACK = 0
WHITE = 255


def make_bw_mask(
    source: PixelBuffer,
    threshold: int,
    flags: PolarityFlags,
    alpha_cutoff: int = 10,
    divisions: int = 50,
    dark_cutoff: float = 128.0
) -> PixelBuffer:
    """
    Binarize an image into an opaque black/white mask.

    Shape pixels become black and everything else white. Without
    inversion, pixels darker than the threshold are shape; with
    inversion, pixels brighter than it are. Transparent pixels are
    always background.

    Args:
        source: Source buffer
        threshold: Luminance cut point in [0, 255]
        flags: Polarity switches
        alpha_cutoff: Alpha below this is treated as background
        divisions: Border sampling density for polarity estimation
        dark_cutoff: Mean border luminance below this means dark

    Returns:
        New buffer with the source's dimensions, channels 0 or 255,
        alpha 255
    """
    threshold = validate_threshold(threshold)

    background_is_dark = False
    if flags.auto_invert:
        background_is_dark = estimate_background_is_dark(
            source, alpha_cutoff, divisions, dark_cutoff
        )
    invert = resolve_invert(flags, background_is_dark)

    lum = luminance_array(source.rgb)
    if invert:
        is_shape = lum > threshold
    else:
        is_shape = lum < threshold

    # Transparent pixels count as background
    is_shape &= source.alpha >= alpha_cutoff

    value = np.where(is_shape, BLACK, WHITE).astype(np.uint8)

    out = np.empty_like(source.pixels)
    out[..., 0] = value
    out[..., 1] = value
    out[..., 2] = value
    out[..., 3] = WHITE

    logger.debug(
        f"Mask {source.width}x{source.height}: threshold={threshold}, "
        f"invert={invert}, background_dark={background_is_dark}"
    )
    return PixelBuffer(out)


def mask_coverage(mask: PixelBuffer) -> float:
    """Fraction of mask pixels that are shape (black)."""
    if mask.pixels.size == 0:
        return 0.0
    return float(np.mean(mask.pixels[..., 0] == BLACK))
