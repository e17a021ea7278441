"""Background polarity estimation from border pixels."""
import logging

import numpy as np

from traceify.luminance import luminance_array
from traceify.types import PixelBuffer, PolarityFlags

logger = logging.getLogger(__name__)


def sample_border(
    image: PixelBuffer,
    divisions: int = 50
) -> np.ndarray:
    """
    Collect border pixels at a fixed stride.

    Top and bottom rows are sampled every max(1, width // divisions)
    columns, left and right columns every max(1, height // divisions)
    rows. Corners and single-row/column images yield repeated samples,
    each of which counts.

    Args:
        image: Source buffer
        divisions: Approximate number of samples per edge

    Returns:
        (N, 4) uint8 array of sampled RGBA values
    """
    pixels = image.pixels
    h, w = image.height, image.width
    if h == 0 or w == 0:
        return np.empty((0, 4), dtype=np.uint8)

    step_x = max(1, w // divisions)
    step_y = max(1, h // divisions)

    xs = np.arange(0, w, step_x)
    ys = np.arange(0, h, step_y)

    return np.concatenate([
        pixels[0, xs],
        pixels[h - 1, xs],
        pixels[ys, 0],
        pixels[ys, w - 1],
    ])


def estimate_background_is_dark(
    image: PixelBuffer,
    alpha_cutoff: int = 10,
    divisions: int = 50,
    dark_cutoff: float = 128.0
) -> bool:
    """
    Guess whether the image background is dark.

    Averages the luminance of opaque border samples. A border with no
    opaque samples is reported as light.

    Args:
        image: Source buffer
        alpha_cutoff: Samples with alpha below this are skipped
        divisions: Approximate number of samples per edge
        dark_cutoff: Mean luminance below this means dark

    Returns:
        True if the background is dark
    """
    samples = sample_border(image, divisions)
    opaque = samples[samples[:, 3] >= alpha_cutoff]

    if len(opaque) == 0:
        logger.debug("No opaque border samples, assuming light background")
        return False

    mean = float(np.mean(luminance_array(opaque[:, :3])))
    logger.debug(f"Border luminance {mean:.1f} over {len(opaque)} samples")
    return mean < dark_cutoff


def resolve_invert(flags: PolarityFlags, background_is_dark: bool) -> bool:
    """Combine the polarity switches with the estimator's verdict."""
    if flags.auto_invert:
        return flags.flip_invert != background_is_dark
    return flags.flip_invert
