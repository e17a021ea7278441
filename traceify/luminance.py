"""Perceptual brightness of RGB pixels."""
import numpy as np

# Relative luminance coefficients (ITU-R BT.709)
RED_WEIGHT = 0.2126
GREEN_WEIGHT = 0.7152
BLUE_WEIGHT = 0.0722


def luminance(r: float, g: float, b: float) -> float:
    """Return the brightness of a single pixel given 8-bit channels."""
    return RED_WEIGHT * r + GREEN_WEIGHT * g + BLUE_WEIGHT * b


def luminance_array(rgb: np.ndarray) -> np.ndarray:
    """
    Compute brightness for every pixel of an (..., 3) channel array.

    Evaluated in float64 with the same operation order as `luminance`,
    so both forms agree exactly.

    Args:
        rgb: Array whose last axis holds red, green, blue

    Returns:
        float64 array with the last axis removed
    """
    channels = rgb.astype(np.float64)
    return (
        RED_WEIGHT * channels[..., 0]
        + GREEN_WEIGHT * channels[..., 1]
        + BLUE_WEIGHT * channels[..., 2]
    )
