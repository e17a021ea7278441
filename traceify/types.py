"""Core types for the image-to-mask-to-vector pipeline."""
from dataclasses import dataclass
from typing import Dict, Union
from enum import Enum
import numpy as np


class Preset(Enum):
    """Named bundle of tracer tuning parameters."""
    SHARP = "sharp"
    SMOOTH = "smooth"

    @classmethod
    def parse(cls, value: Union[str, "Preset"]) -> "Preset":
        """
        Resolve a preset from its name.

        Accepts the UI labels "logo" and "sticker" as aliases.

        Raises:
            ValueError: If the name is unknown
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        name = PRESET_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown preset: {value!r}") from None


PRESET_ALIASES = {
    "logo": "sharp",
    "sticker": "smooth",
}


class RunStatus(Enum):
    """Coordinator status after the latest attempt."""
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class PixelBuffer:
    """
    Rectangular RGBA image, one uint8 per channel.

    Pixels are stored row-major as an (height, width, 4) array.
    """
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(
                f"Expected (height, width, 4) array, got shape {self.pixels.shape}"
            )
        if self.pixels.dtype != np.uint8:
            self.pixels = self.pixels.astype(np.uint8)

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        """Allocate a fully transparent buffer."""
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def rgb(self) -> np.ndarray:
        return self.pixels[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[..., 3]


@dataclass(frozen=True)
class PolarityFlags:
    """User switches deciding which luminance extreme counts as shape."""
    auto_invert: bool = True
    flip_invert: bool = False


@dataclass(frozen=True)
class TracerOptions:
    """Flat option record handed to the outline tracer."""
    turdsize: int        # Noise suppression: ignore specks up to this area
    turnpolicy: int      # Corner/turn policy for ambiguous path directions
    alphamax: float      # Smoothing strength
    opticurve: bool      # Curve optimization enabled
    opttolerance: float  # Curve optimization tolerance

    def as_dict(self) -> Dict[str, Union[int, float, bool]]:
        return {
            "turdsize": self.turdsize,
            "turnpolicy": self.turnpolicy,
            "alphamax": self.alphamax,
            "opticurve": self.opticurve,
            "opttolerance": self.opttolerance,
        }


@dataclass
class ConverterConfig:
    """Configuration for the conversion session."""
    # Initial user settings
    threshold: int = 140
    auto_invert: bool = True
    flip_invert: bool = False
    preset: Preset = Preset.SHARP
    auto_run: bool = True

    # Run coordination
    debounce_seconds: float = 0.25

    # Export
    download_filename: str = "traceify.svg"

    # Binarization
    alpha_cutoff: int = 10       # Alpha below this is treated as background
    border_divisions: int = 50   # Border samples per edge (approximately)
    dark_cutoff: float = 128.0   # Mean border luminance below this is "dark"

    def __post_init__(self):
        self.preset = Preset.parse(self.preset)
        validate_threshold(self.threshold)
        if self.debounce_seconds < 0:
            raise ValueError(
                f"debounce_seconds must be non-negative, got {self.debounce_seconds}"
            )


def validate_threshold(threshold: int) -> int:
    """
    Check a luminance threshold.

    Raises:
        ValueError: If not an integer in [0, 255]
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, np.integer)):
        raise ValueError(f"Threshold must be an integer, got {threshold!r}")
    if not 0 <= threshold <= 255:
        raise ValueError(f"Threshold must be in [0, 255], got {threshold}")
    return int(threshold)


@dataclass
class RunResult:
    """Artifacts produced by one successful attempt."""
    token: int
    mask: PixelBuffer
    mask_png: bytes
    svg: str
    coverage: float = 0.0


class TraceifyError(Exception):
    """Base exception for conversion errors."""
    pass


class DecodeError(TraceifyError):
    """Raised when the input image cannot be decoded."""
    pass


class RasterError(TraceifyError):
    """Raised when a pixel buffer cannot be rasterized."""
    pass


class SurfaceError(RasterError):
    """Raised when no drawing surface can be created for a buffer."""
    pass


class MaskEncodeError(RasterError):
    """Raised when the mask preview cannot be encoded."""
    pass


class TraceError(TraceifyError):
    """Raised when the outline tracer fails."""
    pass


class NoOutputError(TraceifyError):
    """Raised when exporting while no vector document is current."""
    pass
