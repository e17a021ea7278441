"""traceify: raster image to black/white mask to SVG outline."""
from traceify.types import (
    PixelBuffer,
    PolarityFlags,
    Preset,
    TracerOptions,
    ConverterConfig,
    RunResult,
    RunStatus,
    TraceifyError,
    DecodeError,
    RasterError,
    SurfaceError,
    MaskEncodeError,
    TraceError,
    NoOutputError,
)

__version__ = "0.1.0"

__all__ = [
    "PixelBuffer",
    "PolarityFlags",
    "Preset",
    "TracerOptions",
    "ConverterConfig",
    "RunResult",
    "RunStatus",
    "TraceifyError",
    "DecodeError",
    "RasterError",
    "SurfaceError",
    "MaskEncodeError",
    "TraceError",
    "NoOutputError",
]
