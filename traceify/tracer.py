"""Adapter around the potrace outline tracer."""
import logging
from typing import Dict, Optional

import numpy as np

from traceify.svg_export import generate_svg
from traceify.types import PixelBuffer, Preset, TracerOptions, TraceError

logger = logging.getLogger(__name__)

# Potrace turn policy: resolve ambiguous turns toward the minority color
TURNPOLICY_MINORITY = 4

PRESET_OPTIONS: Dict[Preset, TracerOptions] = {
    Preset.SHARP: TracerOptions(
        turdsize=2,
        turnpolicy=TURNPOLICY_MINORITY,
        alphamax=1.0,
        opticurve=True,
        opttolerance=0.2,
    ),
    Preset.SMOOTH: TracerOptions(
        turdsize=8,
        turnpolicy=TURNPOLICY_MINORITY,
        alphamax=2.0,
        opticurve=True,
        opttolerance=0.6,
    ),
}


def get_tracer_options(preset: Preset) -> TracerOptions:
    """Look up the tracing parameters for a preset."""
    return PRESET_OPTIONS[Preset.parse(preset)]


class PotraceTracer:
    """
    Traces black regions of a binary mask into an SVG document.

    The potrace module is imported on first use and reused afterwards.
    """

    def __init__(self, precision: int = 2):
        """
        Initialize tracer.

        Args:
            precision: Decimal places for SVG coordinates
        """
        self.precision = precision
        self._backend = None

    def _ensure_backend(self):
        if self._backend is None:
            try:
                import potrace
            except ImportError as e:
                raise TraceError(f"Tracer backend unavailable: {e}") from e
            self._backend = potrace
        return self._backend

    def trace(self, mask: PixelBuffer, options: Optional[TracerOptions] = None) -> str:
        """
        Trace a mask into an SVG string.

        Args:
            mask: Black/white buffer; black pixels are traced
            options: Tracing parameters (default: sharp preset)

        Returns:
            SVG document

        Raises:
            TraceError: If tracing fails for any reason
        """
        options = options or PRESET_OPTIONS[Preset.SHARP]
        backend = self._ensure_backend()

        # Potrace traces dark pixels of a grayscale bitmap
        gray = np.ascontiguousarray(mask.pixels[..., 0])

        try:
            bitmap = backend.Bitmap(gray)
            path = bitmap.trace(**options.as_dict())
            svg = generate_svg(path.curves, mask.width, mask.height, self.precision)
        except Exception as e:
            raise TraceError(f"Tracing failed: {e}") from e

        logger.debug(f"Traced {len(path.curves)} curves ({len(svg)} bytes of SVG)")
        return svg

    __call__ = trace
