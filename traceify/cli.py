"""Command-line interface for traceify."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from traceify.coordinator import RunCoordinator
from traceify.rasterize import save_png
from traceify.types import ConverterConfig, Preset, PRESET_ALIASES


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="traceify",
        description="Convert a raster image to a black/white mask and an SVG outline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  traceify -i logo.png -o logo.svg
  traceify -i sticker.webp --preset smooth --threshold 100
  traceify -i scan.jpg --no-auto-invert --flip-invert --mask scan_mask.png
        """,
    )

    parser.add_argument("-i", "--input", required=True, help="Input image file path")

    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output SVG file path (default: input name with .svg extension)",
    )

    parser.add_argument(
        "-t",
        "--threshold",
        type=int,
        default=140,
        help="Luminance cut point between shape and background, 0-255 (default: 140)",
    )

    parser.add_argument(
        "--no-auto-invert",
        action="store_true",
        help="Don't guess polarity from the image border",
    )

    parser.add_argument(
        "--flip-invert",
        action="store_true",
        help="Invert the polarity decision",
    )

    parser.add_argument(
        "-p",
        "--preset",
        choices=[p.value for p in Preset] + sorted(PRESET_ALIASES),
        default="sharp",
        help="Tracing preset: sharp (logo) or smooth (sticker) (default: sharp)",
    )

    parser.add_argument(
        "--mask", default=None, help="Also save the black/white mask as PNG"
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    return parser


async def convert(config: ConverterConfig, input_path: Path, output_path: str,
                  mask_path: Optional[str] = None) -> int:
    """Run one manual conversion and write its outputs."""
    coordinator = RunCoordinator(config)
    try:
        coordinator.select_file(input_path.read_bytes(), name=input_path.name)
        result = await coordinator.vectorize()

        if result is None:
            print(f"Error: {coordinator.error or 'conversion failed'}", file=sys.stderr)
            return 1

        coordinator.download_svg(output_path)
        print(f"  Output saved: {output_path}")
        print(f"  Shape coverage: {result.coverage:.1%}")

        if mask_path:
            save_png(result.mask, mask_path)
            print(f"  Mask saved: {mask_path}")

        return 0
    finally:
        coordinator.close()


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(parsed.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    if parsed.output:
        output_path = parsed.output
    else:
        output_path = str(input_path.with_suffix(".svg"))

    # Create output directory if it doesn't exist
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    try:
        config = ConverterConfig(
            threshold=parsed.threshold,
            auto_invert=not parsed.no_auto_invert,
            flip_invert=parsed.flip_invert,
            preset=Preset.parse(parsed.preset),
            auto_run=False,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Processing: {parsed.input}")
    print(f"  Threshold: {config.threshold}")
    print(f"  Auto invert: {config.auto_invert}, flip invert: {config.flip_invert}")
    print(f"  Preset: {config.preset.value}")

    try:
        return asyncio.run(convert(config, input_path, output_path, parsed.mask))
    except Exception as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
