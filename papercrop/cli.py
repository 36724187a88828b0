"""Command-line interface for papercrop."""

import argparse
from pathlib import Path

from . import __version__
from .config import ProcessingConfig

EPILOG = """\
Examples:
  papercrop photo.jpg -o out/
  papercrop scans/*.jpg -o out/ --json --preview
  papercrop photo.jpg -o out/ --crop 10,5,80,90
  papercrop photo.jpg --detect-only --json --cell-size 20

Detection:
  Pixels brighter than --brightness-threshold with low saturation count as
  paper. The image is split into --cell-size cells; cells with at least
  --min-cell-density paper pixels form the paper region, and the largest
  rectangle of such cells (at least --min-rect-cells on each side) becomes
  the crop, padded by --padding on every side.
"""


def parse_crop_values(value: str) -> list[float]:
    """Parse an X,Y,W,H percentage crop."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise argparse.ArgumentTypeError("crop must be X,Y,WIDTH,HEIGHT")
    try:
        numbers = [float(part) for part in parts]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid crop value: {value}") from exc
    x, y, width, height = numbers
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("crop width and height must be positive")
    if min(x, y) < 0 or x + width > 100 or y + height > 100:
        raise argparse.ArgumentTypeError("crop must lie within 0-100%")
    return numbers


def parse_args(args=None) -> ProcessingConfig:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv).

    Returns:
        ProcessingConfig with parsed options.
    """
    parser = argparse.ArgumentParser(
        prog="papercrop",
        description="Find the sheet of paper in a photo and crop to it.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        type=str,
        help="Input images (.jpg, .png, ...)",
    )

    parser.add_argument(
        "-o", "--output-dir",
        type=str,
        default=".",
        help="Directory for cropped images and reports (default: current directory)",
    )

    parser.add_argument(
        "--crop",
        type=parse_crop_values,
        default=None,
        metavar="X,Y,W,H",
        help="Manual crop in percent of the image; skips the detected area",
    )

    parser.add_argument(
        "--detect-only",
        action="store_true",
        help="Only run detection; do not write cropped images",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Write <name>_detection.json with the detection result",
    )

    parser.add_argument(
        "--preview",
        action="store_true",
        help="Write <name>_preview.jpg showing paper cells and the crop",
    )

    parser.add_argument(
        "--preview-alpha",
        type=float,
        default=0.3,
        help="Opacity of the paper-cell tint in previews (default: 0.3)",
    )

    parser.add_argument(
        "--quality",
        type=int,
        default=90,
        help="JPEG quality of cropped output, 1-95 (default: 90)",
    )

    # Detection arguments
    parser.add_argument(
        "--brightness-threshold",
        type=float,
        default=120,
        help="Minimum luma for a paper pixel, 0-255 (default: 120)",
    )

    parser.add_argument(
        "--cell-size",
        type=int,
        default=40,
        help="Density grid cell size in pixels (default: 40)",
    )

    parser.add_argument(
        "--min-cell-density",
        type=float,
        default=0.35,
        help="Fraction of paper pixels for a cell to count as paper (default: 0.35)",
    )

    parser.add_argument(
        "--min-rect-cells",
        type=int,
        default=6,
        help="Minimum paper rectangle size in cells per side (default: 6)",
    )

    parser.add_argument(
        "--padding",
        type=float,
        default=0.02,
        help="Padding added on each side, as a fraction of the paper size (default: 0.02)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parsed = parser.parse_args(args)

    for path in parsed.inputs:
        if not Path(path).exists():
            parser.error(f"Input file not found: {path}")
    if not 1 <= parsed.quality <= 95:
        parser.error("--quality must be between 1 and 95")
    if not 0.0 <= parsed.preview_alpha <= 1.0:
        parser.error("--preview-alpha must be between 0.0 and 1.0")

    try:
        return ProcessingConfig.from_args(
            input_paths=parsed.inputs,
            output_dir=parsed.output_dir,
            brightness_threshold=parsed.brightness_threshold,
            cell_size=parsed.cell_size,
            min_cell_density=parsed.min_cell_density,
            min_rect_cells=parsed.min_rect_cells,
            padding_percent=parsed.padding,
            jpeg_quality=parsed.quality,
            write_json=parsed.json,
            detect_only=parsed.detect_only,
            preview_enabled=parsed.preview,
            preview_alpha=parsed.preview_alpha,
            manual_crop=parsed.crop,
            verbose=parsed.verbose,
        )
    except ValueError as exc:
        parser.error(str(exc))
