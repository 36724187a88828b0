"""Headless batch cropping runner."""

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from ..config import ProcessingConfig
from ..core.io import LoadError, PixelBuffer, encode_image, load_image, read_source
from ..core.utils import render_detection_overlay
from ..crop.adapter import crop_area_to_pixel_crop
from ..crop.render import create_cropped_image
from ..detection.base import CropArea, DetectionResult
from ..detection.grid import build_density_grid
from ..detection.mask import classify_pixels
from ..detection.paper import PaperDetector


@dataclass
class ImageReport:
    """Outcome of processing one input file."""

    input_path: str
    result: DetectionResult
    crop_area: CropArea
    outputs: List[str] = field(default_factory=list)


def parse_crop(values: Optional[List[float]]) -> Optional[CropArea]:
    """Build a CropArea from [x, y, width, height] percentages."""
    if not values:
        return None
    x, y, width, height = values
    return CropArea(x=x, y=y, width=width, height=height)


def write_preview(buffer: PixelBuffer, area: CropArea, config: ProcessingConfig, path: Path) -> None:
    """Write the detection debug overlay for an image."""
    grid = build_density_grid(classify_pixels(buffer, config.detection), config.detection)
    crop_box = crop_area_to_pixel_crop(area, buffer.width, buffer.height).rounded(
        buffer.width, buffer.height
    )
    overlay = render_detection_overlay(
        buffer.pixels,
        grid.is_paper,
        config.detection.cell_size,
        crop_box,
        blend_alpha=config.preview.blend_alpha,
    )
    path.write_bytes(encode_image(overlay, quality=config.output.jpeg_quality))


def process_image(path: str, config: ProcessingConfig, detector: Optional[PaperDetector] = None) -> ImageReport:
    """Detect, crop and write outputs for one image file.

    Args:
        path: Input image path.
        config: Processing configuration.
        detector: Detector to reuse across images.

    Returns:
        ImageReport describing what was written.

    Raises:
        LoadError: If the image cannot be read or decoded.
        ValueError: If the crop rounds to an empty region.
    """
    detector = detector or PaperDetector.from_config(config.detection)
    buffer = load_image(read_source(path))
    result = detector.detect(buffer)

    manual = parse_crop(config.manual_crop)
    area = manual or result.crop_area
    report = ImageReport(input_path=path, result=result, crop_area=area)

    out_dir = Path(config.output.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(path).stem

    if config.output.write_json:
        json_path = out_dir / f"{stem}_detection.json"
        json_path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
        report.outputs.append(str(json_path))

    if config.preview.enabled:
        preview_path = out_dir / f"{stem}_preview.jpg"
        write_preview(buffer, area, config, preview_path)
        report.outputs.append(str(preview_path))

    if not config.output.detect_only:
        cropped = create_cropped_image(buffer, area, config.output)
        crop_path = out_dir / f"{stem}_cropped.jpg"
        crop_path.write_bytes(cropped.data)
        report.outputs.append(str(crop_path))

    return report


def format_report(report: ImageReport) -> str:
    """One-line summary of a processed image."""
    area = report.crop_area
    if report.result.detected:
        status = f"paper detected (confidence {report.result.confidence:.2f})"
    else:
        status = "no paper detected, using full image"
    return (
        f"{report.input_path}: {status}; crop x={area.x:.1f}% y={area.y:.1f}% "
        f"w={area.width:.1f}% h={area.height:.1f}%"
    )


def run_headless(config: ProcessingConfig) -> List[ImageReport]:
    """Process every input image.

    Args:
        config: Processing configuration.

    Returns:
        Reports for the images that were processed.

    Raises:
        SystemExit: If any input could not be loaded or cropped.
    """
    if config.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    detector = PaperDetector.from_config(config.detection)
    reports = []
    failures = []

    for path in tqdm(config.input_paths, desc="Cropping", disable=len(config.input_paths) < 2):
        try:
            report = process_image(path, config, detector)
        except (LoadError, ValueError) as exc:
            failures.append((path, exc))
            continue
        reports.append(report)
        print(format_report(report))

    for report in reports:
        for output in report.outputs:
            print(f"Output saved to: {output}")

    if failures:
        print("Some images could not be processed:", file=sys.stderr)
        for path, exc in failures:
            print(f"  - {path}: {exc}", file=sys.stderr)
        sys.exit(1)

    return reports
