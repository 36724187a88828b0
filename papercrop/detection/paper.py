"""Grid-density paper detector."""

import logging
from typing import Optional

from ..config import DetectionConfig
from ..core.io import ImageSource, PixelBuffer, load_image
from .base import DetectionResult, full_image_result
from .geometry import grid_to_pixel_rect, pad_rect, rectangle_confidence, to_crop_area
from .grid import build_density_grid
from .mask import classify_pixels, has_usable_coverage
from .rectangle import find_largest_paper_rectangle, is_large_enough

logger = logging.getLogger(__name__)


class PaperDetector:
    """Locate a sheet of paper in a photo without a vision library.

    The image is reduced to a mask of bright, unsaturated pixels, the mask
    to a grid of per-cell densities, and the largest rectangle of dense
    cells becomes the suggested crop. Drawings on the paper lower the
    density of their cells but rarely break the rectangle apart.

    Attributes:
        config: Detection parameters.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        """Initialize PaperDetector.

        Args:
            config: Detection parameters; defaults are used when omitted.
        """
        self.config = config or DetectionConfig()

    @classmethod
    def from_config(cls, config: DetectionConfig) -> "PaperDetector":
        """Create PaperDetector from DetectionConfig."""
        return cls(config=config)

    def detect(self, buffer: PixelBuffer) -> DetectionResult:
        """Detect the paper region in a decoded image.

        Any failure while scanning is logged and reported as an
        inconclusive result so the caller can fall back to a manual crop.

        Args:
            buffer: Decoded image.

        Returns:
            DetectionResult with the padded crop area and confidence.
        """
        try:
            return self._detect(buffer)
        except Exception:
            logger.exception("Paper detection failed")
            return full_image_result(failed=True)

    def _detect(self, buffer: PixelBuffer) -> DetectionResult:
        config = self.config
        width, height = buffer.width, buffer.height

        paper_mask = classify_pixels(buffer, config)
        if not has_usable_coverage(paper_mask, config):
            logger.debug(
                "Paper coverage %.3f outside [%.2f, %.2f]",
                paper_mask.coverage,
                config.min_paper_coverage,
                config.max_paper_coverage,
            )
            return full_image_result()

        grid = build_density_grid(paper_mask, config)
        rect = find_largest_paper_rectangle(grid.is_paper)
        logger.debug(
            "Density grid %dx%d, largest paper rectangle %s",
            grid.grid_width,
            grid.grid_height,
            rect,
        )
        if not is_large_enough(rect, config):
            return full_image_result()

        paper_rect = grid_to_pixel_rect(rect, config.cell_size, width, height)
        crop_rect = pad_rect(paper_rect, config.padding_percent, width, height)
        return DetectionResult(
            detected=True,
            crop_area=to_crop_area(crop_rect, width, height),
            confidence=rectangle_confidence(grid, rect, config),
        )


def detect_paper(source: ImageSource, config: Optional[DetectionConfig] = None) -> DetectionResult:
    """Decode an image and detect the paper in it.

    Args:
        source: Data URI string or raw encoded bytes.
        config: Detection parameters.

    Returns:
        DetectionResult; inconclusive detections use the full image.

    Raises:
        LoadError: If the image cannot be decoded.
    """
    buffer = load_image(source)
    return PaperDetector(config).detect(buffer)

