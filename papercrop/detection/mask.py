"""Paper-like pixel classification."""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import DetectionConfig
from ..core.io import PixelBuffer


@dataclass(frozen=True)
class PaperMask:
    """Binary mask of paper-like pixels.

    Attributes:
        mask: Boolean array of shape (height, width).
        white_pixel_count: Number of paper-like pixels.
        coverage: white_pixel_count / total pixels.
    """

    mask: np.ndarray
    white_pixel_count: int
    coverage: float

    @property
    def height(self) -> int:
        return self.mask.shape[0]

    @property
    def width(self) -> int:
        return self.mask.shape[1]


def pixel_brightness(r: float, g: float, b: float) -> float:
    """Luma-weighted brightness of a pixel (0-255)."""
    return 0.299 * r + 0.587 * g + 0.114 * b


def is_paper_pixel(r: float, g: float, b: float, config: Optional[DetectionConfig] = None) -> bool:
    """Check if a single pixel is bright and unsaturated enough to be paper."""
    config = config or DetectionConfig()
    max_channel = max(r, g, b)
    min_channel = min(r, g, b)
    saturation = (max_channel - min_channel) / max_channel if max_channel > 0 else 0.0
    return (
        pixel_brightness(r, g, b) > config.brightness_threshold
        and saturation < config.saturation_threshold
    )


def classify_pixels(buffer: PixelBuffer, config: Optional[DetectionConfig] = None) -> PaperMask:
    """Label every pixel of an image as paper-like or not.

    Vectorized form of :func:`is_paper_pixel` over the whole buffer.

    Args:
        buffer: Decoded RGB image.
        config: Detection parameters.

    Returns:
        PaperMask with the mask, count and coverage.
    """
    config = config or DetectionConfig()
    pixels = buffer.pixels
    r = pixels[:, :, 0].astype(np.float64)
    g = pixels[:, :, 1].astype(np.float64)
    b = pixels[:, :, 2].astype(np.float64)

    brightness = 0.299 * r + 0.587 * g + 0.114 * b
    max_channel = np.maximum(np.maximum(r, g), b)
    chroma = max_channel - np.minimum(np.minimum(r, g), b)
    saturation = np.divide(
        chroma, max_channel, out=np.zeros_like(chroma), where=max_channel > 0
    )

    mask = (brightness > config.brightness_threshold) & (
        saturation < config.saturation_threshold
    )
    white_pixel_count = int(np.count_nonzero(mask))
    total = mask.size
    coverage = white_pixel_count / total if total else 0.0
    return PaperMask(mask=mask, white_pixel_count=white_pixel_count, coverage=coverage)


def has_usable_coverage(paper_mask: PaperMask, config: Optional[DetectionConfig] = None) -> bool:
    """Check coverage is inside the range where the heuristic is reliable."""
    config = config or DetectionConfig()
    return config.min_paper_coverage <= paper_mask.coverage <= config.max_paper_coverage
