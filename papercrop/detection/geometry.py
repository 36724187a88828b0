"""Grid-to-image geometry: pixel rectangles, padding, percentages, confidence."""

from typing import Optional

from ..config import DetectionConfig
from .base import CropArea, GridRectangle, PixelRect
from .grid import DensityGrid


def grid_to_pixel_rect(rect: GridRectangle, cell_size: int, image_width: int, image_height: int) -> PixelRect:
    """Convert a grid rectangle to pixel bounds, clipped to the image."""
    x1 = rect.col * cell_size
    y1 = rect.row * cell_size
    x2 = min((rect.col + rect.width) * cell_size, image_width)
    y2 = min((rect.row + rect.height) * cell_size, image_height)
    return PixelRect(x1=x1, y1=y1, x2=x2, y2=y2)


def pad_rect(rect: PixelRect, padding_percent: float, image_width: int, image_height: int) -> PixelRect:
    """Grow a rectangle by a fraction of its own size on every side.

    The padded rectangle is clipped so it never leaves the image.

    Args:
        rect: Rectangle in pixels.
        padding_percent: Fraction of width/height added per side.
        image_width: Image width in pixels.
        image_height: Image height in pixels.

    Returns:
        Padded rectangle within [0, image_width] x [0, image_height].
    """
    pad_x = rect.width * padding_percent
    pad_y = rect.height * padding_percent

    x1 = max(0.0, rect.x1 - pad_x)
    y1 = max(0.0, rect.y1 - pad_y)
    width = min(image_width - x1, rect.width + 2 * pad_x)
    height = min(image_height - y1, rect.height + 2 * pad_y)
    return PixelRect(x1=x1, y1=y1, x2=x1 + width, y2=y1 + height)


def to_crop_area(rect: PixelRect, image_width: int, image_height: int) -> CropArea:
    """Express a pixel rectangle as percentages of the image."""
    return CropArea(
        x=rect.x1 / image_width * 100,
        y=rect.y1 / image_height * 100,
        width=rect.width / image_width * 100,
        height=rect.height / image_height * 100,
    )


def rectangle_confidence(grid: DensityGrid, rect: GridRectangle, config: Optional[DetectionConfig] = None) -> float:
    """Score a detection from the mean density of its cells.

    Ink on the paper keeps the mean below 1, so the mean is boosted
    linearly and capped at 1. This is a score, not a probability.
    """
    config = config or DetectionConfig()
    return min(1.0, grid.mean_density(rect) * config.confidence_multiplier)
