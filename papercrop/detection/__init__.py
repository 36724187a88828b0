"""Paper detection: pixel mask, density grid, maximal rectangle."""

from .base import (
    CropArea,
    DensityCell,
    DetectionResult,
    Detector,
    GridRectangle,
    PixelRect,
    full_image_result,
)
from .paper import PaperDetector, detect_paper

__all__ = [
    "CropArea",
    "DensityCell",
    "DetectionResult",
    "Detector",
    "GridRectangle",
    "PixelRect",
    "PaperDetector",
    "detect_paper",
    "full_image_result",
]
