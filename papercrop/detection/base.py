"""Base detection protocol and data structures."""

from dataclasses import dataclass
from typing import Dict, Protocol

from ..core.io import PixelBuffer


@dataclass(frozen=True)
class CropArea:
    """Rectangle in percentages (0-100) of the original image.

    Attributes:
        x: Left edge, percent of image width.
        y: Top edge, percent of image height.
        width: Width, percent of image width.
        height: Height, percent of image height.
    """

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def full(cls) -> "CropArea":
        """Crop area covering the whole image."""
        return cls(x=0.0, y=0.0, width=100.0, height=100.0)

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of a paper detection call.

    Attributes:
        detected: Whether a paper region was found.
        crop_area: Suggested crop; the full image when not detected.
        confidence: Heuristic score in [0, 1]; 0 when not detected.
        failed: Detection raised an unexpected error; implies not detected.
    """

    detected: bool
    crop_area: CropArea
    confidence: float
    failed: bool = False

    def to_dict(self) -> Dict[str, object]:
        """Serialize to the camelCase shape used by the cropper UI."""
        return {
            "detected": self.detected,
            "cropArea": self.crop_area.to_dict(),
            "confidence": self.confidence,
        }


def full_image_result(failed: bool = False) -> DetectionResult:
    """Result used whenever detection is inconclusive."""
    return DetectionResult(
        detected=False, crop_area=CropArea.full(), confidence=0.0, failed=failed
    )


@dataclass(frozen=True)
class DensityCell:
    """A single cell of the density grid.

    Attributes:
        col: Grid column.
        row: Grid row.
        x1, y1, x2, y2: Pixel bounds, end-exclusive.
        density: Fraction of paper-like pixels in the cell.
        is_paper: Whether density reaches the paper threshold.
    """

    col: int
    row: int
    x1: int
    y1: int
    x2: int
    y2: int
    density: float
    is_paper: bool


@dataclass(frozen=True)
class GridRectangle:
    """Rectangle of grid cells, in cell units."""

    col: int
    row: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class PixelRect:
    """Axis-aligned rectangle in pixel coordinates (x2, y2 exclusive)."""

    x1: float
    y1: float
    x2: float
    y2: float

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1


class Detector(Protocol):
    """Protocol for paper detectors."""

    def detect(self, buffer: PixelBuffer) -> DetectionResult:
        """Detect the paper region in a decoded image.

        Args:
            buffer: Decoded image.

        Returns:
            DetectionResult, never raising for inconclusive input.
        """
        ...
