"""Conversions between percentage crop areas and cropper widget state.

The cropper shows the image at natural size scaled by ``zoom`` and keeps
its crop box centred in the viewport. ``pan`` is the image offset from
the viewport centre divided by the zoom, so a pan of (0, 0) centres the
image and the same crop region needs a smaller pan at higher zoom.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..config import CropperConfig
from ..detection.base import CropArea


class AdapterPreconditionError(RuntimeError):
    """Raised when coordinates are converted before image dimensions are known."""


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class PixelCrop:
    """Crop rectangle in image pixels, as reported by the cropper."""

    x: float
    y: float
    width: float
    height: float

    def rounded(self, image_width: int, image_height: int) -> Tuple[int, int, int, int]:
        """Round to whole pixels inside the image.

        Returns:
            Tuple of (left, top, right, bottom), right/bottom exclusive.
        """
        left = min(max(int(round(self.x)), 0), image_width)
        top = min(max(int(round(self.y)), 0), image_height)
        right = min(max(int(round(self.x + self.width)), left), image_width)
        bottom = min(max(int(round(self.y + self.height)), top), image_height)
        return left, top, right, bottom

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class CropperView:
    """Pan/zoom state of the cropper widget.

    Attributes:
        pan: Image offset from the viewport centre, in zoomed display space.
        zoom: Display scale factor.
        crop_size: Crop box (width, height) in display pixels.
    """

    pan: Point
    zoom: float
    crop_size: Tuple[float, float]

    def to_dict(self) -> Dict[str, object]:
        return {
            "pan": {"x": self.pan.x, "y": self.pan.y},
            "zoom": self.zoom,
            "cropSize": {"width": self.crop_size[0], "height": self.crop_size[1]},
        }


def _require_dimensions(image_width: Optional[int], image_height: Optional[int]) -> None:
    if image_width is None or image_height is None:
        raise AdapterPreconditionError("Image dimensions are not known yet")
    if image_width <= 0 or image_height <= 0:
        raise AdapterPreconditionError(
            f"Image dimensions must be positive, got {image_width}x{image_height}"
        )


def crop_area_to_view(
    area: CropArea,
    image_width: Optional[int],
    image_height: Optional[int],
    config: Optional[CropperConfig] = None,
) -> CropperView:
    """Convert a percentage crop area into cropper pan/zoom.

    Smaller regions get a higher zoom so the region fills the viewport.

    Args:
        area: Crop area in percentages.
        image_width: Natural image width in pixels.
        image_height: Natural image height in pixels.
        config: Zoom limits.

    Returns:
        CropperView centred on the crop area.

    Raises:
        AdapterPreconditionError: If image dimensions are unknown.
    """
    _require_dimensions(image_width, image_height)
    config = config or CropperConfig()

    center_x = (area.x + area.width / 2) / 100
    center_y = (area.y + area.height / 2) / 100
    width_frac = area.width / 100
    height_frac = area.height / 100

    largest = max(width_frac, height_frac)
    zoom = config.max_zoom if largest <= 0 else 1 / largest
    zoom = max(config.min_zoom, min(config.max_zoom, zoom))

    pan = Point(
        x=(0.5 - center_x) * image_width / zoom,
        y=(0.5 - center_y) * image_height / zoom,
    )
    crop_size = (width_frac * image_width * zoom, height_frac * image_height * zoom)
    return CropperView(pan=pan, zoom=zoom, crop_size=crop_size)


def view_to_pixel_crop(
    view: CropperView, image_width: Optional[int], image_height: Optional[int]
) -> PixelCrop:
    """Compute the image-pixel rectangle under the cropper's crop box.

    Raises:
        AdapterPreconditionError: If image dimensions are unknown.
    """
    _require_dimensions(image_width, image_height)

    center_x = image_width / 2 - view.pan.x * view.zoom
    center_y = image_height / 2 - view.pan.y * view.zoom
    width = view.crop_size[0] / view.zoom
    height = view.crop_size[1] / view.zoom

    x1 = min(max(center_x - width / 2, 0.0), image_width)
    y1 = min(max(center_y - height / 2, 0.0), image_height)
    x2 = min(max(center_x + width / 2, x1), image_width)
    y2 = min(max(center_y + height / 2, y1), image_height)
    return PixelCrop(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def reset_view(image_width: Optional[int], image_height: Optional[int]) -> CropperView:
    """View showing the whole image unzoomed."""
    _require_dimensions(image_width, image_height)
    return CropperView(pan=Point(0.0, 0.0), zoom=1.0, crop_size=(float(image_width), float(image_height)))


def pixel_crop_to_crop_area(
    crop: PixelCrop, image_width: Optional[int], image_height: Optional[int]
) -> CropArea:
    """Convert a confirmed pixel crop back to percentages.

    Raises:
        AdapterPreconditionError: If image dimensions are unknown.
    """
    _require_dimensions(image_width, image_height)
    return CropArea(
        x=crop.x / image_width * 100,
        y=crop.y / image_height * 100,
        width=crop.width / image_width * 100,
        height=crop.height / image_height * 100,
    )


def crop_area_to_pixel_crop(
    area: CropArea, image_width: Optional[int], image_height: Optional[int]
) -> PixelCrop:
    """Convert a percentage crop area to image pixels (unrounded)."""
    _require_dimensions(image_width, image_height)
    return PixelCrop(
        x=area.x / 100 * image_width,
        y=area.y / 100 * image_height,
        width=area.width / 100 * image_width,
        height=area.height / 100 * image_height,
    )
