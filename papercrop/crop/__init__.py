"""Interactive crop support: widget coordinates, output images, workflow."""

from .adapter import (
    AdapterPreconditionError,
    CropperView,
    PixelCrop,
    Point,
    crop_area_to_pixel_crop,
    crop_area_to_view,
    pixel_crop_to_crop_area,
    reset_view,
    view_to_pixel_crop,
)
from .render import CroppedImage, create_cropped_image, crop_pixels
from .workflow import CropSession, CropState, InvalidTransitionError

__all__ = [
    "AdapterPreconditionError",
    "CropSession",
    "CropState",
    "CroppedImage",
    "CropperView",
    "InvalidTransitionError",
    "PixelCrop",
    "Point",
    "create_cropped_image",
    "crop_area_to_pixel_crop",
    "crop_area_to_view",
    "crop_pixels",
    "pixel_crop_to_crop_area",
    "reset_view",
    "view_to_pixel_crop",
]
