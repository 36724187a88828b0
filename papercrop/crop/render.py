"""Cropped output image production."""

import time
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Union

import numpy as np

from ..config import OutputConfig
from ..core.io import ImageSource, PixelBuffer, encode_data_uri, encode_image, load_image
from ..detection.base import CropArea
from .adapter import crop_area_to_pixel_crop

JPEG_MIME = "image/jpeg"


@dataclass(frozen=True)
class CroppedImage:
    """Encoded crop result ready for display and upload.

    Attributes:
        data: Encoded JPEG bytes.
        data_uri: The same bytes as a base64 data URI.
        filename: Upload file name.
        mime_type: MIME type of ``data``.
        width: Output width in pixels.
        height: Output height in pixels.
    """

    data: bytes
    data_uri: str
    filename: str
    mime_type: str
    width: int
    height: int

    def as_file(self) -> BytesIO:
        """Binary file-like object for upload, named like the output file."""
        file = BytesIO(self.data)
        file.name = self.filename
        return file


def crop_pixels(buffer: PixelBuffer, area: CropArea) -> np.ndarray:
    """Cut the pixels covered by a percentage crop area.

    Bounds are rounded to the nearest pixel and clipped to the image.

    Args:
        buffer: Decoded image.
        area: Crop area in percentages.

    Returns:
        RGB array of the cropped region.

    Raises:
        ValueError: If the rounded crop is empty.
    """
    left, top, right, bottom = crop_area_to_pixel_crop(
        area, buffer.width, buffer.height
    ).rounded(buffer.width, buffer.height)
    if right <= left or bottom <= top:
        raise ValueError(f"Crop area {area} is empty for a {buffer.width}x{buffer.height} image")
    return buffer.pixels[top:bottom, left:right]


def create_cropped_image(
    source: Union[ImageSource, PixelBuffer],
    area: CropArea,
    config: Optional[OutputConfig] = None,
) -> CroppedImage:
    """Produce a JPEG of the region of an image covered by a crop area.

    Args:
        source: Decoded PixelBuffer, data URI or encoded bytes.
        area: Crop area in percentages of the original image.
        config: Output settings (JPEG quality).

    Returns:
        CroppedImage with bytes, data URI and upload file name.

    Raises:
        LoadError: If the source cannot be decoded.
        ValueError: If the crop is empty.
    """
    config = config or OutputConfig()
    buffer = source if isinstance(source, PixelBuffer) else load_image(source)

    region = crop_pixels(buffer, area)
    data = encode_image(region, fmt="JPEG", quality=config.jpeg_quality)
    height, width = region.shape[:2]
    return CroppedImage(
        data=data,
        data_uri=encode_data_uri(data, JPEG_MIME),
        filename=f"cropped-{int(time.time() * 1000)}.jpg",
        mime_type=JPEG_MIME,
        width=width,
        height=height,
    )
