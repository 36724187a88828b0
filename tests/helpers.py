"""Synthetic images for detection tests."""

from io import BytesIO
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from papercrop.core.io import PixelBuffer, encode_data_uri

Box = Tuple[int, int, int, int]  # (x1, y1, x2, y2), end-exclusive


def make_pixels(
    width: int,
    height: int,
    paper_box: Optional[Box] = None,
    background=(0, 0, 0),
    paper=(255, 255, 255),
) -> np.ndarray:
    """RGB array with an optional filled rectangle."""
    pixels = np.empty((height, width, 3), dtype=np.uint8)
    pixels[:, :] = background
    if paper_box is not None:
        x1, y1, x2, y2 = paper_box
        pixels[y1:y2, x1:x2] = paper
    return pixels


def make_buffer(width: int, height: int, paper_box: Optional[Box] = None, **kwargs) -> PixelBuffer:
    return PixelBuffer(width=width, height=height, pixels=make_pixels(width, height, paper_box, **kwargs))


def png_bytes(pixels: np.ndarray) -> bytes:
    buffer = BytesIO()
    Image.fromarray(pixels).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_uri(pixels: np.ndarray) -> str:
    return encode_data_uri(png_bytes(pixels), "image/png")
