"""Image decoding and encoding utilities."""

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union
from urllib.parse import unquote_to_bytes

import numpy as np
from PIL import Image


DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w.+-]+=[^;,]*)*)(?P<base64>;base64)?,",
    re.IGNORECASE,
)

ImageSource = Union[str, bytes, bytearray]


class LoadError(ValueError):
    """Raised when an image payload cannot be decoded."""


@dataclass(frozen=True)
class PixelBuffer:
    """Decoded image pixels.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: RGB array of shape (height, width, 3), dtype uint8.
    """

    width: int
    height: int
    pixels: np.ndarray

    @property
    def total_pixels(self) -> int:
        return self.width * self.height


def is_data_uri(value: str) -> bool:
    """Check if a string looks like a data URI."""
    return DATA_URI_PATTERN.match(value) is not None


def decode_data_uri(uri: str) -> bytes:
    """Extract the payload bytes of a data URI.

    Args:
        uri: A ``data:`` URI, base64 or percent-encoded.

    Returns:
        Raw payload bytes.

    Raises:
        LoadError: If the URI is malformed.
    """
    match = DATA_URI_PATTERN.match(uri)
    if match is None:
        raise LoadError("Not a data URI")

    payload = uri[match.end():]
    if match.group("base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise LoadError("Invalid base64 payload in data URI") from exc

    return unquote_to_bytes(payload)


def encode_data_uri(data: bytes, mime: str = "image/jpeg") -> str:
    """Encode bytes as a base64 data URI."""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def read_source(path: Union[str, Path]) -> bytes:
    """Read an encoded image file from disk.

    Raises:
        LoadError: If the file cannot be read.
    """
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise LoadError(f"Cannot read image file: {path}") from exc


def _source_bytes(source: ImageSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, str):
        if is_data_uri(source):
            return decode_data_uri(source)
        raise LoadError("String image sources must be data URIs")
    raise LoadError(f"Unsupported image source type: {type(source).__name__}")


def open_image(source: ImageSource) -> Image.Image:
    """Decode an image payload into an RGB PIL Image.

    Args:
        source: Data URI string or raw encoded bytes.

    Returns:
        Fully loaded RGB image.

    Raises:
        LoadError: If the payload cannot be decoded or has no pixels.
    """
    data = _source_bytes(source)
    if not data:
        raise LoadError("Empty image payload")

    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            rgb = img.convert("RGB")
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise LoadError("Invalid image bytes") from exc

    width, height = rgb.size
    if width <= 0 or height <= 0:
        raise LoadError(f"Image has zero dimensions: {width}x{height}")
    return rgb


def load_image(source: ImageSource) -> PixelBuffer:
    """Decode an image payload into a PixelBuffer.

    Args:
        source: Data URI string or raw encoded bytes.

    Returns:
        PixelBuffer with a read-only RGB pixel array.

    Raises:
        LoadError: If the payload cannot be decoded.
    """
    img = open_image(source)
    pixels = np.asarray(img, dtype=np.uint8).copy()
    pixels.setflags(write=False)
    return PixelBuffer(width=img.width, height=img.height, pixels=pixels)


def encode_image(image: Union[Image.Image, np.ndarray], fmt: str = "JPEG", quality: int = 90) -> bytes:
    """Encode an RGB image to bytes.

    Args:
        image: PIL image or RGB numpy array.
        fmt: Pillow format name.
        quality: JPEG quality (1-95).

    Returns:
        Encoded image bytes.
    """
    if isinstance(image, np.ndarray):
        image = Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
    buffer = BytesIO()
    if fmt.upper() == "JPEG":
        image.save(buffer, format="JPEG", quality=quality)
    else:
        image.save(buffer, format=fmt)
    return buffer.getvalue()
