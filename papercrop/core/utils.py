"""Image utility functions."""

import cv2
import numpy as np

PAPER_TINT = (0, 200, 255)
CROP_OUTLINE = (255, 64, 0)


def blend_images(
    img1: np.ndarray, img2: np.ndarray, alpha: np.ndarray | float
) -> np.ndarray:
    """Blend two images using alpha mask or scalar.

    Args:
        img1: First image (background).
        img2: Second image (foreground).
        alpha: Blend factor (0-1). Can be scalar or 2D/3D array.

    Returns:
        Blended image as uint8 array.

    Raises:
        ValueError: If image shapes don't match.
    """
    if img1.shape != img2.shape:
        raise ValueError(f"Shape mismatch: {img1.shape} vs {img2.shape}")

    if isinstance(alpha, np.ndarray) and alpha.ndim == 2:
        alpha = alpha[:, :, np.newaxis]

    blended = img1.astype(np.float32) * (1 - alpha) + img2.astype(np.float32) * alpha
    return np.clip(blended, 0, 255).astype(np.uint8)


def render_detection_overlay(
    pixels: np.ndarray,
    is_paper: np.ndarray,
    cell_size: int,
    crop_box: tuple[int, int, int, int] | None,
    blend_alpha: float = 0.3,
) -> np.ndarray:
    """Draw paper cells and the crop rectangle over an image.

    Args:
        pixels: RGB image.
        is_paper: Boolean cell grid.
        cell_size: Cell edge length in pixels.
        crop_box: (left, top, right, bottom) in pixels, or None.
        blend_alpha: Opacity of the paper-cell tint.

    Returns:
        RGB overlay image.
    """
    height, width = pixels.shape[:2]
    grid_height, grid_width = is_paper.shape

    # Edge cells may be partial, so upscale whole cells and trim
    upscaled = cv2.resize(
        is_paper.astype(np.float32),
        (grid_width * cell_size, grid_height * cell_size),
        interpolation=cv2.INTER_NEAREST,
    )[:height, :width]

    tint = np.empty_like(pixels)
    tint[:, :] = PAPER_TINT
    overlay = blend_images(pixels, tint, upscaled * blend_alpha)

    if crop_box is not None:
        left, top, right, bottom = crop_box
        thickness = max(2, min(width, height) // 200)
        overlay = np.ascontiguousarray(overlay)
        cv2.rectangle(
            overlay, (left, top), (max(left, right - 1), max(top, bottom - 1)),
            CROP_OUTLINE, thickness,
        )
    return overlay
