import numpy as np
import pytest

from helpers import make_buffer
from papercrop.config import DetectionConfig
from papercrop.core.io import PixelBuffer
from papercrop.detection.mask import (
    PaperMask,
    classify_pixels,
    has_usable_coverage,
    is_paper_pixel,
    pixel_brightness,
)


def test_pixel_brightness_uses_luma_weights():
    assert pixel_brightness(255, 255, 255) == pytest.approx(255)
    assert pixel_brightness(0, 0, 0) == 0
    assert pixel_brightness(100, 0, 0) == pytest.approx(29.9)


@pytest.mark.parametrize(
    "rgb, expected",
    [
        ((255, 255, 255), True),
        ((200, 180, 170), True),   # warm paper, saturation 0.15
        ((0, 0, 0), False),
        ((100, 100, 100), False),  # too dark
        ((255, 0, 0), False),      # saturated
        ((255, 255, 150), False),  # saturation ~0.41
    ],
)
def test_is_paper_pixel(rgb, expected):
    assert is_paper_pixel(*rgb) is expected


def test_is_paper_pixel_respects_config():
    config = DetectionConfig(brightness_threshold=90)
    assert is_paper_pixel(100, 100, 100, config)


def test_classify_pixels_counts_and_coverage():
    buffer = make_buffer(10, 10, (0, 0, 5, 10))
    paper_mask = classify_pixels(buffer)

    assert paper_mask.mask.shape == (10, 10)
    assert paper_mask.white_pixel_count == 50
    assert paper_mask.coverage == pytest.approx(0.5)
    assert paper_mask.mask[:, :5].all()
    assert not paper_mask.mask[:, 5:].any()


def test_classify_pixels_matches_scalar_rule():
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(24, 24, 3), dtype=np.uint8)
    buffer = PixelBuffer(width=24, height=24, pixels=pixels)

    paper_mask = classify_pixels(buffer)
    expected = np.array(
        [[is_paper_pixel(*map(int, pixels[y, x])) for x in range(24)] for y in range(24)]
    )
    assert np.array_equal(paper_mask.mask, expected)


def test_black_pixels_have_zero_saturation_but_fail_brightness():
    paper_mask = classify_pixels(make_buffer(4, 4))
    assert paper_mask.white_pixel_count == 0
    assert paper_mask.coverage == 0


@pytest.mark.parametrize(
    "coverage, usable",
    [(0.0, False), (0.04, False), (0.05, True), (0.5, True), (0.95, True), (0.96, False), (1.0, False)],
)
def test_has_usable_coverage(coverage, usable):
    paper_mask = PaperMask(mask=np.zeros((1, 1), dtype=bool), white_pixel_count=0, coverage=coverage)
    assert has_usable_coverage(paper_mask) is usable
