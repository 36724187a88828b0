import numpy as np
import pytest

from papercrop.config import DetectionConfig
from papercrop.detection.base import GridRectangle, PixelRect
from papercrop.detection.geometry import (
    grid_to_pixel_rect,
    pad_rect,
    rectangle_confidence,
    to_crop_area,
)
from papercrop.detection.grid import DensityGrid


def _grid(density: np.ndarray) -> DensityGrid:
    return DensityGrid(
        density=density,
        is_paper=density >= 0.35,
        cell_size=40,
        image_width=density.shape[1] * 40,
        image_height=density.shape[0] * 40,
    )


def test_grid_to_pixel_rect_clips_to_image():
    rect = grid_to_pixel_rect(GridRectangle(col=1, row=2, width=3, height=4), 40, 150, 1000)
    assert rect == PixelRect(x1=40, y1=80, x2=150, y2=240)
    assert (rect.width, rect.height) == (110, 160)


def test_pad_rect_grows_each_side():
    padded = pad_rect(PixelRect(100, 100, 300, 300), 0.02, 400, 400)
    assert padded.x1 == pytest.approx(96)
    assert padded.y1 == pytest.approx(96)
    assert padded.width == pytest.approx(208)
    assert padded.height == pytest.approx(208)


def test_pad_rect_at_top_left_edge_stays_in_image():
    padded = pad_rect(PixelRect(0, 0, 200, 200), 0.02, 200, 200)
    assert padded == PixelRect(0.0, 0.0, 200.0, 200.0)


def test_pad_rect_at_bottom_right_edge_stays_in_image():
    padded = pad_rect(PixelRect(100, 40, 200, 100), 0.02, 200, 100)
    assert padded.x1 == pytest.approx(98)
    assert padded.y1 == pytest.approx(38.8)
    assert padded.x2 == pytest.approx(200)
    assert padded.y2 == pytest.approx(100)


def test_to_crop_area_percentages():
    area = to_crop_area(PixelRect(100, 50, 300, 150), 400, 200)
    assert area.x == pytest.approx(25)
    assert area.y == pytest.approx(25)
    assert area.width == pytest.approx(50)
    assert area.height == pytest.approx(50)


def test_confidence_is_boosted_mean_density():
    grid = _grid(np.full((2, 2), 0.5))
    rect = GridRectangle(col=0, row=0, width=2, height=2)
    assert rectangle_confidence(grid, rect) == pytest.approx(0.6)


def test_confidence_saturates_at_one():
    grid = _grid(np.full((2, 2), 0.95))
    rect = GridRectangle(col=0, row=0, width=2, height=2)
    assert rectangle_confidence(grid, rect) == 1.0


def test_confidence_multiplier_is_configurable():
    grid = _grid(np.full((1, 1), 0.5))
    rect = GridRectangle(col=0, row=0, width=1, height=1)
    config = DetectionConfig(confidence_multiplier=1.5)
    assert rectangle_confidence(grid, rect, config) == pytest.approx(0.75)
