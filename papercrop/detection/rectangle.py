"""Largest rectangle of paper cells.

Row-by-row histogram heights plus a monotonic stack, the classic
maximal-rectangle-in-binary-matrix algorithm. Ties keep the first
rectangle found: rows are scanned top to bottom and, within a row,
rectangles are compared in the order the stack pops them.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..config import DetectionConfig
from .base import GridRectangle


def largest_rectangle_in_histogram(heights: Sequence[int], bottom_row: int) -> Optional[GridRectangle]:
    """Find the largest rectangle under a histogram.

    Args:
        heights: Column heights, in cells, ending at ``bottom_row``.
        bottom_row: Grid row the histogram stands on.

    Returns:
        Largest rectangle, or None if every height is zero.
    """
    stack: List[int] = []
    best: Optional[GridRectangle] = None
    max_area = 0
    n = len(heights)

    for i in range(n + 1):
        h = heights[i] if i < n else 0
        while stack and heights[stack[-1]] > h:
            height = heights[stack.pop()]
            left = stack[-1] + 1 if stack else 0
            width = i - left
            area = height * width
            if area > max_area:
                max_area = area
                best = GridRectangle(
                    col=left,
                    row=bottom_row - height + 1,
                    width=width,
                    height=height,
                )
        stack.append(i)

    return best


def find_largest_paper_rectangle(is_paper: np.ndarray) -> Optional[GridRectangle]:
    """Find the largest axis-aligned rectangle of paper cells.

    Args:
        is_paper: Boolean grid of shape (grid_height, grid_width).

    Returns:
        Largest rectangle in grid units, or None if there are no paper cells.
    """
    grid_height, grid_width = is_paper.shape
    heights = [0] * grid_width
    best: Optional[GridRectangle] = None

    for row in range(grid_height):
        paper_row = is_paper[row]
        for col in range(grid_width):
            heights[col] = heights[col] + 1 if paper_row[col] else 0

        candidate = largest_rectangle_in_histogram(heights, row)
        if candidate is not None and (best is None or candidate.area > best.area):
            best = candidate

    return best


def is_large_enough(rect: Optional[GridRectangle], config: Optional[DetectionConfig] = None) -> bool:
    """Check both rectangle sides reach the minimum cell count."""
    config = config or DetectionConfig()
    if rect is None:
        return False
    return rect.width >= config.min_rect_cells and rect.height >= config.min_rect_cells
