"""Density grid over the paper mask."""

from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from ..config import DetectionConfig
from .base import DensityCell, GridRectangle
from .mask import PaperMask


@dataclass(frozen=True)
class DensityGrid:
    """Per-cell paper density for an image.

    Attributes:
        density: Float array of shape (grid_height, grid_width).
        is_paper: Boolean array, density >= min_cell_density.
        cell_size: Cell edge length in pixels.
        image_width: Source image width.
        image_height: Source image height.
    """

    density: np.ndarray
    is_paper: np.ndarray
    cell_size: int
    image_width: int
    image_height: int

    @property
    def grid_width(self) -> int:
        return self.density.shape[1]

    @property
    def grid_height(self) -> int:
        return self.density.shape[0]

    def cell(self, row: int, col: int) -> DensityCell:
        """Return the cell at (row, col) with its pixel bounds."""
        if not (0 <= row < self.grid_height and 0 <= col < self.grid_width):
            raise IndexError(f"Cell ({row}, {col}) outside {self.grid_height}x{self.grid_width} grid")
        x1 = col * self.cell_size
        y1 = row * self.cell_size
        return DensityCell(
            col=col,
            row=row,
            x1=x1,
            y1=y1,
            x2=min(x1 + self.cell_size, self.image_width),
            y2=min(y1 + self.cell_size, self.image_height),
            density=float(self.density[row, col]),
            is_paper=bool(self.is_paper[row, col]),
        )

    def cells(self) -> Iterator[DensityCell]:
        """Iterate over all cells, row by row."""
        for row in range(self.grid_height):
            for col in range(self.grid_width):
                yield self.cell(row, col)

    def mean_density(self, rect: GridRectangle) -> float:
        """Average density of the cells covered by a grid rectangle."""
        window = self.density[rect.row:rect.row + rect.height, rect.col:rect.col + rect.width]
        if window.size == 0:
            return 0.0
        return float(window.mean())


def build_density_grid(paper_mask: PaperMask, config: Optional[DetectionConfig] = None) -> DensityGrid:
    """Partition the mask into fixed-size cells and measure paper density.

    Edge cells are smaller when the image size is not a multiple of the
    cell size; their density is relative to their own pixel count.

    Args:
        paper_mask: Classified pixels.
        config: Detection parameters.

    Returns:
        DensityGrid of ceil(width / cell) x ceil(height / cell) cells.
    """
    config = config or DetectionConfig()
    cell_size = config.cell_size
    height, width = paper_mask.mask.shape

    row_starts = np.arange(0, height, cell_size)
    col_starts = np.arange(0, width, cell_size)

    # Sum mask pixels per cell, rows first then columns
    counts = np.add.reduceat(paper_mask.mask.astype(np.int64), row_starts, axis=0)
    counts = np.add.reduceat(counts, col_starts, axis=1)

    row_sizes = np.minimum(row_starts + cell_size, height) - row_starts
    col_sizes = np.minimum(col_starts + cell_size, width) - col_starts
    totals = np.outer(row_sizes, col_sizes)

    density = counts / totals
    return DensityGrid(
        density=density,
        is_paper=density >= config.min_cell_density,
        cell_size=cell_size,
        image_width=width,
        image_height=height,
    )
