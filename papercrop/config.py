"""Configuration dataclasses for papercrop."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class DetectionConfig:
    """Tunable parameters for grid-based paper detection."""

    brightness_threshold: float = 120
    saturation_threshold: float = 0.3
    min_paper_coverage: float = 0.05
    max_paper_coverage: float = 0.95
    padding_percent: float = 0.02
    cell_size: int = 40
    min_cell_density: float = 0.35
    min_rect_cells: int = 6
    confidence_multiplier: float = 1.2

    def __post_init__(self):
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if self.min_rect_cells < 1:
            raise ValueError(f"min_rect_cells must be >= 1, got {self.min_rect_cells}")
        if not 0.0 <= self.min_paper_coverage <= self.max_paper_coverage <= 1.0:
            raise ValueError(
                "Coverage bounds must satisfy 0 <= min <= max <= 1, got "
                f"{self.min_paper_coverage}..{self.max_paper_coverage}"
            )
        if not 0.0 <= self.min_cell_density <= 1.0:
            raise ValueError(f"min_cell_density must be in [0, 1], got {self.min_cell_density}")
        if not 0.0 <= self.padding_percent < 0.5:
            raise ValueError(f"padding_percent must be in [0, 0.5), got {self.padding_percent}")


@dataclass
class CropperConfig:
    """Zoom limits of the interactive cropper."""

    min_zoom: float = 1.0
    max_zoom: float = 3.0

    def __post_init__(self):
        if not 0 < self.min_zoom <= self.max_zoom:
            raise ValueError(f"Invalid zoom range: {self.min_zoom}..{self.max_zoom}")


@dataclass
class OutputConfig:
    """Configuration for cropped output files."""

    output_dir: str = "."
    jpeg_quality: int = 90
    write_json: bool = False
    detect_only: bool = False


@dataclass
class PreviewConfig:
    """Configuration for the detection debug overlay."""

    enabled: bool = False
    blend_alpha: float = 0.3


@dataclass
class ProcessingConfig:
    """Combined configuration for processing."""

    input_paths: List[str]
    detection: DetectionConfig
    cropper: CropperConfig
    output: OutputConfig
    preview: PreviewConfig
    manual_crop: Optional[List[float]] = None
    verbose: bool = False

    @classmethod
    def from_args(
        cls,
        input_paths: List[str],
        output_dir: str = ".",
        # Detection config
        brightness_threshold: float = 120,
        cell_size: int = 40,
        min_cell_density: float = 0.35,
        min_rect_cells: int = 6,
        padding_percent: float = 0.02,
        # Output config
        jpeg_quality: int = 90,
        write_json: bool = False,
        detect_only: bool = False,
        # Preview config
        preview_enabled: bool = False,
        preview_alpha: float = 0.3,
        manual_crop: Optional[List[float]] = None,
        verbose: bool = False,
    ) -> "ProcessingConfig":
        """Create ProcessingConfig from CLI arguments."""
        return cls(
            input_paths=list(input_paths),
            detection=DetectionConfig(
                brightness_threshold=brightness_threshold,
                cell_size=cell_size,
                min_cell_density=min_cell_density,
                min_rect_cells=min_rect_cells,
                padding_percent=padding_percent,
            ),
            cropper=CropperConfig(),
            output=OutputConfig(
                output_dir=output_dir,
                jpeg_quality=jpeg_quality,
                write_json=write_json,
                detect_only=detect_only,
            ),
            preview=PreviewConfig(enabled=preview_enabled, blend_alpha=preview_alpha),
            manual_crop=list(manual_crop) if manual_crop else None,
            verbose=verbose,
        )
