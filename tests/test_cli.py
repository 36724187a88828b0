from pathlib import Path

import pytest

from papercrop.cli import parse_args


@pytest.fixture
def input_path(tmp_path: Path) -> Path:
    path = tmp_path / "photo.jpg"
    path.write_bytes(b"fake")
    return path


def test_cli_defaults(input_path: Path):
    config = parse_args([str(input_path)])

    assert config.input_paths == [str(input_path)]
    assert config.output.output_dir == "."
    assert config.output.jpeg_quality == 90
    assert config.detection.cell_size == 40
    assert config.detection.brightness_threshold == 120
    assert config.cropper.max_zoom == 3
    assert config.manual_crop is None
    assert config.preview.enabled is False


def test_cli_parses_detection_and_output_flags(input_path: Path, tmp_path: Path):
    config = parse_args(
        [
            str(input_path),
            "-o",
            str(tmp_path / "out"),
            "--cell-size",
            "20",
            "--min-cell-density",
            "0.5",
            "--min-rect-cells",
            "4",
            "--padding",
            "0.05",
            "--quality",
            "80",
            "--json",
            "--preview",
            "--detect-only",
        ]
    )

    assert config.detection.cell_size == 20
    assert config.detection.min_cell_density == 0.5
    assert config.detection.min_rect_cells == 4
    assert config.detection.padding_percent == 0.05
    assert config.output.jpeg_quality == 80
    assert config.output.write_json is True
    assert config.output.detect_only is True
    assert config.preview.enabled is True


def test_cli_parses_manual_crop(input_path: Path):
    config = parse_args([str(input_path), "--crop", "10, 5, 80, 90"])
    assert config.manual_crop == [10.0, 5.0, 80.0, 90.0]


@pytest.mark.parametrize("crop", ["10,5,80", "a,b,c,d", "10,10,0,50", "50,50,60,10"])
def test_cli_rejects_invalid_crop(input_path: Path, crop: str):
    with pytest.raises(SystemExit):
        parse_args([str(input_path), "--crop", crop])


def test_cli_rejects_missing_input(tmp_path: Path):
    with pytest.raises(SystemExit):
        parse_args([str(tmp_path / "missing.jpg")])


@pytest.mark.parametrize(
    "flags",
    [["--quality", "0"], ["--cell-size", "0"], ["--preview-alpha", "2"], ["--min-cell-density", "1.5"]],
)
def test_cli_rejects_invalid_values(input_path: Path, flags):
    with pytest.raises(SystemExit):
        parse_args([str(input_path), *flags])
