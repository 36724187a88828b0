import json
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from helpers import make_pixels, png_bytes
from papercrop.cli import parse_args
from papercrop.runners.headless import run_headless


@pytest.fixture
def paper_photo(tmp_path: Path) -> Path:
    path = tmp_path / "sheet.png"
    path.write_bytes(png_bytes(make_pixels(600, 600, (120, 120, 480, 480))))
    return path


def _size(path: Path):
    with Image.open(BytesIO(path.read_bytes())) as img:
        return img.size


def test_run_headless_writes_crop_json_and_preview(paper_photo: Path, tmp_path: Path, capsys):
    out_dir = tmp_path / "out"
    reports = run_headless(parse_args([str(paper_photo), "-o", str(out_dir), "--json", "--preview"]))

    assert len(reports) == 1
    assert reports[0].result.detected

    cropped = out_dir / "sheet_cropped.jpg"
    assert _size(cropped) == (374, 374)
    assert _size(out_dir / "sheet_preview.jpg") == (600, 600)

    data = json.loads((out_dir / "sheet_detection.json").read_text(encoding="utf-8"))
    assert data["detected"] is True
    assert data["cropArea"]["x"] == pytest.approx(18.8)

    output = capsys.readouterr().out
    assert "paper detected" in output
    assert f"Output saved to: {cropped}" in output


def test_run_headless_manual_crop(paper_photo: Path, tmp_path: Path):
    out_dir = tmp_path / "out"
    run_headless(parse_args([str(paper_photo), "-o", str(out_dir), "--crop", "0,0,50,25"]))
    assert _size(out_dir / "sheet_cropped.jpg") == (300, 150)


def test_run_headless_detect_only(paper_photo: Path, tmp_path: Path):
    out_dir = tmp_path / "out"
    run_headless(parse_args([str(paper_photo), "-o", str(out_dir), "--detect-only", "--json"]))
    assert sorted(p.name for p in out_dir.iterdir()) == ["sheet_detection.json"]


def test_run_headless_uses_full_image_when_nothing_found(tmp_path: Path, capsys):
    blank = tmp_path / "blank.png"
    blank.write_bytes(png_bytes(make_pixels(200, 100, (0, 0, 200, 100))))
    out_dir = tmp_path / "out"

    reports = run_headless(parse_args([str(blank), "-o", str(out_dir)]))

    assert not reports[0].result.detected
    assert _size(out_dir / "blank_cropped.jpg") == (200, 100)
    assert "no paper detected" in capsys.readouterr().out


def test_run_headless_reports_unreadable_images(paper_photo: Path, tmp_path: Path, capsys):
    broken = tmp_path / "broken.jpg"
    broken.write_bytes(b"not an image")
    out_dir = tmp_path / "out"

    with pytest.raises(SystemExit) as exc_info:
        run_headless(parse_args([str(broken), str(paper_photo), "-o", str(out_dir)]))

    assert exc_info.value.code == 1
    assert (out_dir / "sheet_cropped.jpg").exists()
    assert "broken.jpg" in capsys.readouterr().err


def test_run_headless_reports_empty_crop(paper_photo: Path, tmp_path: Path, capsys):
    out_dir = tmp_path / "out"

    with pytest.raises(SystemExit) as exc_info:
        run_headless(parse_args([str(paper_photo), "-o", str(out_dir), "--crop", "10,10,0.01,50"]))

    assert exc_info.value.code == 1
    assert not (out_dir / "sheet_cropped.jpg").exists()
    err = capsys.readouterr().err
    assert "sheet.png" in err
    assert "empty" in err
