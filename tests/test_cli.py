"""
Tests for the command-line front end.
"""

import json

import pytest
from PIL import Image

from spread_layout.cli import EXIT_ERROR, EXIT_OK, EXIT_OVERLAPS, main


@pytest.fixture
def photo_dir(tmp_path):
    """Directory with three small photographs."""
    photos = tmp_path / "photos"
    photos.mkdir()
    for name, color in (("a.png", "red"), ("b.jpg", "green"), ("c.png", "blue")):
        Image.new("RGB", (300, 200), color).save(photos / name)
    return photos


def _write_layout(path, items, spacing=10):
    data = {
        "schema_version": 1,
        "spread": {"board_count": 2, "board_w": 500, "board_h": 500, "spacing": spacing},
        "items": items,
    }
    path.write_text(json.dumps(data))
    return path


def _box(item_id, x, y, z_order, **extra):
    return {"id": item_id, "x": x, "y": y, "w": 100, "h": 100, "z_order": z_order, **extra}


class TestLayoutAndExport:
    """End-to-end runs of layout then export."""

    def test_layout_then_export_when_valid_then_boards_written(self, tmp_path, photo_dir):
        # Arrange
        layout_path = tmp_path / "layout.json"
        out_dir = tmp_path / "out"

        # Act
        layout_code = main([
            "layout", str(photo_dir), "--out", str(layout_path),
            "--boards", "2", "--strategy", "pack", "--seed", "4",
        ])
        export_code = main(["export", str(layout_path), "--out", str(out_dir), "--scale", "1", "--zip"])

        # Assert
        assert layout_code == EXIT_OK
        assert export_code == EXIT_OK
        data = json.loads(layout_path.read_text())
        assert data["spread"]["board_count"] == 2
        assert len(data["items"]) == 3
        names = sorted(p.name for p in out_dir.iterdir())
        assert names == ["export_metadata.json", "spread.zip", "spread_1.png", "spread_2.png"]
        with Image.open(out_dir / "spread_1.png") as board:
            assert board.size == (1080, 1320)

    def test_layout_when_every_strategy_then_ok(self, tmp_path, photo_dir):
        for strategy in ("scatter", "pack", "editorial", "editorial-seamless", "distribute"):
            layout_path = tmp_path / f"{strategy}.json"
            assert main(["layout", str(photo_dir), "-o", str(layout_path), "--strategy", strategy]) == EXIT_OK
            assert layout_path.exists()

    def test_layout_when_image_missing_then_error(self, tmp_path):
        code = main(["layout", str(tmp_path / "nope.jpg"), "--out", str(tmp_path / "layout.json")])

        assert code == EXIT_ERROR
        assert not (tmp_path / "layout.json").exists()

    def test_export_when_jpg_format_then_jpg_files(self, tmp_path, photo_dir):
        layout_path = tmp_path / "layout.json"
        main(["layout", str(photo_dir), "-o", str(layout_path), "--boards", "1", "--seed", "1"])

        code = main([
            "export", str(layout_path), "-o", str(tmp_path / "out"),
            "--scale", "1", "--format", "jpg", "--prefix", "trip",
        ])

        assert code == EXIT_OK
        assert (tmp_path / "out" / "trip_1.jpg").exists()

    def test_export_when_source_missing_then_error_and_nothing_written(self, tmp_path):
        layout_path = _write_layout(tmp_path / "layout.json", [_box("a", 20, 20, 0, source="gone.jpg")])

        code = main(["export", str(layout_path), "-o", str(tmp_path / "out")])

        assert code == EXIT_ERROR
        assert not (tmp_path / "out").exists()

    def test_export_when_layout_missing_then_error(self, tmp_path):
        assert main(["export", str(tmp_path / "missing.json"), "-o", str(tmp_path)]) == EXIT_ERROR


class TestAudit:
    """Tests for the audit command."""

    def test_audit_when_overlapping_then_pairs_printed_and_exit_one(self, tmp_path, capsys):
        layout_path = _write_layout(tmp_path / "layout.json", [_box("a", 20, 20, 0), _box("b", 50, 50, 1)])

        code = main(["audit", str(layout_path)])

        assert code == EXIT_OVERLAPS
        assert "a\tb" in capsys.readouterr().out

    def test_audit_when_clean_then_exit_zero(self, tmp_path, capsys):
        layout_path = _write_layout(tmp_path / "layout.json", [_box("a", 20, 20, 0), _box("b", 300, 20, 1)])

        assert main(["audit", str(layout_path)]) == EXIT_OK
        assert "No overlaps" in capsys.readouterr().out

    def test_audit_when_margin_larger_than_gap_then_overlap(self, tmp_path):
        layout_path = _write_layout(tmp_path / "layout.json", [_box("a", 20, 20, 0), _box("b", 140, 20, 1)])

        assert main(["audit", str(layout_path)]) == EXIT_OK
        assert main(["audit", str(layout_path), "--margin", "30"]) == EXIT_OVERLAPS

    def test_audit_when_seamless_layout_then_judged_at_zero_margin(self, tmp_path, photo_dir):
        layout_path = tmp_path / "layout.json"
        main(["layout", str(photo_dir), "-o", str(layout_path), "--boards", "1", "--strategy", "editorial-seamless"])

        code = main(["audit", str(layout_path)])

        assert json.loads(layout_path.read_text())["margin"] == 0
        assert code == EXIT_OK

    def test_audit_when_schema_invalid_then_error(self, tmp_path):
        layout_path = _write_layout(tmp_path / "layout.json", [{"id": "a", "x": 0}])
        assert main(["audit", str(layout_path)]) == EXIT_ERROR


def test_preview_when_called_then_png_written(tmp_path):
    layout_path = _write_layout(tmp_path / "layout.json", [_box("a", 20, 20, 0, source="pending.jpg")])
    out_path = tmp_path / "previews" / "preview.png"

    code = main(["preview", str(layout_path), "-o", str(out_path), "--zoom", "0.5"])

    assert code == EXIT_OK
    with Image.open(out_path) as preview:
        assert preview.size == (500, 250)


def test_preview_when_zoom_out_of_range_then_error(tmp_path):
    layout_path = _write_layout(tmp_path / "layout.json", [])
    assert main(["preview", str(layout_path), "-o", str(tmp_path / "p.png"), "--zoom", "3"]) == EXIT_ERROR
