"""
Tests for the export pipeline controller.
"""

import json
import zipfile

import pytest

from spread_layout.controller import METADATA_FILENAME, export_spread
from spread_layout.core.models.items import PlacedItem
from spread_layout.images.provider import InMemoryImageProvider
from spread_layout.output.config import ExportConfig
from spread_layout.output.renderer import ExportNotReadyError


@pytest.fixture
def straddling_red():
    """Natural size not yet known; the provider knows it."""
    return PlacedItem("red", x=50, y=0, w=200, h=150, source="red")


class CountingProvider(InMemoryImageProvider):
    """In-memory provider that counts image fetches."""

    def __init__(self, images):
        super().__init__(images)
        self.fetches = 0

    def get_image(self, source):
        self.fetches += 1
        return super().get_image(source)


class TestExportSpread:
    """Tests for export_spread()."""

    def test_export_spread_when_all_outputs_then_files_and_metadata(
        self, tmp_path, two_narrow_boards, provider, straddling_red
    ):
        # Act
        result = export_spread(
            [straddling_red],
            two_narrow_boards,
            provider,
            tmp_path,
            ExportConfig(output_scale=1),
            write_zip=True,
            write_pdf=True,
        )

        # Assert
        assert [p.name for p in result.board_files] == ["spread_1.png", "spread_2.png"]
        assert result.zip_path == tmp_path / "spread.zip"
        assert result.pdf_path == tmp_path / "spread.pdf"
        assert result.pdf_path.read_bytes().startswith(b"%PDF")
        with zipfile.ZipFile(result.zip_path) as zf:
            assert zf.namelist() == ["spread_1.png", "spread_2.png"]
        assert result.warnings == ()

    def test_export_spread_when_done_then_metadata_written(
        self, tmp_path, two_narrow_boards, provider, straddling_red
    ):
        export_spread([straddling_red], two_narrow_boards, provider, tmp_path, ExportConfig(output_scale=1))

        metadata = json.loads((tmp_path / METADATA_FILENAME).read_text())
        assert metadata["spread"] == {"board_count": 2, "board_w": 150, "board_h": 300, "spacing": 0}
        assert metadata["item_count"] == 1
        assert metadata["items"][0]["natural_size"] == [400, 300]
        assert metadata["files"] == {"boards": ["spread_1.png", "spread_2.png"], "zip": None, "pdf": None}
        assert metadata["export"]["output_scale"] == 1

    def test_export_spread_when_images_skipped_then_only_bundle(
        self, tmp_path, two_narrow_boards, provider, straddling_red
    ):
        result = export_spread(
            [straddling_red], two_narrow_boards, provider, tmp_path,
            ExportConfig(output_scale=1), write_images=False, write_zip=True,
        )

        assert result.board_files == ()
        assert sorted(p.name for p in tmp_path.iterdir()) == [METADATA_FILENAME, "spread.zip"]

    def test_export_spread_when_source_unreadable_then_refused_before_writing(
        self, tmp_path, two_narrow_boards, provider
    ):
        item = PlacedItem("b", x=0, y=0, w=50, h=50, source="blue")
        output_dir = tmp_path / "out"

        with pytest.raises(ExportNotReadyError) as excinfo:
            export_spread([item], two_narrow_boards, provider, output_dir)

        assert excinfo.value.pending_ids == ["b"]
        assert not output_dir.exists()

    def test_export_spread_when_overlaps_then_warning_and_pairs_recorded(self, tmp_path, three_boards, provider):
        items = [
            PlacedItem("a", x=30, y=30, w=100, h=100, source="red"),
            PlacedItem("b", x=60, y=60, w=100, h=100, source="red", z_order=1),
        ]

        result = export_spread(items, three_boards, provider, tmp_path, ExportConfig(output_scale=1))

        assert len(result.warnings) == 1
        assert "overlapping" in result.warnings[0]
        assert result.metadata["overlaps"] == [["a", "b"]]

    def test_export_spread_when_timestamped_then_new_subfolder(
        self, tmp_path, two_narrow_boards, provider, straddling_red
    ):
        first = export_spread(
            [straddling_red], two_narrow_boards, provider, tmp_path,
            ExportConfig(output_scale=1), timestamped=True,
        )
        second = export_spread(
            [straddling_red], two_narrow_boards, provider, tmp_path,
            ExportConfig(output_scale=1), timestamped=True,
        )

        assert first.output_dir.parent == tmp_path
        assert "__spread__x1" in first.output_dir.name
        assert first.output_dir != second.output_dir
        assert (second.output_dir / "spread_1.png").exists()

    def test_export_spread_when_every_output_then_each_board_rendered_once(self, tmp_path, two_narrow_boards, red_image):
        # Arrange
        provider = CountingProvider({"red": red_image})
        item = PlacedItem("red", x=50, y=0, w=200, h=150, natural_w=400, natural_h=300, source="red")

        # Act
        export_spread(
            [item], two_narrow_boards, provider, tmp_path,
            ExportConfig(output_scale=1), write_zip=True, write_pdf=True,
        )

        # Assert: one piece per board
        assert provider.fetches == 2

    def test_export_spread_when_seamless_margin_then_touching_items_clean(self, tmp_path, three_boards, provider):
        items = [
            PlacedItem("a", x=30, y=30, w=100, h=100, source="red"),
            PlacedItem("b", x=130, y=30, w=100, h=100, source="red", z_order=1),
        ]

        result = export_spread(items, three_boards, provider, tmp_path, ExportConfig(output_scale=1), audit_margin=0)

        assert result.warnings == ()
        assert result.metadata["overlaps"] == []
        assert result.metadata["audit_margin"] == 0
        assert json.loads((tmp_path / METADATA_FILENAME).read_text())["audit_margin"] == 0
