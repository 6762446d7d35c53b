"""
Tests for PDF export.
"""

import pytest

from spread_layout.core.models.items import PlacedItem
from spread_layout.output.config import ExportConfig
from spread_layout.output.pdf import _px_to_pt, render_to_pdf
from spread_layout.output.renderer import ExportNotReadyError


def test_render_to_pdf_when_called_then_pdf_written(tmp_path, two_narrow_boards, provider):
    # Arrange
    item = PlacedItem("r", x=50, y=0, w=200, h=150, natural_w=400, natural_h=300, source="red")
    output_path = tmp_path / "nested" / "spread.pdf"

    # Act
    path = render_to_pdf([item], two_narrow_boards, provider, output_path, ExportConfig(output_scale=1))

    # Assert
    assert path == output_path
    data = path.read_bytes()
    assert data.startswith(b"%PDF")
    assert b"/Count 2" in data


def test_render_to_pdf_when_not_ready_then_raises(tmp_path, two_narrow_boards, provider):
    item = PlacedItem("r", x=0, y=0, w=10, h=10, source="red")

    with pytest.raises(ExportNotReadyError):
        render_to_pdf([item], two_narrow_boards, provider, tmp_path / "spread.pdf")


def test_px_to_pt_when_300_dpi_then_quarter_inch_per_75px():
    assert _px_to_pt(300, 300) == pytest.approx(72.0)
    assert _px_to_pt(75) == pytest.approx(18.0)
