"""
Module: output.pdf

Purpose:
    Render the spread to a multi-page PDF using ReportLab, one page per
    board, each page exactly the size of the board raster.

Key Functions:
    - render_to_pdf(): Main rendering function

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - output.renderer: render_boards
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.images.provider import ImageProvider

from .config import ExportConfig
from .renderer import ExportError, check_board_images, render_boards

logger = logging.getLogger(__name__)

DEFAULT_DPI = 300


def render_to_pdf(
    items: Sequence[PlacedItem],
    spread: Spread,
    provider: ImageProvider,
    output_path: Path,
    config: ExportConfig = ExportConfig(),
    *,
    dpi: int = DEFAULT_DPI,
    images: Optional[Sequence[Image.Image]] = None,
) -> Path:
    """
    Render every board as one PDF page.

    Page size is the board raster size (board size times output scale)
    converted to points at dpi.

    Args:
        items: All items on the spread
        spread: Spread configuration
        provider: Source image access
        output_path: Path to write PDF
        config: Scale and background
        dpi: DPI for pixel -> point conversion (default 300)
        images: Board rasters already rendered with config (skips rendering)

    Returns:
        Path to the written PDF

    Raises:
        ExportNotReadyError: If a sourced item has no natural size
        ExportError: If rendering or writing fails

    Example:
        >>> render_to_pdf(items, spread, provider, Path("output/spread.pdf"))
    """
    if images is None:
        images = render_boards(items, spread, provider, config)
    check_board_images(images, spread)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    page_width_pt = _px_to_pt(spread.board_w * config.output_scale, dpi)
    page_height_pt = _px_to_pt(spread.board_h * config.output_scale, dpi)
    c = canvas.Canvas(str(output_path), pagesize=(page_width_pt, page_height_pt))

    for image in images:
        c.drawImage(_pil_to_reader(image), 0, 0, width=page_width_pt, height=page_height_pt)
        c.showPage()

    try:
        c.save()
    except OSError as e:
        raise ExportError(f"Cannot write {output_path}: {e}") from e

    logger.info(f"Rendered {spread.board_count} pages to {output_path}")
    return output_path


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """Convert PIL image to ReportLab ImageReader."""
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _px_to_pt(px: float, dpi: int = DEFAULT_DPI) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * 72.0 / dpi
