"""
Module: output.zip_writer

Purpose:
    Bundle every board as a PNG inside one ZIP archive.

Key Functions:
    - write_boards_zip(): Main entry point

Dependencies:
    - zipfile (std)
    - PIL/Pillow
    - output.renderer: render_boards
"""

from __future__ import annotations

import logging
import zipfile
from dataclasses import replace
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image

from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.images.provider import ImageProvider

from .config import ExportConfig
from .renderer import ExportError, check_board_images, render_boards

logger = logging.getLogger(__name__)


def write_boards_zip(
    items: Sequence[PlacedItem],
    spread: Spread,
    provider: ImageProvider,
    output_path: Path,
    config: ExportConfig = ExportConfig(),
    *,
    images: Optional[Sequence[Image.Image]] = None,
) -> Path:
    """
    Export all boards as PNG files in a ZIP archive.

    Creates a ZIP file with structure:
        spread.zip
        ├── spread_1.png
        ├── spread_2.png
        └── ...

    Entries are always PNG whatever config.image_format says.

    Args:
        items: All items on the spread
        spread: Spread configuration
        provider: Source image access
        output_path: Path for .zip file (will append .zip if missing)
        config: Scale, background and file prefix
        images: Board rasters already rendered with config (skips rendering)

    Returns:
        Path to created ZIP file

    Raises:
        ExportNotReadyError: If a sourced item has no natural size
        ExportError: If rendering or writing fails
    """
    if output_path.suffix != ".zip":
        output_path = output_path.with_suffix(".zip")
    png_config = replace(config, image_format="png")
    if images is None:
        images = render_boards(items, spread, provider, png_config)
    check_board_images(images, spread)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info(f"Creating ZIP export at {output_path}")

    try:
        with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for board, image in zip(spread.boards, images):
                buf = BytesIO()
                image.save(buf, format="PNG")
                zf.writestr(png_config.filename_for(board.index), buf.getvalue())
    except OSError as e:
        raise ExportError(f"Cannot write {output_path}: {e}") from e

    return output_path
