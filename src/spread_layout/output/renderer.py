"""
Module: output.renderer

Purpose:
    Rasterize boards. Each board is filled with the background colour,
    then every crop op landing on it is drawn bottom-to-top with its
    destination multiplied by the output scale.

Key Functions:
    - render_board(): One board -> PIL image
    - render_boards(): Every board -> PIL images, rendered once
    - export_boards(): Every board -> one image file each
    - paste_op(): Draw one crop op onto a canvas
    - ensure_ready(): Refuse items whose source is not decoded yet

Key Classes:
    - ExportError: Export failed
    - ExportNotReadyError: Some sources have no natural size yet

Dependencies:
    - PIL: Resampling and compositing
    - compositor.crop_ops: Board partitioning

Used By:
    - output.zip_writer, output.pdf: Board rasters
    - output.overlay: Preview drawing
    - controller: Export pipeline
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image

from spread_layout.compositor.crop_ops import CropOp, crop_ops_for_board
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.images.provider import ImageNotFoundError, ImageProvider

from .config import ExportConfig

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Board export failed."""
    pass


class ExportNotReadyError(ExportError):
    """
    Some items reference a source whose natural size is still unknown.

    Attributes:
        pending_ids: Ids of the items that are not ready
    """

    def __init__(self, pending_ids: Sequence[str]) -> None:
        self.pending_ids = list(pending_ids)
        super().__init__(
            f"Images are still loading for {len(self.pending_ids)} item(s): "
            f"{', '.join(self.pending_ids)}"
        )


def ensure_ready(items: Sequence[PlacedItem]) -> None:
    """
    Check every item with a source knows its natural size.

    Items with no source at all have nothing to draw; the renderer
    skips them and they do not block export.

    Raises:
        ExportNotReadyError: If any sourced item is not decoded yet
    """
    pending = [n.id for n in items if n.source is not None and not n.has_natural_size]
    if pending:
        raise ExportNotReadyError(pending)


def paste_op(
    canvas: Image.Image,
    source_image: Image.Image,
    op: CropOp,
    scale: float,
    offset_x: float = 0,
) -> bool:
    """
    Resample one crop op's source rectangle into its scaled destination.

    Destination edges are rounded independently, so two pieces of the
    same photo on neighbouring boards (or side by side in a preview)
    meet without a gap or seam.

    Args:
        canvas: Image to draw onto
        source_image: Decoded source of op
        op: Crop op (board-local destination)
        scale: Output pixels per spread unit
        offset_x: Extra x offset in spread units (board origin in previews)

    Returns:
        False if the piece rounds to nothing and was skipped
    """
    left = round((op.dx + offset_x) * scale)
    top = round(op.dy * scale)
    right = round((op.dx + op.dw + offset_x) * scale)
    bottom = round((op.dy + op.dh) * scale)
    if right - left < 1 or bottom - top < 1 or op.sw <= 0 or op.sh <= 0:
        logger.debug(f"Skipping sub-pixel piece of item {op.item_id} on board {op.board_index}")
        return False

    piece = source_image.resize(
        (right - left, bottom - top),
        Image.Resampling.LANCZOS,
        box=op.source_box,
    )
    if piece.mode == "RGBA":
        canvas.paste(piece, (left, top), piece)
    else:
        canvas.paste(piece, (left, top))
    return True


def render_board(
    items: Sequence[PlacedItem],
    board_index: int,
    spread: Spread,
    provider: ImageProvider,
    config: ExportConfig = ExportConfig(),
) -> Image.Image:
    """
    Rasterize one board.

    Args:
        items: All items on the spread
        board_index: Board to render
        spread: Spread configuration
        provider: Source image access
        config: Scale and background

    Returns:
        RGB image of size (board_w * scale, board_h * scale)

    Raises:
        ExportNotReadyError: If a sourced item has no natural size
        ExportError: If a source cannot be loaded
    """
    ensure_ready(items)
    scale = config.output_scale
    canvas = Image.new(
        "RGB",
        (round(spread.board_w * scale), round(spread.board_h * scale)),
        config.background,
    )

    ops = [op for op in crop_ops_for_board(items, board_index, spread) if op.source is not None]
    for op in ops:
        try:
            source_image = provider.get_image(op.source)
        except ImageNotFoundError as e:
            raise ExportError(f"Board {board_index + 1}: {e}") from e
        paste_op(canvas, source_image, op, scale)

    logger.debug(f"Rendered board {board_index} ({len(ops)} pieces) at {canvas.size}")
    return canvas


def render_boards(
    items: Sequence[PlacedItem],
    spread: Spread,
    provider: ImageProvider,
    config: ExportConfig = ExportConfig(),
) -> List[Image.Image]:
    """Rasterize every board once, in index order."""
    ensure_ready(items)
    return [render_board(items, board.index, spread, provider, config) for board in spread.boards]


def check_board_images(images: Sequence[Image.Image], spread: Spread) -> None:
    """
    Check pre-rendered rasters match the spread, one per board.

    Raises:
        ValueError: If the count does not match the board count
    """
    if len(images) != spread.board_count:
        raise ValueError(
            f"Expected {spread.board_count} board images, got {len(images)}"
        )


def save_board_image(image: Image.Image, path: Path, config: ExportConfig) -> Path:
    """
    Write a board raster in the configured format.

    Raises:
        ExportError: If the file cannot be written
    """
    params = {"quality": config.jpeg_quality} if config.pil_format == "JPEG" else {}
    try:
        image.save(path, format=config.pil_format, **params)
    except OSError as e:
        raise ExportError(f"Cannot write {path}: {e}") from e
    return path


def export_boards(
    items: Sequence[PlacedItem],
    spread: Spread,
    provider: ImageProvider,
    output_dir: Path,
    config: ExportConfig = ExportConfig(),
    *,
    images: Optional[Sequence[Image.Image]] = None,
) -> List[Path]:
    """
    Render every board and write one image file per board.

    Boards are rendered serially, in index order, into files named
    {prefix}_{n}.{ext}.

    Args:
        items: All items on the spread
        spread: Spread configuration
        provider: Source image access
        output_dir: Directory to write into (created if missing)
        config: Export settings
        images: Board rasters already rendered with config (skips rendering)

    Returns:
        Written paths, board order

    Raises:
        ExportNotReadyError: If a sourced item has no natural size
        ExportError: If rendering or writing fails

    Example:
        >>> export_boards(items, spread, provider, Path("out"))
        [PosixPath('out/spread_1.png'), PosixPath('out/spread_2.png'), ...]
    """
    if images is None:
        images = render_boards(items, spread, provider, config)
    check_board_images(images, spread)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for board, image in zip(spread.boards, images):
        path = output_dir / config.filename_for(board.index)
        paths.append(save_board_image(image, path, config))

    logger.info(f"Exported {len(paths)} boards to {output_dir} as {config.image_format}")
    return paths
