"""
Module: compositor.crop_ops

Purpose:
    Board partitioning. Turns a placed item into one crop operation per
    board its frame touches: which source pixels to take, and where on
    the board to draw them.

Key Functions:
    - crop_ops_for_item(): Ops for one item, in board order
    - crop_ops_for_board(): Ops for one board, in paint order

Key Classes:
    - CropOp: One source-rect -> board-rect draw

Algorithm:
    For each board the frame intersects (hit = frame ∩ board):
        dx = hit.x - board.origin_x, dy = hit.y, dw = hit.w, dh = hit.h
        sx = (hit.x - (frame.x - offset_x)) / scale
        sy = (hit.y - (frame.y - offset_y)) / scale
        sw = hit.w / scale, sh = hit.h / scale
    Source rects are clamped into the natural image bounds.

Used By:
    - output.renderer: Board rasterization
    - output.overlay: Preview drawing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from spread_layout.core.models.geometry import intersect
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread

from .cover_fit import cover_fit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CropOp:
    """
    Draw one source sub-rectangle into one board (immutable).

    Source coordinates are natural pixels; destination coordinates are
    board-local spread units.

    Attributes:
        source: Source reference of the item
        item_id: Id of the item this piece belongs to
        z_order: Paint order of the item
        board_index: Target board
        sx, sy, sw, sh: Source rectangle
        dx, dy, dw, dh: Destination rectangle on the board
    """

    source: Optional[str]
    item_id: str
    z_order: int
    board_index: int
    sx: float
    sy: float
    sw: float
    sh: float
    dx: float
    dy: float
    dw: float
    dh: float

    @property
    def source_box(self) -> tuple[float, float, float, float]:
        """(left, upper, right, lower) in source pixels."""
        return (self.sx, self.sy, self.sx + self.sw, self.sy + self.sh)

    def scaled(self, output_scale: float) -> CropOp:
        """Copy with the destination multiplied by output_scale."""
        return CropOp(
            source=self.source,
            item_id=self.item_id,
            z_order=self.z_order,
            board_index=self.board_index,
            sx=self.sx,
            sy=self.sy,
            sw=self.sw,
            sh=self.sh,
            dx=self.dx * output_scale,
            dy=self.dy * output_scale,
            dw=self.dw * output_scale,
            dh=self.dh * output_scale,
        )


def crop_ops_for_item(item: PlacedItem, spread: Spread) -> List[CropOp]:
    """
    Split an item's cover-fitted image across the boards it touches.

    Args:
        item: Placed item; needs a natural size
        spread: Spread configuration

    Returns:
        One CropOp per intersected board, ascending board index. Empty
        if the natural size is unknown or the frame is off the spread.

    Example:
        >>> item = PlacedItem("a", x=50, y=0, w=200, h=150, natural_w=400, natural_h=300)
        >>> [op.board_index for op in crop_ops_for_item(item, Spread(board_count=2, board_w=150, board_h=300, spacing=0))]
        [0, 1]
    """
    if not item.has_natural_size:
        logger.debug(f"Item {item.id} has no natural size yet; no crop ops")
        return []

    frame = item.rect
    fit = cover_fit(item.natural_w, item.natural_h, frame.w, frame.h)
    image_x = frame.x - fit.offset_x
    image_y = frame.y - fit.offset_y

    ops = []
    for board in spread.boards:
        hit = intersect(frame, board.rect)
        if hit is None:
            continue
        sx = _clamp((hit.x - image_x) / fit.scale, 0, item.natural_w)
        sy = _clamp((hit.y - image_y) / fit.scale, 0, item.natural_h)
        sw = min(hit.w / fit.scale, item.natural_w - sx)
        sh = min(hit.h / fit.scale, item.natural_h - sy)
        ops.append(CropOp(
            source=item.source,
            item_id=item.id,
            z_order=item.z_order,
            board_index=board.index,
            sx=sx,
            sy=sy,
            sw=sw,
            sh=sh,
            dx=hit.x - board.origin_x,
            dy=hit.y,
            dw=hit.w,
            dh=hit.h,
        ))
    return ops


def crop_ops_for_board(items: Sequence[PlacedItem], board_index: int, spread: Spread) -> List[CropOp]:
    """
    All crop ops landing on one board, bottom-most item first.

    Raises:
        IndexError: If board_index is outside the spread
    """
    spread.board(board_index)
    ops = [
        op
        for item in sorted(items, key=lambda n: n.z_order)
        for op in crop_ops_for_item(item, spread)
        if op.board_index == board_index
    ]
    return ops


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)
