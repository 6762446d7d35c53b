"""
Module: output.overlay

Purpose:
    On-screen style preview of the whole spread, with optional guides:
    board outlines, "slide N" labels and crosses over items that break
    the spacing rule. Guides are drawn on a separate translucent layer
    and never reach an export.

Key Functions:
    - render_preview(): Spread -> preview image
    - guide_shapes(): Guide shapes for a layout
    - draw_shapes(): Draw shapes with the per-kind drawers

Key Classes:
    - ShapeKind: Closed set of overlay shapes
    - Shape: One shape to draw

Dependencies:
    - PIL: Image drawing
    - output.renderer: paste_op
    - placement.audit: overlapping_ids
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from spread_layout.compositor.crop_ops import crop_ops_for_item
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.images.provider import ImageNotFoundError, ImageProvider
from spread_layout.placement.audit import overlapping_ids
from spread_layout.placement.ordering import paint_order

from .config import DEFAULT_BACKGROUND, DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, GuideOptions
from .renderer import paste_op

logger = logging.getLogger(__name__)

PLACEHOLDER_COLOR = "#222222"
OVERLAP_COLOR = (255, 64, 64, 200)
LABEL_FONT_SIZE = 14
LABEL_INSET = 8


class ShapeKind(Enum):
    """Kinds of overlay shape; each has exactly one draw function."""

    RECT = auto()
    FILLED_RECT = auto()
    CROSS = auto()
    LABEL = auto()


@dataclass(frozen=True)
class Shape:
    """
    One overlay shape in preview pixels.

    Attributes:
        kind: Shape kind
        box: (left, top, right, bottom); LABEL uses only left/top
        color: Fill/stroke colour (string or RGBA tuple)
        width: Stroke width
        text: Label text (LABEL only)
    """

    kind: ShapeKind
    box: Tuple[float, float, float, float]
    color: object
    width: int = 1
    text: str = ""


def _draw_rect(draw: ImageDraw.ImageDraw, shape: Shape, font) -> None:
    draw.rectangle(shape.box, outline=shape.color, width=shape.width)


def _draw_filled_rect(draw: ImageDraw.ImageDraw, shape: Shape, font) -> None:
    draw.rectangle(shape.box, fill=shape.color)


def _draw_cross(draw: ImageDraw.ImageDraw, shape: Shape, font) -> None:
    left, top, right, bottom = shape.box
    draw.line([(left, top), (right, bottom)], fill=shape.color, width=shape.width)
    draw.line([(left, bottom), (right, top)], fill=shape.color, width=shape.width)


def _draw_label(draw: ImageDraw.ImageDraw, shape: Shape, font) -> None:
    draw.text((shape.box[0], shape.box[1]), shape.text, fill=shape.color, font=font)


_DRAWERS: Dict[ShapeKind, Callable[[ImageDraw.ImageDraw, Shape, object], None]] = {
    ShapeKind.RECT: _draw_rect,
    ShapeKind.FILLED_RECT: _draw_filled_rect,
    ShapeKind.CROSS: _draw_cross,
    ShapeKind.LABEL: _draw_label,
}


def draw_shapes(image: Image.Image, shapes: Sequence[Shape], font=None) -> None:
    """Draw shapes onto image in order (mutates image)."""
    draw = ImageDraw.Draw(image)
    font = font or _load_font(LABEL_FONT_SIZE)
    for shape in shapes:
        _DRAWERS[shape.kind](draw, shape, font)


def guide_shapes(
    items: Sequence[PlacedItem],
    spread: Spread,
    zoom: float,
    guides: GuideOptions,
    margin: Optional[float] = None,
) -> List[Shape]:
    """
    Guide shapes for a layout: board outlines, labels, overlap crosses.

    Args:
        items: Items on the spread
        spread: Spread configuration
        zoom: Preview pixels per spread unit
        guides: Guide styling
        margin: Gap the layout keeps (default: spread spacing)

    Returns:
        Shapes in draw order
    """
    color = guides.rgba
    shapes = []
    for board in spread.boards:
        left = board.origin_x * zoom
        box = (left, 0, left + spread.board_w * zoom - 1, spread.board_h * zoom - 1)
        shapes.append(Shape(ShapeKind.RECT, box, color, guides.line_width))
        if guides.show_labels:
            shapes.append(Shape(
                ShapeKind.LABEL,
                (left + LABEL_INSET, LABEL_INSET, 0, 0),
                color,
                text=f"slide {board.index + 1}",
            ))

    if guides.mark_overlaps:
        flagged = overlapping_ids(items, spread.spacing if margin is None else margin)
        for item in items:
            if item.id in flagged:
                r = item.rect
                box = (r.x * zoom, r.y * zoom, r.right * zoom, r.bottom * zoom)
                shapes.append(Shape(ShapeKind.CROSS, box, OVERLAP_COLOR, guides.line_width))
    return shapes


def render_preview(
    items: Sequence[PlacedItem],
    spread: Spread,
    provider: Optional[ImageProvider] = None,
    *,
    zoom: float = DEFAULT_ZOOM,
    guides: Optional[GuideOptions] = GuideOptions(),
    background: str = DEFAULT_BACKGROUND,
    margin: Optional[float] = None,
) -> Image.Image:
    """
    Draw the whole spread at a zoom level.

    Items are drawn in paint order. Items that cannot be shown (no
    natural size, no provider, or an unreadable source) are drawn as
    flat placeholders.

    Args:
        items: Items on the spread
        spread: Spread configuration
        provider: Source image access, or None for placeholders only
        zoom: Preview scale, 0.25..1.5
        guides: Guide styling, or None for no guides
        background: Spread background colour
        margin: Gap overlap crosses are judged against (default: spread spacing)

    Returns:
        RGB preview image

    Raises:
        ValueError: If zoom is out of range

    Example:
        >>> preview = render_preview(items, Spread(board_count=3), provider, zoom=0.5)
        >>> preview.size
        (1620, 660)
    """
    if not MIN_ZOOM <= zoom <= MAX_ZOOM:
        raise ValueError(f"zoom must be between {MIN_ZOOM} and {MAX_ZOOM}: {zoom}")

    canvas = Image.new(
        "RGB",
        (round(spread.width * zoom), round(spread.height * zoom)),
        background,
    )
    draw = ImageDraw.Draw(canvas)
    for item in paint_order(items):
        if not _paste_item(canvas, item, spread, provider, zoom):
            r = item.rect
            placeholder = Shape(
                ShapeKind.FILLED_RECT,
                (r.x * zoom, r.y * zoom, r.right * zoom, r.bottom * zoom),
                PLACEHOLDER_COLOR,
            )
            _DRAWERS[placeholder.kind](draw, placeholder, None)

    if guides is not None:
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw_shapes(layer, guide_shapes(items, spread, zoom, guides, margin))
        canvas = Image.alpha_composite(canvas.convert("RGBA"), layer).convert("RGB")

    logger.debug(f"Rendered preview of {len(items)} items at zoom {zoom}")
    return canvas


def _paste_item(
    canvas: Image.Image,
    item: PlacedItem,
    spread: Spread,
    provider: Optional[ImageProvider],
    zoom: float,
) -> bool:
    """Draw an item's pieces; False if it has to be a placeholder."""
    if provider is None or item.source is None or not item.has_natural_size:
        return False
    try:
        source_image = provider.get_image(item.source)
    except ImageNotFoundError as e:
        logger.warning(f"Preview placeholder for item {item.id}: {e}")
        return False
    for op in crop_ops_for_item(item, spread):
        paste_op(canvas, source_image, op, zoom, spread.board(op.board_index).origin_x)
    return True


def _load_font(size: int):
    """
    Load a font for guide labels.

    Falls back to default font if not available.
    """
    font_options = [
        "arial.ttf",
        "Arial.ttf",
        "DejaVuSans.ttf",
    ]

    for font_name in font_options:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.debug("Could not load TrueType font, using default")
    return ImageFont.load_default()
