"""
Module: placement.masonry

Purpose:
    Column masonry ("editorial" layout). Every board is cut into equal
    columns; items stack top-down into whichever column is currently
    shortest, like a magazine spread.

Key Functions:
    - editorial(): Masonry with a gutter equal to the spread's spacing
    - editorial_seamless(): Masonry with no gutter
    - column_layout(): Column x positions and width for one call

Algorithm:
    1. columns = options.columns or random 2..4; gutter = spacing (0 if seamless)
    2. col_w = floor((board_w - gutter*(columns+1)) / columns)
    3. Running height per column starts at the gutter
    4. Each item goes to the shortest column (ties: lowest board, then
       lowest column); height from a random band or the item's aspect,
       capped to what is left of the column
    5. Running height += height + gutter; a column with less than
       min_size left is full
    6. All columns full -> keep last-known rect (fallback)
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from spread_layout.core.models.geometry import Rect
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread

from .audit import collides
from .bounds import clamp_item
from .models import PlacementResult
from .policy import MAX_COLUMNS, MIN_COLUMNS, MasonryOptions, PlacementPolicy

logger = logging.getLogger(__name__)

# Height band as a multiple of column width
HEIGHT_BAND = (0.75, 1.35)


def column_layout(spread: Spread, columns: int, gutter: float) -> Tuple[float, List[Tuple[int, int, float]]]:
    """
    Column width and (board, column, x) for every column on the spread.

    Columns are listed board by board, left to right, which is also
    the tie-break order for "shortest column".

    Example:
        >>> col_w, cols = column_layout(Spread(board_count=1, board_w=1000, spacing=10), 3, 10)
        >>> col_w, [x for _, _, x in cols]
        (320, [10, 340, 670])
    """
    col_w = math.floor((spread.board_w - gutter * (columns + 1)) / columns)
    slots = [
        (b, c, b * spread.board_w + gutter + c * (col_w + gutter))
        for b in range(spread.board_count)
        for c in range(columns)
    ]
    return col_w, slots


def editorial(
    items: Sequence[PlacedItem],
    spread: Spread,
    policy: Optional[PlacementPolicy] = None,
    rng: Optional[random.Random] = None,
    options: Optional[MasonryOptions] = None,
) -> PlacementResult:
    """
    Lay items out in shortest-column-first masonry.

    Args:
        items: Items to place
        spread: Spread configuration
        policy: Size floor (default PlacementPolicy())
        rng: Random source for column count, heights and shuffle
        options: Column count, seamless gutter, aspect source, shuffle

    Returns:
        PlacementResult in placement order

    Example:
        >>> result = editorial(items, spread, rng=random.Random(3),
        ...                    options=MasonryOptions(columns=3))
    """
    policy = policy or PlacementPolicy()
    rng = rng or policy.make_rng()
    options = options or MasonryOptions()

    columns = options.columns or rng.randint(MIN_COLUMNS, MAX_COLUMNS)
    gutter = 0 if options.seamless else spread.spacing
    col_w, slots = column_layout(spread, columns, gutter)

    queue = list(items)
    if options.shuffle:
        rng.shuffle(queue)

    if col_w <= 0:
        logger.warning(
            f"Board width {spread.board_w} leaves no room for {columns} columns "
            f"with gutter {gutter}; keeping current positions"
        )
        placed = [clamp_item(n, spread, policy) for n in queue]
        fallback_ids = [n.id for n in queue]
        return PlacementResult.from_placed(
            placed, fallback_ids, [f"No room for {columns} columns; positions kept"], margin=gutter
        )

    heights = [gutter] * len(slots)
    placed: Tuple[PlacedItem, ...] = ()
    fallback_ids: Tuple[str, ...] = ()

    for item in queue:
        wanted = _item_height(item, col_w, rng, options.keep_aspect)
        rect = None
        # Shortest first; ties fall back to slot order (board, column)
        for slot_index in sorted(range(len(slots)), key=lambda i: (heights[i], i)):
            remaining = spread.board_h - gutter - heights[slot_index]
            if remaining < policy.min_size:
                continue
            h = min(max(wanted, policy.min_size), remaining)
            candidate = Rect(slots[slot_index][2], heights[slot_index], col_w, h)
            if collides(candidate, placed, gutter):
                continue
            rect = candidate
            heights[slot_index] += h + gutter
            break

        if rect is None:
            logger.warning(f"All columns full; item {item.id} keeps its last position")
            placed += (clamp_item(item, spread, policy),)
            fallback_ids += (item.id,)
        else:
            placed += (item.with_rect(rect),)

    warnings = [f"All columns full for item {i}; kept last position" for i in fallback_ids]
    logger.info(
        f"Masonry placed {len(placed)} items in {columns} columns/board, "
        f"col_w={col_w}, gutter={gutter} ({len(fallback_ids)} fallbacks)"
    )
    return PlacementResult.from_placed(placed, fallback_ids, warnings, margin=gutter)


def editorial_seamless(
    items: Sequence[PlacedItem],
    spread: Spread,
    policy: Optional[PlacementPolicy] = None,
    rng: Optional[random.Random] = None,
    options: Optional[MasonryOptions] = None,
) -> PlacementResult:
    """Masonry with a zero gutter; items in a column touch edge to edge."""
    options = replace(options or MasonryOptions(), seamless=True)
    return editorial(items, spread, policy, rng, options)


def _item_height(item: PlacedItem, col_w: float, rng: random.Random, keep_aspect: bool) -> int:
    if keep_aspect:
        return math.floor(col_w / item.aspect)
    return math.floor(col_w * rng.uniform(*HEIGHT_BAND))
