"""
Module: placement.bounds

Purpose:
    Bounds-fixing pass. Pulls every item back inside the usable
    interior of the board its left edge currently sits on.

Key Functions:
    - clamp_item(): Fix one item
    - fix_bounds(): Fix a whole layout (idempotent)

Used By:
    - placement.packer, placement.masonry: Fallback rectangles
    - session: After manual edits / spread changes
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from spread_layout.core.models.geometry import Rect
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread

from .policy import PlacementPolicy
from .sizing import fit_size, usable_range

logger = logging.getLogger(__name__)


def clamp_item(item: PlacedItem, spread: Spread, policy: PlacementPolicy) -> PlacedItem:
    """
    Cap an item's size to the interior and clamp it into its board.

    The board is the one implied by the item's x before clamping, so
    an item hanging off the right edge of board 1 stays on board 1.
    """
    w, h = fit_size(item.w, item.h, spread, policy)
    board = spread.board(spread.board_index_for_x(item.x))
    x_min, x_max, y_min, y_max = usable_range(board, spread, w, h)
    x = min(max(item.x, x_min), x_max)
    y = min(max(item.y, y_min), y_max)

    if (x, y, w, h) == (item.x, item.y, item.w, item.h):
        return item
    logger.debug(
        f"Clamped item {item.id} to board {board.index}: "
        f"({item.x}, {item.y}, {item.w}, {item.h}) -> ({x}, {y}, {w}, {h})"
    )
    return item.with_rect(Rect(x, y, w, h))


def fix_bounds(
    items: Sequence[PlacedItem],
    spread: Spread,
    policy: Optional[PlacementPolicy] = None,
) -> List[PlacedItem]:
    """
    Clamp every item into the usable interior of its board.

    Sizes are capped to the board interior (floored to policy.min_size),
    then x is clamped to [origin+spacing, origin+board_w-spacing-w] and
    y to [spacing, board_h-spacing-h]. List order and z_order are kept.

    Applying fix_bounds to its own output changes nothing.

    Args:
        items: Items in any state
        spread: Spread configuration
        policy: Size floor (default PlacementPolicy())

    Returns:
        New list of in-bounds items
    """
    policy = policy or PlacementPolicy()
    return [clamp_item(n, spread, policy) for n in items]
