"""
Module: placement.distribute

Purpose:
    Even distribution. Items are dealt out in equal consecutive chunks,
    one chunk per board, and scattered within their own board.

Key Functions:
    - distribute(): Place all items
    - chunk_for_boards(): Split a list into per-board chunks
"""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Sequence, Tuple

from spread_layout.core.models.geometry import Rect
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread

from .audit import collides
from .models import PlacementResult
from .policy import PlacementPolicy
from .scatter import random_rect_in_board
from .sizing import fit_size, usable_range

logger = logging.getLogger(__name__)

# Largest share of a board one item may take in each dimension
MAX_BOARD_SHARE = 0.6


def chunk_for_boards(items: Sequence[PlacedItem], board_count: int) -> List[List[PlacedItem]]:
    """
    Split items into consecutive chunks of ceil(N / board_count).

    Chunk b belongs to board b; trailing boards may get fewer items or
    none at all.

    Example:
        >>> [len(c) for c in chunk_for_boards(items_of_7, 3)]
        [3, 3, 1]
    """
    if not items:
        return []
    size = math.ceil(len(items) / board_count)
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def distribute(
    items: Sequence[PlacedItem],
    spread: Spread,
    policy: Optional[PlacementPolicy] = None,
    rng: Optional[random.Random] = None,
) -> PlacementResult:
    """
    Shuffle items, deal them to boards in chunks, scatter within each board.

    Sizes are capped to 60% of the board (floored to policy.min_size).
    An item that cannot be placed within policy.max_attempts goes to
    its board's near-origin corner and is listed in fallback_ids.

    Args:
        items: Items to place
        spread: Spread configuration
        policy: Retry budget and size floor (default PlacementPolicy())
        rng: Random source (default: policy.make_rng())

    Returns:
        PlacementResult, board 0's items first
    """
    policy = policy or PlacementPolicy()
    rng = rng or policy.make_rng()

    queue = list(items)
    rng.shuffle(queue)

    placed: Tuple[PlacedItem, ...] = ()
    fallback_ids: Tuple[str, ...] = ()
    for board_index, chunk in enumerate(chunk_for_boards(queue, spread.board_count)):
        board = spread.board(board_index)
        for item in chunk:
            w, h = fit_size(
                min(item.w, spread.board_w * MAX_BOARD_SHARE),
                min(item.h, spread.board_h * MAX_BOARD_SHARE),
                spread,
                policy,
            )
            rect = None
            for _ in range(policy.max_attempts):
                candidate = random_rect_in_board(board, spread, w, h, rng)
                if not collides(candidate, placed, spread.spacing):
                    rect = candidate
                    break
            if rect is None:
                x_min, _, y_min, _ = usable_range(board, spread, w, h)
                rect = Rect(x_min, y_min, w, h)
                fallback_ids += (item.id,)
                logger.warning(f"Board {board_index} is full; item {item.id} placed at its corner")
            placed += (item.with_rect(rect),)

    warnings = [f"Board full for item {i}; placed at board corner" for i in fallback_ids]
    logger.info(
        f"Distributed {len(placed)} items over {spread.board_count} boards "
        f"({len(fallback_ids)} fallbacks)"
    )
    return PlacementResult.from_placed(placed, fallback_ids, warnings)
