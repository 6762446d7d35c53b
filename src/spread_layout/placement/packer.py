"""
Module: placement.packer

Purpose:
    Greedy bin-pack. Largest items first, each at the first free grid
    position found scanning board by board, row by row.

Key Functions:
    - pack(): Place all items
    - scan_positions(): Grid origins on one board, row-major

Algorithm:
    1. Stable sort by area, descending
    2. For each item, walk grid origins (step = max(policy.step, spacing))
       on board 0, then board 1, ...
    3. Accept the first origin whose rect clears every placed item
    4. If none, keep the item's last-known rect (clamped into its
       board) as a fallback; it still blocks later items

Dependencies:
    - placement.sizing: fit_size, usable_range
    - placement.bounds: clamp_item
"""

from __future__ import annotations

import logging
import random
from typing import Iterator, Optional, Sequence, Tuple

from spread_layout.core.models.geometry import Rect
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Board, Spread

from .audit import collides
from .bounds import clamp_item
from .models import PlacementResult
from .policy import PlacementPolicy
from .sizing import fit_size, usable_range

logger = logging.getLogger(__name__)


def pack(
    items: Sequence[PlacedItem],
    spread: Spread,
    policy: Optional[PlacementPolicy] = None,
    rng: Optional[random.Random] = None,
) -> PlacementResult:
    """
    Greedy first-fit packing across boards.

    Deterministic; rng is accepted so every strategy shares a signature.

    Args:
        items: Items to place
        spread: Spread configuration
        policy: Scan step and size floor (default PlacementPolicy())
        rng: Unused

    Returns:
        PlacementResult with items largest-first
    """
    policy = policy or PlacementPolicy()
    step = policy.scan_step(spread.spacing)
    queue = sorted(items, key=lambda n: n.area, reverse=True)

    placed: Tuple[PlacedItem, ...] = ()
    fallback_ids: Tuple[str, ...] = ()
    for item in queue:
        w, h = fit_size(item.w, item.h, spread, policy)
        rect = _first_fit(w, h, spread, step, placed)
        if rect is None:
            logger.warning(f"No free grid position for item {item.id}; keeping its last position")
            placed += (clamp_item(item, spread, policy),)
            fallback_ids += (item.id,)
        else:
            placed += (item.with_rect(rect),)

    warnings = [f"No free grid position for item {i}; kept last position" for i in fallback_ids]
    logger.info(f"Packed {len(placed)} items with step {step} ({len(fallback_ids)} fallbacks)")
    return PlacementResult.from_placed(placed, fallback_ids, warnings)


def _first_fit(
    w: float,
    h: float,
    spread: Spread,
    step: float,
    placed: Sequence[PlacedItem],
) -> Optional[Rect]:
    for board in spread.boards:
        for x, y in scan_positions(board, spread, w, h, step):
            candidate = Rect(x, y, w, h)
            if not collides(candidate, placed, spread.spacing):
                return candidate
    return None


def scan_positions(
    board: Board,
    spread: Spread,
    w: float,
    h: float,
    step: float,
) -> Iterator[Tuple[float, float]]:
    """
    Yield grid origins for a w x h item on one board, row-major.

    Starts at the spacing margin; every origin keeps the item inside
    the board's usable interior.
    """
    x_min, x_max, y_min, y_max = usable_range(board, spread, w, h)
    y = y_min
    while y <= y_max:
        x = x_min
        while x <= x_max:
            yield x, y
            x += step
        y += step
