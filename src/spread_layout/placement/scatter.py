"""
Module: placement.scatter

Purpose:
    Random scatter. Each item is dropped at a uniformly random spot
    inside one board's usable interior until it clears every item
    already placed, cycling through boards so content spreads across
    the whole spread.

Key Functions:
    - scatter(): Place all items
    - random_rect_in_board(): One random candidate on a board

Algorithm:
    1. Size the item (keep its size, or draw a random one)
    2. Up to policy.max_attempts times: pick a board (round-robin from
       the cursor, or random), draw a candidate, accept if it does not
       overlap any placed item at the spread's spacing
    3. Otherwise fall back: next round-robin board at its near-origin
       corner, accepting a possible overlap (logged, recorded)

Dependencies:
    - placement.policy: PlacementPolicy, ScatterOptions
    - placement.sizing: fit_size, usable_range, random_size
    - placement.audit: collides
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from spread_layout.core.models.geometry import Rect
from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Board, Spread

from .audit import collides
from .models import PlacementResult
from .policy import BoardSelection, PlacementPolicy, ScatterOptions
from .sizing import fit_size, random_size, usable_range

logger = logging.getLogger(__name__)

# Share of the vertical range used when spread_vertical is off
TOP_BAND_FRACTION = 0.6


@dataclass(frozen=True)
class _ScatterState:
    """Accumulator threaded through scatter, one step per item."""
    placed: tuple[PlacedItem, ...] = ()
    next_board: int = 0
    fallback_ids: tuple[str, ...] = ()


def scatter(
    items: Sequence[PlacedItem],
    spread: Spread,
    policy: Optional[PlacementPolicy] = None,
    rng: Optional[random.Random] = None,
    options: Optional[ScatterOptions] = None,
) -> PlacementResult:
    """
    Scatter items randomly across the spread without overlap.

    Args:
        items: Items to place (order = processing priority)
        spread: Spread configuration
        policy: Retry budget and size floor (default PlacementPolicy())
        rng: Random source (default: policy.make_rng())
        options: Scatter switches (default ScatterOptions())

    Returns:
        PlacementResult; fallback_ids lists items whose retry budget ran out

    Example:
        >>> result = scatter(items, Spread(board_count=3), PlacementPolicy(seed=1))
        >>> audit_overlaps(result.items, 24)
        []
    """
    policy = policy or PlacementPolicy()
    rng = rng or policy.make_rng()
    options = options or ScatterOptions()

    queue = list(items)
    if options.shuffle:
        rng.shuffle(queue)

    state = _ScatterState()
    for item in queue:
        state = _scatter_step(item, state, spread, policy, rng, options)

    warnings = [
        f"Random placement budget exhausted for item {item_id}; used fallback position"
        for item_id in state.fallback_ids
    ]
    logger.info(
        f"Scattered {len(state.placed)} items over {spread.board_count} boards "
        f"({len(state.fallback_ids)} fallbacks)"
    )
    return PlacementResult.from_placed(state.placed, state.fallback_ids, warnings)


def _scatter_step(
    item: PlacedItem,
    state: _ScatterState,
    spread: Spread,
    policy: PlacementPolicy,
    rng: random.Random,
    options: ScatterOptions,
) -> _ScatterState:
    """Place one item; return the advanced accumulator."""
    if options.resize:
        w, h = random_size(spread, policy, rng)
    else:
        w, h = fit_size(item.w, item.h, spread, policy)

    for attempt in range(policy.max_attempts):
        if options.board_selection is BoardSelection.ROUND_ROBIN:
            board_index = (state.next_board + attempt) % spread.board_count
        else:
            board_index = rng.randrange(spread.board_count)

        candidate = random_rect_in_board(
            spread.board(board_index), spread, w, h, rng,
            spread_vertical=options.spread_vertical,
        )
        if not collides(candidate, state.placed, spread.spacing):
            return _ScatterState(
                placed=state.placed + (item.with_rect(candidate),),
                next_board=(board_index + 1) % spread.board_count,
                fallback_ids=state.fallback_ids,
            )

    board = spread.board(state.next_board)
    x_min, _, y_min, _ = usable_range(board, spread, w, h)
    logger.warning(
        f"No free spot for item {item.id} after {policy.max_attempts} attempts; "
        f"clamping to board {board.index}"
    )
    return _ScatterState(
        placed=state.placed + (item.with_rect(Rect(x_min, y_min, w, h)),),
        next_board=(state.next_board + 1) % spread.board_count,
        fallback_ids=state.fallback_ids + (item.id,),
    )


def random_rect_in_board(
    board: Board,
    spread: Spread,
    w: float,
    h: float,
    rng: random.Random,
    *,
    spread_vertical: bool = True,
) -> Rect:
    """
    Draw a w x h rectangle uniformly inside a board's usable interior.

    Offsets are whole units from the interior's near corner, so the
    result never leaves [x_min, x_max] x [y_min, y_max].
    """
    x_min, x_max, y_min, y_max = usable_range(board, spread, w, h)
    y_span = y_max - y_min
    if not spread_vertical:
        y_span *= TOP_BAND_FRACTION
    x = x_min + math.floor(rng.uniform(0, x_max - x_min))
    y = y_min + math.floor(rng.uniform(0, y_span))
    return Rect(x, y, w, h)
