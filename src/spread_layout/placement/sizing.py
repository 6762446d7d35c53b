"""
Module: placement.sizing

Purpose:
    Size floors, interior caps and the usable position range of a
    board. Every strategy sizes and bounds items through these helpers
    so the "never collapse below min_size" rule lives in one place.

Key Functions:
    - fit_size(): Floor to min_size, cap to the board interior
    - usable_range(): Valid top-left range for a w x h item on a board
    - initial_size(): Size for a freshly added photograph
    - random_size(): Size drawn by resizing scatter

Used By:
    - placement.scatter, placement.packer, placement.masonry,
      placement.distribute, placement.bounds
    - session: Adding items
"""

from __future__ import annotations

import math
import random
from typing import Tuple

from spread_layout.core.models.spread import Board, Spread

from .policy import PlacementPolicy

# Fraction bands
INITIAL_WIDTH_BAND = (0.32, 0.60)   # of board width
INITIAL_ASPECT_BAND = (0.65, 1.0)   # height / width
SCATTER_WIDTH_BAND = (0.25, 0.65)   # of board width
SCATTER_ASPECT_BAND = (0.6, 1.0)    # height / width


def fit_size(
    w: float,
    h: float,
    spread: Spread,
    policy: PlacementPolicy,
) -> Tuple[float, float]:
    """
    Floor a size to policy.min_size and cap it to the board interior.

    When the interior is smaller than min_size the interior wins, so
    the result always fits inside one board.

    Example:
        >>> fit_size(5, 5000, Spread(board_w=1080, board_h=1320, spacing=24), PlacementPolicy())
        (20, 1272)
    """
    w = min(max(w, policy.min_size), spread.interior_width)
    h = min(max(h, policy.min_size), spread.interior_height)
    return w, h


def usable_range(
    board: Board,
    spread: Spread,
    w: float,
    h: float,
) -> Tuple[float, float, float, float]:
    """
    Range of valid top-left corners for a w x h item on a board.

    Returns:
        (x_min, x_max, y_min, y_max); x_max >= x_min and y_max >= y_min
        even when the item does not fit (the range collapses to the
        near-origin corner)
    """
    x_min = board.origin_x + spread.spacing
    x_max = max(x_min, board.origin_x + spread.board_w - spread.spacing - w)
    y_min = spread.spacing
    y_max = max(y_min, spread.board_h - spread.spacing - h)
    return x_min, x_max, y_min, y_max


def initial_size(spread: Spread, rng: random.Random) -> Tuple[int, int]:
    """
    Starting size for a newly accepted photograph.

    Width is 32-60% of the board width, height 65-100% of that width.
    """
    w = math.floor(spread.board_w * rng.uniform(*INITIAL_WIDTH_BAND))
    h = math.floor(w * rng.uniform(*INITIAL_ASPECT_BAND))
    return w, h


def random_size(
    spread: Spread,
    policy: PlacementPolicy,
    rng: random.Random,
) -> Tuple[float, float]:
    """Random size used when scatter re-sizes items, already fitted."""
    w = math.floor(spread.board_w * rng.uniform(*SCATTER_WIDTH_BAND))
    h = math.floor(w * rng.uniform(*SCATTER_ASPECT_BAND))
    return fit_size(w, h, spread, policy)
