"""
Module: spread

Purpose:
    Board model. A spread is a row of equal-size boards laid edge to
    edge. This module is the single place that derives board membership
    from an x coordinate and converts between spread-space and
    board-local coordinates.

Key Classes:
    - Spread: Immutable, validated spread configuration
    - Board: One board of a spread

Dependencies:
    - dataclasses (std)
    - .geometry: Rect

Used By:
    - placement.*: Board interiors and membership
    - compositor.crop_ops: Board rectangles
    - output.*: Board pixel sizes
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .geometry import Rect

# Limits
MAX_BOARDS = 20
MIN_BOARD_PX = 100
MAX_BOARD_PX = 8000
MAX_SPACING = 200

# Defaults (portrait 1080x1320 boards)
DEFAULT_BOARD_COUNT = 6
DEFAULT_BOARD_W = 1080
DEFAULT_BOARD_H = 1320
DEFAULT_SPACING = 24


@dataclass(frozen=True)
class Board:
    """
    One board of a spread (immutable).

    Attributes:
        index: Board number (0-indexed)
        width: Board width in spread units
        height: Board height in spread units

    Example:
        >>> Board(2, 1080, 1320).origin_x
        2160
    """

    index: int
    width: float
    height: float

    @property
    def origin_x(self) -> float:
        """Left edge of this board in spread space."""
        return self.index * self.width

    @property
    def rect(self) -> Rect:
        """Board extent in spread space."""
        return Rect(self.origin_x, 0, self.width, self.height)

    def contains_x(self, x: float) -> bool:
        """Check if x falls in [origin_x, origin_x + width)."""
        return self.origin_x <= x < self.origin_x + self.width


@dataclass(frozen=True)
class Spread:
    """
    Spread configuration (immutable).

    Validated here, at the configuration boundary, so that placement
    and compositing code can assume sane input.

    Attributes:
        board_count: Number of boards (1..20)
        board_w: Width of each board
        board_h: Height of each board
        spacing: Minimum gap between placed items (also the edge margin)

    Invariants:
        - 1 <= board_count <= MAX_BOARDS
        - board_w > 0, board_h > 0
        - 0 <= spacing and 2 * spacing < min(board_w, board_h)

    Example:
        >>> spread = Spread(board_count=3, board_w=1080, board_h=1320)
        >>> spread.width
        3240
        >>> spread.board_index_for_x(1500)
        1
    """

    board_count: int = DEFAULT_BOARD_COUNT
    board_w: float = DEFAULT_BOARD_W
    board_h: float = DEFAULT_BOARD_H
    spacing: float = DEFAULT_SPACING

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not 1 <= self.board_count <= MAX_BOARDS:
            raise ValueError(
                f"board_count must be between 1 and {MAX_BOARDS}: {self.board_count}"
            )
        if self.board_w <= 0:
            raise ValueError(f"board_w must be positive: {self.board_w}")
        if self.board_h <= 0:
            raise ValueError(f"board_h must be positive: {self.board_h}")
        if self.spacing < 0:
            raise ValueError(f"spacing must be non-negative: {self.spacing}")
        if self.interior_width <= 0 or self.interior_height <= 0:
            raise ValueError("Spacing leaves no usable board interior")

    @classmethod
    def from_input(
        cls,
        board_count: int,
        board_w: float,
        board_h: float,
        spacing: float,
    ) -> Spread:
        """
        Build a spread from raw user input, clamping each field.

        Boards are clamped to 1..20, dimensions to 100..8000 and
        spacing to 0..200, and spacing is further capped so the board
        interior keeps at least one unit in each direction.
        """
        board_w = _clamp(board_w, MIN_BOARD_PX, MAX_BOARD_PX)
        board_h = _clamp(board_h, MIN_BOARD_PX, MAX_BOARD_PX)
        max_spacing = min(MAX_SPACING, math.floor((min(board_w, board_h) - 1) / 2))
        return cls(
            board_count=_clamp(int(board_count), 1, MAX_BOARDS),
            board_w=board_w,
            board_h=board_h,
            spacing=_clamp(spacing, 0, max_spacing),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Extents
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def width(self) -> float:
        """Total spread width (board_count * board_w)."""
        return self.board_count * self.board_w

    @property
    def height(self) -> float:
        return self.board_h

    @property
    def rect(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    @property
    def interior_width(self) -> float:
        """Usable board width once the spacing margin is removed on both sides."""
        return self.board_w - 2 * self.spacing

    @property
    def interior_height(self) -> float:
        """Usable board height once the spacing margin is removed on both sides."""
        return self.board_h - 2 * self.spacing

    # ─────────────────────────────────────────────────────────────────────────
    # Boards
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def boards(self) -> tuple[Board, ...]:
        """All boards in index order."""
        return tuple(self.board(i) for i in range(self.board_count))

    def board(self, index: int) -> Board:
        """
        Get a board by index.

        Raises:
            IndexError: If index is outside 0..board_count-1
        """
        if not 0 <= index < self.board_count:
            raise IndexError(f"Board index out of range: {index}")
        return Board(index, self.board_w, self.board_h)

    def board_index_for_x(self, x: float) -> int:
        """
        Board that owns spread-space coordinate x.

        floor(x / board_w), clamped into 0..board_count-1 so that
        coordinates left of the spread belong to the first board and
        coordinates right of it to the last.
        """
        index = math.floor(x / self.board_w)
        return _clamp(index, 0, self.board_count - 1)

    def to_local(self, x: float, y: float) -> tuple[int, float, float]:
        """
        Convert a spread-space point to (board index, local x, local y).
        """
        index = self.board_index_for_x(x)
        return index, x - index * self.board_w, y

    def to_spread(self, index: int, local_x: float, local_y: float) -> tuple[float, float]:
        """Convert a board-local point back to spread space."""
        return self.board(index).origin_x + local_x, local_y


def _clamp(value, low, high):
    return min(max(value, low), high)
