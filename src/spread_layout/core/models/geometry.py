"""
Module: geometry

Purpose:
    Geometry kernel - the Rect value type plus the two predicates every
    layout strategy and the compositor are built on. Pure functions,
    no state.

Key Functions:
    - intersect(a, b): Overlapping rectangle or None
    - overlaps(a, b, margin): Margin-aware overlap test

Key Classes:
    - Rect: Immutable axis-aligned rectangle in spread space

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.spread: Board rectangles
    - placement.*: Non-overlap test
    - compositor.crop_ops: Board/frame intersection
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Axis-aligned rectangle (immutable).

    The region is [x, x + w) x [y, y + h). Coordinates are floats in
    spread-space units; a rectangle may span several boards.

    Attributes:
        x: Left edge
        y: Top edge
        w: Width (must be > 0)
        h: Height (must be > 0)

    Example:
        >>> r = Rect(10, 20, 100, 50)
        >>> r.right, r.bottom
        (110, 70)
    """

    x: float
    y: float
    w: float
    h: float

    def __post_init__(self) -> None:
        """Validate extent on construction."""
        if self.w <= 0:
            raise ValueError(f"width must be > 0: {self.w}")
        if self.h <= 0:
            raise ValueError(f"height must be > 0: {self.h}")

    @property
    def right(self) -> float:
        """Right edge (exclusive)."""
        return self.x + self.w

    @property
    def bottom(self) -> float:
        """Bottom edge (exclusive)."""
        return self.y + self.h

    @property
    def area(self) -> float:
        return self.w * self.h

    def translated(self, dx: float, dy: float) -> Rect:
        """Return a copy shifted by (dx, dy)."""
        return Rect(self.x + dx, self.y + dy, self.w, self.h)

    def as_tuple(self) -> tuple[float, float, float, float]:
        """Get as (x, y, w, h)."""
        return (self.x, self.y, self.w, self.h)


def intersect(a: Rect, b: Rect) -> Optional[Rect]:
    """
    Compute the overlapping region of two rectangles.

    Edge-touching rectangles do not intersect: the result must have
    strictly positive width and height.

    Args:
        a: First rectangle
        b: Second rectangle

    Returns:
        The intersection, or None when the rectangles are disjoint

    Example:
        >>> intersect(Rect(0, 0, 100, 100), Rect(50, 50, 100, 100))
        Rect(x=50, y=50, w=50, h=50)
        >>> intersect(Rect(0, 0, 100, 100), Rect(100, 0, 10, 10)) is None
        True
    """
    x1 = max(a.x, b.x)
    y1 = max(a.y, b.y)
    x2 = min(a.right, b.right)
    y2 = min(a.bottom, b.bottom)
    w = x2 - x1
    h = y2 - y1
    if w <= 0 or h <= 0:
        return None
    return Rect(x1, y1, w, h)


def overlaps(a: Rect, b: Rect, margin: float = 0.0) -> bool:
    """
    Check whether two rectangles come closer than ``margin``.

    True unless the rectangles are fully separated by at least
    ``margin`` on one axis. Symmetric in a and b. This is the only
    non-overlap test used by the placement strategies.

    Args:
        a: First rectangle
        b: Second rectangle
        margin: Required gap (>= 0)

    Returns:
        True if the rectangles overlap or sit closer than margin

    Raises:
        ValueError: If margin is negative

    Example:
        >>> overlaps(Rect(0, 0, 10, 10), Rect(12, 0, 10, 10), margin=2)
        False
        >>> overlaps(Rect(0, 0, 10, 10), Rect(12, 0, 10, 10), margin=3)
        True
    """
    if margin < 0:
        raise ValueError(f"margin must be >= 0: {margin}")
    return not (
        a.right + margin <= b.x
        or b.right + margin <= a.x
        or a.bottom + margin <= b.y
        or b.bottom + margin <= a.y
    )
