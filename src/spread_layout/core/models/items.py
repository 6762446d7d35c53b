"""
Module: items

Purpose:
    Provides the PlacedItem dataclass - one photograph positioned in
    spread space, plus its source reference and (once decoded) the
    source's natural pixel size.

Key Classes:
    - PlacedItem: Immutable placed photograph

Key Functions:
    - new_item_id(): Short random identifier for a new item

Dependencies:
    - dataclasses (std)
    - .geometry: Rect

Used By:
    - placement.*: Input and output of every strategy
    - compositor.crop_ops: Source of crop operations
    - session: Item lifecycle
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Optional

from .geometry import Rect


def new_item_id() -> str:
    """Short random id (7 hex chars), unique within a session in practice."""
    return uuid.uuid4().hex[:7]


@dataclass(frozen=True)
class PlacedItem:
    """
    A photograph placed on the spread (immutable).

    Geometry changes produce a new instance (see with_rect). The
    natural size is unknown (None) until the source has been decoded
    and, once set, never changes.

    Attributes:
        id: Stable unique identifier
        x: Left edge in spread space
        y: Top edge in spread space
        w: Placed width (> 0)
        h: Placed height (> 0)
        natural_w: Source pixel width, or None if not decoded yet
        natural_h: Source pixel height, or None if not decoded yet
        z_order: Paint order position (later = drawn on top)
        source: Opaque reference to the source image (e.g. file path)

    Example:
        >>> item = PlacedItem("a1", x=10, y=10, w=200, h=150)
        >>> item.rect
        Rect(x=10, y=10, w=200, h=150)
        >>> item.has_natural_size
        False
    """

    id: str
    x: float
    y: float
    w: float
    h: float
    natural_w: Optional[int] = None
    natural_h: Optional[int] = None
    z_order: int = 0
    source: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate item on construction."""
        if not self.id:
            raise ValueError("id must be non-empty")
        if self.w <= 0 or self.h <= 0:
            raise ValueError(
                f"Item {self.id} has degenerate size: {self.w}x{self.h}"
            )
        if (self.natural_w is None) != (self.natural_h is None):
            raise ValueError(
                f"Item {self.id}: natural_w and natural_h must be set together"
            )
        if self.natural_w is not None and (self.natural_w <= 0 or self.natural_h <= 0):
            raise ValueError(
                f"Item {self.id} has invalid natural size: "
                f"{self.natural_w}x{self.natural_h}"
            )
        if self.z_order < 0:
            raise ValueError(f"z_order must be >= 0: {self.z_order}")

    @property
    def rect(self) -> Rect:
        """Placed frame in spread space."""
        return Rect(self.x, self.y, self.w, self.h)

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def has_natural_size(self) -> bool:
        """True once the source's true pixel size is known."""
        return self.natural_w is not None

    @property
    def aspect(self) -> float:
        """Width / height of the source if known, else of the placed frame."""
        if self.has_natural_size:
            return self.natural_w / self.natural_h
        return self.w / self.h

    def with_rect(self, rect: Rect) -> PlacedItem:
        """Return a copy moved/resized to rect."""
        return replace(self, x=rect.x, y=rect.y, w=rect.w, h=rect.h)

    def with_z_order(self, z_order: int) -> PlacedItem:
        return replace(self, z_order=z_order)

    def with_natural_size(self, natural_w: int, natural_h: int) -> PlacedItem:
        """
        Return a copy with the natural size recorded.

        Raises:
            ValueError: If a different natural size was already recorded
        """
        if self.has_natural_size:
            if (self.natural_w, self.natural_h) != (natural_w, natural_h):
                raise ValueError(
                    f"Item {self.id} natural size already set to "
                    f"{self.natural_w}x{self.natural_h}"
                )
            return self
        return replace(self, natural_w=natural_w, natural_h=natural_h)
