"""
Module: placement.models

Purpose:
    Result type returned by every placement strategy.

Key Classes:
    - PlacementResult: Placed items plus fallback diagnostics

Dependencies:
    - dataclasses (std)
    - core.models.items: PlacedItem

Used By:
    - placement.*: Strategy outputs
    - session: Applying a strategy
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from spread_layout.core.models.items import PlacedItem

from .ordering import assign_z_order


@dataclass(frozen=True)
class PlacementResult:
    """
    Output of a placement pass (immutable).

    Items are in output order with z_order equal to their position.
    Items placed by a fallback path are listed in fallback_ids; they
    are valid rectangles inside the spread but may overlap others.

    Attributes:
        items: Placed items in paint order
        fallback_ids: Ids of items that went through a fallback path
        warnings: Human-readable warnings
        margin: Gap the layout was built to keep, when it differs from
            the spread's spacing (0 for seamless masonry)

    Example:
        >>> result = scatter(items, spread)
        >>> result.has_fallbacks
        False
    """

    items: tuple[PlacedItem, ...]
    fallback_ids: tuple[str, ...] = ()
    warnings: list[str] = field(default_factory=list)
    margin: Optional[float] = None

    @classmethod
    def from_placed(
        cls,
        placed: Sequence[PlacedItem],
        fallback_ids: Sequence[str] = (),
        warnings: Optional[list[str]] = None,
        margin: Optional[float] = None,
    ) -> PlacementResult:
        """Build a result, numbering z_order by output position."""
        return cls(
            items=tuple(assign_z_order(placed)),
            fallback_ids=tuple(fallback_ids),
            warnings=list(warnings or []),
            margin=margin,
        )

    @property
    def has_fallbacks(self) -> bool:
        return len(self.fallback_ids) > 0

    @property
    def item_count(self) -> int:
        return len(self.items)

    def by_id(self) -> dict[str, PlacedItem]:
        """Map of id to placed item."""
        return {n.id: n for n in self.items}
