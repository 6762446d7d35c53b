"""
Module: session

Purpose:
    Item lifecycle for one working spread. A session owns the spread
    configuration and the current list of placed photographs, and
    applies every engine operation (arrange, fix bounds, reorder) by
    swapping in the engine's result.

Key Classes:
    - SpreadSession: Mutable holder of (spread, items)

Dependencies:
    - placement: Strategies, bounds fixing, ordering, audit
    - images.provider: Natural size resolution
    - core.utils.serialization: Snapshots

Used By:
    - cli: layout / audit commands
    - controller: Export pipeline input
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from spread_layout.core.models.items import PlacedItem, new_item_id
from spread_layout.core.models.spread import Spread
from spread_layout.core.utils.serialization import load_snapshot, save_layout
from spread_layout.images.provider import ImageProvider, resolve_natural_sizes
from spread_layout.placement import ordering
from spread_layout.placement.audit import OverlapPair, audit_overlaps
from spread_layout.placement.bounds import fix_bounds
from spread_layout.placement.models import PlacementResult
from spread_layout.placement.policy import MasonryOptions, PlacementPolicy, ScatterOptions
from spread_layout.placement.sizing import initial_size
from spread_layout.placement.strategy import Strategy, arrange

logger = logging.getLogger(__name__)

# Where newly added items land before any arrangement
NEW_ITEM_OFFSET = 20


class SpreadSession:
    """
    A spread and the photographs placed on it.

    Items are kept in paint order with z_order 0..N-1. Every operation
    replaces the item list with the engine's output; items themselves
    are immutable.

    Example:
        >>> session = SpreadSession(Spread(board_count=3), PlacementPolicy(seed=42))
        >>> session.add_image("photos/a.jpg", natural_size=(4032, 3024))
        >>> result = session.arrange(Strategy.SCATTER)
        >>> session.audit()
        []
    """

    def __init__(
        self,
        spread: Optional[Spread] = None,
        policy: Optional[PlacementPolicy] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """
        Initialize session.

        Args:
            spread: Spread configuration (default Spread())
            policy: Placement budget (default PlacementPolicy())
            rng: Random source for sizes and strategies (default: policy.make_rng())
        """
        self._spread = spread or Spread()
        self.policy = policy or PlacementPolicy()
        self.rng = rng or self.policy.make_rng()
        self._items: List[PlacedItem] = []
        self._margin: Optional[float] = None

    # ─────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────

    @property
    def spread(self) -> Spread:
        return self._spread

    @property
    def items(self) -> Tuple[PlacedItem, ...]:
        """Items in paint order."""
        return tuple(self._items)

    @property
    def audit_margin(self) -> float:
        """Gap the current layout keeps: 0 after seamless masonry, else the spacing."""
        return self._spread.spacing if self._margin is None else self._margin

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> PlacedItem:
        """
        Look up an item.

        Raises:
            KeyError: If no item has item_id
        """
        for item in self._items:
            if item.id == item_id:
                return item
        raise KeyError(f"No item with id: {item_id}")

    def set_spread(self, spread: Spread) -> None:
        """Switch to a new spread configuration and pull items inside it."""
        self._spread = spread
        self._items = fix_bounds(self._items, spread, self.policy)
        logger.info(
            f"Spread set to {spread.board_count} x {spread.board_w}x{spread.board_h}, "
            f"spacing {spread.spacing}"
        )

    # ─────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────

    def add_image(
        self,
        source: Optional[str],
        size_hint: Optional[Tuple[float, float]] = None,
        natural_size: Optional[Tuple[int, int]] = None,
    ) -> PlacedItem:
        """
        Accept a new photograph onto the spread.

        The item lands near the top-left of board 0, on top of the paint
        order. Without a size hint it gets the standard starting size
        (32-60% of the board width).

        Args:
            source: Source reference (e.g. path)
            size_hint: (w, h) to start from; floored to policy.min_size
            natural_size: Source pixel size, if already known

        Returns:
            The new item

        Raises:
            ValueError: If size_hint has a non-positive dimension
        """
        if size_hint is None:
            w, h = initial_size(self._spread, self.rng)
        else:
            w, h = size_hint
            if w <= 0 or h <= 0:
                raise ValueError(f"Degenerate size hint for {source}: {w}x{h}")
        w = max(w, self.policy.min_size)
        h = max(h, self.policy.min_size)

        natural_w, natural_h = natural_size if natural_size is not None else (None, None)
        item = PlacedItem(
            id=new_item_id(),
            x=NEW_ITEM_OFFSET,
            y=NEW_ITEM_OFFSET,
            w=w,
            h=h,
            natural_w=natural_w,
            natural_h=natural_h,
            z_order=len(self._items),
            source=source,
        )
        self._items.append(item)
        logger.debug(f"Added item {item.id} ({w}x{h}) from {source}")
        return item

    def add_images(
        self,
        sources: Iterable[str],
        provider: Optional[ImageProvider] = None,
    ) -> List[PlacedItem]:
        """
        Add several photographs; resolve their natural sizes if a provider is given.

        Returns:
            The new items (with natural sizes where they could be read)
        """
        added = [self.add_image(str(source)) for source in sources]
        if provider is not None:
            self.resolve_sizes(provider)
            added = [self.get(n.id) for n in added]
        logger.info(f"Added {len(added)} images")
        return added

    def remove(self, item_id: str) -> PlacedItem:
        """
        Remove one item and close the gap in the paint order.

        Raises:
            KeyError: If no item has item_id
        """
        item = self.get(item_id)
        self._items = ordering.assign_z_order([n for n in self._items if n.id != item_id])
        logger.debug(f"Removed item {item_id}")
        return item

    def reset(self) -> None:
        """Remove every item."""
        self._items = []
        self._margin = None
        logger.info("Session reset")

    def set_natural_size(self, item_id: str, natural_w: int, natural_h: int) -> PlacedItem:
        """
        Record the decoded size of an item's source.

        Raises:
            KeyError: If no item has item_id
            ValueError: If a different natural size was already recorded
        """
        updated = self.get(item_id).with_natural_size(natural_w, natural_h)
        self._replace(updated)
        return updated

    def resolve_sizes(self, provider: ImageProvider) -> List[str]:
        """
        Fill in natural sizes from a provider.

        Returns:
            Ids of items still lacking a natural size
        """
        self._items, pending = resolve_natural_sizes(self._items, provider)
        if pending:
            logger.warning(f"{len(pending)} item(s) still have no natural size")
        return pending

    # ─────────────────────────────────────────────────────────────────────
    # Engine operations
    # ─────────────────────────────────────────────────────────────────────

    def arrange(
        self,
        strategy: Strategy = Strategy.SCATTER,
        *,
        scatter_options: Optional[ScatterOptions] = None,
        masonry_options: Optional[MasonryOptions] = None,
    ) -> PlacementResult:
        """Run a layout strategy over every item and keep its result."""
        result = arrange(
            self._items,
            self._spread,
            strategy,
            self.policy,
            self.rng,
            scatter_options=scatter_options,
            masonry_options=masonry_options,
        )
        self._items = list(result.items)
        self._margin = result.margin
        for warning in result.warnings:
            logger.debug(warning)
        return result

    def fix_bounds(self) -> None:
        self._items = fix_bounds(self._items, self._spread, self.policy)

    def shuffle_order(self) -> None:
        """Randomise paint order; positions are kept."""
        self._items = ordering.shuffle_order(self._items, self.rng)

    def bring_to_front(self, item_id: str) -> None:
        self._items = ordering.bring_to_front(self._items, item_id)

    def send_to_back(self, item_id: str) -> None:
        self._items = ordering.send_to_back(self._items, item_id)

    def audit(self, margin: Optional[float] = None) -> List[OverlapPair]:
        """Overlapping pairs under margin (default: audit_margin)."""
        return audit_overlaps(self._items, self.audit_margin if margin is None else margin)

    # ─────────────────────────────────────────────────────────────────────
    # Snapshots
    # ─────────────────────────────────────────────────────────────────────

    def save(self, path: Path) -> Path:
        """Write the spread and items to a layout snapshot."""
        return save_layout(Path(path), self._spread, self._items, self._margin)

    @classmethod
    def load(
        cls,
        path: Path,
        policy: Optional[PlacementPolicy] = None,
        rng: Optional[random.Random] = None,
    ) -> SpreadSession:
        """
        Restore a session from a layout snapshot.

        Natural sizes are not stored; call resolve_sizes() before export.
        """
        snapshot = load_snapshot(Path(path))
        session = cls(snapshot.spread, policy, rng)
        session._items = ordering.paint_order(ordering.normalize_z_order(snapshot.items))
        session._margin = snapshot.margin
        return session

    def _replace(self, updated: PlacedItem) -> None:
        self._items = [updated if n.id == updated.id else n for n in self._items]

    @staticmethod
    def from_items(
        items: Sequence[PlacedItem],
        spread: Spread,
        policy: Optional[PlacementPolicy] = None,
    ) -> SpreadSession:
        """Session over an existing item list (kept in paint order)."""
        session = SpreadSession(spread, policy)
        session._items = ordering.paint_order(ordering.normalize_z_order(items))
        return session
