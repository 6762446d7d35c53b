"""
Module: placement.ordering

Purpose:
    Paint-order (z_order) maintenance. Every function returns a new
    list whose z_order values are exactly 0..N-1.

Key Functions:
    - assign_z_order(): z_order = list position
    - normalize_z_order(): Make z_order dense, keeping relative order
    - paint_order(): Items sorted bottom to top
    - shuffle_order(): Random paint order, positions unchanged
    - bring_to_front() / send_to_back(): Move one item to the top/bottom

Used By:
    - placement.*: Finishing every strategy
    - session: Reorder operations
"""

from __future__ import annotations

import random
from typing import List, Sequence

from spread_layout.core.models.items import PlacedItem


def assign_z_order(items: Sequence[PlacedItem]) -> List[PlacedItem]:
    """Return copies whose z_order equals their index in items."""
    return [n.with_z_order(i) for i, n in enumerate(items)]


def paint_order(items: Sequence[PlacedItem]) -> List[PlacedItem]:
    """
    Sort items bottom-to-top.

    Ties on z_order keep list order (sorted() is stable).
    """
    return sorted(items, key=lambda n: n.z_order)


def normalize_z_order(items: Sequence[PlacedItem]) -> List[PlacedItem]:
    """
    Re-number z_order densely as 0..N-1, keeping relative paint order.

    The returned list keeps the input list order; only z_order changes.
    E.g. z_order values [5, 2, 9] become [1, 0, 2].
    """
    ranked = {id(n): rank for rank, n in enumerate(paint_order(items))}
    return [n.with_z_order(ranked[id(n)]) for n in items]


def shuffle_order(items: Sequence[PlacedItem], rng: random.Random) -> List[PlacedItem]:
    """
    Randomise paint order, keeping every item's position.

    Returns the items in their new paint order.
    """
    shuffled = list(items)
    rng.shuffle(shuffled)
    return assign_z_order(shuffled)


def bring_to_front(items: Sequence[PlacedItem], item_id: str) -> List[PlacedItem]:
    """
    Move one item to the top of the paint order.

    Raises:
        KeyError: If no item has item_id
    """
    ordered = paint_order(items)
    target = _pop_by_id(ordered, item_id)
    return assign_z_order(ordered + [target])


def send_to_back(items: Sequence[PlacedItem], item_id: str) -> List[PlacedItem]:
    """
    Move one item to the bottom of the paint order.

    Raises:
        KeyError: If no item has item_id
    """
    ordered = paint_order(items)
    target = _pop_by_id(ordered, item_id)
    return assign_z_order([target] + ordered)


def is_dense_z_order(items: Sequence[PlacedItem]) -> bool:
    """True if z_order values are exactly {0, ..., N-1}."""
    return sorted(n.z_order for n in items) == list(range(len(items)))


def _pop_by_id(items: List[PlacedItem], item_id: str) -> PlacedItem:
    for i, n in enumerate(items):
        if n.id == item_id:
            return items.pop(i)
    raise KeyError(f"No item with id: {item_id}")
