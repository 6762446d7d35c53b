"""
Module: placement.audit

Purpose:
    Overlap checks over a set of placed items. Strategies use collides()
    while placing; callers use audit_overlaps() afterwards to detect
    overlaps introduced by fallback placements.

Key Functions:
    - collides(): Does a candidate rect overlap any placed item
    - audit_overlaps(): Every overlapping pair in a layout

Key Classes:
    - OverlapPair: Two item ids that overlap under a margin
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, List, Sequence

from spread_layout.core.models.geometry import Rect, overlaps
from spread_layout.core.models.items import PlacedItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverlapPair:
    """Two items closer than the audited margin."""
    first_id: str
    second_id: str


def collides(rect: Rect, placed: Iterable[PlacedItem], margin: float) -> bool:
    """True if rect overlaps (under margin) any item in placed."""
    return any(overlaps(rect, p.rect, margin) for p in placed)


def audit_overlaps(items: Sequence[PlacedItem], margin: float = 0.0) -> List[OverlapPair]:
    """
    Find every pair of items that overlap under margin.

    Args:
        items: Placed items
        margin: Required gap (usually the spread's spacing)

    Returns:
        Overlapping pairs, in input order; empty when the layout is clean

    Example:
        >>> audit_overlaps(result.items, spread.spacing)
        []
    """
    pairs = [
        OverlapPair(a.id, b.id)
        for a, b in combinations(items, 2)
        if overlaps(a.rect, b.rect, margin)
    ]
    if pairs:
        logger.debug(f"Overlap audit found {len(pairs)} pairs at margin {margin}")
    return pairs


def overlapping_ids(items: Sequence[PlacedItem], margin: float = 0.0) -> set[str]:
    """Ids of every item involved in at least one overlapping pair."""
    ids: set[str] = set()
    for pair in audit_overlaps(items, margin):
        ids.add(pair.first_id)
        ids.add(pair.second_id)
    return ids
