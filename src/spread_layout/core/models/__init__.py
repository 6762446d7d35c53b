"""
Core Models Package

Immutable, validated data models shared by placement, compositing and
export.

All models are frozen dataclasses: strategies never mutate an item in
place, they return new instances. This keeps every placement pass a
pure function of its input list.
"""

from .geometry import Rect, intersect, overlaps
from .spread import Board, Spread, MAX_BOARDS
from .items import PlacedItem, new_item_id

__all__ = [
    "Rect",
    "intersect",
    "overlaps",
    "Board",
    "Spread",
    "MAX_BOARDS",
    "PlacedItem",
    "new_item_id",
]
