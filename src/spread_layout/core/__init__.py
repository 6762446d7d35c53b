"""
Spread Layout Core Package

Shared data models, snapshot schema and serialization used by the
placement engine, the compositor and the exporters.
"""

from .models import Rect, intersect, overlaps, Board, Spread, PlacedItem

__all__ = [
    "Rect",
    "intersect",
    "overlaps",
    "Board",
    "Spread",
    "PlacedItem",
]
