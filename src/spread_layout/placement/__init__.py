"""
Placement engine: non-overlapping layout strategies over a spread.
"""

from .audit import OverlapPair, audit_overlaps, collides, overlapping_ids
from .bounds import clamp_item, fix_bounds
from .distribute import distribute
from .masonry import editorial, editorial_seamless
from .models import PlacementResult
from .ordering import (
    assign_z_order,
    bring_to_front,
    is_dense_z_order,
    normalize_z_order,
    paint_order,
    send_to_back,
    shuffle_order,
)
from .packer import pack
from .policy import BoardSelection, MasonryOptions, PlacementPolicy, ScatterOptions
from .scatter import scatter
from .sizing import fit_size, initial_size
from .strategy import Strategy, arrange, parse_strategy

__all__ = [
    "OverlapPair",
    "audit_overlaps",
    "collides",
    "overlapping_ids",
    "clamp_item",
    "fix_bounds",
    "distribute",
    "editorial",
    "editorial_seamless",
    "PlacementResult",
    "assign_z_order",
    "bring_to_front",
    "is_dense_z_order",
    "normalize_z_order",
    "paint_order",
    "send_to_back",
    "shuffle_order",
    "pack",
    "BoardSelection",
    "MasonryOptions",
    "PlacementPolicy",
    "ScatterOptions",
    "scatter",
    "fit_size",
    "initial_size",
    "Strategy",
    "arrange",
    "parse_strategy",
]
