"""
Cover-fit compositor: maps placed items onto per-board crop operations.
"""

from .cover_fit import CoverFit, cover_fit
from .crop_ops import CropOp, crop_ops_for_board, crop_ops_for_item

__all__ = [
    "CoverFit",
    "cover_fit",
    "CropOp",
    "crop_ops_for_board",
    "crop_ops_for_item",
]
