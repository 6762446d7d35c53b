"""
Utils Package

Serialization and file locking utilities.
"""

from .serialization import (
    LayoutFileError,
    LayoutSnapshot,
    serialize_layout,
    deserialize_layout,
    save_layout,
    load_layout,
    load_snapshot,
)

__all__ = [
    "LayoutFileError",
    "LayoutSnapshot",
    "serialize_layout",
    "deserialize_layout",
    "save_layout",
    "load_layout",
    "load_snapshot",
]
