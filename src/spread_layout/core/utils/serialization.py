"""
Serialization Utilities

to/from JSON for layout snapshots.

A snapshot is the spread configuration plus each item's
{id, x, y, w, h, z_order, source}. Natural sizes and image bytes are
NOT stored: they are re-resolved from the sources after loading.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import portalocker

from ..models.items import PlacedItem
from ..models.spread import Spread
from ..schemas.validator import LAYOUT_SCHEMA_VERSION, ValidationError, validate_layout
from .file_locking import locked_file, locked_write_json

logger = logging.getLogger(__name__)


class LayoutFileError(Exception):
    """Layout snapshot could not be read or written."""
    pass


@dataclass(frozen=True)
class LayoutSnapshot:
    """
    Contents of a layout file.

    Attributes:
        spread: Spread configuration
        items: Items, natural sizes not yet resolved
        margin: Gap the layout was built to keep, or None for the spacing
    """

    spread: Spread
    items: list[PlacedItem]
    margin: Optional[float] = None


# ─────────────────────────────────────────────────────────────────────────────
# Dict conversion
# ─────────────────────────────────────────────────────────────────────────────

def serialize_spread(spread: Spread) -> dict[str, Any]:
    return {
        "board_count": spread.board_count,
        "board_w": spread.board_w,
        "board_h": spread.board_h,
        "spacing": spread.spacing,
    }


def serialize_item(item: PlacedItem) -> dict[str, Any]:
    """
    Serialize a PlacedItem for a snapshot.

    Note:
        natural_w / natural_h are deliberately omitted.
    """
    d: dict[str, Any] = {
        "id": item.id,
        "x": item.x,
        "y": item.y,
        "w": item.w,
        "h": item.h,
        "z_order": item.z_order,
    }
    if item.source is not None:
        d["source"] = item.source
    return d


def serialize_layout(
    spread: Spread,
    items: Iterable[PlacedItem],
    margin: Optional[float] = None,
) -> dict[str, Any]:
    """
    Serialize a spread and its items to a snapshot dictionary.

    Args:
        spread: Spread configuration
        items: Items in any order (written in paint order)
        margin: Gap the layout was built to keep, if not the spacing

    Returns:
        Dictionary suitable for JSON serialization
    """
    ordered = sorted(items, key=lambda n: n.z_order)
    data: dict[str, Any] = {
        "schema_version": LAYOUT_SCHEMA_VERSION,
        "spread": serialize_spread(spread),
        "items": [serialize_item(n) for n in ordered],
    }
    if margin is not None:
        data["margin"] = margin
    return data


def deserialize_layout(
    data: dict[str, Any],
    *,
    validate: bool = True,
    base_path: Path | None = None,
) -> tuple[Spread, list[PlacedItem]]:
    """
    Deserialize a snapshot dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate against the schema first
        base_path: If provided, relative item sources are resolved against it

    Returns:
        Tuple of (Spread, items). Items have no natural size yet.

    Raises:
        ValidationError: If validate=True and data is invalid
        ValueError: If data cannot be turned into valid models
    """
    if validate:
        validate_layout(data, strict=True)

    spread = Spread(**data["spread"])

    items = []
    for entry in data["items"]:
        source = entry.get("source")
        if source and base_path is not None and not Path(source).is_absolute():
            source = str(base_path / source)
        items.append(PlacedItem(
            id=entry["id"],
            x=entry["x"],
            y=entry["y"],
            w=entry["w"],
            h=entry["h"],
            z_order=entry["z_order"],
            source=source,
        ))
    return spread, items


# ─────────────────────────────────────────────────────────────────────────────
# File I/O
# ─────────────────────────────────────────────────────────────────────────────

def save_layout(
    path: Path,
    spread: Spread,
    items: Iterable[PlacedItem],
    margin: Optional[float] = None,
) -> Path:
    """
    Write a layout snapshot to a JSON file (exclusive lock).

    Raises:
        LayoutFileError: If the file cannot be written
    """
    data = serialize_layout(spread, items, margin)
    try:
        locked_write_json(path, data)
    except (OSError, portalocker.LockException) as e:
        raise LayoutFileError(f"Failed to write layout {path}: {e}") from e
    logger.info(f"Saved layout with {len(data['items'])} items to {path}")
    return path


def load_layout(path: Path) -> tuple[Spread, list[PlacedItem]]:
    """Read the spread and items of a layout snapshot file."""
    snapshot = load_snapshot(path)
    return snapshot.spread, snapshot.items


def load_snapshot(path: Path) -> LayoutSnapshot:
    """
    Read a layout snapshot from a JSON file (shared lock).

    Relative item sources are resolved against the file's directory.

    Raises:
        LayoutFileError: If the file is missing or not valid JSON
        ValidationError: If the content fails validation
    """
    if not path.exists():
        raise LayoutFileError(f"Layout file not found: {path}")
    try:
        with locked_file(path, 'r', portalocker.LOCK_SH) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LayoutFileError(f"Layout file is not valid JSON: {path}: {e}") from e
    except (OSError, portalocker.LockException) as e:
        raise LayoutFileError(f"Failed to read layout {path}: {e}") from e

    spread, items = deserialize_layout(data, base_path=path.parent)
    logger.info(f"Loaded layout with {len(items)} items from {path}")
    return LayoutSnapshot(spread, items, data.get("margin"))


__all__ = [
    "LayoutFileError",
    "ValidationError",
    "serialize_item",
    "serialize_layout",
    "serialize_spread",
    "deserialize_layout",
    "save_layout",
    "load_layout",
    "load_snapshot",
    "LayoutSnapshot",
]
