"""
Schema Validation Utilities

Validates layout snapshot JSON against the bundled schema.

Two levels, as for every persisted format in this package:
- basic structural checks that give precise error paths
  (unique ids, dense z-order)
- full JSON Schema validation via jsonschema when strict=True
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Schema version constants
LAYOUT_SCHEMA_VERSION = 1


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_layout(data: dict[str, Any], *, strict: bool = True) -> None:
    """
    Validate a layout snapshot.

    Args:
        data: Snapshot dictionary (as loaded from JSON)
        strict: If True, also run full jsonschema validation

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Layout snapshot must be a JSON object")

    required = ["schema_version", "spread", "items"]
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path="",
            errors=[f"Missing field: {f}" for f in missing]
        )

    version = data.get("schema_version")
    if version != LAYOUT_SCHEMA_VERSION:
        raise ValidationError(
            f"Unsupported layout schema version: {version} (expected {LAYOUT_SCHEMA_VERSION})",
            path="schema_version"
        )

    if strict:
        schema = _load_schema("layout")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message]
            ) from e

    items = data["items"]
    if not isinstance(items, list):
        raise ValidationError("items must be a list", path="items")
    _validate_items(items)


def _validate_items(items: list[dict[str, Any]]) -> None:
    """Check id uniqueness and that z_order is a permutation of 0..N-1."""
    seen: set[str] = set()
    for i, item in enumerate(items):
        item_id = item.get("id")
        if item_id in seen:
            raise ValidationError(
                f"Duplicate item id: {item_id!r}",
                path=f"items[{i}].id"
            )
        seen.add(item_id)

    z_values = sorted(item.get("z_order", -1) for item in items)
    if z_values != list(range(len(items))):
        raise ValidationError(
            "z_order values must be a permutation of 0..N-1",
            path="items",
            errors=[f"Got z_order values: {z_values}"]
        )
