"""
Tests for overlap auditing.
"""

from spread_layout.core.models.geometry import Rect
from spread_layout.core.models.items import PlacedItem
from spread_layout.placement.audit import OverlapPair, audit_overlaps, collides, overlapping_ids


def _item(item_id, x, y, w=100, h=100):
    return PlacedItem(item_id, x=x, y=y, w=w, h=h)


class TestAuditOverlaps:
    """Tests for audit_overlaps()."""

    def test_audit_when_clean_then_empty(self):
        items = [_item("a", 0, 0), _item("b", 200, 0)]
        assert audit_overlaps(items, margin=24) == []

    def test_audit_when_within_margin_then_reports_pair(self):
        items = [_item("a", 0, 0), _item("b", 110, 0), _item("c", 500, 500)]

        assert audit_overlaps(items, margin=24) == [OverlapPair("a", "b")]
        assert audit_overlaps(items, margin=0) == []

    def test_overlapping_ids_when_chain_then_all_members(self):
        items = [_item("a", 0, 0), _item("b", 50, 0), _item("c", 100, 0), _item("d", 900, 0)]
        assert overlapping_ids(items) == {"a", "b", "c"}


def test_collides_when_near_placed_item_then_true():
    placed = [_item("a", 0, 0)]
    assert collides(Rect(110, 0, 50, 50), placed, margin=24)
    assert not collides(Rect(124, 0, 50, 50), placed, margin=24)
