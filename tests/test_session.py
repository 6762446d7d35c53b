"""
Tests for SpreadSession item lifecycle.
"""

import random

import pytest

from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.placement.audit import audit_overlaps
from spread_layout.placement.ordering import is_dense_z_order
from spread_layout.placement.policy import MasonryOptions, PlacementPolicy
from spread_layout.placement.strategy import Strategy
from spread_layout.session import NEW_ITEM_OFFSET, SpreadSession


@pytest.fixture
def session(three_boards):
    return SpreadSession(three_boards, PlacementPolicy(seed=11))


class TestAddImage:
    """Tests for adding photographs."""

    def test_add_image_when_no_hint_then_starting_size_and_offset(self, session):
        # Act
        item = session.add_image("a.jpg")

        # Assert
        assert (item.x, item.y) == (NEW_ITEM_OFFSET, NEW_ITEM_OFFSET)
        assert int(1080 * 0.32) <= item.w <= 1080 * 0.6
        assert item.h <= item.w
        assert item.z_order == 0
        assert not item.has_natural_size

    def test_add_image_when_tiny_hint_then_floored_to_min_size(self, session):
        item = session.add_image("a.jpg", size_hint=(5, 300))
        assert (item.w, item.h) == (20, 300)

    def test_add_image_when_degenerate_hint_then_raises(self, session):
        with pytest.raises(ValueError, match="Degenerate"):
            session.add_image("a.jpg", size_hint=(0, 10))

    def test_add_image_when_several_then_stacked_on_top(self, session):
        ids = [session.add_image(f"{n}.jpg", size_hint=(100, 100)).id for n in range(3)]

        assert [n.id for n in session.items] == ids
        assert [n.z_order for n in session.items] == [0, 1, 2]
        assert len(set(ids)) == 3

    def test_add_images_when_provider_then_sizes_resolved(self, session, provider):
        added = session.add_images(["red", "blue"], provider)

        assert (added[0].natural_w, added[0].natural_h) == (400, 300)
        assert not added[1].has_natural_size


class TestLifecycle:
    """Tests for removal, sizes and spread changes."""

    def test_remove_when_middle_item_then_order_closed_up(self, session):
        a, b, c = (session.add_image(None, size_hint=(50, 50)) for _ in range(3))

        removed = session.remove(b.id)

        assert removed.id == b.id
        assert [n.id for n in session.items] == [a.id, c.id]
        assert is_dense_z_order(session.items)

    def test_remove_when_unknown_then_key_error(self, session):
        with pytest.raises(KeyError):
            session.remove("nope")

    def test_set_natural_size_when_conflicting_then_raises(self, session):
        item = session.add_image("a.jpg", natural_size=(400, 300))

        assert session.set_natural_size(item.id, 400, 300).natural_w == 400
        with pytest.raises(ValueError, match="already set"):
            session.set_natural_size(item.id, 10, 10)

    def test_resolve_sizes_when_unknown_source_then_pending(self, session, provider):
        session.add_image("red")
        missing = session.add_image("blue")

        assert session.resolve_sizes(provider) == [missing.id]

    def test_set_spread_when_smaller_then_items_pulled_inside(self, session):
        session.add_image(None, size_hint=(800, 800))

        session.set_spread(Spread(board_count=1, board_w=400, board_h=400, spacing=10))

        (item,) = session.items
        assert 10 <= item.x and item.x + item.w <= 390
        assert 10 <= item.y and item.y + item.h <= 390

    def test_reset_when_called_then_empty(self, session):
        session.add_image(None)
        session.reset()
        assert len(session) == 0


class TestEngineOperations:
    """Tests for arrange and ordering through the session."""

    def test_arrange_when_pack_then_no_overlaps(self, session):
        for _ in range(6):
            session.add_image(None, size_hint=(300, 200))

        result = session.arrange(Strategy.PACK)

        assert not result.has_fallbacks
        assert audit_overlaps(session.items, session.spread.spacing) == []
        assert list(session.items) == list(result.items)

    def test_arrange_when_same_seed_then_same_layout(self, three_boards):
        def run():
            s = SpreadSession(three_boards, PlacementPolicy(seed=3))
            for n in range(5):
                s.add_image(None, size_hint=(200, 150))
            s.arrange(Strategy.SCATTER)
            return [(n.x, n.y) for n in s.items]

        assert run() == run()

    def test_bring_to_front_and_send_to_back_when_called_then_reordered(self, session):
        a, b, c = (session.add_image(None, size_hint=(50, 50)) for _ in range(3))

        session.bring_to_front(a.id)
        assert session.items[-1].id == a.id
        session.send_to_back(c.id)
        assert session.items[0].id == c.id
        assert is_dense_z_order(session.items)

    def test_shuffle_order_when_called_then_positions_kept(self, three_boards):
        session = SpreadSession(three_boards, rng=random.Random(9))
        for _ in range(5):
            session.add_image(None, size_hint=(50, 50))
        before = {n.id: n.rect for n in session.items}

        session.shuffle_order()

        assert {n.id: n.rect for n in session.items} == before
        assert is_dense_z_order(session.items)

    def test_audit_when_no_margin_given_then_spacing_used(self, session):
        session.add_image(None, size_hint=(100, 100))
        session.add_image(None, size_hint=(100, 100))

        assert len(session.audit()) == 1
        assert session.audit(margin=0) == session.audit()


class TestSnapshots:
    """Tests for save/load."""

    def test_save_then_load_when_called_then_layout_restored(self, session, tmp_path):
        # Arrange
        for _ in range(4):
            session.add_image(None, size_hint=(120, 90))
        session.arrange(Strategy.PACK)
        path = tmp_path / "layout.json"

        # Act
        session.save(path)
        restored = SpreadSession.load(path)

        # Assert
        assert restored.spread == session.spread
        assert [(n.id, n.rect, n.z_order) for n in restored.items] == [
            (n.id, n.rect, n.z_order) for n in session.items
        ]

    def test_from_items_when_sparse_z_then_normalized(self, three_boards):
        items = [
            PlacedItem("a", x=0, y=0, w=10, h=10, z_order=7),
            PlacedItem("b", x=0, y=0, w=10, h=10, z_order=3),
        ]

        session = SpreadSession.from_items(items, three_boards)

        assert [(n.id, n.z_order) for n in session.items] == [("b", 0), ("a", 1)]


class TestLayoutMargin:
    """Tests for the margin a layout was built to keep."""

    @pytest.fixture
    def seamless_session(self, session):
        for _ in range(6):
            session.add_image(None, size_hint=(100, 100))
        session.arrange(Strategy.EDITORIAL_SEAMLESS, masonry_options=MasonryOptions(columns=3))
        return session

    def test_audit_when_seamless_layout_then_touching_items_not_reported(self, seamless_session):
        assert seamless_session.audit_margin == 0
        assert seamless_session.audit() == []
        assert seamless_session.audit(margin=seamless_session.spread.spacing) != []

    def test_audit_margin_when_gutter_layout_then_spacing(self, session):
        session.add_image(None, size_hint=(100, 100))

        session.arrange(Strategy.PACK)

        assert session.audit_margin == session.spread.spacing

    def test_save_then_load_when_seamless_then_margin_restored(self, seamless_session, tmp_path):
        path = tmp_path / "layout.json"

        seamless_session.save(path)
        restored = SpreadSession.load(path)

        assert restored.audit_margin == 0
        assert restored.audit() == []

    def test_reset_when_seamless_then_margin_cleared(self, seamless_session):
        seamless_session.reset()
        assert seamless_session.audit_margin == seamless_session.spread.spacing
