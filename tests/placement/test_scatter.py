"""
Tests for random scatter placement.
"""

import random

from spread_layout.core.models.items import PlacedItem
from spread_layout.core.models.spread import Spread
from spread_layout.placement.audit import audit_overlaps
from spread_layout.placement.ordering import is_dense_z_order
from spread_layout.placement.policy import BoardSelection, PlacementPolicy, ScatterOptions
from spread_layout.placement.scatter import random_rect_in_board, scatter


def _inside_usable_interior(item, spread):
    board = spread.board(spread.board_index_for_x(item.x))
    r = item.rect
    return (
        r.x >= board.origin_x + spread.spacing
        and r.right <= board.origin_x + spread.board_w - spread.spacing
        and r.y >= spread.spacing
        and r.bottom <= spread.board_h - spread.spacing
    )


class TestScatter:
    """Tests for scatter()."""

    def test_scatter_when_ten_small_items_on_three_boards_then_no_overlaps(
        self, three_boards, small_items
    ):
        # Arrange
        policy = PlacementPolicy(seed=7)

        # Act
        result = scatter(small_items, three_boards, policy)

        # Assert
        assert result.item_count == 10
        assert not result.has_fallbacks
        assert audit_overlaps(result.items, three_boards.spacing) == []
        assert all(_inside_usable_interior(n, three_boards) for n in result.items)
        assert is_dense_z_order(result.items)
        assert {n.id for n in result.items} == {n.id for n in small_items}

    def test_scatter_when_budget_exhausted_then_falls_back_to_board_corner(self):
        # Arrange: a second 150x150 item cannot fit beside the first
        spread = Spread(board_count=1, board_w=200, board_h=200, spacing=10)
        items = [
            PlacedItem("a", x=0, y=0, w=150, h=150),
            PlacedItem("b", x=0, y=0, w=150, h=150),
        ]

        # Act
        result = scatter(items, spread, PlacementPolicy(max_attempts=5, seed=1))

        # Assert
        assert result.fallback_ids == ("b",)
        assert len(result.warnings) == 1
        fallback = result.by_id()["b"]
        assert (fallback.x, fallback.y, fallback.w, fallback.h) == (10, 10, 150, 150)

    def test_scatter_when_round_robin_then_one_item_per_board(self, three_boards):
        items = [PlacedItem(f"i{n}", x=0, y=0, w=50, h=50) for n in range(3)]

        result = scatter(items, three_boards, rng=random.Random(3))

        boards = [three_boards.board_index_for_x(n.x) for n in result.items]
        assert boards == [0, 1, 2]

    def test_scatter_when_random_boards_then_still_no_overlaps(self, three_boards, small_items):
        options = ScatterOptions(board_selection=BoardSelection.RANDOM)

        result = scatter(small_items, three_boards, rng=random.Random(11), options=options)

        assert audit_overlaps(result.items, three_boards.spacing) == []

    def test_scatter_when_same_seed_then_same_layout(self, three_boards, small_items):
        first = scatter(small_items, three_boards, PlacementPolicy(seed=99))
        second = scatter(small_items, three_boards, PlacementPolicy(seed=99))
        assert first.items == second.items

    def test_scatter_when_resize_then_sizes_in_band(self, three_boards, small_items):
        options = ScatterOptions(resize=True)

        result = scatter(small_items[:4], three_boards, rng=random.Random(5), options=options)

        for item in result.items:
            assert 270 <= item.w <= 702
            assert item.h <= item.w

    def test_scatter_when_not_spread_vertical_then_stays_in_top_band(self, three_boards, small_items):
        options = ScatterOptions(spread_vertical=False)

        result = scatter(small_items, three_boards, rng=random.Random(8), options=options)

        y_min = three_boards.spacing
        y_max = three_boards.board_h - three_boards.spacing - 50
        for item in result.items:
            assert item.y <= y_min + 0.6 * (y_max - y_min)

    def test_scatter_when_tiny_item_then_floored_to_min_size(self, three_boards):
        items = [PlacedItem("t", x=0, y=0, w=1, h=1)]

        result = scatter(items, three_boards, PlacementPolicy(seed=2, min_size=20))

        assert (result.items[0].w, result.items[0].h) == (20, 20)


def test_random_rect_in_board_stays_inside_usable_range(three_boards):
    rng = random.Random(0)
    board = three_boards.board(2)
    for _ in range(200):
        r = random_rect_in_board(board, three_boards, 100, 80, rng)
        assert 2160 + 24 <= r.x <= 2160 + 1080 - 24 - 100
        assert 24 <= r.y <= 1320 - 24 - 80
