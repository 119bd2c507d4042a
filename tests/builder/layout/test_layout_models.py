"""
Unit tests for layout models.
"""

import pytest
from dataclasses import FrozenInstanceError

from quizprint.builder.layout import LEFT, RIGHT, ColumnPlan, LayoutResult, PagePlan


class TestColumnPlan:
    """Tests for ColumnPlan dataclass."""

    def test_with_item_when_called_then_returns_new_column(self, make_item):
        """with_item() appends without mutating."""
        # Arrange
        column = ColumnPlan()
        item = make_item()

        # Act
        updated = column.with_item(item, 2.5)

        # Assert
        assert column.is_empty
        assert updated.items == (item,)
        assert updated.height_used == pytest.approx(2.5)

    def test_column_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            ColumnPlan().height_used = 3.0

    def test_height_survives_dict_round_trip_exactly(self, make_item):
        column = ColumnPlan().with_item(make_item(), 0.1).with_item(make_item(), 0.2)

        restored = ColumnPlan.from_dict(column.to_dict())

        assert column.to_dict()["heightUsed"] == 0.1 + 0.2
        assert restored == column


class TestPagePlan:
    """Tests for PagePlan dataclass."""

    @pytest.fixture
    def page(self, make_item) -> PagePlan:
        left = ColumnPlan().with_item(make_item("01"), 2.0).with_item(make_item("02"), 2.0)
        right = ColumnPlan().with_item(make_item("03"), 2.0)
        return PagePlan(index=0, left=left, right=right)

    def test_chunk_count(self, page):
        assert page.chunk_count == 3

    def test_iter_items_reads_left_then_right(self, page):
        assert [item.work_type_id for item in page.iter_items()] == ["01", "02", "03"]

    def test_column_by_position(self, page):
        assert page.column(LEFT) is page.left
        assert page.column(RIGHT) is page.right

    def test_with_column_replaces_one_side(self, page):
        """with_column() swaps only the requested column."""
        updated = page.with_column(RIGHT, ColumnPlan())

        assert updated.right.is_empty
        assert updated.left == page.left
        assert not page.right.is_empty

    def test_is_empty_when_default_then_true(self):
        assert PagePlan(index=0).is_empty

    def test_default_columns_not_shared(self):
        """Default columns are separate instances per page."""
        assert PagePlan(index=0).left is not PagePlan(index=1).left

    def test_to_dict_has_two_columns(self, page):
        data = page.to_dict()

        assert data["index"] == 0
        assert len(data["columns"]) == 2
        assert len(data["columns"][0]["items"]) == 2

    def test_from_dict_when_columns_missing_then_empty(self):
        assert PagePlan.from_dict({"index": 2}).is_empty


class TestLayoutResult:
    """Tests for LayoutResult dataclass."""

    def test_page_count_and_total_chunks(self, make_item):
        page0 = PagePlan(index=0, left=ColumnPlan().with_item(make_item(), 1.0))
        page1 = PagePlan(
            index=1,
            left=ColumnPlan().with_item(make_item(), 1.0),
            right=ColumnPlan().with_item(make_item(), 1.0),
        )

        result = LayoutResult(pages=(page0, page1))

        assert result.page_count == 2
        assert result.total_chunks == 3

    def test_to_dict_when_no_position_then_null(self):
        data = LayoutResult(pages=()).to_dict()

        assert data == {"pageCount": 0, "pages": [], "warnings": [], "lastPosition": None}

    def test_from_dict_restores_position_tuple(self):
        result = LayoutResult.from_dict({"pages": [], "warnings": ["w"], "lastPosition": [0, 1]})

        assert result.last_position == (0, 1)
        assert result.warnings == ("w",)
