"""
Unit tests for the trailing-translation aggregation pass.

Heights use the `unit_config` fixture (capacity 10); a one-line
translation block is 1 high.
"""

import pytest

from quizprint.builder.layout.aggregation import (
    TRAILING_TRANSLATION_KEY,
    append_trailing_translation,
)
from quizprint.builder.layout.models import LEFT, RIGHT, ColumnPlan, LayoutResult, PagePlan
from quizprint.builder.layout.paginator import paginate
from quizprint.core.models import SectionKind


@pytest.fixture
def packed(unit_config, make_item):
    """Pack chunks of the given heights with the real packer."""

    def _packed(*heights):
        return paginate([make_item(lines=h - 1) for h in heights], unit_config)

    return _packed


def _translation_items(column):
    return [
        item
        for item in column.items
        if item.sections and item.sections[0].key == TRAILING_TRANSLATION_KEY
    ]


class TestAppendTrailingTranslation:
    """Tests for append_trailing_translation()."""

    @pytest.mark.parametrize("text", [None, "", "   \n"])
    def test_when_no_text_then_layout_unchanged(self, unit_config, packed, text):
        """No translation means no extra block."""
        layout = packed(4)

        assert append_trailing_translation(layout, text, unit_config) is layout

    def test_when_last_chunk_left_then_appended_right(self, unit_config, packed):
        """The block goes opposite the column that holds the last chunk."""
        # Arrange
        layout = packed(6)

        # Act
        result = append_trailing_translation(layout, "마지막 문제의 해석", unit_config)

        # Assert
        assert result.page_count == 1
        assert len(_translation_items(result.pages[0].right)) == 1
        assert result.last_position == (0, RIGHT)

    def test_when_last_chunk_right_then_appended_left(self, unit_config, packed):
        """Last chunk on the right: the block is tried in the left column."""
        # Arrange: left 9, right 2, last chunk on the right
        layout = packed(9, 2)

        # Act
        result = append_trailing_translation(layout, "해석", unit_config)

        # Assert
        assert len(_translation_items(result.pages[0].left)) == 1
        assert result.pages[0].left.height_used == pytest.approx(10)
        assert result.last_position == (0, LEFT)

    def test_when_opposite_column_full_then_new_page(self, unit_config, packed):
        """If the opposite column has no room the block opens a new page."""
        # Arrange
        layout = packed(10, 10)

        # Act
        result = append_trailing_translation(layout, "해석", unit_config)

        # Assert
        assert result.page_count == 2
        new_page = result.pages[1]
        assert new_page.index == 1
        assert len(_translation_items(new_page.left)) == 1
        assert new_page.right.is_empty
        assert result.last_position == (1, LEFT)

    def test_when_layout_empty_then_single_page(self, unit_config):
        """An empty layout with a translation produces one page."""
        result = append_trailing_translation(LayoutResult(pages=()), "해석", unit_config)

        assert result.page_count == 1
        assert len(_translation_items(result.pages[0].left)) == 1

    def test_appended_item_shape(self, unit_config, packed):
        """The block is a single translation section under the fixed key."""
        result = append_trailing_translation(packed(3), "해석", unit_config, work_type_id="07")

        item = _translation_items(result.pages[0].right)[0]
        assert item.work_type_id == "07"
        assert [s.kind for s in item.sections] == [SectionKind.TRANSLATION]
        assert item.sections[0].text == "해석"

    def test_input_layout_not_modified(self, unit_config, packed):
        layout = packed(3)

        append_trailing_translation(layout, "해석", unit_config)

        assert layout.total_chunks == 1

    def test_warnings_preserved(self, unit_config, packed):
        """Packing warnings carry over to the aggregated layout."""
        layout = packed(12)

        result = append_trailing_translation(layout, "해석", unit_config)

        assert result.warnings == layout.warnings
        assert len(result.warnings) == 1

    def test_when_no_position_recorded_then_inferred_from_columns(self, unit_config, make_item):
        """Layouts built by hand fall back to the last non-empty column."""
        # Arrange
        page = PagePlan(index=0, left=ColumnPlan().with_item(make_item(lines=2), 3.0))
        layout = LayoutResult(pages=(page,))

        # Act
        result = append_trailing_translation(layout, "해석", unit_config)

        # Assert
        assert len(_translation_items(result.pages[0].right)) == 1
