"""
Module: builder.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing columns, pages and the final
    document handed to a presentation layer.

Key Classes:
    - ColumnPlan: Ordered chunks in one print column
    - PagePlan: Exactly two columns (left, right)
    - LayoutResult: Ordered pages plus diagnostics

Dependencies:
    - dataclasses (std)
    - quizprint.core.models: NormalizedItem

Used By:
    - builder.layout.paginator: Creates PagePlans
    - builder.layout.aggregation: Extends the last page
    - builder.output.renderer: Draws PagePlans
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Mapping, Optional

from quizprint.core.models import NormalizedItem

LEFT = 0
RIGHT = 1


@dataclass(frozen=True)
class ColumnPlan:
    """
    One print column.

    Attributes:
        items: Chunks in top-to-bottom order
        height_used: Sum of the chunks' estimated heights

    Example:
        >>> column = ColumnPlan().with_item(chunk, 4.5)
        >>> column.height_used
        4.5
    """

    items: tuple[NormalizedItem, ...] = ()
    height_used: float = 0.0

    @property
    def is_empty(self) -> bool:
        """Check if the column holds no chunks."""
        return len(self.items) == 0

    def with_item(self, item: NormalizedItem, height: float) -> ColumnPlan:
        """Return a new column with `item` appended."""
        return ColumnPlan(items=self.items + (item,), height_used=self.height_used + height)

    def to_dict(self) -> dict[str, Any]:
        return {
            "heightUsed": self.height_used,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ColumnPlan:
        return cls(
            items=tuple(NormalizedItem.from_dict(i) for i in data.get("items", ())),
            height_used=float(data.get("heightUsed", 0.0)),
        )


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single page.

    Attributes:
        index: Page number (0-indexed)
        left: Left print column
        right: Right print column

    Example:
        >>> page = PagePlan(index=0, left=left_col, right=right_col)
        >>> page.chunk_count
        3
    """

    index: int
    left: ColumnPlan = field(default_factory=ColumnPlan)
    right: ColumnPlan = field(default_factory=ColumnPlan)

    @property
    def columns(self) -> tuple[ColumnPlan, ColumnPlan]:
        """Both columns, left first."""
        return (self.left, self.right)

    def column(self, position: int) -> ColumnPlan:
        """Column at LEFT (0) or RIGHT (1)."""
        return self.columns[position]

    def with_column(self, position: int, column: ColumnPlan) -> PagePlan:
        """Return a copy with the column at `position` replaced."""
        if position == LEFT:
            return replace(self, left=column)
        return replace(self, right=column)

    @property
    def is_empty(self) -> bool:
        """Check if both columns are empty."""
        return self.left.is_empty and self.right.is_empty

    @property
    def chunk_count(self) -> int:
        """Number of chunks on this page."""
        return len(self.left.items) + len(self.right.items)

    def iter_items(self) -> Iterator[NormalizedItem]:
        """Chunks in reading order (left column, then right)."""
        yield from self.left.items
        yield from self.right.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "columns": [self.left.to_dict(), self.right.to_dict()],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PagePlan:
        columns = list(data.get("columns", ()))
        left = ColumnPlan.from_dict(columns[0]) if len(columns) > 0 else ColumnPlan()
        right = ColumnPlan.from_dict(columns[1]) if len(columns) > 1 else ColumnPlan()
        return cls(index=int(data["index"]), left=left, right=right)


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Tuple of PagePlans
        warnings: Overflow warnings collected while packing
        last_position: (page index, column) of the last placed chunk

    Example:
        >>> result = LayoutResult(pages=(page1, page2))
        >>> result.page_count
        2
    """

    pages: tuple[PagePlan, ...]
    warnings: tuple[str, ...] = ()
    last_position: Optional[tuple[int, int]] = None

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def total_chunks(self) -> int:
        """Total number of chunks across all pages."""
        return sum(page.chunk_count for page in self.pages)

    def iter_items(self) -> Iterator[NormalizedItem]:
        """All chunks in page / column reading order."""
        for page in self.pages:
            yield from page.iter_items()

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the plain page / column / item shape handed to
        presentation layers outside Python.
        """
        return {
            "pageCount": self.page_count,
            "pages": [page.to_dict() for page in self.pages],
            "warnings": list(self.warnings),
            "lastPosition": list(self.last_position) if self.last_position is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LayoutResult:
        last = data.get("lastPosition")
        return cls(
            pages=tuple(PagePlan.from_dict(p) for p in data.get("pages", ())),
            warnings=tuple(data.get("warnings", ())),
            last_position=(int(last[0]), int(last[1])) if last else None,
        )
