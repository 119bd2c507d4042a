"""
Module: builder.layout.paginator

Purpose:
    Pack an ordered list of chunks into two-column pages with a greedy
    shortest-column-first rule.

Key Functions:
    - paginate(): Main pagination function

Algorithm:
    For each chunk, in input order:
    1. Try the currently shorter column of the open page (left on ties)
    2. Otherwise try the other column
    3. Otherwise close the page (if it holds anything) and place the chunk
       in the left column of a fresh page
    A chunk taller than a whole column is placed anyway and reported in
    the result warnings; packing never fails.

    The walk is a fold over an immutable PackState, so every intermediate
    step is a value that can be inspected on its own.

Dependencies:
    - builder.layout.models: ColumnPlan, PagePlan, LayoutResult
    - builder.layout.estimator: Chunk heights
    - builder.layout.config: LayoutConfig

Used By:
    - builder.controller: Main build controller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Iterable, Optional

from quizprint.core.models import NormalizedItem

from .config import LayoutConfig
from .estimator import estimate_item_height
from .models import LEFT, RIGHT, ColumnPlan, LayoutResult, PagePlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackState:
    """
    Accumulator threaded through the packing fold.

    Attributes:
        pages: Closed pages, in order
        current: Page currently being filled
        warnings: Overflow diagnostics collected so far
        last_position: (page index, column) of the last placed chunk
    """

    pages: tuple[PagePlan, ...] = ()
    current: PagePlan = field(default_factory=lambda: PagePlan(index=0))
    warnings: tuple[str, ...] = ()
    last_position: Optional[tuple[int, int]] = None

    def close_page(self) -> PackState:
        """Move the open page to the closed pages and open a fresh one."""
        return replace(
            self,
            pages=self.pages + (self.current,),
            current=PagePlan(index=self.current.index + 1),
        )

    def place(self, position: int, chunk: NormalizedItem, height: float) -> PackState:
        column = self.current.column(position).with_item(chunk, height)
        return replace(
            self,
            current=self.current.with_column(position, column),
            last_position=(self.current.index, position),
        )

    def warn(self, message: str) -> PackState:
        return replace(self, warnings=self.warnings + (message,))


def _fits(column: ColumnPlan, height: float, capacity: float) -> bool:
    return column.height_used + height <= capacity


def _candidate_order(page: PagePlan) -> tuple[int, int]:
    """Shorter column first, left when both are equal."""
    if page.right.height_used < page.left.height_used:
        return (RIGHT, LEFT)
    return (LEFT, RIGHT)


def _pack_chunk(state: PackState, chunk: NormalizedItem, config: LayoutConfig) -> PackState:
    height = estimate_item_height(chunk, config)
    capacity = config.column_capacity

    for position in _candidate_order(state.current):
        if _fits(state.current.column(position), height, capacity):
            return state.place(position, chunk, height)

    if not state.current.is_empty:
        state = state.close_page()

    if height > capacity:
        title = chunk.title_section
        name = title.key if title is not None else chunk.work_type_id
        message = (
            f"Chunk {name} overflows column on page {state.current.index}: "
            f"{height:.2f} needed, {capacity:.2f} available"
        )
        logger.warning(message)
        state = state.warn(message)

    return state.place(LEFT, chunk, height)


def paginate(chunks: Iterable[NormalizedItem], config: LayoutConfig) -> LayoutResult:
    """
    Arrange chunks onto two-column pages.

    Args:
        chunks: Chunks in print order (output of the splitter)
        config: Layout configuration (uses `column_capacity`)

    Returns:
        LayoutResult with page plans. Empty input gives zero pages; a page
        with both columns empty is never emitted.

    Example:
        >>> result = paginate(split_items(items, config), config)
        >>> result.page_count
        2
    """
    chunk_list = list(chunks)
    state = reduce(
        lambda acc, chunk: _pack_chunk(acc, chunk, config),
        chunk_list,
        PackState(),
    )

    pages = state.pages
    if not state.current.is_empty:
        pages = pages + (state.current,)

    logger.info(f"Paginated {len(chunk_list)} chunks onto {len(pages)} pages")

    return LayoutResult(
        pages=pages,
        warnings=state.warnings,
        last_position=state.last_position,
    )
