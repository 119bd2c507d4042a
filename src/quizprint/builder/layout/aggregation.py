"""
Module: builder.layout.aggregation

Purpose:
    Post-processing pass for the composite question bundle: append one
    trailing translation block after ordinary packing, instead of printing
    a translation with every question.

Key Functions:
    - append_trailing_translation(): Place the translation block on the layout

Algorithm:
    1. Estimate the translation block
    2. Find the column that holds the last placed chunk on the last page
    3. If the opposite column of that page has room, append it there
    4. Otherwise append a new page with the block in its left column

Dependencies:
    - builder.layout.models: LayoutResult, PagePlan
    - builder.layout.estimator: Block height

Used By:
    - builder.controller: Answer-mode build of the composite bundle
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from quizprint.core.models import NormalizedItem, Section

from .config import LayoutConfig
from .estimator import estimate_item_height
from .models import LEFT, RIGHT, ColumnPlan, LayoutResult, PagePlan

logger = logging.getLogger(__name__)

TRAILING_TRANSLATION_KEY = "translation-last-item"


def _last_column(layout: LayoutResult) -> int:
    """Column of the last placed chunk on the final page."""
    last_page = layout.pages[-1]
    if layout.last_position is not None and layout.last_position[0] == last_page.index:
        return layout.last_position[1]
    # Layouts assembled by hand may carry no position
    return LEFT if last_page.right.is_empty else RIGHT


def append_trailing_translation(
    layout: LayoutResult,
    translation_text: Optional[str],
    config: LayoutConfig,
    work_type_id: str = "translation",
) -> LayoutResult:
    """
    Append a single translation block to the end of a packed layout.

    Args:
        layout: Packer output
        translation_text: Translation of the session's last question
        config: Layout configuration
        work_type_id: Work type recorded on the appended item

    Returns:
        New LayoutResult; the input layout is returned unchanged when
        there is no translation text.

    Example:
        >>> result = append_trailing_translation(layout, "번역", config)
        >>> result.last_position
        (0, 1)
    """
    if not translation_text or not translation_text.strip():
        return layout

    item = NormalizedItem(
        work_type_id=work_type_id,
        sections=(Section.translation(TRAILING_TRANSLATION_KEY, translation_text),),
    )
    height = estimate_item_height(item, config)

    if not layout.pages:
        page = PagePlan(index=0, left=ColumnPlan().with_item(item, height))
        logger.debug("Trailing translation placed on a new first page")
        return replace(layout, pages=(page,), last_position=(0, LEFT))

    last_page = layout.pages[-1]
    target = RIGHT if _last_column(layout) == LEFT else LEFT
    column = last_page.column(target)

    if column.height_used + height <= config.column_capacity:
        updated = last_page.with_column(target, column.with_item(item, height))
        logger.debug(f"Trailing translation placed on page {last_page.index}, column {target}")
        return replace(
            layout,
            pages=layout.pages[:-1] + (updated,),
            last_position=(last_page.index, target),
        )

    page = PagePlan(index=last_page.index + 1, left=ColumnPlan().with_item(item, height))
    logger.debug(f"Trailing translation did not fit; added page {page.index}")
    return replace(
        layout,
        pages=layout.pages + (page,),
        last_position=(page.index, LEFT),
    )
