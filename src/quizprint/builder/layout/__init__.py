"""
Module: builder.layout

Purpose:
    Height estimation, chunk splitting and two-column page packing.
    Converts normalized questions into page layouts.

Key Functions:
    - estimate_section_height(): Height of one Section
    - estimate_item_height(): Height of a chunk
    - split_item() / split_items(): Cut questions into column-sized chunks
    - paginate(): Arrange chunks onto two-column pages
    - append_trailing_translation(): Composite-bundle post-processing

Key Classes:
    - LayoutConfig: Configuration for page layout
    - ColumnPlan: One print column
    - PagePlan: Single page layout plan
    - LayoutResult: Ordered pages plus diagnostics

Dependencies:
    - quizprint.core.models: Section, NormalizedItem, ChunkMeta

Used By:
    - builder.controller: Main build controller
    - builder.output: Presentation layer
"""

from .config import LayoutConfig
from .models import LEFT, RIGHT, ColumnPlan, PagePlan, LayoutResult
from .estimator import (
    estimate_item_height,
    estimate_section_height,
    estimate_sections_height,
    strip_markup,
    wrapped_line_count,
)
from .splitter import chunk_key, split_item, split_items
from .paginator import PackState, paginate
from .aggregation import TRAILING_TRANSLATION_KEY, append_trailing_translation

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "LEFT",
    "RIGHT",
    "ColumnPlan",
    "PagePlan",
    "LayoutResult",
    # Estimator
    "estimate_item_height",
    "estimate_section_height",
    "estimate_sections_height",
    "strip_markup",
    "wrapped_line_count",
    # Splitter
    "chunk_key",
    "split_item",
    "split_items",
    # Packer
    "PackState",
    "paginate",
    # Aggregation
    "TRAILING_TRANSLATION_KEY",
    "append_trailing_translation",
]
