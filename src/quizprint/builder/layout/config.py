"""
Module: builder.layout.config

Purpose:
    Configuration for the layout engine.
    Defines column capacity, per-kind base heights, characters per line and
    the page geometry the renderer draws with. All heights are in
    centimetres of a landscape A4 page.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.estimator: Section height heuristics
    - builder.layout.splitter: Chunk capacity
    - builder.layout.paginator: Column capacity
    - builder.output.renderer: Page geometry
"""

from __future__ import annotations

from dataclasses import dataclass


# Landscape A4, two print columns
DEFAULT_PAGE_WIDTH_CM = 29.7
DEFAULT_PAGE_HEIGHT_CM = 21.0
DEFAULT_HEADER_HEIGHT_CM = 1.2
DEFAULT_CONTENT_BOTTOM_PADDING_CM = 0.5

# 21.0 - 1.2 - 0.5
DEFAULT_COLUMN_CAPACITY = 19.3


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    `column_capacity` is the single constant shared by the splitter and the
    packer. Everything else tunes the height estimator or the renderer.

    Attributes:
        column_capacity: Maximum estimated height one print column holds
        item_padding: Extra height added per packed chunk (card padding)
        section_margin: Gap added after every non-spacer section
        title_height: Fixed height of a title section
        instruction_height: Fixed height of an instruction section
        chars_per_line_english: Characters per wrapped line of English prose
        chars_per_line_korean: Characters per wrapped line of Korean text
        paragraph_line_height: Line height of paragraph / text sections
        paragraph_padding: Fixed padding of paragraph / text sections
        html_line_height: Line height of html-fragment sections
        html_padding: Fixed padding of html-fragment sections
        translation_line_height: Line height of Korean translation text
        translation_padding: Fixed padding of translation sections
        option_line_height: Height of an option's first line
        option_wrap_line_height: Height of each extra wrapped option line
        option_spacing: Gap between consecutive options
        option_translation_spacing: Gap before an option's translation
        option_list_padding: Fixed padding of an option list
        empty_option_list_height: Height of an option list with no options
        table_row_height: Height of one table row (header included)
        table_padding: Fixed padding of a table
        answer_item_height: Height of one answer-block item
        answer_padding: Fixed padding of an answer block
        list_item_height: Height of one list item
        list_padding: Fixed padding of a list
        spacer_height: Height of a spacer section
        page_width: Page width (renderer)
        page_height: Page height (renderer)
        header_height: Repeated page header height (renderer)
        content_bottom_padding: Space kept free under the columns (renderer)
        margin_horizontal: Left / right page margin (renderer)
        column_gap: Gap between the two columns (renderer)

    Example:
        >>> config = LayoutConfig()
        >>> config.column_capacity
        19.3
        >>> LayoutConfig(column_capacity=10.0).column_width
        13.95
    """

    # Capacity
    column_capacity: float = DEFAULT_COLUMN_CAPACITY
    item_padding: float = 0.0

    # Fixed heights
    section_margin: float = 0.05
    title_height: float = 1.0
    instruction_height: float = 0.8

    # Text wrapping (Korean glyphs are roughly twice as wide)
    chars_per_line_english: int = 62
    chars_per_line_korean: int = 40

    # Prose
    paragraph_line_height: float = 0.35
    paragraph_padding: float = 0.0
    html_line_height: float = 0.41
    html_padding: float = 0.75
    translation_line_height: float = 0.35
    translation_padding: float = 0.3

    # Option lists
    option_line_height: float = 0.35
    option_wrap_line_height: float = 0.32
    option_spacing: float = 0.12
    option_translation_spacing: float = 0.04
    option_list_padding: float = 1.0
    empty_option_list_height: float = 0.35

    # Tables, answers, lists
    table_row_height: float = 0.45
    table_padding: float = 0.25
    answer_item_height: float = 0.35
    answer_padding: float = 0.25
    list_item_height: float = 0.35
    list_padding: float = 0.2
    spacer_height: float = 0.15

    # Page geometry (renderer only)
    page_width: float = DEFAULT_PAGE_WIDTH_CM
    page_height: float = DEFAULT_PAGE_HEIGHT_CM
    header_height: float = DEFAULT_HEADER_HEIGHT_CM
    content_bottom_padding: float = DEFAULT_CONTENT_BOTTOM_PADDING_CM
    margin_horizontal: float = 0.5
    column_gap: float = 0.8

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.column_capacity <= 0:
            raise ValueError(f"column_capacity must be positive: {self.column_capacity}")
        if self.item_padding < 0:
            raise ValueError(f"item_padding must be non-negative: {self.item_padding}")
        if self.chars_per_line_english <= 0 or self.chars_per_line_korean <= 0:
            raise ValueError("chars_per_line values must be positive")
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError("Page dimensions must be positive")
        if self.column_width <= 0:
            raise ValueError("Margins and column gap exceed page width")

    @property
    def column_width(self) -> float:
        """Width of one print column."""
        return (self.page_width - 2 * self.margin_horizontal - self.column_gap) / 2

    @property
    def content_top(self) -> float:
        """Distance from the page top to where the columns start."""
        return self.header_height
