"""
Module: builder.layout.estimator

Purpose:
    Estimate how much vertical space a Section will occupy without
    rendering it. A character-count heuristic, not a text layout pass:
    deterministic, monotonic in content length, and allowed to be inexact.

Key Functions:
    - estimate_section_height(): Height of one Section
    - estimate_item_height(): Height of a chunk (sum of its sections)
    - strip_markup(): Reduce an html fragment to countable plain text
    - wrapped_line_count(): Lines a text needs at a given width

Dependencies:
    - builder.layout.config: LayoutConfig
    - quizprint.core.models: Section, NormalizedItem

Used By:
    - builder.layout.splitter: Decides where to cut a question
    - builder.layout.paginator: Column accumulators
    - builder.layout.aggregation: Fits the trailing translation
"""

from __future__ import annotations

import html
import math
import re
from typing import Optional

from quizprint.core.models import NormalizedItem, OptionItem, Section, SectionKind

from .config import LayoutConfig

_BREAK_TAG = re.compile(r"<br\s*/?>|</p\s*>|</div\s*>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]+>")
_HSPACE = re.compile(r"[ \t]+")


def strip_markup(fragment: Optional[str]) -> str:
    """
    Convert an html fragment to plain text for character counting.

    Line-breaking tags (`<br>`, `</p>`, `</div>`) become newlines, every
    other tag is dropped, entities are unescaped and horizontal whitespace
    is collapsed. The markup itself is never interpreted.

    Args:
        fragment: Pre-escaped markup, may be None

    Returns:
        Plain text with explicit line breaks preserved

    Example:
        >>> strip_markup("I <ins>like</ins> it.<br/>Next &amp; last")
        'I like it.\\nNext & last'
    """
    if not fragment:
        return ""
    text = _BREAK_TAG.sub("\n", fragment)
    text = _ANY_TAG.sub("", text)
    text = html.unescape(text)
    text = _HSPACE.sub(" ", text)
    lines = [line.strip() for line in text.split("\n")]
    return "\n".join(lines).strip()


def wrapped_line_count(text: Optional[str], chars_per_line: int) -> int:
    """
    Count wrapped lines for `text` at `chars_per_line` characters per line.

    Explicit line breaks are honoured; each non-empty line costs
    `ceil(len(line) / chars_per_line)` lines and blank lines cost nothing.

    Example:
        >>> wrapped_line_count("a" * 63 + "\\n\\nshort", 62)
        3
    """
    if not text:
        return 0
    total = 0
    for line in text.split("\n"):
        length = len(line.strip())
        if length:
            total += math.ceil(length / chars_per_line)
    return total


def _paragraph_text(section: Section) -> str:
    if section.label:
        return f"{section.label} {section.text}"
    return section.text


def _prose_height(text: str, chars_per_line: int, line_height: float, padding: float) -> float:
    return wrapped_line_count(text, chars_per_line) * line_height + padding


def _option_height(index: int, option: OptionItem, config: LayoutConfig) -> float:
    text = f"{option.label} {option.text}" if option.label else option.text
    lines = max(1, wrapped_line_count(text, config.chars_per_line_english))
    height = config.option_line_height + (lines - 1) * config.option_wrap_line_height
    if index > 0:
        height += config.option_spacing
    if option.translation:
        height += config.option_translation_spacing + (
            wrapped_line_count(option.translation, config.chars_per_line_korean)
            * config.translation_line_height
        )
    return height


def estimate_section_height(section: Section, config: LayoutConfig) -> float:
    """
    Estimate the printed height of one section.

    Policy per kind:
        - title / instruction: fixed heights
        - paragraph / text: wrapped English lines × line height
          (+ inline Korean secondary text when present)
        - html-fragment: markup stripped, then as paragraph
        - option-list: padding + per option first line, wrap lines,
          spacing and attached translation
        - table: (rows + header) × row height
        - answer-block / list: item count × item height
        - translation: wrapped Korean lines × line height
        - spacer: fixed

    Every non-spacer kind adds `config.section_margin`.

    Args:
        section: Section to estimate
        config: Layout configuration

    Returns:
        Estimated height in layout units (cm)
    """
    kind = section.kind
    margin = config.section_margin

    if kind is SectionKind.TITLE:
        return config.title_height + margin

    if kind is SectionKind.INSTRUCTION:
        return config.instruction_height + margin

    if kind in (SectionKind.PARAGRAPH, SectionKind.TEXT):
        height = _prose_height(
            _paragraph_text(section),
            config.chars_per_line_english,
            config.paragraph_line_height,
            config.paragraph_padding,
        )
        if section.secondary_text:
            height += (
                wrapped_line_count(section.secondary_text, config.chars_per_line_korean)
                * config.translation_line_height
            )
        return height + margin

    if kind is SectionKind.HTML:
        return _prose_height(
            strip_markup(section.html),
            config.chars_per_line_english,
            config.html_line_height,
            config.html_padding,
        ) + margin

    if kind is SectionKind.OPTIONS:
        if not section.options:
            return config.empty_option_list_height + margin
        options_height = sum(
            _option_height(index, option, config)
            for index, option in enumerate(section.options)
        )
        return config.option_list_padding + options_height + margin

    if kind is SectionKind.TABLE:
        row_count = len(section.rows) + (1 if section.headers else 0)
        return row_count * config.table_row_height + config.table_padding + margin

    if kind is SectionKind.ANSWER:
        count = len(section.items) + (1 if section.description else 0)
        return max(1, count) * config.answer_item_height + config.answer_padding + margin

    if kind is SectionKind.LIST:
        return max(1, len(section.items)) * config.list_item_height + config.list_padding + margin

    if kind is SectionKind.TRANSLATION:
        return _prose_height(
            section.text,
            config.chars_per_line_korean,
            config.translation_line_height,
            config.translation_padding,
        ) + margin

    # SPACER
    return config.spacer_height


def estimate_sections_height(sections: tuple[Section, ...], config: LayoutConfig) -> float:
    """Sum of the estimated heights of `sections`."""
    return sum(estimate_section_height(section, config) for section in sections)


def estimate_item_height(item: NormalizedItem, config: LayoutConfig) -> float:
    """
    Estimate the packed height of a chunk.

    Sum of its sections plus `config.item_padding`.
    """
    return estimate_sections_height(item.sections, config) + config.item_padding
