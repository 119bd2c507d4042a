"""
Module: builder.normalize.blanks

Purpose:
    Blank-marker formatting for the free-response fill-in-the-blank work
    types. Markers look like `(_____)` or `( A _____ )`.

Key Functions:
    - format_blanks_for_problem(): Size each marker to its answer length
    - format_blanks_for_answer(): Replace each marker with its answer
    - count_blanks(): Number of markers in a text

Rules:
    - Markers are consumed left to right, answers in the same order
    - Markers beyond the answer count are left untouched
    - Answers beyond the marker count are ignored

Used By:
    - builder.normalize.normalizer: Work types 13 and 14
"""

from __future__ import annotations

import html
import re
from typing import Sequence

from .labels import DEFAULT_MAX_BLANK_WIDTH

BLANK_PATTERN = re.compile(r"\(\s*([A-Z])?\s*_+\s*\)", re.IGNORECASE)

# Inline insertion style recognised by the presentation layer
ANSWER_INSERT_CLASS = "blank-answer"


def count_blanks(text: str) -> int:
    """Count blank markers in `text`."""
    if not text:
        return 0
    return len(BLANK_PATTERN.findall(text))


def format_blanks_for_problem(
    text: str,
    answers: Sequence[str],
    max_width: int = DEFAULT_MAX_BLANK_WIDTH,
) -> str:
    """
    Resize blank markers so each run of underscores is as long as its answer.

    Args:
        text: Blanked text
        answers: Correct answers in marker order
        max_width: Longest underscore run printed

    Returns:
        Text with markers rewritten as `( ____ )`

    Example:
        >>> format_blanks_for_problem("I (_____) school.", ["like"])
        'I ( ____ ) school.'
    """
    if not text or not answers:
        return text or ""
    if max_width < 1:
        raise ValueError(f"max_width must be positive: {max_width}")

    remaining = iter(answers)

    def replace(match: re.Match[str]) -> str:
        answer = next(remaining, None)
        if answer is None:
            return match.group(0)
        width = max(1, min(len(str(answer)), max_width))
        return f"( {'_' * width} )"

    return BLANK_PATTERN.sub(replace, text)


def format_blanks_for_answer(text: str, answers: Sequence[str]) -> str:
    """
    Replace blank markers with their answers as an html fragment.

    Plain text and answers are HTML-escaped; each answer is wrapped in an
    `<ins>` insertion element.

    Example:
        >>> format_blanks_for_answer("I (_____) school.", ["like"])
        'I ( <ins class="blank-answer">like</ins> ) school.'
    """
    if not text:
        return ""

    parts: list[str] = []
    position = 0
    remaining = iter(answers or ())

    for match in BLANK_PATTERN.finditer(text):
        answer = next(remaining, None)
        parts.append(html.escape(text[position:match.start()], quote=False))
        if answer is None:
            parts.append(html.escape(match.group(0), quote=False))
        else:
            escaped = html.escape(str(answer), quote=False)
            parts.append(f'( <ins class="{ANSWER_INSERT_CLASS}">{escaped}</ins> )')
        position = match.end()

    parts.append(html.escape(text[position:], quote=False))
    return "".join(parts)
