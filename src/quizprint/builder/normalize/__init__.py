"""
Module: builder.normalize

Purpose:
    Section Normalizer: turns per-work-type question records into the
    shared Section vocabulary. All work-type knowledge lives here.

Key Functions:
    - normalize_record(): One record -> NormalizedItem
    - normalize_records(): Many records, order preserved
    - extract_translation(): Translation text of a record
    - format_blanks_for_problem() / format_blanks_for_answer(): Blank markers

Key Classes:
    - PrintMode: problem / answer
    - NormalizeOptions: Normalizer configuration

Used By:
    - builder.controller: First stage of the print pipeline
"""

from .labels import (
    DEFAULT_MAX_BLANK_WIDTH,
    INSTRUCTIONS,
    OPTION_LABELS,
    WORK_TYPE_LABELS,
    work_type_title,
)
from .blanks import count_blanks, format_blanks_for_answer, format_blanks_for_problem
from .normalizer import (
    SUPPORTED_WORK_TYPES,
    NormalizeOptions,
    PrintMode,
    extract_translation,
    normalize_record,
    normalize_records,
)

__all__ = [
    # Labels
    "DEFAULT_MAX_BLANK_WIDTH",
    "INSTRUCTIONS",
    "OPTION_LABELS",
    "WORK_TYPE_LABELS",
    "work_type_title",
    # Blanks
    "count_blanks",
    "format_blanks_for_answer",
    "format_blanks_for_problem",
    # Normalizer
    "SUPPORTED_WORK_TYPES",
    "NormalizeOptions",
    "PrintMode",
    "extract_translation",
    "normalize_record",
    "normalize_records",
]
