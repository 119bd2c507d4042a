"""
Module: builder.loading

Purpose:
    Question record loading from the generation service's JSON output.

Key Functions:
    - load_records(): Load all records from a .json or .jsonl file

Used By:
    - builder.controller: Main build controller
"""

from .loader import load_records, LoaderError

__all__ = [
    "load_records",
    "LoaderError",
]
