"""
Module: builder

Purpose:
    Print building pipeline for two-column quiz worksheets.
    Loads question records, normalizes them into Sections, splits and
    packs them onto two-column pages, and renders problem and answer PDFs.

Key Functions:
    - load_records(): Load question records from JSON / JSONL
    - normalize_record(): One record -> NormalizedItem
    - build_layout(): Records -> LayoutResult for one pass
    - build_print_job(): Main entry point for print generation

Key Classes:
    - PrintConfig: Configuration for a print job
    - LayoutConfig: Configuration for the layout engine
    - PrintMode: problem / answer

Dependencies:
    - reportlab: PDF rendering
    - quizprint.core.models: Section, NormalizedItem

Used By:
    - scripts/build_print.py: Command-line entry point
"""

from .config import PrintConfig
from .layout import LayoutConfig, LayoutResult
from .loading.loader import load_records, LoaderError
from .normalize import NormalizeOptions, PrintMode, normalize_record, normalize_records
from .controller import build_layout, build_print_job, BuildResult, BuildError, ModeOutput

__all__ = [
    # Config
    "PrintConfig",
    "LayoutConfig",
    "NormalizeOptions",
    # Loading
    "load_records",
    "LoaderError",
    # Normalization
    "PrintMode",
    "normalize_record",
    "normalize_records",
    # Controller
    "LayoutResult",
    "build_layout",
    "build_print_job",
    "BuildResult",
    "BuildError",
    "ModeOutput",
]
