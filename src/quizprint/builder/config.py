"""
Module: builder.config

Purpose:
    Configuration dataclass for a print job. Immutable configuration with
    validation on construction.

Key Classes:
    - PrintConfig: Main configuration for building print PDFs

Dependencies:
    - dataclasses (std)
    - pathlib (std)
    - builder.layout.config: LayoutConfig
    - builder.normalize: PrintMode, NormalizeOptions

Used By:
    - builder.controller: Main build controller
    - scripts/build_print.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from quizprint.builder.layout.config import LayoutConfig
from quizprint.builder.normalize import NormalizeOptions, PrintMode


@dataclass(frozen=True)
class PrintConfig:
    """
    Configuration for a print job (immutable).

    Problem and answer passes are built independently from the same
    records; `modes` selects which of them to produce.

    Attributes:
        input_path: .json / .jsonl file with question records
        output_dir: Directory for PDFs and metadata
        modes: Passes to build, in order
        package_mode: Composite bundle: one trailing translation instead
            of one per question (answer pass only)
        header_text: Text repeated in every page header
        layout: Layout configuration
        normalize: Normalizer options
        strict_validation: Validate record envelopes with the JSON schema
        write_layout_json: Also write the layout of each pass as JSON
        show_footer: Draw the version footer on each page

    Example:
        >>> config = PrintConfig(
        ...     input_path=Path("session.json"),
        ...     output_dir=Path("out"),
        ...     package_mode=True,
        ... )
    """

    # Required
    input_path: Path
    output_dir: Path

    # Passes
    modes: tuple[PrintMode, ...] = (PrintMode.PROBLEM, PrintMode.ANSWER)
    package_mode: bool = False

    # Presentation
    header_text: str = ""
    show_footer: bool = True

    # Engine
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    normalize: Optional[NormalizeOptions] = None

    # Input / output
    strict_validation: bool = False
    write_layout_json: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.modes:
            raise ValueError("At least one print mode is required")
        # Accept plain strings ("problem" / "answer")
        modes = tuple(PrintMode(mode) for mode in self.modes)
        if len(set(modes)) != len(modes):
            raise ValueError(f"Duplicate print modes: {[m.value for m in modes]}")
        object.__setattr__(self, "modes", modes)
        object.__setattr__(self, "input_path", Path(self.input_path))
        object.__setattr__(self, "output_dir", Path(self.output_dir))
