"""
Module: builder.controller

Purpose:
    Orchestrate the complete print pipeline.
    Load → Normalize → Split → Pack → (Aggregate) → Render → Metadata

Key Functions:
    - build_layout(): Pure pipeline from records to a LayoutResult
    - build_print_job(): Main entry point for building print PDFs

Key Classes:
    - ModeOutput: Output of one print pass
    - BuildResult: Complete build result
    - BuildError: Exception for build failures

Dependencies:
    - builder.loading: Record loading
    - builder.normalize: Section normalization
    - builder.layout: Splitting, packing and aggregation
    - builder.output: PDF rendering

Used By:
    - scripts/build_print.py: Command-line entry point
"""

from __future__ import annotations

import json
import logging
import time
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from quizprint import __version__
from quizprint.core.utils import save_layout_json

from .config import PrintConfig
from .layout import (
    LayoutConfig,
    LayoutResult,
    append_trailing_translation,
    paginate,
    split_items,
)
from .loading import LoaderError, load_records
from .normalize import (
    NormalizeOptions,
    PrintMode,
    extract_translation,
    normalize_records,
)
from .output.renderer import render_to_pdf

logger = logging.getLogger(__name__)

METADATA_FILENAME = "print_metadata.json"


class BuildError(Exception):
    """Error during build pipeline."""
    pass


@dataclass(frozen=True)
class ModeOutput:
    """
    Output of one print pass (immutable).

    Attributes:
        mode: Problem or answer pass
        pdf_path: Rendered PDF
        page_count: Number of pages
        chunk_count: Number of chunks packed
        warnings: Overflow warnings from packing
        layout_path: Layout JSON, if requested
    """

    mode: PrintMode
    pdf_path: Path
    page_count: int
    chunk_count: int
    warnings: tuple[str, ...]
    layout_path: Optional[Path] = None


@dataclass(frozen=True)
class BuildResult:
    """
    Complete build result (immutable).

    Attributes:
        outputs: One ModeOutput per requested pass, in order
        metadata_path: Path to print_metadata.json
        metadata: Build metadata dictionary
        warnings: All warnings during build

    Example:
        >>> result = build_print_job(config)
        >>> print(f"Answer sheet: {result.page_counts['answer']} pages")
    """

    outputs: tuple[ModeOutput, ...]
    metadata_path: Path
    metadata: dict
    warnings: tuple[str, ...]

    def output_for(self, mode: PrintMode | str) -> Optional[ModeOutput]:
        mode = PrintMode(mode)
        return next((o for o in self.outputs if o.mode is mode), None)

    @property
    def problem_pdf(self) -> Optional[Path]:
        output = self.output_for(PrintMode.PROBLEM)
        return output.pdf_path if output else None

    @property
    def answer_pdf(self) -> Optional[Path]:
        output = self.output_for(PrintMode.ANSWER)
        return output.pdf_path if output else None

    @property
    def page_counts(self) -> Dict[str, int]:
        return {o.mode.value: o.page_count for o in self.outputs}


def build_layout(
    records: Sequence[Mapping[str, Any]],
    mode: PrintMode | str,
    layout_config: LayoutConfig,
    *,
    package_mode: bool = False,
    normalize_options: Optional[NormalizeOptions] = None,
) -> LayoutResult:
    """
    Run the pagination pipeline for one print pass.

    Pipeline:
    1. Normalize records into Sections
    2. Split tall questions into column-sized chunks
    3. Pack chunks into two-column pages
    4. (Package mode, answer pass) Append the last question's translation

    Args:
        records: Raw question records in print order
        mode: Problem or answer pass
        layout_config: Layout configuration
        package_mode: Composite bundle; per-question translations are
            replaced by one trailing translation
        normalize_options: Normalizer options (defaults when None)

    Returns:
        LayoutResult ready for a presentation layer

    Example:
        >>> layout = build_layout(records, "answer", LayoutConfig())
        >>> layout.page_count
        3
    """
    mode = PrintMode(mode)
    options = normalize_options or NormalizeOptions()
    if package_mode:
        options = replace(options, defer_translation=True)

    items = normalize_records(records, mode, options)
    chunks = split_items(items, layout_config)
    layout = paginate(chunks, layout_config)

    if package_mode and mode is PrintMode.ANSWER and items:
        translation = extract_translation(records[-1])
        layout = append_trailing_translation(
            layout, translation, layout_config, work_type_id=items[-1].work_type_id
        )

    return layout


def build_print_job(config: PrintConfig) -> BuildResult:
    """
    Build print PDFs from start to finish.

    Pipeline:
    1. Load records from the input file
    2. For each requested pass: build the layout and render it to PDF
    3. (Optional) Write each layout as JSON
    4. Write print_metadata.json

    Args:
        config: Print job configuration

    Returns:
        BuildResult with paths and metadata

    Raises:
        BuildError: If loading or writing output fails

    Example:
        >>> config = PrintConfig(input_path=Path("session.json"), output_dir=Path("out"))
        >>> result = build_print_job(config)
        >>> result.problem_pdf
        PosixPath('out/problem.pdf')
    """
    start_time = time.perf_counter()
    logger.info(f"Starting print build for {config.input_path}")

    # 1. Load records
    try:
        records = load_records(config.input_path, strict=config.strict_validation)
    except LoaderError as e:
        raise BuildError(f"Failed to load records: {e}") from e

    if not records:
        raise BuildError(f"No records found in {config.input_path}")

    output_dir = config.output_dir
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BuildError(f"Cannot create output directory {output_dir}: {e}") from e
    logger.info(f"Output directory: {output_dir}")

    # 2-3. One independent pass per mode
    outputs: List[ModeOutput] = []
    layouts: Dict[PrintMode, LayoutResult] = {}
    warnings: List[str] = []

    for mode in config.modes:
        layout = build_layout(
            records,
            mode,
            config.layout,
            package_mode=config.package_mode,
            normalize_options=config.normalize,
        )
        layouts[mode] = layout
        warnings.extend(f"[{mode.value}] {w}" for w in layout.warnings)

        pdf_path = output_dir / f"{mode.value}.pdf"
        layout_path = output_dir / f"{mode.value}_layout.json" if config.write_layout_json else None
        try:
            render_to_pdf(
                layout,
                pdf_path,
                config=config.layout,
                header_text=config.header_text,
                mode=mode,
                show_footer=config.show_footer,
            )
            if layout_path is not None:
                save_layout_json(layout, layout_path)
        except OSError as e:
            raise BuildError(f"Failed to write {mode.value} output: {e}") from e

        logger.info(f"Rendered {mode.value} PDF: {pdf_path} ({layout.page_count} pages)")
        outputs.append(
            ModeOutput(
                mode=mode,
                pdf_path=pdf_path,
                page_count=layout.page_count,
                chunk_count=layout.total_chunks,
                warnings=layout.warnings,
                layout_path=layout_path,
            )
        )

    elapsed = time.perf_counter() - start_time
    logger.info(f"Print build completed in {elapsed:.2f}s")

    # 4. Write metadata
    metadata = _build_metadata(config, records, outputs, layouts)
    metadata_path = output_dir / METADATA_FILENAME
    try:
        _write_metadata(metadata_path, metadata)
    except OSError as e:
        raise BuildError(f"Failed to write metadata: {e}") from e
    logger.info(f"Wrote build metadata to {metadata_path}")

    return BuildResult(
        outputs=tuple(outputs),
        metadata_path=metadata_path,
        metadata=metadata,
        warnings=tuple(warnings),
    )


def _build_metadata(
    config: PrintConfig,
    records: Sequence[Mapping[str, Any]],
    outputs: Sequence[ModeOutput],
    layouts: Mapping[PrintMode, LayoutResult],
) -> dict:
    """
    Build metadata dictionary for a print job.

    Contains:
    - Input summary (record count, work types)
    - Per pass: PDF path, page and chunk counts, warnings, and a manifest
      of which chunk sits on which page and column
    - Timestamp and version

    Example:
        >>> metadata = _build_metadata(config, records, outputs, layouts)
        >>> metadata["record_count"]
        12
    """
    work_types = Counter(str(r.get("workTypeId", "unknown")) for r in records)

    passes = {}
    for output in outputs:
        layout = layouts[output.mode]
        manifest = []
        for page in layout.pages:
            for column_index, column in enumerate(page.columns):
                for item in column.items:
                    entry: Dict[str, Any] = {
                        "page": page.index + 1,  # 1-indexed for humans
                        "column": "left" if column_index == 0 else "right",
                        "work_type_id": item.work_type_id,
                    }
                    if item.chunk_meta is not None:
                        entry["chunk_index"] = item.chunk_meta.chunk_index
                        entry["total_chunks"] = item.chunk_meta.total_chunks
                    manifest.append(entry)

        passes[output.mode.value] = {
            "pdf": output.pdf_path.name,
            "layout_json": output.layout_path.name if output.layout_path else None,
            "page_count": output.page_count,
            "chunk_count": output.chunk_count,
            "warnings": list(output.warnings),
            "manifest": manifest,
        }

    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "version": __version__,
        "input_path": str(config.input_path),
        "record_count": len(records),
        "work_types": dict(sorted(work_types.items())),
        "package_mode": config.package_mode,
        "header_text": config.header_text,
        "column_capacity": config.layout.column_capacity,
        "passes": passes,
    }


def _write_metadata(path: Path, metadata: dict) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(metadata, f, ensure_ascii=False, indent=2)
