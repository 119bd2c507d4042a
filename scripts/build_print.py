#!/usr/bin/env python3
"""Build two-column problem / answer PDFs from a quiz session file.

Reads question records (.json or .jsonl) produced by the generation
service, paginates them and writes problem.pdf, answer.pdf and
print_metadata.json to the output directory.

Usage:
    python scripts/build_print.py session.json --output out/
    python scripts/build_print.py session.jsonl -o out/ --mode answer --package
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from quizprint.builder import BuildError, LayoutConfig, PrintConfig, PrintMode, build_print_job
from quizprint.builder.normalize import NormalizeOptions

logger = logging.getLogger("build_print")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build two-column quiz print PDFs")
    parser.add_argument("input", type=Path, help="Question records (.json or .jsonl)")
    parser.add_argument("--output", "-o", type=Path, default=Path("print_output"), help="Output directory")
    parser.add_argument(
        "--mode",
        "-m",
        action="append",
        choices=[m.value for m in PrintMode],
        help="Pass to build (repeatable; default: problem and answer)",
    )
    parser.add_argument(
        "--package",
        action="store_true",
        help="Composite bundle: one trailing translation instead of one per question",
    )
    parser.add_argument("--header", default="", help="Text repeated in every page header")
    parser.add_argument("--column-capacity", type=float, help="Override the column capacity (cm)")
    parser.add_argument("--max-blank-width", type=int, help="Longest underscore run for fill-in blanks")
    parser.add_argument("--strict", action="store_true", help="Validate records against the JSON schema")
    parser.add_argument("--layout-json", action="store_true", help="Also write each layout as JSON")
    parser.add_argument("--no-footer", action="store_true", help="Omit the version footer")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        layout = LayoutConfig(column_capacity=args.column_capacity) if args.column_capacity else LayoutConfig()
        normalize = NormalizeOptions(max_blank_width=args.max_blank_width) if args.max_blank_width else None
        config = PrintConfig(
            input_path=args.input,
            output_dir=args.output,
            modes=tuple(args.mode) if args.mode else (PrintMode.PROBLEM, PrintMode.ANSWER),
            package_mode=args.package,
            header_text=args.header,
            layout=layout,
            normalize=normalize,
            strict_validation=args.strict,
            write_layout_json=args.layout_json,
            show_footer=not args.no_footer,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        result = build_print_job(config)
    except BuildError as e:
        logger.error(str(e))
        return 1

    for output in result.outputs:
        print(f"{output.mode.value}: {output.pdf_path} ({output.page_count} pages, {output.chunk_count} chunks)")
    for warning in result.warnings:
        print(f"warning: {warning}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
