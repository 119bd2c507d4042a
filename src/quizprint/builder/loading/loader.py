"""
Module: builder.loading.loader

Purpose:
    Load question records produced by the generation service from disk.
    Records stay loosely typed dicts; the normalizer interprets them.

Key Functions:
    - load_records(): Load all records from a .json or .jsonl file

Key Classes:
    - LoaderError: Exception for loading failures

Supported Files:
    - .json: a list of records, or an object with an "items" / "quizzes" list
    - .jsonl: one record per line, blank lines skipped

Dependencies:
    - pathlib (std)
    - quizprint.core.schemas: Record envelope validation

Used By:
    - builder.controller: Main build controller
    - scripts/build_print.py
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from quizprint.core.schemas import ValidationError, validate_record

logger = logging.getLogger(__name__)

CONTAINER_KEYS = ("items", "quizzes")


class LoaderError(Exception):
    """Error loading question records."""
    pass


def _records_from_document(document: Any, path: Path) -> List[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in CONTAINER_KEYS:
            if isinstance(document.get(key), list):
                return document[key]
    raise LoaderError(
        f"{path} must contain a list of records or an object with one of {list(CONTAINER_KEYS)}"
    )


def _read_jsonl(path: Path) -> List[Any]:
    records: List[Any] = []
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise LoaderError(f"Invalid JSON on line {line_number} of {path}: {e}") from e
    return records


def load_records(path: Path, *, strict: bool = False) -> List[Dict[str, Any]]:
    """
    Load question records from a file.

    Args:
        path: Path to a .json or .jsonl file
        strict: Validate each record envelope against the JSON schema

    Returns:
        Records in file order

    Raises:
        LoaderError: If the file is missing, unreadable, malformed, or holds a
            record that is not a JSON object (or, with `strict`, one that
            fails schema validation)

    Example:
        >>> records = load_records(Path("session.json"))
        >>> records[0]["workTypeId"]
        '01'
    """
    path = Path(path)
    if not path.exists():
        raise LoaderError(f"Input file does not exist: {path}")

    try:
        if path.suffix.lower() == ".jsonl":
            raw_records = _read_jsonl(path)
        else:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
            raw_records = _records_from_document(document, path)
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in {path}: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise LoaderError(f"Cannot read {path}: {e}") from e

    records: List[Dict[str, Any]] = []
    for index, record in enumerate(raw_records):
        try:
            validate_record(record, strict=strict)
        except ValidationError as e:
            location = f" at {e.path}" if e.path else ""
            raise LoaderError(f"Record {index} in {path} is invalid{location}: {e}") from e

        if "workTypeId" not in record:
            logger.debug(f"Record {index} in {path} has no workTypeId")
        records.append(record)

    logger.info(f"Loaded {len(records)} records from {path}")
    return records
