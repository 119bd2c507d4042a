"""
Record Envelope Validation

Validates the outer shape of question records read from disk.

**DESIGN NOTE:**

Only the envelope is checked (record is an object; `workTypeId`,
wrappers and chunk position have the right JSON types). The per-type
payload is deliberately loose: the normalizer degrades missing fields to
empty sections, so a strict payload schema would reject records that
still print.

- `validate_record()` always runs basic checks
- `strict=True` additionally runs the JSON Schema below via jsonschema
"""

from __future__ import annotations

from typing import Any

import jsonschema

RECORD_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Question record",
    "type": "object",
    "properties": {
        "workTypeId": {"type": ["string", "integer"]},
        "quiz": {"type": "object"},
        "data": {"type": "object"},
        "chunkMeta": {
            "type": "object",
            "properties": {
                "chunkIndex": {"type": "integer", "minimum": 0},
                "totalChunks": {"type": "integer", "minimum": 1},
            },
        },
        "chunkIndex": {"type": "integer", "minimum": 0},
        "totalChunks": {"type": "integer", "minimum": 1},
        "translation": {"type": "string"},
        "translatedText": {"type": "string"},
    },
    "patternProperties": {
        "^work[0-9]{2}Data$": {"type": "object"},
    },
}


class ValidationError(Exception):
    """Raised when a record fails validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_record(data: Any, *, strict: bool = False) -> None:
    """
    Validate a question record envelope.

    Args:
        data: Parsed JSON value of one record
        strict: If True, also validate against RECORD_SCHEMA

    Raises:
        ValidationError: If the record is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Record must be a JSON object, got {type(data).__name__}",
            path="",
        )

    if not strict:
        return

    validator = jsonschema.Draft7Validator(RECORD_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if errors:
        first = errors[0]
        raise ValidationError(
            f"Schema validation failed: {first.message}",
            path=".".join(str(p) for p in first.absolute_path),
            errors=[e.message for e in errors],
        )
