"""
Schemas Package

JSON schema definition and validation for question record envelopes.
"""

from .validator import RECORD_SCHEMA, ValidationError, validate_record

__all__ = [
    "RECORD_SCHEMA",
    "ValidationError",
    "validate_record",
]
