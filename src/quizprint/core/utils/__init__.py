"""
Core Utilities Package

Serialization helpers for the print data models.
"""

from .serialization import (
    deserialize_item,
    deserialize_section,
    save_layout_json,
    serialize_item,
    serialize_layout,
    serialize_section,
)

__all__ = [
    "deserialize_item",
    "deserialize_section",
    "save_layout_json",
    "serialize_item",
    "serialize_layout",
    "serialize_section",
]
