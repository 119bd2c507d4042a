"""
Serialization Utilities

Provides to/from JSON utilities for the print data models.

**DESIGN NOTE:**

The layout is the boundary handed to presentation layers outside Python
(the browser print view, other renderers). Every model has `to_dict()`;
the helpers here add the JSON file layer and the inverse direction.

- `serialize_*` / `deserialize_*` functions per model
- Layout objects are serialized through their own `to_dict()`, so this
  module does not depend on the layout engine
- The raw source record is never serialized
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from ..models.sections import Section
from ..models.items import NormalizedItem


# ─────────────────────────────────────────────────────────────────────────────
# Section / Item Serialization
# ─────────────────────────────────────────────────────────────────────────────


def serialize_section(section: Section) -> dict[str, Any]:
    """Serialize a Section to a dictionary."""
    return section.to_dict()


def deserialize_section(data: Mapping[str, Any]) -> Section:
    """
    Deserialize a Section from a dictionary.

    Raises:
        ValueError: If `kind` is unknown
        KeyError: If `kind` or `key` is missing
    """
    return Section.from_dict(dict(data))


def serialize_item(item: NormalizedItem) -> dict[str, Any]:
    """Serialize a NormalizedItem (chunk metadata included) to a dictionary."""
    return item.to_dict()


def deserialize_item(data: Mapping[str, Any]) -> NormalizedItem:
    """
    Deserialize a NormalizedItem from a dictionary.

    Raises:
        ValueError: If a section is invalid or a title is out of place
        KeyError: If `workTypeId` is missing
    """
    return NormalizedItem.from_dict(data)


# ─────────────────────────────────────────────────────────────────────────────
# Layout Serialization
# ─────────────────────────────────────────────────────────────────────────────


def serialize_layout(layout: Any) -> dict[str, Any]:
    """
    Serialize a layout result to a dictionary.

    Args:
        layout: LayoutResult (anything with `to_dict()`)

    Returns:
        {"pageCount", "pages": [{"index", "columns": [left, right]}],
        "warnings", "lastPosition"}
    """
    return layout.to_dict()


def save_layout_json(layout: Any, path: Path) -> None:
    """
    Write a serialized layout to a JSON file.

    Korean text is written as-is (UTF-8), not as escapes.

    Args:
        layout: LayoutResult to write
        path: Output file path (parent directories are created)
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_layout(layout), f, ensure_ascii=False, indent=2)
