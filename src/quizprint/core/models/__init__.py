"""
Core Models Package

Immutable data models shared by every stage of the print pipeline.

**DESIGN RATIONALE:**

All models in this package are frozen dataclasses. This ensures:
1. No accidental mutation while a question is split and packed
2. Problem and answer layouts can be built independently (even in parallel)
3. Splitting is expressed as cloning, never as editing

| Model | Role |
|-------|------|
| `Section` | Atomic typed content block |
| `OptionItem` | One multiple-choice option |
| `ChunkMeta` | Chunk position and visibility flags |
| `NormalizedItem` | One question (or chunk) as ordered Sections |
"""

from .sections import LAST_CHUNK_KINDS, OptionItem, Section, SectionKind
from .items import ChunkMeta, NormalizedItem

__all__ = [
    "LAST_CHUNK_KINDS",
    "OptionItem",
    "Section",
    "SectionKind",
    "ChunkMeta",
    "NormalizedItem",
]
