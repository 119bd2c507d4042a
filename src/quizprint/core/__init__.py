"""
Quiz Print Core Package

Shared data models and utilities for the print pipeline. These models are
the single contract between the normalizer, the layout engine and any
presentation layer.

**DESIGN DEVIATIONS FROM THE PER-TYPE PRINT FORMATS:**

1. **One Section vocabulary**
   - Before: each work type carried its own print structure and its own
     height / split logic
   - Now: every work type is normalized into the same Section kinds, and one
     estimator / splitter / packer serves them all

2. **Immutable Data Models**
   - Before: page and column arrays were pushed into while packing
   - Now: frozen dataclasses; packing folds over immutable state

3. **Explicit Geometry**
   - Before: page constants referenced ambiently from module scope
   - Now: a LayoutConfig value is threaded into every layout call
"""

from .models import ChunkMeta, NormalizedItem, OptionItem, Section, SectionKind

__all__ = [
    "ChunkMeta",
    "NormalizedItem",
    "OptionItem",
    "Section",
    "SectionKind",
]
