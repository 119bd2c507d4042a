"""
Module: items

Purpose:
    One logical question after normalization (NormalizedItem), plus the
    chunk metadata attached when a question is split across columns.

Key Classes:
    - ChunkMeta: Position of a chunk within its question and visibility flags
    - NormalizedItem: Ordered Sections of one question (or one chunk of it)

Dependencies:
    - dataclasses (std)
    - .sections: Section, SectionKind

Used By:
    - builder.normalize: Produces NormalizedItems
    - builder.layout: Splits and packs NormalizedItems
    - builder.output: Draws NormalizedItems
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .sections import Section, SectionKind


@dataclass(frozen=True, slots=True)
class ChunkMeta:
    """
    Where a chunk sits inside its question and what it shows.

    The instruction is shown only on the first chunk; options, answer and
    translation only on the last. The title is repeated on every chunk.

    Attributes:
        chunk_index: 0-based chunk position
        total_chunks: Number of chunks the question was split into
        show_instruction: Instruction belongs on this chunk
        show_options: Option list belongs on this chunk
        show_answer: Answer block belongs on this chunk
        show_translation: Translation belongs on this chunk

    Invariants:
        - 0 <= chunk_index < total_chunks

    Example:
        >>> meta = ChunkMeta.for_position(0, 2)
        >>> meta.show_instruction, meta.show_answer
        (True, False)
    """

    chunk_index: int
    total_chunks: int
    show_instruction: bool
    show_options: bool
    show_answer: bool
    show_translation: bool

    def __post_init__(self) -> None:
        """Validate chunk position on construction."""
        if self.total_chunks < 1:
            raise ValueError(f"total_chunks must be positive: {self.total_chunks}")
        if not 0 <= self.chunk_index < self.total_chunks:
            raise ValueError(
                f"chunk_index {self.chunk_index} out of range for {self.total_chunks} chunks"
            )

    @classmethod
    def for_position(cls, chunk_index: int, total_chunks: int) -> ChunkMeta:
        """Canonical flags for a chunk at `chunk_index` of `total_chunks`."""
        is_last = chunk_index == total_chunks - 1
        return cls(
            chunk_index=chunk_index,
            total_chunks=total_chunks,
            show_instruction=chunk_index == 0,
            show_options=is_last,
            show_answer=is_last,
            show_translation=is_last,
        )

    @property
    def is_split_chunk(self) -> bool:
        """True when the question was split into more than one chunk."""
        return self.total_chunks > 1

    @property
    def is_last(self) -> bool:
        return self.chunk_index == self.total_chunks - 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunkIndex": self.chunk_index,
            "totalChunks": self.total_chunks,
            "isSplitChunk": self.is_split_chunk,
            "showInstruction": self.show_instruction,
            "showOptions": self.show_options,
            "showAnswer": self.show_answer,
            "showTranslation": self.show_translation,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional[ChunkMeta]:
        """
        Parse chunk metadata attached to a raw record.

        Accepts the `chunkMeta` object form as well as the legacy form where
        `chunkIndex` / `totalChunks` sit directly on the record. Flags that
        are absent default to their canonical value for the position.

        Returns:
            ChunkMeta, or None if the data carries no usable position
        """
        index = data.get("chunkIndex")
        total = data.get("totalChunks")
        if not isinstance(index, int) or not isinstance(total, int):
            return None
        if isinstance(index, bool) or isinstance(total, bool):
            return None
        if not 0 <= index < total:
            return None

        canonical = cls.for_position(index, total)
        return cls(
            chunk_index=index,
            total_chunks=total,
            show_instruction=bool(data.get("showInstruction", canonical.show_instruction)),
            show_options=bool(data.get("showOptions", canonical.show_options)),
            show_answer=bool(data.get("showAnswer", canonical.show_answer)),
            show_translation=bool(data.get("showTranslation", canonical.show_translation)),
        )


@dataclass(frozen=True)
class NormalizedItem:
    """
    One question (or one chunk of a question) as an ordered list of Sections.

    Attributes:
        work_type_id: Work type code such as "03"; "unknown" if absent
        sections: Ordered sections; a title, if present, is always first
        chunk_meta: Set on chunks produced by the splitter
        source: Raw record this item came from (not part of equality)

    Invariants:
        - A TITLE section may only appear at index 0
    """

    work_type_id: str
    sections: tuple[Section, ...]
    chunk_meta: Optional[ChunkMeta] = None
    source: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate section order on construction."""
        for index, section in enumerate(self.sections):
            if section.kind is SectionKind.TITLE and index != 0:
                raise ValueError(
                    f"Title section {section.key!r} must be first, found at index {index}"
                )

    @property
    def title_section(self) -> Optional[Section]:
        """The leading title section, if any."""
        if self.sections and self.sections[0].kind is SectionKind.TITLE:
            return self.sections[0]
        return None

    @property
    def content_sections(self) -> tuple[Section, ...]:
        """All sections except the leading title."""
        if self.title_section is not None:
            return self.sections[1:]
        return self.sections

    def has_kind(self, kind: SectionKind) -> bool:
        return any(section.kind is kind for section in self.sections)

    def with_sections(
        self,
        sections: tuple[Section, ...],
        chunk_meta: Optional[ChunkMeta] = None,
    ) -> NormalizedItem:
        """Return a copy carrying different sections and chunk metadata."""
        return replace(self, sections=sections, chunk_meta=chunk_meta)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "workTypeId": self.work_type_id,
            "sections": [section.to_dict() for section in self.sections],
        }
        if self.chunk_meta is not None:
            data["chunkMeta"] = self.chunk_meta.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NormalizedItem:
        """
        Deserialize from a dict produced by `to_dict()`.

        The source record is not serialized and comes back as None.
        """
        chunk_meta = data.get("chunkMeta")
        return cls(
            work_type_id=data["workTypeId"],
            sections=tuple(Section.from_dict(s) for s in data.get("sections", ())),
            chunk_meta=ChunkMeta.from_dict(chunk_meta) if isinstance(chunk_meta, Mapping) else None,
        )
