"""
Module: builder.layout.splitter

Purpose:
    Split a question that is too tall for one column into ordered,
    self-consistent chunks.

Key Functions:
    - split_item(): Split one NormalizedItem
    - split_items(): Split a list and flatten the chunks

Algorithm:
    1. Walk the content sections in order, accumulating estimated height
    2. Every chunk starts with a clone of the title (re-keyed per chunk)
    3. Instructions are only kept while still on the first chunk
    4. If the next section would exceed capacity and the chunk holds content
       beyond its title and instruction, close the chunk and retry on a
       fresh one
    5. Options, answers and translations only go on the last chunk: when
       one of them forces a new chunk, the trailing group already in the
       current chunk moves along with it
    6. A section that alone exceeds capacity is placed anyway and the chunk
       is closed right after it (overflow is preferred to data loss)
    7. Number the chunks and attach ChunkMeta

Dependencies:
    - builder.layout.estimator: Section heights
    - builder.layout.config: LayoutConfig

Used By:
    - builder.controller: Between normalization and packing
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from quizprint.core.models import LAST_CHUNK_KINDS, ChunkMeta, NormalizedItem, Section, SectionKind

from .config import LayoutConfig
from .estimator import estimate_section_height

logger = logging.getLogger(__name__)

CHUNK_KEY_SEPARATOR = "#chunk"

# A chunk holding only these has no content yet
_HEADER_KINDS = frozenset({SectionKind.TITLE, SectionKind.INSTRUCTION})


def chunk_key(key: str, chunk_index: int) -> str:
    """
    Key for a title cloned into chunk `chunk_index`.

    Any previous chunk suffix is replaced, so splitting an already-split
    chunk again yields the same keys.

    Example:
        >>> chunk_key("title-03", 1)
        'title-03#chunk1'
        >>> chunk_key("title-03#chunk1", 0)
        'title-03#chunk0'
    """
    base = key.split(CHUNK_KEY_SEPARATOR, 1)[0]
    return f"{base}{CHUNK_KEY_SEPARATOR}{chunk_index}"


def split_item(item: NormalizedItem, config: LayoutConfig) -> List[NormalizedItem]:
    """
    Split a question into chunks that each fit one column.

    Args:
        item: Normalized question
        config: Layout configuration (uses `column_capacity`)

    Returns:
        One or more chunks in order. An item without content sections
        yields exactly one chunk holding just its title.

    Example:
        >>> chunks = split_item(long_item, LayoutConfig())
        >>> [c.chunk_meta.chunk_index for c in chunks]
        [0, 1]
    """
    capacity = config.column_capacity - config.item_padding
    title = item.title_section
    title_height = estimate_section_height(title, config) if title is not None else 0.0

    closed: List[List[Section]] = []
    current: Optional[List[Section]] = None
    current_height = 0.0

    def open_chunk() -> List[Section]:
        if title is None:
            return []
        return [title.rekey(chunk_key(title.key, len(closed)))]

    def content_count(sections: List[Section]) -> int:
        return sum(1 for s in sections if s.kind not in _HEADER_KINDS)

    def trailing_group(sections: List[Section]) -> List[Section]:
        start = len(sections)
        while start > 0 and sections[start - 1].kind in LAST_CHUNK_KINDS:
            start -= 1
        return sections[start:]

    for section in item.content_sections:
        # Instructions belong to the first chunk only
        if section.kind is SectionKind.INSTRUCTION and closed:
            logger.debug(f"Dropping instruction {section.key} from continuation chunk")
            continue

        if current is None:
            current = open_chunk()
            current_height = title_height if title is not None else 0.0

        height = estimate_section_height(section, config)

        if current_height + height > capacity and content_count(current) > 0:
            carried = trailing_group(current) if section.kind in LAST_CHUNK_KINDS else []
            if len(carried) < content_count(current):
                closed.append(current[: len(current) - len(carried)])
                current = open_chunk() + carried
                current_height = (title_height if title is not None else 0.0) + sum(
                    estimate_section_height(s, config) for s in carried
                )

                if section.kind is SectionKind.INSTRUCTION:
                    continue
            else:
                # Nothing left to close the chunk on; keep the trailing group whole
                logger.warning(
                    f"Trailing sections of work type {item.work_type_id} overflow column "
                    f"at {section.key}"
                )

        current.append(section)
        current_height += height

        oversized = current_height > capacity and section.kind not in _HEADER_KINDS
        if oversized and content_count(current) == 1:
            logger.warning(
                f"Section {section.key} of work type {item.work_type_id} overflows column: "
                f"{current_height:.2f} needed, {capacity:.2f} available"
            )
            if section.kind not in LAST_CHUNK_KINDS:
                closed.append(current)
                current = None

    if current is not None:
        closed.append(current)
    if not closed:
        closed.append(open_chunk())

    total = len(closed)
    chunks = [
        item.with_sections(tuple(sections), ChunkMeta.for_position(index, total))
        for index, sections in enumerate(closed)
    ]

    if total > 1:
        logger.debug(f"Split work type {item.work_type_id} into {total} chunks")

    return chunks


def split_items(items: Iterable[NormalizedItem], config: LayoutConfig) -> List[NormalizedItem]:
    """
    Split every item and flatten the chunks, preserving order.

    Args:
        items: Normalized questions
        config: Layout configuration

    Returns:
        Flat list of chunks
    """
    chunks: List[NormalizedItem] = []
    for item in items:
        chunks.extend(split_item(item, config))
    logger.info(f"Split {len(chunks)} chunks from normalized items")
    return chunks
