"""
Module: sections

Purpose:
    Provides the Section dataclass - the atomic, typed content block that
    every question is reduced to before layout. The estimator, splitter and
    packer only ever see Sections, never the raw per-work-type records.

Key Classes:
    - SectionKind: Closed set of block kinds
    - OptionItem: One entry of a multiple-choice option list
    - Section: Immutable content block with kind-specific payload

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - core.models.items.NormalizedItem
    - builder.normalize: Creates Sections
    - builder.layout: Estimates, splits and packs Sections
    - builder.output: Draws Sections

Design Notes:
    Sections are frozen. Splitting never edits a Section in place; it only
    clones one under a new key via `rekey()`. Collections are stored as
    tuples so a Section is fully immutable and hashable.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Optional, Sequence


class SectionKind(str, Enum):
    """Kinds of content block."""

    TITLE = "title"
    INSTRUCTION = "instruction"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    HTML = "html-fragment"
    OPTIONS = "option-list"
    TABLE = "table"
    ANSWER = "answer-block"
    TRANSLATION = "translation"
    LIST = "list"
    SPACER = "spacer"


# Trailing kinds printed only on a question's last chunk
LAST_CHUNK_KINDS = frozenset({SectionKind.OPTIONS, SectionKind.ANSWER, SectionKind.TRANSLATION})


@dataclass(frozen=True, slots=True)
class OptionItem:
    """
    One option of a multiple-choice list.

    Attributes:
        label: Glyph printed before the option (e.g. "①"), may be None
        text: Option text
        is_correct: Only set in answer mode; None in problem mode
        translation: Optional secondary (Korean) rendering of the option
    """

    label: Optional[str]
    text: str
    is_correct: Optional[bool] = None
    translation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"label": self.label, "text": self.text}
        if self.is_correct is not None:
            data["isCorrect"] = self.is_correct
        if self.translation:
            data["translation"] = self.translation
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OptionItem:
        return cls(
            label=data.get("label"),
            text=str(data.get("text", "")),
            is_correct=data.get("isCorrect"),
            translation=data.get("translation"),
        )


@dataclass(frozen=True, slots=True)
class Section:
    """
    Atomic content block (immutable).

    Only the payload fields relevant to `kind` are populated:

    - title / instruction / paragraph / text / translation: `text`
    - paragraph: optional `label` printed inline, optional `secondary_text`
      (a sentence's inline translation) and `variant`
    - html-fragment: `html`, pre-escaped markup treated as opaque
    - option-list: `options`
    - table: `headers` (optional) and `rows`
    - answer-block / list: `items`, answer-block optional `description`

    Attributes:
        kind: Block kind
        key: Stable identifier, unique within one question
        text: Plain text payload
        html: Markup payload (html-fragment only)
        label: Inline label for paragraphs (e.g. "(A)")
        items: Plain-text items (answer-block, list)
        options: Option entries (option-list)
        headers: Table header row, None when the table has no header
        rows: Table body rows
        description: Caption for an answer-block
        variant: Free-form sub-kind used by the presentation layer
        secondary_text: Second text run drawn under `text`

    Example:
        >>> s = Section.paragraph("paragraph-03-blanked", "I like school.")
        >>> s.rekey("paragraph-03-blanked#chunk1").text
        'I like school.'
    """

    kind: SectionKind
    key: str
    text: str = ""
    html: str = ""
    label: Optional[str] = None
    items: tuple[str, ...] = ()
    options: tuple[OptionItem, ...] = ()
    headers: Optional[tuple[str, ...]] = None
    rows: tuple[tuple[str, ...], ...] = ()
    description: Optional[str] = None
    variant: Optional[str] = None
    secondary_text: Optional[str] = None

    def rekey(self, key: str) -> Section:
        """Return a clone of this section under a new key."""
        return replace(self, key=key)

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def title(cls, key: str, text: str) -> Section:
        return cls(kind=SectionKind.TITLE, key=key, text=text)

    @classmethod
    def instruction(cls, key: str, text: str) -> Section:
        return cls(kind=SectionKind.INSTRUCTION, key=key, text=text)

    @classmethod
    def paragraph(
        cls,
        key: str,
        text: str,
        *,
        label: Optional[str] = None,
        variant: Optional[str] = None,
        secondary_text: Optional[str] = None,
    ) -> Section:
        return cls(
            kind=SectionKind.PARAGRAPH,
            key=key,
            text=text,
            label=label,
            variant=variant,
            secondary_text=secondary_text,
        )

    @classmethod
    def plain_text(cls, key: str, text: str, *, variant: Optional[str] = None) -> Section:
        return cls(kind=SectionKind.TEXT, key=key, text=text, variant=variant)

    @classmethod
    def html_fragment(cls, key: str, html: str) -> Section:
        return cls(kind=SectionKind.HTML, key=key, html=html)

    @classmethod
    def option_list(cls, key: str, options: Iterable[OptionItem]) -> Section:
        return cls(kind=SectionKind.OPTIONS, key=key, options=tuple(options))

    @classmethod
    def table(
        cls,
        key: str,
        rows: Iterable[Sequence[str]],
        headers: Optional[Sequence[str]] = None,
    ) -> Section:
        return cls(
            kind=SectionKind.TABLE,
            key=key,
            headers=tuple(headers) if headers is not None else None,
            rows=tuple(tuple(str(cell) for cell in row) for row in rows),
        )

    @classmethod
    def answer_block(
        cls,
        key: str,
        items: Iterable[str],
        description: Optional[str] = None,
    ) -> Section:
        return cls(kind=SectionKind.ANSWER, key=key, items=tuple(items), description=description)

    @classmethod
    def translation(cls, key: str, text: str) -> Section:
        return cls(kind=SectionKind.TRANSLATION, key=key, text=text)

    @classmethod
    def item_list(cls, key: str, items: Iterable[str], *, variant: Optional[str] = None) -> Section:
        return cls(kind=SectionKind.LIST, key=key, items=tuple(items), variant=variant)

    @classmethod
    def spacer(cls, key: str) -> Section:
        return cls(kind=SectionKind.SPACER, key=key)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to a JSON-compatible dict.

        Empty payload fields are omitted so the output stays readable.
        """
        data: dict[str, Any] = {"kind": self.kind.value, "key": self.key}
        if self.text:
            data["text"] = self.text
        if self.html:
            data["html"] = self.html
        if self.label is not None:
            data["label"] = self.label
        if self.items:
            data["items"] = list(self.items)
        if self.options:
            data["options"] = [option.to_dict() for option in self.options]
        if self.headers is not None:
            data["headers"] = list(self.headers)
        if self.rows:
            data["rows"] = [list(row) for row in self.rows]
        if self.description is not None:
            data["description"] = self.description
        if self.variant is not None:
            data["variant"] = self.variant
        if self.secondary_text is not None:
            data["secondaryText"] = self.secondary_text
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        """
        Deserialize from a dict produced by `to_dict()`.

        Raises:
            ValueError: If `kind` is not a known SectionKind
        """
        headers = data.get("headers")
        return cls(
            kind=SectionKind(data["kind"]),
            key=data["key"],
            text=data.get("text", ""),
            html=data.get("html", ""),
            label=data.get("label"),
            items=tuple(data.get("items", ())),
            options=tuple(OptionItem.from_dict(o) for o in data.get("options", ())),
            headers=tuple(headers) if headers is not None else None,
            rows=tuple(tuple(row) for row in data.get("rows", ())),
            description=data.get("description"),
            variant=data.get("variant"),
            secondary_text=data.get("secondaryText"),
        )

    def __repr__(self) -> str:
        """Concise representation for debugging."""
        return f"Section({self.kind.value!r}, {self.key!r})"
