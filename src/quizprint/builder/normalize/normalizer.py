"""
Module: builder.normalize.normalizer

Purpose:
    Convert loosely-typed question records into NormalizedItems: an ordered
    list of typed Sections that the layout engine can measure, split and
    pack without knowing anything about work types.

Key Functions:
    - normalize_record(): One record -> NormalizedItem
    - normalize_records(): Many records, order preserved
    - extract_translation(): Translation text carried by a record

Key Classes:
    - PrintMode: problem / answer
    - NormalizeOptions: Option labels, blank width, translation deferral

Record Shape:
    {
        "workTypeId": "03",
        "quiz": {...} | "data": {...},      # optional wrapper
        "work03Data": {...},                 # optional per-type payload
        "chunkMeta": {...},                  # optional, from an earlier split
        "chunkIndex": 0, "totalChunks": 2    # legacy chunk position
    }
    The per-type payload is looked up as record["workNNData"], then
    quiz["workNNData"], then the quiz wrapper itself.

Error Handling:
    Never raises for record content. Missing fields degrade to empty
    sections; an unknown work type produces a diagnostic text section.

Dependencies:
    - builder.normalize.labels: Printed labels
    - builder.normalize.blanks: Fill-in-the-blank formatting
    - quizprint.core.models: Section, OptionItem, ChunkMeta, NormalizedItem

Used By:
    - builder.controller: First stage of the print pipeline
"""

from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from quizprint.core.models import ChunkMeta, NormalizedItem, OptionItem, Section

from .blanks import format_blanks_for_answer, format_blanks_for_problem
from .labels import (
    DEFAULT_MAX_BLANK_WIDTH,
    INSTRUCTIONS,
    OPTION_LABELS,
    work_type_title,
)

logger = logging.getLogger(__name__)

UNKNOWN_WORK_TYPE = "unknown"

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_MULTI_SPACE = re.compile(r"\s{2,}")
_CORRECT_MARKER = "(정답)"
_HIGHLIGHT_CLASS = "word-highlight"

# Grammar-error questions mark at most eight words
_MAX_MARKED_WORDS = 8


class PrintMode(str, Enum):
    """Rendering pass: questions only, or questions with answers."""

    PROBLEM = "problem"
    ANSWER = "answer"


@dataclass(frozen=True)
class NormalizeOptions:
    """
    Normalizer configuration (immutable).

    Attributes:
        option_labels: Glyphs used to label choices, in order
        max_blank_width: Longest underscore run for a fill-in blank
        defer_translation: Omit per-question translation sections (the
            composite bundle prints one trailing translation instead)
    """

    option_labels: tuple[str, ...] = OPTION_LABELS
    max_blank_width: int = DEFAULT_MAX_BLANK_WIDTH
    defer_translation: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not self.option_labels:
            raise ValueError("option_labels must not be empty")
        if self.max_blank_width < 1:
            raise ValueError(f"max_blank_width must be positive: {self.max_blank_width}")

    def label(self, index: Any) -> Optional[str]:
        """Label for a 0-based choice index, None when out of range."""
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self.option_labels):
            return self.option_labels[index]
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Record access helpers
# ─────────────────────────────────────────────────────────────────────────────


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _work_type_id(record: Mapping[str, Any]) -> str:
    raw = record.get("workTypeId")
    if isinstance(raw, int) and not isinstance(raw, bool):
        return f"{raw:02d}"
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return UNKNOWN_WORK_TYPE


def _quiz(record: Mapping[str, Any]) -> Mapping[str, Any]:
    return _mapping(record.get("quiz")) or _mapping(record.get("data"))


def _work_data(record: Mapping[str, Any], work_type_id: str) -> Mapping[str, Any]:
    """Per-type payload: record first, then the quiz wrapper, then the wrapper itself."""
    key = f"work{work_type_id}Data"
    quiz = _quiz(record)
    return _mapping(record.get(key)) or _mapping(quiz.get(key)) or quiz


def _chunk_meta(record: Mapping[str, Any]) -> Optional[ChunkMeta]:
    nested = record.get("chunkMeta")
    if isinstance(nested, Mapping):
        return ChunkMeta.from_dict(nested)
    return ChunkMeta.from_dict(record)


def _translation_of(*sources: Mapping[str, Any]) -> str:
    for source in sources:
        for key in ("translation", "translatedText"):
            value = source.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return ""


def extract_translation(record: Mapping[str, Any]) -> str:
    """
    Translation text carried by a record, or "" when it has none.

    Looks at the per-type payload first, then the quiz wrapper, then the
    record itself (`translation` or `translatedText`).
    """
    if not isinstance(record, Mapping):
        return ""
    work_type_id = _work_type_id(record)
    return _translation_of(_work_data(record, work_type_id), _quiz(record), record)


# ─────────────────────────────────────────────────────────────────────────────
# Normalization context
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class _Context:
    record: Mapping[str, Any]
    work_type_id: str
    mode: PrintMode
    options: NormalizeOptions
    chunk_meta: Optional[ChunkMeta]

    @property
    def answer_mode(self) -> bool:
        return self.mode is PrintMode.ANSWER

    @property
    def data(self) -> Mapping[str, Any]:
        return _work_data(self.record, self.work_type_id)

    @property
    def quiz(self) -> Mapping[str, Any]:
        return _quiz(self.record)

    def key(self, prefix: str, suffix: str = "") -> str:
        base = f"{prefix}-{self.work_type_id}"
        return f"{base}-{suffix}" if suffix else base

    def clean_option(self, value: Any) -> str:
        """Option text; answer mode strips the '(정답)' marker and doubled spaces."""
        text = _text(value)
        if self.answer_mode:
            return _MULTI_SPACE.sub(" ", text.replace(_CORRECT_MARKER, "")).strip()
        return text

    def is_correct(self, index: int) -> Optional[bool]:
        if not self.answer_mode:
            return None
        return self.data.get("answerIndex") == index

    def instruction(self) -> List[Section]:
        if self.chunk_meta is not None and not self.chunk_meta.show_instruction:
            return []
        text = INSTRUCTIONS.get(self.work_type_id)
        if not text:
            return []
        return [Section.instruction(self.key("instruction"), text)]

    def option_list(self, options: Sequence[OptionItem]) -> List[Section]:
        if self.chunk_meta is not None and not self.chunk_meta.show_options:
            return []
        return [Section.option_list(self.key("options"), options)]

    def answer(
        self,
        items: Sequence[str],
        description: Optional[str] = None,
        *,
        always: bool = False,
    ) -> List[Section]:
        if not self.answer_mode:
            return []
        if not always and self.chunk_meta is not None and not self.chunk_meta.show_answer:
            return []
        return [Section.answer_block(self.key("answer"), items, description)]

    def choice_answer(self) -> List[Section]:
        label = self.options.label(self.data.get("answerIndex")) or "-"
        return self.answer([f"정답: {label}"])

    def translation(self, text: Optional[str] = None) -> List[Section]:
        if not self.answer_mode or self.options.defer_translation:
            return []
        if self.chunk_meta is not None and not self.chunk_meta.show_translation:
            return []
        if text is None:
            text = _translation_of(self.data, self.quiz, self.record)
        if not text or not text.strip():
            return []
        return [Section.translation(self.key("translation"), text)]


def _labelled_options(ctx: _Context, raw_options: Any) -> List[OptionItem]:
    """
    Options from strings, word lists or {text|value|label} objects.

    Entries without text are dropped; labels fall back to the option
    glyph for the position.
    """
    options: List[OptionItem] = []
    for index, raw in enumerate(_sequence(raw_options)):
        label = ctx.options.label(index)
        if isinstance(raw, str):
            text = raw
        elif isinstance(raw, (list, tuple)):
            text = " ".join(_text(part) for part in raw)
        elif isinstance(raw, Mapping):
            text = _text(raw.get("text") or raw.get("value") or raw.get("label"))
            if raw.get("label") and (raw.get("text") or raw.get("value")):
                label = _text(raw["label"])
        elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
            text = str(raw)
        else:
            continue
        text = ctx.clean_option(text)
        if not text:
            continue
        options.append(OptionItem(label=label, text=text, is_correct=ctx.is_correct(index)))
    return options


def _highlight_replacements(text: str, replacements: Sequence[Any]) -> str:
    """
    Escape `text` and emphasise each replaced word inside its sentence.

    Replacement i belongs to sentence i; only that sentence is searched.
    """
    sentences = [s for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]
    result: List[str] = []
    for index, sentence in enumerate(sentences):
        escaped = html.escape(sentence, quote=False)
        replacement = _mapping(replacements[index]) if index < len(replacements) else {}
        word = _text(replacement.get("replacement")).strip()
        if word:
            pattern = re.compile(rf"\b{re.escape(html.escape(word, quote=False))}\b", re.IGNORECASE)
            escaped = pattern.sub(
                lambda m: f'<span class="{_HIGHLIGHT_CLASS}">{m.group(0)}</span>',
                escaped,
            )
        result.append(escaped)
    return " ".join(result)


# ─────────────────────────────────────────────────────────────────────────────
# Work type handlers
# ─────────────────────────────────────────────────────────────────────────────


def _paragraph_order(ctx: _Context) -> List[Section]:
    """01: shuffled paragraphs, orderings as choices."""
    sections = ctx.instruction()
    data = ctx.data

    for index, raw in enumerate(_sequence(data.get("shuffledParagraphs"))):
        if isinstance(raw, str):
            label, content = None, raw
        elif isinstance(raw, Mapping):
            label = _text(raw.get("label")) or None
            content = _text(raw.get("content") or raw.get("text"))
        else:
            continue
        if content.strip():
            sections.append(Section.paragraph(ctx.key("paragraph", str(index)), content, label=label))

    options = []
    for index, choice in enumerate(_sequence(data.get("choices"))):
        if isinstance(choice, (list, tuple)) and choice:
            text = " → ".join(_text(part) for part in choice)
        else:
            text = ctx.clean_option(choice)
        options.append(
            OptionItem(label=ctx.options.label(index), text=text, is_correct=ctx.is_correct(index))
        )
    sections += ctx.option_list(options)
    sections += ctx.choice_answer()

    # Paragraph-by-paragraph translations print as one paragraph
    translation = _translation_of(data, ctx.quiz, ctx.record)
    merged = " ".join(part.strip() for part in translation.split("\n\n") if part.strip())
    sections += ctx.translation(merged)
    return sections


def _replaced_words(ctx: _Context) -> List[Section]:
    """02: passage with replaced words highlighted, replacement table."""
    sections = ctx.instruction()
    data = ctx.data
    replacements = _sequence(data.get("replacements"))
    text = _text(data.get("modifiedText"))

    sections.append(
        Section.html_fragment(ctx.key("html", "passage"), _highlight_replacements(text, replacements))
    )

    if ctx.answer_mode and replacements:
        rows = []
        for raw in replacements:
            rep = _mapping(raw)
            rows.append(
                (
                    _text(rep.get("original")),
                    _text(rep.get("replacement")),
                    _text(rep.get("originalMeaning")),
                )
            )
        sections.append(
            Section.table(ctx.key("table", "replacements"), rows, headers=("원래 단어", "교체 단어", "의미"))
        )

    sections += ctx.translation()
    return sections


def _blank_choice(ctx: _Context) -> List[Section]:
    """03 / 04 / 05: blanked passage with word, phrase or sentence choices."""
    sections = ctx.instruction()
    data = ctx.data
    sections.append(Section.paragraph(ctx.key("paragraph", "blanked"), _text(data.get("blankedText"))))
    sections += ctx.option_list(_labelled_options(ctx, data.get("options")))
    sections += ctx.choice_answer()
    sections += ctx.translation()
    return sections


def _sentence_position(ctx: _Context) -> List[Section]:
    """06: missing sentence, numbered passage, position answer."""
    sections = ctx.instruction()
    data = ctx.data

    missing = _text(data.get("missingSentence"))
    if missing:
        sections.append(
            Section.paragraph(ctx.key("paragraph", "missing"), f"주요 문장: {missing}", variant="missing-sentence")
        )
    sections.append(
        Section.paragraph(
            ctx.key("paragraph", "passage"),
            _text(data.get("numberedPassage")),
            variant="numbered-passage",
        )
    )

    if ctx.answer_mode:
        candidates = (
            _mapping(ctx.record.get("work06Data")).get("answerIndex"),
            data.get("answerIndex"),
            _mapping(ctx.quiz.get("work06Data")).get("answerIndex"),
            ctx.quiz.get("answerIndex"),
        )
        answer_index = next(
            (c for c in candidates if isinstance(c, int) and not isinstance(c, bool)),
            None,
        )
        if answer_index is None:
            logger.warning("Work type 06 record has no answerIndex; answer omitted")
        else:
            label = ctx.options.label(answer_index) or "-"
            # The position answer prints under the passage on every chunk
            sections += ctx.answer([f"정답 : {label}"], always=True)

    sections += ctx.translation()
    return sections


def _inference(ctx: _Context) -> List[Section]:
    """07 / 08: main idea or title inference, choices with translations."""
    sections = ctx.instruction()
    data = ctx.data
    sections.append(Section.paragraph(ctx.key("paragraph", "passage"), _text(data.get("passage"))))

    options = _labelled_options(ctx, data.get("options"))
    if ctx.answer_mode:
        translation_lists = [
            _sequence(data.get(key))
            for key in ("optionTranslations", "optionTranslationsKo", "optionTranslationsEnKo")
        ]
        translated = []
        for index, option in enumerate(options):
            found = next(
                (_text(t[index]) for t in translation_lists if index < len(t) and t[index]),
                None,
            )
            translated.append(
                OptionItem(option.label, option.text, option.is_correct, found or None)
            )
        options = translated
    sections += ctx.option_list(options)
    sections += ctx.choice_answer()
    sections += ctx.translation()
    return sections


def _grammar_errors(ctx: _Context) -> List[Section]:
    """09 / 10: marked passage; 10 asks for the number of wrong words."""
    sections = ctx.instruction()
    data = ctx.data

    passage = _text(data.get("passage")).replace("\\n", "<br/>")
    sections.append(Section.html_fragment(ctx.key("html", "passage"), passage))

    raw_options = _sequence(data.get("options"))
    options = [
        OptionItem(
            label=ctx.options.label(index),
            text=ctx.clean_option(raw),
            is_correct=ctx.is_correct(index),
        )
        for index, raw in enumerate(raw_options)
    ]
    sections += ctx.option_list(options)

    if ctx.work_type_id == "09":
        sections += ctx.choice_answer()
    elif ctx.answer_mode:
        answer_index = data.get("answerIndex")
        chosen = (
            raw_options[answer_index]
            if isinstance(answer_index, int) and 0 <= answer_index < len(raw_options)
            else None
        )
        if isinstance(chosen, int) and not isinstance(chosen, bool):
            answer_text = f"{chosen}개"
        else:
            answer_text = ctx.clean_option(chosen) or "-"
        sections += ctx.answer([f"정답: {answer_text}"], _wrong_word_summary(ctx, data))

    sections += ctx.translation()
    return sections


def _wrong_word_summary(ctx: _Context, data: Mapping[str, Any]) -> Optional[str]:
    """'어법상 틀린 단어: ①orig → changed, ...' or None without complete data."""
    wrong = _sequence(data.get("wrongIndexes"))
    originals = _sequence(data.get("originalWords"))
    transformed = _sequence(data.get("transformedWords"))
    if not wrong or not originals or not transformed:
        return None

    entries = []
    for index in sorted(i for i in wrong if isinstance(i, int) and not isinstance(i, bool)):
        if not 0 <= index < _MAX_MARKED_WORDS:
            continue
        if index >= len(originals) or index >= len(transformed):
            continue
        if not originals[index] or not transformed[index]:
            continue
        label = ctx.options.label(index) or f"({index + 1})"
        entries.append(f"{label}{originals[index]} → {transformed[index]}")

    if not entries:
        return None
    return f"어법상 틀린 단어: {', '.join(entries)}"


def _sentence_translation(ctx: _Context) -> List[Section]:
    """11: one labelled paragraph per sentence, Korean inline in answer mode."""
    record_data = _mapping(ctx.record.get("work11Data"))
    quiz = ctx.quiz
    data = (
        record_data
        or _mapping(quiz.get("work11Data"))
        or _mapping(_mapping(quiz.get("data")).get("work11Data"))
        or quiz
    )
    sections = ctx.instruction()

    sentences = _sequence(data.get("sentences"))
    translations = _sequence(data.get("translations"))

    emitted = 0
    for index, sentence in enumerate(sentences):
        if isinstance(sentence, Mapping):
            english = _text(sentence.get("english") or sentence.get("text"))
            korean = _text(sentence.get("korean") or sentence.get("translation"))
            label = _text(sentence.get("label")) or f"문장 {index + 1} : "
        else:
            english = _text(sentence)
            korean = _text(translations[index]) if index < len(translations) else ""
            label = f"문장 {index + 1} : "

        if not english.strip():
            logger.debug(f"Work type 11 sentence {index + 1} is empty; skipped")
            continue

        if ctx.answer_mode:
            sections.append(
                Section.paragraph(
                    ctx.key("paragraph", f"{index}-combined"),
                    english,
                    label=label,
                    variant="sentence-with-translation",
                    secondary_text=korean if korean.strip() else None,
                )
            )
        else:
            sections.append(
                Section.paragraph(ctx.key("paragraph", str(index)), english, label=label, variant="sentence")
            )
        emitted += 1

    if emitted == 0:
        logger.warning("Work type 11 record has no sentences")
        sections.append(
            Section.paragraph(ctx.key("paragraph", "empty"), "(문장 데이터가 없습니다.)", variant="sentence")
        )
    return sections


def _word_study(ctx: _Context) -> List[Section]:
    """12: passage, word list in answer mode."""
    sections = ctx.instruction()
    data = ctx.data
    sections.append(Section.paragraph(ctx.key("paragraph", "passage"), _text(data.get("passage"))))

    if ctx.answer_mode and isinstance(data.get("words"), (list, tuple)):
        items = []
        for raw in data["words"]:
            word = _mapping(raw)
            items.append(f"{_text(word.get('word'))}: {_text(word.get('meaning'))}".strip())
        sections.append(Section.item_list(ctx.key("list", "words"), items, variant="word-list"))
    return sections


def _fill_in_blank(ctx: _Context) -> List[Section]:
    """13 / 14: free-response blanks sized to their answers."""
    sections = ctx.instruction()
    data = ctx.data
    blanked = _text(data.get("blankedText"))
    answers = [_text(a) for a in _sequence(data.get("correctAnswers"))]

    if not blanked:
        logger.warning(f"Work type {ctx.work_type_id} record has no blankedText")

    if ctx.answer_mode and answers:
        sections.append(
            Section.html_fragment(ctx.key("html", "blanked"), format_blanks_for_answer(blanked, answers))
        )
    elif answers:
        sections.append(
            Section.paragraph(
                ctx.key("paragraph", "blanked"),
                format_blanks_for_problem(blanked, answers, ctx.options.max_blank_width),
            )
        )
    else:
        sections.append(Section.paragraph(ctx.key("paragraph", "blanked"), blanked))

    if answers:
        sections += ctx.answer([f"{index}. {answer}" for index, answer in enumerate(answers, 1)])
    sections += ctx.translation()
    return sections


_HANDLERS: dict[str, Callable[[_Context], List[Section]]] = {
    "01": _paragraph_order,
    "02": _replaced_words,
    "03": _blank_choice,
    "04": _blank_choice,
    "05": _blank_choice,
    "06": _sentence_position,
    "07": _inference,
    "08": _inference,
    "09": _grammar_errors,
    "10": _grammar_errors,
    "11": _sentence_translation,
    "12": _word_study,
    "13": _fill_in_blank,
    "14": _fill_in_blank,
}

SUPPORTED_WORK_TYPES: tuple[str, ...] = tuple(sorted(_HANDLERS))


def _diagnostic(ctx: _Context) -> List[Section]:
    dump = json.dumps(ctx.record, ensure_ascii=False, indent=2, default=str)
    return [Section.plain_text(f"unknown-{ctx.work_type_id}", dump, variant="diagnostic")]


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────


def normalize_record(
    record: Mapping[str, Any],
    mode: PrintMode | str,
    options: Optional[NormalizeOptions] = None,
) -> NormalizedItem:
    """
    Normalize one question record.

    Args:
        record: Raw question record (see module docstring for the shape)
        mode: PrintMode or its string value ("problem" / "answer")
        options: Normalizer options (defaults when None)

    Returns:
        NormalizedItem whose first section is the title

    Raises:
        ValueError: If `mode` is not a known PrintMode

    Example:
        >>> item = normalize_record({"workTypeId": "03", "quiz": {...}}, "problem")
        >>> [s.kind.value for s in item.sections]
        ['title', 'instruction', 'paragraph', 'option-list']
    """
    mode = PrintMode(mode)
    options = options or NormalizeOptions()
    source: Mapping[str, Any] = record if isinstance(record, Mapping) else {"record": record}

    work_type_id = _work_type_id(source)
    ctx = _Context(
        record=source,
        work_type_id=work_type_id,
        mode=mode,
        options=options,
        chunk_meta=_chunk_meta(source),
    )

    handler = _HANDLERS.get(work_type_id)
    if handler is None:
        logger.warning(f"Unknown work type {work_type_id!r}; emitting diagnostic section")
        handler = _diagnostic

    title = Section.title(ctx.key("title"), work_type_title(work_type_id))
    sections = (title, *handler(ctx))

    logger.debug(f"Normalized work type {work_type_id} ({mode.value}): {len(sections)} sections")

    return NormalizedItem(
        work_type_id=work_type_id,
        sections=sections,
        chunk_meta=ctx.chunk_meta,
        source=source,
    )


def normalize_records(
    records: Iterable[Mapping[str, Any]],
    mode: PrintMode | str,
    options: Optional[NormalizeOptions] = None,
) -> List[NormalizedItem]:
    """Normalize records in order. See normalize_record()."""
    items = [normalize_record(record, mode, options) for record in records]
    logger.info(f"Normalized {len(items)} records ({PrintMode(mode).value} mode)")
    return items
