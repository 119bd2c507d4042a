"""
Unit tests for the chunk splitter.

Heights use the `unit_config` fixture: title 1, instruction 1, each
one-line paragraph 1, column capacity 10.
"""

import logging

import pytest

from quizprint.builder.layout.config import LayoutConfig
from quizprint.builder.layout.estimator import estimate_item_height, estimate_section_height
from quizprint.builder.layout.splitter import chunk_key, split_item, split_items
from quizprint.builder.normalize import PrintMode, normalize_record
from quizprint.core.models import NormalizedItem, OptionItem, Section, SectionKind


def _content(chunks):
    """Content sections of all chunks, minus cloned titles and instructions."""
    return [
        section
        for chunk in chunks
        for section in chunk.sections
        if section.kind not in (SectionKind.TITLE, SectionKind.INSTRUCTION)
    ]


def _item(*sections, work_type_id="03"):
    return NormalizedItem(
        work_type_id=work_type_id,
        sections=(Section.title(f"title-{work_type_id}", f"#{work_type_id}"), *sections),
    )


def _para(key, lines=1):
    return Section.paragraph(key, "x" * (62 * lines))


class TestChunkKey:
    """Tests for chunk_key()."""

    def test_when_plain_key_then_suffix_added(self):
        assert chunk_key("title-03", 1) == "title-03#chunk1"

    def test_when_already_suffixed_then_suffix_replaced(self):
        """Re-splitting a chunk yields the same keys, not nested suffixes."""
        assert chunk_key("title-03#chunk1", 0) == "title-03#chunk0"


class TestSplitItem:
    """Tests for split_item()."""

    def test_when_item_fits_then_single_chunk(self, unit_config, make_item):
        """A short question stays in one chunk with canonical metadata."""
        # Arrange
        item = make_item(lines=3)

        # Act
        chunks = split_item(item, unit_config)

        # Assert
        assert len(chunks) == 1
        assert chunks[0].chunk_meta.total_chunks == 1
        assert chunks[0].chunk_meta.show_answer is True
        assert chunks[0].title_section.key == "title-03#chunk0"
        assert chunks[0].content_sections == item.content_sections

    def test_when_item_too_tall_then_split_at_capacity(self, unit_config, make_item):
        """16 units of content split into 10 + 7 (title repeated)."""
        # Arrange
        item = make_item(lines=15)

        # Act
        chunks = split_item(item, unit_config)

        # Assert
        assert len(chunks) == 2
        assert len(chunks[0].content_sections) == 9
        assert len(chunks[1].content_sections) == 6
        assert [c.title_section.key for c in chunks] == ["title-03#chunk0", "title-03#chunk1"]
        assert [c.chunk_meta.chunk_index for c in chunks] == [0, 1]
        assert all(c.chunk_meta.total_chunks == 2 for c in chunks)

    def test_when_split_then_title_text_repeated(self, unit_config, make_item):
        """Every chunk opens with a copy of the title."""
        chunks = split_item(make_item(lines=25), unit_config)

        assert len(chunks) == 3
        assert {c.title_section.text for c in chunks} == {"#03"}

    def test_when_no_content_then_one_title_chunk(self, unit_config):
        """An item with zero content sections still yields one chunk."""
        chunks = split_item(_item(), unit_config)

        assert len(chunks) == 1
        assert [s.kind for s in chunks[0].sections] == [SectionKind.TITLE]

    def test_when_no_title_then_chunks_have_no_title(self, unit_config):
        """Items without a title are split without cloning anything."""
        item = NormalizedItem("03", tuple(_para(f"p{i}") for i in range(12)))

        chunks = split_item(item, unit_config)

        assert [len(c.sections) for c in chunks] == [10, 2]
        assert all(c.title_section is None for c in chunks)

    def test_when_split_then_instruction_only_on_first_chunk(self, unit_config):
        """Instructions are carried into the first chunk only."""
        # Arrange
        item = _item(
            Section.instruction("instruction-03", "고르세요"),
            *(_para(f"p{i}") for i in range(12)),
        )

        # Act
        chunks = split_item(item, unit_config)

        # Assert
        assert chunks[0].has_kind(SectionKind.INSTRUCTION)
        assert not any(c.has_kind(SectionKind.INSTRUCTION) for c in chunks[1:])
        assert chunks[0].chunk_meta.show_instruction is True

    def test_when_instruction_after_split_then_dropped(self, unit_config):
        """An instruction reached after the first chunk closed is dropped."""
        item = _item(
            *(_para(f"p{i}") for i in range(10)),
            Section.instruction("instruction-03", "고르세요"),
            _para("last"),
        )

        chunks = split_item(item, unit_config)

        assert len(chunks) == 2
        assert not chunks[1].has_kind(SectionKind.INSTRUCTION)
        assert [s.key for s in chunks[1].content_sections] == ["p9", "last"]

    def test_when_single_section_oversized_then_placed_and_isolated(self, unit_config, caplog):
        """An oversized section is kept, alone in its chunk, with a warning."""
        # Arrange
        item = _item(_para("small-1"), _para("huge", lines=12), _para("small-2"))

        # Act
        with caplog.at_level(logging.WARNING):
            chunks = split_item(item, unit_config)

        # Assert
        assert [[s.key for s in c.content_sections] for c in chunks] == [
            ["small-1"],
            ["huge"],
            ["small-2"],
        ]
        assert "huge" in caplog.text
        assert "overflows column" in caplog.text

    def test_when_body_oversized_then_title_and_instruction_stay_with_it(self, layout_config):
        """A long body in answer mode: [title, instruction, body] then [title, translation]."""
        # Arrange
        body = _para("paragraph-01-passage", lines=83)
        assert estimate_section_height(body, layout_config) >= 1.5 * layout_config.column_capacity
        item = _item(
            Section.instruction("instruction-01", "고르세요"),
            body,
            Section.translation("translation-01", "번역문입니다."),
            work_type_id="01",
        )

        # Act
        chunks = split_item(item, layout_config)

        # Assert
        assert len(chunks) == 2
        assert [s.kind for s in chunks[0].sections] == [
            SectionKind.TITLE,
            SectionKind.INSTRUCTION,
            SectionKind.PARAGRAPH,
        ]
        assert [s.kind for s in chunks[1].sections] == [SectionKind.TITLE, SectionKind.TRANSLATION]

    def test_item_padding_reduces_capacity(self, make_item):
        """Per-chunk padding is reserved before sections are placed."""
        config = LayoutConfig(
            column_capacity=10.0,
            item_padding=2.0,
            section_margin=0.0,
            title_height=1.0,
            paragraph_line_height=1.0,
        )

        chunks = split_item(make_item(lines=9), config)

        assert [len(c.content_sections) for c in chunks] == [7, 2]
        assert all(estimate_item_height(c, config) <= 10.0 for c in chunks)

    def test_when_chunk_split_again_then_same_result(self, unit_config, make_item):
        """Splitting a chunk that already fits is a no-op apart from metadata."""
        chunk = split_item(make_item(lines=15), unit_config)[0]

        again = split_item(chunk, unit_config)

        assert len(again) == 1
        assert again[0].sections == chunk.sections


class TestSplitterProperties:
    """Completeness and capacity over a range of item shapes."""

    SHAPES = [
        [1],
        [1] * 9,
        [1] * 30,
        [3, 4, 2, 5, 1],
        [12],
        [2, 12, 2, 12],
        [9, 9, 9],
    ]

    @pytest.mark.parametrize("shape", SHAPES)
    def test_completeness(self, unit_config, shape):
        """Concatenated chunk content reproduces the original content in order."""
        item = _item(*(_para(f"p{i}", lines=n) for i, n in enumerate(shape)))

        chunks = split_item(item, unit_config)

        assert _content(chunks) == list(item.content_sections)

    @pytest.mark.parametrize("shape", SHAPES)
    def test_capacity(self, unit_config, shape):
        """Chunks fit a column unless they hold a single oversized section."""
        item = _item(*(_para(f"p{i}", lines=n) for i, n in enumerate(shape)))

        chunks = split_item(item, unit_config)

        for chunk in chunks:
            height = estimate_item_height(chunk, unit_config)
            if height > unit_config.column_capacity:
                assert len(chunk.content_sections) == 1

    @pytest.mark.parametrize("shape", SHAPES)
    def test_chunk_meta_numbering(self, unit_config, shape):
        item = _item(*(_para(f"p{i}", lines=n) for i, n in enumerate(shape)))

        chunks = split_item(item, unit_config)

        total = len(chunks)
        assert [c.chunk_meta.chunk_index for c in chunks] == list(range(total))
        assert [c.chunk_meta.show_instruction for c in chunks] == [True] + [False] * (total - 1)
        assert [c.chunk_meta.show_answer for c in chunks] == [False] * (total - 1) + [True]


K = SectionKind


def _options():
    return Section.option_list("options-03", [OptionItem(None, "a")])


def _answer():
    return Section.answer_block("answer-03", ["정답: ③"])


def _translation(lines):
    return Section.translation("translation-03", "가" * (40 * lines))


def _assert_flags_match_kinds(chunks):
    for chunk in chunks:
        meta = chunk.chunk_meta
        assert meta.show_options or not chunk.has_kind(K.OPTIONS)
        assert meta.show_answer or not chunk.has_kind(K.ANSWER)
        assert meta.show_translation or not chunk.has_kind(K.TRANSLATION)


class TestLastChunkSections:
    """Options, answers and translations stay on the last chunk.

    Under `unit_config` a one-option list is 1.35 high, a one-line answer
    block 0.6, and a translation of n Korean lines n.
    """

    def test_when_translation_overflows_then_options_and_answer_move_with_it(self, unit_config):
        # Arrange
        item = _item(*(_para(f"p{i}") for i in range(6)), _options(), _answer(), _translation(2))

        # Act
        chunks = split_item(item, unit_config)

        # Assert
        assert [[s.kind for s in c.content_sections] for c in chunks] == [
            [K.PARAGRAPH] * 6,
            [K.OPTIONS, K.ANSWER, K.TRANSLATION],
        ]
        assert _content(chunks) == list(item.content_sections)
        _assert_flags_match_kinds(chunks)

    def test_when_options_overflow_then_body_chunk_closed(self, unit_config):
        item = _item(*(_para(f"p{i}") for i in range(9)), _options(), _answer(), _translation(1))

        chunks = split_item(item, unit_config)

        assert len(chunks) == 2
        assert [s.kind for s in chunks[1].content_sections] == [K.OPTIONS, K.ANSWER, K.TRANSLATION]
        _assert_flags_match_kinds(chunks)

    def test_when_only_trailing_sections_then_kept_together_with_warning(self, unit_config, caplog):
        """No body to leave behind: the group overflows one chunk instead."""
        item = _item(_options(), _translation(9))

        with caplog.at_level(logging.WARNING):
            chunks = split_item(item, unit_config)

        assert len(chunks) == 1
        assert [s.kind for s in chunks[0].content_sections] == [K.OPTIONS, K.TRANSLATION]
        assert "Trailing sections" in caplog.text

    def test_when_translation_oversized_then_not_followed_by_new_chunk(self, unit_config):
        item = _item(_para("p0"), _translation(12), _answer())

        chunks = split_item(item, unit_config)

        assert [[s.kind for s in c.content_sections] for c in chunks] == [
            [K.PARAGRAPH],
            [K.TRANSLATION, K.ANSWER],
        ]
        _assert_flags_match_kinds(chunks)

    def test_long_inference_question_keeps_choices_on_last_chunk(self, layout_config):
        """A long passage with choices and a long translation splits after the passage."""
        # Arrange
        record = {
            "workTypeId": "07",
            "work07Data": {
                "passage": "x" * (62 * 38),
                "options": ["Reading helps", "Sleep matters", "Sports are fun", "Food is good"],
                "answerIndex": 0,
                "translation": "가" * 400,
            },
        }
        item = normalize_record(record, PrintMode.ANSWER)

        # Act
        chunks = split_item(item, layout_config)

        # Assert
        assert [[s.kind for s in c.content_sections] for c in chunks] == [
            [K.INSTRUCTION, K.PARAGRAPH],
            [K.OPTIONS, K.ANSWER, K.TRANSLATION],
        ]
        _assert_flags_match_kinds(chunks)
        assert chunks[-1].chunk_meta.is_last

class TestSplitItems:
    """Tests for split_items()."""

    def test_order_is_preserved(self, unit_config, make_item):
        """Chunks of each item stay together and in input order."""
        items = [make_item("01", lines=15), make_item("02", lines=2), make_item("03", lines=15)]

        chunks = split_items(items, unit_config)

        assert [c.work_type_id for c in chunks] == ["01", "01", "02", "03", "03"]

    def test_when_empty_then_empty(self, unit_config):
        assert split_items([], unit_config) == []
