"""
End-to-end layout scenarios: records in, pages out.
"""

import pytest

from quizprint.builder import LayoutConfig, PrintMode, build_layout
from quizprint.builder.layout import estimate_item_height, estimate_section_height
from quizprint.builder.normalize import normalize_record
from quizprint.core.models import SectionKind

K = SectionKind


@pytest.fixture
def config() -> LayoutConfig:
    return LayoutConfig()


def _inference_record(lines):
    return {
        "workTypeId": "07",
        "work07Data": {
            "passage": "x" * (62 * lines),
            "options": ["Reading helps", "Sleep matters", "Sports are fun", "Food is good"],
            "answerIndex": 0,
        },
    }


class TestScenarios:
    """Single-question, two-question and split-question layouts."""

    def test_short_question_fills_left_column_of_one_page(self, config, blank_choice_record):
        """One short question: one chunk, one page, left column."""
        # Act
        layout = build_layout([blank_choice_record], PrintMode.PROBLEM, config)

        # Assert
        assert layout.page_count == 1
        assert layout.total_chunks == 1
        page = layout.pages[0]
        assert len(page.left.items) == 1
        assert page.right.is_empty
        assert not page.is_empty

    def test_two_questions_too_tall_together_share_a_page(self, config):
        """Each question fits a column, both together do not: one per column."""
        # Arrange
        records = [_inference_record(21), _inference_record(21)]
        items = [normalize_record(r, PrintMode.PROBLEM) for r in records]
        heights = [estimate_item_height(i, config) for i in items]
        assert all(h <= config.column_capacity for h in heights)
        assert sum(heights) > config.column_capacity

        # Act
        layout = build_layout(records, PrintMode.PROBLEM, config)

        # Assert
        assert layout.page_count == 1
        assert len(layout.pages[0].left.items) == 1
        assert len(layout.pages[0].right.items) == 1

    def test_tall_body_splits_into_body_and_translation_chunks(self, config):
        """A body 1.5x the column leaves only the translation for the second chunk."""
        # Arrange
        record = {
            "workTypeId": "02",
            "work02Data": {"modifiedText": "x" * (62 * 69), "translation": "긴 본문의 해석입니다."},
        }
        body = normalize_record(record, PrintMode.ANSWER).sections[2]
        assert estimate_section_height(body, config) >= 1.5 * config.column_capacity

        # Act
        layout = build_layout([record], PrintMode.ANSWER, config)

        # Assert
        chunks = list(layout.iter_items())
        assert len(chunks) == 2
        assert [s.kind for s in chunks[0].sections] == [K.TITLE, K.INSTRUCTION, K.HTML]
        assert [s.kind for s in chunks[1].sections] == [K.TITLE, K.TRANSLATION]
        assert layout.pages[0].left.items == (chunks[0],)
        assert layout.pages[0].right.items == (chunks[1],)
        assert len(layout.warnings) == 1

    def test_fill_in_blank_problem_and_answer(self):
        """'I (_____) school.' with 'like': four underscores, then the word itself."""
        record = {
            "workTypeId": "13",
            "work13Data": {"blankedText": "I (_____) school.", "correctAnswers": ["like"]},
        }

        problem = normalize_record(record, PrintMode.PROBLEM)
        answer = normalize_record(record, PrintMode.ANSWER)

        assert problem.sections[2].text == "I ( ____ ) school."
        assert problem.sections[2].text.count("_") == 4
        assert answer.sections[2].kind is K.HTML
        assert '<ins class="blank-answer">like</ins>' in answer.sections[2].html
