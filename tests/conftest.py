import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import quizprint
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from quizprint.builder.layout.config import LayoutConfig
from quizprint.core.models import NormalizedItem, Section


# Common test fixtures
@pytest.fixture
def layout_config():
    """Default layout configuration."""
    return LayoutConfig()


@pytest.fixture
def unit_config():
    """Unit heights: title 1, one-line paragraph 1, column capacity 10."""
    return LayoutConfig(
        column_capacity=10.0,
        section_margin=0.0,
        title_height=1.0,
        instruction_height=1.0,
        paragraph_line_height=1.0,
        translation_line_height=1.0,
        translation_padding=0.0,
    )


@pytest.fixture
def make_item():
    """Factory for a normalized item: title plus `lines` single-line paragraphs.

    Under `unit_config` an item of `lines` paragraphs is `lines + 1` high.
    """

    def _make(work_type_id="03", lines=1, text="I like school."):
        sections = [Section.title(f"title-{work_type_id}", f"#{work_type_id}")]
        sections.extend(
            Section.paragraph(f"paragraph-{work_type_id}-{i}", text) for i in range(lines)
        )
        return NormalizedItem(work_type_id=work_type_id, sections=tuple(sections))

    return _make


@pytest.fixture
def blank_choice_record():
    """A complete work type 03 record."""
    return {
        "workTypeId": "03",
        "quiz": {
            "work03Data": {
                "blankedText": "Students (_____) to learn new things every day.",
                "options": ["like", "hate", "love", "avoid"],
                "answerIndex": 2,
                "translation": "학생들은 매일 새로운 것을 배우는 것을 좋아한다.",
            }
        },
    }
