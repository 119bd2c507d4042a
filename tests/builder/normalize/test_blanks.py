"""
Unit tests for fill-in-the-blank formatting.
"""

import re

import pytest

from quizprint.builder.normalize.blanks import (
    ANSWER_INSERT_CLASS,
    count_blanks,
    format_blanks_for_answer,
    format_blanks_for_problem,
)

_UNDERSCORE_RUN = re.compile(r"_+")
_INSERTED = re.compile(r'<ins class="blank-answer">(.*?)</ins>')


class TestFormatBlanksForProblem:
    """Tests for format_blanks_for_problem()."""

    def test_when_single_blank_then_sized_to_answer(self):
        """'like' prints as a run of four underscores."""
        assert format_blanks_for_problem("I (_____) school.", ["like"]) == "I ( ____ ) school."

    def test_when_answer_longer_than_cap_then_capped(self):
        result = format_blanks_for_problem("A (___) word.", ["extraordinarily"], max_width=5)

        assert result == "A ( _____ ) word."

    def test_when_answer_empty_then_one_underscore(self):
        assert format_blanks_for_problem("A (___).", [""]) == "A ( _ )."

    def test_when_marker_labelled_then_recognised(self):
        """Markers may carry a capital letter label."""
        assert format_blanks_for_problem("He ( A ______ ) it.", ["ran"]) == "He ( ___ ) it."

    def test_when_more_markers_than_answers_then_rest_untouched(self):
        result = format_blanks_for_problem("(___) and (___)", ["cat"])

        assert result == "( ___ ) and (___)"

    def test_when_more_answers_than_markers_then_extra_ignored(self):
        assert format_blanks_for_problem("(___)", ["cat", "dog"]) == "( ___ )"

    def test_when_no_answers_then_text_unchanged(self):
        assert format_blanks_for_problem("I (_____) school.", []) == "I (_____) school."

    def test_when_max_width_invalid_then_raises(self):
        with pytest.raises(ValueError):
            format_blanks_for_problem("I (_____) school.", ["like"], max_width=0)


class TestFormatBlanksForAnswer:
    """Tests for format_blanks_for_answer()."""

    def test_when_single_blank_then_answer_inserted(self):
        """The answer replaces the marker as an inline insertion."""
        result = format_blanks_for_answer("I (_____) school.", ["like"])

        assert result == f'I ( <ins class="{ANSWER_INSERT_CLASS}">like</ins> ) school.'

    def test_text_and_answers_are_escaped(self):
        """Plain text is escaped so the fragment stays well formed."""
        result = format_blanks_for_answer("x < y (___) z", ["a & b"])

        assert result == 'x &lt; y ( <ins class="blank-answer">a &amp; b</ins> ) z'

    def test_when_answers_run_out_then_marker_kept(self):
        result = format_blanks_for_answer("(___) then (___)", ["first"])

        assert result.endswith(" then (___)")
        assert _INSERTED.findall(result) == ["first"]

    def test_when_empty_text_then_empty(self):
        assert format_blanks_for_answer("", ["x"]) == ""


class TestBlankRoundTrip:
    """n markers and n answers: problem run lengths and answer order."""

    CASES = [
        ("I (_____) school.", ["like"]),
        ("(___) is (_____) than (__).", ["Water", "thicker", "blood"]),
        ("She ( A ____ ) and ( B ____ ) daily.", ["reads", "writes"]),
        ("One (_) two (__________________________) three (___).", ["a", "b" * 30, "ccc"]),
    ]

    @pytest.mark.parametrize("text,answers", CASES)
    def test_problem_runs_match_answer_lengths(self, text, answers):
        result = format_blanks_for_problem(text, answers, max_width=20)

        runs = [len(run) for run in _UNDERSCORE_RUN.findall(result)]
        assert runs == [max(1, min(len(a), 20)) for a in answers]

    @pytest.mark.parametrize("text,answers", CASES)
    def test_answer_inserts_in_order(self, text, answers):
        result = format_blanks_for_answer(text, answers)

        assert _INSERTED.findall(result) == answers
        assert count_blanks(result) == 0

    @pytest.mark.parametrize("text,answers", CASES)
    def test_count_blanks(self, text, answers):
        assert count_blanks(text) == len(answers)
