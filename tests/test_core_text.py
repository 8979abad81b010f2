"""Unit tests for description text normalisation."""

import pytest

from src.core.utils.text import remove_newlines, trim_whitespace


class TestTrimWhitespace:
    """Test trim_whitespace function."""

    def test_single_newlines_become_spaces(self):
        assert trim_whitespace("A crafted request\ncauses a panic.") == "A crafted request causes a panic."

    def test_paragraph_breaks_kept(self):
        assert trim_whitespace("First.\n\n\n\nSecond.") == "First.\n\nSecond."

    def test_spaces_and_tabs_collapse(self):
        assert trim_whitespace("  too   many\t\tspaces  ") == "too many spaces"

    def test_whitespace_around_paragraph_break(self):
        assert trim_whitespace("First.  \n\n  Second.") == "First.\n\nSecond."

    @pytest.mark.parametrize(
        "text",
        [
            "line one\nline two\n",
            "para one\n\n\npara two\n \n\tpara three",
            "  a \n b \n\n c  ",
            "x\n\ny\nz",
            "",
        ],
    )
    def test_idempotent(self, text):
        once = trim_whitespace(text)
        assert trim_whitespace(once) == once


class TestRemoveNewlines:
    def test_joins_lines(self):
        assert remove_newlines("  Panic in\nparser\n\n") == "Panic in parser"
