"""Tests for segment text cleanup.

WHY: Segment text is built by joining word tokens with spaces, and the
backend emits punctuation as separate tokens. Without cleanup, every
segment reads "Hello , world ." in the transcript view and in exports.

HOW: One class, parametrized over representative raw strings.

RULES:
- clean_text is pure; no fixtures needed
"""

import pytest

from meeting_companion.core.text import clean_text


class TestCleanText:
    """clean_text() collapses whitespace and attaches punctuation."""

    @pytest.mark.parametrize("raw, expected", [
        ("Hello ,  world .  Next", "Hello, world. Next"),
        ("  padded  ", "padded"),
        ("tab\tand\nnewline", "tab and newline"),
        ("Really ?Yes !", "Really? Yes!"),
        ("one,two", "one, two"),
        ("end.", "end."),
    ])
    def test_cleans_spacing(self, raw, expected):
        assert clean_text(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_input(self, raw):
        assert clean_text(raw) == ""

    @pytest.mark.parametrize("raw", [
        "Hello ,  world .  Next",
        "a.b,c!d?e",
        "  ,leading comma",
        "Trailing space before mark .",
    ])
    def test_idempotent(self, raw):
        once = clean_text(raw)
        assert clean_text(once) == once
