"""Tests for transcript search."""

from meeting_companion.core.ir import Segment
from meeting_companion.core.search import search_segments

SEGMENTS = [
    Segment(text="Budget review for Q3.", start_time="00:00:00"),
    Segment(text="Hiring plan.", start_time="00:01:10"),
    Segment(text="Back to the budget.", start_time="00:05:00"),
]


def test_case_insensitive_substring():
    hits = search_segments(SEGMENTS, "BUDGET")
    assert [i for i, _ in hits] == [0, 2]
    assert hits[1][1] is SEGMENTS[2]


def test_no_match():
    assert search_segments(SEGMENTS, "marketing") == []


def test_blank_query_returns_everything():
    assert [i for i, _ in search_segments(SEGMENTS, "  ")] == [0, 1, 2]
    assert len(search_segments(SEGMENTS, None)) == 3


def test_query_is_trimmed():
    assert [i for i, _ in search_segments(SEGMENTS, " hiring ")] == [1]


def test_empty_segment_list():
    assert search_segments([], "budget") == []
