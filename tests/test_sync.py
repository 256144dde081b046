"""Tests for active-segment lookup and change tracking.

WHY: The playback clock ticks ten times a second. A wrong interval
boundary highlights the wrong paragraph; a missing change guard floods
the view with redundant scroll events.

HOW: SyncIndex is exercised at and around segment boundaries, with
duplicate and unsorted starts. ActiveSegmentTracker is checked for
change-only reporting.
"""

from __future__ import annotations

import pytest

from meeting_companion.core.ir import Segment
from meeting_companion.core.sync import (
    NO_ACTIVE_SEGMENT,
    ActiveSegmentTracker,
    SyncIndex,
    find_active_index,
)


def _segs(*starts):
    return [Segment(text="s{}".format(i), start_time=s) for i, s in enumerate(starts)]


class TestSyncIndex:
    """SyncIndex.find() maps a time to the half-open interval containing it."""

    @pytest.mark.parametrize("t, expected", [
        (9.999, 0),
        (10.0, 1),
        (25, 2),
        (-1, NO_ACTIVE_SEGMENT),
        (0.0, 0),
        (19.5, 1),
        (10_000, 2),
    ])
    def test_boundaries(self, three_segments, t, expected):
        assert SyncIndex(three_segments).find(t) == expected

    @pytest.mark.parametrize("t", [-5, 0, 12.5, 1e9])
    def test_empty_list_has_no_active(self, t):
        assert SyncIndex([]).find(t) == NO_ACTIVE_SEGMENT

    def test_before_first_start(self):
        index = SyncIndex(_segs("00:00:05", "00:00:10"))
        assert index.find(4.99) == NO_ACTIVE_SEGMENT

    def test_nan_has_no_active(self, three_segments):
        assert SyncIndex(three_segments).find(float("nan")) == NO_ACTIVE_SEGMENT

    def test_non_numeric_has_no_active(self, three_segments):
        assert SyncIndex(three_segments).find("later") == NO_ACTIVE_SEGMENT

    def test_monotonic_over_increasing_time(self, three_segments):
        index = SyncIndex(three_segments)
        results = [index.find(t / 10) for t in range(-20, 300)]
        assert results == sorted(results)

    def test_duplicate_starts_earliest_wins(self):
        index = SyncIndex(_segs("00:00:00", "00:00:10", "00:00:10", "00:00:20"))
        assert index.find(10.0) == 1
        assert index.find(15.0) == 1
        assert index.find(20.0) == 3

    def test_unsorted_starts_fall_back_to_scan(self):
        index = SyncIndex(_segs("00:00:10", "00:00:00", "00:00:20"))
        assert index.find(5.0) == 1
        assert index.find(25.0) == 2

    def test_starts_and_len(self, three_segments):
        index = SyncIndex(three_segments)
        assert len(index) == 3
        assert index.starts == [0.0, 10.0, 20.0]

    def test_find_active_index_wrapper(self, three_segments):
        assert find_active_index(three_segments, 12.0) == 1
        assert find_active_index([], 12.0) == NO_ACTIVE_SEGMENT


class TestActiveSegmentTracker:
    """update() reports a change only when the index differs."""

    def test_starts_with_no_active(self):
        assert ActiveSegmentTracker().index == NO_ACTIVE_SEGMENT

    def test_reports_changes_only(self):
        tracker = ActiveSegmentTracker()
        assert tracker.update(0) is True
        assert tracker.update(0) is False
        assert tracker.update(1) is True
        assert tracker.update(NO_ACTIVE_SEGMENT) is True
        assert tracker.update(NO_ACTIVE_SEGMENT) is False

    def test_initial_none_is_not_a_change(self):
        assert ActiveSegmentTracker().update(NO_ACTIVE_SEGMENT) is False

    def test_reset(self):
        tracker = ActiveSegmentTracker()
        tracker.update(2)
        tracker.reset()
        assert tracker.index == NO_ACTIVE_SEGMENT
        assert tracker.update(2) is True
