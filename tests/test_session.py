"""Tests for TranscriptSession event handling.

WHY: The session is where ordering matters. A time update must never see
a half-built list, a superseded segmentation must never overwrite a
newer one, and the consumer must only hear about real changes.

HOW: Tests are organized by handler:
  - TestWordsChanged: commit, cache reuse, failure reporting
  - TestStaleResults: overlapping words_changed calls and close()
  - TestTimeChanged: change-only active index events
  - TestSeek: seek requests from timestamps and segment clicks
  - TestSearch: delegation to search_segments

RULES:
- Async handlers are driven with asyncio.run() inside plain sync tests
- Callbacks are plain lists' append methods or MagicMocks
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

from meeting_companion.core.guard import TRANSCRIPT_FAILED_MESSAGE
from meeting_companion.core.ir import Segment
from meeting_companion.core.session import TranscriptSession
from meeting_companion.core.sync import NO_ACTIVE_SEGMENT


def _recording_session(**kwargs):
    """Session whose callbacks append to lists in the returned dict."""
    events = {"segments": [], "active": [], "seek": [], "error": []}
    session = TranscriptSession(
        on_segments_ready=events["segments"].append,
        on_active_segment_changed=events["active"].append,
        on_seek_requested=events["seek"].append,
        on_error=events["error"].append,
        **kwargs,
    )
    return session, events


class TestWordsChanged:
    """words_changed() segments, commits and notifies."""

    def test_commits_segments(self, two_segment_words):
        session, events = _recording_session()

        result = asyncio.run(session.words_changed(two_segment_words))

        assert result == [
            Segment(text="Hello world.", start_time="00:00:00"),
            Segment(text="Next topic.", start_time="00:00:05"),
        ]
        assert session.segments is result
        assert events["segments"] == [result]
        assert session.fingerprint is not None
        assert session.error is None

    def test_commit_syncs_to_last_known_time(self, two_segment_words):
        session, events = _recording_session()
        session.time_changed(5.5)

        asyncio.run(session.words_changed(two_segment_words))

        assert session.active_index == 1
        assert session.active_segment.text == "Next topic."
        assert events["active"] == [1]

    def test_unchanged_words_reuse_list_without_events(self, two_segment_words):
        session, events = _recording_session()

        async def _run():
            first = await session.words_changed(two_segment_words)
            second = await session.words_changed([dict(w) for w in two_segment_words])
            return first, second

        first, second = asyncio.run(_run())

        assert second is first
        assert len(events["segments"]) == 1
        assert session.guard.hits == 1
        assert session.guard.misses == 1

    def test_unsorted_words_are_sorted(self, two_segment_words):
        session, _ = _recording_session()
        result = asyncio.run(session.words_changed(list(reversed(two_segment_words))))
        assert [s.text for s in result] == ["Hello world.", "Next topic."]

    def test_empty_words_commit_empty_list(self):
        session, events = _recording_session()
        assert asyncio.run(session.words_changed([])) == []
        assert events["error"] == []
        assert session.active_index == NO_ACTIVE_SEGMENT

    def test_malformed_words_report_error(self, two_segment_words):
        session, events = _recording_session()
        bad = [{"text": "x", "start": "soon", "end": 1.0}]

        async def _run():
            await session.words_changed(two_segment_words)
            return await session.words_changed(bad)

        result = asyncio.run(_run())

        assert result == []
        assert session.segments == []
        assert session.error == TRANSCRIPT_FAILED_MESSAGE
        assert events["error"] == [TRANSCRIPT_FAILED_MESSAGE]
        assert session.active_index == NO_ACTIVE_SEGMENT

    def test_segmenter_exception_reports_error(self, two_segment_words):
        session, events = _recording_session()
        session.guard._segmenter = MagicMock(side_effect=RuntimeError("boom"))

        result = asyncio.run(session.words_changed(two_segment_words))

        assert result == []
        assert events["error"] == [TRANSCRIPT_FAILED_MESSAGE]
        assert events["segments"] == []

    def test_retry_after_failure(self, two_segment_words):
        session, events = _recording_session()
        session.guard._segmenter = MagicMock(side_effect=RuntimeError("boom"))
        asyncio.run(session.words_changed(two_segment_words))

        session.guard._segmenter = MagicMock(return_value=[Segment("ok", "00:00:00")])
        result = asyncio.run(session.words_changed(two_segment_words))

        assert [s.text for s in result] == ["ok"]
        assert session.error is None

    def test_missing_word_sequence_reports_error(self):
        session, events = _recording_session()

        assert asyncio.run(session.words_changed(None)) == []
        assert session.error == TRANSCRIPT_FAILED_MESSAGE
        assert events["error"] == [TRANSCRIPT_FAILED_MESSAGE]
        assert events["segments"] == []

    def test_malformed_generator_reports_error_without_raising(self):
        """A one-shot iterable has no len(); the failure path must not need one."""
        session, events = _recording_session()
        words = (w for w in [{"text": "x", "start": "soon", "end": 1.0}])

        assert asyncio.run(session.words_changed(words)) == []
        assert events["error"] == [TRANSCRIPT_FAILED_MESSAGE]

    def test_segmentation_goes_through_guard(self, two_segment_words):
        session, _ = _recording_session()
        session.guard._segmenter = MagicMock(side_effect=RuntimeError("boom"))

        asyncio.run(session.words_changed(two_segment_words))

        assert session.guard.misses == 1
        assert session.guard.last_error == TRANSCRIPT_FAILED_MESSAGE
        assert session.guard.cached_segments is None

    def test_callback_exception_does_not_escape(self, two_segment_words):
        session = TranscriptSession(on_segments_ready=MagicMock(side_effect=ValueError("ui")))
        result = asyncio.run(session.words_changed(two_segment_words))
        assert len(result) == 2
        assert session.segments is result

    def test_pause_threshold_is_per_session(self, two_segment_words):
        session = TranscriptSession(pause_threshold_s=10.0)
        result = asyncio.run(session.words_changed(two_segment_words))
        assert len(result) == 1


class TestStaleResults:
    """Only the newest words_changed call may commit."""

    def test_superseded_call_is_discarded(self, two_segment_words, standup_words):
        session, events = _recording_session()

        async def _run():
            first = asyncio.ensure_future(session.words_changed(two_segment_words))
            second = asyncio.ensure_future(session.words_changed(standup_words))
            return await asyncio.gather(first, second)

        first, second = asyncio.run(_run())

        assert first is None
        assert len(second) == 3
        assert session.segments is second
        assert events["segments"] == [second]
        assert session.generation == 2

    def test_time_update_sees_old_list_while_pending(self, two_segment_words, standup_words):
        session, _ = _recording_session()

        async def _run():
            old = await session.words_changed(two_segment_words)
            pending = asyncio.ensure_future(session.words_changed(standup_words))
            await asyncio.sleep(0)
            observed = session.segments
            index = session.time_changed(5.5)
            new = await pending
            return old, observed, index, new

        old, observed, index, new = asyncio.run(_run())

        assert observed is old
        assert index == 1
        assert session.segments is new
        # 5.5s falls in the first standup paragraph (starts at 1s).
        assert session.active_index == 0

    def test_close_discards_in_flight_result(self, two_segment_words):
        session, events = _recording_session()

        async def _run():
            pending = asyncio.ensure_future(session.words_changed(two_segment_words))
            await asyncio.sleep(0)
            session.close()
            return await pending

        assert asyncio.run(_run()) is None
        assert session.segments == []
        assert events["segments"] == []
        assert session.fingerprint is None


class TestTimeChanged:
    """time_changed() notifies only when the active index changes."""

    def test_change_only_events(self, two_segment_words):
        session, events = _recording_session()
        asyncio.run(session.words_changed(two_segment_words))
        assert events["active"] == [0]

        for t in (0.1, 0.5, 1.0, 4.9):
            assert session.time_changed(t) == 0
        assert events["active"] == [0]

        assert session.time_changed(5.0) == 1
        assert session.time_changed(5.2) == 1
        assert events["active"] == [0, 1]

    def test_negative_time_has_no_active(self, two_segment_words):
        session, events = _recording_session()
        asyncio.run(session.words_changed(two_segment_words))

        assert session.time_changed(-1) == NO_ACTIVE_SEGMENT
        assert session.active_segment is None
        assert events["active"] == [0, NO_ACTIVE_SEGMENT]

    def test_clock_string_time(self, two_segment_words):
        session, _ = _recording_session()
        asyncio.run(session.words_changed(two_segment_words))
        assert session.time_changed("00:00:05") == 1
        assert session.current_time_s == 5.0

    def test_no_segments_no_events(self):
        session, events = _recording_session()
        assert session.time_changed(12.0) == NO_ACTIVE_SEGMENT
        assert events["active"] == []

    def test_recommit_without_covering_segment_reports_drop(self):
        session, events = _recording_session()

        async def _run():
            await session.words_changed([{"text": "a", "start": 5.0, "end": 5.2}])
            session.time_changed(10)
            await session.words_changed([{"text": "b", "start": 20.0, "end": 20.2}])

        asyncio.run(_run())

        assert session.active_index == NO_ACTIVE_SEGMENT
        assert events["active"] == [0, NO_ACTIVE_SEGMENT]

    def test_failure_after_active_index_reports_drop(self, two_segment_words):
        session, events = _recording_session()

        async def _run():
            await session.words_changed(two_segment_words)
            await session.words_changed(None)

        asyncio.run(_run())

        assert events["active"] == [0, NO_ACTIVE_SEGMENT]


class TestSeek:
    """Seek requests go to the player through on_seek_requested."""

    def test_seek_to_segment(self, two_segment_words):
        session, events = _recording_session()
        asyncio.run(session.words_changed(two_segment_words))

        assert session.seek_to_segment(1) == 5.0
        assert events["seek"] == [5.0]

    def test_seek_out_of_range_is_ignored(self, two_segment_words):
        session, events = _recording_session()
        asyncio.run(session.words_changed(two_segment_words))

        assert session.seek_to_segment(7) is None
        assert session.seek_to_segment(-1) is None
        assert events["seek"] == []

    def test_request_seek_accepts_time_like(self):
        session, events = _recording_session()
        assert session.request_seek("01:05") == 65.0
        assert session.request_seek(12) == 12.0
        assert session.request_seek("bogus") == 0.0
        assert events["seek"] == [65.0, 12.0, 0.0]

    def test_seek_does_not_move_clock(self, two_segment_words):
        session, _ = _recording_session()
        asyncio.run(session.words_changed(two_segment_words))
        session.seek_to_segment(1)
        assert session.current_time_s == 0.0
        assert session.active_index == 0


class TestSearch:

    def test_search_returns_full_list_indices(self, standup_words):
        session, _ = _recording_session()
        asyncio.run(session.words_changed(standup_words))
        hits = session.search("RELEASE")
        assert [i for i, _ in hits] == [1]
