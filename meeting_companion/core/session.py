"""Per-transcript state and the two event handlers that drive the core.

WHY: Two independent event sources feed the core: the word sequence
(arriving or being replaced when a file is transcribed) and the playback
clock (ticking many times per second). Each must trigger only its own
recomputation, and a time update must never see a half-built segment
list. Making both handlers explicit methods keeps ordering and
cancellation testable instead of leaving them to a UI framework.

HOW: TranscriptSession owns the committed segment list, its SyncIndex,
the ActiveSegmentTracker and a ReprocessGuard. words_changed() is a
coroutine: it fingerprints the sorted words, reuses the cached list on a
match, and otherwise yields to the event loop once before segmenting.
A monotonically increasing generation counter detects when a newer call
has superseded it; a superseded result is dropped. Committing is a single
reference swap followed by rebuilding the index. time_changed() is
synchronous and only reads committed state.

RULES:
- Single-threaded asyncio; no locks, every handler finishes its
  mutation before yielding
- A time update during pending segmentation observes the old list
- Stale results are discarded (debug log), never committed
- on_active_segment_changed fires only when the index actually changes
- Segmentation failure commits [] and reports TRANSCRIPT_FAILED_MESSAGE
  through on_error; it never raises
- Callback exceptions are logged and swallowed at the callback boundary
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable, Iterable, List, Optional, Tuple

from meeting_companion.config import PAUSE_THRESHOLD_S
from meeting_companion.core.guard import (
    TRANSCRIPT_FAILED_MESSAGE,
    ReprocessGuard,
    fingerprint_words,
)
from meeting_companion.core.ir import Segment
from meeting_companion.core.search import search_segments
from meeting_companion.core.segmenter import WordInput, segment_words, sort_words
from meeting_companion.core.sync import NO_ACTIVE_SEGMENT, ActiveSegmentTracker, SyncIndex
from meeting_companion.core.timecode import to_seconds

logger = logging.getLogger(__name__)

SegmentsCallback = Callable[[List[Segment]], None]
IndexCallback = Callable[[int], None]
SeekCallback = Callable[[float], None]
ErrorCallback = Callable[[str], None]


class TranscriptSession:
    """Segment list, sync state and fingerprint cache for one transcript.

    Args:
        on_segments_ready: Called with the new list after each commit.
        on_active_segment_changed: Called with the new active index, only
            when it differs from the previous one.
        on_seek_requested: Called with target seconds when a consumer asks
            to seek; the player owns actually moving the clock.
        on_error: Called with a user-facing message when segmentation fails.
        pause_threshold_s: Silence gap that splits segments.
    """

    def __init__(
        self,
        on_segments_ready: Optional[SegmentsCallback] = None,
        on_active_segment_changed: Optional[IndexCallback] = None,
        on_seek_requested: Optional[SeekCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        pause_threshold_s: float = PAUSE_THRESHOLD_S,
    ) -> None:
        self.on_segments_ready = on_segments_ready
        self.on_active_segment_changed = on_active_segment_changed
        self.on_seek_requested = on_seek_requested
        self.on_error = on_error

        self._guard = ReprocessGuard(functools.partial(
            segment_words, pause_threshold_s=pause_threshold_s,
        ))
        self._segments: List[Segment] = []
        self._index = SyncIndex([])
        self._tracker = ActiveSegmentTracker()
        self._generation = 0
        self._current_time_s = 0.0
        self.error: Optional[str] = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def segments(self) -> List[Segment]:
        """The committed segment list (same object until the next commit)."""
        return self._segments

    @property
    def active_index(self) -> int:
        return self._tracker.index

    @property
    def active_segment(self) -> Optional[Segment]:
        index = self._tracker.index
        if index == NO_ACTIVE_SEGMENT:
            return None
        return self._segments[index]

    @property
    def current_time_s(self) -> float:
        return self._current_time_s

    @property
    def fingerprint(self) -> Optional[str]:
        return self._guard.last_fingerprint

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def guard(self) -> ReprocessGuard:
        return self._guard

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    async def words_changed(self, words: Optional[Iterable[WordInput]]) -> Optional[List[Segment]]:
        """Handle arrival or replacement of the full word sequence.

        Returns:
            The committed segment list, [] after a failure, or None when
            a newer call superseded this one.
        """
        self._generation += 1
        generation = self._generation

        if words is None:
            logger.warning("No word sequence to segment")
            self._fail()
            return []

        try:
            ordered = sort_words(words)
            fingerprint = fingerprint_words(ordered)
        except Exception:
            logger.exception("Could not prepare words for segmentation")
            self._fail()
            return []

        cached = self._guard.lookup(fingerprint)
        if cached is not None:
            if cached is not self._segments:
                self._commit(cached)
            return cached

        # Let pending time updates run against the old list.
        await asyncio.sleep(0)
        if generation != self._generation:
            logger.debug("Discarding stale segmentation (generation %d)", generation)
            return None

        segments = self._guard.segment_fingerprinted(fingerprint, ordered)
        if self._guard.last_error:
            self._fail()
            return []

        self._commit(segments)
        return segments

    def time_changed(self, current_time: Any) -> int:
        """Handle a playback time update and return the active index.

        The consumer is notified only if the index changed.
        """
        if isinstance(current_time, (int, float)) and not isinstance(current_time, bool):
            t = float(current_time)
        else:
            t = to_seconds(current_time)
        self._current_time_s = t
        self._sync()
        return self._tracker.index

    def request_seek(self, value: Any) -> float:
        """Ask the player to seek to a time-like value (seconds or clock)."""
        seconds = to_seconds(value)
        self._emit(self.on_seek_requested, seconds)
        return seconds

    def seek_to_segment(self, index: int) -> Optional[float]:
        """Request a seek to a segment's start, as when its timestamp is clicked."""
        if not 0 <= index < len(self._segments):
            logger.warning(
                "Ignoring seek to segment %d (have %d)", index, len(self._segments),
            )
            return None
        return self.request_seek(self._segments[index].start_time)

    def search(self, query: Optional[str]) -> List[Tuple[int, Segment]]:
        return search_segments(self._segments, query)

    def close(self) -> None:
        """Tear down; any in-flight words_changed result will be discarded."""
        self._generation += 1
        self._guard.clear()
        self._segments = []
        self._index = SyncIndex([])
        self._sync()
        self.error = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    # Swaps keep the tracker: the new index is compared with the last one
    # reported, including a drop to NO_ACTIVE_SEGMENT.
    def _commit(self, segments: List[Segment]) -> None:
        self._segments = segments
        self._index = SyncIndex(segments)
        self.error = None
        logger.debug("Committed %d segments", len(segments))
        self._emit(self.on_segments_ready, segments)
        self._sync()

    def _fail(self) -> None:
        self._segments = []
        self._index = SyncIndex([])
        self.error = TRANSCRIPT_FAILED_MESSAGE
        self._guard.last_error = TRANSCRIPT_FAILED_MESSAGE
        self._emit(self.on_error, TRANSCRIPT_FAILED_MESSAGE)
        self._sync()

    def _sync(self) -> None:
        index = self._index.find(self._current_time_s)
        if self._tracker.update(index):
            self._emit(self.on_active_segment_changed, index)

    @staticmethod
    def _emit(callback: Optional[Callable[..., None]], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Transcript session callback %r failed", callback)
