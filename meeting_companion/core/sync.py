"""Active-segment lookup for a continuously advancing playback clock.

WHY: While media plays, the player reports its position roughly every
100ms. Each report must map to "the segment being spoken now" so the
transcript can highlight and scroll to it. Highlight and scroll are
expensive for the consumer, so an unchanged result must not trigger them.

HOW: Each segment covers the half-open interval [start, next_start); the
last segment extends to +infinity. SyncIndex converts the start clocks to
seconds once per segment list and answers each lookup with a binary
search. ActiveSegmentTracker remembers the last index and reports whether
a new result is actually a change.

RULES:
- Result is a segment index or NO_ACTIVE_SEGMENT (-1)
- Times before the first start, NaN, and empty lists give NO_ACTIVE_SEGMENT
- When two segments share a start time, the earlier index wins
- For a fixed list, the index never decreases as time increases
- Consumers must only redraw when ActiveSegmentTracker.update() is True
"""

from __future__ import annotations

import math
from bisect import bisect_left, bisect_right
from typing import List, Sequence

from meeting_companion.core.ir import Segment
from meeting_companion.core.timecode import clock_to_seconds

NO_ACTIVE_SEGMENT = -1
"""Sentinel index meaning no segment covers the current time."""


class SyncIndex:
    """Precomputed start times for one committed segment list.

    RULES:
    - Built once per segment list, reused for every time update
    - Binary search when starts are non-decreasing, linear scan otherwise
    """

    def __init__(self, segments: Sequence[Segment]) -> None:
        self._starts: List[float] = [clock_to_seconds(s.start_time) for s in segments]
        self._sorted = all(
            a <= b for a, b in zip(self._starts, self._starts[1:])
        )

    def __len__(self) -> int:
        return len(self._starts)

    @property
    def starts(self) -> List[float]:
        return list(self._starts)

    def find(self, current_time_s: float) -> int:
        """Return the index of the segment active at current_time_s."""
        try:
            t = float(current_time_s)
        except (TypeError, ValueError):
            return NO_ACTIVE_SEGMENT
        if math.isnan(t) or not self._starts:
            return NO_ACTIVE_SEGMENT
        if self._sorted:
            return self._find_sorted(t)
        return self._find_linear(t)

    def _find_sorted(self, t: float) -> int:
        last = bisect_right(self._starts, t) - 1
        if last < 0:
            return NO_ACTIVE_SEGMENT
        # Duplicate starts: the first segment with that start wins.
        return bisect_left(self._starts, self._starts[last])

    def _find_linear(self, t: float) -> int:
        starts = self._starts
        for i, start in enumerate(starts):
            if t < start:
                continue
            # Skip over following segments that share this start.
            j = i + 1
            while j < len(starts) and starts[j] == start:
                j += 1
            end = starts[j] if j < len(starts) else math.inf
            if t < end:
                return i
        return NO_ACTIVE_SEGMENT


def find_active_index(segments: Sequence[Segment], current_time_s: float) -> int:
    """Find the active segment for a playback time.

    Convenience wrapper for one-off lookups; sessions keep a SyncIndex
    per committed list instead of rebuilding it on every tick.
    """
    return SyncIndex(segments).find(current_time_s)


class ActiveSegmentTracker:
    """Redundant-update guard around active-index transitions.

    WHY: The same index is computed many times per second while a segment
    is being spoken. Only a real transition may reach the consumer.
    """

    def __init__(self) -> None:
        self._index = NO_ACTIVE_SEGMENT

    @property
    def index(self) -> int:
        return self._index

    def update(self, index: int) -> bool:
        """Record index; return True only if it differs from the last one."""
        if index == self._index:
            return False
        self._index = index
        return True

    def reset(self) -> None:
        self._index = NO_ACTIVE_SEGMENT
