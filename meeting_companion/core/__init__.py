"""Segmentation and synchronization core.

WHY: The core is the stable heart of the package. Everything else
(formatters, HTTP service) consumes the segments and active indices it
produces. It holds no network or file I/O.

HOW: timecode.py converts between seconds and clock strings, text.py
cleans joined word text, segmenter.py groups words at long pauses,
sync.py finds the active segment, guard.py caches by fingerprint, and
session.py ties them into two event handlers.

RULES:
- IR dataclasses in ir.py are the contract; change with care
- Nothing in core raises past its public boundary on bad time input
- No module-level mutable state; sessions own their caches
"""

from meeting_companion.core.guard import (
    TRANSCRIPT_FAILED_MESSAGE,
    ReprocessGuard,
    fingerprint_words,
)
from meeting_companion.core.ir import Segment, Transcript, WordToken
from meeting_companion.core.segmenter import (
    SegmentationError,
    build_transcript,
    segment_words,
    sort_words,
)
from meeting_companion.core.session import TranscriptSession
from meeting_companion.core.sync import (
    NO_ACTIVE_SEGMENT,
    ActiveSegmentTracker,
    SyncIndex,
    find_active_index,
)

__all__ = [
    "NO_ACTIVE_SEGMENT",
    "TRANSCRIPT_FAILED_MESSAGE",
    "ActiveSegmentTracker",
    "ReprocessGuard",
    "Segment",
    "SegmentationError",
    "SyncIndex",
    "Transcript",
    "TranscriptSession",
    "WordToken",
    "build_transcript",
    "find_active_index",
    "fingerprint_words",
    "segment_words",
    "sort_words",
]
