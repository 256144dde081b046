"""Pause-based grouping of timestamped words into display segments.

WHY: A meeting transcript arrives as thousands of individual words. Readers
need paragraphs, and the player needs a seek target per paragraph. A long
silence is the most reliable paragraph boundary a backend gives us, so
segments are cut wherever the gap between two words exceeds a threshold.

HOW: A single left-to-right pass with an accumulating buffer. Each word is
checked against the immediately preceding input token; a gap larger than
the pause threshold flushes the buffer into a Segment whose start is the
first buffered word's start. Flushed text goes through clean_text, and an
empty result is dropped. build_transcript wraps the result in the
Transcript IR for formatters.

RULES:
- Input must be in non-decreasing start order; sort_words sorts defensively
- Tokens whose trimmed text is empty are skipped
- A pause counts only when previous end and current start are both > 0
  (0 and None both mean "not precisely known")
- The gap must be strictly greater than the threshold
- Segment start times are rendered with normalize_to_clock (HH:MM:SS)
- Empty input yields [], never an error
- Malformed tokens raise SegmentationError; callers at the boundary
  (ReprocessGuard, TranscriptSession) turn that into an empty result
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Union

from meeting_companion.config import PAUSE_THRESHOLD_S
from meeting_companion.core.ir import Segment, Transcript, WordToken
from meeting_companion.core.text import clean_text
from meeting_companion.core.timecode import normalize_to_clock

WordInput = Union[WordToken, dict]


class SegmentationError(ValueError):
    """Raised when a word token cannot be segmented.

    RULES:
    - message names the offending token position
    - never escapes ReprocessGuard.segment or TranscriptSession.words_changed
    """


def _as_token(word: Any, position: int) -> WordToken:
    if isinstance(word, WordToken):
        return word
    if isinstance(word, dict):
        return WordToken.from_dict(word)
    raise SegmentationError(
        "Word at position {} is not a token: {!r}".format(position, word)
    )


def _known_time(value: Any, position: int, name: str) -> float:
    """Return a token time as float, with None treated as 0.0."""
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SegmentationError(
            "Word at position {} has a non-numeric {} time: {!r}".format(
                position, name, value
            )
        )
    return float(value)


def _token_text(token: WordToken, position: int) -> str:
    if token.text is None:
        return ""
    if not isinstance(token.text, str):
        raise SegmentationError(
            "Word at position {} has non-string text: {!r}".format(
                position, token.text
            )
        )
    return token.text.strip()


def to_tokens(words: Iterable[WordInput]) -> List[WordToken]:
    """Convert backend dicts (or tokens) to a list of WordToken."""
    return [_as_token(word, i) for i, word in enumerate(words)]


def sort_words(words: Iterable[WordInput]) -> List[WordToken]:
    """Stable sort by start time, treating a missing start as 0.

    The backend does not strictly order diarized output across speakers,
    and out-of-order input silently corrupts pause detection.
    """
    tokens = to_tokens(words)
    keyed = [
        (_known_time(token.start, i, "start"), i, token)
        for i, token in enumerate(tokens)
    ]
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [token for _, _, token in keyed]


def segment_words(
    words: Sequence[WordInput],
    pause_threshold_s: float = PAUSE_THRESHOLD_S,
) -> List[Segment]:
    """Group ordered word tokens into segments split at long pauses.

    Args:
        words: Word tokens (or backend word dicts) in start order.
        pause_threshold_s: Minimum silence gap, in seconds, that starts a
            new segment.

    Returns:
        Ordered list of Segments. Empty when no token has text.

    Raises:
        SegmentationError: If a token has a malformed shape.
    """
    if not words:
        return []

    tokens = to_tokens(words)
    segments: List[Segment] = []
    buffer: List[str] = []
    segment_start = _known_time(tokens[0].start, 0, "start")

    def _flush() -> None:
        text = clean_text(" ".join(buffer))
        if text:
            segments.append(Segment(
                text=text,
                start_time=normalize_to_clock(segment_start),
            ))

    for i, token in enumerate(tokens):
        text = _token_text(token, i)
        if not text:
            continue

        start = _known_time(token.start, i, "start")
        is_long_pause = False
        if i > 0:
            prev_end = _known_time(tokens[i - 1].end, i - 1, "end")
            is_long_pause = (
                start > 0
                and prev_end > 0
                and start - prev_end > pause_threshold_s
            )

        if (is_long_pause or i == 0) and buffer:
            _flush()
            buffer = []
            segment_start = start

        buffer.append(text)

    if buffer:
        _flush()

    return segments


def transcript_text(words: Iterable[WordToken]) -> str:
    """Join word texts into the plain text handed to the summarizer."""
    return clean_text(" ".join(w.text.strip() for w in words if isinstance(w.text, str)))


def build_transcript(
    words: Sequence[WordInput],
    source_filename: str,
    segments: Optional[List[Segment]] = None,
) -> Transcript:
    """Build a Transcript IR from word tokens.

    WHY: Formatters need segments together with the source filename,
    the full text and the media duration.

    HOW: Sorts the words, reuses pre-computed segments when given
    (typically from a ReprocessGuard), otherwise segments them.

    RULES:
    - duration_s is the largest known end (or start) time, 0.0 if none
    - text is the cleaned join of all word texts
    """
    tokens = sort_words(words)
    if segments is None:
        segments = segment_words(tokens)

    duration_s = 0.0
    for i, token in enumerate(tokens):
        end = _known_time(token.end, i, "end")
        start = _known_time(token.start, i, "start")
        duration_s = max(duration_s, end, start)

    return Transcript(
        segments=segments,
        source_filename=source_filename,
        text=transcript_text(tokens),
        duration_s=duration_s,
        words=tokens,
    )
