"""Intermediate representation dataclasses for meeting transcripts.

WHY: The speech-to-text backend returns loosely-typed word dicts. The
segmenter, synchronizer, formatters and HTTP layer all need the same
well-typed view of words and segments, so the shapes live in one place.

HOW: Three dataclasses:
  WordToken  — one recognized word with optional timing and metadata
  Segment    — a run of words rendered as one paragraph, with a start clock
  Transcript — segments plus the metadata formatters need

RULES:
- WordToken times are float seconds; None or 0 means "not precisely known"
- Segment.start_time is always a three-field HH:MM:SS clock string
- Segments are ordered by start time and never hold empty text
- Transcript is rebuilt, never mutated, when the word sequence changes
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from meeting_companion.core.timecode import clock_to_seconds


@dataclass(frozen=True)
class WordToken:
    """A single recognized word as delivered by the speech-to-text backend.

    RULES:
    - text may be empty or whitespace-only; such tokens are skipped
    - start/end are optional float seconds from media start
    - confidence is 0.0–1.0 when the backend provides it
    - speaker is the backend's diarization label, or None
    """

    text: str | None
    start: float | None = None
    end: float | None = None
    confidence: float | None = None
    speaker: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WordToken:
        """Parse a WordToken from a backend word dict.

        Values are taken as-is; a malformed time is reported by the
        segmenter, not here.
        """
        return cls(
            text=data.get("text"),
            start=data.get("start"),
            end=data.get("end"),
            confidence=data.get("confidence"),
            speaker=data.get("speaker"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence,
        }
        if self.speaker is not None:
            result["speaker"] = self.speaker
        return result


@dataclass(frozen=True)
class Segment:
    """A contiguous run of words displayed as one paragraph.

    WHY: Readers follow a meeting paragraph by paragraph, and clicking a
    paragraph's timestamp seeks the player there.

    RULES:
    - text is normalized (single spaces, tight punctuation)
    - start_time is HH:MM:SS of the first word's start; it doubles as the
      seek target
    """

    text: str
    start_time: str

    @property
    def start_seconds(self) -> float:
        """The start time as numeric seconds."""
        return clock_to_seconds(self.start_time)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "start_time": self.start_time}


@dataclass
class Transcript:
    """A segmented transcript with the metadata output formats need.

    RULES:
    - segments: ordered by start time
    - text: the plain transcript text handed to the summarizer
    - source_filename: original media filename (for output naming)
    - duration_s: end of the last timed word, 0.0 when nothing is timed
    """

    segments: list[Segment]
    source_filename: str
    text: str = ""
    duration_s: float = 0.0
    words: list[WordToken] = field(default_factory=list)
