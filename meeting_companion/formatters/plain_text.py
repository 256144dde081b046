"""Plain text transcript with a clock timestamp before every segment.

WHY: Reviewers want a transcript they can paste into notes or email, and
each paragraph's timestamp lets them find the moment in the recording.

HOW: One block per segment, ``[HH:MM:SS] text``, blocks separated by a
blank line. Timestamps go through normalize_to_clock so they always
carry three fields.

RULES:
- One paragraph per segment, in segment order
- Double newline between paragraphs, single trailing newline
- Empty transcript → empty content
- Output suffix: "-transcript.txt"
"""

from __future__ import annotations

from typing import List, Sequence

from meeting_companion.core.ir import Segment, Transcript
from meeting_companion.core.timecode import normalize_to_clock
from meeting_companion.formatters.base import BaseFormatter, FormatterOutput


def format_segments_for_display(segments: Sequence[Segment]) -> str:
    """Render segments as ``[HH:MM:SS] text`` paragraphs."""
    return "\n\n".join(
        "[{}] {}".format(normalize_to_clock(segment.start_time), segment.text)
        for segment in segments
    )


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces timestamped plain text paragraphs."""

    @property
    def name(self) -> str:
        return "Plain Text"

    @property
    def suffix(self) -> str:
        return "-transcript.txt"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        content = format_segments_for_display(transcript.segments)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="text/plain",
            )
        ]
