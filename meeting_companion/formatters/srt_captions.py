"""SRT captions with one cue per transcript segment.

WHY: Editors and video hosts accept SRT everywhere. Segments already have
start times; a cue only needs an end.

HOW: Each cue runs from its segment's start to the next segment's start.
The last cue ends at the transcript duration. Cues are at least
_MIN_CUE_S long so a zero-length last segment still shows.

RULES:
- Cue numbering starts at 1
- Timestamps are HH:MM:SS,mmm
- Blank line between cues
- Output suffix: ".srt"; media type "application/x-subrip"
"""

from __future__ import annotations

from typing import List

from meeting_companion.core.ir import Transcript
from meeting_companion.core.timecode import seconds_to_srt_timestamp
from meeting_companion.formatters.base import BaseFormatter, FormatterOutput

_MIN_CUE_S = 1.0


class SRTCaptionFormatter(BaseFormatter):
    """Formatter that produces one SRT cue per segment."""

    @property
    def name(self) -> str:
        return "SRT Captions"

    @property
    def suffix(self) -> str:
        return ".srt"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        segments = transcript.segments
        starts = [s.start_seconds for s in segments]
        blocks: List[str] = []

        for i, segment in enumerate(segments):
            start = starts[i]
            end = starts[i + 1] if i + 1 < len(segments) else transcript.duration_s
            end = max(end, start + _MIN_CUE_S)
            blocks.append("{}\n{} --> {}\n{}".format(
                i + 1,
                seconds_to_srt_timestamp(start),
                seconds_to_srt_timestamp(end),
                segment.text,
            ))

        content = "\n\n".join(blocks)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="application/x-subrip",
            )
        ]
