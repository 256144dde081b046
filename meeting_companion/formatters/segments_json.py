"""Segment list as JSON for players and other tools.

WHY: A web player or notebook needs the segments with both the display
clock and numeric seconds, so it can seek without reparsing clocks.

HOW: Serializes the Transcript's segments with their index, text,
``start_time`` clock and ``start_s`` seconds, plus source and duration.

RULES:
- start_s is clock_to_seconds(start_time)
- Output is UTF-8 JSON, indented, non-ASCII kept as-is
- Output suffix: "-segments.json"
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from meeting_companion.core.ir import Transcript
from meeting_companion.formatters.base import BaseFormatter, FormatterOutput


def transcript_to_json_dict(transcript: Transcript) -> Dict[str, Any]:
    return {
        "source": transcript.source_filename,
        "duration_s": transcript.duration_s,
        "segments": [
            {
                "index": i,
                "text": segment.text,
                "start_time": segment.start_time,
                "start_s": segment.start_seconds,
            }
            for i, segment in enumerate(transcript.segments)
        ],
    }


class SegmentsJSONFormatter(BaseFormatter):
    """Formatter that produces the segment list as JSON."""

    @property
    def name(self) -> str:
        return "Segments JSON"

    @property
    def suffix(self) -> str:
        return "-segments.json"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        content = json.dumps(
            transcript_to_json_dict(transcript), indent=2, ensure_ascii=False,
        )
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content + "\n",
                media_type="application/json",
            )
        ]
