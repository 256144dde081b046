"""Backend request and response dataclasses.

WHY: The transcription and summarization backends return plain JSON.
Typed dataclasses make the contract explicit and keep dict plumbing out
of the pipeline code.

HOW: Each dataclass maps to one backend JSON object and has a from_dict
factory. SummaryResult accepts both shapes the summarizer is known to
return: a ready structuredSummary object, or a rawSummary string whose
JSON payload may be wrapped in a Markdown code fence.

RULES:
- TranscriptionResult.words are WordToken objects, in backend order
- The core does not validate the summary beyond parsing it
- An unparseable raw summary yields structured=None, not an exception
"""

from __future__ import annotations

import datetime
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from meeting_companion.core.ir import WordToken
from meeting_companion.core.timecode import process_transcript_timestamps

logger = logging.getLogger(__name__)

_JSON_FENCE_RE = re.compile(r"```(?:json\n)?([\s\S]*?)\n```")
_ANY_FENCE_RE = re.compile(r"```([\s\S]*?)```")


@dataclass
class TranscriptionResult:
    """Response of the speech-to-text backend.

    RULES:
    - id: backend transcription identifier
    - text: backend's own plain-text rendering (informational)
    - words: ordered or orderable word tokens
    """

    id: str
    text: str
    words: List[WordToken]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranscriptionResult:
        return cls(
            id=str(data.get("id", "")),
            text=data.get("text") or "",
            words=[WordToken.from_dict(w) for w in data.get("words") or []],
        )


def _timestamped(items: List[Any]) -> List[str]:
    return [process_transcript_timestamps(str(item)) for item in items]


@dataclass
class StructuredSummary:
    """The structured meeting summary shown next to the transcript."""

    title: str = "Meeting Summary"
    date: str = ""
    executive_summary: str = ""
    key_points: List[str] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)
    action_items: List[str] = field(default_factory=list)
    participants: List[str] = field(default_factory=list)
    follow_up_dates: List[str] = field(default_factory=list)
    status: str = "Completed"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StructuredSummary:
        """Build from camelCase or snake_case keys, filling defaults.

        Bracketed [M:SS] timestamps in the summary text are rewritten to
        [HH:MM:SS] so they match segment start times.
        """

        def pick(camel: str, snake: str, default: Any) -> Any:
            value = data.get(camel, data.get(snake))
            return value if value else default

        return cls(
            title=pick("title", "title", "Meeting Summary"),
            date=pick("date", "date", datetime.date.today().isoformat()),
            executive_summary=process_transcript_timestamps(
                str(pick("executiveSummary", "executive_summary", "")),
            ),
            key_points=_timestamped(pick("keyPoints", "key_points", [])),
            highlights=_timestamped(pick("highlights", "highlights", [])),
            action_items=_timestamped(pick("actionItems", "action_items", [])),
            participants=list(pick("participants", "participants", [])),
            follow_up_dates=list(pick("followUpDates", "follow_up_dates", [])),
            status=pick("status", "status", "Completed"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "date": self.date,
            "executive_summary": self.executive_summary,
            "key_points": list(self.key_points),
            "highlights": list(self.highlights),
            "action_items": list(self.action_items),
            "participants": list(self.participants),
            "follow_up_dates": list(self.follow_up_dates),
            "status": self.status,
        }


def parse_raw_summary(raw_summary: str) -> Optional[Dict[str, Any]]:
    """Extract the JSON object from a summarizer's free-text reply.

    HOW: Try a ```json fenced block, then any fenced block, then the
    whole string.

    RULES:
    - Returns None (and logs) when nothing parses to a JSON object
    """
    if not raw_summary:
        return None
    match = _JSON_FENCE_RE.search(raw_summary) or _ANY_FENCE_RE.search(raw_summary)
    candidate = match.group(1).strip() if match else raw_summary
    try:
        parsed = json.loads(candidate)
    except ValueError:
        logger.warning("Failed to parse summary JSON (%d chars)", len(raw_summary))
        return None
    if not isinstance(parsed, dict):
        logger.warning("Summary JSON is not an object: %s", type(parsed).__name__)
        return None
    return parsed


@dataclass
class SummaryResult:
    """Response of the summarization backend.

    RULES:
    - summary: plain-text summary (may be empty)
    - raw_summary: the unparsed model reply, when the backend sent one
    - structured: parsed StructuredSummary, or None if unavailable
    """

    summary: str = ""
    raw_summary: Optional[str] = None
    structured: Optional[StructuredSummary] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SummaryResult:
        raw = data.get("rawSummary", data.get("raw_summary"))
        structured_data = data.get("structuredSummary", data.get("structured_summary"))

        structured: Optional[StructuredSummary] = None
        if isinstance(structured_data, dict):
            structured = StructuredSummary.from_dict(structured_data)
        elif raw:
            parsed = parse_raw_summary(raw)
            if parsed is not None:
                structured = StructuredSummary.from_dict(parsed)

        summary = data.get("summary") or ""
        if not summary and structured is not None:
            summary = structured.executive_summary
        return cls(summary=summary, raw_summary=raw, structured=structured)
