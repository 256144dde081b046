"""Output formatter registry.

WHY: The HTTP service needs a single lookup to find the right formatter
by name. A central dict makes it trivial to add new formats.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.

RULES:
- Keys are snake_case identifiers (used in API form fields)
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from meeting_companion.formatters.plain_text import PlainTextFormatter
from meeting_companion.formatters.segments_json import SegmentsJSONFormatter
from meeting_companion.formatters.srt_captions import SRTCaptionFormatter

if TYPE_CHECKING:
    from meeting_companion.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "segments_json": SegmentsJSONFormatter,
    "srt_captions": SRTCaptionFormatter,
}
