"""Conversion between numeric seconds and colon-delimited clock strings.

WHY: Every synchronization decision compares a playback time in seconds
against segment start times stored as clock strings. The conversions
feed UI rendering and must never raise, so malformed input is mapped to
a defined default instead of propagating a parse error.

HOW: Two renderers and one parser over plain arithmetic:
  seconds_to_clock    — human-facing duration label (MM:SS under an hour)
  normalize_to_clock  — canonical segment key (always HH:MM:SS)
  clock_to_seconds    — SS, MM:SS or HH:MM:SS back to seconds
Time-like values arriving at a boundary (player, HTTP query) are wrapped
in a small tagged union (Seconds | ClockString) and reduced to seconds
with to_seconds().

RULES:
- Negative, NaN, infinite, and non-numeric input clamps to 0
- Clock renderers truncate fractional seconds (floor), never round
- seconds_to_clock and normalize_to_clock differ on purpose: the former
  omits the hour field under one hour, the latter never does
- A string with two colons passes through normalize_to_clock unchanged
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple, Union

# Bracketed [M:SS] / [MM:SS] timestamps embedded in free text.
_BRACKETED_MMSS_RE = re.compile(r"\[(\d{1,2}):(\d{2})\]")

_DEFAULT_CLOCK = "00:00:00"


class Seconds(NamedTuple):
    """A time given as raw seconds."""

    value: float


class ClockString(NamedTuple):
    """A time given as a colon-delimited clock string."""

    value: str


TimeLike = Union[Seconds, ClockString]


def _coerce_seconds(value: object) -> float:
    """Return value as finite non-negative seconds, or 0.0."""
    if isinstance(value, bool):
        return 0.0
    try:
        secs = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(secs) or secs < 0:
        return 0.0
    return secs


def _is_numeric(value: object) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def _split_hms(total: float) -> tuple[int, int, int]:
    whole = int(math.floor(total))
    return whole // 3600, (whole % 3600) // 60, whole % 60


def seconds_to_clock(seconds: object) -> str:
    """Render seconds as ``MM:SS``, or ``HH:MM:SS`` from one hour up.

    Used for human-facing duration labels.

    >>> seconds_to_clock(75.9)
    '01:15'
    >>> seconds_to_clock(3725)
    '01:02:05'
    """
    hours, minutes, secs = _split_hms(_coerce_seconds(seconds))
    if hours > 0:
        return "{:02d}:{:02d}:{:02d}".format(hours, minutes, secs)
    return "{:02d}:{:02d}".format(minutes, secs)


def clock_to_seconds(value: object) -> float:
    """Parse ``SS``, ``MM:SS`` or ``HH:MM:SS`` into seconds.

    Fields are read right to left as seconds, minutes, hours and summed
    as ``field * 60 ** position``. Any empty or non-numeric field makes
    the whole value malformed, which yields 0.0. Numbers pass through
    with the usual clamping.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _coerce_seconds(value)
    if not isinstance(value, str) or not value.strip():
        return 0.0

    total = 0.0
    for position, field in enumerate(reversed(value.split(":"))):
        try:
            number = float(field)
        except ValueError:
            return 0.0
        if not math.isfinite(number):
            return 0.0
        total += number * (60 ** position)
    return total if total > 0 else 0.0


def normalize_to_clock(value: object) -> str:
    """Normalize a number or clock string to the canonical ``HH:MM:SS``.

    RULES:
    - None / "" → "00:00:00"
    - number or numeric string → raw seconds, always three fields
    - string with two colons → returned unchanged
    - string with one colon → read as MM:SS, re-rendered as HH:MM:SS
    - anything else → "00:00:00"
    """
    if value is None or value == "":
        return _DEFAULT_CLOCK

    if _is_numeric(value):
        hours, minutes, secs = _split_hms(_coerce_seconds(value))
        return "{:02d}:{:02d}:{:02d}".format(hours, minutes, secs)

    if not isinstance(value, str):
        return _DEFAULT_CLOCK

    colons = value.count(":")
    if colons == 2:
        return value

    if colons == 1:
        minutes_part, seconds_part = value.split(":")
        try:
            total = float(minutes_part) * 60 + float(seconds_part)
        except ValueError:
            return _DEFAULT_CLOCK
        if not math.isfinite(total):
            return _DEFAULT_CLOCK
        return normalize_to_clock(total)

    return _DEFAULT_CLOCK


def seconds_to_srt_timestamp(seconds: object) -> str:
    """Render seconds as an SRT cue timestamp ``HH:MM:SS,mmm`` (nearest ms)."""
    total_ms = int(round(_coerce_seconds(seconds) * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


def parse_time_like(value: object) -> TimeLike:
    """Tag a raw time value as Seconds or ClockString.

    Numbers and numeric strings become Seconds; other strings become a
    ClockString; anything else is Seconds(0.0).
    """
    if isinstance(value, (Seconds, ClockString)):
        return value
    if _is_numeric(value):
        return Seconds(_coerce_seconds(value))
    if isinstance(value, str):
        return ClockString(value)
    return Seconds(0.0)


def to_seconds(value: object) -> float:
    """Reduce any time-like value to non-negative seconds."""
    tagged = parse_time_like(value)
    if isinstance(tagged, ClockString):
        return clock_to_seconds(tagged.value)
    return _coerce_seconds(tagged.value)


def process_transcript_timestamps(transcript_text: str | None) -> str:
    """Rewrite bracketed ``[MM:SS]`` timestamps in text as ``[HH:MM:SS]``.

    Summaries and pasted transcripts often carry short timestamps like
    ``[1:45]``; segment keys use three fields, so the two are aligned
    before display.
    """
    if not transcript_text:
        return ""

    def _replace(match: re.Match) -> str:
        total = int(match.group(1)) * 60 + int(match.group(2))
        return "[{}]".format(normalize_to_clock(total))

    return _BRACKETED_MMSS_RE.sub(_replace, transcript_text)
