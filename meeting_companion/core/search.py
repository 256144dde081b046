"""Case-insensitive text search over transcript segments."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from meeting_companion.core.ir import Segment


def search_segments(
    segments: Sequence[Segment],
    query: str | None,
) -> List[Tuple[int, Segment]]:
    """Return (index, segment) pairs whose text contains query.

    Indices refer to the full list so a hit can be seeked to or
    highlighted directly. A blank query matches every segment.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(enumerate(segments))
    return [
        (i, segment)
        for i, segment in enumerate(segments)
        if needle in segment.text.lower()
    ]
