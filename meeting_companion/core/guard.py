"""Fingerprint cache that keeps the segmenter from redoing finished work.

WHY: Upstream state changes far more often than the word sequence itself
(every playback tick re-renders the transcript view). Resegmenting an
unchanged word list would waste work and hand consumers a new list
object, which they would treat as new data.

HOW: fingerprint_words() derives an order-sensitive key from each token's
(start, end, text). ReprocessGuard keeps the last key and its segment
list; a matching key returns the cached list object untouched. The
guard is also the failure boundary for segmentation.

RULES:
- The fingerprint changes if any token's start, end or text changes, or
  if tokens are reordered
- A cache hit returns the identical list object and calls nothing
- Failures are logged, not cached, and return [] with last_error set
- One guard per transcript session; nothing is module-global
"""

from __future__ import annotations

import hashlib
import logging
from typing import Callable, Iterable, List, Optional, Sequence

from meeting_companion.core.ir import Segment, WordToken
from meeting_companion.core.segmenter import WordInput, segment_words, to_tokens

logger = logging.getLogger(__name__)

TRANSCRIPT_FAILED_MESSAGE = "Failed to load transcript. Please try again."


def _field(value: object) -> str:
    return "" if value is None else str(value)


def fingerprint_words(words: Iterable[WordInput]) -> str:
    """Order-sensitive fingerprint of a word sequence.

    Each token contributes ``start-end-text``; entries are joined with
    ``|`` and hashed with SHA-256 so the key stays small for long
    meetings.
    """
    parts = []
    for word in words:
        if isinstance(word, dict):
            word = WordToken.from_dict(word)
        parts.append("{}-{}-{}".format(
            _field(word.start), _field(word.end), _field(word.text),
        ))
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()


class ReprocessGuard:
    """Last-fingerprint cache around a segmenter function."""

    def __init__(
        self,
        segmenter: Callable[[Sequence[WordToken]], List[Segment]] = segment_words,
    ) -> None:
        self._segmenter = segmenter
        self.last_fingerprint: Optional[str] = None
        self.cached_segments: Optional[List[Segment]] = None
        self.last_error: Optional[str] = None
        self.hits = 0
        self.misses = 0

    def lookup(self, fingerprint: str) -> Optional[List[Segment]]:
        """Return the cached segments if fingerprint matches, else None."""
        if fingerprint == self.last_fingerprint and self.cached_segments is not None:
            self.hits += 1
            logger.debug("Reusing cached segments for fingerprint %s", fingerprint[:12])
            return self.cached_segments
        return None

    def store(self, fingerprint: str, segments: List[Segment]) -> None:
        self.last_fingerprint = fingerprint
        self.cached_segments = segments
        self.last_error = None

    def segment(self, words: Sequence[WordInput]) -> List[Segment]:
        """Segment words unless this exact sequence was already segmented.

        Returns:
            The cached list object on a fingerprint match, a fresh list
            otherwise, or [] when segmentation failed.
        """
        try:
            tokens = to_tokens(words)
            fingerprint = fingerprint_words(tokens)
        except Exception:
            logger.exception("Could not fingerprint word sequence")
            self.last_error = TRANSCRIPT_FAILED_MESSAGE
            return []

        cached = self.lookup(fingerprint)
        if cached is not None:
            return cached
        return self.segment_fingerprinted(fingerprint, tokens)

    def segment_fingerprinted(
        self,
        fingerprint: str,
        tokens: Sequence[WordToken],
    ) -> List[Segment]:
        """Run the segmenter for an already fingerprinted cache miss.

        Callers that fingerprint ahead of time (and may yield before
        segmenting) use this instead of segment().

        Returns:
            The new segment list, or [] with last_error set on failure.
        """
        self.misses += 1
        try:
            segments = self._segmenter(tokens)
        except Exception:
            logger.exception("Segmentation failed for %d words", len(tokens))
            self.last_error = TRANSCRIPT_FAILED_MESSAGE
            return []

        self.store(fingerprint, segments)
        return segments

    def clear(self) -> None:
        """Drop cached state when the transcript is superseded."""
        self.last_fingerprint = None
        self.cached_segments = None
        self.last_error = None
