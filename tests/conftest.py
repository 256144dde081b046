"""Shared test fixtures for the meeting_companion test suite.

WHY: Several test modules need the same small word sequences: the
four-word "Hello world. / Next topic." meeting with one long pause, and a
longer three-paragraph standup. Centralizing them keeps expected segment
texts and start clocks consistent across modules.

HOW: Module-level constants hold the raw backend word dicts; fixtures
hand out fresh copies so no test can mutate another's input.

RULES:
- Word dicts use the backend shape {text, start, end, confidence}
- TWO_SEGMENT_WORDS splits into exactly two segments at the 2s threshold
- STANDUP_WORDS splits into exactly three segments
"""

from typing import Any, Dict, List

import pytest

from meeting_companion.core.ir import Segment, Transcript, WordToken


# ---------------------------------------------------------------------------
# Sample word sequences
# ---------------------------------------------------------------------------

TWO_SEGMENT_WORDS: List[Dict[str, Any]] = [
    {"text": "Hello",  "start": 0.0, "end": 0.5, "confidence": 0.98},
    {"text": "world.", "start": 0.6, "end": 1.0, "confidence": 0.97},
    {"text": "Next",   "start": 5.0, "end": 5.3, "confidence": 0.95},
    {"text": "topic.", "start": 5.4, "end": 5.8, "confidence": 0.96},
]

STANDUP_WORDS: List[Dict[str, Any]] = [
    {"text": "Good",       "start": 1.0,  "end": 1.3,  "confidence": 0.99, "speaker": "1"},
    {"text": "morning",    "start": 1.4,  "end": 1.8,  "confidence": 0.98, "speaker": "1"},
    {"text": ",",          "start": 1.8,  "end": 1.85, "confidence": 0.99, "speaker": "1"},
    {"text": "everyone",   "start": 1.9,  "end": 2.4,  "confidence": 0.97, "speaker": "1"},
    {"text": ".",          "start": 2.4,  "end": 2.45, "confidence": 0.99, "speaker": "1"},
    {"text": "Let's",      "start": 2.6,  "end": 2.9,  "confidence": 0.96, "speaker": "1"},
    {"text": "start",      "start": 3.0,  "end": 3.3,  "confidence": 0.97, "speaker": "1"},
    {"text": ".",          "start": 3.3,  "end": 3.35, "confidence": 0.99, "speaker": "1"},
    {"text": "The",        "start": 8.0,  "end": 8.2,  "confidence": 0.95, "speaker": "2"},
    {"text": "release",    "start": 8.3,  "end": 8.8,  "confidence": 0.94, "speaker": "2"},
    {"text": "is",         "start": 8.9,  "end": 9.0,  "confidence": 0.98, "speaker": "2"},
    {"text": "on",         "start": 9.1,  "end": 9.2,  "confidence": 0.97, "speaker": "2"},
    {"text": "track",      "start": 9.3,  "end": 9.7,  "confidence": 0.96, "speaker": "2"},
    {"text": "!",          "start": 9.7,  "end": 9.75, "confidence": 0.99, "speaker": "2"},
    {"text": "Any",        "start": 75.0, "end": 75.3, "confidence": 0.93, "speaker": "1"},
    {"text": "questions",  "start": 75.4, "end": 76.0, "confidence": 0.95, "speaker": "1"},
    {"text": "?",          "start": 76.0, "end": 76.05, "confidence": 0.99, "speaker": "1"},
]

STANDUP_SEGMENT_TEXTS = [
    "Good morning, everyone. Let's start.",
    "The release is on track!",
    "Any questions?",
]
STANDUP_SEGMENT_STARTS = ["00:00:01", "00:00:08", "00:01:15"]


@pytest.fixture
def two_segment_words():
    """Four words with one long pause between "world." and "Next"."""
    return [dict(w) for w in TWO_SEGMENT_WORDS]


@pytest.fixture
def standup_words():
    """Seventeen words, punctuation as separate tokens, three paragraphs."""
    return [dict(w) for w in STANDUP_WORDS]


@pytest.fixture
def three_segments():
    """Segments starting at 0s, 10s and 20s."""
    return [
        Segment(text="First.", start_time="00:00:00"),
        Segment(text="Second.", start_time="00:00:10"),
        Segment(text="Third.", start_time="00:00:20"),
    ]


@pytest.fixture
def standup_transcript():
    """Transcript IR for STANDUP_WORDS, built by hand."""
    return Transcript(
        segments=[
            Segment(text=text, start_time=start)
            for text, start in zip(STANDUP_SEGMENT_TEXTS, STANDUP_SEGMENT_STARTS)
        ],
        source_filename="standup.mp4",
        text=" ".join(STANDUP_SEGMENT_TEXTS),
        duration_s=76.05,
        words=[WordToken.from_dict(w) for w in STANDUP_WORDS],
    )


@pytest.fixture
def standup_expected():
    """(texts, start clocks) that segmenting STANDUP_WORDS must produce."""
    return list(STANDUP_SEGMENT_TEXTS), list(STANDUP_SEGMENT_STARTS)
