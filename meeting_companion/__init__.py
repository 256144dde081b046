"""Meeting Companion: time-aligned meeting transcripts and summaries.

WHY: Speech-to-text backends return a flat list of timestamped words. A
meeting reviewer needs readable paragraphs that stay in step with the
recording as it plays, plus a structured summary of what was decided.
This package turns the word list into segments, keeps an active segment
synchronized with a playback clock, and wires both backends together.

HOW: Three layers. Ingest (backend API client), core (segmentation,
time codec, synchronization, reprocess guard), surface (formatters and
the HTTP service). The core never talks to the network.

RULES:
- The core is deterministic post-processing; it does no recognition
- Segments are recomputed only when the word sequence actually changes
- Active-segment changes are emitted only when the index differs
"""

__version__ = "0.1.0"
