"""Configuration constants and .env loading.

WHY: Backend URLs, the pause threshold, and upload limits are deployment
concerns. Keeping them in one module makes them easy to find and
override without touching the segmentation or server logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
at module level with environment-variable overrides. load_api_key()
gives a clear error when the key is missing.

RULES:
- PAUSE_THRESHOLD_S defaults to 2.0 seconds
- SUPPORTED_MEDIA_FORMATS lists accepted audio/video file extensions
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

PAUSE_THRESHOLD_S = float(os.getenv("PAUSE_THRESHOLD_S", "2.0"))
"""Silence gap (seconds) between two words that forces a new segment."""

# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

SUPPORTED_MEDIA_FORMATS: set[str] = {
    ".aac", ".flac", ".m4a", ".mov", ".mp3", ".mp4",
    ".mpeg", ".ogg", ".wav", ".webm",
}
"""Audio/video file extensions accepted for upload (lowercase, with dot)."""

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "500"))

# ---------------------------------------------------------------------------
# Backend API defaults
# ---------------------------------------------------------------------------

MEETING_AI_BASE_URL = os.getenv("MEETING_AI_BASE_URL", "https://api.meeting-ai.example/v1")


def load_api_key() -> str:
    """Load the transcription/summarization API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("MEETING_AI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Meeting AI API key not configured. "
            "Add MEETING_AI_API_KEY to the .env file in the app folder."
        )
    return key
