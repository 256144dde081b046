"""Backend API client package.

WHY: Transcription and summarization are remote services. This package
encapsulates all backend communication behind one async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Response data is
parsed into typed dataclasses defined in models.py.

RULES:
- All backend HTTP calls go through MeetingAIClient
- Authentication is via Bearer token from config
"""

from meeting_companion.api.client import MeetingAIClient, MeetingAIError
from meeting_companion.api.models import (
    StructuredSummary,
    SummaryResult,
    TranscriptionResult,
)

__all__ = [
    "MeetingAIClient",
    "MeetingAIError",
    "StructuredSummary",
    "SummaryResult",
    "TranscriptionResult",
]
