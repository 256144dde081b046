"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation.

HOW: One model per response shape. Enums represent closed sets like
output format names. All fields carry a Field description for the
/docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum values match internal constants exactly (formatter keys)
- Response models never expose internal implementation details
- No PEP 604 unions here; pydantic evaluates these annotations
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Available output format identifiers.

    RULES:
    - Values match keys in meeting_companion.formatters.FORMATTERS exactly
    """

    plain_text = "plain_text"
    segments_json = "segments_json"
    srt_captions = "srt_captions"


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


class JobResponse(BaseModel):
    """Meeting job status response."""

    id: str = Field(description="Unique job identifier (UUID).")
    status: str = Field(description="Current job status.")
    filename: str = Field(description="Original uploaded filename.")
    created_at: float = Field(description="Job creation timestamp (Unix epoch seconds).")
    error: Optional[str] = Field(
        default=None,
        description="Error message, only present when status is 'failed'.",
    )
    transcript_error: Optional[str] = Field(
        default=None,
        description="Set when the transcript could not be built; retry by resubmitting.",
    )
    summary_error: Optional[str] = Field(
        default=None,
        description="Set when the summary could not be generated.",
    )
    segment_count: int = Field(default=0, description="Number of transcript segments.")
    output_files: Optional[List[str]] = Field(
        default=None,
        description="Output filenames, present once the transcript is ready.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "id": "550e8400e29b41d4a716446655440000",
                "status": "summarizing",
                "filename": "standup.mp4",
                "created_at": 1739959200.0,
                "error": None,
                "transcript_error": None,
                "summary_error": None,
                "segment_count": 12,
                "output_files": ["standup-transcript.txt"],
            }
        ]
    }}


class JobCreatedResponse(BaseModel):
    """Response returned when a new meeting is submitted."""

    id: str = Field(description="Unique job identifier (UUID) for polling status.")
    status: str = Field(description="Initial job status (always 'pending').")
    filename: str = Field(description="Original uploaded filename.")


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class SegmentModel(BaseModel):
    """One transcript segment."""

    index: int = Field(description="Position in the segment list.")
    text: str = Field(description="Normalized segment text.")
    start_time: str = Field(description="Segment start as HH:MM:SS; also the seek target.")
    start_s: float = Field(description="Segment start in seconds.")


class SegmentListResponse(BaseModel):
    """All segments of a meeting transcript."""

    job_id: str = Field(description="The job these segments belong to.")
    fingerprint: Optional[str] = Field(
        default=None,
        description="Fingerprint of the word sequence the segments were built from.",
    )
    segments: List[SegmentModel] = Field(description="Segments in start order.")


class ActiveSegmentResponse(BaseModel):
    """The segment active at a playback time."""

    job_id: str = Field(description="The job queried.")
    time_s: float = Field(description="Playback time in seconds that was looked up.")
    index: int = Field(description="Active segment index, or -1 when none covers the time.")
    segment: Optional[SegmentModel] = Field(
        default=None,
        description="The active segment, absent when index is -1.",
    )


class SearchResponse(BaseModel):
    """Segments matching a text query."""

    job_id: str = Field(description="The job searched.")
    query: str = Field(description="The query as received.")
    results: List[SegmentModel] = Field(description="Matching segments with their full-list index.")


class SummaryResponse(BaseModel):
    """Structured meeting summary."""

    job_id: str = Field(description="The job summarized.")
    summary: str = Field(description="Plain-text summary.")
    title: str = Field(default="Meeting Summary", description="Meeting title.")
    date: str = Field(default="", description="Meeting date.")
    executive_summary: str = Field(default="", description="Executive summary paragraph.")
    key_points: List[str] = Field(default_factory=list, description="Key discussion points.")
    highlights: List[str] = Field(default_factory=list, description="Notable moments.")
    action_items: List[str] = Field(default_factory=list, description="Agreed action items.")
    participants: List[str] = Field(default_factory=list, description="Participant names.")
    follow_up_dates: List[str] = Field(default_factory=list, description="Follow-up dates.")
    status: str = Field(default="Completed", description="Meeting status label.")


# ---------------------------------------------------------------------------
# Files and misc
# ---------------------------------------------------------------------------


class FileInfo(BaseModel):
    """Metadata for a single output file."""

    filename: str = Field(description="Output filename.")
    media_type: str = Field(description="MIME type of the file content.")
    size: int = Field(description="File size in bytes.")


class FileListResponse(BaseModel):
    """List of output files for a job."""

    job_id: str = Field(description="The job ID these files belong to.")
    files: List[FileInfo] = Field(description="Available output files.")


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-transcript.txt').")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
