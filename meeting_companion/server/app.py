"""FastAPI application: upload a meeting, follow it, read it back.

WHY: The player UI, scripts and notebooks need one HTTP surface for the
whole flow: submit a recording, poll while it is transcribed and
summarized, then read the segments, look up the active segment for a
playback time, search the transcript and download output files.

HOW: POST /meetings stores the upload in a new job and runs the pipeline
in the background: transcribe → words_changed on the job's
TranscriptSession → formatters → summarize. Read endpoints serve the
session's committed segment list; active-segment lookups use a
stateless SyncIndex so polling clients never disturb the session's
change tracker.

RULES:
- All endpoints have OpenAPI descriptions and use ErrorResponse for errors
- Background processing uses FastAPI BackgroundTasks
- The job store is a module-level singleton
- File validation checks extension against SUPPORTED_MEDIA_FORMATS
- A transcription failure fails the job
- Segmentation and summarization failures set transcript_error or
  summary_error and leave the job usable
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, List, Optional

import httpx
from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from meeting_companion import __version__
from meeting_companion.api.client import MeetingAIClient, MeetingAIError
from meeting_companion.config import MAX_UPLOAD_MB, SUPPORTED_MEDIA_FORMATS
from meeting_companion.core.ir import Segment, Transcript
from meeting_companion.core.segmenter import build_transcript
from meeting_companion.core.sync import NO_ACTIVE_SEGMENT, SyncIndex
from meeting_companion.core.timecode import to_seconds
from meeting_companion.formatters import FORMATTERS
from meeting_companion.server.jobs import TRANSCRIPT_READY_STATUSES, Job, JobStatus, JobStore
from meeting_companion.server.models import (
    ActiveSegmentResponse,
    ErrorResponse,
    FileInfo,
    FileListResponse,
    FormatInfo,
    HealthResponse,
    JobCreatedResponse,
    JobResponse,
    SearchResponse,
    SegmentListResponse,
    SegmentModel,
    SummaryResponse,
)

logger = logging.getLogger(__name__)

PROCESSING_FAILED_MESSAGE = "Failed to process file. Please try again."
SUMMARY_FAILED_MESSAGE = "Failed to generate summary."

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

job_store = JobStore()


async def _periodic_cleanup() -> None:
    """Run job cleanup every 5 minutes."""
    while True:
        await asyncio.sleep(300)
        job_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start periodic cleanup on startup, cancel on shutdown."""
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="Meeting Companion API",
    description=(
        "Upload a recorded meeting and get back a time-aligned transcript "
        "split into readable segments, active-segment lookup for a playback "
        "position, transcript search, downloadable transcript files and a "
        "structured summary."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        id=job.id,
        status=job.status.value,
        filename=job.filename,
        created_at=job.created_at,
        error=job.error,
        transcript_error=job.transcript_error,
        summary_error=job.summary_error,
        segment_count=len(job.session.segments),
        output_files=job.output_files if job.output_files else None,
    )


def _segment_model(index: int, segment: Segment) -> SegmentModel:
    return SegmentModel(
        index=index,
        text=segment.text,
        start_time=segment.start_time,
        start_s=segment.start_seconds,
    )


def _validate_file_extension(filename: str) -> None:
    """Raise HTTPException if the file extension is not supported."""
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_MEDIA_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_MEDIA_FORMATS))
            ),
        )


def _get_job_or_404(job_id: str) -> Job:
    job = job_store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return job


def _require_transcript(job: Job) -> None:
    if job.status not in TRANSCRIPT_READY_STATUSES:
        raise HTTPException(
            status_code=409,
            detail="Transcript is not ready (current status: {}).".format(job.status.value),
        )


def _write_outputs(job: Job, transcript: Transcript, format_keys: List[str]) -> List[str]:
    """Run formatters and save their files into the job directory."""
    output_filenames = []
    stem = Path(job.filename).stem
    for key in format_keys:
        if key not in FORMATTERS:
            continue
        formatter = FORMATTERS[key]()
        for output in formatter.format(transcript):
            out_filename = "{}{}".format(stem, output.suffix)
            out_path = job.output_dir / out_filename
            if isinstance(output.content, bytes):
                out_path.write_bytes(output.content)
            else:
                out_path.write_text(output.content, encoding="utf-8")
            output_filenames.append(out_filename)
    return output_filenames


async def _run_meeting_pipeline(job_id: str, store: JobStore) -> None:
    """Transcribe, segment, format and summarize one uploaded meeting.

    RULES:
    - Updates job status at each stage
    - Transcription errors fail the job with PROCESSING_FAILED_MESSAGE
    - Segmentation errors never raise (TranscriptSession handles them);
      the job records transcript_error and continues
    - Summarization errors record summary_error; the job still completes
    """
    job = store.get_job(job_id)
    if job is None:
        return

    input_path = job.output_dir / job.filename
    format_keys = job.config.get("output_formats") or list(FORMATTERS.keys())

    try:
        async with MeetingAIClient() as client:
            store.update_job(job_id, status=JobStatus.TRANSCRIBING)
            result = await client.transcribe_audio(input_path)

            store.update_job(job_id, status=JobStatus.SEGMENTING)
            segments = await job.session.words_changed(result.words)

            if job.session.error:
                transcript = Transcript(
                    segments=[],
                    source_filename=job.filename,
                    text=result.text,
                )
            else:
                transcript = build_transcript(
                    result.words, job.filename, segments=segments or [],
                )

            output_files = _write_outputs(job, transcript, format_keys)
            store.update_job(
                job_id,
                status=JobStatus.SUMMARIZING,
                transcript=transcript,
                output_files=output_files,
                transcript_error=job.session.error,
            )

            summary = None
            summary_error = None
            summary_text = transcript.text or result.text
            if summary_text:
                try:
                    summary = await client.generate_summary(summary_text)
                except (MeetingAIError, httpx.HTTPError, ValueError):
                    logger.exception("Summarization failed for job %s", job_id)
                    summary_error = SUMMARY_FAILED_MESSAGE

            store.update_job(
                job_id,
                status=JobStatus.COMPLETED,
                summary=summary,
                summary_error=summary_error,
            )

    except Exception:
        logger.exception("Meeting pipeline failed for job %s", job_id)
        store.update_job(job_id, status=JobStatus.FAILED, error=PROCESSING_FAILED_MESSAGE)


def _run_meeting_sync(job_id: str, store: JobStore) -> None:
    """Synchronous wrapper; FastAPI runs sync background tasks in a thread."""
    asyncio.run(_run_meeting_pipeline(job_id, store))


# ---------------------------------------------------------------------------
# Endpoints: Meetings
# ---------------------------------------------------------------------------


@app.post(
    "/meetings",
    response_model=JobCreatedResponse,
    status_code=201,
    tags=["meetings"],
    summary="Submit a meeting recording",
    description=(
        "Upload an audio or video recording. Returns a job ID immediately; "
        "transcription, segmentation and summarization run in the background. "
        "Poll GET /meetings/{id} for status updates."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid file type or output format"},
        413: {"model": ErrorResponse, "description": "Upload too large"},
        429: {"model": ErrorResponse, "description": "Too many concurrent jobs"},
    },
)
async def create_meeting(
    background_tasks: BackgroundTasks,
    file: Annotated[
        UploadFile,
        File(description="Audio or video recording of the meeting"),
    ],
    output_formats: Annotated[
        Optional[str],
        Form(
            description=(
                "Comma-separated output formats. Available: plain_text, "
                "segments_json, srt_captions. Defaults to all."
            )
        ),
    ] = None,
) -> JobCreatedResponse:
    # Sanitize filename to prevent path traversal
    filename = Path(file.filename or "upload").name
    _validate_file_extension(filename)

    format_keys = None  # type: Optional[List[str]]
    if output_formats:
        format_keys = [f.strip() for f in output_formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in FORMATTERS:
                raise HTTPException(
                    status_code=400,
                    detail="Unknown output format '{}'. Available: {}".format(
                        key, ", ".join(sorted(FORMATTERS.keys()))
                    ),
                )

    content = await file.read()
    if len(content) > MAX_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail="Upload exceeds {} MB".format(MAX_UPLOAD_MB),
        )

    try:
        job = job_store.create_job(
            filename=filename,
            config={"output_formats": format_keys},
        )
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))

    (job.output_dir / filename).write_bytes(content)

    background_tasks.add_task(_run_meeting_sync, job.id, job_store)

    return JobCreatedResponse(
        id=job.id,
        status=job.status.value,
        filename=job.filename,
    )


@app.get(
    "/meetings/{job_id}",
    response_model=JobResponse,
    tags=["meetings"],
    summary="Get meeting job status",
    description="Poll this endpoint to follow a meeting through the pipeline.",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def get_meeting(job_id: str) -> JobResponse:
    return _job_to_response(_get_job_or_404(job_id))


@app.delete(
    "/meetings/{job_id}",
    status_code=204,
    tags=["meetings"],
    summary="Delete a meeting job",
    description="Delete a job, its transcript state and all its files.",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def delete_meeting(job_id: str) -> Response:
    if not job_store.delete_job(job_id):
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Transcript
# ---------------------------------------------------------------------------


@app.get(
    "/meetings/{job_id}/segments",
    response_model=SegmentListResponse,
    tags=["transcript"],
    summary="List transcript segments",
    description="Returns every segment with its start clock and start seconds.",
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Transcript not ready"},
    },
)
async def list_segments(job_id: str) -> SegmentListResponse:
    job = _get_job_or_404(job_id)
    _require_transcript(job)
    segments = job.session.segments
    return SegmentListResponse(
        job_id=job.id,
        fingerprint=job.session.fingerprint,
        segments=[_segment_model(i, s) for i, s in enumerate(segments)],
    )


@app.get(
    "/meetings/{job_id}/active",
    response_model=ActiveSegmentResponse,
    tags=["transcript"],
    summary="Find the active segment for a playback time",
    description=(
        "Each segment covers [start, next start); the last one runs to the end. "
        "Returns index -1 when the time precedes the first segment."
    ),
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Transcript not ready"},
    },
)
async def get_active_segment(
    job_id: str,
    t: Annotated[
        str,
        Query(description="Playback time as seconds (e.g. '12.5') or a clock ('00:01:05')."),
    ],
) -> ActiveSegmentResponse:
    job = _get_job_or_404(job_id)
    _require_transcript(job)
    segments = job.session.segments
    time_s = to_seconds(t)
    index = SyncIndex(segments).find(time_s)
    segment = None
    if index != NO_ACTIVE_SEGMENT:
        segment = _segment_model(index, segments[index])
    return ActiveSegmentResponse(job_id=job.id, time_s=time_s, index=index, segment=segment)


@app.get(
    "/meetings/{job_id}/search",
    response_model=SearchResponse,
    tags=["transcript"],
    summary="Search the transcript",
    description="Case-insensitive substring search. An empty query returns every segment.",
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Transcript not ready"},
    },
)
async def search_transcript(
    job_id: str,
    q: Annotated[str, Query(description="Text to search for.")] = "",
) -> SearchResponse:
    job = _get_job_or_404(job_id)
    _require_transcript(job)
    results = job.session.search(q)
    return SearchResponse(
        job_id=job.id,
        query=q,
        results=[_segment_model(i, s) for i, s in results],
    )


@app.get(
    "/meetings/{job_id}/summary",
    response_model=SummaryResponse,
    tags=["summary"],
    summary="Get the meeting summary",
    description="Structured summary: key points, action items, participants, highlights.",
    responses={
        404: {"model": ErrorResponse, "description": "Job or summary not found"},
        409: {"model": ErrorResponse, "description": "Job not yet completed"},
    },
)
async def get_summary(job_id: str) -> SummaryResponse:
    job = _get_job_or_404(job_id)
    if job.status != JobStatus.COMPLETED:
        raise HTTPException(
            status_code=409,
            detail="Job is not completed (current status: {}).".format(job.status.value),
        )
    if job.summary is None:
        raise HTTPException(
            status_code=404,
            detail=job.summary_error or "No summary available for this meeting.",
        )
    fields = job.summary.structured.to_dict() if job.summary.structured else {}
    return SummaryResponse(job_id=job.id, summary=job.summary.summary, **fields)


# ---------------------------------------------------------------------------
# Endpoints: Files
# ---------------------------------------------------------------------------


@app.get(
    "/meetings/{job_id}/files",
    response_model=FileListResponse,
    tags=["files"],
    summary="List output files",
    description="Metadata for every transcript file produced for the meeting.",
    responses={
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Transcript not ready"},
    },
)
async def list_meeting_files(job_id: str) -> FileListResponse:
    job = _get_job_or_404(job_id)
    _require_transcript(job)

    files = []
    for fname in job.output_files:
        fpath = job.output_dir / fname
        if fpath.exists():
            files.append(FileInfo(
                filename=fname,
                media_type=_infer_media_type(fname),
                size=fpath.stat().st_size,
            ))
    return FileListResponse(job_id=job.id, files=files)


@app.get(
    "/meetings/{job_id}/files/{filename}",
    tags=["files"],
    summary="Download a single output file",
    description="The filename must be one of the job's output_files.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        404: {"model": ErrorResponse, "description": "Job or file not found"},
        409: {"model": ErrorResponse, "description": "Transcript not ready"},
    },
)
async def download_meeting_file(job_id: str, filename: str) -> Response:
    if "/" in filename or "\\" in filename or ".." in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    job = _get_job_or_404(job_id)
    _require_transcript(job)

    if filename not in job.output_files:
        raise HTTPException(
            status_code=404,
            detail="File '{}' not found in job output files.".format(filename),
        )

    fpath = job.output_dir / filename
    if not fpath.exists():
        raise HTTPException(
            status_code=404,
            detail="File '{}' not found on disk.".format(filename),
        )

    return Response(
        content=fpath.read_bytes(),
        media_type=_infer_media_type(filename),
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats and health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
    description="All supported output formats with identifiers, names and suffixes.",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Entry point for the meeting-companion-api console script."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)


def _infer_media_type(filename: str) -> str:
    """Infer MIME type from filename extension."""
    ext = Path(filename).suffix.lower()
    mapping = {
        ".json": "application/json",
        ".srt": "application/x-subrip",
        ".txt": "text/plain",
    }
    return mapping.get(ext, "application/octet-stream")
