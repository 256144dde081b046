"""In-memory meeting job store with TTL cleanup.

WHY: Processing a meeting takes from seconds to many minutes
(transcription, segmentation, summarization). The API returns a job ID
immediately and does the work in the background, so job state has to
live somewhere both the background runner and the polling endpoints can
reach. An in-memory store is sufficient: transcripts are not persisted.

HOW: Three components work together:
  JobStatus — enum of valid job states
  Job       — dataclass holding job metadata, its TranscriptSession, the
              built Transcript, the summary, and a temp directory
  JobStore  — thread-safe dict-based store with create/get/update/delete
              and TTL cleanup

RULES:
- All store mutations are protected by threading.Lock
- Each job gets a dedicated temp directory for the upload and output files
- Each job owns one TranscriptSession; it is closed when the job goes away
- TTL-based expiry removes stale jobs and cleans up their temp directories
- Job IDs are UUID4 hex strings generated at creation time
- Default TTL is 1 hour (3600 seconds)
"""

from __future__ import annotations

import enum
import logging
import shutil
import tempfile
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from meeting_companion.api.models import SummaryResult
from meeting_companion.core.ir import Transcript
from meeting_companion.core.session import TranscriptSession

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600

_UNSET: Any = object()


class JobStatus(str, enum.Enum):
    """Valid states for a meeting job.

    RULES:
    - pending: job created, not yet started
    - transcribing: recording sent to the speech-to-text backend
    - segmenting: words received, building segments and output files
    - summarizing: transcript ready, waiting for the summary
    - completed: transcript (and summary, if it succeeded) available
    - failed: transcription failed; nothing to show
    """

    PENDING = "pending"
    TRANSCRIBING = "transcribing"
    SEGMENTING = "segmenting"
    SUMMARIZING = "summarizing"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = (JobStatus.COMPLETED, JobStatus.FAILED)

# Transcript data can be served from these states on.
TRANSCRIPT_READY_STATUSES = (JobStatus.SUMMARIZING, JobStatus.COMPLETED)


@dataclass
class Job:
    """Metadata and state for a single meeting.

    RULES:
    - id: UUID4 hex string, unique and immutable after creation
    - session: segments and sync state for this meeting's transcript
    - transcript: built Transcript IR once segmentation finished
    - error: set when status is FAILED
    - transcript_error: set when segmentation failed (recoverable; job
      continues with an empty segment list)
    - summary_error: set when summarization failed (transcript stays usable)
    """

    id: str
    status: JobStatus
    filename: str
    output_dir: Path
    created_at: float
    updated_at: float
    session: TranscriptSession = field(default_factory=TranscriptSession)
    completed_at: Optional[float] = None
    error: Optional[str] = None
    transcript_error: Optional[str] = None
    summary_error: Optional[str] = None
    transcript: Optional[Transcript] = None
    summary: Optional[SummaryResult] = None
    config: Dict[str, Any] = field(default_factory=dict)
    output_files: List[str] = field(default_factory=list)


class JobStore:
    """Thread-safe in-memory store for meeting jobs."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_jobs: int = 100,
    ) -> None:
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_jobs = max_jobs

    def create_job(
        self,
        filename: str,
        config: Optional[Dict[str, Any]] = None,
    ) -> Job:
        """Create a new job in PENDING state with a dedicated temp directory.

        RULES:
        - Raises ValueError when max_jobs is reached
        - The temp directory persists until the job is deleted or expires
        """
        with self._lock:
            if len(self._jobs) >= self.max_jobs:
                raise ValueError(
                    "Maximum number of concurrent jobs ({}) reached".format(
                        self.max_jobs
                    )
                )

            job_id = uuid.uuid4().hex
            now = time.time()
            output_dir = Path(tempfile.mkdtemp(prefix="meeting_job_"))

            job = Job(
                id=job_id,
                status=JobStatus.PENDING,
                filename=filename,
                output_dir=output_dir,
                created_at=now,
                updated_at=now,
                config=config or {},
            )

            self._jobs[job_id] = job

        logger.info("Created job %s for file %s", job_id, filename)
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        """Retrieve a job by ID, or None if not found."""
        with self._lock:
            return self._jobs.get(job_id)

    def update_job(
        self,
        job_id: str,
        status: Optional[JobStatus] = None,
        error: Optional[str] = None,
        output_files: Optional[List[str]] = None,
        transcript: Optional[Transcript] = None,
        summary: Optional[SummaryResult] = None,
        transcript_error: Optional[str] = _UNSET,
        summary_error: Optional[str] = _UNSET,
    ) -> Optional[Job]:
        """Update a job's mutable fields.

        RULES:
        - Returns the updated Job, or None if job_id not found
        - Only supplied arguments are applied; transcript_error and
          summary_error may be explicitly reset to None
        - updated_at is always bumped
        - completed_at is set when status becomes COMPLETED or FAILED
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None

            now = time.time()

            if status is not None:
                job.status = status
            if error is not None:
                job.error = error
            if output_files is not None:
                job.output_files = output_files
            if transcript is not None:
                job.transcript = transcript
            if summary is not None:
                job.summary = summary
            if transcript_error is not _UNSET:
                job.transcript_error = transcript_error
            if summary_error is not _UNSET:
                job.summary_error = summary_error

            job.updated_at = now

            if job.status in TERMINAL_STATUSES:
                job.completed_at = now

            return job

    def delete_job(self, job_id: str) -> bool:
        """Delete a job, close its session and remove its temp directory.

        RULES:
        - Returns True if the job was found and deleted, False otherwise
        - Temp directory removal is best-effort (logged but not raised)
        """
        with self._lock:
            job = self._jobs.pop(job_id, None)

        if job is None:
            return False

        self._release(job)
        logger.info("Deleted job %s", job_id)
        return True

    def cleanup_expired(self) -> int:
        """Remove terminal jobs whose completed_at is older than the TTL.

        Returns the number of removed jobs.
        """
        now = time.time()
        expired_jobs: List[Job] = []

        with self._lock:
            for job_id, job in list(self._jobs.items()):
                if job.status not in TERMINAL_STATUSES:
                    continue
                if job.completed_at is None:
                    continue
                if now - job.completed_at > self._ttl_seconds:
                    expired_jobs.append(self._jobs.pop(job_id))

        for job in expired_jobs:
            self._release(job)
            logger.info("Expired job %s (completed %.0fs ago)", job.id, now - job.completed_at)

        return len(expired_jobs)

    @staticmethod
    def _release(job: Job) -> None:
        """Close the job's session, then remove its temp directory (never raises)."""
        job.session.close()
        if job.output_dir.exists():
            try:
                shutil.rmtree(job.output_dir)
            except OSError:
                logger.warning("Failed to remove temp dir of job %s: %s", job.id, job.output_dir)
