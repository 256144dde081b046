"""Async HTTP client for the transcription and summarization backends.

WHY: The pipeline needs word-level transcription of an uploaded meeting
and a structured summary of the resulting text. Both are remote
services; this module keeps HTTP details out of the pipeline so the
service and tests only see typed results.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. MeetingAIClient is an
async context manager: enter it to get an authenticated client, exit to
close the connection pool. One method per backend call:
transcribe_audio → generate_summary.

RULES:
- Always use the async context manager (async with MeetingAIClient() as client:)
- api_key defaults to load_api_key() from .env
- Non-2xx responses raise MeetingAIError with status code and body
- A 2xx body that is not a JSON object also raises MeetingAIError
- Status callback (on_status) is optional; when provided, called with
  human-readable status strings
- transport is for tests (httpx.MockTransport); production leaves it None
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import httpx

from meeting_companion.api.models import SummaryResult, TranscriptionResult
from meeting_companion.config import MEETING_AI_BASE_URL, load_api_key

logger = logging.getLogger(__name__)


class MeetingAIError(Exception):
    """Raised when a backend returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Meeting AI API error {status_code}: {message}")


def _json_body(resp: httpx.Response) -> dict:
    try:
        body = resp.json()
    except ValueError:
        raise MeetingAIError(resp.status_code, f"Response is not JSON: {resp.text[:200]}")
    if not isinstance(body, dict):
        raise MeetingAIError(resp.status_code, f"Expected a JSON object, got {type(body).__name__}")
    return body


class MeetingAIClient:
    """Async client for the speech-to-text and summarization API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or MEETING_AI_BASE_URL).rstrip("/")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> MeetingAIClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(600.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "MeetingAIClient must be used as an async context manager: "
                "async with MeetingAIClient() as client: ..."
            )
        return self._client

    async def transcribe_audio(
        self,
        file_path: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> TranscriptionResult:
        """Upload a recording and return its word-level transcription.

        RULES:
        - Sends multipart/form-data POST /transcriptions
        - Words are returned in backend order; sorting is the core's job
        - Raises MeetingAIError on non-2xx or non-JSON responses
        """
        client = self._ensure_client()
        if on_status:
            on_status("Transcribing file...")

        file_path = Path(file_path)
        with open(file_path, "rb") as f:
            resp = await client.post(
                "/transcriptions",
                files={"file": (file_path.name, f)},
            )

        if resp.status_code not in (200, 201):
            raise MeetingAIError(resp.status_code, resp.text)

        result = TranscriptionResult.from_dict(_json_body(resp))
        logger.info(
            "Transcribed %s: %d words (id=%s)", file_path.name, len(result.words), result.id,
        )
        if on_status:
            on_status("Transcription completed.")
        return result

    async def generate_summary(
        self,
        transcript_text: str,
        on_status: Callable[[str], None] | None = None,
    ) -> SummaryResult:
        """Summarize transcript text into a structured meeting summary.

        RULES:
        - Sends POST /summaries with {"text": transcript_text}
        - Raises MeetingAIError on non-2xx or non-JSON responses
        """
        client = self._ensure_client()
        if on_status:
            on_status("Generating summary...")

        resp = await client.post("/summaries", json={"text": transcript_text})

        if resp.status_code not in (200, 201):
            raise MeetingAIError(resp.status_code, resp.text)

        result = SummaryResult.from_dict(_json_body(resp))
        if on_status:
            on_status("Summary generated.")
        return result
