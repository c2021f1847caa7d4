"""
Fireflies GraphQL transcript source adapter.

Implements TranscriptSourcePort with httpx.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from domain.models import Transcript, TranscriptAttendee, TranscriptSentence
from ports.transcript_source import TranscriptSourcePort
from shared_utils.constants import Defaults, LogScope, PLACEHOLDER_CREDENTIALS
from shared_utils.error_handler import ConfigurationError, ExternalServiceError
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.ADAPTER)

SERVICE_NAME = "Fireflies"

TRANSCRIPTS_QUERY = """
query GetTranscripts($limit: Int) {
  transcripts(limit: $limit) {
    id
    title
    date
    duration
    meeting_attendees {
      displayName
      email
    }
    transcript_url
    sentences {
      text
      speaker_name
      start_time
    }
  }
}
"""


class FirefliesTranscriptSourceAdapter:
    """Fetches recent transcripts from the Fireflies GraphQL API."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.fireflies.ai/graphql",
        timeout: float = Defaults.REQUEST_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self._client = client or httpx.Client(timeout=timeout)

    # ------------------------------------------------------------------
    # TranscriptSourcePort implementation
    # ------------------------------------------------------------------

    def fetch_transcripts(self, limit: int) -> Optional[List[Transcript]]:
        if not self.api_key or self.api_key.strip() in PLACEHOLDER_CREDENTIALS:
            raise ConfigurationError("FIREFLIES_API_KEY is not configured")

        try:
            response = self._client.post(
                self.api_url,
                json={"query": TRANSCRIPTS_QUERY, "variables": {"limit": limit}},
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            logger.error("fireflies_request_failed", error=str(exc))
            raise ExternalServiceError(SERVICE_NAME, f"request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("fireflies_http_error", status_code=response.status_code)
            raise ExternalServiceError(
                SERVICE_NAME,
                f"HTTP {response.status_code}",
                context={"status_code": response.status_code},
            )

        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise ExternalServiceError(SERVICE_NAME, "response was not JSON") from exc

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors if e)
            logger.error("fireflies_graphql_error", errors=messages)
            raise ExternalServiceError(SERVICE_NAME, f"GraphQL error: {messages}")

        raw = (payload.get("data") or {}).get("transcripts")
        if raw is None:
            logger.info("fireflies_no_transcripts")
            return None

        transcripts = [t for t in (self._to_transcript(item) for item in raw if item) if t]
        logger.info("fireflies_transcripts_fetched", count=len(transcripts), limit=limit)
        return transcripts

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_transcript(item: Dict[str, Any]) -> Optional[Transcript]:
        """Map one GraphQL node; malformed nodes are skipped."""
        try:
            return Transcript(
                id=str(item["id"]),
                title=item.get("title"),
                date=item.get("date"),
                duration=item.get("duration"),
                transcript_url=item.get("transcript_url"),
                attendees=[
                    TranscriptAttendee(
                        display_name=a.get("displayName") or "",
                        email=a.get("email"),
                    )
                    for a in item.get("meeting_attendees") or []
                ],
                sentences=[
                    TranscriptSentence(
                        text=s.get("text") or "",
                        speaker_name=s.get("speaker_name"),
                        start_time=s.get("start_time"),
                    )
                    for s in item.get("sentences") or []
                ],
            )
        except (KeyError, PydanticValidationError) as exc:
            logger.warning("fireflies_transcript_skipped", transcript_id=item.get("id"), error=str(exc))
            return None
