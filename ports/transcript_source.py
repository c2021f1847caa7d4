"""
Port interface for the external meeting transcript source.

Implementations: FirefliesTranscriptSourceAdapter (adapters/)
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from domain.models import Transcript


@runtime_checkable
class TranscriptSourcePort(Protocol):
    """Paged access to recorded meeting transcripts."""

    def fetch_transcripts(self, limit: int) -> Optional[List[Transcript]]:
        """Fetch the most recent transcripts.

        Args:
            limit: Maximum number of transcripts to return.

        Returns:
            Transcripts, newest first, or None when the source returned no
            transcript list at all.

        Raises:
            ConfigurationError: If credentials are missing (no request is sent).
            ExternalServiceError: If the source is unreachable or reports errors.
        """
        ...
