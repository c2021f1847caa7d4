"""
Document publisher: renders the enriched meeting markdown, writes it to
the document store and signals the search index.
"""

from __future__ import annotations

from typing import Optional

from core_intelligence.rendering.markdown import document_key, render_meeting_markdown
from domain.models import MeetingInsight, Transcript
from ports.document_store import DocumentStorePort
from ports.search_index import SearchIndexPort
from shared_utils.constants import DocumentConfig, LogScope
from shared_utils.error_handler import AppException
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.PUBLISHING)


class DocumentPublisher:
    """Publishes one markdown document per meeting."""

    def __init__(
        self,
        document_store: DocumentStorePort,
        search_index: Optional[SearchIndexPort] = None,
        *,
        prefix: str = DocumentConfig.MEETING_PREFIX,
    ) -> None:
        self._documents = document_store
        self._index = search_index
        self._prefix = prefix

    def publish(
        self,
        transcript: Transcript,
        insight: MeetingInsight,
        project_id: Optional[str],
    ) -> str:
        """Render and store the meeting document, overwriting any previous one.

        Returns:
            The document key.

        Raises:
            ExternalServiceError: If the document store write fails.
        """
        key = document_key(transcript.id, self._prefix)
        body = render_meeting_markdown(transcript, insight, project_id)
        self._documents.put_document(key, body, DocumentConfig.MARKDOWN_CONTENT_TYPE)
        logger.info("document_published", key=key, project_id=project_id, size=len(body))
        return key

    def request_index_sync(self) -> bool:
        """Ask the search index to re-read the store.

        Best effort: failures are logged and reported as False.
        """
        if self._index is None:
            return False
        try:
            self._index.trigger_sync()
        except AppException as exc:
            logger.warning("index_sync_failed", error_code=exc.error_code, error=exc.message)
            return False
        return True
