"""
Document catalog: metadata listing of published meeting documents.
"""

from __future__ import annotations

from typing import List

from core_intelligence.rendering.markdown import document_title, parse_front_matter, summarize_document
from domain.models import DocumentMetadata
from ports.document_store import DocumentStorePort
from shared_utils.constants import DocumentConfig, LogScope
from shared_utils.error_handler import AppException
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.PUBLISHING)


def _as_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class DocumentCatalog:
    """Reads documents back from the store and describes them."""

    def __init__(
        self,
        document_store: DocumentStorePort,
        prefix: str = DocumentConfig.MEETING_PREFIX,
    ) -> None:
        self._documents = document_store
        self._prefix = prefix.strip("/") + "/"

    def list_documents(self) -> List[DocumentMetadata]:
        """Metadata for every markdown document, newest first.

        Documents that cannot be read are skipped with a warning.
        """
        entries = self._documents.list_documents(self._prefix)
        catalog: List[DocumentMetadata] = []
        for entry in entries:
            key = str(entry["key"])
            if not key.endswith(".md"):
                continue
            try:
                content = self._documents.get_document(key)
            except AppException as exc:
                logger.warning("document_unreadable", key=key, error=exc.message)
                continue
            catalog.append(self.describe(key, content, entry))

        catalog.sort(key=lambda d: d.last_modified or "", reverse=True)
        logger.info("documents_catalogued", count=len(catalog))
        return catalog

    @staticmethod
    def describe(key: str, content: str, entry: dict) -> DocumentMetadata:
        filename = key.rsplit("/", 1)[-1]
        front_matter = parse_front_matter(content)
        title = document_title(content, fallback=filename[: -len(".md")])
        project_id = front_matter.get("project_id")
        return DocumentMetadata(
            key=key,
            title=title,
            project_id=None if project_id in (None, "", "unknown") else project_id,
            meeting_type=front_matter.get("meeting_type"),
            date=front_matter.get("date"),
            duration=front_matter.get("duration"),
            action_items=_as_int(front_matter.get("action_items")),
            risks_identified=_as_int(front_matter.get("risks_identified")),
            summary=summarize_document(content, title),
            size_bytes=int(entry.get("size") or 0),
            last_modified=entry.get("last_modified"),
        )
