"""
Port interface for published document (blob) storage.

Implementations: S3DocumentStoreAdapter (adapters/)
"""

from __future__ import annotations

from typing import Dict, List, Protocol, runtime_checkable


@runtime_checkable
class DocumentStorePort(Protocol):
    """Key/value storage of rendered documents."""

    def put_document(self, key: str, content: str, content_type: str) -> str:
        """Create or fully overwrite the document stored at *key*.

        Args:
            key: Object key (e.g. meetings/meeting-<id>.md).
            content: Document body.
            content_type: MIME type stored alongside the body.

        Returns:
            Canonical URI of the stored object.

        Raises:
            ExternalServiceError: If the write fails.
        """
        ...

    def get_document(self, key: str) -> str:
        """Return the body stored at *key*.

        Raises:
            ExternalServiceError: If the read fails.
        """
        ...

    def list_documents(self, prefix: str) -> List[Dict[str, object]]:
        """List stored objects under *prefix*.

        Returns:
            Dicts with ``key``, ``size`` and ``last_modified`` (ISO 8601).
        """
        ...
