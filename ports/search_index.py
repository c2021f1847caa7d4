"""
Port interface for the external semantic search index.

Implementations: AutoRAGSearchIndexAdapter (adapters/)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from domain.models import SearchAnswer


@runtime_checkable
class SearchIndexPort(Protocol):
    """Resync signal plus search-and-answer over published documents."""

    def trigger_sync(self) -> None:
        """Ask the index to re-read the document store.

        Raises:
            ConfigurationError: If credentials are missing.
            ExternalServiceError: If the signal could not be delivered.
        """
        ...

    def search(self, query: str) -> SearchAnswer:
        """Answer *query* from indexed documents.

        Raises:
            ConfigurationError: If credentials are missing.
            ExternalServiceError: If the service errors; ``context["status_code"]``
                carries the HTTP status when one was received.
        """
        ...
