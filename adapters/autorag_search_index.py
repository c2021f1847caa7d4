"""
Cloudflare AutoRAG search index adapter.

Implements SearchIndexPort over the AutoRAG REST API with httpx: a sync
trigger that makes the index re-read the document bucket, and the
``ai-search`` search-and-answer endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from domain.models import SearchAnswer
from ports.search_index import SearchIndexPort
from shared_utils.constants import Defaults, LogScope, PLACEHOLDER_CREDENTIALS
from shared_utils.error_handler import ConfigurationError, ExternalServiceError
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.ADAPTER)

SERVICE_NAME = "AutoRAG"


class AutoRAGSearchIndexAdapter:
    """AutoRAG implementation of SearchIndexPort."""

    def __init__(
        self,
        account_id: str,
        api_token: str,
        rag_name: str = "alleato-docs",
        base_url: str = "https://api.cloudflare.com/client/v4",
        max_results: int = Defaults.AUTORAG_MAX_RESULTS,
        match_threshold: float = Defaults.AUTORAG_MATCH_THRESHOLD,
        timeout: float = Defaults.REQUEST_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.account_id = account_id
        self.api_token = api_token
        self.rag_name = rag_name
        self.base_url = base_url.rstrip("/")
        self.max_results = max_results
        self.match_threshold = match_threshold
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def rag_url(self) -> str:
        return f"{self.base_url}/accounts/{self.account_id}/autorag/rags/{self.rag_name}"

    # ------------------------------------------------------------------
    # SearchIndexPort implementation
    # ------------------------------------------------------------------

    def trigger_sync(self) -> None:
        """POST ``/sync`` so the index picks up newly published documents."""
        self._post("sync", None)
        logger.info("autorag_sync_triggered", rag_name=self.rag_name)

    def search(self, query: str) -> SearchAnswer:
        body = {
            "query": query,
            "query_rewrite": True,
            "maximum_number_of_results": self.max_results,
            "match_threshold": self.match_threshold,
        }
        payload = self._post("ai-search", body)

        result = payload.get("result") or {}
        matches = result.get("matches")
        answer = SearchAnswer(
            response=result.get("response") or payload.get("response"),
            match_count=len(matches) if isinstance(matches, list) else None,
        )
        logger.info(
            "autorag_search_completed",
            rag_name=self.rag_name,
            match_count=answer.match_count,
        )
        return answer

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_credentials(self) -> None:
        missing = [
            name
            for name, value in (
                ("CLOUDFLARE_ACCOUNT_ID", self.account_id),
                ("CLOUDFLARE_API_TOKEN", self.api_token),
            )
            if not value or value.strip() in PLACEHOLDER_CREDENTIALS
        ]
        if missing:
            raise ConfigurationError(
                f"{' and '.join(missing)} not configured",
                context={"missing": missing},
            )

    def _post(self, action: str, body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        self._ensure_credentials()
        url = f"{self.rag_url}/{action}"
        try:
            response = self._client.post(
                url,
                json=body,
                headers={
                    "Authorization": f"Bearer {self.api_token}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as exc:
            logger.error("autorag_request_failed", action=action, error=str(exc))
            raise ExternalServiceError(SERVICE_NAME, f"{action} request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error(
                "autorag_http_error",
                action=action,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise ExternalServiceError(
                SERVICE_NAME,
                f"{action} returned HTTP {response.status_code}",
                context={"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        return payload if isinstance(payload, dict) else {}
