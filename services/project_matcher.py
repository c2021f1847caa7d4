"""
Project matcher: best-effort association of free text with a tracked project.

A miss is a normal outcome, never an error. Store failures are logged and
reported as a miss so association cannot block ingestion or chat.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from domain.models import Project
from ports.intelligence_store import IntelligenceStorePort
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import AppException
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.MATCHING)


class ProjectMatcher:
    """Keyword and title heuristics over the project registry."""

    def __init__(
        self,
        store: IntelligenceStorePort,
        keywords: Sequence[str] = Defaults.PROJECT_KEYWORDS,
    ) -> None:
        self._store = store
        self._keywords = [k.strip().lower() for k in keywords if k and k.strip()]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def match(self, text: str) -> Optional[Project]:
        """Find the project a free-text query or transcript refers to.

        Candidates are the configured keywords plus registered project names.
        The one occurring earliest in *text* decides the lookup; at the same
        position the longer keyword wins.

        Args:
            text: Chat message, transcript title or body.

        Returns:
            Most recently updated project whose name contains the keyword,
            or None.
        """
        if not text or not text.strip():
            return None
        haystack = text.lower()

        try:
            keyword = self._earliest_keyword(haystack)
            if keyword is None:
                return None
            project = self._store.find_project_by_keyword(keyword)
        except AppException as exc:
            logger.warning("project_match_failed", error=exc.message)
            return None

        logger.debug(
            "project_keyword_matched",
            keyword=keyword,
            project_id=project.id if project else None,
        )
        return project

    def match_title(self, title: str) -> Optional[Project]:
        """Match a meeting title against project names and aliases."""
        if not title or not title.strip():
            return None
        try:
            project = self._store.find_project_for_title(title)
        except AppException as exc:
            logger.warning("project_title_match_failed", title=title, error=exc.message)
            return None

        if project is None:
            logger.info("project_not_associated", title=title)
        else:
            logger.info("project_associated", title=title, project_id=project.id)
        return project

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _earliest_keyword(self, haystack: str) -> Optional[str]:
        hits = []
        for keyword in self._candidate_keywords():
            position = haystack.find(keyword)
            if position != -1:
                hits.append((position, -len(keyword), keyword))
        return min(hits)[2] if hits else None

    def _candidate_keywords(self) -> List[str]:
        keywords = list(self._keywords)
        for name in self._store.list_project_names():
            lowered = name.strip().lower()
            if lowered and lowered not in keywords:
                keywords.append(lowered)
        return keywords
