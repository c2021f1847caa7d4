"""
Port interface for the relational intelligence store.

Implementations: SqlIntelligenceStoreAdapter (adapters/)
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from domain.models import (
    MeetingRecord,
    Project,
    ProjectInsightRecord,
    ProjectSummary,
    RecentMeeting,
    TaskStatusBreakdown,
)


@runtime_checkable
class IntelligenceStorePort(Protocol):
    """Meetings, project insights and read-only project/task aggregates."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_meeting(
        self, meeting: MeetingRecord, insights: List[ProjectInsightRecord]
    ) -> None:
        """Upsert *meeting* (replace on id conflict) and append *insights*.

        Both writes happen in a single transaction.

        Raises:
            StorageError: If the store rejects the write.
        """
        ...

    # ------------------------------------------------------------------
    # Project association
    # ------------------------------------------------------------------

    def list_project_names(self) -> List[str]:
        """Names of all registered projects."""
        ...

    def find_project_by_keyword(self, keyword: str) -> Optional[Project]:
        """Most recently updated project whose name contains *keyword*."""
        ...

    def find_project_for_title(self, title: str) -> Optional[Project]:
        """Most recently updated project whose name or alias occurs in *title*.

        Plain case-insensitive substring test; no wildcard characters.
        """
        ...

    # ------------------------------------------------------------------
    # Read-side aggregates
    # ------------------------------------------------------------------

    def get_project_summary(self, project_id: str) -> Optional[ProjectSummary]:
        """Row of the project_dashboard view, or None."""
        ...

    def list_project_summaries(
        self, status: Optional[str] = None, client_id: Optional[str] = None
    ) -> List[ProjectSummary]:
        """Dashboard rows ordered by priority DESC, timeline_status ASC."""
        ...

    def list_insights(
        self,
        project_id: str,
        limit: int,
        requires_action: Optional[bool] = None,
    ) -> List[ProjectInsightRecord]:
        """Insights for a project, newest first."""
        ...

    def list_recent_meetings(
        self, project_id: str, since: str, limit: int
    ) -> List[RecentMeeting]:
        """Meetings dated after *since* (ISO 8601), newest first."""
        ...

    def task_breakdown(self, project_id: str) -> List[TaskStatusBreakdown]:
        """Task count and summed hours grouped by status."""
        ...
