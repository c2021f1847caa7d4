"""
Dashboard aggregator: read-side views over the intelligence store.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from domain.models import (
    DashboardView,
    ProjectInsightRecord,
    ProjectListSummary,
    ProjectListView,
    TimelineStatus,
)
from ports.intelligence_store import IntelligenceStorePort
from services.insight_extractor import ExecutiveSummarizer
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import NotFoundError, ValidationError
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.DASHBOARD)

MAX_INSIGHT_LIMIT = 100


class DashboardAggregator:
    """Builds project dashboards, project lists and insight feeds."""

    def __init__(
        self,
        store: IntelligenceStorePort,
        summarizer: ExecutiveSummarizer,
        *,
        insight_limit: int = Defaults.DASHBOARD_INSIGHT_LIMIT,
        meeting_limit: int = Defaults.DASHBOARD_MEETING_LIMIT,
        meeting_window_days: int = Defaults.DASHBOARD_MEETING_WINDOW_DAYS,
    ) -> None:
        self._store = store
        self._summarizer = summarizer
        self._insight_limit = insight_limit
        self._meeting_limit = meeting_limit
        self._meeting_window_days = meeting_window_days

    def dashboard(self, project_id: str) -> DashboardView:
        """Aggregate everything known about one project.

        Args:
            project_id: Project identifier.

        Returns:
            DashboardView; list fields are empty (not missing) when the
            project has no activity.

        Raises:
            ValidationError: If *project_id* is blank.
            NotFoundError: If the project does not exist.
        """
        if not project_id or not project_id.strip():
            raise ValidationError("Project ID required")

        project = self._store.get_project_summary(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)

        since = (
            datetime.now(timezone.utc) - timedelta(days=self._meeting_window_days)
        ).isoformat()
        insights = self._store.list_insights(project_id, self._insight_limit)
        meetings = self._store.list_recent_meetings(project_id, since, self._meeting_limit)
        tasks = self._store.task_breakdown(project_id)
        summary = self._summarizer.summarize(project, insights, meetings)

        logger.info(
            "dashboard_built",
            project_id=project_id,
            insights=len(insights),
            recent_meetings=len(meetings),
            task_statuses=len(tasks),
        )
        return DashboardView(
            project=project,
            insights=insights,
            recent_meetings=meetings,
            task_breakdown=tasks,
            executive_summary=summary,
        )

    def list_projects(
        self, status: Optional[str] = None, client_id: Optional[str] = None
    ) -> ProjectListView:
        """Projects with health columns plus portfolio counters."""
        projects = self._store.list_project_summaries(status=status, client_id=client_id)

        def _count(timeline: TimelineStatus) -> int:
            return sum(1 for p in projects if p.timeline_status == timeline)

        summary = ProjectListSummary(
            total=len(projects),
            on_track=_count(TimelineStatus.ON_TRACK),
            at_risk=_count(TimelineStatus.AT_RISK),
            overdue=_count(TimelineStatus.OVERDUE),
            total_value=sum(p.estimated_value or 0 for p in projects),
        )
        return ProjectListView(projects=projects, summary=summary)

    def list_insights(
        self,
        project_id: str,
        requires_action: Optional[bool] = None,
        limit: int = Defaults.DASHBOARD_INSIGHT_LIMIT,
    ) -> List[ProjectInsightRecord]:
        """Newest insights for a project, optionally only actionable ones."""
        if not project_id or not project_id.strip():
            raise ValidationError("Project ID required")
        if limit < 1 or limit > MAX_INSIGHT_LIMIT:
            raise ValidationError(
                f"limit must be between 1 and {MAX_INSIGHT_LIMIT}",
                context={"limit": limit},
            )
        return self._store.list_insights(project_id, limit, requires_action=requires_action)
