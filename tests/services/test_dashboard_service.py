"""
Tests for services.dashboard_service.DashboardAggregator.
"""

from datetime import datetime, timedelta, timezone

import pytest

from domain.models import ProjectInsightRecord, ProjectSummary, RecentMeeting, TaskStatusBreakdown
from services.dashboard_service import DashboardAggregator
from services.insight_extractor import ExecutiveSummarizer
from shared_utils.error_handler import NotFoundError, ValidationError


@pytest.fixture()
def aggregator(mock_store) -> DashboardAggregator:
    return DashboardAggregator(mock_store, ExecutiveSummarizer(None))


def _summary(pid: str = "p1", timeline: str = "ON_TRACK", value: float = 100.0) -> ProjectSummary:
    return ProjectSummary(
        id=pid,
        name=f"Project {pid}",
        estimated_value=value,
        profit_margin_percent=12.0,
        timeline_status=timeline,
    )


class TestDashboard:
    def test_unknown_project(self, aggregator) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            aggregator.dashboard("missing")
        assert exc_info.value.http_status == 404
        assert exc_info.value.message == "Project not found"

    @pytest.mark.parametrize("pid", ["", "  "])
    def test_blank_id(self, aggregator, pid) -> None:
        with pytest.raises(ValidationError, match="Project ID required"):
            aggregator.dashboard(pid)

    def test_quiet_project_has_empty_lists(self, aggregator, mock_store) -> None:
        mock_store.get_project_summary.return_value = _summary()

        view = aggregator.dashboard("p1")
        body = view.model_dump(mode="json", by_alias=True)

        assert body["insights"] == []
        assert body["recentMeetings"] == []
        assert body["taskBreakdown"] == []
        assert body["executiveSummary"] == "Project Project p1 is on_track with 12.0% profit margin. 0 insights requiring attention."

    def test_aggregates_store_reads(self, aggregator, mock_store) -> None:
        mock_store.get_project_summary.return_value = _summary()
        mock_store.list_insights.return_value = [
            ProjectInsightRecord(id="i1", project_id="p1", insight_type="risk", title="Steel", source_meeting_id="t1")
        ]
        mock_store.list_recent_meetings.return_value = [RecentMeeting(title="Sync", date="2026-10-10")]
        mock_store.task_breakdown.return_value = [TaskStatusBreakdown(status="todo", count=2)]

        view = aggregator.dashboard("p1")

        assert len(view.insights) == 1
        assert view.recent_meetings[0].title == "Sync"
        assert view.task_breakdown[0].count == 2
        mock_store.list_insights.assert_called_once_with("p1", 10)

        pid, since, limit = mock_store.list_recent_meetings.call_args[0]
        assert (pid, limit) == ("p1", 5)
        cutoff = datetime.fromisoformat(since)
        expected = datetime.now(timezone.utc) - timedelta(days=30)
        assert abs((cutoff - expected).total_seconds()) < 60


class TestListProjects:
    def test_counts_and_total_value(self, aggregator, mock_store) -> None:
        mock_store.list_project_summaries.return_value = [
            _summary("a", "ON_TRACK", 100),
            _summary("b", "AT_RISK", 250.5),
            _summary("c", "AT_RISK", 0),
            _summary("d", "OVERDUE", 50),
        ]

        view = aggregator.list_projects(status="active", client_id="c1")

        mock_store.list_project_summaries.assert_called_once_with(status="active", client_id="c1")
        assert view.summary.model_dump(by_alias=True) == {
            "total": 4,
            "onTrack": 1,
            "atRisk": 2,
            "overdue": 1,
            "totalValue": 400.5,
        }

    def test_empty_registry(self, aggregator) -> None:
        view = aggregator.list_projects()
        assert view.projects == []
        assert view.summary.total == 0


class TestListInsights:
    def test_passes_filter(self, aggregator, mock_store) -> None:
        aggregator.list_insights("p1", requires_action=True, limit=5)
        mock_store.list_insights.assert_called_once_with("p1", 5, requires_action=True)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, aggregator, limit) -> None:
        with pytest.raises(ValidationError):
            aggregator.list_insights("p1", limit=limit)

    def test_missing_project_id(self, aggregator) -> None:
        with pytest.raises(ValidationError):
            aggregator.list_insights("")
