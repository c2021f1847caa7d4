"""
Tests for domain.models: transcript normalisation, insight parsing rules
and wire shapes of the response models.
"""

import pytest
from pydantic import ValidationError

from domain.models import (
    ChatResponse,
    DashboardView,
    InsightItem,
    MeetingInsight,
    MeetingType,
    ProjectContext,
    ProjectListSummary,
    ProjectSummary,
    RiskFlag,
    RiskSeverity,
    SyncResult,
    TimelineStatus,
    Transcript,
    TranscriptSentence,
)


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class TestTranscript:
    def test_epoch_millis_date_normalised_to_iso(self) -> None:
        t = Transcript(id="t1", date=1759330800000)
        assert t.date == "2025-10-01T15:00:00+00:00"

    def test_numeric_string_date_treated_as_millis(self) -> None:
        t = Transcript(id="t1", date="1759330800000")
        assert t.date.startswith("2025-10-01T15:00:00")

    def test_iso_date_kept(self) -> None:
        t = Transcript(id="t1", date="2026-01-15T09:00:00Z")
        assert t.date == "2026-01-15T09:00:00Z"

    def test_missing_title_defaults(self) -> None:
        assert Transcript(id="t1", title=None).title == "Untitled Meeting"

    def test_full_text_is_speaker_attributed(self, sample_transcript) -> None:
        lines = sample_transcript.full_text.splitlines()
        assert lines[0] == "Alice: Framing inspection is booked for Friday."
        assert lines[1].startswith("Bob: ")

    def test_missing_speaker_becomes_unknown(self) -> None:
        s = TranscriptSentence(text="hello", speaker_name=None)
        assert s.speaker_name == "Unknown"

    @pytest.mark.parametrize(
        "seconds,minutes",
        [(0, 0), (29, 0), (30, 1), (89, 1), (90, 2), (1830, 31)],
    )
    def test_duration_minutes_rounds_half_up(self, seconds, minutes) -> None:
        assert Transcript(id="t1", duration=seconds).duration_minutes == minutes

    def test_participants_skip_blank_names(self) -> None:
        t = Transcript(
            id="t1",
            attendees=[{"display_name": "Alice"}, {"display_name": ""}],
        )
        assert t.participants == ["Alice"]


# ---------------------------------------------------------------------------
# MeetingInsight
# ---------------------------------------------------------------------------


class TestMeetingInsight:
    def test_accepts_camel_case_keys(self) -> None:
        insight = MeetingInsight.model_validate(
            {
                "summary": "s",
                "meetingType": "Client",
                "actionItems": ["a"],
                "decisions": [],
                "risks": [{"title": "r", "severity": "HIGH"}],
                "insights": [
                    {"type": "Blocker", "title": "b", "requiresAction": True, "confidence": 0.7}
                ],
                "followUpRequired": True,
            }
        )
        assert insight.meeting_type == MeetingType.CLIENT
        assert insight.action_items == ["a"]
        assert insight.risks[0].severity == RiskSeverity.HIGH
        assert insight.insights[0].requires_action is True
        assert insight.follow_up_required is True

    def test_unknown_meeting_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MeetingInsight(summary="s", meeting_type="retro")

    def test_confidence_out_of_range_rejected(self) -> None:
        with pytest.raises(ValidationError):
            InsightItem(type="risk", title="t", confidence=1.5)

    def test_fallback_shape(self) -> None:
        insight = MeetingInsight.fallback("Budget Review")
        assert insight.summary == "Meeting: Budget Review"
        assert insight.meeting_type == MeetingType.PROJECT
        assert insight.action_items == []
        assert insight.decisions == []
        assert insight.risks == []
        assert insight.insights == []
        assert insight.follow_up_required is False

    def test_risk_severity_defaults_to_medium(self) -> None:
        assert RiskFlag(title="r").severity == RiskSeverity.MEDIUM


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class TestProjectSummary:
    def test_null_columns_become_defaults(self) -> None:
        p = ProjectSummary(
            id="p1",
            name="Alpha",
            status=None,
            estimated_value=None,
            actual_cost=None,
            priority=None,
            timeline_status=None,
        )
        assert p.status == "active"
        assert p.estimated_value == 0
        assert p.timeline_status == TimelineStatus.ON_TRACK
        assert p.budget_health == "HEALTHY"

    def test_extra_view_columns_ignored(self) -> None:
        p = ProjectSummary(id="p1", name="Alpha", created_at="2026-01-01")
        assert p.name == "Alpha"


# ---------------------------------------------------------------------------
# Wire shapes
# ---------------------------------------------------------------------------


class TestSyncResult:
    def test_success_shape(self) -> None:
        body = SyncResult(count=2, message="ok", insights_generated=3, failed=1).to_response()
        assert body == {"count": 2, "message": "ok", "insightsGenerated": 3, "failed": 1}

    def test_error_shape(self) -> None:
        body = SyncResult(error="Failed to sync meetings", details="boom").to_response()
        assert body == {"error": "Failed to sync meetings", "details": "boom", "count": 0}


class TestChatResponse:
    def test_without_context(self) -> None:
        assert ChatResponse(response="hi").to_response() == {
            "response": "hi",
            "projectContext": None,
        }

    def test_with_context(self) -> None:
        project = ProjectSummary(id="p1", name="Goodwill", budget_health="AT_RISK")
        body = ChatResponse(
            response="hi", project_context=ProjectContext(project=project)
        ).to_response()
        assert body["projectContext"] == {
            "projectName": "Goodwill",
            "status": "active",
            "budgetHealth": "AT_RISK",
        }


class TestDashboardView:
    def test_dump_uses_camel_aliases(self) -> None:
        view = DashboardView(
            project=ProjectSummary(id="p1", name="Alpha"),
            executive_summary="summary",
        )
        body = view.model_dump(mode="json", by_alias=True)
        assert body["recentMeetings"] == []
        assert body["taskBreakdown"] == []
        assert body["executiveSummary"] == "summary"
        assert body["insights"] == []


class TestProjectListSummary:
    def test_camel_dump(self) -> None:
        body = ProjectListSummary(total=1, on_track=1, total_value=5.0).model_dump(by_alias=True)
        assert body == {"total": 1, "onTrack": 1, "atRisk": 0, "overdue": 0, "totalValue": 5.0}
