"""
Tests for services.insight_extractor (InsightExtractor, ExecutiveSummarizer).
"""

import json

import pytest

from domain.models import (
    MeetingType,
    ProjectInsightRecord,
    ProjectSummary,
    RecentMeeting,
    TranscriptSentence,
)
from services.insight_extractor import ExecutiveSummarizer, InsightExtractor
from shared_utils.error_handler import ModelError


LLM_JSON = json.dumps(
    {
        "summary": "Steel is late.",
        "meetingType": "Review",
        "actionItems": ["Call supplier"],
        "decisions": [],
        "risks": [{"title": "Steel", "severity": "HIGH"}],
        "insights": [{"type": "risk", "title": "Steel", "requiresAction": True, "confidence": 0.8}],
        "followUpRequired": True,
    }
)


class TestInsightExtractor:
    def test_parses_llm_output(self, mock_llm, sample_transcript) -> None:
        mock_llm.generate.return_value = f"```json\n{LLM_JSON}\n```"

        insight = InsightExtractor(mock_llm).extract(sample_transcript)

        assert insight.summary == "Steel is late."
        assert insight.meeting_type == MeetingType.REVIEW
        assert insight.insights[0].requires_action is True

    def test_no_llm_uses_fallback(self, sample_transcript) -> None:
        insight = InsightExtractor(None).extract(sample_transcript)
        assert insight.summary == "Meeting: Goodwill Weekly Sync"
        assert insight.action_items == []
        assert insight.meeting_type == MeetingType.PROJECT

    def test_llm_failure_uses_fallback(self, mock_llm, sample_transcript) -> None:
        mock_llm.generate.side_effect = ModelError("timeout")
        insight = InsightExtractor(mock_llm).extract(sample_transcript)
        assert insight.summary == "Meeting: Goodwill Weekly Sync"

    def test_unparseable_output_uses_fallback(self, mock_llm, sample_transcript) -> None:
        mock_llm.generate.return_value = "I could not analyse this meeting."
        insight = InsightExtractor(mock_llm).extract(sample_transcript)
        assert insight.summary == "Meeting: Goodwill Weekly Sync"

    def test_prompt_truncates_transcript(self, make_transcript) -> None:
        transcript = make_transcript(
            sentences=[TranscriptSentence(text="x" * 5000, speaker_name="Alice")]
        )
        prompt = InsightExtractor(None, char_limit=2500).build_prompt(transcript)

        assert "Meeting: Goodwill Weekly Sync" in prompt
        assert ("Alice: " + "x" * 2493) in prompt
        assert "x" * 2494 not in prompt


@pytest.fixture()
def summary_project() -> ProjectSummary:
    return ProjectSummary(
        id="p-goodwill",
        name="Goodwill",
        estimated_value=1500000,
        profit_margin_percent=18.5,
        timeline_status="AT_RISK",
    )


def _insight(title: str) -> ProjectInsightRecord:
    return ProjectInsightRecord(
        id=f"i-{title}",
        project_id="p-goodwill",
        insight_type="risk",
        title=title,
        source_meeting_id="t1",
    )


class TestExecutiveSummarizer:
    def test_fallback_text(self, summary_project) -> None:
        text = ExecutiveSummarizer.fallback(summary_project, [_insight("a"), _insight("b")])
        assert text == (
            "Project Goodwill is at_risk with 18.5% profit margin. "
            "2 insights requiring attention."
        )

    def test_fallback_without_margin(self, summary_project) -> None:
        project = summary_project.model_copy(update={"profit_margin_percent": None})
        assert ExecutiveSummarizer.fallback(project, []) == (
            "Project Goodwill is at_risk with no recorded profit margin. "
            "0 insights requiring attention."
        )

    def test_disabled_uses_fallback(self, mock_llm, summary_project) -> None:
        text = ExecutiveSummarizer(mock_llm, enabled=False).summarize(summary_project, [], [])
        assert text.startswith("Project Goodwill is at_risk")
        mock_llm.generate.assert_not_called()

    def test_llm_summary_used(self, mock_llm, summary_project) -> None:
        mock_llm.generate.return_value = "  Healthy overall.  "
        meetings = [RecentMeeting(title="Sync", date="2026-10-01")]

        text = ExecutiveSummarizer(mock_llm).summarize(summary_project, [_insight("Steel")], meetings)

        assert text == "Healthy overall."
        prompt = mock_llm.generate.call_args[0][0]
        assert "Project: Goodwill (active)" in prompt
        assert "Budget: $1,500,000 (18.5% margin)" in prompt
        assert "Recent Insights: Steel" in prompt
        assert "Recent Meetings: 1 in last 30 days" in prompt

    @pytest.mark.parametrize("outcome", [ModelError("down"), ""])
    def test_failure_or_empty_uses_fallback(self, mock_llm, summary_project, outcome) -> None:
        if isinstance(outcome, Exception):
            mock_llm.generate.side_effect = outcome
        else:
            mock_llm.generate.return_value = outcome
        text = ExecutiveSummarizer(mock_llm).summarize(summary_project, [], [])
        assert text == ExecutiveSummarizer.fallback(summary_project, [])
