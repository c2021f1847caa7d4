"""
LLM-assisted extraction of structured meeting intelligence.

Both classes here degrade instead of raising: the pipeline must keep
moving when the model is missing, slow, or returns garbage.
"""

from __future__ import annotations

from typing import List, Optional

from core_intelligence.parser.insight_parser import InsightParser
from domain.models import MeetingInsight, ProjectInsightRecord, ProjectSummary, RecentMeeting, Transcript
from ports.llm_provider import LLMProviderPort
from shared_utils.constants import Defaults, LogScope
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.EXTRACTION)


INSIGHT_PROMPT_TEMPLATE = """Analyze this business meeting transcript for actionable insights:

Meeting: {title}
Content: {content}

Extract and return JSON with:
{{
  "summary": "executive summary in 2-3 sentences",
  "meetingType": "project|client|planning|review|standup",
  "actionItems": ["specific action 1", "action 2"],
  "decisions": ["decision 1", "decision 2"],
  "risks": [{{"title": "risk name", "severity": "low|medium|high"}}],
  "insights": [{{"type": "risk|opportunity|blocker", "title": "insight", "description": "details", "requiresAction": true, "confidence": 0.8}}],
  "followUpRequired": true
}}

Focus on business impact, project health, and leadership priorities.
Return only the JSON object."""


SUMMARY_PROMPT_TEMPLATE = """Create an executive summary for this project:

Project: {name} ({status})
Budget: ${budget:,.0f} ({margin}% margin)
Timeline: {timeline}

Recent Insights: {insights}
Recent Meetings: {meeting_count} in last 30 days

Provide a 3-sentence executive summary focusing on:
1. Current status and health
2. Key risks or opportunities
3. Recommended next actions"""


class InsightExtractor:
    """Turns a transcript into a MeetingInsight. Never raises."""

    def __init__(
        self,
        llm_provider: Optional[LLMProviderPort],
        char_limit: int = Defaults.TRANSCRIPT_CHAR_LIMIT,
    ) -> None:
        self._llm = llm_provider
        self._char_limit = char_limit

    def build_prompt(self, transcript: Transcript) -> str:
        return INSIGHT_PROMPT_TEMPLATE.format(
            title=transcript.title,
            content=transcript.full_text[: self._char_limit],
        )

    def extract(self, transcript: Transcript) -> MeetingInsight:
        """Extract structured insight from *transcript*.

        Returns:
            The parsed insight, or ``MeetingInsight.fallback(title)`` when no
            LLM is configured, the call fails, or the output is unusable.
        """
        if self._llm is None:
            logger.info("insight_extraction_skipped", transcript_id=transcript.id, reason="no_llm")
            return MeetingInsight.fallback(transcript.title)

        try:
            raw = self._llm.generate(self.build_prompt(transcript))
        except Exception as exc:
            logger.warning(
                "insight_generation_failed",
                transcript_id=transcript.id,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return MeetingInsight.fallback(transcript.title)

        insight = InsightParser.parse(raw)
        if insight is None:
            logger.warning("insight_fallback_used", transcript_id=transcript.id)
            return MeetingInsight.fallback(transcript.title)

        logger.info(
            "insight_extracted",
            transcript_id=transcript.id,
            meeting_type=insight.meeting_type.value,
            action_items=len(insight.action_items),
            insights=len(insight.insights),
        )
        return insight


class ExecutiveSummarizer:
    """Short executive summary for a project dashboard. Never raises."""

    def __init__(self, llm_provider: Optional[LLMProviderPort], enabled: bool = True) -> None:
        self._llm = llm_provider
        self._enabled = enabled

    @staticmethod
    def fallback(project: ProjectSummary, insights: List[ProjectInsightRecord]) -> str:
        # Status keeps its token form, e.g. "at_risk"
        timeline = project.timeline_status.value.lower()
        if project.profit_margin_percent is None:
            margin = "no recorded profit margin"
        else:
            margin = f"{project.profit_margin_percent}% profit margin"
        return (
            f"Project {project.name} is {timeline} with {margin}. "
            f"{len(insights)} insights requiring attention."
        )

    def summarize(
        self,
        project: ProjectSummary,
        insights: List[ProjectInsightRecord],
        meetings: List[RecentMeeting],
    ) -> str:
        if not self._enabled or self._llm is None:
            return self.fallback(project, insights)

        prompt = SUMMARY_PROMPT_TEMPLATE.format(
            name=project.name,
            status=project.status,
            budget=project.estimated_value,
            margin=project.profit_margin_percent,
            timeline=project.timeline_status.value,
            insights=", ".join(i.title for i in insights[:3]),
            meeting_count=len(meetings),
        )
        try:
            summary = self._llm.generate(prompt).strip()
        except Exception as exc:
            logger.warning("executive_summary_failed", project_id=project.id, error=str(exc))
            return self.fallback(project, insights)

        return summary or self.fallback(project, insights)
