"""
Pure domain models for Meeting Project Intelligence.

These models contain NO storage or vendor dependencies. They represent the
business concepts that flow between ports and services: transcripts coming
in, the structured insight extracted from them, the rows persisted for
meetings and projects, and the read-side views served by the API.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class MeetingType(str, Enum):
    """Closed set of meeting classifications the model may return."""

    PROJECT = "project"
    CLIENT = "client"
    PLANNING = "planning"
    REVIEW = "review"
    STANDUP = "standup"


class RiskSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class InsightType(str, Enum):
    RISK = "risk"
    OPPORTUNITY = "opportunity"
    BLOCKER = "blocker"


class TimelineStatus(str, Enum):
    """Timeline-health classification of a project."""

    ON_TRACK = "ON_TRACK"
    AT_RISK = "AT_RISK"
    OVERDUE = "OVERDUE"


# ---------------------------------------------------------------------------
# Transcript intake
# ---------------------------------------------------------------------------


def _to_iso_date(value: Any) -> str:
    """Normalise epoch milliseconds or datetimes to an ISO-8601 UTC string."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc).isoformat()
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()
    text = str(value).strip()
    if text.isdigit():
        return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc).isoformat()
    return text


class TranscriptAttendee(BaseModel):
    display_name: str = ""
    email: Optional[str] = None


class TranscriptSentence(BaseModel):
    """One speaker-attributed sentence with its offset from meeting start."""

    text: str
    speaker_name: str = "Unknown"
    start_time: Optional[float] = None

    @field_validator("speaker_name", mode="before")
    @classmethod
    def _default_speaker(cls, v: Any) -> str:
        return v or "Unknown"


class Transcript(BaseModel):
    """A recorded meeting as delivered by the transcript source."""

    id: str
    title: str = "Untitled Meeting"
    date: str = ""
    duration: float = 0.0  # seconds
    attendees: List[TranscriptAttendee] = []
    sentences: List[TranscriptSentence] = []
    transcript_url: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalise_date(cls, v: Any) -> str:
        return _to_iso_date(v)

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, v: Any) -> str:
        return v or "Untitled Meeting"

    @field_validator("duration", mode="before")
    @classmethod
    def _default_duration(cls, v: Any) -> float:
        return v or 0.0

    @property
    def full_text(self) -> str:
        """Speaker-attributed text, one sentence per line."""
        return "\n".join(f"{s.speaker_name}: {s.text}" for s in self.sentences)

    @property
    def duration_minutes(self) -> int:
        """Duration in whole minutes, rounding halves up."""
        return int(math.floor(self.duration / 60 + 0.5))

    @property
    def participants(self) -> List[str]:
        return [a.display_name for a in self.attendees if a.display_name]


# ---------------------------------------------------------------------------
# Extracted intelligence
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    """Accepts the camelCase keys the model is prompted to emit."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RiskFlag(_CamelModel):
    title: str
    severity: RiskSeverity = RiskSeverity.MEDIUM

    @field_validator("severity", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class InsightItem(_CamelModel):
    type: InsightType
    title: str
    description: str = ""
    requires_action: bool = False
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("type", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class MeetingInsight(_CamelModel):
    """Structured intelligence derived from one transcript."""

    summary: str
    meeting_type: MeetingType = MeetingType.PROJECT
    action_items: List[str] = []
    decisions: List[str] = []
    risks: List[RiskFlag] = []
    insights: List[InsightItem] = []
    follow_up_required: bool = False

    @field_validator("meeting_type", mode="before")
    @classmethod
    def _lower(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @classmethod
    def fallback(cls, title: str) -> "MeetingInsight":
        """Degraded but structurally valid insight used when extraction fails."""
        return cls(summary=f"Meeting: {title}")


# ---------------------------------------------------------------------------
# Persisted rows
# ---------------------------------------------------------------------------


class Project(BaseModel):
    """A tracked project. Created externally, read-only for the pipeline."""

    id: str
    name: str
    status: str = "active"
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    estimated_value: float = 0.0
    actual_cost: float = 0.0
    profit_margin_percent: Optional[float] = None
    timeline_status: TimelineStatus = TimelineStatus.ON_TRACK
    priority: int = 0
    autorag_project_tag: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("estimated_value", "actual_cost", "priority", mode="before")
    @classmethod
    def _null_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("timeline_status", mode="before")
    @classmethod
    def _default_timeline(cls, v: Any) -> Any:
        return v or TimelineStatus.ON_TRACK

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v: Any) -> Any:
        return v or "active"


class ProjectSummary(Project):
    """Row of the ``project_dashboard`` view."""

    recent_meetings: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    open_insights: int = 0
    budget_health: str = "HEALTHY"


class MeetingRecord(BaseModel):
    """Meeting row keyed by the source transcript id."""

    id: str
    title: str
    date: str
    duration: int  # minutes
    participants: List[str] = []
    fireflies_id: str
    summary: str
    meeting_type: MeetingType = MeetingType.PROJECT
    project_id: Optional[str] = None
    action_items: List[str] = []
    decisions: List[str] = []
    risk_flags: List[RiskFlag] = []
    follow_up_required: bool = False
    created_at: str


class ProjectInsightRecord(BaseModel):
    """Append-only project insight row."""

    id: str
    project_id: str
    insight_type: InsightType
    title: str
    description: str = ""
    source_meeting_id: str
    requires_action: bool = False
    confidence_score: float = 0.5
    extracted_at: Optional[str] = None


class TaskStatusBreakdown(BaseModel):
    status: str
    count: int
    estimated_hours: float = 0.0
    actual_hours: float = 0.0

    @field_validator("estimated_hours", "actual_hours", mode="before")
    @classmethod
    def _null_to_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v


class RecentMeeting(BaseModel):
    """Meeting summary row as shown on the dashboard."""

    title: str
    date: str
    summary: Optional[str] = None
    action_items: List[str] = []
    risks: List[Dict[str, Any]] = []


# ---------------------------------------------------------------------------
# Pipeline outcomes
# ---------------------------------------------------------------------------


class SyncOutcome(BaseModel):
    """Settled outcome of one transcript's pipeline."""

    transcript_id: str
    succeeded: bool
    project_id: Optional[str] = None
    insights_recorded: int = 0
    document_key: Optional[str] = None
    error: Optional[str] = None


class SyncResult(BaseModel):
    """Aggregate result of one sync cycle."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    count: int = 0
    message: str = ""
    insights_generated: int = 0
    failed: int = 0
    error: Optional[str] = None
    details: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        """Wire shape: ``{count, message, ...}`` or ``{error, details, count: 0}``."""
        if self.error is not None:
            return {"error": self.error, "details": self.details, "count": 0}
        return self.model_dump(by_alias=True, exclude={"error", "details"})


# ---------------------------------------------------------------------------
# Read-side views
# ---------------------------------------------------------------------------


class DashboardView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project: ProjectSummary
    insights: List[ProjectInsightRecord] = []
    recent_meetings: List[RecentMeeting] = Field(default=[], alias="recentMeetings")
    task_breakdown: List[TaskStatusBreakdown] = Field(default=[], alias="taskBreakdown")
    executive_summary: str = Field(alias="executiveSummary")


class ProjectListSummary(_CamelModel):
    total: int = 0
    on_track: int = 0
    at_risk: int = 0
    overdue: int = 0
    total_value: float = 0.0


class ProjectListView(BaseModel):
    projects: List[ProjectSummary] = []
    summary: ProjectListSummary = Field(default_factory=ProjectListSummary)


class ProjectContext(BaseModel):
    """Project facts injected into a chat prompt."""

    project: ProjectSummary
    insights: List[ProjectInsightRecord] = []


class ChatContext(BaseModel):
    enhanced_query: str
    project_context: Optional[ProjectContext] = None


class SearchAnswer(BaseModel):
    """Answer returned by the external search-and-answer service."""

    response: Optional[str] = None
    match_count: Optional[int] = None


class ChatResponse(BaseModel):
    response: str
    project_context: Optional[ProjectContext] = None

    def to_response(self) -> Dict[str, Any]:
        """Wire shape: ``{response, projectContext: {projectName, status, budgetHealth} | null}``."""
        context = None
        if self.project_context is not None:
            project = self.project_context.project
            context = {
                "projectName": project.name,
                "status": project.status,
                "budgetHealth": project.budget_health,
            }
        return {"response": self.response, "projectContext": context}


class DocumentMetadata(BaseModel):
    """Catalog entry for one published meeting document."""

    key: str
    title: str
    project_id: Optional[str] = None
    meeting_type: Optional[str] = None
    date: Optional[str] = None
    duration: Optional[str] = None
    action_items: int = 0
    risks_identified: int = 0
    summary: str = ""
    size_bytes: int = 0
    last_modified: Optional[str] = None
