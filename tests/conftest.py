"""
Root conftest.py - shared fixtures for the entire test suite.

Guidelines:
    • No __init__.py in test sub-directories (avoids shadowing root packages).
    • pytest.ini_options lives in pyproject.toml with pythonpath=["."].
    • Markers: integration.
"""

from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from domain.models import (
    InsightItem,
    InsightType,
    MeetingInsight,
    MeetingType,
    Project,
    RiskFlag,
    RiskSeverity,
    Transcript,
    TranscriptAttendee,
    TranscriptSentence,
)


# ---------------------------------------------------------------------------
# Marker registration
# ---------------------------------------------------------------------------

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: mark test as integration test")


# ---------------------------------------------------------------------------
# Sample transcript fixtures
# ---------------------------------------------------------------------------

def _make_transcript(
    transcript_id: str = "t1",
    title: str = "Goodwill Weekly Sync",
    sentences: Optional[List[TranscriptSentence]] = None,
) -> Transcript:
    """Build a transcript with two speakers and a fixed date."""
    if sentences is None:
        sentences = [
            TranscriptSentence(text="Framing inspection is booked for Friday.", speaker_name="Alice", start_time=0),
            TranscriptSentence(text="Steel delivery slipped by two weeks.", speaker_name="Bob", start_time=75.4),
        ]
    return Transcript(
        id=transcript_id,
        title=title,
        date="2026-10-01T15:00:00+00:00",
        duration=1830,
        attendees=[
            TranscriptAttendee(display_name="Alice", email="alice@example.com"),
            TranscriptAttendee(display_name="Bob", email="bob@example.com"),
        ],
        sentences=sentences,
    )


def _make_insight(**overrides) -> MeetingInsight:
    """A fully populated insight with two project insights."""
    values = dict(
        summary="Inspection scheduled; steel delay threatens the slab pour.",
        meeting_type=MeetingType.PROJECT,
        action_items=["Confirm inspector", "Call steel supplier"],
        decisions=["Keep Friday inspection"],
        risks=[RiskFlag(title="Steel delivery delay", severity=RiskSeverity.HIGH)],
        insights=[
            InsightItem(
                type=InsightType.RISK,
                title="Steel delay",
                description="Two week slip on structural steel",
                requires_action=True,
                confidence=0.9,
            ),
            InsightItem(
                type=InsightType.OPPORTUNITY,
                title="Early inspection",
                description="Inspection ahead of plan",
                requires_action=False,
                confidence=0.6,
            ),
        ],
        follow_up_required=True,
    )
    values.update(overrides)
    return MeetingInsight(**values)


@pytest.fixture()
def sample_transcript() -> Transcript:
    return _make_transcript()


@pytest.fixture()
def sample_insight() -> MeetingInsight:
    return _make_insight()


@pytest.fixture()
def make_transcript():
    """Factory fixture: ``make_transcript(transcript_id=..., title=..., sentences=...)``."""
    return _make_transcript


@pytest.fixture()
def make_insight():
    """Factory fixture: ``make_insight(**overrides)``."""
    return _make_insight


@pytest.fixture()
def goodwill_project() -> Project:
    return Project(
        id="p-goodwill",
        name="Goodwill",
        status="active",
        client_name="Goodwill Industries",
        estimated_value=1500000,
        actual_cost=1200000,
        profit_margin_percent=18.5,
        timeline_status="AT_RISK",
        priority=3,
    )


# ---------------------------------------------------------------------------
# Mock port factories
# ---------------------------------------------------------------------------

@pytest.fixture()
def mock_store() -> MagicMock:
    """Intelligence store mock with an empty registry."""
    mock = MagicMock()
    mock.list_project_names.return_value = []
    mock.find_project_by_keyword.return_value = None
    mock.find_project_for_title.return_value = None
    mock.get_project_summary.return_value = None
    mock.list_insights.return_value = []
    mock.list_recent_meetings.return_value = []
    mock.task_breakdown.return_value = []
    mock.list_project_summaries.return_value = []
    return mock


@pytest.fixture()
def mock_document_store() -> MagicMock:
    mock = MagicMock()
    mock.put_document.side_effect = lambda key, content, content_type: f"s3://docs/{key}"
    return mock


@pytest.fixture()
def mock_llm() -> MagicMock:
    return MagicMock()
