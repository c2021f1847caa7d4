"""
Meeting recorder: persists a processed meeting and its project insights.

The meeting row is keyed by the transcript id, so re-recording a
transcript replaces the row. Insight rows are appended on every call.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import List, Optional

from domain.models import (
    MeetingInsight,
    MeetingRecord,
    ProjectInsightRecord,
    Transcript,
)
from ports.intelligence_store import IntelligenceStorePort
from shared_utils.constants import LogScope
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.RECORDING)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MeetingRecorder:
    """Maps transcripts plus insight onto store rows and writes them."""

    def __init__(self, store: IntelligenceStorePort) -> None:
        self._store = store

    def build_meeting(
        self,
        transcript: Transcript,
        insight: MeetingInsight,
        project_id: Optional[str],
    ) -> MeetingRecord:
        return MeetingRecord(
            id=transcript.id,
            title=transcript.title,
            date=transcript.date,
            duration=transcript.duration_minutes,
            participants=transcript.participants,
            fireflies_id=transcript.id,
            summary=insight.summary,
            meeting_type=insight.meeting_type,
            project_id=project_id,
            action_items=insight.action_items,
            decisions=insight.decisions,
            risk_flags=insight.risks,
            follow_up_required=insight.follow_up_required,
            created_at=_now_iso(),
        )

    def build_insights(
        self,
        transcript: Transcript,
        insight: MeetingInsight,
        project_id: Optional[str],
    ) -> List[ProjectInsightRecord]:
        """One record per extracted insight; none when no project matched."""
        if project_id is None:
            return []

        stamp = time.time_ns()
        extracted_at = _now_iso()
        return [
            ProjectInsightRecord(
                id=f"insight_{transcript.id}_{stamp}_{index}",
                project_id=project_id,
                insight_type=item.type,
                title=item.title,
                description=item.description,
                source_meeting_id=transcript.id,
                requires_action=item.requires_action,
                confidence_score=item.confidence,
                extracted_at=extracted_at,
            )
            for index, item in enumerate(insight.insights)
        ]

    def record(
        self,
        transcript: Transcript,
        insight: MeetingInsight,
        project_id: Optional[str],
    ) -> int:
        """Upsert the meeting and append its insights in one transaction.

        Returns:
            Number of project insights written.

        Raises:
            StorageError: If the store rejects the write.
        """
        meeting = self.build_meeting(transcript, insight, project_id)
        insights = self.build_insights(transcript, insight, project_id)
        self._store.record_meeting(meeting, insights)
        logger.info(
            "meeting_persisted",
            meeting_id=meeting.id,
            project_id=project_id,
            insights=len(insights),
        )
        return len(insights)
