"""
SQL-backed intelligence store adapter.

Implements IntelligenceStorePort with SQLAlchemy Core and parameterized
statements. The schema targets the SQLite dialect (the default local
database and the dialect of the hosted store); ``create_schema`` is
idempotent.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from domain.models import (
    MeetingRecord,
    Project,
    ProjectInsightRecord,
    ProjectSummary,
    RecentMeeting,
    TaskStatusBreakdown,
)
from ports.intelligence_store import IntelligenceStorePort
from shared_utils.constants import DatabaseConfig, LogScope
from shared_utils.error_handler import StorageError
from shared_utils.logging_utils import get_scoped_logger


logger = get_scoped_logger(LogScope.ADAPTER)

ModelT = TypeVar("ModelT", bound=BaseModel)


SCHEMA_STATEMENTS: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        status TEXT DEFAULT 'active',
        client_id TEXT,
        client_name TEXT,
        estimated_value REAL DEFAULT 0,
        actual_cost REAL DEFAULT 0,
        profit_margin_percent REAL,
        timeline_status TEXT DEFAULT 'ON_TRACK',
        priority INTEGER DEFAULT 0,
        autorag_project_tag TEXT,
        created_at TEXT DEFAULT CURRENT_TIMESTAMP,
        updated_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS meetings (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        date TEXT,
        duration INTEGER,
        participants TEXT,
        fireflies_id TEXT,
        summary TEXT,
        project_id TEXT,
        meeting_type TEXT,
        action_items_json TEXT,
        key_decisions_json TEXT,
        ai_risk_flags TEXT,
        follow_up_required INTEGER DEFAULT 0,
        created_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS project_insights (
        id TEXT PRIMARY KEY,
        project_id TEXT NOT NULL,
        insight_type TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT,
        source_meeting_id TEXT,
        requires_action INTEGER DEFAULT 0,
        confidence_score REAL,
        extracted_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        project_id TEXT,
        title TEXT,
        status TEXT,
        estimated_hours REAL,
        actual_hours REAL,
        updated_at TEXT DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_meetings_project ON meetings (project_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_insights_project ON project_insights (project_id, extracted_at)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks (project_id, status)",
    f"""
    CREATE VIEW IF NOT EXISTS project_dashboard AS
    SELECT
        p.*,
        (SELECT COUNT(*) FROM meetings m
          WHERE m.project_id = p.id AND m.date > date('now', '-30 days')) AS recent_meetings,
        (SELECT COUNT(*) FROM tasks t WHERE t.project_id = p.id) AS total_tasks,
        (SELECT COUNT(*) FROM tasks t
          WHERE t.project_id = p.id
            AND t.status = '{DatabaseConfig.COMPLETED_TASK_STATUS}') AS completed_tasks,
        (SELECT COUNT(*) FROM project_insights i
          WHERE i.project_id = p.id AND i.requires_action = 1) AS open_insights,
        CASE
            WHEN p.estimated_value > 0 AND p.actual_cost > p.estimated_value THEN 'OVER_BUDGET'
            WHEN p.estimated_value > 0 AND p.actual_cost > 0.9 * p.estimated_value THEN 'AT_RISK'
            ELSE 'HEALTHY'
        END AS budget_health
    FROM projects p
    """,
]

_UPSERT_MEETING = text(
    """
    INSERT OR REPLACE INTO meetings (
        id, title, date, duration, participants, fireflies_id,
        summary, project_id, meeting_type, action_items_json,
        key_decisions_json, ai_risk_flags, follow_up_required,
        created_at
    ) VALUES (
        :id, :title, :date, :duration, :participants, :fireflies_id,
        :summary, :project_id, :meeting_type, :action_items_json,
        :key_decisions_json, :ai_risk_flags, :follow_up_required,
        :created_at
    )
    """
)

_INSERT_INSIGHT = text(
    """
    INSERT INTO project_insights (
        id, project_id, insight_type, title, description,
        source_meeting_id, requires_action, confidence_score, extracted_at
    ) VALUES (
        :id, :project_id, :insight_type, :title, :description,
        :source_meeting_id, :requires_action, :confidence_score, :extracted_at
    )
    """
)

_FIND_BY_KEYWORD = text(
    """
    SELECT * FROM projects
    WHERE instr(LOWER(name), :keyword) > 0
    ORDER BY updated_at DESC
    LIMIT 1
    """
)

_FIND_FOR_TITLE = text(
    """
    SELECT * FROM projects
    WHERE (name != '' AND instr(LOWER(:title), LOWER(name)) > 0)
       OR (autorag_project_tag IS NOT NULL AND autorag_project_tag != ''
           AND instr(LOWER(:title), LOWER(autorag_project_tag)) > 0)
    ORDER BY updated_at DESC
    LIMIT 1
    """
)


def _loads_list(raw: Optional[str]) -> List[Any]:
    """Decode a JSON list column, tolerating NULL and corrupt values."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return value if isinstance(value, list) else []


def _to_model(model: Type[ModelT], row: Dict[str, Any]) -> ModelT:
    """Map a row onto *model*; rows the model rejects raise StorageError."""
    try:
        return model(**row)
    except PydanticValidationError as exc:
        logger.error("store_row_invalid", model=model.__name__, row_id=row.get("id"), error=str(exc))
        raise StorageError(
            f"Invalid {model.__name__} row in store",
            context={"id": row.get("id"), "errors": exc.error_count()},
        ) from exc


class SqlIntelligenceStoreAdapter:
    """SQLAlchemy implementation of IntelligenceStorePort."""

    def __init__(
        self,
        database_uri: str,
        engine: Optional[Engine] = None,
    ) -> None:
        self._database_uri = database_uri
        self.engine = engine or self._create_engine(database_uri)

    @staticmethod
    def _create_engine(database_uri: str) -> Engine:
        connect_args: Dict[str, Any] = {}
        if database_uri.startswith("sqlite"):
            # Sync batches write from worker threads
            connect_args = {"check_same_thread": False, "timeout": 30}
            db_path = database_uri.split(":///", 1)[-1]
            if db_path and db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        return create_engine(database_uri, connect_args=connect_args, pool_pre_ping=True)

    def create_schema(self) -> None:
        """Create tables, indexes and the project_dashboard view if missing."""
        try:
            with self.engine.begin() as conn:
                for statement in SCHEMA_STATEMENTS:
                    conn.execute(text(statement))
            logger.info("schema_ready", database_uri=self._database_uri)
        except SQLAlchemyError as exc:
            logger.error("schema_creation_failed", error=str(exc))
            raise StorageError(f"Failed to create schema: {exc}") from exc

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_meeting(
        self, meeting: MeetingRecord, insights: List[ProjectInsightRecord]
    ) -> None:
        """Upsert the meeting row and append its project insights atomically."""
        try:
            with self.engine.begin() as conn:
                conn.execute(_UPSERT_MEETING, self._meeting_params(meeting))
                for insight in insights:
                    conn.execute(_INSERT_INSIGHT, self._insight_params(insight))
            logger.info(
                "meeting_recorded",
                meeting_id=meeting.id,
                project_id=meeting.project_id,
                insights=len(insights),
            )
        except SQLAlchemyError as exc:
            logger.error("meeting_record_failed", meeting_id=meeting.id, error=str(exc))
            raise StorageError(
                f"Failed to record meeting {meeting.id}: {exc}",
                context={"meeting_id": meeting.id},
            ) from exc

    # ------------------------------------------------------------------
    # Project association
    # ------------------------------------------------------------------

    def list_project_names(self) -> List[str]:
        rows = self._fetch_all(text("SELECT name FROM projects ORDER BY updated_at DESC"), {})
        return [row["name"] for row in rows if row["name"]]

    def find_project_by_keyword(self, keyword: str) -> Optional[Project]:
        rows = self._fetch_all(_FIND_BY_KEYWORD, {"keyword": keyword.lower()})
        return _to_model(Project, rows[0]) if rows else None

    def find_project_for_title(self, title: str) -> Optional[Project]:
        rows = self._fetch_all(_FIND_FOR_TITLE, {"title": title})
        return _to_model(Project, rows[0]) if rows else None

    # ------------------------------------------------------------------
    # Read-side aggregates
    # ------------------------------------------------------------------

    def get_project_summary(self, project_id: str) -> Optional[ProjectSummary]:
        rows = self._fetch_all(
            text(f"SELECT * FROM {DatabaseConfig.DASHBOARD_VIEW} WHERE id = :id"),
            {"id": project_id},
        )
        return _to_model(ProjectSummary, rows[0]) if rows else None

    def list_project_summaries(
        self, status: Optional[str] = None, client_id: Optional[str] = None
    ) -> List[ProjectSummary]:
        query = f"SELECT * FROM {DatabaseConfig.DASHBOARD_VIEW}"
        conditions: List[str] = []
        params: Dict[str, Any] = {}
        if status:
            conditions.append("status = :status")
            params["status"] = status
        if client_id:
            conditions.append("client_id = :client_id")
            params["client_id"] = client_id
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY priority DESC, timeline_status ASC"
        return [_to_model(ProjectSummary, row) for row in self._fetch_all(text(query), params)]

    def list_insights(
        self,
        project_id: str,
        limit: int,
        requires_action: Optional[bool] = None,
    ) -> List[ProjectInsightRecord]:
        query = "SELECT * FROM project_insights WHERE project_id = :project_id"
        params: Dict[str, Any] = {"project_id": project_id, "limit": limit}
        if requires_action is not None:
            query += " AND requires_action = :requires_action"
            params["requires_action"] = int(requires_action)
        query += " ORDER BY extracted_at DESC, id DESC LIMIT :limit"
        return [_to_model(ProjectInsightRecord, row) for row in self._fetch_all(text(query), params)]

    def list_recent_meetings(
        self, project_id: str, since: str, limit: int
    ) -> List[RecentMeeting]:
        rows = self._fetch_all(
            text(
                """
                SELECT title, date, summary, action_items_json, ai_risk_flags
                FROM meetings
                WHERE project_id = :project_id AND date > :since
                ORDER BY date DESC
                LIMIT :limit
                """
            ),
            {"project_id": project_id, "since": since, "limit": limit},
        )
        return [
            RecentMeeting(
                title=row["title"],
                date=row["date"] or "",
                summary=row["summary"],
                action_items=[str(item) for item in _loads_list(row["action_items_json"])],
                risks=[r for r in _loads_list(row["ai_risk_flags"]) if isinstance(r, dict)],
            )
            for row in rows
        ]

    def task_breakdown(self, project_id: str) -> List[TaskStatusBreakdown]:
        rows = self._fetch_all(
            text(
                """
                SELECT
                    status,
                    COUNT(*) AS count,
                    SUM(estimated_hours) AS estimated_hours,
                    SUM(actual_hours) AS actual_hours
                FROM tasks
                WHERE project_id = :project_id
                GROUP BY status
                ORDER BY status
                """
            ),
            {"project_id": project_id},
        )
        return [_to_model(TaskStatusBreakdown, row) for row in rows]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fetch_all(self, statement, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(statement, params)
                return [dict(row) for row in result.mappings().all()]
        except SQLAlchemyError as exc:
            logger.error("store_query_failed", error=str(exc))
            raise StorageError(f"Store query failed: {exc}") from exc

    @staticmethod
    def _meeting_params(meeting: MeetingRecord) -> Dict[str, Any]:
        return {
            "id": meeting.id,
            "title": meeting.title,
            "date": meeting.date,
            "duration": meeting.duration,
            "participants": json.dumps(meeting.participants),
            "fireflies_id": meeting.fireflies_id,
            "summary": meeting.summary,
            "project_id": meeting.project_id,
            "meeting_type": meeting.meeting_type.value,
            "action_items_json": json.dumps(meeting.action_items),
            "key_decisions_json": json.dumps(meeting.decisions),
            "ai_risk_flags": json.dumps(
                [risk.model_dump(mode="json") for risk in meeting.risk_flags]
            ),
            "follow_up_required": int(meeting.follow_up_required),
            "created_at": meeting.created_at,
        }

    @staticmethod
    def _insight_params(insight: ProjectInsightRecord) -> Dict[str, Any]:
        return {
            "id": insight.id,
            "project_id": insight.project_id,
            "insight_type": insight.insight_type.value,
            "title": insight.title,
            "description": insight.description,
            "source_meeting_id": insight.source_meeting_id,
            "requires_action": int(insight.requires_action),
            "confidence_score": insight.confidence_score,
            "extracted_at": insight.extracted_at,
        }
