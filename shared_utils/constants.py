"""
Constants management.
Centralized configuration for all magic values, model IDs, and defaults.
"""

from enum import Enum
from typing import Final


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    BEDROCK = "bedrock"
    OPENAI = "openai"


# Model IDs
class ModelIDs:
    """Centralized model identifiers."""
    BEDROCK_CLAUDE_3_HAIKU: Final[str] = "anthropic.claude-3-haiku-20240307-v1:0"
    OPENAI_GPT_4O_MINI: Final[str] = "gpt-4o-mini"


# Default values
class Defaults:
    """Defaults shared by settings and services."""
    SYNC_BATCH_SIZE: Final[int] = 10
    SYNC_MAX_WORKERS: Final[int] = 5
    TRANSCRIPT_CHAR_LIMIT: Final[int] = 2500
    REQUEST_TIMEOUT: Final[float] = 60.0
    LOG_LEVEL: Final[str] = "INFO"
    AWS_REGION: Final[str] = "eu-west-2"
    DASHBOARD_INSIGHT_LIMIT: Final[int] = 10
    DASHBOARD_MEETING_LIMIT: Final[int] = 5
    DASHBOARD_MEETING_WINDOW_DAYS: Final[int] = 30
    CHAT_CONTEXT_INSIGHT_LIMIT: Final[int] = 3
    AUTORAG_MAX_RESULTS: Final[int] = 10
    AUTORAG_MATCH_THRESHOLD: Final[float] = 0.7
    PROJECT_KEYWORDS: Final[tuple] = ("goodwill", "bloomington", "port collective", "alleato")


# Relational store
class DatabaseConfig:
    """Table and view names in the intelligence store."""
    MEETINGS_TABLE: Final[str] = "meetings"
    INSIGHTS_TABLE: Final[str] = "project_insights"
    PROJECTS_TABLE: Final[str] = "projects"
    TASKS_TABLE: Final[str] = "tasks"
    DASHBOARD_VIEW: Final[str] = "project_dashboard"
    COMPLETED_TASK_STATUS: Final[str] = "completed"


# Published documents
class DocumentConfig:
    """Blob-store layout for published meeting documents."""
    MEETING_PREFIX: Final[str] = "meetings"
    MARKDOWN_CONTENT_TYPE: Final[str] = "text/markdown"
    SOURCE_FOOTER: Final[str] = "Fireflies.ai Enhanced with Business Intelligence"


# Logging scopes
class LogScope:
    """Standardized logging scope names."""
    CONFIG = "config_loader"
    API = "api"
    PARSER = "insight_parser"
    RENDERING = "markdown_rendering"
    VALIDATION = "validation"
    ERROR_HANDLER = "error_handler"
    PROVIDER = "provider"
    ADAPTER = "adapter"
    MATCHING = "project_matching"
    EXTRACTION = "insight_extraction"
    RECORDING = "meeting_recording"
    PUBLISHING = "document_publishing"
    SYNC = "sync"
    DASHBOARD = "dashboard"
    CHAT = "chat"
    WORKER = "worker"


# API endpoints and paths
class APIEndpoints:
    """API route definitions."""
    HEALTH = "/health"
    SYNC_MEETINGS = "/api/sync-meetings"
    PROJECT_DASHBOARD = "/api/project-dashboard"
    PROJECTS = "/api/projects"
    PROJECT_INSIGHTS = "/api/project-insights"
    DOCUMENTS = "/api/documents"
    CHAT = "/api/chat"


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes for consistency."""
    INVALID_CONFIG = "INVALID_CONFIG"
    MODEL_NOT_AVAILABLE = "MODEL_NOT_AVAILABLE"
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"


# Values that ship in .env templates and must be treated as unset
PLACEHOLDER_CREDENTIALS: Final[frozenset] = frozenset(
    {"", "your-account-id-here", "your-api-token-here", "your-api-key-here"}
)
