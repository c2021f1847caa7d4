"""
FastAPI backend for Meeting Project Intelligence.

Endpoints:
    GET  /health                   Health check
    POST /api/sync-meetings        Run one transcript sync cycle
    GET  /api/project-dashboard    Per-project dashboard (?id=)
    GET  /api/projects             Project list with portfolio summary
    GET  /api/project-insights     Insight feed for one project
    GET  /api/documents            Catalog of published meeting documents
    POST /api/chat                 Knowledge-base chat with project context
"""

from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
import uvicorn

from domain.models import SyncResult
from services.sync_orchestrator import SYNC_FAILED_MESSAGE
from shared_utils.config_loader import get_settings
from shared_utils.logging_utils import ContextualLogger
from shared_utils.constants import Defaults, LogScope, APIEndpoints
from shared_utils.error_handler import AppException, log_exception
from shared_utils.validation import InputValidator
from shared_utils.di_container import get_di_container


# ---------------------------------------------------------------------------
# Application bootstrap
# ---------------------------------------------------------------------------

settings = get_settings()
logger = ContextualLogger(scope=LogScope.API)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=settings.app_description,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

logger.info("api_initialized", environment=settings.environment)


def _app_error(e: AppException) -> JSONResponse:
    """Client errors keep their status; everything else is a 500."""
    status_code = e.http_status if e.http_status in (400, 404) else status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(
        status_code=status_code,
        content={"error": e.message, "code": e.error_code},
    )


def _server_error(e: Exception) -> JSONResponse:
    log_exception(e, scope=LogScope.API)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(e)},
    )


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get(APIEndpoints.HEALTH)
def health_check() -> dict:
    """Health check endpoint."""
    logger.debug("health_check_requested")
    return {
        "status": "healthy",
        "environment": settings.environment,
        "version": settings.app_version,
        "llm_provider": settings.llm_provider,
    }


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

@app.post(APIEndpoints.SYNC_MEETINGS)
@limiter.limit("5/minute")
def sync_meetings(request: Request) -> JSONResponse:
    """Fetch the latest transcripts and run the intelligence pipeline.

    Always answers 200; failures are reported in the body as
    ``{error, details, count: 0}``.
    """
    try:
        orchestrator = get_di_container().get_sync_orchestrator()
        result = orchestrator.run_sync()
    except Exception as e:
        log_exception(e, scope=LogScope.API)
        result = SyncResult(count=0, error=SYNC_FAILED_MESSAGE, details=str(e))

    logger.info(
        "sync_request_completed",
        count=result.count,
        failed=result.failed,
        error=result.error,
    )
    return JSONResponse(content=result.to_response())


# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------

@app.get(APIEndpoints.PROJECT_DASHBOARD)
def project_dashboard(id: Optional[str] = None) -> JSONResponse:
    """Aggregated dashboard for one project."""
    try:
        project_id = InputValidator.validate_identifier(id, "Project ID")
        view = get_di_container().get_dashboard_aggregator().dashboard(project_id)
        return JSONResponse(content=view.model_dump(mode="json", by_alias=True))
    except AppException as e:
        logger.warning("dashboard_request_error", error_code=e.error_code, project_id=id)
        return _app_error(e)
    except Exception as e:
        return _server_error(e)


@app.get(APIEndpoints.PROJECTS)
def list_projects(
    status: Optional[str] = None,
    client: Optional[str] = None,
) -> JSONResponse:
    """Projects with health indicators, optionally filtered."""
    try:
        view = get_di_container().get_dashboard_aggregator().list_projects(
            status=status or None, client_id=client or None
        )
        return JSONResponse(content=view.model_dump(mode="json", by_alias=True))
    except AppException as e:
        logger.warning("projects_request_error", error_code=e.error_code)
        return _app_error(e)
    except Exception as e:
        return _server_error(e)


@app.get(APIEndpoints.PROJECT_INSIGHTS)
def project_insights(
    project_id: Optional[str] = None,
    requires_action: Optional[str] = None,
    limit: Optional[str] = None,
) -> JSONResponse:
    """Newest insights for one project."""
    try:
        pid = InputValidator.validate_identifier(project_id, "project_id")
        flag = InputValidator.parse_optional_bool(requires_action, "requires_action")
        size = InputValidator.parse_optional_int(limit, "limit", Defaults.DASHBOARD_INSIGHT_LIMIT)
        insights = get_di_container().get_dashboard_aggregator().list_insights(
            pid, requires_action=flag, limit=size
        )
        return JSONResponse(
            content={
                "insights": [i.model_dump(mode="json") for i in insights],
                "count": len(insights),
            }
        )
    except AppException as e:
        logger.warning("insights_request_error", error_code=e.error_code)
        return _app_error(e)
    except Exception as e:
        return _server_error(e)


@app.get(APIEndpoints.DOCUMENTS)
def list_documents() -> JSONResponse:
    """Published meeting documents with front-matter metadata."""
    try:
        documents = get_di_container().get_document_catalog().list_documents()
        return JSONResponse(
            content={
                "documents": [d.model_dump(mode="json") for d in documents],
                "total": len(documents),
            }
        )
    except AppException as e:
        logger.warning("documents_request_error", error_code=e.error_code)
        return _app_error(e)
    except Exception as e:
        return _server_error(e)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------

@app.post(APIEndpoints.CHAT)
@limiter.limit("30/minute")
def chat(request: Request, body: dict) -> JSONResponse:
    """Answer a question from the knowledge base.

    Body JSON:
        message (str): The user question.
    """
    try:
        message = InputValidator.validate_non_empty_string(body.get("message"), "message")
        answer = get_di_container().get_chat_service().answer(message)
        return JSONResponse(content=answer.to_response())
    except AppException as e:
        logger.warning("chat_request_error", error_code=e.error_code)
        return _app_error(e)
    except Exception as e:
        return _server_error(e)


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower()
    )
