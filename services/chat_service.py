"""
Chat: project context injection plus search-and-answer over published
meeting documents.
"""

from __future__ import annotations

from typing import List, Optional

from domain.models import ChatContext, ChatResponse, ProjectContext, ProjectInsightRecord, ProjectSummary
from ports.intelligence_store import IntelligenceStorePort
from ports.search_index import SearchIndexPort
from services.project_matcher import ProjectMatcher
from shared_utils.constants import Defaults, LogScope
from shared_utils.error_handler import AppException, ConfigurationError, ExternalServiceError, ValidationError
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.CHAT)


CONFIG_ERROR_MESSAGE = (
    "Configuration error: Please set your CLOUDFLARE_ACCOUNT_ID and "
    "CLOUDFLARE_API_TOKEN environment variables."
)
NOT_CONFIGURED_MESSAGE = (
    "The AutoRAG knowledge base is not configured yet. Please ensure AutoRAG is "
    "set up in your Cloudflare account with the index name \"{rag_name}\"."
)
NO_DOCUMENTS_MESSAGE = (
    "I couldn't find any relevant documents for your query. This might be because:\n\n"
    "1. The knowledge base is empty - try syncing some meetings first\n"
    "2. Your query doesn't match any indexed content\n"
    "3. Try rephrasing your question or being more specific"
)
NO_RESPONSE_MESSAGE = "I apologize, but I could not generate a response at this time."
UNAVAILABLE_MESSAGE = "I'm having trouble accessing the knowledge base right now. Please try again."


def _money(value: float) -> str:
    value = value or 0
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_project_context(query: str, context: ProjectContext) -> str:
    """Prepend the project facts block to *query*."""
    project = context.project
    lines = [
        f"Project Context: {project.name} (Status: {project.status}, "
        f"Client: {project.client_name or 'Unknown'})",
        f"Recent Activity: {project.recent_meetings} meetings, "
        f"{project.completed_tasks}/{project.total_tasks} tasks completed",
        f"Budget Status: ${_money(project.actual_cost)} spent of "
        f"${_money(project.estimated_value)} budget",
    ]
    if context.insights:
        lines.append("Open Insights: " + "; ".join(i.title for i in context.insights))
    lines.extend(
        [
            "",
            f"User Question: {query}",
            "",
            "Please provide insights considering this project context and recent meeting data.",
        ]
    )
    return "\n".join(lines)


class ChatContextInjector:
    """Enriches chat queries that mention a known project."""

    def __init__(
        self,
        store: IntelligenceStorePort,
        matcher: ProjectMatcher,
        insight_limit: int = Defaults.CHAT_CONTEXT_INSIGHT_LIMIT,
    ) -> None:
        self._store = store
        self._matcher = matcher
        self._insight_limit = insight_limit

    def inject(self, query: str) -> ChatContext:
        """Return the query to send upstream plus any project context found.

        A miss, or a store failure while loading context, forwards the
        query unchanged.
        """
        project = self._matcher.match(query)
        if project is None:
            return ChatContext(enhanced_query=query)

        try:
            summary = self._store.get_project_summary(project.id)
            insights: List[ProjectInsightRecord] = []
            if summary is not None:
                insights = self._store.list_insights(
                    project.id, self._insight_limit, requires_action=True
                )
        except AppException as exc:
            logger.warning("chat_context_unavailable", project_id=project.id, error=exc.message)
            return ChatContext(enhanced_query=query)

        if summary is None:
            summary = ProjectSummary(**project.model_dump())

        context = ProjectContext(project=summary, insights=insights)
        logger.info(
            "chat_context_injected",
            project_id=project.id,
            insights=len(insights),
        )
        return ChatContext(
            enhanced_query=format_project_context(query, context),
            project_context=context,
        )


class ChatService:
    """Answers chat messages from the search index."""

    def __init__(
        self,
        injector: ChatContextInjector,
        search_index: Optional[SearchIndexPort],
        *,
        credentials_configured: bool = True,
        rag_name: str = "alleato-docs",
    ) -> None:
        self._injector = injector
        self._index = search_index
        self._credentials_configured = credentials_configured
        self._rag_name = rag_name

    def answer(self, message: str) -> ChatResponse:
        """Answer *message*; upstream problems become readable responses.

        Raises:
            ValidationError: If *message* is empty.
        """
        if not message or not message.strip():
            raise ValidationError("Message is required")

        if not self._credentials_configured or self._index is None:
            logger.warning("chat_search_not_configured")
            return ChatResponse(response=CONFIG_ERROR_MESSAGE)

        context = self._injector.inject(message)

        try:
            answer = self._index.search(context.enhanced_query)
        except ConfigurationError as exc:
            logger.warning("chat_search_not_configured", error=exc.message)
            return ChatResponse(response=CONFIG_ERROR_MESSAGE)
        except ExternalServiceError as exc:
            if exc.context.get("status_code") == 404:
                logger.warning("chat_index_missing", rag_name=self._rag_name)
                return ChatResponse(
                    response=NOT_CONFIGURED_MESSAGE.format(rag_name=self._rag_name)
                )
            logger.error("chat_search_failed", error=exc.message)
            return ChatResponse(response=UNAVAILABLE_MESSAGE)

        if answer.match_count == 0:
            response = NO_DOCUMENTS_MESSAGE
        else:
            response = answer.response or NO_RESPONSE_MESSAGE

        project_context = context.project_context
        if project_context is not None and project_context.insights:
            bullets = "\n".join(f"• {i.title}" for i in project_context.insights)
            response += f"\n\n**Project-Specific Insights:**\n{bullets}"

        return ChatResponse(response=response, project_context=project_context)
