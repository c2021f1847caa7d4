"""
Dependency injection container for managing application dependencies.
Centralizes adapter and service creation and lifecycle management.

Everything is built lazily on first access so importing the API or the
worker never touches the network or requires credentials.
"""

from typing import Optional
import logging
import threading

from core_intelligence.providers import LLMProviderBase
from core_intelligence.providers.factory import LLMProviderFactory
from shared_utils.config_loader import get_settings
from shared_utils.constants import LogScope
from shared_utils.error_handler import ConfigurationError


logger = logging.getLogger(__name__)


class DIContainer:
    """Singleton dependency injection container."""

    _instance: Optional['DIContainer'] = None
    # Reentrant: service accessors build their adapters while holding it
    _lock = threading.RLock()
    _llm_provider: Optional[LLMProviderBase] = None
    _llm_checked: bool = False

    # adapter singletons
    _intelligence_store: Optional[object] = None
    _transcript_source: Optional[object] = None
    _document_store: Optional[object] = None
    _search_index: Optional[object] = None

    # service singletons
    _project_matcher: Optional[object] = None
    _sync_orchestrator: Optional[object] = None
    _dashboard_aggregator: Optional[object] = None
    _chat_service: Optional[object] = None
    _document_catalog: Optional[object] = None

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
            return cls._instance

    def reset(self):
        """Reset container (useful for testing)."""
        with self._lock:
            self._llm_provider = None
            self._llm_checked = False
            self._intelligence_store = None
            self._transcript_source = None
            self._document_store = None
            self._search_index = None
            self._project_matcher = None
            self._sync_orchestrator = None
            self._dashboard_aggregator = None
            self._chat_service = None
            self._document_catalog = None

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def get_llm_provider(self) -> Optional[LLMProviderBase]:
        """Get or create the LLM provider (lazy singleton).

        Returns:
            Initialized provider, or None when no provider is configured.
            Consumers fall back to their degraded output in that case.
        """
        with self._lock:
            if not self._llm_checked:
                self._llm_checked = True
                logger.info(
                    "Initializing LLM provider",
                    extra={"scope": LogScope.CONFIG}
                )
                try:
                    self._llm_provider = LLMProviderFactory.create()
                except ConfigurationError as e:
                    logger.warning(
                        "LLM provider unavailable, using fallback insight",
                        extra={"scope": LogScope.CONFIG, "error": e.message}
                    )
                    self._llm_provider = None

            return self._llm_provider

    # ------------------------------------------------------------------
    # Adapter accessors
    # ------------------------------------------------------------------

    def get_intelligence_store(self):
        """Get or create SqlIntelligenceStoreAdapter with its schema in place."""
        with self._lock:
            if self._intelligence_store is None:
                from adapters.sql_intelligence_store import SqlIntelligenceStoreAdapter

                settings = get_settings()
                store = SqlIntelligenceStoreAdapter(database_uri=settings.database_uri)
                store.create_schema()
                self._intelligence_store = store
                logger.info("Initialized SqlIntelligenceStoreAdapter")
            return self._intelligence_store

    def get_transcript_source(self):
        """Get or create FirefliesTranscriptSourceAdapter (lazy singleton)."""
        with self._lock:
            if self._transcript_source is None:
                from adapters.fireflies_transcript_source import FirefliesTranscriptSourceAdapter

                settings = get_settings()
                self._transcript_source = FirefliesTranscriptSourceAdapter(
                    api_key=settings.fireflies_api_key,
                    api_url=settings.fireflies_api_url,
                    timeout=settings.request_timeout,
                )
                logger.info("Initialized FirefliesTranscriptSourceAdapter")
            return self._transcript_source

    def get_document_store(self):
        """Get or create S3DocumentStoreAdapter (lazy singleton)."""
        with self._lock:
            if self._document_store is None:
                from adapters.s3_document_store import S3DocumentStoreAdapter

                settings = get_settings()
                self._document_store = S3DocumentStoreAdapter(
                    bucket=settings.documents_bucket,
                    region=settings.aws_region,
                    endpoint_url=settings.s3_endpoint_url,
                )
                logger.info("Initialized S3DocumentStoreAdapter")
            return self._document_store

    def get_search_index(self):
        """Get or create AutoRAGSearchIndexAdapter (lazy singleton)."""
        with self._lock:
            if self._search_index is None:
                from adapters.autorag_search_index import AutoRAGSearchIndexAdapter

                settings = get_settings()
                self._search_index = AutoRAGSearchIndexAdapter(
                    account_id=settings.cloudflare_account_id,
                    api_token=settings.cloudflare_api_token,
                    rag_name=settings.autorag_name,
                    base_url=settings.cloudflare_api_base_url,
                    max_results=settings.autorag_max_results,
                    match_threshold=settings.autorag_match_threshold,
                    timeout=settings.request_timeout,
                )
                logger.info("Initialized AutoRAGSearchIndexAdapter")
            return self._search_index

    # ------------------------------------------------------------------
    # Service accessors
    # ------------------------------------------------------------------

    def get_project_matcher(self):
        with self._lock:
            if self._project_matcher is None:
                from services.project_matcher import ProjectMatcher

                self._project_matcher = ProjectMatcher(
                    store=self.get_intelligence_store(),
                    keywords=get_settings().project_keywords,
                )
            return self._project_matcher

    def get_sync_orchestrator(self):
        """Get or create SyncOrchestrator (lazy singleton)."""
        with self._lock:
            if self._sync_orchestrator is None:
                from services.document_publisher import DocumentPublisher
                from services.insight_extractor import InsightExtractor
                from services.meeting_recorder import MeetingRecorder
                from services.sync_orchestrator import SyncOrchestrator

                settings = get_settings()
                self._sync_orchestrator = SyncOrchestrator(
                    transcript_source=self.get_transcript_source(),
                    project_matcher=self.get_project_matcher(),
                    insight_extractor=InsightExtractor(
                        llm_provider=self.get_llm_provider(),
                        char_limit=settings.transcript_char_limit,
                    ),
                    meeting_recorder=MeetingRecorder(store=self.get_intelligence_store()),
                    document_publisher=DocumentPublisher(
                        document_store=self.get_document_store(),
                        search_index=self.get_search_index(),
                        prefix=settings.documents_prefix,
                    ),
                    batch_size=settings.sync_batch_size,
                    max_workers=settings.sync_max_workers,
                )
                logger.info("Initialized SyncOrchestrator")
            return self._sync_orchestrator

    def get_dashboard_aggregator(self):
        """Get or create DashboardAggregator (lazy singleton)."""
        with self._lock:
            if self._dashboard_aggregator is None:
                from services.dashboard_service import DashboardAggregator
                from services.insight_extractor import ExecutiveSummarizer

                settings = get_settings()
                self._dashboard_aggregator = DashboardAggregator(
                    store=self.get_intelligence_store(),
                    summarizer=ExecutiveSummarizer(
                        llm_provider=self.get_llm_provider(),
                        enabled=settings.enable_executive_summary,
                    ),
                )
                logger.info("Initialized DashboardAggregator")
            return self._dashboard_aggregator

    def get_chat_service(self):
        """Get or create ChatService (lazy singleton)."""
        with self._lock:
            if self._chat_service is None:
                from services.chat_service import ChatContextInjector, ChatService

                settings = get_settings()
                self._chat_service = ChatService(
                    injector=ChatContextInjector(
                        store=self.get_intelligence_store(),
                        matcher=self.get_project_matcher(),
                    ),
                    search_index=self.get_search_index(),
                    credentials_configured=settings.has_autorag_credentials(),
                    rag_name=settings.autorag_name,
                )
                logger.info("Initialized ChatService")
            return self._chat_service

    def get_document_catalog(self):
        """Get or create DocumentCatalog (lazy singleton)."""
        with self._lock:
            if self._document_catalog is None:
                from services.document_catalog import DocumentCatalog

                self._document_catalog = DocumentCatalog(
                    document_store=self.get_document_store(),
                    prefix=get_settings().documents_prefix,
                )
                logger.info("Initialized DocumentCatalog")
            return self._document_catalog


# Global singleton instance
_container = DIContainer()


def get_di_container() -> DIContainer:
    """Get global DI container instance."""
    return _container
