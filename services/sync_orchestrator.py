"""
Sync orchestrator: one ingestion cycle from transcript source to search index.

Flow per transcript:  match title → extract insight → record → publish.
Transcripts in a batch run concurrently and settle independently; the
index is signalled once after the batch.
"""

from __future__ import annotations

from typing import List

from domain.models import SyncOutcome, SyncResult, Transcript
from ports.transcript_source import TranscriptSourcePort
from services.document_publisher import DocumentPublisher
from services.insight_extractor import InsightExtractor
from services.meeting_recorder import MeetingRecorder
from services.project_matcher import ProjectMatcher
from shared_utils.concurrency import settle_all
from shared_utils.constants import Defaults, LogScope
from shared_utils.logging_utils import get_scoped_logger, log_execution

logger = get_scoped_logger(LogScope.SYNC)

NO_MEETINGS_MESSAGE = "No new meetings to sync"
SYNC_FAILED_MESSAGE = "Failed to sync meetings"


class SyncOrchestrator:
    """Runs the ingestion pipeline over the latest batch of transcripts."""

    def __init__(
        self,
        *,
        transcript_source: TranscriptSourcePort,
        project_matcher: ProjectMatcher,
        insight_extractor: InsightExtractor,
        meeting_recorder: MeetingRecorder,
        document_publisher: DocumentPublisher,
        batch_size: int = Defaults.SYNC_BATCH_SIZE,
        max_workers: int = Defaults.SYNC_MAX_WORKERS,
    ) -> None:
        self._source = transcript_source
        self._matcher = project_matcher
        self._extractor = insight_extractor
        self._recorder = meeting_recorder
        self._publisher = document_publisher
        self._batch_size = batch_size
        self._max_workers = max_workers

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @log_execution(scope=LogScope.SYNC)
    def run_sync(self) -> SyncResult:
        """Run one sync cycle.

        Never raises: batch-level failures become an error result.
        """
        try:
            transcripts = self._source.fetch_transcripts(self._batch_size)
        except Exception as exc:
            logger.error(
                "sync_fetch_failed",
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return SyncResult(count=0, error=SYNC_FAILED_MESSAGE, details=str(exc))

        if not transcripts:
            logger.info("sync_nothing_to_do")
            return SyncResult(count=0, message=NO_MEETINGS_MESSAGE)

        logger.info("sync_batch_started", transcripts=len(transcripts))
        outcomes = self.process_batch(transcripts)

        succeeded = [o for o in outcomes if o.succeeded]
        failed = len(outcomes) - len(succeeded)
        insights = sum(o.insights_recorded for o in succeeded)

        indexed = self._publisher.request_index_sync()
        logger.info(
            "sync_batch_completed",
            succeeded=len(succeeded),
            failed=failed,
            insights_generated=insights,
            index_signalled=indexed,
        )
        return SyncResult(
            count=len(succeeded),
            message=f"Successfully synced {len(succeeded)} meetings with business intelligence",
            insights_generated=insights,
            failed=failed,
        )

    def process_batch(self, transcripts: List[Transcript]) -> List[SyncOutcome]:
        """Process transcripts concurrently, capturing every outcome."""
        settled = settle_all(self.process_transcript, transcripts, self._max_workers)

        outcomes: List[SyncOutcome] = []
        for result in settled:
            if result.ok:
                outcomes.append(result.value)
                continue
            logger.error(
                "transcript_sync_failed",
                transcript_id=result.item.id,
                error_type=type(result.error).__name__,
                error=str(result.error),
            )
            outcomes.append(
                SyncOutcome(
                    transcript_id=result.item.id,
                    succeeded=False,
                    error=str(result.error),
                )
            )
        return outcomes

    def process_transcript(self, transcript: Transcript) -> SyncOutcome:
        """Run the full pipeline for one transcript. Raises on failure."""
        project = self._matcher.match_title(transcript.title)
        project_id = project.id if project else None

        insight = self._extractor.extract(transcript)
        recorded = self._recorder.record(transcript, insight, project_id)
        key = self._publisher.publish(transcript, insight, project_id)

        return SyncOutcome(
            transcript_id=transcript.id,
            succeeded=True,
            project_id=project_id,
            insights_recorded=recorded,
            document_key=key,
        )
