"""
Worker entrypoint for scheduled meeting syncs.

Run by cron or a scheduled container task. The worker:
    1. Builds the sync pipeline from environment configuration.
    2. Runs one SyncOrchestrator cycle.
    3. Exits 0 when the batch completed, 1 on a batch-level failure.

Individual transcript failures are reported in the logs and do not change
the exit code. All logging is JSON (structlog).
"""

from __future__ import annotations

import sys

from shared_utils.constants import LogScope
from shared_utils.logging_utils import get_scoped_logger
from shared_utils.di_container import get_di_container

logger = get_scoped_logger(LogScope.WORKER)


def main() -> int:
    """Worker main: build deps, run one sync cycle."""
    logger.info("worker_started")

    try:
        orchestrator = get_di_container().get_sync_orchestrator()
        result = orchestrator.run_sync()
    except Exception as exc:
        logger.error(
            "worker_failed",
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return 1

    if result.error is not None:
        logger.error("worker_sync_failed", error=result.error, details=result.details)
        return 1

    logger.info(
        "worker_completed",
        synced=result.count,
        failed=result.failed,
        insights_generated=result.insights_generated,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
