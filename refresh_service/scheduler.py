"""Run a single refresh cycle from the command line."""

import asyncio
import logging
import sys

from refresh_service.config import settings
from refresh_service.database import SessionLocal
from refresh_service.exceptions import ConfigurationError, DataSourceError
from refresh_service.services.refresh_cycle import run_refresh_cycle
from refresh_service.services.run_store import SqlRunStore
from refresh_service.services.workflow_invoker import HttpWorkflowInvoker

logger = logging.getLogger(__name__)


def run_once() -> int:
    """
    Execute one cycle against the configured database and endpoint.

    Returns:
        Process exit code: 0 when the cycle completed (even with failed
        invocations), 1 on configuration or data-source errors
    """
    endpoint = settings.workflow_endpoint
    if not endpoint or not settings.SERVICE_ROLE_KEY:
        logger.error("Service misconfigured: workflow endpoint or SERVICE_ROLE_KEY missing")
        return 1

    invoker = HttpWorkflowInvoker(endpoint, settings.SERVICE_ROLE_KEY, timeout=settings.INVOCATION_TIMEOUT)

    try:
        db = SessionLocal()
    except ConfigurationError as e:
        logger.error(f"Service misconfigured: {e}")
        return 1

    try:
        result = asyncio.run(run_refresh_cycle(SqlRunStore(db), invoker))
    except DataSourceError as e:
        logger.error(f"Refresh cycle aborted: {e}")
        return 1
    finally:
        db.close()

    logger.info(
        f"Refresh cycle done: {result.due} due, {result.triggered} triggered, {result.failed} failed"
    )
    return 0


def main():
    """Entry point for the refresh-weekly command."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(run_once())


if __name__ == "__main__":
    main()
