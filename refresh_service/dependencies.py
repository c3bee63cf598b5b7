"""FastAPI dependencies shared by the scheduler and monitoring routes."""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from refresh_service.config import settings
from refresh_service.database import get_db
from refresh_service.exceptions import ConfigurationError
from refresh_service.services.run_store import RunStore, SqlRunStore
from refresh_service.services.workflow_invoker import HttpWorkflowInvoker, WorkflowInvoker

logger = logging.getLogger(__name__)


def require_scheduler_secret(
    x_scheduler_secret: Optional[str] = Header(default=None, alias="X-Scheduler-Secret"),
) -> None:
    """Reject callers that do not present the configured shared secret."""
    expected = settings.SCHEDULER_SECRET
    if not expected:
        raise ConfigurationError("SCHEDULER_SECRET is not configured")

    if x_scheduler_secret is None or not secrets.compare_digest(x_scheduler_secret, expected):
        logger.warning("Rejected scheduler call with missing or invalid secret")
        raise HTTPException(status_code=401, detail="Unauthorized")


def get_run_store(db: Session = Depends(get_db)) -> RunStore:
    """Run store over the request's database session."""
    return SqlRunStore(db)


def get_workflow_invoker() -> WorkflowInvoker:
    """Invoker for the configured run-workflow endpoint."""
    endpoint = settings.workflow_endpoint
    if not endpoint or not settings.SERVICE_ROLE_KEY:
        raise ConfigurationError("Workflow endpoint or SERVICE_ROLE_KEY is not configured")
    return HttpWorkflowInvoker(endpoint, settings.SERVICE_ROLE_KEY, timeout=settings.INVOCATION_TIMEOUT)
