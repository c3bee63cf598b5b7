"""Weekly refresh routes."""

import logging

from fastapi import APIRouter, Depends

from refresh_service.dependencies import get_run_store, get_workflow_invoker, require_scheduler_secret
from refresh_service.schemas.refresh import RefreshCycleResult
from refresh_service.services.refresh_cycle import run_refresh_cycle
from refresh_service.services.run_store import RunStore
from refresh_service.services.workflow_invoker import WorkflowInvoker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["refresh"])


@router.post(
    "/run-weekly",
    response_model=RefreshCycleResult,
    dependencies=[Depends(require_scheduler_secret)],
)
async def run_weekly(
    store: RunStore = Depends(get_run_store),
    invoker: WorkflowInvoker = Depends(get_workflow_invoker),
):
    """Trigger a workflow run for every user whose report is due."""
    logger.info("Scheduled refresh requested")
    return await run_refresh_cycle(store, invoker)
