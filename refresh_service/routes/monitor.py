"""Workflow monitoring routes."""

from datetime import datetime, timedelta, timezone
from typing import List

from fastapi import APIRouter, Depends, Query

from refresh_service.dependencies import get_run_store, require_scheduler_secret
from refresh_service.schemas.monitor import RecentRun, SystemHealthReport, WorkflowStats
from refresh_service.services.monitoring import (
    calculate_system_health,
    check_database_health,
    compute_workflow_stats,
    summarize_recent_runs,
)
from refresh_service.services.run_store import RunStore

router = APIRouter(
    prefix="/monitor",
    tags=["monitor"],
    dependencies=[Depends(require_scheduler_secret)],
)


@router.get("/workflow-stats", response_model=WorkflowStats)
def workflow_stats(
    days: int = Query(default=7, ge=1, le=90),
    store: RunStore = Depends(get_run_store),
):
    """Success rate, durations and failures over the last ``days`` days."""
    now = datetime.now(timezone.utc)
    runs = store.list_runs_since(now - timedelta(days=days))
    return compute_workflow_stats(runs, now=now, days=days)


@router.get("/recent-runs", response_model=List[RecentRun])
def recent_runs(
    limit: int = Query(default=20, ge=1, le=100),
    store: RunStore = Depends(get_run_store),
):
    """Most recently triggered workflow runs."""
    return summarize_recent_runs(store.list_recent_runs(limit))


@router.get("/health", response_model=SystemHealthReport)
def system_health(
    days: int = Query(default=7, ge=1, le=90),
    store: RunStore = Depends(get_run_store),
):
    """Database checks and workflow stats rolled into one health score."""
    now = datetime.now(timezone.utc)
    database = check_database_health(store)

    runs = []
    if database.overall_status == "healthy":
        runs = store.list_runs_since(now - timedelta(days=days))
    stats = compute_workflow_stats(runs, now=now, days=days)

    return SystemHealthReport(
        timestamp=now,
        system_health=calculate_system_health(stats, database),
        workflow_stats=stats,
        database_health=database,
    )
