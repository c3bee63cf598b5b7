"""Workflow run statistics for the monitoring endpoints."""

import time
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from refresh_service.exceptions import DataSourceError
from refresh_service.models.workflow_run import WorkflowRunRecord
from refresh_service.schemas.monitor import (
    DatabaseHealth,
    HealthCheck,
    LastFailure,
    RecentRun,
    WorkflowStats,
)
from refresh_service.schemas.refresh import RUN_STATUS_COMPLETED, as_utc
from refresh_service.services.run_store import RunStore

MONITORED_TABLES = ("onboarding_profiles", "workflow_runs")


def _duration_minutes(run: WorkflowRunRecord) -> Optional[float]:
    if run.triggered_at is None or run.completed_at is None:
        return None
    return (as_utc(run.completed_at) - as_utc(run.triggered_at)).total_seconds() / 60


def _error_message(run: WorkflowRunRecord) -> Optional[str]:
    metadata = run.run_metadata or {}
    return metadata.get("error")


def compute_workflow_stats(runs: Iterable[WorkflowRunRecord], now: datetime, days: int) -> WorkflowStats:
    """
    Aggregate runs triggered within the last ``days`` days.

    Args:
        runs: Run records, possibly including older runs
        now: Reference time (timezone-aware)
        days: Length of the reporting period

    Returns:
        WorkflowStats
    """
    since = now - timedelta(days=days)
    runs = [r for r in runs if r.triggered_at is not None and as_utc(r.triggered_at) >= since]

    total = len(runs)
    successful = [r for r in runs if r.status == RUN_STATUS_COMPLETED]
    failed = [r for r in runs if r.status == "failed"]
    running = [r for r in runs if r.status == "running"]

    durations = [d for d in (_duration_minutes(r) for r in successful) if d is not None]
    avg_duration = sum(durations) / len(durations) if durations else 0.0

    last_24h = now - timedelta(hours=24)
    last_24h_runs = sum(1 for r in runs if as_utc(r.triggered_at) >= last_24h)

    last_failure = None
    if failed:
        latest = max(failed, key=lambda r: as_utc(r.triggered_at))
        last_failure = LastFailure(
            id=latest.id,
            error=_error_message(latest) or "Unknown error",
            triggered_at=as_utc(latest.triggered_at),
        )

    return WorkflowStats(
        days=days,
        total_runs=total,
        successful_runs=len(successful),
        failed_runs=len(failed),
        running_runs=len(running),
        avg_duration_minutes=round(avg_duration, 2),
        success_rate=round(len(successful) / total * 100, 2) if total else 0.0,
        last_24h_runs=last_24h_runs,
        last_failure=last_failure,
    )


def summarize_recent_runs(runs: Iterable[WorkflowRunRecord]) -> List[RecentRun]:
    """Shape run records for the recent runs listing."""
    summaries = []
    for run in runs:
        duration = _duration_minutes(run)
        summaries.append(
            RecentRun(
                id=run.id,
                website_url=run.website_url,
                status=run.status,
                triggered_at=as_utc(run.triggered_at),
                completed_at=as_utc(run.completed_at),
                duration_minutes=round(duration, 2) if duration is not None else None,
                error=_error_message(run),
            )
        )
    return summaries


def check_database_health(store: RunStore) -> DatabaseHealth:
    """Probe every table the service reads."""
    checks = []
    for table_name in MONITORED_TABLES:
        start = time.monotonic()
        try:
            store.check_table(table_name)
        except DataSourceError as e:
            checks.append(HealthCheck(check=f"table_{table_name}", status="fail", message=str(e)))
            continue
        checks.append(
            HealthCheck(
                check=f"table_{table_name}",
                status="pass",
                message=f"Table {table_name} accessible",
                response_time_ms=round((time.monotonic() - start) * 1000, 2),
            )
        )

    overall = "healthy" if all(c.status == "pass" for c in checks) else "issues"
    return DatabaseHealth(overall_status=overall, checks=checks)


def calculate_system_health(stats: WorkflowStats, database: DatabaseHealth) -> int:
    """
    Score overall health from 0 to 100.

    Low success rates only count when there were runs in the period.
    """
    score = 100
    if stats.total_runs:
        if stats.success_rate < 90:
            score -= 20
        if stats.success_rate < 70:
            score -= 30
    if database.overall_status != "healthy":
        score -= 25
    # Likely stuck workflows
    if stats.running_runs > 5:
        score -= 15
    return max(0, score)
