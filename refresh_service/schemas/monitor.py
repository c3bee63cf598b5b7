"""Workflow monitoring schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class LastFailure(BaseModel):
    """Most recently triggered failed run."""

    id: UUID
    error: str
    triggered_at: Optional[datetime] = None


class WorkflowStats(BaseModel):
    """Aggregate counts over a trailing period of workflow runs."""

    days: int
    total_runs: int
    successful_runs: int
    failed_runs: int
    running_runs: int
    avg_duration_minutes: float
    success_rate: float  # percent
    last_24h_runs: int
    last_failure: Optional[LastFailure] = None


class RecentRun(BaseModel):
    """One row of the recent runs listing."""

    id: UUID
    website_url: Optional[str] = None
    status: str
    triggered_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_minutes: Optional[float] = None
    error: Optional[str] = None


class HealthCheck(BaseModel):
    """Outcome of one database probe."""

    check: str
    status: str  # 'pass' or 'fail'
    message: str
    response_time_ms: Optional[float] = None


class DatabaseHealth(BaseModel):
    """Table accessibility checks."""

    overall_status: str  # 'healthy' or 'issues'
    checks: List[HealthCheck]


class SystemHealthReport(BaseModel):
    """Health score with the data it was derived from."""

    timestamp: datetime
    system_health: int  # 0-100
    workflow_stats: WorkflowStats
    database_health: DatabaseHealth
