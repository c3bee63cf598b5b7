"""Read-only access to onboarding profiles and workflow run history."""

import logging
from datetime import datetime, timezone
from typing import List

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from refresh_service.database import Base
from refresh_service.exceptions import DataSourceError
from refresh_service.models.profile import OnboardingProfile
from refresh_service.models.workflow_run import WorkflowRunRecord
from refresh_service.schemas.refresh import RUN_STATUS_COMPLETED, Profile, WorkflowRun

logger = logging.getLogger(__name__)


def _naive_utc(value: datetime) -> datetime:
    """Columns store naive UTC timestamps."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class RunStore:
    """Query interface the scheduler reads its inputs from."""

    def list_profiles(self) -> List[Profile]:
        raise NotImplementedError

    def list_completed_runs(self, since: datetime) -> List[WorkflowRun]:
        raise NotImplementedError

    def list_runs_since(self, since: datetime) -> List[WorkflowRunRecord]:
        raise NotImplementedError

    def list_recent_runs(self, limit: int) -> List[WorkflowRunRecord]:
        raise NotImplementedError

    def check_table(self, table_name: str) -> None:
        """Raise DataSourceError if ``table_name`` cannot be read."""
        raise NotImplementedError


class SqlRunStore(RunStore):
    """RunStore backed by the onboarding_profiles and workflow_runs tables."""

    def __init__(self, db: Session):
        self.db = db

    def list_profiles(self) -> List[Profile]:
        """All onboarding profiles."""
        try:
            rows = self.db.query(OnboardingProfile).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read onboarding profiles: {e}")
            raise DataSourceError("Onboarding profiles unavailable") from e
        profiles = []
        for row in rows:
            try:
                profiles.append(Profile.model_validate(row))
            except ValidationError as e:
                logger.warning(
                    f"Skipping incomplete onboarding profile {row.user_id}: "
                    f"{e.error_count()} invalid field(s)"
                )
        return profiles

    def list_completed_runs(self, since: datetime) -> List[WorkflowRun]:
        """Completed runs that finished at or after ``since``."""
        since_naive = _naive_utc(since)
        try:
            rows = (
                self.db.query(WorkflowRunRecord)
                .filter(
                    WorkflowRunRecord.status == RUN_STATUS_COMPLETED,
                    WorkflowRunRecord.completed_at >= since_naive,
                )
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to read workflow run history: {e}")
            raise DataSourceError("Workflow run history unavailable") from e
        return [WorkflowRun.model_validate(row) for row in rows]

    def list_runs_since(self, since: datetime) -> List[WorkflowRunRecord]:
        """Runs of any status triggered at or after ``since``."""
        since_naive = _naive_utc(since)
        try:
            return (
                self.db.query(WorkflowRunRecord)
                .filter(WorkflowRunRecord.triggered_at >= since_naive)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to read workflow runs: {e}")
            raise DataSourceError("Workflow runs unavailable") from e

    def list_recent_runs(self, limit: int) -> List[WorkflowRunRecord]:
        """The ``limit`` most recently triggered runs."""
        try:
            return (
                self.db.query(WorkflowRunRecord)
                .order_by(WorkflowRunRecord.triggered_at.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to read recent workflow runs: {e}")
            raise DataSourceError("Workflow runs unavailable") from e

    def check_table(self, table_name: str) -> None:
        """Read a single row from ``table_name``."""
        table = Base.metadata.tables[table_name]
        try:
            self.db.execute(select(table).limit(1)).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DataSourceError(f"Table {table_name} unavailable: {e}") from e
