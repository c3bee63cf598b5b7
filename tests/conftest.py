"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from refresh_service import models  # noqa: F401
from refresh_service.database import Base
from refresh_service.exceptions import DataSourceError, WorkflowInvocationError
from refresh_service.services.run_store import RunStore
from refresh_service.services.workflow_invoker import WorkflowInvoker

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def test_db():
    """Create a test database for each test."""
    # Use in-memory SQLite for testing
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()

    yield db

    db.close()


@pytest.fixture
def now():
    return NOW


class FakeRunStore(RunStore):
    """In-memory store; raises DataSourceError when ``fail`` is set."""

    def __init__(self, profiles=None, runs=None, fail=False):
        self.profiles = profiles or []
        self.runs = runs or []
        self.fail = fail
        self.since = None

    def list_profiles(self):
        if self.fail:
            raise DataSourceError("Onboarding profiles unavailable")
        return list(self.profiles)

    def list_completed_runs(self, since):
        if self.fail:
            raise DataSourceError("Workflow run history unavailable")
        self.since = since
        return [r for r in self.runs if r.is_completed and r.completed_at >= since]

    def check_table(self, table_name):
        if self.fail:
            raise DataSourceError(f"Table {table_name} unavailable")


class RecordingInvoker(WorkflowInvoker):
    """Records every invocation; users in ``failing`` get a rejected call."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def invoke(self, profile):
        self.calls.append(profile.user_id)
        if profile.user_id in self.failing:
            raise WorkflowInvocationError(profile.user_id, 500, "executor unavailable")
