"""Tests for the SQL run store."""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import OperationalError

from refresh_service.exceptions import DataSourceError
from refresh_service.models import OnboardingProfile, WorkflowRunRecord
from refresh_service.services.run_store import SqlRunStore


def naive(value):
    return value.replace(tzinfo=None)


def seed(db, now):
    db.add_all([
        OnboardingProfile(
            user_id="u1",
            website_url="https://one.example.com",
            industry="Dental",
            location="Denver, CO",
            full_name="Pat One",
        ),
        OnboardingProfile(user_id="u2", website_url="https://two.example.com"),
        WorkflowRunRecord(
            user_id="u1",
            status="completed",
            triggered_at=naive(now - timedelta(days=2, hours=1)),
            completed_at=naive(now - timedelta(days=2)),
        ),
        WorkflowRunRecord(
            user_id="u1",
            status="completed",
            triggered_at=naive(now - timedelta(days=12)),
            completed_at=naive(now - timedelta(days=12)),
        ),
        WorkflowRunRecord(
            user_id="u2",
            status="failed",
            triggered_at=naive(now - timedelta(days=1)),
            completed_at=naive(now - timedelta(days=1)),
            run_metadata={"error": "DataForSEO timeout"},
        ),
    ])
    db.commit()


def test_list_profiles(test_db, now):
    seed(test_db, now)

    profiles = {p.user_id: p for p in SqlRunStore(test_db).list_profiles()}

    assert set(profiles) == {"u1", "u2"}
    assert profiles["u1"].industry == "Dental"
    assert profiles["u2"].full_name is None


def test_list_completed_runs_filters_status_and_window(test_db, now):
    seed(test_db, now)

    runs = SqlRunStore(test_db).list_completed_runs(since=now - timedelta(days=7))

    assert len(runs) == 1
    assert runs[0].user_id == "u1"
    assert runs[0].completed_at == now - timedelta(days=2)
    assert runs[0].completed_at.tzinfo is not None


def test_list_runs_since_includes_all_statuses(test_db, now):
    seed(test_db, now)

    runs = SqlRunStore(test_db).list_runs_since(now - timedelta(days=7))

    assert sorted(r.status for r in runs) == ["completed", "failed"]


def test_list_recent_runs_orders_by_trigger_time(test_db, now):
    seed(test_db, now)

    runs = SqlRunStore(test_db).list_recent_runs(limit=2)

    assert [r.status for r in runs] == ["failed", "completed"]


def test_database_errors_become_data_source_errors(now):
    class BrokenSession:
        def query(self, *args):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

    store = SqlRunStore(BrokenSession())

    with pytest.raises(DataSourceError):
        store.list_profiles()
    with pytest.raises(DataSourceError):
        store.list_completed_runs(since=now)


def test_incomplete_profiles_are_skipped():
    class StubQuery:
        def all(self):
            return [
                SimpleNamespace(
                    user_id="u1",
                    website_url="https://one.example.com",
                    industry=None,
                    location=None,
                    full_name=None,
                ),
                SimpleNamespace(user_id="u2", website_url=None, industry=None, location=None, full_name=None),
            ]

    class StubSession:
        def query(self, *args):
            return StubQuery()

    profiles = SqlRunStore(StubSession()).list_profiles()

    assert [p.user_id for p in profiles] == ["u1"]


def test_check_table(test_db):
    store = SqlRunStore(test_db)

    store.check_table("onboarding_profiles")
    store.check_table("workflow_runs")


def test_check_table_failure():
    class BrokenSession:
        rolled_back = False

        def execute(self, *args):
            raise OperationalError("SELECT", {}, Exception("relation does not exist"))

        def rollback(self):
            self.rolled_back = True

    session = BrokenSession()

    with pytest.raises(DataSourceError):
        SqlRunStore(session).check_table("workflow_runs")
    assert session.rolled_back
