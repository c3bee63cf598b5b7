"""Tests for refresh eligibility selection."""

from datetime import timedelta

from refresh_service.schemas.refresh import Profile, WorkflowRun
from refresh_service.services.eligibility import (
    ELIGIBILITY_WINDOW,
    latest_completions,
    select_due_profiles,
)


def profile(user_id):
    return Profile(user_id=user_id, website_url=f"https://{user_id}.example.com")


def run(user_id, completed_at, status="completed"):
    return WorkflowRun(user_id=user_id, status=status, completed_at=completed_at)


def ids(profiles):
    return [p.user_id for p in profiles]


def test_window_is_seven_days():
    assert ELIGIBILITY_WINDOW == timedelta(days=7)


def test_profile_without_runs_is_due(now):
    assert ids(select_due_profiles([profile("u1")], [], now)) == ["u1"]


def test_recent_completed_run_excludes_profile(now):
    profiles = [profile("u1"), profile("u2")]
    runs = [run("u1", now - timedelta(days=3))]

    assert ids(select_due_profiles(profiles, runs, now)) == ["u2"]


def test_stale_completed_run_includes_profile(now):
    runs = [run("u1", now - timedelta(days=10))]

    assert ids(select_due_profiles([profile("u1")], runs, now)) == ["u1"]


def test_eight_days_old_run_is_due(now):
    runs = [run("u1", now - timedelta(days=8))]

    assert ids(select_due_profiles([profile("u1")], runs, now)) == ["u1"]


def test_failed_run_does_not_count(now):
    runs = [run("u1", now - timedelta(days=1), status="failed")]

    assert ids(select_due_profiles([profile("u1")], runs, now)) == ["u1"]


def test_completed_run_without_timestamp_does_not_count(now):
    runs = [run("u1", None)]

    assert ids(select_due_profiles([profile("u1")], runs, now)) == ["u1"]


def test_most_recent_completed_run_is_used(now):
    runs = [
        run("u1", now - timedelta(days=20)),
        run("u1", now - timedelta(days=2)),
        run("u1", now - timedelta(days=9)),
    ]

    assert select_due_profiles([profile("u1")], runs, now) == []


def test_exactly_at_window_boundary_is_not_due(now):
    runs = [run("u1", now - ELIGIBILITY_WINDOW)]

    assert select_due_profiles([profile("u1")], runs, now) == []


def test_custom_window(now):
    runs = [run("u1", now - timedelta(days=3))]

    assert ids(select_due_profiles([profile("u1")], runs, now, window=timedelta(days=1))) == ["u1"]


def test_duplicate_profiles_are_deduplicated(now):
    first = Profile(user_id="u1", website_url="https://first.example.com")
    second = Profile(user_id="u1", website_url="https://second.example.com")

    due = select_due_profiles([first, second], [], now)

    assert due == [first]


def test_naive_completion_time_is_treated_as_utc(now):
    naive = (now - timedelta(days=2)).replace(tzinfo=None)

    assert select_due_profiles([profile("u1")], [run("u1", naive)], now) == []


def test_latest_completions_ignores_incomplete_runs(now):
    runs = [
        run("u1", now - timedelta(days=1), status="running"),
        run("u1", now - timedelta(days=4)),
        run("u2", now - timedelta(days=1), status="failed"),
    ]

    assert latest_completions(runs) == {"u1": now - timedelta(days=4)}
