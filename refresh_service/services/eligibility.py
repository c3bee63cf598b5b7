"""Refresh eligibility: which users are due for a new report."""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from refresh_service.schemas.refresh import Profile, WorkflowRun

ELIGIBILITY_WINDOW = timedelta(days=7)


def latest_completions(runs: Iterable[WorkflowRun]) -> Dict[str, datetime]:
    """
    Map each user to the completion time of their most recent completed run.

    Failed, pending and running runs, and runs without a completion
    timestamp, are ignored.
    """
    latest: Dict[str, datetime] = {}
    for run in runs:
        if not run.is_completed:
            continue
        current = latest.get(run.user_id)
        if current is None or run.completed_at > current:
            latest[run.user_id] = run.completed_at
    return latest


def select_due_profiles(
    profiles: Iterable[Profile],
    recent_runs: Iterable[WorkflowRun],
    now: datetime,
    window: timedelta = ELIGIBILITY_WINDOW,
) -> List[Profile]:
    """
    Select the profiles that need a refreshed report.

    A profile is due when its user has no completed run, or when the most
    recent completed run finished more than ``window`` before ``now``.
    Duplicate user ids keep the first profile seen. Input order is preserved.

    Args:
        profiles: Candidate profiles
        recent_runs: Run history, in any order and with any status
        now: Reference time (timezone-aware)
        window: Eligibility window

    Returns:
        Due profiles
    """
    latest = latest_completions(recent_runs)

    due: List[Profile] = []
    seen = set()
    for profile in profiles:
        if profile.user_id in seen:
            continue
        seen.add(profile.user_id)

        last_completed = latest.get(profile.user_id)
        if last_completed is None or now - last_completed > window:
            due.append(profile)

    return due
