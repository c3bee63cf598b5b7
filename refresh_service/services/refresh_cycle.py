"""One pass of the weekly refresh scheduler."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from refresh_service.schemas.refresh import InvocationOutcome, Profile, RefreshCycleResult
from refresh_service.services.eligibility import ELIGIBILITY_WINDOW, select_due_profiles
from refresh_service.services.run_store import RunStore
from refresh_service.services.workflow_invoker import WorkflowInvoker

logger = logging.getLogger(__name__)


async def _invoke_one(invoker: WorkflowInvoker, profile: Profile) -> InvocationOutcome:
    """Trigger one profile; failures become outcomes instead of propagating."""
    try:
        await invoker.invoke(profile)
    except Exception as e:
        logger.error(f"Failed to enqueue workflow for user {profile.user_id}: {e}")
        return InvocationOutcome(user_id=profile.user_id, succeeded=False, error=str(e))
    return InvocationOutcome(user_id=profile.user_id, succeeded=True)


async def run_refresh_cycle(
    store: RunStore,
    invoker: WorkflowInvoker,
    now: Optional[datetime] = None,
    window: timedelta = ELIGIBILITY_WINDOW,
) -> RefreshCycleResult:
    """
    Read profiles and recent runs, then trigger a workflow for every due user.

    All invocations run concurrently and the cycle returns once each has
    settled. A failed invocation is logged and reported in the result but
    is not retried and does not affect the others.

    Args:
        store: Source of profiles and completed runs
        invoker: Run-workflow endpoint client
        now: Reference time, defaults to the current UTC time
        window: Eligibility window

    Returns:
        RefreshCycleResult with per-user outcomes

    Raises:
        DataSourceError: If profiles or run history cannot be read. No
            invocation is attempted in that case.
    """
    now = now or datetime.now(timezone.utc)

    # Store reads are blocking database calls
    profiles = await asyncio.to_thread(store.list_profiles)
    recent_runs = await asyncio.to_thread(store.list_completed_runs, now - window)

    due = select_due_profiles(profiles, recent_runs, now=now, window=window)
    logger.info(f"{len(due)} of {len(profiles)} profiles due for a refresh")

    outcomes = await asyncio.gather(*(_invoke_one(invoker, profile) for profile in due))

    triggered = sum(1 for outcome in outcomes if outcome.succeeded)
    failed = len(outcomes) - triggered
    if failed:
        logger.warning(f"Refresh cycle finished with {failed} failed invocation(s)")
    logger.info(f"Refresh cycle triggered {triggered} workflow run(s)")

    return RefreshCycleResult(
        profiles_considered=len(profiles),
        due=len(due),
        triggered=triggered,
        failed=failed,
        outcomes=list(outcomes),
    )
