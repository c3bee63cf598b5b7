"""SQLAlchemy ORM models."""

from refresh_service.models.profile import OnboardingProfile
from refresh_service.models.workflow_run import WorkflowRunRecord

__all__ = [
    "OnboardingProfile",
    "WorkflowRunRecord",
]
