"""Refresh scheduler record types and responses."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

RUN_STATUS_COMPLETED = "completed"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps from storage as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Profile(BaseModel):
    """A user's report-generation parameters."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    website_url: str
    industry: Optional[str] = None
    location: Optional[str] = None
    full_name: Optional[str] = None

    def workflow_payload(self) -> dict:
        """Body sent to the run-workflow endpoint."""
        return {
            "fullName": self.full_name,
            "websiteUrl": self.website_url,
            "industry": self.industry,
            "location": self.location,
        }


class WorkflowRun(BaseModel):
    """A prior workflow execution as seen by the scheduler."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    status: str
    completed_at: Optional[datetime] = None

    @field_validator("completed_at")
    @classmethod
    def normalize_completed_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @property
    def is_completed(self) -> bool:
        return self.status == RUN_STATUS_COMPLETED and self.completed_at is not None


class InvocationOutcome(BaseModel):
    """Result of triggering the workflow for one user."""

    user_id: str
    succeeded: bool
    error: Optional[str] = None


class RefreshCycleResult(BaseModel):
    """Summary of one scheduler cycle."""

    profiles_considered: int
    due: int
    triggered: int
    failed: int
    outcomes: List[InvocationOutcome]
