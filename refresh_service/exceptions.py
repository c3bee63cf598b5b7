"""Service error types."""

from typing import Optional


class ConfigurationError(RuntimeError):
    """A required setting is missing; the service cannot do any work."""


class DataSourceError(RuntimeError):
    """Profiles or run history could not be read from the data store."""


class WorkflowInvocationError(RuntimeError):
    """The run-workflow endpoint rejected or failed a single invocation."""

    def __init__(self, user_id: str, status_code: Optional[int], detail: str):
        self.user_id = user_id
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Workflow invocation for {user_id} failed ({status_code}): {detail}")
