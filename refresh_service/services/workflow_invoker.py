"""Client for the external run-workflow endpoint."""

import logging
from typing import Dict, Optional

import httpx

from refresh_service.exceptions import WorkflowInvocationError
from refresh_service.schemas.refresh import Profile

logger = logging.getLogger(__name__)


class WorkflowInvoker:
    """Starts an intelligence workflow run for one profile."""

    async def invoke(self, profile: Profile) -> None:
        """
        Trigger a run for ``profile``.

        Raises:
            WorkflowInvocationError: If the executor rejects the request
            httpx.HTTPError: On transport errors
        """
        raise NotImplementedError


class HttpWorkflowInvoker(WorkflowInvoker):
    """POSTs profile parameters to the run-workflow function."""

    def __init__(
        self,
        endpoint_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the invoker."""
        self.endpoint_url = endpoint_url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    def _build_headers(self) -> Dict[str, str]:
        """Build HTTP headers for the workflow function."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def invoke(self, profile: Profile) -> None:
        logger.info(f"Triggering workflow for user {profile.user_id} ({profile.website_url})")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.endpoint_url,
                headers=self._build_headers(),
                json=profile.workflow_payload(),
            )

        if not response.is_success:
            raise WorkflowInvocationError(profile.user_id, response.status_code, response.text)
