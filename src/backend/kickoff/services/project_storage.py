"""Client for the downstream project-storage service."""

import logging
from typing import Any

import httpx

from kickoff.config import settings
from kickoff.models.project import ProjectRecord

logger = logging.getLogger(__name__)


class ProjectCreationError(Exception):
    """The project service did not create the project."""


class ProjectStorageClient:
    """Posts finished project records to the project service."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.project_service_url
        self.timeout = timeout or settings.project_service_timeout_seconds
        self._transport = transport

    def create_project(self, record: ProjectRecord, credential: str) -> dict[str, Any]:
        """Create the project on behalf of the user holding the credential.

        Args:
            record: A fully validated project record
            credential: Bearer token of the acting user

        Returns:
            The service's JSON response body (empty if it sent none)

        Raises:
            ProjectCreationError: On transport failure or a non-2xx response
        """
        payload = record.model_dump(mode="json")
        logger.info(f"Creating project '{record.name}' via {self.base_url}")

        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = client.post(
                    "/v1/projects",
                    json=payload,
                    headers={"Authorization": f"Bearer {credential}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Project service request failed: {e}")
            raise ProjectCreationError(f"Project service is unavailable: {e}") from e

        if not response.is_success:
            logger.error(
                f"Project service rejected project '{record.name}': "
                f"{response.status_code} {response.text}"
            )
            raise ProjectCreationError(f"Failed to create project: {response.text}")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning("Project service returned a non-JSON body")
            return {}
