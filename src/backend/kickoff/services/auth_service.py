"""Resolve the acting user through the authentication service."""

import logging
from dataclasses import dataclass

import httpx

from kickoff.config import settings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """The request could not be tied to a user."""


@dataclass
class AuthenticatedUser:
    """The user behind a request, with the bearer token they presented."""
    id: str
    token: str


class AuthClient:
    """Verifies bearer tokens against the authentication service."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url or settings.auth_service_url
        self.timeout = timeout or settings.auth_service_timeout_seconds
        self._transport = transport

    def verify(self, authorization: str | None) -> AuthenticatedUser:
        """Return the user owning the Authorization header's token.

        Raises:
            AuthenticationError: If the header is missing or the token is rejected
        """
        if not authorization or not authorization.strip():
            raise AuthenticationError("missing authorization header")

        token = authorization.strip()
        scheme, _, value = token.partition(" ")
        if scheme.lower() == "bearer":
            token = value.strip()
        if not token:
            raise AuthenticationError("empty bearer token")

        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = client.get(
                    "/v1/users/me",
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Authentication service request failed: {e}")
            raise AuthenticationError("authentication service unavailable") from e

        if not response.is_success:
            logger.info(f"Authentication failed with status {response.status_code}")
            raise AuthenticationError("token rejected")

        try:
            data = response.json()
        except ValueError as e:
            raise AuthenticationError("malformed authentication response") from e

        user = data.get("user") or data if isinstance(data, dict) else None
        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise AuthenticationError("authentication response has no user id")

        return AuthenticatedUser(id=str(user_id), token=token)
