"""Identity provider client — fetches user profiles from Clerk.

Learn: We only ever need one thing from Clerk's Backend API: the profile
of a user we're seeing for the first time (GET /users/{user_id}). The
call is authenticated with the instance's secret key.

Every failure mode (connection error, timeout, 4xx, 5xx, garbage body)
is normalized into IdentityProviderError, so the resolver has exactly one
exception to degrade on.
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from jobhub.config import settings


class IdentityProviderError(Exception):
    """Raised when the identity provider can't return a profile."""


class IdentityProfile(BaseModel):
    """The subset of a provider user we copy into our User row."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email_addresses: list[str] = Field(default_factory=list)
    image_url: Optional[str] = None


class IdentityProvider(ABC):
    """Anything that can look up a profile by external id."""

    @abstractmethod
    async def get_profile(self, external_id: str) -> IdentityProfile:
        """Return the profile, or raise IdentityProviderError."""


def _parse_user(external_id: str, data) -> IdentityProfile:
    """Clerk user object → IdentityProfile; anything off-shape is an error."""
    if not isinstance(data, dict):
        raise IdentityProviderError(
            f"Clerk returned {type(data).__name__} for user {external_id}, expected an object"
        )

    entries = data.get("email_addresses") or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise IdentityProviderError(
            f"Clerk returned malformed email_addresses for user {external_id}"
        )

    try:
        return IdentityProfile(
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
            username=data.get("username"),
            email_addresses=[
                e["email_address"] for e in entries if e.get("email_address")
            ],
            image_url=data.get("image_url"),
        )
    except ValidationError as e:
        raise IdentityProviderError(
            f"Clerk returned a malformed user {external_id}: {e}"
        ) from e


class ClerkClient(IdentityProvider):
    """Clerk Backend API client (httpx)."""

    def __init__(
        self,
        secret_key: str,
        api_url: str = "https://api.clerk.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get_profile(self, external_id: str) -> IdentityProfile:
        if not self.secret_key:
            raise IdentityProviderError("Clerk secret key is not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                r = await client.get(
                    f"/users/{external_id}",
                    headers={"Authorization": f"Bearer {self.secret_key}"},
                )
                r.raise_for_status()
                data = r.json()
        except httpx.HTTPStatusError as e:
            raise IdentityProviderError(
                f"Clerk returned {e.response.status_code} for user {external_id}"
            ) from e
        except httpx.HTTPError as e:
            raise IdentityProviderError(f"Clerk request failed: {e!r}") from e
        except ValueError as e:
            raise IdentityProviderError(f"Clerk returned invalid JSON: {e}") from e

        return _parse_user(external_id, data)


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency — the configured Clerk client."""
    return ClerkClient(
        secret_key=settings.clerk_secret_key,
        api_url=settings.clerk_api_url,
        timeout=settings.clerk_timeout_seconds,
    )
