"""Clerk session token verification.

Learn: Clerk signs session tokens (RS256). We verify them locally with
either the instance's JWKS endpoint or a static PEM key ("networkless"
verification). The `sub` claim is the Clerk user id — our external id.

The JWKS is fetched with httpx.AsyncClient and cached for a few minutes,
so a key fetch suspends the request instead of stalling the event loop.
A token signed with a kid we haven't seen triggers one refetch (Clerk
rotated its keys); after that an unknown kid is just an invalid token.

A bad token never fails the request here: callers get None and treat
the request as anonymous. Protected routes turn that into a 401.
"""

import time
from typing import Optional

import httpx
import jwt
import structlog

from jobhub.config import settings

logger = structlog.get_logger()


class TokenError(Exception):
    """Raised when a session token can't be verified."""


class JWKSCache:
    """Clerk's public signing keys, fetched over httpx and cached."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._transport = transport
        self._url: Optional[str] = None
        self._keys: Optional[jwt.PyJWKSet] = None
        self._fetched_at = 0.0

    async def signing_key(self, url: str, kid: Optional[str]):
        stale = (
            self._keys is None
            or self._url != url
            or time.monotonic() - self._fetched_at > self.ttl_seconds
        )
        if stale:
            await self._refresh(url)

        key = self._find(kid)
        if key is None and not stale:
            await self._refresh(url)
            key = self._find(kid)
        if key is None:
            raise TokenError(f"No signing key matches kid {kid!r}")
        return key.key

    def _find(self, kid: Optional[str]):
        keys = self._keys.keys if self._keys else []
        if kid is None:
            return keys[0] if len(keys) == 1 else None
        return next((k for k in keys if k.key_id == kid), None)

    async def _refresh(self, url: str) -> None:
        try:
            async with httpx.AsyncClient(
                timeout=settings.clerk_timeout_seconds,
                transport=self._transport,
            ) as client:
                r = await client.get(url)
                r.raise_for_status()
                keys = jwt.PyJWKSet.from_dict(r.json())
        except (httpx.HTTPError, ValueError, AttributeError, jwt.PyJWTError) as e:
            logger.warning("auth.jwks_fetch_failed", url=url, error=str(e))
            raise TokenError(f"Could not load signing keys: {e}") from e

        self._url = url
        self._keys = keys
        self._fetched_at = time.monotonic()
        logger.debug("auth.jwks_refreshed", url=url, keys=len(keys.keys))


jwks_cache = JWKSCache()


async def _signing_key(token: str):
    if settings.clerk_jwks_url:
        kid = jwt.get_unverified_header(token).get("kid")
        return await jwks_cache.signing_key(settings.clerk_jwks_url, kid)
    if settings.clerk_jwt_key:
        return settings.clerk_jwt_key
    raise TokenError("No session token verification key configured")


async def verify_session_token(token: str) -> dict:
    """Verify and decode a Clerk session token.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        payload = jwt.decode(
            token,
            await _signing_key(token),
            algorithms=settings.clerk_jwt_algorithms,
            options={"require": ["sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.PyJWTError as e:
        raise TokenError(f"Invalid token: {e}")

    parties = settings.clerk_authorized_parties
    if parties and payload.get("azp") not in parties:
        raise TokenError(f"Unauthorized party: {payload.get('azp')}")
    return payload


async def external_id_from_header(authorization: Optional[str]) -> Optional[str]:
    """Bearer header → Clerk user id, or None for anonymous requests."""
    if not authorization or not authorization.startswith("Bearer "):
        return None

    try:
        payload = await verify_session_token(authorization[7:])
    except TokenError as e:
        logger.info("auth.invalid_token", error=str(e))
        return None
    return payload["sub"]
