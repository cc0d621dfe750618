"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to attach the
current user to the request.

- get_current_user_optional → User | None. Public routes use it; a
  missing/invalid token or an unreachable Clerk just means anonymous.
- get_current_user → User, or 401.
- require_admin → User, or 401/403 after running the authorization gate.

FastAPI caches get_db per request, so the resolver, the gate and the
route handler all share one session.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.gate import (
    NOT_FOUND,
    UNAUTHENTICATED,
    AuthDecision,
    AuthorizationGate,
)
from jobhub.auth.identity_provider import IdentityProvider, get_identity_provider
from jobhub.auth.resolver import IdentityResolver
from jobhub.auth.tokens import external_id_from_header
from jobhub.config import settings
from jobhub.db.engine import get_db
from jobhub.db.models import User


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Optional[User]:
    """Resolve the request's identity (optional — None if anonymous)."""
    external_id = await external_id_from_header(authorization)
    if external_id is None:
        return None

    resolver = IdentityResolver(
        db, provider, admin_ids=settings.admin_external_ids
    )
    return await resolver.resolve(external_id)


async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """Resolve the request's identity (required — 401 if anonymous)."""
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def raise_for_decision(decision: AuthDecision, message: str) -> None:
    """Turn a denial into the matching HTTP error."""
    if decision.allowed:
        return
    if decision.reason == UNAUTHENTICATED:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if decision.reason == NOT_FOUND:
        raise HTTPException(status_code=404, detail="Not found")
    raise HTTPException(
        status_code=403,
        detail={
            "message": message,
            "role": decision.role,
            "userId": decision.user_id,
        },
    )


async def require_admin(
    user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Admin-only routes. Promotes allow-listed users on the way through."""
    gate = AuthorizationGate(db, admin_ids=settings.admin_external_ids)
    decision = await gate.require_admin(user)
    raise_for_decision(decision, "Admin access only")
    return user
