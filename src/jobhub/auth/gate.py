"""Authorization gate — admin checks and ownership checks.

Learn: A user is an admin if EITHER their stored role says so OR their
external id is on the configured allow-list. The two can drift (someone
gets added to the allow-list after their User row was created as
"user"). When the allow-list alone grants access, the gate writes
role="admin" back before allowing, so the stored role catches up.

The promotion is one-way. Removing an id from the allow-list does NOT
demote a stored admin — the gate only ever writes "admin".

Ownership checks (deleting a comment, withdrawing an application) are
plain functions: the owner or a stored admin may proceed.
"""

import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.db.models import ROLE_ADMIN, Comment, User

logger = structlog.get_logger()

UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"
NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AuthDecision:
    """Outcome of an authorization check.

    Denials carry a reason and, for "forbidden", the caller's role and
    external id so the 403 body can say who was refused and why.
    """

    allowed: bool
    reason: Optional[str] = None
    role: Optional[str] = None
    user_id: Optional[str] = None

    @classmethod
    def allow(cls) -> "AuthDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, user: Optional[User] = None) -> "AuthDecision":
        if user is None:
            return cls(allowed=False, reason=reason)
        return cls(
            allowed=False,
            reason=reason,
            role=user.role,
            user_id=user.external_id,
        )


class AccessDeniedError(Exception):
    """Raised by services when an authorization check fails."""

    def __init__(self, decision: AuthDecision):
        super().__init__(decision.reason)
        self.decision = decision


class AuthorizationGate:
    """Admin gate backed by the stored role plus an allow-list."""

    def __init__(self, db: AsyncSession, admin_ids: Iterable[str] = ()):
        self.db = db
        self.admin_ids = frozenset(admin_ids)

    def is_allowlisted(self, user: User) -> bool:
        return user.external_id in self.admin_ids

    async def require_admin(self, user: Optional[User]) -> AuthDecision:
        """Allow admins; promote allow-listed users whose role lags behind.

        A failed promotion write propagates — the request fails rather
        than being allowed on an unpersisted role.
        """
        if user is None:
            return AuthDecision.deny(UNAUTHENTICATED)

        by_role = user.is_admin
        by_allowlist = self.is_allowlisted(user)

        if not by_role and not by_allowlist:
            logger.info(
                "auth.admin_denied",
                user_id=str(user.id),
                external_id=user.external_id,
                role=user.role,
            )
            return AuthDecision.deny(FORBIDDEN, user)

        if by_allowlist and not by_role:
            previous = user.role
            user.role = ROLE_ADMIN
            await self.db.commit()
            logger.info(
                "auth.role_promoted",
                user_id=str(user.id),
                external_id=user.external_id,
                previous_role=previous,
            )

        return AuthDecision.allow()


def is_owner_or_admin(user: Optional[User], owner_id: uuid.UUID) -> bool:
    """True if `user` owns the resource or holds the stored admin role."""
    if user is None:
        return False
    return user.id == owner_id or user.is_admin


def can_delete_comment(user: Optional[User], comment: Comment) -> bool:
    return is_owner_or_admin(user, comment.author_id)


def comment_delete_decision(
    user: Optional[User], comment: Optional[Comment]
) -> AuthDecision:
    """Existence is decided before ownership: not_found, then forbidden."""
    if user is None:
        return AuthDecision.deny(UNAUTHENTICATED)
    if comment is None:
        return AuthDecision.deny(NOT_FOUND)
    if not can_delete_comment(user, comment):
        return AuthDecision.deny(FORBIDDEN, user)
    return AuthDecision.allow()
