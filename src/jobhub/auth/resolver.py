"""Identity resolver — external id → local User, created on first sight.

Learn: Every request with a valid session token passes through here.
The common path is a single indexed lookup on users.external_id. Only
the first request from a new Clerk user pays for a profile fetch:

    found      → return the stored row untouched
    not found  → fetch profile → derive name/email/avatar/role → insert

Two failure modes never fail the request:
- Clerk is down / returns an error → return None (request is anonymous)
- A concurrent request inserted the same external id first → the unique
  constraint rejects our insert, we roll back and return the winner's row
"""

from typing import Iterable, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.identity_provider import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderError,
)
from jobhub.db.models import ROLE_ADMIN, ROLE_USER, User

logger = structlog.get_logger()


def display_name(profile: IdentityProfile) -> str:
    """First (+ last) name, else username, else "User"."""
    if profile.first_name:
        if profile.last_name:
            return f"{profile.first_name} {profile.last_name}"
        return profile.first_name
    return profile.username or "User"


class IdentityResolver:
    """Find-or-create local users for verified external identities."""

    def __init__(
        self,
        db: AsyncSession,
        provider: IdentityProvider,
        admin_ids: Iterable[str] = (),
    ):
        self.db = db
        self.provider = provider
        self.admin_ids = frozenset(admin_ids)

    async def find(self, external_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.external_id == external_id)
        )
        return result.scalars().first()

    async def resolve(self, external_id: Optional[str]) -> Optional[User]:
        """Return the local user for an external id, or None (anonymous)."""
        if not external_id:
            return None

        user = await self.find(external_id)
        if user:
            logger.debug(
                "auth.user_found",
                user_id=str(user.id),
                external_id=external_id,
                role=user.role,
            )
            return user

        try:
            profile = await self.provider.get_profile(external_id)
        except IdentityProviderError as e:
            logger.warning(
                "auth.profile_fetch_failed",
                external_id=external_id,
                error=str(e),
            )
            return None

        return await self._create(external_id, profile)

    async def _create(
        self, external_id: str, profile: IdentityProfile
    ) -> Optional[User]:
        user = User(
            external_id=external_id,
            name=display_name(profile),
            email=profile.email_addresses[0] if profile.email_addresses else None,
            profile_image=profile.image_url,
            role=ROLE_ADMIN if external_id in self.admin_ids else ROLE_USER,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost the first-sight race; another request created this user
            await self.db.rollback()
            logger.info("auth.user_create_conflict", external_id=external_id)
            return await self.find(external_id)

        logger.info(
            "auth.user_created",
            user_id=str(user.id),
            external_id=external_id,
            name=user.name,
            role=user.role,
        )
        return user
