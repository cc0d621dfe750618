"""Like service — one like per user per job, toggled.

Learn: A like for (user, job) is either absent or present; toggling
flips it. The read-then-write is racy on its own — two tabs can both
see "absent" — so the unique constraint on (user_id, job_id) is the
real arbiter:

- insert loses the race (IntegrityError) → the like exists → liked: true
- insert fails and no like exists → not a race; the job vanished (404)
  or the error is re-raised
- delete finds nothing left to delete     → the like is gone → liked: false

Either way the caller gets the state the database actually ended in,
and there is never more than one row per pair.
"""

import uuid

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobhub.db.models import Like, User
from jobhub.events.types import LIKE_UPDATED
from jobhub.realtime.pubsub import publish_job_event
from jobhub.services.job_service import JobService

logger = structlog.get_logger()


class LikeService:
    """Business logic for job likes."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.jobs = JobService(db)

    async def find_like(self, user_id: uuid.UUID, job_id: uuid.UUID) -> Like | None:
        result = await self.db.execute(
            select(Like).where(Like.user_id == user_id, Like.job_id == job_id)
        )
        return result.scalars().first()

    async def toggle_like(self, user: User, job_id: uuid.UUID) -> dict:
        """Flip the user's like on a job. Returns {"liked", "count"}."""
        # Captured up front: a rollback below expires every loaded object
        user_id = user.id
        await self.jobs.ensure_exists(job_id)

        if await self.find_like(user_id, job_id) is None:
            liked = await self._add(user_id, job_id)
        else:
            liked = await self._remove(user_id, job_id)

        count = await self.count_for_job(job_id)
        await publish_job_event(
            job_id,
            LIKE_UPDATED,
            {"userId": str(user_id), "liked": liked, "count": count},
        )
        return {"liked": liked, "count": count}

    async def _add(self, user_id: uuid.UUID, job_id: uuid.UUID) -> bool:
        self.db.add(Like(user_id=user_id, job_id=job_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self.find_like(user_id, job_id) is None:
                # Not the (user, job) uniqueness conflict
                await self.jobs.ensure_exists(job_id)
                raise
            logger.info(
                "likes.toggle_conflict",
                action="create",
                user_id=str(user_id),
                job_id=str(job_id),
            )
        return True

    async def _remove(self, user_id: uuid.UUID, job_id: uuid.UUID) -> bool:
        result = await self.db.execute(
            delete(Like).where(Like.user_id == user_id, Like.job_id == job_id)
        )
        await self.db.commit()
        if result.rowcount == 0:
            logger.info(
                "likes.toggle_conflict",
                action="delete",
                user_id=str(user_id),
                job_id=str(job_id),
            )
        return False

    async def list_for_job(self, job_id: uuid.UUID) -> list[Like]:
        """Likes on a job with the liker's summary joined in."""
        result = await self.db.execute(
            select(Like)
            .where(Like.job_id == job_id)
            .options(selectinload(Like.user))
            .order_by(Like.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_for_job(self, job_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Like).where(Like.job_id == job_id)
        )
        return result.scalar_one()

    async def has_liked(self, user_id: uuid.UUID, job_id: uuid.UUID) -> bool:
        return await self.find_like(user_id, job_id) is not None
