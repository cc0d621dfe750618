"""Job service — job postings CRUD and listing filters.

Learn: Every read loads the category through an explicit selectinload,
so JobRead.category is always present (or None) and async code never
hits a lazy load. Mutations are admin-only; that's enforced at the route
layer by the require_admin dependency, not here.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobhub.db.models import Category, Job, User

logger = structlog.get_logger()


class JobNotFoundError(Exception):
    """Raised when a job is not found."""


class CategoryMissingError(Exception):
    """Raised when a job references a category that doesn't exist."""


class JobService:
    """Business logic for job postings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _query(self):
        # populate_existing so a reload after update picks up a new category
        return (
            select(Job)
            .options(selectinload(Job.category))
            .execution_options(populate_existing=True)
        )

    async def list_jobs(
        self,
        *,
        category_id: Optional[uuid.UUID] = None,
        search: Optional[str] = None,
        location: Optional[str] = None,
        job_type: Optional[str] = None,
        is_urgent: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Job]:
        """List jobs, newest first, with optional filters."""
        q = self._query()
        if category_id:
            q = q.where(Job.category_id == category_id)
        if search:
            pattern = f"%{search}%"
            q = q.where(or_(Job.title.ilike(pattern), Job.company.ilike(pattern)))
        if location:
            q = q.where(Job.location.ilike(f"%{location}%"))
        if job_type:
            q = q.where(Job.job_type == job_type)
        if is_urgent is not None:
            q = q.where(Job.is_urgent == is_urgent)

        q = q.order_by(Job.created_at.desc()).limit(limit).offset(offset)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def list_urgent(self, limit: int = 20) -> list[Job]:
        return await self.list_jobs(is_urgent=True, limit=limit)

    async def list_by_category(self, category_id: uuid.UUID) -> list[Job]:
        return await self.list_jobs(category_id=category_id)

    async def get_job(self, job_id: uuid.UUID) -> Job:
        result = await self.db.execute(self._query().where(Job.id == job_id))
        job = result.scalars().first()
        if not job:
            raise JobNotFoundError(f"Job {job_id} not found")
        return job

    async def ensure_exists(self, job_id: uuid.UUID) -> None:
        """Cheap existence check used by comments, likes and applications."""
        if await self.db.get(Job, job_id) is None:
            raise JobNotFoundError(f"Job {job_id} not found")

    async def create_job(self, posted_by: User, **fields) -> Job:
        await self._check_category(fields.get("category_id"))
        job = Job(posted_by=posted_by.id, **fields)
        self.db.add(job)
        await self.db.commit()
        logger.info("jobs.created", job_id=str(job.id), posted_by=str(posted_by.id))
        return await self.get_job(job.id)

    async def update_job(self, job_id: uuid.UUID, **fields) -> Job:
        job = await self.get_job(job_id)
        if "category_id" in fields:
            await self._check_category(fields["category_id"])
        for key, value in fields.items():
            setattr(job, key, value)
        await self.db.commit()
        return await self.get_job(job_id)

    async def delete_job(self, job_id: uuid.UUID) -> None:
        job = await self.get_job(job_id)
        await self.db.delete(job)
        await self.db.commit()
        logger.info("jobs.deleted", job_id=str(job_id))

    async def _check_category(self, category_id: Optional[uuid.UUID]) -> None:
        if category_id and await self.db.get(Category, category_id) is None:
            raise CategoryMissingError(f"Category {category_id} not found")
