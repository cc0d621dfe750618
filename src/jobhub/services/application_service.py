"""Application service — users apply to jobs, admins review.

Learn: One application per (user, job), enforced by a unique constraint.
Withdrawing follows the same gating order as comment deletion: a missing
application is a 404 before ownership is even looked at.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from jobhub.auth.gate import FORBIDDEN, AccessDeniedError, AuthDecision, is_owner_or_admin
from jobhub.db.models import Application, User
from jobhub.services.job_service import JobService

logger = structlog.get_logger()


class ApplicationNotFoundError(Exception):
    """Raised when an application is not found."""


class ApplicationExistsError(Exception):
    """Raised when the user already applied to the job."""


class ApplicationService:
    """Business logic for job applications."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.jobs = JobService(db)

    def _query(self):
        return select(Application).options(
            selectinload(Application.job),
            selectinload(Application.user),
        )

    async def apply(
        self,
        user: User,
        job_id: uuid.UUID,
        cover_letter: Optional[str] = None,
        resume_url: Optional[str] = None,
    ) -> Application:
        user_id = user.id
        await self.jobs.ensure_exists(job_id)

        application = Application(
            user_id=user_id,
            job_id=job_id,
            cover_letter=cover_letter,
            resume_url=resume_url,
        )
        self.db.add(application)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ApplicationExistsError(
                f"User {user_id} already applied to job {job_id}"
            )

        logger.info(
            "applications.created",
            application_id=str(application.id),
            job_id=str(job_id),
            user_id=str(user_id),
        )
        return application

    async def list_for_user(self, user_id: uuid.UUID) -> list[Application]:
        result = await self.db.execute(
            self._query()
            .where(Application.user_id == user_id)
            .order_by(Application.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_job(self, job_id: uuid.UUID) -> list[Application]:
        await self.jobs.ensure_exists(job_id)
        result = await self.db.execute(
            self._query()
            .where(Application.job_id == job_id)
            .order_by(Application.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_application(self, application_id: uuid.UUID) -> Application:
        application = await self.db.get(Application, application_id)
        if not application:
            raise ApplicationNotFoundError(f"Application {application_id} not found")
        return application

    async def update_status(
        self, application_id: uuid.UUID, status: str
    ) -> Application:
        application = await self.get_application(application_id)
        application.status = status
        await self.db.commit()
        logger.info(
            "applications.status_changed",
            application_id=str(application_id),
            status=status,
        )
        return application

    async def withdraw(self, application_id: uuid.UUID, user: User) -> None:
        """Delete an application. Owner or admin only; 404 checked first."""
        application = await self.get_application(application_id)
        if not is_owner_or_admin(user, application.user_id):
            raise AccessDeniedError(AuthDecision.deny(FORBIDDEN, user))

        await self.db.delete(application)
        await self.db.commit()
