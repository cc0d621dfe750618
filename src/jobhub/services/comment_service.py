"""Comment service — comments on jobs.

Learn: The author's name and avatar are copied onto the comment at
creation time, so listing comments is a single-table read.

Deletion order matters: the comment must exist (else 404) before we ask
whether the caller may delete it (else 403). Authors can delete their own
comments; admins can delete anyone's.

After each commit the job's real-time channel is notified.
"""

import uuid

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.gate import NOT_FOUND, AccessDeniedError, comment_delete_decision
from jobhub.db.models import Comment, User
from jobhub.events.types import COMMENT_ADDED, COMMENT_DELETED
from jobhub.realtime.pubsub import publish_job_event
from jobhub.services.job_service import JobService

logger = structlog.get_logger()


class CommentNotFoundError(Exception):
    """Raised when a comment is not found."""


def _payload(comment: Comment) -> dict:
    return {
        "id": str(comment.id),
        "content": comment.content,
        "author_id": str(comment.author_id),
        "author_name": comment.author_name,
        "author_avatar": comment.author_avatar,
        "created_at": comment.created_at.isoformat(),
    }


class CommentService:
    """Business logic for job comments."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.jobs = JobService(db)

    async def create_comment(
        self, author: User, job_id: uuid.UUID, content: str
    ) -> Comment:
        await self.jobs.ensure_exists(job_id)

        comment = Comment(
            content=content,
            author_id=author.id,
            job_id=job_id,
            author_name=author.name,
            author_avatar=author.profile_image,
        )
        self.db.add(comment)
        await self.db.commit()

        logger.info(
            "comments.created",
            comment_id=str(comment.id),
            job_id=str(job_id),
            author_id=str(author.id),
        )
        await publish_job_event(job_id, COMMENT_ADDED, {"comment": _payload(comment)})
        return comment

    async def list_for_job(self, job_id: uuid.UUID) -> list[Comment]:
        """Comments on a job, newest first."""
        result = await self.db.execute(
            select(Comment)
            .where(Comment.job_id == job_id)
            .order_by(Comment.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_for_job(self, job_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Comment).where(Comment.job_id == job_id)
        )
        return result.scalar_one()

    async def delete_comment(self, comment_id: uuid.UUID, user: User) -> None:
        comment = await self.db.get(Comment, comment_id)
        decision = comment_delete_decision(user, comment)
        if decision.reason == NOT_FOUND:
            raise CommentNotFoundError(f"Comment {comment_id} not found")

        if not decision.allowed:
            logger.info(
                "comments.delete_denied",
                comment_id=str(comment_id),
                user_id=str(user.id),
            )
            raise AccessDeniedError(decision)

        job_id = comment.job_id
        await self.db.delete(comment)
        await self.db.commit()

        logger.info("comments.deleted", comment_id=str(comment_id), user_id=str(user.id))
        await publish_job_event(job_id, COMMENT_DELETED, {"commentId": str(comment_id)})
