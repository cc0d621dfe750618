"""Comment API routes.

- POST /comments → comment on a job (authenticated)
- GET /comments/job/:id → comments on a job, newest first (public)
- DELETE /comments/:id → author or admin; 404 before 403
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.dependencies import get_current_user, raise_for_decision
from jobhub.auth.gate import AccessDeniedError
from jobhub.db.engine import get_db
from jobhub.db.models import User
from jobhub.schemas.comment import CommentCreate, CommentList, CommentRead
from jobhub.services.comment_service import CommentNotFoundError, CommentService
from jobhub.services.job_service import JobNotFoundError

router = APIRouter(prefix="/comments")


def _svc(db: AsyncSession = Depends(get_db)) -> CommentService:
    return CommentService(db)


@router.post("", response_model=CommentRead, status_code=201)
async def create_comment(
    body: CommentCreate,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    try:
        return await svc.create_comment(user, body.job_id, body.content)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")


@router.get("/job/{job_id}", response_model=CommentList)
async def list_job_comments(job_id: uuid.UUID, svc: CommentService = Depends(_svc)):
    comments = await svc.list_for_job(job_id)
    return CommentList(
        data=[CommentRead.model_validate(c) for c in comments],
        count=len(comments),
    )


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: CommentService = Depends(_svc),
):
    try:
        await svc.delete_comment(comment_id, user)
    except CommentNotFoundError:
        raise HTTPException(status_code=404, detail="Comment not found")
    except AccessDeniedError as e:
        raise_for_decision(e.decision, "Not authorized to delete this comment")
    return {"deleted": True}
