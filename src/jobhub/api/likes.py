"""Like API routes.

- POST /likes/toggle → like/unlike a job (authenticated)
- GET /likes/job/:id → who liked a job (public)
- GET /likes/job/:id/check → did I like this job? (authenticated)
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.dependencies import get_current_user
from jobhub.db.engine import get_db
from jobhub.db.models import User
from jobhub.schemas.like import LikeCheck, LikeList, LikeRead, LikeToggle, LikeToggleResult
from jobhub.services.job_service import JobNotFoundError
from jobhub.services.like_service import LikeService

router = APIRouter(prefix="/likes")


def _svc(db: AsyncSession = Depends(get_db)) -> LikeService:
    return LikeService(db)


@router.post("/toggle", response_model=LikeToggleResult)
async def toggle_like(
    body: LikeToggle,
    user: User = Depends(get_current_user),
    svc: LikeService = Depends(_svc),
):
    try:
        return await svc.toggle_like(user, body.job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")


@router.get("/job/{job_id}", response_model=LikeList)
async def list_job_likes(job_id: uuid.UUID, svc: LikeService = Depends(_svc)):
    likes = await svc.list_for_job(job_id)
    return LikeList(
        data=[LikeRead.model_validate(like) for like in likes],
        count=len(likes),
    )


@router.get("/job/{job_id}/check", response_model=LikeCheck)
async def check_like(
    job_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: LikeService = Depends(_svc),
):
    return LikeCheck(liked=await svc.has_liked(user.id, job_id))
