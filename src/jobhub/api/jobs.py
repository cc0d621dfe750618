"""Job API routes.

Learn: Browsing is public — anyone can list, filter and open jobs.
Posting, editing and removing jobs go through require_admin, which also
promotes allow-listed users whose stored role is still "user".

- GET /jobs → list (filters: category, search, location, job_type, urgent)
- GET /jobs/urgent → urgent jobs only
- GET /jobs/category/:id → jobs in a category
- GET /jobs/:id → one job
- POST /jobs, PUT /jobs/:id, DELETE /jobs/:id → admin
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.dependencies import require_admin
from jobhub.db.engine import get_db
from jobhub.db.models import User
from jobhub.schemas.job import JobCreate, JobRead, JobUpdate
from jobhub.services.job_service import (
    CategoryMissingError,
    JobNotFoundError,
    JobService,
)

router = APIRouter(prefix="/jobs")


def _svc(db: AsyncSession = Depends(get_db)) -> JobService:
    return JobService(db)


@router.get("", response_model=list[JobRead])
async def list_jobs(
    category: Optional[uuid.UUID] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    location: Optional[str] = Query(None, max_length=200),
    job_type: Optional[str] = Query(None),
    urgent: Optional[bool] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    svc: JobService = Depends(_svc),
):
    return await svc.list_jobs(
        category_id=category,
        search=search,
        location=location,
        job_type=job_type,
        is_urgent=urgent,
        limit=limit,
        offset=offset,
    )


@router.get("/urgent", response_model=list[JobRead])
async def list_urgent_jobs(
    limit: int = Query(20, ge=1, le=100),
    svc: JobService = Depends(_svc),
):
    return await svc.list_urgent(limit=limit)


@router.get("/category/{category_id}", response_model=list[JobRead])
async def list_jobs_by_category(
    category_id: uuid.UUID, svc: JobService = Depends(_svc)
):
    return await svc.list_by_category(category_id)


@router.get("/{job_id}", response_model=JobRead)
async def get_job(job_id: uuid.UUID, svc: JobService = Depends(_svc)):
    try:
        return await svc.get_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")


@router.post("", response_model=JobRead, status_code=201)
async def create_job(
    body: JobCreate,
    admin: User = Depends(require_admin),
    svc: JobService = Depends(_svc),
):
    try:
        return await svc.create_job(posted_by=admin, **body.model_dump())
    except CategoryMissingError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/{job_id}", response_model=JobRead, dependencies=[Depends(require_admin)])
async def update_job(
    job_id: uuid.UUID,
    body: JobUpdate,
    svc: JobService = Depends(_svc),
):
    try:
        return await svc.update_job(job_id, **body.model_dump(exclude_unset=True))
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except CategoryMissingError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.delete("/{job_id}", dependencies=[Depends(require_admin)])
async def delete_job(job_id: uuid.UUID, svc: JobService = Depends(_svc)):
    try:
        await svc.delete_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    return {"deleted": True}
