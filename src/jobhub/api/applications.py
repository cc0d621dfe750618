"""Application API routes.

- POST /applications → apply to a job (authenticated)
- GET /applications/me → my applications, with job summaries
- GET /applications/job/:id → applicants for a job (admin)
- PUT /applications/:id/status → review an application (admin)
- DELETE /applications/:id → withdraw (owner or admin)
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from jobhub.auth.dependencies import get_current_user, raise_for_decision, require_admin
from jobhub.auth.gate import AccessDeniedError
from jobhub.db.engine import get_db
from jobhub.db.models import User
from jobhub.schemas.application import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationRead,
    ApplicationStatusUpdate,
)
from jobhub.services.application_service import (
    ApplicationExistsError,
    ApplicationNotFoundError,
    ApplicationService,
)
from jobhub.services.job_service import JobNotFoundError

router = APIRouter(prefix="/applications")


def _svc(db: AsyncSession = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


@router.post("", response_model=ApplicationRead, status_code=201)
async def apply_to_job(
    body: ApplicationCreate,
    user: User = Depends(get_current_user),
    svc: ApplicationService = Depends(_svc),
):
    try:
        return await svc.apply(
            user,
            body.job_id,
            cover_letter=body.cover_letter,
            resume_url=body.resume_url,
        )
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except ApplicationExistsError:
        raise HTTPException(status_code=409, detail="Already applied to this job")


@router.get("/me", response_model=list[ApplicationDetail])
async def my_applications(
    user: User = Depends(get_current_user),
    svc: ApplicationService = Depends(_svc),
):
    return await svc.list_for_user(user.id)


@router.get(
    "/job/{job_id}",
    response_model=list[ApplicationDetail],
    dependencies=[Depends(require_admin)],
)
async def job_applications(job_id: uuid.UUID, svc: ApplicationService = Depends(_svc)):
    try:
        return await svc.list_for_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")


@router.put(
    "/{application_id}/status",
    response_model=ApplicationRead,
    dependencies=[Depends(require_admin)],
)
async def update_application_status(
    application_id: uuid.UUID,
    body: ApplicationStatusUpdate,
    svc: ApplicationService = Depends(_svc),
):
    try:
        return await svc.update_status(application_id, body.status)
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")


@router.delete("/{application_id}")
async def withdraw_application(
    application_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: ApplicationService = Depends(_svc),
):
    try:
        await svc.withdraw(application_id, user)
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")
    except AccessDeniedError as e:
        raise_for_decision(e.decision, "Not authorized to withdraw this application")
    return {"deleted": True}
