"""Pydantic schemas for job applications."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from jobhub.db.models import APPLICATION_STATUSES
from jobhub.schemas.job import JobSummary
from jobhub.schemas.user import UserSummary

STATUS_PATTERN = "^(" + "|".join(APPLICATION_STATUSES) + ")$"


class ApplicationCreate(BaseModel):
    job_id: uuid.UUID = Field(validation_alias="jobId")
    cover_letter: Optional[str] = Field(None, max_length=5000)
    resume_url: Optional[str] = None

    model_config = {"populate_by_name": True}


class ApplicationStatusUpdate(BaseModel):
    status: str = Field(..., pattern=STATUS_PATTERN)


class ApplicationRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    job_id: uuid.UUID
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ApplicationDetail(ApplicationRead):
    """Application with the job (for applicants) and applicant (for admins)."""

    job: Optional[JobSummary] = None
    user: Optional[UserSummary] = None
