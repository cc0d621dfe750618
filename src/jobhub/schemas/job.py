"""Pydantic schemas for jobs.

Learn: JobRead nests the job's category (id + name). The service loads it
with an explicit selectinload join — reads never trigger lazy loads.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from jobhub.schemas.category import CategorySummary

JOB_TYPE_PATTERN = r"^(full-time|part-time|contract|internship|remote)$"


class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: str = Field(default="", max_length=200)
    description: str = Field(default="")
    salary: Optional[str] = Field(None, max_length=100)
    job_type: str = Field(default="full-time", pattern=JOB_TYPE_PATTERN)
    is_urgent: bool = False
    apply_url: Optional[str] = None
    category_id: Optional[uuid.UUID] = None


class JobUpdate(BaseModel):
    """Partial update — only fields that are sent get changed."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    salary: Optional[str] = Field(None, max_length=100)
    job_type: Optional[str] = Field(None, pattern=JOB_TYPE_PATTERN)
    is_urgent: Optional[bool] = None
    apply_url: Optional[str] = None
    category_id: Optional[uuid.UUID] = None


class JobRead(BaseModel):
    id: uuid.UUID
    title: str
    company: str
    location: str
    description: str
    salary: Optional[str] = None
    job_type: str
    is_urgent: bool
    apply_url: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    category: Optional[CategorySummary] = None
    posted_by: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class JobSummary(BaseModel):
    id: uuid.UUID
    title: str
    company: str

    model_config = {"from_attributes": True}
