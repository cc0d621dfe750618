"""Pydantic schemas for likes."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from jobhub.schemas.user import UserSummary


class LikeToggle(BaseModel):
    job_id: uuid.UUID = Field(validation_alias="jobId")

    model_config = {"populate_by_name": True}


class LikeToggleResult(BaseModel):
    liked: bool
    count: int


class LikeRead(BaseModel):
    id: uuid.UUID
    job_id: uuid.UUID
    user: UserSummary
    created_at: datetime

    model_config = {"from_attributes": True}


class LikeList(BaseModel):
    data: list[LikeRead]
    count: int


class LikeCheck(BaseModel):
    liked: bool
