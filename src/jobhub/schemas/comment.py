"""Pydantic schemas for comments."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)
    job_id: uuid.UUID = Field(validation_alias="jobId")

    model_config = {"populate_by_name": True}


class CommentRead(BaseModel):
    id: uuid.UUID
    content: str
    author_id: uuid.UUID
    job_id: uuid.UUID
    author_name: str
    author_avatar: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CommentList(BaseModel):
    data: list[CommentRead]
    count: int
