"""Pydantic schemas for users.

Learn: User payloads keep the frontend's field names — clerkId and
profileImage — via serialization aliases, while the Python side stays
snake_case.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserSummary(BaseModel):
    """Just enough to render an avatar + name next to something."""

    id: uuid.UUID
    name: str
    profile_image: Optional[str] = Field(None, serialization_alias="profileImage")

    model_config = {"from_attributes": True}


class UserRead(BaseModel):
    id: uuid.UUID
    external_id: str = Field(serialization_alias="clerkId")
    name: str
    email: Optional[str] = None
    profile_image: Optional[str] = Field(None, serialization_alias="profileImage")
    role: str
    created_at: datetime = Field(serialization_alias="createdAt")

    model_config = {"from_attributes": True}


class AdminCheck(BaseModel):
    is_admin: bool = Field(serialization_alias="isAdmin")
    user: UserRead
