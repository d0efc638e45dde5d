from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.app.domain.models import Profile


class ProfileResponse(BaseModel):
    id: str
    username: str
    fullName: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=2, max_length=40)
    fullName: Optional[str] = Field(default=None, min_length=2, max_length=120)


def profile_to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        username=profile.username,
        fullName=profile.full_name,
        createdAt=profile.created_at,
        updatedAt=profile.updated_at,
    )
