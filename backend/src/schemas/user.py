"""Pydantic schemas for user endpoints."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from schemas.base import CamelModel


class UserUpsert(BaseModel):
    """Identity-provider sync payload; only supplied fields are written."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    bio: str | None = None


class UserProfileUpdate(CamelModel):
    """Schema for editing one's own profile. Explicit null clears a field."""

    bio: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class UserResponse(CamelModel):
    """Schema for user responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    bio: str | None
    created_at: datetime
    updated_at: datetime
