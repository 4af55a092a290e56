"""Pydantic schemas for blog endpoints."""
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from schemas.base import CamelModel
from schemas.user import UserResponse


def validate_tags(tags: list[str]) -> list[str]:
    """
    Reject empty or whitespace-only tags.

    Tags are stored exactly as listed, keeping order, duplicates and spacing.
    """
    if any(not tag.strip() for tag in tags):
        raise ValueError("Tags must be non-empty strings.")
    return tags


class BlogCreate(CamelModel):
    """
    Schema for creating a new blog post.

    The author is always the authenticated caller, so no author field is accepted.
    excerpt and read_time are derived from content when the post is stored.
    """

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    excerpt: str | None = None
    tags: list[str] = []
    published: bool = False
    featured_image: str | None = None
    read_time: int | None = Field(default=None, ge=1)

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: list[str] | None) -> list[str]:
        """Treat a null tag list as empty."""
        if v is None:
            return []
        return v

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: list[str]) -> list[str]:
        """Validate tags."""
        return validate_tags(v)


class BlogUpdate(CamelModel):
    """
    Schema for a sparse update of an existing blog post.

    Only fields present in the request body are applied.
    """

    title: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    excerpt: str | None = None
    tags: list[str] | None = None
    published: bool | None = None
    featured_image: str | None = None
    read_time: int | None = Field(default=None, ge=1)

    @field_validator("title", "content", "tags", "published", "read_time")
    @classmethod
    def reject_null(cls, v: object) -> object:
        """These columns are not nullable, so an explicit null is rejected."""
        if v is None:
            raise ValueError("Field may not be null.")
        return v

    @field_validator("tags")
    @classmethod
    def check_tags(cls, v: list[str]) -> list[str]:
        """Validate tags."""
        return validate_tags(v)


class BlogResponse(CamelModel):
    """Schema for a stored blog post, returned by mutation endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    excerpt: str | None
    tags: list[str]
    author_id: str
    published: bool
    featured_image: str | None
    read_time: int
    likes: int
    created_at: datetime
    updated_at: datetime

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v: list[str] | None) -> list[str]:
        """Rows written before tags were required may hold null."""
        if v is None:
            return []
        return v


class BlogWithAuthorResponse(BlogResponse):
    """
    Schema for blog reads joined with the author's profile.

    Returned by the list endpoints and GET /blogs/{id}.
    """

    author: UserResponse
