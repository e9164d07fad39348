"""Post-related Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PostCreate(BaseModel):
    """Schema for creating a post, reply or repost."""

    content: str = Field(..., min_length=1, max_length=280, description="Post text")
    media: list[str] = Field(default_factory=list, description="Media URLs attached to the post")

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be blank")
        return v


class PostUpdate(BaseModel):
    """Only the content of a post can change after creation."""

    content: str = Field(..., min_length=1, max_length=280)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be blank")
        return v


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: uuid.UUID
    user_id: uuid.UUID
    username: str
    user_display_name: str
    user_profile_image: str | None = None
    content: str
    media: list[str] = Field(default_factory=list)
    is_reply: bool = False
    parent_id: uuid.UUID | None = None
    is_repost: bool = False
    original_post_id: uuid.UUID | None = None
    hashtags: list[str] = Field(default_factory=list)
    like_count: int = 0
    reply_count: int = 0
    repost_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LikeResponse(BaseModel):
    """Result of a like request."""

    post_id: uuid.UUID
    username: str
    liked: bool = True
    created: bool = Field(..., description="False when the like already existed")
    like_count: int
