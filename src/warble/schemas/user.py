"""User-related Pydantic schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """Schema for registering a new user."""

    username: str = Field(..., min_length=3, max_length=50, description="Unique handle")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., min_length=8, max_length=100, description="Plaintext password")
    display_name: str | None = Field(None, max_length=100, description="Defaults to the username")
    bio: str | None = Field(None, max_length=160)
    location: str | None = None
    website: str | None = None
    profile_image: str | None = None
    header_image: str | None = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        """Usernames are case-insensitive and stored lowercase."""
        v = v.strip().lower()
        if len(v) < 3:
            raise ValueError("Username must be between 3 and 50 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(BaseModel):
    """Partial profile update; omitted or null fields are left untouched."""

    display_name: str | None = Field(None, min_length=1, max_length=100)
    bio: str | None = Field(None, max_length=160)
    location: str | None = None
    website: str | None = None
    profile_image: str | None = None
    header_image: str | None = None
    password: str | None = Field(None, min_length=8, max_length=100)


class UserResponse(BaseModel):
    """Schema for user information returned by the API."""

    id: uuid.UUID
    username: str
    email: str
    display_name: str | None
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    profile_image: str | None = None
    header_image: str | None = None
    verified: bool = False
    created_at: datetime
    followers_count: int = 0
    following_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class FollowResponse(BaseModel):
    """State of a follow edge after a follow request."""

    follower: str
    following: str
    created: bool = Field(..., description="False when the edge already existed")
