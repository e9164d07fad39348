# src/warble/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import AvailabilityResponse, ErrorResponse, PageResponse
from .post import LikeResponse, PostCreate, PostResponse, PostUpdate
from .user import FollowResponse, UserCreate, UserResponse, UserUpdate

__all__ = [
    "AvailabilityResponse", "ErrorResponse", "PageResponse",
    "LikeResponse", "PostCreate", "PostResponse", "PostUpdate",
    "FollowResponse", "UserCreate", "UserResponse", "UserUpdate",
]
