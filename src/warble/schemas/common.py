"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """One page of a list endpoint plus the metadata pagers need."""

    items: list[T]
    page: int = Field(..., ge=0, description="Zero-based page index.")
    size: int = Field(..., ge=1, description="Requested page size.")
    total_elements: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_previous: bool


class AvailabilityResponse(BaseModel):
    """Result of a username or email availability check."""

    available: bool


class ErrorResponse(BaseModel):
    """Uniform error body returned for every failed request."""

    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    details: list[str] = Field(default_factory=list)
