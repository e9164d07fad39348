"""Domain errors raised by the Warble core.

The HTTP layer translates these into status codes; services never raise
``HTTPException`` themselves.
"""

from __future__ import annotations

from typing import Any


class WarbleError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(WarbleError):
    """Raised when a user, post or follow edge does not exist."""

    def __init__(self, resource: str, field: str, value: Any) -> None:
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(f"{resource} not found with {field} : '{value}'")


class ConflictError(WarbleError):
    """Raised when a write would violate a uniqueness invariant."""


class InvalidRequestError(WarbleError):
    """Raised when a request breaks a business rule field validation cannot see."""
