"""Offset pagination shared by every list query."""
from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from warble.core.exceptions import InvalidRequestError

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["Page", "PageRequest", "paginate"]


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index plus a positive page size."""

    page: int = 0
    size: int = 20

    def __post_init__(self) -> None:
        if self.page < 0:
            raise InvalidRequestError("Page index must not be negative")
        if self.size <= 0:
            raise InvalidRequestError("Page size must be greater than zero")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of an ordered result set with enough metadata for pagers."""

    items: list[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.total_elements else 0

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * self.size < self.total_elements

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def is_first(self) -> bool:
        return not self.has_previous

    @property
    def is_last(self) -> bool:
        return not self.has_next

    def map(self, fn: Callable[[T], U]) -> Page[U]:
        """Return a page with ``fn`` applied to every item."""
        return Page(
            items=[fn(item) for item in self.items],
            page=self.page,
            size=self.size,
            total_elements=self.total_elements,
        )


def paginate(session: Session, stmt: Select, request: PageRequest) -> Page:
    """Execute an ordered ``stmt`` for one page and count the full result.

    ``stmt`` must already carry its ORDER BY; the count runs over the same
    statement with ordering stripped.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = session.execute(count_stmt).scalar_one()
    rows: Sequence = session.execute(
        stmt.offset(request.offset).limit(request.size)
    ).scalars().all()
    return Page(
        items=list(rows),
        page=request.page,
        size=request.size,
        total_elements=int(total),
    )
