"""Data access helpers for working with users."""
from __future__ import annotations

import uuid

from sqlalchemy import exists, or_, select
from sqlalchemy.orm import Session

from warble.models.user import User
from warble.repositories.pagination import Page, PageRequest, paginate

__all__ = ["UserRepository", "normalize_identifier", "like_pattern"]


def normalize_identifier(value: str) -> str:
    """Return the canonical stored form of a username or email."""
    return value.strip().lower()


def like_pattern(query: str) -> str:
    """Build a ``%query%`` pattern with LIKE wildcards in ``query`` escaped."""
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: uuid.UUID) -> User | None:
        """Return a user by identifier."""
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        """Return a user by username, ignoring case."""
        stmt = select(User).where(User.username == normalize_identifier(username))
        return self.session.execute(stmt).scalars().first()

    def username_exists(self, username: str) -> bool:
        stmt = select(exists().where(User.username == normalize_identifier(username)))
        return bool(self.session.execute(stmt).scalar())

    def email_exists(self, email: str) -> bool:
        stmt = select(exists().where(User.email == normalize_identifier(email)))
        return bool(self.session.execute(stmt).scalar())

    def add(self, user: User) -> User:
        """Stage a new user and flush so constraint violations surface here."""
        self.session.add(user)
        self.session.flush()
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.flush()

    def search(self, query: str) -> list[User]:
        """Return users whose username or display name contains ``query``.

        Ordered by username so repeated searches over the same data are stable.
        """
        pattern = like_pattern(query.strip())
        stmt = (
            select(User)
            .where(
                or_(
                    User.username.ilike(pattern, escape="\\"),
                    User.display_name.ilike(pattern, escape="\\"),
                )
            )
            .order_by(User.username.asc())
        )
        return list(self.session.execute(stmt).scalars())

    def list_all(self, request: PageRequest) -> Page[User]:
        stmt = select(User).order_by(User.created_at.asc(), User.id.asc())
        return paginate(self.session, stmt, request)
