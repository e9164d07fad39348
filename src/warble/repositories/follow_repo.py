"""Data access helpers for the follow graph."""
from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.orm import Session

from warble.models.follow import Follow
from warble.models.user import User
from warble.repositories.pagination import Page, PageRequest, paginate

__all__ = ["FollowRepository"]


class FollowRepository:
    """Reads and writes ``Follow`` edges.

    Both count queries are answered from an index: the primary key leads with
    ``follower_id`` and ``ix_follow_following_id`` covers the reverse side.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> Follow | None:
        return self.session.get(Follow, (follower_id, following_id))

    def add(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> Follow:
        edge = Follow(follower_id=follower_id, following_id=following_id)
        self.session.add(edge)
        self.session.flush()
        return edge

    def remove(self, edge: Follow) -> None:
        self.session.delete(edge)
        self.session.flush()

    def remove_all_for(self, user_id: uuid.UUID) -> int:
        """Delete every edge touching ``user_id`` in either direction."""
        result = self.session.execute(
            delete(Follow).where(
                or_(Follow.follower_id == user_id, Follow.following_id == user_id)
            )
        )
        return result.rowcount or 0

    def count_followers(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
        return int(self.session.execute(stmt).scalar_one())

    def count_following(self, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
        return int(self.session.execute(stmt).scalar_one())

    def counts_for(self, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, tuple[int, int]]:
        """Return ``{user_id: (followers, following)}`` using two grouped queries."""
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        followers = dict(
            self.session.execute(
                select(Follow.following_id, func.count())
                .where(Follow.following_id.in_(ids))
                .group_by(Follow.following_id)
            ).tuples()
        )
        following = dict(
            self.session.execute(
                select(Follow.follower_id, func.count())
                .where(Follow.follower_id.in_(ids))
                .group_by(Follow.follower_id)
            ).tuples()
        )
        return {
            user_id: (int(followers.get(user_id, 0)), int(following.get(user_id, 0)))
            for user_id in ids
        }

    def following_ids_select(self, user_id: uuid.UUID) -> Select:
        """Return a SELECT of the ids ``user_id`` follows, for use inside IN (...)."""
        return select(Follow.following_id).where(Follow.follower_id == user_id)

    def list_followers(self, user_id: uuid.UUID, request: PageRequest) -> Page[User]:
        stmt = (
            select(User)
            .join(Follow, Follow.follower_id == User.id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc(), User.id.desc())
        )
        return paginate(self.session, stmt, request)

    def list_following(self, user_id: uuid.UUID, request: PageRequest) -> Page[User]:
        stmt = (
            select(User)
            .join(Follow, Follow.following_id == User.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), User.id.desc())
        )
        return paginate(self.session, stmt, request)
