"""Follow graph commands and aggregates."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warble.core.exceptions import InvalidRequestError, NotFoundError
from warble.models.user import User
from warble.repositories.follow_repo import FollowRepository
from warble.repositories.pagination import Page, PageRequest
from warble.repositories.user_repo import UserRepository

__all__ = ["SocialGraphService"]

logger = logging.getLogger(__name__)


class SocialGraphService:
    """Answers who-follows-whom and changes it."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.follows = FollowRepository(db)

    def count_followers(self, user_id: uuid.UUID) -> int:
        return self.follows.count_followers(user_id)

    def count_following(self, user_id: uuid.UUID) -> int:
        return self.follows.count_following(user_id)

    def counts_for(self, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, tuple[int, int]]:
        """Return ``(followers, following)`` for many users at once."""
        return self.follows.counts_for(user_ids)

    def is_following(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> bool:
        return self.follows.get(follower_id, following_id) is not None

    def _require_user(self, user_id: uuid.UUID) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", "id", user_id)
        return user

    def follow(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> bool:
        """Create the edge ``follower -> following``.

        Following twice is a no-op.

        Returns:
            True if a new edge was stored, False if it already existed.

        Raises:
            InvalidRequestError: If a user tries to follow themselves.
            NotFoundError: If either user does not exist.
        """
        if follower_id == following_id:
            raise InvalidRequestError("Users cannot follow themselves")
        self._require_user(follower_id)
        self._require_user(following_id)

        if self.is_following(follower_id, following_id):
            return False
        try:
            self.follows.add(follower_id, following_id)
            self.db.commit()
        except IntegrityError:
            # Lost a race against an identical follow request.
            self.db.rollback()
            if self.is_following(follower_id, following_id):
                return False
            raise
        logger.info("User %s followed %s", follower_id, following_id)
        return True

    def unfollow(self, follower_id: uuid.UUID, following_id: uuid.UUID) -> None:
        """Remove the edge ``follower -> following``; ``NotFoundError`` if absent."""
        edge = self.follows.get(follower_id, following_id)
        if edge is None:
            raise NotFoundError("Follow", "edge", f"{follower_id} -> {following_id}")
        self.follows.remove(edge)
        self.db.commit()
        logger.info("User %s unfollowed %s", follower_id, following_id)

    def list_followers(self, user_id: uuid.UUID, request: PageRequest) -> Page[User]:
        return self.follows.list_followers(user_id, request)

    def list_following(self, user_id: uuid.UUID, request: PageRequest) -> Page[User]:
        return self.follows.list_following(user_id, request)
