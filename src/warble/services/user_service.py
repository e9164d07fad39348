"""User directory: lookup, availability checks and account lifecycle."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warble.core.exceptions import ConflictError, NotFoundError
from warble.core.security import hash_password
from warble.db.time import utcnow
from warble.models.user import User
from warble.repositories.follow_repo import FollowRepository
from warble.repositories.pagination import Page, PageRequest
from warble.repositories.post_repo import PostRepository
from warble.repositories.user_repo import UserRepository, normalize_identifier
from warble.schemas.user import UserCreate, UserUpdate

__all__ = ["UserService"]

logger = logging.getLogger(__name__)


class UserService:
    """Service handling user accounts.

    Usernames and emails are compared and stored lowercase. The availability
    checks give friendly errors; the unique constraints on ``app_user`` are
    what actually stop two concurrent registrations of the same name.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.follows = FollowRepository(db)
        self.posts = PostRepository(db)

    def find_by_username(self, username: str) -> User | None:
        """Return the user with ``username`` (any case) or ``None``."""
        return self.users.get_by_username(username)

    def get_by_username(self, username: str) -> User:
        """Return the user with ``username`` or raise ``NotFoundError``."""
        user = self.users.get_by_username(username)
        if user is None:
            raise NotFoundError("User", "username", username)
        return user

    def get_by_id(self, user_id: uuid.UUID) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User", "id", user_id)
        return user

    def is_username_available(self, username: str) -> bool:
        return not self.users.username_exists(username)

    def is_email_available(self, email: str) -> bool:
        return not self.users.email_exists(email)

    def create_user(self, data: UserCreate) -> User:
        """Register a new account.

        Args:
            data: Validated registration payload.

        Returns:
            The persisted user.

        Raises:
            ConflictError: If the username or email is already registered,
                including when a concurrent request claimed it first.
        """
        username = normalize_identifier(data.username)
        email = normalize_identifier(data.email)
        if not self.is_username_available(username):
            raise ConflictError("Username is already taken")
        if not self.is_email_available(email):
            raise ConflictError("Email is already registered")

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(data.password),
            display_name=data.display_name or username,
            bio=data.bio,
            location=data.location,
            website=data.website,
            profile_image=data.profile_image,
            header_image=data.header_image,
        )
        try:
            self.users.add(user)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Concurrent registration rejected for %s", username)
            raise ConflictError("Username or email is already taken") from exc

        self.db.refresh(user)
        logger.info("Created user %s", user.username)
        return user

    def update_user(self, user_id: uuid.UUID, patch: UserUpdate) -> User:
        """Apply a partial update; fields missing or null in ``patch`` are kept."""
        user = self.get_by_id(user_id)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        password = changes.pop("password", None)

        for key, value in changes.items():
            setattr(user, key, value)
        if password:
            user.password_hash = hash_password(password)
        if changes or password:
            user.updated_at = utcnow()

        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user_id: uuid.UUID) -> None:
        """Delete an account together with everything it owns.

        The user's likes and follow edges go first (decrementing like counters
        on surviving posts), then the user's posts with their reply/repost
        subtrees, then the account row. Everything commits at once.
        """
        user = self.get_by_id(user_id)
        username = user.username

        self.posts.remove_likes_by_user(user.id)
        self.follows.remove_all_for(user.id)
        doomed = self.posts.collect_subtree(self.posts.ids_by_author(user.id))
        self.posts.delete_many(doomed)
        self.users.delete(user)
        self.db.commit()
        logger.info("Deleted user %s and %d posts", username, len(doomed))

    def search_users(self, query: str) -> list[User]:
        return self.users.search(query)

    def list_users(self, request: PageRequest) -> Page[User]:
        return self.users.list_all(request)
