"""Service-level logic for posts, replies, reposts, likes and feeds."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warble.core.exceptions import ConflictError, NotFoundError
from warble.core.settings import Settings, settings as default_settings
from warble.db.time import utcnow
from warble.models.post import Post
from warble.models.user import User
from warble.repositories.follow_repo import FollowRepository
from warble.repositories.hashtag_repo import (
    HashtagRepository,
    extract_hashtags,
    normalize_hashtag,
)
from warble.repositories.pagination import Page, PageRequest
from warble.repositories.post_repo import PostRepository

__all__ = ["PostService"]

logger = logging.getLogger(__name__)


class PostService:
    """Post store and query engine.

    Every write that creates or removes a reply, repost or like changes the
    matching counter on the referenced post inside the same transaction.
    """

    def __init__(self, db: Session, config: Settings | None = None) -> None:
        self.db = db
        self.config = config or default_settings
        self.posts = PostRepository(db)
        self.hashtags = HashtagRepository(db)
        self.follows = FollowRepository(db)

    # -- lookups -----------------------------------------------------------

    def find_by_id(self, post_id: uuid.UUID) -> Post | None:
        return self.posts.get_by_id(post_id)

    def get_post(self, post_id: uuid.UUID) -> Post:
        """Return the post or raise ``NotFoundError``."""
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError("Post", "id", post_id)
        return post

    # -- commands ----------------------------------------------------------

    def _store(
        self,
        author: User,
        content: str,
        media: Sequence[str] | None,
        *,
        parent: Post | None = None,
        original: Post | None = None,
    ) -> Post:
        try:
            tags = self.hashtags.get_or_create_many(extract_hashtags(content))
            post = Post(
                user_id=author.id,
                content=content,
                media=list(media or []),
                is_reply=parent is not None,
                parent_id=parent.id if parent is not None else None,
                is_repost=original is not None,
                original_post_id=original.id if original is not None else None,
                hashtags=tags,
            )
            self.posts.add(post)
            if parent is not None:
                self.posts.adjust_counter(parent, "reply_count", 1)
            if original is not None:
                self.posts.adjust_counter(original, "repost_count", 1)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.warning("Post by %s rejected by a constraint: %s", author.username, exc.orig)
            raise ConflictError("Post conflicts with a concurrent write; try again") from exc

        self.db.refresh(post)
        return post

    def create_post(self, author: User, content: str, media: Sequence[str] | None = None) -> Post:
        """Create a top-level post and link the hashtags found in ``content``."""
        post = self._store(author, content, media)
        logger.info("User %s created post %s", author.username, post.id)
        return post

    def create_reply(
        self,
        parent_id: uuid.UUID,
        author: User,
        content: str,
        media: Sequence[str] | None = None,
    ) -> Post:
        """Create a reply and increment the parent's ``reply_count``.

        Raises:
            NotFoundError: If the parent post does not exist.
        """
        parent = self.get_post(parent_id)
        post = self._store(author, content, media, parent=parent)
        logger.info("User %s replied to %s with %s", author.username, parent_id, post.id)
        return post

    def create_repost(
        self,
        original_id: uuid.UUID,
        author: User,
        content: str,
        media: Sequence[str] | None = None,
    ) -> Post:
        """Create a repost and increment the original's ``repost_count``.

        Raises:
            NotFoundError: If the original post does not exist.
        """
        original = self.get_post(original_id)
        post = self._store(author, content, media, original=original)
        logger.info("User %s reposted %s as %s", author.username, original_id, post.id)
        return post

    def update_post(self, post_id: uuid.UUID, content: str) -> Post:
        """Replace a post's content and re-derive its hashtags."""
        post = self.get_post(post_id)
        try:
            post.hashtags = self.hashtags.get_or_create_many(extract_hashtags(content))
            post.content = content
            post.updated_at = utcnow()
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Post conflicts with a concurrent write; try again") from exc
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: uuid.UUID) -> None:
        """Delete a post with its replies and reposts.

        Counters of surviving parents/originals are decremented in the same
        transaction.
        """
        post = self.get_post(post_id)
        doomed = self.posts.collect_subtree([post.id])
        self.posts.delete_many(doomed)
        self.db.commit()
        logger.info("Deleted post %s (%d rows including descendants)", post_id, len(doomed))

    def like_post(self, post_id: uuid.UUID, user: User) -> tuple[Post, bool]:
        """Record ``user``'s like on a post; liking twice is a no-op.

        Returns:
            The refreshed post and whether a new like was stored.
        """
        post = self.get_post(post_id)
        if self.posts.get_like(post.id, user.id) is not None:
            return post, False
        try:
            self.posts.add_like(post, user.id)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self.posts.get_like(post_id, user.id) is not None:
                return self.get_post(post_id), False
            raise
        self.db.refresh(post)
        return post, True

    def unlike_post(self, post_id: uuid.UUID, user: User) -> Post:
        """Remove ``user``'s like; ``NotFoundError`` if there was none."""
        post = self.get_post(post_id)
        like = self.posts.get_like(post.id, user.id)
        if like is None:
            raise NotFoundError("Like", "post_id", post_id)
        self.posts.remove_like(post, like)
        self.db.commit()
        self.db.refresh(post)
        return post

    # -- feeds and queries -------------------------------------------------

    def get_user_timeline(self, user_id: uuid.UUID, request: PageRequest) -> Page[Post]:
        return self.posts.user_timeline(user_id, request)

    def get_home_timeline(self, user_id: uuid.UUID, request: PageRequest) -> Page[Post]:
        """Posts by the accounts ``user_id`` follows, newest first.

        The user's own posts only appear when ``HOME_TIMELINE_INCLUDE_SELF``
        is enabled.
        """
        return self.posts.home_timeline(
            user_id,
            self.follows.following_ids_select(user_id),
            request,
            include_self=self.config.home_timeline_include_self,
        )

    def search_posts(self, query: str, request: PageRequest) -> Page[Post]:
        return self.posts.search(query.strip(), request)

    def get_trending_posts(self, request: PageRequest) -> Page[Post]:
        return self.posts.trending(self.config.trending_weights, request)

    def get_posts_by_hashtag(self, tag: str, request: PageRequest) -> Page[Post]:
        name = normalize_hashtag(tag)
        if not name:
            return Page(items=[], page=request.page, size=request.size, total_elements=0)
        return self.posts.by_hashtag(name, request)

    def get_replies(self, parent_id: uuid.UUID, request: PageRequest) -> Page[Post]:
        """Replies to ``parent_id``, newest first; ``NotFoundError`` if it is missing."""
        self.get_post(parent_id)
        return self.posts.replies(parent_id, request)
