"""Data access helpers for working with posts."""
from __future__ import annotations

import uuid
from collections.abc import Collection, Mapping

from sqlalchemy import Select, delete, func, or_, select, update
from sqlalchemy.orm import Session

from warble.models.post import Hashtag, Post, PostLike, post_hashtag
from warble.repositories.pagination import Page, PageRequest, paginate
from warble.repositories.user_repo import like_pattern

__all__ = ["PostRepository", "COUNTER_COLUMNS"]

COUNTER_COLUMNS = frozenset({"like_count", "reply_count", "repost_count"})


def _newest_first(stmt: Select) -> Select:
    return stmt.order_by(Post.created_at.desc(), Post.id.desc())


class PostRepository:
    """Persistence and read queries for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: uuid.UUID) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def add(self, post: Post) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        self.session.add(post)
        self.session.flush()
        return post

    def adjust_counter(self, post: Post, column: str, delta: int) -> None:
        """Add ``delta`` to one of the post's denormalized counters in SQL.

        The increment happens inside the database so concurrent writers never
        overwrite each other; the in-memory attribute is expired and reloads on
        next access.
        """
        if column not in COUNTER_COLUMNS:
            raise ValueError(f"Unknown counter column: {column}")
        attr = getattr(Post, column)
        self.session.execute(
            update(Post)
            .where(Post.id == post.id)
            .values({column: attr + delta})
            .execution_options(synchronize_session=False)
        )
        self.session.expire(post, [column])

    # -- likes -------------------------------------------------------------

    def get_like(self, post_id: uuid.UUID, user_id: uuid.UUID) -> PostLike | None:
        return self.session.get(PostLike, (user_id, post_id))

    def add_like(self, post: Post, user_id: uuid.UUID) -> PostLike:
        like = PostLike(user_id=user_id, post_id=post.id)
        self.session.add(like)
        self.session.flush()
        self.adjust_counter(post, "like_count", 1)
        return like

    def remove_like(self, post: Post, like: PostLike) -> None:
        self.session.delete(like)
        self.session.flush()
        self.adjust_counter(post, "like_count", -1)

    def remove_likes_by_user(self, user_id: uuid.UUID) -> None:
        """Drop every like cast by ``user_id`` and decrement the liked posts."""
        liked = select(PostLike.post_id).where(PostLike.user_id == user_id)
        self.session.execute(
            update(Post)
            .where(Post.id.in_(liked))
            .values(like_count=Post.like_count - 1)
            .execution_options(synchronize_session=False)
        )
        self.session.execute(
            delete(PostLike)
            .where(PostLike.user_id == user_id)
            .execution_options(synchronize_session=False)
        )

    # -- deletion ----------------------------------------------------------

    def ids_by_author(self, user_id: uuid.UUID) -> set[uuid.UUID]:
        return set(self.session.execute(select(Post.id).where(Post.user_id == user_id)).scalars())

    def collect_subtree(self, root_ids: Collection[uuid.UUID]) -> set[uuid.UUID]:
        """Return ``root_ids`` plus every reply or repost that descends from them."""
        doomed = set(root_ids)
        frontier = set(root_ids)
        while frontier:
            children = set(
                self.session.execute(
                    select(Post.id).where(
                        or_(
                            Post.parent_id.in_(frontier),
                            Post.original_post_id.in_(frontier),
                        )
                    )
                ).scalars()
            )
            frontier = children - doomed
            doomed |= frontier
        return doomed

    def _child_counts(self, ref_column, ids: list[uuid.UUID]) -> Mapping[uuid.UUID, int]:
        rows = self.session.execute(
            select(ref_column, func.count())
            .where(Post.id.in_(ids), ref_column.is_not(None), ref_column.not_in(ids))
            .group_by(ref_column)
        ).tuples()
        return {ref_id: int(count) for ref_id, count in rows}

    def delete_many(self, post_ids: Collection[uuid.UUID]) -> None:
        """Delete a closed set of posts and keep surviving counters consistent.

        ``post_ids`` must already contain every reply/repost of its members
        (see ``collect_subtree``); only parents and originals outside the set
        have their counters decremented.
        """
        ids = list(post_ids)
        if not ids:
            return
        for parent_id, count in self._child_counts(Post.parent_id, ids).items():
            self.session.execute(
                update(Post)
                .where(Post.id == parent_id)
                .values(reply_count=Post.reply_count - count)
                .execution_options(synchronize_session=False)
            )
        for original_id, count in self._child_counts(Post.original_post_id, ids).items():
            self.session.execute(
                update(Post)
                .where(Post.id == original_id)
                .values(repost_count=Post.repost_count - count)
                .execution_options(synchronize_session=False)
            )
        self.session.execute(
            delete(PostLike)
            .where(PostLike.post_id.in_(ids))
            .execution_options(synchronize_session=False)
        )
        self.session.execute(delete(post_hashtag).where(post_hashtag.c.post_id.in_(ids)))
        self.session.execute(delete(Post).where(Post.id.in_(ids)))
        # Counters of surviving posts changed underneath the identity map.
        self.session.expire_all()

    # -- queries -----------------------------------------------------------

    def user_timeline(self, user_id: uuid.UUID, request: PageRequest) -> Page[Post]:
        """Posts authored by ``user_id``, newest first."""
        stmt = _newest_first(select(Post).where(Post.user_id == user_id))
        return paginate(self.session, stmt, request)

    def home_timeline(
        self,
        user_id: uuid.UUID,
        followed_ids: Select,
        request: PageRequest,
        *,
        include_self: bool = False,
    ) -> Page[Post]:
        """Posts by anyone in ``followed_ids``, merged into one newest-first feed.

        ``followed_ids`` is embedded as an ``IN (SELECT ...)`` so the fan-in
        happens in a single statement regardless of how many accounts are
        followed.
        """
        author_filter = Post.user_id.in_(followed_ids)
        if include_self:
            author_filter = or_(author_filter, Post.user_id == user_id)
        stmt = _newest_first(select(Post).where(author_filter))
        return paginate(self.session, stmt, request)

    def search(self, query: str, request: PageRequest) -> Page[Post]:
        stmt = _newest_first(
            select(Post).where(Post.content.ilike(like_pattern(query), escape="\\"))
        )
        return paginate(self.session, stmt, request)

    def trending(self, weights: Mapping[str, int], request: PageRequest) -> Page[Post]:
        """Posts ordered by weighted engagement, newest first among equals."""
        score = (
            Post.like_count * weights.get("like", 1)
            + Post.reply_count * weights.get("reply", 2)
            + Post.repost_count * weights.get("repost", 3)
        )
        stmt = select(Post).order_by(score.desc(), Post.created_at.desc(), Post.id.desc())
        return paginate(self.session, stmt, request)

    def by_hashtag(self, name: str, request: PageRequest) -> Page[Post]:
        stmt = _newest_first(
            select(Post)
            .join(post_hashtag, post_hashtag.c.post_id == Post.id)
            .join(Hashtag, Hashtag.id == post_hashtag.c.hashtag_id)
            .where(Hashtag.name == name)
        )
        return paginate(self.session, stmt, request)

    def replies(self, parent_id: uuid.UUID, request: PageRequest) -> Page[Post]:
        stmt = _newest_first(select(Post).where(Post.parent_id == parent_id))
        return paginate(self.session, stmt, request)
