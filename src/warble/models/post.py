# src/warble/models/post.py
"""SQLAlchemy models for posts, hashtags and likes."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from warble.db.session import Base
from warble.db.time import utcnow
from warble.models.user import User

POST_CONTENT_MAX_LENGTH = 280

# Many-to-many link between posts and the hashtags derived from their content.
post_hashtag = Table(
    "post_hashtag",
    Base.metadata,
    Column("post_id", Uuid, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "hashtag_id",
        Integer,
        ForeignKey("hashtag.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Index("ix_post_hashtag_hashtag_id", "hashtag_id"),
)


class Hashtag(Base):
    """Normalized (lowercase) hashtag name shared across posts."""

    __tablename__ = "hashtag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # A tag can be as long as a whole post.
    name: Mapped[str] = mapped_column(
        String(POST_CONTENT_MAX_LENGTH),
        unique=True,
        nullable=False,
    )


class Post(Base):
    """Primary content entity produced by users.

    Replies and reposts are posts too: ``parent_id`` and ``original_post_id``
    point at other posts by id only. The counters are denormalized and kept in
    step with their child rows by the write paths in ``PostRepository``.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint(
            "(is_reply AND parent_id IS NOT NULL) OR (NOT is_reply AND parent_id IS NULL)",
            name="ck_post_reply_parent",
        ),
        CheckConstraint(
            "(is_repost AND original_post_id IS NOT NULL) "
            "OR (NOT is_repost AND original_post_id IS NULL)",
            name="ck_post_repost_original",
        ),
        CheckConstraint("like_count >= 0", name="ck_post_like_count"),
        CheckConstraint("reply_count >= 0", name="ck_post_reply_count"),
        CheckConstraint("repost_count >= 0", name="ck_post_repost_count"),
        Index("ix_post_user_created", "user_id", "created_at"),
        Index("ix_post_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("app_user.id"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(String(POST_CONTENT_MAX_LENGTH), nullable=False)
    media: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    is_reply: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("post.id"),
        nullable=True,
        index=True,
    )
    is_repost: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    original_post_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("post.id"),
        nullable=True,
        index=True,
    )

    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reply_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    repost_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # One-directional: users do not hold a collection of posts.
    author: Mapped[User] = relationship(User, lazy="joined")
    hashtags: Mapped[list[Hashtag]] = relationship(
        Hashtag,
        secondary=post_hashtag,
        lazy="selectin",
        order_by=Hashtag.name,
    )

    @property
    def hashtag_names(self) -> list[str]:
        """Return the bare names of this post's hashtags."""
        return [hashtag.name for hashtag in self.hashtags]


class PostLike(Base):
    """A user's like on a post; one row per (user, post) pair."""

    __tablename__ = "post_like"
    __table_args__ = (Index("ix_post_like_post_id", "post_id"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("app_user.id"),
        primary_key=True,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("post.id"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
