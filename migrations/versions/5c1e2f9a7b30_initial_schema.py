"""initial schema

Revision ID: 5c1e2f9a7b30
Revises:
Create Date: 2026-10-19 09:12:44.318027

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2f9a7b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, posts, hashtags, follows and likes."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=True),
        sa.Column("bio", sa.String(length=160), nullable=True),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("website", sa.Text(), nullable=True),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column("header_image", sa.Text(), nullable=True),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "hashtag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=280), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "follow",
        sa.Column("follower_id", sa.Uuid(), nullable=False),
        sa.Column("following_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
        sa.ForeignKeyConstraint(["follower_id"], ["app_user.id"]),
        sa.ForeignKeyConstraint(["following_id"], ["app_user.id"]),
        sa.PrimaryKeyConstraint("follower_id", "following_id"),
    )
    op.create_index("ix_follow_following_id", "follow", ["following_id"])

    op.create_table(
        "post",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("content", sa.String(length=280), nullable=False),
        sa.Column("media", sa.JSON(), nullable=False),
        sa.Column("is_reply", sa.Boolean(), nullable=False),
        sa.Column("parent_id", sa.Uuid(), nullable=True),
        sa.Column("is_repost", sa.Boolean(), nullable=False),
        sa.Column("original_post_id", sa.Uuid(), nullable=True),
        sa.Column("like_count", sa.Integer(), nullable=False),
        sa.Column("reply_count", sa.Integer(), nullable=False),
        sa.Column("repost_count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(is_reply AND parent_id IS NOT NULL) OR (NOT is_reply AND parent_id IS NULL)",
            name="ck_post_reply_parent",
        ),
        sa.CheckConstraint(
            "(is_repost AND original_post_id IS NOT NULL) "
            "OR (NOT is_repost AND original_post_id IS NULL)",
            name="ck_post_repost_original",
        ),
        sa.CheckConstraint("like_count >= 0", name="ck_post_like_count"),
        sa.CheckConstraint("reply_count >= 0", name="ck_post_reply_count"),
        sa.CheckConstraint("repost_count >= 0", name="ck_post_repost_count"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"]),
        sa.ForeignKeyConstraint(["parent_id"], ["post.id"]),
        sa.ForeignKeyConstraint(["original_post_id"], ["post.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_user_created", "post", ["user_id", "created_at"])
    op.create_index("ix_post_created_at", "post", ["created_at"])
    op.create_index("ix_post_parent_id", "post", ["parent_id"])
    op.create_index("ix_post_original_post_id", "post", ["original_post_id"])

    op.create_table(
        "post_hashtag",
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("hashtag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["hashtag_id"], ["hashtag.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("post_id", "hashtag_id"),
    )
    op.create_index("ix_post_hashtag_hashtag_id", "post_hashtag", ["hashtag_id"])

    op.create_table(
        "post_like",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("post_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"]),
        sa.ForeignKeyConstraint(["post_id"], ["post.id"]),
        sa.PrimaryKeyConstraint("user_id", "post_id"),
    )
    op.create_index("ix_post_like_post_id", "post_like", ["post_id"])


def downgrade() -> None:
    """Drop every table created by ``upgrade``."""
    op.drop_index("ix_post_like_post_id", table_name="post_like")
    op.drop_table("post_like")
    op.drop_index("ix_post_hashtag_hashtag_id", table_name="post_hashtag")
    op.drop_table("post_hashtag")
    op.drop_index("ix_post_original_post_id", table_name="post")
    op.drop_index("ix_post_parent_id", table_name="post")
    op.drop_index("ix_post_created_at", table_name="post")
    op.drop_index("ix_post_user_created", table_name="post")
    op.drop_table("post")
    op.drop_index("ix_follow_following_id", table_name="follow")
    op.drop_table("follow")
    op.drop_table("hashtag")
    op.drop_table("app_user")
