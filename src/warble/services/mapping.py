"""Conversions from ORM entities to API schemas.

Everything here is a pure function of already-loaded data: follower counts are
passed in by the caller rather than queried, and no password material is ever
copied to the output side.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from warble.models.post import Post
from warble.models.user import User
from warble.repositories.pagination import Page
from warble.schemas.common import PageResponse
from warble.schemas.post import PostResponse
from warble.schemas.user import UserResponse

T = TypeVar("T")
U = TypeVar("U")

__all__ = ["to_user_out", "to_post_out", "to_page_out"]


def to_user_out(user: User, followers_count: int = 0, following_count: int = 0) -> UserResponse:
    """Convert a User ORM instance to an API schema."""
    return UserResponse(
        id=user.id,
        username=user.username,
        email=user.email,
        display_name=user.display_name,
        bio=user.bio,
        location=user.location,
        website=user.website,
        profile_image=user.profile_image,
        header_image=user.header_image,
        verified=user.verified,
        created_at=user.created_at,
        followers_count=followers_count,
        following_count=following_count,
    )


def to_post_out(post: Post) -> PostResponse:
    """Convert a Post ORM instance to an API schema with the author flattened in."""
    author = post.author
    return PostResponse(
        id=post.id,
        user_id=author.id,
        username=author.username,
        user_display_name=author.effective_display_name,
        user_profile_image=author.profile_image,
        content=post.content,
        media=list(post.media or []),
        is_reply=post.is_reply,
        parent_id=post.parent_id,
        is_repost=post.is_repost,
        original_post_id=post.original_post_id,
        hashtags=post.hashtag_names,
        like_count=post.like_count,
        reply_count=post.reply_count,
        repost_count=post.repost_count,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def to_page_out(page: Page[T], mapper: Callable[[T], U]) -> PageResponse:
    """Map every item of ``page`` and carry its pagination metadata across."""
    return PageResponse(
        items=[mapper(item) for item in page.items],
        page=page.page,
        size=page.size,
        total_elements=page.total_elements,
        total_pages=page.total_pages,
        has_next=page.has_next,
        has_previous=page.has_previous,
    )
