# src/warble/models/__init__.py
"""SQLAlchemy models for the Warble application."""

from .follow import Follow
from .post import Hashtag, Post, PostLike, post_hashtag
from .user import User

__all__ = [
    "Follow",
    "Hashtag", "Post", "PostLike", "post_hashtag",
    "User",
]
