"""Business logic services for the Warble application."""

from .post_service import PostService
from .social_graph import SocialGraphService
from .user_service import UserService

__all__ = [
    "PostService",
    "SocialGraphService",
    "UserService",
]
