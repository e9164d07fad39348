"""Shared API dependencies for sessions, services and paging."""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from warble.core.settings import settings
from warble.db.session import get_db
from warble.repositories.pagination import PageRequest
from warble.services import PostService, SocialGraphService, UserService

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_user_service(db: SessionDep) -> UserService:
    return UserService(db)


def get_social_graph(db: SessionDep) -> SocialGraphService:
    return SocialGraphService(db)


def get_post_service(db: SessionDep) -> PostService:
    return PostService(db, settings)


def get_page_request(
    page: int = Query(0, ge=0, description="Zero-based page number"),
    size: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Number of items per page",
    ),
) -> PageRequest:
    """Build a ``PageRequest`` from the ``page`` and ``size`` query parameters."""
    return PageRequest(page=page, size=size)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
SocialGraphDep = Annotated[SocialGraphService, Depends(get_social_graph)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
PageRequestDep = Annotated[PageRequest, Depends(get_page_request)]
