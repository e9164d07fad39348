# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from warble.core.settings import Settings
from warble.db.session import Base
from warble.db.session import get_db as app_get_session
from warble.main import app as fastapi_app
from warble.models import Post, User
from warble.schemas.user import UserCreate
from warble.services import PostService, SocialGraphService, UserService

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

_USER_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    # A fresh in-memory database per test keeps commits from leaking across tests.
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_settings() -> Settings:
    """Settings with the default timeline and ranking behaviour."""
    return Settings(HOME_TIMELINE_INCLUDE_SELF=False)


@pytest.fixture()
def user_service(db_session: Session) -> UserService:
    return UserService(db_session)


@pytest.fixture()
def graph(db_session: Session) -> SocialGraphService:
    return SocialGraphService(db_session)


@pytest.fixture()
def post_service(db_session: Session, test_settings: Settings) -> PostService:
    return PostService(db_session, test_settings)


@pytest.fixture()
def make_user(user_service: UserService) -> Callable[..., User]:
    """Register users through the service; unspecified fields are generated."""

    def _make_user(username: str | None = None, **overrides: Any) -> User:
        username = username or f"user{next(_USER_COUNTER)}"
        data = {
            "username": username,
            "email": f"{username.lower()}@example.com",
            "password": "correct-horse-battery",
        }
        data.update(overrides)
        return user_service.create_user(UserCreate(**data))

    return _make_user


@pytest.fixture()
def make_post(db_session: Session, post_service: PostService) -> Callable[..., Post]:
    """Create posts with strictly increasing ``created_at`` values.

    Each call lands one minute after the previous one unless ``created_at``
    is given, so newest-first ordering is predictable.
    """
    clock = count()

    def _make_post(
        author: User,
        content: str = "hello world",
        *,
        created_at: datetime | None = None,
        media: list[str] | None = None,
    ) -> Post:
        post = post_service.create_post(author, content, media)
        post.created_at = created_at or BASE_TIME + timedelta(minutes=next(clock))
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make_post


@pytest.fixture()
def follow(graph: SocialGraphService) -> Callable[[User, User], bool]:
    def _follow(follower: User, followed: User) -> bool:
        return graph.follow(follower.id, followed.id)

    return _follow


@pytest.fixture()
def alice(make_user: Callable[..., User]) -> User:
    return make_user("alice", display_name="Alice")


@pytest.fixture()
def bob(make_user: Callable[..., User]) -> User:
    return make_user("bob")


@pytest.fixture()
def carol(make_user: Callable[..., User]) -> User:
    return make_user("carol", display_name="Carol C")
