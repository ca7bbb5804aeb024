# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from community_platform.core.security import create_access_token
from community_platform.db.session import Base
from community_platform.db.session import get_db as app_get_session
from community_platform.main import app as fastapi_app
from community_platform.models import Comment, Community, CommunityMember, Post, User

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

_USER_COUNTER = count(1)
_COMMUNITY_COUNTER = count(1)


def at(minutes: int) -> datetime:
    """Deterministic timestamp ``minutes`` after the fixed test epoch."""
    return BASE_TIME + timedelta(minutes=minutes)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
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
        session.rollback()
        session.close()
        # Services commit for real, so wipe every table between tests.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


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
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory persisting accounts."""

    def _make(username: str | None = None, *, deleted: bool = False) -> User:
        number = next(_USER_COUNTER)
        user = User(
            username=username or f"user{number}",
            display_name=f"User {number}",
            created_at=BASE_TIME,
            deleted_at=BASE_TIME if deleted else None,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def make_community(db_session: Session) -> Callable[..., Community]:
    """Factory persisting communities without members."""

    def _make(
        name: str | None = None,
        *,
        created_at: datetime = BASE_TIME,
        description: str | None = None,
        owner: User | None = None,
    ) -> Community:
        community_name = name or f"community{next(_COMMUNITY_COUNTER)}"
        community = Community(
            name=community_name,
            name_key=community_name.lower(),
            description=description,
            owner_user_id=owner.id if owner else None,
            member_count=0,
            created_at=created_at,
            updated_at=created_at,
            last_active_at=created_at,
        )
        db_session.add(community)
        db_session.commit()
        return community

    return _make


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Factory persisting posts with controllable timestamps."""

    def _make(
        community: Community,
        author: User,
        *,
        title: str = "A perfectly fine title",
        body: str = "Some plain body text for the post.",
        created_at: datetime = BASE_TIME,
    ) -> Post:
        post = Post(
            community_id=community.id,
            author_user_id=author.id,
            title=title,
            body=body,
            created_at=created_at,
            updated_at=created_at,
        )
        db_session.add(post)
        db_session.commit()
        return post

    return _make


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    """Factory persisting comments with controllable timestamps."""

    def _make(
        post: Post,
        author: User,
        *,
        content: str = "Nice post",
        parent: Comment | None = None,
        created_at: datetime = BASE_TIME,
    ) -> Comment:
        comment = Comment(
            post_id=post.id,
            parent_comment_id=parent.id if parent else None,
            author_user_id=author.id,
            content=content,
            created_at=created_at,
            updated_at=created_at,
        )
        db_session.add(comment)
        db_session.commit()
        return comment

    return _make


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Primary test user."""
    return make_user("alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Secondary test user."""
    return make_user("bob")


@pytest.fixture()
def third_user(make_user: Callable[..., User]) -> User:
    return make_user("carol")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def community(make_community: Callable[..., Community], test_user: User) -> Community:
    """Create a default test community."""
    return make_community("testing", description="Test community description", owner=test_user)


@pytest.fixture()
def test_post(make_post: Callable[..., Post], community: Community, test_user: User) -> Post:
    """Create a baseline post authored by the primary user."""
    return make_post(community, test_user)


@pytest.fixture()
def test_comment(make_comment: Callable[..., Comment], test_post: Post, other_user: User) -> Comment:
    """Create a baseline comment authored by the secondary user."""
    return make_comment(test_post, other_user)


@pytest.fixture()
def add_member(db_session: Session) -> Callable[[Community, User], CommunityMember]:
    """Insert a joined membership row without touching the counter."""

    def _add(community: Community, user: User) -> CommunityMember:
        member = CommunityMember(
            community_id=community.id,
            user_id=user.id,
            joined=True,
            joined_at=BASE_TIME,
            created_at=BASE_TIME,
            updated_at=BASE_TIME,
        )
        db_session.add(member)
        db_session.commit()
        return member

    return _add
