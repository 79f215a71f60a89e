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

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from civic_commons.core.security import create_access_token
from civic_commons.db.session import Base
from civic_commons.db.session import get_db as app_get_session
from civic_commons.main import app as fastapi_app
from civic_commons.models import (
    Community,
    CommunityMember,
    Coordinates,
    Location,
    MemberRole,
    User,
)
from civic_commons.services.membership import MembershipService

TEST_DB_URL = "sqlite://"

_USER_COUNTER = count(1)
BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
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
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
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
def service(db_session: Session) -> MembershipService:
    return MembershipService(db_session)


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory persisting users with unique emails."""

    def _make(name: str | None = None) -> User:
        n = next(_USER_COUNTER)
        user = User(email=f"user{n}@example.org", name=name or f"User {n}")
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary test user."""
    return make_user("Test User")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second persisted user."""
    return make_user("Other User")


@pytest.fixture()
def third_user(make_user: Callable[..., User]) -> User:
    return make_user("Third User")


def auth_headers(user: User) -> dict[str, str]:
    """Return authorization headers for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    return auth_headers(other_user)


@pytest.fixture()
def third_auth_token(third_user: User) -> dict[str, str]:
    return auth_headers(third_user)


@pytest.fixture()
def location(db_session: Session) -> Location:
    """A location in New York with coordinates."""
    loc = Location(
        city="New York",
        state="NY",
        country="USA",
        coordinates=Coordinates(latitude=40.7128, longitude=-74.006),
    )
    db_session.add(loc)
    db_session.commit()
    return loc


@pytest.fixture()
def community(db_session: Session, test_user: User, location: Location) -> Community:
    """A community whose sole admin (and member) is ``test_user``."""
    community = Community(
        name="Test Community",
        description="Test community description",
        location=location,
        membership_version=0,
    )
    community.members.append(
        CommunityMember(user_id=test_user.id, role=MemberRole.ADMIN, joined_at=BASE_TIME)
    )
    db_session.add(community)
    db_session.commit()
    return community


@pytest.fixture()
def add_member(db_session: Session) -> Callable[..., CommunityMember]:
    """Attach a user to a community directly, with a controllable join time."""

    def _add(
        community: Community,
        user: User,
        role: MemberRole = MemberRole.MEMBER,
        days_after: int = 1,
    ) -> CommunityMember:
        member = CommunityMember(
            user_id=user.id,
            role=role,
            joined_at=BASE_TIME + timedelta(days=days_after),
        )
        community.members.append(member)
        db_session.commit()
        return member

    return _add
