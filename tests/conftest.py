# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from cash_or_card.core.security import create_access_token
from cash_or_card.db.session import Base, configure_sqlite
from cash_or_card.db.session import get_db as app_get_session
from cash_or_card.main import app as fastapi_app
from cash_or_card.models import Restaurant, User, UserRole

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = configure_sqlite(
        create_engine(
            TEST_DB_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
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
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with unique usernames."""

    def _make_user(role: UserRole = UserRole.USER, username: str | None = None) -> User:
        user = User(
            username=username or f"user{next(_USERNAME_COUNTER)}",
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def test_user(make_user: Callable[..., User]) -> User:
    """Create and return the primary registered user."""
    return make_user(username="alice")


@pytest.fixture()
def other_user(make_user: Callable[..., User]) -> User:
    """Create and return a second registered user."""
    return make_user(username="bob")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    """Create and return an administrator."""
    return make_user(UserRole.ADMIN, username="admin")


@pytest.fixture()
def guest_user(make_user: Callable[..., User]) -> User:
    """Create and return a guest account."""
    return make_user(UserRole.GUEST, username="guest")


@pytest.fixture()
def restaurant(db_session: Session, test_user: User) -> Restaurant:
    """Create a default restaurant submitted by the primary user."""
    restaurant = Restaurant(
        name="Pho Saigon",
        address="123 Queen St W",
        city="Toronto",
        category="Vietnamese",
        submitted_by=test_user.id,
    )
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


def bearer_headers(user: User) -> dict[str, str]:
    """Return authorization headers carrying a token for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return bearer_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer_headers(other_user)


@pytest.fixture()
def admin_auth_token(admin_user: User) -> dict[str, str]:
    """Return authorization headers for the administrator."""
    return bearer_headers(admin_user)


@pytest.fixture()
def guest_auth_token(guest_user: User) -> dict[str, str]:
    """Return authorization headers for the guest account."""
    return bearer_headers(guest_user)
