from __future__ import annotations

from typing import Callable, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from study_planner.db.base import Base
from study_planner.db.deps import get_db
from study_planner.db.models.user import User, UserRole
from study_planner.main import app
from study_planner.services.session_store import create_session
from study_planner.services.user_service import create_user

TEST_PASSWORD = "secret-pass"


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(session_factory) -> Callable[..., Tuple[User, str]]:
    """Create a user with an open session; returns (user, token)."""

    def _make(username: str = "student", role: UserRole = UserRole.USER, password: str = TEST_PASSWORD):
        db = session_factory()
        try:
            user = create_user(db, username=username, password=password, display_name=username, role=role)
            token = create_session(db, user.id)
            db.refresh(user)
            db.expunge(user)
            return user, token
        finally:
            db.close()

    return _make


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_headers():
    return auth
