"""Pytest configuration and shared fixtures."""

import os

# Keep the application engine off the developer's real database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dailydiary import models  # noqa: F401
from dailydiary import users
from dailydiary.database import Base, get_db
from dailydiary.main import app


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def make_client(db_session):
    """Factory for API clients that share the test database but not cookies."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def alice(db_session):
    return users.register(db_session, "alice", "secret1")


@pytest.fixture
def bob(db_session):
    return users.register(db_session, "bob", "hunter22")


def login(client, username, password):
    response = client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def alice_client(make_client, alice):
    c = make_client()
    login(c, "alice", "secret1")
    return c


@pytest.fixture
def bob_client(make_client, bob):
    c = make_client()
    login(c, "bob", "hunter22")
    return c
