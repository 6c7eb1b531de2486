"""
Shared test fixtures.

The application is configured for an in-memory SQLite database before any
``lfg`` module is imported. Each test gets freshly created tables.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TOKEN_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

from lfg.core.database import SessionLocal, create_tables, drop_tables
from lfg.main import app


@pytest.fixture(autouse=True)
def tables():
    """Create all tables for a test and drop them afterwards."""
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


def sign_up(client, username, password="password123"):
    """Create an account and return its token response body."""
    response = client.post("/sign-up", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Sign up a user and return ``(user, headers)``."""
    def _register(username, password="password123"):
        body = sign_up(client, username, password)
        return body["user"], auth_headers(body["token"])
    return _register


@pytest.fixture
def make_group(client):
    """Create a group as the given user and return the response body."""
    def _make_group(headers, **fields):
        payload = {"title": "Raid night", "description": "Weekly raid", **fields}
        response = client.post("/groups", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _make_group
