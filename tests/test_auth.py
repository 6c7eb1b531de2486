"""Tests for sign-up, sign-in and request authentication."""

import importlib
import inspect

import pytest
from fastapi.testclient import TestClient
from jose import jwt

import lfg.main
from lfg.config.settings import settings
from lfg.core.security import create_access_token
from tests.conftest import auth_headers, sign_up


class TestSignUp:

    def test_sign_up_returns_token_and_user(self, client):
        response = client.post("/sign-up", json={"username": "alice", "password": "password123"})

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["username"] == "alice"
        assert "password" not in body["user"]
        claims = jwt.decode(body["token"], settings.token_secret, algorithms=[settings.token_algorithm])
        assert claims["user_id"] == body["user"]["id"]
        assert claims["username"] == "alice"

    def test_sign_up_reports_every_invalid_field(self, client):
        response = client.post("/sign-up", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "The request body contains errors"
        assert body["field_errors"] == [
            {"name": "username", "error": "This field is required"},
            {"name": "password", "error": "This field is required"},
        ]

    def test_sign_up_rejects_long_username_and_short_password(self, client):
        response = client.post("/sign-up", json={"username": "a" * 51, "password": "short"})

        assert response.status_code == 400
        assert response.json()["field_errors"] == [
            {"name": "username", "error": "This field cannot be more than 50 characters long"},
            {"name": "password", "error": "This field has to be 8 to 200 characters long"},
        ]

    def test_sign_up_rejects_duplicate_username(self, client):
        sign_up(client, "alice")

        response = client.post("/sign-up", json={"username": "alice", "password": "password123"})

        assert response.status_code == 400
        assert response.json() == {"message": "User already exists."}

    def test_malformed_body_is_a_bad_request(self, client):
        response = client.post("/sign-up", content="not json", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "The request body contains errors"
        assert [e["name"] for e in body["field_errors"]] == ["body"]

    def test_password_length_bounds(self, client):
        accepted = client.post("/sign-up", json={"username": "alice", "password": "p" * 200})
        rejected = client.post("/sign-up", json={"username": "bob", "password": "p" * 201})

        assert accepted.status_code == 201
        assert rejected.status_code == 400
        assert rejected.json()["field_errors"] == [
            {"name": "password", "error": "This field has to be 8 to 200 characters long"},
        ]

    @pytest.mark.parametrize("password", ["p" * 72, "p" * 73, "p" * 200, "é" * 40])
    def test_long_passwords_can_sign_in(self, client, password):
        sign_up(client, "alice", password)

        response = client.post("/sign-in", json={"username": "alice", "password": password})
        wrong = client.post("/sign-in", json={"username": "alice", "password": password[:-1] + "x"})

        assert response.status_code == 201
        assert wrong.status_code == 401


class TestSignIn:

    def test_sign_in_returns_token(self, client):
        user = sign_up(client, "alice")["user"]

        response = client.post("/sign-in", json={"username": "alice", "password": "password123"})

        assert response.status_code == 201
        assert response.json()["user"]["id"] == user["id"]

    def test_sign_in_with_wrong_password(self, client):
        sign_up(client, "alice")

        response = client.post("/sign-in", json={"username": "alice", "password": "wrongpassword"})

        assert response.status_code == 401
        assert response.json() == {"message": "username or password is invalid."}

    def test_sign_in_with_unknown_user(self, client):
        response = client.post("/sign-in", json={"username": "nobody", "password": "password123"})

        assert response.status_code == 401
        assert response.json() == {"message": "username or password is invalid."}


class TestAuthentication:

    def test_missing_header(self, client):
        response = client.get("/groups")

        assert response.status_code == 401
        assert response.json() == {"message": "Authorization header is missing"}

    def test_wrong_scheme(self, client):
        token = sign_up(client, "alice")["token"]

        response = client.get("/groups", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401
        assert response.json() == {"message": "Token is invalid"}

    def test_garbage_token(self, client):
        response = client.get("/groups", headers=auth_headers("not-a-jwt"))

        assert response.status_code == 401
        assert response.json() == {"message": "Token is invalid"}

    def test_token_for_missing_user(self, client):
        response = client.get("/groups", headers=auth_headers(create_access_token(999, "ghost")))

        assert response.status_code == 401

    def test_token_signed_with_another_algorithm(self, client):
        user = sign_up(client, "alice")["user"]
        token = jwt.encode({"user_id": user["id"]}, settings.token_secret, algorithm="HS512")

        response = client.get("/groups", headers=auth_headers(token))

        assert response.status_code == 401
        assert response.json() == {"message": "Token is invalid"}

    def test_bearer_without_token(self, client):
        response = client.get("/groups", headers={"Authorization": "Bearer"})

        assert response.status_code == 401
        assert response.json() == {"message": "Token is invalid"}

    def test_bearer_scheme_is_documented(self, client):
        schemes = client.get("/openapi.json").json()["components"]["securitySchemes"]

        assert schemes["HTTPBearer"]["scheme"] == "bearer"

    def test_auth_runs_before_group_lookup(self, client):
        response = client.get("/groups/999")

        assert response.status_code == 401

    def test_valid_token(self, client):
        token = sign_up(client, "alice")["token"]

        response = client.get("/groups", headers=auth_headers(token))

        assert response.status_code == 200
        assert response.json() == []


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_root_describes_the_service(client):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == f"Welcome to {settings.project_name}"
    assert body["documentation"] == "/docs"


@pytest.fixture
def prefixed_client(monkeypatch):
    """Client for an app built with ``api_prefix`` set."""
    monkeypatch.setattr(settings, "api_prefix", "/api/v1")
    module = importlib.reload(lfg.main)
    yield TestClient(module.app)
    monkeypatch.undo()
    importlib.reload(lfg.main)


def test_api_prefix_applies_to_all_routers(prefixed_client):
    signed_up = prefixed_client.post("/api/v1/sign-up", json={"username": "alice", "password": "password123"})
    assert signed_up.status_code == 201

    response = prefixed_client.get("/api/v1/groups", headers=auth_headers(signed_up.json()["token"]))
    assert response.status_code == 200
    assert prefixed_client.post("/sign-up", json={"username": "bob", "password": "password123"}).status_code == 404


@pytest.mark.parametrize("handler", [
    "lfg.api.routes.auth.sign_up",
    "lfg.api.routes.auth.sign_in",
    "lfg.api.routes.groups.create_group",
    "lfg.api.routes.groups.update_group_password",
    "lfg.api.routes.groups.join_group",
])
def test_password_hashing_handlers_run_in_threadpool(handler):
    module_name, _, name = handler.rpartition(".")
    func = getattr(importlib.import_module(module_name), name)

    assert not inspect.iscoroutinefunction(func)
