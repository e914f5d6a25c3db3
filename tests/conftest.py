"""
tests/conftest.py -- Shared test fixtures for the contact list test suite.

This module provides:
  - settings: explicit Settings with a fixed secret, BCRYPT_ROUNDS=4 and a
    SQLite file under tmp_path
  - app / client: a fresh application per test, started through its lifespan
  - register: a callable that creates an account over HTTP
  - alice / bob: two registered users with ready-made Authorization headers
  - user_store / contact_store / hasher / tokens: components for unit tests

Design: every test builds its own app from its own Settings. Nothing is
shared through module globals or the environment, so rate-limit counters,
users and contacts never leak from one test into another.

A file-backed SQLite database is used instead of :memory: because TestClient
runs sync handlers in a thread pool, and a plain :memory: database is private
to the connection that created it.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.main import create_app
from auth.passwords import PasswordHasher
from auth.store import UserStore
from auth.tokens import TokenIssuer
from contacts.store import ContactStore
from core.config import Settings

TEST_SECRET = "test-secret-key-that-is-at-least-32-chars-long"
TEST_PASSWORD = "secret123"


def _db_url(tmp_path: Path, name: str = "contacts.db") -> str:
    return f"sqlite:///{tmp_path / name}"


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Application fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings for one test. BCRYPT_ROUNDS=4 keeps hashing fast."""
    return Settings(
        debug=False,
        secret_key=TEST_SECRET,
        database_url=_db_url(tmp_path),
        bcrypt_rounds=4,
        # TestClient sends Host: testserver
        allowed_hosts=["testserver"],
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """TestClient with the lifespan running for the duration of the test."""
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict]:
    """Return a function that registers a user and returns the response body.

    The body is {id, name, email, token} plus a "headers" key holding the
    matching Authorization header.
    """

    def _register(name: str = "Alice", email: str = "alice@example.com", password: str = TEST_PASSWORD) -> dict:
        resp = client.post("/api/v1/users", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        data = resp.json()
        data["headers"] = bearer(data["token"])
        return data

    return _register


@pytest.fixture
def alice(register) -> dict:
    return register("Alice", "alice@example.com")


@pytest.fixture
def bob(register) -> dict:
    return register("Bob", "bob@example.com")


# ---------------------------------------------------------------------------
# Component fixtures for unit tests
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store(tmp_path: Path) -> Generator[UserStore, None, None]:
    store = UserStore(_db_url(tmp_path, "users.db"))
    yield store
    store.close()


@pytest.fixture
def contact_store(tmp_path: Path) -> Generator[ContactStore, None, None]:
    store = ContactStore(_db_url(tmp_path, "contacts_unit.db"))
    yield store
    store.close()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET, expire_days=30)
