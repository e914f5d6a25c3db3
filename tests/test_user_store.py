"""
tests/test_user_store.py -- Unit tests for auth/store.py (Credential Store).

Covers:
  - create_user assigns an opaque id and timestamps
  - duplicate email raises ConflictError and leaves the first account intact
  - email lookup is exact (case-sensitive)
  - get_identity never carries the password digest and is None for unknown ids
  - delete_user removes the account
"""

from __future__ import annotations

import pytest

from auth.models import User
from core.errors import ConflictError
from core.models import Identity


def _user(email: str = "ada@example.com", name: str = "Ada") -> User:
    return User(name=name, email=email, hashed_password="$2b$04$placeholderdigest")


class TestCreateUser:
    def test_assigns_id_and_timestamps(self, user_store):
        user = user_store.create_user(_user())
        assert user.id
        assert user.created_at and user.updated_at
        assert user_store.get_by_email("ada@example.com") == user

    def test_ids_are_unique(self, user_store):
        a = user_store.create_user(_user("a@example.com"))
        b = user_store.create_user(_user("b@example.com"))
        assert a.id != b.id

    def test_duplicate_email_conflicts(self, user_store):
        first = user_store.create_user(_user(name="First"))
        with pytest.raises(ConflictError):
            user_store.create_user(_user(name="Second"))
        stored = user_store.get_by_email("ada@example.com")
        assert stored.id == first.id
        assert stored.name == "First"


class TestLookups:
    def test_get_by_email_is_case_sensitive(self, user_store):
        user_store.create_user(_user("Ada@example.com"))
        assert user_store.get_by_email("Ada@example.com") is not None
        assert user_store.get_by_email("ada@example.com") is None

    def test_get_by_email_unknown(self, user_store):
        assert user_store.get_by_email("nobody@example.com") is None

    def test_get_identity_excludes_digest(self, user_store):
        user = user_store.create_user(_user())
        identity = user_store.get_identity(user.id)
        assert identity == Identity(user_id=user.id, name="Ada", email="ada@example.com")
        assert not hasattr(identity, "hashed_password")

    def test_get_identity_unknown(self, user_store):
        assert user_store.get_identity("does-not-exist") is None


class TestDeleteUser:
    def test_delete_removes_account(self, user_store):
        user = user_store.create_user(_user())
        assert user_store.delete_user(user.id) is True
        assert user_store.get_identity(user.id) is None

    def test_delete_unknown_returns_false(self, user_store):
        assert user_store.delete_user("does-not-exist") is False

    def test_ping(self, user_store):
        assert user_store.ping() is True
