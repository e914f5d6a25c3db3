"""
tests/test_auth_service.py -- Unit tests for auth/service.py.

Covers:
  - register stores a digest (never the plaintext) and returns a working token
  - register with a taken email raises ConflictError
  - login succeeds with the right password
  - unknown email and wrong password raise the same InvalidCredentialsError
  - an unknown email still spends one bcrypt computation
"""

from __future__ import annotations

import pytest

from auth.service import AuthService
from core.errors import ConflictError, InvalidCredentialsError


@pytest.fixture
def service(user_store, hasher, tokens) -> AuthService:
    return AuthService(user_store, hasher, tokens)


class TestRegister:
    def test_stores_digest_not_plaintext(self, service, user_store):
        result = service.register("Ada", "ada@example.com", "secret123")
        stored = user_store.get_by_email("ada@example.com")
        assert stored.hashed_password != "secret123"
        assert stored.hashed_password.startswith("$2b$")
        assert service.tokens.verify(result.token) == result.user.id

    def test_duplicate_email(self, service):
        service.register("Ada", "ada@example.com", "secret123")
        with pytest.raises(ConflictError):
            service.register("Other", "ada@example.com", "another1")


class TestLogin:
    def test_correct_credentials(self, service):
        registered = service.register("Ada", "ada@example.com", "secret123")
        result = service.login("ada@example.com", "secret123")
        assert result.user.id == registered.user.id
        assert service.tokens.verify(result.token) == registered.user.id

    def test_wrong_password(self, service):
        service.register("Ada", "ada@example.com", "secret123")
        with pytest.raises(InvalidCredentialsError) as wrong:
            service.login("ada@example.com", "secret124")
        with pytest.raises(InvalidCredentialsError) as unknown:
            service.login("nobody@example.com", "secret124")
        assert wrong.value.message == unknown.value.message

    def test_unknown_email_still_hashes(self, service, monkeypatch):
        burned = []
        monkeypatch.setattr(service.hasher, "burn", lambda plain: burned.append(plain))
        with pytest.raises(InvalidCredentialsError):
            service.authenticate("nobody@example.com", "secret123")
        assert burned == ["secret123"]
