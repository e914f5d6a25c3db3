"""
tests/test_auth_routes.py -- Integration tests for /api/v1/users.

Covers:
  - register: 201 with {id, name, email, token}; the token works immediately
  - register: duplicate email -> 409 and the existing account is untouched
  - register: validation (blank name, bad email, short password) -> 422
    without echoing the submitted password
  - login: correct credentials -> 200 with a fresh token
  - login: unknown email and wrong password give identical 401 bodies
  - login: the 11th attempt in the window -> 429 with Retry-After, even with
    correct credentials
  - /users/me: identity of the caller; 401 without a token
"""

from __future__ import annotations

TEST_PASSWORD = "secret123"


class TestRegister:
    def test_register_returns_account_and_token(self, client):
        resp = client.post(
            "/api/v1/users",
            json={"name": "Alice", "email": "alice@example.com", "password": TEST_PASSWORD},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert set(data) == {"id", "name", "email", "token"}
        assert data["name"] == "Alice"
        assert data["email"] == "alice@example.com"
        assert resp.headers["Cache-Control"] == "no-store"

    def test_token_usable_immediately(self, client, alice):
        resp = client.get("/api/v1/users/me", headers=alice["headers"])
        assert resp.status_code == 200
        assert resp.json() == {"id": alice["id"], "name": "Alice", "email": "alice@example.com"}

    def test_name_is_trimmed(self, client):
        resp = client.post(
            "/api/v1/users",
            json={"name": "  Alice  ", "email": "alice@example.com", "password": TEST_PASSWORD},
        )
        assert resp.json()["name"] == "Alice"

    def test_duplicate_email_conflicts(self, client, alice):
        resp = client.post(
            "/api/v1/users",
            json={"name": "Impostor", "email": "alice@example.com", "password": "different1"},
        )
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "conflict"
        # The original account still logs in with its own password.
        login = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        assert login.status_code == 200
        assert login.json()["name"] == "Alice"

    def test_blank_name_rejected(self, client):
        resp = client.post("/api/v1/users", json={"name": "   ", "email": "a@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "validation_error"

    def test_invalid_email_rejected(self, client):
        resp = client.post("/api/v1/users", json={"name": "A", "email": "not-an-email", "password": TEST_PASSWORD})
        assert resp.status_code == 422

    def test_short_password_rejected_without_echo(self, client):
        resp = client.post("/api/v1/users", json={"name": "A", "email": "a@example.com", "password": "pw9zq"})
        assert resp.status_code == 422
        body = resp.json()
        assert "password" in body["error"]["detail"]
        assert "pw9zq" not in resp.text

    def test_missing_fields_rejected(self, client):
        resp = client.post("/api/v1/users", json={"email": "a@example.com"})
        assert resp.status_code == 422
        detail = resp.json()["error"]["detail"]
        assert "name" in detail
        assert "password" in detail


class TestLogin:
    def test_login_returns_fresh_token(self, client, alice):
        resp = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == alice["id"]
        assert data["token"]
        assert resp.headers["Cache-Control"] == "no-store"
        me = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {data['token']}"})
        assert me.status_code == 200

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client, alice):
        wrong_pw = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        no_user = client.post("/api/v1/users/login", json={"email": "nobody@example.com", "password": "wrong-pass"})
        assert wrong_pw.status_code == no_user.status_code == 401
        assert wrong_pw.json() == no_user.json()
        assert wrong_pw.json()["error"]["code"] == "invalid_credentials"

    def test_eleventh_attempt_is_throttled(self, client, alice):
        """Ten attempts per window; the eleventh is refused even with the right password."""
        for _ in range(10):
            resp = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": "wrong-pass"})
            assert resp.status_code == 401
        resp = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 429
        assert resp.json()["error"]["code"] == "rate_limited"
        assert int(resp.headers["Retry-After"]) > 0

    def test_successful_logins_also_count(self, client, alice):
        for _ in range(10):
            ok = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
            assert ok.status_code == 200
        resp = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 429

    def test_resetting_the_throttle_allows_login_again(self, client, app, alice):
        for _ in range(11):
            client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        app.state.login_throttle.reset()
        resp = client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 200

    def test_throttle_does_not_affect_registration(self, client, alice):
        for _ in range(11):
            client.post("/api/v1/users/login", json={"email": "alice@example.com", "password": "wrong-pass"})
        resp = client.post("/api/v1/users", json={"name": "Bob", "email": "bob@example.com", "password": TEST_PASSWORD})
        assert resp.status_code == 201


class TestMe:
    def test_requires_token(self, client):
        resp = client.get("/api/v1/users/me")
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "unauthorized"
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_never_returns_password_material(self, client, alice):
        body = client.get("/api/v1/users/me", headers=alice["headers"]).text
        assert "hashed_password" not in body
        assert "$2b$" not in body
