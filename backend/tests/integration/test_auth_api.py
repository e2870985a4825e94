"""Integration tests for ``/api/v1/auth``."""

from __future__ import annotations

import pytest

from tests.helpers.utils import assert_problem, bearer

BASE = "/api/v1/auth"


def _register(client, username="alice", password_hash="h1", **extra):
    return client.post(
        f"{BASE}/register", json={"username": username, "password_hash": password_hash, **extra}
    )


def _login(client, username="alice", password_hash="h1"):
    return client.post(f"{BASE}/login", json={"username": username, "password_hash": password_hash})


class TestRegister:
    def test_register_returns_only_the_id(self, client):
        resp = _register(client)
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert set(data) == {"user_id"}

    def test_first_account_is_admin(self, client):
        first = _register(client, "alice").get_json()["data"]["user_id"]
        _register(client, "bob")

        token = _login(client, "alice").get_json()["data"]["access_token"]
        me = client.get("/api/v1/users/me", headers=bearer(token))
        assert me.get_json()["data"]["id"] == first
        assert me.get_json()["data"]["role"] == "admin"

        token = _login(client, "bob").get_json()["data"]["access_token"]
        me = client.get("/api/v1/users/me", headers=bearer(token))
        assert me.get_json()["data"]["role"] == "member"

    @pytest.mark.parametrize(
        ("payload", "code"),
        [
            ({"username": "   ", "password_hash": "h"}, "USERNAME_REQUIRED"),
            ({"password_hash": "h"}, "USERNAME_REQUIRED"),
            ({"username": "alice", "password_hash": ""}, "PASSWORD_REQUIRED"),
        ],
    )
    def test_blank_fields(self, client, payload, code):
        resp = client.post(f"{BASE}/register", json=payload)
        assert_problem(resp, 400, code)

    def test_duplicate_username(self, client):
        assert _register(client).status_code == 201
        resp = _register(client, password_hash="other")
        assert_problem(resp, 409, "USERNAME_ALREADY_EXISTS")

    def test_username_is_trimmed(self, client):
        _register(client, "  alice  ")
        assert _login(client, "alice").status_code == 200

    def test_padded_username_is_measured_after_trimming(self, client):
        name = "a" * 64
        assert _register(client, f"  {name}  ").status_code == 201
        assert _login(client, name).status_code == 200

    def test_overlong_username_is_rejected(self, client):
        body = assert_problem(_register(client, "b" * 65), 422, "validation_error")
        assert "username" in body["details"]["errors"]

    def test_schema_errors_are_422(self, client):
        resp = _register(client, password_hint=123)
        body = assert_problem(resp, 422, "validation_error")
        assert "password_hint" in body["details"]["errors"]


class TestLogin:
    def test_login_returns_token_pair(self, client):
        user_id = _register(client).get_json()["data"]["user_id"]

        resp = _login(client)

        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["user_id"] == user_id
        assert data["username"] == "alice"
        assert data["token_type"] == "bearer"
        assert data["access_token"].count(".") == 2
        assert "." not in data["refresh_token"]

    @pytest.mark.parametrize(
        ("username", "password_hash"),
        [("alice", "wrong"), ("nobody", "h1"), ("", "h1"), ("alice", "")],
    )
    def test_bad_credentials_look_the_same(self, client, username, password_hash):
        _register(client)
        resp = _login(client, username, password_hash)
        body = assert_problem(resp, 401, "INVALID_CREDENTIALS")
        assert body["detail"] == "Invalid username or password"


class TestRefresh:
    def test_alice_session_lifecycle(self, client):
        """Register, log in, rotate, replay the spent token, delete the account."""
        _register(client)
        login = _login(client).get_json()["data"]
        r0 = login["refresh_token"]

        rotated = client.post(f"{BASE}/refresh", json={"refresh_token": r0})
        assert rotated.status_code == 200
        pair = rotated.get_json()["data"]
        r1 = pair["refresh_token"]
        assert r1 != r0
        assert pair["token_type"] == "bearer"

        replay = client.post(f"{BASE}/refresh", json={"refresh_token": r0})
        assert_problem(replay, 401, "INVALID_REFRESH_TOKEN")

        headers = bearer(pair["access_token"])
        assert client.delete("/api/v1/users/me", headers=headers).status_code == 204

        after = client.post(f"{BASE}/refresh", json={"refresh_token": r1})
        assert_problem(after, 401, "INVALID_REFRESH_TOKEN")
        assert_problem(_login(client), 401, "INVALID_CREDENTIALS")

    @pytest.mark.parametrize("token", ["", "not-a-real-token"])
    def test_unknown_token(self, client, token):
        resp = client.post(f"{BASE}/refresh", json={"refresh_token": token})
        assert_problem(resp, 401, "INVALID_REFRESH_TOKEN")

    def test_each_login_is_an_independent_session(self, client):
        _register(client)
        first = _login(client).get_json()["data"]["refresh_token"]
        second = _login(client).get_json()["data"]["refresh_token"]

        assert client.post(f"{BASE}/refresh", json={"refresh_token": first}).status_code == 200
        assert client.post(f"{BASE}/refresh", json={"refresh_token": second}).status_code == 200

    def test_access_token_is_not_a_refresh_token(self, client):
        _register(client)
        access = _login(client).get_json()["data"]["access_token"]

        resp = client.post(f"{BASE}/refresh", json={"refresh_token": access})

        assert_problem(resp, 401, "INVALID_REFRESH_TOKEN")

    def test_refresh_token_is_not_a_bearer_token(self, client):
        _register(client)
        refresh = _login(client).get_json()["data"]["refresh_token"]

        resp = client.get("/api/v1/users/me", headers=bearer(refresh))

        assert_problem(resp, 401, "token_invalid")
        # The rejected bearer attempt leaves the refresh session usable
        assert client.post(f"{BASE}/refresh", json={"refresh_token": refresh}).status_code == 200
