"""Tests for the authentication tools."""

import json

import pytest

from gitscrum_mcp.tools import auth_tools
from tests.conftest import result_json

DEVICE_CODE_BODY = {
    "device_code": "dev-1",
    "user_code": "ABCD-1234",
    "verification_uri": "https://gitscrum.com/device",
    "verification_uri_complete": "https://gitscrum.com/device?code=ABCD-1234",
    "expires_in": 900,
    "interval": 5,
}

ME_BODY = {"data": {"name": "Ada Lovelace", "email": "ada@example.com", "username": "ada"}}


class TestLoginFlow:
    @pytest.mark.asyncio
    async def test_login_then_complete(self, make_client, make_context, api, token_store, clock):
        """Login stores a pending code that auth_complete later exchanges for a token."""
        api.add("POST", "/oauth/device/code", DEVICE_CODE_BODY)
        api.add("POST", "/oauth/device/token", {"error": "authorization_pending"}, status=400)
        api.add("POST", "/oauth/device/token", {"access_token": "tok-1", "token_type": "Bearer"})
        api.add("POST", "/auth/me", ME_BODY)

        async with make_client("") as client:
            ctx = make_context(client)

            login = await auth_tools.handle(ctx, "auth_login", {})
            payload = result_json(login)
            assert payload["status"] == "pending"
            assert payload["user_code"] == "ABCD-1234"
            assert payload["verification_url"] == DEVICE_CODE_BODY["verification_uri_complete"]
            assert payload["expires_in_minutes"] == 15
            assert payload["instructions"][-1] == "After authorizing, call auth_complete"

            pending = json.loads(token_store.pending_auth_file.read_text())
            assert pending["device_code"] == "dev-1"
            assert pending["expires_at"] == clock.now + 900 * 1000

            first = await auth_tools.handle(ctx, "auth_complete", {})
            assert first.isError is False
            assert result_json(first)["status"] == "authorization_pending"
            assert token_store.pending_auth_file.exists()

            second = await auth_tools.handle(ctx, "auth_complete", {})
            payload = result_json(second)
            assert payload == {
                "status": "authenticated",
                "user": {
                    "name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "username": "ada",
                },
            }
            assert client.token == "tok-1"

        assert not token_store.pending_auth_file.exists()
        assert token_store.get_token() == "tok-1"
        polls = api.calls("POST", "/oauth/device/token")
        assert [api.body(r)["device_code"] for r in polls] == ["dev-1", "dev-1"]
        me = api.calls("POST", "/auth/me")[0]
        assert me.headers["Authorization"] == "Bearer tok-1"

    @pytest.mark.asyncio
    async def test_user_lookup_failure_still_authenticated(self, make_client, make_context, api, token_store):
        token_store.save_pending_device_code("dev-1", 900)
        api.add("POST", "/oauth/device/token", {"access_token": "tok-1"})
        api.add("POST", "/auth/me", {"message": "oops"}, status=500)

        async with make_client("") as client:
            result = await auth_tools.handle(make_context(client), "auth_complete", {})

        assert result_json(result) == {"status": "authenticated"}
        assert token_store.get_token() == "tok-1"

    @pytest.mark.asyncio
    async def test_login_rejected(self, make_client, make_context, api):
        api.add("POST", "/oauth/device/code", {"message": "Unauthorized"}, status=401)

        async with make_client("") as client:
            result = await auth_tools.handle(make_context(client), "auth_login", {})

        assert result.isError is True
        assert result_json(result)["error"] == "unauthorized"


class TestComplete:
    @pytest.mark.asyncio
    async def test_no_pending(self, make_client, make_context, api):
        async with make_client("") as client:
            result = await auth_tools.handle(make_context(client), "auth_complete", {})

        assert result.isError is True
        assert result_json(result) == {
            "error": "no_pending_auth",
            "message": "No pending authorization. Run auth_login first.",
        }
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_explicit_code_wins(self, make_client, make_context, api, token_store):
        token_store.save_pending_device_code("dev-1", 900)
        api.add("POST", "/oauth/device/token", {"error": "authorization_pending"}, status=400)

        async with make_client("") as client:
            await auth_tools.handle(make_context(client), "auth_complete", {"device_code": "dev-2"})

        body = api.body(api.calls("POST", "/oauth/device/token")[0])
        assert body["device_code"] == "dev-2"

    @pytest.mark.asyncio
    async def test_expired_pending_code(self, make_client, make_context, api, token_store, clock):
        token_store.save_pending_device_code("dev-1", 900)
        clock.now += 900_001

        async with make_client("") as client:
            result = await auth_tools.handle(make_context(client), "auth_complete", {})

        assert result_json(result)["error"] == "no_pending_auth"
        assert api.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "server_error,expected",
        [
            ("access_denied", "access_denied"),
            ("expired_token", "expired"),
            ("invalid_grant", "auth_failed"),
        ],
    )
    async def test_terminal_errors(self, make_client, make_context, api, server_error, expected):
        api.add("POST", "/oauth/device/token", {"error": server_error}, status=400)

        async with make_client("") as client:
            result = await auth_tools.handle(
                make_context(client), "auth_complete", {"device_code": "dev-1"}
            )

        assert result.isError is True
        assert result_json(result)["error"] == expected


class TestStatus:
    @pytest.mark.asyncio
    async def test_not_authenticated(self, make_client, make_context, api):
        async with make_client("") as client:
            result = await auth_tools.handle(make_context(client), "auth_status", {})

        assert result_json(result) == {
            "authenticated": False,
            "options": [
                "Run auth_login to authenticate via browser",
                "Set GITSCRUM_TOKEN environment variable",
            ],
        }
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_environment_token(self, make_client, make_context, api, monkeypatch):
        monkeypatch.setenv("GITSCRUM_TOKEN", "env-token")
        api.add("POST", "/auth/me", ME_BODY)

        async with make_client("") as client:
            result = await auth_tools.handle(make_context(client), "auth_status", {})

        payload = result_json(result)
        assert payload["authenticated"] is True
        assert payload["token_source"] == "environment_variable"
        assert payload["user"]["username"] == "ada"
        assert api.requests[0].headers["Authorization"] == "Bearer env-token"

    @pytest.mark.asyncio
    async def test_invalid_token(self, make_client, make_context, api, token_store):
        token_store.save_token("stale")
        api.add("POST", "/auth/me", {"message": "Unauthenticated."}, status=401)

        async with make_client() as client:
            result = await auth_tools.handle(make_context(client), "auth_status", {})

        assert result.isError is True
        assert result_json(result)["error"] == "token_invalid"


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_clears_token(self, make_client, make_context, api, token_store):
        token_store.save_token("tok")
        api.add("POST", "/auth/logout", {"message": "down"}, status=503)

        async with make_client("tok") as client:
            result = await auth_tools.handle(make_context(client), "auth_logout", {})

        assert result_json(result) == {"status": "logged_out"}
        assert token_store.get_token() is None
