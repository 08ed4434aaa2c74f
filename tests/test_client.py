"""Tests for the GitScrum HTTP client."""

import httpx
import pytest

from gitscrum_mcp.core.client import GitScrumClient, build_query_params, unwrap_data
from gitscrum_mcp.core.exceptions import (
    APIError,
    BadRequestError,
    ForbiddenError,
    NetworkUnreachableError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
    UnprocessableError,
)
from tests.conftest import API_URL


class TestQueryParams:
    def test_drops_none_and_renders_values(self):
        params = build_query_params(
            {"a": None, "flag": True, "off": False, "ids": [1, 2], "n": 5}
        )

        assert params == {"flag": "true", "off": "false", "ids": "1,2", "n": "5"}

    def test_empty(self):
        assert build_query_params(None) == {}


class TestUnwrapData:
    def test_envelope(self):
        assert unwrap_data({"data": [1]}) == [1]

    def test_missing(self):
        assert unwrap_data({"other": 1}, default=[]) == []
        assert unwrap_data([1, 2]) is None


class TestRequest:
    @pytest.mark.asyncio
    async def test_headers_and_params(self, make_client, api):
        """Requests carry the bearer token and client identification headers."""
        api.add("GET", "/projects", {"data": []})

        async with make_client("tok") as client:
            await client.get("projects", params={"company_slug": "acme", "status": None})

        request = api.requests[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.headers["X-Client-Type"] == "mcp"
        assert request.headers["X-Client-Source"] == "mcp-server"
        assert dict(request.url.params) == {"company_slug": "acme"}

    @pytest.mark.asyncio
    async def test_json_body(self, make_client, api):
        api.add("POST", "/tasks", {"data": {"uuid": "t-1"}})

        async with make_client() as client:
            response = await client.post("tasks", {"title": "Write docs"})

        assert response == {"data": {"uuid": "t-1"}}
        assert api.body(api.requests[0]) == {"title": "Write docs"}

    @pytest.mark.asyncio
    async def test_empty_body(self, make_client, api):
        api.add("PUT", "/sprints/s-1", status=204)

        async with make_client() as client:
            assert await client.put("sprints/s-1", {}) == {}

    @pytest.mark.asyncio
    async def test_invalid_json(self, make_client, api):
        api.add("GET", "/tasks", handler=lambda request: httpx.Response(200, text="<html>"))

        async with make_client() as client:
            with pytest.raises(APIError):
                await client.get("tasks")

    @pytest.mark.asyncio
    async def test_requires_context_manager(self, make_client):
        client = make_client()

        with pytest.raises(RuntimeError):
            await client.get("tasks")

    @pytest.mark.asyncio
    async def test_network_failure(self, token_store):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with GitScrumClient(
            base_url=API_URL,
            token="tok",
            token_store=token_store,
            transport=httpx.MockTransport(refuse),
        ) as client:
            with pytest.raises(NetworkUnreachableError) as exc_info:
                await client.get("tasks")

        assert API_URL in exc_info.value.message

    def test_token_from_store(self, token_store):
        token_store.save_token("stored")

        client = GitScrumClient(base_url=API_URL, token_store=token_store)

        assert client.token == "stored"
        assert client.is_authenticated()

    def test_no_token(self, token_store):
        client = GitScrumClient(base_url=API_URL, token_store=token_store)

        assert not client.is_authenticated()


class TestErrorMapping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,exc_type,text",
        [
            (400, BadRequestError, "Invalid request: bad"),
            (401, UnauthorizedError, "Session expired"),
            (403, ForbiddenError, "Access denied: bad"),
            (404, NotFoundError, "Resource not found or was deleted."),
            (500, ServerError, "Server error: bad"),
            (418, APIError, "bad"),
        ],
    )
    async def test_status_mapping(self, make_client, api, status, exc_type, text):
        api.add("GET", "/tasks", {"message": "bad"}, status=status)

        async with make_client() as client:
            with pytest.raises(exc_type) as exc_info:
                await client.get("tasks")

        assert text in exc_info.value.message
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_validation_errors(self, make_client, api):
        api.add(
            "POST",
            "/tasks",
            {"message": "The given data was invalid.", "errors": {"title": ["required"]}},
            status=422,
        )

        async with make_client() as client:
            with pytest.raises(UnprocessableError) as exc_info:
                await client.post("tasks", {})

        assert exc_info.value.to_dict() == {
            "error": "validation_failed",
            "message": "The given data was invalid.",
            "validation_errors": {"title": ["required"]},
        }

    @pytest.mark.asyncio
    async def test_rate_limit(self, make_client, api):
        api.add(
            "GET",
            "/tasks",
            {"message": "Too many"},
            status=429,
            headers={
                "X-MCP-RateLimit-Limit": "100",
                "X-MCP-RateLimit-Remaining": "0",
                "X-MCP-RateLimit-Reset": "1700000000",
            },
        )

        async with make_client() as client:
            with pytest.raises(RateLimitedError) as exc_info:
                await client.get("tasks")

        payload = exc_info.value.to_dict()
        assert payload["error"] == "rate_limit_exceeded"
        assert payload["limit"] == "100"
        assert payload["remaining"] == "0"
        assert payload["upgrade_url"]


class TestLogout:
    @pytest.mark.asyncio
    async def test_remote_failure_is_ignored(self, make_client, api):
        api.add("POST", "/auth/logout", {"message": "boom"}, status=500)

        async with make_client("tok") as client:
            await client.logout()

            assert client.token == ""
            assert len(api.calls("POST", "/auth/logout")) == 1

    @pytest.mark.asyncio
    async def test_without_token_no_request(self, make_client, api):
        async with make_client("") as client:
            await client.logout()

        assert api.requests == []
