"""Shared fixtures: a scripted HTTP backend and an isolated token directory."""

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from gitscrum_mcp.core.client import GitScrumClient
from gitscrum_mcp.core.device_auth import DeviceAuthClient
from gitscrum_mcp.core.token_store import TokenStore
from gitscrum_mcp.tools.dispatcher import ToolContext

API_URL = "https://api.gitscrum.test"

Responder = Callable[[httpx.Request], httpx.Response]


class MockAPI:
    """Routes requests by method and path and records every request it sees."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json_body: Any = None,
        status: int = 200,
        headers: Optional[dict[str, str]] = None,
        handler: Optional[Responder] = None,
    ) -> None:
        """Queue a response. The last queued response for a route repeats."""
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if json_body is None:
                    return httpx.Response(status, headers=headers)
                return httpx.Response(status, json=json_body, headers=headers)

        self.routes.setdefault((method, path), []).append(handler)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": f"No route for {request.url.path}"})
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests if r.method == method and r.url.path == path
        ]

    @staticmethod
    def body(request: httpx.Request) -> Union[dict, list, None]:
        if not request.content:
            return None
        return json.loads(request.content)


class FakeClock:
    """Millisecond clock under test control."""

    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture(autouse=True)
def no_env_token(monkeypatch):
    monkeypatch.delenv("GITSCRUM_TOKEN", raising=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / "gitscrum"


@pytest.fixture
def token_store(config_dir, clock):
    return TokenStore(config_dir=config_dir, clock=clock)


@pytest.fixture
def api():
    return MockAPI()


@pytest.fixture
def transport(api):
    return httpx.MockTransport(api)


@pytest.fixture
def make_client(transport, token_store):
    def factory(token: str = "test-token") -> GitScrumClient:
        return GitScrumClient(
            base_url=API_URL,
            token=token,
            token_store=token_store,
            transport=transport,
        )

    return factory


@pytest.fixture
def make_context(transport, token_store):
    def factory(client: GitScrumClient) -> ToolContext:
        return ToolContext(
            client=client,
            token_store=token_store,
            device_auth=DeviceAuthClient(api_url=API_URL, transport=transport),
        )

    return factory


def result_text(result) -> str:
    return result.content[0].text


def result_json(result) -> Any:
    """Decode a JSON result, ignoring a trailing context block."""
    return json.loads(result_text(result).split("\n\n---context")[0])
