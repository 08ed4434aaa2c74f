"""Tests for the device authorization client."""

import httpx
import pytest

from gitscrum_mcp.core.device_auth import (
    DEVICE_GRANT_TYPE,
    MCP_CLIENT_ID,
    DeviceAuthClient,
)
from gitscrum_mcp.core.exceptions import DeviceAuthError, NetworkUnreachableError
from gitscrum_mcp.models.auth import DeviceCode
from tests.conftest import API_URL

DEVICE_CODE_BODY = {
    "device_code": "dev-1",
    "user_code": "ABCD-1234",
    "verification_uri": "https://gitscrum.com/device",
    "verification_uri_complete": "https://gitscrum.com/device?code=ABCD-1234",
    "expires_in": 900,
}


@pytest.fixture
def device_auth(transport):
    return DeviceAuthClient(api_url=API_URL, transport=transport)


class FakeTime:
    """Clock that only advances when sleep is awaited."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TestRequestDeviceCode:
    @pytest.mark.asyncio
    async def test_success(self, device_auth, api):
        """The client id is sent and the interval defaults to 5 seconds."""
        api.add("POST", "/oauth/device/code", DEVICE_CODE_BODY)

        code = await device_auth.request_device_code()

        assert code.device_code == "dev-1"
        assert code.interval == 5
        assert code.verification_url.endswith("code=ABCD-1234")
        request = api.calls("POST", "/oauth/device/code")[0]
        assert api.body(request) == {"client_id": MCP_CLIENT_ID}
        assert request.headers["X-Client-Source"] == "mcp-server"

    @pytest.mark.asyncio
    async def test_server_error_body(self, device_auth, api):
        api.add(
            "POST",
            "/oauth/device/code",
            {"error": "invalid_client", "error_description": "Unknown client"},
            status=400,
        )

        with pytest.raises(DeviceAuthError) as exc_info:
            await device_auth.request_device_code()

        assert exc_info.value.message == "Unknown client"
        assert exc_info.value.error_code == "invalid_client"

    @pytest.mark.asyncio
    async def test_unreadable_error_body(self, device_auth, api):
        api.add(
            "POST",
            "/oauth/device/code",
            handler=lambda request: httpx.Response(503, text="down"),
        )

        with pytest.raises(DeviceAuthError) as exc_info:
            await device_auth.request_device_code()

        assert "503" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_failure(self, api):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = DeviceAuthClient(api_url=API_URL, transport=httpx.MockTransport(refuse))

        with pytest.raises(NetworkUnreachableError) as exc_info:
            await client.request_device_code()

        assert "Unable to connect" in exc_info.value.message


class TestPollForToken:
    @pytest.mark.asyncio
    async def test_pending_returns_none(self, device_auth, api):
        api.add("POST", "/oauth/device/token", {"error": "authorization_pending"}, status=400)

        assert await device_auth.poll_for_token("dev-1") is None
        assert device_auth.slow_down is False
        body = api.body(api.calls("POST", "/oauth/device/token")[0])
        assert body == {"device_code": "dev-1", "grant_type": DEVICE_GRANT_TYPE}

    @pytest.mark.asyncio
    async def test_slow_down_returns_none(self, device_auth, api):
        api.add("POST", "/oauth/device/token", {"error": "slow_down"}, status=400)

        assert await device_auth.poll_for_token("dev-1") is None
        assert device_auth.slow_down is True

    @pytest.mark.asyncio
    async def test_access_denied_raises(self, device_auth, api):
        api.add(
            "POST",
            "/oauth/device/token",
            {"error": "access_denied", "error_description": "The user denied the request"},
            status=400,
        )

        with pytest.raises(DeviceAuthError) as exc_info:
            await device_auth.poll_for_token("dev-1")

        assert exc_info.value.is_denied
        assert not exc_info.value.is_expired

    @pytest.mark.asyncio
    async def test_expired_raises(self, device_auth, api):
        api.add("POST", "/oauth/device/token", {"error": "expired_token"}, status=400)

        with pytest.raises(DeviceAuthError) as exc_info:
            await device_auth.poll_for_token("dev-1")

        assert exc_info.value.is_expired

    @pytest.mark.asyncio
    async def test_token(self, device_auth, api):
        api.add(
            "POST",
            "/oauth/device/token",
            {"access_token": "tok-1", "token_type": "Bearer", "expires_in": 3600},
        )

        token = await device_auth.poll_for_token("dev-1")

        assert token.access_token == "tok-1"
        assert token.token_type == "Bearer"


class TestWaitForToken:
    @pytest.mark.asyncio
    async def test_polls_at_interval_and_backs_off(self, device_auth, api):
        """slow_down adds 5 seconds to the polling interval."""
        api.add("POST", "/oauth/device/token", {"error": "authorization_pending"}, status=400)
        api.add("POST", "/oauth/device/token", {"error": "slow_down"}, status=400)
        api.add("POST", "/oauth/device/token", {"access_token": "tok-1"})
        fake = FakeTime()

        token = await device_auth.wait_for_token(
            DeviceCode(**DEVICE_CODE_BODY), sleep=fake.sleep, clock=fake.clock
        )

        assert token.access_token == "tok-1"
        assert fake.sleeps == [5, 5, 10]

    @pytest.mark.asyncio
    async def test_times_out(self, device_auth, api):
        api.add("POST", "/oauth/device/token", {"error": "authorization_pending"}, status=400)
        fake = FakeTime()
        code = DeviceCode(**{**DEVICE_CODE_BODY, "expires_in": 10})

        with pytest.raises(DeviceAuthError) as exc_info:
            await device_auth.wait_for_token(code, sleep=fake.sleep, clock=fake.clock)

        assert exc_info.value.is_expired
        assert fake.sleeps == [5, 5]

    @pytest.mark.asyncio
    async def test_denied_stops_polling(self, device_auth, api):
        api.add("POST", "/oauth/device/token", {"error": "access_denied"}, status=400)
        fake = FakeTime()

        with pytest.raises(DeviceAuthError):
            await device_auth.wait_for_token(
                DeviceCode(**DEVICE_CODE_BODY), sleep=fake.sleep, clock=fake.clock
            )

        assert len(api.calls("POST", "/oauth/device/token")) == 1
