"""
Integration tests for ApiClient and the health server.

A local aiohttp server plays the payout API, so the full HTTP path
(headers, JSON decoding, status mapping, refresh round-trip) is exercised.
"""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from app.http_health_server import create_health_app
from app.services.api_client import ApiClient
from app.services.token_store import TokenStore
from app.utils.exceptions import ApiClientError, ApiNetworkError


def create_fake_api() -> web.Application:
    """Fake payout API: accepts only ``good-token`` and refreshes ``old-token``."""
    app = web.Application()
    app["calls"] = []

    async def wallets(request: web.Request) -> web.Response:
        app["calls"].append(("GET /wallets", request.headers.get("Authorization")))
        if request.headers.get("Authorization") != "Bearer good-token":
            return web.json_response({"message": "Unauthorized"}, status=401)
        return web.json_response({"data": [{"id": "w1", "network": "137"}]})

    async def refresh(request: web.Request) -> web.Response:
        app["calls"].append(("POST /auth/refresh-token", request.headers.get("Authorization")))
        if request.headers.get("Authorization") == "Bearer old-token":
            return web.json_response(
                {"accessToken": "good-token", "expireAt": "2099-01-01T00:00:00Z"}
            )
        return web.json_response({"message": "Invalid token"}, status=401)

    async def deposit(request: web.Request) -> web.Response:
        body = await request.json()
        if body.get("amount") == "0":
            return web.json_response(
                {"message": [{"property": "amount", "constraints": {"min": "too small"}}]},
                status=422,
            )
        return web.json_response({"status": "pending"})

    app.router.add_get("/api/wallets", wallets)
    app.router.add_post("/api/auth/refresh-token", refresh)
    app.router.add_post("/api/transfers/deposit", deposit)
    return app


@pytest_asyncio.fixture
async def fake_api():
    server = TestServer(create_fake_api())
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def api_client(fake_api):
    client = ApiClient(str(fake_api.make_url("/api")), timeout=5)
    yield client
    await client.close()


class TestApiClientHttp:
    """End-to-end HTTP behaviour."""

    @pytest.mark.asyncio
    async def test_authorized_call(self, api_client):
        credentials = TokenStore()
        credentials.set_token("good-token")

        payload = await api_client.get("/wallets", credentials)

        assert payload == {"data": [{"id": "w1", "network": "137"}]}

    @pytest.mark.asyncio
    async def test_401_refresh_and_retry(self, api_client, fake_api):
        credentials = TokenStore()
        credentials.set_token("old-token")

        payload = await api_client.get("/wallets", credentials)

        assert payload["data"][0]["id"] == "w1"
        assert credentials.token == "good-token"
        assert [call[0] for call in fake_api.app["calls"]] == [
            "GET /wallets",
            "POST /auth/refresh-token",
            "GET /wallets",
        ]

    @pytest.mark.asyncio
    async def test_refresh_rejected(self, api_client):
        credentials = TokenStore()
        credentials.set_token("revoked-token")

        with pytest.raises(ApiClientError) as exc_info:
            await api_client.get("/wallets", credentials)

        assert exc_info.value.status == 401
        assert credentials.has_token is False

    @pytest.mark.asyncio
    async def test_validation_payload(self, api_client):
        credentials = TokenStore()
        credentials.set_token("good-token")

        with pytest.raises(ApiClientError) as exc_info:
            await api_client.post("/transfers/deposit", credentials, {"amount": "0"})

        assert exc_info.value.status == 422
        assert exc_info.value.server_message[0]["property"] == "amount"

    @pytest.mark.asyncio
    async def test_unreachable_host(self):
        client = ApiClient("http://127.0.0.1:9/api", timeout=2)
        try:
            with pytest.raises(ApiNetworkError):
                await client.get("/wallets")
        finally:
            await client.close()


class TestHealthServer:
    """Health endpoint."""

    @pytest.mark.asyncio
    async def test_health_polling(self):
        async with TestClient(TestServer(create_health_app(polling=True))) as client:
            response = await client.get("/health")
            body = await response.json()

        assert response.status == 200
        assert body["status"] == "ok"
        assert "standby" not in body["message"]

    @pytest.mark.asyncio
    async def test_health_standby(self):
        async with TestClient(TestServer(create_health_app(polling=False))) as client:
            response = await client.get("/health")
            body = await response.json()
            index = await client.get("/")
            page = await index.text()

        assert "standby" in body["message"]
        assert "Status: standby" in page
