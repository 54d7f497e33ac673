"""
Unit tests for ApiClient token handling.

Tests cover:
- Bearer token attachment
- Refresh before sending an expiring token
- Refresh and single retry on 401
- HTTP error classification
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.services.api_client import REFRESH_TOKEN_PATH, ApiClient
from app.services.token_store import TokenStore
from app.utils.exceptions import ApiClientError, ApiServerError, ApiTimeoutError


def make_credentials(expired: bool = False) -> TokenStore:
    credentials = TokenStore()
    credentials.set_token("old-token", ttl_seconds=-60 if expired else 3600)
    return credentials


class TestRequest:
    """Test request dispatch."""

    @pytest.mark.asyncio
    async def test_attaches_session_token(self):
        """The caller's token is used for the call."""
        client = ApiClient("https://api.test")
        credentials = make_credentials()
        with patch.object(client, "_send", AsyncMock(return_value=(200, {"ok": True}))) as send:
            result = await client.get("/wallets", credentials)

        assert result == {"ok": True}
        send.assert_awaited_once_with("GET", "/wallets", "old-token", None, None)

    @pytest.mark.asyncio
    async def test_anonymous_call(self):
        client = ApiClient("https://api.test")
        with patch.object(client, "_send", AsyncMock(return_value=(200, {"sid": "s"}))) as send:
            await client.post("/auth/email-otp/request", json_body={"email": "a@b.co"})

        send.assert_awaited_once_with(
            "POST", "/auth/email-otp/request", None, None, {"email": "a@b.co"}
        )

    @pytest.mark.asyncio
    async def test_refresh_before_expired_token(self):
        """An expiring token is refreshed before the call is sent."""
        client = ApiClient("https://api.test")
        credentials = make_credentials(expired=True)
        responses = [
            (200, {"accessToken": "new-token", "expireAt": "2099-01-01T00:00:00Z"}),
            (200, []),
        ]
        with patch.object(client, "_send", AsyncMock(side_effect=responses)) as send:
            await client.get("/wallets", credentials)

        assert credentials.token == "new-token"
        assert send.await_args_list[0].args[1] == REFRESH_TOKEN_PATH
        assert send.await_args_list[1].args[2] == "new-token"

    @pytest.mark.asyncio
    async def test_refresh_and_retry_on_401(self):
        """A 401 triggers one refresh and one retry."""
        client = ApiClient("https://api.test")
        credentials = make_credentials()
        responses = [
            (401, {"message": "Unauthorized"}),
            (200, {"accessToken": "new-token"}),
            (200, {"id": "w1"}),
        ]
        with patch.object(client, "_send", AsyncMock(side_effect=responses)) as send:
            result = await client.get("/wallets/default", credentials)

        assert result == {"id": "w1"}
        assert send.await_count == 3
        assert credentials.token == "new-token"

    @pytest.mark.asyncio
    async def test_retry_on_401_after_pre_send_refresh(self):
        """A successful pre-send refresh still allows one refresh-and-retry on 401."""
        client = ApiClient("https://api.test")
        credentials = make_credentials(expired=True)
        responses = [
            (200, {"accessToken": "mid-token", "expireAt": "2099-01-01T00:00:00Z"}),
            (401, {"message": "Unauthorized"}),
            (200, {"accessToken": "new-token", "expireAt": "2099-01-01T00:00:00Z"}),
            (200, {"ok": True}),
        ]
        with patch.object(client, "_send", AsyncMock(side_effect=responses)) as send:
            result = await client.get("/wallets", credentials)

        assert result == {"ok": True}
        assert [c.args[1] for c in send.await_args_list] == [
            REFRESH_TOKEN_PATH,
            "/wallets",
            REFRESH_TOKEN_PATH,
            "/wallets",
        ]
        assert send.await_args_list[3].args[2] == "new-token"

    @pytest.mark.asyncio
    async def test_second_401_is_not_retried(self):
        """The retried call's 401 is final."""
        client = ApiClient("https://api.test")
        credentials = make_credentials()
        responses = [
            (401, {"message": "Unauthorized"}),
            (200, {"accessToken": "new-token", "expireAt": "2099-01-01T00:00:00Z"}),
            (401, {"message": "Unauthorized"}),
        ]
        with patch.object(client, "_send", AsyncMock(side_effect=responses)) as send:
            with pytest.raises(ApiClientError) as exc_info:
                await client.get("/wallets", credentials)

        assert exc_info.value.status == 401
        assert send.await_count == 3

    @pytest.mark.asyncio
    async def test_failed_refresh_before_send(self):
        """Refresh failure sends the call unauthenticated and does not retry the 401."""
        client = ApiClient("https://api.test")
        credentials = make_credentials(expired=True)
        responses = [
            (401, {"message": "Invalid token"}),
            (401, {"message": "Unauthorized"}),
        ]
        with patch.object(client, "_send", AsyncMock(side_effect=responses)) as send:
            with pytest.raises(ApiClientError):
                await client.get("/wallets", credentials)

        assert credentials.has_token is False
        assert send.await_count == 2
        assert send.await_args_list[1].args[2] is None

    @pytest.mark.asyncio
    async def test_failed_refresh_clears_token(self):
        """A rejected refresh leaves the session without a token."""
        client = ApiClient("https://api.test")
        credentials = make_credentials()
        responses = [
            (401, {"message": "Unauthorized"}),
            (401, {"message": "Invalid refresh"}),
        ]
        with patch.object(client, "_send", AsyncMock(side_effect=responses)):
            with pytest.raises(ApiClientError):
                await client.get("/auth/me", credentials)

        assert credentials.has_token is False


class TestErrors:
    """Test HTTP error classification."""

    @pytest.mark.asyncio
    async def test_client_error_keeps_payload(self):
        client = ApiClient("https://api.test")
        payload = {"message": [{"property": "amount", "constraints": {"min": "too small"}}]}
        with patch.object(client, "_send", AsyncMock(return_value=(422, payload))):
            with pytest.raises(ApiClientError) as exc_info:
                await client.post("/transfers/deposit", make_credentials(), {})

        assert exc_info.value.status == 422
        assert exc_info.value.payload == payload

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = ApiClient("https://api.test")
        with patch.object(client, "_send", AsyncMock(return_value=(503, "down"))):
            with pytest.raises(ApiServerError) as exc_info:
                await client.get("/wallets", make_credentials())

        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_timeout_propagates(self):
        client = ApiClient("https://api.test")
        with patch.object(client, "_send", AsyncMock(side_effect=ApiTimeoutError("slow"))):
            with pytest.raises(ApiTimeoutError):
                await client.get("/wallets", make_credentials())

    @pytest.mark.asyncio
    async def test_server_message(self):
        error = ApiClientError("x", status=400, payload={"message": "Cannot GET /x"})
        assert error.server_message == "Cannot GET /x"
