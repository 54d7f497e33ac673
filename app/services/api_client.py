"""
Copperx payout API client.

Thin aiohttp wrapper around the REST API:
- attaches the calling session's bearer token
- refreshes an expiring token before the call is sent
- refreshes and retries once on 401
- converts transport and HTTP failures into typed ``ApiError`` subclasses
"""

import asyncio
import json
from typing import Any

import aiohttp
from loguru import logger

from app.services.token_store import TokenStore
from app.utils.datetime_utils import seconds_until
from app.utils.exceptions import (
    ApiClientError,
    ApiError,
    ApiNetworkError,
    ApiServerError,
    ApiTimeoutError,
)

REFRESH_TOKEN_PATH = "/auth/refresh-token"


class ApiClient:
    """
    Client for the payout REST API.

    The client holds no credentials of its own. Every call receives the
    chat session's ``TokenStore`` so concurrent chats never share a token.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize API client.

        Args:
            base_url: API root, e.g. ``https://income-api.copperx.io/api``
            timeout: Total timeout per HTTP call in seconds
            session: Optional externally managed aiohttp session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    @staticmethod
    async def _read_payload(response: aiohttp.ClientResponse) -> Any:
        text = await response.text()
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def _send(
        self,
        method: str,
        path: str,
        token: str | None,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> tuple[int, Any]:
        """
        Perform one HTTP call.

        Returns:
            Tuple of (status, decoded payload)

        Raises:
            ApiTimeoutError: Timeout ceiling reached
            ApiNetworkError: Host unreachable or connection dropped
        """
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            session = await self._get_session()
            async with session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                payload = await self._read_payload(response)
                return response.status, payload
        except asyncio.TimeoutError as e:
            logger.warning(f"API call timed out: {method} {path}")
            raise ApiTimeoutError(
                f"Request {method} {path} timed out after {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            logger.warning(f"API call failed: {method} {path}: {e}")
            raise ApiNetworkError(f"Request {method} {path} failed: {e}") from e

    @staticmethod
    def _raise_for_status(method: str, path: str, status: int, payload: Any) -> Any:
        if status < 400:
            return payload

        message = f"{method} {path} returned {status}"
        if isinstance(payload, dict) and payload.get("message"):
            message = f"{message}: {payload['message']}"

        if status >= 500:
            raise ApiServerError(message, status=status, payload=payload)
        raise ApiClientError(message, status=status, payload=payload)

    async def refresh_token(self, credentials: TokenStore) -> bool:
        """
        Exchange the current token for a fresh one.

        Args:
            credentials: Session token store, updated in place on success

        Returns:
            True if a new token was stored
        """
        try:
            status, payload = await self._send(
                "POST", REFRESH_TOKEN_PATH, credentials.token
            )
        except ApiError as e:
            logger.error(f"Failed to refresh token: {e}")
            return False

        if status >= 400 or not isinstance(payload, dict):
            logger.warning(f"Token refresh rejected with status {status}")
            return False

        access_token = payload.get("accessToken")
        if not access_token:
            logger.warning("Token refresh response has no accessToken")
            return False

        credentials.set_token(access_token, seconds_until(payload.get("expireAt")))
        logger.info("Token refreshed successfully")
        return True

    async def request(
        self,
        method: str,
        path: str,
        credentials: TokenStore | None = None,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        """
        Call an endpoint with token lifecycle handling.

        A token inside its expiry buffer is refreshed before sending. A 401
        is then refreshed and retried once, unless the pre-send refresh
        already failed.

        Args:
            method: HTTP method
            path: Endpoint path relative to the base URL
            credentials: Session token store (None for anonymous calls)
            params: Query parameters
            json_body: JSON request body

        Returns:
            Decoded response payload

        Raises:
            ApiError: Any transport or HTTP failure
        """
        refresh_failed = False
        if credentials is not None and credentials.has_token and credentials.is_expired():
            logger.info(f"Token expired before {method} {path}, attempting to refresh...")
            if not await self.refresh_token(credentials):
                # Continue without token, caller handles the 401
                refresh_failed = True
                credentials.clear()

        token = credentials.token if credentials is not None else None
        status, payload = await self._send(method, path, token, params, json_body)

        if (
            status == 401
            and not refresh_failed
            and credentials is not None
            and credentials.has_token
        ):
            logger.info(f"Unauthorized on {method} {path}, attempting to refresh token...")
            if await self.refresh_token(credentials):
                status, payload = await self._send(
                    method, path, credentials.token, params, json_body
                )
            else:
                credentials.clear()

        return self._raise_for_status(method, path, status, payload)

    async def get(
        self,
        path: str,
        credentials: TokenStore | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("GET", path, credentials, params=params)

    async def post(
        self,
        path: str,
        credentials: TokenStore | None = None,
        json_body: Any = None,
    ) -> Any:
        return await self.request("POST", path, credentials, json_body=json_body)
