"""
Notification bridge.

Relays Pusher ``deposit``/``withdrawal`` events from an organization's
private channel to the chat that owns the session.

pysher runs its websocket on a background thread. Every callback coming from
that thread is handed to the bot's event loop with
``asyncio.run_coroutine_threadsafe`` so chat handling is never blocked.
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import pysher
from loguru import logger

from app.config.constants import NOTIFICATION_EVENTS, PUSHER_CHANNEL_PREFIX
from app.services.api_client import ApiClient
from app.services.token_store import TokenStore
from app.utils.exceptions import ApiError

EventHandler = Callable[[int, str, dict[str, Any]], Awaitable[None]]
ClientFactory = Callable[..., Any]

AUTH_TIMEOUT_SECONDS = 30


def channel_name_for(organization_id: str) -> str:
    return f"{PUSHER_CHANNEL_PREFIX}{organization_id}"


def decode_event_data(data: Any) -> dict[str, Any]:
    """Pusher delivers event data as a JSON string; tolerate dicts too."""
    if isinstance(data, dict):
        return data
    if isinstance(data, (str, bytes)):
        try:
            decoded = json.loads(data)
        except ValueError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


@dataclass
class _Subscription:
    chat_id: int
    organization_id: str
    client: Any


class NotificationBridge:
    """
    One Pusher subscription per ``(chat_id, organization_id)``.

    ``arm`` is idempotent: arming an already armed key does nothing.
    """

    def __init__(
        self,
        api: ApiClient,
        pusher_key: str | None,
        pusher_cluster: str,
        on_event: EventHandler,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """
        Initialize bridge.

        Args:
            api: API client used for the channel authorization round-trip
            pusher_key: Pusher app key (bridge is disabled without it)
            pusher_cluster: Pusher cluster name
            on_event: Coroutine called as ``on_event(chat_id, event, data)``
            client_factory: Builds the Pusher client (``pysher.Pusher``)
        """
        self.api = api
        self.pusher_key = pusher_key
        self.pusher_cluster = pusher_cluster
        self.on_event = on_event
        self.client_factory = client_factory or pysher.Pusher
        self._subscriptions: dict[tuple[int, str], _Subscription] = {}
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.pusher_key)

    @property
    def active_count(self) -> int:
        return len(self._subscriptions)

    async def arm(
        self,
        chat_id: int,
        credentials: TokenStore,
        organization_id: str | None,
    ) -> bool:
        """
        Subscribe the chat to its organization's notifications.

        Args:
            chat_id: Telegram chat to deliver events to
            credentials: The chat's token store (used to authorize the channel)
            organization_id: Organization whose channel to join

        Returns:
            True if a new subscription was opened
        """
        if not self.enabled:
            logger.debug("Pusher key not configured, notifications disabled")
            return False
        if not organization_id:
            logger.warning(f"Chat {chat_id} has no organization id, skipping notifications")
            return False

        key = (chat_id, organization_id)
        if key in self._subscriptions:
            return False

        self._loop = asyncio.get_running_loop()
        client = self.client_factory(self.pusher_key, cluster=self.pusher_cluster)
        # Register before connecting so a second arm() is a no-op
        self._subscriptions[key] = _Subscription(chat_id, organization_id, client)

        channel_name = channel_name_for(organization_id)

        def on_connected(data: Any) -> None:
            socket_id = decode_event_data(data).get("socket_id")
            if not socket_id:
                logger.error(f"Pusher connection for chat {chat_id} has no socket id")
                return
            self._subscribe(client, chat_id, channel_name, socket_id, credentials)

        client.connection.bind("pusher:connection_established", on_connected)
        client.connect()
        logger.info(f"Notifications armed for chat {chat_id}, channel {channel_name}")
        return True

    def _subscribe(
        self,
        client: Any,
        chat_id: int,
        channel_name: str,
        socket_id: str,
        credentials: TokenStore,
    ) -> None:
        """Authorize and subscribe (runs on the pysher thread)."""
        if self._loop is None:
            return
        future = asyncio.run_coroutine_threadsafe(
            self.authorize(credentials, socket_id, channel_name), self._loop
        )
        try:
            auth = future.result(timeout=AUTH_TIMEOUT_SECONDS)
        except Exception as e:
            logger.error(f"Pusher authorization failed for chat {chat_id}: {e}")
            return
        if not auth:
            logger.error(f"Pusher authorization for chat {chat_id} returned no signature")
            return

        channel = client.subscribe(channel_name, auth=auth)
        for event_name in NOTIFICATION_EVENTS:
            channel.bind(event_name, self._make_callback(chat_id, event_name))
        logger.info(f"Subscribed chat {chat_id} to {channel_name}")

    async def authorize(
        self,
        credentials: TokenStore,
        socket_id: str,
        channel_name: str,
    ) -> str | None:
        """Get the channel signature from ``/notifications/auth``."""
        try:
            payload = await self.api.post(
                "/notifications/auth",
                credentials,
                {"socket_id": socket_id, "channel_name": channel_name},
            )
        except ApiError as e:
            logger.error(f"Notification auth request failed: {e}")
            return None
        if isinstance(payload, dict):
            return payload.get("auth")
        return None

    def _make_callback(self, chat_id: int, event_name: str) -> Callable[[Any], None]:
        def callback(data: Any = None, *args: Any) -> None:
            if self._loop is None or self._loop.is_closed():
                return
            asyncio.run_coroutine_threadsafe(
                self._deliver(chat_id, event_name, decode_event_data(data)),
                self._loop,
            )

        return callback

    async def _deliver(self, chat_id: int, event_name: str, data: dict[str, Any]) -> None:
        logger.info(f"{event_name} event received for chat {chat_id}")
        try:
            await self.on_event(chat_id, event_name, data)
        except Exception as e:
            logger.exception(f"Error delivering {event_name} notification to chat {chat_id}: {e}")

    async def disarm(self, chat_id: int, organization_id: str | None) -> bool:
        """Disconnect the chat's subscription, if any."""
        if not organization_id:
            return False
        subscription = self._subscriptions.pop((chat_id, organization_id), None)
        if subscription is None:
            return False
        try:
            subscription.client.disconnect()
        except Exception as e:
            logger.warning(f"Error disconnecting Pusher for chat {chat_id}: {e}")
        logger.info(f"Notifications disarmed for chat {chat_id}")
        return True

    async def close(self) -> None:
        """Disarm every subscription."""
        for chat_id, organization_id in list(self._subscriptions):
            await self.disarm(chat_id, organization_id)
        logger.info("Notification bridge closed")
