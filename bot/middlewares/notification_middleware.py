"""
Notification middleware.

Arms push notifications for every authenticated chat after its update was
handled. Arming is idempotent, so this is a no-op for already armed chats.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject
from loguru import logger

from app.models.session import ChatSession
from app.services.notification_bridge import NotificationBridge


class NotificationMiddleware(BaseMiddleware):
    """Ensures the notification bridge is armed for logged-in chats."""

    def __init__(self, bridge: NotificationBridge) -> None:
        self.bridge = bridge

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        result = await handler(event, data)

        session: ChatSession | None = data.get("chat_session")
        if (
            self.bridge.enabled
            and session is not None
            and session.is_authenticated
            and session.user is not None
            and session.user.organization_id
        ):
            try:
                await self.bridge.arm(
                    session.chat_id,
                    session.credentials,
                    session.user.organization_id,
                )
            except Exception as e:
                logger.exception(f"Failed to arm notifications for chat {session.chat_id}: {e}")

        return result
