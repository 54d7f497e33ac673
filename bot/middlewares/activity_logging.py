"""
User Activity Logging Middleware.

Logs every interaction with the bot.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update
from loguru import logger

from bot.utils.text_utils import is_menu_button


def describe_update(update: Update) -> str:
    """
    Short description of an update for the log.

    Commands, menu buttons and callback data are logged verbatim. Free text
    (emails, OTPs, addresses) is reduced to its length.
    """
    if update.message:
        text = update.message.text
        if text is None:
            return f"message ({update.message.content_type})"
        if text.startswith("/") or is_menu_button(text):
            return f"message {text!r}"
        return f"text ({len(text)} chars)"
    if update.callback_query:
        return f"callback {update.callback_query.data!r}"
    return f"update {update.event_type}"


class ActivityLoggingMiddleware(BaseMiddleware):
    """Middleware that logs all user interactions."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Process event and log activity."""
        if isinstance(event, Update):
            chat = data.get("event_chat")
            chat_id = chat.id if chat else "unknown"
            logger.info(f"Chat {chat_id}: {describe_update(event)}")
        return await handler(event, data)
