"""
Parse Error Handler Middleware.

Catches TelegramBadRequest errors related to HTML entity parsing
so a broken template never surfaces as a generic failure.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware, Bot
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.types import Chat, TelegramObject
from loguru import logger

FORMATTING_ERROR = "⚠️ This message could not be displayed. Please try again or use /support."


class ParseErrorHandlerMiddleware(BaseMiddleware):
    """Middleware that turns entity parse errors into a plain-text notice."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Process update with parse error handling."""
        try:
            return await handler(event, data)
        except TelegramBadRequest as e:
            if "can't parse entities" not in str(e):
                # Re-raise non-parsing errors
                raise

            logger.warning(f"Entity parse error caught by middleware: {e}")

            bot: Bot | None = data.get("bot")
            chat: Chat | None = data.get("event_chat")
            if bot and chat:
                try:
                    await bot.send_message(chat_id=chat.id, text=FORMATTING_ERROR)
                except TelegramAPIError as notify_error:
                    logger.warning(f"Failed to send formatting notice: {notify_error}")

            return None
