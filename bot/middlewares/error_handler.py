"""
Global Error Handler Middleware.

Catches unhandled exceptions from handlers.
Sends friendly message to users - never shows technical details.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware, Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Chat, TelegramObject
from loguru import logger

from app.utils.exceptions import ApiError, is_safe_to_ignore
from bot.messages.error_messages import GENERIC_ERROR, describe_api_error


class ErrorHandlerMiddleware(BaseMiddleware):
    """
    Global error handler middleware.

    - Logs all exceptions
    - Sends friendly message to the chat (no technical info!)
    """

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Execute middleware."""
        try:
            return await handler(event, data)
        except Exception as e:
            if is_safe_to_ignore(e):
                logger.warning(f"Ignoring Telegram API error: {e}")
                return None

            logger.exception(f"Unhandled exception: {e}")

            if isinstance(e, ApiError):
                text = describe_api_error(e, GENERIC_ERROR)
            else:
                text = GENERIC_ERROR

            bot: Bot | None = data.get("bot")
            chat: Chat | None = data.get("event_chat")
            if bot and chat:
                try:
                    await bot.send_message(chat_id=chat.id, text=text)
                except TelegramAPIError as notify_error:
                    logger.warning(f"Failed to notify chat {chat.id}: {notify_error}")

            # Return None to prevent crash
            return None
