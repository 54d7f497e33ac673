"""
Common decorators for Telegram bot handlers.

Provides reusable decorators for authentication checks.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from aiogram.types import CallbackQuery, Message
from loguru import logger

from app.models.session import ChatSession
from bot.keyboards.reply import login_keyboard
from bot.messages.user_messages import LOGIN_REQUIRED

# Type variable for handler return type
T = TypeVar("T")


def require_login(
    handler: Callable[..., Awaitable[T]]
) -> Callable[..., Awaitable[T | None]]:
    """
    Decorator to require a logged-in chat session for handler.

    Checks the ``chat_session`` injected by ``SessionMiddleware``.
    Blocks access and offers the login keyboard if the chat is a guest.

    Usage:
        @router.message(Command("balance"))
        @require_login
        async def cmd_balance(message: Message, **data: Any) -> None:
            # Handler code here
            pass

    Args:
        handler: The handler function to decorate

    Returns:
        Wrapped handler that checks login status
    """

    @wraps(handler)
    async def wrapper(*args: Any, **kwargs: Any) -> T | None:
        # Extract event (Message or CallbackQuery) and data
        event = None
        data = kwargs

        # Find the event object in args
        for arg in args:
            if isinstance(arg, Message | CallbackQuery):
                event = arg
                break

        if not event:
            logger.error("require_login: No Message or CallbackQuery found in args")
            return None

        session: ChatSession | None = data.get("chat_session")
        if session is None or not session.is_authenticated:
            logger.debug(
                f"require_login: guest access blocked for "
                f"{event.from_user.id if event.from_user else 'unknown'}"
            )

            if isinstance(event, Message):
                await event.answer(LOGIN_REQUIRED, reply_markup=login_keyboard())
            elif isinstance(event, CallbackQuery):
                await event.answer(LOGIN_REQUIRED, show_alert=True)

            return None

        # Login check passed, call handler
        return await handler(*args, **kwargs)

    return wrapper
