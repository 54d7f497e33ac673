"""
Session middleware.

Attaches the chat's ``ChatSession`` to handler data and stores it back
after the handler ran.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware
from aiogram.types import Chat, TelegramObject, User
from loguru import logger

from app.services.session_store import SessionStore


class SessionMiddleware(BaseMiddleware):
    """
    Middleware for chat sessions.

    Sessions are keyed by chat id; private chats fall back to the user id
    when the update carries no chat (e.g. inline callbacks on old messages).

    Note: This middleware is registered on dp.update, so ``event_chat`` and
    ``event_from_user`` are already resolved by aiogram's context middleware.
    """

    def __init__(self, session_store: SessionStore) -> None:
        """Initialize middleware with the session store."""
        self.session_store = session_store

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Process update through middleware."""
        chat: Chat | None = data.get("event_chat")
        user: User | None = data.get("event_from_user")

        chat_id = chat.id if chat else (user.id if user else None)
        if chat_id is None:
            logger.debug("SessionMiddleware: update without chat or user, passing through")
            return await handler(event, data)

        session = await self.session_store.get(chat_id)
        data["chat_session"] = session
        try:
            return await handler(event, data)
        finally:
            await self.session_store.save(session)
