"""
Auth middleware.

Keeps the session token fresh before a handler runs and ends the session
when the token can no longer be refreshed.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from aiogram import BaseMiddleware, Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.fsm.context import FSMContext
from aiogram.types import TelegramObject
from loguru import logger

from app.models.session import ChatSession
from app.services.api_client import ApiClient
from app.services.notification_bridge import NotificationBridge
from bot.keyboards.reply import login_keyboard
from bot.messages.user_messages import SESSION_EXPIRED


class AuthMiddleware(BaseMiddleware):
    """
    Token refresh middleware.

    Runs after ``SessionMiddleware``. Guests pass through untouched; for a
    logged-in chat with an expiring token one refresh is attempted. If it
    fails, or a refresh inside the handler's own API calls fails, the chat
    is logged out, its flows are reset and it is asked to log in again.
    """

    def __init__(self, api: ApiClient, bridge: NotificationBridge) -> None:
        self.api = api
        self.bridge = bridge

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        session: ChatSession | None = data.get("chat_session")
        if session is None:
            return await handler(event, data)

        if session.is_authenticated and session.credentials.is_expired():
            logger.info(f"Token for chat {session.chat_id} is expiring, refreshing")
            if not await self.api.refresh_token(session.credentials):
                await self._expire_session(session, data)
                return None

        try:
            return await handler(event, data)
        finally:
            # ApiClient clears the token when a refresh fails mid-call
            if session.user is not None and not session.credentials.has_token:
                await self._expire_session(session, data)

    async def _expire_session(self, session: ChatSession, data: dict[str, Any]) -> None:
        logger.warning(f"Session expired for chat {session.chat_id}")

        organization_id = session.user.organization_id if session.user else None
        await self.bridge.disarm(session.chat_id, organization_id)
        session.logout()

        state: FSMContext | None = data.get("state")
        if state:
            await state.clear()

        bot: Bot | None = data.get("bot")
        if bot is None:
            return
        try:
            await bot.send_message(
                chat_id=session.chat_id,
                text=SESSION_EXPIRED,
                reply_markup=login_keyboard(),
            )
        except TelegramAPIError as e:
            logger.warning(f"Failed to send session expiration message: {e}")
