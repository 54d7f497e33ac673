"""
Notification utilities.

Delivers push notification events to the chat that owns the session.
"""

import asyncio
from typing import Any

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from loguru import logger

from app.config.constants import TELEGRAM_TIMEOUT
from app.services.session_store import SessionStore
from app.services.wallet_service import WalletService
from app.utils.exceptions import ApiError
from bot.utils.notification_formatter import format_notification


async def send_chat_message(
    bot: Bot,
    chat_id: int,
    text: str,
    parse_mode: str = "HTML",
) -> bool:
    """
    Send one message with a timeout.

    Args:
        bot: Bot instance
        chat_id: Target chat
        text: Message text
        parse_mode: Parse mode (HTML by default)

    Returns:
        True if the message was delivered
    """
    try:
        await asyncio.wait_for(
            bot.send_message(
                chat_id,
                text,
                parse_mode=parse_mode,
                disable_web_page_preview=True,
            ),
            timeout=TELEGRAM_TIMEOUT,
        )
        return True
    except TimeoutError:
        logger.error(f"Timeout sending notification to chat {chat_id}")
        return False
    except TelegramAPIError as e:
        logger.error(f"Failed to send notification to chat {chat_id}: {e}")
        return False


class NotificationDispatcher:
    """
    Event sink for the notification bridge.

    Called as ``dispatcher(chat_id, event_name, data)`` on the bot's event
    loop. Deposits also trigger a balance refresh so the next /balance call
    reflects the credited funds.
    """

    def __init__(
        self,
        bot: Bot,
        session_store: SessionStore,
        wallet_service: WalletService,
    ) -> None:
        self.bot = bot
        self.session_store = session_store
        self.wallet_service = wallet_service

    async def __call__(self, chat_id: int, event_name: str, data: dict[str, Any]) -> None:
        text = format_notification(event_name, data)
        delivered = await send_chat_message(self.bot, chat_id, text)
        if delivered:
            logger.info(f"{event_name} notification sent to chat {chat_id}")

        if event_name == "deposit":
            await self._refresh_balances(chat_id)

    async def _refresh_balances(self, chat_id: int) -> None:
        session = await self.session_store.get(chat_id)
        if not session.is_authenticated:
            return
        try:
            await self.wallet_service.get_balances(session.credentials)
        except ApiError as e:
            logger.warning(f"Balance refresh after deposit failed for chat {chat_id}: {e}")
