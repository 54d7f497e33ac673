"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings()
# Token must match the Telegram bot token format checked by the validator
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456789:ABCdefGHIjklMNOpqrsTUVwxyz123456789")
os.environ.setdefault("API_BASE_URL", "https://income-api.copperx.io/api")
os.environ.setdefault("PUSHER_KEY", "test-pusher-key")
os.environ.setdefault("PUSHER_CLUSTER", "ap1")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import CallbackQuery, Message

from app.models.session import ChatSession, UserRecord

CHAT_ID = 100500


@pytest.fixture
def mock_bot():
    """Mock Telegram Bot."""
    bot = AsyncMock()
    bot.id = 1
    bot.send_message = AsyncMock()
    bot.edit_message_text = AsyncMock()
    bot.answer_callback_query = AsyncMock()
    bot.session = AsyncMock()
    bot.session.close = AsyncMock()
    return bot


@pytest.fixture
def mock_api():
    """Mock ApiClient: get/post are AsyncMocks configured per test."""
    api = MagicMock()
    api.get = AsyncMock()
    api.post = AsyncMock()
    api.request = AsyncMock()
    api.refresh_token = AsyncMock(return_value=True)
    api.close = AsyncMock()
    return api


@pytest.fixture
def guest_session():
    """Session of a chat that never logged in."""
    return ChatSession(chat_id=CHAT_ID)


@pytest.fixture
def logged_in_session():
    """Session with a user and a live token."""
    session = ChatSession(chat_id=CHAT_ID)
    session.credentials.set_token("test-token")
    session.user = UserRecord(
        user_id="user-1",
        email="alice@example.com",
        organization_id="org-1",
        first_name="Alice",
    )
    return session


@pytest_asyncio.fixture
async def fsm_state():
    """Real FSMContext backed by MemoryStorage."""
    storage = MemoryStorage()
    state = FSMContext(
        storage=storage,
        key=StorageKey(bot_id=1, chat_id=CHAT_ID, user_id=CHAT_ID),
    )
    yield state
    await storage.close()


@pytest.fixture
def make_message():
    """
    Build a mocked Message.

    Returns:
        Factory ``make_message(text, reply_to_text=None)``
    """

    def factory(text: str | None, reply_to_text: str | None = None) -> MagicMock:
        message = MagicMock(spec=Message)
        message.text = text
        message.chat = MagicMock(id=CHAT_ID)
        message.from_user = MagicMock(id=CHAT_ID, is_bot=False)
        message.answer = AsyncMock()
        message.edit_text = AsyncMock()
        message.delete = AsyncMock()
        if reply_to_text is None:
            message.reply_to_message = None
        else:
            message.reply_to_message = MagicMock(
                text=reply_to_text,
                from_user=MagicMock(is_bot=True),
            )
        return message

    return factory


@pytest.fixture
def make_callback(make_message):
    """
    Build a mocked CallbackQuery.

    Returns:
        Factory ``make_callback(data)``
    """

    def factory(data: str) -> MagicMock:
        callback = MagicMock(spec=CallbackQuery)
        callback.data = data
        callback.from_user = MagicMock(id=CHAT_ID, is_bot=False)
        callback.answer = AsyncMock()
        callback.message = make_message(None)
        return callback

    return factory
