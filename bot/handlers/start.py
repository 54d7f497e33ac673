"""
Start handler.

Handles /start, /help and /support.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, ReplyKeyboardMarkup
from loguru import logger

from app.config.settings import settings
from app.models.session import ChatSession
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.reply import guest_keyboard, main_menu_keyboard
from bot.messages.user_messages import (
    HELP_MESSAGE,
    QUICK_ACCESS,
    support_message,
    welcome_message,
)

router = Router(name="start")


def _menu_for(session: ChatSession | None) -> ReplyKeyboardMarkup:
    if session is not None and session.is_authenticated:
        return main_menu_keyboard()
    return guest_keyboard()


@router.message(CommandStart())
async def cmd_start(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Greet the user and show the command overview."""
    session: ChatSession | None = data.get("chat_session")
    first_name = message.from_user.first_name if message.from_user else None
    logger.info(f"/start from chat {message.chat.id}")

    await state.clear()
    if session is not None:
        session.reset_flows()

    await message.answer(welcome_message(first_name), parse_mode="HTML")
    await message.answer(QUICK_ACCESS, reply_markup=_menu_for(session))


@router.message(Command("help"))
@router.message(F.text == MainMenuButtons.HELP)
async def cmd_help(
    message: Message,
    **data: Any,
) -> None:
    session: ChatSession | None = data.get("chat_session")
    await message.answer(
        HELP_MESSAGE,
        parse_mode="HTML",
        reply_markup=_menu_for(session),
    )


@router.message(Command("support"))
@router.message(F.text == MainMenuButtons.SUPPORT)
async def cmd_support(
    message: Message,
    **data: Any,
) -> None:
    """Show the community support link."""
    await message.answer(
        support_message(settings.support_link),
        parse_mode="HTML",
        disable_web_page_preview=False,
    )
