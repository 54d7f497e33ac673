"""
Transaction history handlers.

Paged transfer list with per-transfer drill-down.
"""

from typing import Any

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message
from loguru import logger

from app.models.session import ChatSession
from app.services.transfer_service import TransferService
from app.utils.exceptions import ApiError
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import Callbacks, back_to_history_keyboard, history_keyboard
from bot.messages.error_messages import describe_api_error
from bot.messages.user_messages import NO_TRANSACTIONS, TRANSFER_NOT_FOUND
from bot.utils.callback_parsers import parse_callback_value
from bot.utils.decorators import require_login
from bot.utils.formatters import format_history_page, format_transfer_details

router = Router(name="history")

HISTORY_FETCH_FAILED = "❌ Failed to fetch transaction history. Please try again later."
TRANSFER_FETCH_FAILED = "❌ Failed to fetch transfer details. Please try again later."


async def _render_history(
    session: ChatSession,
    transfer_service: TransferService,
) -> tuple[str, InlineKeyboardMarkup | None]:
    """
    Fetch the current history page.

    Returns:
        Tuple of (text, keyboard); keyboard is None when there is nothing to page
    """
    paging = session.history
    page = await transfer_service.get_transfers(
        session.credentials, page=paging.page, limit=paging.page_size
    )
    paging.total_pages = page.total_pages

    if not page.items:
        if paging.page > 1:
            # Stale page past the end: fall back to the first page
            paging.page = 1
            return await _render_history(session, transfer_service)
        return NO_TRANSACTIONS, None

    return (
        format_history_page(page),
        history_keyboard(page.items, paging.page, page.total_pages),
    )


@router.message(Command("history"))
@router.message(F.text.in_({MainMenuButtons.TRANSACTIONS, MainMenuButtons.HISTORY}))
@require_login
async def cmd_history(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Show the first page of transaction history."""
    session: ChatSession = data["chat_session"]
    transfer_service: TransferService = data["transfer_service"]

    session.history.page = 1
    try:
        text, keyboard = await _render_history(session, transfer_service)
    except ApiError as e:
        logger.error(f"Error fetching history for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, HISTORY_FETCH_FAILED))
        return

    await message.answer(text, parse_mode="HTML", reply_markup=keyboard)


@router.callback_query(
    F.data.in_({Callbacks.HISTORY_PREV, Callbacks.HISTORY_NEXT, Callbacks.HISTORY_REFRESH})
)
@require_login
async def callback_history_page(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    """Move between history pages, or reload from page 1 on refresh."""
    session: ChatSession = data["chat_session"]
    transfer_service: TransferService = data["transfer_service"]

    if callback.data == Callbacks.HISTORY_PREV:
        session.history.previous()
    elif callback.data == Callbacks.HISTORY_NEXT:
        session.history.next()
    else:
        session.history.page = 1

    await callback.answer()
    try:
        text, keyboard = await _render_history(session, transfer_service)
    except ApiError as e:
        logger.error(f"Error fetching history page for chat {session.chat_id}: {e}")
        await callback.message.answer(describe_api_error(e, HISTORY_FETCH_FAILED))
        return

    try:
        await callback.message.edit_text(text, parse_mode="HTML", reply_markup=keyboard)
    except TelegramBadRequest as e:
        if "message is not modified" not in str(e):
            raise
        logger.debug(f"History page unchanged for chat {session.chat_id}")


@router.callback_query(F.data.startswith(Callbacks.VIEW_TRANSFER_PREFIX))
@require_login
async def callback_view_transfer(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    transfer_service: TransferService = data["transfer_service"]
    transfer_id = parse_callback_value(callback.data, Callbacks.VIEW_TRANSFER_PREFIX)

    await callback.answer()
    if not transfer_id:
        await callback.message.answer(TRANSFER_NOT_FOUND)
        return

    try:
        transfer = await transfer_service.get_transfer(session.credentials, transfer_id)
    except ApiError as e:
        if e.status in (403, 404):
            transfer = None
        else:
            logger.error(f"Error fetching transfer {transfer_id} for chat {session.chat_id}: {e}")
            await callback.message.answer(describe_api_error(e, TRANSFER_FETCH_FAILED))
            return

    if transfer is None:
        await callback.message.edit_text(TRANSFER_NOT_FOUND, reply_markup=back_to_history_keyboard())
        return

    await callback.message.edit_text(
        format_transfer_details(transfer),
        parse_mode="HTML",
        reply_markup=back_to_history_keyboard(),
    )
