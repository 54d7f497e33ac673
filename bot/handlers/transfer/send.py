"""
Send handlers.

/send entry point and the email recipient step.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, ForceReply, Message

from app.models.session import ChatSession, TransferType
from app.services.transfer_service import is_valid_email
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import Callbacks, send_method_keyboard
from bot.messages.user_messages import (
    INVALID_EMAIL,
    RECIPIENT_EMAIL_PROMPT,
    SEND_AMOUNT_PROMPT,
    SEND_METHOD_PROMPT,
)
from bot.states.transfer import TransferStates
from bot.utils.decorators import require_login
from bot.utils.text_utils import FREE_TEXT

from .eligibility import check_transfer_eligibility

router = Router(name="transfer_send")


@router.message(Command("send"))
@router.message(F.text == MainMenuButtons.SEND_MONEY)
@require_login
async def cmd_send(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Start a send: check preconditions, then offer email or wallet."""
    session: ChatSession = data["chat_session"]

    if not await check_transfer_eligibility(message, session, data["transfer_service"]):
        return

    session.transfer.reset()
    await state.clear()
    await message.answer(SEND_METHOD_PROMPT, reply_markup=send_method_keyboard())


@router.callback_query(F.data == Callbacks.SEND_EMAIL)
@require_login
async def callback_send_email(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    session.transfer.reset()
    session.transfer.type = TransferType.EMAIL

    await callback.answer()
    await state.set_state(TransferStates.waiting_for_recipient_email)
    await callback.message.answer(
        RECIPIENT_EMAIL_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter recipient email"),
    )


@router.message(TransferStates.waiting_for_recipient_email, FREE_TEXT)
async def process_recipient_email(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Store the recipient email and ask for the amount."""
    session: ChatSession = data["chat_session"]
    email = (message.text or "").strip()

    if not is_valid_email(email):
        await message.answer(INVALID_EMAIL)
        return

    session.transfer.type = TransferType.EMAIL
    session.transfer.recipient = email

    await state.set_state(TransferStates.waiting_for_amount)
    await message.answer(
        SEND_AMOUNT_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter amount"),
    )
