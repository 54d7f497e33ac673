"""
Transfer confirmation handlers.

Amount entry, fee quote, confirmation and execution for every transfer
type. The transfer flow state is empty after confirm or cancel, whatever
the outcome.
"""

from typing import Any

from aiogram import F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from loguru import logger

from app.models.records import FeeInfo
from app.models.session import ChatSession, TransferFlowState, TransferType
from app.services.transfer_service import TransferService, is_valid_amount
from app.utils.exceptions import ApiError, RecipientNotEligibleError
from bot.keyboards.inline import Callbacks, transfer_confirm_keyboard
from bot.messages.error_messages import describe_api_error
from bot.messages.user_messages import (
    BANK_WITHDRAW_SUCCESS,
    INVALID_AMOUNT,
    TRANSFER_CANCELLED,
    TRANSFER_FAILED,
    TRANSFER_MISSING_DATA,
    TRANSFER_STATE_INVALID,
    TRANSFER_SUCCESS,
    recipient_not_eligible,
)
from bot.states.transfer import TransferStates
from bot.utils.decorators import require_login
from bot.utils.formatters import format_transfer_confirmation
from bot.utils.text_utils import FREE_TEXT

router = Router(name="transfer_confirm")


@router.message(TransferStates.waiting_for_amount, FREE_TEXT)
async def process_amount(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """
    Store the amount and show the confirmation screen.

    The fee quote is best-effort: without it the confirmation is shown
    without a fee breakdown.
    """
    session: ChatSession = data["chat_session"]
    transfer_service: TransferService = data["transfer_service"]
    flow = session.transfer
    amount = (message.text or "").strip()

    if flow.type is None:
        await state.clear()
        await message.answer(TRANSFER_STATE_INVALID)
        return

    if not is_valid_amount(amount):
        await message.answer(INVALID_AMOUNT)
        return

    flow.amount = amount

    fee: FeeInfo | None = None
    try:
        fee = await transfer_service.get_fee_info(
            session.credentials, flow.type.value, amount, flow.network
        )
    except ApiError as e:
        logger.warning(f"Fee info unavailable for chat {session.chat_id}: {e}")

    await state.set_state(TransferStates.waiting_for_confirmation)
    await message.answer(
        format_transfer_confirmation(flow, fee),
        parse_mode="HTML",
        reply_markup=transfer_confirm_keyboard(),
    )


async def execute_transfer(
    transfer_service: TransferService,
    session: ChatSession,
    flow: TransferFlowState,
) -> str:
    """
    Run the transfer described by ``flow``.

    Returns:
        Message to show the user
    """
    if flow.type is None:
        return TRANSFER_STATE_INVALID
    if not flow.amount or (flow.type != TransferType.BANK and not flow.recipient):
        return TRANSFER_MISSING_DATA

    try:
        if flow.type == TransferType.EMAIL:
            await transfer_service.send_to_email(session.credentials, flow.recipient, flow.amount)
        elif flow.type == TransferType.WALLET:
            if not flow.network:
                return "❌ Missing network. Please start the transfer process again."
            await transfer_service.send_to_wallet(
                session.credentials, flow.recipient, flow.amount, flow.network
            )
        else:
            await transfer_service.withdraw_to_bank(session.credentials, flow.amount)
    except RecipientNotEligibleError as e:
        logger.info(f"Recipient rejected for chat {session.chat_id}: {e.reason}")
        return recipient_not_eligible(e.reason)
    except ApiError as e:
        logger.error(f"Error processing {flow.type.value} transfer for chat {session.chat_id}: {e}")
        return describe_api_error(e, TRANSFER_FAILED)

    if flow.type == TransferType.BANK:
        return BANK_WITHDRAW_SUCCESS
    return TRANSFER_SUCCESS


@router.callback_query(F.data == Callbacks.TRANSFER_CONFIRM)
@require_login
async def callback_confirm_transfer(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    transfer_service: TransferService = data["transfer_service"]
    await callback.answer()

    flow = TransferFlowState(
        type=session.transfer.type,
        recipient=session.transfer.recipient,
        amount=session.transfer.amount,
        network=session.transfer.network,
    )
    try:
        text = await execute_transfer(transfer_service, session, flow)
    finally:
        session.transfer.reset()
        await state.clear()

    await callback.message.edit_text(text)


@router.callback_query(F.data == Callbacks.TRANSFER_CANCEL)
async def callback_cancel_transfer(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    session.transfer.reset()
    await state.clear()

    await callback.answer()
    await callback.message.edit_text(TRANSFER_CANCELLED)
