"""
Deposit handlers.

Chain selection, amount entry and deposit creation.
"""

from decimal import Decimal
from typing import Any

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, ForceReply, Message
from loguru import logger

from app.config.constants import DEFAULT_CURRENCY, MIN_DEPOSIT_AMOUNT, SUPPORTED_DEPOSIT_CHAINS
from app.models.records import Deposit
from app.models.session import ChatSession
from app.services.auth_service import AuthService
from app.services.transfer_service import (
    TransferService,
    format_validation_errors,
    is_valid_amount,
)
from app.utils.exceptions import ApiError
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import Callbacks, deposit_chain_keyboard, history_link_keyboard
from bot.keyboards.reply import limited_keyboard
from bot.messages.error_messages import describe_api_error
from bot.messages.user_messages import (
    DEPOSIT_AMOUNT_PROMPT,
    DEPOSIT_CHAIN_PROMPT,
    DEPOSIT_CREATING,
    DEPOSIT_KYC_REQUIRED,
    DEPOSIT_MIN_AMOUNT,
    DEPOSIT_NOTIFICATION_HINT,
    DEPOSIT_STATE_INVALID,
    INVALID_AMOUNT,
)
from bot.states.deposit import DepositStates
from bot.utils.callback_parsers import parse_callback_value
from bot.utils.decorators import require_login
from bot.utils.formatters import escape, format_network_name
from bot.utils.text_utils import FREE_TEXT

router = Router(name="deposit")

DEPOSIT_FAILED = "❌ Failed to create deposit transaction."
KYC_CHECK_FAILED = "❌ Failed to verify deposit eligibility. Please try again later."


async def show_chain_selection(message: Message, state: FSMContext) -> None:
    """Offer the supported deposit chains."""
    await state.set_state(DepositStates.selecting_chain)
    await message.answer(
        DEPOSIT_CHAIN_PROMPT,
        parse_mode="HTML",
        reply_markup=deposit_chain_keyboard(),
    )


def format_deposit_created(deposit: Deposit, amount: str, chain_id: str) -> str:
    lines = [
        "✅ <b>Deposit Transaction Created</b>",
        "",
        f"<b>Amount:</b> {escape(amount)} {DEFAULT_CURRENCY}",
        f"<b>Network:</b> {escape(format_network_name(chain_id))}",
        f"<b>Status:</b> {escape(deposit.status)}",
        "",
    ]
    if deposit.payment_url:
        lines += [f"<b>Payment URL:</b> {escape(deposit.payment_url)}", ""]
    if deposit.deposit_address:
        lines += [f"<b>Deposit Address:</b> <code>{escape(deposit.deposit_address)}</code>", ""]
    lines.append(DEPOSIT_NOTIFICATION_HINT)
    return "\n".join(lines)


def describe_deposit_error(error: Exception) -> str:
    """
    Failure message for deposit creation.

    Validation (422) payloads are listed as ``field: constraint; ...``.
    """
    if isinstance(error, ApiError):
        validation = format_validation_errors(error.payload)
        if validation:
            text = f"{DEPOSIT_FAILED} Validation error: {validation}"
        elif error.server_message:
            text = f"{DEPOSIT_FAILED} Error: {error.server_message}"
        else:
            text = describe_api_error(error, DEPOSIT_FAILED)
    else:
        text = f"{DEPOSIT_FAILED} {error}"
    return f"{text}\n\nPlease try again with a valid amount."


@router.message(Command("deposit"))
@router.message(F.text == MainMenuButtons.DEPOSIT)
@require_login
async def cmd_deposit(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Start a deposit: KYC gate, then chain selection."""
    session: ChatSession = data["chat_session"]
    auth_service: AuthService = data["auth_service"]

    try:
        approved = await auth_service.is_kyc_approved(session.credentials)
    except ApiError as e:
        logger.error(f"Error checking KYC for deposit in chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, KYC_CHECK_FAILED))
        return

    if not approved:
        await message.answer(DEPOSIT_KYC_REQUIRED, reply_markup=limited_keyboard())
        return

    session.deposit.reset()
    await show_chain_selection(message, state)


@router.callback_query(F.data.startswith(Callbacks.DEPOSIT_PREFIX))
@require_login
async def callback_deposit_chain(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    chain_id = parse_callback_value(callback.data, Callbacks.DEPOSIT_PREFIX)

    if chain_id not in SUPPORTED_DEPOSIT_CHAINS:
        await callback.answer("❌ Unsupported network", show_alert=True)
        return

    session.deposit.reset()
    session.deposit.chain_id = chain_id
    session.deposit.network = format_network_name(chain_id)

    await callback.answer()
    await state.set_state(DepositStates.entering_amount)
    await callback.message.answer(
        f"Network selected: {escape(session.deposit.network)}\n\n{DEPOSIT_AMOUNT_PROMPT}",
        parse_mode="HTML",
        reply_markup=ForceReply(input_field_placeholder="Enter amount"),
    )


@router.message(DepositStates.entering_amount, FREE_TEXT)
async def process_deposit_amount(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """
    Validate the amount and create the deposit.

    Any failure resets the deposit flow and shows chain selection again.
    """
    session: ChatSession = data["chat_session"]
    transfer_service: TransferService = data["transfer_service"]
    amount = (message.text or "").strip()

    if not is_valid_amount(amount):
        await message.answer(INVALID_AMOUNT)
        return

    if Decimal(amount) < MIN_DEPOSIT_AMOUNT:
        await message.answer(DEPOSIT_MIN_AMOUNT)
        return

    chain_id = session.deposit.chain_id
    if not chain_id:
        await message.answer(DEPOSIT_STATE_INVALID)
        await show_chain_selection(message, state)
        return

    session.deposit.amount = amount
    loading = await message.answer(DEPOSIT_CREATING)

    try:
        deposit = await transfer_service.create_deposit(session.credentials, amount, chain_id)
    except (ApiError, ValueError) as e:
        logger.error(f"Error creating deposit for chat {session.chat_id}: {e}")
        session.deposit.reset()
        await message.answer(describe_deposit_error(e))
        await show_chain_selection(message, state)
        return
    finally:
        try:
            await loading.delete()
        except TelegramAPIError as e:
            logger.debug(f"Could not delete loading message: {e}")

    session.deposit.reset()
    await state.clear()
    await message.answer(
        format_deposit_created(deposit, amount, chain_id),
        parse_mode="HTML",
        reply_markup=history_link_keyboard(),
    )
