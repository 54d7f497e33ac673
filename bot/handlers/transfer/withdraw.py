"""
Withdraw handlers.

/withdraw entry point, wallet withdrawal (network, address) and bank
withdrawal selection.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, ForceReply, Message
from loguru import logger

from app.models.session import ChatSession, TransferType
from app.services.transfer_service import is_valid_address
from app.services.wallet_service import WalletService
from app.utils.exceptions import ApiError
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import Callbacks, network_keyboard, withdraw_method_keyboard
from bot.messages.error_messages import describe_api_error
from bot.messages.user_messages import (
    BANK_AMOUNT_PROMPT,
    INVALID_ADDRESS,
    NETWORK_PROMPT,
    NO_WALLETS_FOR_WITHDRAW,
    TRANSFER_STATE_INVALID,
    WALLET_ADDRESS_PROMPT,
    WITHDRAW_AMOUNT_PROMPT,
    WITHDRAW_METHOD_PROMPT,
)
from bot.states.transfer import TransferStates
from bot.utils.callback_parsers import parse_callback_value
from bot.utils.decorators import require_login
from bot.utils.formatters import escape, format_network_name
from bot.utils.text_utils import FREE_TEXT

from .eligibility import check_transfer_eligibility

router = Router(name="transfer_withdraw")

WALLETS_FETCH_FAILED = "❌ Failed to fetch wallets. Please try again later."


@router.message(Command("withdraw"))
@router.message(F.text == MainMenuButtons.WITHDRAW)
@require_login
async def cmd_withdraw(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Start a withdrawal: check preconditions, then offer wallet or bank."""
    session: ChatSession = data["chat_session"]

    if not await check_transfer_eligibility(message, session, data["transfer_service"]):
        return

    session.transfer.reset()
    await state.clear()
    await message.answer(WITHDRAW_METHOD_PROMPT, reply_markup=withdraw_method_keyboard())


@router.callback_query(F.data.in_({Callbacks.WITHDRAW_WALLET, Callbacks.SEND_WALLET}))
@require_login
async def callback_wallet_withdraw(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    """
    Wallet withdrawal: offer the networks the user has wallets on.

    Also reached from the /send method choice.
    """
    session: ChatSession = data["chat_session"]
    wallet_service: WalletService = data["wallet_service"]

    session.transfer.reset()
    session.transfer.type = TransferType.WALLET
    await callback.answer()

    try:
        wallets = await wallet_service.get_wallets(session.credentials)
    except ApiError as e:
        logger.error(f"Error fetching wallets for chat {session.chat_id}: {e}")
        session.transfer.reset()
        await callback.message.answer(describe_api_error(e, WALLETS_FETCH_FAILED))
        return

    networks = WalletService.distinct_networks(wallets)
    if not networks:
        session.transfer.reset()
        await callback.message.answer(NO_WALLETS_FOR_WITHDRAW)
        return

    await state.set_state(TransferStates.selecting_network)
    await callback.message.edit_text(NETWORK_PROMPT, reply_markup=network_keyboard(networks))


@router.callback_query(F.data.startswith(Callbacks.NETWORK_PREFIX))
@require_login
async def callback_network_selected(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    network = parse_callback_value(callback.data, Callbacks.NETWORK_PREFIX)

    if not network or session.transfer.type != TransferType.WALLET:
        await callback.answer()
        await state.clear()
        session.transfer.reset()
        await callback.message.answer(TRANSFER_STATE_INVALID)
        return

    session.transfer.network = network
    await callback.answer()
    await state.set_state(TransferStates.waiting_for_address)
    await callback.message.answer(
        f"Network selected: {escape(format_network_name(network))}\n\n{WALLET_ADDRESS_PROMPT}",
        parse_mode="HTML",
        reply_markup=ForceReply(input_field_placeholder="Enter wallet address"),
    )


@router.message(TransferStates.waiting_for_address, FREE_TEXT)
async def process_wallet_address(
    message: Message,
    state: FSMContext,
    **data: Any,
) -> None:
    """Store the recipient address and ask for the amount."""
    session: ChatSession = data["chat_session"]
    address = (message.text or "").strip()

    if not is_valid_address(address):
        await message.answer(INVALID_ADDRESS)
        return

    session.transfer.type = TransferType.WALLET
    session.transfer.recipient = address

    await state.set_state(TransferStates.waiting_for_amount)
    await message.answer(
        WITHDRAW_AMOUNT_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter amount"),
    )


@router.callback_query(F.data == Callbacks.WITHDRAW_BANK)
@require_login
async def callback_bank_withdraw(
    callback: CallbackQuery,
    state: FSMContext,
    **data: Any,
) -> None:
    """Bank withdrawal goes straight to the amount."""
    session: ChatSession = data["chat_session"]
    session.transfer.reset()
    session.transfer.type = TransferType.BANK

    await callback.answer()
    await state.set_state(TransferStates.waiting_for_amount)
    await callback.message.answer(
        BANK_AMOUNT_PROMPT,
        reply_markup=ForceReply(input_field_placeholder="Enter amount"),
    )
