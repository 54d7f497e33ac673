"""
Wallet handlers.

Wallet list, balances, default wallet selection, address copy and wallet
generation.
"""

from typing import Any

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from loguru import logger

from app.models.session import ChatSession
from app.services.wallet_service import WalletService
from app.utils.exceptions import ApiError
from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import (
    Callbacks,
    generate_wallet_keyboard,
    set_default_wallet_keyboard,
    wallets_keyboard,
)
from bot.messages.error_messages import describe_api_error
from bot.messages.user_messages import (
    ADDRESS_NOT_FOUND,
    NO_BALANCES,
    NO_WALLETS_GENERATE,
    SELECT_DEFAULT_WALLET,
)
from bot.utils.callback_parsers import parse_callback_index, parse_callback_value
from bot.utils.decorators import require_login
from bot.utils.formatters import (
    escape,
    format_balances,
    format_network_name,
    format_wallets,
    truncate_address,
)

router = Router(name="wallet")

WALLETS_FETCH_FAILED = "❌ Failed to fetch wallets. Please try again later."
BALANCES_FETCH_FAILED = "❌ Failed to fetch balances. Please try again later."
SET_DEFAULT_FAILED = "❌ Failed to set default wallet. Please try again later."
GENERATE_FAILED = "❌ Failed to generate wallet. Please try again later."


@router.message(Command("wallets"))
@router.message(F.text == MainMenuButtons.WALLETS)
@require_login
async def cmd_wallets(
    message: Message,
    **data: Any,
) -> None:
    """List wallets with copy buttons."""
    session: ChatSession = data["chat_session"]
    wallet_service: WalletService = data["wallet_service"]

    try:
        wallets = await wallet_service.get_wallets(session.credentials)
    except ApiError as e:
        logger.error(f"Error fetching wallets for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, WALLETS_FETCH_FAILED))
        return

    if not wallets:
        await message.answer(NO_WALLETS_GENERATE, reply_markup=generate_wallet_keyboard())
        return

    # Copy buttons refer to wallets by index
    session.wallet_addresses = [wallet.address or "" for wallet in wallets]

    await message.answer(
        format_wallets(wallets),
        parse_mode="HTML",
        reply_markup=wallets_keyboard(len(wallets)),
    )


async def _send_balances(message: Message, session: ChatSession, wallet_service: WalletService) -> None:
    try:
        balances = await wallet_service.get_balances(session.credentials)
    except ApiError as e:
        logger.error(f"Error fetching balances for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, BALANCES_FETCH_FAILED))
        return

    if not balances:
        await message.answer(NO_BALANCES)
        return

    await message.answer(format_balances(balances), parse_mode="HTML")


@router.message(Command("balance"))
@router.message(F.text == MainMenuButtons.BALANCE)
@require_login
async def cmd_balance(
    message: Message,
    **data: Any,
) -> None:
    await _send_balances(message, data["chat_session"], data["wallet_service"])


@router.callback_query(F.data == Callbacks.BALANCE)
@require_login
async def callback_balance(
    callback: CallbackQuery,
    **data: Any,
) -> None:
    await callback.answer()
    await _send_balances(callback.message, data["chat_session"], data["wallet_service"])


@router.message(Command("setdefault"))
@router.message(F.text == MainMenuButtons.SET_DEFAULT_WALLET)
@require_login
async def cmd_set_default(
    message: Message,
    **data: Any,
) -> None:
    """
    Choose the default wallet.

    A single wallet is made default right away; otherwise the user picks
    one from an inline list.
    """
    session: ChatSession = data["chat_session"]
    wallet_service: WalletService = data["wallet_service"]

    try:
        wallets = await wallet_service.get_wallets(session.credentials)
    except ApiError as e:
        logger.error(f"Error fetching wallets for chat {session.chat_id}: {e}")
        await message.answer(describe_api_error(e, WALLETS_FETCH_FAILED))
        return

    if not wallets:
        await message.answer(NO_WALLETS_GENERATE, reply_markup=generate_wallet_keyboard())
        return

    if len(wallets) == 1:
        wallet = wallets[0]
        try:
            await wallet_service.set_default_wallet(session.credentials, wallet.id)
        except ApiError as e:
            logger.error(f"Error setting default wallet for chat {session.chat_id}: {e}")
            await message.answer(describe_api_error(e, SET_DEFAULT_FAILED))
            return
        await message.answer(
            f'✅ Your wallet "{wallet.display_name(0)}" has been set as default.'
        )
        return

    await message.answer(
        SELECT_DEFAULT_WALLET,
        reply_markup=set_default_wallet_keyboard(wallets),
    )


@router.callback_query(F.data.startswith(Callbacks.SET_DEFAULT_PREFIX))
@require_login
async def callback_set_default(
    callback: CallbackQuery,
    **data: Any,
) -> None:
    session: ChatSession = data["chat_session"]
    wallet_service: WalletService = data["wallet_service"]

    wallet_id = parse_callback_value(callback.data, Callbacks.SET_DEFAULT_PREFIX)
    if not wallet_id:
        await callback.answer("❌ Invalid wallet", show_alert=True)
        return

    try:
        await wallet_service.set_default_wallet(session.credentials, wallet_id)
    except ApiError as e:
        logger.error(f"Error setting default wallet for chat {session.chat_id}: {e}")
        await callback.answer("❌ Failed to set default wallet")
        await callback.message.answer(describe_api_error(e, SET_DEFAULT_FAILED))
        return

    name = None
    try:
        wallets = await wallet_service.get_wallets(session.credentials)
    except ApiError as e:
        logger.warning(f"Wallet list refresh failed for chat {session.chat_id}: {e}")
    else:
        for index, wallet in enumerate(wallets):
            if wallet.id == wallet_id:
                name = wallet.display_name(index)
                break

    if name:
        await callback.answer(f"✅ {name} set as default wallet")
        await callback.message.answer(f'✅ Your wallet "{name}" has been set as default.')
    else:
        await callback.answer("✅ Default wallet updated")
        await callback.message.answer("✅ Your default wallet has been updated.")


@router.callback_query(F.data.startswith(Callbacks.COPY_PREFIX))
async def callback_copy_address(
    callback: CallbackQuery,
    **data: Any,
) -> None:
    """Show the full address of the wallet at the given index."""
    session: ChatSession = data["chat_session"]
    index = parse_callback_index(callback.data, Callbacks.COPY_PREFIX)

    if index is None or index >= len(session.wallet_addresses) or not session.wallet_addresses[index]:
        await callback.answer(ADDRESS_NOT_FOUND)
        return

    address = session.wallet_addresses[index]
    await callback.answer(f"📋 Address copied: {truncate_address(address)}")
    await callback.message.answer(
        f"📋 <b>Wallet Address Copied</b>\n\n<code>{escape(address)}</code>",
        parse_mode="HTML",
    )


@router.callback_query(F.data.startswith(Callbacks.GENERATE_PREFIX))
@require_login
async def callback_generate_wallet(
    callback: CallbackQuery,
    **data: Any,
) -> None:
    """Create a wallet and make it default when none is set yet."""
    session: ChatSession = data["chat_session"]
    wallet_service: WalletService = data["wallet_service"]

    network = parse_callback_value(callback.data, Callbacks.GENERATE_PREFIX)
    if not network:
        await callback.answer("❌ Invalid network", show_alert=True)
        return
    await callback.answer()

    try:
        wallet = await wallet_service.generate_wallet(session.credentials, network)
    except ApiError as e:
        logger.error(f"Error generating wallet for chat {session.chat_id}: {e}")
        await callback.message.edit_text(describe_api_error(e, GENERATE_FAILED))
        return

    try:
        if await wallet_service.get_default_wallet(session.credentials) is None:
            await wallet_service.set_default_wallet(session.credentials, wallet.id)
    except ApiError as e:
        logger.warning(f"Error setting default wallet for chat {session.chat_id}: {e}")

    await callback.message.edit_text(
        f"✅ {escape(format_network_name(network))} wallet generated successfully!\n\n"
        f"Address: <code>{escape(wallet.address or 'Not available')}</code>\n\n"
        "Use /wallets to view all your wallets.",
        parse_mode="HTML",
    )
