"""
Inline keyboards for flow choices, confirmations and pagination.
"""

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from app.config.constants import (
    NETWORK_NAMES,
    SUPPORTED_DEPOSIT_CHAINS,
    WALLET_GENERATION_CHAINS,
)
from app.models.records import Transfer, Wallet
from bot.utils.formatters import format_network_name


class Callbacks:
    """Callback data values and prefixes."""

    LOGIN = "login"
    LOGIN_NEW_OTP = "login:new_otp"
    LOGIN_CANCEL = "login:cancel"
    KYC_DETAILS = "kyc_details"
    BALANCE = "balance"

    SEND_EMAIL = "send:email"
    SEND_WALLET = "send:wallet"
    WITHDRAW_WALLET = "withdraw:wallet"
    WITHDRAW_BANK = "withdraw:bank"
    TRANSFER_CONFIRM = "transfer:confirm"
    TRANSFER_CANCEL = "transfer:cancel"

    HISTORY_PREV = "history:prev"
    HISTORY_NEXT = "history:next"
    HISTORY_REFRESH = "history:refresh"

    NETWORK_PREFIX = "network:"
    DEPOSIT_PREFIX = "deposit:"
    GENERATE_PREFIX = "generate:"
    SET_DEFAULT_PREFIX = "setdefault:"
    COPY_PREFIX = "copy:"
    VIEW_TRANSFER_PREFIX = "view:transfer:"


def login_inline_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(InlineKeyboardButton(text="🔑 Login", callback_data=Callbacks.LOGIN))
    return builder.as_markup()


def otp_retry_keyboard() -> InlineKeyboardMarkup:
    """
    Keyboard offered after a failed OTP.

    Returns:
        InlineKeyboardMarkup with new OTP / cancel options
    """
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="Yes, send new OTP", callback_data=Callbacks.LOGIN_NEW_OTP),
        InlineKeyboardButton(text="No, cancel login", callback_data=Callbacks.LOGIN_CANCEL),
    )
    return builder.as_markup()


def kyc_details_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="🔎 View KYC Details", callback_data=Callbacks.KYC_DETAILS)
    )
    return builder.as_markup()


def send_method_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="📧 To Email", callback_data=Callbacks.SEND_EMAIL),
        InlineKeyboardButton(text="👛 To Wallet", callback_data=Callbacks.SEND_WALLET),
    )
    return builder.as_markup()


def withdraw_method_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="To External Wallet", callback_data=Callbacks.WITHDRAW_WALLET),
        InlineKeyboardButton(text="To Bank Account", callback_data=Callbacks.WITHDRAW_BANK),
    )
    return builder.as_markup()


def network_keyboard(networks: list[str]) -> InlineKeyboardMarkup:
    """
    One button per network.

    Args:
        networks: Network values taken from the user's wallets
    """
    builder = InlineKeyboardBuilder()
    for network in networks:
        builder.row(
            InlineKeyboardButton(
                text=format_network_name(network),
                callback_data=f"{Callbacks.NETWORK_PREFIX}{network}",
            )
        )
    return builder.as_markup()


def transfer_confirm_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="✅ Confirm", callback_data=Callbacks.TRANSFER_CONFIRM),
        InlineKeyboardButton(text="❌ Cancel", callback_data=Callbacks.TRANSFER_CANCEL),
    )
    return builder.as_markup()


def deposit_chain_keyboard() -> InlineKeyboardMarkup:
    """Supported deposit chains, one per row."""
    builder = InlineKeyboardBuilder()
    for chain_id in SUPPORTED_DEPOSIT_CHAINS:
        builder.row(
            InlineKeyboardButton(
                text=f"Deposit to {NETWORK_NAMES.get(chain_id, chain_id)}",
                callback_data=f"{Callbacks.DEPOSIT_PREFIX}{chain_id}",
            )
        )
    return builder.as_markup()


def generate_wallet_keyboard(chain_ids: tuple[str, ...] = WALLET_GENERATION_CHAINS) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for chain_id in chain_ids:
        builder.button(
            text=f"Generate {NETWORK_NAMES.get(chain_id, chain_id)} Wallet",
            callback_data=f"{Callbacks.GENERATE_PREFIX}{chain_id}",
        )
    return builder.as_markup()


def history_link_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(
            text="📜 View Transaction History", callback_data=Callbacks.HISTORY_REFRESH
        )
    )
    return builder.as_markup()


def back_to_history_keyboard() -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    builder.row(
        InlineKeyboardButton(text="📜 Back to History", callback_data=Callbacks.HISTORY_REFRESH)
    )
    return builder.as_markup()


def wallets_keyboard(wallet_count: int) -> InlineKeyboardMarkup:
    """
    Copy buttons by wallet index plus a balances shortcut.

    Addresses are looked up from the session by index, so callback data
    stays within Telegram's 64-byte limit.
    """
    builder = InlineKeyboardBuilder()
    for index in range(wallet_count):
        builder.row(
            InlineKeyboardButton(
                text=f"📋 Copy Address {index + 1}",
                callback_data=f"{Callbacks.COPY_PREFIX}{index}",
            )
        )
    builder.row(InlineKeyboardButton(text="💰 View Balances", callback_data=Callbacks.BALANCE))
    return builder.as_markup()


def set_default_wallet_keyboard(wallets: list[Wallet]) -> InlineKeyboardMarkup:
    builder = InlineKeyboardBuilder()
    for index, wallet in enumerate(wallets):
        marker = " ✓" if wallet.is_default else ""
        builder.row(
            InlineKeyboardButton(
                text=f"{wallet.display_name(index)} ({format_network_name(wallet.network)}){marker}",
                callback_data=f"{Callbacks.SET_DEFAULT_PREFIX}{wallet.id}",
            )
        )
    return builder.as_markup()


def history_keyboard(
    transfers: list[Transfer],
    page: int,
    total_pages: int,
) -> InlineKeyboardMarkup:
    """
    Detail buttons for each transfer plus pagination.

    Args:
        transfers: Transfers on the current page
        page: Current page (1-based)
        total_pages: Last page reported by the API
    """
    builder = InlineKeyboardBuilder()

    for index, transfer in enumerate(transfers):
        if transfer.id:
            builder.row(
                InlineKeyboardButton(
                    text=f"🔍 View Details #{index + 1}",
                    callback_data=f"{Callbacks.VIEW_TRANSFER_PREFIX}{transfer.id}",
                )
            )

    navigation = []
    if page > 1:
        navigation.append(
            InlineKeyboardButton(text="◀️ Previous", callback_data=Callbacks.HISTORY_PREV)
        )
    if page < total_pages:
        navigation.append(
            InlineKeyboardButton(text="Next ▶️", callback_data=Callbacks.HISTORY_NEXT)
        )
    navigation.append(
        InlineKeyboardButton(text="🔄 Refresh", callback_data=Callbacks.HISTORY_REFRESH)
    )
    builder.row(*navigation)

    return builder.as_markup()
