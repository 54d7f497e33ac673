"""
Keyboards.

Telegram keyboards (reply and inline).

This module exports all keyboard components:
- Button classes: Centralized button text constants
- Keyboard functions: Pre-built keyboard factories
"""

from bot.keyboards.buttons import MainMenuButtons
from bot.keyboards.inline import (
    Callbacks,
    back_to_history_keyboard,
    deposit_chain_keyboard,
    generate_wallet_keyboard,
    history_keyboard,
    history_link_keyboard,
    kyc_details_keyboard,
    login_inline_keyboard,
    network_keyboard,
    otp_retry_keyboard,
    send_method_keyboard,
    set_default_wallet_keyboard,
    transfer_confirm_keyboard,
    wallets_keyboard,
    withdraw_method_keyboard,
)
from bot.keyboards.reply import (
    guest_keyboard,
    limited_keyboard,
    login_keyboard,
    main_menu_keyboard,
)

__all__ = [
    # Buttons
    "Callbacks",
    "MainMenuButtons",
    # Reply keyboards
    "guest_keyboard",
    "limited_keyboard",
    "login_keyboard",
    "main_menu_keyboard",
    # Inline keyboards
    "back_to_history_keyboard",
    "deposit_chain_keyboard",
    "generate_wallet_keyboard",
    "history_keyboard",
    "history_link_keyboard",
    "kyc_details_keyboard",
    "login_inline_keyboard",
    "network_keyboard",
    "otp_retry_keyboard",
    "send_method_keyboard",
    "set_default_wallet_keyboard",
    "transfer_confirm_keyboard",
    "wallets_keyboard",
    "withdraw_method_keyboard",
]
