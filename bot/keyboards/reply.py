"""
Reply keyboards.

Persistent menus shown under the input field.
"""

from aiogram.types import KeyboardButton, ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

from bot.keyboards.buttons import MainMenuButtons


def guest_keyboard() -> ReplyKeyboardMarkup:
    """
    Keyboard for users who are not logged in.

    Returns:
        ReplyKeyboardMarkup with login, help and support buttons
    """
    builder = ReplyKeyboardBuilder()

    builder.row(
        KeyboardButton(text=MainMenuButtons.LOGIN),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.HELP),
        KeyboardButton(text=MainMenuButtons.SUPPORT),
    )

    return builder.as_markup(resize_keyboard=True)


def login_keyboard() -> ReplyKeyboardMarkup:
    """Single login button, shown when a session ends."""
    builder = ReplyKeyboardBuilder()
    builder.row(KeyboardButton(text=MainMenuButtons.LOGIN))
    return builder.as_markup(resize_keyboard=True)


def main_menu_keyboard() -> ReplyKeyboardMarkup:
    """
    Keyboard for logged-in users.

    Returns:
        ReplyKeyboardMarkup with account, wallet and transfer buttons
    """
    builder = ReplyKeyboardBuilder()

    builder.row(
        KeyboardButton(text=MainMenuButtons.PROFILE),
        KeyboardButton(text=MainMenuButtons.KYC_STATUS),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.WALLETS),
        KeyboardButton(text=MainMenuButtons.BALANCE),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.SEND_MONEY),
        KeyboardButton(text=MainMenuButtons.DEPOSIT),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.SET_DEFAULT_WALLET),
        KeyboardButton(text=MainMenuButtons.WITHDRAW),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.TRANSACTIONS),
        KeyboardButton(text=MainMenuButtons.LOGOUT),
    )

    return builder.as_markup(resize_keyboard=True)


def limited_keyboard() -> ReplyKeyboardMarkup:
    """
    Keyboard shown when the account can't move funds.

    Returns:
        ReplyKeyboardMarkup with read-only actions
    """
    builder = ReplyKeyboardBuilder()

    builder.row(
        KeyboardButton(text=MainMenuButtons.BALANCE),
        KeyboardButton(text=MainMenuButtons.HISTORY),
    )
    builder.row(
        KeyboardButton(text=MainMenuButtons.PROFILE),
        KeyboardButton(text=MainMenuButtons.HELP),
    )

    return builder.as_markup(resize_keyboard=True)
