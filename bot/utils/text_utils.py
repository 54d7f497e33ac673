"""Text utility functions for bot."""

from aiogram import F

from bot.keyboards.buttons import MainMenuButtons

MENU_BUTTON_TEXTS = frozenset(
    value
    for name, value in vars(MainMenuButtons).items()
    if not name.startswith("_") and isinstance(value, str)
)

# Plain text reply: not a command and not a reply keyboard button.
# Flow input handlers use it so menus and commands keep working mid-flow.
FREE_TEXT = F.text & ~F.text.startswith("/") & ~F.text.in_(MENU_BUTTON_TEXTS)


def is_menu_button(text: str | None) -> bool:
    """
    Check if text is a reply keyboard button.

    Args:
        text: Message text

    Returns:
        True if the text matches a menu button
    """
    return text in MENU_BUTTON_TEXTS
