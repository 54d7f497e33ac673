"""
Button text constants.

All button texts used in reply keyboards across the bot.
"""

from bot.keyboards.buttons.main_menu import MainMenuButtons


__all__ = [
    "MainMenuButtons",
]
