"""Bot utilities"""

from bot.utils.callback_parsers import parse_callback_value
from bot.utils.decorators import require_login

__all__ = [
    "parse_callback_value",
    "require_login",
]
