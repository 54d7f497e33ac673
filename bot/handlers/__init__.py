"""
Handlers.

Bot command and message handlers.
"""

from bot.handlers import (
    auth,
    deposit,
    fallback,
    history,
    start,
    transfer,
    wallet,
)

__all__ = [
    "auth",
    "deposit",
    "fallback",
    "history",
    "start",
    "transfer",
    "wallet",
]
