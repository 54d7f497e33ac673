"""
Bot Initialization - Handlers Module.

Module: handlers.py
Registers all bot handlers.
Handler order matters for proper routing.
"""

from aiogram import Dispatcher
from loguru import logger


def register_all_handlers(dp: Dispatcher) -> None:
    """Register all handlers in the correct order."""
    from bot.handlers import auth, deposit, fallback, history, start, transfer, wallet

    # /start, /help and /support work in any state
    dp.include_router(start.router)
    dp.include_router(auth.router)
    dp.include_router(wallet.router)
    dp.include_router(transfer.router)
    dp.include_router(deposit.router)
    dp.include_router(history.router)

    # Fallback (MUST BE LAST to catch unhandled messages)
    dp.include_router(fallback.router)

    logger.info("Handlers registered successfully")
