"""
Bot Initialization - Middlewares Module.

Module: middlewares.py
Registers all bot middlewares in the correct order.
Order is critical for proper request processing.
"""

from aiogram import Dispatcher
from loguru import logger

from bot.initialization.services import BotServices
from bot.middlewares import (
    ActivityLoggingMiddleware,
    AuthMiddleware,
    ErrorHandlerMiddleware,
    NotificationMiddleware,
    ParseErrorHandlerMiddleware,
    SessionMiddleware,
)


def register_middlewares(dp: Dispatcher, services: BotServices) -> None:
    """
    Register all middlewares.

    Middleware order is critical:
    1. Error handler (outermost, catches everything below)
    2. Activity logging
    3. Session (chat_session for everything below)
    4. HTML parse error handler
    5. Auth (token refresh, needs the session)
    6. Notification (arms the bridge after the handler ran)

    Args:
        dp: Dispatcher instance
        services: Service graph
    """
    dp.update.middleware(ErrorHandlerMiddleware())
    dp.update.middleware(ActivityLoggingMiddleware())
    dp.update.middleware(SessionMiddleware(services.session_store))
    dp.update.middleware(ParseErrorHandlerMiddleware())
    dp.update.middleware(AuthMiddleware(services.api_client, services.notification_bridge))
    dp.update.middleware(NotificationMiddleware(services.notification_bridge))

    logger.info("Middlewares registered successfully")
