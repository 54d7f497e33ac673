"""
Bot Initialization - Shutdown Module.

Module: shutdown.py
Handles graceful shutdown of the bot.
Closes notification subscriptions, the API session, the health server
and the instance lock.
"""

from aiohttp import web
from loguru import logger

from app.http_health_server import stop_health_server
from app.utils.instance_lock import InstanceLock
from bot.initialization.services import BotServices


async def shutdown_handler(
    services: BotServices | None,
    health_runner: web.AppRunner | None,
    lock: InstanceLock | None,
) -> None:
    """Handle graceful shutdown."""
    logger.info("Graceful shutdown initiated...")

    if services is not None:
        await services.notification_bridge.close()
        logger.info("Notification subscriptions closed")

        await services.api_client.close()
        logger.info("API client closed")

    if health_runner is not None:
        await stop_health_server(health_runner)

    if lock is not None:
        lock.release()

    logger.info("Graceful shutdown complete")
