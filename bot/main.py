"""
Bot main entry point.

Initializes and runs the Telegram bot with aiogram 3.x.

Initialization is delegated to modular components in the
bot/initialization/ directory. Only the instance holding the lock file
polls Telegram; any other instance serves the health endpoint only.
"""

import asyncio
import signal
import sys
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.exceptions import TelegramAPIError
from aiogram.types import ErrorEvent
from aiohttp import web
from loguru import logger


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.settings import settings  # noqa: E402
from app.http_health_server import start_health_server  # noqa: E402
from app.utils.instance_lock import InstanceLock  # noqa: E402
from bot.initialization.handlers import register_all_handlers  # noqa: E402
from bot.initialization.logging import setup_logging  # noqa: E402
from bot.initialization.middlewares import register_middlewares  # noqa: E402
from bot.initialization.services import (  # noqa: E402
    BotServices,
    initialize_services,
    register_services,
)
from bot.initialization.shutdown import shutdown_handler  # noqa: E402
from bot.initialization.storage import setup_fsm_storage  # noqa: E402
from bot.messages.error_messages import GENERIC_ERROR  # noqa: E402


async def wait_for_shutdown_signal() -> None:
    """Block until SIGINT or SIGTERM."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)
    await stop_event.wait()
    logger.info("Shutdown signal received")


def build_dispatcher(services: BotServices) -> Dispatcher:
    """Create the dispatcher with services, middlewares and handlers."""
    dp = Dispatcher(storage=setup_fsm_storage())
    register_services(dp, services)

    # Register middlewares (order matters!)
    register_middlewares(dp, services)

    @dp.error()
    async def error_handler(event: ErrorEvent) -> bool:
        """Global error handler for unhandled exceptions."""
        logger.exception(
            f"Unhandled error in bot: {event.exception.__class__.__name__}: {event.exception}"
        )

        try:
            if event.update and event.update.message:
                await event.update.message.answer(GENERIC_ERROR)
        except TelegramAPIError as send_error:
            logger.error(f"Failed to send error message: {send_error}")

        return True  # Mark error as handled

    register_all_handlers(dp)
    return dp


async def main() -> None:
    """Initialize and run the bot."""
    setup_logging()

    lock = InstanceLock(settings.lock_file_path)
    polling = lock.acquire()
    if not polling:
        logger.warning(
            "Another bot instance holds the lock. "
            "Running health check server only (standby mode)."
        )

    # Bot has no default parse_mode: HTML is passed explicitly where used
    bot = Bot(token=settings.telegram_bot_token, default=DefaultBotProperties())
    services: BotServices | None = None
    health_runner: web.AppRunner | None = None

    try:
        health_runner = await start_health_server(
            host=settings.health_check_host,
            port=settings.health_check_port,
            polling=polling,
        )

        if not polling:
            await wait_for_shutdown_signal()
            return

        services = initialize_services(bot)
        dp = build_dispatcher(services)

        bot_info = await bot.get_me()
        logger.info(f"Bot connected: @{bot_info.username} (ID: {bot_info.id})")

        logger.info("Starting polling...")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    except Exception as e:
        logger.exception(f"Polling error: {e}")
        raise
    finally:
        await shutdown_handler(services, health_runner, lock)
        await bot.session.close()


def run() -> None:
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Bot crashed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
