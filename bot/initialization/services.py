"""
Bot Initialization - Services Module.

Module: services.py
Builds the API client, domain services, session store and notification
bridge, and registers them in the dispatcher's workflow data so handlers
receive them as keyword arguments.
"""

from dataclasses import dataclass

from aiogram import Bot, Dispatcher
from loguru import logger

from app.config.settings import settings
from app.services.api_client import ApiClient
from app.services.auth_service import AuthService
from app.services.notification_bridge import NotificationBridge
from app.services.session_store import MemorySessionStore
from app.services.transfer_service import TransferService
from app.services.wallet_service import WalletService
from bot.utils.notifications import NotificationDispatcher


@dataclass
class BotServices:
    """Everything handlers and middlewares depend on."""

    api_client: ApiClient
    auth_service: AuthService
    wallet_service: WalletService
    transfer_service: TransferService
    session_store: MemorySessionStore
    notification_bridge: NotificationBridge


def validate_environment() -> None:
    """Warn about optional settings that disable features."""
    if not settings.notifications_enabled:
        logger.warning(
            "PUSHER_KEY is not configured. "
            "Bot will start, but deposit/withdrawal notifications are disabled."
        )


def initialize_services(bot: Bot) -> BotServices:
    """Create the service graph."""
    validate_environment()

    api_client = ApiClient(settings.api_base_url, timeout=settings.api_timeout_seconds)
    auth_service = AuthService(api_client)
    wallet_service = WalletService(api_client)
    session_store = MemorySessionStore()
    dispatcher = NotificationDispatcher(bot, session_store, wallet_service)

    services = BotServices(
        api_client=api_client,
        auth_service=auth_service,
        wallet_service=wallet_service,
        transfer_service=TransferService(api_client, auth_service, wallet_service),
        session_store=session_store,
        notification_bridge=NotificationBridge(
            api_client,
            pusher_key=settings.pusher_key,
            pusher_cluster=settings.pusher_cluster,
            on_event=dispatcher,
        ),
    )
    logger.info(f"Services initialized (API: {settings.api_base_url})")
    return services


def register_services(dp: Dispatcher, services: BotServices) -> None:
    """Expose services to handlers through workflow data."""
    dp["api_client"] = services.api_client
    dp["auth_service"] = services.auth_service
    dp["wallet_service"] = services.wallet_service
    dp["transfer_service"] = services.transfer_service
    dp["session_store"] = services.session_store
    dp["notification_bridge"] = services.notification_bridge
