"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

import re

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    telegram_bot_token: str

    # Copperx payout API
    api_base_url: str = "https://income-api.copperx.io/api"
    api_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Ceiling for a single outbound API call"
    )

    # Pusher (real-time notifications)
    pusher_key: str | None = None
    pusher_cluster: str = "eu"

    # Process boundary
    health_check_host: str = "0.0.0.0"
    health_check_port: int = Field(
        default=3001,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "HEALTH_CHECK_PORT"),
        description="Health check HTTP server port",
    )
    lock_file_path: str = "bot.lock"

    # Application
    support_link: str = "https://t.me/copperxcommunity/2183"
    log_level: str = "INFO"
    log_file: str = "logs/bot.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator('telegram_bot_token')
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate Telegram bot token format."""
        pattern = r'^\d+:[A-Za-z0-9_-]{35}$'
        if not re.match(pattern, v):
            raise ValueError(
                'Invalid Telegram bot token format. '
                'Expected format: 123456789:ABCdefGHIjklMNOpqrsTUVwxyz'
            )
        return v

    @field_validator('api_base_url')
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Strip the trailing slash so endpoint paths can be joined safely."""
        if not v.startswith(("http://", "https://")):
            raise ValueError('API_BASE_URL must be an http(s) URL')
        return v.rstrip("/")

    @property
    def notifications_enabled(self) -> bool:
        """Pusher notifications need an application key."""
        return bool(self.pusher_key)


settings = Settings()
