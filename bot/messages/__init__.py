"""
Bot Messages Module
Contains all message templates and formatting functions for the bot
"""

from bot.messages.error_messages import (
    AUTH_ERROR,
    GENERIC_ERROR,
    NETWORK_ERROR,
    describe_api_error,
    describe_otp_error,
)

__all__ = [
    "AUTH_ERROR",
    "GENERIC_ERROR",
    "NETWORK_ERROR",
    "describe_api_error",
    "describe_otp_error",
]
