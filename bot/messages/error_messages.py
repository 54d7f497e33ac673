"""
Error message templates.

Maps API failures to user-friendly messages without technical details.
"""

import json

from app.utils.exceptions import (
    ApiClientError,
    ApiError,
    ApiNetworkError,
    ApiServerError,
    ApiTimeoutError,
)

# ============================================================================
# USER ERROR MESSAGES
# ============================================================================

GENERIC_ERROR = (
    "❌ An unexpected error occurred.\n\n"
    "Please try again later or contact support with /support."
)

NETWORK_ERROR = (
    "❌ Network error: Unable to connect to the Copperx API. "
    "Please try again in a moment."
)

TIMEOUT_ERROR = "⏳ The Copperx API took too long to respond. Please try again later."

SERVER_ERROR = "❌ The Copperx API is temporarily unavailable. Please try again later."

AUTH_ERROR = (
    "❌ Authentication error: Your session may have expired. Please login again."
)

PERMISSION_DENIED = "❌ Access denied: You don't have permission to do that."

RATE_LIMIT_ERROR = "⏱ Too many requests. Please wait a few minutes before trying again."


def describe_api_error(error: ApiError, fallback: str) -> str:
    """
    Classify an API failure into a chat message.

    Args:
        error: Failure raised by the API client
        fallback: Message for 4xx errors without a known status

    Returns:
        User-facing message
    """
    if isinstance(error, ApiTimeoutError):
        return TIMEOUT_ERROR
    if isinstance(error, ApiNetworkError):
        return NETWORK_ERROR
    if isinstance(error, ApiServerError):
        return SERVER_ERROR
    if isinstance(error, ApiClientError):
        if error.status == 401:
            return AUTH_ERROR
        if error.status == 403:
            return PERMISSION_DENIED
        if error.status == 429:
            return RATE_LIMIT_ERROR
    return fallback


def describe_otp_error(error: Exception) -> str:
    """
    Explain why OTP authentication failed.

    422 payloads are inspected for expired, invalid or stale-sid hints.
    """
    message = "❌ Authentication failed. "
    if not isinstance(error, ApiClientError):
        return message + "Please try again later."

    server_message = error.server_message
    if error.status == 422:
        message += "The OTP validation failed. "
        if isinstance(server_message, list):
            details = json.dumps(server_message)
            if "expired" in details:
                return message + "The OTP has expired. Please request a new OTP."
            if "invalid" in details:
                return message + "The OTP is invalid. Please check and try again."
            if "sid" in details:
                return message + "Session expired. Please request a new OTP."
            return message + details
        return message + "Please request a new OTP and try again."
    if error.status == 401:
        return message + "Invalid credentials. Please check your email and try again."
    if error.status == 429:
        return message + "Too many attempts. Please wait a few minutes before trying again."
    if isinstance(server_message, list):
        return message + ", ".join(str(m) for m in server_message)
    if server_message:
        return message + str(server_message)
    return message + "Please try again later."
