"""
Exception handling utilities.

Defines categorized exception types for proper error handling.
"""

from typing import Any

from aiogram.exceptions import TelegramAPIError


class ApiError(Exception):
    """Base class for failed calls to the payout API."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload

    @property
    def server_message(self) -> str | list[Any] | None:
        """Return the ``message`` field of the error payload, if any."""
        if isinstance(self.payload, dict):
            return self.payload.get("message")
        return None


class ApiNetworkError(ApiError):
    """Raised when the API host cannot be reached."""
    pass


class ApiTimeoutError(ApiError):
    """Raised when a call exceeds the per-request timeout."""
    pass


class ApiClientError(ApiError):
    """Raised for 4xx responses."""
    pass


class ApiServerError(ApiError):
    """Raised for 5xx responses."""
    pass


class RecipientNotEligibleError(Exception):
    """Raised when a transfer recipient cannot receive funds."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TransferPreconditionError(Exception):
    """Raised when the account is not allowed to move funds."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


# Exception categories based on handling strategy

# Safe to ignore - operations that fail gracefully
SAFE_TO_IGNORE = (
    TelegramAPIError,  # Message deletion, editing, etc.
)


def is_safe_to_ignore(exc: Exception) -> bool:
    """
    Check if exception can be safely ignored.

    Args:
        exc: Exception to check

    Returns:
        True if exception is safe to ignore
    """
    return isinstance(exc, SAFE_TO_IGNORE)
