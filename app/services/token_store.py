"""
Token store.

Holds one chat session's bearer token and its expiry. The API client
consults it before every call and updates it after a refresh.
"""

import time
from collections.abc import Callable

from app.config.constants import (
    DEFAULT_TOKEN_TTL_SECONDS,
    TOKEN_EXPIRY_BUFFER_SECONDS,
)


class TokenStore:
    """
    Bearer token with expiry tracking.

    A token is reported as expired ``TOKEN_EXPIRY_BUFFER_SECONDS`` before its
    real expiry so a request is never sent with a token that dies in flight.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self.token: str | None = None
        self.expires_at: float | None = None

    def set_token(self, token: str, ttl_seconds: float | None = None) -> None:
        """
        Store a token.

        Args:
            token: Bearer token
            ttl_seconds: Lifetime in seconds (24h when omitted)
        """
        if ttl_seconds is None:
            ttl_seconds = DEFAULT_TOKEN_TTL_SECONDS
        self.token = token
        self.expires_at = self._clock() + ttl_seconds

    def is_expired(self) -> bool:
        """Return True once the token is inside the expiry buffer."""
        if self.token is None or self.expires_at is None:
            return False
        return self._clock() > self.expires_at - TOKEN_EXPIRY_BUFFER_SECONDS

    def clear(self) -> None:
        """Forget the token and its expiry."""
        self.token = None
        self.expires_at = None

    @property
    def has_token(self) -> bool:
        return self.token is not None

    def __repr__(self) -> str:
        state = "set" if self.token else "empty"
        return f"TokenStore({state}, expires_at={self.expires_at})"
