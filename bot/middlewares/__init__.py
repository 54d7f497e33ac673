"""
Middlewares.

Bot middlewares for request processing.
"""

from bot.middlewares.activity_logging import ActivityLoggingMiddleware
from bot.middlewares.auth_middleware import AuthMiddleware
from bot.middlewares.error_handler import ErrorHandlerMiddleware
from bot.middlewares.notification_middleware import NotificationMiddleware
from bot.middlewares.parse_error_handler import ParseErrorHandlerMiddleware
from bot.middlewares.session_middleware import SessionMiddleware


__all__ = [
    "ActivityLoggingMiddleware",
    "AuthMiddleware",
    "ErrorHandlerMiddleware",
    "NotificationMiddleware",
    "ParseErrorHandlerMiddleware",
    "SessionMiddleware",
]
