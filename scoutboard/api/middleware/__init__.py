"""API middleware."""

from scoutboard.api.middleware.error_handler import ErrorHandlerMiddleware
from scoutboard.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
