"""API middleware."""

from batchtrace.api.middleware.error_handler import ErrorHandlerMiddleware
from batchtrace.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
