"""Configuration module."""

from batchtrace.config.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from batchtrace.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "bind_request_context",
    "clear_request_context",
    "get_logger",
]
