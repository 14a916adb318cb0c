"""Configuration module."""

from scoutboard.config.logging import board_context, configure_logging, get_logger
from scoutboard.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "board_context",
    "configure_logging",
    "get_logger",
]
