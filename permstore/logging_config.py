"""
Logging configuration utilities for permstore.

This module configures the global logger from a host's settings dict,
from a loaded PermstoreConfig, or from environment variables.

Usage:
    from permstore.config import load_config
    from permstore.logging_config import configure_from_config

    configure_from_config(load_config())
"""

import os
from typing import Any, Dict, Optional

from permstore.config.loader import PermstoreConfig
from permstore.logger import configure_logger


def configure_from_settings(settings: Dict[str, Any]) -> None:
    """Configure logger from a host settings dict.

    Args:
        settings: Dictionary with logging settings.
            Expected keys (all optional):
            - log_enabled: bool
            - log_level: str ('ERROR', 'WARN', 'INFO', 'DEBUG', 'TRACE')
            - log_directory: str (path to log directory)
            - log_console: bool
            - log_max_file_size: int (bytes)
            - log_max_files: int
    """
    configure_logger(
        enabled=settings.get("log_enabled", True),
        level=settings.get("log_level", "INFO"),
        log_directory=settings.get("log_directory") or None,
        console_output=settings.get("log_console", False),
        max_file_size=settings.get("log_max_file_size", 10485760),
        max_files=settings.get("log_max_files", 10),
    )


def configure_from_config(config: PermstoreConfig) -> None:
    """Configure logger from the log_* fields of a loaded config."""
    configure_from_settings({
        "log_level": config.log_level,
        "log_directory": config.log_directory,
    })


def configure_from_environment() -> None:
    """Configure logger from environment variables.

    Environment variables:
        PERMSTORE_LOG_ENABLED: '0', '1', 'true', 'false'
        PERMSTORE_LOG_LEVEL: 'ERROR', 'WARN', 'INFO', 'DEBUG', 'TRACE'
        PERMSTORE_LOG_DIR: Path to log directory
        PERMSTORE_LOG_CONSOLE: '0', '1', 'true', 'false'
    """
    configure_from_settings({
        "log_enabled": _parse_bool(os.environ.get("PERMSTORE_LOG_ENABLED"), True),
        "log_level": os.environ.get("PERMSTORE_LOG_LEVEL", "INFO"),
        "log_directory": os.environ.get("PERMSTORE_LOG_DIR"),
        "log_console": _parse_bool(os.environ.get("PERMSTORE_LOG_CONSOLE"), False),
    })


def _parse_bool(value: Optional[str], default: bool) -> bool:
    """Parse string to boolean."""
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


__all__ = [
    "configure_from_settings",
    "configure_from_config",
    "configure_from_environment",
]
