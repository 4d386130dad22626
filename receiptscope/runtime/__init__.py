"""Runtime infrastructure for receiptscope.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), AppPaths
- Settings via load_settings(), ClientSettings
- Credential persistence via FileTokenStore

The HTTP client lives in receiptscope.runtime.api_client.

Usage:
    from receiptscope.runtime import get_logger, load_settings

    logger = get_logger(__name__)
    settings = load_settings()
"""

from receiptscope.runtime.config import ClientSettings, load_settings
from receiptscope.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptscope.runtime.paths import AppPaths, get_paths, reset_paths
from receiptscope.runtime.token_store import FileTokenStore, MemoryTokenStore

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "ClientSettings",
    "load_settings",
    # Paths
    "AppPaths",
    "get_paths",
    "reset_paths",
    # Credentials
    "FileTokenStore",
    "MemoryTokenStore",
]
