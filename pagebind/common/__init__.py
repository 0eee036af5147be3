"""
================================================================================
PageBind Common Utilities
================================================================================

Shared utilities, configuration management, and logging setup used by every
layer of the page object runtime.

Exports:
    - ConfigLoader / Settings: YAML + environment configuration
    - get_config: Convenience function to get configuration values
    - init_logger: Initialize loguru logger with standard settings
    - to_lookup_key / normalized_equals: Identifier normalization
    - wait_for / Waiter: Bounded single-threaded poll loop
    - TableFormatter: Plain-text diff tables
    - TokenManager: Scenario token substitution

Usage:
    from pagebind.common import get_config, init_logger

    init_logger()
    timeout = get_config("runtime.default_timeout", 30.0)

================================================================================
"""

import os
import sys
from typing import Any

from loguru import logger

from .config_loader import ConfigLoader, ConfigurationError, Settings
from .lookup import normalized_equals, to_lookup_key
from .table_formatter import TableFormatter
from .token_manager import TokenManager
from .wait_helpers import WaitConfig, Waiter, WaitTimeoutError, wait_for


# ============================================================
# Configuration Access
# ============================================================

def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get a configuration value.

    Args:
        key: Configuration key using dot notation
        default: Default value if not found

    Returns:
        Configuration value or default

    Example:
        level = get_config("logging.level", "INFO")
    """
    return ConfigLoader().get(key, default)


# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: str = None,
    format_string: str = None,
    log_file: str = None
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/pagebind.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    # Remove default handler
    logger.remove()

    level = level or get_config("logging.level", "INFO")
    format_string = format_string or get_config(
        "logging.format",
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or get_config("logging.file")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "Settings",
    "get_config",
    "init_logger",
    "to_lookup_key",
    "normalized_equals",
    "TableFormatter",
    "TokenManager",
    "WaitConfig",
    "Waiter",
    "WaitTimeoutError",
    "wait_for",
]
