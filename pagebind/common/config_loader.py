"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration management with environment variable override support.

Features:
    - Hierarchical YAML configuration loading
    - Environment variable override (PAGEBIND_RUNTIME_DEFAULT_TIMEOUT
      overrides runtime.default_timeout)
    - Dot notation path access
    - Default value support
    - Typed runtime settings snapshot (Settings)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


# Default configuration file path (relative to the working directory)
DEFAULT_CONFIG_PATH = Path.cwd() / "config" / "pagebind.yaml"

# Prefix for environment variable overrides
ENV_PREFIX = "PAGEBIND_"


class ConfigurationError(Exception):
    """Raised when configuration, page definitions or validation rules are invalid."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (PAGEBIND_RUNTIME_DEFAULT_TIMEOUT)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> config = ConfigLoader()
        >>> config.get("runtime.default_timeout", 30.0)
        15.0  # From YAML or env var

    Environment Variable Mapping:
        - runtime.default_timeout -> PAGEBIND_RUNTIME_DEFAULT_TIMEOUT
        - logging.level -> PAGEBIND_LOGGING_LEVEL
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton pattern - return existing instance if available."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses PAGEBIND_CONFIG or DEFAULT_CONFIG_PATH if not specified.
        """
        if getattr(self, "_initialized", False):
            return

        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        self._config_path = Path(config_path or env_path or DEFAULT_CONFIG_PATH)
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            logger.warning(
                f"Configuration file not found: {self._config_path}. "
                f"Using defaults and environment variables only."
            )
            self._config = {}
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "runtime.default_timeout")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = ENV_PREFIX + key.upper().replace(".", "_")
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get entire configuration section.

        Args:
            section: Section name (e.g., "runtime", "logging")

        Returns:
            Section dictionary or empty dict if not found
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    def _convert_type(self, value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value

        return value

    @classmethod
    def reset(cls) -> None:
        """
        Reset singleton instance.

        Useful for testing when configuration needs to be reloaded
        with different settings.
        """
        cls._instance = None
        cls._config = {}


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings consumed by the page builder, verbs and pipeline.

    Attributes:
        action_retry_limit: Extra attempts for a verb that returned a failure
        action_retry_delay: Initial delay between verb attempts in seconds
        action_retry_backoff: Multiplier applied to the delay after each attempt
        wait_for_still_element_before_clicking: Wait for a stable, enabled element before clicks
        retry_validation_until_timeout: Re-evaluate validations until valid or timed out
        highlight_mode: Highlight each element as it is located
        default_timeout: Default wait timeout in seconds
        wait_interval: Poll interval for waits in seconds
        list_wait_timeout: Timeout used when waiting for list items
        base_url: Base URL prepended to page navigation paths
    """
    action_retry_limit: int = 0
    action_retry_delay: float = 1.0
    action_retry_backoff: float = 1.0
    wait_for_still_element_before_clicking: bool = True
    retry_validation_until_timeout: bool = False
    highlight_mode: bool = False
    default_timeout: float = 30.0
    wait_interval: float = 0.2
    list_wait_timeout: float = 20.0
    base_url: str = ""

    @classmethod
    def from_config(cls, loader: Optional[ConfigLoader] = None) -> "Settings":
        """
        Build a settings snapshot from the `runtime` configuration section.

        Args:
            loader: ConfigLoader to read from (the process singleton by default)

        Returns:
            Settings with configured values and defaults for the rest
        """
        loader = loader or ConfigLoader()
        defaults = cls()
        values: Dict[str, Any] = {}
        for name in cls.__dataclass_fields__:
            default = getattr(defaults, name)
            values[name] = loader.get(f"runtime.{name}", default)
        return cls(**values)


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "Settings",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
]
