"""Unified configuration management for the provider."""
from __future__ import annotations

import copy
import json
import logging
import os
import re
import threading
from typing import Any, Dict, Optional

import yaml

from awsprovider.config.defaults import CONFIG_FILE_ENV_VAR, DEFAULT_CONFIG, ENVIRONMENT_OVERRIDES
from awsprovider.config.schemas import AppConfig, LoggingConfig, ProviderSettings, SweeperConfig, validate_config
from awsprovider.domain.core.durations import parse_duration
from awsprovider.domain.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")


def expand_placeholders(value: Any) -> Any:
    """Expand ``${VAR}`` and ``${VAR:default}`` in every string of ``value``."""
    if isinstance(value, str):
        return _PLACEHOLDER.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    if isinstance(value, dict):
        return {k: expand_placeholders(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_placeholders(v) for v in value]
    return value


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested dicts merge recursively."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class ConfigurationManager:
    """
    Single source of truth for provider configuration.

    Configuration is loaded lazily on first access:
    - built-in defaults
    - a JSON or YAML file (explicit path or ``AWSPROVIDER_CONFIG_FILE``)
    - environment variable overrides
    - ``${VAR}`` placeholder expansion
    and finally validated into :class:`AppConfig`.
    """

    def __init__(self, config_file: Optional[str] = None):
        """Initialize configuration manager with lazy loading."""
        self._config_file = config_file
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None
        self._raw_config: Optional[Dict[str, Any]] = None

    @property
    def config_file(self) -> Optional[str]:
        return self._config_file or os.environ.get(CONFIG_FILE_ENV_VAR)

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    @property
    def provider(self) -> ProviderSettings:
        return self.app_config.provider

    @property
    def logging(self) -> LoggingConfig:
        return self.app_config.logging

    @property
    def sweeper(self) -> SweeperConfig:
        return self.app_config.sweeper

    def get_raw_config(self) -> Dict[str, Any]:
        """Get a copy of the merged configuration before validation."""
        self.app_config
        return copy.deepcopy(self._raw_config or {})

    def reload(self) -> None:
        """Reload configuration from sources on next access."""
        with self._lock:
            self._app_config = None
            self._raw_config = None

    def _load_app_config(self) -> AppConfig:
        config_data = copy.deepcopy(DEFAULT_CONFIG)

        config_file = self.config_file
        if config_file:
            config_data = deep_merge(config_data, self.load_from_file(config_file))
            logger.info("Loaded configuration from %s", config_file)

        config_data = self.apply_environment_overrides(config_data)
        config_data = expand_placeholders(config_data)
        self._raw_config = config_data

        return validate_config(config_data)

    @staticmethod
    def load_from_file(path: str) -> Dict[str, Any]:
        """
        Load a JSON or YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing or cannot be parsed
        """
        if not os.path.exists(path):
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.endswith((".yaml", ".yml")):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse configuration file {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        return data

    @staticmethod
    def apply_environment_overrides(config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration data."""
        result = copy.deepcopy(config_data)
        for env_var, (section, key) in ENVIRONMENT_OVERRIDES.items():
            value = os.environ.get(env_var)
            if not value:
                continue
            if env_var == "SWEEP_THROTTLING_RETRY_TIMEOUT":
                try:
                    value = parse_duration(value)
                except ValueError as e:
                    raise ConfigurationError(
                        f"Invalid {env_var}: {e}", missing_fields=[f"{section}.{key}"]
                    ) from e
            result.setdefault(section, {})[key] = value
            logger.debug("Applied environment override %s -> %s.%s", env_var, section, key)
        return result


_manager: Optional[ConfigurationManager] = None
_manager_lock = threading.Lock()


def get_config_manager(config_file: Optional[str] = None) -> ConfigurationManager:
    """Get the process-wide configuration manager, creating it on first use."""
    global _manager
    if _manager is None or (config_file and config_file != _manager._config_file):
        with _manager_lock:
            if _manager is None or (config_file and config_file != _manager._config_file):
                _manager = ConfigurationManager(config_file)
    return _manager
