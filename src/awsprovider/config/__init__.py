"""Configuration package."""

from .manager import ConfigurationManager, get_config_manager
from .schemas import (
    AppConfig,
    DefaultTagsSettings,
    IgnoreTagsSettings,
    LoggingConfig,
    ProviderSettings,
    SweeperConfig,
    validate_config,
)

__all__ = [
    "ConfigurationManager",
    "get_config_manager",
    "AppConfig",
    "validate_config",
    "ProviderSettings",
    "DefaultTagsSettings",
    "IgnoreTagsSettings",
    "LoggingConfig",
    "SweeperConfig",
]
