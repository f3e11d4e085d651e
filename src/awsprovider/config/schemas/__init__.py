"""Configuration schemas package."""

from .app_schema import AppConfig, validate_config
from .logging_schema import LoggingConfig
from .provider_schema import DefaultTagsSettings, IgnoreTagsSettings, ProviderSettings
from .sweeper_schema import SweeperConfig

__all__ = [
    # Main configuration
    "AppConfig",
    "validate_config",
    # Provider configuration
    "ProviderSettings",
    "DefaultTagsSettings",
    "IgnoreTagsSettings",
    # Logging configuration
    "LoggingConfig",
    # Sweeper configuration
    "SweeperConfig",
]
