"""Main application configuration schema."""
from typing import Any, Dict, List

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from awsprovider.domain.core.exceptions import ConfigurationError
from .logging_schema import LoggingConfig
from .provider_schema import ProviderSettings
from .sweeper_schema import SweeperConfig


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    provider: ProviderSettings = Field(default_factory=lambda: ProviderSettings())
    logging: LoggingConfig = Field(default_factory=lambda: LoggingConfig())
    sweeper: SweeperConfig = Field(default_factory=lambda: SweeperConfig())


def validate_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate raw configuration data.

    Args:
        config_data: Configuration dictionary

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the configuration is invalid; the offending
            field paths are listed in ``missing_fields``
    """
    try:
        return AppConfig.model_validate(config_data)
    except PydanticValidationError as e:
        fields: List[str] = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
        raise ConfigurationError(f"Invalid configuration: {e}", missing_fields=fields) from e
