"""Domain core: exceptions and shared value parsing."""

from .durations import parse_duration
from .exceptions import (
    ConfigurationError,
    DomainException,
    IdentifierFormatError,
    ResourceOperationError,
    SchemaDefinitionError,
    ValidationError,
)

__all__: list[str] = [
    "ConfigurationError",
    "DomainException",
    "IdentifierFormatError",
    "ResourceOperationError",
    "SchemaDefinitionError",
    "ValidationError",
    "parse_duration",
]
