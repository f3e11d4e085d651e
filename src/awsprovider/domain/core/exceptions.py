# src/awsprovider/domain/core/exceptions.py
from typing import Any, Optional, List


class DomainException(Exception):
    """Base exception for all domain-specific errors."""
    pass


class ValidationError(DomainException):
    """Raised when user input fails a schema or field validator."""
    def __init__(self, message: str, field_path: Optional[str] = None, details: Any = None):
        if field_path:
            super().__init__(f"{field_path}: {message}")
        else:
            super().__init__(message)
        self.field_path = field_path
        self.details = details


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""
    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class IdentifierFormatError(DomainException):
    """Raised when a composite resource identifier cannot be parsed."""
    def __init__(self, resource_id: str, expected: str):
        super().__init__(f"unexpected format of ID ({resource_id}), expected {expected}")
        self.resource_id = resource_id
        self.expected = expected


class SchemaDefinitionError(DomainException):
    """Raised when a resource descriptor fails internal validation."""
    def __init__(self, kind: str, errors: List[str]):
        super().__init__(f"invalid resource descriptor {kind}: " + "; ".join(errors))
        self.kind = kind
        self.errors = errors


class ResourceOperationError(DomainException):
    """Raised when a lifecycle handler fails.

    Carries the resource kind, the identifier (if one was assigned) and the
    failed operation. The original error is kept as ``__cause__`` so error
    predicates keep matching through the wrapper.
    """
    def __init__(self, kind: str, operation: str, resource_id: Optional[str],
                 cause: BaseException, partial_state: Any = None):
        target = f"{kind} ({resource_id})" if resource_id else kind
        super().__init__(f"error during {operation} of {target}: {cause}")
        self.kind = kind
        self.operation = operation
        self.resource_id = resource_id
        self.partial_state = partial_state
