"""Infrastructure exceptions raised around AWS API calls and credentials."""
from typing import Any, List, Optional


class InfrastructureError(Exception):
    """Base exception for infrastructure-related errors."""
    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class AWSError(InfrastructureError):
    """An AWS call failed; the SDK error is ``__cause__``."""
    def __init__(self, message: str, resource_id: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.resource_id = resource_id


class CredentialsError(InfrastructureError):
    """No usable AWS credentials, or the configured ones were rejected."""
    def __init__(self, message: str, env_vars: Optional[List[str]] = None):
        super().__init__(message)
        self.env_vars = list(env_vars or [])
