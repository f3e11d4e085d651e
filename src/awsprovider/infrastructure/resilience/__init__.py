"""Infrastructure resilience package - retry loop, state waiter and cancellation."""

from .config import RetryConfig
from .context import Context, background
from .exceptions import (
    NonRetryableError,
    OperationCancelledError,
    RetryableError,
    RetryError,
    RetryTimeoutError,
    UnexpectedStateError,
    WaiterTimeoutError,
    timed_out,
)
from .retry import (
    retry,
    retry_until_not_found,
    retry_when,
    retry_when_aws_error_code_equals,
    retry_when_aws_error_message_contains,
    retry_when_new_resource_not_found,
    retry_when_not_found,
    retry_with_final_attempt,
)
from .waiter import StateChangeConf

__all__: list[str] = [
    # Retry loop
    "retry",
    "retry_with_final_attempt",
    "retry_when",
    "retry_when_aws_error_code_equals",
    "retry_when_aws_error_message_contains",
    "retry_when_new_resource_not_found",
    "retry_when_not_found",
    "retry_until_not_found",
    "timed_out",
    # Configuration
    "RetryConfig",
    # Waiter
    "StateChangeConf",
    # Cancellation
    "Context",
    "background",
    # Exceptions
    "RetryError",
    "RetryableError",
    "NonRetryableError",
    "RetryTimeoutError",
    "UnexpectedStateError",
    "WaiterTimeoutError",
    "OperationCancelledError",
]
