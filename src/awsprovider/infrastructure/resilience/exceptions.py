"""Resilience exceptions."""
from typing import Optional, Sequence

from awsprovider.infrastructure.exceptions import InfrastructureError


class RetryError(InfrastructureError):
    """Base exception for retry and waiter failures."""
    pass


class RetryableError(Exception):
    """Raised by a retry body to request another attempt."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause))
        self.cause = cause


class NonRetryableError(Exception):
    """Raised by a retry body to stop retrying with ``cause``."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause))
        self.cause = cause


class RetryTimeoutError(RetryError):
    """The retry budget elapsed; ``last_error`` is the last retryable error."""

    def __init__(self, timeout: float, last_error: Optional[BaseException] = None):
        message = f"timeout while retrying after {timeout:g}s"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.timeout = timeout
        self.last_error = last_error


class WaiterTimeoutError(RetryError):
    """The waiter budget elapsed before reaching a target state."""

    def __init__(self, timeout: float, expected: Sequence[str], last_state: str = "",
                 last_error: Optional[BaseException] = None):
        expectation = f"'{', '.join(expected)}'" if expected else "resource to be gone"
        message = f"timeout while waiting for state to become {expectation} (last state: '{last_state}', timeout: {timeout:g}s)"
        if last_error is not None:
            message = f"{message}: {last_error}"
        super().__init__(message)
        self.timeout = timeout
        self.expected = list(expected)
        self.last_state = last_state
        self.last_error = last_error


class UnexpectedStateError(RetryError):
    """The waiter observed a state outside pending and target."""

    def __init__(self, state: str, expected: Sequence[str], last_error: Optional[BaseException] = None):
        message = f"unexpected state '{state}', wanted target '{', '.join(expected)}'"
        if last_error is not None:
            message = f"{message}. last error: {last_error}"
        super().__init__(message)
        self.state = state
        self.expected = list(expected)
        self.last_error = last_error


class OperationCancelledError(RetryError):
    """The context was cancelled while sleeping between attempts."""
    pass


def timed_out(err: Optional[BaseException]) -> bool:
    """True if ``err`` is a retry or waiter timeout."""
    return isinstance(err, (RetryTimeoutError, WaiterTimeoutError))
