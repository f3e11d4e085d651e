"""Bounded retry loop with jitter, backoff and a total time budget.

The body passed to :func:`retry` returns a value on success, raises
:class:`RetryableError` to ask for another attempt, and raises
:class:`NonRetryableError` (or any other exception) to stop immediately.
A ``NonRetryableError`` is unwrapped so callers see the original exception.

When the budget is exhausted :func:`retry` raises :class:`RetryTimeoutError`
carrying the last retryable error. Callers that want best-effort finalization
use :func:`retry_with_final_attempt`, which performs one more direct call of
the body after a timeout and returns (or raises) its outcome.
"""
import random
import time
from typing import Callable, Optional, TypeVar

from awsprovider.infrastructure.error import error_code_in, error_message_contains, is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience.config import (
    INITIAL_BACKOFF_INTERVAL,
    RetryConfig,
    next_backoff_interval,
)
from awsprovider.infrastructure.resilience.context import Context, background
from awsprovider.infrastructure.resilience.exceptions import (
    NonRetryableError,
    RetryableError,
    RetryTimeoutError,
)

T = TypeVar("T")

logger = get_logger(__name__)

# Eventual consistency budget used by the "new resource" helpers.
PROPAGATION_TIMEOUT = 120.0


def retry(config: RetryConfig, body: Callable[[], T], ctx: Optional[Context] = None) -> T:
    """Invoke ``body`` until it succeeds, fails terminally or the budget runs out.

    Invocations are strictly sequential. A total timeout of 0 performs
    exactly one invocation.

    Raises:
        RetryTimeoutError: the budget elapsed; ``last_error`` holds the last
            retryable error.
        OperationCancelledError: ``ctx`` was cancelled while sleeping.
    """
    ctx = ctx or background()
    deadline = time.monotonic() + config.timeout

    initial_delay = config.delay
    if config.delay_rand > 0:
        initial_delay += random.uniform(0, config.delay_rand)
    if initial_delay > 0:
        ctx.sleep(min(initial_delay, max(deadline - time.monotonic(), 0)))

    wait = INITIAL_BACKOFF_INTERVAL
    attempt = 0
    last_error: Optional[BaseException] = None

    while True:
        ctx.raise_if_cancelled()
        attempt += 1
        try:
            return body()
        except RetryableError as err:
            last_error = err.cause
        except NonRetryableError as err:
            raise err.cause

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break

        interval = next_backoff_interval(wait, config.min_timeout, config.poll_interval)
        if config.poll_interval <= 0:
            wait *= 2

        logger.debug("Retrying after retryable error",
                     attempt=attempt,
                     sleep=round(min(interval, remaining), 3),
                     error=str(last_error))
        ctx.sleep(min(interval, remaining))

        if time.monotonic() >= deadline:
            break

    logger.debug("Retry budget exhausted", attempts=attempt, timeout=config.timeout)
    raise RetryTimeoutError(config.timeout, last_error)


def retry_with_final_attempt(config: RetryConfig, body: Callable[[], T],
                             ctx: Optional[Context] = None) -> T:
    """Like :func:`retry`, but on timeout call ``body`` once more directly.

    The outcome of that last call is final: its value is returned, and a
    retryable or terminal error is raised unwrapped.
    """
    try:
        return retry(config, body, ctx)
    except RetryTimeoutError:
        logger.debug("Retry timed out, making final attempt")
        return _call_unwrapped(body)


def _call_unwrapped(body: Callable[[], T]) -> T:
    try:
        return body()
    except (RetryableError, NonRetryableError) as err:
        raise err.cause


def retry_when(timeout: float, fn: Callable[[], T], is_retryable: Callable[[BaseException], bool],
               ctx: Optional[Context] = None) -> T:
    """Call ``fn`` until it stops raising errors ``is_retryable`` accepts."""
    def body() -> T:
        try:
            return fn()
        except Exception as err:
            if is_retryable(err):
                raise RetryableError(err) from err
            raise NonRetryableError(err) from err

    return retry_with_final_attempt(RetryConfig(timeout=timeout, min_timeout=0), body, ctx)


def retry_when_aws_error_code_equals(timeout: float, fn: Callable[[], T], *codes: str,
                                     ctx: Optional[Context] = None) -> T:
    """Retry while ``fn`` fails with one of the given AWS error codes."""
    return retry_when(timeout, fn, lambda err: error_code_in(err, *codes), ctx)


def retry_when_aws_error_message_contains(timeout: float, fn: Callable[[], T], code: str,
                                          substring: str, ctx: Optional[Context] = None) -> T:
    return retry_when(timeout, fn, lambda err: error_message_contains(err, code, substring), ctx)


def retry_when_new_resource_not_found(timeout: float, fn: Callable[[], T], is_new_resource: bool,
                                      ctx: Optional[Context] = None) -> T:
    """Retry NotFound only while the resource is freshly created."""
    return retry_when(timeout, fn, lambda err: is_new_resource and is_not_found(err), ctx)


def retry_when_not_found(timeout: float, fn: Callable[[], T], ctx: Optional[Context] = None) -> T:
    return retry_when(timeout, fn, is_not_found, ctx)


def retry_until_not_found(timeout: float, fn: Callable[[], object],
                          ctx: Optional[Context] = None) -> None:
    """Call ``fn`` until it raises a NotFound error.

    Any other error stops the loop. If ``fn`` keeps succeeding past the
    budget a :class:`RetryTimeoutError` is raised.
    """
    def body() -> None:
        try:
            fn()
        except Exception as err:
            if is_not_found(err):
                return None
            raise NonRetryableError(err) from err
        raise RetryableError(RuntimeError("resource still exists"))

    return retry(RetryConfig(timeout=timeout, min_timeout=0), body, ctx)
