"""Polling state machine blocking until a remote resource reaches a target state."""
import time
from typing import Any, Callable, Iterable, Optional, Tuple

from awsprovider.infrastructure.error import NotFoundError, is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience.config import (
    INITIAL_BACKOFF_INTERVAL,
    next_backoff_interval,
)
from awsprovider.infrastructure.resilience.context import Context, background
from awsprovider.infrastructure.resilience.exceptions import (
    UnexpectedStateError,
    WaiterTimeoutError,
)

logger = get_logger(__name__)

RefreshFunc = Callable[[], Tuple[Any, str]]

# Target states meaning "the resource is gone".
DELETED_STATE_SYNONYMS = frozenset({"deleted", "delete_complete"})


class StateChangeConf:
    """
    Configuration for waiting on a remote state transition.

    ``refresh`` returns ``(obj, state)``. A ``None`` object, or a raised
    NotFound-classified error, means the resource was not found. Absence
    waiters (empty target, or a target naming a deleted state) succeed after
    ``not_found_checks`` consecutive not-found observations; presence waiters
    surface the NotFound error immediately.

    Args:
        pending: States that keep the waiter polling
        target: States that end the wait successfully
        refresh: Function reporting the current object and state
        timeout: Total budget in seconds
        delay: Seconds to sleep before the first refresh
        min_timeout: Lower bound of the backoff interval
        poll_interval: Fixed interval between refreshes when positive
        not_found_checks: Consecutive NotFounds required by absence waiters
        continuous_target_occurence: Consecutive target observations required
    """

    def __init__(self, pending: Iterable[str], target: Iterable[str], refresh: RefreshFunc,
                 timeout: float, delay: float = 0, min_timeout: float = 0, poll_interval: float = 0,
                 not_found_checks: int = 1, continuous_target_occurence: int = 1):
        self.pending = list(pending)
        self.target = list(target)
        overlap = set(self.pending) & set(self.target)
        if overlap:
            raise ValueError(f"states cannot be both pending and target: {sorted(overlap)}")
        if timeout < 0 or delay < 0 or min_timeout < 0 or poll_interval < 0:
            raise ValueError("waiter durations must be non-negative")
        self.refresh = refresh
        self.timeout = timeout
        self.delay = delay
        self.min_timeout = min_timeout
        self.poll_interval = poll_interval
        self.not_found_checks = max(not_found_checks, 1)
        self.continuous_target_occurence = max(continuous_target_occurence, 1)

    @property
    def waits_for_absence(self) -> bool:
        if not self.target:
            return True
        return any(state.lower() in DELETED_STATE_SYNONYMS for state in self.target)

    def wait_for_state(self, ctx: Optional[Context] = None) -> Any:
        """Poll until a target state is reached and return the last object.

        Raises:
            UnexpectedStateError: a state outside pending and target was seen.
            WaiterTimeoutError: the budget elapsed.
            OperationCancelledError: ``ctx`` was cancelled while sleeping.
        """
        ctx = ctx or background()
        deadline = time.monotonic() + self.timeout

        if self.delay > 0:
            ctx.sleep(min(self.delay, self.timeout))

        wait = INITIAL_BACKOFF_INTERVAL
        not_found_count = 0
        target_count = 0
        last_state = ""
        last_error: Optional[BaseException] = None
        first = True

        while True:
            if not first:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise WaiterTimeoutError(self.timeout, self.target, last_state, last_error)
                interval = next_backoff_interval(wait, self.min_timeout, self.poll_interval)
                if not 0 < self.poll_interval < 180:
                    wait = interval * 2
                ctx.sleep(min(interval, remaining))
                if time.monotonic() >= deadline:
                    raise WaiterTimeoutError(self.timeout, self.target, last_state, last_error)
            first = False

            ctx.raise_if_cancelled()
            refresh_error: Optional[BaseException] = None
            try:
                obj, state = self.refresh()
            except Exception as err:
                if not is_not_found(err):
                    raise
                obj, state = None, ""
                refresh_error = last_error = err

            if obj is None:
                if not self.waits_for_absence:
                    if refresh_error is not None:
                        raise refresh_error
                    raise NotFoundError(message="couldn't find resource while waiting for state")
                target_count = 0
                not_found_count += 1
                logger.debug("Resource not found while waiting",
                             not_found_count=not_found_count,
                             required=self.not_found_checks)
                if not_found_count >= self.not_found_checks:
                    return None
                continue

            not_found_count = 0
            last_error = None
            if state != last_state:
                logger.debug("Waiting for state transition", state=state, target=self.target)
            last_state = state

            if state in self.target:
                target_count += 1
                if target_count >= self.continuous_target_occurence:
                    return obj
                continue
            target_count = 0

            if state in self.pending:
                continue

            raise UnexpectedStateError(state, self.target)
