"""Cancellation token threaded through handlers, retries, waiters and sweepers.

Sleeping through the context is the only suspension point the core owns:
``sleep`` returns early when the context is cancelled. In-flight SDK calls are
never interrupted.
"""
import threading
import time
from typing import Optional

from awsprovider.infrastructure.resilience.exceptions import OperationCancelledError


class Context:
    """A cancellable context with an optional deadline."""

    def __init__(self, parent: Optional["Context"] = None, deadline: Optional[float] = None):
        self._event = threading.Event()
        self._parent = parent
        self._deadline = deadline
        self._reason: Optional[str] = None

    def with_timeout(self, seconds: float) -> "Context":
        """Child context cancelled with its parent or after ``seconds``."""
        return Context(parent=self, deadline=time.monotonic() + seconds)

    def with_cancel(self) -> "Context":
        return Context(parent=self)

    def cancel(self, reason: str = "context cancelled") -> None:
        self._reason = reason
        self._event.set()

    @property
    def deadline(self) -> Optional[float]:
        deadlines = [d for d in (self._deadline, self._parent.deadline if self._parent else None) if d is not None]
        return min(deadlines) if deadlines else None

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._parent is not None and self._parent.cancelled:
            return True
        deadline = self._deadline
        return deadline is not None and time.monotonic() >= deadline

    @property
    def reason(self) -> str:
        if self._reason:
            return self._reason
        if self._parent is not None and self._parent.cancelled:
            return self._parent.reason
        return "context deadline exceeded"

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelledError(self.reason)

    def sleep(self, seconds: float) -> None:
        """Sleep up to ``seconds``; raise OperationCancelledError if cancelled meanwhile."""
        self.raise_if_cancelled()
        end = time.monotonic() + max(seconds, 0)
        while True:
            remaining = end - time.monotonic()
            if remaining <= 0:
                break
            # Poll in small slices so parent cancellation is also observed.
            if self._event.wait(min(remaining, 0.05)):
                break
            if self.cancelled:
                break
        self.raise_if_cancelled()


def background() -> Context:
    """A context that is never cancelled unless cancelled explicitly."""
    return Context()
