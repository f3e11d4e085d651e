"""Named mutex table serializing sibling operations on the same remote parent."""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from awsprovider.infrastructure.logging import get_logger

logger = get_logger(__name__)


class MutexKV:
    """
    Key/value store of mutexes.

    A single lock guards the table; each key lazily gets its own mutex which
    is never removed, so two callers asking for the same key always contend
    on the same mutex.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._store: Dict[str, threading.Lock] = {}

    def lock(self, key: str) -> None:
        logger.debug("Locking", key=key)
        self.get(key).acquire()
        logger.debug("Locked", key=key)

    def unlock(self, key: str) -> None:
        logger.debug("Unlocking", key=key)
        self.get(key).release()
        logger.debug("Unlocked", key=key)

    def get(self, key: str) -> threading.Lock:
        with self._lock:
            mutex = self._store.get(key)
            if mutex is None:
                mutex = threading.Lock()
                self._store[key] = mutex
            return mutex

    @contextmanager
    def locked(self, key: str) -> Iterator[None]:
        """Hold ``key`` for the duration of the block, releasing on every exit path."""
        self.lock(key)
        try:
            yield
        finally:
            self.unlock(key)


# Process-wide table used by resource handlers.
mutex_kv = MutexKV()
