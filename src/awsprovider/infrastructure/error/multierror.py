"""Error accumulator used by sweepers and fan-out updates."""
import threading
from typing import Iterable, List, Optional


class MultiError(Exception):
    """Collects several independent errors into one.

    Safe to append to from several worker threads.
    """

    def __init__(self, errors: Optional[Iterable[BaseException]] = None):
        super().__init__()
        self._lock = threading.Lock()
        self.errors: List[BaseException] = []
        for err in errors or ():
            self.append(err)

    def append(self, err: Optional[BaseException]) -> None:
        if err is None:
            return
        with self._lock:
            if isinstance(err, MultiError):
                self.errors.extend(err.errors)
            else:
                self.errors.append(err)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_or_none(self) -> Optional["MultiError"]:
        return self if self.errors else None

    def raise_if_errors(self) -> None:
        if self.errors:
            raise self

    def as_exception_group(self) -> Optional[ExceptionGroup]:
        if not self.errors:
            return None
        return ExceptionGroup(str(self), [e for e in self.errors if isinstance(e, Exception)])

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return f"1 error occurred:\n\t* {self.errors[0]}\n"
        points = "\n".join(f"\t* {err}" for err in self.errors)
        return f"{len(self.errors)} errors occurred:\n{points}\n"
