"""Sweeper Registry - named sweepers and their dependencies."""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import threading

from awsprovider.infrastructure.error import MultiError
from awsprovider.infrastructure.logging import get_logger

# sweeper(region) -> None, raising on failure
SweeperFunc = Callable[[str], None]


@dataclass(frozen=True)
class Sweeper:
    """A named sweeper; ``dependencies`` run before it."""
    name: str
    fn: SweeperFunc
    dependencies: Tuple[str, ...] = field(default_factory=tuple)


class SweeperError(Exception):
    """A sweeper failed; the underlying error is ``__cause__``."""

    def __init__(self, name: str, region: str, cause: BaseException):
        super().__init__(f"error running ({name}) sweeper in region ({region}): {cause}")
        self.name = name
        self.region = region


class SweeperRegistry:
    """
    Registry of sweepers.

    Thread-safe singleton implementation.
    """

    _instance: Optional['SweeperRegistry'] = None
    _lock = threading.RLock()

    def __init__(self):
        """Initialize sweeper registry."""
        self._sweepers: Dict[str, Sweeper] = {}
        self._logger = get_logger(__name__)
        self._registration_lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'SweeperRegistry':
        """Get singleton instance of sweeper registry."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._lock:
            cls._instance = None

    def add_sweeper(self, name: str, fn: SweeperFunc, dependencies: Iterable[str] = ()) -> None:
        """
        Register a sweeper.

        Raises:
            ValueError: If a sweeper with this name is already registered
        """
        with self._registration_lock:
            if name in self._sweepers:
                raise ValueError(f"Sweeper '{name}' is already registered")
            self._sweepers[name] = Sweeper(name=name, fn=fn, dependencies=tuple(dependencies))
            self._logger.debug("Registered sweeper", name=name)

    def names(self) -> List[str]:
        return sorted(self._sweepers)

    def get(self, name: str) -> Sweeper:
        try:
            return self._sweepers[name]
        except KeyError:
            raise ValueError(f"Unknown sweeper: {name}") from None

    def execution_order(self, names: Optional[Iterable[str]] = None) -> List[str]:
        """
        Sweepers to run, dependencies first.

        Raises:
            ValueError: On unknown sweepers or dependency cycles
        """
        requested = sorted(names) if names else self.names()
        order: List[str] = []
        visiting: List[str] = []

        def visit(name: str) -> None:
            if name in order:
                return
            if name in visiting:
                raise ValueError(f"Sweeper dependency cycle: {' -> '.join(visiting + [name])}")
            visiting.append(name)
            for dependency in self.get(name).dependencies:
                visit(dependency)
            visiting.pop()
            order.append(name)

        for name in requested:
            visit(name)
        return order

    def run(self, region: str, names: Optional[Iterable[str]] = None) -> None:
        """
        Run sweepers for ``region`` in dependency order.

        A failing sweeper does not stop the others.

        Raises:
            MultiError: One SweeperError per failed sweeper
        """
        errors = MultiError()
        for name in self.execution_order(names):
            self._logger.info("Running sweeper", name=name, region=region)
            try:
                self.get(name).fn(region)
            except Exception as err:
                self._logger.error("Sweeper failed", name=name, region=region, error=str(err))
                failure = SweeperError(name, region, err)
                failure.__cause__ = err
                errors.append(failure)
        errors.raise_if_errors()


def get_sweeper_registry() -> SweeperRegistry:
    """Get the global sweeper registry instance."""
    return SweeperRegistry.get_instance()
