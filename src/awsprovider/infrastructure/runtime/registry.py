"""Resource Registry - maps resource kind names to their descriptors.

Descriptors are registered once at process start (see
``awsprovider.providers.aws.registration``) and live for the process
lifetime.
"""

from typing import Dict, List, Optional
import threading

from awsprovider.domain.resource.descriptor import ResourceDescriptor
from awsprovider.infrastructure.logging import get_logger


class UnsupportedResourceError(Exception):
    """Exception raised when an unknown resource kind is requested."""
    pass


class ResourceRegistry:
    """
    Registry of resource descriptors keyed by kind name.

    Every descriptor is checked with ``internal_validate`` before it is
    accepted. Thread-safe singleton implementation.
    """

    _instance: Optional['ResourceRegistry'] = None
    _lock = threading.RLock()

    def __init__(self):
        """Initialize resource registry."""
        self._descriptors: Dict[str, ResourceDescriptor] = {}
        self._logger = get_logger(__name__)
        self._registration_lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> 'ResourceRegistry':
        """Get singleton instance of resource registry."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the singleton; used by tests."""
        with cls._lock:
            cls._instance = None

    def register(self, descriptor: ResourceDescriptor) -> None:
        """
        Register a resource descriptor.

        Args:
            descriptor: Resource kind declaration

        Raises:
            ValueError: If the kind is already registered
            SchemaDefinitionError: If the descriptor is invalid
        """
        descriptor.internal_validate()
        with self._registration_lock:
            if descriptor.name in self._descriptors:
                raise ValueError(f"Resource kind '{descriptor.name}' is already registered")
            self._descriptors[descriptor.name] = descriptor
            self._logger.debug("Registered resource kind", kind=descriptor.name)

    def unregister(self, name: str) -> bool:
        """
        Unregister a resource kind.

        Returns:
            True if the kind was unregistered, False if not found
        """
        with self._registration_lock:
            if name in self._descriptors:
                del self._descriptors[name]
                return True
            return False

    def is_registered(self, name: str) -> bool:
        return name in self._descriptors

    def get(self, name: str) -> ResourceDescriptor:
        """
        Get the descriptor of a resource kind.

        Raises:
            UnsupportedResourceError: If the kind is not registered
        """
        descriptor = self._descriptors.get(name)
        if descriptor is None:
            raise UnsupportedResourceError(
                f"Unsupported resource kind: {name}. Registered kinds: {', '.join(sorted(self._descriptors))}"
            )
        return descriptor

    def names(self) -> List[str]:
        return sorted(self._descriptors)


def get_resource_registry() -> ResourceRegistry:
    """Get the global resource registry instance."""
    return ResourceRegistry.get_instance()
