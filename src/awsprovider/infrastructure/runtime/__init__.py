"""Lifecycle runtime: descriptor registry and host-facing dispatch."""

from .provider import ResourceProvider
from .registry import ResourceRegistry, UnsupportedResourceError, get_resource_registry

__all__: list[str] = [
    "ResourceProvider",
    "ResourceRegistry",
    "UnsupportedResourceError",
    "get_resource_registry",
]
