"""Sweeper framework: bulk deletion of leftover resources during testing."""

from .clients import reset_shared_clients, shared_client_for_region
from .orchestrator import (
    SWEEP_THROTTLING_RETRY_TIMEOUT,
    SweepResource,
    configure_sweep_orchestrator,
    new_sweep_resource,
    sweep_orchestrator,
)
from .registry import Sweeper, SweeperError, SweeperRegistry, get_sweeper_registry

__all__: list[str] = [
    "SWEEP_THROTTLING_RETRY_TIMEOUT",
    "SweepResource",
    "configure_sweep_orchestrator",
    "Sweeper",
    "SweeperError",
    "SweeperRegistry",
    "get_sweeper_registry",
    "new_sweep_resource",
    "reset_shared_clients",
    "shared_client_for_region",
    "sweep_orchestrator",
]
