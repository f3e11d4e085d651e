"""Concurrent deletion of discovered resources."""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from awsprovider.domain.resource.descriptor import ResourceDescriptor
from awsprovider.domain.resource.state import ResourceData, ResourceState
from awsprovider.infrastructure.error import MultiError, is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience import (
    Context,
    NonRetryableError,
    OperationCancelledError,
    RetryableError,
    RetryConfig,
    background,
    retry_with_final_attempt,
)

logger = get_logger(__name__)

SWEEP_THROTTLING_RETRY_TIMEOUT = 10 * 60.0
DEFAULT_MAX_WORKERS = 10

_settings = {"throttling_retry_timeout": SWEEP_THROTTLING_RETRY_TIMEOUT, "max_workers": DEFAULT_MAX_WORKERS}


@dataclass
class SweepResource:
    """One discovered resource: its kind, a state accessor and the client."""
    descriptor: ResourceDescriptor
    data: ResourceData
    meta: Any


def new_sweep_resource(descriptor: ResourceDescriptor, resource_id: str, meta: Any,
                       ctx: Optional[Context] = None, **attributes: Any) -> SweepResource:
    """Build a SweepResource whose state holds ``resource_id`` and ``attributes``."""
    data = descriptor.new_data(state=ResourceState(id=resource_id, attributes=attributes), context=ctx)
    return SweepResource(descriptor=descriptor, data=data, meta=meta)


def _delete(resource: SweepResource) -> None:
    resource.descriptor.delete(resource.data, resource.meta)


def _sweep_one(resource: SweepResource, config: RetryConfig, ctx: Context) -> None:
    resource.data.bind_context(ctx.with_timeout(resource.data.timeout("delete")))

    def body() -> None:
        try:
            _delete(resource)
        except OperationCancelledError:
            raise
        except Exception as err:
            if is_not_found(err):
                logger.info("Resource already deleted", kind=resource.descriptor.name, id=resource.data.id)
                return
            if "Throttling" in str(err):
                logger.info("Encountered throttling error while sweeping resource, retrying",
                            kind=resource.descriptor.name, id=resource.data.id, error=str(err))
                raise RetryableError(err) from err
            raise NonRetryableError(err) from err

    retry_with_final_attempt(config, body, ctx)


def sweep_orchestrator(resources: Sequence[SweepResource], ctx: Optional[Context] = None,
                       config: Optional[RetryConfig] = None, max_workers: Optional[int] = None) -> None:
    """
    Delete every resource in parallel and wait for all of them.

    Each delete is retried while its error mentions throttling, followed by
    one final direct attempt when the budget runs out. There is no ordering
    between resources.

    Raises:
        MultiError: One entry per resource that could not be deleted
    """
    if not resources:
        return

    ctx = ctx or background()
    config = config or RetryConfig(timeout=_settings["throttling_retry_timeout"], min_timeout=0)
    max_workers = max_workers or _settings["max_workers"]
    errors = MultiError()

    with ThreadPoolExecutor(max_workers=min(max_workers, len(resources)),
                            thread_name_prefix="sweeper") as executor:
        futures = {executor.submit(_sweep_one, resource, config, ctx): resource for resource in resources}
        for future, resource in futures.items():
            err = future.exception()
            if err is not None:
                logger.error("Error sweeping resource", kind=resource.descriptor.name,
                             id=resource.data.id, error=str(err))
                errors.append(err)

    errors.raise_if_errors()


def configure_sweep_orchestrator(throttling_retry_timeout: Optional[float] = None,
                                 max_workers: Optional[int] = None) -> None:
    """Set the process-wide defaults used when sweepers call :func:`sweep_orchestrator` bare."""
    if throttling_retry_timeout is not None:
        _settings["throttling_retry_timeout"] = throttling_retry_timeout
    if max_workers is not None:
        _settings["max_workers"] = max_workers
