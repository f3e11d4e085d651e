"""Lifecycle dispatch: the entry points the host calls for every resource kind.

``ResourceProvider`` builds the state accessor for each call, gives the
handler a context bounded by the operation timeout and translates handler
outcomes into the host contract:

- Read that clears the identifier means the resource is gone: ``None``.
- NotFound during Delete is success.
- NotFound during Update is reported as "resource gone".
- Every other failure is wrapped in ``ResourceOperationError`` carrying the
  kind, identifier and operation, with the original error as ``__cause__``.
"""
from typing import Any, Callable, Dict, List, Optional

from awsprovider.domain.core.exceptions import ResourceOperationError, ValidationError
from awsprovider.domain.resource.descriptor import ResourceDescriptor
from awsprovider.domain.resource.diff import PlannedChange, ResourceDiff
from awsprovider.domain.resource.state import ResourceData, ResourceState
from awsprovider.infrastructure.error import NotFoundError, is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience.context import Context, background
from awsprovider.infrastructure.runtime.registry import ResourceRegistry, get_resource_registry


class ResourceProvider:
    """Dispatches host lifecycle calls to registered resource descriptors."""

    def __init__(self, meta: Any, registry: Optional[ResourceRegistry] = None):
        """
        Initialize the provider.

        Args:
            meta: Provider-wide handle passed to every handler (the AWS client)
            registry: Descriptor registry; the global registry when omitted
        """
        self.meta = meta
        self.registry = registry or get_resource_registry()
        self._logger = get_logger(__name__)

    def _descriptor(self, kind: str) -> ResourceDescriptor:
        return self.registry.get(kind)

    def _data(self, descriptor: ResourceDescriptor, operation: str, ctx: Optional[Context],
              state: Optional[ResourceState] = None, config: Optional[Dict[str, Any]] = None) -> ResourceData:
        user_timeouts = (config or {}).get("timeouts")
        timeout = descriptor.timeouts.with_overrides(user_timeouts).get(operation)
        return descriptor.new_data(state=state, config=config,
                                   context=(ctx or background()).with_timeout(timeout))

    def _invoke(self, descriptor: ResourceDescriptor, operation: str,
                handler: Optional[Callable[[ResourceData, Any], None]], data: ResourceData) -> None:
        if handler is None:
            raise ResourceOperationError(descriptor.name, operation, data.id or None,
                                         NotImplementedError(f"{operation} is not supported"))
        data.context.raise_if_cancelled()
        self._logger.debug("Invoking handler", kind=descriptor.name, operation=operation, id=data.id)
        handler(data, self.meta)

    def validate_resource_config(self, kind: str, config: Dict[str, Any]) -> None:
        """
        Validate user configuration before any SDK call.

        Raises:
            ValidationError: With the offending field path
        """
        self._descriptor(kind).validate_config(config)

    def plan_resource_change(self, kind: str, prior_state: Optional[ResourceState],
                             proposed_config: Optional[Dict[str, Any]],
                             ctx: Optional[Context] = None) -> Optional[PlannedChange]:
        """
        Plan a change from ``prior_state`` towards ``proposed_config``.

        Returns None when the resource is to be destroyed. Otherwise lists the
        changed attributes, honouring diff-suppress functions, and the
        attributes forcing replacement, after running the customize-diff hook.
        """
        if proposed_config is None:
            return None
        descriptor = self._descriptor(kind)
        descriptor.validate_config(proposed_config)

        data = descriptor.new_data(state=prior_state, config=proposed_config, context=ctx)
        changed = [name for name, attr in descriptor.schema.items()
                   if attr.user_settable and data.has_change(name)]
        requires_replace = []
        if prior_state is not None:
            requires_replace = [name for name in changed if descriptor.schema[name].force_new]

        diff = ResourceDiff(data, changed, requires_replace)
        if descriptor.customize_diff is not None:
            try:
                descriptor.customize_diff(diff, self.meta)
            except (ValidationError, ResourceOperationError):
                raise
            except Exception as err:
                raise ResourceOperationError(kind, "plan", data.id or None, err) from err

        planned = diff.to_planned_change()
        planned.prior_state = prior_state
        if planned.requires_replace:
            self._logger.info("Change requires replacement", kind=kind, id=data.id,
                              attributes=planned.requires_replace)
        return planned

    def create_resource(self, kind: str, config: Dict[str, Any], ctx: Optional[Context] = None) -> ResourceState:
        """
        Create a resource.

        Raises:
            ResourceOperationError: On failure; ``partial_state`` holds the
                state to persist when the remote object was created
        """
        descriptor = self._descriptor(kind)
        descriptor.validate_config(config)
        data = self._data(descriptor, "create", ctx, config=config)
        data.mark_new_resource()
        try:
            self._invoke(descriptor, "create", descriptor.create, data)
        except ResourceOperationError:
            raise
        except Exception as err:
            partial = data.state()
            if partial is not None:
                self._logger.warning("Create failed after the resource was created; state is tainted",
                                     kind=kind, id=partial.id)
            raise ResourceOperationError(kind, "create", data.id or None, err, partial_state=partial) from err

        state = data.state()
        if state is None:
            raise ResourceOperationError(kind, "create", None,
                                         RuntimeError("create handler did not set an identifier"))
        return state

    def read_resource(self, kind: str, state: ResourceState,
                      ctx: Optional[Context] = None) -> Optional[ResourceState]:
        """Refresh ``state``; None means the resource no longer exists."""
        descriptor = self._descriptor(kind)
        data = self._data(descriptor, "read", ctx, state=state)
        try:
            self._invoke(descriptor, "read", descriptor.read, data)
        except ResourceOperationError:
            raise
        except Exception as err:
            if is_not_found(err):
                self._logger.warning("Resource not found, removing from state", kind=kind, id=state.id)
                return None
            raise ResourceOperationError(kind, "read", state.id, err) from err

        refreshed = data.state()
        if refreshed is None:
            self._logger.warning("Resource not found, removing from state", kind=kind, id=state.id)
        return refreshed

    def update_resource(self, kind: str, prior_state: ResourceState, config: Dict[str, Any],
                        ctx: Optional[Context] = None) -> ResourceState:
        descriptor = self._descriptor(kind)
        descriptor.validate_config(config)
        data = self._data(descriptor, "update", ctx, state=prior_state, config=config)
        try:
            self._invoke(descriptor, "update", descriptor.update, data)
        except ResourceOperationError:
            raise
        except Exception as err:
            if is_not_found(err):
                gone = NotFoundError(message=f"resource gone: {err}", last_error=err)
                raise ResourceOperationError(kind, "update", prior_state.id, gone) from err
            raise ResourceOperationError(kind, "update", prior_state.id, err) from err

        state = data.state()
        if state is None:
            raise ResourceOperationError(kind, "update", prior_state.id,
                                         NotFoundError(message="resource gone during update"))
        return state

    def delete_resource(self, kind: str, state: ResourceState, ctx: Optional[Context] = None) -> None:
        """Delete a resource; a resource that is already gone counts as deleted."""
        descriptor = self._descriptor(kind)
        data = self._data(descriptor, "delete", ctx, state=state)
        try:
            self._invoke(descriptor, "delete", descriptor.delete, data)
        except ResourceOperationError:
            raise
        except Exception as err:
            if is_not_found(err):
                self._logger.info("Resource already deleted", kind=kind, id=state.id)
                return
            raise ResourceOperationError(kind, "delete", state.id, err) from err

    def import_resource(self, kind: str, resource_id: str, ctx: Optional[Context] = None) -> List[ResourceState]:
        """Turn an identifier into the states the host should read next."""
        descriptor = self._descriptor(kind)
        if descriptor.importer is None:
            raise ResourceOperationError(kind, "import", resource_id,
                                         NotImplementedError("resource does not support import"))
        data = self._data(descriptor, "read", ctx, state=ResourceState(id=resource_id))
        try:
            data.context.raise_if_cancelled()
            results = descriptor.importer.state(data, self.meta)
        except ResourceOperationError:
            raise
        except Exception as err:
            raise ResourceOperationError(kind, "import", resource_id, err) from err
        return [result.state() for result in results if result.state() is not None]

    def upgrade_resource_state(self, kind: str, state: ResourceState) -> ResourceState:
        """Bring a state stored at an older schema version up to date."""
        descriptor = self._descriptor(kind)
        if state.schema_version == descriptor.schema_version:
            return state
        try:
            attributes = descriptor.upgrade_state(state.attributes, state.schema_version, self.meta)
        except Exception as err:
            raise ResourceOperationError(kind, "upgrade state", state.id, err) from err
        self._logger.debug("Upgraded resource state", kind=kind, id=state.id,
                           from_version=state.schema_version, to_version=descriptor.schema_version)
        return ResourceState(id=state.id, attributes=attributes, schema_version=descriptor.schema_version)
