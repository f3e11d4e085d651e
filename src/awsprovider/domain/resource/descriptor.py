# src/awsprovider/domain/resource/descriptor.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from awsprovider.domain.core.exceptions import SchemaDefinitionError, ValidationError
from awsprovider.domain.resource.diff import ResourceDiff
from awsprovider.domain.resource.schema import Attribute, validate_schema_values
from awsprovider.domain.resource.state import ResourceData, ResourceState
from awsprovider.domain.resource.timeouts import ResourceTimeout
from awsprovider.infrastructure.resilience.context import Context

# handler(data, meta) -> None
Handler = Callable[[ResourceData, Any], None]
CustomizeDiffFunc = Callable[[ResourceDiff, Any], None]


@dataclass(frozen=True)
class StateUpgrader:
    """Rewrites raw attributes stored at ``version`` into ``version + 1``.

    ``upgrade(raw_attributes, meta)`` must be pure: it receives a copy and
    returns the new attribute map.
    """
    version: int
    upgrade: Callable[[Dict[str, Any], Any], Dict[str, Any]]


@dataclass(frozen=True)
class Importer:
    """Turns an identifier into one or more partially populated states.

    ``state(data, meta)`` receives a ResourceData carrying only the
    identifier and returns the list of ResourceData to read.
    """
    state: Callable[[ResourceData, Any], List[ResourceData]]


def import_state_passthrough(data: ResourceData, meta: Any) -> List[ResourceData]:
    """Importer for resources whose identifier is all Read needs."""
    return [data]


@dataclass
class ResourceDescriptor:
    """Static declaration of a resource kind: schema, handlers and timeouts."""
    name: str
    schema: Dict[str, Attribute]
    create: Optional[Handler] = None
    read: Optional[Handler] = None
    update: Optional[Handler] = None
    delete: Optional[Handler] = None
    importer: Optional[Importer] = None
    schema_version: int = 0
    state_upgraders: List[StateUpgrader] = field(default_factory=list)
    timeouts: ResourceTimeout = field(default_factory=ResourceTimeout)
    customize_diff: Optional[CustomizeDiffFunc] = None
    description: str = ""

    def internal_validate(self) -> None:
        """
        Check the descriptor for programming errors.

        Raises:
            SchemaDefinitionError: Listing every problem found
        """
        errors: List[str] = []

        if self.create is None:
            errors.append("Create must be implemented")
        if self.read is None:
            errors.append("Read must be implemented")
        if self.delete is None:
            errors.append("Delete must be implemented")

        errors.extend(self._validate_schema(self.schema, ""))

        settable = [name for name, attr in self.schema.items() if attr.user_settable]
        if self.update is None:
            for name in settable:
                if not self.schema[name].force_new:
                    errors.append(f"{name}: all fields are ForceNew or Computed w/out Optional, "
                                  f"Update is not defined so {name} must be ForceNew")
        elif settable and all(self.schema[name].force_new for name in settable):
            errors.append("all fields are ForceNew or Computed w/out Optional, Update is superfluous")

        name_attr = self.schema.get("name")
        prefix_attr = self.schema.get("name_prefix")
        if name_attr is not None and prefix_attr is not None \
                and name_attr.user_settable and prefix_attr.user_settable:
            if "name_prefix" not in name_attr.conflicts_with or "name" not in prefix_attr.conflicts_with:
                errors.append("name and name_prefix must conflict with each other")

        expected_versions = list(range(self.schema_version))
        versions = [upgrader.version for upgrader in self.state_upgraders]
        if self.state_upgraders and versions != expected_versions:
            errors.append(f"state upgraders must cover versions {expected_versions} in order, got {versions}")

        if errors:
            raise SchemaDefinitionError(self.name, errors)

    def _validate_schema(self, schema: Dict[str, Attribute], prefix: str) -> List[str]:
        errors: List[str] = []
        for name, attr in schema.items():
            path = f"{prefix}{name}"
            if not (attr.required or attr.optional or attr.computed):
                errors.append(f"{path}: one of optional, required, or computed must be set")
            if attr.required and attr.optional:
                errors.append(f"{path}: optional or required must be set, not both")
            if attr.required and attr.computed:
                errors.append(f"{path}: cannot be both required and computed")
            if attr.computed_only and attr.default is not None:
                errors.append(f"{path}: default must be nil if computed")
            if attr.computed_only and attr.force_new:
                errors.append(f"{path}: computed-only field cannot be ForceNew")
            if attr.required and attr.default is not None:
                errors.append(f"{path}: default must be nil if required")
            for other in attr.conflicts_with + attr.at_least_one_of + attr.exactly_one_of:
                if other not in schema:
                    errors.append(f"{path}: references unknown attribute {other!r}")
            if attr.type.is_collection is False and attr.elem is not None:
                errors.append(f"{path}: elem is only valid for list, set and map attributes")
            nested = attr.nested_schema
            if nested is not None:
                errors.extend(self._validate_schema(nested, f"{path}."))
        return errors

    def validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate user configuration before any SDK call.

        Raises:
            ValidationError: For the first invalid attribute; all messages
                are in ``details``
        """
        timeouts = config.get("timeouts")
        values = {k: v for k, v in config.items() if k != "timeouts"}
        errors = validate_schema_values(self.schema, values)
        if errors:
            first = errors[0]
            field_path, _, message = first.partition(": ")
            raise ValidationError(message or first, field_path=field_path or None, details=errors)
        self.timeouts.with_overrides(timeouts)

    def new_data(self, state: Optional[ResourceState] = None, config: Optional[Dict[str, Any]] = None,
                 context: Optional[Context] = None) -> ResourceData:
        """Build the state accessor for one handler invocation."""
        user_timeouts = None
        if config is not None:
            config = dict(config)
            user_timeouts = config.pop("timeouts", None)
        data = ResourceData(self.schema, state=state, config=config,
                            timeouts=self.timeouts.with_overrides(user_timeouts), context=context)
        data.set_schema_version(self.schema_version)
        return data

    def upgrade_state(self, raw_attributes: Dict[str, Any], version: int, meta: Any = None) -> Dict[str, Any]:
        """Apply state upgraders in sequence from ``version`` to the current version."""
        if version > self.schema_version:
            raise ValueError(f"{self.name}: state version {version} is newer than schema version {self.schema_version}")
        attributes = copy.deepcopy(raw_attributes)
        for upgrader in self.state_upgraders:
            if upgrader.version < version:
                continue
            attributes = upgrader.upgrade(copy.deepcopy(attributes), meta)
        return attributes
