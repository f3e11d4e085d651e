"""Resource descriptors, state accessors and identifiers."""

from .descriptor import Importer, ResourceDescriptor, StateUpgrader, import_state_passthrough
from .diff import PlannedChange, ResourceDiff
from .identifiers import CompositeId
from .schema import Attribute, AttributeType, validate_schema_values
from .state import ResourceData, ResourceState
from .timeouts import DEFAULT_TIMEOUT, ResourceTimeout

__all__: list[str] = [
    "Attribute",
    "AttributeType",
    "CompositeId",
    "DEFAULT_TIMEOUT",
    "Importer",
    "PlannedChange",
    "ResourceData",
    "ResourceDescriptor",
    "ResourceDiff",
    "ResourceState",
    "ResourceTimeout",
    "StateUpgrader",
    "import_state_passthrough",
    "validate_schema_values",
]
