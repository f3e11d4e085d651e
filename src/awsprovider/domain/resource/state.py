# src/awsprovider/domain/resource/state.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from awsprovider.domain.resource.schema import Attribute
from awsprovider.domain.resource.timeouts import ResourceTimeout
from awsprovider.infrastructure.resilience.context import Context, background


@dataclass
class ResourceState:
    """Persisted state of one resource instance, owned by the host."""
    id: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    schema_version: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "attributes": copy.deepcopy(self.attributes),
                "schema_version": self.schema_version}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResourceState:
        return cls(id=data.get("id", ""), attributes=copy.deepcopy(data.get("attributes", {})),
                   schema_version=data.get("schema_version", 0))


_MISSING = object()


class ResourceData:
    """
    Typed state accessor handed to every lifecycle handler.

    The prior state (what the host last persisted) and the new values (user
    configuration plus everything handlers ``set``) are kept apart so
    handlers can ask what changed. Handlers only mutate the new values.
    """

    def __init__(self, schema: Dict[str, Attribute], state: Optional[ResourceState] = None,
                 config: Optional[Dict[str, Any]] = None, timeouts: Optional[ResourceTimeout] = None,
                 context: Optional[Context] = None):
        self._schema = schema
        self._id = state.id if state else ""
        self._schema_version = state.schema_version if state else 0
        self._old: Dict[str, Any] = copy.deepcopy(state.attributes) if state else {}
        if config is None:
            self._new = copy.deepcopy(self._old)
        else:
            self._new = copy.deepcopy(config)
            # Computed values survive until a handler refreshes them.
            for name, attr in schema.items():
                if attr.computed and name not in self._new and name in self._old:
                    self._new[name] = copy.deepcopy(self._old[name])
        for name, attr in schema.items():
            if self._new.get(name) is None and attr.default is not None:
                self._new[name] = copy.deepcopy(attr.default)
        self._timeouts = timeouts or ResourceTimeout()
        self._context = context or background()
        self._new_resource = False

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, resource_id: Optional[str]) -> None:
        """Set the identifier; an empty value drops the resource from state."""
        self._id = resource_id or ""

    @property
    def context(self) -> Context:
        return self._context

    def bind_context(self, context: Context) -> None:
        """Run subsequent handler calls under ``context``."""
        self._context = context

    @property
    def schema(self) -> Dict[str, Attribute]:
        return self._schema

    def is_new_resource(self) -> bool:
        return self._new_resource

    def mark_new_resource(self) -> None:
        self._new_resource = True

    def timeout(self, operation: str) -> float:
        return self._timeouts.get(operation)

    def _lookup(self, source: Dict[str, Any], key: str) -> Any:
        current: Any = source
        for part in key.split("."):
            if isinstance(current, dict):
                current = current.get(part, _MISSING)
            elif isinstance(current, (list, tuple)) and part.isdigit():
                index = int(part)
                current = current[index] if index < len(current) else _MISSING
            else:
                return _MISSING
            if current is _MISSING:
                return _MISSING
        return current

    def _zero(self, key: str) -> Any:
        attr = self._schema.get(key.split(".")[0])
        if attr is None or "." in key:
            return None
        return attr.zero_value()

    def get(self, key: str) -> Any:
        """Current value of ``key``; dotted paths reach into nested blocks."""
        value = self._lookup(self._new, key)
        if value is _MISSING or value is None:
            return self._zero(key)
        return value

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        """Value and whether it is set to a non-zero value."""
        value = self.get(key)
        return value, value not in (None, "", 0, [], {})

    def get_change(self, key: str) -> Tuple[Any, Any]:
        old = self._lookup(self._old, key)
        if old is _MISSING or old is None:
            old = self._zero(key)
        return old, self.get(key)

    def has_change(self, key: str) -> bool:
        old, new = self.get_change(key)
        attr = self._schema.get(key.split(".")[0])
        if attr is not None and attr.diff_suppress is not None and attr.diff_suppress(key, old, new, self):
            return False
        return old != new

    def has_changes(self, *keys: str) -> bool:
        return any(self.has_change(key) for key in keys)

    def has_changes_except(self, *keys: str) -> bool:
        return any(self.has_change(key) for key in self._schema if key not in keys)

    def set(self, key: str, value: Any) -> None:
        if key not in self._schema:
            raise KeyError(f"invalid attribute {key!r}")
        self._new[key] = copy.deepcopy(value)

    def raw_config(self) -> Dict[str, Any]:
        return copy.deepcopy(self._new)

    def state(self) -> Optional[ResourceState]:
        """The state to persist, or None once the identifier is cleared."""
        if not self._id:
            return None
        return ResourceState(id=self._id, attributes=copy.deepcopy(self._new),
                             schema_version=self._schema_version)

    def set_schema_version(self, version: int) -> None:
        self._schema_version = version
