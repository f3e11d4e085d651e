# src/awsprovider/domain/resource/diff.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from awsprovider.domain.resource.state import ResourceData, ResourceState


@dataclass
class PlannedChange:
    """Result of planning one resource change."""
    planned_attributes: Dict[str, Any]
    changed: List[str] = field(default_factory=list)
    requires_replace: List[str] = field(default_factory=list)
    prior_state: Optional[ResourceState] = None

    @property
    def is_create(self) -> bool:
        return self.prior_state is None

    @property
    def requires_replacement(self) -> bool:
        return bool(self.requires_replace)


class ResourceDiff:
    """View of a planned change handed to CustomizeDiff hooks."""

    def __init__(self, data: ResourceData, changed: List[str], requires_replace: List[str]):
        self._data = data
        self._changed = list(changed)
        self._requires_replace = list(requires_replace)

    @property
    def id(self) -> str:
        return self._data.id

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def get_change(self, key: str) -> Tuple[Any, Any]:
        return self._data.get_change(key)

    def has_change(self, key: str) -> bool:
        return self._data.has_change(key)

    def set_new(self, key: str, value: Any) -> None:
        """Override the planned value of a computed attribute."""
        attr = self._data.schema.get(key)
        if attr is None or not attr.computed:
            raise KeyError(f"set_new only operates on computed attributes, {key!r} is not one")
        self._data.set(key, value)
        if self._data.has_change(key) and key not in self._changed:
            self._changed.append(key)

    def force_new(self, key: str) -> None:
        if not self._data.has_change(key):
            raise ValueError(f"force_new: no change for {key!r}")
        if key not in self._requires_replace:
            self._requires_replace.append(key)

    def to_planned_change(self) -> PlannedChange:
        return PlannedChange(
            planned_attributes=self._data.raw_config(),
            changed=list(self._changed),
            requires_replace=list(self._requires_replace),
        )
