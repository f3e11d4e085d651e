# src/awsprovider/domain/resource/timeouts.py
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from awsprovider.domain.core.durations import parse_duration
from awsprovider.domain.core.exceptions import ValidationError

DEFAULT_TIMEOUT = 20 * 60.0

OPERATIONS = ("create", "read", "update", "delete", "default")


@dataclass(frozen=True)
class ResourceTimeout:
    """Per-operation timeouts in seconds; unset operations use ``default``."""
    create: Optional[float] = None
    read: Optional[float] = None
    update: Optional[float] = None
    delete: Optional[float] = None
    default: Optional[float] = None

    def get(self, operation: str) -> float:
        if operation not in OPERATIONS:
            raise ValueError(f"unknown operation: {operation}")
        value = getattr(self, operation)
        if value is not None:
            return value
        return self.default if self.default is not None else DEFAULT_TIMEOUT

    def with_overrides(self, overrides: Optional[Dict[str, Any]]) -> ResourceTimeout:
        """Apply user overrides such as ``{"create": "10m"}``.

        Only operations the resource declares can be overridden.
        """
        if not overrides:
            return self
        changes = {}
        for operation, value in overrides.items():
            if operation not in OPERATIONS:
                raise ValidationError(f"unsupported timeout key {operation!r}", field_path="timeouts")
            if getattr(self, operation) is None and operation != "default":
                raise ValidationError(f"timeout for {operation!r} is not supported by this resource",
                                      field_path="timeouts")
            try:
                changes[operation] = parse_duration(value)
            except ValueError as e:
                raise ValidationError(str(e), field_path=f"timeouts.{operation}") from e
        return replace(self, **changes)
