# src/awsprovider/domain/resource/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

# validator(value, path) -> list of error messages
Validator = Callable[[Any, str], List[str]]
# diff_suppress(key, old, new, data) -> True when the change is not meaningful
DiffSuppressFunc = Callable[[str, Any, Any, Any], bool]


class AttributeType(str, Enum):
    """Semantic attribute types."""
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    LIST = "list"
    SET = "set"
    MAP = "map"

    @property
    def is_collection(self) -> bool:
        return self in (AttributeType.LIST, AttributeType.SET, AttributeType.MAP)


_SCALAR_TYPES = {
    AttributeType.STRING: (str,),
    AttributeType.INT: (int,),
    AttributeType.FLOAT: (int, float),
    AttributeType.BOOL: (bool,),
}


@dataclass
class Attribute:
    """One entry of a resource schema."""
    type: AttributeType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    validators: List[Validator] = field(default_factory=list)
    diff_suppress: Optional[DiffSuppressFunc] = None
    conflicts_with: List[str] = field(default_factory=list)
    at_least_one_of: List[str] = field(default_factory=list)
    exactly_one_of: List[str] = field(default_factory=list)
    sensitive: bool = False
    elem: Union["Attribute", Dict[str, "Attribute"], None] = None
    min_items: int = 0
    max_items: int = 0
    description: str = ""

    @property
    def user_settable(self) -> bool:
        return self.required or self.optional

    @property
    def computed_only(self) -> bool:
        return self.computed and not self.user_settable

    @property
    def nested_schema(self) -> Optional[Dict[str, "Attribute"]]:
        return self.elem if isinstance(self.elem, dict) else None

    def zero_value(self) -> Any:
        if self.type == AttributeType.STRING:
            return ""
        if self.type == AttributeType.INT:
            return 0
        if self.type == AttributeType.FLOAT:
            return 0.0
        if self.type == AttributeType.BOOL:
            return False
        if self.type == AttributeType.MAP:
            return {}
        return []

    def validate_value(self, value: Any, path: str) -> List[str]:
        """Type, size and validator checks for a user supplied value."""
        if value is None:
            return []

        errors: List[str] = []
        scalar_types = _SCALAR_TYPES.get(self.type)
        if scalar_types is not None:
            if isinstance(value, bool) and self.type != AttributeType.BOOL:
                return [f"{path}: expected {self.type.value}, got bool"]
            if not isinstance(value, scalar_types):
                return [f"{path}: expected {self.type.value}, got {type(value).__name__}"]
        elif self.type == AttributeType.MAP:
            if not isinstance(value, dict):
                return [f"{path}: expected map, got {type(value).__name__}"]
            if isinstance(self.elem, Attribute):
                for key, item in value.items():
                    errors.extend(self.elem.validate_value(item, f"{path}.{key}"))
        else:
            if not isinstance(value, (list, tuple, set, frozenset)):
                return [f"{path}: expected {self.type.value}, got {type(value).__name__}"]
            if self.min_items and len(value) < self.min_items:
                errors.append(f"{path}: attribute supports {self.min_items} item minimum, config has {len(value)} declared")
            if self.max_items and len(value) > self.max_items:
                errors.append(f"{path}: attribute supports {self.max_items} item maximum, config has {len(value)} declared")
            for index, item in enumerate(value):
                item_path = f"{path}.{index}"
                if isinstance(self.elem, Attribute):
                    errors.extend(self.elem.validate_value(item, item_path))
                elif isinstance(self.elem, dict):
                    errors.extend(validate_schema_values(self.elem, item, item_path))

        for validator in self.validators:
            errors.extend(validator(value, path))
        return errors


def validate_schema_values(schema: Dict[str, Attribute], values: Any, path: str = "") -> List[str]:
    """Validate a configuration block against ``schema``.

    Checks required attributes, computed-only attributes set by the user,
    per-attribute validators and the conflicts/at-least-one/exactly-one
    groups. Returns the list of error messages.
    """
    if not isinstance(values, dict):
        return [f"{path or 'config'}: expected block, got {type(values).__name__}"]

    def qualify(name: str) -> str:
        return f"{path}.{name}" if path else name

    def is_set(name: str) -> bool:
        return values.get(name) not in (None, "", [], {})

    errors: List[str] = []
    for name in values:
        if name not in schema:
            errors.append(f"{qualify(name)}: unsupported argument")

    for name, attr in schema.items():
        value = values.get(name)
        if attr.required and not is_set(name) and attr.default is None:
            errors.append(f"{qualify(name)}: required attribute is not set")
            continue
        if attr.computed_only and is_set(name):
            errors.append(f"{qualify(name)}: attribute is computed and cannot be set")
            continue
        errors.extend(attr.validate_value(value, qualify(name)))

        if is_set(name):
            for other in attr.conflicts_with:
                if is_set(other):
                    errors.append(f"{qualify(name)}: conflicts with {other}")
        if attr.at_least_one_of and not any(is_set(other) for other in attr.at_least_one_of):
            errors.append(f"{qualify(name)}: one of `{','.join(attr.at_least_one_of)}` must be specified")
        if attr.exactly_one_of:
            count = sum(1 for other in attr.exactly_one_of if is_set(other))
            if count != 1:
                errors.append(f"{qualify(name)}: exactly one of `{','.join(attr.exactly_one_of)}` must be specified")

    # at_least_one_of/exactly_one_of groups repeat on every member
    return list(dict.fromkeys(errors))
