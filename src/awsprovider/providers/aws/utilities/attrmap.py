"""Mapping between resource attributes and string-valued API attribute maps.

Some services (SQS, SNS) take and return every setting as a
``{"ApiName": "string value"}`` map. ``AttributeMap`` converts in both
directions using the schema type of each attribute.
"""
import json
from typing import Any, Dict, Optional

from awsprovider.domain.resource.schema import Attribute, AttributeType
from awsprovider.domain.resource.state import ResourceData


class AttributeMap:
    """Bidirectional attribute name mapping driven by a resource schema."""

    def __init__(self, names: Dict[str, str], schema: Dict[str, Attribute]):
        for name in names:
            if name not in schema:
                raise ValueError(f"attribute {name!r} is not in the schema")
        self._names = dict(names)
        self._schema = schema

    def _to_api(self, name: str, value: Any) -> str:
        attr_type = self._schema[name].type
        if attr_type == AttributeType.BOOL:
            return "true" if value else "false"
        if attr_type in (AttributeType.INT, AttributeType.FLOAT):
            return str(value)
        return "" if value is None else str(value)

    def _from_api(self, name: str, value: str) -> Any:
        attr_type = self._schema[name].type
        if attr_type == AttributeType.BOOL:
            return value.lower() == "true"
        if attr_type == AttributeType.INT:
            return int(value) if value else 0
        if attr_type == AttributeType.FLOAT:
            return float(value) if value else 0.0
        return value

    def resource_data_to_api_attributes_create(self, data: ResourceData) -> Dict[str, str]:
        """API attributes for every user-settable attribute with a non-zero value."""
        attributes: Dict[str, str] = {}
        for name, api_name in self._names.items():
            if not self._schema[name].user_settable:
                continue
            value, ok = data.get_ok(name)
            if ok:
                attributes[api_name] = self._to_api(name, value)
        return attributes

    def resource_data_to_api_attributes_update(self, data: ResourceData) -> Dict[str, str]:
        """API attributes for every user-settable attribute that changed."""
        attributes: Dict[str, str] = {}
        for name, api_name in self._names.items():
            if not self._schema[name].user_settable:
                continue
            if data.has_change(name):
                attributes[api_name] = self._to_api(name, data.get(name))
        return attributes

    def api_attributes_to_resource_data(self, attributes: Dict[str, str], data: ResourceData) -> None:
        for name, api_name in self._names.items():
            if api_name in attributes:
                data.set(name, self._from_api(name, attributes[api_name]))

    def api_name(self, name: str) -> Optional[str]:
        return self._names.get(name)


def json_equivalent(left: str, right: str) -> bool:
    """True when both strings are equal, or both parse to equal JSON documents."""
    if left == right:
        return True
    try:
        return json.loads(left) == json.loads(right)
    except ValueError:
        return False
