"""Per-service SDK shapes for tag sets."""
from typing import Any, Dict, List

from awsprovider.domain.tags.key_value_tags import KeyValueTags

# service -> shape
_LIST_OF_KEY_VALUE = "list"
_LOWERCASE_LIST = "lowercase_list"
_MAP = "map"
_PROPAGATING_LIST = "propagating_list"

_SERVICE_SHAPES: Dict[str, str] = {
    "ec2": _LIST_OF_KEY_VALUE,
    "cloudformation": _LIST_OF_KEY_VALUE,
    "s3": _LIST_OF_KEY_VALUE,
    "iam": _LIST_OF_KEY_VALUE,
    "ecs": _LOWERCASE_LIST,
    "sqs": _MAP,
    "eks": _MAP,
    "autoscaling": _PROPAGATING_LIST,
}

SUPPORTED_SERVICES = tuple(sorted(_SERVICE_SHAPES))


def _shape_for(service: str) -> str:
    try:
        return _SERVICE_SHAPES[service]
    except KeyError:
        raise ValueError(f"unsupported tagging service: {service}") from None


def to_service_shape(tags: Any, service: str, **options: Any) -> Any:
    """
    Render ``tags`` in the shape the service's SDK operations expect.

    Args:
        tags: Tag set or plain mapping
        service: Service identifier (``ec2``, ``sqs``, ...)
        options: ``resource_id``/``resource_type``/``propagate_at_launch``
            for autoscaling

    Returns:
        A list of dicts or a plain dict depending on the service
    """
    items = KeyValueTags.new(tags)
    shape = _shape_for(service)
    if shape == _MAP:
        return items.map()
    if shape == _LOWERCASE_LIST:
        return [{"key": k, "value": v} for k, v in items.items()]
    if shape == _PROPAGATING_LIST:
        result: List[Dict[str, Any]] = []
        for k, v in items.items():
            tag: Dict[str, Any] = {"Key": k, "Value": v,
                                   "PropagateAtLaunch": options.get("propagate_at_launch", True)}
            if "resource_id" in options:
                tag["ResourceId"] = options["resource_id"]
                tag["ResourceType"] = options.get("resource_type", "auto-scaling-group")
            result.append(tag)
        return result
    return [{"Key": k, "Value": v} for k, v in items.items()]


def from_service_shape(raw: Any, service: str) -> KeyValueTags:
    """Parse tags returned by the service's SDK operations."""
    if raw is None:
        return KeyValueTags()
    shape = _shape_for(service)
    if shape == _MAP:
        return KeyValueTags.new(raw)
    if shape == _LOWERCASE_LIST:
        return KeyValueTags({t["key"]: t.get("value", "") for t in raw})
    return KeyValueTags({t["Key"]: t.get("Value", "") for t in raw})
