"""SQS state refresh functions."""
from typing import Any, Callable, Dict, Tuple

from awsprovider.infrastructure.error import is_not_found
from awsprovider.providers.aws.services.sqs.finder import queue_attributes_by_url
from awsprovider.providers.aws.utilities.attrmap import json_equivalent

QUEUE_STATE_EXISTS = "exists"
QUEUE_ATTRIBUTE_STATE_EQUAL = "equal"
QUEUE_ATTRIBUTE_STATE_NOT_EQUAL = "notequal"

# Attributes holding JSON documents, compared semantically.
_JSON_ATTRIBUTES = ("Policy", "RedrivePolicy", "RedriveAllowPolicy")


def queue_state(client: Any, url: str) -> Callable[[], Tuple[Any, str]]:
    def refresh() -> Tuple[Any, str]:
        try:
            output = queue_attributes_by_url(client, url)
        except Exception as err:
            if is_not_found(err):
                return None, ""
            raise
        return output, QUEUE_STATE_EXISTS

    return refresh


def _attributes_equal(expected: Dict[str, str], actual: Dict[str, str]) -> bool:
    for name, value in expected.items():
        current = actual.get(name, "")
        if name in _JSON_ATTRIBUTES:
            if not value and not current:
                continue
            if not json_equivalent(value, current):
                return False
        elif value != current:
            return False
    return True


def queue_attribute_state(client: Any, url: str, expected: Dict[str, str]) -> Callable[[], Tuple[Any, str]]:
    """Reports whether the queue's attributes have caught up with ``expected``."""
    def refresh() -> Tuple[Any, str]:
        actual = queue_attributes_by_url(client, url)
        if _attributes_equal(expected, actual):
            return actual, QUEUE_ATTRIBUTE_STATE_EQUAL
        return actual, QUEUE_ATTRIBUTE_STATE_NOT_EQUAL

    return refresh
