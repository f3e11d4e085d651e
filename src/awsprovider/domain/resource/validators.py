"""Attribute validators.

Each factory returns a ``validator(value, path) -> list[str]`` callable used
in :class:`Attribute.validators`. Validators see non-None values only.
"""
import json
import re
from typing import Any, Iterable, List, Optional

from awsprovider.domain.resource.schema import Validator

_ACCOUNT_ID = re.compile(r"^\d{12}$")


def string_in_slice(valid: Iterable[str], ignore_case: bool = False) -> Validator:
    choices = list(valid)

    def validate(value: Any, path: str) -> List[str]:
        if not isinstance(value, str):
            return [f"{path}: expected type to be string"]
        candidates = [c.lower() for c in choices] if ignore_case else choices
        if (value.lower() if ignore_case else value) not in candidates:
            return [f"{path}: expected to be one of {choices}, got {value}"]
        return []

    return validate


def int_between(minimum: int, maximum: int) -> Validator:
    def validate(value: Any, path: str) -> List[str]:
        if isinstance(value, bool) or not isinstance(value, int):
            return [f"{path}: expected type to be integer"]
        if value < minimum or value > maximum:
            return [f"{path}: expected to be in the range ({minimum} - {maximum}), got {value}"]
        return []

    return validate


def string_len_between(minimum: int, maximum: int) -> Validator:
    def validate(value: Any, path: str) -> List[str]:
        if not isinstance(value, str):
            return [f"{path}: expected type to be string"]
        if len(value) < minimum or len(value) > maximum:
            return [f"{path}: expected length to be in the range ({minimum} - {maximum}), got {value}"]
        return []

    return validate


def string_matches(pattern: str, message: Optional[str] = None) -> Validator:
    regex = re.compile(pattern)

    def validate(value: Any, path: str) -> List[str]:
        if not isinstance(value, str):
            return [f"{path}: expected type to be string"]
        if not regex.search(value):
            if message:
                return [f"{path}: invalid value ({value}), {message}"]
            return [f"{path}: expected value to match regular expression {pattern!r}, got {value}"]
        return []

    return validate


def string_is_json(value: Any, path: str) -> List[str]:
    if not isinstance(value, str):
        return [f"{path}: expected type to be string"]
    try:
        json.loads(value)
    except ValueError as e:
        return [f"{path}: contains an invalid JSON: {e}"]
    return []


def no_zero_values(value: Any, path: str) -> List[str]:
    if value in ("", 0, [], {}) and value is not False:
        return [f"{path}: must not be empty, got {value!r}"]
    return []


def valid_account_id(value: Any, path: str) -> List[str]:
    if not isinstance(value, str) or not _ACCOUNT_ID.match(value):
        return [f"{path}: {value!r} doesn't look like AWS Account ID (exactly 12 digits)"]
    return []
