"""Generated resource names (``name`` / ``name_prefix`` attributes)."""
import itertools
import re
import threading
from datetime import datetime, timezone
from typing import Optional

UNIQUE_ID_PREFIX = "terraform-"

# 18 timestamp digits followed by an 8 hex digit counter
UNIQUE_ID_SUFFIX_LENGTH = 26

_UNIQUE_ID_SUFFIX = re.compile(r"\d{18}[0-9a-f]{8}$")

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def prefixed_unique_id(prefix: str) -> str:
    """``prefix`` followed by a timestamp and a process-wide counter."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")[:18]
    with _counter_lock:
        count = next(_counter)
    return f"{prefix}{timestamp}{count:08x}"


def generate(name: str, prefix: str) -> str:
    """Return ``name`` if set, else a unique name built from ``prefix``."""
    if name:
        return name
    if prefix:
        return prefixed_unique_id(prefix)
    return prefixed_unique_id(UNIQUE_ID_PREFIX)


def generate_with_suffix(name: str, prefix: str, suffix: str) -> str:
    """Like :func:`generate` but a generated name ends with ``suffix``."""
    if name:
        return name
    return generate("", prefix) + suffix


def has_resource_unique_id_suffix(name: str) -> bool:
    return bool(_UNIQUE_ID_SUFFIX.search(name))


def name_prefix_from_name(name: str) -> Optional[str]:
    """The prefix a generated name was built from, or None."""
    if not has_resource_unique_id_suffix(name):
        return None
    return name[:-UNIQUE_ID_SUFFIX_LENGTH]


def name_prefix_from_name_with_suffix(name: str, suffix: str) -> Optional[str]:
    if not name.endswith(suffix):
        return None
    return name_prefix_from_name(name[: len(name) - len(suffix)])
