# src/awsprovider/domain/tags/key_value_tags.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

# Keys in this namespace are reserved by AWS and cannot be managed.
AWS_TAG_KEY_PREFIX = "aws:"


class KeyValueTags(Mapping):
    """
    Immutable key/value tag set.

    Every operation returns a new instance. Keys are case-sensitive and
    preserved verbatim.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(items or {})

    @classmethod
    def new(cls, value: Any) -> KeyValueTags:
        """
        Build a tag set from user or SDK input.

        Accepts a mapping (entries with a None value are dropped), another
        KeyValueTags, an iterable of keys (values become empty strings) or
        None.
        """
        if value is None:
            return cls()
        if isinstance(value, KeyValueTags):
            return value
        if isinstance(value, Mapping):
            return cls({str(k): str(v) for k, v in value.items() if v is not None})
        if isinstance(value, (str, bytes)):
            raise TypeError("tags must be a mapping or an iterable of keys, got a string")
        return cls({str(k): "" for k in value})

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return self._items == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._items.items()))

    def __repr__(self) -> str:
        return f"KeyValueTags({self._items!r})"

    def ignore_aws(self) -> KeyValueTags:
        """Drop keys in the AWS reserved namespace."""
        return self.ignore_prefixes([AWS_TAG_KEY_PREFIX])

    def ignore_keys(self, keys: Iterable[str]) -> KeyValueTags:
        ignored = set(keys)
        return KeyValueTags({k: v for k, v in self._items.items() if k not in ignored})

    def ignore_prefixes(self, prefixes: Iterable[str]) -> KeyValueTags:
        prefixes = tuple(p for p in prefixes if p)
        if not prefixes:
            return self
        return KeyValueTags({k: v for k, v in self._items.items() if not k.startswith(prefixes)})

    def ignore(self, other: Mapping) -> KeyValueTags:
        """Drop every key present in ``other``."""
        return self.ignore_keys(other.keys())

    def ignore_config(self, config: Optional["IgnoreTagsConfig"]) -> KeyValueTags:
        if config is None:
            return self
        return self.ignore_keys(config.keys).ignore_prefixes(config.key_prefixes)

    def merge(self, other: Mapping) -> KeyValueTags:
        """Union of both sets; keys present in both take the value from ``other``."""
        result = dict(self._items)
        result.update(KeyValueTags.new(other)._items)
        return KeyValueTags(result)

    def remove_default_config(self, config: Optional["DefaultTagsConfig"]) -> KeyValueTags:
        """Drop keys whose value equals the provider default for that key."""
        if config is None or not config.tags:
            return self
        defaults = config.tags
        return KeyValueTags({k: v for k, v in self._items.items()
                             if not (k in defaults and defaults[k] == v)})

    def only(self, keys: Iterable[str]) -> KeyValueTags:
        wanted = set(keys)
        return KeyValueTags({k: v for k, v in self._items.items() if k in wanted})

    def removed(self, new: Mapping) -> KeyValueTags:
        """Tags in this set whose key is absent from ``new``."""
        return KeyValueTags({k: v for k, v in self._items.items() if k not in new})

    def updated(self, new: Mapping) -> KeyValueTags:
        """Tags in ``new`` that are absent from this set or have another value."""
        return KeyValueTags({k: v for k, v in KeyValueTags.new(new).items()
                             if k not in self._items or self._items[k] != v})

    def keys_list(self) -> List[str]:
        return list(self._items)

    def map(self) -> Dict[str, str]:
        return dict(self._items)

    def has_key(self, key: str) -> bool:
        return key in self._items

    def chunks(self, size: int) -> List[KeyValueTags]:
        """Split into sets of at most ``size`` tags, for APIs with per-call limits."""
        if size < 1:
            raise ValueError("chunk size must be positive")
        items = list(self._items.items())
        return [KeyValueTags(dict(items[i:i + size])) for i in range(0, len(items), size)]


@dataclass(frozen=True)
class DefaultTagsConfig:
    """Provider-level tags applied to every taggable resource."""
    tags: KeyValueTags = field(default_factory=KeyValueTags)

    def merge_tags(self, tags: Any) -> KeyValueTags:
        """Effective tags: defaults overlaid with the user's tags."""
        return self.tags.merge(KeyValueTags.new(tags))


@dataclass(frozen=True)
class IgnoreTagsConfig:
    """Tag keys and key prefixes managed outside the provider."""
    keys: Tuple[str, ...] = ()
    key_prefixes: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "key_prefixes", tuple(self.key_prefixes))


@dataclass(frozen=True)
class TagsDiff:
    """Minimal mutation set: tags to add or overwrite, keys to remove."""
    add: Dict[str, str] = field(default_factory=dict)
    remove: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.add and not self.remove


def diff_tags(old: Any, new: Any, ignore_config: Optional[IgnoreTagsConfig] = None) -> TagsDiff:
    """
    Compute the calls needed to turn ``old`` into ``new``.

    AWS reserved keys and keys matched by ``ignore_config`` are removed from
    both sides first, so they never appear in either half of the result.
    """
    old_tags = KeyValueTags.new(old).ignore_aws().ignore_config(ignore_config)
    new_tags = KeyValueTags.new(new).ignore_aws().ignore_config(ignore_config)
    return TagsDiff(add=old_tags.updated(new_tags).map(), remove=old_tags.removed(new_tags).keys_list())
