"""Tag engine."""

from .key_value_tags import (
    AWS_TAG_KEY_PREFIX,
    DefaultTagsConfig,
    IgnoreTagsConfig,
    KeyValueTags,
    TagsDiff,
    diff_tags,
)
from .resource_tags import set_tags_diff, set_tags_from_remote, tags_attributes, tags_for_create
from .service_shapes import SUPPORTED_SERVICES, from_service_shape, to_service_shape

__all__: list[str] = [
    "AWS_TAG_KEY_PREFIX",
    "DefaultTagsConfig",
    "IgnoreTagsConfig",
    "KeyValueTags",
    "SUPPORTED_SERVICES",
    "TagsDiff",
    "diff_tags",
    "from_service_shape",
    "set_tags_diff",
    "set_tags_from_remote",
    "tags_attributes",
    "tags_for_create",
    "to_service_shape",
]
