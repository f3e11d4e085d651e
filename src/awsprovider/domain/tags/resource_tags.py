"""``tags`` / ``tags_all`` handling shared by every taggable resource.

``tags`` holds what the user authored. ``tags_all`` is computed: provider
default tags overlaid with the user's tags, minus ignored keys.
"""
from typing import Any, Dict, Optional

from awsprovider.domain.resource.diff import ResourceDiff
from awsprovider.domain.resource.schema import Attribute, AttributeType
from awsprovider.domain.resource.state import ResourceData
from awsprovider.domain.tags.key_value_tags import DefaultTagsConfig, IgnoreTagsConfig, KeyValueTags


def tags_attributes(force_new: bool = False) -> Dict[str, Attribute]:
    return {
        "tags": Attribute(AttributeType.MAP, optional=True, force_new=force_new,
                          elem=Attribute(AttributeType.STRING)),
        "tags_all": Attribute(AttributeType.MAP, optional=True, computed=True, force_new=force_new,
                              elem=Attribute(AttributeType.STRING)),
    }


def tags_for_create(data: ResourceData, default_config: Optional[DefaultTagsConfig],
                    ignore_config: Optional[IgnoreTagsConfig]) -> KeyValueTags:
    """Effective tags to send with a create call."""
    default_config = default_config or DefaultTagsConfig()
    return default_config.merge_tags(data.get("tags")).ignore_config(ignore_config)


def set_tags_diff(diff: ResourceDiff, meta: Any) -> None:
    """CustomizeDiff hook planning ``tags_all`` from defaults and user tags."""
    default_config = getattr(meta, "default_tags_config", None) or DefaultTagsConfig()
    ignore_config = getattr(meta, "ignore_tags_config", None)
    all_tags = default_config.merge_tags(diff.get("tags")).ignore_config(ignore_config)
    diff.set_new("tags_all", all_tags.map())


def set_tags_from_remote(data: ResourceData, remote: KeyValueTags,
                         default_config: Optional[DefaultTagsConfig],
                         ignore_config: Optional[IgnoreTagsConfig]) -> None:
    """Read side: ``tags_all`` from the remote, ``tags`` without defaults."""
    effective = remote.ignore_aws().ignore_config(ignore_config)
    data.set("tags", effective.remove_default_config(default_config).map())
    data.set("tags_all", effective.map())
