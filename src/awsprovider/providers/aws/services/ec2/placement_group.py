"""``aws_placement_group`` resource.

Every argument except the tags forces a new group.
"""
from typing import Any, Dict

from awsprovider.domain.resource import Attribute, AttributeType, Importer, ResourceDescriptor
from awsprovider.domain.resource import import_state_passthrough
from awsprovider.domain.resource.state import ResourceData
from awsprovider.domain.resource.validators import string_in_slice
from awsprovider.domain.tags import from_service_shape, set_tags_diff, set_tags_from_remote, tags_attributes
from awsprovider.domain.tags import tags_for_create, to_service_shape
from awsprovider.infrastructure.error import is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws.services.ec2 import waiter
from awsprovider.providers.aws.services.ec2.finder import placement_group_by_name
from awsprovider.providers.aws.tags import ec2 as ec2_tags

logger = get_logger(__name__)

RESOURCE_NAME = "aws_placement_group"

PLACEMENT_STRATEGY_CLUSTER = "cluster"
PLACEMENT_STRATEGY_PARTITION = "partition"
PLACEMENT_STRATEGY_SPREAD = "spread"

SCHEMA: Dict[str, Attribute] = {
    "name": Attribute(AttributeType.STRING, required=True, force_new=True),
    "partition_count": Attribute(AttributeType.INT, optional=True, computed=True, force_new=True),
    "placement_group_id": Attribute(AttributeType.STRING, computed=True),
    "strategy": Attribute(AttributeType.STRING, required=True, force_new=True, validators=[
        string_in_slice([PLACEMENT_STRATEGY_CLUSTER, PLACEMENT_STRATEGY_PARTITION, PLACEMENT_STRATEGY_SPREAD]),
    ]),
    **tags_attributes(),
}


def resource_placement_group_create(data: ResourceData, meta: Any) -> None:
    client = meta.ec2_client

    name = data.get("name")
    strategy = data.get("strategy")
    partition_count = data.get("partition_count")
    request: Dict[str, Any] = {"GroupName": name, "Strategy": strategy}

    if strategy == PLACEMENT_STRATEGY_PARTITION:
        if partition_count:
            request["PartitionCount"] = partition_count
    elif partition_count > 1:
        logger.warning("partition_count is only valid for the partition strategy", name=name)

    tags = tags_for_create(data, meta.default_tags_config, meta.ignore_tags_config)
    if tags:
        request["TagSpecifications"] = [{
            "ResourceType": "placement-group",
            "Tags": to_service_shape(tags, "ec2"),
        }]

    logger.debug("Creating EC2 Placement Group", name=name, strategy=strategy)
    client.create_placement_group(**request)
    data.set_id(name)

    waiter.placement_group_created(client, name, data.context)
    logger.debug("EC2 Placement Group created", name=name)

    resource_placement_group_read(data, meta)


def resource_placement_group_read(data: ResourceData, meta: Any) -> None:
    client = meta.ec2_client

    try:
        group = placement_group_by_name(client, data.id)
    except Exception as err:
        if not data.is_new_resource() and is_not_found(err):
            logger.warning("EC2 Placement Group not found, removing from state", name=data.id)
            data.set_id("")
            return
        raise

    data.set("name", group.get("GroupName"))
    data.set("strategy", group.get("Strategy"))
    data.set("placement_group_id", group.get("GroupId"))
    if group.get("PartitionCount") is not None:
        data.set("partition_count", group["PartitionCount"])

    set_tags_from_remote(data, from_service_shape(group.get("Tags"), "ec2"),
                         meta.default_tags_config, meta.ignore_tags_config)


def resource_placement_group_update(data: ResourceData, meta: Any) -> None:
    if data.has_changes("tags", "tags_all"):
        group_id = data.get("placement_group_id")
        old, _ = data.get_change("tags_all")
        new = tags_for_create(data, meta.default_tags_config, meta.ignore_tags_config)
        ec2_tags.update_tags(meta.ec2_client, group_id, old, new, meta.ignore_tags_config)

    resource_placement_group_read(data, meta)


def resource_placement_group_delete(data: ResourceData, meta: Any) -> None:
    client = meta.ec2_client

    logger.debug("Deleting EC2 Placement Group", name=data.id)
    client.delete_placement_group(GroupName=data.id)

    waiter.placement_group_deleted(client, data.id, data.context)


PLACEMENT_GROUP = ResourceDescriptor(
    name=RESOURCE_NAME,
    schema=SCHEMA,
    create=resource_placement_group_create,
    read=resource_placement_group_read,
    update=resource_placement_group_update,
    delete=resource_placement_group_delete,
    importer=Importer(state=import_state_passthrough),
    customize_diff=set_tags_diff,
    description="Amazon EC2 placement group",
)
