"""``aws_sqs_queue`` resource."""
import re
from typing import Any, Dict
from urllib.parse import urlparse

from awsprovider.domain.core.exceptions import ValidationError
from awsprovider.domain.resource import Attribute, AttributeType, Importer, ResourceDescriptor, ResourceTimeout
from awsprovider.domain.resource import import_state_passthrough, naming
from awsprovider.domain.resource.diff import ResourceDiff
from awsprovider.domain.resource.state import ResourceData
from awsprovider.domain.resource.validators import int_between, string_in_slice, string_is_json
from awsprovider.domain.tags import KeyValueTags, set_tags_diff, set_tags_from_remote, tags_attributes, tags_for_create
from awsprovider.domain.tags import to_service_shape
from awsprovider.infrastructure.error import error_code_in, is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience import retry_when_aws_error_code_equals
from awsprovider.providers.aws.services.sqs import waiter
from awsprovider.providers.aws.services.sqs.constants import (
    DEDUPLICATION_SCOPE_VALUES,
    DEFAULT_QUEUE_DELAY_SECONDS,
    DEFAULT_QUEUE_KMS_DATA_KEY_REUSE_PERIOD_SECONDS,
    DEFAULT_QUEUE_MAXIMUM_MESSAGE_SIZE,
    DEFAULT_QUEUE_MESSAGE_RETENTION_PERIOD,
    DEFAULT_QUEUE_RECEIVE_MESSAGE_WAIT_TIME_SECONDS,
    DEFAULT_QUEUE_VISIBILITY_TIMEOUT,
    ERR_CODE_INVALID_ACTION,
    ERR_CODE_QUEUE_DELETED_RECENTLY,
    ERR_CODE_QUEUE_DELETED_RECENTLY_JSON,
    ERR_CODE_UNSUPPORTED_OPERATION,
    ERR_CODE_UNSUPPORTED_OPERATION_JSON,
    FIFO_QUEUE_NAME_SUFFIX,
    FIFO_THROUGHPUT_LIMIT_VALUES,
)
from awsprovider.providers.aws.services.sqs.finder import queue_attributes_by_url
from awsprovider.providers.aws.tags import sqs as sqs_tags
from awsprovider.providers.aws.utilities.attrmap import AttributeMap, json_equivalent

logger = get_logger(__name__)

RESOURCE_NAME = "aws_sqs_queue"

_STANDARD_NAME = re.compile(r"^[a-zA-Z0-9_-]{1,80}$")
_FIFO_NAME = re.compile(r"^[a-zA-Z0-9_-]{1,75}\.fifo$")


def _suppress_equivalent_json(key: str, old: Any, new: Any, data: Any) -> bool:
    if not old and not new:
        return True
    if not old or not new:
        return False
    return json_equivalent(old, new)


SCHEMA: Dict[str, Attribute] = {
    "arn": Attribute(AttributeType.STRING, computed=True),
    "content_based_deduplication": Attribute(AttributeType.BOOL, optional=True, default=False),
    "deduplication_scope": Attribute(AttributeType.STRING, optional=True, computed=True,
                                     validators=[string_in_slice(DEDUPLICATION_SCOPE_VALUES)]),
    "delay_seconds": Attribute(AttributeType.INT, optional=True, default=DEFAULT_QUEUE_DELAY_SECONDS,
                               validators=[int_between(0, 900)]),
    "fifo_queue": Attribute(AttributeType.BOOL, optional=True, default=False, force_new=True),
    "fifo_throughput_limit": Attribute(AttributeType.STRING, optional=True, computed=True,
                                       validators=[string_in_slice(FIFO_THROUGHPUT_LIMIT_VALUES)]),
    "kms_data_key_reuse_period_seconds": Attribute(AttributeType.INT, optional=True, computed=True,
                                                   validators=[int_between(60, 86_400)]),
    "kms_master_key_id": Attribute(AttributeType.STRING, optional=True),
    "max_message_size": Attribute(AttributeType.INT, optional=True, default=DEFAULT_QUEUE_MAXIMUM_MESSAGE_SIZE,
                                  validators=[int_between(1024, DEFAULT_QUEUE_MAXIMUM_MESSAGE_SIZE)]),
    "message_retention_seconds": Attribute(AttributeType.INT, optional=True,
                                           default=DEFAULT_QUEUE_MESSAGE_RETENTION_PERIOD,
                                           validators=[int_between(60, 1_209_600)]),
    "name": Attribute(AttributeType.STRING, optional=True, computed=True, force_new=True,
                      conflicts_with=["name_prefix"]),
    "name_prefix": Attribute(AttributeType.STRING, optional=True, computed=True, force_new=True,
                             conflicts_with=["name"]),
    "policy": Attribute(AttributeType.STRING, optional=True, computed=True,
                        validators=[string_is_json], diff_suppress=_suppress_equivalent_json),
    "receive_wait_time_seconds": Attribute(AttributeType.INT, optional=True,
                                           default=DEFAULT_QUEUE_RECEIVE_MESSAGE_WAIT_TIME_SECONDS,
                                           validators=[int_between(0, 20)]),
    "redrive_policy": Attribute(AttributeType.STRING, optional=True,
                                validators=[string_is_json], diff_suppress=_suppress_equivalent_json),
    "url": Attribute(AttributeType.STRING, computed=True),
    "visibility_timeout_seconds": Attribute(AttributeType.INT, optional=True,
                                            default=DEFAULT_QUEUE_VISIBILITY_TIMEOUT,
                                            validators=[int_between(0, 43_200)]),
    **tags_attributes(),
}

ATTRIBUTE_MAP = AttributeMap({
    "arn": "QueueArn",
    "content_based_deduplication": "ContentBasedDeduplication",
    "deduplication_scope": "DeduplicationScope",
    "delay_seconds": "DelaySeconds",
    "fifo_queue": "FifoQueue",
    "fifo_throughput_limit": "FifoThroughputLimit",
    "kms_data_key_reuse_period_seconds": "KmsDataKeyReusePeriodSeconds",
    "kms_master_key_id": "KmsMasterKeyId",
    "max_message_size": "MaximumMessageSize",
    "message_retention_seconds": "MessageRetentionPeriod",
    "policy": "Policy",
    "receive_wait_time_seconds": "ReceiveMessageWaitTimeSeconds",
    "redrive_policy": "RedrivePolicy",
    "visibility_timeout_seconds": "VisibilityTimeout",
}, SCHEMA)


def queue_name_from_url(url: str) -> str:
    """The last path segment of a queue URL."""
    path = urlparse(url).path.strip("/")
    if not path:
        raise ValueError(f"queue URL ({url}) has no path")
    return path.split("/")[-1]


def _queue_name(data: Any) -> str:
    if data.get("fifo_queue"):
        return naming.generate_with_suffix(data.get("name"), data.get("name_prefix"), FIFO_QUEUE_NAME_SUFFIX)
    return naming.generate(data.get("name"), data.get("name_prefix"))


def resource_queue_create(data: ResourceData, meta: Any) -> None:
    client = meta.sqs_client
    name = _queue_name(data)

    request: Dict[str, Any] = {
        "QueueName": name,
        "Attributes": ATTRIBUTE_MAP.resource_data_to_api_attributes_create(data),
    }
    tags = tags_for_create(data, meta.default_tags_config, meta.ignore_tags_config)
    # Tag-on-create is not available outside the commercial partition.
    if tags and meta.partition == "aws":
        request["tags"] = to_service_shape(tags, "sqs")

    logger.debug("Creating SQS queue", name=name)
    output = retry_when_aws_error_code_equals(
        waiter.QUEUE_CREATED_TIMEOUT,
        lambda: client.create_queue(**request),
        ERR_CODE_QUEUE_DELETED_RECENTLY,
        ERR_CODE_QUEUE_DELETED_RECENTLY_JSON,
        ctx=data.context,
    )
    url = output["QueueUrl"]
    data.set_id(url)

    waiter.queue_attributes_propagated(client, url, request["Attributes"], data.context)

    if tags and meta.partition != "aws":
        sqs_tags.update_tags(client, url, None, tags, meta.ignore_tags_config)

    resource_queue_read(data, meta)


def resource_queue_read(data: ResourceData, meta: Any) -> None:
    client = meta.sqs_client

    try:
        attributes = queue_attributes_by_url(client, data.id)
    except Exception as err:
        if not data.is_new_resource() and is_not_found(err):
            logger.warning("SQS queue not found, removing from state", url=data.id)
            data.set_id("")
            return
        raise

    name = queue_name_from_url(data.id)
    ATTRIBUTE_MAP.api_attributes_to_resource_data(attributes, data)

    # A queue without a KMS key reports no reuse period.
    if not data.get("kms_data_key_reuse_period_seconds"):
        data.set("kms_data_key_reuse_period_seconds", DEFAULT_QUEUE_KMS_DATA_KEY_REUSE_PERIOD_SECONDS)

    data.set("name", name)
    if data.get("fifo_queue"):
        data.set("name_prefix", naming.name_prefix_from_name_with_suffix(name, FIFO_QUEUE_NAME_SUFFIX))
    else:
        data.set("name_prefix", naming.name_prefix_from_name(name))
    data.set("url", data.id)

    try:
        remote_tags = sqs_tags.list_tags(client, data.id)
    except Exception as err:
        # Some partitions do not support tagging.
        if not error_code_in(err, ERR_CODE_INVALID_ACTION, ERR_CODE_UNSUPPORTED_OPERATION,
                             ERR_CODE_UNSUPPORTED_OPERATION_JSON):
            raise
        logger.warning("Unable to list tags for SQS queue", url=data.id, error=str(err))
        remote_tags = KeyValueTags()

    set_tags_from_remote(data, remote_tags, meta.default_tags_config, meta.ignore_tags_config)


def resource_queue_update(data: ResourceData, meta: Any) -> None:
    client = meta.sqs_client

    if data.has_changes_except("tags", "tags_all"):
        attributes = ATTRIBUTE_MAP.resource_data_to_api_attributes_update(data)
        if attributes:
            logger.debug("Updating SQS queue attributes", url=data.id, attributes=sorted(attributes))
            client.set_queue_attributes(QueueUrl=data.id, Attributes=attributes)
            waiter.queue_attributes_propagated(client, data.id, attributes, data.context)

    if data.has_changes("tags", "tags_all"):
        old, _ = data.get_change("tags_all")
        new = tags_for_create(data, meta.default_tags_config, meta.ignore_tags_config)
        sqs_tags.update_tags(client, data.id, old, new, meta.ignore_tags_config)

    resource_queue_read(data, meta)


def resource_queue_delete(data: ResourceData, meta: Any) -> None:
    client = meta.sqs_client

    logger.info("Deleting SQS queue", url=data.id)
    try:
        client.delete_queue(QueueUrl=data.id)
    except Exception as err:
        if is_not_found(err):
            return
        raise

    waiter.queue_deleted(client, data.id, data.context)


def resource_queue_customize_diff(diff: ResourceDiff, meta: Any) -> None:
    fifo_queue = diff.get("fifo_queue")

    if not diff.id:
        name = _queue_name(diff)
        pattern = _FIFO_NAME if fifo_queue else _STANDARD_NAME
        if not pattern.match(name):
            kind = "FIFO queue" if fifo_queue else "standard queue"
            raise ValidationError(f"invalid queue name: {name} (for a {kind})", field_path="name")

    if not fifo_queue and diff.get("content_based_deduplication"):
        raise ValidationError("content-based deduplication can only be set for FIFO queue",
                              field_path="content_based_deduplication")

    set_tags_diff(diff, meta)


QUEUE = ResourceDescriptor(
    name=RESOURCE_NAME,
    schema=SCHEMA,
    create=resource_queue_create,
    read=resource_queue_read,
    update=resource_queue_update,
    delete=resource_queue_delete,
    importer=Importer(state=import_state_passthrough),
    timeouts=ResourceTimeout(),
    customize_diff=resource_queue_customize_diff,
    description="Amazon SQS queue",
)
