"""SQS tag API adapter (plain map, queue URL identifier)."""
from typing import Any, Optional

from botocore.exceptions import ClientError

from awsprovider.domain.tags import IgnoreTagsConfig, KeyValueTags, diff_tags, from_service_shape, to_service_shape
from awsprovider.infrastructure.exceptions import AWSError


def list_tags(client: Any, queue_url: str) -> KeyValueTags:
    output = client.list_queue_tags(QueueUrl=queue_url)
    return from_service_shape(output.get("Tags"), "sqs")


def update_tags(client: Any, queue_url: str, old: Any, new: Any,
                ignore_config: Optional[IgnoreTagsConfig] = None) -> None:
    diff = diff_tags(old, new, ignore_config)
    try:
        if diff.remove:
            client.untag_queue(QueueUrl=queue_url, TagKeys=diff.remove)
        if diff.add:
            client.tag_queue(QueueUrl=queue_url, Tags=to_service_shape(diff.add, "sqs"))
    except ClientError as e:
        raise AWSError(f"error updating tags for SQS queue ({queue_url}): {e}", resource_id=queue_url) from e
