"""EKS tag API adapter (plain map, resource ARN identifier)."""
from typing import Any, Optional

from botocore.exceptions import ClientError

from awsprovider.domain.tags import IgnoreTagsConfig, KeyValueTags, diff_tags, from_service_shape, to_service_shape
from awsprovider.infrastructure.exceptions import AWSError


def list_tags(client: Any, arn: str) -> KeyValueTags:
    output = client.list_tags_for_resource(resourceArn=arn)
    return from_service_shape(output.get("tags"), "eks")


def update_tags(client: Any, arn: str, old: Any, new: Any,
                ignore_config: Optional[IgnoreTagsConfig] = None) -> None:
    diff = diff_tags(old, new, ignore_config)
    try:
        if diff.remove:
            client.untag_resource(resourceArn=arn, tagKeys=diff.remove)
        if diff.add:
            client.tag_resource(resourceArn=arn, tags=to_service_shape(diff.add, "eks"))
    except ClientError as e:
        raise AWSError(f"error updating tags for EKS resource ({arn}): {e}", resource_id=arn) from e
