"""EC2 tag API adapter (list of ``Key``/``Value`` pairs)."""
from typing import Any, Optional

from botocore.exceptions import ClientError

from awsprovider.domain.tags import IgnoreTagsConfig, KeyValueTags, diff_tags, from_service_shape, to_service_shape
from awsprovider.infrastructure.exceptions import AWSError
from awsprovider.providers.aws.utilities.pagination import paginate


def list_tags(client: Any, identifier: str) -> KeyValueTags:
    """Tags of any EC2 resource by ID."""
    tags = paginate(client, "describe_tags", "Tags",
                    Filters=[{"Name": "resource-id", "Values": [identifier]}])
    return from_service_shape(tags, "ec2")


def update_tags(client: Any, identifier: str, old: Any, new: Any,
                ignore_config: Optional[IgnoreTagsConfig] = None) -> None:
    """Apply the minimal set of DeleteTags/CreateTags calls."""
    diff = diff_tags(old, new, ignore_config)
    try:
        if diff.remove:
            client.delete_tags(Resources=[identifier], Tags=[{"Key": key} for key in diff.remove])
        if diff.add:
            client.create_tags(Resources=[identifier], Tags=to_service_shape(diff.add, "ec2"))
    except ClientError as e:
        raise AWSError(f"error updating tags for EC2 resource ({identifier}): {e}", resource_id=identifier) from e
