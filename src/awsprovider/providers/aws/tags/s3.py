"""S3 bucket tag API adapter.

PutBucketTagging replaces the whole tag set, so tags present on the bucket
but managed elsewhere are read first and written back.
"""
from typing import Any

from botocore.exceptions import ClientError

from awsprovider.domain.tags import KeyValueTags, from_service_shape, to_service_shape
from awsprovider.infrastructure.error import error_code_equals
from awsprovider.infrastructure.exceptions import AWSError

ERR_CODE_NO_SUCH_TAG_SET = "NoSuchTagSet"


def list_tags(client: Any, bucket: str) -> KeyValueTags:
    try:
        output = client.get_bucket_tagging(Bucket=bucket)
    except ClientError as e:
        if error_code_equals(e, ERR_CODE_NO_SUCH_TAG_SET):
            return KeyValueTags()
        raise
    return from_service_shape(output.get("TagSet"), "s3")


def update_tags(client: Any, bucket: str, old: Any, new: Any) -> None:
    old_tags = KeyValueTags.new(old)
    new_tags = KeyValueTags.new(new)

    try:
        all_tags = list_tags(client, bucket)
    except ClientError as e:
        raise AWSError(f"error listing resource tags ({bucket}): {e}", resource_id=bucket) from e

    ignored_tags = all_tags.ignore(old_tags).ignore(new_tags)

    try:
        if len(new_tags) + len(ignored_tags) > 0:
            client.put_bucket_tagging(
                Bucket=bucket,
                Tagging={"TagSet": to_service_shape(new_tags.merge(ignored_tags), "s3")},
            )
        elif len(old_tags) > 0 and len(ignored_tags) == 0:
            client.delete_bucket_tagging(Bucket=bucket)
    except ClientError as e:
        raise AWSError(f"error setting resource tags ({bucket}): {e}", resource_id=bucket) from e
