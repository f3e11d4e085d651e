"""SQS finders."""
from typing import Any, Dict

from botocore.exceptions import ClientError

from awsprovider.infrastructure.error import NotFoundError, empty_result_error, error_code_in
from awsprovider.providers.aws.services.sqs.constants import (
    ERR_CODE_QUEUE_DOES_NOT_EXIST,
    ERR_CODE_QUEUE_DOES_NOT_EXIST_JSON,
)


def queue_attributes_by_url(client: Any, url: str) -> Dict[str, str]:
    """
    All attributes of the queue at ``url``.

    Raises:
        NotFoundError: If the queue does not exist
    """
    request = {"QueueUrl": url, "AttributeNames": ["All"]}
    try:
        output = client.get_queue_attributes(**request)
    except ClientError as e:
        if error_code_in(e, ERR_CODE_QUEUE_DOES_NOT_EXIST, ERR_CODE_QUEUE_DOES_NOT_EXIST_JSON):
            raise NotFoundError(last_error=e, last_request=request) from e
        raise

    attributes = output.get("Attributes")
    if not attributes:
        raise empty_result_error(request)
    return attributes
