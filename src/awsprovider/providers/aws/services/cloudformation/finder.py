"""CloudFormation finders."""
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from awsprovider.infrastructure.error import NotFoundError, empty_result_error, error_code_in

ERR_CODE_OPERATION_NOT_FOUND = "OperationNotFoundException"
ERR_CODE_STACK_INSTANCE_NOT_FOUND = "StackInstanceNotFoundException"
ERR_CODE_STACK_SET_NOT_FOUND = "StackSetNotFoundException"


def stack_instance_by_name_account_and_region(client: Any, stack_set_name: str, account_id: str,
                                              region: str) -> Dict[str, Any]:
    """
    Describe one stack set instance.

    Raises:
        NotFoundError: If the stack set or the instance does not exist
    """
    request = {
        "StackSetName": stack_set_name,
        "StackInstanceAccount": account_id,
        "StackInstanceRegion": region,
    }
    try:
        output = client.describe_stack_instance(**request)
    except ClientError as e:
        if error_code_in(e, ERR_CODE_STACK_INSTANCE_NOT_FOUND, ERR_CODE_STACK_SET_NOT_FOUND):
            raise NotFoundError(last_error=e, last_request=request) from e
        raise

    instance = output.get("StackInstance")
    if not instance:
        raise empty_result_error(request)
    return instance


def stack_set_operation_by_id(client: Any, stack_set_name: str, operation_id: str) -> Optional[Dict[str, Any]]:
    """
    Describe a stack set operation.

    Raises:
        NotFoundError: If CloudFormation does not know the operation (yet)
    """
    request = {"StackSetName": stack_set_name, "OperationId": operation_id}
    try:
        output = client.describe_stack_set_operation(**request)
    except ClientError as e:
        if error_code_in(e, ERR_CODE_OPERATION_NOT_FOUND, ERR_CODE_STACK_SET_NOT_FOUND):
            raise NotFoundError(last_error=e, last_request=request) from e
        raise

    return output.get("StackSetOperation")
