"""CloudFormation state refresh functions."""
from typing import Any, Callable, List, Tuple

from awsprovider.infrastructure.error import error_code_equals
from awsprovider.infrastructure.exceptions import AWSError
from awsprovider.providers.aws.services.cloudformation.finder import (
    ERR_CODE_OPERATION_NOT_FOUND,
    stack_set_operation_by_id,
)
from awsprovider.providers.aws.utilities.pagination import paginate

STACK_SET_OPERATION_STATUS_FAILED = "FAILED"
STACK_SET_OPERATION_STATUS_RUNNING = "RUNNING"
STACK_SET_OPERATION_STATUS_SUCCEEDED = "SUCCEEDED"


class StackSetOperationError(AWSError):
    """A stack set operation ended in the FAILED state."""

    def __init__(self, operation_id: str, results: List[str]):
        super().__init__(f"Operation ({operation_id}) Results:\n" + "\n".join(results),
                         details={"operation_id": operation_id, "results": results})
        self.operation_id = operation_id
        self.results = results


def _operation_results(client: Any, stack_set_name: str, operation_id: str) -> List[str]:
    summaries = paginate(client, "list_stack_set_operation_results", "Summaries",
                         StackSetName=stack_set_name, OperationId=operation_id)
    return [
        f"Account ({summary.get('Account', '')}) Region ({summary.get('Region', '')}) "
        f"Status ({summary.get('Status', '')}) Status Reason: {summary.get('StatusReason', '')}"
        for summary in summaries
    ]


def stack_set_operation_status(client: Any, stack_set_name: str, operation_id: str) -> Callable[[], Tuple[Any, str]]:
    """
    Refresh a stack set operation.

    An operation CloudFormation does not report yet counts as running. A
    failed operation raises StackSetOperationError listing every per-account
    result.
    """
    def refresh() -> Tuple[Any, str]:
        try:
            operation = stack_set_operation_by_id(client, stack_set_name, operation_id)
        except Exception as err:
            if error_code_equals(err, ERR_CODE_OPERATION_NOT_FOUND):
                return {}, STACK_SET_OPERATION_STATUS_RUNNING
            raise

        if not operation:
            return {}, STACK_SET_OPERATION_STATUS_RUNNING

        status = operation.get("Status", "")
        if status == STACK_SET_OPERATION_STATUS_FAILED:
            try:
                results = _operation_results(client, stack_set_name, operation_id)
            except Exception as err:
                raise AWSError(f"error listing Operation ({operation_id}) errors: {err}") from err
            raise StackSetOperationError(operation_id, results)

        return operation, status

    return refresh
