"""EC2 finders."""
from typing import Any, Dict

from botocore.exceptions import ClientError

from awsprovider.infrastructure.error import NotFoundError, empty_result_error, error_code_equals, too_many_results_error

ERR_CODE_INVALID_PLACEMENT_GROUP_UNKNOWN = "InvalidPlacementGroup.Unknown"

PLACEMENT_GROUP_STATE_DELETED = "deleted"


def placement_group_by_name(client: Any, name: str) -> Dict[str, Any]:
    """
    Find a placement group by name.

    A group reported in the ``deleted`` state counts as absent.

    Raises:
        NotFoundError: If no live group has this name
    """
    request = {"GroupNames": [name]}
    try:
        output = client.describe_placement_groups(**request)
    except ClientError as e:
        if error_code_equals(e, ERR_CODE_INVALID_PLACEMENT_GROUP_UNKNOWN):
            raise NotFoundError(last_error=e, last_request=request) from e
        raise

    groups = output.get("PlacementGroups") or []
    if not groups:
        raise empty_result_error(request)
    if len(groups) > 1:
        raise too_many_results_error(len(groups), request)

    group = groups[0]
    if group.get("State") == PLACEMENT_GROUP_STATE_DELETED:
        raise NotFoundError(message=PLACEMENT_GROUP_STATE_DELETED, last_request=request)
    return group
