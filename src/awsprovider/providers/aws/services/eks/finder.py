"""EKS finders."""
from typing import Any, Dict

from botocore.exceptions import ClientError

from awsprovider.infrastructure.error import NotFoundError, empty_result_error, error_code_equals

ERR_CODE_RESOURCE_NOT_FOUND = "ResourceNotFoundException"


def fargate_profile_by_cluster_name_and_fargate_profile_name(client: Any, cluster_name: str,
                                                             fargate_profile_name: str) -> Dict[str, Any]:
    """
    Describe one Fargate profile.

    Raises:
        NotFoundError: If the cluster or the profile does not exist
    """
    request = {"clusterName": cluster_name, "fargateProfileName": fargate_profile_name}
    try:
        output = client.describe_fargate_profile(**request)
    except ClientError as e:
        if error_code_equals(e, ERR_CODE_RESOURCE_NOT_FOUND):
            raise NotFoundError(last_error=e, last_request=request) from e
        raise

    profile = output.get("fargateProfile")
    if not profile:
        raise empty_result_error(request)
    return profile
