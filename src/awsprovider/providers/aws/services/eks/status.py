"""EKS state refresh functions."""
from typing import Any, Callable, Tuple

from awsprovider.infrastructure.error import is_not_found
from awsprovider.providers.aws.services.eks.finder import fargate_profile_by_cluster_name_and_fargate_profile_name


def fargate_profile_status(client: Any, cluster_name: str, fargate_profile_name: str) -> Callable[[], Tuple[Any, str]]:
    def refresh() -> Tuple[Any, str]:
        try:
            profile = fargate_profile_by_cluster_name_and_fargate_profile_name(
                client, cluster_name, fargate_profile_name)
        except Exception as err:
            if is_not_found(err):
                return None, ""
            raise
        return profile, profile.get("status", "")

    return refresh
