"""EKS resource identifiers."""
from typing import Tuple

from awsprovider.domain.resource import CompositeId

FARGATE_PROFILE_ID = CompositeId(("CLUSTER-NAME", "FARGATE-PROFILE-NAME"), separator=":")


def fargate_profile_create_resource_id(cluster_name: str, fargate_profile_name: str) -> str:
    return FARGATE_PROFILE_ID.format(cluster_name, fargate_profile_name)


def fargate_profile_parse_resource_id(resource_id: str) -> Tuple[str, str]:
    """
    Split ``cluster-name:fargate-profile-name``.

    Raises:
        IdentifierFormatError: If the identifier is malformed
    """
    cluster_name, fargate_profile_name = FARGATE_PROFILE_ID.parse(resource_id)
    return cluster_name, fargate_profile_name
