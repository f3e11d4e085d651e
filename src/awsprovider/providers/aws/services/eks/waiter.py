"""EKS waiters."""
from typing import Any, Optional

from awsprovider.infrastructure.resilience import Context, StateChangeConf
from awsprovider.providers.aws.services.eks.status import fargate_profile_status

FARGATE_PROFILE_STATUS_ACTIVE = "ACTIVE"
FARGATE_PROFILE_STATUS_CREATING = "CREATING"
FARGATE_PROFILE_STATUS_CREATE_FAILED = "CREATE_FAILED"
FARGATE_PROFILE_STATUS_DELETING = "DELETING"
FARGATE_PROFILE_STATUS_DELETE_FAILED = "DELETE_FAILED"

# IAM role changes take a while to become visible to other services.
IAM_PROPAGATION_TIMEOUT = 2 * 60.0


def fargate_profile_created(client: Any, cluster_name: str, fargate_profile_name: str, timeout: float,
                            ctx: Optional[Context] = None) -> Any:
    conf = StateChangeConf(
        pending=[FARGATE_PROFILE_STATUS_CREATING],
        target=[FARGATE_PROFILE_STATUS_ACTIVE],
        refresh=fargate_profile_status(client, cluster_name, fargate_profile_name),
        timeout=timeout,
    )
    return conf.wait_for_state(ctx)


def fargate_profile_deleted(client: Any, cluster_name: str, fargate_profile_name: str, timeout: float,
                            ctx: Optional[Context] = None) -> None:
    conf = StateChangeConf(
        pending=[FARGATE_PROFILE_STATUS_DELETING],
        target=[],
        refresh=fargate_profile_status(client, cluster_name, fargate_profile_name),
        timeout=timeout,
    )
    conf.wait_for_state(ctx)
