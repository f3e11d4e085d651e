"""Sweeper for leftover EKS Fargate profiles."""
from typing import List

from awsprovider.infrastructure.error import MultiError, is_skippable_sweep_error
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws.services.eks.fargate_profile import FARGATE_PROFILE
from awsprovider.providers.aws.services.eks.ids import fargate_profile_create_resource_id
from awsprovider.providers.aws.sweep import SweepResource, new_sweep_resource, shared_client_for_region, sweep_orchestrator
from awsprovider.providers.aws.utilities.pagination import paginate

logger = get_logger(__name__)

SWEEPER_NAME = "aws_eks_fargate_profile"


def sweep_fargate_profiles(region: str) -> None:
    client = shared_client_for_region(region)
    conn = client.eks_client

    try:
        clusters = paginate(conn, "list_clusters", "clusters")
    except Exception as err:
        if is_skippable_sweep_error(err):
            logger.warning("Skipping EKS Fargate Profile sweep", region=region, error=str(err))
            return
        raise

    errors = MultiError()
    resources: List[SweepResource] = []
    for cluster_name in clusters:
        try:
            names = paginate(conn, "list_fargate_profiles", "fargateProfileNames", clusterName=cluster_name)
        except Exception as err:
            errors.append(err)
            continue
        for name in names:
            resources.append(new_sweep_resource(
                FARGATE_PROFILE, fargate_profile_create_resource_id(cluster_name, name), client,
                cluster_name=cluster_name, fargate_profile_name=name,
            ))

    logger.info("Sweeping EKS Fargate Profiles", region=region, count=len(resources))
    try:
        sweep_orchestrator(resources)
    except MultiError as err:
        errors.append(err)
    errors.raise_if_errors()
