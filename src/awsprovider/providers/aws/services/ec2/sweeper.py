"""Sweeper for leftover EC2 placement groups."""
from awsprovider.infrastructure.error import is_skippable_sweep_error
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws.services.ec2.placement_group import PLACEMENT_GROUP
from awsprovider.providers.aws.sweep import new_sweep_resource, shared_client_for_region, sweep_orchestrator

logger = get_logger(__name__)

SWEEPER_NAME = "aws_placement_group"


def sweep_placement_groups(region: str) -> None:
    client = shared_client_for_region(region)

    # DescribePlacementGroups is not paginated.
    try:
        output = client.ec2_client.describe_placement_groups()
    except Exception as err:
        if is_skippable_sweep_error(err):
            logger.warning("Skipping EC2 Placement Group sweep", region=region, error=str(err))
            return
        raise

    resources = [
        new_sweep_resource(PLACEMENT_GROUP, group["GroupName"], client)
        for group in output.get("PlacementGroups", [])
        if group.get("State") != "deleted"
    ]
    logger.info("Sweeping EC2 Placement Groups", region=region, count=len(resources))
    sweep_orchestrator(resources)
