"""Sweeper for leftover CloudFormation stack set instances."""
from typing import List

from awsprovider.infrastructure.error import MultiError, is_skippable_sweep_error
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws.services.cloudformation.ids import stack_set_instance_create_resource_id
from awsprovider.providers.aws.services.cloudformation.stack_set_instance import STACK_SET_INSTANCE
from awsprovider.providers.aws.sweep import SweepResource, new_sweep_resource, shared_client_for_region, sweep_orchestrator
from awsprovider.providers.aws.utilities.pagination import paginate

logger = get_logger(__name__)

SWEEPER_NAME = "aws_cloudformation_stack_set_instance"


def sweep_stack_set_instances(region: str) -> None:
    client = shared_client_for_region(region)
    conn = client.cloudformation_client

    try:
        stack_sets = paginate(conn, "list_stack_sets", "Summaries", Status="ACTIVE")
    except Exception as err:
        if is_skippable_sweep_error(err):
            logger.warning("Skipping CloudFormation StackSet Instance sweep", region=region, error=str(err))
            return
        raise

    errors = MultiError()
    resources: List[SweepResource] = []
    for stack_set in stack_sets:
        stack_set_name = stack_set["StackSetName"]
        try:
            instances = paginate(conn, "list_stack_instances", "Summaries", StackSetName=stack_set_name)
        except Exception as err:
            errors.append(err)
            continue
        for instance in instances:
            resource_id = stack_set_instance_create_resource_id(stack_set_name, instance["Account"],
                                                                instance["Region"])
            resources.append(new_sweep_resource(STACK_SET_INSTANCE, resource_id, client, retain_stack=False))

    logger.info("Sweeping CloudFormation StackSet Instances", region=region, count=len(resources))
    try:
        sweep_orchestrator(resources)
    except MultiError as err:
        errors.append(err)
    errors.raise_if_errors()
