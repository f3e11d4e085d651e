"""AWS Provider Registration - register resource kinds and sweepers."""

from typing import Optional

from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.runtime.registry import ResourceRegistry, get_resource_registry
from awsprovider.providers.aws.services import cloudformation, ec2, eks, sqs
from awsprovider.providers.aws.sweep.registry import SweeperRegistry, get_sweeper_registry

logger = get_logger(__name__)

RESOURCE_DESCRIPTORS = (
    cloudformation.STACK_SET_INSTANCE,
    ec2.PLACEMENT_GROUP,
    eks.FARGATE_PROFILE,
    sqs.QUEUE,
)


def register_aws_resources(registry: Optional[ResourceRegistry] = None) -> None:
    """Register every AWS resource kind, skipping kinds already present.

    Args:
        registry: Resource registry instance (optional)
    """
    if registry is None:
        registry = get_resource_registry()

    for descriptor in RESOURCE_DESCRIPTORS:
        if registry.is_registered(descriptor.name):
            continue
        registry.register(descriptor)
    logger.info("AWS resources registered", count=len(RESOURCE_DESCRIPTORS))


def register_aws_sweepers(registry: Optional[SweeperRegistry] = None) -> None:
    """Register the sweepers of every AWS resource kind.

    Args:
        registry: Sweeper registry instance (optional)
    """
    if registry is None:
        registry = get_sweeper_registry()

    sweepers = {
        cloudformation.sweeper.SWEEPER_NAME: cloudformation.sweep_stack_set_instances,
        ec2.sweeper.SWEEPER_NAME: ec2.sweep_placement_groups,
        eks.sweeper.SWEEPER_NAME: eks.sweep_fargate_profiles,
        sqs.sweeper.SWEEPER_NAME: sqs.sweep_queues,
    }
    registered = set(registry.names())
    for name, fn in sweepers.items():
        if name not in registered:
            registry.add_sweeper(name, fn)
    logger.info("AWS sweepers registered", count=len(sweepers))
