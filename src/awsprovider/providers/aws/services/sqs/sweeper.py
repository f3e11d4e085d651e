"""Sweeper for leftover SQS queues."""
from typing import List

from awsprovider.infrastructure.error import is_skippable_sweep_error
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws.services.sqs.queue import QUEUE
from awsprovider.providers.aws.sweep import SweepResource, new_sweep_resource, shared_client_for_region, sweep_orchestrator
from awsprovider.providers.aws.utilities.pagination import paginate

logger = get_logger(__name__)

SWEEPER_NAME = "aws_sqs_queue"


def sweep_queues(region: str) -> None:
    client = shared_client_for_region(region)

    try:
        urls = paginate(client.sqs_client, "list_queues", "QueueUrls")
    except Exception as err:
        if is_skippable_sweep_error(err):
            logger.warning("Skipping SQS Queue sweep", region=region, error=str(err))
            return
        raise

    resources: List[SweepResource] = [new_sweep_resource(QUEUE, url, client) for url in urls]
    logger.info("Sweeping SQS queues", region=region, count=len(resources))
    sweep_orchestrator(resources)
