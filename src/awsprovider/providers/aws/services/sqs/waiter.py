"""SQS waiters."""
from typing import Any, Dict, Optional

from awsprovider.infrastructure.resilience import Context, StateChangeConf
from awsprovider.providers.aws.services.sqs.status import (
    QUEUE_ATTRIBUTE_STATE_EQUAL,
    QUEUE_ATTRIBUTE_STATE_NOT_EQUAL,
    QUEUE_STATE_EXISTS,
    queue_attribute_state,
    queue_state,
)

QUEUE_ATTRIBUTE_PROPAGATION_TIMEOUT = 2 * 60.0
QUEUE_CREATED_TIMEOUT = 60.0
QUEUE_DELETED_TIMEOUT = 3 * 60.0

# SQS is eventually consistent: a read can return stale attributes, and a
# deleted queue can reappear, for a while after the change.
QUEUE_ATTRIBUTE_PROPAGATION_CONTINUOUS_TARGET_OCCURENCE = 6
QUEUE_ATTRIBUTE_PROPAGATION_MIN_TIMEOUT = 5.0
QUEUE_DELETED_NOT_FOUND_CHECKS = 15
QUEUE_DELETED_MIN_TIMEOUT = 3.0


def queue_attributes_propagated(client: Any, url: str, expected: Dict[str, str],
                                ctx: Optional[Context] = None) -> Any:
    conf = StateChangeConf(
        pending=[QUEUE_ATTRIBUTE_STATE_NOT_EQUAL],
        target=[QUEUE_ATTRIBUTE_STATE_EQUAL],
        refresh=queue_attribute_state(client, url, expected),
        timeout=QUEUE_ATTRIBUTE_PROPAGATION_TIMEOUT,
        min_timeout=QUEUE_ATTRIBUTE_PROPAGATION_MIN_TIMEOUT,
        continuous_target_occurence=QUEUE_ATTRIBUTE_PROPAGATION_CONTINUOUS_TARGET_OCCURENCE,
    )
    return conf.wait_for_state(ctx)


def queue_deleted(client: Any, url: str, ctx: Optional[Context] = None) -> None:
    conf = StateChangeConf(
        pending=[QUEUE_STATE_EXISTS],
        target=[],
        refresh=queue_state(client, url),
        timeout=QUEUE_DELETED_TIMEOUT,
        min_timeout=QUEUE_DELETED_MIN_TIMEOUT,
        not_found_checks=QUEUE_DELETED_NOT_FOUND_CHECKS,
    )
    conf.wait_for_state(ctx)
