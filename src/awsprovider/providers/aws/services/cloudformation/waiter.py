"""CloudFormation waiters."""
from typing import Any, Optional

from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience import Context, StateChangeConf
from awsprovider.providers.aws.services.cloudformation.status import (
    STACK_SET_OPERATION_STATUS_RUNNING,
    STACK_SET_OPERATION_STATUS_SUCCEEDED,
    stack_set_operation_status,
)

logger = get_logger(__name__)

STACK_SET_OPERATION_DELAY = 5.0


def stack_set_operation_succeeded(client: Any, stack_set_name: str, operation_id: str, timeout: float,
                                  ctx: Optional[Context] = None) -> Any:
    conf = StateChangeConf(
        pending=[STACK_SET_OPERATION_STATUS_RUNNING],
        target=[STACK_SET_OPERATION_STATUS_SUCCEEDED],
        refresh=stack_set_operation_status(client, stack_set_name, operation_id),
        timeout=timeout,
        delay=STACK_SET_OPERATION_DELAY,
    )
    logger.debug("Waiting for CloudFormation StackSet operation", stack_set_name=stack_set_name,
                 operation_id=operation_id)
    return conf.wait_for_state(ctx)
