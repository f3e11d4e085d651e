"""EC2 waiters."""
from typing import Any, Optional, Tuple

from awsprovider.infrastructure.resilience import Context, StateChangeConf
from awsprovider.providers.aws.services.ec2.finder import PLACEMENT_GROUP_STATE_DELETED
from awsprovider.providers.aws.services.ec2.status import placement_group_state

PLACEMENT_GROUP_STATE_AVAILABLE = "available"
PLACEMENT_GROUP_STATE_DELETING = "deleting"
PLACEMENT_GROUP_STATE_PENDING = "pending"

PLACEMENT_GROUP_CREATED_TIMEOUT = 5 * 60.0
PLACEMENT_GROUP_DELETED_TIMEOUT = 5 * 60.0
PLACEMENT_GROUP_MIN_TIMEOUT = 1.0


def placement_group_created(client: Any, name: str, ctx: Optional[Context] = None) -> Any:
    refresh = placement_group_state(client, name)

    def refresh_pending_until_visible() -> Tuple[Any, str]:
        # DescribePlacementGroups can lag behind CreatePlacementGroup.
        group, state = refresh()
        if group is None:
            return {}, PLACEMENT_GROUP_STATE_PENDING
        return group, state

    conf = StateChangeConf(
        pending=[PLACEMENT_GROUP_STATE_PENDING],
        target=[PLACEMENT_GROUP_STATE_AVAILABLE],
        refresh=refresh_pending_until_visible,
        timeout=PLACEMENT_GROUP_CREATED_TIMEOUT,
        min_timeout=PLACEMENT_GROUP_MIN_TIMEOUT,
    )
    return conf.wait_for_state(ctx)


def placement_group_deleted(client: Any, name: str, ctx: Optional[Context] = None) -> None:
    conf = StateChangeConf(
        pending=[PLACEMENT_GROUP_STATE_AVAILABLE, PLACEMENT_GROUP_STATE_DELETING],
        target=[PLACEMENT_GROUP_STATE_DELETED],
        refresh=placement_group_state(client, name),
        timeout=PLACEMENT_GROUP_DELETED_TIMEOUT,
        min_timeout=PLACEMENT_GROUP_MIN_TIMEOUT,
    )
    conf.wait_for_state(ctx)
