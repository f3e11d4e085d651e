"""EC2 state refresh functions."""
from typing import Any, Callable, Tuple

from awsprovider.infrastructure.error import is_not_found
from awsprovider.providers.aws.services.ec2.finder import placement_group_by_name


def placement_group_state(client: Any, name: str) -> Callable[[], Tuple[Any, str]]:
    def refresh() -> Tuple[Any, str]:
        try:
            group = placement_group_by_name(client, name)
        except Exception as err:
            if is_not_found(err):
                return None, ""
            raise
        return group, group.get("State", "")

    return refresh
