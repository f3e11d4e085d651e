"""CloudFormation resource identifiers."""
from typing import Tuple

from awsprovider.domain.resource import CompositeId

STACK_SET_INSTANCE_ID = CompositeId(("NAME", "ACCOUNT", "REGION"), separator=",")


def stack_set_instance_create_resource_id(stack_set_name: str, account_id: str, region: str) -> str:
    return STACK_SET_INSTANCE_ID.format(stack_set_name, account_id, region)


def stack_set_instance_parse_resource_id(resource_id: str) -> Tuple[str, str, str]:
    """
    Split ``NAME,ACCOUNT,REGION``.

    Raises:
        IdentifierFormatError: ``unexpected format of ID (...), expected NAME,ACCOUNT,REGION``
    """
    stack_set_name, account_id, region = STACK_SET_INSTANCE_ID.parse(resource_id)
    return stack_set_name, account_id, region
