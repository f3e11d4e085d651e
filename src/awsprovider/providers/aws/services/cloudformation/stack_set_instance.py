"""``aws_cloudformation_stack_set_instance`` resource."""
from typing import Any, Dict, List, Optional

from awsprovider.domain.resource import Attribute, AttributeType, Importer, ResourceDescriptor, ResourceTimeout
from awsprovider.domain.resource import import_state_passthrough, naming
from awsprovider.domain.resource.state import ResourceData
from awsprovider.domain.resource.validators import no_zero_values, valid_account_id
from awsprovider.infrastructure.error import error_code_in, is_not_found
from awsprovider.infrastructure.logging import get_logger
from awsprovider.providers.aws.services.cloudformation import waiter
from awsprovider.providers.aws.services.cloudformation.finder import (
    ERR_CODE_STACK_INSTANCE_NOT_FOUND,
    ERR_CODE_STACK_SET_NOT_FOUND,
    stack_instance_by_name_account_and_region,
)
from awsprovider.providers.aws.services.cloudformation.ids import (
    stack_set_instance_create_resource_id,
    stack_set_instance_parse_resource_id,
)

logger = get_logger(__name__)

RESOURCE_NAME = "aws_cloudformation_stack_set_instance"

STACK_SET_INSTANCE_CREATE_TIMEOUT = 30 * 60.0
STACK_SET_INSTANCE_UPDATE_TIMEOUT = 30 * 60.0
STACK_SET_INSTANCE_DELETE_TIMEOUT = 30 * 60.0

SCHEMA: Dict[str, Attribute] = {
    "account_id": Attribute(AttributeType.STRING, optional=True, computed=True, force_new=True,
                            validators=[valid_account_id]),
    "parameter_overrides": Attribute(AttributeType.MAP, optional=True, elem=Attribute(AttributeType.STRING)),
    "region": Attribute(AttributeType.STRING, optional=True, computed=True, force_new=True),
    "retain_stack": Attribute(AttributeType.BOOL, optional=True, default=False),
    "stack_id": Attribute(AttributeType.STRING, computed=True),
    "stack_set_name": Attribute(AttributeType.STRING, required=True, force_new=True, validators=[no_zero_values]),
}


def expand_parameters(parameters: Optional[Dict[str, str]]) -> List[Dict[str, str]]:
    return [{"ParameterKey": key, "ParameterValue": value} for key, value in (parameters or {}).items()]


def flatten_parameters(parameters: Optional[List[Dict[str, Any]]]) -> Dict[str, str]:
    return {p["ParameterKey"]: p.get("ParameterValue", "") for p in parameters or [] if "ParameterKey" in p}


def _operation_id() -> str:
    return naming.prefixed_unique_id(naming.UNIQUE_ID_PREFIX)


def resource_stack_set_instance_create(data: ResourceData, meta: Any) -> None:
    client = meta.cloudformation_client

    account_id = data.get("account_id") or meta.account_id
    region = data.get("region") or meta.region_name
    stack_set_name = data.get("stack_set_name")

    request: Dict[str, Any] = {
        "Accounts": [account_id],
        "OperationId": _operation_id(),
        "Regions": [region],
        "StackSetName": stack_set_name,
    }
    parameters = data.get("parameter_overrides")
    if parameters:
        request["ParameterOverrides"] = expand_parameters(parameters)

    logger.debug("Creating CloudFormation StackSet Instance", stack_set_name=stack_set_name,
                 account_id=account_id, region=region)
    output = client.create_stack_instances(**request)

    data.set_id(stack_set_instance_create_resource_id(stack_set_name, account_id, region))

    waiter.stack_set_operation_succeeded(client, stack_set_name, output["OperationId"],
                                         data.timeout("create"), data.context)

    resource_stack_set_instance_read(data, meta)


def resource_stack_set_instance_read(data: ResourceData, meta: Any) -> None:
    client = meta.cloudformation_client

    stack_set_name, account_id, region = stack_set_instance_parse_resource_id(data.id)

    logger.debug("Reading CloudFormation StackSet Instance", id=data.id)
    try:
        instance = stack_instance_by_name_account_and_region(client, stack_set_name, account_id, region)
    except Exception as err:
        if not data.is_new_resource() and is_not_found(err):
            logger.warning("CloudFormation StackSet Instance not found, removing from state", id=data.id)
            data.set_id("")
            return
        raise

    data.set("account_id", instance.get("Account"))
    data.set("parameter_overrides", flatten_parameters(instance.get("ParameterOverrides")))
    data.set("region", instance.get("Region"))
    data.set("stack_id", instance.get("StackId"))
    data.set("stack_set_name", stack_set_name)


def resource_stack_set_instance_update(data: ResourceData, meta: Any) -> None:
    client = meta.cloudformation_client

    if data.has_change("parameter_overrides"):
        stack_set_name, account_id, region = stack_set_instance_parse_resource_id(data.id)

        # An empty list clears every override.
        request = {
            "Accounts": [account_id],
            "OperationId": _operation_id(),
            "ParameterOverrides": expand_parameters(data.get("parameter_overrides")),
            "Regions": [region],
            "StackSetName": stack_set_name,
        }

        logger.debug("Updating CloudFormation StackSet Instance", id=data.id)
        output = client.update_stack_instances(**request)

        waiter.stack_set_operation_succeeded(client, stack_set_name, output["OperationId"],
                                             data.timeout("update"), data.context)

    resource_stack_set_instance_read(data, meta)


def delete_stack_set_instance(client: Any, stack_set_name: str, account_id: str, region: str,
                              retain_stack: bool, timeout: float, ctx: Any = None) -> None:
    """Delete one instance and wait for the operation; an absent instance is a no-op."""
    try:
        output = client.delete_stack_instances(
            OperationId=_operation_id(),
            Accounts=[account_id],
            Regions=[region],
            StackSetName=stack_set_name,
            RetainStacks=retain_stack,
        )
    except Exception as err:
        if error_code_in(err, ERR_CODE_STACK_INSTANCE_NOT_FOUND, ERR_CODE_STACK_SET_NOT_FOUND):
            return
        raise

    waiter.stack_set_operation_succeeded(client, stack_set_name, output["OperationId"], timeout, ctx)


def resource_stack_set_instance_delete(data: ResourceData, meta: Any) -> None:
    stack_set_name, account_id, region = stack_set_instance_parse_resource_id(data.id)

    logger.debug("Deleting CloudFormation StackSet Instance", id=data.id)
    delete_stack_set_instance(meta.cloudformation_client, stack_set_name, account_id, region,
                              data.get("retain_stack"), data.timeout("delete"), data.context)


STACK_SET_INSTANCE = ResourceDescriptor(
    name=RESOURCE_NAME,
    schema=SCHEMA,
    create=resource_stack_set_instance_create,
    read=resource_stack_set_instance_read,
    update=resource_stack_set_instance_update,
    delete=resource_stack_set_instance_delete,
    importer=Importer(state=import_state_passthrough),
    timeouts=ResourceTimeout(
        create=STACK_SET_INSTANCE_CREATE_TIMEOUT,
        update=STACK_SET_INSTANCE_UPDATE_TIMEOUT,
        delete=STACK_SET_INSTANCE_DELETE_TIMEOUT,
    ),
    description="AWS CloudFormation StackSet instance",
)
