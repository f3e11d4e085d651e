"""``aws_eks_fargate_profile`` resource.

Creation and deletion of Fargate profiles is serialized per cluster: EKS
rejects concurrent profile changes on the same cluster.
"""
from typing import Any, Dict, List

from awsprovider.domain.resource import Attribute, AttributeType, Importer, ResourceDescriptor, ResourceTimeout
from awsprovider.domain.resource import import_state_passthrough, naming
from awsprovider.domain.resource.state import ResourceData
from awsprovider.domain.resource.validators import no_zero_values, string_len_between, string_matches
from awsprovider.domain.tags import from_service_shape, set_tags_diff, set_tags_from_remote, tags_attributes
from awsprovider.domain.tags import tags_for_create, to_service_shape
from awsprovider.infrastructure.error import error_code_equals, is_not_found
from awsprovider.infrastructure.locking import mutex_kv
from awsprovider.infrastructure.logging import get_logger
from awsprovider.infrastructure.resilience import retry_when_aws_error_message_contains
from awsprovider.providers.aws.services.eks import waiter
from awsprovider.providers.aws.services.eks.finder import (
    ERR_CODE_RESOURCE_NOT_FOUND,
    fargate_profile_by_cluster_name_and_fargate_profile_name,
)
from awsprovider.providers.aws.services.eks.ids import (
    fargate_profile_create_resource_id,
    fargate_profile_parse_resource_id,
)
from awsprovider.providers.aws.tags import eks as eks_tags

logger = get_logger(__name__)

RESOURCE_NAME = "aws_eks_fargate_profile"

ERR_CODE_INVALID_PARAMETER = "InvalidParameterException"

SELECTOR_SCHEMA: Dict[str, Attribute] = {
    "labels": Attribute(AttributeType.MAP, optional=True, force_new=True, elem=Attribute(AttributeType.STRING)),
    "namespace": Attribute(AttributeType.STRING, required=True, force_new=True, validators=[no_zero_values]),
}

SCHEMA: Dict[str, Attribute] = {
    "arn": Attribute(AttributeType.STRING, computed=True),
    "cluster_name": Attribute(AttributeType.STRING, required=True, force_new=True, validators=[
        string_len_between(1, 100),
        string_matches(r"^[0-9A-Za-z][A-Za-z0-9\-_]+$", "must start with a letter or number"),
    ]),
    "fargate_profile_name": Attribute(AttributeType.STRING, required=True, force_new=True,
                                      validators=[no_zero_values]),
    "pod_execution_role_arn": Attribute(AttributeType.STRING, required=True, force_new=True,
                                        validators=[no_zero_values]),
    "selector": Attribute(AttributeType.SET, required=True, force_new=True, min_items=1, elem=SELECTOR_SCHEMA),
    "status": Attribute(AttributeType.STRING, computed=True),
    "subnet_ids": Attribute(AttributeType.SET, optional=True, force_new=True, min_items=1,
                            elem=Attribute(AttributeType.STRING)),
    **tags_attributes(),
}


def _mutex_key(cluster_name: str) -> str:
    return f"{cluster_name}-fargate-profiles"


def expand_fargate_profile_selectors(selectors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    expanded = []
    for selector in selectors or []:
        if not isinstance(selector, dict):
            continue
        item: Dict[str, Any] = {}
        if selector.get("labels"):
            item["labels"] = dict(selector["labels"])
        if selector.get("namespace"):
            item["namespace"] = selector["namespace"]
        expanded.append(item)
    return expanded


def flatten_fargate_profile_selectors(selectors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"labels": dict(selector.get("labels") or {}), "namespace": selector.get("namespace", "")}
        for selector in selectors or []
    ]


def resource_fargate_profile_create(data: ResourceData, meta: Any) -> None:
    client = meta.eks_client

    cluster_name = data.get("cluster_name")
    fargate_profile_name = data.get("fargate_profile_name")
    resource_id = fargate_profile_create_resource_id(cluster_name, fargate_profile_name)

    request: Dict[str, Any] = {
        "clientRequestToken": naming.prefixed_unique_id(naming.UNIQUE_ID_PREFIX),
        "clusterName": cluster_name,
        "fargateProfileName": fargate_profile_name,
        "podExecutionRoleArn": data.get("pod_execution_role_arn"),
        "selectors": expand_fargate_profile_selectors(data.get("selector")),
    }
    if data.get("subnet_ids"):
        request["subnets"] = sorted(data.get("subnet_ids"))

    tags = tags_for_create(data, meta.default_tags_config, meta.ignore_tags_config).ignore_aws()
    if tags:
        request["tags"] = to_service_shape(tags, "eks")

    with mutex_kv.locked(_mutex_key(cluster_name)):
        # The pod execution role may not be visible to EKS yet:
        # InvalidParameterException: Misconfigured PodExecutionRole Trust Policy
        retry_when_aws_error_message_contains(
            waiter.IAM_PROPAGATION_TIMEOUT,
            lambda: client.create_fargate_profile(**request),
            ERR_CODE_INVALID_PARAMETER,
            "Misconfigured PodExecutionRole Trust Policy",
            ctx=data.context,
        )
        data.set_id(resource_id)

        waiter.fargate_profile_created(client, cluster_name, fargate_profile_name,
                                       data.timeout("create"), data.context)

    resource_fargate_profile_read(data, meta)


def resource_fargate_profile_read(data: ResourceData, meta: Any) -> None:
    client = meta.eks_client

    cluster_name, fargate_profile_name = fargate_profile_parse_resource_id(data.id)

    try:
        profile = fargate_profile_by_cluster_name_and_fargate_profile_name(client, cluster_name,
                                                                           fargate_profile_name)
    except Exception as err:
        if not data.is_new_resource() and is_not_found(err):
            logger.warning("EKS Fargate Profile not found, removing from state", id=data.id)
            data.set_id("")
            return
        raise

    data.set("arn", profile.get("fargateProfileArn"))
    data.set("cluster_name", profile.get("clusterName"))
    data.set("fargate_profile_name", profile.get("fargateProfileName"))
    data.set("pod_execution_role_arn", profile.get("podExecutionRoleArn"))
    data.set("selector", flatten_fargate_profile_selectors(profile.get("selectors")))
    data.set("status", profile.get("status"))
    data.set("subnet_ids", list(profile.get("subnets") or []))

    set_tags_from_remote(data, from_service_shape(profile.get("tags"), "eks"),
                         meta.default_tags_config, meta.ignore_tags_config)


def resource_fargate_profile_update(data: ResourceData, meta: Any) -> None:
    if data.has_changes("tags", "tags_all"):
        old, _ = data.get_change("tags_all")
        new = tags_for_create(data, meta.default_tags_config, meta.ignore_tags_config)
        eks_tags.update_tags(meta.eks_client, data.get("arn"), old, new, meta.ignore_tags_config)

    resource_fargate_profile_read(data, meta)


def resource_fargate_profile_delete(data: ResourceData, meta: Any) -> None:
    client = meta.eks_client

    cluster_name, fargate_profile_name = fargate_profile_parse_resource_id(data.id)

    with mutex_kv.locked(_mutex_key(cluster_name)):
        logger.debug("Deleting EKS Fargate Profile", id=data.id)
        try:
            client.delete_fargate_profile(clusterName=cluster_name, fargateProfileName=fargate_profile_name)
        except Exception as err:
            if error_code_equals(err, ERR_CODE_RESOURCE_NOT_FOUND):
                return
            raise

        waiter.fargate_profile_deleted(client, cluster_name, fargate_profile_name,
                                       data.timeout("delete"), data.context)


FARGATE_PROFILE = ResourceDescriptor(
    name=RESOURCE_NAME,
    schema=SCHEMA,
    create=resource_fargate_profile_create,
    read=resource_fargate_profile_read,
    update=resource_fargate_profile_update,
    delete=resource_fargate_profile_delete,
    importer=Importer(state=import_state_passthrough),
    timeouts=ResourceTimeout(create=10 * 60.0, delete=10 * 60.0),
    customize_diff=set_tags_diff,
    description="Amazon EKS Fargate profile",
)
