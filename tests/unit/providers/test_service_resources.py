"""Tests for the placement group, Fargate profile and stack set instance resources."""

import pytest

from awsprovider.domain.core.exceptions import ResourceOperationError, ValidationError
from awsprovider.domain.resource import ResourceState
from awsprovider.infrastructure.locking import mutex_kv
from awsprovider.infrastructure.resilience import UnexpectedStateError
from awsprovider.infrastructure.runtime import ResourceProvider, ResourceRegistry
from awsprovider.providers.aws.services.cloudformation import STACK_SET_INSTANCE
from awsprovider.providers.aws.services.cloudformation import waiter as cloudformation_waiter
from awsprovider.providers.aws.services.cloudformation.status import StackSetOperationError
from awsprovider.providers.aws.services.ec2 import PLACEMENT_GROUP
from awsprovider.providers.aws.services.eks import FARGATE_PROFILE


def provider_for(descriptor, meta):
    registry = ResourceRegistry()
    registry.register(descriptor)
    return ResourceProvider(meta, registry)


def placement_group(state="available", **extra):
    group = {"GroupName": "pg", "Strategy": "cluster", "State": state, "GroupId": "pg-123"}
    group.update(extra)
    return {"PlacementGroups": [group]}


@pytest.mark.unit
class TestPlacementGroup:
    """Test the aws_placement_group resource."""

    KIND = "aws_placement_group"

    def test_create_partition_group(self, mock_meta):
        client = mock_meta.ec2_client
        client.describe_placement_groups.return_value = placement_group(
            Strategy="partition", PartitionCount=3, Tags=[{"Key": "env", "Value": "prod"}])
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        state = provider.create_resource(self.KIND, {
            "name": "pg", "strategy": "partition", "partition_count": 3, "tags": {"env": "prod"},
        })

        client.create_placement_group.assert_called_once_with(
            GroupName="pg",
            Strategy="partition",
            PartitionCount=3,
            TagSpecifications=[{"ResourceType": "placement-group", "Tags": [{"Key": "env", "Value": "prod"}]}],
        )
        assert state.id == "pg"
        assert state.attributes["placement_group_id"] == "pg-123"
        assert state.attributes["partition_count"] == 3
        assert state.attributes["tags"] == {"env": "prod"}

    def test_partition_count_only_sent_for_partition_strategy(self, mock_meta):
        client = mock_meta.ec2_client
        client.describe_placement_groups.return_value = placement_group()
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        provider.create_resource(self.KIND, {"name": "pg", "strategy": "cluster"})

        assert client.create_placement_group.call_args.kwargs == {"GroupName": "pg", "Strategy": "cluster"}

    def test_invalid_strategy(self, mock_meta):
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        with pytest.raises(ValidationError) as exc_info:
            provider.validate_resource_config(self.KIND, {"name": "pg", "strategy": "random"})

        assert exc_info.value.field_path == "strategy"

    def test_deleted_group_is_gone(self, mock_meta):
        mock_meta.ec2_client.describe_placement_groups.return_value = placement_group(state="deleted")
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        assert provider.read_resource(self.KIND, ResourceState(id="pg")) is None

    def test_unknown_group_is_gone(self, mock_meta, client_error):
        mock_meta.ec2_client.describe_placement_groups.side_effect = client_error("InvalidPlacementGroup.Unknown")
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        assert provider.read_resource(self.KIND, ResourceState(id="pg")) is None

    def test_update_tags_uses_group_id(self, mock_meta):
        client = mock_meta.ec2_client
        client.describe_placement_groups.return_value = placement_group(Tags=[{"Key": "env", "Value": "prod"}])
        provider = provider_for(PLACEMENT_GROUP, mock_meta)
        prior = ResourceState(id="pg", attributes={
            "name": "pg", "strategy": "cluster", "placement_group_id": "pg-123",
            "tags": {"env": "dev", "owner": "x"}, "tags_all": {"env": "dev", "owner": "x"},
        })

        updated = provider.update_resource(self.KIND, prior, {"name": "pg", "strategy": "cluster",
                                                              "tags": {"env": "prod"}})

        client.delete_tags.assert_called_once_with(Resources=["pg-123"], Tags=[{"Key": "owner"}])
        client.create_tags.assert_called_once_with(Resources=["pg-123"], Tags=[{"Key": "env", "Value": "prod"}])
        assert updated.attributes["tags"] == {"env": "prod"}

    def test_delete_waits_until_gone(self, mock_meta, client_error):
        client = mock_meta.ec2_client
        client.describe_placement_groups.side_effect = client_error("InvalidPlacementGroup.Unknown")
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        provider.delete_resource(self.KIND, ResourceState(id="pg", attributes={"name": "pg"}))

        client.delete_placement_group.assert_called_once_with(GroupName="pg")

    def test_delete_of_unknown_group_succeeds(self, mock_meta, client_error):
        mock_meta.ec2_client.delete_placement_group.side_effect = client_error("InvalidPlacementGroup.Unknown")
        provider = provider_for(PLACEMENT_GROUP, mock_meta)

        provider.delete_resource(self.KIND, ResourceState(id="pg"))


FARGATE_CONFIG = {
    "cluster_name": "prod",
    "fargate_profile_name": "default",
    "pod_execution_role_arn": "arn:aws:iam::123456789012:role/pod",
    "selector": [{"namespace": "default"}],
    "subnet_ids": ["subnet-b", "subnet-a"],
}


def fargate_profile(status="ACTIVE"):
    return {"fargateProfile": {
        "fargateProfileArn": "arn:aws:eks:us-east-1:123456789012:fargateprofile/prod/default/1",
        "clusterName": "prod",
        "fargateProfileName": "default",
        "podExecutionRoleArn": "arn:aws:iam::123456789012:role/pod",
        "selectors": [{"namespace": "default"}],
        "subnets": ["subnet-a", "subnet-b"],
        "status": status,
        "tags": {},
    }}


@pytest.mark.unit
class TestFargateProfile:
    """Test the aws_eks_fargate_profile resource."""

    KIND = "aws_eks_fargate_profile"

    def test_create_holds_cluster_mutex(self, mock_meta):
        client = mock_meta.eks_client
        client.describe_fargate_profile.return_value = fargate_profile()
        held = []
        client.create_fargate_profile.side_effect = lambda **kwargs: held.append(
            mutex_kv.get("prod-fargate-profiles").locked()) or {}
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        state = provider.create_resource(self.KIND, FARGATE_CONFIG)

        assert held == [True]
        assert not mutex_kv.get("prod-fargate-profiles").locked()
        assert state.id == "prod:default"
        assert state.attributes["status"] == "ACTIVE"
        assert state.attributes["selector"] == [{"labels": {}, "namespace": "default"}]
        request = client.create_fargate_profile.call_args.kwargs
        assert request["subnets"] == ["subnet-a", "subnet-b"]
        assert request["selectors"] == [{"namespace": "default"}]
        assert "tags" not in request

    def test_create_retries_while_role_propagates(self, mock_meta, client_error):
        client = mock_meta.eks_client
        client.describe_fargate_profile.return_value = fargate_profile()
        client.create_fargate_profile.side_effect = [
            client_error("InvalidParameterException", "Misconfigured PodExecutionRole Trust Policy; ..."),
            {},
        ]
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        provider.create_resource(self.KIND, FARGATE_CONFIG)

        assert client.create_fargate_profile.call_count == 2

    def test_create_failed_status_keeps_partial_state(self, mock_meta):
        mock_meta.eks_client.describe_fargate_profile.return_value = fargate_profile(status="CREATE_FAILED")
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        with pytest.raises(ResourceOperationError) as exc_info:
            provider.create_resource(self.KIND, FARGATE_CONFIG)

        assert exc_info.value.partial_state.id == "prod:default"
        assert isinstance(exc_info.value.__cause__, UnexpectedStateError)

    def test_read_missing_profile(self, mock_meta, client_error):
        mock_meta.eks_client.describe_fargate_profile.side_effect = client_error("ResourceNotFoundException")
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        assert provider.read_resource(self.KIND, ResourceState(id="prod:default")) is None

    def test_read_malformed_id(self, mock_meta):
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        with pytest.raises(ResourceOperationError, match="expected CLUSTER-NAME:FARGATE-PROFILE-NAME"):
            provider.read_resource(self.KIND, ResourceState(id="prod"))

    def test_delete(self, mock_meta, client_error):
        client = mock_meta.eks_client
        client.describe_fargate_profile.side_effect = client_error("ResourceNotFoundException")
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        provider.delete_resource(self.KIND, ResourceState(id="prod:default"))

        client.delete_fargate_profile.assert_called_once_with(clusterName="prod", fargateProfileName="default")

    def test_delete_missing_profile(self, mock_meta, client_error):
        client = mock_meta.eks_client
        client.delete_fargate_profile.side_effect = client_error("ResourceNotFoundException")
        provider = provider_for(FARGATE_PROFILE, mock_meta)

        provider.delete_resource(self.KIND, ResourceState(id="prod:default"))

        client.describe_fargate_profile.assert_not_called()

    def test_selector_namespace_required(self, mock_meta):
        provider = provider_for(FARGATE_PROFILE, mock_meta)
        config = dict(FARGATE_CONFIG, selector=[{"labels": {"app": "web"}}])

        with pytest.raises(ValidationError, match="selector.0.namespace"):
            provider.validate_resource_config(self.KIND, config)


@pytest.fixture
def no_operation_delay(monkeypatch):
    monkeypatch.setattr(cloudformation_waiter, "STACK_SET_OPERATION_DELAY", 0.0)


def stack_instance(**overrides):
    instance = {
        "Account": "123456789012",
        "Region": "us-east-1",
        "StackId": "arn:aws:cloudformation:us-east-1:123456789012:stack/StackSet-baseline/1",
        "ParameterOverrides": [{"ParameterKey": "Env", "ParameterValue": "prod"}],
    }
    instance.update(overrides)
    return {"StackInstance": instance}


@pytest.mark.unit
@pytest.mark.usefixtures("no_operation_delay")
class TestStackSetInstance:
    """Test the aws_cloudformation_stack_set_instance resource."""

    KIND = "aws_cloudformation_stack_set_instance"

    def setup_method(self):
        self.state_id = "baseline,123456789012,us-east-1"

    def test_create_defaults_to_provider_account_and_region(self, mock_meta):
        client = mock_meta.cloudformation_client
        client.create_stack_instances.return_value = {"OperationId": "op-1"}
        client.describe_stack_set_operation.return_value = {"StackSetOperation": {"Status": "SUCCEEDED"}}
        client.describe_stack_instance.return_value = stack_instance()
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        state = provider.create_resource(self.KIND, {"stack_set_name": "baseline",
                                                     "parameter_overrides": {"Env": "prod"}})

        request = client.create_stack_instances.call_args.kwargs
        assert request["Accounts"] == ["123456789012"]
        assert request["Regions"] == ["us-east-1"]
        assert request["ParameterOverrides"] == [{"ParameterKey": "Env", "ParameterValue": "prod"}]
        assert client.describe_stack_set_operation.call_args.kwargs == {"StackSetName": "baseline",
                                                                         "OperationId": "op-1"}
        assert state.id == self.state_id
        assert state.attributes["parameter_overrides"] == {"Env": "prod"}

    def test_operation_not_yet_visible(self, mock_meta, client_error):
        client = mock_meta.cloudformation_client
        client.create_stack_instances.return_value = {"OperationId": "op-1"}
        client.describe_stack_set_operation.side_effect = [
            client_error("OperationNotFoundException"),
            {"StackSetOperation": {"Status": "SUCCEEDED"}},
        ]
        client.describe_stack_instance.return_value = stack_instance()
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        provider.create_resource(self.KIND, {"stack_set_name": "baseline"})

        assert client.describe_stack_set_operation.call_count == 2

    def test_failed_operation_lists_results(self, mock_meta):
        client = mock_meta.cloudformation_client
        client.create_stack_instances.return_value = {"OperationId": "op-1"}
        client.describe_stack_set_operation.return_value = {"StackSetOperation": {"Status": "FAILED"}}
        client.list_stack_set_operation_results.return_value = {"Summaries": [{
            "Account": "123456789012",
            "Region": "us-east-1",
            "Status": "FAILED",
            "StatusReason": "Account 123456789012 should have 'AWSCloudFormationStackSetExecutionRole' role",
        }]}
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        with pytest.raises(ResourceOperationError) as exc_info:
            provider.create_resource(self.KIND, {"stack_set_name": "baseline"})

        cause = exc_info.value.__cause__
        assert isinstance(cause, StackSetOperationError)
        assert cause.operation_id == "op-1"
        assert str(cause).startswith("Operation (op-1) Results:\n")
        assert "Account (123456789012) Region (us-east-1) Status (FAILED) Status Reason: " in str(cause)
        assert exc_info.value.partial_state.id == self.state_id

    def test_update_parameter_overrides(self, mock_meta):
        client = mock_meta.cloudformation_client
        client.update_stack_instances.return_value = {"OperationId": "op-2"}
        client.describe_stack_set_operation.return_value = {"StackSetOperation": {"Status": "SUCCEEDED"}}
        client.describe_stack_instance.return_value = stack_instance(ParameterOverrides=[])
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)
        prior = ResourceState(id=self.state_id, attributes={
            "stack_set_name": "baseline", "account_id": "123456789012", "region": "us-east-1",
            "parameter_overrides": {"Env": "prod"},
        })

        updated = provider.update_resource(self.KIND, prior, {"stack_set_name": "baseline"})

        assert client.update_stack_instances.call_args.kwargs["ParameterOverrides"] == []
        assert updated.attributes["parameter_overrides"] == {}

    def test_read_malformed_id(self, mock_meta):
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        with pytest.raises(ResourceOperationError, match="expected NAME,ACCOUNT,REGION"):
            provider.read_resource(self.KIND, ResourceState(id="stack1,,us-west-2"))

    def test_read_missing_instance(self, mock_meta, client_error):
        mock_meta.cloudformation_client.describe_stack_instance.side_effect = client_error(
            "StackInstanceNotFoundException")
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        assert provider.read_resource(self.KIND, ResourceState(id=self.state_id)) is None

    def test_delete(self, mock_meta):
        client = mock_meta.cloudformation_client
        client.delete_stack_instances.return_value = {"OperationId": "op-3"}
        client.describe_stack_set_operation.return_value = {"StackSetOperation": {"Status": "SUCCEEDED"}}
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        provider.delete_resource(self.KIND, ResourceState(id=self.state_id, attributes={"retain_stack": True}))

        request = client.delete_stack_instances.call_args.kwargs
        assert request["RetainStacks"] is True
        assert request["Accounts"] == ["123456789012"]

    @pytest.mark.parametrize("code", ["StackInstanceNotFoundException", "StackSetNotFoundException"])
    def test_delete_missing(self, mock_meta, client_error, code):
        client = mock_meta.cloudformation_client
        client.delete_stack_instances.side_effect = client_error(code)
        provider = provider_for(STACK_SET_INSTANCE, mock_meta)

        provider.delete_resource(self.KIND, ResourceState(id=self.state_id))

        client.describe_stack_set_operation.assert_not_called()
