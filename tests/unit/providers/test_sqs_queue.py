"""Tests for the aws_sqs_queue resource against moto."""

import pytest
from moto import mock_aws

from awsprovider.config.schemas import ProviderSettings
from awsprovider.domain.core.exceptions import ValidationError
from awsprovider.domain.resource import ResourceState
from awsprovider.infrastructure.runtime import ResourceProvider, ResourceRegistry
from awsprovider.providers.aws.aws_client import AWSClient
from awsprovider.providers.aws.services.sqs import QUEUE, queue_name_from_url, waiter

KIND = "aws_sqs_queue"


@pytest.fixture
def fast_waiters(monkeypatch):
    """Wait for a single observation instead of SQS's consistency windows."""
    monkeypatch.setattr(waiter, "QUEUE_ATTRIBUTE_PROPAGATION_CONTINUOUS_TARGET_OCCURENCE", 1)
    monkeypatch.setattr(waiter, "QUEUE_ATTRIBUTE_PROPAGATION_MIN_TIMEOUT", 0.0)
    monkeypatch.setattr(waiter, "QUEUE_DELETED_NOT_FOUND_CHECKS", 1)
    monkeypatch.setattr(waiter, "QUEUE_DELETED_MIN_TIMEOUT", 0.0)


def make_provider(settings=None):
    registry = ResourceRegistry()
    registry.register(QUEUE)
    return ResourceProvider(AWSClient(settings or ProviderSettings(region="us-east-1")), registry)


@pytest.mark.aws
@pytest.mark.usefixtures("fast_waiters")
class TestQueueLifecycle:
    """Test queue create, read, update and delete."""

    @mock_aws
    def test_create_standard_queue(self):
        provider = make_provider()

        state = provider.create_resource(KIND, {"name": "orders"})

        attributes = state.attributes
        assert state.id.endswith("/orders")
        assert attributes["url"] == state.id
        assert attributes["arn"] == "arn:aws:sqs:us-east-1:123456789012:orders"
        assert attributes["name"] == "orders"
        assert attributes["visibility_timeout_seconds"] == 30
        assert attributes["max_message_size"] == 262_144
        assert attributes["kms_data_key_reuse_period_seconds"] == 300
        assert attributes["fifo_queue"] is False

    @mock_aws
    def test_create_fifo_queue_from_prefix(self):
        provider = make_provider()

        state = provider.create_resource(KIND, {
            "name_prefix": "orders-",
            "fifo_queue": True,
            "content_based_deduplication": True,
        })

        name = state.attributes["name"]
        assert name.startswith("orders-")
        assert name.endswith(".fifo")
        assert state.attributes["name_prefix"] == "orders-"
        assert state.attributes["fifo_queue"] is True
        assert state.attributes["content_based_deduplication"] is True

    @mock_aws
    def test_default_tags(self):
        provider = make_provider(ProviderSettings(region="us-east-1",
                                                  default_tags={"tags": {"team": "platform"}}))

        state = provider.create_resource(KIND, {"name": "tagged", "tags": {"env": "prod"}})

        assert state.attributes["tags"] == {"env": "prod"}
        assert state.attributes["tags_all"] == {"team": "platform", "env": "prod"}

    @mock_aws
    def test_update_attributes_and_tags(self):
        provider = make_provider()
        state = provider.create_resource(KIND, {"name": "orders", "tags": {"env": "dev"}})

        updated = provider.update_resource(KIND, state, {
            "name": "orders",
            "visibility_timeout_seconds": 60,
            "tags": {"env": "prod", "owner": "storage"},
        })

        assert updated.id == state.id
        assert updated.attributes["visibility_timeout_seconds"] == 60
        assert updated.attributes["tags"] == {"env": "prod", "owner": "storage"}

    @mock_aws
    def test_read_after_external_deletion(self):
        provider = make_provider()
        state = provider.create_resource(KIND, {"name": "orders"})
        provider.meta.sqs_client.delete_queue(QueueUrl=state.id)

        assert provider.read_resource(KIND, state) is None

    @mock_aws
    def test_delete(self):
        provider = make_provider()
        state = provider.create_resource(KIND, {"name": "orders"})

        provider.delete_resource(KIND, state)

        assert provider.meta.sqs_client.list_queues().get("QueueUrls", []) == []
        assert provider.read_resource(KIND, state) is None

    @mock_aws
    def test_import(self):
        provider = make_provider()
        url = provider.meta.sqs_client.create_queue(QueueName="existing")["QueueUrl"]

        states = provider.import_resource(KIND, url)
        refreshed = provider.read_resource(KIND, states[0])

        assert refreshed.attributes["name"] == "existing"
        assert refreshed.attributes["name_prefix"] in (None, "")


@pytest.mark.unit
class TestQueuePlan:
    """Test plan-time checks of the queue resource."""

    def setup_method(self):
        registry = ResourceRegistry()
        registry.register(QUEUE)
        self.registry = registry

    def test_invalid_standard_name(self, mock_meta):
        provider = ResourceProvider(mock_meta, self.registry)

        with pytest.raises(ValidationError) as exc_info:
            provider.plan_resource_change(KIND, None, {"name": "bad name!"})

        assert exc_info.value.field_path == "name"

    def test_fifo_name_needs_suffix(self, mock_meta):
        provider = ResourceProvider(mock_meta, self.registry)

        with pytest.raises(ValidationError):
            provider.plan_resource_change(KIND, None, {"name": "orders", "fifo_queue": True})
        planned = provider.plan_resource_change(KIND, None, {"name": "orders.fifo", "fifo_queue": True})
        assert planned.is_create

    def test_content_based_deduplication_requires_fifo(self, mock_meta):
        provider = ResourceProvider(mock_meta, self.registry)

        with pytest.raises(ValidationError) as exc_info:
            provider.plan_resource_change(KIND, None, {"name": "orders", "content_based_deduplication": True})

        assert exc_info.value.field_path == "content_based_deduplication"

    def test_tags_all_planned_from_defaults(self, mock_meta):
        from awsprovider.domain.tags import DefaultTagsConfig, KeyValueTags

        mock_meta.default_tags_config = DefaultTagsConfig(KeyValueTags({"team": "platform"}))
        provider = ResourceProvider(mock_meta, self.registry)

        planned = provider.plan_resource_change(KIND, None, {"name": "orders", "tags": {"env": "prod"}})

        assert planned.planned_attributes["tags_all"] == {"team": "platform", "env": "prod"}

    def test_fifo_change_forces_replacement(self, mock_meta):
        provider = ResourceProvider(mock_meta, self.registry)
        prior = ResourceState(id="https://sqs.us-east-1.amazonaws.com/123456789012/orders",
                              attributes={"name": "orders", "fifo_queue": False})

        planned = provider.plan_resource_change(KIND, prior, {"name": "orders.fifo", "fifo_queue": True})

        assert set(planned.requires_replace) == {"name", "fifo_queue"}

    def test_equivalent_policy_is_not_a_change(self, mock_meta):
        provider = ResourceProvider(mock_meta, self.registry)
        prior = ResourceState(id="https://sqs.us-east-1.amazonaws.com/123456789012/orders",
                              attributes={"name": "orders", "policy": '{"Version": "2012-10-17"}'})

        planned = provider.plan_resource_change(KIND, prior, {"name": "orders",
                                                              "policy": '{"Version":"2012-10-17"}'})

        assert "policy" not in planned.changed


@pytest.mark.unit
class TestQueueNameFromUrl:
    """Test queue URL parsing."""

    def test_name(self):
        assert queue_name_from_url("https://sqs.us-east-1.amazonaws.com/123456789012/orders") == "orders"

    def test_no_path(self):
        with pytest.raises(ValueError):
            queue_name_from_url("https://sqs.us-east-1.amazonaws.com")
