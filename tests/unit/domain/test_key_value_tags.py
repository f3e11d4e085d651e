"""Tests for the tag engine."""

import pytest

from awsprovider.domain.resource import Attribute, AttributeType, ResourceData, ResourceState
from awsprovider.domain.tags import (
    DefaultTagsConfig,
    IgnoreTagsConfig,
    KeyValueTags,
    diff_tags,
    from_service_shape,
    set_tags_from_remote,
    tags_attributes,
    tags_for_create,
    to_service_shape,
)


@pytest.mark.unit
class TestKeyValueTags:
    """Test tag set operations."""

    def test_new_from_mapping_drops_none_values(self):
        tags = KeyValueTags.new({"env": "prod", "owner": None, "count": 3})

        assert tags.map() == {"env": "prod", "count": "3"}

    def test_new_from_keys(self):
        assert KeyValueTags.new(["a", "b"]).map() == {"a": "", "b": ""}

    def test_new_rejects_string(self):
        with pytest.raises(TypeError):
            KeyValueTags.new("env=prod")

    def test_operations_return_new_instances(self):
        tags = KeyValueTags({"env": "prod"})
        merged = tags.merge({"team": "storage"})

        assert tags.map() == {"env": "prod"}
        assert merged.map() == {"env": "prod", "team": "storage"}

    def test_ignore_aws(self):
        tags = KeyValueTags({"aws:cloudformation:stack-name": "s", "Name": "web"})
        assert tags.ignore_aws().map() == {"Name": "web"}

    def test_keys_are_case_sensitive(self):
        tags = KeyValueTags({"Name": "a", "name": "b"})
        assert tags.ignore_keys(["name"]).map() == {"Name": "a"}

    def test_ignore_config(self):
        tags = KeyValueTags({"env": "prod", "internal:owner": "x", "cost": "1"})
        config = IgnoreTagsConfig(keys=["cost"], key_prefixes=["internal:"])

        assert tags.ignore_config(config).map() == {"env": "prod"}
        assert tags.ignore_config(None) is tags

    def test_merge_user_value_wins(self):
        defaults = DefaultTagsConfig(KeyValueTags({"env": "default", "team": "platform"}))

        assert defaults.merge_tags({"env": "prod"}).map() == {"env": "prod", "team": "platform"}

    def test_remove_default_config(self):
        defaults = DefaultTagsConfig(KeyValueTags({"env": "prod", "team": "platform"}))
        tags = KeyValueTags({"env": "prod", "team": "storage", "Name": "web"})

        assert tags.remove_default_config(defaults).map() == {"team": "storage", "Name": "web"}

    def test_removed_and_updated(self):
        old = KeyValueTags({"a": "1", "b": "2"})
        new = {"b": "3", "c": "4"}

        assert old.removed(new).keys_list() == ["a"]
        assert old.updated(new).map() == {"b": "3", "c": "4"}

    def test_chunks(self):
        tags = KeyValueTags({f"k{i}": str(i) for i in range(5)})

        chunks = tags.chunks(2)

        assert [len(chunk) for chunk in chunks] == [2, 2, 1]
        assert KeyValueTags().chunks(2) == []
        with pytest.raises(ValueError):
            tags.chunks(0)

    def test_mapping_equality(self):
        assert KeyValueTags({"a": "1"}) == {"a": "1"}
        assert KeyValueTags({"a": "1"}) != KeyValueTags({"a": "2"})


@pytest.mark.unit
class TestDiffTags:
    """Test the minimal update computation."""

    def test_ignored_prefix_is_omitted_from_both_sides(self):
        old = {"env": "prod", "owner": "alice", "internal:cloud-managed": "xyz"}
        new = {"env": "stage", "owner": "alice", "internal:cloud-managed": "abc"}

        diff = diff_tags(old, new, IgnoreTagsConfig(key_prefixes=["internal:"]))

        assert diff.add == {"env": "stage"}
        assert diff.remove == []

    def test_removals(self):
        diff = diff_tags({"env": "prod", "owner": "alice"}, {"env": "prod"})

        assert diff.add == {}
        assert diff.remove == ["owner"]

    def test_aws_keys_never_appear(self):
        diff = diff_tags({"aws:created": "1"}, {"aws:created": "2", "Name": "web"})

        assert diff.add == {"Name": "web"}
        assert diff.remove == []

    def test_no_change(self):
        assert diff_tags({"a": "1"}, {"a": "1"}).empty
        assert diff_tags(None, {}).empty


@pytest.mark.unit
class TestServiceShapes:
    """Test conversion to and from SDK tag shapes."""

    def test_list_of_key_value(self):
        shaped = to_service_shape({"env": "prod"}, "ec2")

        assert shaped == [{"Key": "env", "Value": "prod"}]
        assert from_service_shape(shaped, "ec2").map() == {"env": "prod"}

    def test_map_services(self):
        assert to_service_shape(KeyValueTags({"env": "prod"}), "sqs") == {"env": "prod"}
        assert from_service_shape({"env": "prod"}, "eks").map() == {"env": "prod"}

    def test_lowercase_list(self):
        assert to_service_shape({"env": "prod"}, "ecs") == [{"key": "env", "value": "prod"}]
        assert from_service_shape([{"key": "env", "value": "prod"}], "ecs").map() == {"env": "prod"}

    def test_autoscaling_propagation(self):
        shaped = to_service_shape({"env": "prod"}, "autoscaling", resource_id="asg-1")

        assert shaped == [{
            "Key": "env",
            "Value": "prod",
            "PropagateAtLaunch": True,
            "ResourceId": "asg-1",
            "ResourceType": "auto-scaling-group",
        }]

    def test_missing_tags(self):
        assert from_service_shape(None, "ec2").map() == {}

    def test_unsupported_service(self):
        with pytest.raises(ValueError, match="unsupported tagging service"):
            to_service_shape({}, "lambda")


@pytest.mark.unit
class TestResourceTags:
    """Test tags/tags_all handling on the state accessor."""

    def setup_method(self):
        self.schema = {"name": Attribute(AttributeType.STRING, required=True), **tags_attributes()}
        self.defaults = DefaultTagsConfig(KeyValueTags({"team": "platform"}))
        self.ignore = IgnoreTagsConfig(key_prefixes=["internal:"])

    def test_tags_for_create(self):
        data = ResourceData(self.schema, config={"name": "q", "tags": {"env": "prod", "internal:x": "1"}})

        tags = tags_for_create(data, self.defaults, self.ignore)

        assert tags.map() == {"team": "platform", "env": "prod"}

    def test_set_tags_from_remote(self):
        data = ResourceData(self.schema, state=ResourceState(id="q", attributes={"name": "q"}))
        remote = KeyValueTags({"team": "platform", "env": "prod", "aws:managed": "y", "internal:x": "1"})

        set_tags_from_remote(data, remote, self.defaults, self.ignore)

        assert data.get("tags") == {"env": "prod"}
        assert data.get("tags_all") == {"team": "platform", "env": "prod"}
