"""Tests for composite identifiers and generated names."""

import pytest

from awsprovider.domain.core.exceptions import IdentifierFormatError
from awsprovider.domain.resource import CompositeId
from awsprovider.domain.resource import naming

STACK_SET_INSTANCE_ID = CompositeId(("NAME", "ACCOUNT", "REGION"))


@pytest.mark.unit
class TestCompositeId:
    """Test identifier formatting and parsing."""

    def test_format_and_parse(self):
        resource_id = STACK_SET_INSTANCE_ID.format("stack1", "123456789012", "us-west-2")

        assert resource_id == "stack1,123456789012,us-west-2"
        assert STACK_SET_INSTANCE_ID.parse(resource_id) == ("stack1", "123456789012", "us-west-2")

    def test_empty_part(self):
        with pytest.raises(IdentifierFormatError) as exc_info:
            STACK_SET_INSTANCE_ID.parse("stack1,,us-west-2")

        assert "expected NAME,ACCOUNT,REGION" in str(exc_info.value)
        assert exc_info.value.resource_id == "stack1,,us-west-2"

    def test_wrong_part_count(self):
        with pytest.raises(IdentifierFormatError):
            STACK_SET_INSTANCE_ID.parse("stack1,123456789012")
        with pytest.raises(IdentifierFormatError):
            STACK_SET_INSTANCE_ID.format("stack1", "123456789012")

    @pytest.mark.parametrize("parts", [
        ("stack1", None, "us-west-2"),
        ("stack1", 123456789012, "us-west-2"),
    ])
    def test_format_rejects_non_string_parts(self, parts):
        with pytest.raises(IdentifierFormatError, match="expected NAME,ACCOUNT,REGION"):
            STACK_SET_INSTANCE_ID.format(*parts)

    def test_last_part_may_hold_separator(self):
        fargate_id = CompositeId(("CLUSTER", "PROFILE"), separator=":")

        assert fargate_id.parse("prod:profile:extra") == ("prod", "profile:extra")

    def test_separator_in_leading_part_is_rejected(self):
        with pytest.raises(IdentifierFormatError):
            STACK_SET_INSTANCE_ID.format("stack,1", "123456789012", "us-west-2")


@pytest.mark.unit
class TestNaming:
    """Test name / name_prefix generation."""

    def test_explicit_name_wins(self):
        assert naming.generate("orders", "ignored-") == "orders"

    def test_generated_names_are_unique(self):
        first = naming.generate("", "orders-")
        second = naming.generate("", "orders-")

        assert first != second
        assert first.startswith("orders-")
        assert naming.has_resource_unique_id_suffix(first)
        assert len(first) == len("orders-") + naming.UNIQUE_ID_SUFFIX_LENGTH

    def test_default_prefix(self):
        assert naming.generate("", "").startswith(naming.UNIQUE_ID_PREFIX)

    def test_suffix(self):
        name = naming.generate_with_suffix("", "orders-", ".fifo")

        assert name.endswith(".fifo")
        assert naming.name_prefix_from_name_with_suffix(name, ".fifo") == "orders-"
        assert naming.generate_with_suffix("orders.fifo", "x-", ".fifo") == "orders.fifo"

    def test_prefix_from_name(self):
        assert naming.name_prefix_from_name(naming.generate("", "web-")) == "web-"
        assert naming.name_prefix_from_name("hand-written") is None
        assert naming.name_prefix_from_name_with_suffix("orders", ".fifo") is None
