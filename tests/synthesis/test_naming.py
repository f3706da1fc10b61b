"""Tests for resource naming rules."""

import pytest

from restrouter.core.errors import ConfigurationError
from restrouter.synthesis.naming import collection_path, item_path, resource_name


class TestResourceName:
    @pytest.mark.parametrize(
        ("table", "expected"),
        [
            ("users", "users"),
            ("Users", "users"),
            ("order items", "order_items"),
            ("Order  Items!", "order_items"),
            ("line-items", "line-items"),
            ("_hidden_", "hidden"),
            ("dbo.Customers", "dbo_customers"),
        ],
    )
    def test_normalization(self, table: str, expected: str):
        assert resource_name(table) == expected

    def test_case_variants_collide(self):
        """Names differing only by case normalize to the same resource."""
        assert resource_name("Users") == resource_name("users")

    def test_pluralize(self):
        assert resource_name("user", freeze_table_name=False) == "users"
        assert resource_name("users", freeze_table_name=False) == "users"

    def test_frozen_by_default(self):
        assert resource_name("user") == "user"

    @pytest.mark.parametrize("table", ["", "   ", "!!!", "___"])
    def test_unusable_name(self, table: str):
        with pytest.raises(ConfigurationError, match="cannot be turned into a resource path"):
            resource_name(table)


class TestPaths:
    def test_collection_path(self):
        assert collection_path("users") == "/users"

    def test_item_path(self):
        assert item_path("users") == "/users/{id}"
