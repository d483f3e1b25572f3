"""Tests for the node description."""

import pytest

from src.modules.qdrant_node import (
    NODE_DESCRIPTION,
    Operation,
    get_property,
    render_subtitle,
    visible_properties,
)


class TestNodeDescription:
    """Tests for NODE_DESCRIPTION."""

    def test_identity(self):
        """The node should be registered under its public name."""
        assert NODE_DESCRIPTION.name == "qdrantAdvanced"
        assert NODE_DESCRIPTION.display_name == "Qdrant (Advanced)"
        assert NODE_DESCRIPTION.version == 1

    def test_operation_options_cover_every_operation(self):
        """Every operation should be selectable, sorted by display name."""
        options = get_property("operation").options

        assert {value for _, value in options} == {op.value for op in Operation}
        names = [name for name, _ in options]
        assert names == sorted(names)
        assert ("Get Points by IDs", "getPoints") in options

    def test_defaults(self):
        """Editor defaults should match what users see in the editor."""
        assert get_property("operation").default == "searchPoints"
        assert get_property("collectionConfig").default == "{}"
        assert get_property("pointIds").default == "[]"
        assert get_property("filter").default == "{}"
        assert get_property("limit").default == 50
        assert get_property("limit").min_value == 1

    def test_collection_name_is_required(self):
        """Collection name should be marked required in the editor."""
        assert get_property("collectionName").required is True

    def test_unknown_property_raises(self):
        """Looking up an undeclared parameter should raise KeyError."""
        with pytest.raises(KeyError):
            get_property("topK")


class TestVisibleProperties:
    """Tests for visible_properties()."""

    def test_search_points(self):
        """Search should show vector, filter and limit."""
        names = [p.name for p in visible_properties(Operation.SEARCH_POINTS)]

        assert names == [
            "operation",
            "collectionName",
            "searchVector",
            "filter",
            "limit",
        ]

    def test_count_points(self):
        """Count should only add the filter."""
        names = [p.name for p in visible_properties(Operation.COUNT_POINTS)]

        assert names == ["operation", "collectionName", "filter"]

    @pytest.mark.parametrize(
        "operation",
        [
            Operation.DELETE_COLLECTION,
            Operation.LIST_COLLECTIONS,
            Operation.GET_COLLECTION,
        ],
    )
    def test_operations_without_extra_fields(self, operation):
        """Operations without fields should show only the common parameters."""
        names = [p.name for p in visible_properties(operation)]

        assert names == ["operation", "collectionName"]


def test_render_subtitle():
    """The subtitle should combine operation and collection."""
    assert render_subtitle("searchPoints", "docs") == "searchPoints: docs"
