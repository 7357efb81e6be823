"""
Tests for routing nested fields to other domains during conversion.
"""

import pytest

from forman_schema import to_json_schema
from forman_schema.exceptions import DomainRootError


def _connection(domain="expect"):
    return {
        "name": "parameters",
        "type": "collection",
        "required": True,
        "spec": [
            {
                "name": "connection",
                "type": "select",
                "label": "Connection",
                "help": "Field description",
                "required": True,
                "options": {
                    "store": "rpc://function",
                    "nested": {
                        "domain": domain,
                        "store": [
                            {
                                "name": "folder",
                                "type": "select",
                                "label": "Folder",
                                "options": "rpc://nestedFunction",
                                "required": True,
                            }
                        ],
                    },
                },
            }
        ],
    }


MAPPER = {"name": "mapper", "type": "collection", "required": True, "x-domain-root": "expect"}


class TestDomainRouting:
    """Test fields nested under another domain land on its root collection."""

    def test_root_after_source(self):
        schema = to_json_schema({"type": "collection", "spec": [_connection(), MAPPER]})

        assert schema == {
            "type": "object",
            "properties": {
                "parameters": {
                    "type": "object",
                    "properties": {
                        "connection": {
                            "type": "string",
                            "title": "Connection",
                            "description": "Field description",
                            "x-fetch": "rpc://function",
                        }
                    },
                    "required": ["connection"],
                },
                "mapper": {
                    "type": "object",
                    "properties": {
                        "folder": {
                            "type": "string",
                            "title": "Folder",
                            "x-fetch": "rpc://nestedFunction?connection={{connection}}",
                        }
                    },
                    "required": ["folder"],
                },
            },
            "required": ["parameters", "mapper"],
        }

    def test_root_before_source(self):
        """Test the outcome does not depend on visiting order."""
        forward = to_json_schema({"type": "collection", "spec": [_connection(), MAPPER]})
        backward = to_json_schema({"type": "collection", "spec": [MAPPER, _connection()]})

        assert backward["properties"]["mapper"] == forward["properties"]["mapper"]
        assert backward["properties"]["parameters"] == forward["properties"]["parameters"]

    def test_same_domain_is_embedded(self):
        """Test nested fields naming the current domain stay on the field."""
        schema = to_json_schema({"type": "collection", "spec": [_connection(domain="default")]})
        connection = schema["properties"]["parameters"]["properties"]["connection"]
        assert connection["x-nested"] == {
            "type": "object",
            "properties": {
                "folder": {
                    "type": "string",
                    "title": "Folder",
                    "x-fetch": "rpc://nestedFunction?connection={{connection}}",
                }
            },
            "required": ["folder"],
        }

    def test_cross_domain_primitive_nested(self):
        schema = to_json_schema(
            {
                "type": "collection",
                "spec": [
                    {
                        "name": "parameters",
                        "type": "collection",
                        "spec": [
                            {
                                "name": "text",
                                "type": "text",
                                "nested": {
                                    "store": [
                                        {"name": "expectField1", "type": "text", "label": "Expect Field 1"},
                                        {"name": "expectField2", "type": "number", "label": "Expect Field 2"},
                                    ],
                                    "domain": "expect",
                                },
                            }
                        ],
                    },
                    {"name": "mapper", "type": "collection", "spec": [], "x-domain-root": "expect"},
                ],
            }
        )

        assert "x-nested" not in schema["properties"]["parameters"]["properties"]["text"]
        assert schema["properties"]["mapper"]["properties"] == {
            "expectField1": {"type": "string", "title": "Expect Field 1"},
            "expectField2": {"type": "number", "title": "Expect Field 2"},
        }

    def test_routed_fields_without_root_are_dropped(self):
        schema = to_json_schema({"type": "collection", "spec": [_connection()]})
        assert list(schema["properties"]) == ["parameters"]

    def test_duplicate_domain_root_fails(self):
        with pytest.raises(DomainRootError):
            to_json_schema({"type": "collection", "spec": [MAPPER, {**MAPPER, "name": "other"}]})

    def test_shared_nested_root_is_converted_per_option(self):
        """Test a root inside field-wide nested fields survives repeated expansion."""
        schema = to_json_schema(
            {
                "type": "collection",
                "spec": [
                    {
                        "name": "mode",
                        "type": "select",
                        "options": {
                            "store": [{"value": "a", "label": "A"}, {"value": "b", "label": "B"}],
                            "nested": [{"name": "cfg", "type": "collection", "x-domain-root": "d", "spec": []}],
                        },
                    },
                    {
                        "name": "note",
                        "type": "text",
                        "nested": {"store": [{"name": "extra", "type": "text"}], "domain": "d"},
                    },
                ],
            }
        )

        assert [branch["if"]["properties"]["mode"]["const"] for branch in schema["allOf"]] == ["a", "b"]
        # Fields routed later land in the last expansion of the root
        assert schema["properties"]["mode"]["x-nested"] == {
            "type": "object",
            "properties": {"cfg": {"type": "object", "properties": {"extra": {"type": "string"}}, "required": []}},
            "required": [],
        }
