"""
Tests for JSON Schema to Forman Schema conversion.
"""

from forman_schema import to_forman_schema, to_json_schema


class TestReverseConversion:
    """Test structural mapping back to Forman fields."""

    def test_object_properties_become_spec(self):
        """Test property order is kept and requirements are explicit."""
        schema = {
            "type": "object",
            "properties": {
                "text": {"type": "string"},
                "number": {"type": "number", "description": "required + default", "default": 15},
                "boolean": {"type": "boolean"},
                "select": {"type": "string", "title": "Select", "enum": ["option 1", "option 2"]},
            },
            "required": ["number"],
        }

        assert to_forman_schema(schema) == {
            "type": "collection",
            "spec": [
                {"type": "text", "name": "text", "required": False},
                {
                    "type": "number",
                    "help": "required + default",
                    "default": 15,
                    "name": "number",
                    "required": True,
                },
                {"type": "boolean", "name": "boolean", "required": False},
                {
                    "type": "select",
                    "label": "Select",
                    "options": [{"value": "option 1"}, {"value": "option 2"}],
                    "name": "select",
                    "required": False,
                },
            ],
        }

    def test_arrays(self):
        schema = {
            "type": "object",
            "properties": {
                "primitive_array": {"type": "array", "description": "description", "items": {"type": "string"}},
                "array_of_arrays": {"type": "array", "items": {"type": "array", "items": {"type": "string"}}},
                "array_of_collections": {
                    "type": "array",
                    "items": {"type": "object", "properties": {"number": {"type": "number"}}},
                    "minItems": 1,
                },
            },
        }

        assert to_forman_schema(schema)["spec"] == [
            {
                "type": "array",
                "help": "description",
                "spec": {"type": "text"},
                "name": "primitive_array",
                "required": False,
            },
            {
                "type": "array",
                "spec": {"type": "array", "spec": {"type": "text"}},
                "name": "array_of_arrays",
                "required": False,
            },
            {
                "type": "array",
                "spec": [{"type": "number", "name": "number", "required": False}],
                "validate": {"minItems": 1},
                "name": "array_of_collections",
                "required": False,
            },
        ]

    def test_empty_object_is_dynamic(self):
        assert to_forman_schema({"type": "object", "title": "Anything"}) == {
            "type": "dynamicCollection",
            "label": "Anything",
        }

    def test_string_rules(self):
        assert to_forman_schema({"type": "string", "pattern": "^a", "default": "abc"}) == {
            "type": "text",
            "default": "abc",
            "validate": {"pattern": "^a"},
        }

    def test_one_of_becomes_select(self):
        schema = {"type": "string", "oneOf": [{"title": "Red", "const": "r"}, {"const": "g"}]}
        assert to_forman_schema(schema) == {
            "type": "select",
            "options": [{"value": "r"}, {"value": "g"}],
        }

    def test_number_bounds(self):
        assert to_forman_schema({"type": "integer", "minimum": 1, "maximum": 5}) == {
            "type": "number",
            "validate": {"min": 1, "max": 5},
        }

    def test_untyped_becomes_any(self):
        assert to_forman_schema({}) == {"type": "any"}
        assert to_forman_schema({"type": ["string", "null"]}) == {"type": "any"}

    def test_path_marker(self):
        schema = {
            "type": "string",
            "x-path": {"type": "folder", "showRoot": False, "singleLevel": True, "ownName": "dir"},
            "x-fetch": "rpc://folders",
        }
        assert to_forman_schema(schema) == {
            "type": "folder",
            "options": {"store": "rpc://folders", "showRoot": False, "singleLevel": True},
        }

    def test_search_directive(self):
        """Test x-search is read back into an `rpc` directive."""
        schema = {
            "type": "string",
            "title": "Text",
            "x-search": {
                "url": "rpc://search",
                "label": "Search",
                "inputSchema": {
                    "type": "object",
                    "properties": {"color": {"type": "string", "title": "Color"}},
                    "required": [],
                },
            },
        }
        assert to_forman_schema(schema) == {
            "type": "text",
            "label": "Text",
            "rpc": {
                "url": "rpc://search",
                "label": "Search",
                "parameters": [{"type": "text", "label": "Color", "name": "color", "required": False}],
            },
        }

    def test_search_directive_with_reference(self):
        schema = {"type": "number", "x-search": {"url": "rpc://search", "inputSchema": {"$ref": "rpc://input"}}}
        assert to_forman_schema(schema) == {
            "type": "number",
            "rpc": {"url": "rpc://search", "parameters": "rpc://input"},
        }

    def test_forward_then_reverse(self):
        """Test a forward conversion reads back into an equivalent form."""
        field = {
            "type": "collection",
            "spec": [
                {"name": "name", "type": "text", "label": "Name", "required": True},
                {"name": "tags", "type": "array", "spec": {"type": "text"}},
            ],
        }
        assert to_forman_schema(to_json_schema(field)) == {
            "type": "collection",
            "spec": [
                {"type": "text", "label": "Name", "name": "name", "required": True},
                {"type": "array", "spec": {"type": "text"}, "name": "tags", "required": False},
            ],
        }
