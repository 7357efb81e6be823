"""
The `udttype` composite: a type selector for user-defined data structures.

Expands into a `select` whose options are the primitive shapes a data
structure item may take, each carrying the nested fields that configure it.
"""

from forman_schema.core.types import FormanField, JSONSchema
from forman_schema.core.utils import drop_none, no_empty


def _required_flag() -> FormanField:
    return {
        "name": "required",
        "label": "Required",
        "type": "boolean",
        "required": True,
        "default": False,
        "mappable": False,
    }


def _default_value(field_type: str, mappable: bool | None = None) -> FormanField:
    return drop_none(
        {
            "name": "default",
            "label": "Default value",
            "placeholder": "Enter default value",
            "type": field_type,
            "mappable": mappable,
        }
    )


def _type_options() -> list[dict]:
    return [
        {
            "label": "Array",
            "value": "array",
            "nested": [
                {
                    "name": "spec",
                    "type": "collection",
                    "label": "Array Item Specification",
                    "spec": [
                        {
                            "name": "type",
                            "label": "Type",
                            "type": "udttype",
                            "required": True,
                            "default": "text",
                        }
                    ],
                    "mappable": False,
                },
                _required_flag(),
            ],
        },
        {
            "label": "Collection",
            "value": "collection",
            "nested": [
                {"name": "spec", "label": "Specification", "type": "udtspec"},
                {
                    "name": "sequence",
                    "label": "Preserve the order of object keys",
                    "type": "boolean",
                    "mappable": False,
                },
                _required_flag(),
            ],
        },
        {"label": "Date", "value": "date", "nested": [_required_flag()]},
        {
            "label": "Text",
            "value": "text",
            "nested": [
                _default_value("text"),
                _required_flag(),
                {
                    "name": "multiline",
                    "label": "Multi-line",
                    "type": "boolean",
                    "required": True,
                    "default": False,
                    "mappable": False,
                },
            ],
        },
        {
            "label": "Number",
            "value": "number",
            "nested": [_default_value("number"), _required_flag()],
        },
        {
            "label": "Boolean",
            "value": "boolean",
            "nested": [_default_value("boolean", mappable=False), _required_flag()],
        },
        {
            "label": "Binary Data",
            "value": "buffer",
            "nested": [
                _required_flag(),
                {
                    "name": "codepage",
                    "label": "Codepage",
                    "type": "text",
                    "help": "Possible values: `binary`, `utf8`. Leave empty if you're not sure.",
                },
            ],
        },
    ]


def expand(field: FormanField) -> FormanField:
    """Return the field rewritten as a select over the item types."""
    return {**field, "type": "select", "options": {"store": _type_options()}}


def extract_inner(schema: JSONSchema) -> JSONSchema:
    """Shared fragment: the expanded schema minus its per-usage title and description."""
    return {
        key: value
        for key, value in schema.items()
        if key not in ("title", "description")
    }


def wrap_ref(ref: str, field: FormanField) -> JSONSchema:
    """
    Build the per-usage schema referencing the shared fragment.

    Draft-07 ignores siblings of `$ref`, hence the `allOf` wrapper.
    """
    schema = drop_none(
        {
            "allOf": [{"$ref": ref}],
            "title": no_empty(field.get("label")),
            "description": no_empty(field.get("help")),
        }
    )
    if field.get("default") not in ("", None):
        schema["default"] = field["default"]
    return schema


def collapse(schema: JSONSchema) -> FormanField:
    field = drop_none(
        {
            "type": "udttype",
            "label": no_empty(schema.get("title")),
            "help": no_empty(schema.get("description")),
        }
    )
    if schema.get("default") not in ("", None):
        field["default"] = schema["default"]
    return field
