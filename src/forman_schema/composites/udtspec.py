"""
The `udtspec` composite: the item list of a user-defined data structure.
"""

from forman_schema.core.types import FormanField, JSONSchema
from forman_schema.core.utils import drop_none, no_empty


def expand(field: FormanField) -> FormanField:
    """Return the field rewritten as an array of item definitions."""
    return {
        **field,
        "type": "array",
        "spec": [
            {
                "name": "name",
                "label": "Name",
                "placeholder": "Enter name",
                "type": "text",
                "required": True,
            },
            {
                "name": "label",
                "label": "Label",
                "help": "Display name for better readability.",
                "type": "text",
                "advanced": True,
            },
            {
                "name": "help",
                "label": "Description",
                "type": "text",
                "multiline": True,
                "required": False,
                "placeholder": "Enter description",
            },
            {
                "name": "type",
                "label": "Type",
                "type": "udttype",
                "required": True,
                "default": "text",
            },
        ],
    }


def extract_inner(schema: JSONSchema) -> JSONSchema:
    return dict(schema["items"])


def wrap_ref(ref: str, field: FormanField) -> JSONSchema:
    return drop_none(
        {
            "type": "array",
            "title": no_empty(field.get("label")),
            "description": no_empty(field.get("help")),
            "items": {"$ref": ref},
        }
    )


def collapse(schema: JSONSchema) -> FormanField:
    return drop_none(
        {
            "type": "udtspec",
            "label": no_empty(schema.get("title")),
            "help": no_empty(schema.get("description")),
        }
    )
